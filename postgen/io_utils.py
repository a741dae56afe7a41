"""Filesystem and JSON helpers for writing build output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel

PathLike = Union[str, Path]


def stable_json_dumps(obj: object) -> str:
    """Serialize JSON in a stable, human-readable way with a trailing newline."""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump(mode="json")
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def ensure_dir(path: PathLike) -> Path:
    """Ensure that a directory exists and return the Path object."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_text(path: PathLike, content: str) -> Path:
    """Write UTF-8 text, creating parent directories as needed."""

    file_path = Path(path)
    ensure_dir(file_path.parent)
    file_path.write_text(content, encoding="utf-8")
    return file_path


def write_json_stable(path: PathLike, data: Any) -> Path:
    return write_text(path, stable_json_dumps(data))


__all__ = ["ensure_dir", "stable_json_dumps", "write_json_stable", "write_text"]
