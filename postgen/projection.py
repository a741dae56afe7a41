"""Projection of raw content documents into posts."""

from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import ValidationError

from .errors import MalformedDocumentError
from .models import Document, Post

REQUIRED_DATA_FIELDS = ("title", "subtitle", "author", "banner", "content")


def _as_document(document: Union[Document, Mapping[str, Any]]) -> Document:
    if isinstance(document, Document):
        return document
    try:
        return Document.model_validate(document)
    except ValidationError as exc:
        raise MalformedDocumentError(
            f"Invalid content document: {exc}", uid=document.get("uid")
        ) from exc


def project(document: Union[Document, Mapping[str, Any]]) -> Post:
    """Map a content document onto a ``Post``.

    Only the post fields are copied; everything else the CMS returns is
    dropped here so raw API shapes never travel further.
    """

    doc = _as_document(document)
    data = doc.data

    missing = [name for name in REQUIRED_DATA_FIELDS if data.get(name) is None]
    if missing:
        raise MalformedDocumentError(
            f"Document '{doc.uid}' is missing {', '.join(missing)}", uid=doc.uid
        )

    banner = data["banner"]
    try:
        return Post.model_validate(
            {
                "uid": doc.uid,
                "id": doc.id,
                "first_publication_date": doc.first_publication_date,
                "last_publication_date": doc.last_publication_date,
                "title": data["title"],
                "subtitle": data["subtitle"],
                "author": data["author"],
                "banner": {"url": banner.get("url") if isinstance(banner, Mapping) else None},
                "content": [
                    {"heading": section.get("heading"), "body": list(section.get("body") or [])}
                    for section in data["content"]
                ],
            }
        )
    except (AttributeError, TypeError, ValidationError) as exc:
        raise MalformedDocumentError(f"Document '{doc.uid}' is malformed: {exc}", uid=doc.uid) from exc


__all__ = ["REQUIRED_DATA_FIELDS", "project"]
