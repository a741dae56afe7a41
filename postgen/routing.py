"""Routing helpers: where each page is written and how pages link."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

from .models import Post


def relative_href(target: Path, base: Path) -> str:
    """Return a POSIX-style relative href from base to target."""

    return Path(os.path.relpath(target, base)).as_posix()


def relative_route(target: Path, base: Path) -> str:
    """Return a pretty href to the target, collapsing index.html to a slash."""

    href = relative_href(target, base)
    if href.endswith("index.html"):
        href = href[: -len("index.html")]
        if not href:
            return "./"
        if not href.endswith("/"):
            href += "/"
    return href


def _check_uid(uid: str) -> str:
    if not uid or uid in {".", ".."} or "/" in uid or "\\" in uid:
        raise ValueError(f"uid '{uid}' cannot be used as a path segment")
    return uid


@dataclass
class PageSpec:
    """Description of a page to render."""

    page_type: str
    template: str
    out_file: Path
    uid: str | None = None

    def href_from(self, base: Path) -> str:
        return relative_route(self.out_file, base)


class SiteRouter:
    """Single source of truth for page locations inside the output root."""

    def __init__(self, out_root: Path, posts: Iterable[Post] = ()) -> None:
        self.out_root = out_root
        self.pages: list[PageSpec] = []
        self._posts: Dict[str, PageSpec] = {}
        self._home = self._register(PageSpec("home", "home.jinja", out_root / "index.html"))
        for post in posts:
            self.add_post(post.uid)

    def _register(self, spec: PageSpec) -> PageSpec:
        self.pages.append(spec)
        return spec

    def add_post(self, uid: str) -> PageSpec:
        existing = self._posts.get(uid)
        if existing:
            return existing
        out_file = self.out_root / "post" / _check_uid(uid) / "index.html"
        spec = self._register(PageSpec("post", "post.jinja", out_file, uid=uid))
        self._posts[uid] = spec
        return spec

    def home(self) -> PageSpec:
        return self._home

    def post_page(self, uid: str) -> Optional[PageSpec]:
        return self._posts.get(uid)

    def href_for_page(self, spec: PageSpec | None, base: Path) -> str:
        if not spec:
            return ""
        return spec.href_from(base)

    def href_for_post(self, uid: str, base: Path) -> str:
        """Href to a post page; posts not in the build still get their route."""

        spec = self.post_page(uid)
        if spec is None:
            target = self.out_root / "post" / _check_uid(uid) / "index.html"
            return relative_route(target, base)
        return spec.href_from(base)

    def routes_payload(self) -> dict:
        return {
            "home": relative_route(self._home.out_file, self.out_root),
            "posts": {
                uid: relative_route(spec.out_file, self.out_root)
                for uid, spec in sorted(self._posts.items())
            },
        }


__all__ = ["PageSpec", "SiteRouter", "relative_href", "relative_route"]
