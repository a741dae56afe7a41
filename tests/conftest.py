from __future__ import annotations

from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

import pytest

from postgen.models import PagedResponse


def make_document(
    uid: str,
    *,
    doc_id: str | None = None,
    published: str | None = "2021-03-25T19:25:28+0000",
    updated: str | None = None,
    title: str | None = None,
    content: list | None = None,
    **data: Any,
) -> dict:
    """Build a document shaped like a Prismic search result."""

    payload = {
        "title": title or f"Title of {uid}",
        "subtitle": f"Subtitle of {uid}",
        "author": "Joseph Oliveira",
        "banner": {"url": f"https://images.example.com/{uid}.png", "alt": None},
        "content": content
        if content is not None
        else [
            {
                "heading": "Intro",
                "body": [{"type": "paragraph", "text": "one two three four", "spans": []}],
            }
        ],
        "seo_description": "not part of a post",
    }
    payload.update(data)
    return {
        "id": doc_id or f"ID-{uid}",
        "uid": uid,
        "type": "posts",
        "href": f"https://example.cdn.prismic.io/api/v2/documents/search?q={uid}",
        "tags": ["space"],
        "slugs": [uid],
        "lang": "pt-br",
        "first_publication_date": published,
        "last_publication_date": updated or published,
        "data": payload,
    }


class FakeContentClient:
    """In-memory content API over documents listed newest first."""

    def __init__(self, documents: list[dict], drafts: Optional[dict[str, dict]] = None) -> None:
        self.documents = documents
        self.drafts = drafts or {}
        self.calls: list[tuple] = []

    def _ordered(self, orderings: str) -> list[dict]:
        return list(self.documents) if "desc" in orderings else list(reversed(self.documents))

    def _page(self, orderings: str, offset: int, size: int) -> PagedResponse:
        ordered = self._ordered(orderings)
        results = ordered[offset : offset + size]
        next_page = None
        if offset + size < len(ordered):
            order = "desc" if "desc" in orderings else "asc"
            next_page = f"fake://posts?offset={offset + size}&size={size}&order={order}"
        return PagedResponse(next_page=next_page, results=results)

    def query_by_type(self, doc_type, *, page_size, orderings, after=None, ref=None):
        self.calls.append(("query_by_type", doc_type, page_size, orderings, after, ref))
        if after is None:
            return self._page(orderings, 0, page_size)
        ordered = self._ordered(orderings)
        ids = [doc["id"] for doc in ordered]
        start = ids.index(after) + 1 if after in ids else 0
        return PagedResponse(next_page=None, results=ordered[start : start + page_size])

    def fetch_page(self, cursor):
        self.calls.append(("fetch_page", cursor))
        query = parse_qs(urlparse(cursor).query)
        orderings = "desc" if query["order"][0] == "desc" else "asc"
        return self._page(orderings, int(query["offset"][0]), int(query["size"][0]))

    def get_by_uid(self, doc_type, uid, *, ref=None):
        self.calls.append(("get_by_uid", doc_type, uid, ref))
        if ref and uid in self.drafts:
            return self.drafts[uid]
        return next((doc for doc in self.documents if doc["uid"] == uid), None)


@pytest.fixture()
def documents() -> list[dict]:
    return [
        make_document(f"post-{index}", published=f"2021-0{index}-10T12:00:00+0000")
        for index in range(6, 0, -1)
    ]


@pytest.fixture()
def fake_client(documents: list[dict]) -> FakeContentClient:
    return FakeContentClient(documents)


@pytest.fixture()
def make_doc():
    return make_document
