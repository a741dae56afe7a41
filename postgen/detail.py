"""Post detail: lookup by uid, read time and neighbouring posts."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Protocol

from .client import PUBLICATION_DATE_ASC, PUBLICATION_DATE_DESC
from .errors import PostNotFoundError
from .listing import ListingSource, POST_TYPE
from .models import Adjacent, PagedResponse, Post
from .projection import project
from .richtext import as_text

READING_RATE = 200  # tokens per minute


class DetailSource(ListingSource, Protocol):
    def get_by_uid(
        self, doc_type: str, uid: str, *, ref: str | None = None
    ) -> Optional[Dict[str, Any]]: ...


def count_tokens(post: Post) -> int:
    """Number of whitespace-delimited tokens in headings and body text."""

    total = 0
    for section in post.content:
        total += len(section.heading.split())
        total += len(as_text(section.body).split())
    return total


def estimate_read_time(post: Post) -> int:
    """Minutes needed to read ``post``, rounded up."""

    return math.ceil(count_tokens(post) / READING_RATE)


def _first(response: PagedResponse) -> Post | None:
    return project(response.results[0]) if response.results else None


class DetailAssembler:
    """Resolves a single post and the posts published around it."""

    def __init__(self, client: DetailSource) -> None:
        self.client = client

    def resolve_post(self, uid: str, preview_ref: str | None = None) -> Post:
        """Fetch the post ``uid``; ``preview_ref`` selects a draft revision."""

        document = self.client.get_by_uid(POST_TYPE, uid, ref=preview_ref)
        if document is None:
            raise PostNotFoundError(uid, preview_ref=preview_ref)
        return project(document)

    estimate_read_time = staticmethod(estimate_read_time)

    def resolve_adjacent(self, post: Post) -> Adjacent:
        """Find the previous and next posts by first publication date.

        Posts sharing a timestamp keep whatever order the CMS gives them.
        """

        previous = self.client.query_by_type(
            POST_TYPE, page_size=1, orderings=PUBLICATION_DATE_ASC, after=post.id
        )
        following = self.client.query_by_type(
            POST_TYPE, page_size=1, orderings=PUBLICATION_DATE_DESC, after=post.id
        )
        return Adjacent(previous=_first(previous), next=_first(following))


__all__ = ["DetailAssembler", "DetailSource", "READING_RATE", "count_tokens", "estimate_read_time"]
