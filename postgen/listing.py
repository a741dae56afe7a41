"""Paginated post listing."""

from __future__ import annotations

from itertools import chain
from typing import Iterable, Protocol

from .client import PUBLICATION_DATE_ASC, PUBLICATION_DATE_DESC
from .errors import NoMorePagesError
from .models import PagedResponse, PagedResult, Post
from .projection import project

POST_TYPE = "posts"

ORDERINGS = {
    "publicationDateDesc": PUBLICATION_DATE_DESC,
    "publicationDateAsc": PUBLICATION_DATE_ASC,
}


class ListingSource(Protocol):
    def query_by_type(
        self,
        doc_type: str,
        *,
        page_size: int,
        orderings: str,
        after: str | None = None,
        ref: str | None = None,
    ) -> PagedResponse: ...

    def fetch_page(self, cursor: str) -> PagedResponse: ...


def _project_page(response: PagedResponse) -> PagedResult:
    return PagedResult(
        next_page=response.next_page or None,
        results=tuple(project(document) for document in response.results),
    )


class ListingAggregator:
    """Fetches listing pages one at a time.

    The aggregator keeps no accumulated state between calls: ``load_next``
    returns only the newly fetched page and the caller appends it to its own
    sequence (see ``accumulate``). Requesting the same cursor twice yields the
    same posts twice; nothing is deduplicated.
    """

    def __init__(self, client: ListingSource) -> None:
        self.client = client

    def initialize(self, page_size: int, ordering: str = "publicationDateDesc") -> PagedResult:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        try:
            orderings = ORDERINGS[ordering]
        except KeyError:
            raise ValueError(
                f"Unknown ordering '{ordering}'; expected one of {', '.join(ORDERINGS)}"
            ) from None

        response = self.client.query_by_type(POST_TYPE, page_size=page_size, orderings=orderings)
        return _project_page(response)

    def load_next(self, state: PagedResult) -> PagedResult:
        if state.next_page is None:
            raise NoMorePagesError()
        return _project_page(self.client.fetch_page(state.next_page))


def accumulate(pages: Iterable[PagedResult]) -> tuple[Post, ...]:
    """Concatenate pages into one sequence, keeping the order they arrived in."""

    return tuple(chain.from_iterable(page.results for page in pages))


__all__ = ["ListingAggregator", "ListingSource", "ORDERINGS", "POST_TYPE", "accumulate"]
