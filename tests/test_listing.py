from unittest.mock import Mock

import pytest

from postgen.client import PUBLICATION_DATE_DESC
from postgen.errors import NoMorePagesError
from postgen.listing import ListingAggregator, accumulate
from postgen.models import PagedResponse, PagedResult


def test_initialize_queries_first_page(fake_client):
    page = ListingAggregator(fake_client).initialize(4, "publicationDateDesc")

    assert [post.uid for post in page.results] == ["post-6", "post-5", "post-4", "post-3"]
    assert page.next_page is not None
    assert fake_client.calls == [("query_by_type", "posts", 4, PUBLICATION_DATE_DESC, None, None)]


def test_initialize_rejects_unknown_ordering(fake_client):
    with pytest.raises(ValueError):
        ListingAggregator(fake_client).initialize(4, "alphabetical")
    assert fake_client.calls == []


def test_load_next_returns_only_new_page(fake_client):
    listing = ListingAggregator(fake_client)
    first = listing.initialize(4)

    second = listing.load_next(first)

    assert [post.uid for post in second.results] == ["post-2", "post-1"]
    assert second.next_page is None


def test_load_next_without_cursor_never_calls_client():
    client = Mock()

    with pytest.raises(NoMorePagesError):
        ListingAggregator(client).load_next(PagedResult(next_page=None, results=()))

    client.fetch_page.assert_not_called()
    client.query_by_type.assert_not_called()


def test_pages_accumulate_in_order_and_stop(make_doc):
    client = Mock()
    client.query_by_type.return_value = PagedResponse(
        next_page="page2", results=[make_doc(f"first-{i}") for i in range(4)]
    )
    client.fetch_page.return_value = PagedResponse(
        next_page=None, results=[make_doc(f"second-{i}") for i in range(2)]
    )
    listing = ListingAggregator(client)

    first = listing.initialize(4, "publicationDateDesc")
    second = listing.load_next(first)
    posts = accumulate([first, second])

    client.fetch_page.assert_called_once_with("page2")
    assert [post.uid for post in posts] == [
        "first-0",
        "first-1",
        "first-2",
        "first-3",
        "second-0",
        "second-1",
    ]
    with pytest.raises(NoMorePagesError):
        listing.load_next(second)


def test_same_cursor_twice_is_not_deduplicated(fake_client):
    listing = ListingAggregator(fake_client)
    first = listing.initialize(4)

    posts = accumulate([first, listing.load_next(first), listing.load_next(first)])

    assert len(posts) == 8
    assert [post.uid for post in posts].count("post-1") == 2


def test_empty_cursor_string_means_last_page(make_doc):
    client = Mock()
    client.query_by_type.return_value = PagedResponse(next_page="", results=[make_doc("only")])

    page = ListingAggregator(client).initialize(4)

    assert page.next_page is None
    assert not page.has_next
