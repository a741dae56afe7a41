from datetime import datetime, timezone

import pytest

from postgen.errors import MalformedDocumentError
from postgen.models import Document, Post
from postgen.projection import project


def test_project_copies_post_fields(make_doc):
    document = make_doc("hello-world", title="Como utilizar Hooks")

    post = project(document)

    assert post.uid == "hello-world"
    assert post.id == "ID-hello-world"
    assert post.title == document["data"]["title"]
    assert post.subtitle == document["data"]["subtitle"]
    assert post.author == document["data"]["author"]
    assert post.banner.url == document["data"]["banner"]["url"]
    assert post.first_publication_date == datetime(2021, 3, 25, 19, 25, 28, tzinfo=timezone.utc)
    assert post.content[0].heading == "Intro"
    assert post.content[0].body[0].text == "one two three four"


def test_project_drops_extra_fields(make_doc):
    post = project(make_doc("hello-world"))

    dumped = post.model_dump()
    assert set(dumped) == set(Post.model_fields)
    assert "seo_description" not in dumped
    assert "tags" not in dumped
    assert set(dumped["banner"]) == {"url"}


def test_project_accepts_document_model(make_doc):
    document = Document.model_validate(make_doc("from-model"))

    assert project(document).uid == "from-model"


def test_project_keeps_null_publication_dates(make_doc):
    post = project(make_doc("draft", published=None))

    assert post.first_publication_date is None
    assert post.last_publication_date is None
    assert post.was_edited is False


def test_project_accepts_iso_timestamps(make_doc):
    post = project(make_doc("iso", published="2021-03-25T19:25:28Z"))

    assert post.first_publication_date == datetime(2021, 3, 25, 19, 25, 28, tzinfo=timezone.utc)


@pytest.mark.parametrize("missing", ["banner", "content", "title"])
def test_project_rejects_missing_fields(make_doc, missing):
    document = make_doc("broken")
    del document["data"][missing]

    with pytest.raises(MalformedDocumentError) as excinfo:
        project(document)

    assert missing in str(excinfo.value)
    assert excinfo.value.uid == "broken"


def test_project_rejects_banner_without_url(make_doc):
    with pytest.raises(MalformedDocumentError):
        project(make_doc("no-url", banner={}))


def test_project_rejects_document_without_uid(make_doc):
    document = make_doc("anything")
    del document["uid"]

    with pytest.raises(MalformedDocumentError):
        project(document)


@pytest.mark.parametrize("doc_id", [None, ""])
def test_project_rejects_document_without_id(make_doc, doc_id):
    document = make_doc("no-id")
    if doc_id is None:
        del document["id"]
    else:
        document["id"] = doc_id

    with pytest.raises(MalformedDocumentError) as excinfo:
        project(document)

    assert excinfo.value.uid == "no-id"


def test_project_preserves_rich_text_attributes(make_doc):
    content = [
        {
            "heading": "Images",
            "body": [{"type": "image", "url": "https://img.example.com/a.png", "alt": "A", "text": None}],
        }
    ]

    block = project(make_doc("images", content=content)).content[0].body[0]

    assert block.type == "image"
    assert block.text == ""
    assert block.model_extra["url"] == "https://img.example.com/a.png"
