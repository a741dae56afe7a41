"""Pydantic models for posts fetched from the content API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

CMS_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def parse_timestamp(value: Any) -> Any:
    """Parse CMS timestamps such as ``2021-03-25T19:25:28+0000``.

    Values that are not strings are returned untouched for pydantic to handle.
    """

    if not isinstance(value, str):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(value, CMS_TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))


CmsTimestamp = Annotated[Optional[datetime], BeforeValidator(parse_timestamp)]


class Span(BaseModel):
    """Inline formatting range inside a rich text block."""

    start: int
    end: int
    type: str
    data: Optional[dict[str, Any]] = None

    model_config = ConfigDict(frozen=True)


class RichTextBlock(BaseModel):
    """Structured-text node as delivered by the CMS.

    Only ``text`` is read when estimating read time. Extra attributes such as
    ``url``/``alt`` on images or ``oembed`` on embeds are kept for rendering.
    """

    type: str = Field("paragraph", description="Node type, e.g. paragraph or heading2.")
    text: str = Field("", description="Plain text of the node.")
    spans: tuple[Span, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, value: Any) -> Any:
        return "" if value is None else value


class ContentSection(BaseModel):
    """A heading followed by rich text body blocks."""

    heading: str = ""
    body: tuple[RichTextBlock, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("heading", mode="before")
    @classmethod
    def _none_heading(cls, value: Any) -> Any:
        return "" if value is None else value


class Banner(BaseModel):
    url: str

    model_config = ConfigDict(frozen=True)


class Post(BaseModel):
    """A published (or previewed) blog post."""

    uid: str = Field(..., description="Routing key and list key.")
    id: str = Field(..., min_length=1, description="Internal CMS document id, used to find neighbours.")
    first_publication_date: CmsTimestamp = None
    last_publication_date: CmsTimestamp = None
    title: str
    subtitle: str
    author: str
    banner: Banner
    content: tuple[ContentSection, ...]

    model_config = ConfigDict(frozen=True)

    @property
    def was_edited(self) -> bool:
        """True when the post was republished after its first publication."""

        if self.first_publication_date is None or self.last_publication_date is None:
            return False
        return self.first_publication_date != self.last_publication_date


class Document(BaseModel):
    """Raw document returned by the content API (fields postgen reads)."""

    id: str = Field(..., min_length=1)
    uid: str
    type: str = "posts"
    first_publication_date: CmsTimestamp = None
    last_publication_date: CmsTimestamp = None
    data: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")


class PagedResponse(BaseModel):
    """One page of raw documents as answered by the content API."""

    next_page: Optional[str] = None
    results: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class PagedResult(BaseModel):
    """One page of projected posts plus the cursor of the following page."""

    next_page: Optional[str] = Field(
        None, description="Opaque cursor for the next page; None on the last page."
    )
    results: tuple[Post, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @property
    def has_next(self) -> bool:
        return self.next_page is not None


class Adjacent(BaseModel):
    """Posts published immediately before and after a given post."""

    previous: Optional[Post] = None
    next: Optional[Post] = None

    model_config = ConfigDict(frozen=True)


__all__ = [
    "Adjacent",
    "Banner",
    "ContentSection",
    "Document",
    "PagedResponse",
    "PagedResult",
    "Post",
    "RichTextBlock",
    "Span",
    "parse_timestamp",
]
