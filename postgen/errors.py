"""Exception types raised by postgen."""

from __future__ import annotations

from typing import Any, Dict, Optional


class PostgenError(Exception):
    """Base class for every error raised by postgen."""

    def __init__(
        self, message: str, code: str = "POSTGEN_ERROR", details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self), "details": self.details}


class ConfigurationError(PostgenError):
    """Raised when the blog configuration is missing or invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class UpstreamQueryError(PostgenError):
    """Raised when a request to the content API fails."""

    def __init__(
        self, message: str, *, url: str | None = None, status: int | None = None
    ) -> None:
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if status is not None:
            details["status"] = status
        super().__init__(message, code="UPSTREAM_QUERY_ERROR", details=details)
        self.url = url
        self.status = status


class NoMorePagesError(PostgenError):
    """Raised when the next page of a listing is requested without a cursor."""

    def __init__(self, message: str = "Listing has no further pages") -> None:
        super().__init__(message, code="NO_MORE_PAGES")


class PostNotFoundError(PostgenError):
    """Raised when no post exists for a uid."""

    def __init__(self, uid: str, *, preview_ref: str | None = None) -> None:
        details: Dict[str, Any] = {"uid": uid}
        if preview_ref:
            details["previewRef"] = preview_ref
        super().__init__(f"Post with uid '{uid}' not found", code="POST_NOT_FOUND", details=details)
        self.uid = uid


class MalformedDocumentError(PostgenError):
    """Raised when a content document lacks the fields a post needs."""

    def __init__(self, message: str, *, uid: str | None = None) -> None:
        super().__init__(
            message, code="MALFORMED_DOCUMENT", details={"uid": uid} if uid else None
        )
        self.uid = uid


__all__ = [
    "ConfigurationError",
    "MalformedDocumentError",
    "NoMorePagesError",
    "PostNotFoundError",
    "PostgenError",
    "UpstreamQueryError",
]
