"""Blog configuration loaded from YAML and the environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

ENDPOINT_ENV = "PRISMIC_API_ENDPOINT"
ACCESS_TOKEN_ENV = "PRISMIC_ACCESS_TOKEN"
DEFAULT_CONFIG_PATH = Path("config/blog.yaml")


class CommentsConfig(BaseModel):
    """Settings for the utterances comment widget."""

    enabled: bool = Field(True, description="Render the widget on post pages.")
    repo: str = Field("", description="GitHub repository that stores comment issues.")
    issue_term: str = Field("title", alias="issueTerm", description="Issue mapping mode.")
    theme: str = Field("photon-dark", description="Widget theme name.")
    script_src: str = Field("https://utteranc.es/client.js", alias="scriptSrc")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.repo)


class BlogConfig(BaseModel):
    """Top-level settings for fetching and rendering the blog."""

    api_endpoint: Optional[str] = Field(
        None, alias="apiEndpoint", description="Prismic API v2 endpoint URL."
    )
    access_token: Optional[str] = Field(
        None, alias="accessToken", description="Optional API access token."
    )
    page_size: int = Field(4, alias="pageSize", ge=1, description="Posts per listing page.")
    request_timeout: float = Field(10.0, alias="requestTimeout", gt=0)
    site_title: str = Field("spacetraveling", alias="siteTitle")
    exit_preview_href: str = Field("/api/exit-preview", alias="exitPreviewHref")
    listing_date_format: str = Field("%-d %b %Y", alias="listingDateFormat")
    date_format: str = Field("%d %b %Y", alias="dateFormat")
    datetime_format: str = Field("%d %b %Y, at %H:%M", alias="datetimeFormat")
    comments: CommentsConfig = Field(default_factory=CommentsConfig)

    model_config = ConfigDict(populate_by_name=True)

    def require_endpoint(self) -> str:
        if not self.api_endpoint:
            raise ConfigurationError(
                f"No API endpoint configured; set apiEndpoint or {ENDPOINT_ENV}."
            )
        return self.api_endpoint


def load_config(
    path: Path | None = None, *, environ: Mapping[str, str] | None = None
) -> BlogConfig:
    """Load the YAML config at ``path`` and apply environment overrides.

    A missing file at the default location yields defaults, so the endpoint
    may come from the environment alone.
    """

    environ = os.environ if environ is None else environ
    config_path = path or DEFAULT_CONFIG_PATH

    data: object = {}
    if config_path.exists():
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Error parsing {config_path}: {exc}") from exc
    elif path is not None:
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping of settings.")

    if environ.get(ENDPOINT_ENV):
        data["apiEndpoint"] = environ[ENDPOINT_ENV]
    if environ.get(ACCESS_TOKEN_ENV):
        data["accessToken"] = environ[ACCESS_TOKEN_ENV]

    try:
        return BlogConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc


__all__ = ["BlogConfig", "CommentsConfig", "load_config"]
