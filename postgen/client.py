"""HTTP client for the Prismic REST API (v2)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import BlogConfig
from .errors import UpstreamQueryError
from .models import PagedResponse

log = logging.getLogger(__name__)

PUBLICATION_DATE_DESC = "[document.first_publication_date desc]"
PUBLICATION_DATE_ASC = "[document.first_publication_date]"

USER_AGENT = "postgen/0.1.0"


def _quote(value: str) -> str:
    """Quote ``value`` as a predicate string literal."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def type_predicate(doc_type: str) -> str:
    return f"[[at(document.type,{_quote(doc_type)})]]"


def uid_predicate(doc_type: str, uid: str) -> str:
    return f"[[at(my.{doc_type}.uid,{_quote(uid)})]]"


class ContentClient:
    """Runs the two query shapes the blog needs against a Prismic repository.

    Every failure (network error, non-2xx status, body that is not JSON)
    surfaces as ``UpstreamQueryError``. Nothing is retried or cached.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        access_token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session
        self._master_ref: str | None = None

    @classmethod
    def from_config(cls, config: BlogConfig, *, session: requests.Session | None = None) -> "ContentClient":
        return cls(
            config.require_endpoint(),
            access_token=config.access_token,
            session=session,
            timeout=config.request_timeout,
        )

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        log.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise UpstreamQueryError(f"Content API returned an error for {url}: {exc}", url=url, status=status) from exc
        except requests.RequestException as exc:
            raise UpstreamQueryError(f"Content API request failed for {url}: {exc}", url=url) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamQueryError(f"Content API returned invalid JSON for {url}", url=url) from exc

    def _auth_params(self) -> Dict[str, Any]:
        return {"access_token": self.access_token} if self.access_token else {}

    def master_ref(self) -> str:
        """Return the ref of the published (master) content release."""

        if self._master_ref is None:
            payload = self._get_json(self.endpoint, self._auth_params() or None)
            refs = payload.get("refs", []) if isinstance(payload, dict) else []
            master = next((ref for ref in refs if ref.get("isMasterRef")), None)
            if not master or not master.get("ref"):
                raise UpstreamQueryError("Content API did not report a master ref", url=self.endpoint)
            self._master_ref = master["ref"]
        return self._master_ref

    def _search(self, query: str, *, ref: str | None, **options: Any) -> PagedResponse:
        params: Dict[str, Any] = {"ref": ref or self.master_ref(), "q": query}
        params.update({key: value for key, value in options.items() if value is not None})
        params.update(self._auth_params())
        return self._paged(self._get_json(f"{self.endpoint}/documents/search", params), self.endpoint)

    @staticmethod
    def _paged(payload: Any, url: str) -> PagedResponse:
        if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
            raise UpstreamQueryError("Content API response has no results list", url=url)
        return PagedResponse.model_validate(payload)

    def query_by_type(
        self,
        doc_type: str,
        *,
        page_size: int,
        orderings: str,
        after: str | None = None,
        ref: str | None = None,
    ) -> PagedResponse:
        return self._search(
            type_predicate(doc_type),
            ref=ref,
            pageSize=page_size,
            orderings=orderings,
            after=after,
        )

    def get_by_uid(self, doc_type: str, uid: str, *, ref: str | None = None) -> Optional[Dict[str, Any]]:
        """Return the document with ``uid`` or None when the API has none."""

        page = self._search(uid_predicate(doc_type, uid), ref=ref, pageSize=1)
        return page.results[0] if page.results else None

    def fetch_page(self, cursor: str) -> PagedResponse:
        """Follow an opaque ``next_page`` cursor URL."""

        return self._paged(self._get_json(cursor), cursor)


__all__ = [
    "ContentClient",
    "PUBLICATION_DATE_ASC",
    "PUBLICATION_DATE_DESC",
    "type_predicate",
    "uid_predicate",
]
