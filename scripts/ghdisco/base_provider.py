"""Base class for GraphQL connection providers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional, TypeVar

import requests

from scripts.ghdisco import __version__
from scripts.ghdisco.config import GitHubConfig
from scripts.ghdisco.errors import (
    FetchCancelledError,
    MalformedResponseError,
    TransportError,
)
from scripts.ghdisco.schema import Page

logger = logging.getLogger("ghdisco.provider")

P = TypeVar("P", bound=Page)


class BaseProvider:
    """Owns the HTTP session and walks cursor pagination for subclasses."""

    PROVIDER_NAME: str = ""
    PAGE_SIZE = 100

    def __init__(
        self, config: GitHubConfig, session: Optional[requests.Session] = None
    ) -> None:
        self.config = config
        self._url = config.api_url
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({
            "Authorization": f"bearer {config.token}",
            "Accept": "application/json",
            "User-Agent": f"gh-disco/{__version__}",
        })

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _post(self, query: str, variables: dict[str, Any]) -> str:
        """Send one GraphQL request and return the raw response body."""
        try:
            resp = self._session.post(
                self._url,
                json={"query": query, "variables": variables},
                timeout=self.config.timeout_s,
            )
        except KeyboardInterrupt as exc:
            raise FetchCancelledError(f"request to {self._url} interrupted") from exc
        except requests.RequestException as exc:
            raise TransportError(f"failed to query GitHub GraphQL API: {exc}") from exc

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.debug(
                "GraphQL request rejected",
                extra={"provider": self.PROVIDER_NAME, "status_code": resp.status_code},
            )
            raise TransportError(
                f"GitHub GraphQL API returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
        return resp.text

    def _iter_pages(
        self,
        query_name: str,
        query: str,
        variables: dict[str, Any],
        parse: Callable[[str], P],
    ) -> Iterator[P]:
        """Yield decoded pages until the server reports no further pages.

        The cursor must advance on every page; a repeated or missing cursor
        alongside ``hasNextPage: true`` is treated as a malformed response.
        """
        cursor: Optional[str] = None
        page_no = 0
        while True:
            page_no += 1
            body = self._post(
                query, {**variables, "first": self.PAGE_SIZE, "cursor": cursor}
            )
            page = parse(body)
            logger.debug(
                "Fetched page",
                extra={
                    "provider": self.PROVIDER_NAME,
                    "query": query_name,
                    "page": page_no,
                    "records": len(page.edges),
                },
            )
            yield page

            info = page.page_info
            if not info.has_next_page:
                return
            if not info.end_cursor or info.end_cursor == cursor:
                raise MalformedResponseError(
                    "hasNextPage is true but endCursor did not advance",
                    body,
                    "pageInfo.endCursor",
                )
            cursor = info.end_cursor
