"""OMDb catalog client.

Public API:
- CatalogClient.search(term) -> list[Movie]
- CatalogClient.get(movie_id) -> Movie | None
- CatalogClient.get_many(ids) -> list[Movie]

Behavior:
- OMDb answers "no such item" with HTTP 200 and an ``Error`` field; that is
  reported as an empty result (search) or ``None`` (get), not as an error.
- Transport failures, non-2xx responses and undecodable bodies raise
  CatalogError. Nothing is retried here.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("movie_likes.catalog")

DEFAULT_HOST = "www.omdbapi.com"
DEFAULT_SCHEME = "http"

_APIKEY_RE = re.compile(r"(apikey=)[^&]*")


class CatalogError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class Movie(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="imdbID", min_length=1)
    title: str = Field(alias="Title")
    year: str = Field(default="", alias="Year")


def redact_api_key(url: str) -> str:
    """Hide the api key query value so URLs are safe to log."""
    return _APIKEY_RE.sub(r"\1***", url or "")


class CatalogClient:
    def __init__(
        self,
        *,
        api_key: str,
        host: str = DEFAULT_HOST,
        scheme: str = DEFAULT_SCHEME,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_key = (api_key or "").strip()
        self._base_url = f"{scheme}://{(host or DEFAULT_HOST).strip().strip('/')}"
        self._timeout = timeout_seconds
        # The optional client exists for testing/injection; otherwise each call
        # (or each get_many batch) opens and closes its own AsyncClient.
        self._client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout)

    async def _fetch(self, params: dict[str, str], http: httpx.AsyncClient | None = None) -> dict[str, Any]:
        http = http or self._client
        if http is None:
            async with self._open() as c:
                return await self._request(c, params)
        return await self._request(http, params)

    async def _request(self, http: httpx.AsyncClient, params: dict[str, str]) -> dict[str, Any]:
        query = {"apikey": self._api_key, **params}
        try:
            r = await http.get(self._base_url + "/", params=query)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(
                "Catalog returned HTTP error",
                extra={"status_code": status, "url": redact_api_key(str(e.request.url))},
            )
            raise CatalogError(f"Catalog request failed: HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.warning("Catalog request failed", extra={"error": type(e).__name__, "detail": str(e)})
            raise CatalogError(f"Catalog request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise CatalogError("Catalog response was not valid JSON") from e

        if not isinstance(data, dict):
            raise CatalogError("Catalog response was not a JSON object")
        return data

    async def search(self, term: str) -> list[Movie]:
        t = (term or "").strip()
        if not t:
            return []

        data = await self._fetch({"s": t})
        raw = data.get("Search")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise CatalogError("Catalog search response has a malformed 'Search' field")

        try:
            return [Movie.model_validate(item) for item in raw]
        except ValidationError as e:
            raise CatalogError("Catalog search result failed validation") from e

    async def get(self, movie_id: str) -> Optional[Movie]:
        return await self._get(movie_id)

    async def _get(self, movie_id: str, http: httpx.AsyncClient | None = None) -> Optional[Movie]:
        data = await self._fetch({"i": (movie_id or "").strip()}, http)
        if data.get("Error"):
            logger.debug("Catalog has no such item", extra={"movie_id": movie_id, "error": data.get("Error")})
            return None

        try:
            return Movie.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Catalog item '{movie_id}' failed validation") from e

    async def get_many(self, ids: Iterable[str]) -> list[Movie]:
        """Resolve ids in order, skipping unknown ones.

        All lookups share one connection pool. The first CatalogError aborts
        the whole batch.
        """
        if self._client is not None:
            return await self._get_all(ids, self._client)
        async with self._open() as http:
            return await self._get_all(ids, http)

    async def _get_all(self, ids: Iterable[str], http: httpx.AsyncClient) -> list[Movie]:
        movies: list[Movie] = []
        for movie_id in ids:
            m = await self._get(movie_id, http)
            if m is not None:
                movies.append(m)
        return movies
