"""HTTP call wrapper shared by platform sources.

Issues exactly one request per call (no retries), injects the source's
credential header when set, and maps transport failures and non-2xx
statuses into the domain error taxonomy before handing the JSON body to
the envelope decoder.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

import httpx
import structlog

from vidsource.domain.exceptions import (
    NeedsAuthenticationError,
    RemoteRequestError,
    TransportFailureError,
)

from .envelope import decode_envelope, decode_nullable_envelope

log = structlog.get_logger(__name__)

T = TypeVar("T")


class PlatformApiClient:
    """Credential-aware JSON API client for one platform source.

    The credential is plain mutable state; callers sharing one client
    across concurrent flows serialize ``token`` updates themselves.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        source: str,
        credential_header: str = "Cookie",
        headers: Mapping[str, str] | None = None,
        token: str | None = None,
    ) -> None:
        self._http = http_client
        self._source = source
        self._credential_header = credential_header
        self._headers = dict(headers or {})
        self.token = token

    @property
    def source(self) -> str:
        return self._source

    def _build_headers(self, url: str, requires_auth: bool) -> dict[str, str]:
        if requires_auth and not self.token:
            log.info("api_request_needs_auth", source=self._source, url=url)
            raise NeedsAuthenticationError(self._source, url)
        headers = dict(self._headers)
        if self.token:
            headers[self._credential_header] = self.token
        return headers

    async def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        *,
        requires_auth: bool = False,
    ) -> httpx.Response:
        """Send a GET request and return the successful raw response."""
        return await self._send("GET", url, requires_auth, params=params)

    async def post(
        self,
        url: str,
        data: Mapping[str, Any] | None = None,
        *,
        requires_auth: bool = False,
    ) -> httpx.Response:
        """Send a form-encoded POST request and return the raw response."""
        return await self._send("POST", url, requires_auth, data=data)

    async def _send(
        self,
        method: str,
        url: str,
        requires_auth: bool,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = self._build_headers(url, requires_auth)
        try:
            resp = await self._http.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            log.warning("api_request_timeout", source=self._source, url=url)
            raise TransportFailureError(url, "timeout") from exc
        except httpx.HTTPError as exc:
            log.warning(
                "api_request_failed",
                source=self._source,
                url=url,
                error=str(exc),
            )
            raise TransportFailureError(url, str(exc) or type(exc).__name__) from exc

        if not resp.is_success:
            log.warning(
                "api_http_error",
                source=self._source,
                url=url,
                status=resp.status_code,
            )
            raise RemoteRequestError(
                resp.reason_phrase or f"HTTP {resp.status_code}",
                url=url,
                code=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response, url: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            log.warning("api_invalid_json", url=url)
            raise RemoteRequestError("invalid JSON body", url=url) from exc

    async def fetch(
        self,
        url: str,
        payload_type: type[T],
        params: Mapping[str, Any] | None = None,
        *,
        requires_auth: bool = False,
    ) -> T:
        """GET *url* and decode an envelope whose payload must be present."""
        resp = await self.get(url, params, requires_auth=requires_auth)
        request_url = str(resp.url)
        return decode_envelope(self._json(resp, request_url), request_url, payload_type)

    async def fetch_nullable(
        self,
        url: str,
        payload_type: type[T],
        params: Mapping[str, Any] | None = None,
        *,
        requires_auth: bool = False,
    ) -> T | None:
        """GET *url* and decode an envelope whose payload may be absent."""
        resp = await self.get(url, params, requires_auth=requires_auth)
        request_url = str(resp.url)
        return decode_nullable_envelope(
            self._json(resp, request_url), request_url, payload_type
        )
