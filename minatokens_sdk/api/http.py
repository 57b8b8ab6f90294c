"""
Async HTTP gateway to the MinaTokens service.

One request, one response: ``await transport.call("tx-status", {"hash": h})``
POSTs the JSON body to ``{base_url}/tx-status`` with the API key header and
returns the decoded JSON object.

- Transport faults (connect/read errors, timeouts) and non-2xx replies are
  raised as ``ApiError``. The pollers above decide whether to retry.
- No retries happen here; retry policy belongs to the polling loops.

Example:
    from minatokens_sdk.config import SDKConfig
    from minatokens_sdk.api.http import ApiTransport

    async with ApiTransport(SDKConfig(api_key="...")) as api:
        status = await api.call("tx-status", {"hash": "5Ju..."})
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..config import SDKConfig
from ..errors import ApiError

JsonDict = Dict[str, Any]


def _error_text(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:256] or "unknown error"
    if isinstance(body, Mapping) and body.get("error"):
        return str(body["error"])
    return "unknown error"


class ApiTransport:
    """Async request/response client bound to one chain's base URL."""

    def __init__(
        self,
        config: SDKConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._cfg = config
        self._client = client
        self._owns_client = client is None
        self._log = logger or logging.getLogger("minatokens.api")

    @property
    def config(self) -> SDKConfig:
        return self._cfg

    @property
    def base_url(self) -> str:
        return self._cfg.base_url

    # ---------- lifecycle ----------

    async def start(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._cfg.request_timeout,
                headers=self._cfg.http_headers(),
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "ApiTransport":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    # ---------- core call ----------

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    async def call(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> JsonDict:
        """POST ``body`` to ``endpoint`` and return the JSON object reply."""
        client = self._client if self._client is not None else await self.start()

        url = self.url_for(endpoint)
        payload = json.dumps(dict(body or {}), separators=(",", ":"), ensure_ascii=False)
        self._log.debug("POST %s", url)
        try:
            resp = await client.post(url, content=payload, headers=self._cfg.http_headers())
        except httpx.HTTPError as exc:
            raise ApiError(endpoint=endpoint, message=f"network error: {exc}") from exc

        if not resp.is_success:
            raise ApiError(
                endpoint=endpoint,
                message=f"API call failed: {resp.status_code} {resp.reason_phrase} {_error_text(resp)}",
                status=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError(
                endpoint=endpoint,
                message="non-JSON response",
                status=resp.status_code,
                data=resp.text[:256],
            ) from exc
        if not isinstance(data, dict):
            raise ApiError(
                endpoint=endpoint,
                message=f"expected a JSON object, got {type(data).__name__}",
                status=resp.status_code,
                data=data,
            )
        return data


__all__ = ["ApiTransport"]
