#===========================================================================
# catalog_console/admin_api/http.py
# Admin backend HTTP interface.
# Every response is a {code, desc, data} envelope; callers only ever see
# `data` or an AdminApiError carrying a human-readable message.
#===========================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from catalog_console.config import settings
from catalog_console.session.token_store import TokenStore, get_token_store

logger = logging.getLogger("uvicorn.error")

SUCCESS_CODE = 200


# --- Errors ----------------------------------------------------------------

class AdminApiError(Exception):
    """Anything that keeps a request from yielding `data`."""

    def __init__(self, message: str, *, code: Optional[int] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class AdminTransportError(AdminApiError):
    """Connection refused, timeout, TLS failure, unreadable body."""


class AdminBusinessError(AdminApiError):
    """Backend answered with an envelope code other than 200."""


class AdminAuthError(AdminApiError):
    """HTTP 401: stored tokens were cleared, the user has to log in again."""


# --- Helpers ---------------------------------------------------------------

def unwrap_envelope(body: Any) -> Any:
    """
    Return `data` for a successful envelope. Bodies that are not an envelope
    (no integer `code`) pass through untouched.
    """
    if not isinstance(body, dict):
        return body
    code = body.get("code")
    if not isinstance(code, int) or isinstance(code, bool):
        return body
    if code != SUCCESS_CODE:
        message = body.get("desc") or body.get("enDesc") or f"Request failed: {code}"
        raise AdminBusinessError(str(message), code=code)
    return body.get("data")


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    # unset filters are left out of the query string entirely
    return {k: v for k, v in (params or {}).items() if v is not None and v != ""}


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("desc") or body.get("message")
        if msg:
            return str(msg)
    return f"Request failed with status code {resp.status_code}"


# --- Client ----------------------------------------------------------------

class AdminHttp:
    """
    One short-lived AsyncClient per request; no retry, no cancellation.
    `transport` is only set by tests (httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        *,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        token_prefix: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.ADMIN_API_BASE).rstrip("/")
        self.token_store = token_store or get_token_store()
        self.timeout = timeout if timeout is not None else settings.ADMIN_API_TIMEOUT
        self.verify = verify if verify is not None else settings.ADMIN_VERIFY_TLS
        self.token_prefix = settings.ADMIN_TOKEN_PREFIX if token_prefix is None else token_prefix
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        token = self.token_store.access_token
        if not token:
            return {}
        prefix = (self.token_prefix or "").strip()
        if prefix and not token.startswith(prefix + " "):
            return {"Authorization": f"{prefix} {token}"}
        return {"Authorization": token}

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, verify=self.verify, transport=self.transport)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        try:
            async with self._client(self.timeout) as client:
                resp = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    params=_clean_params(params),
                    json=json,
                )
        except httpx.HTTPError as e:
            logger.warning("[ADMIN-API] %s %s transport error: %s", method, path, e)
            raise AdminTransportError(str(e) or e.__class__.__name__) from e

        if resp.status_code == 401:
            self.token_store.clear()
            logger.info("[ADMIN-API] %s %s -> 401, session cleared", method, path)
            raise AdminAuthError(_error_message(resp), status_code=401)
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("[ADMIN-API] %s %s -> %s: %s", method, path, resp.status_code, message)
            raise AdminApiError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError:
            return resp.text
        return unwrap_envelope(body)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Any = None) -> Any:
        return await self.request("POST", path, json=payload)

    async def put(self, path: str, payload: Any = None) -> Any:
        return await self.request("PUT", path, json=payload)

    async def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def put_bytes(self, url: str, content: bytes, content_type: str) -> None:
        """Direct upload to a presigned URL: no auth header, no envelope."""
        try:
            async with self._client(settings.UPLOAD_TIMEOUT) as client:
                resp = await client.put(url, content=content, headers={"Content-Type": content_type})
        except httpx.HTTPError as e:
            raise AdminTransportError(str(e) or e.__class__.__name__) from e
        if resp.status_code >= 400:
            raise AdminApiError(
                f"Upload failed with status code {resp.status_code}",
                status_code=resp.status_code,
            )
