# catalog_console/admin_api/auth.py
from __future__ import annotations

import logging

from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import LoginReq, LoginResp, PermissionInfoResp

logger = logging.getLogger("uvicorn.error")


async def login(http: AdminHttp, username: str, password: str) -> LoginResp:
    """Log in and persist both tokens in the session store."""
    data = await http.post("/system/auth/login", LoginReq(username=username, password=password).to_wire())
    resp = LoginResp.model_validate(data)
    http.token_store.set_tokens(resp.access_token, resp.refresh_token)
    logger.info("[AUTH] logged in user_id=%s", resp.user_id)
    return resp


async def logout(http: AdminHttp) -> bool:
    """
    Tell the backend, then forget the tokens whatever it answered.
    """
    try:
        data = await http.post("/system/auth/logout")
    finally:
        http.token_store.clear()
    return bool((data or {}).get("success", True)) if isinstance(data, dict) else True


async def get_permission_info(http: AdminHttp) -> PermissionInfoResp:
    """Also the liveness check for a stored token: a dead one ends in AdminAuthError."""
    data = await http.get("/system/auth/get-permission-info")
    return PermissionInfoResp.model_validate(data)
