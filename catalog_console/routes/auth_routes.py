#===========================================================================
# catalog_console/routes/auth_routes.py
# Console session: login stores the backend tokens in the token file,
# logout forgets them, /me doubles as the "is my session alive" check.
#===========================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from catalog_console.admin_api import auth as auth_api
from catalog_console.admin_api.http import AdminHttp
from catalog_console.routes.deps import get_admin_http

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginBody(BaseModel):
    username: str
    password: str


@router.post("/login")
async def login(body: LoginBody, http: AdminHttp = Depends(get_admin_http)):
    resp = await auth_api.login(http, body.username, body.password)
    return {"ok": True, "userId": resp.user_id, "expiresTime": resp.expires_time}


@router.post("/logout")
async def logout(http: AdminHttp = Depends(get_admin_http)):
    await auth_api.logout(http)
    return {"ok": True, "redirect": "/login"}


@router.get("/me")
async def me(http: AdminHttp = Depends(get_admin_http)):
    if not http.token_store.is_logged_in:
        return {"loggedIn": False, "redirect": "/login"}
    info = await auth_api.get_permission_info(http)
    return {"loggedIn": True, **info.to_wire()}
