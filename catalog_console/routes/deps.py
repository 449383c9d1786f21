# catalog_console/routes/deps.py
# Shared FastAPI dependencies and response helpers for the console routers.
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, Query, status
from pydantic.alias_generators import to_snake

from catalog_console.admin_api.http import AdminHttp


def get_admin_http() -> AdminHttp:
    """One client per request; tests swap this out via app.dependency_overrides."""
    return AdminHttp()


def snake_keys(payload: Dict[str, Any]) -> Dict[str, Any]:
    """camelCase request bodies -> snake_case keyword arguments."""
    return {to_snake(k): v for k, v in (payload or {}).items()}


def loaded_or_502(ok: bool, snapshot: Dict[str, Any]) -> Dict[str, Any]:
    if not ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=snapshot.get("errorMessage"))
    return snapshot


def saved_or_400(ok: bool, screen: Any) -> Dict[str, Any]:
    if not ok:
        detail = getattr(screen, "form_error", "") or screen.error_message
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return {"ok": True, **screen.snapshot()}


class Paging:
    """?pageNum=&pageSize= shared by every paged list."""

    def __init__(
        self,
        page_num: int = Query(1, alias="pageNum", ge=1),
        page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=200),
    ):
        self.page_num = page_num
        self.page_size = page_size


async def load_page(screen: Any, paging: Paging, **filters: Any) -> Dict[str, Any]:
    screen.page_num = paging.page_num
    if paging.page_size:
        screen.page_size = paging.page_size
    screen.filters = filters
    return loaded_or_502(await screen.load(), screen.snapshot())
