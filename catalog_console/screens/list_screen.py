#===========================================================================
# catalog_console/screens/list_screen.py
# Shared paged-list screen: page number/size, filters, current page of items,
# total, and one error message. Mutations reload the page on success.
#===========================================================================

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from catalog_console.admin_api.http import AdminApiError, AdminAuthError
from catalog_console.admin_api.models import PageResp
from catalog_console.config import settings

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

PageFetcher = Callable[..., Awaitable[PageResp[T]]]

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


class FormInputError(ValueError):
    """Client-side check failed before any request was sent."""


def require_fields(values: Dict[str, Any], names: Sequence[str], message: str = REQUIRED_FIELDS_MESSAGE) -> None:
    for name in names:
        v = values.get(name)
        if v is None or (isinstance(v, str) and not v.strip()) or v == 0:
            raise FormInputError(message)


class ListScreen(Generic[T]):
    """
    `fetch(page_num, page_size, **filters)` returns one PageResp. A failed
    load keeps whatever rows were on screen and only sets `error_message`.
    """

    name = "list"

    def __init__(self, fetch: PageFetcher, page_size: Optional[int] = None):
        self._fetch = fetch
        self.page_num = 1
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE
        self.filters: Dict[str, Any] = {}
        self.items: List[T] = []
        self.total = 0
        self.loading = False
        self.error_message = ""
        # message shown inside the create/edit dialog
        self.form_error = ""

    async def load(self) -> bool:
        self.loading = True
        try:
            page = await self._fetch(self.page_num, self.page_size, **self._query_filters())
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SCREEN] %s page=%s failed: %s", self.name, self.page_num, e)
            self.error_message = e.message
            return False
        finally:
            self.loading = False
        self.items = list(page.list or [])
        self.total = page.total or 0
        self.error_message = ""
        return True

    def _query_filters(self) -> Dict[str, Any]:
        return {k: v for k, v in self.filters.items() if v is not None and v != ""}

    async def set_filters(self, **filters: Any) -> bool:
        self.filters = dict(filters)
        self.page_num = 1
        return await self.load()

    async def go_to(self, page_num: int, page_size: Optional[int] = None) -> bool:
        if page_size and page_size != self.page_size:
            self.page_size = page_size
            page_num = 1
        self.page_num = max(1, int(page_num))
        return await self.load()

    @property
    def page_count(self) -> int:
        if self.total <= 0:
            return 1
        return (self.total + self.page_size - 1) // self.page_size

    async def _mutate(self, op: Callable[[], Awaitable[Any]], *, form: bool = False) -> bool:
        """Run one create/update/delete call, then reload. Errors go to the dialog when `form`."""
        try:
            await op()
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SCREEN] %s mutation failed: %s", self.name, e)
            if form:
                self.form_error = e.message
            else:
                self.error_message = e.message
            return False
        self.form_error = ""
        await self.load()
        return True

    def _reject(self, err: FormInputError) -> bool:
        self.form_error = str(err)
        return False

    def snapshot(self) -> Dict[str, Any]:
        return {
            "pageNum": self.page_num,
            "pageSize": self.page_size,
            "pageCount": self.page_count,
            "filters": self._query_filters(),
            "total": self.total,
            "list": [_wire(x) for x in self.items],
            "errorMessage": self.error_message,
            "formError": self.form_error,
        }


def _wire(item: Any) -> Any:
    to_wire = getattr(item, "to_wire", None)
    return to_wire() if callable(to_wire) else item
