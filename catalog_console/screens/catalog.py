#===========================================================================
# catalog_console/screens/catalog.py
# Catalog maintenance screens: brands, category tree, properties, property
# values and the SPU list.
#===========================================================================

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import AdminApiError, AdminAuthError, AdminHttp
from catalog_console.admin_api.models import (
    SPU_STATUS_DISABLE,
    SPU_STATUS_ENABLE,
    SPU_STATUS_RECYCLE,
    BrandResp,
    BrandSaveReq,
    CategoryResp,
    CategorySaveReq,
    CategorySortItem,
    PropertyResp,
    PropertySaveReq,
    PropertyValueResp,
    PropertyValueSaveReq,
    SpuCountResp,
    SpuResp,
    spu_status_label,
)
from catalog_console.screens.list_screen import FormInputError, ListScreen, require_fields

logger = logging.getLogger("uvicorn.error")

PROPERTY_NAME_MESSAGE = "Property name cannot be empty"
PROPERTY_VALUE_MESSAGE = "Please fill in the property and the value name"


# --- Brands ------------------------------------------------------------------

class BrandScreen(ListScreen[BrandResp]):
    name = "brand"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_brand_page, http), page_size)
        self.http = http

    async def save(self, req: BrandSaveReq) -> bool:
        try:
            require_fields(req.model_dump(), ("name", "pic_url"))
        except FormInputError as e:
            return self._reject(e)
        if req.id:
            return await self._mutate(lambda: product_api.update_brand(self.http, req), form=True)
        return await self._mutate(lambda: product_api.create_brand(self.http, req), form=True)

    async def delete(self, brand_id: int) -> bool:
        return await self._mutate(lambda: product_api.delete_brand(self.http, brand_id))


# --- Categories (full list rendered as a tree) ---------------------------------

@dataclass
class CategoryNode:
    category: CategoryResp
    children: List["CategoryNode"] = field(default_factory=list)


def build_tree(categories: List[CategoryResp]) -> List[CategoryNode]:
    """
    Nodes keep input order. parentId 0 is a root; a node whose parent is not
    in the list is promoted to a root rather than hidden.
    """
    nodes: Dict[int, CategoryNode] = {c.id: CategoryNode(c) for c in categories}
    roots: List[CategoryNode] = []
    for node in nodes.values():
        parent_id = node.category.parent_id
        parent = nodes.get(parent_id) if parent_id else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


def flatten_tree(nodes: List[CategoryNode], level: int = 0) -> List[Tuple[int, CategoryResp]]:
    """Depth-first (level, category) rows for a table with indentation."""
    rows: List[Tuple[int, CategoryResp]] = []
    for node in nodes:
        rows.append((level, node.category))
        rows.extend(flatten_tree(node.children, level + 1))
    return rows


class CategoryScreen:
    name = "category"

    def __init__(self, http: AdminHttp):
        self.http = http
        self.items: List[CategoryResp] = []
        self.filters: Dict[str, Any] = {}
        self.error_message = ""
        self.form_error = ""

    async def load(self) -> bool:
        try:
            self.items = await product_api.get_category_list(
                self.http, name=self.filters.get("name"), status=self.filters.get("status")
            )
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SCREEN] category list failed: %s", e)
            self.error_message = e.message
            return False
        self.error_message = ""
        return True

    async def set_filters(self, name: Optional[str] = None, status: Optional[int] = None) -> bool:
        self.filters = {"name": name or None, "status": status}
        return await self.load()

    @property
    def rows(self) -> List[Tuple[int, CategoryResp]]:
        return flatten_tree(build_tree(self.items))

    async def save(self, req: CategorySaveReq) -> bool:
        try:
            require_fields(req.model_dump(), ("name", "pic_url"))
        except FormInputError as e:
            self.form_error = str(e)
            return False
        try:
            if req.id:
                await product_api.update_category(self.http, req)
            else:
                await product_api.create_category(self.http, req)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            self.form_error = e.message
            return False
        self.form_error = ""
        await self.load()
        return True

    async def update_sort(self, items: List[CategorySortItem]) -> bool:
        if not items:
            return True
        return await self._run(lambda: product_api.update_category_sort_batch(self.http, items))

    async def delete(self, category_id: int) -> bool:
        return await self._run(lambda: product_api.delete_category(self.http, category_id))

    async def _run(self, op) -> bool:
        try:
            await op()
        except AdminAuthError:
            raise
        except AdminApiError as e:
            self.error_message = e.message
            return False
        await self.load()
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "filters": {k: v for k, v in self.filters.items() if v is not None},
            "rows": [dict(c.to_wire(), level=level) for level, c in self.rows],
            "errorMessage": self.error_message,
            "formError": self.form_error,
        }


# --- Properties and values ------------------------------------------------------

class PropertyScreen(ListScreen[PropertyResp]):
    name = "property"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_property_page, http), page_size)
        self.http = http

    async def save(self, req: PropertySaveReq) -> bool:
        try:
            require_fields(req.model_dump(), ("name",), PROPERTY_NAME_MESSAGE)
        except FormInputError as e:
            return self._reject(e)
        if req.id:
            return await self._mutate(lambda: product_api.update_property(self.http, req), form=True)
        return await self._mutate(lambda: product_api.create_property(self.http, req), form=True)

    async def delete(self, property_id: int) -> bool:
        return await self._mutate(lambda: product_api.delete_property(self.http, property_id))


class PropertyValueScreen(ListScreen[PropertyValueResp]):
    """Values of one property; the property picker comes from the simple list."""

    name = "property-value"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_property_value_page, http), page_size)
        self.http = http

    async def save(self, req: PropertyValueSaveReq) -> bool:
        try:
            require_fields(req.model_dump(), ("property_id", "name"), PROPERTY_VALUE_MESSAGE)
        except FormInputError as e:
            return self._reject(e)
        if req.id:
            return await self._mutate(lambda: product_api.update_property_value(self.http, req), form=True)
        return await self._mutate(lambda: product_api.create_property_value(self.http, req), form=True)

    async def delete(self, value_id: int) -> bool:
        return await self._mutate(lambda: product_api.delete_property_value(self.http, value_id))


# --- SPU list ---------------------------------------------------------------------

def spu_actions(status: int) -> List[Tuple[str, Optional[int]]]:
    """
    Row actions for an SPU in the given status, as (action, target status).
    Only recycled SPUs can be deleted; restoring puts them off shelf.
    """
    if status == SPU_STATUS_RECYCLE:
        return [("restore", SPU_STATUS_DISABLE), ("delete", None)]
    if status == SPU_STATUS_ENABLE:
        return [("recycle", SPU_STATUS_RECYCLE), ("off-shelf", SPU_STATUS_DISABLE)]
    return [("recycle", SPU_STATUS_RECYCLE), ("on-shelf", SPU_STATUS_ENABLE)]


class SpuListScreen(ListScreen[SpuResp]):
    """Status tabs (on sale / off shelf / recycle bin) plus the tab counters."""

    name = "spu"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_spu_page, http), page_size)
        self.http = http
        self.filters = {"status": SPU_STATUS_ENABLE}
        self.counts = SpuCountResp()
        self.brands: List[BrandResp] = []
        self.categories: List[CategoryResp] = []

    async def load_meta(self) -> bool:
        try:
            self.brands, self.categories, self.counts = await asyncio.gather(
                product_api.get_brand_simple_list(self.http),
                product_api.get_category_list(self.http),
                product_api.get_spu_count(self.http),
            )
        except AdminAuthError:
            raise
        except AdminApiError as e:
            self.error_message = e.message
            return False
        return True

    async def select_tab(self, status: int) -> bool:
        return await self.set_filters(**dict(self.filters, status=status))

    async def set_filters(self, **filters: Any) -> bool:
        filters.setdefault("status", self.filters.get("status", SPU_STATUS_ENABLE))
        return await super().set_filters(**filters)

    async def switch_status(self, spu_id: int, status: int) -> bool:
        ok = await self._mutate(lambda: product_api.update_spu_status(self.http, spu_id, status))
        if ok:
            await self.load_meta()
        return ok

    async def delete(self, spu_id: int) -> bool:
        ok = await self._mutate(lambda: product_api.delete_spu(self.http, spu_id))
        if ok:
            await self.load_meta()
        return ok

    def snapshot(self) -> Dict[str, Any]:
        out = super().snapshot()
        brand_names = {b.id: b.name for b in self.brands}
        category_names = {c.id: c.name for c in self.categories}
        for row, item in zip(out["list"], self.items):
            row["statusLabel"] = spu_status_label(item.status)
            row["brandName"] = brand_names.get(item.brand_id, "")
            row["categoryName"] = category_names.get(item.category_id, "")
            row["actions"] = [a for a, _ in spu_actions(item.status)]
        out["counts"] = self.counts.to_wire()
        return out
