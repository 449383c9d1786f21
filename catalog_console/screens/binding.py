# catalog_console/screens/binding.py
# Category <-> property bindings. Every enabled property is listed as a row;
# rows already bound to the category are pre-selected with their stored flags.
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import AdminApiError, AdminAuthError, AdminHttp
from catalog_console.admin_api.models import (
    COMMON_STATUS_ENABLE,
    PROPERTY_TYPE_DISPLAY,
    PROPERTY_TYPE_SALES,
    CategoryPropertyResp,
    CategoryPropertySaveItem,
    CategoryPropertySaveReq,
    CategoryResp,
    PropertyResp,
    property_type_label,
)

logger = logging.getLogger("uvicorn.error")

NO_CATEGORY_MESSAGE = "Please select a product category first"
NO_SELECTION_MESSAGE = "Please select at least one property to bind"
BAD_SORT_MESSAGE = "Sort must be an integer greater than or equal to 0"

PROPERTY_TYPES = (PROPERTY_TYPE_DISPLAY, PROPERTY_TYPE_SALES)


@dataclass(frozen=True)
class BindingRow:
    property_id: int
    property_name: str
    property_type: int
    selected: bool = False
    enabled: bool = True
    required: bool = False
    support_value_image: bool = False
    value_image_required: bool = False
    sort: Any = 0


def _sort_key(row: BindingRow):
    return (row.sort, row.property_id)


def merge_binding_rows(
    all_properties: Sequence[PropertyResp],
    bound: Sequence[CategoryPropertyResp],
    property_type: int,
) -> List[BindingRow]:
    """
    One row per property. Unbound rows default to enabled, not required and
    sort (index + 1) * 10 so they land after each other in catalog order.
    """
    bound_by_id = {b.property_id: b for b in bound}
    rows = []
    for index, prop in enumerate(all_properties):
        b = bound_by_id.get(prop.id)
        rows.append(BindingRow(
            property_id=prop.id,
            property_name=prop.name,
            property_type=property_type,
            selected=b is not None,
            enabled=b.enabled if b else True,
            required=b.required if b else False,
            support_value_image=b.support_value_image if b else False,
            value_image_required=b.value_image_required if b else False,
            sort=b.sort if b else (index + 1) * 10,
        ))
    return sorted(rows, key=_sort_key)


def _valid_sort(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class BindingScreen:
    name = "category-binding"

    def __init__(self, http: AdminHttp):
        self.http = http
        self.categories: List[CategoryResp] = []
        self.category_id: Optional[int] = None
        self.rows: Dict[int, List[BindingRow]] = {t: [] for t in PROPERTY_TYPES}
        self.error_message = ""
        self.success_message = ""

    async def load_categories(self) -> None:
        try:
            self.categories = await product_api.get_category_list(self.http)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            self.error_message = e.message

    async def select_category(self, category_id: Optional[int]) -> bool:
        self.category_id = category_id or None
        self.success_message = ""
        if not self.category_id:
            self.rows = {t: [] for t in PROPERTY_TYPES}
            return True
        return await self._load_rows(self.category_id)

    async def _load_rows(self, category_id: int) -> bool:
        try:
            display_all, sales_all, display_bound, sales_bound = await asyncio.gather(
                product_api.get_property_simple_list(self.http, PROPERTY_TYPE_DISPLAY),
                product_api.get_property_simple_list(self.http, PROPERTY_TYPE_SALES),
                product_api.get_category_property_list(self.http, category_id, PROPERTY_TYPE_DISPLAY),
                product_api.get_category_property_list(self.http, category_id, PROPERTY_TYPE_SALES),
            )
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SCREEN] bindings of category %s failed: %s", category_id, e)
            self.error_message = e.message
            return False
        self.rows = {
            PROPERTY_TYPE_DISPLAY: merge_binding_rows(
                [p for p in display_all if p.status == COMMON_STATUS_ENABLE], display_bound, PROPERTY_TYPE_DISPLAY
            ),
            PROPERTY_TYPE_SALES: merge_binding_rows(
                [p for p in sales_all if p.status == COMMON_STATUS_ENABLE], sales_bound, PROPERTY_TYPE_SALES
            ),
        }
        self.error_message = ""
        return True

    def patch_row(self, property_type: int, property_id: int, **changes: Any) -> None:
        self.rows[property_type] = [
            replace(r, **changes) if r.property_id == property_id else r for r in self.rows[property_type]
        ]

    @property
    def selected_rows(self) -> List[BindingRow]:
        return [r for t in PROPERTY_TYPES for r in self.rows[t] if r.selected]

    async def save(self) -> bool:
        self.success_message = ""
        if not self.category_id:
            self.error_message = NO_CATEGORY_MESSAGE
            return False
        selected = self.selected_rows
        if not selected:
            self.error_message = NO_SELECTION_MESSAGE
            return False
        if any(not _valid_sort(r.sort) for r in selected):
            self.error_message = BAD_SORT_MESSAGE
            return False

        req = CategoryPropertySaveReq(
            category_id=self.category_id,
            items=[
                CategoryPropertySaveItem(
                    property_id=r.property_id,
                    enabled=r.enabled,
                    required=r.required,
                    support_value_image=r.support_value_image,
                    value_image_required=r.value_image_required,
                    sort=r.sort,
                )
                for r in sorted(selected, key=_sort_key)
            ],
        )
        try:
            await product_api.save_category_property_batch(self.http, req)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            self.error_message = e.message
            return False
        self.error_message = ""
        self.success_message = f"Saved {len(selected)} property bindings"
        logger.info("[SCREEN] category %s bindings saved (%d)", self.category_id, len(selected))
        await self._load_rows(self.category_id)
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "rows": {
                str(t): [
                    {
                        "propertyId": r.property_id,
                        "propertyName": r.property_name,
                        "propertyType": r.property_type,
                        "propertyTypeLabel": property_type_label(r.property_type),
                        "selected": r.selected,
                        "enabled": r.enabled,
                        "required": r.required,
                        "supportValueImage": r.support_value_image,
                        "valueImageRequired": r.value_image_required,
                        "sort": r.sort,
                    }
                    for r in self.rows[t]
                ]
                for t in PROPERTY_TYPES
            },
            "selectedCount": len(self.selected_rows),
            "errorMessage": self.error_message,
            "successMessage": self.success_message,
        }
