#===========================================================================
# catalog_console/spu/form_controller.py
# SPU create / edit / view screen.
# Loads brands, categories, the SPU detail and the category's bindings from
# the admin API, applies user edits through the selection reducer and runs
# the pre-submit gate before one create/update call.
#===========================================================================

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import AdminApiError, AdminAuthError, AdminHttp
from catalog_console.admin_api.models import (
    PROPERTY_TYPE_DISPLAY,
    PROPERTY_TYPE_SALES,
    BrandResp,
    CategoryResp,
)
from catalog_console.spu import selection
from catalog_console.spu.draft import CategoryPropertyOption, ValueOption, draft_to_save_request
from catalog_console.spu.selection import DuplicateSelectionError, FormState
from catalog_console.spu.sku_matrix import (
    find_image_property_id,
    order_sku_rows,
    resolve_sku_display_pic_url,
)
from catalog_console.spu.validation import FormSection, check_draft

logger = logging.getLogger("uvicorn.error")


class SpuFormController:
    """
    One open SPU form. Backend failures other than an expired session never
    raise out of the public coroutines: they land in `error_message` and the
    draft stays as it was.
    """

    def __init__(self, http: AdminHttp):
        self.http = http
        self.state: FormState = selection.new_form_state()
        self.spu_id: Optional[int] = None
        self.readonly = False
        self.loading = False
        self.error_message = ""
        self.active_section: FormSection = FormSection.INFO
        self.brands: List[BrandResp] = []
        self.categories: List[CategoryResp] = []

    # ----- Loading -----

    async def open(self, spu_id: Optional[int] = None, readonly: bool = False) -> None:
        self.spu_id = spu_id or None
        self.readonly = bool(readonly and self.spu_id)
        self.loading = True
        try:
            jobs = [self._load_meta()]
            if self.spu_id:
                jobs.append(self._load_detail(self.spu_id))
            await asyncio.gather(*jobs)
            if self.state.draft.category_id:
                await self._load_category_properties(self.state.draft.category_id)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SPU-FORM] open spu_id=%s failed: %s", self.spu_id, e)
            self.error_message = e.message
        finally:
            self.loading = False

    async def _load_meta(self) -> None:
        self.brands, self.categories = await asyncio.gather(
            product_api.get_brand_simple_list(self.http),
            product_api.get_category_list(self.http),
        )

    async def _load_detail(self, spu_id: int) -> None:
        detail = await product_api.get_spu_detail(self.http, spu_id)
        self.state = selection.state_from_detail(detail)

    async def _load_category_properties(self, category_id: int) -> None:
        if not category_id:
            self.state = selection.set_category_properties(self.state, (), ())
            return
        sales, display = await asyncio.gather(
            product_api.get_category_property_list(self.http, category_id, PROPERTY_TYPE_SALES),
            product_api.get_category_property_list(self.http, category_id, PROPERTY_TYPE_DISPLAY),
        )
        self.state = selection.set_category_properties(
            self.state,
            [CategoryPropertyOption.from_resp(x) for x in sales],
            [CategoryPropertyOption.from_resp(x) for x in display],
        )
        for prop in self.state.sales_properties:
            await self.load_value_options(prop.property_id)

    async def load_value_options(self, property_id: int) -> None:
        """Value catalog of one sales property, fetched once per form."""
        if property_id in self.state.value_options:
            return
        try:
            values = await product_api.get_property_value_simple_list(self.http, property_id)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SPU-FORM] values of property %s unavailable: %s", property_id, e)
            self.error_message = e.message
            return
        self.state = selection.set_value_options(
            self.state, property_id, [ValueOption.from_resp(v) for v in values]
        )

    async def select_category(self, category_id: int) -> None:
        self.state = selection.change_category(self.state, category_id)
        try:
            await self._load_category_properties(category_id or 0)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SPU-FORM] bindings of category %s unavailable: %s", category_id, e)
            self.error_message = e.message

    # ----- Edits -----

    def add_slot(self, property_id: int) -> None:
        self.state = selection.add_slot(self.state, property_id)

    def remove_slot(self, property_id: int, index: int) -> None:
        self.state = selection.remove_slot(self.state, property_id, index)

    def set_slot_value(self, property_id: int, index: int, value_id: Optional[int]) -> bool:
        self.error_message = ""
        try:
            self.state = selection.set_slot_value(self.state, property_id, index, value_id)
        except DuplicateSelectionError as e:
            self.error_message = str(e)
            return False
        return True

    def set_slot_picture(self, property_id: int, index: int, pic_url: str) -> None:
        self.state = selection.set_slot_picture(self.state, property_id, index, pic_url)

    def set_spec_type(self, spec_type: bool) -> None:
        self.state = selection.set_spec_type(self.state, spec_type)

    def patch_sku(self, index: int, **changes: Any) -> None:
        self.state = selection.patch_sku(self.state, index, **changes)

    def delete_sku(self, index: int) -> None:
        self.state = selection.delete_sku(self.state, index)

    def apply_batch_sku(self, template: Dict[str, Any]) -> None:
        self.state = selection.apply_batch_sku(self.state, template)

    def patch_fields(self, **changes: Any) -> None:
        self.state = selection.patch_draft(self.state, **changes)

    def patch_display_property(self, property_id: int, value_text: str) -> None:
        opt = next((p for p in self.state.display_properties if p.property_id == property_id), None)
        self.state = selection.patch_display_property(
            self.state,
            property_id,
            value_text,
            property_name=opt.property_name if opt else "",
            sort=opt.sort if opt else 0,
        )

    # ----- Submit -----

    async def submit(self) -> bool:
        """True when saved (or nothing to save in view mode)."""
        if self.readonly:
            return True
        issue = check_draft(self.state)
        if issue is not None:
            self.error_message = issue.message
            self.active_section = issue.section
            return False

        req = draft_to_save_request(self.state.draft)
        self.loading = True
        try:
            if self.spu_id:
                req.id = self.spu_id
                await product_api.update_spu(self.http, req)
            else:
                self.spu_id = await product_api.create_spu(self.http, req)
        except AdminAuthError:
            raise
        except AdminApiError as e:
            logger.warning("[SPU-FORM] save failed: %s", e)
            self.error_message = e.message
            return False
        finally:
            self.loading = False
        self.error_message = ""
        logger.info("[SPU-FORM] saved spu_id=%s skus=%d", self.spu_id, len(req.skus))
        return True

    # ----- View -----

    def snapshot(self) -> Dict[str, Any]:
        state = self.state
        image_pid = find_image_property_id(state.sales_properties, state.property_list)
        rows = [
            {
                "index": idx,
                "key": [p.value_id for p in sku.properties],
                "displayPicUrl": resolve_sku_display_pic_url(sku, state.draft.pic_url),
            }
            for idx, sku in order_sku_rows(state.draft.skus, image_pid)
        ]
        return {
            "spuId": self.spu_id,
            "readonly": self.readonly,
            "errorMessage": self.error_message,
            "activeSection": self.active_section.value,
            "draft": asdict(state.draft),
            "salesProperties": [asdict(p) for p in state.sales_properties],
            "displayProperties": [asdict(p) for p in state.display_properties],
            "slots": {str(pid): [asdict(s) for s in slots] for pid, slots in state.slots.items()},
            "propertyList": [asdict(p) for p in state.property_list],
            "skuRows": rows,
            "imagePropertyId": image_pid,
            "brands": [b.to_wire() for b in self.brands],
            "categories": [c.to_wire() for c in self.categories],
        }
