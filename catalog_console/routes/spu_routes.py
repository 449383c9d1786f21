#=======================================================================================
# catalog_console/routes/spu_routes.py
# SPU list (status tabs, counts, shelf switching, delete) and the SPU form.
#
# An open form is a server-side draft: POST /api/spu/drafts opens one (new, edit
# or view), every edit call returns the full form snapshot, and /submit runs
# the pre-submit gate before one create/update call to the backend.
#=======================================================================================

import asyncio
import logging
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import SPU_STATUS_ENABLE
from catalog_console.routes.deps import Paging, get_admin_http, load_page, saved_or_400, snake_keys
from catalog_console.screens.catalog import SpuListScreen
from catalog_console.spu.form_controller import SpuFormController

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/spu", tags=["SPU"])


# ---------------------------
# SPU list
# ---------------------------
@router.get("/list")
async def list_spus(
    paging: Paging = Depends(),
    status_: int = Query(SPU_STATUS_ENABLE, alias="status"),
    name: Optional[str] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    brand_id: Optional[int] = Query(None, alias="brandId"),
    http: AdminHttp = Depends(get_admin_http),
):
    screen = SpuListScreen(http)
    await screen.load_meta()
    return await load_page(screen, paging, status=status_, name=name, categoryId=category_id, brandId=brand_id)


class StatusBody(BaseModel):
    status: int


@router.put("/{spu_id}/status")
async def switch_spu_status(spu_id: int, body: StatusBody, http: AdminHttp = Depends(get_admin_http)):
    screen = SpuListScreen(http)
    return saved_or_400(await screen.switch_status(spu_id, body.status), screen)


@router.delete("/{spu_id}")
async def delete_spu(spu_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = SpuListScreen(http)
    return saved_or_400(await screen.delete(spu_id), screen)


# ---------------------------
# Open drafts (in-memory)
# ---------------------------
_DRAFTS: Dict[str, Dict[str, Any]] = {}
_DRAFTS_LOCK = asyncio.Lock()
_DRAFTS_TTL_SECONDS = 4 * 60 * 60  # forms untouched for 4 hours are dropped


def _now_ts() -> int:
    return int(time.time())


async def _cleanup_drafts_now() -> None:
    cutoff = _now_ts() - _DRAFTS_TTL_SECONDS
    async with _DRAFTS_LOCK:
        stale = [did for did, rec in _DRAFTS.items() if rec["touched"] < cutoff]
        for did in stale:
            _DRAFTS.pop(did, None)
    if stale:
        logger.info("[SPU-FORM] dropped %d stale drafts", len(stale))


async def _get_form(draft_id: str) -> SpuFormController:
    async with _DRAFTS_LOCK:
        rec = _DRAFTS.get(draft_id)
        if rec is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
        rec["touched"] = _now_ts()
        return rec["form"]


def _view(draft_id: str, form: SpuFormController) -> Dict[str, Any]:
    return {"draftId": draft_id, **form.snapshot()}


def _editable(form: SpuFormController) -> None:
    if form.readonly:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Draft is read-only")


class CamelBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OpenDraftBody(CamelBody):
    spu_id: Optional[int] = None
    readonly: bool = False


class CategoryBody(CamelBody):
    category_id: int = 0


class SlotValueBody(CamelBody):
    value_id: Optional[int] = None


class SlotPictureBody(CamelBody):
    pic_url: str = ""


class SpecTypeBody(CamelBody):
    spec_type: bool


class DisplayPropertyBody(CamelBody):
    value_text: str = ""


@router.post("/drafts")
async def open_draft(body: Optional[OpenDraftBody] = None, http: AdminHttp = Depends(get_admin_http)):
    body = body or OpenDraftBody()
    await _cleanup_drafts_now()
    form = SpuFormController(http)
    await form.open(body.spu_id, readonly=body.readonly)
    draft_id = uuid.uuid4().hex
    async with _DRAFTS_LOCK:
        _DRAFTS[draft_id] = {"form": form, "touched": _now_ts()}
    logger.info("[SPU-FORM] draft %s opened (spu_id=%s readonly=%s)", draft_id, body.spu_id, form.readonly)
    return _view(draft_id, form)


@router.get("/drafts/{draft_id}")
async def get_draft(draft_id: str):
    return _view(draft_id, await _get_form(draft_id))


@router.delete("/drafts/{draft_id}")
async def close_draft(draft_id: str):
    async with _DRAFTS_LOCK:
        _DRAFTS.pop(draft_id, None)
    return {"ok": True}


@router.put("/drafts/{draft_id}/category")
async def select_category(draft_id: str, body: CategoryBody):
    form = await _get_form(draft_id)
    _editable(form)
    await form.select_category(body.category_id)
    return _view(draft_id, form)


@router.post("/drafts/{draft_id}/slots/{property_id}")
async def add_slot(draft_id: str, property_id: int):
    form = await _get_form(draft_id)
    _editable(form)
    form.add_slot(property_id)
    return _view(draft_id, form)


@router.put("/drafts/{draft_id}/slots/{property_id}/{index}")
async def set_slot_value(draft_id: str, property_id: int, index: int, body: SlotValueBody):
    form = await _get_form(draft_id)
    _editable(form)
    if not form.set_slot_value(property_id, index, body.value_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=form.error_message)
    return _view(draft_id, form)


@router.put("/drafts/{draft_id}/slots/{property_id}/{index}/picture")
async def set_slot_picture(draft_id: str, property_id: int, index: int, body: SlotPictureBody):
    form = await _get_form(draft_id)
    _editable(form)
    form.set_slot_picture(property_id, index, body.pic_url)
    return _view(draft_id, form)


@router.delete("/drafts/{draft_id}/slots/{property_id}/{index}")
async def remove_slot(draft_id: str, property_id: int, index: int):
    form = await _get_form(draft_id)
    _editable(form)
    form.remove_slot(property_id, index)
    return _view(draft_id, form)


@router.put("/drafts/{draft_id}/spec-type")
async def set_spec_type(draft_id: str, body: SpecTypeBody):
    form = await _get_form(draft_id)
    _editable(form)
    form.set_spec_type(body.spec_type)
    return _view(draft_id, form)


@router.put("/drafts/{draft_id}/skus/batch")
async def apply_batch_sku(draft_id: str, payload: Dict[str, Any] = Body(...)):
    form = await _get_form(draft_id)
    _editable(form)
    form.apply_batch_sku(snake_keys(payload))
    return _view(draft_id, form)


@router.patch("/drafts/{draft_id}/skus/{index}")
async def patch_sku(draft_id: str, index: int, payload: Dict[str, Any] = Body(...)):
    form = await _get_form(draft_id)
    _editable(form)
    try:
        form.patch_sku(index, **snake_keys(payload))
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e).strip("'\""))
    return _view(draft_id, form)


@router.delete("/drafts/{draft_id}/skus/{index}")
async def delete_sku(draft_id: str, index: int):
    form = await _get_form(draft_id)
    _editable(form)
    try:
        form.delete_sku(index)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _view(draft_id, form)


@router.put("/drafts/{draft_id}/display-properties/{property_id}")
async def set_display_property(draft_id: str, property_id: int, body: DisplayPropertyBody):
    form = await _get_form(draft_id)
    _editable(form)
    form.patch_display_property(property_id, body.value_text)
    return _view(draft_id, form)


@router.patch("/drafts/{draft_id}/fields")
async def patch_fields(draft_id: str, payload: Dict[str, Any] = Body(...)):
    form = await _get_form(draft_id)
    _editable(form)
    try:
        form.patch_fields(**snake_keys(payload))
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e).strip("'\""))
    return _view(draft_id, form)


@router.post("/drafts/{draft_id}/submit")
async def submit_draft(draft_id: str):
    form = await _get_form(draft_id)
    if not await form.submit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": form.error_message, "section": form.active_section.value},
        )
    if not form.readonly:
        async with _DRAFTS_LOCK:
            _DRAFTS.pop(draft_id, None)
    return {"ok": True, "spuId": form.spu_id}
