#===========================================================================
# catalog_console/admin_api/product.py
# Product back-office endpoints: brands, categories, properties, property
# values, category bindings, SPUs, comments, favorites, browse history.
#===========================================================================

from __future__ import annotations

from typing import Any, Dict, List, Optional

from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import (
    BrandResp,
    BrandSaveReq,
    BrowseHistoryResp,
    CategoryPropertyResp,
    CategoryPropertySaveReq,
    CategoryResp,
    CategorySaveReq,
    CategorySortItem,
    CommentCreateReq,
    CommentResp,
    FavoriteResp,
    PageResp,
    PropertyResp,
    PropertySaveReq,
    PropertyValueResp,
    PropertyValueSaveReq,
    SpuCountResp,
    SpuResp,
    SpuSaveReq,
)


# --- Helpers ---------------------------------------------------------------

def _page_params(page_num: int, page_size: int, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"pageNum": page_num, "pageSize": page_size, **(filters or {})}


def _created_id(data: Any) -> int:
    if isinstance(data, dict):
        return int(data.get("id") or 0)
    return int(data or 0)


def _success(data: Any) -> bool:
    if isinstance(data, dict):
        return bool(data.get("success", True))
    return bool(data) if data is not None else True


# --- Brands ------------------------------------------------------------------

async def get_brand_page(http: AdminHttp, page_num: int, page_size: int, **filters) -> PageResp[BrandResp]:
    data = await http.get("/product/brand/page", _page_params(page_num, page_size, filters))
    return PageResp[BrandResp].model_validate(data or {})


async def get_brand_simple_list(http: AdminHttp) -> List[BrandResp]:
    data = await http.get("/product/brand/list-all-simple")
    return [BrandResp.model_validate(x) for x in data or []]


async def create_brand(http: AdminHttp, req: BrandSaveReq) -> int:
    return _created_id(await http.post("/product/brand/create", req.to_wire()))


async def update_brand(http: AdminHttp, req: BrandSaveReq) -> bool:
    return _success(await http.put("/product/brand/update", req.to_wire()))


async def delete_brand(http: AdminHttp, brand_id: int) -> bool:
    return _success(await http.delete("/product/brand/delete", {"id": brand_id}))


# --- Categories (full list, no paging) --------------------------------------------

async def get_category_list(
    http: AdminHttp,
    name: Optional[str] = None,
    status: Optional[int] = None,
    parent_id: Optional[int] = None,
) -> List[CategoryResp]:
    params = {"name": name, "status": status, "parentId": parent_id}
    data = await http.get("/product/category/list", params)
    return [CategoryResp.model_validate(x) for x in data or []]


async def create_category(http: AdminHttp, req: CategorySaveReq) -> int:
    return _created_id(await http.post("/product/category/create", req.to_wire()))


async def update_category(http: AdminHttp, req: CategorySaveReq) -> bool:
    return _success(await http.put("/product/category/update", req.to_wire()))


async def update_category_sort_batch(http: AdminHttp, items: List[CategorySortItem]) -> bool:
    payload = {"items": [i.to_wire() for i in items]}
    return _success(await http.put("/product/category/update-sort-batch", payload))


async def delete_category(http: AdminHttp, category_id: int) -> bool:
    return _success(await http.delete("/product/category/delete", {"id": category_id}))


async def get_category_property_list(
    http: AdminHttp, category_id: int, property_type: Optional[int] = None
) -> List[CategoryPropertyResp]:
    data = await http.get(
        "/product/category/property/list",
        {"categoryId": category_id, "propertyType": property_type},
    )
    return [CategoryPropertyResp.model_validate(x) for x in data or []]


async def save_category_property_batch(http: AdminHttp, req: CategoryPropertySaveReq) -> bool:
    return _success(await http.put("/product/category/property/save-batch", req.to_wire()))


# --- Properties & values -------------------------------------------------------

async def get_property_page(http: AdminHttp, page_num: int, page_size: int, **filters) -> PageResp[PropertyResp]:
    data = await http.get("/product/property/page", _page_params(page_num, page_size, filters))
    return PageResp[PropertyResp].model_validate(data or {})


async def get_property_simple_list(http: AdminHttp, property_type: Optional[int] = None) -> List[PropertyResp]:
    data = await http.get("/product/property/simple-list", {"propertyType": property_type})
    return [PropertyResp.model_validate(x) for x in data or []]


async def create_property(http: AdminHttp, req: PropertySaveReq) -> int:
    return _created_id(await http.post("/product/property/create", req.to_wire()))


async def update_property(http: AdminHttp, req: PropertySaveReq) -> bool:
    return _success(await http.put("/product/property/update", req.to_wire()))


async def delete_property(http: AdminHttp, property_id: int) -> bool:
    return _success(await http.delete("/product/property/delete", {"id": property_id}))


async def get_property_value_page(
    http: AdminHttp, page_num: int, page_size: int, **filters
) -> PageResp[PropertyValueResp]:
    data = await http.get("/product/property/value/page", _page_params(page_num, page_size, filters))
    return PageResp[PropertyValueResp].model_validate(data or {})


async def get_property_value_simple_list(http: AdminHttp, property_id: int) -> List[PropertyValueResp]:
    data = await http.get("/product/property/value/simple-list", {"propertyId": property_id})
    return [PropertyValueResp.model_validate(x) for x in data or []]


async def create_property_value(http: AdminHttp, req: PropertyValueSaveReq) -> int:
    return _created_id(await http.post("/product/property/value/create", req.to_wire()))


async def update_property_value(http: AdminHttp, req: PropertyValueSaveReq) -> bool:
    return _success(await http.put("/product/property/value/update", req.to_wire()))


async def delete_property_value(http: AdminHttp, value_id: int) -> bool:
    return _success(await http.delete("/product/property/value/delete", {"id": value_id}))


# --- SPU -------------------------------------------------------------------------

async def get_spu_count(http: AdminHttp) -> SpuCountResp:
    return SpuCountResp.model_validate(await http.get("/product/spu/get-count") or {})


async def get_spu_page(http: AdminHttp, page_num: int, page_size: int, **filters) -> PageResp[SpuResp]:
    data = await http.get("/product/spu/page", _page_params(page_num, page_size, filters))
    return PageResp[SpuResp].model_validate(data or {})


async def get_spu_detail(http: AdminHttp, spu_id: int) -> SpuResp:
    return SpuResp.model_validate(await http.get("/product/spu/get-detail", {"id": spu_id}))


async def create_spu(http: AdminHttp, req: SpuSaveReq) -> int:
    return _created_id(await http.post("/product/spu/create", req.to_wire()))


async def update_spu(http: AdminHttp, req: SpuSaveReq) -> bool:
    return _success(await http.put("/product/spu/update", req.to_wire()))


async def update_spu_status(http: AdminHttp, spu_id: int, status: int) -> bool:
    return _success(await http.put("/product/spu/update-status", {"id": spu_id, "status": status}))


async def delete_spu(http: AdminHttp, spu_id: int) -> bool:
    return _success(await http.delete("/product/spu/delete", {"id": spu_id}))


# --- Comments / favorites / browse history ------------------------------------------

async def get_comment_page(http: AdminHttp, page_num: int, page_size: int, **filters) -> PageResp[CommentResp]:
    data = await http.get("/product/comment/page", _page_params(page_num, page_size, filters))
    return PageResp[CommentResp].model_validate(data or {})


async def create_comment(http: AdminHttp, req: CommentCreateReq) -> bool:
    return _success(await http.post("/product/comment/create", req.to_wire()))


async def update_comment_visible(http: AdminHttp, comment_id: int, visible: bool) -> bool:
    return _success(await http.put("/product/comment/update-visible", {"id": comment_id, "visible": visible}))


async def reply_comment(http: AdminHttp, comment_id: int, reply_content: str) -> bool:
    payload = {"id": comment_id, "replyContent": reply_content}
    return _success(await http.put("/product/comment/reply", payload))


async def get_favorite_page(http: AdminHttp, page_num: int, page_size: int, **filters) -> PageResp[FavoriteResp]:
    data = await http.get("/product/favorite/page", _page_params(page_num, page_size, filters))
    return PageResp[FavoriteResp].model_validate(data or {})


async def get_browse_history_page(
    http: AdminHttp, page_num: int, page_size: int, **filters
) -> PageResp[BrowseHistoryResp]:
    data = await http.get("/product/browse-history/page", _page_params(page_num, page_size, filters))
    return PageResp[BrowseHistoryResp].model_validate(data or {})
