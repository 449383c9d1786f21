#===========================================================================
# catalog_console/routes/catalog_routes.py
# Brands, category tree, category-property bindings, properties and
# property values. Each call builds the matching screen controller, runs
# one load or mutation and returns the screen snapshot.
#===========================================================================

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import (
    BrandSaveReq,
    CategorySaveReq,
    CategorySortItem,
    PropertySaveReq,
    PropertyValueSaveReq,
)
from catalog_console.routes.deps import Paging, get_admin_http, load_page, loaded_or_502, saved_or_400
from catalog_console.screens.binding import BindingScreen
from catalog_console.screens.catalog import BrandScreen, CategoryScreen, PropertyScreen, PropertyValueScreen

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["Catalog"])


# ---------------------------
# Brands
# ---------------------------
@router.get("/brands")
async def list_brands(
    paging: Paging = Depends(),
    name: Optional[str] = None,
    status: Optional[int] = None,
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(BrandScreen(http), paging, name=name, status=status)


@router.get("/brands/simple")
async def list_brands_simple(http: AdminHttp = Depends(get_admin_http)):
    return [b.to_wire() for b in await product_api.get_brand_simple_list(http)]


@router.post("/brands")
async def create_brand(req: BrandSaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = BrandScreen(http)
    req.id = None
    return saved_or_400(await screen.save(req), screen)


@router.put("/brands/{brand_id}")
async def update_brand(brand_id: int, req: BrandSaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = BrandScreen(http)
    req.id = brand_id
    return saved_or_400(await screen.save(req), screen)


@router.delete("/brands/{brand_id}")
async def delete_brand(brand_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = BrandScreen(http)
    return saved_or_400(await screen.delete(brand_id), screen)


# ---------------------------
# Categories
# ---------------------------
@router.get("/categories")
async def list_categories(
    name: Optional[str] = None,
    status: Optional[int] = None,
    http: AdminHttp = Depends(get_admin_http),
):
    screen = CategoryScreen(http)
    ok = await screen.set_filters(name=name, status=status)
    return loaded_or_502(ok, screen.snapshot())


@router.post("/categories")
async def create_category(req: CategorySaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = CategoryScreen(http)
    req.id = None
    return saved_or_400(await screen.save(req), screen)


# declared before /categories/{category_id} so "sort" is not read as an id
@router.put("/categories/sort")
async def update_category_sort(items: List[CategorySortItem], http: AdminHttp = Depends(get_admin_http)):
    screen = CategoryScreen(http)
    return saved_or_400(await screen.update_sort(items), screen)


@router.put("/categories/{category_id}")
async def update_category(category_id: int, req: CategorySaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = CategoryScreen(http)
    req.id = category_id
    return saved_or_400(await screen.save(req), screen)


@router.delete("/categories/{category_id}")
async def delete_category(category_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = CategoryScreen(http)
    return saved_or_400(await screen.delete(category_id), screen)


# ---------------------------
# Category <-> property bindings
# ---------------------------
class BindingRowIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_id: int
    property_type: int
    selected: bool = False
    enabled: bool = True
    required: bool = False
    support_value_image: bool = False
    value_image_required: bool = False
    # left loose so a bad value reaches the screen's sort check
    sort: Any = 0


class BindingSaveBody(BaseModel):
    rows: List[BindingRowIn] = Field(default_factory=list)


@router.get("/categories/{category_id}/bindings")
async def get_bindings(category_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = BindingScreen(http)
    ok = await screen.select_category(category_id)
    return loaded_or_502(ok, screen.snapshot())


@router.put("/categories/{category_id}/bindings")
async def save_bindings(category_id: int, body: BindingSaveBody, http: AdminHttp = Depends(get_admin_http)):
    screen = BindingScreen(http)
    loaded_or_502(await screen.select_category(category_id), screen.snapshot())
    for row in body.rows:
        screen.patch_row(
            row.property_type,
            row.property_id,
            selected=row.selected,
            enabled=row.enabled,
            required=row.required,
            support_value_image=row.support_value_image,
            value_image_required=row.value_image_required,
            sort=row.sort,
        )
    return saved_or_400(await screen.save(), screen)


# ---------------------------
# Properties
# ---------------------------
@router.get("/properties")
async def list_properties(
    paging: Paging = Depends(),
    name: Optional[str] = None,
    property_type: Optional[int] = Query(None, alias="propertyType"),
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(PropertyScreen(http), paging, name=name, propertyType=property_type)


@router.get("/properties/simple")
async def list_properties_simple(
    property_type: Optional[int] = Query(None, alias="propertyType"),
    http: AdminHttp = Depends(get_admin_http),
):
    return [p.to_wire() for p in await product_api.get_property_simple_list(http, property_type)]


@router.post("/properties")
async def create_property(req: PropertySaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyScreen(http)
    req.id = None
    return saved_or_400(await screen.save(req), screen)


@router.put("/properties/{property_id}")
async def update_property(property_id: int, req: PropertySaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyScreen(http)
    req.id = property_id
    return saved_or_400(await screen.save(req), screen)


@router.delete("/properties/{property_id}")
async def delete_property(property_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyScreen(http)
    return saved_or_400(await screen.delete(property_id), screen)


# ---------------------------
# Property values
# ---------------------------
@router.get("/property-values")
async def list_property_values(
    paging: Paging = Depends(),
    property_id: Optional[int] = Query(None, alias="propertyId"),
    name: Optional[str] = None,
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(PropertyValueScreen(http), paging, propertyId=property_id, name=name)


@router.get("/property-values/simple")
async def list_property_values_simple(
    property_id: int = Query(..., alias="propertyId"),
    http: AdminHttp = Depends(get_admin_http),
):
    return [v.to_wire() for v in await product_api.get_property_value_simple_list(http, property_id)]


@router.post("/property-values")
async def create_property_value(req: PropertyValueSaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyValueScreen(http)
    req.id = None
    return saved_or_400(await screen.save(req), screen)


@router.put("/property-values/{value_id}")
async def update_property_value(value_id: int, req: PropertyValueSaveReq, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyValueScreen(http)
    req.id = value_id
    return saved_or_400(await screen.save(req), screen)


@router.delete("/property-values/{value_id}")
async def delete_property_value(value_id: int, http: AdminHttp = Depends(get_admin_http)):
    screen = PropertyValueScreen(http)
    return saved_or_400(await screen.delete(value_id), screen)
