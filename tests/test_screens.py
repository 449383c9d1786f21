import asyncio

import pytest

from catalog_console.admin_api.http import AdminAuthError
from catalog_console.admin_api.models import (
    SPU_STATUS_DISABLE,
    SPU_STATUS_ENABLE,
    SPU_STATUS_RECYCLE,
    BrandSaveReq,
    CategoryResp,
    CommentCreateReq,
    PropertyValueSaveReq,
)
from catalog_console.screens.catalog import (
    BrandScreen,
    CategoryScreen,
    PropertyValueScreen,
    SpuListScreen,
    build_tree,
    flatten_tree,
    spu_actions,
)
from catalog_console.screens.engagement import CommentScreen, FavoriteScreen
from conftest import fail, ok, page


def _brands(n, start=1):
    return [{"id": i, "name": f"Brand {i}", "picUrl": f"{i}.png"} for i in range(start, start + n)]


def test_list_screen_keeps_rows_when_reload_fails(backend, http):
    backend.on("GET", "/product/brand/page", page(_brands(2), total=12))
    screen = BrandScreen(http, page_size=2)
    assert asyncio.run(screen.load()) is True
    assert screen.total == 12
    assert screen.page_count == 6

    backend.on("GET", "/product/brand/page", fail(500, "Database down"))
    assert asyncio.run(screen.go_to(2)) is False
    assert screen.error_message == "Database down"
    assert [b.id for b in screen.items] == [1, 2]


def test_filter_change_resets_to_first_page(backend, http):
    backend.on("GET", "/product/brand/page", page(_brands(1)))
    screen = BrandScreen(http)
    screen.page_num = 4
    asyncio.run(screen.set_filters(name="Acme", status=None))
    assert screen.page_num == 1
    params = backend.requests[-1].url.params
    assert params["pageNum"] == "1"
    assert params["name"] == "Acme"
    assert "status" not in params


def test_brand_save_requires_name_and_picture(backend, http):
    screen = BrandScreen(http)
    assert asyncio.run(screen.save(BrandSaveReq(name="Acme", pic_url=" "))) is False
    assert screen.form_error == "Please fill in all required fields"
    assert backend.requests == []


def test_brand_create_then_reload(backend, http):
    backend.on("POST", "/product/brand/create", ok({"id": 9}))
    backend.on("GET", "/product/brand/page", page(_brands(1, start=9)))
    screen = BrandScreen(http)
    assert asyncio.run(screen.save(BrandSaveReq(name="Acme", pic_url="a.png"))) is True
    assert [b.id for b in screen.items] == [9]


def test_auth_error_escapes_the_screen(backend, http):
    backend.on("GET", "/product/brand/page", {"message": "expired"}, status=401)
    with pytest.raises(AdminAuthError):
        asyncio.run(BrandScreen(http).load())


def test_category_tree_promotes_orphans():
    cats = [
        CategoryResp(id=1, parent_id=0, name="Apparel"),
        CategoryResp(id=2, parent_id=1, name="Shirts"),
        CategoryResp(id=3, parent_id=99, name="Orphan"),
        CategoryResp(id=4, parent_id=2, name="Polo"),
    ]
    roots = build_tree(cats)
    assert [r.category.id for r in roots] == [1, 3]
    rows = flatten_tree(roots)
    assert [(level, c.name) for level, c in rows] == [
        (0, "Apparel"),
        (1, "Shirts"),
        (2, "Polo"),
        (0, "Orphan"),
    ]


def test_category_screen_rows(backend, http):
    backend.on("GET", "/product/category/list", ok([
        {"id": 1, "parentId": 0, "name": "Apparel"},
        {"id": 2, "parentId": 1, "name": "Shirts"},
    ]))
    screen = CategoryScreen(http)
    assert asyncio.run(screen.set_filters(name="", status=0)) is True
    assert backend.requests[-1].url.params["status"] == "0"
    assert "name" not in backend.requests[-1].url.params
    snap = screen.snapshot()
    assert [(r["level"], r["name"]) for r in snap["rows"]] == [(0, "Apparel"), (1, "Shirts")]


def test_property_value_requires_property_and_name(backend, http):
    screen = PropertyValueScreen(http)
    assert asyncio.run(screen.save(PropertyValueSaveReq(property_id=0, name="Red"))) is False
    assert screen.form_error == "Please fill in the property and the value name"


def test_spu_actions_by_status():
    assert spu_actions(SPU_STATUS_ENABLE) == [("recycle", SPU_STATUS_RECYCLE), ("off-shelf", SPU_STATUS_DISABLE)]
    assert spu_actions(SPU_STATUS_DISABLE) == [("recycle", SPU_STATUS_RECYCLE), ("on-shelf", SPU_STATUS_ENABLE)]
    assert spu_actions(SPU_STATUS_RECYCLE) == [("restore", SPU_STATUS_DISABLE), ("delete", None)]


def test_spu_list_tabs_and_status_switch(backend, http):
    backend.on("GET", "/product/brand/list-all-simple", ok([{"id": 4, "name": "Acme"}]))
    backend.on("GET", "/product/category/list", ok([{"id": 3, "name": "Shirts"}]))
    backend.on("GET", "/product/spu/get-count", ok({"enableCount": 5, "recycleCount": 1}))
    backend.on("GET", "/product/spu/page", page([
        {"id": 50, "name": "Tee", "status": 0, "brandId": 4, "categoryId": 3},
    ]))
    backend.on("PUT", "/product/spu/update-status", ok(True))
    screen = SpuListScreen(http)
    asyncio.run(screen.load_meta())
    asyncio.run(screen.load())
    assert backend.calls("GET", "/product/spu/page")[-1].url.params["status"] == "0"

    asyncio.run(screen.select_tab(SPU_STATUS_RECYCLE))
    assert backend.calls("GET", "/product/spu/page")[-1].url.params["status"] == "-1"

    assert asyncio.run(screen.switch_status(50, SPU_STATUS_DISABLE)) is True
    assert backend.json_of("PUT", "/product/spu/update-status") == {"id": 50, "status": 1}
    snap = screen.snapshot()
    assert snap["counts"]["enableCount"] == 5
    assert snap["list"][0]["brandName"] == "Acme"
    assert snap["list"][0]["statusLabel"] == "On sale"


def test_comment_rules(backend, http):
    screen = CommentScreen(http)
    bad = CommentCreateReq(user_id=0, spu_id=1, sku_id=2)
    assert asyncio.run(screen.create(bad)) is False
    assert screen.form_error == "userId, spuId and skuId are required"
    assert asyncio.run(screen.reply(1, "   ")) is False
    assert screen.error_message == "Reply content cannot be empty"
    assert backend.requests == []

    backend.on("PUT", "/product/comment/reply", ok(True))
    backend.on("PUT", "/product/comment/update-visible", ok(True))
    backend.on("GET", "/product/comment/page", page([]))
    assert asyncio.run(screen.reply(1, " Thanks! ")) is True
    assert backend.json_of("PUT", "/product/comment/reply") == {"id": 1, "replyContent": "Thanks!"}
    assert asyncio.run(screen.set_visible(1, False)) is True
    assert backend.json_of("PUT", "/product/comment/update-visible") == {"id": 1, "visible": False}


def test_favorites_are_read_only_pages(backend, http):
    backend.on("GET", "/product/favorite/page", page([{"id": 1, "userId": 2, "spuId": 3}]))
    screen = FavoriteScreen(http)
    asyncio.run(screen.load())
    assert screen.items[0].spu_id == 3
    assert not hasattr(screen, "delete")
