import asyncio

import httpx
import pytest

from catalog_console.admin_api import auth as auth_api
from catalog_console.admin_api import files as files_api
from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import (
    AdminApiError,
    AdminAuthError,
    AdminBusinessError,
    AdminHttp,
    AdminTransportError,
    unwrap_envelope,
)
from catalog_console.admin_api.models import BrandSaveReq, PropertySaveReq
from conftest import BASE, fail, ok, page


def test_unwrap_envelope():
    assert unwrap_envelope({"code": 200, "data": {"id": 1}}) == {"id": 1}
    assert unwrap_envelope([1, 2]) == [1, 2]
    assert unwrap_envelope({"hello": "world"}) == {"hello": "world"}
    with pytest.raises(AdminBusinessError) as err:
        unwrap_envelope({"code": 1008, "desc": "", "enDesc": "Brand exists"})
    assert err.value.message == "Brand exists"
    assert err.value.code == 1008
    with pytest.raises(AdminBusinessError, match="Request failed: 500"):
        unwrap_envelope({"code": 500})


def test_bearer_header_and_clean_query(backend, http):
    backend.on("GET", "/product/brand/page", page([{"id": 1, "name": "Acme", "picUrl": "a.png"}], total=31))
    result = asyncio.run(product_api.get_brand_page(http, 2, 10, name="", status=None))
    req = backend.requests[-1]
    assert req.headers["Authorization"] == "Bearer access-abc"
    assert dict(req.url.params) == {"pageNum": "2", "pageSize": "10"}
    assert result.total == 31
    assert result.list[0].pic_url == "a.png"


def test_raw_token_when_prefix_disabled(backend, token_store):
    http = AdminHttp(BASE, token_store, token_prefix="", transport=backend.transport())
    backend.on("GET", "/product/brand/list-all-simple", ok([]))
    asyncio.run(product_api.get_brand_simple_list(http))
    assert backend.requests[-1].headers["Authorization"] == "access-abc"


def test_business_error_message(backend, http):
    backend.on("POST", "/product/brand/create", fail(1001, "Brand name already exists"))
    with pytest.raises(AdminBusinessError) as err:
        asyncio.run(product_api.create_brand(http, BrandSaveReq(name="Acme", pic_url="a.png")))
    assert err.value.message == "Brand name already exists"


def test_401_clears_session(backend, http, token_store):
    backend.on("GET", "/system/auth/get-permission-info", {"message": "expired"}, status=401)
    with pytest.raises(AdminAuthError):
        asyncio.run(auth_api.get_permission_info(http))
    assert token_store.access_token == ""
    assert token_store.refresh_token == ""


def test_http_error_uses_body_message(backend, http):
    backend.on("DELETE", "/product/brand/delete", {"desc": "Brand in use"}, status=500)
    with pytest.raises(AdminApiError) as err:
        asyncio.run(product_api.delete_brand(http, 3))
    assert err.value.message == "Brand in use"
    assert err.value.status_code == 500
    assert backend.requests[-1].url.params["id"] == "3"


def test_transport_error(token_store):
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = AdminHttp(BASE, token_store, transport=httpx.MockTransport(boom))
    with pytest.raises(AdminTransportError):
        asyncio.run(product_api.get_spu_count(http))


def test_login_and_logout_manage_tokens(backend, http, token_store):
    token_store.clear()
    backend.on("POST", "/system/auth/login", ok({"accessToken": "new-a", "refreshToken": "new-r", "userId": 1}))
    backend.on("POST", "/system/auth/logout", ok(True))
    resp = asyncio.run(auth_api.login(http, "admin", "secret"))
    assert resp.user_id == 1
    assert backend.json_of("POST", "/system/auth/login") == {"username": "admin", "password": "secret"}
    assert token_store.access_token == "new-a"
    assert token_store.refresh_token == "new-r"

    asyncio.run(auth_api.logout(http))
    assert backend.requests[-1].headers["Authorization"] == "Bearer new-a"
    assert not token_store.is_logged_in


def test_logout_clears_tokens_even_when_backend_fails(backend, http, token_store):
    backend.on("POST", "/system/auth/logout", fail(500, "boom"))
    with pytest.raises(AdminBusinessError):
        asyncio.run(auth_api.logout(http))
    assert not token_store.is_logged_in


def test_created_id_and_success_flags(backend, http):
    backend.on("POST", "/product/property/create", ok(42))
    backend.on("PUT", "/product/property/update", ok(True))
    assert asyncio.run(product_api.create_property(http, PropertySaveReq(name="Color"))) == 42
    assert asyncio.run(product_api.update_property(http, PropertySaveReq(id=42, name="Colour"))) is True
    body = backend.json_of("PUT", "/product/property/update")
    assert body["id"] == 42
    assert body["propertyType"] == 1


def test_upload_puts_bytes_with_signed_content_type(backend, http):
    backend.on("POST", "/system/file/presigned-upload-url", ok({
        "uploadUrl": "http://storage.test/bucket/a.png?sig=1",
        "objectUrl": "http://storage.test/bucket/a.png",
    }))
    backend.on("PUT", "/bucket/a.png", None)
    url = asyncio.run(files_api.upload_file(http, "a.png", b"\x89PNG", path_prefix="brand"))
    assert url == "http://storage.test/bucket/a.png"
    sign = backend.json_of("POST", "/system/file/presigned-upload-url")
    assert sign == {"fileName": "a.png", "contentType": "image/png", "pathPrefix": "brand"}
    put = backend.calls("PUT", "/bucket/a.png")[0]
    assert put.headers["Content-Type"] == "image/png"
    assert "Authorization" not in put.headers
    assert put.content == b"\x89PNG"


def test_preview_url_is_empty_on_failure(backend, http):
    assert asyncio.run(files_api.resolve_preview_url(http, "")) == ""
    backend.on("POST", "/system/file/presigned-download-url", fail(404, "missing"))
    assert asyncio.run(files_api.resolve_preview_url(http, "http://storage.test/x.png")) == ""
    backend.on("POST", "/system/file/presigned-download-url", ok({"downloadUrl": "http://cdn.test/x.png?t=1"}))
    assert asyncio.run(files_api.resolve_preview_url(http, "http://storage.test/x.png")) == "http://cdn.test/x.png?t=1"
