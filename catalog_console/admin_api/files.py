# catalog_console/admin_api/files.py
# Presigned object-storage URLs: upload = sign, then PUT the bytes straight to storage.
from __future__ import annotations

import logging
import mimetypes

from catalog_console.admin_api.http import AdminApiError, AdminAuthError, AdminHttp
from catalog_console.admin_api.models import (
    PresignedDownloadUrlResp,
    PresignedUploadUrlReq,
    PresignedUploadUrlResp,
)

logger = logging.getLogger("uvicorn.error")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def get_presigned_upload_url(http: AdminHttp, req: PresignedUploadUrlReq) -> PresignedUploadUrlResp:
    data = await http.post("/system/file/presigned-upload-url", req.to_wire())
    return PresignedUploadUrlResp.model_validate(data)


async def get_presigned_download_url(http: AdminHttp, object_url: str) -> PresignedDownloadUrlResp:
    data = await http.post("/system/file/presigned-download-url", {"objectUrl": object_url})
    return PresignedDownloadUrlResp.model_validate(data)


def guess_content_type(file_name: str, content_type: str | None = None) -> str:
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or DEFAULT_CONTENT_TYPE


async def upload_file(
    http: AdminHttp,
    file_name: str,
    content: bytes,
    content_type: str | None = None,
    path_prefix: str | None = None,
) -> str:
    """
    Sign, upload, and return the stored object's URL (the value saved on
    records such as picUrl). The PUT repeats the signed content type.
    """
    ctype = guess_content_type(file_name, content_type)
    sign = await get_presigned_upload_url(
        http,
        PresignedUploadUrlReq(file_name=file_name, content_type=ctype, path_prefix=path_prefix),
    )
    await http.put_bytes(sign.upload_url, content, ctype)
    logger.info("[FILES] uploaded %s (%d bytes) -> %s", file_name, len(content), sign.object_url)
    return sign.object_url


async def resolve_preview_url(http: AdminHttp, object_url: str | None) -> str:
    """Display-time URL for a stored object; "" when empty or when signing fails."""
    if not object_url:
        return ""
    try:
        resp = await get_presigned_download_url(http, object_url)
    except AdminAuthError:
        raise
    except AdminApiError as e:
        logger.info("[FILES] preview unavailable for %s: %s", object_url, e)
        return ""
    return resp.download_url
