# catalog_console/routes/file_routes.py
# Picture uploads for brand/category/SPU/SKU forms and preview URL signing.
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from catalog_console.admin_api import files as files_api
from catalog_console.admin_api.http import AdminHttp
from catalog_console.routes.deps import get_admin_http

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.post("/upload")
async def upload(
    file: UploadFile = File(...),
    path_prefix: Optional[str] = Form(None, alias="pathPrefix"),
    http: AdminHttp = Depends(get_admin_http),
):
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    object_url = await files_api.upload_file(
        http,
        file.filename or "upload.bin",
        content,
        content_type=file.content_type,
        path_prefix=path_prefix,
    )
    preview_url = await files_api.resolve_preview_url(http, object_url)
    return {"objectUrl": object_url, "previewUrl": preview_url}


@router.get("/preview")
async def preview(object_url: str = Query("", alias="objectUrl"), http: AdminHttp = Depends(get_admin_http)):
    return {"url": await files_api.resolve_preview_url(http, object_url)}
