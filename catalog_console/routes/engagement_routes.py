# catalog_console/routes/engagement_routes.py
# Comments (moderation), favorites and browse history.
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import CommentCreateReq
from catalog_console.routes.deps import Paging, get_admin_http, load_page, saved_or_400
from catalog_console.screens.engagement import BrowseHistoryScreen, CommentScreen, FavoriteScreen

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["Customer activity"])


class ReplyBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reply_content: str = ""


class VisibleBody(BaseModel):
    visible: bool


@router.get("/comments")
async def list_comments(
    paging: Paging = Depends(),
    spu_id: Optional[int] = Query(None, alias="spuId"),
    spu_name: Optional[str] = Query(None, alias="spuName"),
    user_nickname: Optional[str] = Query(None, alias="userNickname"),
    reply_status: Optional[bool] = Query(None, alias="replyStatus"),
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(
        CommentScreen(http),
        paging,
        spuId=spu_id,
        spuName=spu_name,
        userNickname=user_nickname,
        replyStatus=reply_status,
    )


@router.post("/comments")
async def create_comment(req: CommentCreateReq, http: AdminHttp = Depends(get_admin_http)):
    screen = CommentScreen(http)
    return saved_or_400(await screen.create(req), screen)


@router.put("/comments/{comment_id}/reply")
async def reply_comment(comment_id: int, body: ReplyBody, http: AdminHttp = Depends(get_admin_http)):
    screen = CommentScreen(http)
    return saved_or_400(await screen.reply(comment_id, body.reply_content), screen)


@router.put("/comments/{comment_id}/visible")
async def set_comment_visible(comment_id: int, body: VisibleBody, http: AdminHttp = Depends(get_admin_http)):
    screen = CommentScreen(http)
    return saved_or_400(await screen.set_visible(comment_id, body.visible), screen)


@router.get("/favorites")
async def list_favorites(
    paging: Paging = Depends(),
    user_id: Optional[int] = Query(None, alias="userId"),
    spu_id: Optional[int] = Query(None, alias="spuId"),
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(FavoriteScreen(http), paging, userId=user_id, spuId=spu_id)


@router.get("/browse-history")
async def list_browse_history(
    paging: Paging = Depends(),
    user_id: Optional[int] = Query(None, alias="userId"),
    spu_id: Optional[int] = Query(None, alias="spuId"),
    user_deleted: Optional[bool] = Query(None, alias="userDeleted"),
    http: AdminHttp = Depends(get_admin_http),
):
    return await load_page(BrowseHistoryScreen(http), paging, userId=user_id, spuId=spu_id, userDeleted=user_deleted)
