# catalog_console/screens/engagement.py
# Customer activity: comments (moderation + manual entry), favorites and
# browse history (read only).
from __future__ import annotations

from functools import partial
from typing import Optional

from catalog_console.admin_api import product as product_api
from catalog_console.admin_api.http import AdminHttp
from catalog_console.admin_api.models import BrowseHistoryResp, CommentCreateReq, CommentResp, FavoriteResp
from catalog_console.screens.list_screen import FormInputError, ListScreen, require_fields

COMMENT_IDS_MESSAGE = "userId, spuId and skuId are required"
REPLY_EMPTY_MESSAGE = "Reply content cannot be empty"


class CommentScreen(ListScreen[CommentResp]):
    name = "comment"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_comment_page, http), page_size)
        self.http = http

    async def create(self, req: CommentCreateReq) -> bool:
        try:
            require_fields(req.model_dump(), ("user_id", "spu_id", "sku_id"), COMMENT_IDS_MESSAGE)
        except FormInputError as e:
            return self._reject(e)
        return await self._mutate(lambda: product_api.create_comment(self.http, req), form=True)

    async def reply(self, comment_id: int, content: str) -> bool:
        text = (content or "").strip()
        if not text:
            self.error_message = REPLY_EMPTY_MESSAGE
            return False
        return await self._mutate(lambda: product_api.reply_comment(self.http, comment_id, text))

    async def set_visible(self, comment_id: int, visible: bool) -> bool:
        return await self._mutate(lambda: product_api.update_comment_visible(self.http, comment_id, visible))


class FavoriteScreen(ListScreen[FavoriteResp]):
    name = "favorite"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_favorite_page, http), page_size)


class BrowseHistoryScreen(ListScreen[BrowseHistoryResp]):
    name = "browse-history"

    def __init__(self, http: AdminHttp, page_size: Optional[int] = None):
        super().__init__(partial(product_api.get_browse_history_page, http), page_size)
