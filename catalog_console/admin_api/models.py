# catalog_console/admin_api/models.py
# Wire shapes of the admin backend. Field names are camelCase on the wire,
# snake_case in Python; unknown fields are kept.
from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# --- Enumerations used by the backend ----------------------------------------

PROPERTY_TYPE_DISPLAY = 0
PROPERTY_TYPE_SALES = 1

DELIVERY_TYPE_EXPRESS = 1
DELIVERY_TYPE_PICK_UP = 2
DELIVERY_TYPE_SAME_CITY = 3

SPU_STATUS_RECYCLE = -1
SPU_STATUS_ENABLE = 0
SPU_STATUS_DISABLE = 1

COMMON_STATUS_ENABLE = 0
COMMON_STATUS_DISABLE = 1


def spu_status_label(status: int) -> str:
    if status == SPU_STATUS_ENABLE:
        return "On sale"
    if status == SPU_STATUS_DISABLE:
        return "Off shelf"
    return "Recycle bin"


def property_type_label(property_type: int) -> str:
    return "Sales property" if property_type == PROPERTY_TYPE_SALES else "Display property"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PageResp(WireModel, Generic[T]):
    total: int = 0
    list: List[T] = Field(default_factory=list)


# --- Auth --------------------------------------------------------------------

class LoginReq(WireModel):
    username: str
    password: str


class LoginResp(WireModel):
    access_token: str
    refresh_token: str = ""
    user_id: Optional[int] = None
    user_type: Optional[int] = None
    client_id: Optional[str] = None
    expires_time: Optional[int] = None


class PermissionUserResp(WireModel):
    id: int
    username: str = ""
    nickname: str = ""
    email: Optional[str] = None
    mobile: Optional[str] = None
    avatar: Optional[str] = None


class PermissionInfoResp(WireModel):
    user: PermissionUserResp
    roles: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)


# --- Catalog -----------------------------------------------------------------

class BrandResp(WireModel):
    id: int
    name: str = ""
    pic_url: str = ""
    sort: int = 0
    description: Optional[str] = None
    status: int = COMMON_STATUS_ENABLE
    create_time: Optional[int] = None


class BrandSaveReq(WireModel):
    id: Optional[int] = None
    name: str
    pic_url: str
    sort: int = 0
    description: Optional[str] = None
    status: int = COMMON_STATUS_ENABLE


class CategoryResp(WireModel):
    id: int
    parent_id: int = 0
    name: str = ""
    is_leaf: Optional[bool] = None
    pic_url: str = ""
    big_pic_url: Optional[str] = None
    sort: int = 0
    status: int = COMMON_STATUS_ENABLE
    create_time: Optional[int] = None


class CategorySaveReq(WireModel):
    id: Optional[int] = None
    parent_id: int = 0
    name: str
    pic_url: str
    big_pic_url: Optional[str] = None
    sort: int = 0
    status: int = COMMON_STATUS_ENABLE


class CategorySortItem(WireModel):
    id: int
    sort: int


class PropertyResp(WireModel):
    id: int
    name: str = ""
    property_type: Optional[int] = None
    input_type: Optional[int] = None
    status: int = COMMON_STATUS_ENABLE
    remark: Optional[str] = None
    create_time: Optional[int] = None


class PropertySaveReq(WireModel):
    id: Optional[int] = None
    name: str
    property_type: int = PROPERTY_TYPE_SALES
    input_type: Optional[int] = None
    status: int = COMMON_STATUS_ENABLE
    remark: Optional[str] = None


class PropertyValueResp(WireModel):
    id: int
    property_id: int
    name: str = ""
    status: int = COMMON_STATUS_ENABLE
    remark: Optional[str] = None
    pic_url: Optional[str] = None
    create_time: Optional[int] = None


class PropertyValueSaveReq(WireModel):
    id: Optional[int] = None
    property_id: int
    name: str
    status: int = COMMON_STATUS_ENABLE
    remark: Optional[str] = None
    pic_url: Optional[str] = None


class CategoryPropertyResp(WireModel):
    id: Optional[int] = None
    category_id: int
    property_id: int
    property_name: str = ""
    property_type: int = PROPERTY_TYPE_SALES
    enabled: bool = True
    required: bool = False
    support_value_image: bool = False
    value_image_required: bool = False
    sort: int = 0


class CategoryPropertySaveItem(WireModel):
    property_id: int
    enabled: bool = True
    required: bool = False
    support_value_image: bool = False
    value_image_required: bool = False
    sort: int = 0


class CategoryPropertySaveReq(WireModel):
    category_id: int
    items: List[CategoryPropertySaveItem] = Field(default_factory=list)


# --- SPU / SKU (money in integer fen) -----------------------------------------

class SkuPropertyResp(WireModel):
    property_id: int
    property_name: str = ""
    value_id: int
    value_name: str = ""
    value_pic_url: Optional[str] = None


class SkuResp(WireModel):
    id: Optional[int] = None
    spu_id: Optional[int] = None
    properties: List[SkuPropertyResp] = Field(default_factory=list)
    price: int = 0
    market_price: int = 0
    cost_price: int = 0
    bar_code: Optional[str] = None
    pic_url: str = ""
    stock: int = 0
    weight: Optional[float] = None
    volume: Optional[float] = None
    sub_commission_first_price: Optional[int] = None
    sub_commission_second_price: Optional[int] = None
    sales_count: Optional[int] = None


class SpuDisplayProperty(WireModel):
    property_id: int
    property_name: Optional[str] = None
    value_text: str = ""
    sort: Optional[int] = None


class SpuResp(WireModel):
    id: int
    name: str = ""
    keyword: str = ""
    introduction: str = ""
    description: str = ""
    bar_code: Optional[str] = None
    category_id: int = 0
    brand_id: int = 0
    pic_url: str = ""
    slider_pic_urls: Optional[List[str]] = None
    material_pic_urls: Optional[List[str]] = None
    video_url: Optional[str] = None
    sort: int = 0
    status: int = SPU_STATUS_ENABLE
    spec_type: bool = False
    delivery_types: Optional[List[int]] = None
    delivery_template_id: Optional[int] = None
    recommend_hot: Optional[bool] = None
    recommend_benefit: Optional[bool] = None
    recommend_best: Optional[bool] = None
    recommend_new: Optional[bool] = None
    recommend_good: Optional[bool] = None
    give_integral: Optional[int] = None
    give_coupon_template_ids: Optional[str] = None
    sub_commission_type: Optional[bool] = None
    activity_orders: Optional[str] = None
    display_properties: Optional[List[SpuDisplayProperty]] = None
    price: int = 0
    market_price: int = 0
    cost_price: int = 0
    stock: int = 0
    sales_count: int = 0
    virtual_sales_count: Optional[int] = None
    browse_count: int = 0
    create_time: Optional[int] = None
    skus: List[SkuResp] = Field(default_factory=list)


class SpuSaveReq(WireModel):
    id: Optional[int] = None
    name: str
    keyword: str
    introduction: str
    description: str
    bar_code: Optional[str] = None
    category_id: int
    brand_id: int
    pic_url: str
    slider_pic_urls: List[str] = Field(default_factory=list)
    video_url: Optional[str] = None
    sort: int = 0
    spec_type: bool = False
    delivery_types: List[int] = Field(default_factory=list)
    delivery_template_id: Optional[int] = None
    recommend_hot: bool = False
    recommend_benefit: bool = False
    recommend_best: bool = False
    recommend_new: bool = False
    recommend_good: bool = False
    give_integral: int = 0
    give_coupon_template_ids: str = ""
    sub_commission_type: bool = False
    activity_orders: str = ""
    display_properties: List[SpuDisplayProperty] = Field(default_factory=list)
    skus: List[SkuResp] = Field(default_factory=list)


class SpuCountResp(WireModel):
    enable_count: int = 0
    disable_count: int = 0
    sold_out_count: int = 0
    alert_stock_count: int = 0
    recycle_count: int = 0


# --- Customer activity ---------------------------------------------------------

class CommentResp(WireModel):
    id: int
    user_id: int
    user_nickname: Optional[str] = None
    spu_id: int
    spu_name: Optional[str] = None
    sku_id: int
    visible: bool = True
    scores: int = 0
    description_scores: int = 0
    benefit_scores: int = 0
    content: Optional[str] = None
    pic_urls: Optional[str] = None
    reply_status: Optional[int] = None
    reply_user_id: Optional[int] = None
    reply_content: Optional[str] = None
    reply_time: Optional[int] = None
    create_time: Optional[int] = None


class CommentCreateReq(WireModel):
    user_id: int
    spu_id: int
    sku_id: int
    user_nickname: Optional[str] = None
    user_avatar: Optional[str] = None
    anonymous: Optional[bool] = None
    order_id: Optional[int] = None
    order_item_id: Optional[int] = None
    scores: Optional[int] = None
    description_scores: Optional[int] = None
    benefit_scores: Optional[int] = None
    content: Optional[str] = None
    pic_urls: Optional[str] = None
    visible: Optional[bool] = None


class FavoriteResp(WireModel):
    id: int
    user_id: int
    spu_id: int
    create_time: Optional[int] = None


class BrowseHistoryResp(WireModel):
    id: int
    user_id: int
    spu_id: int
    user_deleted: bool = False
    create_time: Optional[int] = None


# --- Files -----------------------------------------------------------------------

class PresignedUploadUrlReq(WireModel):
    file_name: str
    content_type: str
    path_prefix: Optional[str] = None


class PresignedUploadUrlResp(WireModel):
    object_key: Optional[str] = None
    upload_url: str
    object_url: str


class PresignedDownloadUrlResp(WireModel):
    download_url: str
