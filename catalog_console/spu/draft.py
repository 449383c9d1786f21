# catalog_console/spu/draft.py
# --------------------------------------------------------------------------------------
# In-memory SPU draft: the product fields, its SKU rows and the attribute
# types the SKU engine works on. Everything here is immutable; edits build
# new instances (see selection.py).
# Money fields are yuan Decimals here and integer fen on the wire.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from catalog_console.admin_api.models import (
    DELIVERY_TYPE_EXPRESS,
    DELIVERY_TYPE_PICK_UP,
    DELIVERY_TYPE_SAME_CITY,
    CategoryPropertyResp,
    PropertyValueResp,
    SkuPropertyResp,
    SkuResp,
    SpuDisplayProperty,
    SpuResp,
    SpuSaveReq,
)
from catalog_console.spu.money import ZERO, fen_to_yuan, to_decimal, yuan_to_fen

MONEY_FIELDS = (
    "price",
    "market_price",
    "cost_price",
    "sub_commission_first_price",
    "sub_commission_second_price",
)

# Fields a user types into a SKU row (everything but identity + properties)
EDITABLE_SKU_FIELDS = MONEY_FIELDS + ("stock", "bar_code", "pic_url", "weight", "volume")


# --- Attribute side ----------------------------------------------------------------

@dataclass(frozen=True)
class CategoryPropertyOption:
    """A property bound to the draft's category."""
    property_id: int
    property_name: str
    property_type: int
    enabled: bool = True
    required: bool = False
    support_value_image: bool = False
    value_image_required: bool = False
    sort: int = 0

    @classmethod
    def from_resp(cls, resp: CategoryPropertyResp) -> "CategoryPropertyOption":
        return cls(
            property_id=resp.property_id,
            property_name=resp.property_name,
            property_type=resp.property_type,
            enabled=resp.enabled,
            required=resp.required,
            support_value_image=resp.support_value_image,
            value_image_required=resp.value_image_required,
            sort=resp.sort,
        )


@dataclass(frozen=True)
class ValueOption:
    """One entry of a property's value catalog."""
    id: int
    name: str
    pic_url: str = ""

    @classmethod
    def from_resp(cls, resp: PropertyValueResp) -> "ValueOption":
        return cls(id=resp.id, name=resp.name, pic_url=resp.pic_url or "")


@dataclass(frozen=True)
class SalesSlot:
    value_id: Optional[int] = None
    value_name: str = ""
    pic_url: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.value_id


@dataclass(frozen=True)
class PropertyWithValues:
    """A sales property and the values currently selected for it, in slot order."""
    id: int
    name: str
    values: Tuple[ValueOption, ...] = ()


# --- SKU side --------------------------------------------------------------------

@dataclass(frozen=True)
class SkuProperty:
    property_id: int
    property_name: str
    value_id: int
    value_name: str
    value_pic_url: str = ""


@dataclass(frozen=True)
class SkuDraft:
    properties: Tuple[SkuProperty, ...] = ()
    price: Decimal = ZERO
    market_price: Decimal = ZERO
    cost_price: Decimal = ZERO
    stock: int = 0
    bar_code: str = ""
    pic_url: str = ""
    weight: float = 0.0
    volume: float = 0.0
    sub_commission_first_price: Decimal = ZERO
    sub_commission_second_price: Decimal = ZERO
    id: Optional[int] = None


def coerce_sku_field(name: str, value):
    """Normalize a user-typed value for one SKU field."""
    if name in MONEY_FIELDS:
        return to_decimal(value)
    if name == "stock":
        return int(to_decimal(value))
    if name in ("weight", "volume"):
        return float(to_decimal(value))
    if name in ("bar_code", "pic_url"):
        return "" if value is None else str(value)
    raise KeyError(f"Unknown SKU field: {name}")


@dataclass(frozen=True)
class DisplayPropertyValue:
    property_id: int
    property_name: str = ""
    value_text: str = ""
    sort: int = 0


@dataclass(frozen=True)
class ProductDraft:
    id: Optional[int] = None
    name: str = ""
    keyword: str = ""
    introduction: str = ""
    description: str = ""
    bar_code: str = ""
    category_id: int = 0
    brand_id: int = 0
    pic_url: str = ""
    slider_pic_urls: Tuple[str, ...] = ()
    video_url: str = ""
    sort: int = 0
    spec_type: bool = False
    delivery_types: Tuple[int, ...] = ()
    delivery_template_id: int = 0
    recommend_hot: bool = False
    recommend_benefit: bool = False
    recommend_best: bool = False
    recommend_new: bool = False
    recommend_good: bool = False
    give_integral: int = 0
    give_coupon_template_ids: str = ""
    sub_commission_type: bool = False
    activity_orders: str = ""
    display_properties: Tuple[DisplayPropertyValue, ...] = ()
    skus: Tuple[SkuDraft, ...] = (SkuDraft(),)


DRAFT_FIELDS = frozenset(f.name for f in fields(ProductDraft))
_DRAFT_DEFAULTS = {f.name: f.default for f in fields(ProductDraft)}

DELIVERY_TYPES = frozenset({DELIVERY_TYPE_EXPRESS, DELIVERY_TYPE_PICK_UP, DELIVERY_TYPE_SAME_CITY})


def _as_int(name: str, value) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        d = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"{name} must be an integer") from None
    if not d.is_finite() or d != d.to_integral_value():
        raise ValueError(f"{name} must be an integer")
    return int(d)


def _as_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return False
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean")


def _as_list(name: str, value):
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"{name} must be a list")
    return value


def coerce_draft_field(name: str, value):
    """Normalize one product field to the type ProductDraft holds; bad input raises ValueError."""
    if name == "delivery_types":
        types = tuple(_as_int(name, v) for v in _as_list(name, value))
        unknown = [t for t in types if t not in DELIVERY_TYPES]
        if unknown:
            raise ValueError(f"Unknown delivery type: {unknown[0]}")
        return tuple(dict.fromkeys(types))
    if name == "slider_pic_urls":
        return tuple("" if v is None else str(v) for v in _as_list(name, value))
    if name not in _DRAFT_DEFAULTS:
        raise KeyError(f"Unknown product field: {name}")
    default = _DRAFT_DEFAULTS[name]
    # bool before int: bool is an int subclass
    if isinstance(default, bool):
        return _as_bool(name, value)
    if isinstance(default, int):
        return _as_int(name, value)
    if isinstance(default, str):
        return "" if value is None else str(value)
    raise KeyError(f"Not a plain product field: {name}")


# --- Wire conversion -------------------------------------------------------------

def sku_from_resp(sku: SkuResp) -> SkuDraft:
    return SkuDraft(
        id=sku.id,
        properties=tuple(
            SkuProperty(
                property_id=p.property_id,
                property_name=p.property_name,
                value_id=p.value_id,
                value_name=p.value_name,
                value_pic_url=p.value_pic_url or "",
            )
            for p in sku.properties
        ),
        price=fen_to_yuan(sku.price),
        market_price=fen_to_yuan(sku.market_price),
        cost_price=fen_to_yuan(sku.cost_price),
        stock=sku.stock,
        bar_code=sku.bar_code or "",
        pic_url=sku.pic_url or "",
        weight=sku.weight or 0.0,
        volume=sku.volume or 0.0,
        sub_commission_first_price=fen_to_yuan(sku.sub_commission_first_price),
        sub_commission_second_price=fen_to_yuan(sku.sub_commission_second_price),
    )


def sku_to_resp(sku: SkuDraft) -> SkuResp:
    return SkuResp(
        id=sku.id,
        properties=[
            SkuPropertyResp(
                property_id=p.property_id,
                property_name=p.property_name,
                value_id=p.value_id,
                value_name=p.value_name,
                value_pic_url=p.value_pic_url or None,
            )
            for p in sku.properties
        ],
        price=yuan_to_fen(sku.price),
        market_price=yuan_to_fen(sku.market_price),
        cost_price=yuan_to_fen(sku.cost_price),
        bar_code=sku.bar_code,
        pic_url=sku.pic_url,
        stock=sku.stock,
        weight=sku.weight,
        volume=sku.volume,
        sub_commission_first_price=yuan_to_fen(sku.sub_commission_first_price),
        sub_commission_second_price=yuan_to_fen(sku.sub_commission_second_price),
    )


def draft_from_spu(detail: SpuResp) -> ProductDraft:
    skus = tuple(sku_from_resp(s) for s in detail.skus) or (SkuDraft(),)
    return ProductDraft(
        id=detail.id,
        name=detail.name,
        keyword=detail.keyword,
        introduction=detail.introduction,
        description=detail.description,
        bar_code=detail.bar_code or "",
        category_id=detail.category_id,
        brand_id=detail.brand_id,
        pic_url=detail.pic_url,
        slider_pic_urls=tuple(detail.slider_pic_urls or ()),
        video_url=detail.video_url or "",
        sort=detail.sort,
        spec_type=detail.spec_type,
        delivery_types=tuple(detail.delivery_types or ()),
        delivery_template_id=detail.delivery_template_id or 0,
        recommend_hot=bool(detail.recommend_hot),
        recommend_benefit=bool(detail.recommend_benefit),
        recommend_best=bool(detail.recommend_best),
        recommend_new=bool(detail.recommend_new),
        recommend_good=bool(detail.recommend_good),
        give_integral=detail.give_integral or 0,
        give_coupon_template_ids=detail.give_coupon_template_ids or "",
        sub_commission_type=bool(detail.sub_commission_type),
        activity_orders=detail.activity_orders or "",
        display_properties=tuple(
            DisplayPropertyValue(
                property_id=d.property_id,
                property_name=d.property_name or "",
                value_text=d.value_text,
                sort=d.sort or 0,
            )
            for d in (detail.display_properties or ())
        ),
        skus=skus,
    )


def draft_to_save_request(draft: ProductDraft) -> SpuSaveReq:
    """Submit payload: money back to fen, blank slider pictures and display texts dropped."""
    return SpuSaveReq(
        id=draft.id,
        name=draft.name,
        keyword=draft.keyword,
        introduction=draft.introduction,
        description=draft.description,
        bar_code=draft.bar_code,
        category_id=draft.category_id,
        brand_id=draft.brand_id,
        pic_url=draft.pic_url,
        slider_pic_urls=[u for u in draft.slider_pic_urls if u],
        video_url=draft.video_url,
        sort=draft.sort,
        spec_type=draft.spec_type,
        delivery_types=list(draft.delivery_types),
        delivery_template_id=draft.delivery_template_id,
        recommend_hot=draft.recommend_hot,
        recommend_benefit=draft.recommend_benefit,
        recommend_best=draft.recommend_best,
        recommend_new=draft.recommend_new,
        recommend_good=draft.recommend_good,
        give_integral=draft.give_integral,
        give_coupon_template_ids=draft.give_coupon_template_ids,
        sub_commission_type=draft.sub_commission_type,
        activity_orders=draft.activity_orders,
        display_properties=[
            SpuDisplayProperty(
                property_id=d.property_id,
                property_name=d.property_name or None,
                value_text=d.value_text,
                sort=d.sort,
            )
            for d in draft.display_properties
            if d.value_text.strip()
        ],
        skus=[sku_to_resp(s) for s in draft.skus],
    )
