# catalog_console/spu/sku_matrix.py
# --------------------------------------------------------------------------------------
# SKU matrix for multi-spec products.
# From the values selected per sales property, build every combination (one SKU
# each) and carry already-entered price/stock/picture data over to the
# combinations that survive an edit.
#
# Identity of a SKU row = its value ids, sorted numerically. Property order and
# names never take part in matching; fresh names always win for display.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from catalog_console.spu.draft import (
    CategoryPropertyOption,
    PropertyWithValues,
    SkuDraft,
    SkuProperty,
    ValueOption,
)

Combination = Tuple[SkuProperty, ...]
SkuKey = Tuple[int, ...]


def build_sku_key(properties: Iterable[SkuProperty] | None) -> SkuKey:
    """(12, 3) and (3, 12) are the same SKU; single-spec rows key as ()."""
    return tuple(sorted(p.value_id for p in (properties or ())))


def build_combinations(property_list: Sequence[PropertyWithValues]) -> List[Combination]:
    """
    Cartesian product of the selected values.

    Properties are folded in input order; for each value (slot order) every
    partial combination built so far is copied and extended. The first
    property therefore varies fastest:

        Color=[Red, Blue], Size=[M, L]
        -> (Red, M), (Blue, M), (Red, L), (Blue, L)

    No properties -> []. Any property without values -> [].
    """
    if not property_list:
        return []
    combinations: List[Combination] = [()]
    for prop in property_list:
        nxt: List[Combination] = []
        for value in prop.values:
            for combination in combinations:
                nxt.append(combination + (
                    SkuProperty(
                        property_id=prop.id,
                        property_name=prop.name,
                        value_id=value.id,
                        value_name=value.name,
                        value_pic_url=value.pic_url or "",
                    ),
                ))
        combinations = nxt
    return combinations


def merge_skus(previous_skus: Sequence[SkuDraft], combinations: Sequence[Combination]) -> Tuple[SkuDraft, ...]:
    """
    One SKU per combination, in combination order. A previous row with the
    same key keeps all of its fields except `properties`; anything else starts
    from a blank SkuDraft. Rows whose key is gone are dropped.
    """
    by_key: Dict[SkuKey, SkuDraft] = {}
    for sku in previous_skus:
        # a later row with the same key wins
        by_key[build_sku_key(sku.properties)] = sku

    merged: List[SkuDraft] = []
    for properties in combinations:
        existing = by_key.get(build_sku_key(properties))
        base = existing if existing is not None else SkuDraft()
        merged.append(replace(base, properties=tuple(properties)))
    return tuple(merged)


def rebuild_skus(previous_skus: Sequence[SkuDraft], property_list: Sequence[PropertyWithValues]) -> Tuple[SkuDraft, ...]:
    return merge_skus(previous_skus, build_combinations(property_list))


def build_property_list_from_skus(skus: Sequence[SkuDraft]) -> Tuple[PropertyWithValues, ...]:
    """
    Recover the selection projection from saved SKU rows (edit/view of an
    existing SPU): properties and values in first-seen order, values deduplicated.
    """
    order: List[int] = []
    names: Dict[int, str] = {}
    values: Dict[int, List[ValueOption]] = {}
    for sku in skus:
        for p in sku.properties:
            if p.property_id not in values:
                order.append(p.property_id)
                names[p.property_id] = p.property_name
                values[p.property_id] = []
            if not any(v.id == p.value_id for v in values[p.property_id]):
                values[p.property_id].append(
                    ValueOption(id=p.value_id, name=p.value_name, pic_url=p.value_pic_url or "")
                )
    return tuple(PropertyWithValues(id=pid, name=names[pid], values=tuple(values[pid])) for pid in order)


# --- Display helpers ---------------------------------------------------------------

def find_image_property_id(
    sales_properties: Sequence[CategoryPropertyOption],
    property_list: Sequence[PropertyWithValues],
) -> Optional[int]:
    """The property whose values carry pictures (usually the colour)."""
    for opt in sales_properties:
        if opt.support_value_image:
            return opt.property_id
    for prop in property_list:
        name = (prop.name or "").lower()
        if "色" in name or "colo" in name:
            return prop.id
    return None


def order_sku_rows(
    skus: Sequence[SkuDraft],
    image_property_id: Optional[int],
) -> List[Tuple[int, SkuDraft]]:
    """
    (source_index, sku) pairs grouped by the picture property's value id;
    ties keep source order. Rows without that property sort last.
    """
    rows = list(enumerate(skus))
    if image_property_id is None:
        return rows

    def _value_id(sku: SkuDraft) -> float:
        for p in sku.properties:
            if p.property_id == image_property_id:
                return p.value_id
        return float("inf")

    return sorted(rows, key=lambda row: (_value_id(row[1]), row[0]))


def resolve_sku_display_pic_url(sku: SkuDraft, fallback: str = "") -> str:
    if sku.pic_url.strip():
        return sku.pic_url
    for p in sku.properties:
        if (p.value_pic_url or "").strip():
            return p.value_pic_url
    return fallback or ""
