# catalog_console/spu/selection.py
# --------------------------------------------------------------------------------------
# SPU form state and its transitions.
#
# Every edit is a plain function FormState -> FormState. Edits that touch the
# sales-value selection run the same pipeline before returning:
#
#     slots -> projection (property_list) -> combinations -> merged SKU rows
#
# so the SKU list is always derived in one synchronous step.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from catalog_console.admin_api.models import SpuResp
from catalog_console.spu.draft import (
    DRAFT_FIELDS,
    EDITABLE_SKU_FIELDS,
    CategoryPropertyOption,
    DisplayPropertyValue,
    ProductDraft,
    PropertyWithValues,
    SalesSlot,
    SkuDraft,
    ValueOption,
    coerce_draft_field,
    coerce_sku_field,
    draft_from_spu,
)
from catalog_console.spu.sku_matrix import build_property_list_from_skus, rebuild_skus

DUPLICATE_VALUE_MESSAGE = "The same value cannot be selected twice for one sales property"

# Draft fields that have their own transition
_GUARDED_DRAFT_FIELDS = {"id", "skus", "spec_type", "display_properties", "category_id"}


class DuplicateSelectionError(ValueError):
    """A value id already sits in another slot of the same property."""

    def __init__(self, property_id: int, value_id: int):
        super().__init__(DUPLICATE_VALUE_MESSAGE)
        self.property_id = property_id
        self.value_id = value_id


@dataclass(frozen=True)
class FormState:
    draft: ProductDraft = ProductDraft()
    # bound + enabled properties of the draft's category, in binding order
    sales_properties: Tuple[CategoryPropertyOption, ...] = ()
    display_properties: Tuple[CategoryPropertyOption, ...] = ()
    # value catalog per sales property id
    value_options: Mapping[int, Tuple[ValueOption, ...]] = field(default_factory=dict)
    slots: Mapping[int, Tuple[SalesSlot, ...]] = field(default_factory=dict)
    # derived from slots; only properties with at least one usable value
    property_list: Tuple[PropertyWithValues, ...] = ()

    def sales_property(self, property_id: int) -> Optional[CategoryPropertyOption]:
        return next((p for p in self.sales_properties if p.property_id == property_id), None)


# --- Pipeline ----------------------------------------------------------------------

def _project(state: FormState) -> Tuple[PropertyWithValues, ...]:
    out: List[PropertyWithValues] = []
    for prop in state.sales_properties:
        options = {o.id: o for o in state.value_options.get(prop.property_id, ())}
        values: Dict[int, ValueOption] = {}
        for slot in state.slots.get(prop.property_id, ()):
            if slot.is_empty:
                continue
            option = options.get(slot.value_id)
            # fresh catalog names win over the name cached in the slot
            name = option.name if option and option.name else slot.value_name
            if not name:
                continue
            option_pic = option.pic_url if option else ""
            pic = (slot.pic_url or option_pic) if prop.support_value_image else option_pic
            values[slot.value_id] = ValueOption(id=slot.value_id, name=name, pic_url=pic or "")
        if values:
            out.append(PropertyWithValues(id=prop.property_id, name=prop.property_name, values=tuple(values.values())))
    return tuple(out)


def _sync_skus(state: FormState) -> FormState:
    draft = state.draft
    if not draft.spec_type:
        if len(draft.skus) == 1:
            return state
        first = draft.skus[0] if draft.skus else SkuDraft()
        return replace(state, draft=replace(draft, skus=(first,)))
    plist = state.property_list
    if not plist or any(not p.values for p in plist):
        return replace(state, draft=replace(draft, skus=()))
    return replace(state, draft=replace(draft, skus=rebuild_skus(draft.skus, plist)))


def resync(state: FormState) -> FormState:
    """Rebuild the projection from the slots, then the SKU rows from the projection."""
    return _sync_skus(replace(state, property_list=_project(state)))


# --- Construction ------------------------------------------------------------------

def new_form_state() -> FormState:
    return FormState()


def state_from_detail(detail: SpuResp) -> FormState:
    """
    Hydrate an existing SPU. Category bindings are not known yet, so the
    projection and slots come from the saved SKU rows themselves.
    """
    draft = draft_from_spu(detail)
    plist = build_property_list_from_skus(draft.skus)
    slots = {
        p.id: tuple(SalesSlot(value_id=v.id, value_name=v.name, pic_url=v.pic_url) for v in p.values)
        for p in plist
    }
    return _sync_skus(FormState(draft=draft, slots=slots, property_list=plist))


# --- Category / catalog ------------------------------------------------------------

def _enabled_sorted(options: Iterable[CategoryPropertyOption]) -> Tuple[CategoryPropertyOption, ...]:
    return tuple(sorted((o for o in options if o.enabled), key=lambda o: (o.sort, o.property_id)))


def change_category(state: FormState, category_id: Optional[int]) -> FormState:
    """
    A different category invalidates its bindings: sales and display bindings,
    the selection and the entered display values are dropped until the new
    category's bindings are set. Re-selecting the same category is a no-op.
    """
    category_id = category_id or 0
    if category_id == state.draft.category_id:
        return state
    draft = replace(state.draft, category_id=category_id, display_properties=())
    return resync(replace(
        state,
        draft=draft,
        sales_properties=(),
        display_properties=(),
        slots={},
    ))


def set_category_properties(
    state: FormState,
    sales: Iterable[CategoryPropertyOption],
    display: Iterable[CategoryPropertyOption],
) -> FormState:
    """Swap in the bindings of the draft's category; slots of unbound properties are dropped."""
    sales_t = _enabled_sorted(sales)
    slots = {p.property_id: tuple(state.slots.get(p.property_id, ())) for p in sales_t}
    return resync(replace(state, sales_properties=sales_t, display_properties=_enabled_sorted(display), slots=slots))


def set_value_options(state: FormState, property_id: int, options: Iterable[ValueOption]) -> FormState:
    value_options = dict(state.value_options)
    value_options[property_id] = tuple(options)
    return resync(replace(state, value_options=value_options))


# --- Slots -----------------------------------------------------------------------

def _with_slots(state: FormState, property_id: int, slots: Tuple[SalesSlot, ...]) -> FormState:
    all_slots = dict(state.slots)
    all_slots[property_id] = slots
    return replace(state, slots=all_slots)


def add_slot(state: FormState, property_id: int) -> FormState:
    """An empty slot selects nothing, so the SKU rows are left alone."""
    current = tuple(state.slots.get(property_id, ()))
    return _with_slots(state, property_id, current + (SalesSlot(),))


def remove_slot(state: FormState, property_id: int, index: int) -> FormState:
    current = tuple(state.slots.get(property_id, ()))
    if not 0 <= index < len(current):
        return state
    return resync(_with_slots(state, property_id, current[:index] + current[index + 1:]))


def set_slot_value(state: FormState, property_id: int, index: int, value_id: Optional[int]) -> FormState:
    """
    None clears the slot. A value already chosen in another slot of the same
    property raises DuplicateSelectionError and nothing changes.
    """
    current = tuple(state.slots.get(property_id, ()))
    if not 0 <= index < len(current):
        return state
    slot = current[index]

    if not value_id:
        updated = replace(slot, value_id=None, value_name="")
    else:
        if any(i != index and s.value_id == value_id for i, s in enumerate(current)):
            raise DuplicateSelectionError(property_id, value_id)
        option = next((o for o in state.value_options.get(property_id, ()) if o.id == value_id), None)
        prop = state.sales_property(property_id)
        if prop is not None and prop.support_value_image:
            pic = slot.pic_url or (option.pic_url if option else "")
        else:
            pic = ""
        updated = replace(
            slot,
            value_id=value_id,
            value_name=(option.name if option and option.name else slot.value_name),
            pic_url=pic,
        )

    slots = current[:index] + (updated,) + current[index + 1:]
    return resync(_with_slots(state, property_id, slots))


def set_slot_picture(state: FormState, property_id: int, index: int, pic_url: str) -> FormState:
    current = tuple(state.slots.get(property_id, ()))
    if not 0 <= index < len(current):
        return state
    slots = current[:index] + (replace(current[index], pic_url=pic_url or ""),) + current[index + 1:]
    return resync(_with_slots(state, property_id, slots))


# --- Spec type ---------------------------------------------------------------------

def set_spec_type(state: FormState, spec_type: bool) -> FormState:
    """
    multi -> single: exactly one SKU (the first, stripped of properties) and no
    selection. single -> multi: no SKUs until values are selected.
    """
    draft = state.draft
    if draft.spec_type == spec_type:
        return state
    cleared = {p.property_id: () for p in state.sales_properties}
    if spec_type:
        skus: Tuple[SkuDraft, ...] = ()
    else:
        first = draft.skus[0] if draft.skus else SkuDraft()
        skus = (replace(first, properties=()),)
    return replace(
        state,
        draft=replace(draft, spec_type=spec_type, skus=skus),
        slots=cleared,
        property_list=(),
    )


# --- SKU rows ----------------------------------------------------------------------

def patch_sku(state: FormState, index: int, **changes: Any) -> FormState:
    skus = state.draft.skus
    if not 0 <= index < len(skus):
        raise IndexError(f"No SKU row at index {index}")
    unknown = set(changes) - set(EDITABLE_SKU_FIELDS)
    if unknown:
        raise KeyError(f"Not an editable SKU field: {', '.join(sorted(unknown))}")
    coerced = {k: coerce_sku_field(k, v) for k, v in changes.items()}
    updated = replace(skus[index], **coerced)
    return replace(state, draft=replace(state.draft, skus=skus[:index] + (updated,) + skus[index + 1:]))


def delete_sku(state: FormState, index: int) -> FormState:
    """
    Multi-spec only. The row's combination comes back on the next selection
    edit, since rows always follow the selected values.
    """
    skus = state.draft.skus
    if not 0 <= index < len(skus):
        raise IndexError(f"No SKU row at index {index}")
    if not state.draft.spec_type:
        raise ValueError("A single-spec product keeps exactly one SKU")
    return replace(state, draft=replace(state.draft, skus=skus[:index] + skus[index + 1:]))


def apply_batch_sku(state: FormState, template: Mapping[str, Any]) -> FormState:
    """Copy the batch row's editable fields onto every SKU row."""
    values = {k: coerce_sku_field(k, template.get(k)) for k in EDITABLE_SKU_FIELDS}
    skus = tuple(replace(s, **values) for s in state.draft.skus)
    return replace(state, draft=replace(state.draft, skus=skus))


# --- Product fields ------------------------------------------------------------------

def patch_draft(state: FormState, **changes: Any) -> FormState:
    bad = [k for k in changes if k not in DRAFT_FIELDS or k in _GUARDED_DRAFT_FIELDS]
    if bad:
        raise KeyError(f"Not a patchable product field: {', '.join(sorted(bad))}")
    normalized = {k: coerce_draft_field(k, v) for k, v in changes.items()}
    return replace(state, draft=replace(state.draft, **normalized))


def patch_display_property(
    state: FormState,
    property_id: int,
    value_text: str,
    property_name: str = "",
    sort: int = 0,
) -> FormState:
    """Blank text removes the entry; otherwise insert or replace in place."""
    current = list(state.draft.display_properties)
    idx = next((i for i, d in enumerate(current) if d.property_id == property_id), -1)
    if not (value_text or "").strip():
        if idx >= 0:
            current.pop(idx)
    else:
        item = DisplayPropertyValue(property_id=property_id, property_name=property_name, value_text=value_text, sort=sort)
        if idx >= 0:
            current[idx] = item
        else:
            current.append(item)
    return replace(state, draft=replace(state.draft, display_properties=tuple(current)))
