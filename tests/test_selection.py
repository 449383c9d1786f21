from decimal import Decimal

import pytest

from catalog_console.admin_api.models import SpuResp
from catalog_console.spu import selection
from catalog_console.spu.draft import CategoryPropertyOption, SkuDraft, ValueOption
from catalog_console.spu.selection import DuplicateSelectionError

COLOR = CategoryPropertyOption(1, "Color", 1, support_value_image=True, required=True, sort=10)
SIZE = CategoryPropertyOption(2, "Size", 1, sort=20)
HIDDEN = CategoryPropertyOption(3, "Legacy", 1, enabled=False)


def _multi_state():
    state = selection.new_form_state()
    state = selection.set_spec_type(state, True)
    state = selection.set_category_properties(state, [SIZE, COLOR, HIDDEN], [])
    state = selection.set_value_options(
        state, 1, [ValueOption(11, "Red", "red.png"), ValueOption(12, "Blue", "blue.png")]
    )
    state = selection.set_value_options(state, 2, [ValueOption(21, "M"), ValueOption(22, "L")])
    return state


def _pick(state, property_id, *value_ids):
    for value_id in value_ids:
        state = selection.add_slot(state, property_id)
        index = len(state.slots[property_id]) - 1
        state = selection.set_slot_value(state, property_id, index, value_id)
    return state


def test_category_properties_enabled_only_in_binding_order():
    state = _multi_state()
    assert [p.property_id for p in state.sales_properties] == [1, 2]


def test_new_form_is_single_spec_with_one_sku():
    state = selection.new_form_state()
    assert state.draft.spec_type is False
    assert len(state.draft.skus) == 1


def test_selecting_values_rebuilds_skus():
    state = _pick(_multi_state(), 1, 11, 12)
    assert len(state.draft.skus) == 2
    state = _pick(state, 2, 21, 22)
    assert len(state.draft.skus) == 4
    names = [tuple(p.value_name for p in s.properties) for s in state.draft.skus]
    assert names[0] == ("Red", "M")


def test_empty_slot_does_not_change_skus():
    state = _pick(_multi_state(), 1, 11)
    before = state.draft.skus
    state = selection.add_slot(state, 1)
    assert state.draft.skus == before
    # a property whose slots are all empty is left out of the projection
    state = selection.add_slot(state, 2)
    assert [p.id for p in state.property_list] == [1]


def test_duplicate_value_rejected_and_state_unchanged():
    state = _pick(_multi_state(), 1, 11)
    state = selection.add_slot(state, 1)
    with pytest.raises(DuplicateSelectionError) as err:
        selection.set_slot_value(state, 1, 1, 11)
    assert err.value.property_id == 1
    assert err.value.value_id == 11
    # frozen state: the failed transition produced nothing new
    assert state.slots[1][1].is_empty


def test_entered_sku_data_survives_selection_edits():
    state = _pick(_multi_state(), 1, 11, 12)
    state = selection.patch_sku(state, 0, price="19.90", stock="7")
    state = selection.remove_slot(state, 1, 1)
    assert len(state.draft.skus) == 1
    assert state.draft.skus[0].price == Decimal("19.90")
    assert state.draft.skus[0].stock == 7
    state = selection.add_slot(state, 1)
    state = selection.set_slot_value(state, 1, 1, 12)
    assert [s.price for s in state.draft.skus] == [Decimal("19.90"), Decimal("0.00")]


def test_clearing_last_value_empties_multi_spec_skus():
    state = _pick(_multi_state(), 1, 11)
    state = selection.set_slot_value(state, 1, 0, None)
    assert state.property_list == ()
    assert state.draft.skus == ()


def test_value_pictures_follow_image_support():
    state = _pick(_multi_state(), 1, 11)
    state = _pick(state, 2, 21)
    props = {p.property_id: p for p in state.draft.skus[0].properties}
    assert props[1].value_pic_url == "red.png"
    assert props[2].value_pic_url == ""
    state = selection.set_slot_picture(state, 1, 0, "custom.png")
    props = {p.property_id: p for p in state.draft.skus[0].properties}
    assert props[1].value_pic_url == "custom.png"


def test_spec_type_switches():
    state = _pick(_multi_state(), 1, 11, 12)
    state = selection.patch_sku(state, 1, price="5")
    single = selection.set_spec_type(state, False)
    assert len(single.draft.skus) == 1
    assert single.draft.skus[0].properties == ()
    assert single.property_list == ()
    assert all(not slots for slots in single.slots.values())

    multi = selection.set_spec_type(single, True)
    assert multi.draft.skus == ()
    assert selection.set_spec_type(multi, True) is multi


def test_patch_sku_rejects_unknown_fields_and_rows():
    state = selection.new_form_state()
    with pytest.raises(IndexError):
        selection.patch_sku(state, 3, price="1")
    with pytest.raises(KeyError):
        selection.patch_sku(state, 0, properties=())


def test_batch_fill_copies_editable_fields_to_every_row():
    state = _pick(_multi_state(), 1, 11, 12)
    state = selection.apply_batch_sku(state, {"price": "3.50", "stock": 9, "bar_code": "B1"})
    assert all(s.price == Decimal("3.50") and s.stock == 9 and s.bar_code == "B1" for s in state.draft.skus)
    # combination identity is untouched
    assert [s.properties[0].value_id for s in state.draft.skus] == [11, 12]


def test_patch_draft_guards_derived_fields():
    state = selection.new_form_state()
    state = selection.patch_draft(state, name="Tee", slider_pic_urls=["a.png"], delivery_types=[1])
    assert state.draft.name == "Tee"
    assert state.draft.slider_pic_urls == ("a.png",)
    with pytest.raises(KeyError):
        selection.patch_draft(state, skus=())
    with pytest.raises(KeyError):
        selection.patch_draft(state, nope=1)


def test_display_property_blank_text_removes_entry():
    state = selection.patch_display_property(selection.new_form_state(), 5, "Cotton", property_name="Material")
    assert state.draft.display_properties[0].value_text == "Cotton"
    state = selection.patch_display_property(state, 5, "Linen")
    assert len(state.draft.display_properties) == 1
    state = selection.patch_display_property(state, 5, "  ")
    assert state.draft.display_properties == ()


def test_state_from_detail_rebuilds_slots_from_skus():
    detail = SpuResp.model_validate({
        "id": 9,
        "name": "Tee",
        "specType": True,
        "skus": [
            {"id": 1, "price": 1990, "properties": [
                {"propertyId": 1, "propertyName": "Color", "valueId": 11, "valueName": "Red"},
            ]},
            {"id": 2, "price": 2990, "properties": [
                {"propertyId": 1, "propertyName": "Color", "valueId": 12, "valueName": "Blue"},
            ]},
        ],
    })
    state = selection.state_from_detail(detail)
    assert [s.value_id for s in state.slots[1]] == [11, 12]
    assert [s.id for s in state.draft.skus] == [1, 2]
    assert state.draft.skus[1].price == Decimal("29.90")

    # once bindings and the value catalog arrive, saved data is kept
    state = selection.set_category_properties(state, [COLOR], [])
    state = selection.set_value_options(state, 1, [ValueOption(11, "Red"), ValueOption(12, "Blue")])
    assert [s.id for s in state.draft.skus] == [1, 2]
    assert isinstance(state.draft.skus[0], SkuDraft)


def test_category_is_changed_only_through_its_own_transition():
    state = selection.change_category(selection.new_form_state(), 3)
    state = selection.set_spec_type(state, True)
    state = selection.set_category_properties(state, [COLOR], [])
    state = selection.set_value_options(state, 1, [ValueOption(11, "Red", "red.png")])
    state = _pick(state, 1, 11)
    state = selection.patch_display_property(state, 7, "Cotton")
    assert len(state.draft.skus) == 1
    with pytest.raises(KeyError):
        selection.patch_draft(state, category_id=99)

    moved = selection.change_category(state, 99)
    assert moved.draft.category_id == 99
    assert moved.sales_properties == ()
    assert moved.slots == {}
    assert moved.draft.skus == ()
    assert moved.draft.display_properties == ()
    # value catalogs are per property, not per category
    assert set(moved.value_options) == {1}
    assert selection.change_category(moved, 99) is moved


def test_patched_fields_are_coerced_to_draft_types():
    state = selection.patch_draft(
        selection.new_form_state(),
        brand_id="4",
        delivery_types=["1", 2, 2],
        recommend_hot="true",
        slider_pic_urls=("a.png",),
    )
    assert state.draft.brand_id == 4
    assert state.draft.delivery_types == (1, 2)
    assert state.draft.recommend_hot is True
    assert state.draft.slider_pic_urls == ("a.png",)


@pytest.mark.parametrize(
    "changes",
    [
        {"brand_id": "abc"},
        {"sort": 1.5},
        {"delivery_types": [9]},
        {"delivery_types": "1"},
        {"recommend_new": "maybe"},
    ],
)
def test_bad_field_values_are_rejected(changes):
    state = selection.new_form_state()
    with pytest.raises(ValueError):
        selection.patch_draft(state, **changes)


def test_delete_sku_removes_one_multi_spec_row():
    state = _pick(_pick(_multi_state(), 1, 11, 12), 2, 21)
    state = selection.patch_sku(state, 1, stock=5)
    trimmed = selection.delete_sku(state, 0)
    assert len(trimmed.draft.skus) == 1
    assert trimmed.draft.skus[0].stock == 5
    with pytest.raises(IndexError):
        selection.delete_sku(trimmed, 4)

    # the next selection edit brings the combination back as a fresh row
    regrown = selection.set_slot_picture(trimmed, 1, 0, "red-2.png")
    assert len(regrown.draft.skus) == 2
    assert [s.stock for s in regrown.draft.skus] == [0, 5]


def test_single_spec_keeps_its_only_sku():
    with pytest.raises(ValueError):
        selection.delete_sku(selection.new_form_state(), 0)


def test_catalog_rename_wins_over_hydrated_name():
    detail = SpuResp.model_validate({
        "id": 9,
        "specType": True,
        "skus": [{"id": 1, "properties": [
            {"propertyId": 1, "propertyName": "Color", "valueId": 11, "valueName": "Red"},
        ]}],
    })
    state = selection.state_from_detail(detail)
    state = selection.set_category_properties(state, [COLOR], [])
    state = selection.set_value_options(state, 1, [ValueOption(11, "Crimson")])
    assert state.property_list[0].values[0].name == "Crimson"
    assert state.draft.skus[0].properties[0].value_name == "Crimson"
    assert state.draft.skus[0].id == 1
