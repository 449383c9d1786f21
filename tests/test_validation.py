from dataclasses import replace

import pytest

from catalog_console.admin_api.models import DELIVERY_TYPE_EXPRESS, DELIVERY_TYPE_PICK_UP
from catalog_console.spu import selection
from catalog_console.spu.draft import CategoryPropertyOption, ValueOption
from catalog_console.spu.validation import DraftValidationError, FormSection, check_draft, validate_draft

COLOR = CategoryPropertyOption(1, "Color", 1, required=True)
MATERIAL = CategoryPropertyOption(7, "Material", 0, required=True)

BASICS = dict(
    name="Tee",
    keyword="tee",
    introduction="Soft tee",
    description="<p>Soft tee</p>",
    pic_url="tee.png",
    brand_id=4,
    delivery_types=[DELIVERY_TYPE_PICK_UP],
)


def _valid_single():
    state = selection.patch_draft(selection.new_form_state(), **BASICS)
    return selection.change_category(state, 3)


def _valid_multi():
    state = selection.set_spec_type(_valid_single(), True)
    state = selection.set_category_properties(state, [COLOR], [MATERIAL])
    state = selection.set_value_options(state, 1, [ValueOption(11, "Red")])
    state = selection.add_slot(state, 1)
    state = selection.set_slot_value(state, 1, 0, 11)
    return selection.patch_display_property(state, 7, "Cotton")


def test_valid_drafts_pass():
    assert check_draft(_valid_single()) is None
    assert check_draft(_valid_multi()) is None
    validate_draft(_valid_multi())


def test_basic_info_checked_before_category():
    state = selection.patch_draft(_valid_single(), name="  ")
    state = selection.change_category(state, 0)
    issue = check_draft(state)
    assert issue.section == FormSection.INFO
    assert issue.message == "Please complete the basic information"


def test_category_and_brand_required():
    issue = check_draft(selection.patch_draft(_valid_single(), brand_id=0))
    assert issue.message == "Please select a category and a brand"


def test_required_display_property():
    state = selection.patch_display_property(_valid_multi(), 7, "")
    issue = check_draft(state)
    assert issue.section == FormSection.INFO
    assert "display properties" in issue.message


def test_required_sales_property_needs_values():
    state = selection.set_slot_value(_valid_multi(), 1, 0, None)
    issue = check_draft(state)
    assert issue.section == FormSection.SKU
    assert issue.message == "Please select values for every required sales property"


def test_multi_spec_without_any_selection():
    state = selection.set_spec_type(_valid_single(), True)
    issue = check_draft(state)
    assert issue.section == FormSection.SKU
    assert issue.message == "Multi-spec products need at least one selected sales property value"


def test_delivery_rules():
    issue = check_draft(selection.patch_draft(_valid_single(), delivery_types=[]))
    assert issue.section == FormSection.DELIVERY
    assert issue.message == "Please select at least one delivery method"

    express = selection.patch_draft(_valid_single(), delivery_types=[DELIVERY_TYPE_EXPRESS])
    assert check_draft(express).message == "Express delivery requires a delivery template ID"
    assert check_draft(selection.patch_draft(express, delivery_template_id=5)) is None


def test_validate_draft_raises_with_section():
    with pytest.raises(DraftValidationError) as err:
        validate_draft(selection.patch_draft(_valid_single(), pic_url=""))
    assert err.value.section == FormSection.INFO


def test_multi_spec_needs_at_least_one_sku():
    state = selection.delete_sku(_valid_multi(), 0)
    issue = check_draft(state)
    assert issue.section == FormSection.SKU
    assert issue.message == "Please configure at least one SKU"


def _sku_without_combination(state):
    first = replace(state.draft.skus[0], properties=())
    return replace(state, draft=replace(state.draft, skus=(first,)))


def test_multi_spec_sku_must_carry_a_combination():
    issue = check_draft(_sku_without_combination(_valid_multi()))
    assert issue.section == FormSection.SKU
    assert issue.message == "Every SKU of a multi-spec product must have a property combination"


def test_delivery_checked_before_sku_combinations():
    state = _sku_without_combination(selection.patch_draft(_valid_multi(), delivery_types=[]))
    assert check_draft(state).section == FormSection.DELIVERY


def test_string_delivery_types_still_trigger_the_template_rule():
    state = selection.patch_draft(_valid_single(), delivery_types=["1"])
    assert state.draft.delivery_types == (DELIVERY_TYPE_EXPRESS,)
    assert check_draft(state).message == "Express delivery requires a delivery template ID"
