# catalog_console/spu/validation.py
# Pre-submit gate for the SPU form. Rules run in a fixed order and the first
# failure is the only one reported, together with the form section to focus.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from catalog_console.admin_api.models import DELIVERY_TYPE_EXPRESS
from catalog_console.spu.selection import FormState


class FormSection(str, Enum):
    INFO = "info"
    SKU = "sku"
    DELIVERY = "delivery"
    DESCRIPTION = "description"
    OTHER = "other"


@dataclass(frozen=True)
class DraftIssue:
    section: FormSection
    message: str


class DraftValidationError(ValueError):
    def __init__(self, issue: DraftIssue):
        super().__init__(issue.message)
        self.issue = issue

    @property
    def section(self) -> FormSection:
        return self.issue.section


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def check_draft(state: FormState) -> Optional[DraftIssue]:
    draft = state.draft

    if any(_blank(v) for v in (draft.name, draft.keyword, draft.introduction, draft.description, draft.pic_url)):
        return DraftIssue(FormSection.INFO, "Please complete the basic information")

    if not draft.category_id or not draft.brand_id:
        return DraftIssue(FormSection.INFO, "Please select a category and a brand")

    texts = {d.property_id: d.value_text for d in draft.display_properties}
    if any(_blank(texts.get(p.property_id)) for p in state.display_properties if p.required):
        return DraftIssue(FormSection.INFO, "Please fill in the required display properties of the category")

    if draft.spec_type:
        selected = {p.id: p.values for p in state.property_list}
        if any(not selected.get(p.property_id) for p in state.sales_properties if p.required):
            return DraftIssue(FormSection.SKU, "Please select values for every required sales property")
        if not state.property_list:
            return DraftIssue(FormSection.SKU, "Multi-spec products need at least one selected sales property value")

    if not draft.skus:
        return DraftIssue(FormSection.SKU, "Please configure at least one SKU")

    if not draft.delivery_types:
        return DraftIssue(FormSection.DELIVERY, "Please select at least one delivery method")
    if DELIVERY_TYPE_EXPRESS in draft.delivery_types and not draft.delivery_template_id:
        return DraftIssue(FormSection.DELIVERY, "Express delivery requires a delivery template ID")

    if draft.spec_type and any(not s.properties for s in draft.skus):
        return DraftIssue(FormSection.SKU, "Every SKU of a multi-spec product must have a property combination")

    return None


def validate_draft(state: FormState) -> None:
    issue = check_draft(state)
    if issue is not None:
        raise DraftValidationError(issue)
