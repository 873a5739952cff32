"""Validation rules on record payloads."""
from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from propman.models.expense import ExpenseCategory
from propman.schemas.records import (
    ContractFields,
    DeadlineFields,
    ExpenseFields,
    PropertyFields,
)


def _property(**overrides):
    data = {"code": "APT-1", "name": "Harbour flat", "address": "1 Quay St", "surface": 1}
    data.update(overrides)
    return PropertyFields(**data)


def _expense(category):
    return ExpenseFields(
        property_id="prop-1",
        description="Quarterly fee",
        amount=120,
        category=category,
        date=date(2026, 3, 1),
    )


def test_property_surface_must_be_positive():
    with pytest.raises(ValidationError):
        _property(surface=0)

    assert _property(surface=1).surface == 1


def test_property_other_type_requires_description():
    with pytest.raises(ValidationError, match="Specifying the property type is required"):
        _property(type="other")

    assert _property(type="other", type_other="Houseboat").type_other == "Houseboat"


def test_property_requires_non_blank_name():
    with pytest.raises(ValidationError):
        _property(name="  ")


def test_other_expense_requires_category_text():
    with pytest.raises(ValidationError):
        _expense({"kind": "other", "category_other": ""})

    expense = _expense({"kind": "other", "category_other": "Legal fees"})
    assert expense.category_kind is ExpenseCategory.OTHER
    assert expense.category.category_other == "Legal fees"


def test_utility_and_tax_other_require_text():
    with pytest.raises(ValidationError):
        _expense({"kind": "utilities", "utility_type": "other"})
    with pytest.raises(ValidationError):
        _expense({"kind": "taxes", "tax_type": "other", "tax_type_other": " "})

    utility = _expense({"kind": "utilities", "utility_type": "other", "utility_type_other": "Heating oil"})
    assert utility.category_kind is ExpenseCategory.UTILITIES


def test_expense_category_kind_must_be_known():
    with pytest.raises(ValidationError):
        _expense({"kind": "fees"})


def test_expense_amount_must_be_positive():
    with pytest.raises(ValidationError):
        ExpenseFields(
            property_id="prop-1",
            description="Refund",
            amount=0,
            category={"kind": "condominium"},
            date=date(2026, 3, 1),
        )


def test_contract_end_cannot_precede_start():
    with pytest.raises(ValidationError, match="end date"):
        ContractFields(
            property_id="prop-1",
            tenant_id="tenant-1",
            start_date=date(2026, 6, 1),
            end_date=date(2026, 5, 31),
            rent_amount=900,
        )


def test_deadline_other_type_requires_text():
    with pytest.raises(ValidationError):
        DeadlineFields(property_id="prop-1", title="Boiler check", due_date=date(2026, 9, 1), type="other")
