"""Schemas for project-scoped records."""
from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from ..models.deadline import DeadlineType
from ..models.document import DocumentType
from ..models.expense import ExpenseCategory, TaxType, UtilityType
from ..models.maintenance import MaintenanceStatus
from ..models.payment import PaymentStatus
from ..models.property import PropertyType
from .common import CustomField, NonEmptyStr, RecordOut, require_other


class PropertyFields(BaseModel):
    code: NonEmptyStr
    name: NonEmptyStr
    address: NonEmptyStr
    type: PropertyType = PropertyType.APARTMENT
    type_other: str | None = None
    surface: float = Field(gt=0)
    rooms: int = Field(default=0, ge=0)
    rent_amount: float | None = Field(default=None, ge=0)
    image_url: str = ""
    custom_fields: list[CustomField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_type_other(self) -> "PropertyFields":
        require_other(self.type, self.type_other, "property type")
        return self


class PropertyOut(RecordOut, PropertyFields):
    creation_date: dt.datetime = Field(validation_alias="created_at")
    is_rented: bool = False


class TenantFields(BaseModel):
    name: NonEmptyStr
    email: NonEmptyStr
    phone: NonEmptyStr
    custom_fields: list[CustomField] = Field(default_factory=list)


class TenantOut(RecordOut, TenantFields):
    contract_id: str | None = None


class ContractFields(BaseModel):
    property_id: NonEmptyStr
    tenant_id: NonEmptyStr
    start_date: dt.date
    end_date: dt.date
    rent_amount: float = Field(gt=0)
    document_url: str = ""
    custom_fields: list[CustomField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dates(self) -> "ContractFields":
        if self.end_date < self.start_date:
            raise ValueError("Contract end date cannot precede its start date")
        return self


class ContractOut(RecordOut, ContractFields):
    pass


class CondominiumExpense(BaseModel):
    kind: Literal["condominium"] = "condominium"


class MaintenanceExpense(BaseModel):
    kind: Literal["maintenance"] = "maintenance"


class UtilityExpense(BaseModel):
    kind: Literal["utilities"] = "utilities"
    utility_type: UtilityType
    utility_type_other: str | None = None
    provider: str | None = None
    details: str | None = None

    @model_validator(mode="after")
    def _check_utility_other(self) -> "UtilityExpense":
        require_other(self.utility_type, self.utility_type_other, "utility type")
        return self


class TaxExpense(BaseModel):
    kind: Literal["taxes"] = "taxes"
    tax_type: TaxType
    tax_type_other: str | None = None
    reference_year: int | None = Field(default=None, ge=1900, le=2200)
    details: str | None = None

    @model_validator(mode="after")
    def _check_tax_other(self) -> "TaxExpense":
        require_other(self.tax_type, self.tax_type_other, "tax type")
        return self


class OtherExpense(BaseModel):
    kind: Literal["other"] = "other"
    category_other: NonEmptyStr


ExpenseCategoryDetails = Annotated[
    Union[CondominiumExpense, MaintenanceExpense, UtilityExpense, TaxExpense, OtherExpense],
    Field(discriminator="kind"),
]


class ExpenseFields(BaseModel):
    property_id: NonEmptyStr
    description: NonEmptyStr
    amount: float = Field(gt=0)
    category: ExpenseCategoryDetails
    date: dt.date
    provider_url: str | None = None
    invoice_url: str | None = None
    invoice_data: str | None = None
    invoice_name: str | None = None

    @model_validator(mode="after")
    def _check_invoice(self) -> "ExpenseFields":
        if self.invoice_data is not None and not self.invoice_data.startswith("data:"):
            raise ValueError("Embedded invoices must be data URLs")
        return self

    @property
    def category_kind(self) -> ExpenseCategory:
        return ExpenseCategory(self.category.kind)


class ExpenseOut(RecordOut, ExpenseFields):
    category: ExpenseCategoryDetails = Field(validation_alias="category_details")


class MaintenanceFields(BaseModel):
    property_id: NonEmptyStr
    description: NonEmptyStr
    status: MaintenanceStatus = MaintenanceStatus.REQUESTED
    request_date: dt.date
    completion_date: dt.date | None = None
    cost: float | None = Field(default=None, ge=0)


class MaintenanceOut(RecordOut, MaintenanceFields):
    pass


class DeadlineFields(BaseModel):
    property_id: NonEmptyStr
    title: NonEmptyStr
    due_date: dt.date
    type: DeadlineType
    type_other: str | None = None
    is_completed: bool = False

    @model_validator(mode="after")
    def _check_type_other(self) -> "DeadlineFields":
        require_other(self.type, self.type_other, "deadline type")
        return self


class DeadlineOut(RecordOut, DeadlineFields):
    document_id: str | None = None


class DocumentFields(BaseModel):
    property_id: NonEmptyStr
    name: NonEmptyStr
    type: DocumentType
    type_other: str | None = None
    upload_date: dt.date = Field(default_factory=dt.date.today)
    file_url: str | None = None
    file_data: str | None = None
    file_name: str | None = None
    expiry_date: dt.date | None = None
    custom_fields: list[CustomField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_document(self) -> "DocumentFields":
        require_other(self.type, self.type_other, "document type")
        if self.file_data is not None and not self.file_data.startswith("data:"):
            raise ValueError("Embedded files must be data URLs")
        return self


class DocumentOut(RecordOut, DocumentFields):
    pass


class PaymentFields(BaseModel):
    contract_id: NonEmptyStr
    property_id: NonEmptyStr
    amount: float = Field(gt=0)
    payment_date: dt.date | None = None
    due_date: dt.date
    reference_month: int = Field(ge=1, le=12)
    reference_year: int = Field(ge=1900, le=2200)
    status: PaymentStatus = PaymentStatus.PENDING


class PaymentOut(RecordOut, PaymentFields):
    pass
