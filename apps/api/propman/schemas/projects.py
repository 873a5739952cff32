"""Schemas for users, projects and project snapshots."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.project import ProjectMemberRole
from ..models.user import UserStatus
from .common import NonEmptyStr
from .records import (
    ContractOut,
    DeadlineOut,
    DocumentOut,
    ExpenseOut,
    MaintenanceOut,
    PaymentOut,
    PropertyOut,
    TenantOut,
)


class UserCreate(BaseModel):
    name: NonEmptyStr
    email: NonEmptyStr
    password: str | None = Field(default=None, min_length=4, max_length=72)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Email address is not valid")
        return value.lower()


class UserUpdate(UserCreate):
    pass


class UserSignIn(BaseModel):
    password: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    status: UserStatus
    created_at: datetime


class ProjectMemberIn(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: NonEmptyStr
    role: ProjectMemberRole


class ProjectCreate(BaseModel):
    name: NonEmptyStr


class ProjectUpdate(BaseModel):
    name: NonEmptyStr
    members: list[ProjectMemberIn] = Field(default_factory=list)


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    owner_id: str
    members: list[ProjectMemberIn]


class ProjectSnapshot(BaseModel):
    """Every record scoped to one project, as exported for backup."""

    data_version: int
    exported_at: datetime
    project: ProjectOut
    properties: list[PropertyOut] = Field(default_factory=list)
    tenants: list[TenantOut] = Field(default_factory=list)
    contracts: list[ContractOut] = Field(default_factory=list)
    expenses: list[ExpenseOut] = Field(default_factory=list)
    maintenances: list[MaintenanceOut] = Field(default_factory=list)
    deadlines: list[DeadlineOut] = Field(default_factory=list)
    documents: list[DocumentOut] = Field(default_factory=list)
    payments: list[PaymentOut] = Field(default_factory=list)


class ProjectImport(BaseModel):
    """Snapshot accepted for restore; records stay raw until upgraded to the current version."""

    data_version: int = Field(default=1, ge=1)
    properties: list[dict[str, Any]] = Field(default_factory=list)
    tenants: list[dict[str, Any]] = Field(default_factory=list)
    contracts: list[dict[str, Any]] = Field(default_factory=list)
    expenses: list[dict[str, Any]] = Field(default_factory=list)
    maintenances: list[dict[str, Any]] = Field(default_factory=list)
    deadlines: list[dict[str, Any]] = Field(default_factory=list)
    documents: list[dict[str, Any]] = Field(default_factory=list)
    payments: list[dict[str, Any]] = Field(default_factory=list)
