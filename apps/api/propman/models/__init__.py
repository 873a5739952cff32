"""Expose ORM models."""
from .base import Base, ProjectRecord
from .contract import Contract
from .deadline import Deadline
from .document import Document
from .expense import Expense
from .maintenance import Maintenance
from .payment import Payment
from .project import Project, ProjectMember
from .property import Property
from .tenant import Tenant
from .user import User

__all__ = [
    "Base",
    "Contract",
    "Deadline",
    "Document",
    "Expense",
    "Maintenance",
    "Payment",
    "Project",
    "ProjectMember",
    "ProjectRecord",
    "Property",
    "Tenant",
    "User",
]
