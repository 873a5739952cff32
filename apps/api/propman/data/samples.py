"""Sample project used to seed development databases."""
from __future__ import annotations

from datetime import date

from ..models.deadline import DeadlineType
from ..models.expense import ExpenseCategory
from ..models.maintenance import MaintenanceStatus
from ..models.property import PropertyType

USERS = [
    {"id": "user-owner", "name": "Giulia Rossi", "email": "giulia@example.com", "status": "active"},
    {"id": "user-editor", "name": "Marco Bianchi", "email": "marco@example.com", "status": "active"},
    {"id": "user-viewer", "name": "Sara Verdi", "email": "sara@example.com", "status": "pending"},
]

PROJECT = {
    "id": "proj-demo",
    "name": "Portfolio Milano",
    "owner_id": "user-owner",
    "members": [
        ("user-owner", "owner"),
        ("user-editor", "editor"),
        ("user-viewer", "viewer"),
    ],
}

PROPERTIES = [
    {
        "id": "prop-navigli",
        "code": "MI-001",
        "name": "Navigli Loft",
        "address": "Ripa di Porta Ticinese 21, Milano",
        "type": PropertyType.APARTMENT,
        "surface": 85.0,
        "rooms": 3,
        "is_rented": True,
        "rent_amount": 1450.0,
        "image_url": "https://picsum.photos/seed/navigli/800/600",
        "custom_fields": [
            {"id": "cf-lift", "label": "Lift", "type": "boolean", "value": True},
            {"id": "cf-energy", "label": "Energy class", "type": "text", "value": "B"},
        ],
    },
    {
        "id": "prop-brera-box",
        "code": "MI-002",
        "name": "Brera Garage",
        "address": "Via Solferino 7, Milano",
        "type": PropertyType.GARAGE,
        "surface": 18.0,
        "rooms": 0,
        "is_rented": False,
        "rent_amount": None,
        "image_url": "",
        "custom_fields": [],
    },
]

TENANTS = [
    {
        "id": "tenant-luca",
        "name": "Luca Ferri",
        "email": "luca.ferri@example.com",
        "phone": "+39 333 000 1111",
        "contract_id": "contract-navigli",
    },
]

CONTRACTS = [
    {
        "id": "contract-navigli",
        "property_id": "prop-navigli",
        "tenant_id": "tenant-luca",
        "start_date": date(2025, 2, 1),
        "end_date": date(2029, 1, 31),
        "rent_amount": 1450.0,
        "document_url": "",
    },
]

EXPENSES = [
    {
        "id": "exp-condo-q1",
        "property_id": "prop-navigli",
        "description": "Condominium fees Q1",
        "amount": 420.0,
        "category": ExpenseCategory.CONDOMINIUM,
        "category_details": {"kind": "condominium"},
        "date": date(2026, 1, 15),
    },
    {
        "id": "exp-imu-2026",
        "property_id": "prop-brera-box",
        "description": "IMU first instalment",
        "amount": 96.5,
        "category": ExpenseCategory.TAXES,
        "category_details": {
            "kind": "taxes",
            "tax_type": "imu",
            "tax_type_other": None,
            "reference_year": 2026,
            "details": None,
        },
        "date": date(2026, 6, 16),
    },
]

MAINTENANCES = [
    {
        "id": "maint-boiler",
        "property_id": "prop-navigli",
        "description": "Boiler service",
        "status": MaintenanceStatus.REQUESTED,
        "request_date": date(2026, 9, 2),
        "cost": None,
    },
]

DEADLINES = [
    {
        "id": "deadline-rent-oct",
        "property_id": "prop-navigli",
        "title": "October rent",
        "due_date": date(2026, 10, 5),
        "type": DeadlineType.RENT,
    },
]
