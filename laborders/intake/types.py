"""
DTO dataclasses, the only input shapes the domain services accept.

Parsers in intake/parsers.py build these from raw request payloads; services
never touch raw request data.

Update DTOs default every field to UNSET so "absent from the request" and
"explicitly null" stay distinguishable. changes() returns only the fields
the caller actually sent.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID


class _Unset:
    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET: Any = _Unset()


class _PartialUpdate:
    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


class _Filters:
    def lookups(self) -> dict[str, Any]:
        """Filters that were actually supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


# ── Patients ──────────────────────────────────────────────────────────────

@dataclass
class CreatePatientInput:
    name: str
    dob: date
    gender: str
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class UpdatePatientInput(_PartialUpdate):
    name: Any = UNSET
    dob: Any = UNSET
    gender: Any = UNSET
    phone: Any = UNSET
    address: Any = UNSET


@dataclass
class PatientFilters(_Filters):
    name: Optional[str] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    search: Optional[str] = None  # name, phone, address


# ── Lab tests ─────────────────────────────────────────────────────────────

@dataclass
class CreateLabTestInput:
    code: str
    name: str
    price: Decimal
    turnaround_days: int
    is_available: bool = True


@dataclass
class UpdateLabTestInput(_PartialUpdate):
    code: Any = UNSET
    name: Any = UNSET
    price: Any = UNSET
    turnaround_days: Any = UNSET
    is_available: Any = UNSET


@dataclass
class LabTestFilters(_Filters):
    name: Optional[str] = None
    is_available: Optional[bool] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search: Optional[str] = None  # name


# ── Orders ────────────────────────────────────────────────────────────────

@dataclass
class CreateOrderInput:
    patient_id: UUID
    test_ids: list[UUID] = field(default_factory=list)
    status: Optional[str] = None


@dataclass
class UpdateOrderInput(_PartialUpdate):
    patient_id: Any = UNSET
    test_ids: Any = UNSET
    status: Any = UNSET


@dataclass
class OrderFilters(_Filters):
    patient_id: Optional[UUID] = None
    status: Optional[str] = None
    min_total_cost: Optional[Decimal] = None
    max_total_cost: Optional[Decimal] = None
    ready_date_from: Optional[datetime] = None
    ready_date_to: Optional[datetime] = None
    search: Optional[str] = None  # patient name
