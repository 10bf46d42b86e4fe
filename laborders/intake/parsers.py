"""
Raw payload -> DTO.

Each parse_* function reads a request body (dict) or query mapping, collects
every field problem it finds, and raises one ValidationError with
detail={"errors": [{"field": ..., "message": ...}, ...]} if anything is wrong.
"""

import re
from datetime import date, datetime, time
from datetime import timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from uuid import UUID

from django.utils.dateparse import parse_date, parse_datetime

from ..exceptions import ValidationError
from ..matching import to_utc_date
from ..models import Gender, OrderStatus
from .types import (
    UNSET,
    CreateLabTestInput,
    CreateOrderInput,
    CreatePatientInput,
    LabTestFilters,
    OrderFilters,
    PatientFilters,
    UpdateLabTestInput,
    UpdateOrderInput,
    UpdatePatientInput,
)

LAB_TEST_CODE_RE = re.compile(r'^[A-Z0-9_-]+$')

MAX_PRICE = Decimal('999999')
MAX_TURNAROUND_DAYS = 365


def parse_id(value, field='id'):
    """Coerce a path/body identifier to UUID or raise INVALID_ID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(
            message=f'Invalid {field}.',
            code='INVALID_ID',
            detail={'errors': [{'field': field, 'message': f'Invalid UUID: {value!r}.'}]},
        )


class _Reader:
    """
    Field-by-field reader over one payload.

    partial=True  -> missing keys come back as UNSET (update payloads)
    coerce=True   -> values may arrive as strings (query parameters)
    """

    def __init__(self, data, *, partial=False, coerce=False):
        if data is None:
            data = {}
        if not hasattr(data, 'get') or not hasattr(data, 'keys'):
            raise ValidationError(
                message='Payload must be a JSON object.',
                detail={'errors': [{'field': 'body', 'message': 'Expected an object.'}]},
            )
        self.data = data
        self.partial = partial
        self.coerce = coerce
        self.errors = []

    def error(self, field, message):
        self.errors.append({'field': field, 'message': message})

    def raise_if_errors(self):
        if self.errors:
            raise ValidationError(
                message='Request validation failed.',
                code='VALIDATION_ERROR',
                detail={'errors': self.errors},
            )

    def _missing(self, key, required):
        if key in self.data and not (self.coerce and self.data.get(key) in ('', None)):
            return False
        if self.partial:
            return True
        if required:
            self.error(key, f'{key} is required.')
        return True

    def _absent(self):
        return UNSET if self.partial else None

    def text(self, key, *, max_length, required=True, nullable=False):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if value is None:
            if nullable:
                return None
            self.error(key, f'{key} cannot be null.')
            return UNSET
        if not isinstance(value, str):
            self.error(key, f'{key} must be a string.')
            return UNSET
        value = value.strip()
        if not value:
            if required:
                self.error(key, f'{key} is required.')
                return UNSET
            return None
        if len(value) > max_length:
            self.error(key, f'{key} is too long (max {max_length} characters).')
            return UNSET
        return value

    def choice(self, key, choices, *, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if value not in choices:
            self.error(key, f'{key} must be one of: {", ".join(choices)}.')
            return UNSET
        return value

    def dob(self, key, *, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        try:
            return to_utc_date(value)
        except (TypeError, ValueError):
            self.error(
                key,
                'Invalid date format. Please use ISO 8601 format (YYYY-MM-DD or YYYY-MM-DDTHH:mm:ssZ).',
            )
            return UNSET

    def instant(self, key):
        if self._missing(key, False):
            return self._absent()
        value = self.data.get(key)
        parsed = _to_aware_datetime(value)
        if parsed is None:
            self.error(key, f'{key} must be an ISO 8601 date or datetime.')
            return UNSET
        return parsed

    def decimal(self, key, *, required=True, maximum=None):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
            self.error(key, f'{key} must be a number.')
            return UNSET
        if isinstance(value, str) and not self.coerce:
            self.error(key, f'{key} must be a number.')
            return UNSET
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            self.error(key, f'{key} must be a number.')
            return UNSET
        if not number.is_finite() or number <= 0:
            self.error(key, f'{key} must be positive.')
            return UNSET
        if maximum is not None and number > maximum:
            self.error(key, f'{key} is too high (max {maximum}).')
            return UNSET
        return number

    def integer(self, key, *, minimum, maximum, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, str) and self.coerce and value.strip().lstrip('-').isdigit():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            self.error(key, f'{key} must be an integer.')
            return UNSET
        if value < minimum:
            self.error(key, f'{key} cannot be less than {minimum}.')
            return UNSET
        if value > maximum:
            self.error(key, f'{key} is too high (max {maximum}).')
            return UNSET
        return value

    def boolean(self, key, *, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if self.coerce and isinstance(value, str):
            return value.strip().lower() == 'true'
        if not isinstance(value, bool):
            self.error(key, f'{key} must be a boolean.')
            return UNSET
        return value

    def uuid(self, key, *, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        try:
            return UUID(str(value)) if not isinstance(value, UUID) else value
        except (TypeError, ValueError, AttributeError):
            self.error(key, f'Invalid UUID: {value!r}.')
            return UNSET

    def uuid_list(self, key, *, required=True):
        if self._missing(key, required):
            return self._absent()
        value = self.data.get(key)
        if not isinstance(value, (list, tuple)):
            self.error(key, f'{key} must be a list.')
            return UNSET
        if not value:
            self.error(key, 'At least one test is required.')
            return UNSET
        ids = []
        for i, item in enumerate(value):
            try:
                ids.append(item if isinstance(item, UUID) else UUID(str(item)))
            except (TypeError, ValueError, AttributeError):
                self.error(f'{key}[{i}]', f'Invalid UUID: {item!r}.')
        if len(set(ids)) != len(ids):
            self.error(key, f'{key} must not contain duplicates.')
        return ids


def _to_aware_datetime(value):
    """datetime / date / ISO string -> aware datetime (naive is read as UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
            if parsed is None:
                day = parse_date(value.strip())
                parsed = datetime.combine(day, time.min) if day else None
        except ValueError:
            parsed = None
        if parsed is None:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def _require_some_field(reader, dto):
    if not reader.errors and not dto.changes():
        reader.error('body', 'At least one field must be provided for update.')


# ── Patients ──────────────────────────────────────────────────────────────

def parse_create_patient(data) -> CreatePatientInput:
    r = _Reader(data)
    name = r.text('name', max_length=255)
    dob = r.dob('dob')
    gender = r.choice('gender', Gender.values)
    phone = r.text('phone', max_length=20, required=False, nullable=True)
    address = r.text('address', max_length=500, required=False, nullable=True)
    r.raise_if_errors()
    return CreatePatientInput(name=name, dob=dob, gender=gender, phone=phone, address=address)


def parse_update_patient(data) -> UpdatePatientInput:
    r = _Reader(data, partial=True)
    dto = UpdatePatientInput(
        name=r.text('name', max_length=255),
        dob=r.dob('dob'),
        gender=r.choice('gender', Gender.values),
        phone=r.text('phone', max_length=20, required=False, nullable=True),
        address=r.text('address', max_length=500, required=False, nullable=True),
    )
    _require_some_field(r, dto)
    r.raise_if_errors()
    return dto


def parse_patient_filters(params) -> PatientFilters:
    r = _Reader(params, coerce=True)
    filters = PatientFilters(
        name=r.text('name', max_length=255, required=False),
        gender=r.choice('gender', Gender.values, required=False),
        phone=r.text('phone', max_length=20, required=False),
        search=r.text('search', max_length=255, required=False),
    )
    r.raise_if_errors()
    return filters


# ── Lab tests ─────────────────────────────────────────────────────────────

def _code(r):
    code = r.text('code', max_length=50)
    if isinstance(code, str) and not LAB_TEST_CODE_RE.match(code):
        r.error('code', 'Code must contain only uppercase letters, numbers, hyphens, and underscores.')
        return UNSET
    return code


def parse_create_lab_test(data) -> CreateLabTestInput:
    r = _Reader(data)
    code = _code(r)
    name = r.text('name', max_length=255)
    price = r.decimal('price', maximum=MAX_PRICE)
    turnaround_days = r.integer('turnaround_days', minimum=0, maximum=MAX_TURNAROUND_DAYS)
    is_available = r.boolean('is_available', required=False)
    r.raise_if_errors()
    return CreateLabTestInput(
        code=code,
        name=name,
        price=price,
        turnaround_days=turnaround_days,
        is_available=True if is_available is None else is_available,
    )


def parse_update_lab_test(data) -> UpdateLabTestInput:
    r = _Reader(data, partial=True)
    dto = UpdateLabTestInput(
        code=_code(r),
        name=r.text('name', max_length=255),
        price=r.decimal('price', maximum=MAX_PRICE),
        turnaround_days=r.integer('turnaround_days', minimum=0, maximum=MAX_TURNAROUND_DAYS),
        is_available=r.boolean('is_available'),
    )
    _require_some_field(r, dto)
    r.raise_if_errors()
    return dto


def parse_lab_test_filters(params) -> LabTestFilters:
    r = _Reader(params, coerce=True)
    filters = LabTestFilters(
        name=r.text('name', max_length=255, required=False),
        is_available=r.boolean('is_available', required=False),
        min_price=r.decimal('min_price', required=False),
        max_price=r.decimal('max_price', required=False),
        search=r.text('search', max_length=255, required=False),
    )
    if filters.min_price and filters.max_price and filters.min_price > filters.max_price:
        r.error('min_price', 'Minimum price must be less than or equal to maximum price.')
    r.raise_if_errors()
    return filters


# ── Orders ────────────────────────────────────────────────────────────────

def parse_create_order(data) -> CreateOrderInput:
    r = _Reader(data)
    patient_id = r.uuid('patient_id')
    test_ids = r.uuid_list('test_ids')
    status = r.choice('status', OrderStatus.values, required=False)
    r.raise_if_errors()
    return CreateOrderInput(patient_id=patient_id, test_ids=test_ids, status=status)


def parse_update_order(data) -> UpdateOrderInput:
    r = _Reader(data, partial=True)
    dto = UpdateOrderInput(
        patient_id=r.uuid('patient_id'),
        test_ids=r.uuid_list('test_ids'),
        status=r.choice('status', OrderStatus.values),
    )
    _require_some_field(r, dto)
    r.raise_if_errors()
    return dto


def parse_order_filters(params) -> OrderFilters:
    r = _Reader(params, coerce=True)
    filters = OrderFilters(
        patient_id=r.uuid('patient_id', required=False),
        status=r.choice('status', OrderStatus.values, required=False),
        min_total_cost=r.decimal('min_total_cost', required=False),
        max_total_cost=r.decimal('max_total_cost', required=False),
        ready_date_from=r.instant('ready_date_from'),
        ready_date_to=r.instant('ready_date_to'),
        search=r.text('search', max_length=255, required=False),
    )
    if (
        filters.min_total_cost and filters.max_total_cost
        and filters.min_total_cost > filters.max_total_cost
    ):
        r.error('min_total_cost', 'Minimum total cost must be less than or equal to maximum total cost.')
    if (
        filters.ready_date_from and filters.ready_date_to
        and filters.ready_date_from > filters.ready_date_to
    ):
        r.error('ready_date_from', 'Ready date from must be before or equal to ready date to.')
    r.raise_if_errors()
    return filters
