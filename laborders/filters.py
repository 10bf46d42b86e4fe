"""
Filter & pagination composer shared by patients, lab tests and orders.

A FilterSpec says, per entity, which filter names map to which ORM lookups
and which text fields a free-text `search` covers. compose_filter() turns a
filters DTO into one Q: named filters are ANDed, `search` is ORed across the
searchable fields and ANDed with the rest.
"""

import math
from dataclasses import dataclass, field
from functools import reduce
from operator import and_, or_
from typing import Any, Callable, Generic, Optional, TypeVar

from django.conf import settings
from django.db.models import Q

T = TypeVar('T')

DEFAULT_PAGE = 1
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class FilterSpec:
    # filter name -> ORM lookup, e.g. {'min_price': 'price__gte'}
    lookups: dict[str, str] = field(default_factory=dict)
    search_fields: tuple[str, ...] = ()


PATIENT_FILTERS = FilterSpec(
    lookups={
        'name': 'name__icontains',
        'gender': 'gender',
        'phone': 'phone__icontains',
    },
    search_fields=('name', 'phone', 'address'),
)

LAB_TEST_FILTERS = FilterSpec(
    lookups={
        'name': 'name__icontains',
        'is_available': 'is_available',
        'min_price': 'price__gte',
        'max_price': 'price__lte',
    },
    search_fields=('name',),
)

ORDER_FILTERS = FilterSpec(
    lookups={
        'patient_id': 'patient_id',
        'status': 'status',
        'min_total_cost': 'total_cost__gte',
        'max_total_cost': 'total_cost__lte',
        'ready_date_from': 'ready_date__gte',
        'ready_date_to': 'ready_date__lte',
    },
    search_fields=('patient__name',),
)


def compose_filter(spec: FilterSpec, filters=None) -> Q:
    """
    filters: a filters DTO (anything with lookups()) or a plain dict.
    Unknown names and None values are ignored. Returns an empty Q when
    nothing applies.
    """
    if filters is None:
        values = {}
    elif hasattr(filters, 'lookups'):
        values = filters.lookups()
    else:
        values = {k: v for k, v in filters.items() if v is not None}

    clauses = [
        Q(**{lookup: values[name]})
        for name, lookup in spec.lookups.items()
        if name in values
    ]

    search = values.get('search')
    if search and spec.search_fields:
        clauses.append(reduce(or_, (Q(**{f'{f}__icontains': search}) for f in spec.search_fields)))

    if not clauses:
        return Q()
    return reduce(and_, clauses)


def _to_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = 10

    @classmethod
    def from_params(cls, page=None, limit=None) -> 'PageRequest':
        """page >= 1; 1 <= limit <= LABORDERS_MAX_PAGE_SIZE, never above 100. Garbage falls back to defaults."""
        default_limit = getattr(settings, 'LABORDERS_DEFAULT_PAGE_SIZE', 10)
        max_limit = min(MAX_PAGE_SIZE, getattr(settings, 'LABORDERS_MAX_PAGE_SIZE', MAX_PAGE_SIZE))
        page = max(DEFAULT_PAGE, _to_int(page, DEFAULT_PAGE))
        limit = min(max_limit, max(1, _to_int(limit, default_limit)))
        return cls(page=page, limit=limit)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    data: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    def as_dict(self, serialize: Optional[Callable[[T], Any]] = None) -> dict:
        return {
            'data': [serialize(item) for item in self.data] if serialize else list(self.data),
            'total': self.total,
            'page': self.page,
            'limit': self.limit,
            'total_pages': self.total_pages,
        }
