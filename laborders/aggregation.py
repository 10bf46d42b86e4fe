from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from django.db.models import Q

from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import OrderStatus


@dataclass(frozen=True)
class OrderQuote:
    total_cost: Decimal
    ready_date: datetime
    tests: list


def initial_status(status=None) -> str:
    """Orders start PENDING unless the caller picked a status."""
    return status or OrderStatus.PENDING


class OrderAggregator:
    """
    Prices a set of lab tests and works out when their results are ready.

    total_cost = sum of prices
    ready_date = now + slowest turnaround (days)

    Both come from one read of the tests, so they always describe the same set.
    """

    def __init__(self, test_store):
        self.test_store = test_store

    def quote(self, test_ids, now: datetime) -> OrderQuote:
        if not test_ids:
            raise ValidationError(
                message='At least one test is required.',
                detail={'errors': [{'field': 'test_ids', 'message': 'At least one test is required.'}]},
            )

        tests, _ = self.test_store.find_many(where=Q(pk__in=test_ids))

        if len(tests) != len(test_ids):
            found = {str(t.id) for t in tests}
            raise NotFoundError(
                message='One or more tests not found',
                code='LAB_TEST_NOT_FOUND',
                detail={'missing_test_ids': [str(i) for i in test_ids if str(i) not in found]},
            )

        unavailable = [t for t in tests if not t.is_available]
        if unavailable:
            raise ConflictError(
                message=(
                    'The following tests are not available: '
                    + ', '.join(t.name for t in unavailable)
                ),
                code='TESTS_UNAVAILABLE',
                detail={
                    'unavailable_tests': [
                        {'id': str(t.id), 'code': t.code, 'name': t.name} for t in unavailable
                    ],
                },
            )

        total_cost = sum((t.price for t in tests), Decimal('0'))
        slowest = max(t.turnaround_days for t in tests)
        return OrderQuote(
            total_cost=total_cost,
            ready_date=now + timedelta(days=slowest),
            tests=tests,
        )
