from django.utils import timezone

from ..aggregation import OrderAggregator, initial_status
from ..exceptions import NotFoundError
from ..filters import ORDER_FILTERS, Page, PageRequest, compose_filter
from ..intake.parsers import parse_id
from ..intake.types import CreateOrderInput, OrderFilters, UpdateOrderInput
from ..models import Order
from ..store import OrderStore
from .lab_tests import LabTestService
from .patients import PatientService


class OrderService:
    """
    Orders bundle lab tests for one patient.

    total_cost and ready_date are never taken from the caller; they are
    recomputed from the tests every time the test set is written.

    Status may be set to any of the four values at creation or update, in any
    direction (COMPLETED -> PENDING included). There is no transition graph.
    """

    def __init__(self, store=None, patient_service=None, test_service=None,
                 aggregator=None, clock=timezone.now):
        self.store = store or OrderStore()
        self.patient_service = patient_service or PatientService()
        self.test_service = test_service or LabTestService()
        self.aggregator = aggregator or OrderAggregator(self.test_service.store)
        self.clock = clock

    def create_order(self, data: CreateOrderInput) -> Order:
        patient = self.patient_service.get_patient(data.patient_id)
        quote = self.aggregator.quote(data.test_ids, now=self.clock())

        order = self.store.create_with_tests(
            {
                'patient': patient,
                'total_cost': quote.total_cost,
                'ready_date': quote.ready_date,
                'status': initial_status(data.status),
            },
            [t.pk for t in quote.tests],
        )
        return self.get_order(order.pk, include_details=True)

    def get_order(self, order_id, include_details=False) -> Order:
        order_id = parse_id(order_id, 'order_id')
        order = self.store.find_by_id(order_id, with_related=include_details)
        if order is None:
            raise NotFoundError(
                message=f'Order with ID {order_id} not found',
                code='ORDER_NOT_FOUND',
                detail={'order_id': str(order_id)},
            )
        return order

    def list_orders(self, filters: OrderFilters = None, page: PageRequest = None,
                    include_details=False) -> Page:
        page = page or PageRequest.from_params()
        items, total = self.store.find_many(
            compose_filter(ORDER_FILTERS, filters), page, with_related=include_details,
        )
        return Page(data=items, total=total, page=page.page, limit=page.limit)

    def list_orders_for_patient(self, patient_id, include_details=False) -> list[Order]:
        patient_id = parse_id(patient_id, 'patient_id')
        items, _ = self.store.find_many(
            compose_filter(ORDER_FILTERS, {'patient_id': patient_id}),
            with_related=include_details,
        )
        return items

    def count_orders(self, filters: OrderFilters = None) -> int:
        return self.store.count(compose_filter(ORDER_FILTERS, filters))

    def update_order(self, order_id, data: UpdateOrderInput) -> Order:
        order = self.get_order(order_id)
        changes = data.changes()

        fields = {}
        if 'patient_id' in changes:
            fields['patient'] = self.patient_service.get_patient(changes['patient_id'])
        if 'status' in changes:
            fields['status'] = changes['status']

        test_ids = None
        if 'test_ids' in changes:
            quote = self.aggregator.quote(changes['test_ids'], now=self.clock())
            fields['total_cost'] = quote.total_cost
            fields['ready_date'] = quote.ready_date
            test_ids = [t.pk for t in quote.tests]

        self.store.update_with_tests(order.pk, fields, test_ids)
        return self.get_order(order.pk, include_details=True)

    def delete_order(self, order_id) -> Order:
        order = self.get_order(order_id)
        return self.store.delete(order.pk)
