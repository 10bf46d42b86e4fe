"""
HTTP boundary. Views only parse, call one service method and serialize.
Errors are raised through to exception_handler.unified_exception_handler.
"""
import logging

from django.apps import apps
from django.http import JsonResponse
from rest_framework.views import APIView

from .filters import PageRequest
from .intake.parsers import (
    parse_create_lab_test,
    parse_create_order,
    parse_create_patient,
    parse_lab_test_filters,
    parse_order_filters,
    parse_patient_filters,
    parse_update_lab_test,
    parse_update_order,
    parse_update_patient,
)
from .serializers import serialize_lab_test, serialize_order, serialize_page, serialize_patient

logger = logging.getLogger(__name__)


def _services():
    return apps.get_app_config('laborders').services


def _page_request(request):
    return PageRequest.from_params(
        request.query_params.get('page'),
        request.query_params.get('limit'),
    )


def _serialize_order_detail(order):
    return serialize_order(order, include_details=True)


# ── Patients ──────────────────────────────────────────────────────────────

class PatientListView(APIView):
    """GET /api/patients/ - list, POST /api/patients/ - register"""

    def get(self, request):
        page = _services().patients.list_patients(
            parse_patient_filters(request.query_params), _page_request(request),
        )
        return JsonResponse(serialize_page(page, serialize_patient))

    def post(self, request):
        patient = _services().patients.create_patient(parse_create_patient(request.data))
        logger.info('Patient created: id=%s', patient.id)
        return JsonResponse(serialize_patient(patient), status=201)


class PatientDetailView(APIView):
    """GET / PATCH / DELETE /api/patients/<patient_id>/"""

    def get(self, request, patient_id):
        return JsonResponse(serialize_patient(_services().patients.get_patient(patient_id)))

    def patch(self, request, patient_id):
        patient = _services().patients.update_patient(patient_id, parse_update_patient(request.data))
        logger.info('Patient updated: id=%s', patient.id)
        return JsonResponse(serialize_patient(patient))

    def delete(self, request, patient_id):
        patient = _services().patients.delete_patient(patient_id)
        logger.info('Patient soft-deleted: id=%s', patient.id)
        return JsonResponse(serialize_patient(patient))


class PatientOrdersView(APIView):
    """GET /api/patients/<patient_id>/orders/ - every live order of one patient"""

    def get(self, request, patient_id):
        services = _services()
        services.patients.get_patient(patient_id)
        orders = services.orders.list_orders_for_patient(patient_id, include_details=True)
        return JsonResponse({'data': [_serialize_order_detail(o) for o in orders]})


# ── Lab tests ─────────────────────────────────────────────────────────────

class LabTestListView(APIView):
    """GET /api/tests/ - list, POST /api/tests/ - add to catalog"""

    def get(self, request):
        page = _services().lab_tests.list_tests(
            parse_lab_test_filters(request.query_params), _page_request(request),
        )
        return JsonResponse(serialize_page(page, serialize_lab_test))

    def post(self, request):
        test = _services().lab_tests.create_test(parse_create_lab_test(request.data))
        logger.info('Lab test created: id=%s code=%s', test.id, test.code)
        return JsonResponse(serialize_lab_test(test), status=201)


class LabTestDetailView(APIView):
    """GET / PATCH / DELETE /api/tests/<test_id>/"""

    def get(self, request, test_id):
        return JsonResponse(serialize_lab_test(_services().lab_tests.get_test(test_id)))

    def patch(self, request, test_id):
        test = _services().lab_tests.update_test(test_id, parse_update_lab_test(request.data))
        logger.info('Lab test updated: id=%s', test.id)
        return JsonResponse(serialize_lab_test(test))

    def delete(self, request, test_id):
        test = _services().lab_tests.delete_test(test_id)
        logger.info('Lab test soft-deleted: id=%s', test.id)
        return JsonResponse(serialize_lab_test(test))


# ── Orders ────────────────────────────────────────────────────────────────

class OrderListView(APIView):
    """GET /api/orders/ - list with patient and tests, POST /api/orders/ - place an order"""

    def get(self, request):
        page = _services().orders.list_orders(
            parse_order_filters(request.query_params), _page_request(request), include_details=True,
        )
        return JsonResponse(serialize_page(page, _serialize_order_detail))

    def post(self, request):
        order = _services().orders.create_order(parse_create_order(request.data))
        logger.info('Order created: id=%s patient=%s', order.id, order.patient_id)
        return JsonResponse(_serialize_order_detail(order), status=201)


class OrderDetailView(APIView):
    """GET / PATCH / DELETE /api/orders/<order_id>/"""

    def get(self, request, order_id):
        return JsonResponse(_serialize_order_detail(_services().orders.get_order(order_id, include_details=True)))

    def patch(self, request, order_id):
        order = _services().orders.update_order(order_id, parse_update_order(request.data))
        logger.info('Order updated: id=%s status=%s', order.id, order.status)
        return JsonResponse(_serialize_order_detail(order))

    def delete(self, request, order_id):
        order = _services().orders.delete_order(order_id)
        logger.info('Order soft-deleted: id=%s', order.id)
        return JsonResponse(serialize_order(order))
