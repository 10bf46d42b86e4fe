"""
Response serializers: ORM object -> JSON-able dict.

Output formatting only. Parsing and validation of input live in
laborders/intake/.
"""
from decimal import Decimal


def _iso(value):
    return value.isoformat() if value is not None else None


def _money(value):
    return f'{Decimal(value):.2f}' if value is not None else None


def serialize_patient(patient):
    return {
        'id': str(patient.id),
        'name': patient.name,
        'dob': _iso(patient.dob),
        'phone': patient.phone,
        'gender': patient.gender,
        'address': patient.address,
        'deleted_at': _iso(patient.deleted_at),
        'created_at': _iso(patient.created_at),
        'updated_at': _iso(patient.updated_at),
    }


def serialize_lab_test(test):
    return {
        'id': str(test.id),
        'code': test.code,
        'name': test.name,
        'price': _money(test.price),
        'turnaround_days': test.turnaround_days,
        'is_available': test.is_available,
        'deleted_at': _iso(test.deleted_at),
        'created_at': _iso(test.created_at),
        'updated_at': _iso(test.updated_at),
    }


def serialize_order(order, include_details=False):
    """With include_details the patient and every order test (with its test) are nested."""
    response = {
        'id': str(order.id),
        'patient_id': str(order.patient_id),
        'total_cost': _money(order.total_cost),
        'ready_date': _iso(order.ready_date),
        'status': order.status,
        'deleted_at': _iso(order.deleted_at),
        'created_at': _iso(order.created_at),
        'updated_at': _iso(order.updated_at),
    }

    if include_details:
        response['patient'] = serialize_patient(order.patient)
        response['order_tests'] = [
            {
                'id': str(order_test.id),
                'test_id': str(order_test.test_id),
                'test': serialize_lab_test(order_test.test),
            }
            for order_test in order.order_tests.all()
        ]

    return response


def serialize_page(page, serialize):
    """List envelope: {data, total, page, limit, total_pages}."""
    return page.as_dict(serialize)
