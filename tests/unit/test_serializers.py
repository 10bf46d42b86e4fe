"""
Unit tests for response serializers.

1. patient / lab test fields, ids and money as strings, ISO timestamps
2. order without details carries patient_id only
3. order with details nests the patient and each order test with its test
4. serialize_page wraps items in the list envelope
"""
import pytest
from datetime import date
from decimal import Decimal

from laborders.filters import Page
from laborders.serializers import serialize_lab_test, serialize_order, serialize_page, serialize_patient
from laborders.store import OrderStore
from tests.conftest import LabTestFactory, OrderTestFactory, PatientFactory


@pytest.mark.django_db
class TestSerializers:

    def test_patient(self):
        patient = PatientFactory(name='John Doe', dob=date(1990, 1, 15), address='1 Main St')

        data = serialize_patient(patient)

        assert data['id'] == str(patient.id)
        assert data['dob'] == '1990-01-15'
        assert data['address'] == '1 Main St'
        assert data['deleted_at'] is None
        assert data['created_at'] == patient.created_at.isoformat()

    def test_lab_test(self):
        test = LabTestFactory(code='CBC', price=Decimal('100.50'), turnaround_days=2)

        data = serialize_lab_test(test)

        assert data['code'] == 'CBC'
        assert data['price'] == '100.50'
        assert data['turnaround_days'] == 2
        assert data['is_available'] is True

    def test_order_without_details(self):
        order_test = OrderTestFactory()
        order = order_test.order

        data = serialize_order(order)

        assert data['patient_id'] == str(order.patient_id)
        assert data['total_cost'] == str(order.total_cost)
        assert 'patient' not in data
        assert 'order_tests' not in data

    def test_order_with_details(self):
        order_test = OrderTestFactory()
        order = OrderStore().find_by_id(order_test.order_id, with_related=True)

        data = serialize_order(order, include_details=True)

        assert data['patient']['id'] == str(order.patient_id)
        assert data['order_tests'] == [{
            'id': str(order_test.id),
            'test_id': str(order_test.test_id),
            'test': serialize_lab_test(order_test.test),
        }]

    def test_page(self):
        patients = PatientFactory.create_batch(2)

        data = serialize_page(Page(data=patients, total=7, page=1, limit=2), serialize_patient)

        assert [p['id'] for p in data['data']] == [str(p.id) for p in patients]
        assert (data['total'], data['page'], data['limit'], data['total_pages']) == (7, 1, 2, 4)
