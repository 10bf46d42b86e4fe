"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
from datetime import date, timedelta
from decimal import Decimal

import factory
import pytest
from django.test import Client
from django.utils import timezone

from laborders.models import Gender, LabTest, Order, OrderStatus, OrderTest, Patient


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class PatientFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Patient

    name = factory.Sequence(lambda n: f'Patient Number{n}')
    dob = date(1990, 1, 15)
    gender = Gender.MALE
    phone = '+1-555-0100'
    address = None


class LabTestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = LabTest

    code = factory.Sequence(lambda n: f'T{n:03d}')
    name = factory.Sequence(lambda n: f'Lab Test {n}')
    price = Decimal('100.00')
    turnaround_days = 1
    is_available = True


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    patient = factory.SubFactory(PatientFactory)
    total_cost = Decimal('100.00')
    ready_date = factory.LazyFunction(lambda: timezone.now() + timedelta(days=1))
    status = OrderStatus.PENDING


class OrderTestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderTest

    order = factory.SubFactory(OrderFactory)
    test = factory.SubFactory(LabTestFactory)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client():
    """Django test client for integration tests."""
    return Client()


@pytest.fixture
def sample_patient_payload():
    """Minimal valid payload for POST /api/patients/."""
    return {
        'name': 'John Doe',
        'dob': '1990-01-15',
        'gender': 'MALE',
    }


@pytest.fixture
def sample_lab_test_payload():
    """Minimal valid payload for POST /api/tests/."""
    return {
        'code': 'CBC',
        'name': 'Complete Blood Count',
        'price': 100,
        'turnaround_days': 1,
    }
