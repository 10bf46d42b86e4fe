"""
Domain services.

Services hold no mutable state. build_services() wires one instance of each
at startup (see apps.LabOrdersConfig.ready) and the views share them.
"""
from dataclasses import dataclass

from .lab_tests import LabTestService
from .orders import OrderService
from .patients import PatientService

__all__ = ['LabTestService', 'OrderService', 'PatientService', 'ServiceRegistry', 'build_services']


@dataclass(frozen=True)
class ServiceRegistry:
    patients: PatientService
    lab_tests: LabTestService
    orders: OrderService


def build_services() -> ServiceRegistry:
    patients = PatientService()
    lab_tests = LabTestService()
    orders = OrderService(patient_service=patients, test_service=lab_tests)
    return ServiceRegistry(patients=patients, lab_tests=lab_tests, orders=orders)
