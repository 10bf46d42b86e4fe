import logging
from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from laborders.exceptions import ConflictError
from laborders.intake.types import CreateLabTestInput, CreateOrderInput, CreatePatientInput
from laborders.models import Gender, OrderStatus
from laborders.services import build_services

logger = logging.getLogger(__name__)


# ---------------------------
# Demo data
# ---------------------------
DEMO_PATIENTS = [
    # (name, dob, gender, phone, address)
    ('John Doe', date(1985, 6, 10), Gender.MALE, '+1-555-0101', '123 Main St, New York, NY 10001'),
    ('Sarah Smith', date(1990, 12, 22), Gender.FEMALE, '+1-555-0102', '456 Oak Ave, Los Angeles, CA 90001'),
    ('Omar Khaled', date(1978, 9, 15), Gender.MALE, '+1-555-0103', '789 Pine Rd, Chicago, IL 60601'),
    ('Lina Faris', date(2000, 3, 5), Gender.FEMALE, '+1-555-0104', '321 Elm St, Houston, TX 77001'),
    ('Ahmed Mansour', date(1989, 1, 11), Gender.MALE, '+1-555-0105', '654 Maple Dr, Phoenix, AZ 85001'),
]

DEMO_LAB_TESTS = [
    # (code, name, price, turnaround_days)
    ('CBC', 'CBC (Complete Blood Count)', Decimal('100.00'), 1),
    ('LFT', 'Liver Function Test', Decimal('250.00'), 2),
    ('KFT', 'Kidney Function Test', Decimal('200.00'), 2),
    ('BS', 'Blood Sugar', Decimal('80.00'), 0),
    ('VITD', 'Vitamin D', Decimal('300.00'), 3),
]

DEMO_ORDERS = [
    # (patient name, test codes, status)
    ('John Doe', ['CBC', 'LFT'], OrderStatus.PENDING),
    ('Sarah Smith', ['VITD'], OrderStatus.PROCESSING),
    ('Omar Khaled', ['BS', 'KFT', 'CBC'], OrderStatus.COMPLETED),
]


class Command(BaseCommand):
    help = 'Seeds demo patients, lab tests and orders (skips when the catalog is already populated).'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Seed even if live lab tests already exist.',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        services = build_services()

        if services.lab_tests.count_tests() and not options['force']:
            self.stdout.write(self.style.WARNING('Lab tests already exist; nothing seeded. Use --force to seed anyway.'))
            return

        self.stdout.write(self.style.MIGRATE_HEADING('Patients'))
        patients = {}
        for name, dob, gender, phone, address in DEMO_PATIENTS:
            data = CreatePatientInput(name=name, dob=dob, gender=gender, phone=phone, address=address)
            try:
                patient = services.patients.create_patient(data)
            except ConflictError as exc:
                patient = services.patients.get_patient(exc.detail['existing_patient_id'])
                self.stdout.write(f' - SKIP {name}: already registered')
                logger.info('Seed skipped duplicate patient: id=%s', patient.id)
            else:
                self.stdout.write(f' - CREATE {name}')
                logger.info('Seed created patient: id=%s', patient.id)
            patients[name] = patient

        self.stdout.write(self.style.MIGRATE_HEADING('Lab tests'))
        tests = {}
        for code, name, price, turnaround_days in DEMO_LAB_TESTS:
            test = services.lab_tests.create_test(CreateLabTestInput(
                code=code, name=name, price=price, turnaround_days=turnaround_days,
            ))
            tests[code] = test
            self.stdout.write(f' - CREATE {code}: {name}')
            logger.info('Seed created lab test: id=%s code=%s', test.id, code)

        self.stdout.write(self.style.MIGRATE_HEADING('Orders'))
        for patient_name, codes, status in DEMO_ORDERS:
            order = services.orders.create_order(CreateOrderInput(
                patient_id=patients[patient_name].id,
                test_ids=[tests[code].id for code in codes],
                status=status,
            ))
            self.stdout.write(f' - CREATE order for {patient_name}: {", ".join(codes)} ({order.total_cost})')
            logger.info('Seed created order: id=%s', order.id)

        self.stdout.write(self.style.SUCCESS('Done. Demo data seeded.'))


# Examples:
# - Seed an empty database:
#   python manage.py seed_lab_data
#
# - Seed again on top of existing data (patients already present are reused):
#   python manage.py seed_lab_data --force
