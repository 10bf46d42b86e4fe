"""
Unit tests for PatientService.

1. create -> id assigned, name/phone/address trimmed
2. identical re-submission -> PATIENT_DUPLICATE referencing the first id
3. word-subset name on the same dob -> duplicate ("Doe Joe" vs "John Doe Joe")
4. same name on another day -> allowed
5. a deleted patient does not block re-registration
6. get: missing / deleted -> PATIENT_NOT_FOUND, malformed id -> INVALID_ID
7. update applies only the supplied fields
8. list / count honour filters and pagination
"""
import pytest
from datetime import date, datetime, timezone

from laborders.exceptions import ConflictError, NotFoundError, ValidationError
from laborders.filters import PageRequest
from laborders.intake.types import CreatePatientInput, PatientFilters, UpdatePatientInput
from laborders.models import Patient
from laborders.services import PatientService
from tests.conftest import PatientFactory


def _input(**overrides):
    data = {'name': 'John Doe', 'dob': date(1990, 1, 15), 'gender': 'MALE'}
    data.update(overrides)
    return CreatePatientInput(**data)


@pytest.mark.django_db
class TestCreatePatient:

    def setup_method(self):
        self.service = PatientService()

    def test_create_assigns_id(self):
        patient = self.service.create_patient(_input())

        assert patient.id is not None
        assert Patient.objects.filter(pk=patient.id).exists()
        assert patient.dob == date(1990, 1, 15)
        assert patient.deleted_at is None

    def test_text_fields_trimmed(self):
        patient = self.service.create_patient(_input(
            name='  Jane Roe ', phone=' +1-555-0101 ', address='  1 Main St  ',
        ))

        assert patient.name == 'Jane Roe'
        assert patient.phone == '+1-555-0101'
        assert patient.address == '1 Main St'

    def test_identical_resubmission_is_duplicate(self):
        first = self.service.create_patient(_input())

        with pytest.raises(ConflictError) as exc_info:
            self.service.create_patient(_input())

        assert exc_info.value.code == 'PATIENT_DUPLICATE'
        assert exc_info.value.http_status == 409
        assert exc_info.value.detail == {'existing_patient_id': str(first.id)}
        assert str(first.id) in exc_info.value.message
        assert Patient.objects.count() == 1

    def test_word_subset_name_is_duplicate(self):
        first = self.service.create_patient(_input(name='John Doe Joe'))

        with pytest.raises(ConflictError) as exc_info:
            self.service.create_patient(_input(name='Doe Joe'))

        assert exc_info.value.detail['existing_patient_id'] == str(first.id)

    def test_datetime_dob_collapsed_to_utc_day(self):
        self.service.create_patient(_input())

        with pytest.raises(ConflictError):
            self.service.create_patient(_input(dob=datetime(1990, 1, 15, 18, 30, tzinfo=timezone.utc)))

    def test_non_ascii_case_variant_is_duplicate(self):
        first = PatientFactory(name='ÉMILE ÖZIL', dob=date(1990, 1, 15))

        with pytest.raises(ConflictError) as exc_info:
            self.service.create_patient(_input(name='émile özil'))

        assert exc_info.value.detail == {'existing_patient_id': str(first.id)}
        assert Patient.objects.count() == 1

    def test_same_name_other_day_allowed(self):
        self.service.create_patient(_input())

        other = self.service.create_patient(_input(dob=date(1990, 1, 16)))

        assert other.id is not None
        assert Patient.objects.count() == 2

    def test_deleted_patient_does_not_block(self):
        first = self.service.create_patient(_input())
        self.service.delete_patient(first.id)

        again = self.service.create_patient(_input())

        assert again.id != first.id


@pytest.mark.django_db
class TestGetPatient:

    def setup_method(self):
        self.service = PatientService()

    def test_get_existing(self):
        patient = PatientFactory()
        assert self.service.get_patient(str(patient.id)) == patient

    def test_missing_raises_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            self.service.get_patient('00000000-0000-0000-0000-000000000000')

        assert exc_info.value.code == 'PATIENT_NOT_FOUND'
        assert exc_info.value.http_status == 404

    def test_deleted_raises_not_found(self):
        patient = PatientFactory()
        self.service.delete_patient(patient.id)

        with pytest.raises(NotFoundError):
            self.service.get_patient(patient.id)

    def test_malformed_id(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.get_patient('not-a-uuid')

        assert exc_info.value.code == 'INVALID_ID'


@pytest.mark.django_db
class TestUpdateAndDeletePatient:

    def setup_method(self):
        self.service = PatientService()

    def test_update_only_supplied_fields(self):
        patient = PatientFactory(name='John Doe', phone='+1-555-0100')

        updated = self.service.update_patient(patient.id, UpdatePatientInput(phone=None))

        assert updated.phone is None
        assert updated.name == 'John Doe'

    def test_update_dob_normalised(self):
        patient = PatientFactory()

        updated = self.service.update_patient(
            patient.id, UpdatePatientInput(dob=datetime(2001, 5, 4, 1, 0, tzinfo=timezone.utc)),
        )

        assert updated.dob == date(2001, 5, 4)

    def test_update_missing_patient(self):
        with pytest.raises(NotFoundError):
            self.service.update_patient(
                '00000000-0000-0000-0000-000000000000', UpdatePatientInput(name='X'),
            )

    def test_delete_returns_pre_delete_row(self):
        patient = PatientFactory()

        deleted = self.service.delete_patient(patient.id)

        assert deleted.id == patient.id
        assert deleted.deleted_at is None
        assert Patient.all_objects.get(pk=patient.id).deleted_at is not None

    def test_delete_twice_is_not_found(self):
        patient = PatientFactory()
        self.service.delete_patient(patient.id)

        with pytest.raises(NotFoundError):
            self.service.delete_patient(patient.id)


@pytest.mark.django_db
class TestListPatients:

    def setup_method(self):
        self.service = PatientService()

    def test_pagination_envelope(self):
        PatientFactory.create_batch(5)

        page = self.service.list_patients(page=PageRequest(page=2, limit=2))

        assert len(page.data) == 2
        assert (page.total, page.page, page.limit, page.total_pages) == (5, 2, 2, 3)

    def test_filters(self):
        PatientFactory(name='Alice Wang', gender='FEMALE')
        PatientFactory(name='Bob Wang', gender='MALE')
        PatientFactory(name='Carol Lee', gender='FEMALE', address='12 Wang Street')

        assert self.service.count_patients(PatientFilters(gender='FEMALE')) == 2
        assert self.service.count_patients(PatientFilters(search='wang')) == 3
        page = self.service.list_patients(PatientFilters(gender='FEMALE', name='wang'))
        assert [p.name for p in page.data] == ['Alice Wang']

    def test_deleted_not_listed(self):
        kept = PatientFactory()
        PatientFactory().delete()

        page = self.service.list_patients()

        assert [p.id for p in page.data] == [kept.id]
        assert self.service.count_patients() == 1
