from ..exceptions import ConflictError, NotFoundError
from ..filters import PATIENT_FILTERS, Page, PageRequest, compose_filter
from ..intake.parsers import parse_id
from ..intake.types import CreatePatientInput, PatientFilters, UpdatePatientInput
from ..matching import PatientMatcher, to_utc_date
from ..models import Patient
from ..store import EntityStore


def _clean(value):
    return value.strip() if isinstance(value, str) else value


class PatientService:
    """
    Patient registration and maintenance.

    Duplicate check and insert are two separate statements. Two identical
    registrations racing each other can both pass the check and both insert;
    that window is accepted (no uniqueness constraint on name + dob).
    """

    def __init__(self, store=None, matcher=None):
        self.store = store or EntityStore(Patient)
        self.matcher = matcher or PatientMatcher(self.store)

    def find_duplicate(self, data: CreatePatientInput):
        return self.matcher.find_duplicate(data.name, data.dob)

    def create_patient(self, data: CreatePatientInput) -> Patient:
        existing = self.find_duplicate(data)
        if existing is not None:
            raise ConflictError(
                message=(
                    'Patient already exists with the same name and date of birth. '
                    f'Existing patient ID: {existing.id}'
                ),
                code='PATIENT_DUPLICATE',
                detail={'existing_patient_id': str(existing.id)},
            )

        return self.store.create(
            name=data.name.strip(),
            dob=to_utc_date(data.dob),
            gender=data.gender,
            phone=_clean(data.phone),
            address=_clean(data.address),
        )

    def get_patient(self, patient_id) -> Patient:
        patient_id = parse_id(patient_id, 'patient_id')
        patient = self.store.find_by_id(patient_id)
        if patient is None:
            raise NotFoundError(
                message=f'Patient with ID {patient_id} not found',
                code='PATIENT_NOT_FOUND',
                detail={'patient_id': str(patient_id)},
            )
        return patient

    def list_patients(self, filters: PatientFilters = None, page: PageRequest = None) -> Page:
        page = page or PageRequest.from_params()
        items, total = self.store.find_many(compose_filter(PATIENT_FILTERS, filters), page)
        return Page(data=items, total=total, page=page.page, limit=page.limit)

    def count_patients(self, filters: PatientFilters = None) -> int:
        return self.store.count(compose_filter(PATIENT_FILTERS, filters))

    def update_patient(self, patient_id, data: UpdatePatientInput) -> Patient:
        patient = self.get_patient(patient_id)

        changes = data.changes()
        if 'dob' in changes:
            changes['dob'] = to_utc_date(changes['dob'])
        return self.store.update(patient.pk, changes)

    def delete_patient(self, patient_id) -> Patient:
        patient = self.get_patient(patient_id)
        return self.store.delete(patient.pk)
