"""
Integration tests: real HTTP requests through the Django test client.

  HTTP Request -> urls.py -> View -> parser -> Service -> ORM -> DB -> Response

Each test checks status_code and the response body shape. Errors always come
back as {type, code, message, detail?}; successes never carry "type".
"""
import json

import pytest

from laborders.models import Patient
from tests.conftest import OrderFactory, PatientFactory


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def send(api_client, method, url, payload=None):
    """Returns (status_code, body_dict)."""
    kwargs = {}
    if payload is not None:
        kwargs = {'data': json.dumps(payload), 'content_type': 'application/json'}
    response = getattr(api_client, method)(url, **kwargs)
    return response.status_code, json.loads(response.content)


# ===================================================================
# Create
# ===================================================================

@pytest.mark.django_db
class TestCreatePatient:

    def test_create_success(self, api_client, sample_patient_payload):
        status, body = send(api_client, 'post', '/api/patients/', sample_patient_payload)

        assert status == 201
        assert 'type' not in body
        assert body['name'] == 'John Doe'
        assert body['dob'] == '1990-01-15'
        assert Patient.objects.filter(pk=body['id']).exists()

    def test_resubmission_is_409(self, api_client, sample_patient_payload):
        _, first = send(api_client, 'post', '/api/patients/', sample_patient_payload)

        status, body = send(api_client, 'post', '/api/patients/', sample_patient_payload)

        assert status == 409
        assert body['type'] == 'conflict'
        assert body['code'] == 'PATIENT_DUPLICATE'
        assert body['detail'] == {'existing_patient_id': first['id']}
        assert Patient.objects.count() == 1

    def test_word_subset_name_is_409(self, api_client, sample_patient_payload):
        sample_patient_payload['name'] = 'John Doe Joe'
        send(api_client, 'post', '/api/patients/', sample_patient_payload)

        sample_patient_payload['name'] = 'Doe Joe'
        status, body = send(api_client, 'post', '/api/patients/', sample_patient_payload)

        assert status == 409
        assert body['code'] == 'PATIENT_DUPLICATE'

    def test_invalid_payload_is_400(self, api_client):
        status, body = send(api_client, 'post', '/api/patients/', {'name': '', 'gender': 'X'})

        assert status == 400
        assert body['type'] == 'validation_error'
        assert {e['field'] for e in body['detail']['errors']} == {'name', 'dob', 'gender'}

    def test_malformed_json_is_400(self, api_client):
        response = api_client.post('/api/patients/', data='{not json', content_type='application/json')

        assert response.status_code == 400
        assert json.loads(response.content)['type'] == 'validation_error'


# ===================================================================
# Read / update / delete
# ===================================================================

@pytest.mark.django_db
class TestPatientDetail:

    def test_get(self, api_client):
        patient = PatientFactory()

        status, body = send(api_client, 'get', f'/api/patients/{patient.id}/')

        assert status == 200
        assert body['id'] == str(patient.id)

    def test_get_missing_is_404(self, api_client):
        status, body = send(api_client, 'get', '/api/patients/00000000-0000-0000-0000-000000000000/')

        assert status == 404
        assert body['type'] == 'not_found'
        assert body['code'] == 'PATIENT_NOT_FOUND'

    def test_get_malformed_id_is_400(self, api_client):
        status, body = send(api_client, 'get', '/api/patients/123/')

        assert status == 400
        assert body['code'] == 'INVALID_ID'

    def test_patch(self, api_client):
        patient = PatientFactory(name='John Doe', phone='555')

        status, body = send(api_client, 'patch', f'/api/patients/{patient.id}/', {'address': '9 High St'})

        assert status == 200
        assert body['address'] == '9 High St'
        assert body['phone'] == '555'

    def test_empty_patch_is_400(self, api_client):
        patient = PatientFactory()

        status, _ = send(api_client, 'patch', f'/api/patients/{patient.id}/', {})

        assert status == 400

    def test_delete_then_get_is_404(self, api_client):
        patient = PatientFactory()

        status, body = send(api_client, 'delete', f'/api/patients/{patient.id}/')
        assert status == 200
        assert body['id'] == str(patient.id)

        status, _ = send(api_client, 'get', f'/api/patients/{patient.id}/')
        assert status == 404
        assert Patient.all_objects.filter(pk=patient.id).exists()


# ===================================================================
# Lists
# ===================================================================

@pytest.mark.django_db
class TestListPatients:

    def test_envelope_and_clamping(self, api_client):
        PatientFactory.create_batch(3)

        status, body = send(api_client, 'get', '/api/patients/?page=0&limit=500')

        assert status == 200
        assert body['page'] == 1
        assert body['limit'] == 100
        assert body['total'] == 3
        assert body['total_pages'] == 1
        assert len(body['data']) == 3

    def test_huge_page_returns_empty_data(self, api_client):
        PatientFactory.create_batch(2)

        status, body = send(api_client, 'get', '/api/patients/?page=99999999999999999999')

        assert status == 200
        assert body['data'] == []
        assert body['total'] == 2
        assert body['page'] == 99999999999999999999

    def test_search(self, api_client):
        PatientFactory(name='Omar Khaled')
        PatientFactory(name='Lina Faris')

        _, body = send(api_client, 'get', '/api/patients/?search=omar')

        assert [p['name'] for p in body['data']] == ['Omar Khaled']

    def test_patient_orders(self, api_client):
        patient = PatientFactory()
        OrderFactory.create_batch(2, patient=patient)
        OrderFactory()

        status, body = send(api_client, 'get', f'/api/patients/{patient.id}/orders/')

        assert status == 200
        assert len(body['data']) == 2
        assert all(o['patient']['id'] == str(patient.id) for o in body['data'])
