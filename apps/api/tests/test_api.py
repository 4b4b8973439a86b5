"""
Transport tests: status codes and payloads of the v1 API.
"""

import uuid
from datetime import date, timedelta
from unittest import mock

import pytest
from django.db import OperationalError
from django.urls import reverse

from apps.core.models import Policy, Sticker, Vehicle
from tests.factories import (
    BodyTypeFactory,
    ClientFactory,
    CustomerFactory,
    StickerFactory,
    VehicleTypeFactory,
    create_party_with_vehicles,
)


@pytest.mark.django_db
class TestCatalogEndpoints:

    def test_body_types(self, api_client):
        BodyTypeFactory(name="SUV")
        BodyTypeFactory(name="Sedan")
        BodyTypeFactory(name="Van", is_active=False)

        response = api_client.get(reverse('api:bodytype-list'))

        assert response.status_code == 200
        assert [row['name'] for row in response.json()] == ["Sedan", "SUV"]
        assert 'vehicle_count' not in response.json()[0]

    def test_body_types_with_stats(self, api_client, vehicle):
        response = api_client.get(reverse('api:bodytype-list'), {'include': 'stats'})

        assert response.status_code == 200
        assert response.json() == [
            {'id': str(vehicle.body_type_id), 'name': "Sedan", 'vehicle_count': 1},
        ]

    def test_empty_vehicle_types(self, api_client):
        response = api_client.get(reverse('api:vehicletype-list'))

        assert response.status_code == 200
        assert response.json() == []

    def test_vehicle_type_detail(self, api_client):
        row = VehicleTypeFactory(name="Goods Carrier")

        response = api_client.get(reverse('api:vehicletype-detail', args=[row.id]))

        assert response.status_code == 200
        assert response.json()['name'] == "Goods Carrier"

    def test_unknown_body_type(self, api_client):
        response = api_client.get(reverse('api:bodytype-detail', args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.json() == {'error': "Body type not found", 'status_code': 404, 'code': 'not_found'}


@pytest.mark.django_db
class TestPartyEndpoints:

    def test_client_detail(self, api_client, client_party):
        response = api_client.get(reverse('api:client-detail', args=[client_party.id]))

        assert response.status_code == 200
        body = response.json()
        assert body['id'] == str(client_party.id)
        assert body['kind'] == 'client'
        assert body['name'] == "Acme Logistics"

    def test_customer_route_does_not_find_clients(self, api_client, client_party):
        response = api_client.get(reverse('api:customer-detail', args=[client_party.id]))

        assert response.status_code == 404
        assert response.json()['error'] == "Customer not found"

    def test_vehicle_count(self, api_client):
        party, _ = create_party_with_vehicles(ClientFactory, active=2, inactive=1)

        response = api_client.get(reverse('api:client-vehicle-count', args=[party.id]))

        assert response.status_code == 200
        assert response.json() == {'count': 2}

    def test_vehicle_count_for_party_without_vehicles(self, api_client, customer_party):
        response = api_client.get(reverse('api:customer-vehicle-count', args=[customer_party.id]))

        assert response.json() == {'count': 0}

    def test_vehicle_count_for_unknown_party(self, api_client):
        response = api_client.get(reverse('api:client-vehicle-count', args=["P1"]))

        assert response.status_code == 404
        assert response.json()['error'] == "Client not found"

    def test_vehicle_list(self, api_client, vehicle, client_party):
        response = api_client.get(reverse('api:client-vehicles', args=[client_party.id]))

        assert response.status_code == 200
        [row] = response.json()
        assert row['id'] == str(vehicle.id)
        assert row['owner'] == {'kind': 'client', 'id': str(client_party.id)}
        assert row['body_type_name'] == "Sedan"


@pytest.mark.django_db
class TestVehicleEndpoints:

    def test_deactivate(self, api_client, vehicle):
        url = reverse('api:vehicle-deactivate', args=[vehicle.id])

        first = api_client.patch(url)
        second = api_client.patch(url)

        assert first.status_code == 200
        assert first.json()['is_active'] is False
        assert second.status_code == 200
        assert second.json()['deleted_at'] == first.json()['deleted_at']
        assert not Vehicle.objects.get(pk=vehicle.id).is_active

    def test_deactivate_unknown(self, api_client):
        response = api_client.patch(reverse('api:vehicle-deactivate', args=[uuid.uuid4()]))

        assert response.status_code == 404


@pytest.mark.django_db
class TestPolicyEndpoints:

    def test_create(self, api_client, vehicle, client_party):
        payload = {
            'vehicle': str(vehicle.id),
            'policy_no': "POL-API-1",
            'valid_from': date.today().isoformat(),
            'valid_to': (date.today() + timedelta(days=365)).isoformat(),
        }

        response = api_client.post(reverse('api:policy-list'), payload, format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == Policy.STATUS_PENDING
        assert body['party'] == {'kind': 'client', 'id': str(client_party.id)}

    def test_inverted_dates(self, api_client, vehicle):
        payload = {
            'vehicle': str(vehicle.id),
            'policy_no': "POL-API-2",
            'valid_from': date.today().isoformat(),
            'valid_to': (date.today() - timedelta(days=1)).isoformat(),
        }

        response = api_client.post(reverse('api:policy-list'), payload, format='json')

        assert response.status_code == 400
        assert response.json()['code'] == 'validation_error'

    def test_unknown_vehicle(self, api_client):
        payload = {
            'vehicle': str(uuid.uuid4()),
            'policy_no': "POL-API-3",
            'valid_from': date.today().isoformat(),
            'valid_to': (date.today() + timedelta(days=1)).isoformat(),
        }

        response = api_client.post(reverse('api:policy-list'), payload, format='json')

        assert response.status_code == 404

    def test_detail(self, api_client, policy):
        response = api_client.get(reverse('api:policy-detail', args=[policy.id]))

        assert response.status_code == 200
        body = response.json()
        assert body['id'] == str(policy.id)
        assert body['policy_no'] == policy.policy_no

    def test_detail_unknown(self, api_client):
        response = api_client.get(reverse('api:policy-detail', args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.json()['error'] == "Policy not found"


@pytest.mark.django_db
class TestStickerEndpoints:

    def test_issue(self, api_client, policy):
        response = api_client.post(
            reverse('api:sticker-list'),
            {'sticker_no': "S-API-1", 'policy': str(policy.id)},
            format='json',
        )

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'ISSUED'
        assert body['policy_no'] == policy.policy_no
        assert body['registration_no'] == policy.vehicle.registration_no

    def test_issue_duplicate_number(self, api_client, sticker):
        response = api_client.post(
            reverse('api:sticker-list'),
            {'sticker_no': sticker.sticker_no, 'policy': str(sticker.policy_id)},
            format='json',
        )

        assert response.status_code == 400
        body = response.json()
        assert body['error'] == "Sticker number already exists"
        assert body['errors'] == {'sticker_no': ["Sticker number already exists"]}

    def test_list_active(self, api_client, sticker):
        StickerFactory(policy=sticker.policy).soft_delete()

        response = api_client.get(reverse('api:sticker-list'))

        assert response.status_code == 200
        assert [row['id'] for row in response.json()] == [str(sticker.id)]
        assert response.json()[0]['party']['kind'] == 'client'

    def test_deactivate_twice(self, api_client, sticker):
        url = reverse('api:sticker-detail', args=[sticker.id])

        first = api_client.delete(url)
        second = api_client.delete(url)

        assert first.status_code == 200
        body = first.json()
        assert body['id'] == str(sticker.id)
        assert body['is_active'] is False
        assert body['status'] == 'ISSUED'
        assert body['deleted_at'] is not None
        assert second.status_code == 200
        assert second.json()['deleted_at'] == body['deleted_at']
        assert second.json()['updated_at'] == body['updated_at']

    def test_deactivate_unknown(self, api_client, sticker):
        response = api_client.delete(reverse('api:sticker-detail', args=["S1"]))

        assert response.status_code == 404
        assert response.json() == {'error': "Sticker not found", 'status_code': 404, 'code': 'not_found'}
        assert Sticker.objects.get(pk=sticker.id).is_active

    def test_get_sticker(self, api_client, sticker):
        response = api_client.get(reverse('api:sticker-detail', args=[sticker.id]))

        assert response.status_code == 200
        assert response.json()['sticker_no'] == sticker.sticker_no


@pytest.mark.django_db
class TestTransportErrors:

    def test_bad_timeout_header(self, api_client):
        response = api_client.get(reverse('api:bodytype-list'), HTTP_X_REQUEST_TIMEOUT='soon')

        assert response.status_code == 400
        assert response.json()['code'] == 'validation_error'

    def test_non_positive_timeout_header(self, api_client):
        response = api_client.get(reverse('api:bodytype-list'), HTTP_X_REQUEST_TIMEOUT='0')

        assert response.status_code == 400

    def test_storage_failure_is_500(self, api_client):
        with mock.patch('apps.core.services.catalog_service._listing', side_effect=OperationalError("down")):
            response = api_client.get(reverse('api:vehicletype-list'))

        assert response.status_code == 500
        assert response.json()['code'] == 'storage_unavailable'

    def test_schema_is_served(self, api_client):
        response = api_client.get(reverse('api:schema'))

        assert response.status_code == 200
