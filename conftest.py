"""
Shared pytest fixtures.
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import (
    UserFactory,
    BodyTypeFactory,
    VehicleTypeFactory,
    ClientFactory,
    CustomerFactory,
    VehicleFactory,
    PolicyFactory,
    StickerFactory,
)


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def body_type(db):
    return BodyTypeFactory(name="Sedan")


@pytest.fixture
def vehicle_type(db):
    return VehicleTypeFactory(name="Passenger Vehicle")


@pytest.fixture
def client_party(db):
    return ClientFactory(name="Acme Logistics")


@pytest.fixture
def customer_party(db):
    return CustomerFactory(name="Jane Roe")


@pytest.fixture
def vehicle(client_party, body_type, vehicle_type):
    return VehicleFactory(client=client_party, body_type=body_type, vehicle_type=vehicle_type)


@pytest.fixture
def policy(vehicle):
    return PolicyFactory(vehicle=vehicle)


@pytest.fixture
def sticker(policy):
    return StickerFactory(policy=policy)


@pytest.fixture
def api_client():
    return APIClient()
