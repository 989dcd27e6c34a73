"""Shared fixtures for the eMSP tariffs tests."""

import copy
from typing import Iterator

import pytest
from flask.testing import FlaskClient

from app import create_app
from application.tariff_sync_service import TariffSyncService
from storage.tariff_store import InMemoryTariffStore


SAMPLE_TARIFF = {
    "country_code": "NL",
    "party_id": "ABC",
    "id": "T1",
    "currency": "EUR",
    "type": "REGULAR",
    "tariff_alt_text": [{"language": "en", "text": "2.00 EUR/hour"}],
    "elements": [
        {
            "price_components": [
                {"type": "TIME", "price": 2.00, "vat": 10.0, "step_size": 300}
            ]
        }
    ],
    "last_updated": "2015-06-29T20:39:09Z",
}


@pytest.fixture()
def tariff_doc():
    """Factory for valid Tariff documents; keyword args override fields."""

    def _make(**overrides):
        doc = copy.deepcopy(SAMPLE_TARIFF)
        doc.update(overrides)
        return doc

    return _make


@pytest.fixture()
def store() -> InMemoryTariffStore:
    return InMemoryTariffStore()


@pytest.fixture()
def service(store) -> TariffSyncService:
    return TariffSyncService(store)


@pytest.fixture()
def app(store):
    return create_app(store=store, config={"TESTING": True, "OCPI_AUTH_TOKEN": ""})


@pytest.fixture()
def client(app) -> Iterator[FlaskClient]:
    with app.test_client() as c:
        yield c
