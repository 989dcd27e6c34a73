import pytest

from app import create_app
from core.exceptions import ConfigurationError
from storage.tariff_store import InMemoryTariffStore

BASE_PATH = "/emsp/api/2.2.1/tariffs"

KEY = {"country_code": "NL", "party_id": "ABC", "tariff_id": "T1"}


def test_put_get_delete_scenario(client, tariff_doc):
    doc = tariff_doc()

    r = client.put(BASE_PATH, query_string=KEY, json=doc)
    assert r.status_code == 200
    assert r.data == b""

    r = client.get(BASE_PATH, query_string=KEY)
    assert r.status_code == 200
    assert r.get_json() == doc

    r = client.delete(BASE_PATH, query_string=KEY)
    assert r.status_code == 200
    assert r.data == b""

    r = client.get(BASE_PATH, query_string=KEY)
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"


def test_get_unknown_tariff(client):
    r = client.get(BASE_PATH, query_string=KEY)
    assert r.status_code == 404


def test_lowercase_query_resolves_same_record(client, tariff_doc):
    client.put(BASE_PATH, query_string=KEY, json=tariff_doc())
    r = client.get(BASE_PATH, query_string={"country_code": "nl", "party_id": "abc", "tariff_id": "T1"})
    assert r.status_code == 200
    assert r.get_json()["id"] == "T1"


def test_put_replaces_whole_document(client, tariff_doc):
    client.put(BASE_PATH, query_string=KEY, json=tariff_doc(tariff_alt_url="https://cpo.example/t1"))
    replacement = tariff_doc(currency="USD")
    client.put(BASE_PATH, query_string=KEY, json=replacement)

    assert client.get(BASE_PATH, query_string=KEY).get_json() == replacement


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_missing_query_params(client, tariff_doc, method):
    r = getattr(client, method)(BASE_PATH, query_string={"country_code": "NL"}, json=tariff_doc())
    assert r.status_code == 400
    body = r.get_json()
    assert body["error"] == "validation_error"
    assert body["fields"] == ["party_id: required", "tariff_id: required"]


def test_put_identity_mismatch(client, store, tariff_doc):
    r = client.put(BASE_PATH, query_string=dict(KEY, tariff_id="T2"), json=tariff_doc())
    assert r.status_code == 400
    body = r.get_json()
    assert body == {
        "error": "identity_mismatch",
        "message": "Tariff object does not match the request key (id)",
        "fields": ["id"],
    }
    assert len(store) == 0


def test_put_schema_violation(client, store, tariff_doc):
    r = client.put(BASE_PATH, query_string=KEY, json=tariff_doc(currency=None))
    assert r.status_code == 400
    assert r.get_json()["fields"] == ["currency: must be an ISO-4217 code"]
    assert len(store) == 0


def test_put_without_json_body(client):
    r = client.put(BASE_PATH, query_string=KEY, data="not json", content_type="text/plain")
    assert r.status_code == 400
    assert r.get_json()["error"] == "validation_error"


def test_error_body_never_leaks_stored_tariff(client, tariff_doc):
    client.put(BASE_PATH, query_string=KEY, json=tariff_doc())
    r = client.put(BASE_PATH, query_string=KEY, json=tariff_doc(party_id="XYZ"))
    assert r.status_code == 400
    assert "elements" not in r.get_data(as_text=True)


def test_delete_unknown_tariff(client):
    r = client.delete(BASE_PATH, query_string=KEY)
    assert r.status_code == 404


def test_delete_unknown_tariff_idempotent_mode(tariff_doc):
    app = create_app(store=InMemoryTariffStore(), config={"TARIFF_IDEMPOTENT_DELETE": True, "OCPI_AUTH_TOKEN": ""})
    r = app.test_client().delete(BASE_PATH, query_string=KEY)
    assert r.status_code == 200


@pytest.fixture()
def secured_client():
    app = create_app(store=InMemoryTariffStore(), config={"TESTING": True, "OCPI_AUTH_TOKEN": "s3cret"})
    return app.test_client()


@pytest.mark.parametrize("header", [None, "Token wrong", "Bearer s3cret", "Token "])
def test_token_required(secured_client, header):
    headers = {"Authorization": header} if header else {}
    r = secured_client.get(BASE_PATH, query_string=KEY, headers=headers)
    assert r.status_code == 401
    assert r.get_json()["error"] == "unauthorized"


def test_valid_token_is_accepted(secured_client, tariff_doc):
    headers = {"Authorization": "Token s3cret"}
    r = secured_client.put(BASE_PATH, query_string=KEY, json=tariff_doc(), headers=headers)
    assert r.status_code == 200
    assert secured_client.get(BASE_PATH, query_string=KEY, headers=headers).status_code == 200


def test_custom_base_path():
    app = create_app(store=InMemoryTariffStore(), config={"TARIFFS_BASE_PATH": "/ocpi/emsp/2.2.1/tariffs", "OCPI_AUTH_TOKEN": ""})
    c = app.test_client()
    r = c.get("/ocpi/emsp/2.2.1/tariffs", query_string=KEY)
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"
    # stara ścieżka nie jest już zarejestrowana
    r = c.get(BASE_PATH, query_string=KEY)
    assert r.status_code == 404
    assert not r.is_json


def test_health(client, tariff_doc):
    client.put(BASE_PATH, query_string=KEY, json=tariff_doc())
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok", "tariffs": 1}


def test_corrupt_store_file_fails_at_startup_not_on_get(tmp_path):
    path = tmp_path / "tariffs.json"
    path.write_text('{"NL/ABC/T1": {"country_code": "NL", "party_id": "ABC", "id": "T1"}}', encoding="utf-8")
    with pytest.raises(ConfigurationError):
        create_app(config={"TARIFF_STORE_BACKEND": "file", "TARIFF_STORE_PATH": str(path), "OCPI_AUTH_TOKEN": ""})


def test_file_backed_app_serves_persisted_tariff(tmp_path, tariff_doc):
    path = tmp_path / "tariffs.json"
    config = {"TARIFF_STORE_BACKEND": "file", "TARIFF_STORE_PATH": str(path), "OCPI_AUTH_TOKEN": ""}
    create_app(config=config).test_client().put(BASE_PATH, query_string=KEY, json=tariff_doc())

    c = create_app(config=config).test_client()
    r = c.get(BASE_PATH, query_string=KEY)
    assert r.status_code == 200
    assert r.get_json() == tariff_doc()
    assert c.get("/health").get_json() == {"status": "ok", "tariffs": 1}
