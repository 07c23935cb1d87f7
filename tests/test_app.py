import pytest
from fastapi.testclient import TestClient

import app as app_module


@pytest.fixture
def client():
    return TestClient(app_module.app)


@pytest.fixture
def no_api_keys(monkeypatch):
    monkeypatch.setattr(app_module.cfg, "api_keys", ())


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_format_accepts_client_field_names(client):
    resp = client.post("/format", json={
        "building": "Makina Mosque", "area": "Kibera", "city": "Nairobi",
        "state": "Kibra", "postalCode": "00504", "countryName": "Kenya",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["formatted"] == "Makina, Kibera, Nairobi, Kibra, 00504, Kenya"
    assert body["standard"]["address_line1"] == "Makina Mosque"


def test_validate(client):
    body = client.post("/validate", json={"address": "P.O. Box 123, Nairobi"}).json()
    assert body == {
        "is_valid": False,
        "severity": "error",
        "message": "ADDRESS REJECTED: Contains P.O. Box. Global platforms will reject this.",
    }
    assert client.post("/validate", json={"address": ""}).json()["message"] == "Address cannot be empty"


def test_analyze_and_options(client):
    body = client.post("/analyze", json={
        "area": "makina", "state": "Westlands", "postal_code": "00504", "jurisdiction": "KE",
    }).json()
    assert [i["type"] for i in body["issues"]] == ["CONFLICT"]
    assert body["issues"][0]["severity"] == "error"

    body = client.post("/options", json={"area": "cbd", "jurisdiction": "KE"}).json()
    assert body["option_a"]["lines"] == {
        "line1": "Kenyatta Avenue", "line2": "cbd", "city": "Nairobi",
        "postal_code": "00100", "country": "Kenya",
    }


def test_kenya_only_endpoints_reject_other_jurisdictions(client):
    assert client.post("/analyze", json={"area": "cbd", "jurisdiction": "US"}).status_code == 404
    assert client.post("/options", json={"area": "cbd", "jurisdiction": "US"}).status_code == 404


def test_audit(client):
    body = client.post("/audit", json={"area": "cbd", "city": "Nairobi", "jurisdiction": "KE"}).json()
    assert body["jurisdiction"] == "KE"
    assert body["formatted"] == "cbd, Nairobi"
    assert body["verdict"]["severity"] == "warning"
    assert [i["type"] for i in body["issues"]] == ["WRONG_POSTAL_CODE"]


def test_preflight(client):
    body = client.post("/preflight", json={
        "address": "Yaya Centre, Argwings Kodhek Road, Kilimani, Nairobi, Kenya",
    }).json()
    assert body["overall_passed"] is True
    assert body["overall_score"] == 100
    assert body["badge"]["text"] == "Excellent"


def test_preflight_identity_with_client_keys(client):
    body = client.post("/preflight", json={
        "address": "Yaya Centre, Argwings Kodhek Road, Kilimani, Nairobi, Kenya",
        "user_data": {"documentName": "John Kamau", "profileName": "Mary Wanjiku",
                      "gpsLocation": {"lat": -1.29}},
    })
    assert body.status_code == 200
    identity = body.json()["layers"]["identity"]
    assert identity["passed"] is False
    assert [c["name"] for c in identity["checks"]] == ["Name Consistency"]


def test_clean_address_open_without_keys(client, no_api_keys):
    resp = client.post("/api/v1/clean-address", json={"raw_string": "Jogoo Road, Makadara"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["output"]["street"] == "Jogoo Road"
    assert body["output"]["complete"] == "Jogoo Road, Kenya"

    assert client.post("/api/v1/clean-address", json={}).status_code == 400
    assert client.post("/api/v1/clean-address", json={"raw_string": "   "}).status_code == 400


def test_clean_address_requires_key_when_configured(client, monkeypatch):
    monkeypatch.setattr(app_module.cfg, "api_keys", ("vb_secret",))
    url = "/api/v1/clean-address"
    payload = {"raw_string": "Jogoo Road, Makadara"}
    assert client.post(url, json=payload).status_code == 401
    assert client.post(url, json=payload, headers={"x-api-key": "vb_wrong"}).status_code == 401
    assert client.post(url, json=payload, headers={"x-api-key": "vb_secret"}).status_code == 200
