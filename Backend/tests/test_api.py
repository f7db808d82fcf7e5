"""HTTP-level tests for the triage API."""
import base64

import pytest
from fastapi.testclient import TestClient

import config
from api.main import app
from conftest import FakeAssistant
from triage.errors import UpstreamUnavailable

JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def client():
    # Not used as a context manager: the lifespan would replace the fake models.
    return TestClient(app)


class TestInfo:

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["endpoints"]["injury_analyze"] == "/api/injury/analyze"

    def test_health(self, client, text_model):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["models_loaded"] == ["injury"]


class TestAnalyzeUpload:

    def test_burn(self, client, text_model):
        r = client.post("/api/injury/analyze", files={"file": ("burn.jpg", JPEG, "image/jpeg")})
        assert r.status_code == 200
        body = r.json()
        assert body["injuryType"] == "Burn Injury"
        assert body["details"]["location"] == "hand"
        assert body["filename"] == "burn.jpg"
        assert body["size_bytes"] == len(JPEG)
        assert "error" not in body
        assert text_model.calls == [JPEG]

    def test_upstream_failure_returns_fail_safe(self, client, unavailable_model):
        r = client.post("/api/injury/analyze", files={"file": ("x.png", JPEG, "image/png")})
        assert r.status_code == 200
        body = r.json()
        assert body["injuryType"] == "Bleeding"
        assert body["probability"] == 0.7
        assert body["failSafe"] is True
        assert body["error"] == "Analysis service unreachable"

    def test_missing_model_returns_fail_safe(self, client, registry):
        r = client.post("/api/injury/analyze", files={"file": ("x.jpg", JPEG, "image/jpeg")})
        assert r.status_code == 200
        assert r.json()["failSafe"] is True
        assert "not available" in r.json()["error"]

    def test_unsupported_type(self, client, text_model):
        r = client.post("/api/injury/analyze", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert r.status_code == 400

    def test_oversize(self, client, text_model, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 4)
        r = client.post("/api/injury/analyze", files={"file": ("big.jpg", JPEG, "image/jpeg")})
        assert r.status_code == 413

    def test_empty_file(self, client, text_model):
        r = client.post("/api/injury/analyze", files={"file": ("empty.jpg", b"", "image/jpeg")})
        assert r.status_code == 400


class TestAnalyzeBase64:

    def test_data_url(self, client, text_model):
        payload = "data:image/jpeg;base64," + base64.b64encode(JPEG).decode()
        r = client.post("/api/injury/analyze-base64", json={"imageBase64": payload})
        assert r.status_code == 200
        assert r.json()["injuryType"] == "Burn Injury"
        assert text_model.calls == [JPEG]

    @pytest.mark.parametrize("payload", [{}, {"imageBase64": ""}, {"imageBase64": "!!not base64!!"}])
    def test_bad_payload(self, client, text_model, payload):
        r = client.post("/api/injury/analyze-base64", json=payload)
        assert r.status_code == 400


class TestReferenceRoutes:

    def test_instructions(self, client):
        r = client.get("/api/injury/instructions", params={"injury_type": "Stroke"})
        assert r.status_code == 200
        body = r.json()
        assert body["steps"][0]["content"].startswith("Remember the acronym FAST")
        assert len(body["similarDocuments"]) == 3

    def test_instructions_invalid_severity(self, client):
        r = client.get("/api/injury/instructions", params={"injury_type": "Fracture", "severity": "extreme"})
        assert r.status_code == 422

    def test_types(self, client):
        r = client.get("/api/injury/types")
        assert r.status_code == 200
        names = [t["injuryType"] for t in r.json()]
        assert "Cut/Laceration" in names
        assert "Cardiac Emergency" in names

    def test_type_with_slash(self, client):
        r = client.get("/api/injury/types/Cut/Laceration")
        assert r.status_code == 200
        assert r.json()["category"] == "cut"

    def test_unknown_type(self, client):
        assert client.get("/api/injury/types/Frostbite").status_code == 404


class TestReport:

    def test_pdf(self, client):
        bundle = client.get("/api/injury/instructions", params={"injury_type": "Bleeding"}).json()
        r = client.post("/api/injury/report", json=bundle)
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"
        assert r.content.startswith(b"%PDF")
        assert "first-aid-bleeding.pdf" in r.headers["content-disposition"]


class TestVitals:

    def test_analyze(self, client):
        r = client.post("/api/vitals/analyze", json={
            "heartRate": 128,
            "bloodPressure": {"systolic": 85, "diastolic": 55},
            "injuryType": "Cut/Laceration",
            "injurySeverity": "high",
        })
        assert r.status_code == 200
        body = r.json()
        assert body["hasCriticalSigns"] is True
        assert [d["metric"] for d in body["criticalDetails"]] == ["Heart Rate", "Blood Pressure"]
        assert len(body["injurySpecificWarnings"]) == 2

    def test_validation(self, client):
        r = client.post("/api/vitals/analyze", json={"oxygenSaturation": 140})
        assert r.status_code == 422


class TestAssistant:

    def test_answer_with_sources(self, client, assistant_model):
        r = client.post("/api/chat", json={"query": "How do I cool a burn?", "injuryType": "Burn Injury"})
        assert r.status_code == 200
        body = r.json()
        assert body["answer"] == "Cool the burn under running water."
        assert body["sources"][0]["title"] == "Burns"
        query, context = assistant_model.calls[0]
        assert query == "How do I cool a burn?"
        assert context.startswith("Specific injury type: Burn Injury")
        assert "1. Burns (" in context

    def test_missing_query(self, client, assistant_model):
        assert client.post("/api/chat", json={}).status_code == 400
        assert client.post("/api/chat", json={"query": "   "}).status_code == 400
        assert assistant_model.calls == []

    def test_not_configured(self, client, registry):
        r = client.post("/api/chat", json={"query": "Is a sprain serious?"})
        assert r.status_code == 503

    def test_upstream_unavailable(self, client, registry):
        registry.register("assistant", FakeAssistant(exc=UpstreamUnavailable("Analysis service timed out")))
        r = client.post("/api/chat", json={"query": "Is a sprain serious?"})
        assert r.status_code == 503
        assert r.json()["detail"] == "Analysis service timed out"
