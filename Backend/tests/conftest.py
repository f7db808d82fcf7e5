"""Shared fixtures for the triage API tests."""
import sys
from pathlib import Path

import pytest

# Add Backend/src to Python path
BACKEND_SRC = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(BACKEND_SRC))

from api.services.model_registry import ModelRegistry  # noqa: E402
from triage.errors import UpstreamUnavailable  # noqa: E402


class FakeModel:
    """Stands in for a remote model; returns a canned response or raises."""

    def __init__(self, response=None, exc=None, kind="text"):
        self.kind = kind
        self.response = response
        self.exc = exc
        self.calls = []

    def predict(self, data):
        self.calls.append(data)
        if self.exc is not None:
            raise self.exc
        return self.response


BURN_JSON = """```json
{
  "injuryType": "Burn Injury",
  "severity": "medium",
  "location": "hand",
  "bloodLevel": "none",
  "confidence": 0.9,
  "detectionDetails": {
    "detectedObjects": ["blister"],
    "detectedColors": ["pink"],
    "foreignObjects": false
  }
}
```"""


@pytest.fixture
def burn_json():
    return BURN_JSON


@pytest.fixture
def registry(monkeypatch):
    """Empty model registry, restored after the test."""
    monkeypatch.setattr(ModelRegistry, "_registry", {})
    return ModelRegistry


@pytest.fixture
def text_model(registry):
    model = FakeModel(response=BURN_JSON)
    registry.register("injury", model)
    return model


@pytest.fixture
def unavailable_model(registry):
    model = FakeModel(exc=UpstreamUnavailable("Analysis service unreachable"))
    registry.register("injury", model)
    return model


@pytest.fixture
def wound_annotation():
    """Cloud Vision response for a reddish open wound."""
    return {
        "labelAnnotations": [{"description": "Skin"}, {"description": "Wound"}],
        "localizedObjectAnnotations": [],
        "imagePropertiesAnnotation": {"dominantColors": {"colors": [
            {"color": {"red": 200, "green": 30, "blue": 40}, "pixelFraction": 0.08},
            {"color": {"red": 220, "green": 190, "blue": 170}, "pixelFraction": 0.6},
        ]}},
        "safeSearchAnnotation": {"violence": "VERY_UNLIKELY"},
    }


class FakeAssistant:
    """Stands in for the remote chat model; records each query and its context."""

    kind = "chat"

    def __init__(self, answer="Cool the burn under running water.", exc=None):
        self.answer = answer
        self.exc = exc
        self.calls = []

    def predict(self, query, context=""):
        self.calls.append((query, context))
        if self.exc is not None:
            raise self.exc
        return self.answer


@pytest.fixture
def assistant_model(registry):
    model = FakeAssistant()
    registry.register("assistant", model)
    return model
