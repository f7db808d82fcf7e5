"""Tests for provider selection in the model registry."""
import asyncio

import pytest

import config
from api.models.remote_models import RemoteAssistantModel, RemoteGeminiModel, RemoteVisionModel


class TestLoadAll:

    def test_gemini(self, registry, monkeypatch):
        monkeypatch.setattr(config, "INJURY_MODEL_PROVIDER", "gemini")
        monkeypatch.setattr(config, "GEMINI_API_KEY", "k")
        asyncio.run(registry.load_all())
        assert isinstance(registry.get("injury"), RemoteGeminiModel)
        assert registry.get("injury").kind == "text"
        assert isinstance(registry.get("assistant"), RemoteAssistantModel)

    def test_vision(self, registry, monkeypatch):
        monkeypatch.setattr(config, "INJURY_MODEL_PROVIDER", "vision")
        monkeypatch.setattr(config, "GOOGLE_VISION_API_KEY", "k")
        asyncio.run(registry.load_all())
        assert isinstance(registry.get("injury"), RemoteVisionModel)

    def test_missing_key(self, registry, monkeypatch):
        monkeypatch.setattr(config, "INJURY_MODEL_PROVIDER", "gemini")
        monkeypatch.setattr(config, "GEMINI_API_KEY", "")
        asyncio.run(registry.load_all())
        assert registry.loaded_models() == []
        with pytest.raises(RuntimeError):
            registry.get("injury")

    def test_unknown_provider(self, registry, monkeypatch):
        monkeypatch.setattr(config, "INJURY_MODEL_PROVIDER", "tesseract")
        monkeypatch.setattr(config, "GEMINI_API_KEY", "")
        asyncio.run(registry.load_all())
        assert registry.loaded_models() == []

    def test_assistant_loads_without_injury_model(self, registry, monkeypatch):
        monkeypatch.setattr(config, "INJURY_MODEL_PROVIDER", "vision")
        monkeypatch.setattr(config, "GOOGLE_VISION_API_KEY", "")
        monkeypatch.setattr(config, "GEMINI_API_KEY", "k")
        asyncio.run(registry.load_all())
        assert registry.loaded_models() == ["assistant"]

    def test_unload(self, registry, text_model):
        asyncio.run(registry.unload_all())
        assert registry.loaded_models() == []
