"""Tests for the remote model wrappers, using httpx.MockTransport."""
import base64
import io
import json

import httpx
import pytest
from PIL import Image

from api.models import remote_models
from api.models.remote_models import RemoteAssistantModel, RemoteGeminiModel, RemoteVisionModel
from triage.errors import UpstreamUnavailable

GEMINI_URL = "https://gemini.test/v1beta/models/test:generateContent"
VISION_URL = "https://vision.test/v1/images:annotate"


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestRemoteGeminiModel:

    def test_returns_candidate_text(self):
        seen = {}

        def handler(request):
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply('{"injuryType": "Fracture"}'))

        model = RemoteGeminiModel("secret", GEMINI_URL, client=_client(handler))
        assert model.predict(b"jpeg-bytes") == '{"injuryType": "Fracture"}'

        assert seen["key"] == "secret"
        parts = seen["body"]["contents"][0]["parts"]
        assert parts[0]["text"] == remote_models.TRIAGE_PROMPT
        assert base64.b64decode(parts[1]["inline_data"]["data"]) == b"jpeg-bytes"
        assert seen["body"]["generationConfig"]["temperature"] == 0.1

    def test_requires_api_key(self):
        with pytest.raises(RuntimeError):
            RemoteGeminiModel("", GEMINI_URL)

    def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamUnavailable):
            RemoteGeminiModel("k", GEMINI_URL, client=_client(handler)).predict(b"x")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(UpstreamUnavailable, match="timed out"):
            RemoteGeminiModel("k", GEMINI_URL, client=_client(handler)).predict(b"x")

    def test_api_error_payload(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "quota exceeded"}})

        with pytest.raises(UpstreamUnavailable, match="quota exceeded"):
            RemoteGeminiModel("k", GEMINI_URL, client=_client(handler)).predict(b"x")

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>bad gateway</html>")

        with pytest.raises(UpstreamUnavailable):
            RemoteGeminiModel("k", GEMINI_URL, client=_client(handler)).predict(b"x")

    @pytest.mark.parametrize("body", [{"candidates": []}, _gemini_reply("   "), {}])
    def test_empty_candidates(self, body):
        client = _client(lambda request: httpx.Response(200, json=body))
        with pytest.raises(UpstreamUnavailable):
            RemoteGeminiModel("k", GEMINI_URL, client=client).predict(b"x")


class TestRemoteVisionModel:

    def test_returns_first_response(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"responses": [{"labelAnnotations": [{"description": "Wound"}]}]})

        annotation = RemoteVisionModel("k", VISION_URL, client=_client(handler)).predict(b"x")
        assert annotation == {"labelAnnotations": [{"description": "Wound"}]}
        features = [f["type"] for f in seen["body"]["requests"][0]["features"]]
        assert features == [
            "LABEL_DETECTION", "IMAGE_PROPERTIES", "OBJECT_LOCALIZATION",
            "TEXT_DETECTION", "FACE_DETECTION", "SAFE_SEARCH_DETECTION",
        ]

    def test_per_image_error(self):
        client = _client(lambda request: httpx.Response(200, json={"responses": [{"error": {"message": "bad image"}}]}))
        with pytest.raises(UpstreamUnavailable, match="bad image"):
            RemoteVisionModel("k", VISION_URL, client=client).predict(b"x")

    def test_per_image_error_as_string(self):
        client = _client(lambda request: httpx.Response(200, json={"responses": [{"error": "quota exceeded"}]}))
        with pytest.raises(UpstreamUnavailable, match="quota exceeded"):
            RemoteVisionModel("k", VISION_URL, client=client).predict(b"x")

    def test_empty_responses(self):
        client = _client(lambda request: httpx.Response(200, json={"responses": []}))
        with pytest.raises(UpstreamUnavailable):
            RemoteVisionModel("k", VISION_URL, client=client).predict(b"x")


class TestShrink:

    def test_small_payload_untouched(self):
        assert remote_models._shrink(b"abc", "test") == b"abc"

    def test_large_image_is_reencoded_as_jpeg(self, monkeypatch):
        monkeypatch.setattr(remote_models, "_MAX_BYTES", 10)
        buf = io.BytesIO()
        Image.new("RGB", (64, 64), (200, 30, 40)).save(buf, format="PNG")
        out = remote_models._shrink(buf.getvalue(), "test")
        assert out[:2] == b"\xff\xd8"

    def test_undecodable_payload_is_sent_as_is(self, monkeypatch):
        monkeypatch.setattr(remote_models, "_MAX_BYTES", 2)
        assert remote_models._shrink(b"not an image", "test") == b"not an image"

    def test_decompression_bomb_is_sent_as_is(self, monkeypatch):
        monkeypatch.setattr(remote_models, "_MAX_BYTES", 10)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        buf = io.BytesIO()
        Image.new("RGB", (64, 64), (200, 30, 40)).save(buf, format="PNG")
        assert remote_models._shrink(buf.getvalue(), "test") == buf.getvalue()


class TestRemoteAssistantModel:

    def test_conversation_payload(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply("Cool it under running water."))

        model = RemoteAssistantModel("k", GEMINI_URL, client=_client(handler))
        assert model.predict("How do I treat a burn?", "CONTEXT") == "Cool it under running water."

        body = seen["body"]
        assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
        assert body["contents"][0]["parts"][0]["text"] == remote_models.ASSISTANT_SYSTEM_PROMPT
        assert body["contents"][2]["parts"][0]["text"] == "How do I treat a burn?\n\nCONTEXT"
        assert body["generationConfig"] == {"temperature": 0.2, "topK": 40, "topP": 0.8, "maxOutputTokens": 1024}
        assert {s["threshold"] for s in body["safetySettings"]} == {"BLOCK_MEDIUM_AND_ABOVE"}
        assert len(body["safetySettings"]) == 4

    def test_query_without_context(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply("ok"))

        RemoteAssistantModel("k", GEMINI_URL, client=_client(handler)).predict("Is this serious?")
        assert seen["body"]["contents"][2]["parts"][0]["text"] == "Is this serious?"

    def test_blocked_reply_falls_back_to_apology(self):
        body = {"promptFeedback": {"blockReason": "SAFETY"}}
        client = _client(lambda request: httpx.Response(200, json=body))
        answer = RemoteAssistantModel("k", GEMINI_URL, client=client).predict("question")
        assert answer == remote_models.ASSISTANT_FALLBACK_ANSWER

    def test_api_error_raises(self):
        client = _client(lambda request: httpx.Response(400, json={"error": {"message": "API key not valid"}}))
        with pytest.raises(UpstreamUnavailable, match="API key not valid"):
            RemoteAssistantModel("k", GEMINI_URL, client=client).predict("question")

    def test_requires_api_key(self):
        with pytest.raises(RuntimeError):
            RemoteAssistantModel("", GEMINI_URL)
