"""
Remote inference wrappers for the injury triage API.

The image models expose ``predict(data: bytes)`` and a ``kind`` attribute
the pipeline uses to pick a parser:

  RemoteGeminiModel  -> str   (JSON or free-text description of the injury)
  RemoteVisionModel  -> dict  (Cloud Vision annotation for a single image)

RemoteAssistantModel answers free-form medical questions as text.

Any transport, HTTP or payload problem is raised as UpstreamUnavailable so
the caller can fall back to the fail-safe result.
"""

import base64
import io
import logging
import threading

import httpx
from PIL import Image

import config
from triage.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

_MAX_BYTES = 4 * 1024 * 1024  # inline image payloads above this are downsampled first

# Shared persistent HTTP client with connection pooling.
# httpx.Client is thread-safe for concurrent requests.
_client_lock = threading.Lock()
_shared_client: httpx.Client | None = None


def _get_client() -> httpx.Client:
    """Return (or lazily create) the shared persistent httpx client."""
    global _shared_client
    if _shared_client is None:
        with _client_lock:
            if _shared_client is None:  # double-checked locking
                _shared_client = httpx.Client(
                    timeout=config.REMOTE_TIMEOUT,
                    limits=httpx.Limits(
                        max_connections=20,
                        max_keepalive_connections=10,
                        keepalive_expiry=30,
                    ),
                )
    return _shared_client


def close_client() -> None:
    global _shared_client
    with _client_lock:
        if _shared_client is not None:
            _shared_client.close()
            _shared_client = None


def _post(url: str, payload: dict, params: dict | None = None, client: httpx.Client | None = None) -> dict:
    """POST *payload* as JSON and return the decoded body, or raise UpstreamUnavailable."""
    client = client or _get_client()
    try:
        r = client.post(url, json=payload, params=params)
    except httpx.ConnectError as exc:
        logger.error("Remote model unreachable at %s", url)
        raise UpstreamUnavailable("Analysis service unreachable") from exc
    except httpx.TimeoutException as exc:
        logger.error("Remote model timed out (%ss) at %s", config.REMOTE_TIMEOUT, url)
        raise UpstreamUnavailable("Analysis service timed out") from exc
    except httpx.HTTPError as exc:
        logger.error("Remote model request failed: %s", exc)
        raise UpstreamUnavailable(f"Analysis request failed: {exc}") from exc

    try:
        body = r.json()
    except ValueError as exc:
        raise UpstreamUnavailable(f"Analysis service returned non-JSON (HTTP {r.status_code})") from exc

    if r.is_error or (isinstance(body, dict) and body.get("error")):
        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if isinstance(error, dict) else error
        logger.error("Remote model error (HTTP %s): %s", r.status_code, message or body)
        raise UpstreamUnavailable(f"Analysis service error: {message or r.status_code}")
    if not isinstance(body, dict):
        raise UpstreamUnavailable("Analysis service returned an unexpected payload")
    return body


def _shrink(data: bytes, tag: str) -> bytes:
    """Downsample oversized images so inline payloads stay small."""
    if len(data) <= _MAX_BYTES:
        return data
    try:
        img = Image.open(io.BytesIO(data)).convert('RGB')
        img.thumbnail((1280, 1280))  # resize keeping aspect ratio
        buf = io.BytesIO()
        img.save(buf, format='JPEG', quality=85)
        logger.debug("%s: resized image from %d to %d bytes", tag, len(data), buf.tell())
        return buf.getvalue()
    except (OSError, Image.DecompressionBombError) as exc:
        logger.warning("%s: could not resize image (%s), sending original", tag, exc)
        return data


TRIAGE_PROMPT = """You are a medical professional specializing in injury assessment from images. \
Please analyze this image of a potential injury and tell me the following details in JSON format only:

1) injuryType: Should be one of the following specific categories:
   - Bleeding (if you see active bleeding or blood)
   - Cut/Laceration (if you see a cut in the skin)
   - Burn Injury (if you see burns or scalds)
   - Fracture (if you see signs of broken bones)
   - Sprain/Strain (if you see swelling of joints without cuts/blood)
   - Head Injury (if injury is on the head)
   - Eye Injury (if injury affects eyes)
   - Allergic Reaction (if you see signs of allergies/rash)
   - Minor Wound (for small scratches)

2) severity: low, medium, or high
3) location: specific body part affected
4) bloodLevel: none, minimal, moderate, or severe
5) confidence: number between 0-1 indicating your confidence
6) detectionDetails: object containing:
   - detectedObjects: array of objects visible in the image
   - detectedColors: array of dominant colors (especially note red/blood colors)
   - foreignObjects: boolean - true if any foreign object is embedded in the wound

IMPORTANT GUIDANCE:
- If you see ANY blood, prioritize "Bleeding" or "Cut/Laceration" as the injuryType
- If blood is visible, bloodLevel should not be "none"
- If there's significant blood, severity should be "high"
- When in doubt about an injury with blood, classify as "Bleeding" to ensure proper emergency care
- Always respond in valid JSON format only, no other text

Now analyze the image carefully:"""


# ─────────────────────────────────────────────────────────────────────────────
class RemoteGeminiModel:
    """
    Vision-language model over the Gemini generateContent REST endpoint.
    predict(data: bytes) -> str
    """
    kind = "text"

    def __init__(self, api_key: str, url: str = config.GEMINI_API_URL, client: httpx.Client | None = None):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")
        self._api_key = api_key
        self._url = url
        self._client = client
        logger.info("✓ RemoteGeminiModel configured for %s", url)

    def predict(self, data: bytes) -> str:
        data = _shrink(data, "RemoteGeminiModel")
        payload = {
            "contents": [{
                "parts": [
                    {"text": TRIAGE_PROMPT},
                    {"inline_data": {"mime_type": "image/jpeg", "data": base64.b64encode(data).decode()}},
                ],
            }],
            "generationConfig": {
                "temperature": config.GEMINI_TEMPERATURE,
                "maxOutputTokens": config.GEMINI_MAX_OUTPUT_TOKENS,
            },
        }
        body = _post(self._url, payload, params={"key": self._api_key}, client=self._client)

        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise UpstreamUnavailable("No text response from the analysis model") from exc
        if not isinstance(text, str) or not text.strip():
            raise UpstreamUnavailable("No text response from the analysis model")

        logger.debug("Raw model response: %s", text)
        return text


# ─────────────────────────────────────────────────────────────────────────────
class RemoteVisionModel:
    """
    Google Cloud Vision images:annotate.
    predict(data: bytes) -> dict (the first entry of ``responses``)
    """
    kind = "vision"

    FEATURES = (
        {"type": "LABEL_DETECTION", "maxResults": 15},
        {"type": "IMAGE_PROPERTIES", "maxResults": 5},
        {"type": "OBJECT_LOCALIZATION", "maxResults": 10},
        {"type": "TEXT_DETECTION", "maxResults": 15},
        {"type": "FACE_DETECTION", "maxResults": 5},
        {"type": "SAFE_SEARCH_DETECTION"},
    )

    def __init__(self, api_key: str, url: str = config.VISION_API_URL, client: httpx.Client | None = None):
        if not api_key:
            raise RuntimeError("GOOGLE_VISION_API_KEY is not set")
        self._api_key = api_key
        self._url = url
        self._client = client
        logger.info("✓ RemoteVisionModel configured for %s", url)

    def predict(self, data: bytes) -> dict:
        data = _shrink(data, "RemoteVisionModel")
        payload = {
            "requests": [{
                "image": {"content": base64.b64encode(data).decode()},
                "features": list(self.FEATURES),
            }],
        }
        body = _post(self._url, payload, params={"key": self._api_key}, client=self._client)

        responses = body.get("responses") or []
        if not responses or not isinstance(responses[0], dict):
            raise UpstreamUnavailable("Empty response from the vision service")
        annotation = responses[0]
        error = annotation.get("error")
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else error
            raise UpstreamUnavailable(f"Vision API error: {message}")
        return annotation


ASSISTANT_SYSTEM_PROMPT = """You are a highly advanced AI medical assistant specializing in injury detection and medical information.
Your primary goal is to analyze user-provided symptoms, injuries, or medical queries with the highest accuracy.

Guidelines:
- Provide fact-based, verified responses aligned with the latest medical guidelines and research
- Suggest possible diagnoses, first aid measures, and when to seek professional medical attention
- Maintain a professional, empathetic, and reassuring tone
- Keep responses clear, concise, and error-free
- Always include a disclaimer about consulting healthcare professionals
- Never provide definitive medical diagnoses
- Clearly indicate when information is general advice versus emergency guidance
- For serious conditions, emphasize the importance of seeking immediate medical help

Important: If a situation requires a medical professional, the user should be encouraged to consult a doctor immediately."""

ASSISTANT_ACKNOWLEDGEMENT = (
    "I understand my role and responsibilities as a medical assistant AI. I'll provide factual, "
    "evidence-based information while maintaining appropriate caution and emphasizing the importance "
    "of professional medical consultation."
)

ASSISTANT_FALLBACK_ANSWER = (
    "I apologize, but I encountered an issue processing your medical query. "
    "Please try again or rephrase your question."
)


# ─────────────────────────────────────────────────────────────────────────────
class RemoteAssistantModel:
    """
    Medical question answering over the Gemini generateContent REST endpoint.
    predict(query: str, context: str = "") -> str

    A reply without a usable candidate (for example one blocked by the
    safety settings) yields ASSISTANT_FALLBACK_ANSWER rather than an error.
    """
    kind = "chat"

    SAFETY_SETTINGS = tuple(
        {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
        for category in (
            "HARM_CATEGORY_HARASSMENT",
            "HARM_CATEGORY_HATE_SPEECH",
            "HARM_CATEGORY_SEXUALLY_EXPLICIT",
            "HARM_CATEGORY_DANGEROUS_CONTENT",
        )
    )

    def __init__(self, api_key: str, url: str = config.ASSISTANT_API_URL, client: httpx.Client | None = None):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")
        self._api_key = api_key
        self._url = url
        self._client = client
        logger.info("✓ RemoteAssistantModel configured for %s", url)

    def predict(self, query: str, context: str = "") -> str:
        question = f"{query}\n\n{context}" if context else query
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": ASSISTANT_SYSTEM_PROMPT}]},
                {"role": "model", "parts": [{"text": ASSISTANT_ACKNOWLEDGEMENT}]},
                {"role": "user", "parts": [{"text": question}]},
            ],
            "generationConfig": {
                "temperature": config.ASSISTANT_TEMPERATURE,
                "topK": config.ASSISTANT_TOP_K,
                "topP": config.ASSISTANT_TOP_P,
                "maxOutputTokens": config.ASSISTANT_MAX_OUTPUT_TOKENS,
            },
            "safetySettings": list(self.SAFETY_SETTINGS),
        }
        body = _post(self._url, payload, params={"key": self._api_key}, client=self._client)

        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.warning("Assistant reply had no candidate text: %s", body)
            return ASSISTANT_FALLBACK_ANSWER
        if not isinstance(text, str) or not text.strip():
            return ASSISTANT_FALLBACK_ANSWER
        return text
