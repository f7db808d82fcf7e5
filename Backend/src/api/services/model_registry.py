"""Central model registry - configures the upstream injury model once at startup."""
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ModelRegistry:
    """
    Central registry for upstream analysis models.
    Models are created once at startup and shared across requests.

    INJURY_MODEL_PROVIDER selects which remote model backs the "injury" key:
    "gemini" (vision-language JSON/free text) or "vision" (Cloud Vision
    annotations). The "assistant" key holds the Gemini chat model. A model
    whose credentials are missing is registered as None; injury requests then
    resolve to the fail-safe result and assistant requests to a 503.
    """
    _registry: dict[str, Any] = {}

    @classmethod
    async def load_all(cls) -> None:
        """Register the configured injury model and the medical assistant."""
        import config  # local import keeps settings overridable in tests
        from api.models.remote_models import RemoteAssistantModel, RemoteGeminiModel, RemoteVisionModel

        loaders = {
            "gemini": lambda: RemoteGeminiModel(config.GEMINI_API_KEY, config.GEMINI_API_URL),
            "vision": lambda: RemoteVisionModel(config.GOOGLE_VISION_API_KEY, config.VISION_API_URL),
        }
        provider = config.INJURY_MODEL_PROVIDER
        loader = loaders.get(provider)
        if loader is None:
            logger.error(f"✗ Unknown INJURY_MODEL_PROVIDER '{provider}', expected one of {sorted(loaders)}")
            cls._registry["injury"] = None
        else:
            try:
                cls._registry["injury"] = loader()
                logger.info(f"✓ injury model registered ({provider})")
            except RuntimeError as e:
                logger.error(f"✗ injury model initialization failed: {e}")
                cls._registry["injury"] = None

        try:
            cls._registry["assistant"] = RemoteAssistantModel(config.GEMINI_API_KEY, config.ASSISTANT_API_URL)
            logger.info("✓ assistant model registered")
        except RuntimeError as e:
            logger.error(f"✗ assistant model initialization failed: {e}")
            cls._registry["assistant"] = None

    @classmethod
    def register(cls, key: str, model: Any) -> None:
        cls._registry[key] = model

    @classmethod
    async def unload_all(cls) -> None:
        """Drop all models at shutdown."""
        from api.models.remote_models import close_client

        cls._registry.clear()
        close_client()
        logger.info("All models unloaded")

    @classmethod
    def get(cls, key: str) -> Any:
        """Get a model from registry."""
        model = cls._registry.get(key)
        if model is None:
            raise RuntimeError(f"Model '{key}' is not available.")
        return model

    @classmethod
    def loaded_models(cls) -> list[str]:
        """Return list of successfully loaded models."""
        return [k for k, v in cls._registry.items() if v is not None]
