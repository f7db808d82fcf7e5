"""Main FastAPI application for the Aidify injury triage API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routers import assistant, injury, vitals
from api.services.model_registry import ModelRegistry

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure the upstream injury model at startup, release it at shutdown."""
    logger.info("Configuring injury analysis model (%s)...", config.INJURY_MODEL_PROVIDER)
    await ModelRegistry.load_all()
    models = ModelRegistry.loaded_models()
    logger.info(f"{len(models)} models ready: {models}")
    yield
    logger.info("Shutting down and unloading models...")
    await ModelRegistry.unload_all()


app = FastAPI(
    title="Aidify Injury Triage API",
    description=(
        "Classifies injury photos, returns step-by-step first-aid instructions and "
        "answers first-aid questions. "
        "Blood evidence always escalates to a bleeding-care verdict, and an unreachable "
        "analysis service yields a conservative fail-safe result."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests (from React frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Include Routers ────────────────────────────────────────────────────
app.include_router(injury.router, prefix="/api/injury", tags=["Injury Triage"])
app.include_router(vitals.router, prefix="/api/vitals", tags=["Vital Signs"])
app.include_router(assistant.router, prefix="/api/chat", tags=["Medical Assistant"])


# ── Health Check ────────────────────────────────────────────────────────
@app.get("/health", tags=["Health"], summary="Service health check")
async def health():
    """
    Check API health and loaded models.

    Returns:
        - status: "ok" if running
        - models_loaded: List of successfully configured models
        - provider: the configured injury model provider
    """
    return {
        "status": "ok",
        "models_loaded": ModelRegistry.loaded_models(),
        "provider": config.INJURY_MODEL_PROVIDER,
    }


# ── API Info ────────────────────────────────────────────────────────────
@app.get("/", tags=["Info"], summary="API information")
async def root():
    """Get API metadata."""
    return {
        "name": "Aidify Injury Triage API",
        "version": "1.0.0",
        "description": "Injury classification and first-aid instructions",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "injury_analyze":        "/api/injury/analyze",
            "injury_analyze_base64": "/api/injury/analyze-base64",
            "injury_instructions":   "/api/injury/instructions",
            "injury_types":          "/api/injury/types",
            "injury_report":         "/api/injury/report",
            "vitals_analyze":        "/api/vitals/analyze",
            "assistant_chat":        "/api/chat",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
