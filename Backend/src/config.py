"""
Configuration Module
Remote model endpoints, API keys and upload limits.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Upstream model selection ---
# "gemini": vision-language model returns JSON/free text describing the injury
# "vision": Cloud Vision labels/objects/colors feed the keyword scorer directly
INJURY_MODEL_PROVIDER = os.getenv("INJURY_MODEL_PROVIDER", "gemini").lower()

# --- Gemini ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL",
    f"https://generativelanguage.googleapis.com/v1beta/models/{GEMINI_MODEL}:generateContent",
)
GEMINI_TEMPERATURE = 0.1
GEMINI_MAX_OUTPUT_TOKENS = 2048

# --- Medical assistant (text chat over Gemini) ---
ASSISTANT_MODEL = os.getenv("ASSISTANT_MODEL", "gemini-1.5-pro")
ASSISTANT_API_URL = os.getenv(
    "ASSISTANT_API_URL",
    f"https://generativelanguage.googleapis.com/v1/models/{ASSISTANT_MODEL}:generateContent",
)
ASSISTANT_TEMPERATURE = 0.2
ASSISTANT_TOP_K = 40
ASSISTANT_TOP_P = 0.8
ASSISTANT_MAX_OUTPUT_TOKENS = 1024

# --- Cloud Vision ---
GOOGLE_VISION_API_KEY = os.getenv("GOOGLE_VISION_API_KEY", "")
VISION_API_URL = os.getenv("VISION_API_URL", "https://vision.googleapis.com/v1/images:annotate")

# --- HTTP ---
REMOTE_TIMEOUT = float(os.getenv("REMOTE_TIMEOUT", "60"))  # seconds per upstream request
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Uploads ---
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(20 * 1024 * 1024)))  # 20 MB
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/bmp", "image/heic"})
