import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a local .env file if present.
load_dotenv()

# Base directory for backend assets.
BASE_DIR = Path(__file__).resolve().parent

# Prompt templates live next to the code unless pointed elsewhere.
PROMPT_TEMPLATE_DIR = Path(os.getenv("STUDIO_PROMPT_DIR", BASE_DIR / "prompts"))

# Model choices can be overridden via environment variables if desired.
TEXT_MODEL = os.getenv("STUDIO_TEXT_MODEL", "gpt-4.1-mini")
IMAGE_MODEL = os.getenv("STUDIO_IMAGE_MODEL", "gpt-image-1")

# Image generation defaults.
IMAGE_SIZE = os.getenv("STUDIO_IMAGE_SIZE", "1024x1024")
IMAGE_BACKGROUND = os.getenv("STUDIO_IMAGE_BACKGROUND", "auto")
LOGO_BACKGROUND = os.getenv("STUDIO_LOGO_BACKGROUND", "transparent")
IMAGE_OUTPUT_FORMAT = os.getenv("STUDIO_IMAGE_FORMAT", "png")

# Image calls get one retry after a short pause; text calls never retry.
IMAGE_MAX_ATTEMPTS = int(os.getenv("STUDIO_IMAGE_MAX_ATTEMPTS", "2"))
RETRY_DELAY_SECONDS = float(os.getenv("STUDIO_RETRY_DELAY_SECONDS", "1.0"))

LOG_LEVEL = os.getenv("STUDIO_LOG_LEVEL", "INFO").upper()

# Comma-separated list; "*" allows any front end.
CORS_ORIGINS = [o.strip() for o in os.getenv("STUDIO_CORS_ORIGINS", "*").split(",") if o.strip()]


def configure_logging() -> None:
    """Install a root handler at the configured level."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
