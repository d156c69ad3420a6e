"""API configuration constants.

Single source of truth for paths and settings used across the API layer.
Values can be overridden through environment variables (or a .env file).
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

# Base directories
API_DIR = Path(__file__).parent
PACKAGE_DIR = API_DIR.parent
PROJECT_DIR = PACKAGE_DIR.parent
DATA_DIR = Path(os.getenv("STORYBOOK_DATA_DIR", str(PROJECT_DIR / "data")))

# Archived story JSON, one directory per story
STORIES_DIR = DATA_DIR / "stories"

# Generated page illustrations, served under /images
IMAGES_DIR = DATA_DIR / "images"
IMAGES_URL_PREFIX = "/images"

# Whole-pipeline timeout (seconds); in-flight image requests are cancelled when it fires
GENERATION_TIMEOUT = float(os.getenv("STORY_GENERATION_TIMEOUT", "300"))

# Logging
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")  # "json" or "text"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list of allowed origins for the web client
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
