# app/config/settings.py

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[2]

# .env at the project root, if any; real environment variables take precedence
load_dotenv(BASE_DIR / ".env")


def get_data_file() -> Path:
    """
    Location of the applications document, read at call time so tests can
    repoint it. Relative paths are taken from the project root, not the cwd.
    """
    path = Path(os.getenv("TRACKER_DATA_FILE", "data/applications.json")).expanduser()
    return path if path.is_absolute() else BASE_DIR / path


def get_cors_origins() -> list:
    raw = os.getenv("TRACKER_CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


LOG_LEVEL = os.getenv("TRACKER_LOG_LEVEL", "INFO").upper()
APP_NAME = "Job Application Tracker"
APP_VERSION = "1.0.0"
