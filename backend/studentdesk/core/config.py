# studentdesk/core/config.py
import os
import logging
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings

# --- Path Setup & .env Loading ---
# .env lives in the backend project root, two levels up from core
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / '.env'

if ENV_PATH.is_file():
    load_dotenv(dotenv_path=ENV_PATH)

# --- Pydantic Settings Class ---
class Settings(BaseSettings):
    PROJECT_NAME: str = "Student Records API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # Record store database settings
    MONGODB_URL: Optional[str] = None
    DB_NAME: str = "studentdesk_dev"
    MONGODB_TLS: bool = False

    # Frontend origins allowed to call the record store
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Client side of the data view layer
    STORE_BASE_URL: str = "http://localhost:5000/api"
    STORE_TIMEOUT_SECONDS: float = 10.0

    # Sort GPA by numeric value instead of as text
    GPA_SORT_NUMERIC: bool = False

# Create an instance of the Settings class
settings = Settings()

# --- Logging Setup ---
LOG_LEVEL_NAME: str = os.getenv("LOG_LEVEL", "WARNING").upper()
if settings.DEBUG:
    LOG_LEVEL_NAME = "DEBUG"

ACTUAL_LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.WARNING)

logging.basicConfig(
    level=ACTUAL_LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logging.getLogger('uvicorn').setLevel(logging.WARNING)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('fastapi').setLevel(logging.INFO if settings.DEBUG else logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('motor').setLevel(logging.WARNING)
logging.getLogger('pymongo').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

if not ENV_PATH.is_file():
    logger.info(f".env file not found at {ENV_PATH}. Relying on system environment variables.")

# --- Validate critical settings after loading ---
if not settings.MONGODB_URL:
    logger.warning("MONGODB_URL is not set. The record store service will not be able to start.")

if settings.DEBUG:
    logger.debug(f"PROJECT_NAME: {settings.PROJECT_NAME}")
    logger.debug(f"API_PREFIX: {settings.API_PREFIX}")
    logger.debug(f"DB_NAME: {settings.DB_NAME}")
    logger.debug(f"STORE_BASE_URL: {settings.STORE_BASE_URL}")
    logger.debug(f"GPA_SORT_NUMERIC: {settings.GPA_SORT_NUMERIC}")
    logger.debug(f"MONGODB_URL Set: {'Yes' if settings.MONGODB_URL else 'No'}")

# Module-level aliases for modules that import constants directly
PROJECT_NAME = settings.PROJECT_NAME
DEBUG = settings.DEBUG
VERSION = settings.VERSION
API_PREFIX = settings.API_PREFIX
MONGODB_URL = settings.MONGODB_URL
DB_NAME = settings.DB_NAME
MONGODB_TLS = settings.MONGODB_TLS
CORS_ORIGINS = settings.CORS_ORIGINS
STORE_BASE_URL = settings.STORE_BASE_URL
STORE_TIMEOUT_SECONDS = settings.STORE_TIMEOUT_SECONDS
GPA_SORT_NUMERIC = settings.GPA_SORT_NUMERIC
