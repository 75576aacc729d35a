# digipin_api/config.py
import os

from dotenv import load_dotenv

# Load environment variables from .env file for local development
load_dotenv()

# --- Service ---
SERVICE_NAME = "digipin-api"
SERVICE_VERSION = "1.0.0"
LOG_LEVEL = os.getenv("DIGIPIN_LOG_LEVEL", "INFO")

# --- Batch processing ---
COLUMN_ALIASES_PATH = os.getenv("DIGIPIN_COLUMN_ALIASES_PATH", "data/column_aliases.yml")
LATITUDE_COLUMN = os.getenv("DIGIPIN_LATITUDE_COLUMN", "Latitude")
LONGITUDE_COLUMN = os.getenv("DIGIPIN_LONGITUDE_COLUMN", "Longitude")
CODE_COLUMN = os.getenv("DIGIPIN_CODE_COLUMN", "digipin")

# --- GeoJSON export ---
MAX_CELLS = int(os.getenv("DIGIPIN_MAX_CELLS", 1000))
