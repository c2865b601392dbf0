"""Configuration management for the location search service."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
LOCATIONS_CSV_PATH = Path(os.getenv("LOCATIONS_CSV_PATH", DATA_DIR / "locations.csv"))

# Cache settings
CACHE_MAX_SIZE: int = int(os.getenv("CACHE_MAX_SIZE", "1000"))

# Rate limiting (requests per window, per client)
AUTOCOMPLETE_RATE_LIMIT: int = int(os.getenv("AUTOCOMPLETE_RATE_LIMIT", "50"))
SEARCH_RATE_LIMIT: int = int(os.getenv("SEARCH_RATE_LIMIT", "30"))
RATE_LIMIT_WINDOW_MS: int = int(os.getenv("RATE_LIMIT_WINDOW_MS", "60000"))

# Search settings
MIN_SCORE: float = float(os.getenv("MIN_SCORE", "0.3"))
DEFAULT_SEARCH_LIMIT: int = int(os.getenv("DEFAULT_SEARCH_LIMIT", "20"))
DEFAULT_AUTOCOMPLETE_LIMIT: int = int(os.getenv("DEFAULT_AUTOCOMPLETE_LIMIT", "10"))
DEFAULT_SUGGESTION_LIMIT: int = int(os.getenv("DEFAULT_SUGGESTION_LIMIT", "5"))
VALIDATION_SUGGESTION_LIMIT: int = int(os.getenv("VALIDATION_SUGGESTION_LIMIT", "3"))

# Input limits
MAX_INPUT_LENGTH: int = int(os.getenv("MAX_INPUT_LENGTH", "200"))
MAX_SEARCH_LENGTH: int = int(os.getenv("MAX_SEARCH_LENGTH", "100"))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# CSV column names, in hierarchy order
CSV_COLUMNS = [
    "idregion",
    "iddistrict",
    "idcouncil",
    "idchiefdom",
    "idsection",
    "idtown",
]
