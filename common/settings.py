#Purpose: Environment configuration for the HTTP clients and the navigation policy.
#Values come from the process environment, optionally seeded from a .env file:
#API_BASE_URL=http://localhost:8000
#SEARCH_BASE_URL=https://nominatim.openstreetmap.org
#HTTP_TIMEOUT_S=10
#REFRESH_THRESHOLD_M=50
#REFRESH_INTERVAL_S=10
#Clients read these as defaults; anything passed explicitly wins.

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEARCH_BASE_URL = "https://nominatim.openstreetmap.org"


def api_base_url():
    return os.getenv("API_BASE_URL")


def search_base_url():
    return os.getenv("SEARCH_BASE_URL", DEFAULT_SEARCH_BASE_URL)


def http_timeout_s() -> float:
    return float(os.getenv("HTTP_TIMEOUT_S", "10"))


def env_float(name: str, default: float) -> float:
    """Read a float env var, falling back to `default` when unset or blank."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
