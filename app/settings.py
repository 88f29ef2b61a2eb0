import os

from dotenv import load_dotenv

# Load .env file with explicit UTF-8 encoding
load_dotenv(encoding="utf-8")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite:///./waste_rewards.db"

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()

CORS_ORIGINS = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

# bounded retries before a redemption gives up with RedemptionConflict
REDEMPTION_CODE_MAX_ATTEMPTS = max(1, _int_env("REDEMPTION_CODE_MAX_ATTEMPTS", 5))

# weight assumed for a collection when none was measured (kg)
DEFAULT_COLLECTION_WEIGHT_KG = _float_env("DEFAULT_COLLECTION_WEIGHT_KG", 5.0)
