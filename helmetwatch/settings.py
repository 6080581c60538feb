import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_API_BASE = "https://minersgaurdhelmet.onrender.com/api"
HELMET_API_BASE = (os.getenv("HELMET_API_BASE") or DEFAULT_API_BASE).rstrip("/")
HELMET_API_TIMEOUT_SECONDS = float(os.getenv("HELMET_API_TIMEOUT_SECONDS", "10"))

POLL_INTERVAL_SECONDS = int(os.getenv("POLL_INTERVAL_SECONDS", "10"))
SERIES_WINDOW = int(os.getenv("SERIES_WINDOW", "15"))
ALERTS_PER_PAGE = 5


def validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone {name!r}") from exc
    return name


LOCAL_TZ = validate_timezone(os.getenv("LOCAL_TZ") or "UTC")


def resolve_path(env_name: str, default: str) -> Path:
    raw_path = os.getenv(env_name)
    path = Path(raw_path) if raw_path else Path(default)
    return path if path.is_absolute() else PROJECT_ROOT / path


DB_PATH = resolve_path("HELMET_DB_PATH", "data/helmetwatch.db")
EXPORT_DIR = resolve_path("HELMET_EXPORT_DIR", "data/exports")
