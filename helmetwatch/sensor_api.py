import requests

from helmetwatch.records import SENSOR_FIELDS
from helmetwatch.settings import HELMET_API_BASE, HELMET_API_TIMEOUT_SECONDS

INGEST_FIELDS = tuple(field for field in SENSOR_FIELDS if field != "timestamp")


def _data_url(base_url: str | None) -> str:
    base = (base_url or HELMET_API_BASE).rstrip("/")
    return f"{base}/data"


def _response_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def fetch_recent_data(base_url: str | None = None, timeout: float | None = None):
    """
    Fetch the most recent helmet readings (newest first).

    Returns (payload | None, error_message | None).
    """
    try:
        resp = requests.get(
            _data_url(base_url),
            timeout=timeout or HELMET_API_TIMEOUT_SECONDS,
            headers={"accept": "application/json"},
        )
    except requests.RequestException as exc:
        return None, f"Request failed ({exc.__class__.__name__})"
    if not resp.ok:
        return None, f"API error: {resp.status_code}"
    payload = _response_json(resp)
    if payload is None:
        return None, "Invalid response from API"
    return payload, None


def extract_batch(payload) -> list[dict]:
    if not isinstance(payload, dict):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [record for record in data if isinstance(record, dict)]


def build_ingest_payload(values: dict) -> dict:
    return {key: value for key, value in values.items() if key in INGEST_FIELDS}


def save_data(payload: dict, base_url: str | None = None, timeout: float | None = None) -> tuple[bool, str]:
    """Post one device reading. Returns (ok, message)."""
    body = build_ingest_payload(payload or {})
    try:
        resp = requests.post(
            _data_url(base_url),
            json=body,
            timeout=timeout or HELMET_API_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        return False, f"Request failed ({exc.__class__.__name__})"
    data = _response_json(resp)
    if not isinstance(data, dict):
        data = {}
    if not resp.ok:
        return False, data.get("message") or f"API error: {resp.status_code}"
    return True, data.get("message") or "Saved"
