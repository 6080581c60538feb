from helmetwatch.records import is_emergency, normalize_record, to_number

STATUS_EMERGENCY = "Emergency"
STATUS_OFFLINE = "Offline"
STATUS_ONLINE = "Online"

STATUS_NOTES = {
    STATUS_EMERGENCY: "Check active helmet alerts",
    STATUS_OFFLINE: "No recent data - check connection",
    STATUS_ONLINE: "Monitoring - no emergency flags",
}


def mean_of(batch, key: str) -> float | None:
    values = [to_number(record.get(key)) for record in batch]
    values = [value for value in values if value is not None]
    if not values:
        return None
    return sum(values) / len(values)


def system_status(any_emergency: bool, reading_count: int) -> str:
    if any_emergency:
        return STATUS_EMERGENCY
    if reading_count == 0:
        return STATUS_OFFLINE
    return STATUS_ONLINE


def compute_metrics(batch) -> dict:
    batch = [record for record in (batch or []) if isinstance(record, dict)]
    any_emergency = any(is_emergency(record) for record in batch)
    status = system_status(any_emergency, len(batch))
    return {
        "avg_temperature": mean_of(batch, "temperature"),
        "avg_humidity": mean_of(batch, "humidity"),
        "avg_gas": mean_of(batch, "gasValue"),
        "any_emergency": any_emergency,
        "system_status": status,
        "system_note": STATUS_NOTES[status],
        "reading_count": len(batch),
    }


def latest_reading(batch) -> dict:
    if not batch:
        return {}
    return batch[0] if isinstance(batch[0], dict) else {}


def active_readings(batch, limit: int = 3) -> list[dict]:
    return [normalize_record(record) for record in list(batch or [])[:limit]]


def format_number(value, decimals: int = 2, fallback: str = "--") -> str:
    number = to_number(value)
    if number is None:
        return fallback
    return f"{number:.{decimals}f}"


def format_value(value, fallback: str = "--") -> str:
    if value is None or value == "":
        return fallback
    number = to_number(value)
    if number is None:
        return str(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"
