import math

NUMERIC_FIELDS = ("temperature", "humidity", "gasValue", "accelX", "accelY")
PASS_THROUGH_FIELDS = ("flameStatus", "irValue", "location", "reason", "timestamp")
SENSOR_FIELDS = (
    "temperature",
    "humidity",
    "gasValue",
    "flameStatus",
    "irValue",
    "accelX",
    "accelY",
    "location",
    "emergency",
    "reason",
    "timestamp",
)


def to_number(value) -> float | None:
    """
    Coerce a raw reading to a finite float.

    Missing, blank, boolean, non-numeric and non-finite values all become None;
    nothing is ever coerced to 0.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_emergency(record) -> bool:
    if not isinstance(record, dict):
        return False
    return record.get("emergency") is True


def compute_g_force(accel_x, accel_y) -> float | None:
    x = to_number(accel_x)
    y = to_number(accel_y)
    if x is None or y is None:
        return None
    return math.sqrt(x * x + y * y)


def normalize_record(raw) -> dict:
    raw = raw if isinstance(raw, dict) else {}
    record = {field: to_number(raw.get(field)) for field in NUMERIC_FIELDS}
    for field in PASS_THROUGH_FIELDS:
        record[field] = raw.get(field)
    record["emergency"] = is_emergency(raw)
    record["gForce"] = compute_g_force(raw.get("accelX"), raw.get("accelY"))
    return record
