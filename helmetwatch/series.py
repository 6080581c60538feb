import pandas as pd

from helmetwatch.records import to_number
from helmetwatch.settings import LOCAL_TZ, SERIES_WINDOW

SERIES_METRICS = {
    "temperature": "Temperature (C)",
    "humidity": "Humidity (%)",
}


def parse_timestamp(value, tz_name: str = LOCAL_TZ):
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    if tz_name is None:
        return ts
    return ts.tz_convert(tz_name)


def time_label(value, tz_name: str = LOCAL_TZ) -> str:
    ts = parse_timestamp(value, tz_name)
    if ts is None:
        return ""
    return ts.strftime("%I:%M:%S %p").lstrip("0")


def datetime_label(value, tz_name: str = LOCAL_TZ, fallback: str = "--") -> str:
    ts = parse_timestamp(value, tz_name)
    if ts is None:
        return fallback
    return ts.strftime("%Y-%m-%d %I:%M %p")


def build_series(batch, window: int = SERIES_WINDOW, tz_name: str = LOCAL_TZ) -> list[dict]:
    """
    Chronological chart points for the newest `window` readings.

    The batch arrives newest-first; the slice is reversed so the oldest point
    is plotted first. Missing readings stay None so the chart shows a gap.
    """
    recent = list(batch or [])[:window]
    series = []
    for record in reversed(recent):
        record = record if isinstance(record, dict) else {}
        series.append(
            {
                "time": time_label(record.get("timestamp"), tz_name),
                "temperature": to_number(record.get("temperature")),
                "humidity": to_number(record.get("humidity")),
            }
        )
    return series


def series_frame(series: list[dict], metrics: list[str] | None = None) -> pd.DataFrame:
    """Long-form (order, time, value, metric) frame for the altair line chart."""
    metrics = metrics or list(SERIES_METRICS)
    rows = []
    for order, point in enumerate(series):
        for key in metrics:
            rows.append(
                {
                    "order": order,
                    "time": point.get("time", ""),
                    "value": point.get(key),
                    "metric": SERIES_METRICS.get(key, key),
                }
            )
    df = pd.DataFrame(rows, columns=["order", "time", "value", "metric"])
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    return df
