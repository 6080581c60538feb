import copy
import csv
import io
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from helmetwatch.records import SENSOR_FIELDS

CSV_COLUMNS = SENSOR_FIELDS
FILENAME_PREFIX = "helmet-readings"


def _csv_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def export_csv(batch) -> bytes | None:
    """
    Serialize a batch to CSV bytes, or None when there is nothing to export.

    Rows keep batch order; every data field is quoted with embedded quotes
    doubled. The header row is the bare column names.
    """
    snapshot = copy.deepcopy(list(batch or []))
    if not snapshot:
        return None
    buffer = io.StringIO()
    buffer.write(",".join(CSV_COLUMNS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in snapshot:
        record = record if isinstance(record, dict) else {}
        writer.writerow([_csv_text(record.get(column)) for column in CSV_COLUMNS])
    return buffer.getvalue().rstrip("\n").encode("utf-8")


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"{FILENAME_PREFIX}-{now.strftime('%Y-%m-%d')}.csv"


def write_snapshot(batch, directory: str | Path, now: datetime | None = None) -> Path | None:
    content = export_csv(batch)
    if content is None:
        return None
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / export_filename(now)
    fd, tmp_name = tempfile.mkstemp(dir=target_dir, prefix=".export-", suffix=".csv")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        os.replace(tmp_name, target)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target
