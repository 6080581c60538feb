import csv
import io
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from helmetwatch.export import CSV_COLUMNS, export_csv, export_filename, write_snapshot

HEADER = "temperature,humidity,gasValue,flameStatus,irValue,accelX,accelY,location,emergency,reason,timestamp"

SAMPLE_BATCH = [
    {
        "temperature": 30,
        "humidity": None,
        "gasValue": 412.5,
        "flameStatus": "FLAME",
        "irValue": 1,
        "accelX": -0.2,
        "accelY": 0.9,
        "location": "Shaft B, level 3",
        "emergency": True,
        "reason": 'Operator said "get out"',
        "timestamp": "2026-10-19T08:00:00Z",
    },
    {
        "temperature": "27.1",
        "humidity": 61,
        "location": None,
        "emergency": False,
        "timestamp": "2026-10-19T07:59:50Z",
    },
]


def parse(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


class ExportCsvTest(unittest.TestCase):
    def test_empty_batch_produces_no_artifact(self):
        self.assertIsNone(export_csv([]))
        self.assertIsNone(export_csv(None))

    def test_header_is_literal_column_names(self):
        content = export_csv(SAMPLE_BATCH)
        self.assertEqual(content.decode("utf-8").split("\n")[0], HEADER)
        self.assertEqual(",".join(CSV_COLUMNS), HEADER)

    def test_every_field_is_quoted(self):
        lines = export_csv(SAMPLE_BATCH).decode("utf-8").split("\n")
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[1].startswith('"30","","412.5","FLAME","1"'))
        self.assertIn('"Operator said ""get out"""', lines[1])
        self.assertTrue(lines[2].endswith('"false","","2026-10-19T07:59:50Z"'))

    def test_round_trip_preserves_values_and_order(self):
        rows = parse(export_csv(SAMPLE_BATCH))
        self.assertEqual(rows[0], list(CSV_COLUMNS))
        self.assertEqual(
            rows[1],
            [
                "30",
                "",
                "412.5",
                "FLAME",
                "1",
                "-0.2",
                "0.9",
                "Shaft B, level 3",
                "true",
                'Operator said "get out"',
                "2026-10-19T08:00:00Z",
            ],
        )
        self.assertEqual(rows[2], ["27.1", "61", "", "", "", "", "", "", "false", "", "2026-10-19T07:59:50Z"])

    def test_export_does_not_modify_batch(self):
        batch = [dict(record) for record in SAMPLE_BATCH]
        export_csv(batch)
        self.assertEqual(batch, SAMPLE_BATCH)


class ExportFileTest(unittest.TestCase):
    def test_filename_uses_export_date(self):
        self.assertEqual(export_filename(datetime(2026, 10, 19, 23, 59)), "helmet-readings-2026-10-19.csv")

    def test_write_snapshot(self):
        with tempfile.TemporaryDirectory() as tmp:
            now = datetime(2026, 10, 19, 12, 0)
            path = write_snapshot(SAMPLE_BATCH, Path(tmp) / "exports", now=now)
            self.assertEqual(path.name, "helmet-readings-2026-10-19.csv")
            self.assertEqual(path.read_bytes(), export_csv(SAMPLE_BATCH))
            self.assertEqual([p.name for p in path.parent.iterdir()], [path.name])

    def test_write_snapshot_skips_empty_batch(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(write_snapshot([], tmp))
            self.assertEqual(list(Path(tmp).iterdir()), [])


if __name__ == "__main__":
    unittest.main()
