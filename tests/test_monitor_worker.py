import tempfile
import unittest
from pathlib import Path
from unittest import mock

from helmetwatch.monitor_worker import CycleReporter
from helmetwatch.poller import FeedState, run_cycle

EMERGENCY = {"emergency": True, "reason": "gas leak", "location": "Shaft B", "timestamp": "2026-10-19T08:00:00Z"}


class CycleReporterTest(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("helmetwatch.monitor_worker.log")
        self.log = patcher.start()
        self.addCleanup(patcher.stop)

    def logged(self):
        return [call.args[0] for call in self.log.call_args_list]

    def test_new_emergencies_are_logged_once(self):
        state = FeedState()
        state.subscribe(CycleReporter())
        run_cycle(state, lambda: ({"data": [EMERGENCY, {"temperature": 22}]}, None))
        run_cycle(state, lambda: ({"data": [EMERGENCY]}, None))
        alerts = [line for line in self.logged() if line.startswith("ALERT:")]
        self.assertEqual(len(alerts), 1)
        self.assertIn("gas leak", alerts[0])
        self.assertIn("status=Emergency", self.logged()[0])

    def test_failed_fetch_logs_warning(self):
        state = FeedState()
        state.subscribe(CycleReporter())
        run_cycle(state, lambda: (None, "API error: 500"))
        self.assertEqual(self.logged(), ["WARN: fetch failed (API error: 500); batch cleared."])

    def test_snapshot_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            state = FeedState()
            state.subscribe(CycleReporter(export_dir=tmp))
            run_cycle(state, lambda: ({"data": [EMERGENCY]}, None))
            files = list(Path(tmp).glob("helmet-readings-*.csv"))
            self.assertEqual(len(files), 1)
            self.assertTrue(any(line.startswith("OK: snapshot written") for line in self.logged()))

    def test_seen_alerts_track_only_the_current_batch(self):
        reporter = CycleReporter()
        state = FeedState()
        state.subscribe(reporter)
        for minute in range(100):
            record = dict(EMERGENCY, timestamp=f"2026-10-19T08:{minute // 60:02d}:{minute % 60:02d}Z")
            run_cycle(state, lambda record=record: ({"data": [record]}, None))
        self.assertEqual(len(reporter.seen_alerts), 1)
        alerts = [line for line in self.logged() if line.startswith("ALERT:")]
        self.assertEqual(len(alerts), 100)

    def test_failed_fetch_keeps_seen_alerts(self):
        state = FeedState()
        state.subscribe(CycleReporter())
        run_cycle(state, lambda: ({"data": [EMERGENCY]}, None))
        run_cycle(state, lambda: (None, "API error: 500"))
        run_cycle(state, lambda: ({"data": [EMERGENCY]}, None))
        alerts = [line for line in self.logged() if line.startswith("ALERT:")]
        self.assertEqual(len(alerts), 1)

    def test_emergency_logged_when_newer_success_follows_older_failure(self):
        state = FeedState()
        state.subscribe(CycleReporter())
        older = state.begin_fetch()
        newer = state.begin_fetch()
        state.apply_result(older, error="timeout")
        state.apply_result(newer, {"data": [EMERGENCY]})
        self.assertEqual(self.logged()[0], "WARN: fetch failed (timeout); batch cleared.")
        self.assertTrue(self.logged()[1].startswith("OK: 1 reading(s)"))
        self.assertTrue(self.logged()[2].startswith("ALERT: Emergency at"))


if __name__ == "__main__":
    unittest.main()
