import asyncio
import os
import sys

from helmetwatch.alert_feed import alert_reason, filter_alerts
from helmetwatch.export import write_snapshot
from helmetwatch.logs import worker_logger
from helmetwatch.metrics import compute_metrics, format_number
from helmetwatch.poller import FeedState, HelmetPoller, run_cycle
from helmetwatch.sensor_api import fetch_recent_data
from helmetwatch.settings import EXPORT_DIR, HELMET_API_BASE, POLL_INTERVAL_SECONDS

log = worker_logger("monitor_worker")

MONITOR_EXPORT_ENABLED = os.getenv("MONITOR_EXPORT_ENABLED", "false").lower() in ("1", "true", "yes", "on")


def alert_key(record: dict) -> tuple:
    return (record.get("timestamp"), record.get("location"), record.get("reason"))


class CycleReporter:
    """Logs each applied fetch and every emergency absent from the previous batch."""

    def __init__(self, export_dir=None):
        self.export_dir = export_dir
        self.seen_alerts: set[tuple] = set()

    def __call__(self, state: FeedState) -> None:
        if state.error:
            log(f"WARN: fetch failed ({state.error}); batch cleared.")
            return
        batch = state.snapshot()
        metrics = compute_metrics(batch)
        log(
            f"OK: {metrics['reading_count']} reading(s), status={metrics['system_status']}, "
            f"avg_temp={format_number(metrics['avg_temperature'], 1)}, "
            f"avg_humidity={format_number(metrics['avg_humidity'], 1)}, "
            f"avg_gas={format_number(metrics['avg_gas'], 1)}"
        )
        current = {alert_key(record): record for record in filter_alerts(batch)}
        for key, record in current.items():
            if key in self.seen_alerts:
                continue
            location = record.get("location") or "unknown location"
            log(f"ALERT: Emergency at {record.get('timestamp') or 'unknown time'} ({location}): {alert_reason(record)}")
        self.seen_alerts = set(current)
        if self.export_dir:
            try:
                path = write_snapshot(batch, self.export_dir)
            except OSError as exc:
                log(f"ERROR: snapshot write failed ({exc}).")
                return
            if path:
                log(f"OK: snapshot written to {path}")


def fetch_default():
    return fetch_recent_data(HELMET_API_BASE)


async def run_forever(reporter: CycleReporter) -> None:
    poller = HelmetPoller(fetch=fetch_default, interval=POLL_INTERVAL_SECONDS)
    poller.state.subscribe(reporter)
    poller.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        poller.stop()


def main() -> int:
    export_dir = EXPORT_DIR if (MONITOR_EXPORT_ENABLED or "--export" in sys.argv) else None
    reporter = CycleReporter(export_dir=export_dir)
    if "--once" in sys.argv:
        state = FeedState()
        state.subscribe(reporter)
        run_cycle(state, fetch_default)
        return 1 if state.error else 0
    log(f"Starting monitor worker (interval={POLL_INTERVAL_SECONDS}s, api={HELMET_API_BASE}).")
    try:
        asyncio.run(run_forever(reporter))
    except KeyboardInterrupt:
        log("Shutdown requested (KeyboardInterrupt).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
