"""Post one helmet reading to the collection service (bench testing a device)."""

import argparse
import sys

from helmetwatch.logs import worker_logger
from helmetwatch.sensor_api import save_data
from helmetwatch.settings import HELMET_API_BASE

log = worker_logger("ingest_cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Send one helmet sensor reading")
    p.add_argument("--base-url", default=HELMET_API_BASE)
    p.add_argument("--temperature", type=float)
    p.add_argument("--humidity", type=float)
    p.add_argument("--gas", dest="gasValue", type=float)
    p.add_argument("--flame", dest="flameStatus")
    p.add_argument("--ir", dest="irValue")
    p.add_argument("--accel-x", dest="accelX", type=float)
    p.add_argument("--accel-y", dest="accelY", type=float)
    p.add_argument("--location")
    p.add_argument("--emergency", action="store_true", help="flag the reading as an emergency")
    p.add_argument("--reason")
    return p


def payload_from_args(args: argparse.Namespace) -> dict:
    payload = {
        key: value
        for key, value in vars(args).items()
        if key not in ("base_url", "emergency") and value is not None
    }
    payload["emergency"] = bool(args.emergency)
    return payload


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    payload = payload_from_args(args)
    ok, message = save_data(payload, base_url=args.base_url)
    if not ok:
        log(f"ERROR: reading not saved ({message}).")
        return 1
    log(f"OK: {message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
