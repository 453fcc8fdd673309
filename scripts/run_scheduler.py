#!/usr/bin/env python3
"""Run the pywxalert notification scheduler.

Loads configuration from ``WXALERT_*`` environment variables and users from
a JSON file, then sends each user their weather at their notification time.

Usage
-----
Set environment variables and run::

    export WXALERT_WEATHER_API_KEY="your-data.go.kr-key"
    export WXALERT_FCM_PROJECT_ID="my-project"
    export WXALERT_FCM_ACCESS_TOKEN="ya29...."
    python scripts/run_scheduler.py --users users.json

Options::

    --users FILE     JSON array of user records (default: $WXALERT_USERS_FILE)
    --once           Run a single tick now and exit
    --weather LAT LON
                     Print the weather snapshot for a coordinate and exit
    --verbose, -v    Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pywxalert import WxAlertClient, WxAlertConfig, WxAlertError  # noqa: E402

_logger = logging.getLogger("run_scheduler")


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Send scheduled weather push notifications.",
    )
    parser.add_argument("--users", help="JSON file of user records (default: $WXALERT_USERS_FILE)")
    parser.add_argument("--once", action="store_true", help="Run a single tick now and exit")
    parser.add_argument(
        "--weather",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="Print the weather for a coordinate and exit",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides = {"users_file": args.users} if args.users else {}
    try:
        config = WxAlertConfig.from_env(**overrides)
    except WxAlertError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with WxAlertClient(config) as client:
        if args.weather:
            latitude, longitude = args.weather
            snapshot = await client.get_weather(latitude, longitude)
            print(json.dumps(snapshot.to_payload(), indent=2, ensure_ascii=False))
            return 0

        if args.once:
            summary = await client.run_once()
            print(f"succeeded={summary.succeeded} failed={summary.failed} skipped={summary.skipped}")
            return 0 if summary.failed == 0 else 1

        client.start_scheduler()
        _logger.info("Scheduler running in %s; press Ctrl+C to stop", config.time_zone)
        await asyncio.Event().wait()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
