#!/usr/bin/env python3
"""
Trigger the daily digest locally, every day at 00:05.

Stand-in for a hosted scheduler during development: sleeps until the next
00:05 local time and POSTs the cron endpoint with the shared secret.

Usage:
    python scripts/cron_local.py            # run forever
    python scripts/cron_local.py --once     # trigger now and exit
"""
import argparse
import logging
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path

import requests

# Add parent directory to path to import leetcoach modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from leetcoach.core.config import settings  # noqa: E402

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

RUN_AT_HOUR = 0
RUN_AT_MINUTE = 5


def next_run_after(now: datetime) -> datetime:
    """Next 00:05 strictly after now."""
    run_at = now.replace(hour=RUN_AT_HOUR, minute=RUN_AT_MINUTE, second=0, microsecond=0)
    if run_at <= now:
        run_at += timedelta(days=1)
    return run_at


def call_daily(api_url: str) -> None:
    """POST the daily digest endpoint once and log the outcome."""
    url = f"{api_url.rstrip('/')}{settings.api_v1_prefix}/cron/daily"
    try:
        response = requests.post(url, headers={"X-Cron-Key": settings.cron_secret}, timeout=300)
        response.raise_for_status()
        logger.info(f"Daily digest triggered: {response.json()}")
    except requests.exceptions.RequestException as e:
        logger.error(f"Daily digest trigger failed: {str(e)}")


def main():
    parser = argparse.ArgumentParser(description="Trigger the LeetCoach daily digest")
    parser.add_argument("--api-url", default="http://localhost:8000", help="Base URL of the API")
    parser.add_argument("--once", action="store_true", help="Trigger immediately and exit")
    args = parser.parse_args()

    if args.once:
        call_daily(args.api_url)
        return

    logger.info(f"Local cron scheduled at {RUN_AT_HOUR:02d}:{RUN_AT_MINUTE:02d} daily. Press Ctrl+C to stop.")
    try:
        while True:
            run_at = next_run_after(datetime.now())
            logger.info(f"Next run at {run_at.isoformat()}")
            time.sleep(max(0.0, (run_at - datetime.now()).total_seconds()))
            call_daily(args.api_url)
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    main()
