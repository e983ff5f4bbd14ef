"""
cli.py
Query PATH schedules from the command line, against the live site or a saved
schedule page.

  python cli.py stations jsq_33rd
  python cli.py next "Grove Street" jsq_33rd --time 6:00AM --limit 3
  python cli.py --html saved.html next "Grove Street" jsq_33rd
"""

import argparse
import logging
import sys
from datetime import datetime

from bs4 import BeautifulSoup

from config import LOG_LEVEL, TIMES_LIMIT
from departures import render_departures, render_stations
from errors import ScheduleError
from service import PathSchedule
from timetables import format_time_token

logger = logging.getLogger(__name__)


def local_fetcher(path: str):
    """Fetcher that ignores the URL and parses a saved page instead."""
    def fetch(url, timeout):
        logger.info("[cli] reading %s instead of %s", path, url)
        with open(path, "r", encoding="utf-8") as f:
            return BeautifulSoup(f.read(), "lxml")
    return fetch

def now_token(now=None) -> str:
    now = now or datetime.now()
    return format_time_token(now.hour * 60 + now.minute)

def run(args) -> str:
    fetcher = local_fetcher(args.html) if args.html else None
    schedule = PathSchedule(fetcher=fetcher, limit=TIMES_LIMIT)

    if args.cmd == "stations":
        return render_stations(schedule.list_stations(args.direction))

    reference = args.time or now_token()
    departures = schedule.query_departures(args.direction, args.station, reference, args.limit)
    return render_departures(departures)

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="PATH train schedule lookups.")
    parser.add_argument("--html", help="parse this saved schedule page instead of fetching")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("stations", help="List stations for a direction, in order")
    p_list.add_argument("direction")

    p_next = sub.add_parser("next", help="Next departures from a station")
    p_next.add_argument("station")
    p_next.add_argument("direction")
    p_next.add_argument("--time", help="reference wall-clock time, e.g. 5:15PM (default: now)")
    p_next.add_argument("--limit", type=int, default=None)

    args = parser.parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    try:
        print(run(args))
    except ScheduleError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
