"""
departures.py
Picks the next N departures from a station's time list and renders them in
the compact wire format the watch app reads:

  "6:00AM,0 mins left;7:30AM,90 mins left;"
"""

from dataclasses import dataclass
from typing import List

from errors import InvalidLimit, NoUpcomingTime, StationHasNoSchedule
from timetables import MINUTES_PER_DAY, format_time_token

# Upper bound on how many departures one query may ask for.
MAX_TIMES_LIMIT = 20
HALF_DAY = MINUTES_PER_DAY // 2


@dataclass(frozen=True)
class Departure:
    minutes: int       # clock value, minutes since midnight
    minutes_left: int

    @property
    def token(self) -> str:
        return format_time_token(self.minutes)


def validate_limit(limit) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidLimit(f"invalid limit for times provided: {limit!r}")
    if limit < 1 or limit > MAX_TIMES_LIMIT:
        raise InvalidLimit(
            f"invalid limit for times provided: {limit} (must be 1-{MAX_TIMES_LIMIT})"
        )
    return limit

def _service_minutes(times: List[int]) -> List[int]:
    """
    Unroll source order into one service day: a step back of more than
    12 hours is the midnight rollover, so it and everything after it
    belongs to the next calendar day.
    """
    out: List[int] = []
    offset = 0
    prev = None
    for t in times:
        if prev is not None and prev - t > HALF_DAY:
            offset += MINUTES_PER_DAY
        out.append(t + offset)
        prev = t
    return out

def minutes_until(entry: int, reference: int) -> int:
    if entry >= reference:
        return entry - reference
    return entry + MINUTES_PER_DAY - reference

def next_arrivals(times: List[int], reference: int, limit: int) -> List[Departure]:
    validate_limit(limit)
    if not times:
        raise StationHasNoSchedule("no scheduled times for this station")

    start = None
    for i, t in enumerate(_service_minutes(times)):
        if t >= reference:
            start = i
            break
    if start is None:
        raise NoUpcomingTime(
            f"time not found: no departures at or after {format_time_token(reference)}"
        )

    out: List[Departure] = []
    i = start
    for _ in range(limit):
        clock = times[i] % MINUTES_PER_DAY
        out.append(Departure(minutes=clock, minutes_left=minutes_until(clock, reference)))
        i = (i + 1) % len(times)
    return out

def render_departures(departures: List[Departure]) -> str:
    return "".join(f"{d.token},{d.minutes_left} mins left;" for d in departures)

def render_stations(stations: List[str]) -> str:
    return "[" + ",".join(stations) + "]"
