"""
service.py
Ties the pieces together: direction -> schedule page -> cached StationSchedule
-> next departures for one station.
"""

import logging
from typing import Callable, Dict, List, Optional

from config import DIRECTIONS, FETCH_TIMEOUT, SCHEDULE_URL_STUB, TIMES_LIMIT
from departures import Departure, next_arrivals, validate_limit
from errors import DirectionUnknown, UnknownStation
from fetch import fetch_document, schedule_url
from schedule_cache import ScheduleCache
from timetables import StationSchedule, build_schedule, parse_time_token, token_similarity

logger = logging.getLogger(__name__)


def _closest_station(name: str, stations: List[str]) -> Optional[str]:
    best, best_score = None, 0.0
    for stn in stations:
        score = token_similarity(name, stn)
        if score > best_score:
            best, best_score = stn, score
    return best


class PathSchedule:
    """Answers station-list and next-departure queries for configured directions.

    `fetcher(url, timeout)` must return a parsed document tree; the default
    downloads it over HTTP. The cache is shared by every query on this object.
    """

    def __init__(
        self,
        directions: Optional[Dict[str, str]] = None,
        fetcher: Optional[Callable] = None,
        cache: Optional[ScheduleCache] = None,
        limit: int = TIMES_LIMIT,
        url_stub: str = SCHEDULE_URL_STUB,
        timeout: float = FETCH_TIMEOUT,
    ):
        self.directions = dict(DIRECTIONS if directions is None else directions)
        self.fetcher = fetcher or fetch_document
        self.cache = cache if cache is not None else ScheduleCache()
        self.limit = validate_limit(limit)
        self.url_stub = url_stub
        self.timeout = timeout

    def _page_for(self, direction: str) -> str:
        page = self.directions.get(direction)
        if not page:
            raise DirectionUnknown(f"unable to find loc: {direction!r}")
        return page

    def _load(self, page: str) -> StationSchedule:
        doc = self.fetcher(schedule_url(page, self.url_stub), self.timeout)
        return build_schedule(page, doc)

    def get_schedule(self, direction: str) -> StationSchedule:
        page = self._page_for(direction)
        return self.cache.get(page, lambda: self._load(page))

    def cached_directions(self) -> List[str]:
        return sorted(d for d, page in self.directions.items() if page in self.cache)

    def list_stations(self, direction: str) -> List[str]:
        return list(self.get_schedule(direction).stations)

    def query_departures(
        self, direction: str, station: str, reference: str, limit: Optional[int] = None
    ) -> List[Departure]:
        limit = validate_limit(self.limit if limit is None else limit)
        schedule = self.get_schedule(direction)

        times = schedule.times_for(station)
        if times is None:
            msg = f"invalid stn: {station!r}"
            suggestion = _closest_station(station, schedule.stations)
            if suggestion:
                msg += f" (did you mean {suggestion!r}?)"
            logger.debug("[query] %s", msg)
            raise UnknownStation(msg)

        return next_arrivals(times, parse_time_token(reference), limit)
