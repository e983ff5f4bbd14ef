"""
schedule_cache.py
Process-wide memo of parsed schedules, one per direction.

Entries never expire: timetables change rarely and a restart picks up a new
one. Reads are lock-free; filling a missing direction is serialized per
direction so concurrent callers wait on a single fetch instead of racing.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional

from timetables import StationSchedule

logger = logging.getLogger(__name__)


class ScheduleCache:
    def __init__(self):
        self._schedules: Dict[str, StationSchedule] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def peek(self, key: str) -> Optional[StationSchedule]:
        return self._schedules.get(key)

    def get(self, key: str, loader: Callable[[], StationSchedule]) -> StationSchedule:
        """Return the cached schedule for `key`, running `loader` once on a miss.

        A loader that raises leaves the entry empty, so the next query retries.
        """
        schedule = self.peek(key)
        if schedule is not None:
            return schedule

        with self._lock_for(key):
            schedule = self.peek(key)
            if schedule is not None:
                return schedule
            logger.info("[cache] miss for %s; loading schedule", key)
            schedule = loader()
            with self._guard:
                self._schedules[key] = schedule
            logger.info(
                "[cache] stored %s: %d stations, %d times",
                key, len(schedule.stations), sum(len(t) for t in schedule.times.values()),
            )
            return schedule

    def keys(self) -> List[str]:
        with self._guard:
            return sorted(self._schedules)

    def __contains__(self, key: str) -> bool:
        return key in self._schedules
