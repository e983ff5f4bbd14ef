"""
errors.py
Failures a schedule query can end in. Every one is terminal for the query;
the HTTP layer maps `status` onto the response code.
"""


class ScheduleError(Exception):
    """Base exception for schedule lookups."""

    status = 500


class DirectionUnknown(ScheduleError):
    """Direction has no configured schedule page."""


class FetchFailed(ScheduleError):
    """Schedule page could not be downloaded (includes timeouts)."""


class ScheduleNotFound(ScheduleError):
    """No table element on the schedule page."""


class MalformedSchedule(ScheduleError):
    """Table exists but its header/body cannot form a schedule."""


class UnknownStation(ScheduleError):
    status = 400


class InvalidLimit(ScheduleError):
    status = 400


class InvalidTimeToken(ScheduleError):
    status = 400


class NoUpcomingTime(ScheduleError):
    """Reference time is after the last departure of the day."""


class StationHasNoSchedule(ScheduleError):
    """Station column has no recorded departures."""
