import argparse
import logging

from flask import Flask, Response, request

from config import DEFAULT_TIMES_LIMIT, DIRECTIONS, HOST, LOG_LEVEL, PORT, TIMES_LIMIT
from departures import render_departures, render_stations, validate_limit
from errors import InvalidLimit, ScheduleError
from service import PathSchedule

logger = logging.getLogger(__name__)

# Prefix for every error body so an embedded client can spot it at a glance.
ERROR_PREFIX = "error: "

app = Flask(__name__)


def _default_schedule(limit=TIMES_LIMIT) -> PathSchedule:
    """Build the shared schedule; a bad TIMES_LIMIT is reported by main(), not at import."""
    try:
        return PathSchedule(limit=limit)
    except InvalidLimit as e:
        logger.warning("ignoring TIMES_LIMIT (%s); using %d", e, DEFAULT_TIMES_LIMIT)
        return PathSchedule(limit=DEFAULT_TIMES_LIMIT)

# Shared by all request threads; the cache inside is the only mutable state.
schedule = _default_schedule()


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")

@app.errorhandler(ScheduleError)
def handle_schedule_error(err: ScheduleError):
    logger.debug("[http] %s: %s", type(err).__name__, err)
    return _text(ERROR_PREFIX + str(err), err.status)

# ---------- Routes ----------
@app.get("/health")
def health():
    return {
        "ok": True,
        "directions": sorted(schedule.directions),
        "cached": schedule.cached_directions(),
        "limit": schedule.limit,
    }

# Stations for a direction, first to last: "[Journal Square,Grove Street,...]"
@app.get("/p/list/<direction>/")
def list_stations(direction):
    return _text(render_stations(schedule.list_stations(direction)))

# Next departures from <stn>. <time_token> is the caller's wall clock, not
# ours: the watch and this server may disagree on what time it is.
@app.get("/p/<stn>/<direction>/<time_token>/")
def grab_times(stn, direction, time_token):
    raw_limit = request.args.get("limit")
    limit = None
    if raw_limit is not None:
        try:
            limit = int(raw_limit)
        except ValueError:
            raise InvalidLimit(f"invalid limit for times provided: {raw_limit!r}")

    departures = schedule.query_departures(direction, stn, time_token, limit)
    return _text(render_departures(departures))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Serve PATH train schedules to embedded clients.")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT, help="http port to start the service on")
    parser.add_argument("--limit", type=int, default=TIMES_LIMIT,
                        help="limit on no. of results returned for times")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        schedule.limit = validate_limit(args.limit)
    except InvalidLimit as e:
        parser.error(str(e))

    logger.info("Starting PATH schedule server on %s:%s (directions: %s)",
                args.host, args.port, ", ".join(sorted(DIRECTIONS)))
    app.run(host=args.host, port=args.port, threaded=True)


if __name__ == "__main__":
    main()
