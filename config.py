import os

from dotenv import load_dotenv

# Load .env (used locally; deployments set real env vars)
load_dotenv()

# ---- Schedule source ----
SCHEDULE_URL_STUB = os.environ.get(
    "PATH_SCHEDULE_URL_STUB", "http://www.panynj.gov/path/schedules/%s.html"
).strip()
FETCH_TIMEOUT = float(os.environ.get("FETCH_TIMEOUT", "30"))

# ---- Service ----
DEFAULT_TIMES_LIMIT = 5
TIMES_LIMIT = int(os.environ.get("TIMES_LIMIT", str(DEFAULT_TIMES_LIMIT)))
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Direction of travel -> schedule page name on the PATH site.
DIRECTIONS = {
    "jsq_33rd": "JSQ_33rd_Weekday",
    "33rd_jsq": "33rd_JSQ_Weekday",
}
