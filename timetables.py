"""
timetables.py
Extracts a per-station departure schedule from a PATH timetable page.

The page carries one <table>:
  <thead>  one row of station names (optionally wrapped, e.g. <th><p>Name</p></th>)
  <tbody>  rows of time cells such as "5:15AM", or <strong>5:15PM</strong> for PM
           entries, with "---" where a train does not stop.

Output looks like:
StationSchedule(
  direction="JSQ_33rd_Weekday",
  stations=["Journal Square", "Grove Street", ...],
  times={"Journal Square": [315, 330, ...], ...},   # minutes since midnight
)

Heuristics:
- The first <table> in document order is the schedule.
- A body row may hold several trains back to back, so cells are dealt out to
  stations with a cursor that wraps to station 0 once it runs past the last
  station. Placeholder cells advance the cursor without wrapping it.
- Cells are kept in source order; nothing is re-sorted.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Comment, Tag

from errors import InvalidTimeToken, MalformedSchedule, ScheduleNotFound

# 5:15AM, 12:05PM, 05:15AM (leading zero tolerated on input)
TIME_RE = re.compile(r"(?<!\d)(1[0-2]|0?[1-9]):([0-5]\d)([AP]M)")

PLACEHOLDER = "---"
WRAPPER_TAGS = ("strong", "b")
MINUTES_PER_DAY = 24 * 60


# ------------------------- Time tokens -------------------------

def _match_minutes(m: "re.Match") -> int:
    hour, minute, suffix = int(m.group(1)), int(m.group(2)), m.group(3)
    hour %= 12
    if suffix == "PM":
        hour += 12
    return hour * 60 + minute

def parse_time_token(token: str) -> int:
    """Parse "H:MMAM"/"H:MMPM" into minutes since midnight."""
    m = TIME_RE.fullmatch((token or "").strip())
    if not m:
        raise InvalidTimeToken(f"invalid 'time': {token!r} (expected e.g. 5:15AM)")
    return _match_minutes(m)

def format_time_token(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    hour, minute = divmod(minutes, 60)
    suffix = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour}:{minute:02d}{suffix}"


# ------------------------- Schedule model -------------------------

@dataclass
class StationSchedule:
    direction: str
    stations: List[str] = field(default_factory=list)
    times: Dict[str, List[int]] = field(default_factory=dict)

    def __post_init__(self):
        if len(set(self.stations)) != len(self.stations) or set(self.stations) != set(self.times):
            raise MalformedSchedule(
                f"station list and time lists disagree for {self.direction!r}"
            )

    def times_for(self, station: str) -> Optional[List[int]]:
        return self.times.get(station)


# ------------------------- Document navigation -------------------------

def _is_table(node) -> bool:
    return isinstance(node, Tag) and (node.name or "").lower() == "table"

def _find_table(node) -> Optional[Tag]:
    if _is_table(node):
        return node
    for child in getattr(node, "contents", []):
        if isinstance(child, Tag):
            found = _find_table(child)
            if found is not None:
                return found
    return None

def locate_table(root) -> Tag:
    """Depth-first search for the first <table> in document order."""
    table = _find_table(root)
    if table is None:
        raise ScheduleNotFound("no table element found on page")
    return table


# ------------------------- Header / body -------------------------

def extract_columns(table: Tag) -> List[str]:
    columns: List[str] = []
    for head in table.find_all("thead", recursive=False):
        for row in head.find_all("tr", recursive=False):
            for cell in row.find_all(["th", "td"], recursive=False):
                name = cell.get_text(" ", strip=True)
                if name:
                    columns.append(name)
    return columns

def _body_rows(table: Tag) -> List[Tag]:
    bodies = table.find_all("tbody", recursive=False)
    if not bodies:
        # lxml keeps bare <tr> directly under <table>
        return table.find_all("tr", recursive=False)
    rows: List[Tag] = []
    for body in bodies:
        rows.extend(body.find_all("tr", recursive=False))
    return rows

def _cell_text(cell: Tag) -> Optional[str]:
    """Text of a cell, unwrapping one <strong> level; None for a bare <td></td>."""
    if not cell.contents:
        return None
    for child in cell.contents:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Tag):
            if child.name in WRAPPER_TAGS:
                return child.get_text(strip=True)
            return ""
        text = str(child).strip()
        if text:
            return text
    return ""

def assign_cells(table: Tag, n: int) -> Dict[int, List[int]]:
    """Deal body cells out to station positions 0..n-1."""
    if n <= 0:
        raise MalformedSchedule("schedule table has no station columns")

    schedule: Dict[int, List[int]] = {i: [] for i in range(n)}
    index = 0
    for row in _body_rows(table):
        for cell in row.find_all(["td", "th"], recursive=False):
            text = _cell_text(cell)
            if text is None:
                continue
            m = None if text == PLACEHOLDER else TIME_RE.search(text)
            if m is None:
                index += 1
                continue
            # Wrap only when recording; skipped cells above never wrap.
            if index >= n:
                index = 0
            schedule[index].append(_match_minutes(m))
            index += 1
    return schedule


# ------------------------- Entry points -------------------------

def build_schedule(direction: str, root) -> StationSchedule:
    table = locate_table(root)
    stations = extract_columns(table)
    if not stations:
        raise MalformedSchedule("schedule table has no station header row")
    if len(set(stations)) != len(stations):
        raise MalformedSchedule(f"duplicate station names in header: {stations}")

    cells = assign_cells(table, len(stations))
    return StationSchedule(
        direction=direction,
        stations=stations,
        times={name: cells[i] for i, name in enumerate(stations)},
    )

def extract_schedule_from_html(html: str, direction: str) -> StationSchedule:
    soup = BeautifulSoup(html, "lxml")
    return build_schedule(direction, soup)

# --- fuzzy matcher helpers (used for station suggestions) ---

def normalize_stop(s: str) -> str:
    return re.sub(r"[^a-z0-9\s]", "", (s or "").lower()).strip()

def token_similarity(a: str, b: str) -> float:
    ta = set(normalize_stop(a).split())
    tb = set(normalize_stop(b).split())
    if not ta or not tb:
        return 0.0
    inter = len(ta & tb)
    return inter / max(1, min(len(ta), len(tb)))
