import unittest

import departures
from departures import Departure
from errors import InvalidLimit, NoUpcomingTime, StationHasNoSchedule
from timetables import parse_time_token


def tokens(*values):
    return [parse_time_token(v) for v in values]


class NextArrivalsTests(unittest.TestCase):
    def test_reference_equal_to_departure_is_upcoming(self):
        result = departures.next_arrivals(tokens("5:15AM", "6:00AM", "7:30AM"), parse_time_token("6:00AM"), 2)
        self.assertEqual(result, [Departure(360, 0), Departure(450, 90)])
        self.assertEqual([d.token for d in result], ["6:00AM", "7:30AM"])

    def test_past_midnight_departure_in_source_order(self):
        result = departures.next_arrivals(tokens("11:50PM", "12:10AM"), parse_time_token("11:55PM"), 2)
        self.assertEqual(result, [Departure(10, 15), Departure(1430, 1435)])
        self.assertEqual([d.token for d in result], ["12:10AM", "11:50PM"])

    def test_collection_wraps_to_first_departure(self):
        result = departures.next_arrivals(tokens("5:15AM", "6:00AM", "7:30AM"), parse_time_token("6:40AM"), 4)
        self.assertEqual(
            [(d.token, d.minutes_left) for d in result],
            [("7:30AM", 50), ("5:15AM", 1355), ("6:00AM", 1400), ("7:30AM", 50)],
        )

    def test_after_last_departure_fails(self):
        with self.assertRaises(NoUpcomingTime):
            departures.next_arrivals(tokens("5:15AM", "6:00AM"), parse_time_token("6:01AM"), 1)

    def test_empty_schedule_fails(self):
        with self.assertRaises(StationHasNoSchedule):
            departures.next_arrivals([], parse_time_token("6:00AM"), 1)

    def test_duplicates_are_distinct_arrivals(self):
        result = departures.next_arrivals(tokens("6:00AM", "6:00AM", "7:00AM"), parse_time_token("5:00AM"), 3)
        self.assertEqual([d.minutes_left for d in result], [60, 60, 120])

    def test_returns_exactly_limit_entries(self):
        times = tokens("5:15AM", "6:00AM", "7:30AM", "9:45PM")
        reference = parse_time_token("6:30AM")
        for limit in range(1, departures.MAX_TIMES_LIMIT + 1):
            result = departures.next_arrivals(times, reference, limit)
            self.assertEqual(len(result), limit)
            for d in result:
                self.assertIn(d.minutes, times)
                self.assertGreaterEqual(d.minutes_left, 0)

    def test_minutes_left_non_decreasing_within_each_lap(self):
        times = tokens("5:15AM", "6:00AM", "7:30AM", "10:00AM", "3:00PM", "8:00PM")
        for reference in ("8:20AM", "5:15AM"):
            result = departures.next_arrivals(times, parse_time_token(reference), 20)
            self.assertEqual(len(result), 20)
            for k, d in enumerate(result):
                self.assertGreaterEqual(d.minutes_left, 0)
                # Each lap of len(times) entries restarts at the first upcoming departure.
                if k % len(times):
                    self.assertGreaterEqual(d.minutes_left, result[k - 1].minutes_left, (reference, k))
                elif k:
                    self.assertEqual(d, result[0])

    def test_limit_bounds(self):
        times = tokens("6:00AM")
        for limit in (0, -1, departures.MAX_TIMES_LIMIT + 1, "3", True, None):
            with self.assertRaises(InvalidLimit, msg=repr(limit)):
                departures.next_arrivals(times, 0, limit)
        self.assertEqual(departures.validate_limit(1), 1)
        self.assertEqual(departures.validate_limit(20), 20)


class RenderTests(unittest.TestCase):
    def test_render_departures(self):
        rendered = departures.render_departures([Departure(360, 0), Departure(450, 90)])
        self.assertEqual(rendered, "6:00AM,0 mins left;7:30AM,90 mins left;")

    def test_rendered_tokens_parse_back(self):
        result = departures.next_arrivals(tokens("11:50PM", "12:10AM"), parse_time_token("11:55PM"), 2)
        entries = [e for e in departures.render_departures(result).split(";") if e]
        self.assertEqual([parse_time_token(e.split(",")[0]) for e in entries], [10, 1430])

    def test_render_stations(self):
        self.assertEqual(departures.render_stations(["Journal Square", "Grove Street"]), "[Journal Square,Grove Street]")
        self.assertEqual(departures.render_stations([]), "[]")


if __name__ == "__main__":
    unittest.main()
