import datetime as dt
import unittest

from aether.config import Settings
from aether.data_sources.base import CallableWeatherDataSource
from aether.domain import DayRecord
from aether.errors import TransportError
from aether.historical import HistoricalRangeFetcher, trailing_window
from aether.mock_data import MockDataGenerator

TODAY = dt.date(2024, 6, 15)


def _unexpected(*_args):
    raise AssertionError("must not be called")


def _live_day(date):
    return DayRecord(date=date, max_temp_c=22, min_temp_c=12, avg_temp_c=17, description="Rain")


def _fetcher(archive_days):
    source = CallableWeatherDataSource(
        current=_unexpected,
        current_via_relay=_unexpected,
        archive_days=archive_days,
        air_quality=_unexpected,
    )
    return HistoricalRangeFetcher(source, MockDataGenerator(seed=9), settings=Settings(), today=lambda: TODAY)


class TestTrailingWindow(unittest.TestCase):
    def test_seven_days_ending_yesterday(self):
        dates = trailing_window(TODAY)
        self.assertEqual(len(dates), 7)
        self.assertEqual(dates[0], dt.date(2024, 6, 8))
        self.assertEqual(dates[-1], dt.date(2024, 6, 14))
        self.assertEqual(dates, sorted(dates))

    def test_crosses_month_boundary(self):
        dates = trailing_window(dt.date(2024, 3, 2), days=3)
        self.assertEqual(dates, [dt.date(2024, 2, 28), dt.date(2024, 2, 29), dt.date(2024, 3, 1)])


class TestHistoricalRangeFetcher(unittest.TestCase):
    def test_live_window(self):
        calls = []

        def archive(lat, lon, start, end):
            calls.append((lat, lon, start, end))
            return [_live_day(d) for d in trailing_window(TODAY)]

        days = _fetcher(archive).fetch(35.0, 139.0, "Tokyo")
        self.assertEqual(calls, [(35.0, 139.0, dt.date(2024, 6, 8), dt.date(2024, 6, 14))])
        self.assertEqual([d.date for d in days], trailing_window(TODAY))
        self.assertFalse(any(d.is_synthetic for d in days))

    def test_failure_gives_full_synthetic_window(self):
        def archive(*_args):
            raise TransportError("timeout")

        days = _fetcher(archive).fetch(35.0, 139.0, "Tokyo")
        self.assertEqual(len(days), 7)
        self.assertEqual([d.date for d in days], trailing_window(TODAY))
        self.assertTrue(all(d.is_synthetic for d in days))

    def test_missing_days_are_filled(self):
        def archive(*_args):
            window = trailing_window(TODAY)
            return [_live_day(window[0]), _live_day(window[3])]

        days = _fetcher(archive).fetch(1.0, 2.0, "x")
        self.assertEqual([d.date for d in days], trailing_window(TODAY))
        self.assertEqual([d.is_synthetic for d in days], [False, True, True, False, True, True, True])

    def test_out_of_window_and_unordered_days_are_ignored(self):
        def archive(*_args):
            window = trailing_window(TODAY)
            return [_live_day(TODAY)] + [_live_day(d) for d in reversed(window)]

        days = _fetcher(archive).fetch(1.0, 2.0, "x")
        self.assertEqual([d.date for d in days], trailing_window(TODAY))
        self.assertEqual(len({d.date for d in days}), 7)

    def test_synthesize(self):
        fetcher = _fetcher(_unexpected)
        days = fetcher.synthesize(fetcher.window(), "x")
        self.assertEqual(len(days), 7)
        self.assertTrue(all(d.is_synthetic for d in days))


if __name__ == "__main__":
    unittest.main()
