"""Trailing-window daily history for resolved coordinates."""
from __future__ import annotations

import datetime as dt
from typing import Callable, List, Optional, Tuple

from aether import config
from aether.data_sources.base import WeatherDataSource
from aether.domain import DayRecord
from aether.mock_data import MockDataGenerator
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="historical")


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def trailing_window(today: dt.date, days: int = 7) -> List[dt.date]:
    """Dates from ``today - days`` through ``today - 1``, oldest first."""
    return [today - dt.timedelta(days=offset) for offset in range(days, 0, -1)]


class HistoricalRangeFetcher:
    """
    Resolve exactly one ``DayRecord`` per date of the trailing window.

    Live archive records are used where present. Dates the archive could not
    supply (and every date, on any failure) get a synthetic record, so the
    result always covers the full window with unique dates.
    """

    def __init__(
        self,
        data_source: WeatherDataSource,
        mock: MockDataGenerator,
        *,
        settings: config.Settings | None = None,
        today: Optional[Callable[[], dt.date]] = None,
    ):
        self.data_source = data_source
        self.mock = mock
        self.settings = settings or config.settings
        self.today = today or utc_today

    def window(self) -> List[dt.date]:
        return trailing_window(self.today(), self.settings.history_days)

    def synthesize(self, dates: List[dt.date], label: str) -> Tuple[DayRecord, ...]:
        return self.mock.days(dates, label)

    def fetch(self, latitude: float, longitude: float, label: str) -> Tuple[DayRecord, ...]:
        """Return the window's records, oldest first."""
        dates = self.window()
        try:
            live = self.data_source.fetch_archive_days(latitude, longitude, dates[0], dates[-1])
        except Exception as exc:
            logger.warning(
                "Archive request failed; synthesizing history",
                extra={"label": label, "error": f"{type(exc).__name__}: {exc}"},
            )
            return self.synthesize(dates, label)

        wanted = set(dates)
        by_date = {r.date: r for r in live if r.date in wanted}
        missing = [d for d in dates if d not in by_date]
        if missing:
            logger.info(
                "Archive missing days; filling with synthetic records",
                extra={"label": label, "missing": [d.isoformat() for d in missing]},
            )
            by_date.update({r.date: r for r in self.synthesize(missing, label)})

        logger.info("Resolved history window", extra={"label": label, "live_days": len(dates) - len(missing)})
        return tuple(by_date[d] for d in dates)
