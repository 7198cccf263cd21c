from __future__ import annotations

import logging
from datetime import date

from lunar_python import Lunar

from .base import CalendarProviderError, LunarConverter, _offset_solar_date
from .provider_offset import DEFAULT_LUNAR_OFFSET_DAYS

logger = logging.getLogger(__name__)


class LunarPythonConverter(LunarConverter):
    def __init__(self, *, strict_calendar_lib: bool = True, fallback_offset_days: int = DEFAULT_LUNAR_OFFSET_DAYS) -> None:
        super().__init__(name="lunar-python")
        self._strict_calendar_lib = bool(strict_calendar_lib)
        self._fallback_offset_days = int(fallback_offset_days)

    def to_solar(self, year: int, month: int, day: int) -> date:
        try:
            solar = Lunar.fromYmd(year, month, day).getSolar()
            return date(solar.getYear(), solar.getMonth(), solar.getDay())
        except Exception as exc:
            if self._strict_calendar_lib:
                raise CalendarProviderError(f"{self.name} conversion failed for {year:04d}-{month:02d}-{day:02d}: {exc}") from exc
            logger.warning(
                "lunar_conversion_fallback converter=%s lunar=%04d-%02d-%02d err=%s",
                self.name,
                year,
                month,
                day,
                exc,
            )
            return _offset_solar_date(year, month, day, offset_days=self._fallback_offset_days)
