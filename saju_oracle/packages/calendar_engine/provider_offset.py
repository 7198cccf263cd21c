from __future__ import annotations

from datetime import date

from .base import LunarConverter, _offset_solar_date

DEFAULT_LUNAR_OFFSET_DAYS = 11


class OffsetLunarConverter(LunarConverter):
    """Approximates lunar→solar by a flat day offset on the calendar fields."""

    def __init__(self, *, offset_days: int = DEFAULT_LUNAR_OFFSET_DAYS) -> None:
        super().__init__(name="offset")
        self._offset_days = int(offset_days)

    @property
    def offset_days(self) -> int:
        return self._offset_days

    def to_solar(self, year: int, month: int, day: int) -> date:
        return _offset_solar_date(year, month, day, offset_days=self._offset_days)
