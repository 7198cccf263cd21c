from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta


class CalendarProviderError(RuntimeError):
    pass


@dataclass(frozen=True)
class LunarConverter:
    name: str

    def to_solar(self, year: int, month: int, day: int) -> date:
        raise NotImplementedError


def _offset_solar_date(year: int, month: int, day: int, *, offset_days: int) -> date:
    # day overflow rolls into the following month, so lunar day 30 is always accepted
    return date(year, month, 1) + timedelta(days=day - 1 + offset_days)
