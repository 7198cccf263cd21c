from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

from saju_oracle.errors import ValidationError
from saju_oracle.models import BRANCHES, STEMS, CurrentPillars, FourPillars, GanzhiPillar, utc_now

from .base import CalendarProviderError, LunarConverter
from .provider_lunar import LunarPythonConverter
from .provider_offset import DEFAULT_LUNAR_OFFSET_DAYS, OffsetLunarConverter

# 1984 is 갑자 year
BASE_YEAR = 1984
DAY_EPOCH = date(1900, 1, 1)
DEFAULT_DAY_ANCHOR_INDEX = 36

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_birth_date(raw: str) -> tuple[int, int, int]:
    m = _DATE_RE.match((raw or "").strip())
    if m is None:
        raise ValidationError(f"birth_date must be YYYY-MM-DD: {raw!r}")
    year, month, day = (int(x) for x in m.groups())
    if year < 1:
        raise ValidationError(f"year out of range: {year}")
    if not 1 <= month <= 12:
        raise ValidationError(f"month out of range: {month}")
    if not 1 <= day <= 31:
        raise ValidationError(f"day out of range: {day}")
    return year, month, day


def parse_birth_time(raw: str) -> tuple[int, int]:
    m = _TIME_RE.match((raw or "").strip())
    if m is None:
        raise ValidationError(f"birth_time must be HH:MM: {raw!r}")
    hour, minute = (int(x) for x in m.groups())
    if not 0 <= hour <= 23:
        raise ValidationError(f"hour out of range: {hour}")
    if not 0 <= minute <= 59:
        raise ValidationError(f"minute out of range: {minute}")
    return hour, minute


def year_pillar(year: int) -> GanzhiPillar:
    offset = year - BASE_YEAR
    return GanzhiPillar(stem_index=offset % len(STEMS), branch_index=offset % len(BRANCHES))


def month_pillar(year: int, month: int) -> GanzhiPillar:
    year_stem = year_pillar(year).stem_index
    # month 1 is 인
    return GanzhiPillar(
        stem_index=((year_stem % 5) * 2 + month - 1) % len(STEMS),
        branch_index=(month + 1) % len(BRANCHES),
    )


def day_pillar(day: date, *, anchor_index: int = DEFAULT_DAY_ANCHOR_INDEX) -> GanzhiPillar:
    idx = anchor_index + (day - DAY_EPOCH).days
    return GanzhiPillar(stem_index=idx % len(STEMS), branch_index=idx % len(BRANCHES))


def hour_pillar(day_stem_index: int, hour: int) -> GanzhiPillar:
    # 23:00 already belongs to the 자 hour
    branch = ((hour + 1) // 2) % len(BRANCHES)
    return GanzhiPillar(stem_index=((day_stem_index % 5) * 2 + branch) % len(STEMS), branch_index=branch)


def build_lunar_converter(
    name: str,
    *,
    offset_days: int = DEFAULT_LUNAR_OFFSET_DAYS,
    strict_calendar_lib: bool = True,
) -> LunarConverter:
    if name == "lunar-python":
        return LunarPythonConverter(strict_calendar_lib=strict_calendar_lib, fallback_offset_days=offset_days)
    if name == "offset":
        return OffsetLunarConverter(offset_days=offset_days)
    raise ValueError(f"unknown lunar converter: {name!r}")


def _coerce_day(as_of: date | datetime | str | None) -> date:
    if as_of is None:
        return date.today()
    if isinstance(as_of, datetime):
        return as_of.date()
    if isinstance(as_of, date):
        return as_of
    try:
        return date.fromisoformat(as_of.strip())
    except ValueError as exc:
        raise ValidationError(f"as_of must be YYYY-MM-DD: {as_of!r}") from exc


@dataclass(frozen=True)
class PillarCalculator:
    lunar_converter: str = "offset"
    lunar_offset_days: int = DEFAULT_LUNAR_OFFSET_DAYS
    day_anchor_index: int = DEFAULT_DAY_ANCHOR_INDEX
    strict_calendar_lib: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_converter",
            build_lunar_converter(
                self.lunar_converter,
                offset_days=self.lunar_offset_days,
                strict_calendar_lib=self.strict_calendar_lib,
            ),
        )

    @property
    def converter(self) -> LunarConverter:
        return self._converter

    def to_solar(self, birth_date: str, *, is_lunar: bool = False) -> date:
        year, month, day = parse_birth_date(birth_date)
        if is_lunar:
            try:
                return self._converter.to_solar(year, month, day)
            except CalendarProviderError as exc:
                raise ValidationError(str(exc)) from exc
            except (ValueError, OverflowError) as exc:
                raise ValidationError(f"lunar date out of range: {birth_date!r}") from exc
        try:
            return date(year, month, day)
        except ValueError as exc:
            raise ValidationError(f"invalid solar date: {birth_date!r}") from exc

    def compute_pillars(self, birth_date: str, birth_time: str, *, is_lunar: bool = False) -> FourPillars:
        hour, _minute = parse_birth_time(birth_time)
        solar = self.to_solar(birth_date, is_lunar=is_lunar)
        day = day_pillar(solar, anchor_index=self.day_anchor_index)
        source = f"rule:{self._converter.name}" if is_lunar else "rule:solar"
        return FourPillars(
            source=source,
            birth_date=birth_date.strip(),
            birth_time=birth_time.strip(),
            is_lunar=bool(is_lunar),
            solar_date=solar,
            year=year_pillar(solar.year),
            month=month_pillar(solar.year, solar.month),
            day=day,
            hour=hour_pillar(day.stem_index, hour),
        )

    def compute_current_pillars(self, as_of: date | datetime | str | None = None) -> CurrentPillars:
        today = _coerce_day(as_of)
        return CurrentPillars(
            current_date=today,
            year=year_pillar(today.year),
            month=month_pillar(today.year, today.month),
            day=day_pillar(today, anchor_index=self.day_anchor_index),
            analysis_timestamp_utc=utc_now(),
        )
