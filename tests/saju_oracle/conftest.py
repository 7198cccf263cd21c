from __future__ import annotations

from datetime import date

import pytest

from saju_oracle.models import CurrentPillars, FourPillars, GanzhiPillar, SajuChart, utc_now
from saju_oracle.packages.calendar_engine.pillars import PillarCalculator
from saju_oracle.packages.chart_analysis.chart import build_chart


def make_pillars(
    year: tuple[int, int],
    month: tuple[int, int],
    day: tuple[int, int],
    hour: tuple[int, int],
    *,
    solar: date = date(1990, 5, 15),
) -> FourPillars:
    return FourPillars(
        source="test",
        birth_date=solar.isoformat(),
        birth_time="12:00",
        is_lunar=False,
        solar_date=solar,
        year=GanzhiPillar(*year),
        month=GanzhiPillar(*month),
        day=GanzhiPillar(*day),
        hour=GanzhiPillar(*hour),
    )


def make_current(year_stem: int, month_stem: int, day_stem: int, *, on: date = date(2024, 1, 1)) -> CurrentPillars:
    return CurrentPillars(
        current_date=on,
        year=GanzhiPillar(year_stem, 0),
        month=GanzhiPillar(month_stem, 2),
        day=GanzhiPillar(day_stem, 4),
        analysis_timestamp_utc=utc_now(),
    )


@pytest.fixture
def calculator() -> PillarCalculator:
    return PillarCalculator()


@pytest.fixture
def chart_1990(calculator: PillarCalculator) -> SajuChart:
    # 경오 / 경오 / 병오 / 계사
    return build_chart(calculator.compute_pillars("1990-05-15", "10:30"))


@pytest.fixture
def current_2024(calculator: PillarCalculator) -> CurrentPillars:
    # 갑진 / 갑인 / 경인
    return calculator.compute_current_pillars(date(2024, 1, 1))


@pytest.fixture
def pillars_factory():
    return make_pillars


@pytest.fixture
def current_factory():
    return make_current
