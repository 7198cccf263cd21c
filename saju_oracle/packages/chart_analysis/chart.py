from __future__ import annotations

from saju_oracle.models import FourPillars, SajuChart

from .elements import element_distribution, season_for_month, strength_profile
from .ten_gods import resolve_ten_gods


def build_chart(pillars: FourPillars) -> SajuChart:
    month = pillars.solar_date.month
    distribution = element_distribution(pillars)
    return SajuChart(
        pillars=pillars,
        five_elements=distribution,
        ten_gods=tuple(resolve_ten_gods(pillars.day.stem_index, pillars.as_tuple())),
        strength=strength_profile(pillars, distribution, month=month),
        season=season_for_month(month),
    )
