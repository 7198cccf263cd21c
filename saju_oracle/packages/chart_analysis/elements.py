from __future__ import annotations

import math

from saju_oracle.errors import InternalInvariantViolation
from saju_oracle.models import ELEMENTS, FourPillars, StrengthProfile

GENERATE = {
    "wood": "fire",
    "fire": "earth",
    "earth": "metal",
    "metal": "water",
    "water": "wood",
}

CONTROL = {
    "wood": "earth",
    "earth": "water",
    "water": "fire",
    "fire": "metal",
    "metal": "wood",
}

STEM_WEIGHT = 1.0
BRANCH_WEIGHT = 0.8

SEASON_BY_MONTH = {
    12: "winter",
    1: "winter",
    2: "winter",
    3: "spring",
    4: "spring",
    5: "spring",
    6: "summer",
    7: "summer",
    8: "summer",
    9: "autumn",
    10: "autumn",
    11: "autumn",
}

SEASON_LABELS = {
    "spring": "봄",
    "summer": "여름",
    "autumn": "가을",
    "winter": "겨울",
}

SEASONAL_STRENGTH = {
    "spring": {"wood": 2.0, "fire": 1.0, "earth": 0.5, "metal": 0.5, "water": 1.5},
    "summer": {"wood": 0.5, "fire": 2.0, "earth": 1.5, "metal": 1.0, "water": 0.5},
    "autumn": {"wood": 0.5, "fire": 0.5, "earth": 1.0, "metal": 2.0, "water": 1.5},
    "winter": {"wood": 1.5, "fire": 0.5, "earth": 0.5, "metal": 1.0, "water": 2.0},
}

MONTHLY_SUPPORT = 1.5
MONTHLY_BASE = 0.5


def element_relation(source: str, target: str) -> str:
    """How ``source`` stands toward ``target`` in the generating and controlling cycles."""
    if source == target:
        return "same"
    if GENERATE.get(source) == target:
        return "generate"
    if CONTROL.get(source) == target:
        return "destroy"
    if GENERATE.get(target) == source:
        return "support"
    if CONTROL.get(target) == source:
        return "restrain"
    return "neutral"


def season_for_month(month: int) -> str:
    season = SEASON_BY_MONTH.get(month)
    if season is None:
        raise InternalInvariantViolation(f"month out of range: {month}")
    return season


def seasonal_strength(element: str, season: str) -> float:
    row = SEASONAL_STRENGTH.get(season)
    if row is None or element not in row:
        raise InternalInvariantViolation(f"no seasonal strength for {element}/{season}")
    return row[element]


def element_distribution(pillars: FourPillars) -> dict[str, float]:
    acc = {element: 0.0 for element in ELEMENTS}
    for p in pillars.as_tuple():
        acc[p.stem_element] += STEM_WEIGHT
        acc[p.branch_element] += BRANCH_WEIGHT
    return acc


def strength_profile(pillars: FourPillars, distribution: dict[str, float], *, month: int) -> StrengthProfile:
    dm_element = pillars.day_master_element
    seasonal = seasonal_strength(dm_element, season_for_month(month))
    supporting = distribution.get(dm_element, 0.0)
    month_element = pillars.month.branch_element
    monthly = MONTHLY_SUPPORT if element_relation(month_element, dm_element) == "support" else MONTHLY_BASE
    return StrengthProfile(
        day_master_strength=seasonal + supporting + monthly,
        seasonal_influence=seasonal,
        supporting_elements=supporting,
        monthly_influence=monthly,
    )


def dominant_element(distribution: dict[str, float]) -> str:
    # ties resolve to the earlier element in generating order
    return max(ELEMENTS, key=lambda e: distribution.get(e, 0.0))


def element_balance(distribution: dict[str, float]) -> float:
    """0-100, 100 when all five elements carry the same weight."""
    values = [distribution.get(e, 0.0) for e in ELEMENTS]
    mean = sum(values) / len(values)
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    return max(0.0, 100.0 - std * 50.0)


def spread_balance(distribution: dict[str, float]) -> float:
    values = [distribution.get(e, 0.0) for e in ELEMENTS]
    hi, lo = max(values), min(values)
    if hi + lo <= 0:
        return 0.0
    return 1.0 - (hi - lo) / (hi + lo)
