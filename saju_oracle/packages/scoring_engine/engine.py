from __future__ import annotations

import logging
from collections.abc import Sequence

from saju_oracle.errors import InternalInvariantViolation
from saju_oracle.models import (
    ELEMENT_LABELS,
    ELEMENTS,
    STEM_ELEMENT,
    CatalogItem,
    CategoryScore,
    CurrentPillars,
    RankedItem,
    SajuChart,
    ScoreBreakdown,
)
from saju_oracle.packages.chart_analysis.elements import GENERATE, dominant_element, element_balance

from .tables import (
    ELEMENT_AFFINITY_CAP,
    ELEMENT_APTITUDES,
    HARMONY_CAP,
    ITEM_ELEMENT_KEYWORDS,
    ITEM_TEN_GOD_BONUSES,
    PILLAR_STRENGTH_CAP,
    RELATED_ACTIVITIES,
    SEASONAL_BONUS,
    SEASONAL_BONUS_CAP,
    TEMPORAL_DAY_MASTER_GENERATES,
    TEMPORAL_GENERATED_BY,
    TEMPORAL_SAME_STEM,
    TEMPORAL_WEIGHTS,
    TEN_GOD_APTITUDES,
    TOP_ITEMS,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0
NEUTRAL_CONFIDENCE = 0.5
# sums to NEUTRAL_SCORE inside every component cap
NEUTRAL_BREAKDOWN = ScoreBreakdown(element_affinity=20.0, ten_gods_harmony=15.0, pillar_strength=10.0, seasonal_bonus=5.0)
DEFAULT_AFFINITY_REASON = "기본 적성"


def _clamp(v: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, v))


def category_matches(category_name: str, fields: Sequence[str]) -> bool:
    return category_name in fields or any(f in category_name or category_name in f for f in fields)


def item_ten_god_bonus(chart: SajuChart, item_name: str) -> int:
    """First matching ten-god keyword bonus, in chart order."""
    for god in chart.ten_gods:
        rule = ITEM_TEN_GOD_BONUSES.get(god)
        if rule is not None and any(k in item_name for k in rule[0]):
            return rule[1]
    return 0


def _temporal_relation(day_master_index: int, current_stem_index: int) -> int:
    if day_master_index == current_stem_index:
        return TEMPORAL_SAME_STEM
    dm_element = STEM_ELEMENT[day_master_index]
    cur_element = STEM_ELEMENT[current_stem_index]
    if GENERATE[dm_element] == cur_element:
        return TEMPORAL_DAY_MASTER_GENERATES
    if GENERATE[cur_element] == dm_element:
        return TEMPORAL_GENERATED_BY
    return 0


class CategoryScoringEngine:
    """Scores one middle category against a chart.

    Positive categories score aptitude. Negative categories score safety first and
    are then inverted, so every published number reads "higher = more of it".
    """

    def __init__(self, *, strict_invariants: bool = True) -> None:
        self.strict_invariants = bool(strict_invariants)

    def score(
        self,
        chart: SajuChart,
        current: CurrentPillars,
        category_name: str,
        items: Sequence[CatalogItem],
        major_type: str,
    ) -> CategoryScore:
        try:
            return self._score(chart, current, category_name, items, major_type)
        except InternalInvariantViolation as exc:
            if self.strict_invariants:
                raise
            logger.error("scoring_invariant_degraded category=%s err=%s", category_name, exc)
            return self.neutral_score(category_name, items, major_type)

    def rank_items(
        self,
        chart: SajuChart,
        category_name: str,
        items: Sequence[CatalogItem],
        major_type: str,
        *,
        limit: int | None = None,
    ) -> list[RankedItem]:
        try:
            ranked = self._rank_items(chart, category_name, items, major_type)
        except InternalInvariantViolation as exc:
            if self.strict_invariants:
                raise
            logger.error("item_ranking_invariant_degraded category=%s err=%s", category_name, exc)
            ranked = self._neutral_items(items)
        return ranked if limit is None else ranked[:limit]

    def neutral_score(self, category_name: str, items: Sequence[CatalogItem], major_type: str) -> CategoryScore:
        return CategoryScore(
            category_name=category_name,
            category_type=major_type,
            base_score=NEUTRAL_SCORE,
            daily_score=NEUTRAL_SCORE,
            monthly_score=NEUTRAL_SCORE,
            yearly_score=NEUTRAL_SCORE,
            raw_base_score=NEUTRAL_SCORE,
            breakdown=NEUTRAL_BREAKDOWN,
            confidence_level=NEUTRAL_CONFIDENCE,
            ranked_items=tuple(self._neutral_items(items)[:TOP_ITEMS]),
        )

    def breakdown(self, chart: SajuChart, category_name: str) -> ScoreBreakdown:
        return ScoreBreakdown(
            element_affinity=self.element_affinity(chart, category_name),
            ten_gods_harmony=self.ten_gods_harmony(chart, category_name),
            pillar_strength=self.pillar_strength(chart),
            seasonal_bonus=self.seasonal_bonus(chart, category_name),
        )

    def element_affinity(self, chart: SajuChart, category_name: str) -> float:
        dm_element = chart.day_master_element
        dominant = dominant_element(chart.five_elements)
        score = 0.0
        for element in ELEMENTS:
            if category_name not in ELEMENT_APTITUDES[element].categories:
                continue
            if element == dm_element:
                score += 15
            elif GENERATE[dm_element] == element:
                score += 12
            elif GENERATE[element] == dm_element:
                score += 10
            if element == dominant:
                score += 10
            weight = chart.five_elements.get(element, 0.0)
            if weight > 1.5:
                score += 8
            elif weight > 1.0:
                score += 5
        return min(float(ELEMENT_AFFINITY_CAP), score)

    def ten_gods_harmony(self, chart: SajuChart, category_name: str) -> float:
        distinct = list(dict.fromkeys(chart.ten_gods))
        matched = [
            TEN_GOD_APTITUDES[god].bonus
            for god in distinct
            if god in TEN_GOD_APTITUDES and category_matches(category_name, TEN_GOD_APTITUDES[god].suitable)
        ]
        score = float(sum(matched))
        if len(distinct) >= 6:
            score += 5
        elif len(distinct) <= 3:
            score -= 5
        if matched:
            score = max(score, float(max(matched)))
        return _clamp(score, 0.0, float(HARMONY_CAP))

    def pillar_strength(self, chart: SajuChart) -> float:
        strength = chart.strength.day_master_strength
        if strength > 7:
            score = 10.0
        elif strength > 5:
            score = 7.0
        elif strength > 3:
            score = 5.0
        else:
            score = 2.0
        score += min(10.0, chart.strength.seasonal_influence)
        return min(float(PILLAR_STRENGTH_CAP), score)

    def seasonal_bonus(self, chart: SajuChart, category_name: str) -> float:
        activities = SEASONAL_BONUS.get(chart.season)
        if activities is None:
            raise InternalInvariantViolation(f"unknown season: {chart.season!r}")
        for activity, bonus in activities.items():
            if activity in category_name or any(r in category_name for r in RELATED_ACTIVITIES.get(activity, ())):
                return min(float(SEASONAL_BONUS_CAP), float(bonus))
        return 0.0

    def confidence_level(self, chart: SajuChart) -> float:
        present_elements = sum(1 for e in ELEMENTS if chart.five_elements.get(e, 0.0) > 0)
        distinct_gods = len(set(chart.ten_gods))
        completeness = 0.4 + present_elements / 5 * 0.3 + distinct_gods / 10 * 0.3
        balance = element_balance(chart.five_elements)
        return round(min(1.0, 0.5 + completeness * 0.3 + balance / 100 * 0.2), 4)

    def _score(
        self,
        chart: SajuChart,
        current: CurrentPillars,
        category_name: str,
        items: Sequence[CatalogItem],
        major_type: str,
    ) -> CategoryScore:
        breakdown = self.breakdown(chart, category_name)
        raw_base = _clamp(breakdown.total)
        dm_index = chart.pillars.day.stem_index
        temporal = {
            period: round(_clamp(raw_base + _temporal_relation(dm_index, pillar.stem_index) * TEMPORAL_WEIGHTS[period]), 2)
            for period, pillar in (("day", current.day), ("month", current.month), ("year", current.year))
        }
        base = raw_base
        if major_type == "negative":
            base = 100.0 - base
            temporal = {period: round(100.0 - v, 2) for period, v in temporal.items()}
        return CategoryScore(
            category_name=category_name,
            category_type=major_type,
            base_score=base,
            daily_score=temporal["day"],
            monthly_score=temporal["month"],
            yearly_score=temporal["year"],
            raw_base_score=raw_base,
            breakdown=breakdown,
            confidence_level=self.confidence_level(chart),
            ranked_items=tuple(self._rank_items(chart, category_name, items, major_type)[:TOP_ITEMS]),
        )

    def _rank_items(
        self,
        chart: SajuChart,
        category_name: str,
        items: Sequence[CatalogItem],
        major_type: str,
    ) -> list[RankedItem]:
        seen: set[str] = set()
        ranked: list[RankedItem] = []
        for item in items:
            if item.minor_name in seen:
                continue
            seen.add(item.minor_name)
            score = self._item_score(chart, category_name, item)
            if major_type == "negative":
                score = 100.0 - score
            ranked.append(
                RankedItem(
                    name=item.minor_name,
                    individual_score=round(score, 2),
                    affinity_reason=self._affinity_reason(chart, category_name, item.minor_name),
                    confidence=self._item_confidence(chart, item),
                )
            )
        ranked.sort(key=lambda r: r.individual_score, reverse=True)
        return ranked

    def _item_score(self, chart: SajuChart, category_name: str, item: CatalogItem) -> float:
        name = item.minor_name
        score = 50.0 + item.base_weight * 15.0

        for element in ELEMENTS:
            if any(k in name for k in ITEM_ELEMENT_KEYWORDS[element]):
                score += min(15.0, chart.five_elements.get(element, 0.0) * 8.0)
                break

        score += item_ten_god_bonus(chart, name)

        if category_name == "게임" and chart.five_elements.get("water", 0.0) > 1.5:
            score += 8
        elif category_name == "연예" and ("식신" in chart.ten_gods or "상관" in chart.ten_gods):
            score += 10
        elif category_name == "체능" and chart.five_elements.get("fire", 0.0) > 1.5:
            score += 8
        return _clamp(score)

    def _item_confidence(self, chart: SajuChart, item: CatalogItem) -> float:
        confidence = 0.6
        if item.base_weight > 1.5:
            confidence += 0.2
        if chart.strength.day_master_strength > 6:
            confidence += 0.1
        if element_balance(chart.five_elements) > 70:
            confidence += 0.1
        return round(min(1.0, confidence * item.confidence_factor), 2)

    def _affinity_reason(self, chart: SajuChart, category_name: str, item_name: str) -> str:
        dm_element = chart.day_master_element
        reasons: list[str] = []
        for element in ELEMENTS:
            if item_name not in ELEMENT_APTITUDES[element].bonus_items:
                continue
            if element == dm_element:
                reasons.append(f"{ELEMENT_LABELS[element]}오행과 일치")
            elif GENERATE[dm_element] == element:
                reasons.append(f"{ELEMENT_LABELS[dm_element]}→{ELEMENT_LABELS[element]} 상생관계")
        for god in dict.fromkeys(chart.ten_gods):
            aptitude = TEN_GOD_APTITUDES.get(god)
            if aptitude is not None and category_matches(category_name, aptitude.suitable):
                reasons.append(f"{god} 십성 영향")
                break
        return ", ".join(reasons) if reasons else DEFAULT_AFFINITY_REASON

    @staticmethod
    def _neutral_items(items: Sequence[CatalogItem]) -> list[RankedItem]:
        out: list[RankedItem] = []
        seen: set[str] = set()
        for item in items:
            if item.minor_name in seen:
                continue
            seen.add(item.minor_name)
            out.append(
                RankedItem(
                    name=item.minor_name,
                    individual_score=NEUTRAL_SCORE,
                    affinity_reason=DEFAULT_AFFINITY_REASON,
                    confidence=NEUTRAL_CONFIDENCE,
                )
            )
        return out
