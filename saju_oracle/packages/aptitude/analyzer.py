from __future__ import annotations

import logging

from saju_oracle.errors import CatalogUnavailableError
from saju_oracle.models import (
    AptitudeResult,
    CategoryCatalog,
    CategoryGroup,
    CategoryScore,
    CategoryVerdict,
    CategoryWeight,
    CurrentPillars,
    EnhancedTemporalAnalysis,
    SajuChart,
    TemporalAnalysis,
    TemporalRecommendations,
)
from saju_oracle.packages.calendar_engine.pillars import PillarCalculator
from saju_oracle.packages.catalog.registry import CatalogSource, load_catalog
from saju_oracle.packages.chart_analysis.elements import SEASON_LABELS, spread_balance
from saju_oracle.packages.scoring_engine.engine import CategoryScoringEngine
from saju_oracle.packages.temporal.service import PERIOD_WEIGHTS

from .selectors import CATEGORY_RULES, FALLBACK_LIMIT, fallback_reasoning

logger = logging.getLogger(__name__)

REDUCED_COVERAGE_NOTE = "카테고리 정보를 불러오지 못해 적성 분석 범위가 축소되었습니다."
FAVORABLE_LIMIT = 3
CAUTION_THRESHOLD = 60.0


def _risk_level(item_count: int, confidence: float) -> str:
    risk = item_count * confidence
    if risk > 2.5:
        return "HIGH"
    if risk > 1.5:
        return "MEDIUM"
    return "LOW"


def overall_confidence(chart: SajuChart) -> float:
    confidence = 0.7 + spread_balance(chart.five_elements) * 0.2
    strength = chart.strength.day_master_strength
    if 2.0 < strength < 4.0:
        confidence += 0.1
    # whole percent so the 0-100 wire value round-trips exactly
    return round(max(0.5, min(0.95, confidence)), 2)


def _strength_phrase(strength: float) -> str:
    if strength > 3.0:
        return "일주가 강하여 적극적이고 추진력 있는 성향을 보입니다."
    if strength < 1.5:
        return "일주가 약하여 신중하고 협조적인 성향을 보입니다."
    return "일주가 적절하여 균형잡힌 성향을 보입니다."


def build_summary(chart: SajuChart, *, positive_count: int, negative_count: int, reduced: bool = False) -> str:
    head = f"{chart.day_master}일주 {SEASON_LABELS[chart.season]}생으로, {_strength_phrase(chart.strength.day_master_strength)}"
    if reduced:
        return f"{head} {REDUCED_COVERAGE_NOTE}"
    return f"{head} 총 {positive_count}개 분야에서 재능을 보이며, {negative_count}개 분야에서 주의가 필요합니다."


def resolve_catalog(catalog: CategoryCatalog | CatalogSource) -> CategoryCatalog:
    if isinstance(catalog, CategoryCatalog):
        return catalog
    return load_catalog(catalog)


def _blended(score: CategoryScore) -> float:
    return (
        score.yearly_score * PERIOD_WEIGHTS["year"]
        + score.monthly_score * PERIOD_WEIGHTS["month"]
        + score.daily_score * PERIOD_WEIGHTS["day"]
    )


class AptitudeAnalyzer:
    def __init__(self, *, engine: CategoryScoringEngine, calendar: PillarCalculator) -> None:
        self.engine = engine
        self.calendar = calendar

    def analyze(
        self,
        chart: SajuChart,
        catalog: CategoryCatalog | CatalogSource,
        *,
        current: CurrentPillars | None = None,
    ) -> AptitudeResult:
        try:
            snapshot = resolve_catalog(catalog)
        except CatalogUnavailableError as exc:
            logger.warning("catalog_unavailable reason=%s", exc)
            return AptitudeResult(
                positive={},
                negative={},
                overall_confidence=overall_confidence(chart),
                summary=build_summary(chart, positive_count=0, negative_count=0, reduced=True),
            )
        if current is None:
            current = self.calendar.compute_current_pillars()

        positive: dict[str, CategoryVerdict] = {}
        negative: dict[str, CategoryVerdict] = {}
        for group in snapshot.groups:
            score = self.engine.score(chart, current, group.middle_name, group.items, group.major_type)
            items = self.select_items(chart, group)
            if not items:
                continue
            rule = CATEGORY_RULES.get(group.middle_name)
            reasoning = rule.reasoning if rule is not None else fallback_reasoning(group.middle_name)
            if group.major_type == "positive":
                positive[group.middle_name] = CategoryVerdict(
                    items=items,
                    reasoning=reasoning,
                    confidence=round(score.confidence_level, 2),
                )
            else:
                negative[group.middle_name] = CategoryVerdict(
                    items=items,
                    reasoning=reasoning,
                    risk_level=_risk_level(len(items), score.confidence_level),
                )

        return AptitudeResult(
            positive=positive,
            negative=negative,
            overall_confidence=overall_confidence(chart),
            summary=build_summary(chart, positive_count=len(positive), negative_count=len(negative)),
        )

    def select_items(self, chart: SajuChart, group: CategoryGroup) -> tuple[str, ...]:
        ranked = self.engine.rank_items(chart, group.middle_name, group.items, group.major_type)
        rule = CATEGORY_RULES.get(group.middle_name)
        if rule is None:
            return tuple(r.name for r in ranked[:FALLBACK_LIMIT])
        eligible = set(rule.eligible(chart))
        return tuple([r.name for r in ranked if r.name in eligible][: rule.limit])

    def analyze_enhanced(
        self,
        temporal: TemporalAnalysis,
        catalog: CategoryCatalog | CatalogSource,
    ) -> EnhancedTemporalAnalysis:
        chart = temporal.chart
        try:
            snapshot = resolve_catalog(catalog)
        except CatalogUnavailableError as exc:
            logger.warning("catalog_unavailable reason=%s", exc)
            return EnhancedTemporalAnalysis(
                temporal=temporal,
                positive_categories={},
                negative_categories={},
                recommendations=TemporalRecommendations(
                    favorable_activities=(),
                    caution_areas=(),
                    optimal_timing=self.optimal_timing(temporal),
                ),
                notes=[REDUCED_COVERAGE_NOTE],
            )

        positive: dict[str, list[CategoryWeight]] = {}
        negative: dict[str, list[CategoryWeight]] = {}
        blended: dict[str, tuple[str, float, float]] = {}
        for group in snapshot.groups:
            score = self.engine.score(chart, temporal.current_pillars, group.middle_name, group.items, group.major_type)
            mix = _blended(score)
            modifier = round((mix - score.base_score) / 100.0, 4)
            base_weights = {it.minor_name: it.base_weight for it in group.items}
            weights = [
                CategoryWeight(
                    category_name=r.name,
                    weight=round(base_weights.get(r.name, 1.0) * (1.0 + modifier), 4),
                    confidence=r.confidence,
                    temporal_modifier=modifier,
                )
                for r in score.ranked_items
            ]
            target = positive if group.major_type == "positive" else negative
            target[group.middle_name] = weights
            blended[group.middle_name] = (group.major_type, mix, score.base_score)

        favorable = sorted(
            (name for name, (major, _, _) in blended.items() if major == "positive"),
            key=lambda n: blended[n][1],
            reverse=True,
        )[:FAVORABLE_LIMIT]
        caution = sorted(
            (name for name, (major, _, base) in blended.items() if major == "negative" and base > CAUTION_THRESHOLD),
            key=lambda n: blended[n][1],
            reverse=True,
        )
        return EnhancedTemporalAnalysis(
            temporal=temporal,
            positive_categories=positive,
            negative_categories=negative,
            recommendations=TemporalRecommendations(
                favorable_activities=tuple(favorable),
                caution_areas=tuple(caution),
                optimal_timing=self.optimal_timing(temporal),
            ),
        )

    @staticmethod
    def optimal_timing(temporal: TemporalAnalysis) -> str:
        best = max(temporal.interactions.values(), key=lambda it: it.score)
        if best.score <= 0:
            return "뚜렷하게 유리한 시기가 없으니 큰 결정은 신중하게 미루는 것이 좋습니다."
        return f"{best.text}. 이 흐름에 맞춰 중요한 일을 추진하기 좋습니다."
