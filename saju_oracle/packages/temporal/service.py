from __future__ import annotations

from datetime import date, datetime

from saju_oracle.models import (
    STEM_ELEMENT,
    CurrentPillars,
    FortuneTrend,
    InteractionSummary,
    SajuChart,
    TemporalAnalysis,
)
from saju_oracle.packages.calendar_engine.pillars import PillarCalculator
from saju_oracle.packages.chart_analysis.elements import element_relation

RELATION_TAGS = {
    "support": "generative",
    "same": "same",
    "generate": "expressive",
    "destroy": "draining",
    "restrain": "restraining",
    "neutral": "neutral",
}

RELATION_SCORES = {
    "support": 70.0,
    "same": 30.0,
    "generate": 20.0,
    "destroy": -20.0,
    "restrain": -50.0,
    "neutral": 0.0,
}

RELATION_TEXTS = {
    "support": "상생 — 도움을 받아 성장하는 시기",
    "same": "비화 — 같은 기운이 모여 자신감이 커지는 시기",
    "generate": "설기 — 재능을 드러내고 표현하는 시기",
    "destroy": "재성 — 성과를 거두지만 기운이 소모되는 시기",
    "restrain": "극 — 절제와 인내가 필요한 시기",
    "neutral": "평 — 특별한 작용이 없는 시기",
}

PERIOD_LABELS = {
    "year": "세운",
    "month": "월운",
    "day": "일운",
}

PERIOD_WEIGHTS = {
    "year": 0.5,
    "month": 0.3,
    "day": 0.2,
}


def _trend_label(v: float) -> str:
    if v > 20:
        return "rising"
    if v < -20:
        return "declining"
    return "stable"


def interaction_summary(*, day_master_index: int, current_stem_index: int, period: str) -> InteractionSummary:
    relation = element_relation(STEM_ELEMENT[day_master_index], STEM_ELEMENT[current_stem_index])
    return InteractionSummary(
        period=period,
        relation=relation,
        relation_tag=RELATION_TAGS[relation],
        score=RELATION_SCORES[relation],
        text=f"{PERIOD_LABELS.get(period, period)}: {RELATION_TEXTS[relation]}",
    )


def fortune_trend(chart: SajuChart, current: CurrentPillars) -> tuple[dict[str, InteractionSummary], FortuneTrend]:
    dm_index = chart.pillars.day.stem_index
    interactions = {
        period: interaction_summary(day_master_index=dm_index, current_stem_index=pillar.stem_index, period=period)
        for period, pillar in (("year", current.year), ("month", current.month), ("day", current.day))
    }
    overall = sum(interactions[p].score * w for p, w in PERIOD_WEIGHTS.items())
    overall = round(overall, 2)
    trend = FortuneTrend(
        year_score=interactions["year"].score,
        month_score=interactions["month"].score,
        day_score=interactions["day"].score,
        overall_score=overall,
        overall_trend=_trend_label(overall),
    )
    return interactions, trend


class TemporalPillarService:
    def __init__(self, calculator: PillarCalculator) -> None:
        self.calculator = calculator

    def current_pillars(self, as_of: date | datetime | str | None = None) -> CurrentPillars:
        return self.calculator.compute_current_pillars(as_of)

    def analyze_temporal(
        self,
        chart: SajuChart,
        as_of: date | datetime | str | None = None,
        *,
        current: CurrentPillars | None = None,
    ) -> TemporalAnalysis:
        if current is None:
            current = self.current_pillars(as_of)
        interactions, trend = fortune_trend(chart, current)
        return TemporalAnalysis(
            chart=chart,
            current_pillars=current,
            interactions=interactions,
            fortune_trend=trend,
        )
