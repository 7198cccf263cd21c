from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .models import (
    ELEMENTS,
    AptitudeResult,
    CategoryVerdict,
    CurrentPillars,
    EnhancedTemporalAnalysis,
    GanzhiPillar,
    SajuChart,
    TemporalAnalysis,
)


class PillarPayload(BaseModel):
    text: str
    hanja: str
    stem: str
    branch: str
    stem_element: str
    branch_element: str


class ChartPayload(BaseModel):
    birth_date: str
    birth_time: str
    is_lunar: bool
    solar_date: str
    source: str
    year: PillarPayload
    month: PillarPayload
    day: PillarPayload
    hour: PillarPayload
    day_master: str
    season: str
    five_elements: dict[str, float]
    ten_gods: list[str]
    strength: dict[str, float]


class PositiveCategoryPayload(BaseModel):
    items: list[str]
    confidence: int = Field(..., ge=0, le=100)
    reasoning: str


class NegativeCategoryPayload(BaseModel):
    items: list[str]
    risk_level: Literal["LOW", "MEDIUM", "HIGH"]
    reasoning: str


class AptitudeResultPayload(BaseModel):
    positive: dict[str, PositiveCategoryPayload]
    negative: dict[str, NegativeCategoryPayload]
    confidence: int = Field(..., ge=0, le=100, description="Overall confidence in percent")
    summary: str


class CurrentPillarsPayload(BaseModel):
    current_date: str
    analysis_timestamp_utc: str
    year: PillarPayload
    month: PillarPayload
    day: PillarPayload


class InteractionPayload(BaseModel):
    relation: str
    relation_tag: str
    score: float
    text: str


class FortuneTrendPayload(BaseModel):
    year_score: float = Field(..., ge=-100, le=100)
    month_score: float = Field(..., ge=-100, le=100)
    day_score: float = Field(..., ge=-100, le=100)
    overall_score: float
    overall_trend: Literal["rising", "stable", "declining"]


class TemporalAnalysisPayload(BaseModel):
    chart: ChartPayload
    current_pillars: CurrentPillarsPayload
    interactions: dict[str, InteractionPayload]
    fortune_trends: FortuneTrendPayload


class CategoryWeightPayload(BaseModel):
    category_name: str
    weight: float
    confidence: float
    temporal_modifier: float


class TemporalRecommendationsPayload(BaseModel):
    favorable_activities: list[str]
    caution_areas: list[str]
    optimal_timing: str


class EnhancedTemporalPayload(TemporalAnalysisPayload):
    positive_categories: dict[str, list[CategoryWeightPayload]]
    negative_categories: dict[str, list[CategoryWeightPayload]]
    temporal_recommendations: TemporalRecommendationsPayload
    notes: list[str] = Field(default_factory=list)


def _percent(v: float) -> int:
    return int(round(v * 100))


def _pillar(p: GanzhiPillar) -> PillarPayload:
    return PillarPayload(
        text=p.text,
        hanja=p.hanja,
        stem=p.stem,
        branch=p.branch,
        stem_element=p.stem_element,
        branch_element=p.branch_element,
    )


def chart_model(chart: SajuChart) -> ChartPayload:
    p = chart.pillars
    return ChartPayload(
        birth_date=p.birth_date,
        birth_time=p.birth_time,
        is_lunar=p.is_lunar,
        solar_date=p.solar_date.isoformat(),
        source=p.source,
        year=_pillar(p.year),
        month=_pillar(p.month),
        day=_pillar(p.day),
        hour=_pillar(p.hour),
        day_master=chart.day_master,
        season=chart.season,
        five_elements={e: round(chart.five_elements.get(e, 0.0), 2) for e in ELEMENTS},
        ten_gods=list(chart.ten_gods),
        strength={
            "day_master_strength": round(chart.strength.day_master_strength, 2),
            "seasonal_influence": chart.strength.seasonal_influence,
            "supporting_elements": round(chart.strength.supporting_elements, 2),
            "monthly_influence": chart.strength.monthly_influence,
        },
    )


def aptitude_model(result: AptitudeResult) -> AptitudeResultPayload:
    return AptitudeResultPayload(
        positive={
            name: PositiveCategoryPayload(
                items=list(v.items),
                confidence=_percent(v.confidence or 0.0),
                reasoning=v.reasoning,
            )
            for name, v in result.positive.items()
        },
        negative={
            name: NegativeCategoryPayload(
                items=list(v.items),
                risk_level=v.risk_level or "LOW",
                reasoning=v.reasoning,
            )
            for name, v in result.negative.items()
        },
        confidence=_percent(result.overall_confidence),
        summary=result.summary,
    )


def aptitude_to_payload(result: AptitudeResult) -> dict:
    return aptitude_model(result).model_dump()


def aptitude_from_payload(payload: dict) -> AptitudeResult:
    model = AptitudeResultPayload.model_validate(payload)
    return AptitudeResult(
        positive={
            name: CategoryVerdict(items=tuple(v.items), reasoning=v.reasoning, confidence=v.confidence / 100)
            for name, v in model.positive.items()
        },
        negative={
            name: CategoryVerdict(items=tuple(v.items), reasoning=v.reasoning, risk_level=v.risk_level)
            for name, v in model.negative.items()
        },
        overall_confidence=model.confidence / 100,
        summary=model.summary,
    )


def current_pillars_model(current: CurrentPillars) -> CurrentPillarsPayload:
    return CurrentPillarsPayload(
        current_date=current.current_date.isoformat(),
        analysis_timestamp_utc=current.analysis_timestamp_utc.isoformat(),
        year=_pillar(current.year),
        month=_pillar(current.month),
        day=_pillar(current.day),
    )


def _temporal_fields(analysis: TemporalAnalysis) -> dict:
    trend = analysis.fortune_trend
    return {
        "chart": chart_model(analysis.chart),
        "current_pillars": current_pillars_model(analysis.current_pillars),
        "interactions": {
            period: InteractionPayload(
                relation=it.relation,
                relation_tag=it.relation_tag,
                score=it.score,
                text=it.text,
            )
            for period, it in analysis.interactions.items()
        },
        "fortune_trends": FortuneTrendPayload(
            year_score=trend.year_score,
            month_score=trend.month_score,
            day_score=trend.day_score,
            overall_score=trend.overall_score,
            overall_trend=trend.overall_trend,
        ),
    }


def temporal_to_payload(analysis: TemporalAnalysis) -> dict:
    return TemporalAnalysisPayload(**_temporal_fields(analysis)).model_dump()


def enhanced_to_payload(analysis: EnhancedTemporalAnalysis) -> dict:
    rec = analysis.recommendations

    def weights(groups: dict) -> dict[str, list[CategoryWeightPayload]]:
        return {
            name: [
                CategoryWeightPayload(
                    category_name=w.category_name,
                    weight=w.weight,
                    confidence=w.confidence,
                    temporal_modifier=w.temporal_modifier,
                )
                for w in items
            ]
            for name, items in groups.items()
        }

    return EnhancedTemporalPayload(
        **_temporal_fields(analysis.temporal),
        positive_categories=weights(analysis.positive_categories),
        negative_categories=weights(analysis.negative_categories),
        temporal_recommendations=TemporalRecommendationsPayload(
            favorable_activities=list(rec.favorable_activities),
            caution_areas=list(rec.caution_areas),
            optimal_timing=rec.optimal_timing,
        ),
        notes=list(analysis.notes),
    ).model_dump()
