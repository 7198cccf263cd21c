from __future__ import annotations

import json

import pytest
from pydantic import ValidationError as PayloadValidationError

from saju_oracle.models import AptitudeResult, CategoryVerdict
from saju_oracle.packages.aptitude.analyzer import AptitudeAnalyzer
from saju_oracle.packages.catalog.registry import StaticCatalogSource
from saju_oracle.packages.scoring_engine.engine import CategoryScoringEngine
from saju_oracle.packages.temporal.service import TemporalPillarService
from saju_oracle.schemas import aptitude_from_payload, aptitude_to_payload, chart_model, temporal_to_payload


def test_aptitude_payload_round_trip(calculator, chart_1990, current_2024):
    analyzer = AptitudeAnalyzer(engine=CategoryScoringEngine(), calendar=calculator)
    result = analyzer.analyze(chart_1990, StaticCatalogSource(), current=current_2024)

    payload = json.loads(json.dumps(aptitude_to_payload(result), ensure_ascii=False))
    assert payload["confidence"] == 70
    assert payload["positive"]["연예"] == {
        "items": ["가수", "드라마배우", "연기자"],
        "confidence": 74,
        "reasoning": result.positive["연예"].reasoning,
    }
    assert payload["negative"]["사고도로"]["risk_level"] == "MEDIUM"
    assert aptitude_from_payload(payload) == result


def test_payload_rejects_unknown_risk_level():
    payload = {
        "positive": {},
        "negative": {"사고": {"items": ["분실"], "risk_level": "SEVERE", "reasoning": "x"}},
        "confidence": 60,
        "summary": "s",
    }
    with pytest.raises(PayloadValidationError):
        aptitude_from_payload(payload)


def test_empty_result_round_trip():
    result = AptitudeResult(positive={}, negative={}, overall_confidence=0.55, summary="요약")
    assert aptitude_from_payload(aptitude_to_payload(result)) == result


def test_verdict_confidence_serialized_as_percent():
    result = AptitudeResult(
        positive={"음악": CategoryVerdict(items=("작곡",), reasoning="r", confidence=0.83)},
        negative={},
        overall_confidence=0.9,
        summary="s",
    )
    assert aptitude_to_payload(result)["positive"]["음악"]["confidence"] == 83


def test_chart_and_temporal_payloads(calculator, chart_1990):
    chart = chart_model(chart_1990).model_dump()
    assert chart["year"]["hanja"] == "庚午"
    assert chart["day_master"] == "병"
    assert chart["five_elements"]["fire"] == 4.2
    assert chart["strength"]["day_master_strength"] == 5.7

    temporal = TemporalPillarService(calculator).analyze_temporal(chart_1990, "2024-01-01")
    payload = temporal_to_payload(temporal)
    assert payload["fortune_trends"]["overall_trend"] == "rising"
    assert payload["current_pillars"]["year"]["text"] == "갑진"
    assert payload["interactions"]["year"]["relation_tag"] == "generative"
