from __future__ import annotations

import pytest

from saju_oracle.errors import CatalogUnavailableError
from saju_oracle.models import CatalogItem
from saju_oracle.packages.aptitude.analyzer import REDUCED_COVERAGE_NOTE, AptitudeAnalyzer, overall_confidence
from saju_oracle.packages.catalog.registry import StaticCatalogSource, build_catalog
from saju_oracle.packages.chart_analysis.chart import build_chart
from saju_oracle.packages.scoring_engine.engine import CategoryScoringEngine
from saju_oracle.packages.temporal.service import TemporalPillarService


class _UnavailableSource:
    name = "down"

    def list_categories(self) -> list[CatalogItem]:
        raise CatalogUnavailableError("catalog_api_unreachable")


@pytest.fixture
def analyzer(calculator):
    return AptitudeAnalyzer(engine=CategoryScoringEngine(), calendar=calculator)


def test_analyze_known_chart(analyzer, chart_1990, current_2024):
    result = analyzer.analyze(chart_1990, StaticCatalogSource(), current=current_2024)

    assert list(result.positive) == ["게임", "과목", "미술", "연예", "음악", "전공", "체능"]
    assert list(result.negative) == ["사고도로"]
    assert result.positive["게임"].items == ("FPS게임", "스포츠게임", "액션게임")
    assert result.positive["과목"].items == ("미술", "음악", "체육")
    assert result.positive["연예"].items == ("가수", "드라마배우", "연기자")
    assert result.positive["전공"].items == ("사회과학계", "예체능계")
    assert result.positive["체능"].items == ("농구", "배구", "야구", "축구")
    assert result.positive["연예"].confidence == 0.74
    assert result.positive["연예"].reasoning.startswith("화(火) 기운이 강하고")
    assert result.negative["사고도로"].items == ("고가도로", "고속도로", "사거리")
    assert result.negative["사고도로"].risk_level == "MEDIUM"
    assert result.overall_confidence == 0.7
    assert result.summary == (
        "병일주 봄생으로, 일주가 강하여 적극적이고 추진력 있는 성향을 보입니다. "
        "총 7개 분야에서 재능을 보이며, 1개 분야에서 주의가 필요합니다."
    )


def test_analyze_is_deterministic(analyzer, chart_1990, current_2024):
    catalog = build_catalog(StaticCatalogSource().list_categories())
    assert analyzer.analyze(chart_1990, catalog, current=current_2024) == analyzer.analyze(
        chart_1990, catalog, current=current_2024
    )


def test_unknown_category_falls_back_to_top_ranked(analyzer, chart_1990, current_2024):
    rows = [
        CatalogItem(major_type="positive", middle_name="요리", minor_name=name, base_weight=1.0)
        for name in ("한식", "양식", "일식", "중식")
    ]
    result = analyzer.analyze(chart_1990, build_catalog(rows), current=current_2024)
    assert result.positive["요리"].items == ("한식", "양식", "일식")
    assert "요리" in result.positive["요리"].reasoning


def test_catalog_unavailable_degrades(analyzer, chart_1990, current_2024):
    result = analyzer.analyze(chart_1990, _UnavailableSource(), current=current_2024)

    assert result.positive == {}
    assert result.negative == {}
    assert REDUCED_COVERAGE_NOTE in result.summary
    assert result.overall_confidence == 0.7


def test_overall_confidence_bounds(calculator):
    for year in range(1950, 2030, 3):
        for month in (1, 4, 7, 10):
            chart = build_chart(calculator.compute_pillars(f"{year}-{month:02d}-{(year % 28) + 1:02d}", f"{year % 24:02d}:15"))
            assert 0.5 <= overall_confidence(chart) <= 0.95


def test_enhanced_temporal(analyzer, calculator, chart_1990):
    temporal = TemporalPillarService(calculator).analyze_temporal(chart_1990, "2024-01-01")
    enhanced = analyzer.analyze_enhanced(temporal, StaticCatalogSource())

    rec = enhanced.recommendations
    assert len(rec.favorable_activities) == 3
    assert set(rec.favorable_activities) <= set(enhanced.positive_categories)
    assert "사고도로" in rec.caution_areas
    assert set(rec.caution_areas) <= set(enhanced.negative_categories)
    assert rec.optimal_timing.startswith("세운")

    weights = enhanced.positive_categories["연예"]
    assert [w.category_name for w in weights] == ["가수", "MC", "개그맨", "드라마배우", "뮤지컬배우"]
    # (0.5*46 + 0.3*44 + 0.2*41 - 41) / 100
    assert weights[0].temporal_modifier == pytest.approx(0.034)
    assert weights[0].weight == pytest.approx(1.1 * 1.034)


def test_enhanced_temporal_without_catalog(analyzer, calculator, chart_1990):
    temporal = TemporalPillarService(calculator).analyze_temporal(chart_1990, "2024-01-01")
    enhanced = analyzer.analyze_enhanced(temporal, _UnavailableSource())

    assert enhanced.positive_categories == {}
    assert enhanced.recommendations.favorable_activities == ()
    assert enhanced.notes == [REDUCED_COVERAGE_NOTE]


class _NoneSource:
    name = "none"

    def list_categories(self):
        return None


class _DictRowSource:
    name = "rows"

    def list_categories(self):
        return [
            {"major_type": "positive", "middle_name": "음악", "minor_name": "작곡", "base_weight": 1.4},
            {"major_type": "positive", "middle_name": "음악", "minor_name": "보컬", "base_weight": 1.4},
        ]


class _BadRowSource:
    name = "bad"

    def list_categories(self):
        return [{"middle_name": "음악"}, 42]


def test_none_catalog_degrades(analyzer, chart_1990, current_2024):
    result = analyzer.analyze(chart_1990, _NoneSource(), current=current_2024)
    assert result.positive == {}
    assert result.negative == {}
    assert REDUCED_COVERAGE_NOTE in result.summary


def test_dict_rows_are_accepted(analyzer, chart_1990, current_2024):
    result = analyzer.analyze(chart_1990, _DictRowSource(), current=current_2024)
    assert result.positive["음악"].items == ("작곡",)
    assert result.negative == {}


def test_malformed_rows_degrade(analyzer, calculator, chart_1990, current_2024):
    result = analyzer.analyze(chart_1990, _BadRowSource(), current=current_2024)
    assert result.positive == {}
    assert REDUCED_COVERAGE_NOTE in result.summary

    temporal = TemporalPillarService(calculator).analyze_temporal(chart_1990, "2024-01-01")
    enhanced = analyzer.analyze_enhanced(temporal, _NoneSource())
    assert enhanced.notes == [REDUCED_COVERAGE_NOTE]
