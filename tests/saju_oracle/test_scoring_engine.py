from __future__ import annotations

import dataclasses

import pytest

from saju_oracle.errors import InternalInvariantViolation
from saju_oracle.packages.catalog.registry import StaticCatalogSource, build_catalog
from saju_oracle.packages.chart_analysis.chart import build_chart
from saju_oracle.packages.scoring_engine.engine import CategoryScoringEngine, item_ten_god_bonus


@pytest.fixture
def catalog():
    return build_catalog(StaticCatalogSource().list_categories())


@pytest.fixture
def engine():
    return CategoryScoringEngine()


def _group(catalog, name):
    return next(g for g in catalog.groups if g.middle_name == name)


def test_entertainment_breakdown(engine, catalog, chart_1990, current_2024):
    group = _group(catalog, "연예")
    score = engine.score(chart_1990, current_2024, group.middle_name, group.items, group.major_type)

    assert score.breakdown.element_affinity == 33
    assert score.breakdown.ten_gods_harmony == 0
    assert score.breakdown.pillar_strength == 8
    assert score.breakdown.seasonal_bonus == 0
    assert score.base_score == 41
    assert score.yearly_score == 46.0
    assert score.monthly_score == 44.0
    assert score.daily_score == 41.0
    assert score.confidence_level == pytest.approx(0.7443, abs=1e-4)
    assert [it.name for it in score.ranked_items] == ["가수", "MC", "개그맨", "드라마배우", "뮤지컬배우"]
    assert all(it.individual_score == 66.5 for it in score.ranked_items)


def test_breakdown_bounds_and_sum(engine, catalog, calculator, current_2024):
    births = [("1990-05-15", "10:30"), ("1975-12-01", "23:45"), ("2001-08-20", "04:05"), ("1962-03-09", "15:00")]
    for birth_date, birth_time in births:
        chart = build_chart(calculator.compute_pillars(birth_date, birth_time))
        for group in catalog.groups:
            score = engine.score(chart, current_2024, group.middle_name, group.items, group.major_type)
            b = score.breakdown
            assert 0 <= b.element_affinity <= 40
            assert 0 <= b.ten_gods_harmony <= 30
            assert 0 <= b.pillar_strength <= 20
            assert 0 <= b.seasonal_bonus <= 10
            assert score.raw_base_score == b.total
            for v in (score.base_score, score.daily_score, score.monthly_score, score.yearly_score):
                assert 0 <= v <= 100
            assert 0 <= score.confidence_level <= 1
            assert len(score.ranked_items) <= 5
            names = [it.name for it in score.ranked_items]
            assert len(names) == len(set(names))
            ranked = [it.individual_score for it in score.ranked_items]
            assert ranked == sorted(ranked, reverse=True)


def test_negative_category_is_inverted(engine, catalog, chart_1990, current_2024):
    group = _group(catalog, "사고도로")
    as_negative = engine.score(chart_1990, current_2024, group.middle_name, group.items, "negative")
    as_positive = engine.score(chart_1990, current_2024, group.middle_name, group.items, "positive")

    assert as_negative.raw_base_score == as_positive.raw_base_score
    assert as_negative.base_score == 100 - as_positive.base_score
    assert as_negative.daily_score == pytest.approx(100 - as_positive.daily_score)
    assert as_negative.monthly_score == pytest.approx(100 - as_positive.monthly_score)
    assert as_negative.yearly_score == pytest.approx(100 - as_positive.yearly_score)

    pos_items = {it.name: it.individual_score for it in engine.rank_items(chart_1990, group.middle_name, group.items, "positive")}
    for it in engine.rank_items(chart_1990, group.middle_name, group.items, "negative"):
        assert it.individual_score == pytest.approx(100 - pos_items[it.name])


def test_entertainment_harmony_with_output_gods(engine, catalog, pillars_factory, current_2024):
    # 병 day master with 식신 (무) and 상관 (기) stems
    chart = build_chart(pillars_factory((4, 4), (5, 7), (2, 6), (4, 6)))
    assert "상관" in chart.ten_gods and "식신" in chart.ten_gods

    group = _group(catalog, "연예")
    score = engine.score(chart, current_2024, group.middle_name, group.items, group.major_type)
    assert 22 <= score.breakdown.ten_gods_harmony <= 30
    # every entertainment item gets the output-god bonus
    assert all(it.individual_score >= 50 + 1.1 * 15 + 10 for it in score.ranked_items)


def test_harmony_floor_keeps_largest_bonus(engine, chart_1990):
    # three distinct labels would cost 5, but 정관 alone already matches 전공
    assert engine.ten_gods_harmony(chart_1990, "전공") == 25


def test_duplicate_items_are_collapsed(engine, catalog, chart_1990):
    group = _group(catalog, "사고")
    items = list(group.items) + [group.items[0]]
    ranked = engine.rank_items(chart_1990, group.middle_name, items, group.major_type)
    assert len(ranked) == len(group.items)


def test_affinity_reason_mentions_ten_god(engine, chart_1990):
    assert engine._affinity_reason(chart_1990, "전공", "공학계") == "정관 십성 영향"
    assert engine._affinity_reason(chart_1990, "게임", "FPS게임") == "기본 적성"


def test_invariant_violation_raises_when_strict(engine, catalog, chart_1990, current_2024):
    broken = dataclasses.replace(chart_1990, season="monsoon")
    group = _group(catalog, "연예")
    with pytest.raises(InternalInvariantViolation):
        engine.score(broken, current_2024, group.middle_name, group.items, group.major_type)


def test_invariant_violation_degrades_to_neutral(catalog, chart_1990, current_2024):
    engine = CategoryScoringEngine(strict_invariants=False)
    broken = dataclasses.replace(chart_1990, season="monsoon")
    group = _group(catalog, "연예")
    score = engine.score(broken, current_2024, group.middle_name, group.items, group.major_type)

    assert score.base_score == 50
    assert score.daily_score == score.monthly_score == score.yearly_score == 50
    assert score.confidence_level == 0.5
    assert score.breakdown.total == 50
    assert len(score.ranked_items) == 5


def test_seasonal_bonus_matches_related_activity_inside_name(engine, chart_1990):
    assert chart_1990.season == "spring"
    assert engine.seasonal_bonus(chart_1990, "스포츠/체육") == 10
    assert engine.seasonal_bonus(chart_1990, "요리") == 0


def test_item_ten_god_bonus_takes_first_match_in_chart_order(chart_1990):
    chart = dataclasses.replace(chart_1990, ten_gods=("정관", "식신", "일주", "편재"))
    assert item_ten_god_bonus(chart, "예술관리") == 12
    swapped = dataclasses.replace(chart_1990, ten_gods=("식신", "정관", "일주", "편재"))
    assert item_ten_god_bonus(swapped, "예술관리") == 10
    assert item_ten_god_bonus(chart, "축구") == 0
