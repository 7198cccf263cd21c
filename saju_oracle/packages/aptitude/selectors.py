from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from saju_oracle.models import SajuChart


@dataclass(frozen=True)
class Clause:
    names: tuple[str, ...]
    when: Callable[[SajuChart], bool]


@dataclass(frozen=True)
class CategoryRule:
    reasoning: str
    limit: int
    clauses: tuple[Clause, ...]

    def eligible(self, chart: SajuChart) -> list[str]:
        out: list[str] = []
        for clause in self.clauses:
            if clause.when(chart):
                out.extend(n for n in clause.names if n not in out)
        return out


def _element_above(element: str, threshold: float) -> Callable[[SajuChart], bool]:
    return lambda chart: chart.five_elements.get(element, 0.0) > threshold


def _day_master_is(element: str) -> Callable[[SajuChart], bool]:
    return lambda chart: chart.day_master_element == element


def _has_god(*gods: str) -> Callable[[SajuChart], bool]:
    return lambda chart: any(g in chart.ten_gods for g in gods)


def _strength_below(threshold: float) -> Callable[[SajuChart], bool]:
    return lambda chart: chart.strength.day_master_strength < threshold


def _by_day_master(table: dict[str, tuple[str, ...]]) -> tuple[Clause, ...]:
    return tuple(Clause(names=names, when=_day_master_is(element)) for element, names in table.items())


CATEGORY_RULES: dict[str, CategoryRule] = {
    "게임": CategoryRule(
        reasoning="수(水)와 금(金) 기운이 강하고 십성에서 식상이 발달한 경우 게임 분야 적성",
        limit=3,
        clauses=(
            Clause(
                names=("FPS게임", "액션게임", "스포츠게임"),
                when=lambda chart: _element_above("water", 1.5)(chart) or _element_above("metal", 1.5)(chart),
            ),
            Clause(names=("시뮬레이션게임", "롤플레잉게임"), when=_element_above("earth", 1.2)),
        ),
    ),
    "과목": CategoryRule(
        reasoning="일주의 오행과 십성 구조에 따른 학습 분야 적성",
        limit=4,
        clauses=_by_day_master(
            {
                "wood": ("국어", "영어", "음악", "미술"),
                "fire": ("체육", "음악", "미술"),
                "earth": ("사회", "도덕", "한국사"),
                "metal": ("수학", "과학", "기술"),
                "water": ("한문", "국어", "영어"),
            }
        ),
    ),
    "무용": CategoryRule(
        reasoning="화(火)와 목(木) 기운이 조화롭고 체능 관련 십성이 발달한 경우",
        limit=3,
        clauses=(
            Clause(
                names=("현대무용", "대중무용", "스포츠댄스"),
                when=lambda chart: _element_above("fire", 1.0)(chart) and _element_above("wood", 1.0)(chart),
            ),
            Clause(names=("전통무용", "민속무용"), when=_element_above("earth", 1.2)),
        ),
    ),
    "문학": CategoryRule(
        reasoning="상관, 식신이 발달하고 수(水) 기운이 풍부한 경우 문학적 재능",
        limit=3,
        clauses=(
            Clause(names=("소설가", "시인", "시나리오작가"), when=_element_above("water", 1.5)),
            Clause(names=("방송작가", "라디오작가", "작사가"), when=_has_god("상관", "식신")),
        ),
    ),
    "미술": CategoryRule(
        reasoning="토(土)와 화(火) 기운의 조화, 상관 식신의 발달",
        limit=4,
        clauses=(
            Clause(names=("서양화", "디자인", "시각디자인"), when=_element_above("fire", 1.2)),
            Clause(names=("조소", "공예", "인테리어"), when=_element_above("earth", 1.2)),
        ),
    ),
    "연예": CategoryRule(
        reasoning="화(火) 기운이 강하고 상관이 발달한 경우 연예 분야 적성",
        limit=3,
        clauses=(
            Clause(names=("가수", "연기자", "드라마배우"), when=_element_above("fire", 1.5)),
            Clause(names=("개그맨", "MC", "뮤지컬배우"), when=_has_god("상관")),
        ),
    ),
    "음악": CategoryRule(
        reasoning="금(金) 기운과 수(水) 기운의 조화, 식상 발달",
        limit=3,
        clauses=(
            Clause(names=("건반악기", "관악기", "작곡"), when=_element_above("metal", 1.0)),
            Clause(names=("보컬", "대중음악", "성악"), when=_element_above("water", 1.0)),
        ),
    ),
    "전공": CategoryRule(
        reasoning="오행 균형과 십성 구조에 따른 학문 분야 적성",
        limit=3,
        clauses=_by_day_master(
            {
                "wood": ("어문인문학계", "사범계", "예체능계"),
                "fire": ("예체능계", "사회과학계"),
                "earth": ("사회과학계", "생활과학계", "농생명과학계"),
                "metal": ("공학계", "자연과학계", "의치악계"),
                "water": ("법정계", "어문인문학계"),
            }
        ),
    ),
    "체능": CategoryRule(
        reasoning="화(火) 기운과 목(木) 기운이 강한 경우 체능 분야 적성",
        limit=5,
        clauses=(
            Clause(names=("축구", "농구", "배구", "야구"), when=_element_above("fire", 1.5)),
            Clause(names=("골프", "테니스", "배드민턴"), when=_element_above("wood", 1.0)),
            Clause(names=("수영", "수상스키", "요트"), when=_element_above("water", 1.0)),
        ),
    ),
    "교통사고": CategoryRule(
        reasoning="충, 형, 파, 해 등의 신살과 금(金) 기운의 과다",
        limit=3,
        clauses=(
            Clause(names=("충돌사고", "과속사고", "접촉사고"), when=_element_above("metal", 2.0)),
            Clause(names=("졸음운전", "신호위반"), when=_strength_below(1.5)),
        ),
    ),
    "사건": CategoryRule(
        reasoning="편관, 상관의 과다와 오행 불균형",
        limit=2,
        clauses=(Clause(names=("소송", "명예훼손", "폭행"), when=_has_god("편관", "상관")),),
    ),
    "사고": CategoryRule(
        reasoning="일주가 약하고 충극이 많은 경우",
        limit=2,
        clauses=(Clause(names=("분실", "손실", "언쟁"), when=_strength_below(1.5)),),
    ),
    "사고도로": CategoryRule(
        reasoning="특정 방향성과 시간대의 불리한 기운",
        limit=3,
        clauses=(Clause(names=("고속도로", "사거리", "고가도로"), when=_element_above("metal", 1.5)),),
    ),
}

FALLBACK_LIMIT = 3


def fallback_reasoning(category_name: str) -> str:
    return f"오행 분포와 십성 구조에 따른 {category_name} 분야 분석"
