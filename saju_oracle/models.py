from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from saju_oracle.errors import InternalInvariantViolation

STEMS: tuple[str, ...] = ("갑", "을", "병", "정", "무", "기", "경", "신", "임", "계")
STEM_HANJA: tuple[str, ...] = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")
BRANCHES: tuple[str, ...] = ("자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해")
BRANCH_HANJA: tuple[str, ...] = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

ELEMENTS: tuple[str, ...] = ("wood", "fire", "earth", "metal", "water")

STEM_ELEMENT: tuple[str, ...] = (
    "wood",
    "wood",
    "fire",
    "fire",
    "earth",
    "earth",
    "metal",
    "metal",
    "water",
    "water",
)

BRANCH_ELEMENT: tuple[str, ...] = (
    "water",
    "earth",
    "wood",
    "wood",
    "earth",
    "fire",
    "fire",
    "earth",
    "metal",
    "metal",
    "earth",
    "water",
)

ELEMENT_LABELS = {
    "wood": "목",
    "fire": "화",
    "earth": "토",
    "metal": "금",
    "water": "수",
}

MAJOR_TYPES: tuple[str, ...] = ("positive", "negative")


@dataclass(frozen=True)
class GanzhiPillar:
    stem_index: int
    branch_index: int

    def __post_init__(self) -> None:
        if not 0 <= self.stem_index < len(STEMS):
            raise InternalInvariantViolation(f"stem index out of range: {self.stem_index}")
        if not 0 <= self.branch_index < len(BRANCHES):
            raise InternalInvariantViolation(f"branch index out of range: {self.branch_index}")

    @property
    def stem(self) -> str:
        return STEMS[self.stem_index]

    @property
    def branch(self) -> str:
        return BRANCHES[self.branch_index]

    @property
    def text(self) -> str:
        return f"{self.stem}{self.branch}"

    @property
    def hanja(self) -> str:
        return f"{STEM_HANJA[self.stem_index]}{BRANCH_HANJA[self.branch_index]}"

    @property
    def stem_element(self) -> str:
        return STEM_ELEMENT[self.stem_index]

    @property
    def branch_element(self) -> str:
        return BRANCH_ELEMENT[self.branch_index]

    @property
    def is_yang(self) -> bool:
        return self.stem_index % 2 == 0


@dataclass(frozen=True)
class FourPillars:
    source: str
    birth_date: str
    birth_time: str
    is_lunar: bool
    solar_date: date
    year: GanzhiPillar
    month: GanzhiPillar
    day: GanzhiPillar
    hour: GanzhiPillar

    @property
    def day_master(self) -> str:
        return self.day.stem

    @property
    def day_master_element(self) -> str:
        return self.day.stem_element

    def as_tuple(self) -> tuple[GanzhiPillar, GanzhiPillar, GanzhiPillar, GanzhiPillar]:
        return (self.year, self.month, self.day, self.hour)


@dataclass(frozen=True)
class StrengthProfile:
    day_master_strength: float
    seasonal_influence: float
    supporting_elements: float
    monthly_influence: float


@dataclass(frozen=True)
class SajuChart:
    pillars: FourPillars
    five_elements: dict[str, float]
    ten_gods: tuple[str, ...]
    strength: StrengthProfile
    season: str

    @property
    def day_master(self) -> str:
        return self.pillars.day_master

    @property
    def day_master_element(self) -> str:
        return self.pillars.day_master_element


@dataclass(frozen=True)
class CatalogItem:
    major_type: str
    middle_name: str
    minor_name: str
    base_weight: float = 1.0
    confidence_factor: float = 1.0
    icon: str = "⭐"


@dataclass(frozen=True)
class CategoryGroup:
    major_type: str
    middle_name: str
    icon: str
    items: tuple[CatalogItem, ...]


@dataclass(frozen=True)
class CategoryCatalog:
    source: str
    loaded_at_utc: datetime
    groups: tuple[CategoryGroup, ...]

    def groups_for(self, major_type: str) -> list[CategoryGroup]:
        return [g for g in self.groups if g.major_type == major_type]

    def items(self) -> list[CatalogItem]:
        return [item for g in self.groups for item in g.items]


@dataclass(frozen=True)
class ScoreBreakdown:
    element_affinity: float
    ten_gods_harmony: float
    pillar_strength: float
    seasonal_bonus: float

    @property
    def total(self) -> float:
        return self.element_affinity + self.ten_gods_harmony + self.pillar_strength + self.seasonal_bonus


@dataclass(frozen=True)
class RankedItem:
    name: str
    individual_score: float
    affinity_reason: str
    confidence: float


@dataclass(frozen=True)
class CategoryScore:
    category_name: str
    category_type: str
    base_score: float
    daily_score: float
    monthly_score: float
    yearly_score: float
    raw_base_score: float
    breakdown: ScoreBreakdown
    confidence_level: float
    ranked_items: tuple[RankedItem, ...]


@dataclass(frozen=True)
class CategoryVerdict:
    items: tuple[str, ...]
    reasoning: str
    confidence: float | None = None
    risk_level: str | None = None


@dataclass(frozen=True)
class AptitudeResult:
    positive: dict[str, CategoryVerdict]
    negative: dict[str, CategoryVerdict]
    overall_confidence: float
    summary: str


@dataclass(frozen=True)
class CurrentPillars:
    current_date: date
    year: GanzhiPillar
    month: GanzhiPillar
    day: GanzhiPillar
    analysis_timestamp_utc: datetime


@dataclass(frozen=True)
class InteractionSummary:
    period: str
    relation: str
    relation_tag: str
    score: float
    text: str


@dataclass(frozen=True)
class FortuneTrend:
    year_score: float
    month_score: float
    day_score: float
    overall_score: float
    overall_trend: str


@dataclass(frozen=True)
class TemporalAnalysis:
    chart: SajuChart
    current_pillars: CurrentPillars
    interactions: dict[str, InteractionSummary]
    fortune_trend: FortuneTrend


@dataclass(frozen=True)
class CategoryWeight:
    category_name: str
    weight: float
    confidence: float
    temporal_modifier: float


@dataclass(frozen=True)
class TemporalRecommendations:
    favorable_activities: tuple[str, ...]
    caution_areas: tuple[str, ...]
    optimal_timing: str


@dataclass(frozen=True)
class EnhancedTemporalAnalysis:
    temporal: TemporalAnalysis
    positive_categories: dict[str, list[CategoryWeight]]
    negative_categories: dict[str, list[CategoryWeight]]
    recommendations: TemporalRecommendations
    notes: list[str] = field(default_factory=list)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
