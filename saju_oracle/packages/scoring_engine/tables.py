from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ElementAptitude:
    categories: tuple[str, ...]
    bonus_items: tuple[str, ...]


@dataclass(frozen=True)
class TenGodAptitude:
    suitable: tuple[str, ...]
    bonus: int


ELEMENT_APTITUDES = {
    "wood": ElementAptitude(
        categories=("문학", "교육", "창작", "기획", "무용", "체능"),
        bonus_items=("소설가", "작가", "기획자", "교사"),
    ),
    "fire": ElementAptitude(
        categories=("연예", "예술", "소통", "영업", "무용", "체능", "미술"),
        bonus_items=("가수", "배우", "MC", "연예인"),
    ),
    "earth": ElementAptitude(
        categories=("관리", "부동산", "농업", "건설", "미술"),
        bonus_items=("관리자", "부동산", "건축"),
    ),
    "metal": ElementAptitude(
        categories=("금융", "법률", "의료", "기계", "음악", "게임", "교통사고", "사고도로"),
        bonus_items=("의사", "변호사", "금융"),
    ),
    "water": ElementAptitude(
        categories=("IT", "연구", "철학", "물류", "게임", "음악", "문학"),
        bonus_items=("프로그래머", "연구원", "철학자"),
    ),
}

TEN_GOD_APTITUDES = {
    "정관": TenGodAptitude(suitable=("전공", "관리", "법률"), bonus=25),
    "편관": TenGodAptitude(suitable=("체능", "군사", "경쟁"), bonus=20),
    "정재": TenGodAptitude(suitable=("경영", "재정", "관리"), bonus=22),
    "편재": TenGodAptitude(suitable=("사업", "영업", "투자"), bonus=20),
    "정인": TenGodAptitude(suitable=("학문", "교육", "연구"), bonus=25),
    "편인": TenGodAptitude(suitable=("예술", "창작", "독창"), bonus=23),
    "식신": TenGodAptitude(suitable=("예술", "요리", "엔터테인먼트", "연예"), bonus=24),
    "상관": TenGodAptitude(suitable=("예술", "연예", "자유업"), bonus=22),
    "비견": TenGodAptitude(suitable=("동업", "협력", "팀워크"), bonus=15),
    "겁재": TenGodAptitude(suitable=("경쟁", "개척", "모험"), bonus=18),
}

# season -> {activity keyword: bonus}, first match wins
SEASONAL_BONUS = {
    "spring": {"체능": 15, "야외활동": 20, "성장관련": 10},
    "summer": {"연예": 20, "사교활동": 15, "에너지관련": 10},
    "autumn": {"수확관련": 20, "정리정돈": 15, "계획관련": 10},
    "winter": {"실내활동": 15, "학습": 20, "내성관련": 10},
}

RELATED_ACTIVITIES = {
    "야외활동": ("체능", "체육", "스포츠"),
    "사교활동": ("연예", "영업", "MC"),
    "수확관련": ("농업", "관리", "완성"),
    "실내활동": ("학습", "연구", "독서"),
    "에너지관련": ("체능", "연예", "활동"),
    "성장관련": ("교육", "개발", "창작"),
}

ITEM_ELEMENT_KEYWORDS = {
    "wood": ("나무", "목재", "창작", "성장"),
    "fire": ("불", "열", "에너지", "표현"),
    "earth": ("토지", "건설", "관리", "안정"),
    "metal": ("금속", "정밀", "의료", "법률"),
    "water": ("물", "유동", "IT", "연구"),
}

# ten-god -> (item keywords, bonus)
ITEM_TEN_GOD_BONUSES: dict[str, tuple[tuple[str, ...], int]] = {
    "식신": (("예술", "요리"), 10),
    "정관": (("관리",), 12),
}

TEMPORAL_WEIGHTS = {
    "day": 0.2,
    "month": 0.3,
    "year": 0.5,
}

TEMPORAL_SAME_STEM = 8
TEMPORAL_DAY_MASTER_GENERATES = 15
TEMPORAL_GENERATED_BY = 10

ELEMENT_AFFINITY_CAP = 40
HARMONY_CAP = 30
PILLAR_STRENGTH_CAP = 20
SEASONAL_BONUS_CAP = 10
TOP_ITEMS = 5
