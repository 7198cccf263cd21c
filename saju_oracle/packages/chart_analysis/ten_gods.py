from __future__ import annotations

from collections.abc import Sequence

from saju_oracle.errors import InternalInvariantViolation
from saju_oracle.models import STEM_ELEMENT, GanzhiPillar

from .elements import element_relation

DAY_PILLAR_INDEX = 2
DAY_PILLAR_LABEL = "일주"

# (same polarity, opposite polarity)
TEN_GOD_NAMES = {
    "same": ("비견", "겁재"),
    "generate": ("식신", "상관"),
    "destroy": ("편재", "정재"),
    "support": ("편인", "정인"),
    "restrain": ("편관", "정관"),
}

TEN_GODS: tuple[str, ...] = tuple(name for pair in TEN_GOD_NAMES.values() for name in pair)


def ten_god_name(*, day_master_index: int, stem_index: int) -> str:
    relation = element_relation(STEM_ELEMENT[day_master_index], STEM_ELEMENT[stem_index])
    names = TEN_GOD_NAMES.get(relation)
    if names is None:
        raise InternalInvariantViolation(f"no ten-god for relation {relation!r}")
    same_polarity = day_master_index % 2 == stem_index % 2
    return names[0] if same_polarity else names[1]


def resolve_ten_gods(day_master_index: int, pillars: Sequence[GanzhiPillar]) -> list[str]:
    out: list[str] = []
    for idx, p in enumerate(pillars):
        if idx == DAY_PILLAR_INDEX:
            out.append(DAY_PILLAR_LABEL)
            continue
        out.append(ten_god_name(day_master_index=day_master_index, stem_index=p.stem_index))
    return out
