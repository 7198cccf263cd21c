from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from saju_oracle.errors import CatalogUnavailableError
from saju_oracle.models import MAJOR_TYPES, CatalogItem, CategoryCatalog, CategoryGroup, utc_now

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    def list_categories(self) -> list[CatalogItem]: ...


# middle name -> (major type, icon, base weight, minor names)
_SEED: dict[str, tuple[str, str, float, tuple[str, ...]]] = {
    "게임": (
        "positive",
        "🎮",
        1.2,
        ("FPS게임", "롤플레잉게임", "슈팅게임", "스포츠게임", "시뮬레이션게임", "액션게임", "어드벤쳐게임"),
    ),
    "과목": (
        "positive",
        "📚",
        1.5,
        ("기술", "미술", "음악", "과학", "국어", "도덕", "사회", "수학", "영어", "체육", "한국사", "한문"),
    ),
    "무용": (
        "positive",
        "💃",
        1.3,
        ("대중무용", "민속무용", "발레", "비보이", "스포츠댄스", "전통무용", "현대무용"),
    ),
    "문학": (
        "positive",
        "✍️",
        1.4,
        ("라디오작가", "만화작가", "방송작가", "소설가", "시나리오작가", "시인", "애니메이션작가", "연극작가", "작사가"),
    ),
    "미술": (
        "positive",
        "🎨",
        1.3,
        (
            "디자인",
            "공예",
            "동양화",
            "디지털미디어",
            "무대장치",
            "사진",
            "산업디자인",
            "서양화",
            "시각디자인",
            "영상",
            "의상디자인",
            "인테리어",
            "조소",
            "판화",
        ),
    ),
    "연예": (
        "positive",
        "🎭",
        1.1,
        ("가수", "MC", "개그맨", "드라마배우", "뮤지컬배우", "스턴트맨", "엑스트라", "연극배우", "연기자", "영화배우"),
    ),
    "음악": (
        "positive",
        "🎵",
        1.4,
        ("건반악기", "관악기", "대중음악", "보컬", "성악", "작곡", "타악기", "현악기"),
    ),
    "전공": (
        "positive",
        "🎓",
        1.6,
        ("공학계", "농생명과학계", "법정계", "사범계", "사회과학계", "생활과학계", "어문인문학계", "예체능계", "의치악계", "자연과학계"),
    ),
    "체능": (
        "positive",
        "⚽",
        1.2,
        (
            "게임",
            "골프",
            "낚시",
            "농구",
            "다이빙",
            "당구",
            "등반",
            "라켓볼",
            "럭비",
            "마라톤",
            "모터사이클",
            "배구",
            "배드민턴",
            "보디빌딩",
            "볼링",
            "사격",
            "사이클",
            "소프트볼",
            "수상스키",
            "수영",
            "스노보드",
            "스케이트",
            "스쿼시",
            "스키",
            "야구",
            "요트",
            "윈드서핑",
            "육상",
            "정구",
            "조정",
            "체조",
            "축구",
            "탁구",
            "테니스",
            "하키",
            "핸드볼",
            "헬스",
        ),
    ),
    "교통사고": (
        "negative",
        "🚗",
        0.8,
        ("과속사고", "끼여들기", "돌발사고", "신호위반", "음주사고", "인명사고", "접촉사고", "정비불량", "졸음운전", "충돌사고", "측면사고", "후미사고"),
    ),
    "사건": (
        "negative",
        "⚖️",
        0.9,
        (
            "소송",
            "도난",
            "사기",
            "폭행",
            "내부거래",
            "뇌물",
            "도용",
            "명예훼손",
            "배임",
            "성추행",
            "성폭행",
            "알선수재",
            "위조",
            "탈세",
            "해킹",
            "횡령",
        ),
    ),
    "사고": (
        "negative",
        "⚠️",
        0.7,
        ("언쟁", "분쟁", "분실", "단속", "망신", "위반", "위험", "손실", "파업"),
    ),
    "사고도로": (
        "negative",
        "🛣️",
        0.6,
        ("건널목", "고가도로", "고속도로", "골목", "보호구역", "비보호", "사거리", "사차선", "이차선", "전용도로", "주차장"),
    ),
}


def catalog_item_from_row(row: dict[str, Any]) -> CatalogItem:
    major_type = str(row["major_type"]).strip()
    if major_type not in MAJOR_TYPES:
        raise ValueError(f"unknown major_type: {major_type!r}")
    middle = str(row["middle_name"]).strip()
    minor = str(row["minor_name"]).strip()
    if not middle or not minor:
        raise ValueError("middle_name and minor_name are required")
    return CatalogItem(
        major_type=major_type,
        middle_name=middle,
        minor_name=minor,
        base_weight=float(row.get("base_weight", 1.0)),
        confidence_factor=float(row.get("confidence_factor", 1.0)),
        icon=str(row.get("icon") or "⭐"),
    )


class StaticCatalogSource:
    """The seed catalog the product ships with."""

    name = "static"

    def list_categories(self) -> list[CatalogItem]:
        return [
            CatalogItem(
                major_type=major_type,
                middle_name=middle,
                minor_name=minor,
                base_weight=weight,
                confidence_factor=1.0,
                icon=icon,
            )
            for middle, (major_type, icon, weight, minors) in _SEED.items()
            for minor in minors
        ]


class JsonFileCatalogSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.name = f"file:{self.path}"

    def list_categories(self) -> list[CatalogItem]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise CatalogUnavailableError(f"catalog_file_missing:{self.path}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogUnavailableError(f"catalog_file_invalid_json:{self.path}") from exc
        rows = payload.get("categories") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise CatalogUnavailableError(f"catalog_file_bad_shape:{self.path}")
        try:
            return [catalog_item_from_row(it) for it in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogUnavailableError(f"catalog_file_bad_row:{exc}") from exc


def build_catalog(rows: list[CatalogItem], *, source: str = "static") -> CategoryCatalog:
    if not rows:
        raise CatalogUnavailableError(f"catalog_empty source={source}")
    grouped: dict[tuple[str, str], list[CatalogItem]] = {}
    for row in rows:
        grouped.setdefault((row.major_type, row.middle_name), []).append(row)
    groups = tuple(
        CategoryGroup(major_type=major_type, middle_name=middle, icon=items[0].icon, items=tuple(items))
        for (major_type, middle), items in grouped.items()
    )
    return CategoryCatalog(source=source, loaded_at_utc=utc_now(), groups=groups)


def load_catalog(source: CatalogSource) -> CategoryCatalog:
    name = str(getattr(source, "name", type(source).__name__))
    try:
        rows = source.list_categories()
    except CatalogUnavailableError:
        raise
    except Exception as exc:
        logger.exception("catalog_source_failed source=%s", name)
        raise CatalogUnavailableError(f"catalog_source_failed:{name}:{exc}") from exc
    try:
        items = [it if isinstance(it, CatalogItem) else catalog_item_from_row(it) for it in (rows or [])]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("catalog_rows_invalid source=%s err=%s", name, exc)
        raise CatalogUnavailableError(f"catalog_rows_invalid:{name}:{exc}") from exc
    return build_catalog(items, source=name)


class CatalogStore:
    """Holds the current catalog snapshot; reload swaps it in one assignment."""

    def __init__(self, source: CatalogSource) -> None:
        self.source = source
        self.name = str(getattr(source, "name", type(source).__name__))
        self._snapshot: CategoryCatalog | None = None

    def snapshot(self) -> CategoryCatalog:
        snap = self._snapshot
        if snap is None:
            snap = self.reload()
        return snap

    def reload(self) -> CategoryCatalog:
        snap = load_catalog(self.source)
        self._snapshot = snap
        logger.info("catalog_loaded source=%s groups=%d", snap.source, len(snap.groups))
        return snap

    def list_categories(self) -> list[CatalogItem]:
        return self.snapshot().items()
