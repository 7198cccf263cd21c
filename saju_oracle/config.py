from __future__ import annotations

import os
from dataclasses import dataclass

LUNAR_CONVERTERS = ("offset", "lunar-python")


@dataclass(frozen=True)
class OracleSettings:
    lunar_converter: str = "offset"
    lunar_offset_days: int = 11
    day_anchor_index: int = 36
    strict_calendar_lib: bool = True
    strict_invariants: bool = True
    catalog_path: str = ""
    catalog_api_base: str = ""
    catalog_timeout_s: float = 10.0


def _truthy(raw: str | None) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> OracleSettings:
    converter = (os.environ.get("SAJU_ORACLE_LUNAR_CONVERTER") or "offset").strip().lower()
    if converter not in LUNAR_CONVERTERS:
        converter = "offset"

    offset_raw = (os.environ.get("SAJU_ORACLE_LUNAR_OFFSET_DAYS") or "11").strip()
    anchor_raw = (os.environ.get("SAJU_ORACLE_DAY_ANCHOR_INDEX") or "36").strip()
    timeout_raw = (os.environ.get("SAJU_ORACLE_CATALOG_TIMEOUT_S") or "10").strip()
    try:
        lunar_offset_days = max(0, min(60, int(offset_raw)))
    except ValueError:
        lunar_offset_days = 11
    try:
        day_anchor_index = int(anchor_raw) % 60
    except ValueError:
        day_anchor_index = 36
    try:
        catalog_timeout_s = max(1.0, min(120.0, float(timeout_raw)))
    except ValueError:
        catalog_timeout_s = 10.0

    return OracleSettings(
        lunar_converter=converter,
        lunar_offset_days=lunar_offset_days,
        day_anchor_index=day_anchor_index,
        strict_calendar_lib=_truthy(os.environ.get("SAJU_ORACLE_STRICT_CALENDAR_LIB") or "1"),
        strict_invariants=_truthy(os.environ.get("SAJU_ORACLE_STRICT_INVARIANTS") or "1"),
        catalog_path=(os.environ.get("SAJU_ORACLE_CATALOG_PATH") or "").strip(),
        catalog_api_base=(os.environ.get("SAJU_ORACLE_CATALOG_API_BASE") or "").strip().rstrip("/"),
        catalog_timeout_s=catalog_timeout_s,
    )
