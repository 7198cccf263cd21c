from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from lunar_python import Solar

from saju_oracle.models import CurrentPillars

from .pillars import DEFAULT_DAY_ANCHOR_INDEX, PillarCalculator

PILLAR_NAMES = ("year", "month", "day")


@dataclass(frozen=True)
class CalendarDiffEntry:
    day: str
    pillar: str
    rule: str
    lunar: str


@dataclass(frozen=True)
class CalendarCrosscheckReport:
    generated_at_utc: str
    day_anchor_index: int
    samples: int
    mismatches: dict[str, int]
    mismatch_rates: dict[str, float]
    entries: list[CalendarDiffEntry]


def build_sample_days(*, start: date, end: date, step_days: int = 7) -> list[date]:
    if step_days <= 0:
        raise ValueError("step_days must be > 0")
    if end < start:
        raise ValueError("end must be >= start")

    cur = start
    out: list[date] = []
    while cur <= end:
        out.append(cur)
        cur = cur + timedelta(days=step_days)
    return out


def _rule_texts(current: CurrentPillars) -> dict[str, str]:
    return {
        "year": current.year.hanja,
        "month": current.month.hanja,
        "day": current.day.hanja,
    }


def _lunar_texts(day: date) -> dict[str, str]:
    # noon keeps the sample clear of the 자 hour day boundary
    lunar = Solar.fromYmdHms(day.year, day.month, day.day, 12, 0, 0).getLunar()
    return {
        "year": lunar.getYearInGanZhiExact(),
        "month": lunar.getMonthInGanZhiExact(),
        "day": lunar.getDayInGanZhi(),
    }


def crosscheck_samples(
    *,
    sample_days: list[date],
    day_anchor_index: int = DEFAULT_DAY_ANCHOR_INDEX,
) -> CalendarCrosscheckReport:
    calculator = PillarCalculator(day_anchor_index=day_anchor_index)
    counts = {name: 0 for name in PILLAR_NAMES}
    entries: list[CalendarDiffEntry] = []

    for day in sample_days:
        rule = _rule_texts(calculator.compute_current_pillars(day))
        lunar = _lunar_texts(day)
        for name in PILLAR_NAMES:
            if rule[name] != lunar[name]:
                counts[name] += 1
                entries.append(CalendarDiffEntry(day=day.isoformat(), pillar=name, rule=rule[name], lunar=lunar[name]))

    total = len(sample_days)
    rates = {name: (float(counts[name] / total) if total > 0 else 0.0) for name in PILLAR_NAMES}
    return CalendarCrosscheckReport(
        generated_at_utc=datetime.now(timezone.utc).isoformat(),
        day_anchor_index=int(day_anchor_index),
        samples=total,
        mismatches=counts,
        mismatch_rates=rates,
        entries=entries,
    )


def write_report(*, report: CalendarCrosscheckReport, path: Path) -> None:
    payload = {
        "generated_at_utc": report.generated_at_utc,
        "day_anchor_index": report.day_anchor_index,
        "samples": report.samples,
        "mismatches": report.mismatches,
        "mismatch_rates": report.mismatch_rates,
        "entries": [
            {
                "day": e.day,
                "pillar": e.pillar,
                "rule": e.rule,
                "lunar": e.lunar,
            }
            for e in report.entries
        ],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
