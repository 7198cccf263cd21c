from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path

from saju_oracle.config import load_settings
from saju_oracle.packages.calendar_engine.audit import build_sample_days, crosscheck_samples, write_report
from saju_oracle.service import SajuOracleService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run saju_oracle chart, aptitude and fortune analysis")
    parser.add_argument(
        "--task",
        choices=["analyze", "temporal", "enhanced", "current-pillars", "calendar-audit"],
        default="analyze",
    )
    parser.add_argument("--birth-date", default="1990-05-15", help="YYYY-MM-DD")
    parser.add_argument("--birth-time", default="10:30", help="HH:MM")
    parser.add_argument("--lunar", action="store_true", help="treat --birth-date as a lunar date")
    parser.add_argument("--as-of", default=None, help="reference day for current pillars (YYYY-MM-DD)")
    parser.add_argument("--output-dir", default="saju_oracle/output")
    parser.add_argument("--audit-output", default="calendar_crosscheck.json")
    parser.add_argument("--audit-start", default="1950-01-01")
    parser.add_argument("--audit-end", default="2030-12-31")
    parser.add_argument("--audit-step-days", type=int, default=97)
    return parser


def _write_json(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _run_analyze(args: argparse.Namespace, *, out_dir: Path) -> int:
    svc = SajuOracleService(load_settings())
    payload, report_md = svc.analyze(
        birth_date=args.birth_date,
        birth_time=args.birth_time,
        is_lunar=args.lunar,
        as_of=args.as_of,
    )

    report_path = out_dir / "report.md"
    evidence_path = out_dir / "evidence.json"

    report_path.write_text(report_md, encoding="utf-8")
    _write_json(evidence_path, payload)

    print(f"report={report_path}")
    print(f"evidence={evidence_path}")
    return 0


def _run_temporal(args: argparse.Namespace, *, out_dir: Path, enhanced: bool) -> int:
    svc = SajuOracleService(load_settings())
    kwargs = {
        "birth_date": args.birth_date,
        "birth_time": args.birth_time,
        "is_lunar": args.lunar,
        "as_of": args.as_of,
    }
    if enhanced:
        payload = svc.analyze_enhanced_temporal(**kwargs)
        output_path = out_dir / "enhanced_temporal.json"
    else:
        payload = svc.analyze_temporal(**kwargs)
        output_path = out_dir / "temporal.json"
    _write_json(output_path, payload)

    trend = payload["fortune_trends"]
    print(f"temporal={output_path}")
    print(f"overall_score={trend['overall_score']:+.2f} trend={trend['overall_trend']}")
    return 0


def _run_current_pillars(args: argparse.Namespace, *, out_dir: Path) -> int:
    svc = SajuOracleService(load_settings())
    payload = svc.current_pillars(as_of=args.as_of)
    output_path = out_dir / "current_pillars.json"
    _write_json(output_path, payload)
    print(f"current_pillars={output_path}")
    print(f"year={payload['year']['text']} month={payload['month']['text']} day={payload['day']['text']}")
    return 0


def _run_calendar_audit(args: argparse.Namespace, *, out_dir: Path) -> int:
    settings = load_settings()
    sample_days = build_sample_days(
        start=date.fromisoformat(args.audit_start),
        end=date.fromisoformat(args.audit_end),
        step_days=args.audit_step_days,
    )
    report = crosscheck_samples(sample_days=sample_days, day_anchor_index=settings.day_anchor_index)
    output_path = out_dir / args.audit_output
    write_report(report=report, path=output_path)
    print(f"calendar_audit={output_path}")
    rates = " ".join(f"{name}={rate:.4f}" for name, rate in report.mismatch_rates.items())
    print(f"samples={report.samples} mismatch_rates {rates}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.task == "analyze":
        return _run_analyze(args, out_dir=out_dir)
    if args.task == "temporal":
        return _run_temporal(args, out_dir=out_dir, enhanced=False)
    if args.task == "enhanced":
        return _run_temporal(args, out_dir=out_dir, enhanced=True)
    if args.task == "current-pillars":
        return _run_current_pillars(args, out_dir=out_dir)
    if args.task == "calendar-audit":
        return _run_calendar_audit(args, out_dir=out_dir)
    raise ValueError(f"unsupported task: {args.task}")


if __name__ == "__main__":
    raise SystemExit(main())
