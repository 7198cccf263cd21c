from __future__ import annotations

from saju_oracle.models import ELEMENT_LABELS, ELEMENTS, AptitudeResult, SajuChart, TemporalAnalysis, utc_now
from saju_oracle.packages.chart_analysis.elements import SEASON_LABELS
from saju_oracle.packages.temporal.service import PERIOD_LABELS

TREND_LABELS = {
    "rising": "상승",
    "stable": "안정",
    "declining": "하강",
}

RISK_LABELS = {
    "HIGH": "높음",
    "MEDIUM": "보통",
    "LOW": "낮음",
}


def render_markdown(chart: SajuChart, result: AptitudeResult, temporal: TemporalAnalysis | None = None) -> str:
    p = chart.pillars
    calendar = "음력" if p.is_lunar else "양력"
    lines: list[str] = [
        "# 사주 적성 분석 리포트",
        "",
        f"- 생성 시각(UTC): {utc_now().isoformat()}",
        f"- 생년월일시: {p.birth_date} {p.birth_time} ({calendar}, 양력 환산 {p.solar_date.isoformat()})",
        f"- 일주: **{chart.day_master}** ({ELEMENT_LABELS[chart.day_master_element]}), {SEASON_LABELS[chart.season]}생",
        f"- 전체 신뢰도: **{round(result.overall_confidence * 100)}%**",
        "",
        "## 사주 원국",
        f"- 년주 {p.year.text}({p.year.hanja}) / 월주 {p.month.text}({p.month.hanja}) / "
        f"일주 {p.day.text}({p.day.hanja}) / 시주 {p.hour.text}({p.hour.hanja})",
        f"- 십성: {' · '.join(chart.ten_gods)}",
        "",
        "## 오행 분포",
    ]
    for element in ELEMENTS:
        lines.append(f"- {ELEMENT_LABELS[element]}: {chart.five_elements.get(element, 0.0):.1f}")
    s = chart.strength
    lines.append(
        f"- 일주 강도: {s.day_master_strength:.1f} "
        f"(계절 {s.seasonal_influence:.1f} + 동류 {s.supporting_elements:.1f} + 월령 {s.monthly_influence:.1f})"
    )

    lines.extend(["", "## 재능 분야"])
    if result.positive:
        for name, verdict in result.positive.items():
            confidence = round((verdict.confidence or 0.0) * 100)
            lines.append(f"- **{name}** ({confidence}%): {', '.join(verdict.items)}")
            lines.append(f"  - {verdict.reasoning}")
    else:
        lines.append("- 해당 분야 없음")

    lines.extend(["", "## 주의 분야"])
    if result.negative:
        for name, verdict in result.negative.items():
            risk = RISK_LABELS.get(verdict.risk_level or "LOW", verdict.risk_level)
            lines.append(f"- **{name}** (위험도 {risk}): {', '.join(verdict.items)}")
            lines.append(f"  - {verdict.reasoning}")
    else:
        lines.append("- 해당 분야 없음")

    if temporal is not None:
        cur = temporal.current_pillars
        trend = temporal.fortune_trend
        lines.extend(
            [
                "",
                "## 현재 운세 흐름",
                f"- 기준일: {cur.current_date.isoformat()} (년 {cur.year.text} / 월 {cur.month.text} / 일 {cur.day.text})",
            ]
        )
        for period in ("year", "month", "day"):
            it = temporal.interactions.get(period)
            if it is None:
                continue
            lines.append(f"- {PERIOD_LABELS[period]}: {it.score:+.0f} ({it.relation_tag})")
        lines.append(f"- 종합: {trend.overall_score:+.1f} ({TREND_LABELS.get(trend.overall_trend, trend.overall_trend)})")

    lines.extend(
        [
            "",
            "## 종합",
            f"- {result.summary}",
            "",
            "## 면책 조항",
            "- 본 리포트는 전통 명리 규칙에 따른 참고 자료이며, 진로나 안전에 관한 결정을 대신하지 않습니다.",
            "",
        ]
    )
    return "\n".join(lines)
