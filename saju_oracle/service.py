from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from pathlib import Path

from saju_oracle.catalog_client import HttpCatalogSource
from saju_oracle.config import OracleSettings
from saju_oracle.models import SajuChart
from saju_oracle.packages.aptitude.analyzer import AptitudeAnalyzer
from saju_oracle.packages.calendar_engine.pillars import PillarCalculator
from saju_oracle.packages.catalog.registry import CatalogSource, CatalogStore, JsonFileCatalogSource, StaticCatalogSource
from saju_oracle.packages.chart_analysis.chart import build_chart
from saju_oracle.packages.reporting.markdown import render_markdown
from saju_oracle.packages.scoring_engine.engine import CategoryScoringEngine
from saju_oracle.packages.temporal.service import TemporalPillarService
from saju_oracle.schemas import (
    aptitude_to_payload,
    chart_model,
    current_pillars_model,
    enhanced_to_payload,
    temporal_to_payload,
)

logger = logging.getLogger(__name__)


def build_catalog_source(settings: OracleSettings) -> CatalogSource:
    if settings.catalog_api_base:
        return HttpCatalogSource(base_url=settings.catalog_api_base, timeout_s=settings.catalog_timeout_s)
    if settings.catalog_path:
        return JsonFileCatalogSource(Path(settings.catalog_path))
    return StaticCatalogSource()


class SajuOracleService:
    def __init__(self, settings: OracleSettings, *, catalog_source: CatalogSource | None = None) -> None:
        self.settings = settings
        self.calendar = PillarCalculator(
            lunar_converter=settings.lunar_converter,
            lunar_offset_days=settings.lunar_offset_days,
            day_anchor_index=settings.day_anchor_index,
            strict_calendar_lib=settings.strict_calendar_lib,
        )
        self.catalog = CatalogStore(catalog_source if catalog_source is not None else build_catalog_source(settings))
        self.temporal = TemporalPillarService(self.calendar)
        self.engine = CategoryScoringEngine(strict_invariants=settings.strict_invariants)
        self.analyzer = AptitudeAnalyzer(engine=self.engine, calendar=self.calendar)

    def compute_chart(self, *, birth_date: str, birth_time: str, is_lunar: bool = False) -> SajuChart:
        pillars = self.calendar.compute_pillars(birth_date, birth_time, is_lunar=is_lunar)
        return build_chart(pillars)

    def analyze(
        self,
        *,
        birth_date: str,
        birth_time: str,
        is_lunar: bool = False,
        as_of: date | datetime | str | None = None,
    ) -> tuple[dict, str]:
        chart = self.compute_chart(birth_date=birth_date, birth_time=birth_time, is_lunar=is_lunar)
        temporal = self.temporal.analyze_temporal(chart, as_of)
        result = self.analyzer.analyze(chart, self.catalog, current=temporal.current_pillars)
        logger.info(
            "aptitude_analyzed day_master=%s positive=%d negative=%d confidence=%.2f",
            chart.day_master,
            len(result.positive),
            len(result.negative),
            result.overall_confidence,
        )
        payload = {
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "catalog_source": self.catalog.name,
            "chart": chart_model(chart).model_dump(),
            "aptitude": aptitude_to_payload(result),
        }
        return payload, render_markdown(chart, result, temporal)

    def analyze_temporal(
        self,
        *,
        birth_date: str,
        birth_time: str,
        is_lunar: bool = False,
        as_of: date | datetime | str | None = None,
    ) -> dict:
        chart = self.compute_chart(birth_date=birth_date, birth_time=birth_time, is_lunar=is_lunar)
        return temporal_to_payload(self.temporal.analyze_temporal(chart, as_of))

    def analyze_enhanced_temporal(
        self,
        *,
        birth_date: str,
        birth_time: str,
        is_lunar: bool = False,
        as_of: date | datetime | str | None = None,
    ) -> dict:
        chart = self.compute_chart(birth_date=birth_date, birth_time=birth_time, is_lunar=is_lunar)
        temporal = self.temporal.analyze_temporal(chart, as_of)
        return enhanced_to_payload(self.analyzer.analyze_enhanced(temporal, self.catalog))

    def current_pillars(self, *, as_of: date | datetime | str | None = None) -> dict:
        return current_pillars_model(self.temporal.current_pillars(as_of)).model_dump()
