from __future__ import annotations

from datetime import date

import pytest

from saju_oracle.errors import ValidationError
from saju_oracle.packages.calendar_engine import provider_lunar
from saju_oracle.packages.calendar_engine.base import CalendarProviderError
from saju_oracle.packages.calendar_engine.pillars import PillarCalculator
from saju_oracle.packages.calendar_engine.provider_lunar import LunarPythonConverter


class _BrokenLunar:
    @staticmethod
    def fromYmd(year, month, day):
        raise RuntimeError("table missing")


def test_lunar_python_converts_new_year():
    converter = LunarPythonConverter()
    assert converter.to_solar(2023, 1, 1) == date(2023, 1, 22)


def test_calculator_uses_lunar_python_when_selected():
    calc = PillarCalculator(lunar_converter="lunar-python")
    pillars = calc.compute_pillars("2023-01-01", "09:00", is_lunar=True)
    assert pillars.solar_date == date(2023, 1, 22)
    assert pillars.source == "rule:lunar-python"


def test_strict_converter_raises(monkeypatch):
    monkeypatch.setattr(provider_lunar, "Lunar", _BrokenLunar)
    converter = LunarPythonConverter(strict_calendar_lib=True)
    with pytest.raises(CalendarProviderError):
        converter.to_solar(2023, 1, 1)


def test_strict_failure_surfaces_as_validation_error(monkeypatch):
    monkeypatch.setattr(provider_lunar, "Lunar", _BrokenLunar)
    calc = PillarCalculator(lunar_converter="lunar-python", strict_calendar_lib=True)
    with pytest.raises(ValidationError):
        calc.compute_pillars("2023-01-01", "09:00", is_lunar=True)


def test_non_strict_converter_falls_back_to_offset(monkeypatch):
    monkeypatch.setattr(provider_lunar, "Lunar", _BrokenLunar)
    converter = LunarPythonConverter(strict_calendar_lib=False, fallback_offset_days=11)
    assert converter.to_solar(2023, 1, 1) == date(2023, 1, 12)


def test_non_strict_fallback_overflow_surfaces_as_validation_error(monkeypatch):
    monkeypatch.setattr(provider_lunar, "Lunar", _BrokenLunar)
    calc = PillarCalculator(lunar_converter="lunar-python", strict_calendar_lib=False)
    with pytest.raises(ValidationError):
        calc.compute_pillars("9999-12-25", "09:00", is_lunar=True)
