from __future__ import annotations

from saju_oracle.config import load_settings


def test_defaults():
    settings = load_settings()

    assert settings.lunar_converter == "offset"
    assert settings.lunar_offset_days == 11
    assert settings.day_anchor_index == 36
    assert settings.strict_calendar_lib is True
    assert settings.strict_invariants is True
    assert settings.catalog_path == ""
    assert settings.catalog_api_base == ""
    assert settings.catalog_timeout_s == 10.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SAJU_ORACLE_LUNAR_CONVERTER", "Lunar-Python")
    monkeypatch.setenv("SAJU_ORACLE_LUNAR_OFFSET_DAYS", "0")
    monkeypatch.setenv("SAJU_ORACLE_DAY_ANCHOR_INDEX", "70")
    monkeypatch.setenv("SAJU_ORACLE_STRICT_INVARIANTS", "off")
    monkeypatch.setenv("SAJU_ORACLE_CATALOG_API_BASE", "http://catalog.local/")
    monkeypatch.setenv("SAJU_ORACLE_CATALOG_TIMEOUT_S", "500")

    settings = load_settings()
    assert settings.lunar_converter == "lunar-python"
    assert settings.lunar_offset_days == 0
    assert settings.day_anchor_index == 10
    assert settings.strict_invariants is False
    assert settings.catalog_api_base == "http://catalog.local"
    assert settings.catalog_timeout_s == 120.0


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("SAJU_ORACLE_LUNAR_CONVERTER", "sxtwl")
    monkeypatch.setenv("SAJU_ORACLE_LUNAR_OFFSET_DAYS", "eleven")
    monkeypatch.setenv("SAJU_ORACLE_DAY_ANCHOR_INDEX", "x")
    monkeypatch.setenv("SAJU_ORACLE_CATALOG_TIMEOUT_S", "soon")

    settings = load_settings()
    assert settings.lunar_converter == "offset"
    assert settings.lunar_offset_days == 11
    assert settings.day_anchor_index == 36
    assert settings.catalog_timeout_s == 10.0
