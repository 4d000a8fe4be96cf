"""Tests for footer and navigation settings."""

import logging
from datetime import date

import pytest

from src.services import footer as footer_module
from src.services.footer import (
    DEFAULT_NAV_PHONE,
    FOOTER_DEFAULTS,
    clean_phone,
    format_business_hours,
    format_json_setting,
    load_footer_settings,
    load_nav_phone,
)
from src.services.settings import SettingsResolver

WEEK = {day: "8-18" for day in ("monday", "tuesday", "wednesday", "thursday", "friday")}

# 2024-01-03 was a Wednesday
WEDNESDAY = date(2024, 1, 3)


class TestFormatBusinessHours:
    def test_uniform_weekdays_only(self):
        hours = dict(WEEK, saturday="Geschlossen", sunday="Geschlossen")

        assert format_business_hours(hours) == "Mo-Fr: 8-18"

    def test_uniform_weekdays_with_saturday(self):
        hours = dict(WEEK, saturday="9-12")

        assert format_business_hours(hours) == "Mo-Fr: 8-18, Sa: 9-12"

    def test_uniform_weekdays_with_weekend(self):
        hours = dict(WEEK, saturday="9-12", sunday="10-11")

        assert format_business_hours(hours) == "Mo-Fr: 8-18, Sa: 9-12, So: 10-11"

    def test_irregular_week_shows_today(self):
        hours = dict(WEEK, wednesday="10-14")

        assert format_business_hours(hours, today=WEDNESDAY) == "Heute (Mittwoch): 10-14"

    def test_today_unknown(self):
        assert format_business_hours({"monday": "8-18"}, today=WEDNESDAY) == (
            "Öffnungszeiten verfügbar"
        )

    def test_nested_hours_do_not_fail(self):
        hours = {day: ["8:00", "18:00"] for day in WEEK}

        assert format_business_hours(hours) == "Mo-Fr: ['8:00', '18:00']"

    def test_nested_irregular_hours(self):
        hours = {day: {"open": "8:00", "close": "18:00"} for day in WEEK}
        hours["wednesday"] = {"open": "10:00", "close": "14:00"}

        result = format_business_hours(hours, today=WEDNESDAY)

        assert result.startswith("Heute (Mittwoch): ")

    def test_today_does_not_depend_on_locale(self):
        class LocalisedDate(date):
            def strftime(self, fmt):
                return "Mittwoch"

        hours = dict(WEEK, wednesday="10-14")
        today = LocalisedDate(2024, 1, 3)

        assert format_business_hours(hours, today=today) == "Heute (Mittwoch): 10-14"

    def test_weekend_day(self):
        hours = dict(WEEK, monday="9-17", saturday="9-12")

        assert format_business_hours(hours, today=date(2024, 1, 6)) == (
            "Heute (Samstag): 9-12"
        )


class TestFormatJsonSetting:
    def test_plain_values_unchanged(self):
        assert format_json_setting("company_name", "DS") == "DS"
        assert format_json_setting("copyright_year", 2024) == 2024

    def test_address(self):
        value = {"street": "Hauptstraße 1", "city": "63741 Aschaffenburg"}

        assert format_json_setting("contact_address", value) == (
            "Hauptstraße 1, 63741 Aschaffenburg"
        )

    @pytest.mark.parametrize(
        "value,expected",
        [
            ({"only": "one"}, "one"),
            ({"a": 1, "b": 2}, "a: 1, b: 2"),
            ({"a": 1, "b": 2, "c": 3, "d": 4}, "4 Einträge"),
        ],
    )
    def test_generic_dicts(self, value, expected):
        assert format_json_setting("company_slogan", value) == expected

    def test_formatting_failure_keeps_value(self, monkeypatch, caplog):
        def broken(hours, today=None):
            raise TypeError("unhashable type: 'dict'")

        monkeypatch.setattr(footer_module, "format_business_hours", broken)
        value = {"monday": {"open": "8:00"}}

        with caplog.at_level(logging.WARNING, logger="src.services.footer"):
            result = format_json_setting("business_hours", value)

        assert result == value
        assert "Could not format footer setting business_hours" in caplog.text


def test_clean_phone():
    assert clean_phone("+49 (0) 123 / 456-789") == "+490123456789"


class TestLoadFooterSettings:
    async def test_defaults_on_empty_store(self, db_session):
        footer = await load_footer_settings(SettingsResolver(db_session))

        for key, value in FOOTER_DEFAULTS.items():
            assert footer[key] == value
        assert footer["copyright_year"] == date.today().year
        assert footer["contact_phone_clean"] == "+490123456789"

    async def test_stored_values_override_per_key(self, db_session, seed_settings):
        await seed_settings({
            "company_name": ("DS GmbH", "string"),
            "company_slogan": ("", "string"),
            "copyright_year": ("2020", "int"),
            "unrelated": ("x", "string"),
        })

        footer = await load_footer_settings(SettingsResolver(db_session))

        assert footer["company_name"] == "DS GmbH"
        assert footer["company_slogan"] == FOOTER_DEFAULTS["company_slogan"]
        assert footer["copyright_year"] == 2020
        assert "unrelated" not in footer

    async def test_defaults_when_store_fails(self, broken_session):
        footer = await load_footer_settings(SettingsResolver(broken_session))

        assert footer["company_name"] == FOOTER_DEFAULTS["company_name"]


class TestLoadNavPhone:
    async def test_default(self, db_session):
        assert await load_nav_phone(SettingsResolver(db_session)) == DEFAULT_NAV_PHONE

    async def test_stored(self, db_session, seed_settings):
        await seed_settings({"contact_phone": ("+49 1", "string")})

        assert await load_nav_phone(SettingsResolver(db_session)) == "+49 1"
