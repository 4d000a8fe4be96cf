"""Site-wide footer and navigation settings.

Footer values come from the same settings store as page content, but unlike
page bodies the footer keeps a default per key: stored values override
``FOOTER_DEFAULTS`` one by one, and structured (JSON) values are turned into
display text.
"""
import logging
import re
from datetime import date
from typing import Any, Optional

from src.services.settings import SettingsResolver

logger = logging.getLogger(__name__)

DEFAULT_NAV_PHONE = "+49 1522 5650967"

CLOSED = "Geschlossen"
WEEKDAYS = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]
WORKDAYS = WEEKDAYS[:5]
GERMAN_DAYS = {
    "monday": "Montag",
    "tuesday": "Dienstag",
    "wednesday": "Mittwoch",
    "thursday": "Donnerstag",
    "friday": "Freitag",
    "saturday": "Samstag",
    "sunday": "Sonntag",
}

FOOTER_DEFAULTS: dict[str, Any] = {
    "company_name": "DS-Allroundservice",
    "company_slogan": "Zuverlässig. Schnell. Preiswert.",
    "company_description": (
        "Ihr vertrauensvoller Partner für Umzüge, Transport und Hausmeisterdienste. "
        "Professionell, zuverlässig und zu fairen Preisen."
    ),
    "contact_phone": "+49 (0) 123 456 789",
    "contact_email": "info@ds-allroundservice.de",
    "business_hours": "Mo-Fr: 8:00 - 18:00 Uhr",
    "email_response_time": "Antwort binnen 24h",
    "contact_address": "Musterstraße 123, 12345 Musterstadt",
    "social_instagram": "",
    "social_facebook": "",
}

FOOTER_KEYS = list(FOOTER_DEFAULTS) + ["copyright_year"]


def clean_phone(phone: str) -> str:
    """Strip everything but digits and '+' for use in a tel: link."""
    return re.sub(r"[^+\d]", "", phone)


def format_business_hours(hours: dict, today: Optional[date] = None) -> str:
    """Compact opening hours such as ``Mo-Fr: 8-18, Sa: 9-12``."""
    workday_hours = [
        hours[day] for day in WORKDAYS if day in hours and hours[day] != CLOSED
    ]

    # Values may be nested JSON, so compare without hashing
    if len(workday_hours) == 5 and all(h == workday_hours[0] for h in workday_hours):
        weekday_time = workday_hours[0]
        saturday = hours.get("saturday", CLOSED)
        sunday = hours.get("sunday", CLOSED)

        if saturday == CLOSED and sunday == CLOSED:
            return f"Mo-Fr: {weekday_time}"
        if sunday == CLOSED:
            return f"Mo-Fr: {weekday_time}, Sa: {saturday}"
        return f"Mo-Fr: {weekday_time}, Sa: {saturday}, So: {sunday}"

    weekday = WEEKDAYS[(today or date.today()).weekday()]
    if weekday in hours:
        return f"Heute ({GERMAN_DAYS.get(weekday, weekday.title())}): {hours[weekday]}"

    return "Öffnungszeiten verfügbar"


def format_json_setting(key: str, value: Any) -> Any:
    """Turn a structured setting into footer display text.

    Non-dict values, and dicts that cannot be formatted, are returned unchanged.
    """
    if not isinstance(value, dict):
        return value

    try:
        return _format_dict(key, value)
    except (TypeError, ValueError, KeyError) as e:
        logger.warning("Could not format footer setting %s: %s", key, e)
        return value


def _format_dict(key: str, value: dict) -> Any:
    if key == "business_hours":
        return format_business_hours(value)

    if key == "contact_address":
        if "street" in value and "city" in value:
            return f"{value['street']}, {value['city']}"
        return value

    if len(value) == 1:
        return next(iter(value.values()))
    if len(value) <= 3:
        return ", ".join(f"{k}: {v}" for k, v in value.items())
    return f"{len(value)} Einträge"


async def load_footer_settings(resolver: SettingsResolver) -> dict[str, Any]:
    """Get footer settings with a default for every key."""
    footer = dict(FOOTER_DEFAULTS)
    footer["copyright_year"] = date.today().year

    stored = await resolver.load(fallbacks={})
    for key in FOOTER_KEYS:
        value = stored.get(key)
        if value is None or value == "":
            continue
        footer[key] = format_json_setting(key, value)

    footer["contact_phone_clean"] = clean_phone(str(footer["contact_phone"]))
    return footer


async def load_nav_phone(resolver: SettingsResolver) -> str:
    stored = await resolver.load(fallbacks={})
    phone = stored.get("contact_phone")
    return str(phone) if phone else DEFAULT_NAV_PHONE
