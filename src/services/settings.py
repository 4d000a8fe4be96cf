import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.settings import Setting

logger = logging.getLogger(__name__)


# Company record used when the settings store cannot be read
COMPANY_FALLBACKS = {
    "site_name": "DS Allroundservices",
    "contact_address": "Darmstädter Straße 0 63741 Aschaffenburg",
    "contact_phone": "+49 6021 123456",
    "contact_email": "info@ds-allroundservice.de",
    "company_vat_id": "DE0123456789",
}

FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


class SettingsError(Exception):
    """Base exception for settings errors."""

    pass


class MalformedSettingError(SettingsError, ValueError):
    """Raised when a stored value cannot be coerced to its declared type."""

    pass


def _to_int(raw: str) -> int:
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError) as e:
        raise MalformedSettingError(f"Not an integer: {raw!r}") from e


def _to_float(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError as e:
        raise MalformedSettingError(f"Not a number: {raw!r}") from e


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() not in FALSE_STRINGS


def _to_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedSettingError(f"Invalid JSON: {e.msg}") from e


def _to_array(raw: str) -> list:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return [raw]
    return parsed if isinstance(parsed, list) else [raw]


def _to_object(raw: str) -> dict:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {"scalar": raw}
    return parsed if isinstance(parsed, dict) else {"scalar": raw}


_COERCERS = {
    "string": str,
    "int": _to_int,
    "integer": _to_int,
    "float": _to_float,
    "double": _to_float,
    "bool": _to_bool,
    "boolean": _to_bool,
    "array": _to_array,
    "object": _to_object,
    "json": _to_json,
    "null": lambda raw: None,
}


def coerce_setting(raw: Optional[str], declared_type: Optional[str]) -> Any:
    """Convert a stored raw value according to its declared type label.

    Labels are case-insensitive. Unknown or missing labels keep the raw
    string.

    Raises:
        MalformedSettingError: If the value does not parse as the declared type.
    """
    raw = "" if raw is None else raw
    coercer = _COERCERS.get((declared_type or "string").strip().lower())
    if coercer is None:
        return raw
    return coercer(raw)


class SettingsResolver:
    """Loads the flat ``settings`` table into typed values for one render.

    The store is read at most once per resolver; later ``load`` calls reuse
    that read (or its failure) with their own required keys and fallbacks.
    A resolver belongs to a single page and is dropped with the response.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._values: Optional[dict[str, Any]] = None
        self._malformed: set[str] = set()
        self._store_failed = False

    async def load(
        self,
        required_keys: Iterable[str] = (),
        fallbacks: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Resolve settings for a page.

        Args:
            required_keys: Keys that must be present in the result.
            fallbacks: Values used in place of the whole store when it cannot
                be read, and per key for values that fail to coerce.

        Returns:
            Mapping of setting key to coerced value. When the store is
            unavailable this is a copy of ``fallbacks``, unchanged.
        """
        fallbacks = fallbacks or {}

        if not await self._read_store():
            return dict(fallbacks)

        resolved = dict(self._values)
        for key in self._malformed:
            resolved[key] = fallbacks.get(key, "")

        for key in required_keys:
            if resolved.get(key) is None:
                logger.warning("Missing setting key: %s", key)
                resolved[key] = ""

        return resolved

    async def _read_store(self) -> bool:
        """Fetch and coerce every stored setting. Returns False if the store failed."""
        if self._store_failed:
            return False
        if self._values is not None:
            return True

        try:
            result = await self.db.execute(
                select(
                    Setting.setting_key,
                    Setting.setting_value,
                    Setting.setting_type,
                )
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error loading settings: %s", e)
            self._store_failed = True
            await self.db.rollback()
            return False

        values: dict[str, Any] = {}
        for key, raw, declared_type in rows:
            try:
                values[key] = coerce_setting(raw, declared_type)
            except MalformedSettingError as e:
                logger.warning("Malformed setting %s (%s): %s", key, declared_type, e)
                self._malformed.add(key)

        self._values = values
        return True
