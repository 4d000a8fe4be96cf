"""HTML escaping for values interpolated into page markup."""
import json
from collections.abc import Iterable, Mapping
from typing import Any

from markupsafe import Markup
from markupsafe import escape as _markup_escape


def stringify(value: Any) -> str:
    """Render a resolved setting as text, independent of locale."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def escape(value: Any) -> Markup:
    """Escape ``& < > " '`` so the value is safe in HTML text and attributes.

    Apply exactly once, where the value is written into markup. The result is
    a ``Markup`` instance, which Jinja2 autoescaping passes through untouched.
    """
    return _markup_escape(stringify(value))


def escape_all(values: Mapping[str, Any], keys: Iterable[str]) -> dict[str, Markup]:
    return {key: escape(values.get(key, "")) for key in keys}
