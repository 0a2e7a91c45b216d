"""Shared parsing helpers for settings and request input."""

from __future__ import annotations

import json
import re
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_string_list(value: str | list[str]) -> list[str]:
    """Parse a list of strings from a JSON array ('["a","b"]') or CSV ('a,b').

    An empty string or empty array yields an empty list.

    Raises:
        ValueError: On malformed JSON or a JSON value that is not a list of strings

    """
    if isinstance(value, list):
        return value

    stripped = value.strip()
    if not stripped:
        return []

    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
        return parsed

    return [item.strip() for item in stripped.split(",") if item.strip()]


def parse_iso_date(value: object) -> date:
    """Parse a strict YYYY-MM-DD calendar date.

    Raises:
        ValueError: If value is not a string in that format or not a real date

    """
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return date.fromisoformat(value)


_STRING_LIST_FIELDS = {"cors_origins"}


class StringListEnvSettingsSource(EnvSettingsSource):
    """Env source that hands string-list fields to validators as raw strings.

    Without this, pydantic-settings JSON-decodes list fields before any
    validator runs and CSV values fail to parse.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in _STRING_LIST_FIELDS and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
