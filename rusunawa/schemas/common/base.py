# --- File: rusunawa/schemas/common/base.py ---
"""
Base schema classes with common configuration.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rusunawa.utils.date_utils import DateUtilsError, parse_date

__all__ = [
    "BaseSchema",
    "FrozenSchema",
    "coerce_calendar_date",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Field names are snake_case in Python; the rusunawa backend speaks
    camelCase JSON, so every field also accepts (and can dump to) its
    camelCase alias.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        # Keep enums as Enum instances to retain full type information;
        # callers can still access `.value` if needed.
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="ignore",
    )

    def to_api(self) -> dict:
        """JSON-compatible dict using the backend's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class FrozenSchema(BaseSchema):
    """Immutable value object; updates go through `model_copy(update=...)`."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
        str_strip_whitespace=True,
        frozen=True,
        extra="ignore",
    )


def coerce_calendar_date(value: Any) -> Any:
    """
    Field-validator helper: turn ISO strings (with or without a time part)
    and datetimes into calendar dates before pydantic's own date parsing.
    """
    if value is None or isinstance(value, date):
        return parse_date(value) if isinstance(value, datetime) else value
    try:
        return parse_date(value)
    except DateUtilsError as e:
        raise ValueError(str(e)) from e
