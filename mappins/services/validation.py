"""Input cleaning shared by the services."""

from __future__ import annotations

import re

from mappins.exceptions import ValidationError

HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")

# Column widths in mappins.models
NAME_LENGTH = 255
CATEGORY_NAME_LENGTH = 100


def clean(value: str | None) -> str | None:
    """Strip a string field, treating blank input as missing."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def require(message: str, **fields: object) -> None:
    """Raise a ValidationError naming the first missing field."""
    for name, value in fields.items():
        if value is None:
            raise ValidationError(message, field=name)


def require_max_length(limit: int, **fields: str | None) -> None:
    for name, value in fields.items():
        if value is not None and len(value) > limit:
            raise ValidationError(
                f"{name} must be at most {limit} characters", field=name
            )


def require_color(color: str) -> None:
    """Reject anything but a ``#RRGGBB`` hex code."""
    if HEX_COLOR.fullmatch(color) is None:
        raise ValidationError(
            "color must be a hex code such as #FF5733", field="color"
        )
