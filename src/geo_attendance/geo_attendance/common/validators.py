from __future__ import annotations

import math
import re
from typing import Any

from ..core.constants import MAX_OFFICE_RADIUS, MIN_OFFICE_RADIUS
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def require_number(value: Any, field_name: str) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    lat_f = require_number(lat, "Latitude")
    lng_f = require_number(lng, "Longitude")
    if not -90 <= lat_f <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= lng_f <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
    return lat_f, lng_f


def require_radius(value: Any) -> int:
    radius = require_number(value, "Radius")
    if not MIN_OFFICE_RADIUS <= radius <= MAX_OFFICE_RADIUS:
        raise ValidationError(f"Radius must be between {MIN_OFFICE_RADIUS} and {MAX_OFFICE_RADIUS} meters")
    return int(radius)


def parse_positive_int(value: Any, field_name: str, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < 1:
        raise ValidationError(f"{field_name} must be positive")
    return number
