"""
Input validation utilities for landmark form fields
"""
import math
from typing import Optional, Tuple


class ValidationError(Exception):
    """Custom validation error"""
    pass


MAX_TITLE_LENGTH = 255


def validate_title(title: Optional[str]) -> str:
    """
    Validate a landmark title

    Args:
        title: Title as typed by the user

    Returns:
        Stripped title

    Raises:
        ValidationError: If title is blank or too long
    """
    if title is None or not title.strip():
        raise ValidationError("Title must not be empty")

    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title too long (max {MAX_TITLE_LENGTH} characters)")

    return title


def parse_coordinate(text: Optional[str], field_name: str = "coordinate") -> float:
    """
    Parse a decimal coordinate from free text.

    Raises:
        ValidationError: If the text is not a finite number
    """
    if text is None or not str(text).strip():
        raise ValidationError(f"{field_name} is required")

    try:
        value = float(str(text).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a decimal number, got {text!r}")

    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be a finite number")

    return value


def validate_latitude(lat: float) -> float:
    """
    Validate latitude coordinate

    Args:
        lat: Latitude value

    Returns:
        Validated latitude

    Raises:
        ValidationError: If latitude is out of range
    """
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude {lat} out of range (must be -90 to 90)")

    return lat


def validate_longitude(lon: float) -> float:
    """
    Validate longitude coordinate

    Args:
        lon: Longitude value

    Returns:
        Validated longitude

    Raises:
        ValidationError: If longitude is out of range
    """
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude {lon} out of range (must be -180 to 180)")

    return lon


def validate_landmark_id(landmark_id) -> int:
    """Landmark ids are positive integers assigned by the server."""
    if isinstance(landmark_id, bool):
        raise ValidationError("Landmark id must be an integer")
    try:
        value = int(landmark_id)
    except (TypeError, ValueError):
        raise ValidationError(f"Landmark id must be an integer, got {landmark_id!r}")
    if value <= 0:
        raise ValidationError("Landmark id must be positive")
    return value


def validate_landmark_form(title: Optional[str], lat_text: Optional[str], lon_text: Optional[str]) -> Tuple[str, float, float]:
    """Validate the add/edit form in one go; returns (title, lat, lon)."""
    clean_title = validate_title(title)
    lat = validate_latitude(parse_coordinate(lat_text, "Latitude"))
    lon = validate_longitude(parse_coordinate(lon_text, "Longitude"))
    return clean_title, lat, lon
