"""
Domain models for landmarks and the map/location data derived from them.

These are plain dataclasses; the loosely typed server payloads live in
``app.schemas.landmark`` and are converted by the repository.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Landmark:
    """A point of interest as shown in the list and on the map"""
    id: int
    title: str
    location: str
    description: str
    image: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class MapPin:
    """Marker handed to the map widget"""
    latitude: float
    longitude: float
    title: str
    snippet: str


@dataclass(frozen=True)
class MapView:
    """Center/zoom directive for the map widget"""
    center_latitude: float
    center_longitude: float
    zoom: float
    min_zoom: float
    max_zoom: float


@dataclass(frozen=True)
class LocationCoordinates:
    """A device location fix"""
    latitude: float
    longitude: float
    accuracy: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        now = now or datetime.now(timezone.utc)
        return (now - self.timestamp).total_seconds()


@dataclass
class PreparedImage:
    """An image staged on disk and ready to be sent as a multipart file part"""
    filename: str
    content: bytes
    mime_type: str
    temp_path: Optional[Path] = None

    def as_file_part(self) -> tuple:
        return (self.filename, self.content, self.mime_type)
