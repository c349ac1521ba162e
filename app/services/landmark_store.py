"""
In-memory landmark store backing the sandbox server.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "uploads"

SAMPLE_LANDMARKS = [
    ("Sundarbans Mangrove Forest", 21.9497, 89.1833),
    ("Cox's Bazar Beach", 21.4272, 92.0058),
    ("Lalbagh Fort", 23.7197, 90.3875),
    ("Shat Gombuj Mosque", 22.6833, 89.7833),
    ("Paharpur Buddhist Vihara", 25.0342, 88.9769),
    ("Bandarban Hill Tracts", 22.1953, 92.2207),
    ("Ahsan Manzil", 23.7085, 90.4068),
    ("Saint Martin's Island", 20.5983, 92.3250),
]


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class StoredLandmark:
    id: int
    title: str
    lat: float
    lon: float
    image: Optional[str] = None
    created_at: str = field(default_factory=_timestamp)
    updated_at: str = field(default_factory=_timestamp)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "lat": self.lat,
            "lon": self.lon,
            "image": self.image,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class LandmarkStore:
    """Sequential ids, insertion order, images written under ``upload_dir``."""

    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)
        self._landmarks: Dict[int, StoredLandmark] = {}
        self._next_id = 1

    def list_records(self) -> List[dict]:
        return [landmark.to_record() for landmark in self._landmarks.values()]

    def get(self, landmark_id: int) -> Optional[StoredLandmark]:
        return self._landmarks.get(landmark_id)

    def save_image(self, filename: Optional[str], content: bytes) -> str:
        """Persist an upload and return its server-relative path."""
        suffix = Path(filename).suffix.lower() if filename else ""
        name = f"{uuid.uuid4().hex}{suffix or '.jpg'}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / name).write_bytes(content)
        return f"{UPLOAD_URL_PREFIX}/{name}"

    def create(self, title: str, lat: float, lon: float, image: Optional[str] = None) -> StoredLandmark:
        landmark = StoredLandmark(id=self._next_id, title=title, lat=lat, lon=lon, image=image)
        self._landmarks[landmark.id] = landmark
        self._next_id += 1
        logger.info(f"Stored landmark {landmark.id}: {title}")
        return landmark

    def update(
        self,
        landmark_id: int,
        title: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        image: Optional[str] = None,
    ) -> Optional[StoredLandmark]:
        landmark = self._landmarks.get(landmark_id)
        if landmark is None:
            return None
        if title is not None:
            landmark.title = title
        if lat is not None:
            landmark.lat = lat
        if lon is not None:
            landmark.lon = lon
        if image is not None:
            landmark.image = image
        landmark.updated_at = _timestamp()
        return landmark

    def delete(self, landmark_id: int) -> bool:
        landmark = self._landmarks.pop(landmark_id, None)
        if landmark is None:
            return False
        if landmark.image and landmark.image.startswith(f"{UPLOAD_URL_PREFIX}/"):
            (self.upload_dir / landmark.image.split("/", 1)[1]).unlink(missing_ok=True)
        return True

    def seed_samples(self) -> None:
        for title, lat, lon in SAMPLE_LANDMARKS:
            self.create(title, lat, lon)
