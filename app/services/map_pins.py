"""Map widget inputs derived from landmarks."""
from typing import Iterable, List, Optional

from app.config.settings import MapSettings, get_settings
from app.models.landmark import Landmark, MapPin, MapView


def to_map_pins(landmarks: Iterable[Landmark]) -> List[MapPin]:
    return [
        MapPin(
            latitude=landmark.latitude,
            longitude=landmark.longitude,
            title=landmark.title,
            snippet=landmark.location,
        )
        for landmark in landmarks
    ]


def default_map_view(map_settings: Optional[MapSettings] = None) -> MapView:
    map_settings = map_settings or get_settings().map
    return MapView(
        center_latitude=map_settings.center_latitude,
        center_longitude=map_settings.center_longitude,
        zoom=map_settings.default_zoom,
        min_zoom=map_settings.min_zoom,
        max_zoom=map_settings.max_zoom,
    )


def map_view_for(landmarks: Iterable[Landmark], map_settings: Optional[MapSettings] = None) -> MapView:
    """Center on the mean landmark position, or the country default when empty."""
    view = default_map_view(map_settings)
    # (0, 0) is the placeholder for missing coordinates
    points = [(l.latitude, l.longitude) for l in landmarks if (l.latitude, l.longitude) != (0.0, 0.0)]
    if not points:
        return view
    return MapView(
        center_latitude=sum(p[0] for p in points) / len(points),
        center_longitude=sum(p[1] for p in points) / len(points),
        zoom=view.zoom,
        min_zoom=view.min_zoom,
        max_zoom=view.max_zoom,
    )
