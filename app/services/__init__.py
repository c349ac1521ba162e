# Client-side services

from .api_client import LandmarkApiClient
from .image_processor import ImageProcessor
from .landmark_repository import LandmarkRepository, to_landmark, normalize_image_url
from .location_service import LocationService, LocationProvider, StaticLocationProvider
from .map_pins import to_map_pins, default_map_view, map_view_for
from .api_diagnostics import probe_endpoint, EndpointProbe
from .landmark_store import LandmarkStore

__all__ = [
    "LandmarkApiClient",
    "ImageProcessor",
    "LandmarkRepository",
    "to_landmark",
    "normalize_image_url",
    "LocationService",
    "LocationProvider",
    "StaticLocationProvider",
    "to_map_pins",
    "default_map_view",
    "map_view_for",
    "probe_endpoint",
    "EndpointProbe",
    "LandmarkStore",
]
