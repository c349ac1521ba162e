"""
Models package for the Landmark Bangladesh client.

Domain dataclasses used between the repository, the view-model and the
front ends.
"""

from .landmark import (
    Landmark,
    MapPin,
    MapView,
    LocationCoordinates,
    PreparedImage,
)

__all__ = [
    "Landmark",
    "MapPin",
    "MapView",
    "LocationCoordinates",
    "PreparedImage",
]
