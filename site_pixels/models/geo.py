"""Geographic value types: points and labelled project sites.

All coordinates are WGS 84 decimal degrees, longitude first, matching
the ``(lon, lat)`` ordering used by shapely, pyproj (``always_xy``) and
the raster loaders.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from site_pixels.core.constants import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from site_pixels.core.exceptions import CoordinateValidationError, MissingValueError


def validate_wgs84_coordinate(lon: float, lat: float, *, context: str = "") -> None:
    """Validate a single ``(lon, lat)`` pair.

    Raises:
        MissingValueError: If either value is NaN.
        CoordinateValidationError: If either value is infinite or outside
            WGS 84 bounds.
    """
    where = f" in {context}" if context else ""
    if math.isnan(lon) or math.isnan(lat):
        msg = f"Missing coordinate value (NaN){where}: lon={lon}, lat={lat}"
        raise MissingValueError(msg)
    if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
        msg = f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]{where}"
        raise CoordinateValidationError(msg)
    if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
        msg = f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]{where}"
        raise CoordinateValidationError(msg)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS 84 coordinate pair, validated on construction.

    Attributes:
        lon: Longitude in decimal degrees, [-180, 180].
        lat: Latitude in decimal degrees, [-90, 90].
    """

    lon: float
    lat: float

    def __post_init__(self) -> None:
        validate_wgs84_coordinate(self.lon, self.lat)

    def as_tuple(self) -> tuple[float, float]:
        return (self.lon, self.lat)


@dataclass(frozen=True, slots=True)
class Site:
    """A candidate development site.

    Attributes:
        label: Short identifying code (e.g. ``"A"``).
        point: Site location.
    """

    label: str
    point: GeoPoint

    @classmethod
    def at(cls, label: str, lon: float, lat: float) -> Site:
        """Build a site from a label and raw coordinates."""
        return cls(label=label, point=GeoPoint(lon, lat))

    @property
    def lon(self) -> float:
        return self.point.lon

    @property
    def lat(self) -> float:
        return self.point.lat
