"""Satellite grid resolution estimate.

Converts the angular sampling interval of a satellite pixel grid into
ground distances at a given latitude.  The Earth is treated as a sphere
of radius 6378 km, which is good enough for local resolution estimates
but not for precise distance or area work.

    res_NS = R * d_lat
    res_WE = R * d_lon * cos(lat)

(all angles in radians).  The west-east spacing shrinks with latitude
and is exactly zero at the poles.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from site_pixels.core.constants import EARTH_RADIUS_KM, MAX_LATITUDE, MIN_LATITUDE
from site_pixels.core.exceptions import ValidationError
from site_pixels.models.resolution import ResolutionResult

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("site_pixels.activities.estimate_resolution")


class ResolutionInputError(ValidationError):
    """Raised when resolution inputs are out of range."""

    default_stage = "estimate_resolution"
    default_code = "RESOLUTION_INPUT_INVALID"


def estimate_resolution(d_lat: float, d_lon: float, lat: float) -> ResolutionResult:
    """Estimate ground resolution (km) of a satellite grid at ``lat``.

    Args:
        d_lat: North-south sampling interval in degrees (> 0).
        d_lon: West-east sampling interval in degrees (> 0).
        lat: Latitude of interest in degrees, [-90, 90].

    Returns:
        A ``ResolutionResult`` with north-south and west-east distances.

    Raises:
        ResolutionInputError: If an interval is not a finite value > 0
            or ``lat`` is outside [-90, 90].
    """
    _validate_interval("d_lat", d_lat)
    _validate_interval("d_lon", d_lon)
    if not math.isfinite(lat) or not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
        msg = f"Latitude {lat} out of range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
        raise ResolutionInputError(msg)

    d_lat_rad = d_lat * math.pi / 180
    d_lon_rad = d_lon * math.pi / 180
    lat_rad = lat * math.pi / 180

    # cos(pi/2) is 6e-17 in floating point, not 0
    cos_lat = 0.0 if abs(lat) == MAX_LATITUDE else max(0.0, math.cos(lat_rad))

    res_ns_km = EARTH_RADIUS_KM * d_lat_rad
    res_we_km = EARTH_RADIUS_KM * d_lon_rad * cos_lat

    logger.debug(
        "Resolution estimated | lat=%.4f | d_lat=%.4f | d_lon=%.4f | NS=%.3f km | WE=%.3f km",
        lat,
        d_lat,
        d_lon,
        res_ns_km,
        res_we_km,
    )

    return ResolutionResult(
        res_ns_km=res_ns_km,
        res_we_km=res_we_km,
        lat=lat,
        d_lat=d_lat,
        d_lon=d_lon,
    )


def resolution_table(
    d_lat: float,
    d_lon: float,
    latitudes: Iterable[float],
) -> tuple[ResolutionResult, ...]:
    """Estimate resolution at each latitude of interest, in input order."""
    return tuple(estimate_resolution(d_lat, d_lon, lat) for lat in latitudes)


def _validate_interval(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        msg = f"Sampling interval {name}={value} must be a finite value > 0 (degrees)"
        raise ResolutionInputError(msg)
