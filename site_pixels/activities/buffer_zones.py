"""Buffer zone geometry around project sites.

Builds the polygons drawn on the overview map.  Extraction itself works
on distances (``extract_pixels``); these shapes are the visual
counterpart of the same radii.

Geodesic zones are built by projecting the site to its local UTM zone,
buffering there in metres and projecting back to WGS 84, never by adding
degrees.  Planar zones are plain degree-unit discs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from site_pixels.core.constants import METRES_PER_KM, WGS84_CRS
from site_pixels.models.buffer import BufferZone, DistanceMethod, validate_radius

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shapely.geometry.base import BaseGeometry

    from site_pixels.models.geo import Site

logger = logging.getLogger("site_pixels.activities.buffer_zones")

# Segments per quarter circle in shapely's buffer approximation
DEFAULT_QUAD_SEGMENTS = 16


def build_buffer_zones(
    sites: Sequence[Site],
    radius: float,
    *,
    method: DistanceMethod = DistanceMethod.GEODESIC,
    quad_segs: int = DEFAULT_QUAD_SEGMENTS,
) -> tuple[BufferZone, ...]:
    """Build one buffer zone per site.

    Args:
        sites: Project sites.
        radius: Radius in ``method.unit``.
        method: Distance convention.
        quad_segs: Polygon segments per quarter circle.

    Returns:
        Zones in site order, each with a WGS 84 shapely polygon.

    Raises:
        ModelValidationError: If ``radius`` is not a finite value > 0.
    """
    validate_radius(radius)
    zones = tuple(
        BufferZone(
            site=site,
            radius=radius,
            method=method,
            geometry=_zone_geometry(site, radius, method, quad_segs),
        )
        for site in sites
    )
    logger.debug(
        "Buffer zones built | sites=%d | radius=%.4f %s | method=%s",
        len(zones),
        radius,
        method.unit,
        method.value,
    )
    return zones


def union_zones(zones: Sequence[BufferZone]) -> BaseGeometry:
    """Dissolve overlapping zones into a single geometry."""
    from shapely import unary_union

    return unary_union([z.geometry for z in zones if z.geometry is not None])


def dissolve_by_radius(zones: Sequence[BufferZone]) -> tuple[BaseGeometry, ...]:
    """Union the zones of each radius, in order of first appearance.

    Overlapping discs of neighbouring sites merge into one outline per
    radius, as drawn on the overview map.
    """
    by_radius: dict[float, list[BufferZone]] = {}
    for zone in zones:
        by_radius.setdefault(zone.radius, []).append(zone)
    return tuple(union_zones(group) for group in by_radius.values())


def get_utm_crs(lon: float, lat: float) -> str:
    """Determine the UTM CRS for a given WGS 84 coordinate.

    Returns an EPSG code like ``"EPSG:32639"`` (UTM zone 39N) or
    ``"EPSG:32739"`` (UTM zone 39S).
    """
    zone_number = int((lon + 180) / 6) + 1
    zone_number = max(1, min(60, zone_number))

    if lat >= 0:
        return f"EPSG:{32600 + zone_number}"
    return f"EPSG:{32700 + zone_number}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _zone_geometry(
    site: Site,
    radius: float,
    method: DistanceMethod,
    quad_segs: int,
) -> BaseGeometry:
    from shapely.geometry import Point

    if method is DistanceMethod.PLANAR_DEGREES:
        return Point(site.lon, site.lat).buffer(radius, quad_segs=quad_segs)

    from pyproj import Transformer
    from shapely.ops import transform

    utm_crs = get_utm_crs(site.lon, site.lat)
    to_utm = Transformer.from_crs(WGS84_CRS, utm_crs, always_xy=True)
    to_wgs = Transformer.from_crs(utm_crs, WGS84_CRS, always_xy=True)

    x, y = to_utm.transform(site.lon, site.lat)
    disc = Point(x, y).buffer(radius * METRES_PER_KM, quad_segs=quad_segs)
    return transform(to_wgs.transform, disc)
