"""Buffer extraction: pick the satellite pixels close to project sites.

For each candidate pixel the distance to every site is computed and the
minimum kept; the pixel is extracted when that minimum is within the
radius.  Running the extraction for a near and a far radius gives the
two nested pixel sets used for data retrieval.

Distances follow an explicit ``DistanceMethod``:

- ``GEODESIC``: WGS 84 ellipsoidal distance from ``pyproj.Geod``, radius
  in kilometres.
- ``PLANAR_DEGREES``: Euclidean distance in lon/lat degrees.  Matches a
  planar buffer drawn in degree units; only acceptable over a few
  degrees close to the equator.

Edge cases:
- No sites: nothing can be near a site, the result is empty.
- No candidates: the result is empty.
- Radius <= 0: ``ExtractionError`` (a ``ValidationError``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Union

import numpy as np

from site_pixels.core.constants import METRES_PER_KM
from site_pixels.core.exceptions import ValidationError
from site_pixels.models.buffer import (
    BufferExtraction,
    DistanceMethod,
    ExtractedPixel,
    ModelValidationError,
    validate_radius,
)
from site_pixels.models.geo import GeoPoint, validate_wgs84_coordinate
from site_pixels.models.pixel_grid import PixelGrid

if TYPE_CHECKING:
    from site_pixels.models.geo import Site

logger = logging.getLogger("site_pixels.activities.extract_pixels")

Candidates = Union[PixelGrid, Sequence[GeoPoint], Sequence[tuple[float, float]]]


class ExtractionError(ValidationError):
    """Raised when extraction parameters are invalid."""

    default_stage = "extract_pixels"
    default_code = "EXTRACTION_INPUT_INVALID"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def iter_within_radius(
    sites: Sequence[Site],
    candidates: Candidates,
    radius: float,
    *,
    method: DistanceMethod = DistanceMethod.GEODESIC,
) -> Iterator[ExtractedPixel]:
    """Lazily yield the candidates within ``radius`` of any site.

    Inputs are validated eagerly; pixels are yielded in candidate order.

    Args:
        sites: Project sites (may be empty).
        candidates: A ``PixelGrid`` (pixel IDs preserved) or a sequence of
            ``GeoPoint`` / ``(lon, lat)`` tuples (IDs are positions).
        radius: Buffer radius in ``method.unit``.
        method: Distance convention.

    Raises:
        ExtractionError: If ``radius`` is not a finite value > 0.
        MissingValueError: If a raw candidate tuple holds NaN.
        CoordinateValidationError: If a raw candidate tuple is out of range.
    """
    _check_radius(radius)
    grid = _as_grid(candidates)
    distances, nearest = nearest_site_distances(sites, grid, method=method)
    return _yield_matches(sites, grid, distances, nearest, radius)


def extract_within_radius(
    sites: Sequence[Site],
    candidates: Candidates,
    radius: float,
    *,
    method: DistanceMethod = DistanceMethod.GEODESIC,
) -> tuple[ExtractedPixel, ...]:
    """Return the candidates within ``radius`` of any site, in input order.

    See ``iter_within_radius`` for arguments and errors.
    """
    matches = tuple(iter_within_radius(sites, candidates, radius, method=method))
    logger.info(
        "Pixels extracted | radius=%.4f %s | method=%s | sites=%d | candidates=%d | matched=%d",
        radius,
        method.unit,
        method.value,
        len(sites),
        len(candidates),
        len(matches),
    )
    return matches


def extract_near_far(
    sites: Sequence[Site],
    candidates: Candidates,
    near_radius: float,
    far_radius: float,
    *,
    method: DistanceMethod = DistanceMethod.GEODESIC,
) -> BufferExtraction:
    """Extract pixels for a near and a far radius in one distance pass.

    When ``near_radius <= far_radius`` the near set is a subset of the
    far set.

    Raises:
        ExtractionError: If either radius is not a finite value > 0.
    """
    _check_radius(near_radius)
    _check_radius(far_radius)
    grid = _as_grid(candidates)
    distances, nearest = nearest_site_distances(sites, grid, method=method)

    near = tuple(_yield_matches(sites, grid, distances, nearest, near_radius))
    far = tuple(_yield_matches(sites, grid, distances, nearest, far_radius))

    logger.info(
        "Buffer extraction complete | method=%s | near=%.4f %s (%d px) | far=%.4f %s (%d px) | "
        "sites=%d | candidates=%d",
        method.value,
        near_radius,
        method.unit,
        len(near),
        far_radius,
        method.unit,
        len(far),
        len(sites),
        len(grid),
    )

    return BufferExtraction(
        near=near,
        far=far,
        near_radius=near_radius,
        far_radius=far_radius,
        method=method,
    )


def nearest_site_distances(
    sites: Sequence[Site],
    candidates: Candidates,
    *,
    method: DistanceMethod = DistanceMethod.GEODESIC,
) -> tuple[np.ndarray, np.ndarray]:
    """Distance from every candidate to its nearest site.

    Returns:
        ``(distances, nearest)`` arrays of candidate length: minimum
        distance in ``method.unit`` and the index of the nearest site.
        With no sites, distances are ``inf`` and indices ``-1``.
    """
    grid = _as_grid(candidates)
    n = len(grid)
    best = np.full(n, np.inf, dtype=np.float64)
    nearest = np.full(n, -1, dtype=np.int64)
    if n == 0 or not sites:
        return best, nearest

    lons = grid.lons
    lats = grid.lats
    for site_idx, site in enumerate(sites):
        dist = _distance_to_site(site, lons, lats, method)
        closer = dist < best
        best[closer] = dist[closer]
        nearest[closer] = site_idx
    return best, nearest


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _yield_matches(
    sites: Sequence[Site],
    grid: PixelGrid,
    distances: np.ndarray,
    nearest: np.ndarray,
    radius: float,
) -> Iterator[ExtractedPixel]:
    for idx in np.flatnonzero(distances <= radius):
        i = int(idx)
        yield ExtractedPixel(
            point=grid.points[i],
            pixel_id=grid.pixel_ids[i],
            index=i,
            site_label=sites[int(nearest[i])].label,
            distance=float(distances[i]),
        )


def _distance_to_site(
    site: Site,
    lons: np.ndarray,
    lats: np.ndarray,
    method: DistanceMethod,
) -> np.ndarray:
    if method is DistanceMethod.PLANAR_DEGREES:
        return np.hypot(lons - site.lon, lats - site.lat)

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    site_lons = np.full_like(lons, site.lon)
    site_lats = np.full_like(lats, site.lat)
    _az12, _az21, dist_m = geod.inv(site_lons, site_lats, np.array(lons), np.array(lats))
    return np.asarray(dist_m, dtype=np.float64) / METRES_PER_KM


def _as_grid(candidates: Candidates) -> PixelGrid:
    if isinstance(candidates, PixelGrid):
        return candidates
    points = []
    for i, c in enumerate(candidates):
        if isinstance(c, GeoPoint):
            points.append(c)
            continue
        lon, lat = float(c[0]), float(c[1])
        validate_wgs84_coordinate(lon, lat, context=f"candidate {i}")
        points.append(GeoPoint(lon, lat))
    return PixelGrid.from_points(points)


def _check_radius(radius: float) -> None:
    try:
        validate_radius(radius, model="extract_pixels")
    except ModelValidationError as exc:
        raise ExtractionError(f"Buffer radius {radius!r} must be a finite value > 0") from exc
