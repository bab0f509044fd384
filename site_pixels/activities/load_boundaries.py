"""Load vector boundary layers for the overview map.

Reads any OGR-readable vector file (shapefile, GeoPackage, GeoJSON, KML)
with fiona, converts records to shapely geometries and prunes them to
the region of interest.  Polygon layers can be turned into their
outlines so administrative areas are drawn as lines over the coastline
fill.

Records without geometry are skipped; records whose geometry falls
entirely outside the region are dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from site_pixels.core.exceptions import PermanentError
from site_pixels.models.boundary import BoundaryLayer

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

logger = logging.getLogger("site_pixels.activities.load_boundaries")


class BoundaryLoadError(PermanentError):
    """Raised when a vector layer cannot be read."""

    default_stage = "load_boundaries"
    default_code = "BOUNDARY_LOAD_FAILED"


def load_boundary_layer(
    path: str | Path,
    *,
    name: str = "",
    bbox: tuple[float, float, float, float] | None = None,
    as_lines: bool = False,
    layer: str | int | None = None,
) -> BoundaryLayer:
    """Read a vector file into a ``BoundaryLayer``.

    Args:
        path: Vector file (or directory, for shapefile collections).
        name: Display name; defaults to the file stem.
        bbox: Region of interest ``(min_lon, min_lat, max_lon, max_lat)``.
            Geometries are clipped to it.
        as_lines: Replace polygons with their boundaries.
        layer: Layer name or index inside a multi-layer source.

    Raises:
        BoundaryLoadError: If the file cannot be opened or read.
    """
    import fiona
    from fiona.errors import FionaError
    from shapely.geometry import shape

    path = Path(path)
    geometries: list[BaseGeometry] = []
    properties: list[dict[str, object]] = []
    skipped = 0

    try:
        with fiona.open(str(path), layer=layer) as collection:
            for record in collection:
                geom = record.geometry
                if geom is None:
                    skipped += 1
                    continue
                geometry = shape(geom)
                if bbox is not None:
                    geometry = prune_to_bbox(geometry, bbox)
                if geometry.is_empty:
                    skipped += 1
                    continue
                if as_lines:
                    geometry = to_lines(geometry)
                geometries.append(geometry)
                properties.append(dict(record.properties or {}))
    except (FionaError, OSError) as exc:
        msg = f"Cannot read boundary layer {path}: {exc}"
        raise BoundaryLoadError(msg) from exc

    boundary = BoundaryLayer(
        name=name or path.stem,
        geometries=tuple(geometries),
        source_file=str(path),
        properties=tuple(properties),
    )
    logger.info(
        "Boundary layer loaded | name=%s | features=%d | skipped=%d | source=%s",
        boundary.name,
        len(boundary),
        skipped,
        path,
    )
    return boundary


def prune_to_bbox(
    geometry: BaseGeometry,
    bbox: tuple[float, float, float, float],
) -> BaseGeometry:
    """Clip a geometry to the bounding box ``(min_lon, min_lat, max_lon, max_lat)``."""
    from shapely import clip_by_rect

    return clip_by_rect(geometry, *bbox)


def to_lines(geometry: BaseGeometry) -> BaseGeometry:
    """Polygon outlines; non-areal geometries are returned unchanged."""
    if geometry.geom_type in ("Polygon", "MultiPolygon"):
        return geometry.boundary
    return geometry
