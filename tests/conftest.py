"""Shared pytest fixtures for the site-pixels test suite."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from site_pixels.core.constants import RAW_COORD_SCALE, RAW_MISSING_VALUE
from site_pixels.models.geo import GeoPoint, Site
from site_pixels.models.pixel_grid import PixelGrid

# ---------------------------------------------------------------------------
# Raster / vector writers
# ---------------------------------------------------------------------------


def write_raster(path: Path, values: np.ndarray) -> Path:
    """Write a single-band int32 GeoTIFF holding ``values``."""
    import rasterio

    values = np.asarray(values, dtype=np.int32)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=values.shape[0],
        width=values.shape[1],
        count=1,
        dtype="int32",
    ) as dst:
        dst.write(values, 1)
    return path


def write_geojson(path: Path, features: list[dict[str, object]]) -> Path:
    """Write a GeoJSON FeatureCollection."""
    path.write_text(
        json.dumps({"type": "FeatureCollection", "features": features}),
        encoding="utf-8",
    )
    return path


def polygon_feature(coords: list[tuple[float, float]], name: str) -> dict[str, object]:
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {"type": "Polygon", "coordinates": [[list(c) for c in coords]]},
    }


def raw_coordinate_grids(
    lons: np.ndarray,
    lats: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Raw (scaled integer) lon/lat rasters for a regular grid."""
    lon_grid, lat_grid = np.meshgrid(lons, lats)
    lon_raw = np.rint(lon_grid * RAW_COORD_SCALE).astype(np.int32)
    lat_raw = np.rint(lat_grid * RAW_COORD_SCALE).astype(np.int32)
    return lon_raw, lat_raw


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def qatar_sites() -> tuple[Site, ...]:
    """Sites A and D of the case study."""
    return (Site.at("A", 51.25, 26.00), Site.at("D", 50.80, 25.30))


@pytest.fixture()
def line_grid() -> PixelGrid:
    """Pixels due north of (51.0, 25.0) at 0, ~3.3, ~7.8 and ~22 km."""
    return PixelGrid(
        points=(
            GeoPoint(51.0, 25.0),
            GeoPoint(51.0, 25.03),
            GeoPoint(51.0, 25.07),
            GeoPoint(51.0, 25.2),
        ),
        pixel_ids=(100, 101, 102, 103),
    )


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def study_data_dir(tmp_path: Path) -> Path:
    """Data directory with a small Qatar pixel grid and a land polygon.

    The grid covers 50.80-51.50 E, 25.20-26.00 N at 0.05 degree spacing;
    the last raw record is replaced by the missing-value sentinel.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()

    lons = np.round(np.arange(50.80, 51.5001, 0.05), 4)
    lats = np.round(np.arange(25.20, 26.0001, 0.05), 4)
    lon_raw, lat_raw = raw_coordinate_grids(lons, lats)
    lon_raw[-1, -1] = RAW_MISSING_VALUE
    lat_raw[-1, -1] = RAW_MISSING_VALUE

    write_raster(data_dir / "lon.tif", lon_raw)
    write_raster(data_dir / "lat.tif", lat_raw)
    write_geojson(
        data_dir / "land.geojson",
        [
            polygon_feature(
                [(50.75, 24.5), (51.6, 24.5), (51.6, 26.2), (50.75, 26.2), (50.75, 24.5)],
                "Qatar",
            )
        ],
    )
    return data_dir
