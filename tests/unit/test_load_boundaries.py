"""Tests for loading vector boundary layers with fiona."""

from __future__ import annotations

from pathlib import Path

import pytest
from shapely.geometry import box

from site_pixels.activities.load_boundaries import (
    BoundaryLoadError,
    load_boundary_layer,
    prune_to_bbox,
    to_lines,
)
from site_pixels.core.constants import STUDY_BBOX
from tests.conftest import polygon_feature, write_geojson

pytestmark = pytest.mark.integration

INSIDE = [(51.0, 25.0), (51.2, 25.0), (51.2, 25.2), (51.0, 25.2), (51.0, 25.0)]
STRADDLING = [(51.5, 26.0), (52.0, 26.0), (52.0, 26.8), (51.5, 26.8), (51.5, 26.0)]
OUTSIDE = [(10.0, 10.0), (11.0, 10.0), (11.0, 11.0), (10.0, 11.0), (10.0, 10.0)]


@pytest.fixture()
def admin_file(tmp_path: Path) -> Path:
    return write_geojson(
        tmp_path / "admin.geojson",
        [
            polygon_feature(INSIDE, "Al Rayyan"),
            polygon_feature(STRADDLING, "Al Khor"),
            polygon_feature(OUTSIDE, "Elsewhere"),
        ],
    )


class TestLoadBoundaryLayer:
    def test_reads_all_without_bbox(self, admin_file: Path) -> None:
        layer = load_boundary_layer(admin_file)
        assert len(layer) == 3
        assert layer.name == "admin"
        assert layer.source_file == str(admin_file)

    def test_bbox_drops_and_clips(self, admin_file: Path) -> None:
        layer = load_boundary_layer(admin_file, bbox=STUDY_BBOX)
        assert len(layer) == 2
        assert [p["name"] for p in layer.properties] == ["Al Rayyan", "Al Khor"]
        max_lat = max(g.bounds[3] for g in layer.geometries)
        assert max_lat <= STUDY_BBOX[3] + 1e-9

    def test_as_lines(self, admin_file: Path) -> None:
        layer = load_boundary_layer(admin_file, as_lines=True, name="Admin")
        assert layer.name == "Admin"
        assert all("LineString" in g.geom_type for g in layer.geometries)

    def test_empty_layer(self, tmp_path: Path) -> None:
        path = write_geojson(tmp_path / "empty.geojson", [polygon_feature(OUTSIDE, "x")])
        layer = load_boundary_layer(path, bbox=STUDY_BBOX)
        assert layer.is_empty

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(BoundaryLoadError):
            load_boundary_layer(tmp_path / "absent.shp")


class TestGeometryHelpers:
    def test_prune_to_bbox(self) -> None:
        clipped = prune_to_bbox(box(50.0, 25.0, 52.0, 26.0), STUDY_BBOX)
        assert clipped.bounds == pytest.approx((50.7, 25.0, 51.65, 26.0))

    def test_to_lines_polygon(self) -> None:
        assert to_lines(box(0, 0, 1, 1)).geom_type == "LineString"

    def test_to_lines_keeps_lines(self) -> None:
        line = box(0, 0, 1, 1).exterior
        assert to_lines(line) is line
