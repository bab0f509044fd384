"""Tests for the overview map renderer (headless matplotlib)."""

from __future__ import annotations

from pathlib import Path

import pytest
from shapely.geometry import box

from site_pixels.activities.buffer_zones import build_buffer_zones
from site_pixels.activities.render_map import (
    LayerStyle,
    MapScene,
    MapStyle,
    RenderError,
    buffer_outlines,
    degree_label,
    render_map,
)
from site_pixels.core.constants import STUDY_BBOX
from site_pixels.models.boundary import BoundaryLayer
from site_pixels.models.buffer import DistanceMethod
from site_pixels.models.geo import Site
from site_pixels.models.pixel_grid import PixelGrid

PNG_MAGIC = b"\x89PNG"


@pytest.fixture()
def scene(qatar_sites: tuple[Site, ...], line_grid: PixelGrid) -> MapScene:
    land = BoundaryLayer(name="land", geometries=(box(50.75, 24.5, 51.6, 26.2),))
    borders = BoundaryLayer(name="admin", geometries=(box(50.9, 25.0, 51.3, 25.5).boundary,))
    return MapScene(
        bbox=STUDY_BBOX,
        sites=qatar_sites,
        grid=line_grid,
        boundaries=(land, borders),
        zones=build_buffer_zones(qatar_sites, 5.0),
    )


class TestRenderMap:
    def test_writes_png(self, scene: MapScene, tmp_path: Path) -> None:
        out = render_map(scene, tmp_path / "maps" / "site_map.png")
        assert out.exists()
        assert out.read_bytes()[:4] == PNG_MAGIC

    def test_custom_style(self, scene: MapScene, tmp_path: Path) -> None:
        style = MapStyle(
            title="Test",
            captions=(),
            dpi=50,
            layer_styles=(LayerStyle(edgecolor="black"),),
            region_labels=(),
        )
        out = render_map(scene, tmp_path / "styled.png", style)
        assert out.exists()

    def test_empty_scene(self, tmp_path: Path) -> None:
        out = render_map(MapScene(bbox=STUDY_BBOX), tmp_path / "empty.png", MapStyle(dpi=50))
        assert out.exists()

    def test_unsupported_format(self, scene: MapScene, tmp_path: Path) -> None:
        with pytest.raises(RenderError):
            render_map(scene, tmp_path / "map.notaformat")


class TestBufferOutlines:
    def test_dissolved_per_radius(self) -> None:
        sites = [Site.at("D", 50.80, 25.30), Site.at("E", 50.83, 25.31)]
        planar = DistanceMethod.PLANAR_DEGREES
        zones = build_buffer_zones(sites, 0.10, method=planar) + build_buffer_zones(
            sites, 0.05, method=planar
        )
        assert len(buffer_outlines(zones)) == 2

    def test_undissolved_keeps_each_zone(self, qatar_sites: tuple[Site, ...]) -> None:
        zones = build_buffer_zones(qatar_sites, 5.0)
        assert len(buffer_outlines(zones, dissolve=False)) == 2

    def test_render_without_dissolve(self, scene: MapScene, tmp_path: Path) -> None:
        out = render_map(scene, tmp_path / "plain.png", MapStyle(dpi=50, dissolve_buffers=False))
        assert out.read_bytes()[:4] == PNG_MAGIC


class TestDegreeLabel:
    @pytest.mark.parametrize(
        ("value", "axis", "expected"),
        [
            (25.2, "lat", "25.2°N"),
            (-33.9, "lat", "33.9°S"),
            (50.8, "lon", "50.8°E"),
            (-0.4, "lon", "0.4°W"),
            (0.0, "lat", "0.0°N"),
        ],
    )
    def test_format(self, value: float, axis: str, expected: str) -> None:
        assert degree_label(value, axis=axis) == expected
