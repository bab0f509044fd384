"""Tests for the case-study orchestrator (load → compute → output)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from site_pixels.activities.load_pixel_grid import PixelLoadError
from site_pixels.core.config import StudyConfig
from site_pixels.core.constants import MAP_IMAGE_NAME
from site_pixels.orchestrators.case_study import resolution_latitudes, run_case_study

pytestmark = pytest.mark.integration


def _config(data_dir: Path, out_dir: Path, **overrides: object) -> StudyConfig:
    values: dict[str, object] = {
        "data_dir": str(data_dir),
        "output_dir": str(out_dir),
        "lon_raster": "lon.tif",
        "lat_raster": "lat.tif",
        "boundary_files": ("land.geojson",),
        "render_map": False,
    }
    values.update(overrides)
    return StudyConfig(**values)  # type: ignore[arg-type]


class TestRunCaseStudy:
    def test_full_run(self, study_data_dir: Path, tmp_path: Path) -> None:
        result = run_case_study(_config(study_data_dir, tmp_path / "out"), run_id="r1")

        assert result.run_id == "r1"
        assert [s.label for s in result.sites] == ["A", "B", "C", "D", "E", "F"]
        assert result.pixel_count > 0
        assert len(result.resolution) == 4
        assert result.extraction.near_ids <= result.extraction.far_ids
        assert result.extraction.near
        assert result.map_path == ""

    def test_sites_on_grid_nodes_are_near(self, study_data_dir: Path, tmp_path: Path) -> None:
        result = run_case_study(_config(study_data_dir, tmp_path / "out"))
        zero = [p for p in result.extraction.near if p.distance < 1e-6]
        # A, B, C, D and F sit exactly on 0.05 degree grid nodes
        assert {p.site_label for p in zero} >= {"A", "B", "C", "D", "F"}

    def test_report_files(self, study_data_dir: Path, tmp_path: Path) -> None:
        result = run_case_study(_config(study_data_dir, tmp_path / "out"), run_id="r2")
        payload = json.loads(Path(result.report_path).read_text(encoding="utf-8"))
        assert payload["run_id"] == "r2"
        assert payload["missing_count"] == 1
        assert payload["pixel_count"] == result.pixel_count
        assert Path(result.download_list_path).exists()

    def test_planar_method(self, study_data_dir: Path, tmp_path: Path) -> None:
        config = _config(
            study_data_dir,
            tmp_path / "out",
            distance_method="planar_degrees",
            near_radius=0.05,
            far_radius=0.10,
        )
        result = run_case_study(config)
        payload = json.loads(Path(result.report_path).read_text(encoding="utf-8"))
        assert payload["extraction"]["unit"] == "deg"
        assert result.extraction.near_ids <= result.extraction.far_ids

    def test_render_map(self, study_data_dir: Path, tmp_path: Path) -> None:
        result = run_case_study(
            _config(study_data_dir, tmp_path / "out", render_map=True)
        )
        assert Path(result.map_path).name == MAP_IMAGE_NAME
        assert Path(result.map_path).exists()

    def test_missing_raster_propagates(self, study_data_dir: Path, tmp_path: Path) -> None:
        config = _config(study_data_dir, tmp_path / "out", lon_raster="absent.tif")
        with pytest.raises(PixelLoadError):
            run_case_study(config)

    def test_generated_run_id(self, study_data_dir: Path, tmp_path: Path) -> None:
        result = run_case_study(_config(study_data_dir, tmp_path / "out"))
        assert len(result.run_id) == 32


class TestResolutionLatitudes:
    def test_equator_then_study_area(self) -> None:
        assert resolution_latitudes((50.7, 24.4, 51.65, 26.4)) == (0.0, 24.4, 25.4, 26.4)
