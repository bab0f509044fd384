"""Case-study orchestrator.

Runs the stages in order and threads their value types between them:

1. Load: sites, satellite pixel grid (clipped to the region of
   interest), boundary layers
2. Compute: resolution table and near/far buffer extraction
3. Output: overview map (optional) and extraction report

Each phase logs its outcome and duration.  Errors from any stage
propagate unchanged; nothing is retried.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from site_pixels.activities.buffer_zones import build_buffer_zones
from site_pixels.activities.estimate_resolution import resolution_table
from site_pixels.activities.extract_pixels import extract_near_far
from site_pixels.activities.load_boundaries import load_boundary_layer
from site_pixels.activities.load_pixel_grid import load_pixel_grid
from site_pixels.activities.load_sites import load_sites
from site_pixels.activities.write_report import build_report, write_report
from site_pixels.core.constants import MAP_IMAGE_NAME

if TYPE_CHECKING:
    from site_pixels.activities.render_map import MapStyle
    from site_pixels.core.config import StudyConfig
    from site_pixels.models.boundary import BoundaryLayer
    from site_pixels.models.buffer import BufferExtraction
    from site_pixels.models.geo import Site
    from site_pixels.models.pixel_grid import PixelGrid
    from site_pixels.models.resolution import ResolutionResult

logger = logging.getLogger("site_pixels.orchestrators.case_study")


@dataclass(frozen=True, slots=True)
class CaseStudyResult:
    """Outcome of one case-study run.

    Attributes:
        run_id: Identifier of the run.
        sites: Sites used.
        pixel_count: Pixels in the clipped grid.
        resolution: Resolution table.
        extraction: Near and far extraction.
        report_path: Written JSON report.
        download_list_path: Written CSV download list.
        map_path: Rendered map, empty when rendering is disabled.
        duration_s: Wall-clock duration of the run.
    """

    run_id: str
    sites: tuple[Site, ...]
    pixel_count: int
    resolution: tuple[ResolutionResult, ...]
    extraction: BufferExtraction
    report_path: str
    download_list_path: str
    map_path: str = ""
    duration_s: float = 0.0


def resolution_latitudes(bbox: tuple[float, float, float, float]) -> tuple[float, ...]:
    """Latitudes reported in the resolution table: equator, then the study area."""
    _min_lon, min_lat, _max_lon, max_lat = bbox
    return (0.0, min_lat, round((min_lat + max_lat) / 2, 6), max_lat)


def run_case_study(
    config: StudyConfig,
    *,
    run_id: str = "",
    style: MapStyle | None = None,
) -> CaseStudyResult:
    """Run load → compute → output for ``config``.

    Raises:
        PipelineError: Any stage failure, unchanged.
    """
    run_id = run_id or uuid.uuid4().hex
    start = time.monotonic()
    method = config.method

    logger.info(
        "Case study started | run_id=%s | method=%s | near=%.4f | far=%.4f | bbox=%s",
        run_id,
        method.value,
        config.near_radius,
        config.far_radius,
        config.bbox,
    )

    # -----------------------------------------------------------------------
    # Phase 1: Load
    # -----------------------------------------------------------------------
    sites = load_sites(config.sites_file or None)
    grid = load_pixel_grid(
        config.lon_raster_path,
        config.lat_raster_path,
        bbox=config.bbox,
        scale=config.raw_scale,
        missing_value=config.missing_value,
    )
    boundaries = _load_boundaries(config)

    # -----------------------------------------------------------------------
    # Phase 2: Compute
    # -----------------------------------------------------------------------
    resolution = resolution_table(
        config.grid_d_lat,
        config.grid_d_lon,
        resolution_latitudes(config.bbox),
    )
    extraction = extract_near_far(
        sites,
        grid,
        config.near_radius,
        config.far_radius,
        method=method,
    )

    # -----------------------------------------------------------------------
    # Phase 3: Output
    # -----------------------------------------------------------------------
    map_path = ""
    if config.render_map:
        map_path = str(_render(config, sites, grid, boundaries, style))

    report = build_report(
        sites,
        extraction,
        resolution=resolution,
        bbox=config.bbox,
        pixel_count=len(grid),
        missing_count=grid.missing_count,
        run_id=run_id,
    )
    paths = write_report(report, config.output_dir)

    duration = time.monotonic() - start
    logger.info(
        "Case study complete | run_id=%s | pixels=%d | near=%d | far=%d | duration=%.2fs",
        run_id,
        len(grid),
        len(extraction.near),
        len(extraction.far),
        duration,
    )

    return CaseStudyResult(
        run_id=run_id,
        sites=sites,
        pixel_count=len(grid),
        resolution=resolution,
        extraction=extraction,
        report_path=paths["report_path"],
        download_list_path=paths["download_list_path"],
        map_path=map_path,
        duration_s=duration,
    )


def _load_boundaries(config: StudyConfig) -> tuple[BoundaryLayer, ...]:
    # First layer is the filled land mass; later layers are drawn as lines
    return tuple(
        load_boundary_layer(path, bbox=config.bbox, as_lines=idx > 0)
        for idx, path in enumerate(config.boundary_paths)
    )


def _render(
    config: StudyConfig,
    sites: tuple[Site, ...],
    grid: PixelGrid,
    boundaries: tuple[BoundaryLayer, ...],
    style: MapStyle | None,
) -> Path:
    from site_pixels.activities.render_map import MapScene, render_map

    method = config.method
    zones = build_buffer_zones(sites, config.far_radius, method=method) + build_buffer_zones(
        sites, config.near_radius, method=method
    )
    scene = MapScene(
        bbox=config.bbox,
        sites=sites,
        grid=grid,
        boundaries=boundaries,
        zones=zones,
    )
    return render_map(scene, Path(config.output_dir) / MAP_IMAGE_NAME, style)
