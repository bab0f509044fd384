"""Command-line entry point (``site-pixels``).

Subcommands:
    resolution  Print the ground resolution of a lat/lon grid.
    extract     Extract near/far pixels from a pair of coordinate rasters.
    run         Run the full case study from ``SITE_PIXELS_*`` variables.

Pipeline errors and unparseable settings are reported on stderr and give
exit code 2.
"""

from __future__ import annotations

import argparse
import logging
import sys

from site_pixels.core.constants import (
    DEFAULT_FAR_RADIUS_KM,
    DEFAULT_NEAR_RADIUS_KM,
    PLANAR_FAR_RADIUS_DEG,
    PLANAR_NEAR_RADIUS_DEG,
    STUDY_BBOX,
)
from site_pixels.core.exceptions import PipelineError
from site_pixels.models.buffer import DistanceMethod

logger = logging.getLogger("site_pixels.cli")


def cmd_resolution(args: argparse.Namespace) -> int:
    from site_pixels.activities.estimate_resolution import resolution_table

    table = resolution_table(args.d_lat, args.d_lon, args.lat)
    print(f"{'lat':>8} {'res.NS (km)':>12} {'res.WE (km)':>12}")
    for row in table:
        print(f"{row.lat:8.3f} {row.res_ns_km:12.3f} {row.res_we_km:12.3f}")
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    from site_pixels.activities.extract_pixels import extract_near_far
    from site_pixels.activities.load_pixel_grid import load_pixel_grid
    from site_pixels.activities.load_sites import load_sites
    from site_pixels.activities.write_report import build_report, write_report

    method = DistanceMethod(args.method)
    near, far = _radii(method, args.near, args.far)

    sites = load_sites(args.sites)
    grid = load_pixel_grid(args.lon_raster, args.lat_raster, bbox=tuple(args.bbox))
    extraction = extract_near_far(sites, grid, near, far, method=method)
    report = build_report(
        sites,
        extraction,
        bbox=args.bbox,
        pixel_count=len(grid),
        missing_count=grid.missing_count,
    )
    paths = write_report(report, args.out_dir)

    print(f"near: {len(extraction.near)} pixels within {near:g} {method.unit}")
    print(f"far:  {len(extraction.far)} pixels within {far:g} {method.unit}")
    print(paths["report_path"])
    print(paths["download_list_path"])
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    from site_pixels.core.config import StudyConfig
    from site_pixels.orchestrators.case_study import run_case_study

    config = StudyConfig.from_env()
    logging.getLogger().setLevel(config.log_level)
    result = run_case_study(config)

    print(f"run {result.run_id}: {result.pixel_count} pixels in region")
    print(f"near: {len(result.extraction.near)} | far: {len(result.extraction.far)}")
    for path in (result.report_path, result.download_list_path, result.map_path):
        if path:
            print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="site-pixels",
        description="Select satellite pixels near project sites",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    pr = sub.add_parser("resolution", help="Ground resolution of a lat/lon grid")
    pr.add_argument("--d-lat", dest="d_lat", type=float, required=True)
    pr.add_argument("--d-lon", dest="d_lon", type=float, required=True)
    pr.add_argument("--lat", type=float, action="append", required=True)
    pr.set_defaults(func=cmd_resolution)

    methods = [m.value for m in DistanceMethod]
    pe = sub.add_parser("extract", help="Extract near/far pixels around sites")
    pe.add_argument("--lon-raster", dest="lon_raster", required=True)
    pe.add_argument("--lat-raster", dest="lat_raster", required=True)
    pe.add_argument("--sites", type=str, default=None, help="CSV with label,lon,lat")
    pe.add_argument("--method", choices=methods, default=DistanceMethod.GEODESIC.value)
    pe.add_argument("--near", type=float, default=None)
    pe.add_argument("--far", type=float, default=None)
    pe.add_argument(
        "--bbox",
        type=float,
        nargs=4,
        metavar=("MIN_LON", "MIN_LAT", "MAX_LON", "MAX_LAT"),
        default=list(STUDY_BBOX),
    )
    pe.add_argument("--out-dir", dest="out_dir", type=str, default="reports")
    pe.set_defaults(func=cmd_extract)

    pu = sub.add_parser("run", help="Run the case study from SITE_PIXELS_* settings")
    pu.set_defaults(func=cmd_run)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        return args.func(args)
    except PipelineError as exc:
        logger.debug("Command failed | %s", exc.to_error_dict())
        print(f"error [{exc.code}]: {exc.message}", file=sys.stderr)
        return 2
    except ValueError as exc:
        # Unparseable numeric settings from the environment
        print(f"error [INVALID_VALUE]: {exc}", file=sys.stderr)
        return 2


def _radii(method: DistanceMethod, near: float | None, far: float | None) -> tuple[float, float]:
    if method is DistanceMethod.PLANAR_DEGREES:
        defaults = (PLANAR_NEAR_RADIUS_DEG, PLANAR_FAR_RADIUS_DEG)
    else:
        defaults = (DEFAULT_NEAR_RADIUS_KM, DEFAULT_FAR_RADIUS_KM)
    return (near if near is not None else defaults[0], far if far is not None else defaults[1])


if __name__ == "__main__":
    raise SystemExit(main())
