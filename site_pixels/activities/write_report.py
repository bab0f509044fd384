"""Write the extraction report and the pixel download list.

Two files are written to the output directory:

- ``extraction_report.json``: the full ``ExtractionReport`` document.
- ``pixel_download_list.csv``: one row per pixel in either buffer with
  its pixel ID, coordinates and a ``buffer`` column of ``near`` or
  ``far``.  This is the list handed to the satellite data server for
  retrieval.

Writing is idempotent: the same report overwrites the same paths.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from site_pixels.core.constants import DOWNLOAD_LIST_NAME, REPORT_JSON_NAME
from site_pixels.core.exceptions import PermanentError
from site_pixels.models.report import ExtractionReport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from site_pixels.models.buffer import BufferExtraction
    from site_pixels.models.geo import Site
    from site_pixels.models.resolution import ResolutionResult

logger = logging.getLogger("site_pixels.activities.write_report")

DOWNLOAD_LIST_COLUMNS = ("pixel_id", "lon", "lat", "site", "distance", "buffer")


class ReportWriteError(PermanentError):
    """Raised when report files cannot be written."""

    default_stage = "write_report"
    default_code = "REPORT_WRITE_FAILED"


def build_report(
    sites: Sequence[Site],
    extraction: BufferExtraction,
    *,
    resolution: Sequence[ResolutionResult] = (),
    bbox: Sequence[float] = (),
    pixel_count: int = 0,
    missing_count: int = 0,
    run_id: str = "",
) -> ExtractionReport:
    """Assemble the report document for one extraction run."""
    report = ExtractionReport.build(
        sites=sites,
        extraction=extraction,
        resolution=resolution,
        bbox=bbox,
        pixel_count=pixel_count,
        missing_count=missing_count,
        run_id=run_id,
    )
    logger.debug(
        "Report built | run_id=%s | sites=%d | near=%d | far=%d",
        run_id,
        len(report.sites),
        len(report.extraction.near),
        len(report.extraction.far),
    )
    return report


def write_report(report: ExtractionReport, out_dir: str | Path) -> dict[str, str]:
    """Write the JSON report and CSV download list to ``out_dir``.

    Returns:
        ``{"report_path": ..., "download_list_path": ...}``

    Raises:
        ReportWriteError: If the directory or files cannot be written.
    """
    out_dir = Path(out_dir)
    report_path = out_dir / REPORT_JSON_NAME
    download_path = out_dir / DOWNLOAD_LIST_NAME

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        report_path.write_text(report.to_json(), encoding="utf-8")
        with download_path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            writer.writerow(DOWNLOAD_LIST_COLUMNS)
            writer.writerows(download_rows(report))
    except OSError as exc:
        msg = f"Cannot write report to {out_dir}: {exc}"
        raise ReportWriteError(msg) from exc

    logger.info(
        "Report written | report=%s | download_list=%s | near=%d | far=%d",
        report_path,
        download_path,
        len(report.extraction.near),
        len(report.extraction.far),
    )
    return {"report_path": str(report_path), "download_list_path": str(download_path)}


def download_rows(report: ExtractionReport) -> list[tuple[object, ...]]:
    """Rows of the download list, ordered by pixel ID.

    Covers the union of both buffers; a pixel in the near buffer is
    labelled ``near`` whatever the order of the two radii.
    """
    near_ids = {p.pixel_id for p in report.extraction.near}
    pixels = {p.pixel_id: p for p in report.extraction.far}
    pixels.update((p.pixel_id, p) for p in report.extraction.near)
    return [
        (
            p.pixel_id,
            f"{p.lon:.4f}",
            f"{p.lat:.4f}",
            p.site,
            f"{p.distance:.4f}",
            "near" if p.pixel_id in near_ids else "far",
        )
        for p in sorted(pixels.values(), key=lambda p: p.pixel_id)
    ]
