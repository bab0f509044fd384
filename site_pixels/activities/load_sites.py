"""Load candidate project sites.

Sites come either from the built-in Qatar case-study table or from a CSV
file with a ``label,lon,lat`` header.  Every row is validated; a bad row
fails the load with its row number rather than being skipped, since a
silently missing site would silently shrink the extraction.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from site_pixels.core.constants import DEFAULT_SITES
from site_pixels.core.exceptions import PermanentError, PipelineError, ValidationError
from site_pixels.models.geo import Site

logger = logging.getLogger("site_pixels.activities.load_sites")

REQUIRED_COLUMNS = ("label", "lon", "lat")


class SiteLoadError(PermanentError):
    """Raised when the site file cannot be read."""

    default_stage = "load_sites"
    default_code = "SITE_LOAD_FAILED"


class SiteValidationError(ValidationError):
    """Raised when a site row is malformed."""

    default_stage = "load_sites"
    default_code = "SITE_INVALID"


def default_sites() -> tuple[Site, ...]:
    """The six candidate solar PV sites of the case study (A-F)."""
    return tuple(Site.at(label, lon, lat) for label, lon, lat in DEFAULT_SITES)


def load_sites(path: str | Path | None = None) -> tuple[Site, ...]:
    """Load sites from ``path``, or the built-in table when ``path`` is empty.

    Raises:
        SiteLoadError: If the file cannot be read or lacks required columns.
        SiteValidationError: If a row has a blank label, duplicate label,
            non-numeric or out-of-range coordinates.
    """
    if not path:
        sites = default_sites()
        logger.info("Sites loaded | source=built-in | count=%d", len(sites))
        return sites

    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8") as fh:
            reader = csv.DictReader(fh)
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                msg = f"Site file {path} is missing column(s): {', '.join(missing)}"
                raise SiteLoadError(msg)
            sites = tuple(_row_to_site(row, line) for line, row in enumerate(reader, start=2))
    except OSError as exc:
        msg = f"Cannot read site file {path}: {exc}"
        raise SiteLoadError(msg) from exc

    labels = [s.label for s in sites]
    duplicates = sorted({label for label in labels if labels.count(label) > 1})
    if duplicates:
        msg = f"Duplicate site label(s) in {path}: {', '.join(duplicates)}"
        raise SiteValidationError(msg)

    logger.info("Sites loaded | source=%s | count=%d", path, len(sites))
    return sites


def _row_to_site(row: dict[str, str], line: int) -> Site:
    label = (row.get("label") or "").strip()
    if not label:
        msg = f"Row {line}: site label is empty"
        raise SiteValidationError(msg)
    try:
        lon = float(row.get("lon") or "")
        lat = float(row.get("lat") or "")
    except ValueError as exc:
        msg = f"Row {line} (site {label!r}): coordinates must be numeric"
        raise SiteValidationError(msg) from exc
    try:
        return Site.at(label, lon, lat)
    except PipelineError as exc:
        msg = f"Row {line} (site {label!r}): {exc.message}"
        raise SiteValidationError(msg) from exc
