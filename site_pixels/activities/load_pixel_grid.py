"""Load the satellite pixel-location grid.

LSA-SAF distributes Meteosat pixel locations as two rasters, one holding
longitudes and one latitudes, both as scaled integers with a
missing-value sentinel for pixels off the Earth disc.  The rasters are
read with rasterio (GDAL's HDF5 driver handles the LSA-SAF files; any
single-band raster works) and merged into a ``PixelGrid`` clipped to the
region of interest.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from site_pixels.core.constants import RAW_COORD_SCALE, RAW_MISSING_VALUE
from site_pixels.core.exceptions import PermanentError
from site_pixels.models.pixel_grid import PixelGrid

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger("site_pixels.activities.load_pixel_grid")


class PixelLoadError(PermanentError):
    """Raised when a pixel-location raster cannot be read."""

    default_stage = "load_pixel_grid"
    default_code = "PIXEL_LOAD_FAILED"


def load_pixel_grid(
    lon_path: str | Path,
    lat_path: str | Path,
    *,
    bbox: tuple[float, float, float, float] | None = None,
    scale: float = RAW_COORD_SCALE,
    missing_value: float = RAW_MISSING_VALUE,
    strict: bool = False,
) -> PixelGrid:
    """Read longitude/latitude rasters into a ``PixelGrid``.

    Args:
        lon_path: Raster of raw longitudes (band 1).
        lat_path: Raster of raw latitudes (band 1).
        bbox: Region of interest ``(min_lon, min_lat, max_lon, max_lat)``.
        scale: Divisor converting raw values to degrees.
        missing_value: Raw missing-value sentinel.
        strict: Raise on missing or out-of-range records instead of
            dropping them.

    Raises:
        PixelLoadError: If either raster cannot be opened or read.
        DataQualityError: If the rasters differ in shape, or ``strict``
            and a record is missing.
    """
    start = time.monotonic()
    lon_raw = _read_band(Path(lon_path))
    lat_raw = _read_band(Path(lat_path))

    grid = PixelGrid.from_raw_arrays(
        lon_raw,
        lat_raw,
        scale=scale,
        missing_value=missing_value,
        bbox=bbox,
        strict=strict,
    )

    if grid.out_of_range_count:
        logger.warning(
            "Pixels outside WGS 84 bounds dropped | count=%d | lon=%s | lat=%s",
            grid.out_of_range_count,
            lon_path,
            lat_path,
        )

    logger.info(
        "Pixel grid loaded | raw=%d | missing=%d | outside_bbox=%d | kept=%d | duration=%.2fs",
        lon_raw.size,
        grid.missing_count,
        grid.outside_bbox_count,
        len(grid),
        time.monotonic() - start,
    )
    return grid


def _read_band(path: Path) -> np.ndarray:
    import rasterio
    from rasterio.errors import RasterioError

    try:
        with rasterio.open(path) as src:
            return src.read(1)
    except (RasterioError, OSError) as exc:
        msg = f"Cannot read pixel raster {path}: {exc}"
        raise PixelLoadError(msg) from exc
