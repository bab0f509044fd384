"""Shared constants: single source of truth.

Centralises the physical constants, raster encoding conventions and the
Qatar case-study defaults used by the loaders, the computations and the
renderer.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM: float = 6378.0
"""Spherical Earth radius used by the resolution estimate (equatorial, km)."""

METRES_PER_KM: float = 1000.0

WGS84_CRS: str = "EPSG:4326"

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# ---------------------------------------------------------------------------
# LSA-SAF pixel-location rasters
# ---------------------------------------------------------------------------

RAW_MISSING_VALUE: int = 900000
"""Sentinel stored in the raw integer rasters for pixels off the Earth disc."""

RAW_COORD_SCALE: float = 10000.0
"""Raw raster values are degrees multiplied by this factor."""

DEFAULT_LON_RASTER = "HDF5_LSASAF_MSG_LON_NAfr_4bytesPrecision"
DEFAULT_LAT_RASTER = "HDF5_LSASAF_MSG_LAT_NAfr_4bytesPrecision"

# Meteosat-10 design sampling interval (degrees)
DEFAULT_GRID_D_LAT = 0.05
DEFAULT_GRID_D_LON = 0.05

# ---------------------------------------------------------------------------
# Buffer radii
# ---------------------------------------------------------------------------

DEFAULT_NEAR_RADIUS_KM = 5.0
DEFAULT_FAR_RADIUS_KM = 10.0

# Degree-unit equivalents used by the planar approximation
PLANAR_NEAR_RADIUS_DEG = 0.05
PLANAR_FAR_RADIUS_DEG = 0.10

# ---------------------------------------------------------------------------
# Qatar case study
# ---------------------------------------------------------------------------

STUDY_BBOX: tuple[float, float, float, float] = (50.7, 24.4, 51.65, 26.4)
"""Region of interest ``(min_lon, min_lat, max_lon, max_lat)``."""

DEFAULT_SITES: tuple[tuple[str, float, float], ...] = (
    ("A", 51.25, 26.00),
    ("B", 51.40, 25.95),
    ("C", 51.25, 25.75),
    ("D", 50.80, 25.30),
    ("E", 50.83, 25.31),
    ("F", 50.80, 25.20),
)
"""Candidate solar PV sites as ``(label, lon, lat)``."""

REGION_LABELS: tuple[tuple[str, float, float], ...] = (
    ("Jarayan Al Batnah", 51.1, 24.9),
    ("Al Wakrah", 51.46, 25.0),
    ("Al Jumayliyah", 50.95, 25.4),
    ("Al Ghuwayriyha", 51.15, 25.785),
    ("Ar Rayyan", 51.431, 25.235),
    ("Ad Dawah", 51.58, 25.32),
    ("Umm Salal", 51.405, 25.46),
    ("Al Khawr", 51.39, 25.7),
    ("Ash Shamal", 51.21, 25.95),
)
"""Administrative region annotations as ``(name, lon, lat)``."""

# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

REPORT_JSON_NAME = "extraction_report.json"
DOWNLOAD_LIST_NAME = "pixel_download_list.csv"
MAP_IMAGE_NAME = "site_pixel_map.png"
