"""Case-study configuration loaded from environment variables.

All values have defaults matching the Qatar case study, so
``StudyConfig()`` describes the reference run and ``StudyConfig.from_env()``
only needs the variables a user wants to change.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out of
    its valid range, before any data is loaded.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

from site_pixels.core.constants import (
    DEFAULT_FAR_RADIUS_KM,
    DEFAULT_GRID_D_LAT,
    DEFAULT_GRID_D_LON,
    DEFAULT_LAT_RASTER,
    DEFAULT_LON_RASTER,
    DEFAULT_NEAR_RADIUS_KM,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    PLANAR_FAR_RADIUS_DEG,
    PLANAR_NEAR_RADIUS_DEG,
    RAW_COORD_SCALE,
    RAW_MISSING_VALUE,
    STUDY_BBOX,
)
from site_pixels.core.exceptions import ValidationError
from site_pixels.models.buffer import DistanceMethod

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class StudyConfig:
    """Immutable case-study configuration.

    Attributes:
        data_dir: Directory holding the raster and vector input files.
        output_dir: Directory for the map image and extraction report.
        sites_file: CSV of ``label,lon,lat`` rows; empty uses the built-in sites.
        lon_raster: Longitude raster file name (relative to ``data_dir``).
        lat_raster: Latitude raster file name (relative to ``data_dir``).
        boundary_files: Vector files drawn under the pixels, in order.
        distance_method: ``"geodesic"`` (km) or ``"planar_degrees"``.
        near_radius: Inner buffer radius, in the method's unit.
        far_radius: Outer buffer radius, in the method's unit.
        bbox: Region of interest ``(min_lon, min_lat, max_lon, max_lat)``.
        grid_d_lat: Satellite north-south sampling interval (degrees).
        grid_d_lon: Satellite east-west sampling interval (degrees).
        raw_scale: Divisor turning raw raster values into degrees.
        missing_value: Raw raster sentinel for missing pixels.
        render_map: Whether to render the overview map.
        log_level: Logging level name for the CLI.
    """

    data_dir: str = "data"
    output_dir: str = "reports"
    sites_file: str = ""
    lon_raster: str = DEFAULT_LON_RASTER
    lat_raster: str = DEFAULT_LAT_RASTER
    boundary_files: tuple[str, ...] = ()
    distance_method: str = DistanceMethod.GEODESIC.value
    near_radius: float = DEFAULT_NEAR_RADIUS_KM
    far_radius: float = DEFAULT_FAR_RADIUS_KM
    bbox: tuple[float, float, float, float] = STUDY_BBOX
    grid_d_lat: float = DEFAULT_GRID_D_LAT
    grid_d_lon: float = DEFAULT_GRID_D_LON
    raw_scale: float = RAW_COORD_SCALE
    missing_value: int = RAW_MISSING_VALUE
    render_map: bool = True
    log_level: str = "INFO"

    @property
    def method(self) -> DistanceMethod:
        """The configured distance convention as an enum."""
        return DistanceMethod(self.distance_method)

    @property
    def lon_raster_path(self) -> Path:
        return Path(self.data_dir) / self.lon_raster

    @property
    def lat_raster_path(self) -> Path:
        return Path(self.data_dir) / self.lat_raster

    @property
    def boundary_paths(self) -> list[Path]:
        return [Path(self.data_dir) / name for name in self.boundary_files]

    @classmethod
    def from_env(cls) -> StudyConfig:
        """Load and validate configuration from environment variables.

        Radii default to 5/10 km for the geodesic method and 0.05/0.10
        degrees for the planar method when not set explicitly.

        Raises:
            ConfigValidationError: If a value is out of range or cannot
                be interpreted.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``SITE_PIXELS_NEAR_RADIUS=abc``).
        """
        method = os.getenv("SITE_PIXELS_DISTANCE_METHOD", DistanceMethod.GEODESIC.value)
        if method == DistanceMethod.PLANAR_DEGREES.value:
            near_default, far_default = PLANAR_NEAR_RADIUS_DEG, PLANAR_FAR_RADIUS_DEG
        else:
            near_default, far_default = DEFAULT_NEAR_RADIUS_KM, DEFAULT_FAR_RADIUS_KM

        config = cls(
            data_dir=os.getenv("SITE_PIXELS_DATA_DIR", "data"),
            output_dir=os.getenv("SITE_PIXELS_OUTPUT_DIR", "reports"),
            sites_file=os.getenv("SITE_PIXELS_SITES_FILE", ""),
            lon_raster=os.getenv("SITE_PIXELS_LON_RASTER", DEFAULT_LON_RASTER),
            lat_raster=os.getenv("SITE_PIXELS_LAT_RASTER", DEFAULT_LAT_RASTER),
            boundary_files=_parse_list(os.getenv("SITE_PIXELS_BOUNDARY_FILES", "")),
            distance_method=method,
            near_radius=float(os.getenv("SITE_PIXELS_NEAR_RADIUS", str(near_default))),
            far_radius=float(os.getenv("SITE_PIXELS_FAR_RADIUS", str(far_default))),
            bbox=_parse_bbox(os.getenv("SITE_PIXELS_BBOX", "")),
            grid_d_lat=float(os.getenv("SITE_PIXELS_GRID_D_LAT", str(DEFAULT_GRID_D_LAT))),
            grid_d_lon=float(os.getenv("SITE_PIXELS_GRID_D_LON", str(DEFAULT_GRID_D_LON))),
            raw_scale=float(os.getenv("SITE_PIXELS_RAW_SCALE", str(RAW_COORD_SCALE))),
            missing_value=int(os.getenv("SITE_PIXELS_MISSING_VALUE", str(RAW_MISSING_VALUE))),
            render_map=_parse_bool(
                "SITE_PIXELS_RENDER_MAP", os.getenv("SITE_PIXELS_RENDER_MAP", "true")
            ),
            log_level=os.getenv("SITE_PIXELS_LOG_LEVEL", "INFO").upper(),
        )
        validate_config(config)
        return config


def validate_config(config: StudyConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    valid_methods = {m.value for m in DistanceMethod}
    if config.distance_method not in valid_methods:
        raise ConfigValidationError(
            "SITE_PIXELS_DISTANCE_METHOD",
            config.distance_method,
            f"must be one of {sorted(valid_methods)}",
        )

    if not _positive(config.near_radius):
        raise ConfigValidationError(
            "SITE_PIXELS_NEAR_RADIUS", config.near_radius, "must be a finite value > 0"
        )

    if not _positive(config.far_radius):
        raise ConfigValidationError(
            "SITE_PIXELS_FAR_RADIUS", config.far_radius, "must be a finite value > 0"
        )

    if config.near_radius > config.far_radius:
        raise ConfigValidationError(
            "SITE_PIXELS_NEAR_RADIUS",
            config.near_radius,
            f"must be <= far radius ({config.far_radius})",
        )

    if not _positive(config.grid_d_lat):
        raise ConfigValidationError(
            "SITE_PIXELS_GRID_D_LAT", config.grid_d_lat, "must be a finite value > 0 (degrees)"
        )

    if not _positive(config.grid_d_lon):
        raise ConfigValidationError(
            "SITE_PIXELS_GRID_D_LON", config.grid_d_lon, "must be a finite value > 0 (degrees)"
        )

    if not _positive(config.raw_scale):
        raise ConfigValidationError(
            "SITE_PIXELS_RAW_SCALE", config.raw_scale, "must be a finite value > 0"
        )

    min_lon, min_lat, max_lon, max_lat = config.bbox
    if not (MIN_LONGITUDE <= min_lon < max_lon <= MAX_LONGITUDE):
        raise ConfigValidationError(
            "SITE_PIXELS_BBOX",
            config.bbox,
            f"longitudes must satisfy {MIN_LONGITUDE} <= min < max <= {MAX_LONGITUDE}",
        )
    if not (MIN_LATITUDE <= min_lat < max_lat <= MAX_LATITUDE):
        raise ConfigValidationError(
            "SITE_PIXELS_BBOX",
            config.bbox,
            f"latitudes must satisfy {MIN_LATITUDE} <= min < max <= {MAX_LATITUDE}",
        )

    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigValidationError(
            "SITE_PIXELS_LOG_LEVEL", config.log_level, "must be a logging level name"
        )

    if not config.data_dir:
        raise ConfigValidationError("SITE_PIXELS_DATA_DIR", config.data_dir, "must not be empty")

    if not config.output_dir:
        raise ConfigValidationError(
            "SITE_PIXELS_OUTPUT_DIR", config.output_dir, "must not be empty"
        )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _parse_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _parse_bbox(raw: str) -> tuple[float, float, float, float]:
    if not raw.strip():
        return STUDY_BBOX
    parts = _parse_list(raw)
    if len(parts) != 4:
        raise ConfigValidationError(
            "SITE_PIXELS_BBOX", raw, "expected 'min_lon,min_lat,max_lon,max_lat'"
        )
    try:
        min_lon, min_lat, max_lon, max_lat = (float(p) for p in parts)
    except ValueError as exc:
        raise ConfigValidationError("SITE_PIXELS_BBOX", raw, "values must be numeric") from exc
    return (min_lon, min_lat, max_lon, max_lat)


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")
