"""Data model for a satellite pixel-location grid.

A ``PixelGrid`` is the set of ground locations where the satellite
samples, each tagged with the ID of its source record so extracted
pixels can be traced back to the raw raster for data retrieval.

Raw LSA-SAF rasters store degrees multiplied by 10 000 as integers and
mark pixels off the Earth disc with the sentinel ``900000``.  Once
scaled, that sentinel becomes ``90.0`` which is a legal latitude, so the
sentinel must be removed *before* scaling (``from_raw_arrays``).
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from site_pixels.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    RAW_COORD_SCALE,
    RAW_MISSING_VALUE,
)
from site_pixels.core.exceptions import DataQualityError, MissingValueError, ValidationError
from site_pixels.models.geo import GeoPoint


@dataclass(frozen=True, slots=True)
class PixelGrid:
    """Validated satellite pixel locations.

    Attributes:
        points: Pixel locations, free of missing values.
        pixel_ids: Source record ID of each point (same length as ``points``).
        missing_count: Raw records dropped as missing-value sentinels.
        out_of_range_count: Raw records dropped for falling outside WGS 84.
        outside_bbox_count: Valid records dropped by the region-of-interest clip.
    """

    points: tuple[GeoPoint, ...] = ()
    pixel_ids: tuple[int, ...] = ()
    missing_count: int = 0
    out_of_range_count: int = 0
    outside_bbox_count: int = 0
    _coords: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.points) != len(self.pixel_ids):
            msg = (
                f"PixelGrid needs one pixel ID per point: "
                f"{len(self.points)} points, {len(self.pixel_ids)} IDs"
            )
            raise ValidationError(msg, stage="pixel_grid")
        coords = np.array([p.as_tuple() for p in self.points], dtype=np.float64).reshape(-1, 2)
        object.__setattr__(self, "_coords", coords)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[GeoPoint]:
        return iter(self.points)

    @property
    def lons(self) -> np.ndarray:
        """Longitudes as a float64 array (read-only view)."""
        view = self._coords[:, 0]
        view.flags.writeable = False
        return view

    @property
    def lats(self) -> np.ndarray:
        """Latitudes as a float64 array (read-only view)."""
        view = self._coords[:, 1]
        view.flags.writeable = False
        return view

    @classmethod
    def from_points(cls, points: Sequence[GeoPoint]) -> PixelGrid:
        """Wrap already-validated points; IDs are their positions."""
        return cls(points=tuple(points), pixel_ids=tuple(range(len(points))))

    @classmethod
    def from_raw_arrays(
        cls,
        lon_raw: np.ndarray | Sequence[float],
        lat_raw: np.ndarray | Sequence[float],
        *,
        scale: float = RAW_COORD_SCALE,
        missing_value: float = RAW_MISSING_VALUE,
        bbox: tuple[float, float, float, float] | None = None,
        strict: bool = False,
    ) -> PixelGrid:
        """Build a grid from raw longitude/latitude rasters.

        Pixel IDs are flat (row-major) indices into the raw arrays.

        Args:
            lon_raw: Raw longitude values (any shape).
            lat_raw: Raw latitude values (same shape as ``lon_raw``).
            scale: Divisor converting raw values to degrees.
            missing_value: Raw sentinel marking a missing pixel.
            bbox: Optional region of interest
                ``(min_lon, min_lat, max_lon, max_lat)``, inclusive.
            strict: Raise instead of dropping missing or out-of-range
                records.

        Raises:
            DataQualityError: If the arrays differ in shape, or if
                ``strict`` and any record is missing or out of range.
            ValidationError: If ``scale`` is not positive.
        """
        if scale <= 0:
            msg = f"Raw coordinate scale must be > 0, got {scale}"
            raise ValidationError(msg, stage="pixel_grid")

        lon_arr = np.asarray(lon_raw, dtype=np.float64)
        lat_arr = np.asarray(lat_raw, dtype=np.float64)
        if lon_arr.shape != lat_arr.shape:
            msg = (
                f"Longitude and latitude rasters differ in shape: "
                f"{lon_arr.shape} vs {lat_arr.shape}"
            )
            raise DataQualityError(msg, stage="pixel_grid", code="RASTER_SHAPE_MISMATCH")

        lon_arr = lon_arr.ravel()
        lat_arr = lat_arr.ravel()

        missing = (
            (lon_arr == missing_value)
            | (lat_arr == missing_value)
            | np.isnan(lon_arr)
            | np.isnan(lat_arr)
        )
        if strict and missing.any():
            first = int(np.flatnonzero(missing)[0])
            msg = (
                f"{int(missing.sum())} pixel(s) carry the missing-value sentinel "
                f"{missing_value!r} (first at index {first})"
            )
            raise MissingValueError(msg, stage="pixel_grid")

        with np.errstate(invalid="ignore"):
            lon_deg = lon_arr / scale
            lat_deg = lat_arr / scale
            in_range = (
                (lon_deg >= MIN_LONGITUDE)
                & (lon_deg <= MAX_LONGITUDE)
                & (lat_deg >= MIN_LATITUDE)
                & (lat_deg <= MAX_LATITUDE)
            )
        out_of_range = ~missing & ~in_range
        if strict and out_of_range.any():
            first = int(np.flatnonzero(out_of_range)[0])
            msg = (
                f"{int(out_of_range.sum())} pixel(s) outside WGS 84 bounds after scaling "
                f"(first at index {first}: lon={lon_deg[first]}, lat={lat_deg[first]})"
            )
            raise DataQualityError(msg, stage="pixel_grid", code="COORDINATE_OUT_OF_RANGE")

        valid = ~missing & in_range
        keep = valid
        if bbox is not None:
            min_lon, min_lat, max_lon, max_lat = bbox
            with np.errstate(invalid="ignore"):
                inside = (
                    (lon_deg >= min_lon)
                    & (lon_deg <= max_lon)
                    & (lat_deg >= min_lat)
                    & (lat_deg <= max_lat)
                )
            keep = valid & inside

        ids = np.flatnonzero(keep)
        points = tuple(GeoPoint(float(lon_deg[i]), float(lat_deg[i])) for i in ids)
        return cls(
            points=points,
            pixel_ids=tuple(int(i) for i in ids),
            missing_count=int(missing.sum()),
            out_of_range_count=int(out_of_range.sum()),
            outside_bbox_count=int(valid.sum() - keep.sum()),
        )
