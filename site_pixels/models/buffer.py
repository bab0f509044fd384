"""Typed models for buffer zones and extracted pixels.

Defines the data structures exchanged between the buffer extractor,
the renderer and the report writer:

- ``DistanceMethod``: How distances and radii are measured
- ``BufferZone``: Disc of a given radius around one site
- ``ExtractedPixel``: A pixel found inside a buffer, with its source ID
- ``BufferExtraction``: Near and far extraction results for one run

Design notes:
- All models are frozen dataclasses.
- Radius units are tied to ``DistanceMethod``: kilometres for
  ``GEODESIC``, degrees for ``PLANAR_DEGREES``.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from site_pixels.core.exceptions import ValidationError

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from site_pixels.models.geo import GeoPoint, Site


class ModelValidationError(ValidationError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        super().__init__(f"{model}.{field_name}={value!r}: {message}")


class DistanceMethod(enum.Enum):
    """Distance convention for buffers and extraction.

    Values:
        GEODESIC:       WGS 84 ellipsoidal distance, radius in kilometres.
        PLANAR_DEGREES: Euclidean distance in lon/lat space, radius in
                        degrees.  Only meaningful over a few degrees near
                        the equator.
    """

    GEODESIC = "geodesic"
    PLANAR_DEGREES = "planar_degrees"

    @property
    def unit(self) -> str:
        return "km" if self is DistanceMethod.GEODESIC else "deg"


def validate_radius(radius: float, *, model: str = "BufferZone") -> None:
    """Reject non-positive or non-finite radii.

    Raises:
        ModelValidationError: If ``radius`` is not a finite value > 0.
    """
    if not math.isfinite(radius) or radius <= 0:
        raise ModelValidationError(model, "radius", radius, "must be a finite value > 0")


@dataclass(frozen=True, slots=True)
class BufferZone:
    """A buffer of fixed radius around a site.

    Attributes:
        site: The site at the centre of the zone.
        radius: Radius in ``method.unit``.
        method: Distance convention used to build the zone.
        geometry: Shapely polygon approximating the zone in WGS 84.
    """

    site: Site
    radius: float
    method: DistanceMethod = DistanceMethod.GEODESIC
    geometry: BaseGeometry | None = None

    def __post_init__(self) -> None:
        validate_radius(self.radius)


@dataclass(frozen=True, slots=True)
class ExtractedPixel:
    """A candidate pixel that fell inside a buffer.

    Attributes:
        point: Pixel location.
        pixel_id: ID of the source raster record.
        index: Position of the pixel in the candidate sequence.
        site_label: Label of the nearest site.
        distance: Distance to the nearest site, in the method's unit.
    """

    point: GeoPoint
    pixel_id: int
    index: int
    site_label: str
    distance: float

    def to_dict(self) -> dict[str, object]:
        return {
            "pixel_id": self.pixel_id,
            "lon": self.point.lon,
            "lat": self.point.lat,
            "site": self.site_label,
            "distance": self.distance,
        }


@dataclass(frozen=True, slots=True)
class BufferExtraction:
    """Pixels extracted for the near and far radii of one run.

    Attributes:
        near: Pixels within ``near_radius`` of any site.
        far: Pixels within ``far_radius`` of any site.
        near_radius: Inner radius, in ``method.unit``.
        far_radius: Outer radius, in ``method.unit``.
        method: Distance convention used.
    """

    near: tuple[ExtractedPixel, ...]
    far: tuple[ExtractedPixel, ...]
    near_radius: float
    far_radius: float
    method: DistanceMethod = DistanceMethod.GEODESIC

    @property
    def near_ids(self) -> frozenset[int]:
        return frozenset(p.pixel_id for p in self.near)

    @property
    def far_ids(self) -> frozenset[int]:
        return frozenset(p.pixel_id for p in self.far)
