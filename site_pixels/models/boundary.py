"""Data model for a vector boundary layer (coastline, borders, admin areas)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True, slots=True)
class BoundaryLayer:
    """Geometries of one vector layer, clipped to the region of interest.

    Attributes:
        name: Display name of the layer (defaults to the file stem).
        geometries: Shapely geometries in WGS 84.
        source_file: Path of the vector file the layer was read from.
        properties: Attribute records aligned with ``geometries``.
    """

    name: str
    geometries: tuple[BaseGeometry, ...] = ()
    source_file: str = ""
    properties: tuple[dict[str, object], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.geometries)

    @property
    def is_empty(self) -> bool:
        return not self.geometries
