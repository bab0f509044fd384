"""Pydantic schema for the extraction report.

The report is the record of a run: which sites and radii were used, the
resolution of the satellite grid around the study area, and the pixels
found in the near and far buffers.  It is written as JSON next to a
plain CSV list of pixel IDs and coordinates used for data retrieval.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Sequence

    from site_pixels.models.buffer import BufferExtraction, ExtractedPixel
    from site_pixels.models.geo import Site
    from site_pixels.models.resolution import ResolutionResult

SCHEMA_VERSION = "site-pixels-report-v1"


class SiteEntry(BaseModel):
    label: str
    lon: float
    lat: float


class ResolutionEntry(BaseModel):
    """Ground resolution at one latitude (km)."""

    lat: float
    d_lat: float
    d_lon: float
    res_ns_km: float
    res_we_km: float


class PixelEntry(BaseModel):
    """One extracted pixel.

    Attributes:
        pixel_id: Flat index of the pixel in the source rasters.
        lon: Pixel longitude (degrees).
        lat: Pixel latitude (degrees).
        site: Label of the nearest site.
        distance: Distance to the nearest site, in ``ExtractionSection.unit``.
    """

    pixel_id: int
    lon: float
    lat: float
    site: str
    distance: float

    @classmethod
    def from_pixel(cls, pixel: ExtractedPixel) -> PixelEntry:
        return cls(**pixel.to_dict())


class ExtractionSection(BaseModel):
    method: str = "geodesic"
    unit: str = "km"
    near_radius: float = 0.0
    far_radius: float = 0.0
    near: list[PixelEntry] = Field(default_factory=list)
    far: list[PixelEntry] = Field(default_factory=list)


class ExtractionReport(BaseModel):
    """Top-level report document.

    Attributes:
        schema_version: Report schema identifier.
        generated_at: Report timestamp (ISO 8601, UTC).
        run_id: Identifier of the run that produced the report.
        bbox: Region of interest ``[min_lon, min_lat, max_lon, max_lat]``.
        pixel_count: Pixels in the grid after filtering and clipping.
        missing_count: Raw pixels dropped as missing values.
        sites: Sites used for the extraction.
        resolution: Resolution table of the satellite grid.
        extraction: Near and far buffer results.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    generated_at: str = ""
    run_id: str = ""
    bbox: list[float] = Field(default_factory=list)
    pixel_count: int = 0
    missing_count: int = 0
    sites: list[SiteEntry] = Field(default_factory=list)
    resolution: list[ResolutionEntry] = Field(default_factory=list)
    extraction: ExtractionSection = Field(default_factory=ExtractionSection)

    model_config = {"populate_by_name": True}

    @classmethod
    def build(
        cls,
        *,
        sites: Sequence[Site],
        extraction: BufferExtraction,
        resolution: Sequence[ResolutionResult] = (),
        bbox: Sequence[float] = (),
        pixel_count: int = 0,
        missing_count: int = 0,
        run_id: str = "",
        timestamp: str = "",
    ) -> ExtractionReport:
        """Assemble a report from run results."""
        return cls(
            generated_at=timestamp or datetime.now(UTC).isoformat(),
            run_id=run_id,
            bbox=list(bbox),
            pixel_count=pixel_count,
            missing_count=missing_count,
            sites=[SiteEntry(label=s.label, lon=s.lon, lat=s.lat) for s in sites],
            resolution=[ResolutionEntry(**r.to_dict()) for r in resolution],
            extraction=ExtractionSection(
                method=extraction.method.value,
                unit=extraction.method.unit,
                near_radius=extraction.near_radius,
                far_radius=extraction.far_radius,
                near=[PixelEntry.from_pixel(p) for p in extraction.near],
                far=[PixelEntry.from_pixel(p) for p in extraction.far],
            ),
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string, with ``$schema`` as the version key."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
