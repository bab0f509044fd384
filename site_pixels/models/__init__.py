"""Data models and schemas.

Defines the value types passed between the load, compute and render
stages:
- GeoPoint / Site: Validated WGS 84 coordinates and labelled sites
- PixelGrid: Satellite pixel locations with source record IDs
- BufferZone / ExtractedPixel / BufferExtraction: Buffer extraction results
- BoundaryLayer: Vector layers drawn on the overview map
- ResolutionResult: Ground resolution of the satellite grid
- ExtractionReport: JSON report schema
"""

from site_pixels.models.boundary import BoundaryLayer
from site_pixels.models.buffer import (
    BufferExtraction,
    BufferZone,
    DistanceMethod,
    ExtractedPixel,
    ModelValidationError,
)
from site_pixels.models.geo import GeoPoint, Site, validate_wgs84_coordinate
from site_pixels.models.pixel_grid import PixelGrid
from site_pixels.models.report import ExtractionReport
from site_pixels.models.resolution import ResolutionResult

__all__ = [
    "BoundaryLayer",
    "BufferExtraction",
    "BufferZone",
    "DistanceMethod",
    "ExtractedPixel",
    "ExtractionReport",
    "GeoPoint",
    "ModelValidationError",
    "PixelGrid",
    "ResolutionResult",
    "Site",
    "validate_wgs84_coordinate",
]
