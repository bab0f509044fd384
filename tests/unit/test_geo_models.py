"""Tests for the geographic and buffer value types."""

from __future__ import annotations

import math

import pytest

from site_pixels.core.exceptions import CoordinateValidationError, MissingValueError
from site_pixels.models.buffer import (
    BufferExtraction,
    BufferZone,
    DistanceMethod,
    ExtractedPixel,
    ModelValidationError,
)
from site_pixels.models.geo import GeoPoint, Site, validate_wgs84_coordinate
from site_pixels.models.resolution import ResolutionResult


class TestGeoPoint:
    def test_valid(self) -> None:
        p = GeoPoint(51.25, 26.0)
        assert p.as_tuple() == (51.25, 26.0)

    @pytest.mark.parametrize(("lon", "lat"), [(180.0, 90.0), (-180.0, -90.0), (0.0, 0.0)])
    def test_bounds_inclusive(self, lon: float, lat: float) -> None:
        GeoPoint(lon, lat)

    @pytest.mark.parametrize(("lon", "lat"), [(181.0, 0.0), (0.0, 90.5), (math.inf, 0.0)])
    def test_out_of_range(self, lon: float, lat: float) -> None:
        with pytest.raises(CoordinateValidationError):
            GeoPoint(lon, lat)

    def test_nan_is_missing_value(self) -> None:
        with pytest.raises(MissingValueError):
            GeoPoint(math.nan, 25.0)

    def test_frozen(self) -> None:
        p = GeoPoint(51.0, 25.0)
        with pytest.raises(AttributeError):
            p.lon = 0.0  # type: ignore[misc]

    def test_context_in_message(self) -> None:
        with pytest.raises(CoordinateValidationError, match="candidate 7"):
            validate_wgs84_coordinate(0.0, 99.0, context="candidate 7")


class TestSite:
    def test_at(self) -> None:
        site = Site.at("A", 51.25, 26.0)
        assert site.label == "A"
        assert (site.lon, site.lat) == (51.25, 26.0)

    def test_invalid_coordinates(self) -> None:
        with pytest.raises(CoordinateValidationError):
            Site.at("X", 51.25, 126.0)


class TestBufferModels:
    def test_unit_per_method(self) -> None:
        assert DistanceMethod.GEODESIC.unit == "km"
        assert DistanceMethod.PLANAR_DEGREES.unit == "deg"

    def test_method_from_value(self) -> None:
        assert DistanceMethod("planar_degrees") is DistanceMethod.PLANAR_DEGREES

    @pytest.mark.parametrize("radius", [0.0, -0.05, math.nan])
    def test_zone_rejects_bad_radius(self, radius: float) -> None:
        with pytest.raises(ModelValidationError) as exc_info:
            BufferZone(site=Site.at("A", 51.25, 26.0), radius=radius)
        assert exc_info.value.field_name == "radius"

    def test_extracted_pixel_dict(self) -> None:
        pixel = ExtractedPixel(
            point=GeoPoint(51.0, 25.0), pixel_id=42, index=3, site_label="A", distance=1.5
        )
        assert pixel.to_dict() == {
            "pixel_id": 42,
            "lon": 51.0,
            "lat": 25.0,
            "site": "A",
            "distance": 1.5,
        }

    def test_extraction_id_sets(self) -> None:
        a = ExtractedPixel(GeoPoint(51.0, 25.0), 1, 0, "A", 0.5)
        b = ExtractedPixel(GeoPoint(51.0, 25.05), 2, 1, "A", 5.5)
        extraction = BufferExtraction(near=(a,), far=(a, b), near_radius=5.0, far_radius=10.0)
        assert extraction.near_ids == {1}
        assert extraction.far_ids == {1, 2}


class TestResolutionResult:
    def test_to_dict(self) -> None:
        result = ResolutionResult(res_ns_km=5.5, res_we_km=5.0, lat=25.0, d_lat=0.05, d_lon=0.05)
        assert result.to_dict()["res_we_km"] == 5.0
        assert result.as_dict() == {"res.NS": 5.5, "res.WE": 5.0}
