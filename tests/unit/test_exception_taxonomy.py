"""Tests for the exception taxonomy.

Validates:
- PipelineError hierarchy and structured attributes
- Category classification (validation, data_quality, permanent, transient)
- ``to_error_dict()`` produces stable payload keys
- All stage exceptions are PipelineError subclasses with a stage set
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from site_pixels.activities.estimate_resolution import ResolutionInputError
from site_pixels.activities.extract_pixels import ExtractionError
from site_pixels.activities.load_boundaries import BoundaryLoadError
from site_pixels.activities.load_pixel_grid import PixelLoadError
from site_pixels.activities.load_sites import SiteLoadError, SiteValidationError
from site_pixels.activities.render_map import RenderError
from site_pixels.activities.write_report import ReportWriteError
from site_pixels.core.config import ConfigValidationError
from site_pixels.core.exceptions import (
    CoordinateValidationError,
    DataQualityError,
    MissingValueError,
    PermanentError,
    PipelineError,
    ValidationError,
)
from site_pixels.models.buffer import ModelValidationError


class TestPipelineErrorBase:
    """PipelineError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = PipelineError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = PipelineError(
            "fail",
            stage="load_pixel_grid",
            code="PIXEL_LOAD_FAILED",
            retryable=True,
            correlation_id="abc-123",
        )
        assert err.stage == "load_pixel_grid"
        assert err.code == "PIXEL_LOAD_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "abc-123"

    def test_str_is_message(self) -> None:
        assert str(PipelineError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        err = PipelineError("x", stage="s", code="C", retryable=True, correlation_id="id")
        d = err.to_error_dict()
        assert set(d) == {"category", "code", "stage", "message", "retryable", "correlation_id"}
        assert d["category"] == "transient"

    def test_non_retryable_base_is_permanent(self) -> None:
        assert PipelineError("x").category == "permanent"


class TestCategories:
    """Category base classes."""

    def test_validation(self) -> None:
        err = ValidationError("bad")
        assert err.category == "validation"
        assert err.code == "VALIDATION_FAILED"
        assert err.retryable is False

    def test_data_quality(self) -> None:
        err = DataQualityError("sentinel")
        assert err.category == "data_quality"
        assert err.code == "DATA_QUALITY_FAILED"

    def test_permanent(self) -> None:
        assert PermanentError("io").category == "permanent"

    def test_coordinate_is_validation(self) -> None:
        err = CoordinateValidationError("lat 95")
        assert err.category == "validation"
        assert err.code == "COORDINATE_INVALID"

    def test_missing_value_is_data_quality(self) -> None:
        err = MissingValueError("nan")
        assert err.category == "data_quality"
        assert err.code == "MISSING_VALUE"

    def test_code_override(self) -> None:
        assert DataQualityError("x", code="RASTER_SHAPE_MISMATCH").code == "RASTER_SHAPE_MISMATCH"


class TestStageExceptions:
    """Every stage exception belongs to the taxonomy."""

    VALIDATION: ClassVar[list[type[PipelineError]]] = [
        ResolutionInputError,
        ExtractionError,
        SiteValidationError,
    ]
    PERMANENT: ClassVar[list[type[PipelineError]]] = [
        SiteLoadError,
        PixelLoadError,
        BoundaryLoadError,
        RenderError,
        ReportWriteError,
    ]

    @pytest.mark.parametrize("cls", VALIDATION)
    def test_validation_stage_errors(self, cls: type[PipelineError]) -> None:
        err = cls("x")
        assert isinstance(err, ValidationError)
        assert err.stage
        assert err.code

    @pytest.mark.parametrize("cls", PERMANENT)
    def test_permanent_stage_errors(self, cls: type[PipelineError]) -> None:
        err = cls("x")
        assert err.category == "permanent"
        assert err.retryable is False
        assert err.stage

    def test_config_error(self) -> None:
        err = ConfigValidationError("SITE_PIXELS_BBOX", (1, 2), "bad")
        assert err.category == "validation"
        assert err.stage == "config"
        assert "SITE_PIXELS_BBOX" in err.message

    def test_model_error(self) -> None:
        err = ModelValidationError("BufferZone", "radius", -1.0, "must be > 0")
        assert err.category == "validation"
        assert err.message == "BufferZone.radius=-1.0: must be > 0"
