"""Unified exception taxonomy.

Every domain exception inherits from ``PipelineError`` and carries
structured context fields so callers (the orchestrator, the CLI) can
report failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``: malformed coordinates or bad parameters.
- ``DataQualityError``: sentinel / missing values or inconsistent rasters
  reaching the computation.
- ``PermanentError``: unrecoverable I/O failures (unreadable files,
  unwritable output).

Nothing in this package is retried: all inputs are already in memory or
on local disk, so ``retryable`` is always ``False`` unless a caller says
otherwise.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"extract_pixels"``, ``"load_pixel_grid"``).
        code: Machine-readable error code (e.g. ``"RADIUS_INVALID"``).
        retryable: Whether retrying could succeed.
        correlation_id: Run identifier for traceability.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, DataQualityError):
            return "data_quality"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    default_code = "VALIDATION_FAILED"

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class DataQualityError(PipelineError):
    """Missing-value sentinels or inconsistent data reached the computation."""

    default_code = "DATA_QUALITY_FAILED"

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable failure (unreadable input, unwritable output)."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Shared concrete exceptions
# ---------------------------------------------------------------------------


class CoordinateValidationError(ValidationError):
    """Raised when a longitude or latitude is outside WGS 84 bounds."""

    default_code = "COORDINATE_INVALID"


class MissingValueError(DataQualityError):
    """Raised when a missing-value marker (NaN or sentinel) reaches the core."""

    default_code = "MISSING_VALUE"
