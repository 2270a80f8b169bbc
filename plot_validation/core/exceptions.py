"""Plot validation exception taxonomy.

Only problems that make the whole run meaningless are raised as
exceptions. Everything that concerns a single plot is reported as a
failed ``ValidationStep`` instead, so diagnostics accumulate.

Taxonomy categories
-------------------
- ``StructuralError``: input is not a decomposable FeatureCollection.
- ``SessionError``: misuse of an ``EditSession`` by its caller.
- ``SubmissionGateError``: validated features requested without a passing run.
- ``ConfigValidationError``: configuration out of range (see ``core.config``).

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for API responses and logging.
"""

from __future__ import annotations


class PlotValidationError(Exception):
    """Base exception for all plot-validation errors.

    Attributes:
        message: Human-readable error description.
        stage: Engine stage where the error occurred
            (e.g. ``"parse"``, ``"session"``).
        code: Machine-readable error code (e.g. ``"NOT_A_FEATURE_COLLECTION"``).
        feature_index: Zero-based index of the offending feature, or
            ``None`` when the error is not tied to one feature.
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
        feature_index: int | None = None,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.feature_index = feature_index
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, StructuralError):
            return "structural"
        if isinstance(self, SubmissionGateError):
            return "gate"
        if isinstance(self, SessionError):
            return "session"
        return "engine"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "feature_index": self.feature_index,
        }


class StructuralError(PlotValidationError):
    """The input is not a well-formed FeatureCollection. Fatal for the run."""

    default_stage = "parse"
    default_code = "STRUCTURAL_ERROR"


class SessionError(PlotValidationError):
    """An ``EditSession`` was used incorrectly."""

    default_stage = "session"
    default_code = "SESSION_ERROR"


class UnknownPlotError(SessionError):
    """A patch referenced a plot id that the session does not hold."""

    default_code = "UNKNOWN_PLOT_ID"

    def __init__(self, plot_id: str) -> None:
        self.plot_id = plot_id
        super().__init__(f"No plot with id {plot_id!r} in this session")


class SubmissionGateError(SessionError):
    """Validated features were requested but the collection has not passed."""

    default_code = "SUBMISSION_GATE_CLOSED"
