# """
# Error taxonomy shared by ingestion, engine and the interactive layer.
# """
from __future__ import annotations

from typing import Any, Literal

ShapeKind = Literal["empty", "length_mismatch", "not_1d"]
ThicknessKind = Literal["empty", "degenerate_range", "non_positive", "format"]


class SpectrumShapeError(ValueError):
    """Spectra cannot be combined: empty, not 1-D, or misaligned lengths."""

    def __init__(self, kind: ShapeKind, dimension: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.dimension = dimension


class ThicknessError(ValueError):
    """Thickness input is malformed or expands to nothing usable."""

    def __init__(self, kind: ThicknessKind, value: Any, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.value = value


class PromptAborted(RuntimeError):
    """The user cancelled a prompt or ran out of attempts."""


class ExportError(RuntimeError):
    """The export target is unavailable or refused to save."""
