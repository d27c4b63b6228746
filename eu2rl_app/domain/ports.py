# """
# Ports (interfaces) for adapters. The CLI and orchestration depend ONLY on these.
# """
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .models import MaterialSpectra, RLResult


class ReportExporter(ABC):
    @abstractmethod
    def export_spectrum(self, spectra: MaterialSpectra) -> None:
        """Stage the ε/μ workbook: Frequency (GHz), e1, e2, u1, u2."""

    @abstractmethod
    def export_table(self, result: RLResult) -> None:
        """Stage the RL matrix: frequency (GHz) × thickness (mm), values in dB."""

    @abstractmethod
    def save(self, directory: Path) -> list[Path]:
        """Persist everything staged so far; return the written paths."""


class PlotPresenter(ABC):
    @abstractmethod
    def rl_map(self, result: RLResult) -> Any:
        """Figure: heatmap of RL(f, d)."""

    @abstractmethod
    def rl_curves(self, result: RLResult, max_curves: int = 12) -> Any:
        """Figure: RL(f) lines, one per thickness (subsampled)."""

    @abstractmethod
    def spectra_plot(self, spectra: MaterialSpectra) -> Any:
        """Figure: ε′, ε″, μ′, μ″ against frequency."""
