#"""
#Domain models (v1.0.0)
#
#Pydantic v2 models define validated run configuration. Spectra are frozen
#containers of read-only numpy arrays; results are carried as xarray Datasets
#with named coordinates.
#"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, NamedTuple

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from eu2rl_app.domain.errors import SpectrumShapeError

# --- Basic enums/types ---
ExporterName = Literal["csv", "html", "png", "origin"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def _frozen(arr: NDArray) -> NDArray:
    arr.setflags(write=False)
    return arr


def check_aligned(frequency: NDArray, epsilon: NDArray, mu: NDArray) -> None:
    """Raise SpectrumShapeError unless all three spectra are 1-D, non-empty and equal length."""
    for dim, arr in (("frequency", frequency), ("epsilon", epsilon), ("mu", mu)):
        if arr.ndim != 1:
            raise SpectrumShapeError("not_1d", dim, f"{dim} must be 1-D, got shape {arr.shape}")
    n = frequency.size
    if n == 0:
        raise SpectrumShapeError("empty", "frequency", "Spectra are empty (N=0)")
    for dim, arr in (("epsilon", epsilon), ("mu", mu)):
        if arr.size != n:
            raise SpectrumShapeError(
                "length_mismatch",
                dim,
                f"{dim} has {arr.size} samples but frequency has {n}",
            )


@dataclass(frozen=True, eq=False)
class MaterialSpectra:
    """Measured ε(f), μ(f) of one sample, index-aligned with frequency in GHz.

    Imaginary parts follow ε = ε′ − jε″ (loss stored negated). Arrays are
    copied on construction and marked read-only.
    """

    name: str
    frequency_ghz: NDArray[np.float64]
    epsilon: NDArray[np.complex128]
    mu: NDArray[np.complex128]

    def __post_init__(self) -> None:
        f = np.array(self.frequency_ghz, dtype=float)
        e = np.array(self.epsilon, dtype=complex)
        m = np.array(self.mu, dtype=complex)
        check_aligned(f, e, m)
        object.__setattr__(self, "frequency_ghz", _frozen(f))
        object.__setattr__(self, "epsilon", _frozen(e))
        object.__setattr__(self, "mu", _frozen(m))

    def __len__(self) -> int:
        return int(self.frequency_ghz.size)

    @property
    def eps_real(self) -> NDArray[np.float64]:
        return self.epsilon.real

    @property
    def eps_loss(self) -> NDArray[np.float64]:
        return -self.epsilon.imag

    @property
    def mu_real(self) -> NDArray[np.float64]:
        return self.mu.real

    @property
    def mu_loss(self) -> NDArray[np.float64]:
        return -self.mu.imag


class MaximumAbsorption(NamedTuple):
    freq_index: int
    thickness_index: int
    value: float

    @property
    def absorbed(self) -> bool:
        # (0, 0, 0.0) is returned when nothing in the table drops below 0 dB
        return self.value < 0.0


@dataclass(frozen=True, eq=False)
class RLResult:
    """Reflection-loss sweep for one sample.

    `data` is an xarray.Dataset with `rl_db(frequency_ghz, thickness_mm)` and the
    measured spectra on `frequency_ghz`. Not validated here to avoid heavy import.
    """

    name: str
    data: object  # xarray.Dataset expected at runtime
    maximum: MaximumAbsorption
    thicknesses_mm: tuple[float, ...] = field(default=())


# --- Configuration ---
class ExportConfig(BaseModel):
    include_spectra: bool = True
    write_summary: bool = True


class RunConfig(BaseModel):
    output_dir: Path = Field(default_factory=lambda: Path.cwd() / "eu2rl_out")
    thickness: str | None = None  # "3", "2, 3, 4" or "2:0.01:6"
    exporter: ExporterName = "csv"
    max_attempts: int = Field(3, ge=1)
    max_workers: int | None = Field(None, ge=1)
    log_level: LogLevel = "INFO"
    export: ExportConfig = ExportConfig()
    version: str = "1.0.0"
