from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from math import isfinite, pi
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from eu2rl_app.domain.errors import SpectrumShapeError, ThicknessError
from eu2rl_app.domain.models import MaximumAbsorption, check_aligned

# Speed of light expressed in GHz·mm, so that f [GHz] and d [mm] combine directly.
C0_GHZ_MM = 300.0


def _as_spectra(
    frequency: ArrayLike, epsilon: ArrayLike, mu: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.complex128], NDArray[np.complex128]]:
    f = np.asarray(frequency, dtype=float)
    e = np.asarray(epsilon, dtype=complex)
    m = np.asarray(mu, dtype=complex)
    check_aligned(f, e, m)
    return f, e, m


def _check_thickness(d: float) -> float:
    try:
        value = float(d)
    except (TypeError, ValueError) as e:
        raise ThicknessError("format", d, f"Thickness must be a number, got {d!r}") from e
    if not isfinite(value) or value <= 0.0:
        raise ThicknessError("non_positive", d, f"Thickness must be > 0 mm, got {d!r}")
    return value


def input_impedance(
    frequency: NDArray[np.float64],
    epsilon: NDArray[np.complex128],
    mu: NDArray[np.complex128],
    d_mm: float,
) -> NDArray[np.complex128]:
    """Normalized input impedance of a metal-backed slab of thickness d_mm.

    Z_in = sqrt(μ/ε) · tanh(j·2π·d/c0 · f · sqrt(μ·ε)), principal square roots.
    """
    z_ratio = np.sqrt(mu / epsilon)
    gamma_d = 1j * (2.0 * pi * d_mm / C0_GHZ_MM) * frequency * np.sqrt(mu * epsilon)
    return z_ratio * np.tanh(gamma_d)


def reflection_loss_db(z_in: NDArray[np.complex128]) -> NDArray[np.float64]:
    """RL = 20·log10|(Z_in − 1)/(Z_in + 1)|.

    Γ = 0 maps to −inf dB and Z_in = −1 to +inf dB; neither raises.
    """
    z = np.asarray(z_in, dtype=complex)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        num = np.abs(z - 1.0)
        den = np.abs(z + 1.0)
        gamma = np.where(den == 0.0, np.inf, num / np.where(den == 0.0, 1.0, den))
        return 20.0 * np.log10(gamma)


def compute_rl(
    frequency: ArrayLike, epsilon: ArrayLike, mu: ArrayLike, thickness: float
) -> NDArray[np.float64]:
    """Reflection loss (dB) over the N spectral samples at one thickness (mm).

    Raises SpectrumShapeError for N=0 or misaligned spectra and ThicknessError
    for a non-positive thickness.
    """
    f, e, m = _as_spectra(frequency, epsilon, mu)
    d = _check_thickness(thickness)
    with np.errstate(over="ignore", invalid="ignore"):
        z_in = input_impedance(f, e, m, d)
    return reflection_loss_db(z_in)


def compute_rl_sweep(
    frequency: ArrayLike,
    epsilon: ArrayLike,
    mu: ArrayLike,
    thicknesses: Sequence[float],
    *,
    max_workers: int | None = None,
) -> NDArray[np.float64]:
    """N×M table of RL (dB); column j is `compute_rl(..., thicknesses[j])`.

    Columns are independent. With `max_workers` > 1 they are computed on a
    thread pool; each column still lands at its own index.
    """
    f, e, m = _as_spectra(frequency, epsilon, mu)
    ds = [_check_thickness(d) for d in thicknesses]
    if not ds:
        raise ThicknessError("empty", thicknesses, "Thickness set is empty")

    table = np.empty((f.size, len(ds)), dtype=float)
    if max_workers is not None and max_workers > 1 and len(ds) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            columns = pool.map(lambda d: compute_rl(f, e, m, d), ds)
            for j, col in enumerate(columns):
                table[:, j] = col
    else:
        for j, d in enumerate(ds):
            table[:, j] = compute_rl(f, e, m, d)
    table.setflags(write=False)
    return table


def find_maximum_absorption(table: ArrayLike) -> MaximumAbsorption:
    """Locate the most negative RL in a frequency × thickness table.

    Row-major scan against an accumulator initialised at 0 dB, updating only on
    strictly smaller values: ties keep the first hit, NaN never wins, and a
    table with nothing below 0 dB yields (0, 0, 0.0).
    """
    t = np.asarray(table, dtype=float)
    if t.ndim != 2:
        raise SpectrumShapeError("not_1d", "table", f"RL table must be 2-D, got shape {t.shape}")
    if t.size == 0:
        raise SpectrumShapeError("empty", "table", "RL table is empty")
    scan = np.where(np.isnan(t), np.inf, t)
    flat = int(np.argmin(scan))  # argmin returns the first occurrence
    value = float(scan.flat[flat])
    if not value < 0.0:
        return MaximumAbsorption(0, 0, 0.0)
    i, j = np.unravel_index(flat, t.shape)
    return MaximumAbsorption(int(i), int(j), value)
