from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import xarray as xr

from eu2rl_app.domain.models import MaterialSpectra, RLResult
from eu2rl_app.engine.reflection_loss import compute_rl_sweep, find_maximum_absorption

logger = logging.getLogger(__name__)


def max_rl_line(result: RLResult) -> str:
    """Console line for the strongest absorption in a result."""
    m = result.maximum
    if not m.absorbed:
        return "No absorption found (RL >= 0 dB everywhere)."
    ds = result.data
    f = float(ds["frequency_ghz"].values[m.freq_index])  # type: ignore[index]
    d = float(ds["thickness_mm"].values[m.thickness_index])  # type: ignore[index]
    return f"Max RL = {m.value:.2f} dB, @ {f:.2f} GHz, with {d:.2f} mm."


class RLEngine:
    """Sweeps a metal-backed single-layer absorber over a set of thicknesses.

    Wraps the RL table in a labelled dataset so plotting and exporters get the
    axes and units alongside the values.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers

    def run(self, spectra: MaterialSpectra, thicknesses: Sequence[float]) -> RLResult:
        d = np.asarray(list(thicknesses), dtype=float)
        logger.debug(
            "Sweeping %s: %d frequencies x %d thicknesses", spectra.name, len(spectra), d.size
        )
        table = compute_rl_sweep(
            spectra.frequency_ghz,
            spectra.epsilon,
            spectra.mu,
            d.tolist(),
            max_workers=self.max_workers,
        )
        maximum = find_maximum_absorption(table)

        ds = xr.Dataset(
            data_vars=dict(
                rl_db=(("frequency_ghz", "thickness_mm"), table),
                eps_real=("frequency_ghz", spectra.eps_real),
                eps_loss=("frequency_ghz", spectra.eps_loss),
                mu_real=("frequency_ghz", spectra.mu_real),
                mu_loss=("frequency_ghz", spectra.mu_loss),
            ),
            coords=dict(frequency_ghz=spectra.frequency_ghz, thickness_mm=d),
            attrs=dict(name=spectra.name, note="metal-backed single-layer absorber"),
        )
        ds["rl_db"].attrs.update(long_name="Reflection Loss", units="dB")
        ds["frequency_ghz"].attrs.update(long_name="Frequency", units="GHz")
        ds["thickness_mm"].attrs.update(long_name="Thickness", units="mm")

        result = RLResult(
            name=spectra.name,
            data=ds,
            maximum=maximum,
            thicknesses_mm=tuple(float(x) for x in d),
        )
        logger.info("%s: %s", spectra.name, max_rl_line(result))
        return result
