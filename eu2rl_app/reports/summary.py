from __future__ import annotations

from datetime import datetime, timezone
from textwrap import dedent

import xarray as xr

from eu2rl_app.domain.models import RLResult
from eu2rl_app.engine.runner import max_rl_line


def summary_markdown(result: RLResult, *, exporter: str) -> str:
    ds: xr.Dataset = result.data  # type: ignore
    f = ds["frequency_ghz"].values
    d = ds["thickness_mm"].values
    md = f"""
    # Reflection Loss Summary (Auto‑generated)

    **Sample:** {result.name}
    **Exporter:** {exporter}
    **Generated:** {datetime.now(timezone.utc).isoformat()}

    ## Model
    Single metal‑backed layer: Z_in = sqrt(μ/ε)·tanh(j·2π·d·f/c·sqrt(μ·ε)),
    RL = 20·log10|(Z_in − 1)/(Z_in + 1)|.

    ## Grid
    f∈[{float(f.min()):.3g},{float(f.max()):.3g}] GHz × {f.size} pts;
    d∈[{float(d.min()):.3g},{float(d.max()):.3g}] mm × {d.size} pts.

    ## Result
    """
    return dedent(md).strip() + "\n" + max_rl_line(result) + "\n"
