from __future__ import annotations

import io
from typing import Any

import pandas as pd
import xarray as xr

from eu2rl_app.domain.errors import ExportError
from eu2rl_app.domain.models import MaterialSpectra, RLResult

# Column headers of the ε/μ workbook (measured, positive-loss components)
SPECTRA_COLUMNS = ("Frequency (GHz)", "e1", "e2", "u1", "u2")


def spectra_table(spectra: MaterialSpectra) -> pd.DataFrame:
    """Frequency (GHz), e1=ε′, e2=ε″, u1=μ′, u2=μ″."""
    return pd.DataFrame(
        {
            SPECTRA_COLUMNS[0]: spectra.frequency_ghz,
            SPECTRA_COLUMNS[1]: spectra.eps_real,
            SPECTRA_COLUMNS[2]: spectra.eps_loss,
            SPECTRA_COLUMNS[3]: spectra.mu_real,
            SPECTRA_COLUMNS[4]: spectra.mu_loss,
        }
    )


def result_long_table(result: RLResult) -> pd.DataFrame:
    """Tidy table with columns frequency_ghz, thickness_mm, rl_db."""
    ds: xr.Dataset = result.data  # type: ignore
    return ds["rl_db"].to_dataframe().reset_index()[["frequency_ghz", "thickness_mm", "rl_db"]]


def result_wide_table(result: RLResult) -> pd.DataFrame:
    """One row per frequency, one column per thickness (header in mm)."""
    ds: xr.Dataset = result.data  # type: ignore
    da = ds["rl_db"]
    cols = [f"{float(d):g} mm" for d in da.coords["thickness_mm"].values]
    df = pd.DataFrame(da.values, columns=cols)
    df.insert(0, SPECTRA_COLUMNS[0], da.coords["frequency_ghz"].values)
    return df


def figure_to_png_bytes(fig: Any) -> bytes:
    """Export a Plotly figure to PNG bytes via Kaleido.
    Raises ExportError with an install hint when Kaleido is not available.
    """
    try:
        return fig.to_image(format="png", engine="kaleido")
    except Exception as e:  # noqa: BLE001
        raise ExportError(
            "Static image export requires the optional 'export' extra: pip install -e '.[export]'"
        ) from e


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
