from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

from eu2rl_app.domain.models import MaterialSpectra

logger = logging.getLogger(__name__)

COLUMNS = ("frequency_hz", "eps_real", "eps_loss", "mu_real", "mu_loss")
_SEP = re.compile(r"[,\t]")


def spectra_name_from_path(path: str | Path) -> str:
    """Sample name used for labelling exports: the file stem.

    The path must carry an extension (``sample.csv``, not ``sample``).
    """
    p = Path(path)
    if not p.suffix:
        raise ValueError(f"Must attach the file extension: {str(path)!r}")
    return p.stem


def read_table_text(text: str) -> pd.DataFrame:
    """Parse measurement text into a numeric DataFrame with columns `COLUMNS`.

    A first line containing ``Label`` is dropped together with the line after
    it. Fields are split on commas or tabs; rows that do not yield five numbers
    are skipped.
    """
    lines = text.splitlines()
    if lines and "Label" in lines[0]:
        lines = lines[2:]

    rows = []
    for ln in lines:
        fields = [s.strip() for s in _SEP.split(ln)]
        if len(fields) < len(COLUMNS):
            continue
        rows.append(fields[: len(COLUMNS)])

    if not rows:
        return pd.DataFrame({c: pd.Series(dtype=float) for c in COLUMNS})
    df = pd.DataFrame(rows, columns=list(COLUMNS))
    df = df.apply(pd.to_numeric, errors="coerce")
    n_raw = len(df)
    df = df.dropna().reset_index(drop=True).astype(float)
    if n_raw != len(df):
        logger.debug("Skipped %d non-numeric row(s)", n_raw - len(df))
    return df


def spectra_from_table(df: pd.DataFrame, *, name: str) -> MaterialSpectra:
    """Hz → GHz and ε = ε′ − jε″, μ = μ′ − jμ″."""
    freq = df["frequency_hz"].to_numpy(dtype=float) / 1.0e9
    eps = df["eps_real"].to_numpy(dtype=float) - 1j * df["eps_loss"].to_numpy(dtype=float)
    mu = df["mu_real"].to_numpy(dtype=float) - 1j * df["mu_loss"].to_numpy(dtype=float)
    return MaterialSpectra(name=name, frequency_ghz=freq, epsilon=eps, mu=mu)


def read_spectra_text(text: str, *, name: str = "sample") -> MaterialSpectra:
    return spectra_from_table(read_table_text(text), name=name)


def read_spectra_csv(path: str | Path) -> MaterialSpectra:
    """Load a measurement file; raises FileNotFoundError / ValueError on bad input."""
    name = spectra_name_from_path(path)
    p = Path(path)
    text = p.read_text(encoding="utf-8", errors="replace")
    spectra = read_spectra_text(text, name=name)
    logger.info("Loaded %s: %d samples, %.3g-%.3g GHz", p.name, len(spectra),
                float(spectra.frequency_ghz.min()), float(spectra.frequency_ghz.max()))
    return spectra
