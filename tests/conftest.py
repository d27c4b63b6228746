from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import pytest

from eu2rl_app.domain.models import MaterialSpectra
from eu2rl_app.engine.runner import RLEngine
from eu2rl_app.plotting_plotly.presenter import PlotPresenterPlotly

SAMPLE_CSV = """Label,Frequency,e1,e2,u1,u2
Units,Hz,,,,
2000000000,12.0,3.5,1.30,0.45
6000000000,10.5,3.1,1.15,0.50
10000000000,9.2,2.8,1.05,0.48
14000000000,8.4,2.5,0.98,0.42
18000000000,7.9,2.3,0.92,0.38
"""


@pytest.fixture(scope="session")
def lossy_spectra() -> MaterialSpectra:
    """Small dispersive, lossy sample on a 2–18 GHz grid."""
    f = np.linspace(2.0, 18.0, 9)
    eps = (12.0 - 0.25 * f) - 1j * (3.5 - 0.07 * f)
    mu = (1.3 - 0.02 * f) - 1j * (0.45 + 0.005 * f)
    return MaterialSpectra(name="ferrite", frequency_ghz=f, epsilon=eps, mu=mu)


@pytest.fixture(scope="session")
def small_thicknesses() -> tuple[float, ...]:
    return (1.5, 2.0, 3.0, 4.5)


@pytest.fixture(scope="session")
def small_result(lossy_spectra: MaterialSpectra, small_thicknesses: tuple[float, ...]) -> Any:
    """Run the engine on the lossy sample and return its RLResult."""
    return RLEngine().run(lossy_spectra, small_thicknesses)


@pytest.fixture(scope="session")
def presenter() -> PlotPresenterPlotly:
    """Plotly presenter under test."""
    return PlotPresenterPlotly()


@pytest.fixture()
def sample_csv(tmp_path: Path) -> Path:
    """Measurement file with the two-line 'Label' header."""
    path = tmp_path / "sample.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
