#"""
#Plotly-based presenter implementing PlotPresenter.
#"""
from __future__ import annotations
import numpy as np
import xarray as xr
import plotly.graph_objects as go
from eu2rl_app.domain.ports import PlotPresenter
from eu2rl_app.domain.models import MaterialSpectra, RLResult


class PlotPresenterPlotly(PlotPresenter):
    def rl_map(self, result: RLResult) -> go.Figure:
        ds: xr.Dataset = result.data  # type: ignore
        rl = ds["rl_db"]  # (f, d)
        fig = go.Figure(
            data=go.Heatmap(
                x=rl.coords["frequency_ghz"].values,
                y=rl.coords["thickness_mm"].values,
                z=rl.values.T,
                colorscale="Viridis",
                reversescale=True,
                colorbar=dict(title="RL (dB)"),
            )
        )
        fig.update_layout(
            xaxis_title="Frequency (GHz)",
            yaxis_title="Thickness (mm)",
            template="plotly_white",
            title=f"{result.name}: Reflection Loss",
        )
        return fig

    def rl_curves(self, result: RLResult, max_curves: int = 12) -> go.Figure:
        ds: xr.Dataset = result.data  # type: ignore
        rl = ds["rl_db"]
        thick = rl.coords["thickness_mm"].values
        # Evenly subsample long sweeps, always keeping both ends
        idx = np.unique(np.linspace(0, thick.size - 1, min(max_curves, thick.size)).round().astype(int))
        fig = go.Figure()
        for j in idx:
            fig.add_trace(go.Scatter(x=rl.coords["frequency_ghz"].values,
                                     y=rl.isel(thickness_mm=int(j)).values,
                                     mode="lines",
                                     name=f"{float(thick[j]):g} mm"))
        fig.update_layout(
            xaxis_title="Frequency (GHz)",
            yaxis_title="Reflection Loss (dB)",
            template="plotly_white",
            title=f"{result.name}: RL(f) per thickness",
        )
        return fig

    def spectra_plot(self, spectra: MaterialSpectra) -> go.Figure:
        f = spectra.frequency_ghz
        fig = go.Figure()
        for name, y in (("ε′", spectra.eps_real), ("ε″", spectra.eps_loss),
                        ("μ′", spectra.mu_real), ("μ″", spectra.mu_loss)):
            fig.add_trace(go.Scatter(x=f, y=y, mode="lines", name=name))
        fig.update_layout(
            xaxis_title="Frequency (GHz)",
            yaxis_title="Relative value",
            template="plotly_white",
            title=f"{spectra.name}: Epsilon and Mu",
        )
        return fig
