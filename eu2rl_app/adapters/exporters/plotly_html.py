from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal

from eu2rl_app.domain.models import MaterialSpectra, RLResult
from eu2rl_app.domain.ports import ReportExporter
from eu2rl_app.exporting.io import figure_to_png_bytes
from eu2rl_app.plotting_plotly.presenter import PlotPresenterPlotly

ImageFormat = Literal["html", "png"]


class PlotlyHtmlExporter(ReportExporter):
    """One file per figure: self-contained HTML, or static PNG through Kaleido."""

    def __init__(
        self, presenter: PlotPresenterPlotly | None = None, image_format: ImageFormat = "html"
    ) -> None:
        if image_format not in ("html", "png"):
            raise ValueError(f"Unsupported image format {image_format!r}")
        self.presenter = presenter or PlotPresenterPlotly()
        self.image_format = image_format
        self._figures: Dict[str, Any] = {}

    def _stage(self, stem: str, fig: Any) -> None:
        self._figures[f"{stem}.{self.image_format}"] = fig

    def export_spectrum(self, spectra: MaterialSpectra) -> None:
        self._stage(f"{spectra.name}_EU", self.presenter.spectra_plot(spectra))

    def export_table(self, result: RLResult) -> None:
        self._stage(f"{result.name}_RL", self.presenter.rl_map(result))
        self._stage(f"{result.name}_RL_curves", self.presenter.rl_curves(result))

    def staged(self) -> List[str]:
        return list(self._figures)

    def save(self, directory: Path) -> List[Path]:
        out = Path(directory)
        out.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for fname, fig in self._figures.items():
            path = out / fname
            if self.image_format == "png":
                path.write_bytes(figure_to_png_bytes(fig))
            else:
                fig.write_html(str(path), include_plotlyjs="cdn")
            written.append(path)
        self._figures.clear()
        return written


class PlotlyPngExporter(PlotlyHtmlExporter):
    """PNG figures; needs the optional 'export' extra (Kaleido)."""

    def __init__(self, presenter: PlotPresenterPlotly | None = None) -> None:
        super().__init__(presenter, image_format="png")
