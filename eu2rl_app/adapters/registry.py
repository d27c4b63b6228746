# eu2rl_app/adapters/registry.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Type

# Only import the port for typing (prevents circular imports at runtime)
if TYPE_CHECKING:
    from eu2rl_app.domain.ports import ReportExporter  # pragma: no cover

from eu2rl_app.adapters.exporters.csv_bundle import CsvBundleExporter
from eu2rl_app.adapters.exporters.origin import OriginExporter  # originpro loads lazily
from eu2rl_app.adapters.exporters.plotly_html import PlotlyHtmlExporter, PlotlyPngExporter

__all__ = ["list_exporters", "make_exporter"]

# Registry: config name → exporter class
_REGISTRY: Dict[str, Type[Any]] = {
    "csv": CsvBundleExporter,
    "html": PlotlyHtmlExporter,
    "png": PlotlyPngExporter,
    "origin": OriginExporter,
}


def list_exporters() -> List[str]:
    return list(_REGISTRY.keys())


def make_exporter(name: str, **kwargs: Any) -> ReportExporter:
    """
    Instantiate the requested exporter. Extra kwargs are forwarded to the class
    (e.g., OriginExporter(visible=True)).
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise KeyError(f"Unknown exporter '{name}'. Available: {', '.join(_REGISTRY)}")
    return cls(**kwargs)
