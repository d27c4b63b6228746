from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from eu2rl_app.domain.models import MaterialSpectra, RLResult
from eu2rl_app.domain.ports import ReportExporter
from eu2rl_app.exporting.io import result_wide_table, spectra_table, to_csv_bytes

logger = logging.getLogger(__name__)


class CsvBundleExporter(ReportExporter):
    """Plain CSV files: ``<name>_EU.csv`` for ε/μ and ``<name>_RL.csv`` for the RL table."""

    def __init__(self) -> None:
        self._staged: Dict[str, bytes] = {}

    def export_spectrum(self, spectra: MaterialSpectra) -> None:
        self._staged[f"{spectra.name}_EU.csv"] = to_csv_bytes(spectra_table(spectra))

    def export_table(self, result: RLResult) -> None:
        self._staged[f"{result.name}_RL.csv"] = to_csv_bytes(result_wide_table(result))

    def save(self, directory: Path) -> List[Path]:
        out = Path(directory)
        out.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for fname, payload in self._staged.items():
            path = out / fname
            path.write_bytes(payload)
            logger.debug("Wrote %s (%d bytes)", path, len(payload))
            written.append(path)
        self._staged.clear()
        return written
