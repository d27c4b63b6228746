from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

import numpy as np

from eu2rl_app.domain.errors import ExportError
from eu2rl_app.domain.models import MaterialSpectra, RLResult
from eu2rl_app.domain.ports import ReportExporter
from eu2rl_app.exporting.io import SPECTRA_COLUMNS

logger = logging.getLogger(__name__)


def _load_originpro() -> Any:
    try:
        import originpro  # type: ignore[import-not-found]
    except Exception as e:  # noqa: BLE001
        raise ExportError(
            "Origin export requires OriginPro and the optional 'origin' extra: "
            "pip install -e '.[origin]'"
        ) from e
    return originpro


class OriginExporter(ReportExporter):
    """
    Writes an Origin project: workbook ``<name>_EU`` (sheet "Epsilon and Mu")
    and matrix book ``<name>_RL`` (sheet "Reflection Loss", X = frequency,
    Y = thickness). `save` stores ``<directory>/<name>.opj``.
    """

    def __init__(self, op: Any | None = None, visible: bool = False) -> None:
        self.op = op if op is not None else _load_originpro()
        self._name: str | None = None
        if visible:
            self.op.set_show(True)
        self.op.new()

    def export_spectrum(self, spectra: MaterialSpectra) -> None:
        book = self.op.new_book("w", lname=f"{spectra.name}_EU")
        wks = book[0]
        wks.name = "Epsilon and Mu"
        cols = (
            spectra.frequency_ghz,
            spectra.eps_real,
            spectra.eps_loss,
            spectra.mu_real,
            spectra.mu_loss,
        )
        for i, (label, values) in enumerate(zip(SPECTRA_COLUMNS, cols)):
            lname = "Frequency" if i == 0 else label
            units = "GHz" if i == 0 else ""
            axis = "X" if i == 0 else "Y"
            wks.from_list(i, np.asarray(values, dtype=float).tolist(), lname=lname, units=units, axis=axis)
        self._name = spectra.name

    def export_table(self, result: RLResult) -> None:
        ds = result.data
        rl = np.asarray(ds["rl_db"].values, dtype=float)  # type: ignore[index]
        freq = ds["frequency_ghz"].values  # type: ignore[index]
        thick = ds["thickness_mm"].values  # type: ignore[index]

        book = self.op.new_book("m", lname=f"{result.name}_RL")
        msheet = book[0]
        msheet.name = "Reflection Loss"
        # Matrix rows run along Y (thickness), columns along X (frequency)
        msheet.from_np(rl.T)
        msheet.xymap = float(freq[0]), float(freq[-1]), float(thick[0]), float(thick[-1])
        self.op.lt_exec(
            f"range ms = [{book.name}]\"Reflection Loss\";"
            "ms.x.longname$ = Frequency; ms.x.units$ = GHz;"
            "ms.y.longname$ = Thickness; ms.y.units$ = mm;"
            "range mo = 1; mo.label$ = Reflection Loss; mo.unit$ = dB;"
        )
        self._name = result.name

    def save(self, directory: Path) -> List[Path]:
        out = Path(directory)
        out.mkdir(parents=True, exist_ok=True)
        path = out / f"{self._name or 'eu2rl'}.opj"
        if not self.op.save(str(path)):
            raise ExportError(f"Failed to save the project into {path}")
        logger.debug("Saved Origin project %s", path)
        return [path]
