from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Any, List

import numpy as np
import pandas as pd
import pytest

from eu2rl_app.adapters.exporters.csv_bundle import CsvBundleExporter
from eu2rl_app.adapters.exporters.origin import OriginExporter
from eu2rl_app.adapters.exporters.plotly_html import PlotlyHtmlExporter
from eu2rl_app.adapters.registry import list_exporters, make_exporter
from eu2rl_app.domain.errors import ExportError
from eu2rl_app.domain.models import MaterialSpectra
from eu2rl_app.domain.ports import ReportExporter
from eu2rl_app.exporting.io import result_long_table, result_wide_table, spectra_table


class _FakeSheet:
    def __init__(self) -> None:
        self.name = ""
        self.columns: List[tuple] = []
        self.matrix: Any = None
        self.xymap: Any = None

    def from_list(self, col: int, data: list, lname: str = "", units: str = "", axis: str = "") -> None:
        self.columns.append((col, data, lname, units, axis))

    def from_np(self, arr: Any) -> None:
        self.matrix = arr


class _FakeBook(list):
    def __init__(self, kind: str, lname: str) -> None:
        super().__init__([_FakeSheet()])
        self.kind = kind
        self.name = f"Book_{lname}"


class _FakeOrigin:
    """Records the originpro calls the exporter makes."""

    def __init__(self) -> None:
        self.books: List[_FakeBook] = []
        self.scripts: List[str] = []
        self.saved: List[str] = []
        self.new_projects = 0

    def new(self) -> None:
        self.new_projects += 1

    def set_show(self, show: bool) -> None:
        pass

    def new_book(self, kind: str, lname: str = "") -> _FakeBook:
        book = _FakeBook(kind, lname)
        self.books.append(book)
        return book

    def lt_exec(self, script: str) -> bool:
        self.scripts.append(script)
        return True

    def save(self, path: str) -> bool:
        self.saved.append(path)
        return True


def test_registry_lists_and_builds_exporters() -> None:
    assert list_exporters() == ["csv", "html", "png", "origin"]
    assert isinstance(make_exporter("csv"), ReportExporter)
    assert isinstance(make_exporter("origin", op=_FakeOrigin()), ReportExporter)
    with pytest.raises(KeyError):
        make_exporter("opj")


def test_tables_have_expected_shape(lossy_spectra: MaterialSpectra, small_result: Any) -> None:
    eu = spectra_table(lossy_spectra)
    assert list(eu.columns) == ["Frequency (GHz)", "e1", "e2", "u1", "u2"]
    assert (eu["e2"] > 0).all()  # measured loss, positive

    wide = result_wide_table(small_result)
    assert wide.shape == (len(lossy_spectra), 1 + 4)
    assert list(wide.columns[1:]) == ["1.5 mm", "2 mm", "3 mm", "4.5 mm"]

    long = result_long_table(small_result)
    assert list(long.columns) == ["frequency_ghz", "thickness_mm", "rl_db"]
    assert len(long) == len(lossy_spectra) * 4


def test_csv_bundle_roundtrips_values(
    lossy_spectra: MaterialSpectra, small_result: Any, tmp_path: Path
) -> None:
    exp = CsvBundleExporter()
    exp.export_spectrum(lossy_spectra)
    exp.export_table(small_result)
    written = exp.save(tmp_path)
    assert sorted(p.name for p in written) == ["ferrite_EU.csv", "ferrite_RL.csv"]

    rl = pd.read_csv(tmp_path / "ferrite_RL.csv")
    np.testing.assert_allclose(rl.iloc[:, 1:].to_numpy(), small_result.data["rl_db"].values)
    # staging is cleared after save
    assert exp.save(tmp_path / "again") == []


def test_html_exporter_writes_figures(
    lossy_spectra: MaterialSpectra, small_result: Any, tmp_path: Path
) -> None:
    exp = make_exporter("html")
    exp.export_spectrum(lossy_spectra)
    exp.export_table(small_result)
    written = exp.save(tmp_path)
    assert sorted(p.name for p in written) == [
        "ferrite_EU.html",
        "ferrite_RL.html",
        "ferrite_RL_curves.html",
    ]
    assert all(p.stat().st_size > 0 for p in written)


def test_origin_exporter_drives_project(
    lossy_spectra: MaterialSpectra, small_result: Any, tmp_path: Path
) -> None:
    op = _FakeOrigin()
    exp = OriginExporter(op=op)
    exp.export_spectrum(lossy_spectra)
    exp.export_table(small_result)
    written = exp.save(tmp_path)

    assert op.new_projects == 1
    wb, mb = op.books
    assert wb.kind == "w" and wb[0].name == "Epsilon and Mu"
    assert [c[2] for c in wb[0].columns] == ["Frequency", "e1", "e2", "u1", "u2"]
    assert wb[0].columns[0][3] == "GHz" and wb[0].columns[0][4] == "X"

    assert mb.kind == "m" and mb[0].name == "Reflection Loss"
    # rows along thickness, columns along frequency
    assert mb[0].matrix.shape == (4, len(lossy_spectra))
    assert mb[0].xymap == (2.0, 18.0, 1.5, 4.5)
    assert "ms.y.units$ = mm" in op.scripts[0]

    assert written == [tmp_path / "ferrite.opj"]
    assert op.saved == [str(tmp_path / "ferrite.opj")]


def test_origin_exporter_reports_failed_save(small_result: Any, tmp_path: Path) -> None:
    op = _FakeOrigin()
    op.save = lambda path: False  # type: ignore[method-assign]
    exp = OriginExporter(op=op)
    exp.export_table(small_result)
    with pytest.raises(ExportError, match="Failed to save"):
        exp.save(tmp_path)


def test_origin_exporter_without_originpro_has_hint() -> None:
    if importlib.util.find_spec("originpro") is not None:
        pytest.skip("originpro is installed")
    with pytest.raises(ExportError, match="'origin' extra"):
        OriginExporter()


def test_png_exporter_stages_png_files(lossy_spectra: MaterialSpectra, small_result: Any) -> None:
    exp = make_exporter("png")
    exp.export_spectrum(lossy_spectra)
    exp.export_table(small_result)
    assert exp.staged() == ["ferrite_EU.png", "ferrite_RL.png", "ferrite_RL_curves.png"]


def test_png_export_without_kaleido_has_hint(small_result: Any, tmp_path: Path) -> None:
    if importlib.util.find_spec("kaleido") is not None:
        pytest.skip("kaleido is installed")
    exp = make_exporter("png")
    exp.export_table(small_result)
    with pytest.raises(ExportError, match="'export' extra"):
        exp.save(tmp_path)


def test_unknown_image_format_is_rejected() -> None:
    with pytest.raises(ValueError):
        PlotlyHtmlExporter(image_format="svg")  # type: ignore[arg-type]
