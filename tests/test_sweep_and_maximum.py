from __future__ import annotations

import numpy as np
import pytest

from eu2rl_app.domain.errors import SpectrumShapeError, ThicknessError
from eu2rl_app.domain.models import MaterialSpectra
from eu2rl_app.engine.reflection_loss import (
    compute_rl,
    compute_rl_sweep,
    find_maximum_absorption,
)


def test_sweep_columns_equal_single_runs(lossy_spectra: MaterialSpectra) -> None:
    s = lossy_spectra
    thick = [1.0, 2.5, 4.0]
    table = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, thick)
    assert table.shape == (len(s), len(thick))
    for j, d in enumerate(thick):
        np.testing.assert_array_equal(table[:, j], compute_rl(s.frequency_ghz, s.epsilon, s.mu, d))


def test_reordering_thicknesses_reorders_columns_only(lossy_spectra: MaterialSpectra) -> None:
    s = lossy_spectra
    thick = [1.0, 2.5, 4.0, 6.0]
    perm = [2, 0, 3, 1]
    a = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, thick)
    b = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, [thick[k] for k in perm])
    np.testing.assert_array_equal(b, a[:, perm])


def test_threaded_sweep_equals_serial(lossy_spectra: MaterialSpectra) -> None:
    s = lossy_spectra
    thick = list(np.linspace(0.5, 8.0, 16))
    serial = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, thick)
    threaded = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, thick, max_workers=4)
    np.testing.assert_array_equal(serial, threaded)


def test_sweep_result_is_read_only(lossy_spectra: MaterialSpectra) -> None:
    s = lossy_spectra
    table = compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, [2.0])
    with pytest.raises(ValueError):
        table[0, 0] = 1.0


def test_empty_thickness_set_is_rejected(lossy_spectra: MaterialSpectra) -> None:
    s = lossy_spectra
    with pytest.raises(ThicknessError) as exc:
        compute_rl_sweep(s.frequency_ghz, s.epsilon, s.mu, [])
    assert exc.value.kind == "empty"


def test_maximum_is_most_negative_entry() -> None:
    table = np.array([[-1.0, -3.0], [-12.5, -4.0], [-2.0, -0.5]])
    m = find_maximum_absorption(table)
    assert (m.freq_index, m.thickness_index, m.value) == (1, 0, -12.5)
    assert m.absorbed


def test_maximum_tie_keeps_first_in_row_major_order() -> None:
    table = np.array([[-1.0, -7.0, -2.0], [-7.0, -3.0, -7.0]])
    m = find_maximum_absorption(table)
    assert (m.freq_index, m.thickness_index) == (0, 1)
    assert m.value == -7.0


def test_no_absorption_returns_zero_accumulator() -> None:
    table = np.array([[0.0, 0.3], [1.2, 0.0]])
    m = find_maximum_absorption(table)
    assert tuple(m) == (0, 0, 0.0)
    assert not m.absorbed


def test_nan_entries_never_win() -> None:
    table = np.array([[np.nan, -1.0], [np.nan, -2.0]])
    m = find_maximum_absorption(table)
    assert (m.freq_index, m.thickness_index, m.value) == (1, 1, -2.0)


def test_minus_infinity_is_a_valid_maximum() -> None:
    table = np.array([[-5.0, -np.inf], [-np.inf, -1.0]])
    m = find_maximum_absorption(table)
    assert (m.freq_index, m.thickness_index) == (0, 1)
    assert m.value == -np.inf


def test_maximum_rejects_non_table() -> None:
    with pytest.raises(SpectrumShapeError):
        find_maximum_absorption(np.array([-1.0, -2.0]))
