# diodeop/tests/test_sweep_io.py
"""
I–V sweep table: shape, file layout, and values read back against the model.
"""
import json
import math

import numpy as np
import pytest

from diodeop.io.results import load_sweep, write_metrics, write_sweep
from diodeop.models.circuit import PhysicalConstants, diode_current, generator_current
from diodeop.postprocess.sweep import iv_sweep

REF = PhysicalConstants.reference()


def test_default_sweep_grid():
    sw = iv_sweep(REF)
    assert len(sw) == 101
    assert list(sw.columns) == ["U", "I_diode", "I_generator"]
    assert np.all(np.diff(sw["U"].to_numpy()) > 0)
    assert sw["U"].iloc[0] == 0.0 and sw["U"].iloc[-1] == 1.0


@pytest.mark.parametrize("points", [2, 11, 257])
def test_configured_row_count(tmp_path, points):
    out = write_sweep(tmp_path / "iv.txt", iv_sweep(REF, -0.2, 1.2, points))
    lines = out.read_text().splitlines()
    assert lines[0].startswith("#")
    assert len(lines) == points + 1


def test_file_layout_matches_reference_format(tmp_path):
    out = write_sweep(tmp_path / "iv_data.txt", iv_sweep(REF))
    lines = out.read_text().splitlines()
    assert lines[0] == "# U[V]    I_diode[A]     I_generator[A]"
    assert lines[1] == "0.00 0.000000000000e+00 1.000000000000e-02"
    assert lines[-1].startswith("1.00 ")
    assert lines[-1].endswith(" 0.000000000000e+00")
    assert all(len(l.split(" ")) == 3 for l in lines[1:])


def test_rows_round_trip_against_model(tmp_path):
    out = write_sweep(tmp_path / "sub" / "iv.txt", iv_sweep(REF))
    df = load_sweep(out)
    U = df["U"].to_numpy()
    assert len(df) == 101
    assert np.all(np.diff(U) > 0)
    assert np.allclose(df["I_diode"].to_numpy(), diode_current(U, REF), rtol=1e-10, atol=0.0)
    assert np.allclose(df["I_generator"].to_numpy(), generator_current(U, REF), rtol=1e-10, atol=1e-20)


def test_fine_grid_round_trips_against_model(tmp_path):
    # 5.47 mV step: U needs more than two decimals to stay distinct
    out = write_sweep(tmp_path / "fine.txt", iv_sweep(REF, -0.2, 1.2, 257))
    df = load_sweep(out)
    U = df["U"].to_numpy()
    assert len(df) == 257
    assert np.all(np.diff(U) > 0)
    assert np.allclose(df["I_diode"].to_numpy(), diode_current(U, REF), rtol=1e-10, atol=0.0)
    assert np.allclose(df["I_generator"].to_numpy(), generator_current(U, REF), rtol=1e-10, atol=1e-15)


def test_irrational_step_still_round_trips(tmp_path):
    out = write_sweep(tmp_path / "odd.txt", iv_sweep(REF, 0.0, 1.0, 7))
    df = load_sweep(out)
    U = df["U"].to_numpy()
    assert np.all(np.diff(U) > 0)
    assert np.allclose(df["I_diode"].to_numpy(), diode_current(U, REF), rtol=1e-9, atol=0.0)


@pytest.mark.parametrize("kwargs", [
    dict(points=1),
    dict(points=0),
    dict(u_start=1.0, u_stop=1.0),
    dict(u_start=1.0, u_stop=0.0),
])
def test_bad_sweep_parameters(kwargs):
    with pytest.raises(ValueError):
        iv_sweep(REF, **kwargs)


def test_unwritable_path_raises_oserror(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(OSError):
        write_sweep(blocker / "iv.txt", iv_sweep(REF))


def test_metrics_json_nulls_non_finite(tmp_path):
    out = write_metrics(tmp_path / "m.json", {"a": 1.5, "b": math.nan, "c": {"d": math.inf}})
    data = json.loads(out.read_text())
    assert data == {"a": 1.5, "b": None, "c": {"d": None}}
