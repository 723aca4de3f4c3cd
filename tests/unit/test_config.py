# tests/unit/test_config.py
from __future__ import annotations

import math

import numpy as np
import pytest

from dynlyap.config import (
    BenettinConfig,
    SpectrumConfig,
    benettin_config_from_toml,
    check_tolerances,
    default_inittest,
    load_config,
    spectrum_config_from_toml,
)
from dynlyap.errors import ConfigError


def test_benettin_defaults():
    cfg = BenettinConfig().validate()
    assert cfg.d0 == 1e-9
    assert cfg.threshold == 1e-5
    assert cfg.solver_tolerances() == (1e-9, 1e-9)


@pytest.mark.parametrize("threshold", [1e-9, 1e-10])
def test_threshold_must_exceed_d0(threshold):
    with pytest.raises(ConfigError, match="threshold"):
        BenettinConfig(d0=1e-9, threshold=threshold).validate()


def test_nan_threshold_is_rejected():
    with pytest.raises(ConfigError, match="threshold"):
        BenettinConfig(threshold=float("nan")).validate()


@pytest.mark.parametrize("field, value", [("atol", 0.0), ("rtol", -1.0), ("atol", float("nan"))])
def test_solver_tolerances_must_be_positive(field, value):
    with pytest.raises(ConfigError, match=field):
        BenettinConfig(**{field: value}).validate()


def test_unset_solver_tolerances_are_valid():
    BenettinConfig(atol=None, rtol=None).validate()


def test_spectrum_config_rejects_bad_dt():
    with pytest.raises(ConfigError):
        SpectrumConfig(dt=0.0).validate()


@pytest.mark.parametrize("D", [1, 2, 5, 50])
def test_default_inittest_distance_is_d0(D):
    state = np.linspace(-1.0, 1.0, D)
    test_state = default_inittest(D)(state, 1e-6)
    assert np.linalg.norm(test_state - state) == pytest.approx(1e-6, rel=1e-6)
    # the input is left untouched
    np.testing.assert_array_equal(state, np.linspace(-1.0, 1.0, D))


def test_check_tolerances_warns_when_looser_than_d0():
    with pytest.warns(RuntimeWarning, match="atol"):
        check_tolerances(1e-9, 1e-6, 1e-9)


def test_load_config_from_toml(tmp_path):
    path = tmp_path / "run.toml"
    path.write_text(
        """
[lyapunov.benettin]
d0 = 1e-8
threshold = 1e-4
dt = 0.5

[lyapunov.spectrum]
dt = 0.2
sort = true
"""
    )
    tables = load_config(path)
    assert tables["benettin"]["dt"] == 0.5

    bcfg = benettin_config_from_toml(path)
    assert bcfg.d0 == 1e-8
    assert bcfg.threshold == 1e-4
    assert math.isclose(bcfg.dt, 0.5)

    scfg = spectrum_config_from_toml(path)
    assert scfg.sort is True
    assert scfg.dt == 0.2


def test_missing_tables_use_defaults(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("[other]\nkey = 1\n")
    assert benettin_config_from_toml(path) == BenettinConfig()


def test_unknown_key_lists_valid_keys(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[lyapunov.benettin]\nthreshhold = 1e-4\n")
    with pytest.raises(ConfigError) as excinfo:
        benettin_config_from_toml(path)
    msg = str(excinfo.value)
    assert "threshhold" in msg
    assert "threshold" in msg


def test_invalid_values_in_toml_fail_validation(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[lyapunov.benettin]\nd0 = 1e-3\nthreshold = 1e-5\n")
    with pytest.raises(ConfigError, match="threshold"):
        benettin_config_from_toml(path)


def test_malformed_and_missing_files(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[lyapunov.benettin\n")
    with pytest.raises(ConfigError, match="Malformed"):
        load_config(path)
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.toml")
