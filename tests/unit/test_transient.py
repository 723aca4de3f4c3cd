# tests/unit/test_transient.py
"""
Transient evolution and system representations.

Tests verify:
- Ttr=0 is a no-op for every system kind
- evolve returns the state after exactly Ttr steps / time units
- The caller's system is never modified
- Invalid budgets and shapes raise ConfigError
"""
from __future__ import annotations

import numpy as np
import pytest

from dynlyap import ConfigError, ContinuousDS, DiscreteDS1D, evolve

from models import big_henon, henon, henon_eom, linear_flow, logistic


@pytest.mark.parametrize("make", [henon, big_henon])
def test_zero_transient_returns_state(make):
    ds = make((0.1, 0.2))
    u = evolve(ds, 0)
    np.testing.assert_array_equal(u, [0.1, 0.2])


def test_discrete_transient_matches_manual_iteration():
    ds = henon((0.1, 0.2))
    expected = np.array([0.1, 0.2])
    for _ in range(7):
        expected = henon_eom(expected)
    np.testing.assert_array_equal(evolve(ds, 7), expected)
    np.testing.assert_array_equal(evolve(big_henon((0.1, 0.2)), 7), expected)
    np.testing.assert_array_equal(ds.state, [0.1, 0.2])


def test_big_transient_does_not_touch_system():
    ds = big_henon((0.1, 0.2))
    evolve(ds, 10)
    np.testing.assert_array_equal(ds.state, [0.1, 0.2])


def test_scalar_transient():
    ds = logistic(x0=0.4)
    assert evolve(ds, 0) == 0.4
    assert evolve(ds, 1) == pytest.approx(4.0 * 0.4 * 0.6)
    assert isinstance(evolve(ds, 3), float)


def test_continuous_transient():
    ds = linear_flow([-1.0], state=[1.0])
    u = evolve(ds, 1.0, atol=1e-12, rtol=1e-10)
    assert u[0] == pytest.approx(np.exp(-1.0), rel=1e-8)
    np.testing.assert_array_equal(evolve(ds, 0.0), [1.0])


@pytest.mark.parametrize("Ttr", [-1, 2.5, "10"])
def test_invalid_discrete_transient(Ttr):
    with pytest.raises(ConfigError):
        evolve(henon(), Ttr)


def test_integral_float_transient_is_accepted():
    np.testing.assert_array_equal(evolve(henon((0.1, 0.2)), 3.0), evolve(henon((0.1, 0.2)), 3))


def test_negative_continuous_transient():
    with pytest.raises(ConfigError):
        evolve(linear_flow([1.0]), -0.5)


def test_set_state_returns_new_system():
    ds = henon((0.1, 0.2))
    other = ds.set_state([0.5, 0.5])
    np.testing.assert_array_equal(ds.state, [0.1, 0.2])
    np.testing.assert_array_equal(other.state, [0.5, 0.5])
    assert other.eom is ds.eom
    with pytest.raises(ConfigError):
        ds.set_state([1.0, 2.0, 3.0])


def test_state_is_copied_on_read():
    ds = henon((0.1, 0.2))
    u = ds.state
    u[0] = 99.0
    assert ds.state[0] == 0.1


def test_representation_validation():
    with pytest.raises(ConfigError):
        DiscreteDS1D([0.1, 0.2], lambda x: x, lambda x: 1.0)
    with pytest.raises(ConfigError):
        ContinuousDS([[1.0, 2.0]], lambda t, y, dy: None)
    with pytest.raises(ConfigError, match="Unknown stepper"):
        ContinuousDS([1.0], lambda t, y, dy: None, stepper="nope")
    assert henon().dimension == 2
    assert logistic().dimension == 1
    assert henon().kind == "discrete"
    assert big_henon().kind == "big_discrete"
