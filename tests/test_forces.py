"""Tests for lift / drag decomposition in forces.py"""

import numpy as np
import pytest

from flight_aero.forces import decompose_forces


class TestDecomposeForces:
    """Tests for the decompose_forces function."""

    def test_force_along_velocity_is_pure_drag(self):
        lift, drag = decompose_forces(np.array([[2.0, 0.0, 0.0]]), np.array([[0.18, 0.0, 0.0]]), mass_kg=1.5)
        assert drag[0] == pytest.approx(3.0)
        assert lift[0] == pytest.approx(0.0, abs=1e-12)

    def test_force_across_velocity_is_pure_lift(self):
        lift, drag = decompose_forces(np.array([[0.0, 0.0, 1.0]]), np.array([[5.0, 0.0, 0.0]]), mass_kg=2.0)
        assert lift[0] == pytest.approx(2.0)
        assert drag[0] == pytest.approx(0.0, abs=1e-12)

    def test_opposing_force_gives_negative_drag(self):
        lift, drag = decompose_forces(np.array([[-1.0, 0.0, 0.0]]), np.array([[5.0, 0.0, 0.0]]), mass_kg=2.0)
        assert drag[0] == pytest.approx(-2.0)

    def test_oblique_force(self):
        """Components follow the projection onto the velocity direction."""
        lift, drag = decompose_forces(np.array([[3.0, 4.0, 0.0]]), np.array([[0.0, 10.0, 0.0]]), mass_kg=1.0)
        assert drag[0] == pytest.approx(4.0)
        assert lift[0] == pytest.approx(3.0)

    def test_components_recombine_to_net_force(self):
        rng = np.random.default_rng(0)
        accel = rng.normal(size=(50, 3))
        vel = rng.normal(size=(50, 3)) * 10
        lift, drag = decompose_forces(accel, vel, mass_kg=1.3)
        total = np.linalg.norm(1.3 * accel, axis=1)
        np.testing.assert_allclose(np.hypot(lift, drag), total, rtol=1e-10)

    def test_zero_velocity_gives_zero(self):
        """Direction of flight is undefined at rest: no NaN, both components 0."""
        lift, drag = decompose_forces(np.array([[1.0, 2.0, 3.0]]), np.zeros((1, 3)), mass_kg=1.0)
        assert lift[0] == 0.0
        assert drag[0] == 0.0

    def test_min_speed_gate(self):
        lift, drag = decompose_forces(np.array([[1.0, 1.0, 0.0]]), np.array([[0.5, 0.0, 0.0]]), mass_kg=1.0, min_speed_mps=1.0)
        assert lift[0] == 0.0
        assert drag[0] == 0.0

    def test_output_is_finite(self):
        accel = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1e-300, 0.0, 0.0]])
        vel = np.array([[0.0, 0.0, 0.0], [1e-12, 0.0, 0.0], [1.0, 0.0, 0.0]])
        lift, drag = decompose_forces(accel, vel, mass_kg=1.0)
        assert np.all(np.isfinite(lift))
        assert np.all(np.isfinite(drag))
