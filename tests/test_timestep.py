"""
Tests for the time-step policy and parameter validation.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cavity.field import VelocityField
from cavity.timestep import (
    compute_time_step,
    viscosity_from_reynolds,
    reynolds_from_viscosity,
    grid_spacing,
    diffusion_number,
    validate_step_parameters,
)


class TestTimeStep:
    """Test the stable dt bound."""

    def test_advective_limit(self):
        """nx = 10, nu = 0.1: min(0.025, 0.01) = 0.01."""
        dt = compute_time_step(10, 0.1)
        assert np.isclose(dt, 0.01)

    def test_diffusive_limit(self):
        """Large viscosity makes the diffusive bound active."""
        # min(0.25 * 0.01 / 1.0, 0.01) = 0.0025
        dt = compute_time_step(10, 1.0)
        assert np.isclose(dt, 0.0025)

    def test_diffusion_number_bounded(self):
        """nu * dt / dx^2 never exceeds 0.25 across the control ranges."""
        for n in range(20, 101, 10):
            for re in range(10, 1001, 10):
                nu = 1.0 / re
                dt = compute_time_step(n, nu)
                assert diffusion_number(n, nu, dt) <= 0.25 + 1e-12

    def test_advective_cfl_bounded(self):
        """Lid-speed Courant number stays at or below 0.1."""
        for n in (20, 50, 100):
            dx, _ = grid_spacing(n, n)
            dt = compute_time_step(n, 1.0 / 1000)
            assert 1.0 * dt / dx <= 0.1 + 1e-12

    def test_nonpositive_viscosity(self):
        """nu <= 0 is rejected."""
        with pytest.raises(ValueError):
            compute_time_step(10, 0.0)
        with pytest.raises(ValueError):
            compute_time_step(10, -0.5)


class TestViscosityReynoldsRelation:
    """Test nu = 1 / Re."""

    def test_viscosity_from_reynolds(self):
        assert np.isclose(viscosity_from_reynolds(100), 0.01)

    def test_roundtrip(self):
        """Re -> nu -> Re roundtrip."""
        assert np.isclose(reynolds_from_viscosity(viscosity_from_reynolds(250)), 250)

    def test_nonpositive_reynolds(self):
        with pytest.raises(ValueError):
            viscosity_from_reynolds(0)
        with pytest.raises(ValueError):
            reynolds_from_viscosity(-1.0)


class TestValidation:
    """Test step parameter validation."""

    def test_valid(self):
        field = VelocityField.create(5, 5)
        validate_step_parameters(field, 5, 5, 0.01)

    def test_too_small_grid(self):
        """Grids without interior cells are rejected."""
        field = VelocityField.create(2, 5)
        with pytest.raises(ValueError):
            validate_step_parameters(field, 2, 5, 0.01)

    def test_mismatched_grid(self):
        field = VelocityField.create(5, 5)
        with pytest.raises(ValueError):
            validate_step_parameters(field, 6, 5, 0.01)

    def test_zero_viscosity(self):
        field = VelocityField.create(5, 5)
        with pytest.raises(ValueError):
            validate_step_parameters(field, 5, 5, 0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
