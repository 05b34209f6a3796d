"""
Lid-Driven Cavity Simulation

Interactive driver around the explicit cavity solver.

The cavity is the unit square with:
- Three stationary walls (no-slip)
- One moving wall (lid) at u = 1 on top

The driver owns the current VelocityField and replaces it after every
step. It exposes the same controls as the interactive front end:
Reynolds number, grid resolution, run/pause and reset.
"""

import numpy as np
import matplotlib.pyplot as plt
import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cavity.constants import (
    RESOLUTION_RANGE,
    REYNOLDS_RANGE,
    DEFAULT_RESOLUTION,
    DEFAULT_REYNOLDS,
    LID_VELOCITY,
)
from cavity.field import VelocityField
from cavity.stencil import step, step_fast
from cavity.timestep import (
    viscosity_from_reynolds,
    compute_time_step,
    diffusion_number,
    grid_spacing,
)
from cavity.observables import (
    take_snapshot,
    compute_vorticity,
    compute_velocity_magnitude,
    compute_kinetic_energy,
)


def clamp_control(value, bounds):
    """
    Clamp a control value to (min, max, step) bounds and snap it to the step.

    Parameters
    ----------
    value : float
        Requested value
    bounds : tuple
        (min, max, step)

    Returns
    -------
    value : int or float
        Snapped value inside [min, max]
    """
    lo, hi, inc = bounds
    value = min(max(value, lo), hi)
    snapped = lo + round((value - lo) / inc) * inc
    return type(inc)(min(snapped, hi))


class CavitySimulation:
    """
    Driver for the lid-driven cavity.

    Parameters
    ----------
    resolution : int
        Cells per side (clamped to RESOLUTION_RANGE)
    reynolds : float
        Reynolds number (clamped to REYNOLDS_RANGE)
    substeps : int
        Solver steps per running tick (default 1)
    use_fast : bool
        Use the Numba kernel (default True)
    verbose : bool
        Print control changes
    """

    def __init__(self, resolution=DEFAULT_RESOLUTION, reynolds=DEFAULT_REYNOLDS,
                 substeps=1, use_fast=True, verbose=False):
        if substeps < 1:
            raise ValueError(f"substeps must be >= 1, got {substeps}")

        self.substeps = int(substeps)
        self.use_fast = use_fast
        self.verbose = verbose
        self._step = step_fast if use_fast else step

        self.reynolds = clamp_control(reynolds, REYNOLDS_RANGE)
        self.resolution = clamp_control(resolution, RESOLUTION_RANGE)
        self.is_running = False

        self._create_field()

    def _create_field(self):
        self.field = VelocityField.create(self.resolution, self.resolution)
        self.time = 0.0
        self.step_count = 0

    @property
    def nx(self):
        return self.resolution

    @property
    def ny(self):
        return self.resolution

    @property
    def nu(self):
        """Kinematic viscosity for the current Reynolds number."""
        return viscosity_from_reynolds(self.reynolds, u_lid=LID_VELOCITY)

    @property
    def dt(self):
        """Time step the next solver call will use."""
        return compute_time_step(self.nx, self.nu)

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def set_reynolds(self, reynolds):
        """Change Reynolds number; takes effect on the next step."""
        self.reynolds = clamp_control(reynolds, REYNOLDS_RANGE)
        if self.verbose:
            print(f"Reynolds number: {self.reynolds} (nu = {self.nu:.5f})")

    def set_resolution(self, resolution):
        """Change grid resolution; recreates the field when it changes."""
        resolution = clamp_control(resolution, RESOLUTION_RANGE)
        if resolution == self.resolution:
            return
        self.resolution = resolution
        self._create_field()
        if self.verbose:
            print(f"Grid: {self.nx} x {self.ny}")

    def play(self):
        self.is_running = True

    def pause(self):
        self.is_running = False

    def toggle(self):
        """Flip between running and paused; returns the new state."""
        self.is_running = not self.is_running
        return self.is_running

    def reset(self):
        """Pause and restart from a fresh field."""
        self.is_running = False
        self._create_field()
        if self.verbose:
            print("Simulation reset")

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def advance(self, num_steps=1):
        """
        Perform solver steps regardless of the run state.

        Parameters
        ----------
        num_steps : int
            Number of steps

        Returns
        -------
        elapsed : float
            Simulated time advanced
        """
        elapsed = 0.0
        for _ in range(num_steps):
            nu = self.nu
            dt = compute_time_step(self.nx, nu)
            self.field = self._step(self.field, self.nx, self.ny, nu)
            self.time += dt
            self.step_count += 1
            elapsed += dt
        return elapsed

    def tick(self):
        """
        One animation tick: step if running, then return a snapshot.

        Returns
        -------
        snapshot : FieldSnapshot
        """
        if self.is_running:
            self.advance(self.substeps)
        return self.snapshot()

    def snapshot(self):
        """Read-only snapshot of the current field."""
        return take_snapshot(self.field, time=self.time, step_count=self.step_count)

    def run(self, num_steps, check_interval=1000, tolerance=1e-6, verbose=True):
        """
        Run simulation until steady state or max steps.

        Parameters
        ----------
        num_steps : int
            Maximum number of timesteps
        check_interval : int
            Steps between convergence checks
        tolerance : float
            Convergence tolerance on the max velocity change per interval
        verbose : bool
            Print progress

        Returns
        -------
        converged : bool
            Whether simulation converged
        """
        u_old, v_old = self.field.u.astype(np.float64), self.field.v.astype(np.float64)

        for n in range(num_steps):
            self.advance(1)

            if (n + 1) % check_interval == 0:
                u_new = self.field.u.astype(np.float64)
                v_new = self.field.v.astype(np.float64)
                max_change = np.max(np.sqrt((u_new - u_old)**2 + (v_new - v_old)**2))

                u_old, v_old = u_new, v_new

                if verbose:
                    energy = compute_kinetic_energy(self.field)
                    print(f"Step {n + 1}: max velocity change = {max_change:.2e}, "
                          f"kinetic energy = {energy:.4e}")

                if not np.isfinite(max_change):
                    if verbose:
                        print(f"Diverged at step {n + 1}")
                    return False

                if max_change < tolerance:
                    if verbose:
                        print(f"Converged at step {n + 1}")
                    return True

        if verbose:
            print(f"Did not converge after {num_steps} steps")
        return False

    # -------------------------------------------------------------------------
    # Post-processing
    # -------------------------------------------------------------------------

    def get_centerline_profiles(self):
        """
        Get velocity profiles along the cavity centerlines.

        Returns
        -------
        y_norm : ndarray
            Normalized y-coordinates (0 to 1)
        u_centerline : ndarray
            u along the vertical centerline, normalized by the lid velocity
        x_norm : ndarray
            Normalized x-coordinates (0 to 1)
        v_centerline : ndarray
            v along the horizontal centerline, normalized by the lid velocity
        """
        u, v = self.field.as_grids()

        u_centerline = u[:, self.nx // 2].astype(np.float64) / LID_VELOCITY
        y_norm = np.linspace(0, 1, self.ny)

        v_centerline = v[self.ny // 2, :].astype(np.float64) / LID_VELOCITY
        x_norm = np.linspace(0, 1, self.nx)

        return y_norm, u_centerline, x_norm, v_centerline

    def plot_results(self, save_path=None):
        """
        Plot velocity magnitude, vorticity and centerline profiles.

        Parameters
        ----------
        save_path : str, optional
            Path to save figure
        """
        u, v = self.field.as_grids()
        dx, dy = grid_spacing(self.nx, self.ny)

        fig, axes = plt.subplots(2, 2, figsize=(12, 10))

        u_mag = compute_velocity_magnitude(u, v)
        im1 = axes[0, 0].imshow(u_mag / LID_VELOCITY, origin='lower',
                                cmap='viridis', aspect='equal', extent=[0, 1, 0, 1])
        axes[0, 0].set_title('Velocity Magnitude')
        plt.colorbar(im1, ax=axes[0, 0], label='|u|/U_lid')

        vorticity = compute_vorticity(u, v, dx, dy)
        vmax = max(np.percentile(np.abs(vorticity), 95), 1e-12)
        im2 = axes[0, 1].imshow(vorticity, origin='lower', cmap='RdBu_r',
                                vmin=-vmax, vmax=vmax, aspect='equal', extent=[0, 1, 0, 1])
        axes[0, 1].set_title('Vorticity')
        plt.colorbar(im2, ax=axes[0, 1], label='ω')

        y_norm, u_profile, x_norm, v_profile = self.get_centerline_profiles()

        axes[1, 0].plot(u_profile, y_norm, 'b-', linewidth=2)
        axes[1, 0].set_xlabel('$u / U_{lid}$')
        axes[1, 0].set_ylabel('$y / L$')
        axes[1, 0].set_title('Vertical Centerline')
        axes[1, 0].grid(True, alpha=0.3)

        axes[1, 1].plot(x_norm, v_profile, 'b-', linewidth=2)
        axes[1, 1].set_xlabel('$x / L$')
        axes[1, 1].set_ylabel('$v / U_{lid}$')
        axes[1, 1].set_title('Horizontal Centerline')
        axes[1, 1].grid(True, alpha=0.3)

        plt.suptitle(f'Lid-Driven Cavity, Re = {self.reynolds}, '
                     f'Grid = {self.nx}×{self.ny}, t = {self.time:.3f}')
        plt.tight_layout()

        if save_path:
            os.makedirs(os.path.dirname(save_path) or '.', exist_ok=True)
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Saved figure to {save_path}")

        return fig


def run_lid_driven_cavity(resolution=50, re=100, max_steps=20000, use_fast=True,
                          verbose=True):
    """
    Run lid-driven cavity simulation.

    Parameters
    ----------
    resolution : int
        Cells per side
    re : float
        Reynolds number
    max_steps : int
        Maximum simulation steps
    use_fast : bool
        Use the Numba kernel
    verbose : bool
        Print progress

    Returns
    -------
    sim : CavitySimulation
        Simulation object with results
    """
    sim = CavitySimulation(resolution, re, use_fast=use_fast)

    if verbose:
        print("Lid-Driven Cavity Simulation")
        print("=" * 50)
        print(f"Grid: {sim.nx} x {sim.ny}")
        print(f"Reynolds number: {sim.reynolds}")
        print(f"Viscosity: {sim.nu:.6f}")
        print(f"dt: {sim.dt:.6f} (diffusion number {diffusion_number(sim.nx, sim.nu, sim.dt):.3f})")
        print()

    start = time.perf_counter()
    sim.run(max_steps, check_interval=1000, tolerance=1e-6, verbose=verbose)
    elapsed = time.perf_counter() - start

    if verbose:
        print()
        print(f"Wall time: {elapsed:.2f}s")
        print(f"Steps: {sim.step_count}")
        print(f"Simulated time: {sim.time:.3f}")

    return sim


if __name__ == "__main__":
    sim = run_lid_driven_cavity(resolution=50, re=100, max_steps=20000)
    sim.plot_results(save_path='results/validation/cavity_re100.png')
    plt.show()
