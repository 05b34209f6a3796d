"""
Derived Quantities

Read-only diagnostics computed from a VelocityField:
    - Velocity magnitude: |u| = sqrt(u^2 + v^2)
    - Display maximum: max |u| over the frame, floored to avoid divide-by-zero
    - Vorticity: omega = dv/dx - du/dy
    - Kinetic energy: 0.5 * sum(u^2 + v^2) * dx * dy
"""

import numpy as np
from .constants import MIN_DISPLAY_MAGNITUDE
from .boundary import create_interior_mask
from .timestep import grid_spacing


def compute_velocity_magnitude(u, v):
    """
    Compute velocity magnitude field.

    Parameters
    ----------
    u : ndarray
        X-velocity, any shape
    v : ndarray
        Y-velocity, same shape as u

    Returns
    -------
    velocity_mag : ndarray
        Velocity magnitude, same shape as u
    """
    return np.sqrt(u * u + v * v)


def compute_display_max(u, v, floor=MIN_DISPLAY_MAGNITUDE):
    """
    Per-frame maximum velocity magnitude for colour normalization.

    Non-finite cells are ignored.

    Parameters
    ----------
    u, v : ndarray
        Velocity components
    floor : float
        Lower bound on the result (default 0.001)

    Returns
    -------
    max_mag : float
    """
    mag = compute_velocity_magnitude(u, v)
    finite = mag[np.isfinite(mag)]
    if finite.size == 0:
        return float(floor)
    return max(float(floor), float(finite.max()))


def compute_vorticity(u, v, dx=1.0, dy=None):
    """
    Compute vorticity using central differences on interior cells.

    omega = dv/dx - du/dy

    Parameters
    ----------
    u : ndarray
        X-velocity, shape (ny, nx)
    v : ndarray
        Y-velocity, shape (ny, nx)
    dx : float
        Grid spacing in x
    dy : float, optional
        Grid spacing in y (defaults to dx)

    Returns
    -------
    vorticity : ndarray
        Vorticity field, shape (ny, nx), zero on the boundary
    """
    if dy is None:
        dy = dx

    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)

    vorticity = np.zeros_like(u)
    dv_dx = (v[1:-1, 2:] - v[1:-1, :-2]) / (2.0 * dx)
    du_dy = (u[2:, 1:-1] - u[:-2, 1:-1]) / (2.0 * dy)
    vorticity[1:-1, 1:-1] = dv_dx - du_dy

    return vorticity


def compute_kinetic_energy(field, interior_only=True):
    """
    Total kinetic energy of the field.

    Parameters
    ----------
    field : VelocityField
    interior_only : bool
        Exclude the prescribed boundary cells (default True)

    Returns
    -------
    energy : float
    """
    dx, dy = grid_spacing(field.nx, field.ny)
    u, v = field.as_grids()
    u = u.astype(np.float64)
    v = v.astype(np.float64)

    e = u * u + v * v
    if interior_only:
        e = e[create_interior_mask(field.nx, field.ny)]

    return 0.5 * float(np.sum(e)) * dx * dy


class FieldSnapshot:
    """
    Read-only view of a field prepared for rendering.

    Attributes
    ----------
    u, v : ndarray
        Read-only velocity grids, shape (ny, nx)
    nx, ny : int
        Grid dimensions
    magnitude : ndarray
        Velocity magnitude, shape (ny, nx)
    max_magnitude : float
        Display maximum (>= MIN_DISPLAY_MAGNITUDE)
    time : float
        Simulated time of the snapshot
    step_count : int
        Number of steps taken to reach it
    """

    def __init__(self, u, v, nx, ny, time=0.0, step_count=0):
        self.u = u
        self.v = v
        self.nx = nx
        self.ny = ny
        self.time = time
        self.step_count = step_count

        self.magnitude = compute_velocity_magnitude(u, v)
        self.magnitude.flags.writeable = False
        self.max_magnitude = compute_display_max(u, v)

    def __repr__(self):
        return (f"FieldSnapshot(nx={self.nx}, ny={self.ny}, "
                f"t={self.time:.4f}, max|u|={self.max_magnitude:.4f})")


def take_snapshot(field, time=0.0, step_count=0):
    """
    Build a FieldSnapshot of the given field.

    Parameters
    ----------
    field : VelocityField
    time : float
        Simulated time to attach
    step_count : int
        Step counter to attach

    Returns
    -------
    snapshot : FieldSnapshot
    """
    u, v = field.as_grids()
    return FieldSnapshot(u, v, field.nx, field.ny, time=time, step_count=step_count)
