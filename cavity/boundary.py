"""
Cavity Boundary Conditions

Dirichlet velocity conditions for the lid-driven cavity:
- Moving lid (top row): u = LID_VELOCITY, v = 0
- No-slip walls (bottom row, left and right columns): u = v = 0

The lid row is written first and the walls afterwards, so the two top
corners end up with wall values.
"""

import numpy as np
from .constants import LID_VELOCITY


def create_cavity_walls(nx, ny):
    """
    Create boundary masks for the cavity.

    Parameters
    ----------
    nx, ny : int
        Grid dimensions

    Returns
    -------
    wall_mask : ndarray
        Boolean mask for stationary walls (bottom, left, right), shape (ny, nx)
    lid_mask : ndarray
        Boolean mask for the moving lid (top row without corners), shape (ny, nx)
    """
    wall_mask = np.zeros((ny, nx), dtype=bool)
    wall_mask[0, :] = True
    wall_mask[:, 0] = True
    wall_mask[:, -1] = True

    lid_mask = np.zeros((ny, nx), dtype=bool)
    lid_mask[-1, 1:-1] = True

    return wall_mask, lid_mask


def create_interior_mask(nx, ny):
    """Boolean mask of cells updated by the stencil, shape (ny, nx)."""
    interior = np.zeros((ny, nx), dtype=bool)
    interior[1:-1, 1:-1] = True
    return interior


def apply_cavity_boundaries(u, v, lid_velocity=LID_VELOCITY):
    """
    Overwrite boundary cells of freshly computed grids in place.

    Parameters
    ----------
    u : ndarray
        X-velocity, shape (ny, nx)
    v : ndarray
        Y-velocity, shape (ny, nx)
    lid_velocity : float
        Lid speed (default LID_VELOCITY)

    Returns
    -------
    u, v : ndarray
        The same arrays, for chaining
    """
    # Lid
    u[-1, :] = lid_velocity
    v[-1, :] = 0.0

    # Bottom wall
    u[0, :] = 0.0
    v[0, :] = 0.0

    # Left and right walls
    u[:, 0] = 0.0
    v[:, 0] = 0.0
    u[:, -1] = 0.0
    v[:, -1] = 0.0

    return u, v
