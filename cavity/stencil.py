"""
Explicit Momentum Update

One forward-Euler step of the momentum equation without pressure:

    du/dt = nu * lap(u) - u * du/dx - v * du/dy
    dv/dt = nu * lap(v) - u * dv/dx - v * dv/dy

Spatial discretization on interior cells (1 <= i <= nx-2, 1 <= j <= ny-2):
- Diffusion: 5-point Laplacian
      (L - 2C + R) / dx^2 + (D - 2C + U) / dy^2
- Advection: first-order upwind. The x-derivative of either component is
  taken backward when u[idx] > 0 and forward otherwise; the y-derivative
  is chosen the same way by the sign of v[idx].

Each call reads the input grids and writes a separate pair of output grids
(neighbour reads never see partially updated values), then enforces the
cavity boundary conditions on the output.

Arithmetic is done in float64 and the result is stored as float32.
"""

import numpy as np
from numba import njit, prange
from .constants import FIELD_DTYPE
from .field import VelocityField
from .boundary import apply_cavity_boundaries
from .timestep import compute_time_step, grid_spacing, validate_step_parameters


def upwind_derivative(center, backward, forward, h, transport):
    """
    First-order upwind derivative.

    Parameters
    ----------
    center : ndarray
        Values at the cell
    backward : ndarray
        Values at the upstream-for-positive-flow neighbour (left or below)
    forward : ndarray
        Values at the opposite neighbour (right or above)
    h : float
        Grid spacing along the derivative direction
    transport : ndarray
        Transporting velocity component selecting the branch

    Returns
    -------
    derivative : ndarray
        (center - backward) / h where transport > 0, else (forward - center) / h
    """
    return np.where(transport > 0, (center - backward) / h, (forward - center) / h)


def step(field, nx, ny, nu):
    """
    Advance the field by one explicit time step (vectorized NumPy).

    Parameters
    ----------
    field : VelocityField
        Current state (not modified)
    nx, ny : int
        Grid dimensions
    nu : float
        Kinematic viscosity, 1 / Re (must be > 0)

    Returns
    -------
    field_new : VelocityField
        State after one step of size compute_time_step(nx, nu)
    """
    validate_step_parameters(field, nx, ny, nu)

    dx, dy = grid_spacing(nx, ny)
    dt = compute_time_step(nx, nu)

    u = field.u.reshape(ny, nx).astype(np.float64)
    v = field.v.reshape(ny, nx).astype(np.float64)

    # Neighbour slices of the interior block
    uc, ul, ur, ud, uu = u[1:-1, 1:-1], u[1:-1, :-2], u[1:-1, 2:], u[:-2, 1:-1], u[2:, 1:-1]
    vc, vl, vr, vd, vu = v[1:-1, 1:-1], v[1:-1, :-2], v[1:-1, 2:], v[:-2, 1:-1], v[2:, 1:-1]

    # Diffusion
    lap_u = (ul - 2.0 * uc + ur) / (dx * dx) + (ud - 2.0 * uc + uu) / (dy * dy)
    lap_v = (vl - 2.0 * vc + vr) / (dx * dx) + (vd - 2.0 * vc + vu) / (dy * dy)

    # Advection
    du_dx = upwind_derivative(uc, ul, ur, dx, uc)
    du_dy = upwind_derivative(uc, ud, uu, dy, vc)
    dv_dx = upwind_derivative(vc, vl, vr, dx, uc)
    dv_dy = upwind_derivative(vc, vd, vu, dy, vc)

    u_new = np.zeros((ny, nx), dtype=FIELD_DTYPE)
    v_new = np.zeros((ny, nx), dtype=FIELD_DTYPE)

    u_new[1:-1, 1:-1] = uc + dt * (nu * lap_u - uc * du_dx - vc * du_dy)
    v_new[1:-1, 1:-1] = vc + dt * (nu * lap_v - uc * dv_dx - vc * dv_dy)

    apply_cavity_boundaries(u_new, v_new)

    return VelocityField(u_new, v_new, nx, ny, copy=False)


@njit(parallel=True, cache=True)
def step_numba(u, v, u_out, v_out, nu, dt, dx, dy):
    """
    Numba-accelerated interior update.

    Parameters
    ----------
    u, v : ndarray
        Input velocity (float64), shape (ny, nx)
    u_out, v_out : ndarray
        Output velocity (float32), shape (ny, nx); only interior cells written
    nu : float
        Kinematic viscosity
    dt : float
        Time step
    dx, dy : float
        Grid spacing
    """
    ny, nx = u.shape
    dx2 = dx * dx
    dy2 = dy * dy

    for j in prange(1, ny - 1):
        for i in range(1, nx - 1):
            uc = u[j, i]
            ul = u[j, i - 1]
            ur = u[j, i + 1]
            ud = u[j - 1, i]
            uu = u[j + 1, i]

            vc = v[j, i]
            vl = v[j, i - 1]
            vr = v[j, i + 1]
            vd = v[j - 1, i]
            vu = v[j + 1, i]

            lap_u = (ul - 2.0 * uc + ur) / dx2 + (ud - 2.0 * uc + uu) / dy2
            lap_v = (vl - 2.0 * vc + vr) / dx2 + (vd - 2.0 * vc + vu) / dy2

            if uc > 0:
                du_dx = (uc - ul) / dx
                dv_dx = (vc - vl) / dx
            else:
                du_dx = (ur - uc) / dx
                dv_dx = (vr - vc) / dx

            if vc > 0:
                du_dy = (uc - ud) / dy
                dv_dy = (vc - vd) / dy
            else:
                du_dy = (uu - uc) / dy
                dv_dy = (vu - vc) / dy

            u_out[j, i] = uc + dt * (nu * lap_u - uc * du_dx - vc * du_dy)
            v_out[j, i] = vc + dt * (nu * lap_v - uc * dv_dx - vc * dv_dy)


def step_fast(field, nx, ny, nu):
    """
    Fast explicit step using Numba.

    Same algorithm and signature as step().

    Parameters
    ----------
    field : VelocityField
        Current state (not modified)
    nx, ny : int
        Grid dimensions
    nu : float
        Kinematic viscosity (must be > 0)

    Returns
    -------
    field_new : VelocityField
    """
    validate_step_parameters(field, nx, ny, nu)

    dx, dy = grid_spacing(nx, ny)
    dt = compute_time_step(nx, nu)

    u = field.u.reshape(ny, nx).astype(np.float64)
    v = field.v.reshape(ny, nx).astype(np.float64)

    u_new = np.zeros((ny, nx), dtype=FIELD_DTYPE)
    v_new = np.zeros((ny, nx), dtype=FIELD_DTYPE)

    step_numba(u, v, u_new, v_new, float(nu), dt, dx, dy)

    apply_cavity_boundaries(u_new, v_new)

    return VelocityField(u_new, v_new, nx, ny, copy=False)
