"""
Time-Step Policy

Stability bound for the explicit diffusion/advection update.

The scheme is forward Euler in time, so the step size must respect both
the diffusive limit and the advective (CFL) limit:

    dt = min(DIFFUSIVE_SAFETY * dx^2 / nu, ADVECTIVE_SAFETY * dx)

Explicit diffusion alone is stable for nu * dt / dx^2 <= 0.5 summed over
both directions; the 0.25 factor leaves room for the advection term. The
bound is recomputed on every step so the solver follows Reynolds number
changes made while the simulation is running.
"""

from .constants import (
    DIFFUSIVE_SAFETY,
    ADVECTIVE_SAFETY,
    DOMAIN_LENGTH,
    MIN_GRID_SIZE,
)


def viscosity_from_reynolds(re, u_lid=1.0, length=DOMAIN_LENGTH):
    """
    Compute kinematic viscosity from Reynolds number.

    nu = U * L / Re

    Parameters
    ----------
    re : float
        Reynolds number (must be > 0)
    u_lid : float
        Lid velocity (default 1.0)
    length : float
        Cavity length (default 1.0)

    Returns
    -------
    nu : float
        Kinematic viscosity
    """
    if re <= 0:
        raise ValueError(f"Reynolds number must be > 0, got {re}")
    return u_lid * length / re


def reynolds_from_viscosity(nu, u_lid=1.0, length=DOMAIN_LENGTH):
    """
    Compute Reynolds number from kinematic viscosity.

    Re = U * L / nu
    """
    if nu <= 0:
        raise ValueError(f"Viscosity must be > 0, got {nu}")
    return u_lid * length / nu


def grid_spacing(nx, ny, length=DOMAIN_LENGTH):
    """
    Grid spacing of the unit cavity.

    Returns
    -------
    dx, dy : float
        length / nx and length / ny
    """
    return length / nx, length / ny


def compute_time_step(nx, nu, diffusive_safety=DIFFUSIVE_SAFETY,
                      advective_safety=ADVECTIVE_SAFETY):
    """
    Compute the stable time step for the current grid and viscosity.

    Parameters
    ----------
    nx : int
        Number of cells along x (dx = 1 / nx)
    nu : float
        Kinematic viscosity (must be > 0)
    diffusive_safety : float
        Factor on the diffusive limit dx^2 / nu
    advective_safety : float
        Factor on the advective limit dx

    Returns
    -------
    dt : float
        Time step size
    """
    if nu <= 0:
        raise ValueError(f"Viscosity must be > 0 for stability, got {nu}")

    dx = DOMAIN_LENGTH / nx
    return min(diffusive_safety * dx * dx / nu, advective_safety * dx)


def diffusion_number(nx, nu, dt):
    """Diffusion number nu * dt / dx^2 (explicit limit 0.25 per direction in 2D)."""
    dx = DOMAIN_LENGTH / nx
    return nu * dt / (dx * dx)


def validate_step_parameters(field, nx, ny, nu):
    """
    Reject parameters for which a step is undefined.

    Parameters
    ----------
    field : VelocityField
        Current state
    nx, ny : int
        Grid dimensions the caller believes the field has
    nu : float
        Kinematic viscosity

    Raises
    ------
    ValueError
        If nu <= 0, the grid has no interior cells, or the field does not
        match (nx, ny)
    """
    if nu <= 0:
        raise ValueError(f"Viscosity must be > 0 for stability, got {nu}")
    if nx < MIN_GRID_SIZE or ny < MIN_GRID_SIZE:
        raise ValueError(
            f"Grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE} "
            f"to have interior cells, got {nx}x{ny}"
        )
    if field.u.size != nx * ny or field.v.size != nx * ny:
        raise ValueError(
            f"Field has {field.u.size} cells, expected nx*ny = {nx * ny}"
        )
