"""
Explicit finite-difference solver for 2D lid-driven cavity flow.
"""

from .field import VelocityField
from .stencil import step, step_fast
from .timestep import compute_time_step, viscosity_from_reynolds
from .observables import take_snapshot, FieldSnapshot

__all__ = [
    "VelocityField",
    "step",
    "step_fast",
    "compute_time_step",
    "viscosity_from_reynolds",
    "take_snapshot",
    "FieldSnapshot",
]
