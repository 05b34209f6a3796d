"""
Cavity Constants and Control Ranges

Defines the unit-square lid-driven cavity and the stability factors of the
explicit scheme.
"""
import numpy as np

# Cell layout (flattened row-major, idx = j * nx + i)
#
#     j = ny-1   L L L L L     L: lid, u = LID_VELOCITY
#                W . . . W     W: no-slip wall, u = v = 0
#                W . . . W     .: interior, stencil update
#     j = 0      W W W W W

# Lid velocity and domain length
LID_VELOCITY = 1.0
DOMAIN_LENGTH = 1.0

# Storage precision for u, v
FIELD_DTYPE = np.float32

# CFL-style safety factors: dt = min(DIFFUSIVE * dx^2 / nu, ADVECTIVE * dx)
DIFFUSIVE_SAFETY = 0.25
ADVECTIVE_SAFETY = 0.1

# Smallest grid with at least one interior cell
MIN_GRID_SIZE = 3

# Driver controls: (min, max, step)
RESOLUTION_RANGE = (20, 100, 10)
REYNOLDS_RANGE = (10, 1000, 10)

DEFAULT_RESOLUTION = 50
DEFAULT_REYNOLDS = 100

# Floor for the per-frame display maximum
MIN_DISPLAY_MAGNITUDE = 0.001
