"""
Velocity Field

Discretized (u, v) state of the cavity on a uniform nx x ny grid.

Both components are stored as flat float32 arrays in row-major order:

    idx = j * nx + i

with i the column (x) index and j the row (y) index. Row j = 0 is the
bottom wall and row j = ny - 1 is the moving lid.

Arrays held by a field are read-only. A solver step never edits a field;
it builds the replacement arrays and returns a new field.
"""

import numpy as np
from .constants import LID_VELOCITY, FIELD_DTYPE


def _frozen(a):
    a.flags.writeable = False
    return a


class VelocityField:
    """
    Read-only pair of velocity grids.

    Parameters
    ----------
    u : array_like
        Horizontal velocity, length nx * ny (or shape (ny, nx))
    v : array_like
        Vertical velocity, length nx * ny (or shape (ny, nx))
    nx, ny : int
        Grid dimensions
    copy : bool
        Copy the input arrays (default True). The solver passes False for
        buffers it has just allocated.

    Attributes
    ----------
    u, v : ndarray
        Flat float32 arrays, shape (nx * ny,)
    """

    def __init__(self, u, v, nx, ny, copy=True):
        nx = int(nx)
        ny = int(ny)
        size = nx * ny

        if copy:
            u = np.array(u, dtype=FIELD_DTYPE).ravel()
            v = np.array(v, dtype=FIELD_DTYPE).ravel()
        else:
            u = np.ascontiguousarray(u, dtype=FIELD_DTYPE).ravel()
            v = np.ascontiguousarray(v, dtype=FIELD_DTYPE).ravel()

        if u.size != size or v.size != size:
            raise ValueError(
                f"Field arrays must have nx*ny = {size} cells, "
                f"got u: {u.size}, v: {v.size}"
            )

        self.nx = nx
        self.ny = ny
        self.u = _frozen(u)
        self.v = _frozen(v)

    @classmethod
    def create(cls, nx, ny):
        """
        Create a fresh cavity field at rest with the lid moving.

        All cells start at zero, then every cell of the top row gets
        u = LID_VELOCITY.

        Parameters
        ----------
        nx, ny : int
            Grid dimensions

        Returns
        -------
        field : VelocityField
        """
        u = np.zeros(nx * ny, dtype=FIELD_DTYPE)
        v = np.zeros(nx * ny, dtype=FIELD_DTYPE)

        u[(ny - 1) * nx:] = LID_VELOCITY

        return cls(u, v, nx, ny, copy=False)

    @property
    def size(self):
        """Number of cells."""
        return self.nx * self.ny

    @property
    def shape(self):
        """Grid shape as (ny, nx)."""
        return (self.ny, self.nx)

    def index(self, i, j):
        """Flat index of cell (i, j)."""
        return j * self.nx + i

    def as_grids(self):
        """
        Return (ny, nx) views of u and v.

        Returns
        -------
        u2d, v2d : ndarray
            Read-only views, row j = 0 is the bottom wall
        """
        return self.u.reshape(self.ny, self.nx), self.v.reshape(self.ny, self.nx)

    def copy(self):
        """Return an independent copy of this field."""
        return VelocityField(self.u, self.v, self.nx, self.ny, copy=True)

    def __repr__(self):
        return f"VelocityField(nx={self.nx}, ny={self.ny})"
