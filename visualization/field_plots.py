"""
Field Visualization

Colour mapping, frame rasterization and velocity arrows for cavity snapshots.

A frame is an RGB image of width x height pixels. Each pixel shows the
velocity magnitude of the cell under it, normalized by the per-frame
maximum and mapped onto a cyan -> blue -> purple ramp.
"""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap


# Ramp end points (0, 0.5, 1) of velocity_to_color, as a matplotlib colormap
VELOCITY_CMAP = LinearSegmentedColormap.from_list(
    "cavity_velocity",
    [(0.0, 200 / 255, 1.0), (75 / 255, 150 / 255, 230 / 255), (150 / 255, 100 / 255, 200 / 255)],
)

ARROW_COLOR = (1.0, 1.0, 1.0, 0.3)


def velocity_to_color(magnitude, max_mag):
    """
    Map velocity magnitude to an RGB colour.

        n = min(|u| / max, 1)
        r = floor(150 * n), g = floor(200 - 100 * n), b = floor(255 - 55 * n)

    Non-finite magnitudes map to the top of the ramp.

    Parameters
    ----------
    magnitude : float or ndarray
        Velocity magnitude
    max_mag : float
        Normalization maximum (> 0)

    Returns
    -------
    rgb : ndarray
        uint8 colours, shape magnitude.shape + (3,)
    """
    n = np.minimum(np.asarray(magnitude, dtype=np.float64) / max_mag, 1.0)
    n = np.where(np.isfinite(n), n, 1.0)

    rgb = np.empty(n.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = np.floor(n * 150)
    rgb[..., 1] = np.floor(200 - n * 100)
    rgb[..., 2] = np.floor(255 - n * 55)
    return rgb


def render_frame(snapshot, width=500, height=500):
    """
    Rasterize a snapshot into an RGB image.

    Pixel (px, py), with py counted down from the top, shows cell
        i = floor(px / cell_width)
        j = floor((height - py - 1) / cell_height)
    so the lid row is drawn at the top of the image.

    Parameters
    ----------
    snapshot : FieldSnapshot
        Field to draw
    width, height : int
        Image size in pixels

    Returns
    -------
    image : ndarray
        uint8 image, shape (height, width, 3)
    """
    nx, ny = snapshot.nx, snapshot.ny
    cell_w = width / nx
    cell_h = height / ny

    i = np.floor(np.arange(width) / cell_w).astype(np.intp)
    j = np.floor((height - np.arange(height) - 1) / cell_h).astype(np.intp)
    np.clip(i, 0, nx - 1, out=i)
    np.clip(j, 0, ny - 1, out=j)

    mag = snapshot.magnitude[j[:, None], i[None, :]]
    return velocity_to_color(mag, snapshot.max_magnitude)


def compute_arrows(snapshot, width=500, height=500):
    """
    Velocity arrows in screen coordinates.

    Arrows are placed every max(2, nx // 20) cells away from the walls and
    scaled by cell_width * step * 0.8. Arrows shorter than half a pixel
    are dropped.

    Parameters
    ----------
    snapshot : FieldSnapshot
    width, height : int
        Image size in pixels

    Returns
    -------
    arrows : ndarray
        Rows of (x, y, dx, dy) in pixels, y pointing down, shape (k, 4)
    """
    nx, ny = snapshot.nx, snapshot.ny
    cell_w = width / nx
    cell_h = height / ny
    vector_step = max(2, nx // 20)
    scale = cell_w * vector_step * 0.8

    arrows = []
    for j in range(vector_step, ny - vector_step, vector_step):
        for i in range(vector_step, nx - vector_step, vector_step):
            vx = float(snapshot.u[j, i]) * scale
            vy = -float(snapshot.v[j, i]) * scale

            if np.hypot(vx, vy) > 0.5:
                x = (i + 0.5) * cell_w
                y = height - (j + 0.5) * cell_h
                arrows.append((x, y, vx, vy))

    return np.array(arrows, dtype=np.float64).reshape(-1, 4)


def plot_velocity_field(ax, snapshot, width=500, height=500, show_arrows=True):
    """
    Draw a snapshot (magnitude image plus arrows) into an axes.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
    snapshot : FieldSnapshot
    width, height : int
        Frame size in pixels
    show_arrows : bool
        Overlay velocity arrows

    Returns
    -------
    image : AxesImage
    quiver : Quiver or None
    """
    image = ax.imshow(render_frame(snapshot, width, height),
                      interpolation='nearest', extent=[0, width, height, 0])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_xticks([])
    ax.set_yticks([])

    quiver = None
    if show_arrows:
        arrows = compute_arrows(snapshot, width, height)
        if len(arrows):
            quiver = ax.quiver(arrows[:, 0], arrows[:, 1], arrows[:, 2], arrows[:, 3],
                               angles='xy', scale_units='xy', scale=1,
                               color=ARROW_COLOR, width=0.003)

    return image, quiver


def plot_velocity_magnitude(snapshot, title="Velocity Magnitude", save_path=None):
    """Plot a snapshot with a colour legend in its own figure."""
    fig, (ax, cax) = plt.subplots(2, 1, figsize=(6, 7),
                                  gridspec_kw={'height_ratios': [12, 1]})
    plot_velocity_field(ax, snapshot)
    ax.set_title(f"{title} (t = {snapshot.time:.3f})")
    draw_color_legend(cax)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved: {save_path}")

    return fig


def draw_color_legend(ax):
    """Horizontal 0 .. max legend of the magnitude ramp."""
    gradient = np.linspace(0, 1, 256)[None, :]
    ax.imshow(gradient, aspect='auto', cmap=VELOCITY_CMAP, extent=[0, 1, 0, 1])
    ax.set_yticks([])
    ax.set_xticks([0.0, 0.5, 1.0])
    ax.set_xticklabels(['0', '|u|', 'max'])
    ax.set_title('Velocity Magnitude', fontsize=9)
    return ax
