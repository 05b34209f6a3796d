"""
Animation Front End

Interactive matplotlib window and GIF export for the cavity simulation.

The window shows a velocity-magnitude frame with arrows, Reynolds number
and resolution sliders, Simulate/Pause and Reset buttons, a colour legend
and the governing equations.
"""

import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.widgets import Slider, Button
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cavity.constants import RESOLUTION_RANGE, REYNOLDS_RANGE
from simulations.lid_driven_cavity import CavitySimulation
from visualization.field_plots import (
    render_frame,
    compute_arrows,
    draw_color_legend,
    ARROW_COLOR,
)


EQUATIONS = (
    r"Momentum:  $\rho(\partial_t \mathbf{u} + \mathbf{u}\cdot\nabla\mathbf{u})"
    r" = -\nabla p + \mu\nabla^2\mathbf{u} + \mathbf{f}$"
    "\n"
    r"Continuity:  $\nabla\cdot\mathbf{u} = 0$"
)


class CavityAnimator:
    """
    Animated view of a CavitySimulation.

    Parameters
    ----------
    simulation : CavitySimulation, optional
        Simulation to drive (created with defaults if None)
    width, height : int
        Frame size in pixels
    interval : int
        Milliseconds between animation ticks
    show_arrows : bool
        Overlay velocity arrows
    """

    def __init__(self, simulation=None, width=500, height=500, interval=16,
                 show_arrows=True):
        self.sim = simulation if simulation is not None else CavitySimulation()
        self.width = width
        self.height = height
        self.interval = interval
        self.show_arrows = show_arrows
        self.anim = None

        self._build_figure()

    def _build_figure(self):
        self.fig = plt.figure(figsize=(11, 7))

        self.ax = self.fig.add_axes([0.04, 0.16, 0.55, 0.78])
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        snapshot = self.sim.snapshot()
        self.image = self.ax.imshow(render_frame(snapshot, self.width, self.height),
                                    interpolation='nearest',
                                    extent=[0, self.width, self.height, 0])
        self.quiver = None
        self.title = self.ax.set_title('')

        legend_ax = self.fig.add_axes([0.04, 0.06, 0.55, 0.04])
        draw_color_legend(legend_ax)

        re_lo, re_hi, re_step = REYNOLDS_RANGE
        res_lo, res_hi, res_step = RESOLUTION_RANGE

        self.re_slider = Slider(self.fig.add_axes([0.70, 0.86, 0.22, 0.03]),
                                'Re', re_lo, re_hi, valinit=self.sim.reynolds,
                                valstep=re_step)
        self.res_slider = Slider(self.fig.add_axes([0.70, 0.80, 0.22, 0.03]),
                                 'Grid', res_lo, res_hi, valinit=self.sim.resolution,
                                 valstep=res_step)
        self.run_button = Button(self.fig.add_axes([0.66, 0.70, 0.12, 0.06]), 'Simulate')
        self.reset_button = Button(self.fig.add_axes([0.80, 0.70, 0.12, 0.06]), 'Reset')

        self.re_slider.on_changed(self.on_reynolds)
        self.res_slider.on_changed(self.on_resolution)
        self.run_button.on_clicked(self.on_toggle)
        self.reset_button.on_clicked(self.on_reset)

        self.fig.text(0.64, 0.45, EQUATIONS, fontsize=10, va='center')
        self.fig.text(0.64, 0.25,
                      "Lid-driven cavity flow\n"
                      "Top boundary moves right at u = 1\n"
                      "No-slip walls on all other sides",
                      fontsize=9, va='center', color='0.3')

        self.draw(snapshot)

    # -------------------------------------------------------------------------
    # Widget callbacks
    # -------------------------------------------------------------------------

    def on_reynolds(self, value):
        self.sim.set_reynolds(value)
        self._refresh()

    def on_resolution(self, value):
        self.sim.set_resolution(int(value))
        self._refresh()

    def on_toggle(self, event=None):
        running = self.sim.toggle()
        self.run_button.label.set_text('Pause' if running else 'Simulate')
        self._refresh()

    def on_reset(self, event=None):
        self.sim.reset()
        self.run_button.label.set_text('Simulate')
        self._refresh()

    def _refresh(self):
        self.draw(self.sim.snapshot())
        self.fig.canvas.draw_idle()

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def draw(self, snapshot):
        """Update the image, arrows and title from a snapshot."""
        self.image.set_data(render_frame(snapshot, self.width, self.height))

        if self.quiver is not None:
            self.quiver.remove()
            self.quiver = None

        if self.show_arrows:
            arrows = compute_arrows(snapshot, self.width, self.height)
            if len(arrows):
                self.quiver = self.ax.quiver(arrows[:, 0], arrows[:, 1],
                                             arrows[:, 2], arrows[:, 3],
                                             angles='xy', scale_units='xy', scale=1,
                                             color=ARROW_COLOR, width=0.003)

        state = 'Running' if self.sim.is_running else 'Paused'
        self.title.set_text(f'Lid-Driven Cavity Flow  [{state}]  '
                            f'Re = {self.sim.reynolds}, '
                            f'{snapshot.nx}×{snapshot.ny}, t = {snapshot.time:.3f}')

        artists = [self.image, self.title]
        if self.quiver is not None:
            artists.append(self.quiver)
        return artists

    def update(self, frame_idx):
        """FuncAnimation callback: one tick of the simulation."""
        return self.draw(self.sim.tick())

    def start(self):
        """Create the FuncAnimation driving the simulation."""
        self.anim = animation.FuncAnimation(self.fig, self.update, interval=self.interval,
                                            blit=False, cache_frame_data=False)
        return self.anim

    def show(self):
        self.start()
        plt.show()

    def save(self, save_path, num_frames=200, fps=30, dpi=100):
        """
        Run the simulation and write the frames to a GIF.

        Parameters
        ----------
        save_path : str
            Output path (.gif)
        num_frames : int
            Number of frames (one tick each)
        fps : int
            Playback frame rate
        dpi : int
            Output resolution

        Returns
        -------
        save_path : str
        """
        self.sim.play()
        anim = animation.FuncAnimation(self.fig, self.update, frames=num_frames,
                                       interval=self.interval, blit=False)

        os.makedirs(os.path.dirname(save_path) or '.', exist_ok=True)
        print(f"Saving to {save_path}...")
        anim.save(save_path, writer='pillow', fps=fps, dpi=dpi)
        print(f"Animation saved: {save_path}")

        return save_path


if __name__ == "__main__":
    animator = CavityAnimator(CavitySimulation(resolution=50, reynolds=100, substeps=4))
    animator.show()
