"""
Rendering Tests

Colour ramp, frame rasterization, arrows and the animated front end.
"""

import pytest
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cavity.field import VelocityField
from cavity.observables import take_snapshot
from visualization.field_plots import (
    velocity_to_color,
    render_frame,
    compute_arrows,
    plot_velocity_field,
    plot_velocity_magnitude,
    VELOCITY_CMAP,
)


PURPLE = [150, 100, 200]
CYAN = [0, 200, 255]


class TestColorRamp:

    def test_end_points(self):
        np.testing.assert_array_equal(velocity_to_color(0.0, 1.0), CYAN)
        np.testing.assert_array_equal(velocity_to_color(1.0, 1.0), PURPLE)

    def test_midpoint(self):
        np.testing.assert_array_equal(velocity_to_color(0.5, 1.0), [75, 150, 227])

    def test_saturates_above_max(self):
        np.testing.assert_array_equal(velocity_to_color(3.0, 1.0), PURPLE)

    def test_non_finite_maps_to_top(self):
        rgb = velocity_to_color(np.array([np.nan, np.inf]), 1.0)
        np.testing.assert_array_equal(rgb, [PURPLE, PURPLE])

    def test_vectorized_dtype(self):
        rgb = velocity_to_color(np.linspace(0, 1, 12).reshape(3, 4), 1.0)
        assert rgb.shape == (3, 4, 3)
        assert rgb.dtype == np.uint8

    def test_colormap_matches_ramp_ends(self):
        lo = np.array(VELOCITY_CMAP(0.0)[:3]) * 255
        hi = np.array(VELOCITY_CMAP(1.0)[:3]) * 255
        np.testing.assert_allclose(lo, CYAN, atol=1)
        np.testing.assert_allclose(hi, PURPLE, atol=1)


class TestRenderFrame:

    def test_shape(self):
        snap = take_snapshot(VelocityField.create(20, 20))
        image = render_frame(snap, width=200, height=100)

        assert image.shape == (100, 200, 3)
        assert image.dtype == np.uint8

    def test_lid_drawn_on_top(self):
        """Top pixel row shows the lid, bottom pixel row the resting wall."""
        snap = take_snapshot(VelocityField.create(20, 20))
        image = render_frame(snap, width=500, height=500)

        np.testing.assert_array_equal(image[0, 0], PURPLE)
        np.testing.assert_array_equal(image[0, 250], PURPLE)
        np.testing.assert_array_equal(image[-1, 0], CYAN)
        np.testing.assert_array_equal(image[250, 250], CYAN)

    def test_cell_lookup(self):
        """Pixel blocks map to cells with j counted from the bottom."""
        n = 4
        u = np.zeros((n, n))
        u[1, 2] = 0.5   # cell i = 2, j = 1
        snap = take_snapshot(VelocityField(u, np.zeros((n, n)), n, n))
        image = render_frame(snap, width=40, height=40)

        # cell (2, 1) covers px 20..29, py 20..29
        np.testing.assert_array_equal(image[25, 25], PURPLE)
        np.testing.assert_array_equal(image[15, 25], CYAN)
        np.testing.assert_array_equal(image[25, 15], CYAN)

    def test_non_divisible_size(self):
        snap = take_snapshot(VelocityField.create(30, 30))
        image = render_frame(snap, width=101, height=77)
        assert image.shape == (77, 101, 3)


class TestArrows:

    def test_fluid_at_rest_has_no_arrows(self):
        snap = take_snapshot(VelocityField.create(20, 20))
        arrows = compute_arrows(snap)
        assert arrows.shape == (0, 4)

    def test_arrow_geometry(self):
        n = 20
        u = np.zeros((n, n))
        v = np.zeros((n, n))
        u[2, 2] = 1.0
        v[4, 2] = 0.5
        snap = take_snapshot(VelocityField(u, v, n, n))

        arrows = compute_arrows(snap, width=500, height=500)

        assert arrows.shape == (2, 4)
        # vector step 2, cell width 25, scale 25 * 2 * 0.8 = 40
        np.testing.assert_allclose(arrows[0], [62.5, 437.5, 40.0, 0.0])
        np.testing.assert_allclose(arrows[1], [62.5, 387.5, 0.0, -20.0])

    def test_tiny_vectors_dropped(self):
        n = 20
        u = np.zeros((n, n))
        u[2, 2] = 0.01   # 0.4 px long
        snap = take_snapshot(VelocityField(u, np.zeros((n, n)), n, n))
        assert len(compute_arrows(snap)) == 0


class TestPlots:

    def test_plot_velocity_field(self):
        from simulations.lid_driven_cavity import CavitySimulation

        sim = CavitySimulation(resolution=20, use_fast=False)
        sim.advance(200)

        fig, ax = plt.subplots()
        image, quiver = plot_velocity_field(ax, sim.snapshot())

        assert image.get_array().shape == (500, 500, 3)
        assert quiver is not None
        plt.close(fig)

    def test_plot_velocity_magnitude(self, tmp_path):
        snap = take_snapshot(VelocityField.create(20, 20))
        save_path = os.path.join(str(tmp_path), 'frame.png')

        fig = plot_velocity_magnitude(snap, save_path=save_path)

        assert os.path.exists(save_path)
        plt.close(fig)


class TestAnimator:
    """Widget callbacks and frame updates of the front end."""

    @pytest.fixture
    def animator(self):
        from simulations.lid_driven_cavity import CavitySimulation
        from visualization.animation import CavityAnimator

        anim = CavityAnimator(CavitySimulation(resolution=20, use_fast=False),
                              width=100, height=100)
        yield anim
        plt.close(anim.fig)

    def test_toggle_and_update(self, animator):
        animator.update(0)
        assert animator.sim.step_count == 0

        animator.on_toggle()
        assert animator.sim.is_running
        assert animator.run_button.label.get_text() == 'Pause'

        animator.update(1)
        assert animator.sim.step_count == 1
        assert 'Running' in animator.title.get_text()

    def test_reset(self, animator):
        animator.on_toggle()
        animator.update(0)

        animator.on_reset()

        assert not animator.sim.is_running
        assert animator.sim.step_count == 0
        assert animator.run_button.label.get_text() == 'Simulate'

    def test_controls(self, animator):
        animator.on_reynolds(400.0)
        assert animator.sim.reynolds == 400

        animator.on_resolution(40.0)
        assert animator.sim.resolution == 40
        assert animator.sim.snapshot().nx == 40

    def test_save_gif(self, animator, tmp_path):
        save_path = os.path.join(str(tmp_path), 'cavity.gif')

        animator.save(save_path, num_frames=3, fps=5, dpi=40)

        assert os.path.exists(save_path)
        assert animator.sim.step_count >= 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
