"""Tests for the scanline renderer.

Tests cover:
- Sample budget per sub-pixel
- Exact results for constant-radiance scenes
- Image orientation
- Reproducibility for a fixed seed
- Noise falling with the sample count
- Error reporting and PNG output
"""

import logging

import numpy as np
import pytest
from PIL import Image as PILImage


def _camera():
    from smallpt.camera.pinhole import PinholeCamera

    return PinholeCamera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), scale=0.5, near=0.0)


def _enclosure(emission, color, extra=()):
    from smallpt.geometry.sphere import Sphere
    from smallpt.materials.textures import SolidTexture
    from smallpt.scene.scene import Scene

    return Scene([Sphere(100.0, (0.0, 0.0, 0.0), SolidTexture(emission, color)), *extra])


def _lit_room():
    """Gray diffuse room with a small bright light overhead."""
    from smallpt.geometry.sphere import Sphere
    from smallpt.materials.textures import SolidTexture

    light = Sphere(10.0, (0.0, 60.0, -40.0), SolidTexture((8.0, 8.0, 8.0), (0.0, 0.0, 0.0)))
    return _enclosure((0.0, 0.0, 0.0), (0.5, 0.5, 0.5), extra=(light,))


class TestSampleBudget:
    """Tests for splitting the sample budget over sub-pixels."""

    @pytest.mark.parametrize(
        "samples, expected",
        [(1, 1), (3, 1), (4, 1), (7, 1), (8, 2), (40, 10), (1000, 250)],
    )
    def test_samples_per_subpixel(self, samples, expected):
        """Test that each sub-pixel gets samples // 4 rays, at least one."""
        from smallpt.core.renderer import samples_per_subpixel

        assert samples_per_subpixel(samples) == expected

    def test_effective_samples_recorded(self):
        """Test that the renderer records the samples actually traced."""
        from smallpt.core.renderer import Renderer
        from smallpt.scene.scene import Scene

        renderer = Renderer(Scene([]), _camera(), 4, 3)
        renderer.render(5)
        assert renderer.samples == 4
        renderer.render(2)
        assert renderer.samples == 4

    @pytest.mark.parametrize("samples", [0, -4])
    def test_invalid_sample_count(self, samples):
        """Test that non-positive sample counts are rejected."""
        from smallpt.core.renderer import Renderer
        from smallpt.scene.scene import Scene

        renderer = Renderer(Scene([]), _camera(), 4, 3)
        with pytest.raises(ValueError):
            renderer.render(samples)

    def test_invalid_image_size(self):
        """Test that an empty image is rejected."""
        from smallpt.core.renderer import Renderer
        from smallpt.scene.scene import Scene

        with pytest.raises(ValueError):
            Renderer(Scene([]), _camera(), 0, 3)


class TestConstantScenes:
    """Tests with scenes whose image is known exactly."""

    def test_empty_scene_is_black(self):
        """Test that nothing to hit renders black with opaque alpha."""
        from smallpt.core.renderer import Renderer
        from smallpt.scene.scene import Scene

        renderer = Renderer(Scene([]), _camera(), 8, 6)
        renderer.render(4)
        rgba = renderer.to_rgba()

        assert rgba.shape == (6, 8, 4)
        assert np.all(rgba[:, :, :3] == 0)
        assert np.all(rgba[:, :, 3] == 255)

    def test_uniform_emitter(self):
        """Test that a black emitter around the camera gives one flat color."""
        from smallpt.core.renderer import Renderer
        from smallpt.output.tonemap import to_int

        renderer = Renderer(_enclosure((0.5, 0.5, 0.5), (0.0, 0.0, 0.0)), _camera(), 8, 6)
        renderer.render(8, seed=3)

        assert np.allclose(renderer.linear_image(), 0.5)
        assert np.all(renderer.to_rgba()[:, :, :3] == to_int(0.5))

    def test_subpixels_are_clamped(self):
        """Test that over-bright sub-pixels saturate at 1."""
        from smallpt.core.renderer import Renderer

        renderer = Renderer(_enclosure((5.0, 0.5, 0.0), (0.0, 0.0, 0.0)), _camera(), 4, 4)
        renderer.render(4)
        image = renderer.linear_image()

        assert np.allclose(image[:, :, 0], 1.0)
        assert np.allclose(image[:, :, 1], 0.5)
        assert np.allclose(image[:, :, 2], 0.0)

    def test_top_row_first(self):
        """Test that the top of the view lands in the first image row."""
        from smallpt.core.renderer import Renderer
        from smallpt.geometry.plane import Plane
        from smallpt.materials.textures import SolidTexture
        from smallpt.scene.scene import Scene

        upper = Plane(100.0, 50.0, (-50.0, 0.0, -10.0), SolidTexture((1, 1, 1), (0, 0, 0)))
        renderer = Renderer(Scene([upper]), _camera(), 8, 8)
        renderer.render(4)
        rgba = renderer.to_rgba()

        assert np.all(rgba[0, :, :3] == 255)
        assert np.all(rgba[-1, :, :3] == 0)


class TestRandomStreams:
    """Tests for seeding and convergence."""

    def test_same_seed_same_image(self):
        """Test that a fixed seed reproduces the image exactly."""
        from smallpt.core.renderer import Renderer

        renderer = Renderer(_lit_room(), _camera(), 8, 6)
        renderer.render(8, seed=11)
        first = renderer.linear_image()
        renderer.render(8, seed=11)
        second = renderer.linear_image()
        renderer.render(8, seed=12)
        third = renderer.linear_image()

        assert np.array_equal(first, second)
        assert not np.array_equal(first, third)

    def test_noise_falls_with_samples(self):
        """Test that more samples give a less noisy image.

        Both budgets trace several rays per sub-pixel, so the per-sub-pixel
        clamp does not flatten the noise of the smaller one.
        """
        from smallpt.core.renderer import Renderer

        renderer = Renderer(_lit_room(), _camera(), 16, 12)

        def spread(samples):
            images = []
            for seed in range(6):
                renderer.render(samples, seed=seed)
                images.append(renderer.linear_image())
            return np.std(np.stack(images), axis=0).mean()

        assert spread(256) < 0.6 * spread(16)


class TestErrors:
    """Tests for invariant violations."""

    def test_unknown_reflection_kind_raises(self, gray_texture):
        """Test that an unknown reflection kind aborts the render."""
        from smallpt.core.renderer import Renderer
        from smallpt.errors import InvariantViolation
        from smallpt.geometry.sphere import Sphere
        from smallpt.scene.scene import Scene

        scene = Scene([Sphere(100.0, (0.0, 0.0, 0.0), gray_texture)])
        scene.tex_reflection1[0] = 7
        renderer = Renderer(scene, _camera(), 4, 3)

        with pytest.raises(InvariantViolation):
            renderer.render(4)


class TestOutput:
    """Tests for reading out the rendered image."""

    def test_save_png(self, tmp_path):
        """Test that save writes a readable RGBA PNG of the right size."""
        from smallpt.core.renderer import Renderer

        renderer = Renderer(_enclosure((0.5, 0.5, 0.5), (0.0, 0.0, 0.0)), _camera(), 8, 6)
        renderer.render(4)
        path = renderer.save(tmp_path / "out.png")

        assert path.exists()
        with PILImage.open(path) as image:
            assert image.size == (8, 6)
            assert image.mode == "RGBA"
            assert np.array_equal(np.asarray(image), renderer.to_rgba())

    def test_timing_logged(self, caplog):
        """Test that each render logs its sample count and backend."""
        from smallpt.core.renderer import Renderer
        from smallpt.scene.scene import Scene

        renderer = Renderer(Scene([]), _camera(), 4, 3, backend="cpu")
        with caplog.at_level(logging.INFO, logger="smallpt"):
            renderer.render(8)

        assert "Samples:8 Type:cpu Time:" in caplog.text
