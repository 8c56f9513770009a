"""Silhouette sampling into a particle field."""
import numpy as np
import pytest

from dotmorph.core.particles import Particle, ParticleField, grid_centers, sample_silhouette
from dotmorph.utils.silhouette import MaskSilhouette, delta_silhouette, pie_silhouette, polygon_silhouette


class Disc:
    """Analytic silhouette: disc of radius 40 at (50, 50) in a 100x100 box."""
    bounds = (0.0, 0.0, 100.0, 100.0)

    def __init__(self):
        self.calls = []

    def contains(self, x, y):
        self.calls.append((x, y))
        return (x - 50) ** 2 + (y - 50) ** 2 <= 40 ** 2


class Broken:
    bounds = (0.0, 0.0, 50.0, 50.0)

    def contains(self, x, y):
        if x > 25:
            raise RuntimeError("path not loaded")
        return True


class TestGridCenters:

    def test_cell_centers(self):
        centers = grid_centers((10.0, 20.0, 30.0, 20.0), 10.0)
        assert centers.tolist() == [
            [15.0, 25.0], [25.0, 25.0], [35.0, 25.0],
            [15.0, 35.0], [25.0, 35.0], [35.0, 35.0],
        ]

    @pytest.mark.parametrize("bounds", [(0, 0, 0, 100), (0, 0, 100, 0), (0, 0, 5, 5)])
    def test_degenerate_bounds(self, bounds):
        assert grid_centers(bounds, 10.0).shape == (0, 2)

    def test_rejects_non_positive_spacing(self):
        with pytest.raises(ValueError):
            grid_centers((0, 0, 10, 10), 0)


class TestSampling:

    def test_included_iff_contains(self):
        disc = Disc()
        field = sample_silhouette(disc, spacing=10)
        candidates = list(disc.calls)
        assert len(candidates) == 100
        inside = {(x, y) for x, y in candidates if (x - 50) ** 2 + (y - 50) ** 2 <= 40 ** 2}
        assert {tuple(h) for h in field.home.tolist()} == inside

    def test_deterministic(self):
        a = sample_silhouette(Disc(), spacing=7)
        b = sample_silhouette(Disc(), spacing=7)
        assert np.array_equal(a.home, b.home)

    def test_starts_at_rest(self):
        field = sample_silhouette(Disc(), spacing=10)
        assert np.array_equal(field.position, field.home)
        assert np.all(field.velocity == 0)
        assert np.all(field.scale == 1.0)

    def test_home_is_read_only(self):
        field = sample_silhouette(Disc(), spacing=10)
        with pytest.raises(ValueError):
            field.home[0, 0] = -1

    def test_missing_silhouette_gives_empty_field(self):
        field = sample_silhouette(None)
        assert field.is_empty

    def test_raising_contains_counts_as_outside(self):
        field = sample_silhouette(Broken(), spacing=10)
        assert len(field) == 15
        assert field.home[:, 0].max() <= 25

    def test_particles_snapshot(self):
        field = ParticleField(np.array([[1.0, 2.0]]))
        (p,) = list(field.particles())
        assert p == Particle(1.0, 2.0, 1.0, 2.0, 0.0, 0.0, 1.0)


class TestRasterSilhouettes:

    def test_mask_lookup(self):
        mask = np.zeros((4, 6), dtype=bool)
        mask[1, 2] = True
        sil = MaskSilhouette(mask, origin=(10, 20))
        assert sil.bounds == (10.0, 20.0, 6.0, 4.0)
        assert sil.contains(12.5, 21.5)
        assert not sil.contains(11.5, 21.5)
        assert not sil.contains(-5, -5)
        assert not sil.contains(100, 21.5)

    def test_from_gray_threshold(self):
        gray = np.array([[0.1, 0.9]])
        sil = MaskSilhouette.from_gray(gray, threshold=0.5)
        assert not sil.contains(0.5, 0.5)
        assert sil.contains(1.5, 0.5)

    def test_polygon(self):
        sil = polygon_silhouette([(10, 10), (90, 10), (90, 90), (10, 90)], 100, 100)
        assert sil.contains(50, 50)
        assert not sil.contains(5, 5)

    def test_pie_has_gap(self):
        sil = pie_silhouette(200)
        assert sil.contains(100 - 50, 100)  # left side of the disc
        assert not sil.contains(100 + 50, 100)  # inside the removed wedge
        assert not sil.contains(2, 2)

    def test_delta_samples_particles(self):
        field = sample_silhouette(delta_silhouette(300), spacing=15)
        assert 0 < len(field) < 400
