"""
Lattice construction.

Verifies:
- Column/row counts and centering
- Same-size rebuilds share layout
- Per-row fade profiles and per-point jitter
- Degenerate canvases
"""
import numpy as np
import pytest

from dotmorph.core.lattice import GridPoint, Lattice, LatticeParams
from dotmorph.core.tiers import FadeTier


class TestLayout:

    def test_counts(self):
        lat = Lattice(205, 99, LatticeParams(spacing=20))
        assert lat.columns == 10
        assert lat.rows == 4
        assert len(lat) == 40

    def test_centered(self):
        lat = Lattice(205, 99, LatticeParams(spacing=20))
        left = lat.x.min()
        right = 205 - lat.x.max()
        top = lat.y.min()
        bottom = 99 - lat.y.max()
        assert left == pytest.approx(right)
        assert top == pytest.approx(bottom)

    def test_row_major_order(self):
        lat = Lattice(60, 40, LatticeParams(spacing=20))
        assert list(lat.col) == [0, 1, 2, 0, 1, 2]
        assert list(lat.row) == [0, 0, 0, 1, 1, 1]

    def test_spacing_between_neighbours(self):
        lat = Lattice(100, 100, LatticeParams(spacing=20))
        assert np.diff(lat.x[:lat.columns]) == pytest.approx([20.0] * (lat.columns - 1))

    def test_normalized_coords_span_unit_square(self):
        lat = Lattice(100, 60, LatticeParams(spacing=20))
        assert lat.u.min() == 0.0 and lat.u.max() == 1.0
        assert lat.v.min() == 0.0 and lat.v.max() == 1.0

    def test_single_column_does_not_divide_by_zero(self):
        lat = Lattice(25, 100, LatticeParams(spacing=20))
        assert lat.columns == 1
        assert np.all(lat.u == 0.0)
        assert np.isfinite(lat.x).all()

    def test_starts_dim(self):
        lat = Lattice(100, 100)
        assert np.all(lat.opacity == 0.2)


class TestRebuild:

    def test_same_size_same_layout(self):
        a = Lattice(640, 480, LatticeParams(spacing=20))
        b = Lattice(640, 480, LatticeParams(spacing=20))
        assert len(a) == len(b)
        assert np.array_equal(a.positions(), b.positions())

    def test_fade_values_may_differ(self):
        a = Lattice(640, 480, rng=np.random.default_rng(1))
        b = Lattice(640, 480, rng=np.random.default_rng(2))
        assert not np.array_equal(a.fade_multiplier, b.fade_multiplier)


class TestFadeProfile:

    def test_length_shared_within_row(self, rng):
        lat = Lattice(400, 200, LatticeParams(spacing=20), rng=rng)
        for r in range(lat.rows):
            row_lengths = lat.fade_length[lat.row == r]
            assert np.all(row_lengths == row_lengths[0])

    def test_multiplier_jitter_within_twenty_percent(self):
        tiers = (FadeTier(1.0, 5.0, 5.0),)
        lat = Lattice(400, 200, multiplier_tiers=tiers)
        assert lat.fade_multiplier.min() >= 4.0
        assert lat.fade_multiplier.max() <= 6.0
        assert len(np.unique(lat.fade_multiplier)) > 1

    def test_length_scales_with_band_width(self, fixed_tiers):
        mult, length = fixed_tiers
        lat = Lattice(100, 100, active_column_width=7, multiplier_tiers=mult, length_tiers=length)
        assert np.all(lat.fade_length == 7.0)


class TestDegenerate:

    @pytest.mark.parametrize("size", [(0, 0), (10, 500), (500, 10), (-40, 100)])
    def test_empty(self, size):
        lat = Lattice(*size, LatticeParams(spacing=20))
        assert lat.is_empty
        assert list(lat.points()) == []

    def test_rejects_non_positive_spacing(self):
        with pytest.raises(ValueError):
            LatticeParams(spacing=0)


def test_points_snapshot():
    lat = Lattice(40, 20, LatticeParams(spacing=20))
    points = list(lat.points())
    assert len(points) == 2
    assert isinstance(points[0], GridPoint)
    assert (points[1].col, points[1].row) == (1, 0)
    assert points[0].opacity == 0.2
