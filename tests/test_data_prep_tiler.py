# -*- coding: utf-8 -*-
"""
Tests for the Tiler class and tile window helpers.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-03-04

Modified
--------
2026-03-05
"""

import numpy as np
import pytest

from sarcal.data_prep import TileWindow, Tiler, validate_window, window_view
from sarcal.exceptions import ValidationError


# ---------------------------------------------------------------------------
# Constructor
# ---------------------------------------------------------------------------

class TestTilerInit:
    """Test Tiler constructor validation."""

    def test_valid_construction(self):
        tiler = Tiler(nrows=100, ncols=200, tile_size=32)
        assert tiler.shape == (100, 200)
        assert tiler.tile_size == (32, 32)

    def test_tuple_tile_size(self):
        tiler = Tiler(nrows=100, ncols=100, tile_size=(32, 64))
        assert tiler.tile_size == (32, 64)

    def test_non_int_nrows_raises(self):
        with pytest.raises(ValidationError, match="must be int"):
            Tiler(nrows=100.0, ncols=100, tile_size=32)

    def test_zero_tile_size_raises(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Tiler(nrows=100, ncols=100, tile_size=0)

    def test_negative_ncols_raises(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Tiler(nrows=100, ncols=-10, tile_size=32)

    def test_repr(self):
        tiler = Tiler(nrows=100, ncols=200, tile_size=32)
        assert repr(tiler) == "Tiler(nrows=100, ncols=200, tile_size=(32, 32))"


# ---------------------------------------------------------------------------
# Window grid
# ---------------------------------------------------------------------------

class TestTilerWindows:
    """Test the non-overlapping window grid."""

    def test_even_division(self):
        windows = Tiler(nrows=100, ncols=100, tile_size=50).windows()
        assert windows == [
            TileWindow(0, 0, 50, 50),
            TileWindow(50, 0, 50, 50),
            TileWindow(0, 50, 50, 50),
            TileWindow(50, 50, 50, 50),
        ]

    def test_edge_windows_clipped(self):
        tiler = Tiler(nrows=100, ncols=250, tile_size=128)
        assert len(tiler) == 2
        assert tiler.windows()[-1] == TileWindow(128, 0, 122, 100)

    def test_tile_larger_than_image(self):
        windows = Tiler(nrows=50, ncols=40, tile_size=100).windows()
        assert windows == [TileWindow(0, 0, 40, 50)]

    def test_row_major_order(self):
        windows = Tiler(nrows=90, ncols=90, tile_size=30).windows()
        starts = [(w.y0, w.x0) for w in windows]
        assert starts == sorted(starts)

    def test_covers_every_pixel_once(self):
        nrows, ncols = 37, 53
        coverage = np.zeros((nrows, ncols), dtype=int)
        for w in Tiler(nrows, ncols, tile_size=(8, 16)):
            rows, cols = w.slices()
            coverage[rows, cols] += 1
        assert np.all(coverage == 1)

    def test_len_matches_iteration(self):
        tiler = Tiler(nrows=37, ncols=53, tile_size=10)
        assert len(tiler) == len(list(tiler)) == 24


# ---------------------------------------------------------------------------
# TileWindow helpers
# ---------------------------------------------------------------------------

class TestTileWindow:
    """Test window properties and buffer addressing."""

    def test_properties(self):
        w = TileWindow(x0=4, y0=2, width=3, height=5)
        assert w.x_end == 7
        assert w.y_end == 7
        assert w.shape == (5, 3)

    def test_slices_with_origin(self):
        w = TileWindow(x0=10, y0=20, width=4, height=2)
        assert w.slices((20, 8)) == (slice(0, 2), slice(2, 6))

    def test_validate_tuple(self):
        assert validate_window((1, 2, 3, 4)) == TileWindow(1, 2, 3, 4)

    def test_validate_wrong_length(self):
        with pytest.raises(ValidationError, match="x0, y0, width, height"):
            validate_window((1, 2, 3))

    def test_validate_non_int(self):
        with pytest.raises(ValidationError, match="must be int"):
            validate_window((0, 0, 2.5, 1))

    def test_view_shares_memory(self):
        buffer = np.zeros((4, 4))
        view = window_view(buffer, TileWindow(1, 1, 2, 2))
        view[...] = 1.0
        assert buffer.sum() == 4.0

    def test_view_requires_2d(self):
        with pytest.raises(ValidationError, match="2D"):
            window_view(np.zeros(4), TileWindow(0, 0, 1, 1))

    def test_view_negative_offset(self):
        with pytest.raises(ValidationError, match="does not fit"):
            window_view(np.zeros((4, 4)), TileWindow(0, 0, 2, 2), origin=(1, 1))
