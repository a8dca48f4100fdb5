# -*- coding: utf-8 -*-
"""
Data Preparation Module - Tile windows and buffer addressing.

Key Classes
-----------
- TileWindow: Named tuple for an ``(x0, y0, width, height)`` window
- Tiler: Non-overlapping window grid over an image

Usage
-----
    >>> from sarcal.data_prep import Tiler
    >>> for window in Tiler(nrows=1000, ncols=2000, tile_size=512):
    ...     rows, cols = window.slices()

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
2026-03-03

Modified
--------
2026-03-04
"""

from sarcal.data_prep.base import TileWindow, validate_window, window_view
from sarcal.data_prep.tiler import Tiler

__all__ = [
    'TileWindow',
    'Tiler',
    'validate_window',
    'window_view',
]
