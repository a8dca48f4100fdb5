# -*- coding: utf-8 -*-
"""
Tiler - Partition an image into non-overlapping calibration windows.

Produces the row-major grid of ``TileWindow`` rectangles that covers an
image of a given size. Edge windows are clipped to the image instead of
padded, so every pixel belongs to exactly one window and concurrent
workers write disjoint regions.

Author
------
Steven Siebert

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
2026-03-04
"""

# Standard library
from typing import Iterator, List, Tuple, Union

# sarcal internal
from sarcal.data_prep.base import TileWindow
from sarcal.exceptions import ValidationError


def _normalize_pair(
    value: Union[int, Tuple[int, int]], name: str
) -> Tuple[int, int]:
    """Convert an int or (int, int) tuple to a validated (int, int) pair.

    Raises
    ------
    ValidationError
        If value is not int or tuple of two positive ints.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if value <= 0:
            raise ValidationError(f"{name} must be positive, got {value}")
        return (value, value)
    if isinstance(value, tuple) and len(value) == 2:
        r, c = value
        if not isinstance(r, int) or not isinstance(c, int):
            raise ValidationError(f"{name} tuple elements must be int")
        if r <= 0 or c <= 0:
            raise ValidationError(
                f"{name} elements must be positive, got ({r}, {c})"
            )
        return (r, c)
    raise ValidationError(
        f"{name} must be int or Tuple[int, int], got {type(value).__name__}"
    )


class Tiler:
    """Row-major grid of non-overlapping windows over an image.

    Parameters
    ----------
    nrows : int
        Number of image rows.
    ncols : int
        Number of image columns.
    tile_size : int or Tuple[int, int]
        ``(tile_rows, tile_cols)``. If int, square tiles.

    Raises
    ------
    ValidationError
        If a dimension is not a positive int.

    Examples
    --------
    >>> tiler = Tiler(nrows=100, ncols=250, tile_size=128)
    >>> len(tiler)
    2
    >>> tiler.windows()[-1]
    TileWindow(x0=128, y0=0, width=122, height=100)
    """

    def __init__(
        self,
        nrows: int,
        ncols: int,
        tile_size: Union[int, Tuple[int, int]],
    ) -> None:
        self._nrows, self._ncols = _normalize_pair((nrows, ncols), 'image shape')
        self._tile_size = _normalize_pair(tile_size, 'tile_size')

    @property
    def shape(self) -> Tuple[int, int]:
        """Image dimensions as ``(nrows, ncols)``."""
        return (self._nrows, self._ncols)

    @property
    def tile_size(self) -> Tuple[int, int]:
        """The ``(tile_rows, tile_cols)`` dimensions."""
        return self._tile_size

    def _grid(self) -> Tuple[range, range]:
        tr, tc = self._tile_size
        return range(0, self._nrows, tr), range(0, self._ncols, tc)

    def __len__(self) -> int:
        row_starts, col_starts = self._grid()
        return len(row_starts) * len(col_starts)

    def __iter__(self) -> Iterator[TileWindow]:
        tr, tc = self._tile_size
        row_starts, col_starts = self._grid()
        for rs in row_starts:
            for cs in col_starts:
                yield TileWindow(
                    x0=cs,
                    y0=rs,
                    width=min(tc, self._ncols - cs),
                    height=min(tr, self._nrows - rs),
                )

    def windows(self) -> List[TileWindow]:
        """All windows, row-major from top-left to bottom-right."""
        return list(self)

    def __repr__(self) -> str:
        return (
            f"Tiler(nrows={self._nrows}, ncols={self._ncols}, "
            f"tile_size={self._tile_size})"
        )
