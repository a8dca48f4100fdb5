# -*- coding: utf-8 -*-
"""
Tile Window - Rectangular sample windows and caller-owned buffer addressing.

Defines ``TileWindow``, the ``(x0, y0, width, height)`` rectangle the
tile processor operates on, and the helpers that translate it into
slices of caller-owned sample buffers. A buffer is any 2D array whose
element ``[0, 0]`` sits at image position ``origin = (row, col)``; the
window only indexes into it and never owns pixel data.

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
2026-03-05
"""

# Standard library
from typing import NamedTuple, Tuple, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.exceptions import ValidationError


class TileWindow(NamedTuple):
    """Rectangular window in image coordinates.

    Use ``slices`` to address a buffer::

        rows, cols = window.slices(origin)
        block = buffer[rows, cols]

    Attributes
    ----------
    x0 : int
        First column (inclusive).
    y0 : int
        First row (inclusive).
    width : int
        Number of columns. Positive.
    height : int
        Number of rows. Positive.
    """

    x0: int
    y0: int
    width: int
    height: int

    @property
    def x_end(self) -> int:
        """Last column (exclusive)."""
        return self.x0 + self.width

    @property
    def y_end(self) -> int:
        """Last row (exclusive)."""
        return self.y0 + self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """Window dimensions as ``(height, width)``."""
        return (self.height, self.width)

    def slices(self, origin: Tuple[int, int] = (0, 0)) -> Tuple[slice, slice]:
        """Row and column slices into a buffer whose ``[0, 0]`` is *origin*.

        Parameters
        ----------
        origin : Tuple[int, int]
            Image ``(row, col)`` of the buffer's first element.

        Returns
        -------
        Tuple[slice, slice]
        """
        r0 = self.y0 - origin[0]
        c0 = self.x0 - origin[1]
        return (slice(r0, r0 + self.height), slice(c0, c0 + self.width))


def validate_window(window: Union[TileWindow, Tuple[int, int, int, int]]) -> TileWindow:
    """Coerce a 4-tuple to ``TileWindow`` and check its dimensions.

    Raises
    ------
    ValidationError
        If any field is not an int or the size is not positive.
    """
    if not isinstance(window, TileWindow):
        if len(window) != 4:
            raise ValidationError(
                f"window must be (x0, y0, width, height), got {window!r}"
            )
        window = TileWindow(*window)
    for name, value in zip(TileWindow._fields, window):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValidationError(
                f"window.{name} must be int, got {type(value).__name__}"
            )
    if window.width <= 0 or window.height <= 0:
        raise ValidationError(
            f"window size must be positive, got "
            f"width={window.width}, height={window.height}"
        )
    return TileWindow(*(int(v) for v in window))


def window_view(
    buffer: np.ndarray,
    window: TileWindow,
    origin: Tuple[int, int] = (0, 0),
    name: str = 'buffer',
) -> np.ndarray:
    """View of *buffer* covering *window*.

    Parameters
    ----------
    buffer : np.ndarray
        2D sample buffer.
    window : TileWindow
        Window in image coordinates.
    origin : Tuple[int, int]
        Image ``(row, col)`` of ``buffer[0, 0]``.
    name : str
        Buffer name used in error messages.

    Returns
    -------
    np.ndarray
        A view (not a copy) of shape ``window.shape``.

    Raises
    ------
    ValidationError
        If *buffer* is not 2D or does not contain the window.
    """
    if not isinstance(buffer, np.ndarray):
        raise ValidationError(
            f"{name} must be a numpy ndarray, got {type(buffer).__name__}"
        )
    if buffer.ndim != 2:
        raise ValidationError(f"{name} must be 2D, got {buffer.ndim}D")
    rows, cols = window.slices(origin)
    if (rows.start < 0 or cols.start < 0
            or rows.stop > buffer.shape[0] or cols.stop > buffer.shape[1]):
        raise ValidationError(
            f"{window} at origin {tuple(origin)} does not fit inside "
            f"{name} of shape {buffer.shape}"
        )
    return buffer[rows, cols]
