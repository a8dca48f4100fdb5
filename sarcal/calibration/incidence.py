# -*- coding: utf-8 -*-
"""
Incidence-Angle Correction - Apply or undo the sine incidence factor.

Point-wise calibration of an off-grid sample multiplies sigma-naught by
``sin(local incidence angle)`` when the run uses DEM-projected local
incidence angles; retro-calibration divides it back out using the
incidence angle of the pixel. With ellipsoid incidence angles both
operations are the identity.

``IncidenceAngleGrid`` provides the per-pixel incidence-angle surface
used by retro-calibration. It is built from tie points that are regular
in image coordinates (row, column) and interpolated bilinearly, the
way tie-point grids are sampled by SAR product readers.

Dependencies
------------
scipy

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
2026-03-06
"""

# Standard library
from typing import Sequence, Union

# Third-party
import numpy as np
from scipy.interpolate import RectBivariateSpline

# sarcal internal
from sarcal.calibration.mode import CalibrationMode
from sarcal.exceptions import ValidationError

ArrayLike = Union[float, np.ndarray]


def apply_forward(
    sigma: ArrayLike, local_incidence_angle: ArrayLike, mode: CalibrationMode,
) -> ArrayLike:
    """Scale by ``sin(local_incidence_angle)`` under ``FROM_DEM``.

    Parameters
    ----------
    sigma : float or np.ndarray
        Calibrated value.
    local_incidence_angle : float or np.ndarray
        Local incidence angle in degrees.
    mode : CalibrationMode
        Selects the incidence-angle source.

    Returns
    -------
    float or np.ndarray
        ``sigma`` unchanged under ``FROM_ELLIPSOID``.
    """
    if mode.uses_dem_incidence:
        return sigma * np.sin(np.radians(local_incidence_angle))
    return sigma


def apply_reverse(
    value: ArrayLike, pixel_incidence_angle: ArrayLike, mode: CalibrationMode,
) -> ArrayLike:
    """Undo :func:`apply_forward` under ``FROM_DEM``.

    Parameters
    ----------
    value : float or np.ndarray
        Previously corrected value.
    pixel_incidence_angle : float or np.ndarray
        Incidence angle of the pixel in degrees.
    mode : CalibrationMode
        Selects the incidence-angle source.

    Returns
    -------
    float or np.ndarray
        ``value`` unchanged under ``FROM_ELLIPSOID``.

    Raises
    ------
    ValidationError
        Under ``FROM_DEM``, if an angle has zero sine (0 or 180 degrees).
    """
    if mode.uses_dem_incidence:
        sine = np.sin(np.radians(pixel_incidence_angle))
        if np.any(np.isclose(sine, 0.0, rtol=0.0, atol=1e-12)):
            raise ValidationError(
                f"Incidence angle {pixel_incidence_angle!r} has zero sine; "
                f"cannot remove the incidence factor"
            )
        return value / sine
    return value


class IncidenceAngleGrid:
    """Per-pixel incidence-angle surface from regular tie points.

    Parameters
    ----------
    rows : Sequence[float]
        Strictly increasing tie-point row (azimuth) coordinates.
    cols : Sequence[float]
        Strictly increasing tie-point column (range) coordinates.
    angles : np.ndarray
        Incidence angles in degrees, shape ``(len(rows), len(cols))``.

    Raises
    ------
    ValidationError
        If an axis has fewer than two tie points, is not strictly
        increasing, or the angle grid shape does not match.

    Examples
    --------
    >>> grid = IncidenceAngleGrid([0, 100], [0, 1000],
    ...                           np.array([[20.0, 40.0], [20.0, 40.0]]))
    >>> float(grid.angle_at(500, 50))
    30.0
    """

    def __init__(
        self,
        rows: Sequence[float],
        cols: Sequence[float],
        angles: np.ndarray,
    ) -> None:
        row_vals = np.asarray(rows, dtype=np.float64)
        col_vals = np.asarray(cols, dtype=np.float64)
        grid = np.asarray(angles, dtype=np.float64)

        for name, axis in (('rows', row_vals), ('cols', col_vals)):
            if axis.ndim != 1 or axis.size < 2:
                raise ValidationError(
                    f"IncidenceAngleGrid needs at least 2 tie points along "
                    f"{name}, got {axis.size}"
                )
            if np.any(np.diff(axis) <= 0):
                raise ValidationError(
                    f"IncidenceAngleGrid {name} must be strictly increasing"
                )
        if grid.shape != (row_vals.size, col_vals.size):
            raise ValidationError(
                f"angles shape {grid.shape} does not match tie points "
                f"({row_vals.size}, {col_vals.size})"
            )

        self._rows = row_vals
        self._cols = col_vals
        # Bilinear: degree-1 spline through the tie points, no smoothing
        self._spline = RectBivariateSpline(row_vals, col_vals, grid, kx=1, ky=1)

    @classmethod
    def from_range_profile(
        cls,
        first_pixel: int,
        step: int,
        angles: Sequence[float],
        nrows: int,
    ) -> 'IncidenceAngleGrid':
        """Build a surface that only varies in range.

        Parameters
        ----------
        first_pixel : int
            Column of the first tabulated angle.
        step : int
            Column spacing between tabulated angles.
        angles : Sequence[float]
            Incidence angles in degrees.
        nrows : int
            Number of image rows the surface spans.

        Returns
        -------
        IncidenceAngleGrid
        """
        if step <= 0:
            raise ValidationError(f"step must be positive, got {step}")
        profile = np.asarray(angles, dtype=np.float64).ravel()
        cols = first_pixel + step * np.arange(profile.size)
        rows = np.array([0.0, max(float(nrows) - 1.0, 1.0)])
        return cls(rows, cols, np.vstack([profile, profile]))

    @property
    def extent(self):
        """Tie-point bounds as ``((row_min, row_max), (col_min, col_max))``."""
        return (
            (float(self._rows[0]), float(self._rows[-1])),
            (float(self._cols[0]), float(self._cols[-1])),
        )

    def angle_at(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """Incidence angle in degrees at column ``x``, row ``y``.

        Positions outside the tie points take the nearest edge value.

        Parameters
        ----------
        x : float or np.ndarray
            Column (range) coordinate.
        y : float or np.ndarray
            Row (azimuth) coordinate.

        Returns
        -------
        float or np.ndarray
            Scalar for scalar input, otherwise an array shaped like the
            broadcast of ``x`` and ``y``.
        """
        xx, yy = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)
        )
        yy = np.clip(yy, self._rows[0], self._rows[-1])
        xx = np.clip(xx, self._cols[0], self._cols[-1])
        values = self._spline.ev(yy, xx)
        if values.ndim == 0:
            return float(values)
        return values

    def __repr__(self) -> str:
        return (
            f"IncidenceAngleGrid(rows={self._rows.size}, "
            f"cols={self._cols.size})"
        )
