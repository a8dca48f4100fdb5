# -*- coding: utf-8 -*-
"""
Calibration Transform - Linear intensity to calibrated sigma-naught.

Applies the gain table correction to normalized intensities. The formula
depends on the source data:

- Complex (SLC) source: ``sigma = intensity / gain**2``; for complex
  output the calibrated magnitude is re-projected onto the requested
  component, ``sigma = sqrt(sigma) * phase``.
- Detected source: ``sigma = (intensity + offset) / gain``.

Without a gain table the division is skipped. Optional dB output clamps
values below the underflow floor to ``-floor`` rather than producing
``-inf`` or NaN.

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
from typing import Optional, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.calibration.mode import CalibrationMode, UNDERFLOW_FLOOR

ArrayLike = Union[float, np.ndarray]


def to_db_clamped(sigma: ArrayLike, floor: float = UNDERFLOW_FLOOR) -> np.ndarray:
    """Convert to dB, writing ``-floor`` wherever ``sigma < floor``.

    Parameters
    ----------
    sigma : float or np.ndarray
        Linear values.
    floor : float
        Positive underflow floor.

    Returns
    -------
    np.ndarray
        float64 dB values, same shape as ``sigma``.
    """
    sigma = np.asarray(sigma, dtype=np.float64)
    underflow = sigma < floor
    safe = np.where(underflow, floor, sigma)
    return np.where(underflow, -floor, 10.0 * np.log10(safe))


def calibrate(
    intensity: ArrayLike,
    phase: ArrayLike,
    gain: Optional[ArrayLike],
    offset: float,
    mode: CalibrationMode,
) -> np.ndarray:
    """Calibrate linear intensities.

    Parameters
    ----------
    intensity : float or np.ndarray
        Linear intensity from :func:`~sarcal.calibration.units.normalize`.
    phase : float or np.ndarray
        Phase fraction; only used for complex output.
    gain : float or np.ndarray or None
        Gain per sample, or a per-column sequence broadcasting over the
        last axis. ``None`` when the polarization has no gain table.
    offset : float
        Gain table offset; only used for detected sources.
    mode : CalibrationMode
        Formula switches.

    Returns
    -------
    np.ndarray
        Calibrated values, float64.

    Examples
    --------
    >>> detected = CalibrationMode()
    >>> float(calibrate(100.0, 0.0, 2.0, 5.0, detected))
    52.5
    >>> slc = CalibrationMode(is_complex_source=True)
    >>> float(calibrate(100.0, 0.0, 2.0, 5.0, slc))
    25.0
    """
    dn = np.asarray(intensity, dtype=np.float64)

    if mode.is_complex_source:
        if gain is not None:
            g = np.asarray(gain, dtype=np.float64)
            sigma = dn / (g * g)
        else:
            sigma = dn.copy()
        if mode.output_complex:
            sigma = np.sqrt(sigma) * np.asarray(phase, dtype=np.float64)
    else:
        sigma = dn + offset
        if gain is not None:
            sigma = sigma / np.asarray(gain, dtype=np.float64)

    if mode.output_in_db:
        sigma = to_db_clamped(sigma, mode.db_floor)
    return sigma
