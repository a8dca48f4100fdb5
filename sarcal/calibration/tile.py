# -*- coding: utf-8 -*-
"""
Tile Pixel Processor - Calibrate a rectangular window of samples.

Applies unit normalization and the calibration transform over one
``TileWindow`` of caller-owned buffers. Gains depend only on the range
(column) position, so the gain sequence for the window's absolute
column range is computed once and broadcast across every row of the
window. Only the target window is written; source buffers and the gain
table mapping are read-only.

Detected bands have one source buffer. Complex bands are calibrated
from their two source buffers (in-phase, quadrature); the target unit
(``REAL`` or ``IMAGINARY``) selects which component is produced.

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
2026-03-06
"""

# Standard library
import logging
from typing import Mapping, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.calibration.lut import GainCache, GainLUT
from sarcal.calibration.mode import CalibrationMode
from sarcal.calibration.transform import calibrate
from sarcal.calibration.units import normalize
from sarcal.data_prep.base import TileWindow, validate_window, window_view
from sarcal.exceptions import ValidationError
from sarcal.vocabulary import SampleUnit

logger = logging.getLogger(__name__)

Sources = Union[np.ndarray, Sequence[np.ndarray]]


def _as_source_tuple(sources: Sources) -> Tuple[np.ndarray, ...]:
    if isinstance(sources, np.ndarray):
        return (sources,)
    return tuple(sources)


def resolve_gains(
    polarization: str,
    window: TileWindow,
    luts: Mapping[str, GainLUT],
    mode: CalibrationMode,
    gain_cache: Optional[GainCache] = None,
) -> Tuple[Optional[np.ndarray], float]:
    """Gains and offset for a window's absolute column range.

    Returns
    -------
    gains : np.ndarray or None
        Length ``window.width``; ``None`` when *polarization* has no
        gain table.
    offset : float
        Table offset, ``0.0`` without a table.

    Raises
    ------
    OutOfDomainError
        If the column range falls outside the table coverage.
    """
    lut = luts.get(polarization.upper())
    if lut is None:
        logger.debug("No gain table for %s, calibrating without gains",
                     polarization)
        return None, 0.0
    x_abs = window.x0 + mode.column_offset
    if gain_cache is not None:
        gains = gain_cache.get(polarization, x_abs, window.width)
    else:
        gains = lut.gains(x_abs, window.width)
    return gains, lut.offset


def calibrate_tile(
    sources: Sources,
    target: np.ndarray,
    window: Union[TileWindow, Tuple[int, int, int, int]],
    source_unit: SampleUnit,
    target_unit: SampleUnit,
    polarization: str,
    luts: Mapping[str, GainLUT],
    mode: CalibrationMode,
    *,
    source_origin: Tuple[int, int] = (0, 0),
    target_origin: Tuple[int, int] = (0, 0),
    gain_cache: Optional[GainCache] = None,
) -> None:
    """Calibrate *window* of *sources* into *target* in place.

    Parameters
    ----------
    sources : np.ndarray or Sequence[np.ndarray]
        One 2D buffer for detected units; ``(in_phase, quadrature)``
        for ``REAL`` / ``IMAGINARY`` source units.
    target : np.ndarray
        2D float buffer receiving calibrated values.
    window : TileWindow or (x0, y0, width, height)
        Window in image coordinates.
    source_unit : SampleUnit
        Encoding of the source samples.
    target_unit : SampleUnit
        Unit of the produced band. For complex output, ``REAL`` or
        ``IMAGINARY`` selects the component written.
    polarization : str
        Polarization code used to select the gain table.
    luts : Mapping[str, GainLUT]
        Read-only polarization -> table mapping. A missing entry means
        no gain correction.
    mode : CalibrationMode
        Formula switches and the subset column offset.
    source_origin : Tuple[int, int]
        Image ``(row, col)`` of ``sources[i][0, 0]``.
    target_origin : Tuple[int, int]
        Image ``(row, col)`` of ``target[0, 0]``.
    gain_cache : GainCache, optional
        Shared cache of gain sequences.

    Raises
    ------
    ValidationError
        If the buffer count does not match the source unit, a buffer
        does not contain the window, or complex output is requested
        for a target unit other than ``REAL`` or ``IMAGINARY``.
    UnsupportedUnitError
        If *source_unit* cannot be normalized.
    OutOfDomainError
        If the window's columns fall outside the gain table.
    """
    window = validate_window(window)
    if mode.output_complex and not (
        isinstance(target_unit, SampleUnit) and target_unit.is_complex
    ):
        raise ValidationError(
            f"output_complex needs a REAL or IMAGINARY target unit, got "
            f"{getattr(target_unit, 'value', target_unit)}"
        )
    buffers = _as_source_tuple(sources)
    is_pair = isinstance(source_unit, SampleUnit) and source_unit.is_complex
    expected = 2 if is_pair else 1
    if len(buffers) != expected:
        raise ValidationError(
            f"Source unit {getattr(source_unit, 'value', source_unit)} "
            f"needs {expected} source buffer(s), got {len(buffers)}"
        )

    in_phase = window_view(buffers[0], window, source_origin, 'source')
    quadrature = None
    if is_pair:
        quadrature = window_view(buffers[1], window, source_origin, 'quadrature')
        if buffers[1].shape != buffers[0].shape:
            raise ValidationError(
                f"In-phase buffer shape {buffers[0].shape} does not match "
                f"quadrature buffer shape {buffers[1].shape}"
            )
    out = window_view(target, window, target_origin, 'target')

    intensity, phase = normalize(in_phase, source_unit, quadrature, target_unit)
    gains, offset = resolve_gains(polarization, window, luts, mode, gain_cache)
    out[...] = calibrate(intensity, phase, gains, offset, mode)


def passthrough_tile(
    source: np.ndarray,
    target: np.ndarray,
    window: Union[TileWindow, Tuple[int, int, int, int]],
    *,
    source_origin: Tuple[int, int] = (0, 0),
    target_origin: Tuple[int, int] = (0, 0),
) -> None:
    """Copy *window* of an already-calibrated band unmodified.

    Raises
    ------
    ValidationError
        If either buffer does not contain the window.
    """
    window = validate_window(window)
    src = window_view(source, window, source_origin, 'source')
    out = window_view(target, window, target_origin, 'target')
    out[...] = src
