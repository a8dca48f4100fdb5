# -*- coding: utf-8 -*-
"""
Unit Normalizer - Reduce sample encodings to linear intensity.

Converts raw band samples declared as amplitude, intensity, intensity
in dB, or complex I/Q pairs into a common linear intensity. For complex
pairs the phase fraction of the requested output component (``I / |z|``
for a real target, ``Q / |z|`` for an imaginary target) is returned as
well, so the calibrated magnitude can be re-projected onto that
component.

All functions accept scalars or numpy arrays and return float64.

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
2026-03-02

Modified
--------
2026-03-04
"""

# Standard library
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.exceptions import UnsupportedUnitError, ValidationError
from sarcal.vocabulary import SampleUnit

ArrayLike = Union[float, np.ndarray]


def db_to_linear(value: ArrayLike) -> np.ndarray:
    """Convert dB to linear scale: ``10 ** (value / 10)``."""
    return np.power(10.0, np.asarray(value, dtype=np.float64) / 10.0)


def linear_to_db(value: ArrayLike) -> np.ndarray:
    """Convert linear scale to dB: ``10 * log10(value)``.

    No floor is applied; see
    :func:`sarcal.calibration.transform.to_db_clamped` for the guarded
    conversion used on calibrated output.
    """
    return 10.0 * np.log10(np.asarray(value, dtype=np.float64))


def normalize(
    sample: ArrayLike,
    unit: SampleUnit,
    quadrature: Optional[ArrayLike] = None,
    target_unit: Optional[SampleUnit] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Convert raw samples to ``(linear_intensity, phase_fraction)``.

    Parameters
    ----------
    sample : float or np.ndarray
        Raw samples. For complex units, the in-phase component.
    unit : SampleUnit
        Declared encoding of ``sample``.
    quadrature : float or np.ndarray, optional
        Quadrature component. Required for ``REAL`` and ``IMAGINARY``.
    target_unit : SampleUnit, optional
        Unit of the band being produced. Selects which component the
        phase fraction projects onto; only ``REAL`` and ``IMAGINARY``
        targets yield a non-zero phase fraction.

    Returns
    -------
    intensity : np.ndarray
        Linear intensity, float64.
    phase : np.ndarray
        Phase fraction in ``[-1, 1]``; zero where the intensity is zero
        and for non-complex inputs or targets.

    Raises
    ------
    UnsupportedUnitError
        If ``unit`` cannot be converted to intensity.
    ValidationError
        If a complex unit is given without ``quadrature``, or the two
        components have incompatible shapes.

    Examples
    --------
    >>> intensity, phase = normalize(3.0, SampleUnit.AMPLITUDE)
    >>> float(intensity)
    9.0
    >>> intensity, phase = normalize(3.0, SampleUnit.REAL, quadrature=4.0,
    ...                              target_unit=SampleUnit.REAL)
    >>> float(intensity), float(phase)
    (25.0, 0.6)
    """
    dn = np.asarray(sample, dtype=np.float64)

    if unit is SampleUnit.AMPLITUDE:
        return dn * dn, np.zeros_like(dn)
    if unit is SampleUnit.INTENSITY:
        return dn.copy(), np.zeros_like(dn)
    if unit is SampleUnit.INTENSITY_DB:
        return db_to_linear(dn), np.zeros_like(dn)
    if isinstance(unit, SampleUnit) and unit.is_complex:
        if quadrature is None:
            raise ValidationError(
                f"Unit {unit.value} requires the quadrature component"
            )
        q = np.asarray(quadrature, dtype=np.float64)
        if dn.shape != q.shape:
            raise ValidationError(
                f"In-phase shape {dn.shape} does not match "
                f"quadrature shape {q.shape}"
            )
        intensity = dn * dn + q * q
        phase = np.zeros(np.shape(intensity), dtype=np.float64)
        if target_unit is SampleUnit.REAL or target_unit is SampleUnit.IMAGINARY:
            component = dn if target_unit is SampleUnit.REAL else q
            positive = intensity > 0.0
            np.divide(component, np.sqrt(intensity), out=phase, where=positive)
        return intensity, phase

    raise UnsupportedUnitError(f"Unhandled sample unit {unit!r}")
