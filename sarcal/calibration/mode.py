# -*- coding: utf-8 -*-
"""
Calibration Mode - Run-wide configuration of the calibration engine.

``CalibrationMode`` is a frozen dataclass that captures every switch the
calibration formula branches on: complex versus detected source data,
complex versus magnitude output, linear versus dB output, the incidence
angle source, and the subset offsets that translate tile coordinates
into the absolute coordinates of the gain tables. It is validated once
at construction and read-only for the lifetime of a run.

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
2026-03-02

Modified
--------
2026-03-05
"""

# Standard library
from dataclasses import dataclass
from typing import Any, Union

# sarcal internal
from sarcal.exceptions import ValidationError
from sarcal.vocabulary import IncidenceAngleMode

#: Underflow floor for dB conversion. Values below it are written as
#: ``-UNDERFLOW_FLOOR`` instead of ``10 * log10(value)``.
UNDERFLOW_FLOOR = 1.0e-30


def _coerce_incidence_mode(
    value: Union[IncidenceAngleMode, str],
) -> IncidenceAngleMode:
    """Resolve an incidence-angle mode from a member, value, or name."""
    if isinstance(value, IncidenceAngleMode):
        return value
    if isinstance(value, str):
        for member in IncidenceAngleMode:
            if value == member.value or value.upper() == member.name:
                return member
    raise ValidationError(
        f"incidence_angle_mode must be one of "
        f"{[m.name for m in IncidenceAngleMode]}, got {value!r}"
    )


@dataclass(frozen=True)
class CalibrationMode:
    """Switches controlling the calibration formula.

    Parameters
    ----------
    is_complex_source : bool
        ``True`` for pre-detection (SLC) data stored as I/Q pairs.
    output_complex : bool
        Keep a phase-scaled complex result instead of a magnitude.
        Requires ``is_complex_source``.
    output_in_db : bool
        Log-scale the result. Mutually exclusive with
        ``output_complex``.
    incidence_angle_mode : IncidenceAngleMode or str
        Whether point-wise calibration applies a
        ``sin(local incidence angle)`` factor. Strings are resolved by
        member value or name.
    column_offset : int
        Subset offset added to tile columns before gain lookup.
    row_offset : int
        Subset offset in azimuth. Gains never depend on it; carried
        for collaborators that address the incidence-angle surface.
    db_floor : float
        Underflow floor for dB conversion. Must be positive.

    Raises
    ------
    ValidationError
        If the combination of flags is not one the formula defines.

    Examples
    --------
    >>> mode = CalibrationMode(is_complex_source=True, output_complex=True)
    >>> mode.output_in_db
    False
    """

    is_complex_source: bool = False
    output_complex: bool = False
    output_in_db: bool = False
    incidence_angle_mode: IncidenceAngleMode = IncidenceAngleMode.FROM_ELLIPSOID
    column_offset: int = 0
    row_offset: int = 0
    db_floor: float = UNDERFLOW_FLOOR

    def __post_init__(self) -> None:
        object.__setattr__(
            self, 'incidence_angle_mode',
            _coerce_incidence_mode(self.incidence_angle_mode),
        )
        for name in ('column_offset', 'row_offset'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(
                    f"{name} must be int, got {type(value).__name__}"
                )
        if not self.db_floor > 0.0:
            raise ValidationError(
                f"db_floor must be positive, got {self.db_floor!r}"
            )
        if self.output_complex and not self.is_complex_source:
            raise ValidationError(
                "output_complex requires a complex (SLC) source; "
                "detected data carries no phase"
            )
        if self.output_complex and self.output_in_db:
            raise ValidationError(
                "output_complex and output_in_db cannot both be set"
            )

    @property
    def uses_dem_incidence(self) -> bool:
        """Whether the sine incidence-angle factor is in effect."""
        return self.incidence_angle_mode is IncidenceAngleMode.FROM_DEM

    @classmethod
    def from_product_type(
        cls, product_type: str, **flags: Any,
    ) -> 'CalibrationMode':
        """Build a mode for a product type string.

        The source is complex when ``'slc'`` appears in the
        lower-cased product type (``'SLC'``, ``'SLC_ScanSAR'``).

        Parameters
        ----------
        product_type : str
            Product type from the product metadata.
        **flags
            Remaining ``CalibrationMode`` fields.

        Returns
        -------
        CalibrationMode
        """
        if not product_type:
            raise ValidationError("product_type must be a non-empty string")
        return cls(is_complex_source='slc' in product_type.lower(), **flags)
