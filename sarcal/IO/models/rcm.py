# -*- coding: utf-8 -*-
"""
RCM Calibration Metadata - Typed calibration metadata for RADARSAT
Constellation Mission products.

Nested dataclasses for the parts of an RCM product that calibration
needs: product identification, the per-polarization gain lookup tables
from the ``calibration/`` directory, and the range incidence-angle
profile. ``RCMCalibrationMetadata`` converts them into the engine's
gain table mapping, ``CalibrationMode`` and incidence-angle surface.

Author
------
Jason Fritz
jpfritz@zai.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-03-06

Modified
--------
2026-03-09
"""

# Standard library
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Third-party
import numpy as np

# sarcal internal
from sarcal.calibration.incidence import IncidenceAngleGrid
from sarcal.calibration.lut import GainLUT, build_lut_map
from sarcal.calibration.mode import CalibrationMode


@dataclass
class RCMProductInfo:
    """RCM product-level metadata.

    Parameters
    ----------
    satellite : str, optional
        Satellite identifier (``'RCM-1'``, ``'RCM-2'``, ``'RCM-3'``).
    product_type : str, optional
        Product type (``'SLC'``, ``'GRD'``, ``'GRC'``...).
    product_id : str, optional
        Product identifier.
    beam_mode : str, optional
        Acquisition beam mode mnemonic.
    polarizations : List[str]
        Polarizations present in the product (``['HH', 'HV']``).
    rows : int
        Number of image lines.
    cols : int
        Number of samples per line.
    """

    satellite: Optional[str] = None
    product_type: Optional[str] = None
    product_id: Optional[str] = None
    beam_mode: Optional[str] = None
    polarizations: List[str] = field(default_factory=list)
    rows: int = 0
    cols: int = 0

    @property
    def mission(self) -> Optional[str]:
        """Mission name derived from the satellite (``'RCM'``)."""
        if self.satellite is None:
            return None
        return self.satellite.split('-')[0].upper()


@dataclass
class RCMGainTable:
    """One calibration lookup table (``lutSigma_HH.xml`` etc.).

    Parameters
    ----------
    polarization : str
        Polarization the table applies to.
    calibration_type : str
        ``'Sigma Nought'``, ``'Beta Nought'`` or ``'Gamma'``.
    pixel_first_lut_value : int
        Column of the first gain.
    step_size : int
        Column spacing between gains.
    number_of_values : int
        Number of gains.
    offset : float
        Additive offset for detected products.
    gains : np.ndarray
        Gain values.
    """

    polarization: str
    calibration_type: str
    pixel_first_lut_value: int
    step_size: int
    number_of_values: int
    offset: float
    gains: np.ndarray

    def to_lut(self) -> GainLUT:
        """Engine gain table for this lookup table."""
        return GainLUT(
            first_index=self.pixel_first_lut_value,
            step=self.step_size,
            count=self.number_of_values,
            offset=self.offset,
            values=self.gains,
            polarization=self.polarization,
        )


@dataclass
class RCMIncidenceProfile:
    """Incidence angle versus range column (``incidenceAngles.xml``).

    Parameters
    ----------
    pixel_first_angle_value : int
        Column of the first angle.
    step_size : int
        Column spacing between angles.
    number_of_values : int
        Number of angles.
    angles : np.ndarray
        Incidence angles in degrees.
    """

    pixel_first_angle_value: int
    step_size: int
    number_of_values: int
    angles: np.ndarray


@dataclass
class RCMCalibrationMetadata:
    """Calibration metadata of an RCM product.

    Parameters
    ----------
    product_info : RCMProductInfo
        Product identification and dimensions.
    gain_tables : Dict[str, RCMGainTable]
        Lookup tables keyed by polarization.
    incidence_profile : RCMIncidenceProfile, optional
        Range incidence-angle profile.

    Examples
    --------
    >>> from sarcal.IO.rcm import load_rcm_calibration
    >>> meta = load_rcm_calibration('RCM1_OK.../')
    >>> meta.product_info.product_type
    'SLC'
    >>> sorted(meta.lut_map())
    ['HH', 'HV']
    """

    product_info: RCMProductInfo
    gain_tables: Dict[str, RCMGainTable] = field(default_factory=dict)
    incidence_profile: Optional[RCMIncidenceProfile] = None

    def lut_map(self) -> Mapping[str, GainLUT]:
        """Read-only polarization -> ``GainLUT`` mapping."""
        return build_lut_map(
            {pol: table.to_lut() for pol, table in self.gain_tables.items()}
        )

    def build_mode(self, **flags: Any) -> CalibrationMode:
        """``CalibrationMode`` for this product's type.

        Parameters
        ----------
        **flags
            ``CalibrationMode`` fields other than ``is_complex_source``.
        """
        return CalibrationMode.from_product_type(
            self.product_info.product_type or '', **flags
        )

    def incidence_grid(self) -> Optional[IncidenceAngleGrid]:
        """Incidence-angle surface, or ``None`` without a profile."""
        profile = self.incidence_profile
        if profile is None:
            return None
        return IncidenceAngleGrid.from_range_profile(
            profile.pixel_first_angle_value,
            profile.step_size,
            profile.angles,
            self.product_info.rows,
        )
