# -*- coding: utf-8 -*-
"""
sarcal - SAR radiometric calibration engine.

Converts SAR pixel values stored as amplitude, intensity, dB intensity or
complex I/Q into calibrated backscatter coefficients using per-polarization
gain lookup tables, with optional dB output, complex output and a
sine-of-incidence-angle correction. Mission adapters (``sarcal.IO``) build
the lookup tables from product metadata.

Dependencies
------------
numpy
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
2026-03-02

Modified
--------
2026-03-09
"""

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from sarcal.exceptions import (
    SarcalError,
    ValidationError,
    UnsupportedUnitError,
    OutOfDomainError,
    ProcessorError,
)
from sarcal.vocabulary import (
    ImageModality,
    ProcessorCategory,
    SampleUnit,
    IncidenceAngleMode,
)
from sarcal.calibration import CalibrationMode, GainLUT, build_lut_map
from sarcal.data_prep import TileWindow, Tiler
from sarcal.image_processing import RadiometricCalibrator

__all__ = [
    'SarcalError',
    'ValidationError',
    'UnsupportedUnitError',
    'OutOfDomainError',
    'ProcessorError',
    'ImageModality',
    'ProcessorCategory',
    'SampleUnit',
    'IncidenceAngleMode',
    'CalibrationMode',
    'GainLUT',
    'build_lut_map',
    'TileWindow',
    'Tiler',
    'RadiometricCalibrator',
]
