# -*- coding: utf-8 -*-
"""
Image Processing Module - Calibration processors.

Sub-modules
-----------
base.py
    ``CalibrationProcessor`` base class with version checking and
    progress reporting.
versioning.py
    ``@processor_version`` and ``@processor_tags`` decorators.
calibrator.py
    ``RadiometricCalibrator`` facade: tile, point, reverse and
    whole-image calibration.

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

from sarcal.image_processing.base import CalibrationProcessor
from sarcal.image_processing.versioning import processor_tags, processor_version
from sarcal.image_processing.calibrator import RadiometricCalibrator

__all__ = [
    'CalibrationProcessor',
    'processor_tags',
    'processor_version',
    'RadiometricCalibrator',
]
