# -*- coding: utf-8 -*-
"""
IO Models - Typed calibration metadata containers.

Re-exports all metadata classes from submodules for convenient access:

    from sarcal.IO.models import RCMCalibrationMetadata

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
2026-03-06
"""

# RCM
from sarcal.IO.models.rcm import (
    RCMCalibrationMetadata,
    RCMGainTable,
    RCMIncidenceProfile,
    RCMProductInfo,
)

__all__ = [
    'RCMCalibrationMetadata',
    'RCMGainTable',
    'RCMIncidenceProfile',
    'RCMProductInfo',
]
