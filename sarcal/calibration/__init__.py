# -*- coding: utf-8 -*-
"""
Calibration Module - Radiometric calibration transform engine.

Sub-modules
-----------
lut.py
    ``GainLUT`` step-function gain tables, ``build_lut``,
    ``build_lut_map`` and the thread-safe ``GainCache``.
units.py
    ``normalize`` sample encodings to linear intensity and phase.
transform.py
    ``calibrate`` complex or detected intensities, with dB output.
incidence.py
    ``apply_forward`` / ``apply_reverse`` sine incidence factor and the
    ``IncidenceAngleGrid`` surface.
mode.py
    ``CalibrationMode`` run configuration.
tile.py
    ``calibrate_tile`` and ``passthrough_tile`` over buffer windows.

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
2026-03-06
"""

from sarcal.calibration.lut import GainCache, GainLUT, build_lut, build_lut_map
from sarcal.calibration.mode import CalibrationMode, UNDERFLOW_FLOOR
from sarcal.calibration.units import db_to_linear, linear_to_db, normalize
from sarcal.calibration.transform import calibrate, to_db_clamped
from sarcal.calibration.incidence import (
    IncidenceAngleGrid,
    apply_forward,
    apply_reverse,
)
from sarcal.calibration.tile import calibrate_tile, passthrough_tile

__all__ = [
    'GainCache',
    'GainLUT',
    'build_lut',
    'build_lut_map',
    'CalibrationMode',
    'UNDERFLOW_FLOOR',
    'db_to_linear',
    'linear_to_db',
    'normalize',
    'calibrate',
    'to_db_clamped',
    'IncidenceAngleGrid',
    'apply_forward',
    'apply_reverse',
    'calibrate_tile',
    'passthrough_tile',
]
