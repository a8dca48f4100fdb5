# -*- coding: utf-8 -*-
"""
IO Module - Mission calibration metadata adapters.

Adapters read the calibration metadata of a mission's product format and
return typed containers from ``sarcal.IO.models`` that build the engine's
gain table mapping and ``CalibrationMode``.

Dependencies
------------
numpy

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

from sarcal.IO.rcm import load_rcm_calibration, polarization_from_band_name

__all__ = [
    'load_rcm_calibration',
    'polarization_from_band_name',
]
