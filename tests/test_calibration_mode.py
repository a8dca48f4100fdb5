# -*- coding: utf-8 -*-
"""
Tests for CalibrationMode validation.

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

import dataclasses

import pytest

from sarcal.calibration.mode import CalibrationMode, UNDERFLOW_FLOOR
from sarcal.exceptions import ValidationError
from sarcal.vocabulary import IncidenceAngleMode


class TestCalibrationMode:
    """Test mode defaults and validation."""

    def test_defaults(self):
        mode = CalibrationMode()
        assert not mode.is_complex_source
        assert not mode.output_complex
        assert not mode.output_in_db
        assert mode.incidence_angle_mode is IncidenceAngleMode.FROM_ELLIPSOID
        assert mode.column_offset == 0
        assert mode.db_floor == UNDERFLOW_FLOOR
        assert not mode.uses_dem_incidence

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CalibrationMode().output_in_db = True

    def test_incidence_mode_from_value(self):
        mode = CalibrationMode(
            incidence_angle_mode="Use projected local incidence angle from DEM"
        )
        assert mode.uses_dem_incidence

    def test_incidence_mode_from_name(self):
        mode = CalibrationMode(incidence_angle_mode='from_dem')
        assert mode.incidence_angle_mode is IncidenceAngleMode.FROM_DEM

    def test_unknown_incidence_mode(self):
        with pytest.raises(ValidationError, match="incidence_angle_mode"):
            CalibrationMode(incidence_angle_mode='terrain')

    def test_complex_output_needs_complex_source(self):
        with pytest.raises(ValidationError, match="complex"):
            CalibrationMode(output_complex=True)

    def test_complex_output_and_db_exclusive(self):
        with pytest.raises(ValidationError, match="cannot both"):
            CalibrationMode(is_complex_source=True, output_complex=True,
                            output_in_db=True)

    def test_non_int_offset(self):
        with pytest.raises(ValidationError, match="column_offset"):
            CalibrationMode(column_offset=1.5)

    def test_nonpositive_floor(self):
        with pytest.raises(ValidationError, match="db_floor"):
            CalibrationMode(db_floor=0.0)


class TestFromProductType:
    """Test product-type driven construction."""

    @pytest.mark.parametrize("product_type,expected", [
        ('SLC', True),
        ('slc', True),
        ('SLC_ScanSAR', True),
        ('GRD', False),
        ('GRC', False),
    ])
    def test_complex_detection(self, product_type, expected):
        mode = CalibrationMode.from_product_type(product_type)
        assert mode.is_complex_source is expected

    def test_flags_forwarded(self):
        mode = CalibrationMode.from_product_type('GRD', output_in_db=True,
                                                 column_offset=100)
        assert mode.output_in_db
        assert mode.column_offset == 100

    def test_empty_product_type(self):
        with pytest.raises(ValidationError, match="product_type"):
            CalibrationMode.from_product_type('')
