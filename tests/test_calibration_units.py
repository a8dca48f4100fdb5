# -*- coding: utf-8 -*-
"""
Tests for sample unit normalization.

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

import numpy as np
import pytest

from sarcal.calibration.units import db_to_linear, linear_to_db, normalize
from sarcal.exceptions import UnsupportedUnitError, ValidationError
from sarcal.vocabulary import SampleUnit


class TestDbConversion:
    """Test dB helpers."""

    @pytest.mark.parametrize("value", [1e-6, 0.5, 1.0, 42.0, 1e8])
    def test_round_trip(self, value):
        assert float(db_to_linear(linear_to_db(value))) == pytest.approx(
            value, rel=1e-12
        )

    def test_known_values(self):
        np.testing.assert_allclose(db_to_linear([0.0, 10.0, 20.0]),
                                   [1.0, 10.0, 100.0])
        assert float(linear_to_db(100.0)) == pytest.approx(20.0)


class TestNormalizeDetected:
    """Test detected sample units."""

    def test_amplitude_squared(self):
        intensity, phase = normalize(np.array([2.0, 3.0]), SampleUnit.AMPLITUDE)
        np.testing.assert_array_equal(intensity, [4.0, 9.0])
        np.testing.assert_array_equal(phase, [0.0, 0.0])

    def test_intensity_unchanged(self):
        dn = np.array([[1.0, 2.5]])
        intensity, _ = normalize(dn, SampleUnit.INTENSITY)
        np.testing.assert_array_equal(intensity, dn)
        assert intensity is not dn

    def test_intensity_db(self):
        intensity, _ = normalize(20.0, SampleUnit.INTENSITY_DB)
        assert float(intensity) == pytest.approx(100.0)

    def test_integer_input_promoted(self):
        intensity, _ = normalize(np.array([3], dtype=np.int16),
                                 SampleUnit.AMPLITUDE)
        assert intensity.dtype == np.float64
        assert intensity[0] == 9.0


class TestNormalizeComplex:
    """Test I/Q sample pairs."""

    def test_magnitude(self):
        intensity, _ = normalize(3.0, SampleUnit.REAL, quadrature=4.0)
        assert float(intensity) == 25.0

    def test_same_magnitude_for_either_component(self):
        i_part = np.array([3.0, -1.0, 0.5])
        q_part = np.array([4.0, 2.0, -0.5])
        from_real, _ = normalize(i_part, SampleUnit.REAL, q_part)
        from_imag, _ = normalize(i_part, SampleUnit.IMAGINARY, q_part)
        np.testing.assert_array_equal(from_real, from_imag)

    def test_phase_fraction_real_target(self):
        _, phase = normalize(3.0, SampleUnit.REAL, 4.0,
                             target_unit=SampleUnit.REAL)
        assert float(phase) == pytest.approx(0.6)

    def test_phase_fraction_imaginary_target(self):
        _, phase = normalize(3.0, SampleUnit.REAL, 4.0,
                             target_unit=SampleUnit.IMAGINARY)
        assert float(phase) == pytest.approx(0.8)

    def test_phase_zero_for_detected_target(self):
        _, phase = normalize(3.0, SampleUnit.REAL, 4.0,
                             target_unit=SampleUnit.INTENSITY)
        assert float(phase) == 0.0

    def test_zero_sample_has_zero_phase(self):
        intensity, phase = normalize(np.zeros(3), SampleUnit.REAL, np.zeros(3),
                                     target_unit=SampleUnit.REAL)
        np.testing.assert_array_equal(intensity, 0.0)
        np.testing.assert_array_equal(phase, 0.0)
        assert not np.any(np.isnan(phase))

    def test_missing_quadrature_raises(self):
        with pytest.raises(ValidationError, match="quadrature"):
            normalize(1.0, SampleUnit.IMAGINARY)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValidationError, match="shape"):
            normalize(np.zeros(3), SampleUnit.REAL, np.zeros(4))


class TestUnsupportedUnits:
    """Test units the normalizer rejects."""

    @pytest.mark.parametrize("unit", [
        SampleUnit.AMPLITUDE_DB, SampleUnit.PHASE, SampleUnit.UNKNOWN,
    ])
    def test_rejected(self, unit):
        with pytest.raises(UnsupportedUnitError):
            normalize(1.0, unit)

    def test_unsupported_is_validation_error(self):
        with pytest.raises(ValidationError):
            normalize(1.0, SampleUnit.PHASE)

    def test_sample_unit_lookup_by_value(self):
        assert SampleUnit('intensity_db') is SampleUnit.INTENSITY_DB
        assert SampleUnit.REAL.is_complex
        assert not SampleUnit.AMPLITUDE.is_complex
