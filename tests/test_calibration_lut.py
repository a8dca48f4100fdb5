# -*- coding: utf-8 -*-
"""
Tests for gain tables, table construction and the gain cache.

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
2026-03-03

Modified
--------
2026-03-06
"""

import threading
from types import MappingProxyType

import numpy as np
import pytest

from sarcal.calibration.lut import GainCache, GainLUT, build_lut, build_lut_map
from sarcal.exceptions import OutOfDomainError, ValidationError


@pytest.fixture
def step_lut():
    return GainLUT(first_index=0, step=4, count=3, offset=0.0,
                   values=np.array([1.0, 2.0, 3.0]), polarization='HH')


# ---------------------------------------------------------------------------
# GainLUT
# ---------------------------------------------------------------------------

class TestGainLUT:
    """Test gain table construction and lookup."""

    def test_step_function(self, step_lut):
        np.testing.assert_array_equal(
            step_lut.gains(0, 8), [1, 1, 1, 1, 2, 2, 2, 2]
        )

    def test_mid_range_query(self, step_lut):
        np.testing.assert_array_equal(step_lut.gains(3, 3), [1, 2, 2])

    def test_last_covered_column(self, step_lut):
        np.testing.assert_array_equal(step_lut.gains(11, 1), [3])

    def test_first_index_shift(self):
        lut = GainLUT(first_index=10, step=2, count=2, offset=0.0,
                      values=[5.0, 7.0])
        np.testing.assert_array_equal(lut.gains(10, 4), [5, 5, 7, 7])

    def test_dtype_and_length(self, step_lut):
        gains = step_lut.gains(2, 5)
        assert gains.dtype == np.float64
        assert gains.shape == (5,)

    def test_out_of_range_high_raises(self, step_lut):
        with pytest.raises(OutOfDomainError, match="coverage"):
            step_lut.gains(10, 4)

    def test_out_of_range_low_raises(self):
        lut = GainLUT(first_index=4, step=4, count=2, offset=0.0,
                      values=[1.0, 2.0])
        with pytest.raises(OutOfDomainError):
            lut.gains(0, 2)

    def test_out_of_domain_is_index_error(self, step_lut):
        with pytest.raises(IndexError):
            step_lut.gains(100, 1)

    def test_nonpositive_width_raises(self, step_lut):
        with pytest.raises(ValidationError, match="width"):
            step_lut.gains(0, 0)

    def test_values_read_only(self, step_lut):
        with pytest.raises(ValueError):
            step_lut.values[0] = 10.0

    def test_values_copied(self):
        raw = np.array([1.0, 2.0])
        lut = GainLUT(first_index=0, step=1, count=2, offset=0.0, values=raw)
        raw[0] = 99.0
        assert lut.values[0] == 1.0

    def test_coverage(self, step_lut):
        assert step_lut.coverage == (0, 12)

    def test_zero_step_raises(self):
        with pytest.raises(ValidationError, match="step"):
            GainLUT(first_index=0, step=0, count=1, offset=0.0, values=[1.0])

    def test_count_mismatch_raises(self):
        with pytest.raises(ValidationError, match="count"):
            GainLUT(first_index=0, step=1, count=3, offset=0.0,
                    values=[1.0, 2.0])

    def test_float_index_raises(self):
        with pytest.raises(ValidationError, match="must be int"):
            GainLUT(first_index=0.5, step=1, count=1, offset=0.0,
                    values=[1.0])

    def test_frozen(self, step_lut):
        with pytest.raises(AttributeError):
            step_lut.offset = 1.0


# ---------------------------------------------------------------------------
# build_lut / build_lut_map
# ---------------------------------------------------------------------------

class TestBuildLut:
    """Test table construction from calibration parameters."""

    def test_canonical_fields(self):
        lut = build_lut({'first_index': 0, 'step': 2, 'count': 2,
                         'offset': 1.5, 'values': [1.0, 2.0]})
        assert lut.offset == 1.5
        np.testing.assert_array_equal(lut.gains(0, 4), [1, 1, 2, 2])

    def test_rcm_field_names_and_strings(self):
        lut = build_lut({
            'pixelFirstLutValue': '0',
            'stepSize': '4',
            'numberOfValues': '3',
            'offset': '0.0',
            'gains': '1.0 2.0 3.0',
        }, polarization='VV')
        assert lut.polarization == 'VV'
        np.testing.assert_array_equal(lut.gains(0, 12)[::4], [1, 2, 3])

    def test_missing_field_named(self):
        with pytest.raises(ValidationError, match="'step'"):
            build_lut({'first_index': 0, 'count': 1, 'offset': 0.0,
                       'values': [1.0]})

    def test_malformed_gains(self):
        with pytest.raises(ValidationError, match="Malformed"):
            build_lut({'first_index': 0, 'step': 1, 'count': 2,
                       'offset': 0.0, 'values': '1.0 abc'})

    def test_malformed_integer(self):
        with pytest.raises(ValidationError, match="Malformed"):
            build_lut({'first_index': 'x', 'step': 1, 'count': 1,
                       'offset': 0.0, 'values': [1.0]})


class TestBuildLutMap:
    """Test the read-only polarization mapping."""

    def test_read_only_and_upper_case(self, step_lut):
        luts = build_lut_map({'hh': step_lut})
        assert isinstance(luts, MappingProxyType)
        assert 'HH' in luts
        with pytest.raises(TypeError):
            luts['VV'] = step_lut

    def test_builds_from_mappings(self):
        luts = build_lut_map({'HV': {'first_index': 0, 'step': 1, 'count': 1,
                                     'offset': 0.0, 'values': [2.0]}})
        assert luts['HV'].polarization == 'HV'

    def test_duplicate_keys_raise(self, step_lut):
        with pytest.raises(ValidationError, match="Duplicate"):
            build_lut_map({'HH': step_lut, 'hh': step_lut})


# ---------------------------------------------------------------------------
# GainCache
# ---------------------------------------------------------------------------

class TestGainCache:
    """Test the shared gain sequence cache."""

    def test_returns_same_array(self, step_lut):
        cache = GainCache({'HH': step_lut})
        first = cache.get('HH', 0, 8)
        second = cache.get('hh', 0, 8)
        assert first is second
        assert len(cache) == 1

    def test_cached_read_only(self, step_lut):
        cache = GainCache({'HH': step_lut})
        gains = cache.get('HH', 0, 4)
        assert not gains.flags.writeable

    def test_missing_polarization_returns_none(self, step_lut):
        cache = GainCache({'HH': step_lut})
        assert cache.get('VV', 0, 4) is None
        assert len(cache) == 0

    def test_errors_not_cached(self, step_lut):
        cache = GainCache({'HH': step_lut})
        with pytest.raises(OutOfDomainError):
            cache.get('HH', 10, 4)
        assert len(cache) == 0

    def test_eviction(self, step_lut):
        cache = GainCache({'HH': step_lut}, maxsize=2)
        cache.get('HH', 0, 1)
        cache.get('HH', 1, 1)
        cache.get('HH', 2, 1)
        assert len(cache) == 2

    def test_clear(self, step_lut):
        cache = GainCache({'HH': step_lut})
        cache.get('HH', 0, 4)
        cache.clear()
        assert len(cache) == 0

    def test_invalid_maxsize(self, step_lut):
        with pytest.raises(ValidationError):
            GainCache({'HH': step_lut}, maxsize=0)

    def test_concurrent_access(self, step_lut):
        cache = GainCache({'HH': step_lut})
        results = []

        def worker():
            for x0 in range(8):
                results.append(cache.get('HH', x0, 4).tolist())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 32
        assert len(cache) == 8
        assert results[0] == step_lut.gains(0, 4).tolist()
