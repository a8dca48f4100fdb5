# -*- coding: utf-8 -*-
"""
Tests for the sarcal exception hierarchy and package exports.

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
2026-03-09
"""

import pytest

import sarcal
from sarcal.exceptions import (
    OutOfDomainError,
    ProcessorError,
    SarcalError,
    UnsupportedUnitError,
    ValidationError,
)


class TestHierarchy:
    """Each error is catchable as SarcalError and as its built-in."""

    @pytest.mark.parametrize("exc,builtin", [
        (ValidationError, ValueError),
        (UnsupportedUnitError, ValueError),
        (OutOfDomainError, IndexError),
        (ProcessorError, RuntimeError),
    ])
    def test_subclasses(self, exc, builtin):
        assert issubclass(exc, SarcalError)
        assert issubclass(exc, builtin)

    def test_unsupported_unit_is_validation_error(self):
        assert issubclass(UnsupportedUnitError, ValidationError)


class TestPackageExports:
    """Test the top-level namespace."""

    def test_version(self):
        assert sarcal.__version__ == "0.1.0"

    def test_all_resolvable(self):
        for name in sarcal.__all__:
            assert hasattr(sarcal, name), name
