# -*- coding: utf-8 -*-
"""
sarcal Exception Hierarchy - Domain-specific exceptions for calibration.

Lets the surrounding pipeline catch calibration errors distinctly from
Python built-in exceptions. All sarcal exceptions subclass both
``SarcalError`` and the appropriate built-in exception, so existing
``except ValueError`` / ``except IndexError`` handlers keep working.

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
2026-03-02
"""


class SarcalError(Exception):
    """Base exception for all sarcal errors."""


class ValidationError(SarcalError, ValueError):
    """Invalid calibration parameters or configuration.

    Raised for malformed gain tables, mismatched buffer and window
    sizes, unrecognized calibration mode combinations, and other
    configuration failures. Not retryable.
    """


class UnsupportedUnitError(ValidationError):
    """Sample unit that the unit normalizer cannot convert.

    A configuration error of the caller (the band was declared with a
    unit such as ``amplitude_db`` or ``phase``), not a data error.
    """


class OutOfDomainError(SarcalError, IndexError):
    """Gain lookup outside the coverage of a gain table.

    Raised when a requested column maps to a table index outside
    ``[0, count)``. The column range is a contract of the caller;
    the lookup never wraps or substitutes a default gain.
    """


class ProcessorError(SarcalError, RuntimeError):
    """Run-level failure while calibrating a full image.

    Raised when a whole-image run is cancelled between tiles, or
    when a worker tile fails and the failure is re-raised with the
    offending tile named.
    """
