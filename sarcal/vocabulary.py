# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the sarcal framework.

Defines the single source of truth for controlled vocabularies used by
the calibration engine and its collaborators: image modalities and
processor categories for processor tagging, sample units declared on
bands, and the incidence-angle source selection.

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

from enum import Enum


class ImageModality(Enum):
    """Supported image modalities for processor tagging."""

    SAR = "SAR"


class ProcessorCategory(Enum):
    """Processing categories for processor tagging."""

    CALIBRATION = "calibration"


class SampleUnit(Enum):
    """Encoding of the raw samples stored in a band.

    Values match the unit strings attached to bands by SAR product
    readers, so ``SampleUnit('intensity_db')`` resolves a declared unit.
    Only ``AMPLITUDE``, ``INTENSITY``, ``INTENSITY_DB``, ``REAL`` and
    ``IMAGINARY`` can be calibrated; the remaining members are valid
    band units that the unit normalizer rejects.
    """

    AMPLITUDE = "amplitude"
    INTENSITY = "intensity"
    INTENSITY_DB = "intensity_db"
    REAL = "real"
    IMAGINARY = "imaginary"
    AMPLITUDE_DB = "amplitude_db"
    PHASE = "phase"
    UNKNOWN = "unknown"

    @property
    def is_complex(self) -> bool:
        """Whether samples of this unit form one half of an I/Q pair."""
        return self in (SampleUnit.REAL, SampleUnit.IMAGINARY)


class IncidenceAngleMode(Enum):
    """Source of the incidence angle used by point-wise calibration.

    ``FROM_DEM`` applies (or removes) a ``sin(local incidence angle)``
    factor; ``FROM_ELLIPSOID`` leaves values untouched.
    """

    FROM_DEM = "Use projected local incidence angle from DEM"
    FROM_ELLIPSOID = "Use incidence angle from Ellipsoid"
