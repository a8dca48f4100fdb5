# -*- coding: utf-8 -*-
"""
Processor Base Class - Common behaviour of calibration processors.

Defines ``CalibrationProcessor``, the base class of mission calibrators.
It warns once per class when a concrete processor does not declare a
version with ``@processor_version``, and provides the optional progress
callback hook used by long-running whole-image runs.

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
2026-03-05
"""

# Standard library
import logging
import warnings
from abc import ABC
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CalibrationProcessor(ABC):
    """
    Common base class for calibration processors.

    **Version checking**: concrete subclasses that do not declare a
    processor version via ``@processor_version('x.y.z')`` trigger a
    ``UserWarning`` at first instantiation. The check runs in
    ``__new__`` so that class decorators have already been applied.

    **Progress reporting**: ``_report_progress`` forwards a completion
    fraction to a caller-supplied callback, if any.
    """

    # Classes already checked, so the warning fires once per class.
    _version_warned_classes: set = set()

    def __new__(cls, *args: Any, **kwargs: Any) -> 'CalibrationProcessor':
        if cls not in CalibrationProcessor._version_warned_classes:
            CalibrationProcessor._version_warned_classes.add(cls)
            if (
                not getattr(cls, '__processor_version__', None)
                and not getattr(cls, '__abstractmethods__', None)
            ):
                warnings.warn(
                    f"{cls.__qualname__} does not declare a processor version. "
                    f"Use @processor_version('x.y.z') to declare one.",
                    UserWarning,
                    stacklevel=2,
                )
        logger.debug("Instantiating %s", cls.__qualname__)
        return super().__new__(cls)

    @staticmethod
    def _report_progress(
        callback: Optional[Callable[[float], Any]], fraction: float,
    ) -> None:
        """Call *callback* with *fraction* in [0.0, 1.0], if given."""
        if callback is not None:
            callback(float(fraction))
