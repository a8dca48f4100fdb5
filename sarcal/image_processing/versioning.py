# -*- coding: utf-8 -*-
"""
Processor Versioning - Version and capability tag decorators.

Provides the ``@processor_version`` class decorator for stamping a
semantic version on a calibration processor and ``@processor_tags`` for
modality and category metadata used by downstream tools to discover
processors.

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
2026-03-04

Modified
--------
2026-03-04
"""

# Standard library
from typing import Optional, Sequence, Type, TypeVar
import importlib.metadata

# sarcal vocabulary
from sarcal.vocabulary import ImageModality, ProcessorCategory

T = TypeVar('T')


def processor_version(version: Optional[str] = None):
    """Class decorator that stamps ``__processor_version__`` on a processor.

    If *version* is omitted it is taken from the installed ``sarcal``
    distribution, or ``'unknown'`` when running from a source tree.

    Parameters
    ----------
    version : str, optional
        Semantic version string (e.g., ``'1.0.0'``).

    Returns
    -------
    Callable
        Class decorator.

    Examples
    --------
    >>> @processor_version('1.0.0')
    ... class MyCalibrator(CalibrationProcessor):
    ...     pass
    >>> MyCalibrator.__processor_version__
    '1.0.0'
    """
    def decorator(cls: Type[T]) -> Type[T]:
        if version:
            cls.__processor_version__ = version
        else:
            try:
                cls.__processor_version__ = importlib.metadata.version('sarcal')
            except importlib.metadata.PackageNotFoundError:
                cls.__processor_version__ = "unknown"
        return cls
    return decorator


def processor_tags(
    modalities: Optional[Sequence[ImageModality]] = None,
    category: Optional[ProcessorCategory] = None,
    description: Optional[str] = None,
):
    """Class decorator for processor capability metadata.

    Parameters
    ----------
    modalities : Sequence[ImageModality], optional
        Imagery modalities the processor is designed for.
    category : ProcessorCategory, optional
        Processing category.
    description : str, optional
        Short human-readable description.

    Raises
    ------
    TypeError
        If a modality or the category is not the matching enum member.
    """
    if modalities is not None:
        for m in modalities:
            if not isinstance(m, ImageModality):
                raise TypeError(
                    f"modalities must be ImageModality members, got {m!r}"
                )
    if category is not None and not isinstance(category, ProcessorCategory):
        raise TypeError(
            f"category must be a ProcessorCategory member, got {category!r}"
        )

    def decorator(cls: Type[T]) -> Type[T]:
        cls.__processor_tags__ = {
            'modalities': tuple(modalities) if modalities else (),
            'category': category,
            'description': description,
        }
        return cls
    return decorator
