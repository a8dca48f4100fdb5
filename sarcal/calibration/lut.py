# -*- coding: utf-8 -*-
"""
Gain Lookup Table - Per-polarization range-dependent gain tables.

A ``GainLUT`` tabulates antenna-pattern gains every ``step`` columns
starting at column ``first_index``. Lookups are a step function (the
nearest preceding breakpoint), not an interpolation: with ``step > 1``
adjacent columns repeat the same tabulated gain.

Tables are built once per run from auxiliary calibration data, either
with snake_case field names or with the spelling used by RCM lookup
table files (``pixelFirstLutValue``, ``stepSize``, ``numberOfValues``,
``offset``, ``gains``). ``build_lut_map`` returns a read-only mapping
keyed by polarization; ``GainCache`` memoizes gain sequences per
``(polarization, x0, width)`` for concurrent tile workers.

Dependencies
------------
numpy

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

# Standard library
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.exceptions import OutOfDomainError, ValidationError

logger = logging.getLogger(__name__)

# (canonical field, accepted aliases)
_FIELD_ALIASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('first_index', ('first_index', 'pixelFirstLutValue')),
    ('step', ('step', 'stepSize')),
    ('count', ('count', 'numberOfValues')),
    ('offset', ('offset',)),
    ('values', ('values', 'gains')),
)


@dataclass(frozen=True, eq=False)
class GainLUT:
    """Immutable gain table for one polarization channel.

    Parameters
    ----------
    first_index : int
        Column coordinate of the first tabulated gain.
    step : int
        Column spacing between consecutive gains. Must be positive.
    count : int
        Number of tabulated gains. Must equal ``len(values)``.
    offset : float
        Additive radiometric offset, applied to detected data only.
    values : np.ndarray
        Linear-domain gains. Stored as a read-only float64 copy.
    polarization : str, optional
        Polarization code the table belongs to (``'HH'``, ``'HV'``...).

    Raises
    ------
    ValidationError
        If any field violates the table invariants.

    Examples
    --------
    >>> lut = GainLUT(first_index=0, step=4, count=3, offset=0.0,
    ...               values=np.array([1.0, 2.0, 3.0]))
    >>> lut.gains(0, 8)
    array([1., 1., 1., 1., 2., 2., 2., 2.])
    """

    first_index: int
    step: int
    count: int
    offset: float
    values: np.ndarray
    polarization: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ('first_index', 'step', 'count'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(
                value, (int, np.integer)
            ):
                raise ValidationError(
                    f"GainLUT.{name} must be int, got {type(value).__name__}"
                )
            object.__setattr__(self, name, int(value))
        if self.step <= 0:
            raise ValidationError(
                f"GainLUT.step must be positive, got {self.step}"
            )
        if self.count <= 0:
            raise ValidationError(
                f"GainLUT.count must be positive, got {self.count}"
            )

        values = np.array(self.values, dtype=np.float64).ravel()
        if values.size != self.count:
            raise ValidationError(
                f"GainLUT.count is {self.count} but {values.size} "
                f"gain values were supplied"
            )
        values.flags.writeable = False
        object.__setattr__(self, 'values', values)
        object.__setattr__(self, 'offset', float(self.offset))

    @property
    def coverage(self) -> Tuple[int, int]:
        """Half-open column range ``[start, stop)`` covered by the table."""
        return (self.first_index, self.first_index + self.step * self.count)

    def gains(self, x0: int, width: int) -> np.ndarray:
        """Gains for the absolute columns ``[x0, x0 + width)``.

        Parameters
        ----------
        x0 : int
            First absolute column.
        width : int
            Number of columns. Must be positive.

        Returns
        -------
        np.ndarray
            float64 array of length ``width``.

        Raises
        ------
        ValidationError
            If ``width`` is not positive.
        OutOfDomainError
            If any column maps outside the tabulated values.
        """
        if width <= 0:
            raise ValidationError(f"width must be positive, got {width}")
        columns = np.arange(x0, x0 + width, dtype=np.int64)
        indices = (columns - self.first_index) // self.step
        # indices are monotone, checking the ends is enough
        if indices[0] < 0 or indices[-1] >= self.count:
            start, stop = self.coverage
            raise OutOfDomainError(
                f"Columns [{x0}, {x0 + width}) fall outside the gain table "
                f"coverage [{start}, {stop})"
                + (f" for polarization {self.polarization}"
                   if self.polarization else "")
            )
        return self.values[indices]

    def __repr__(self) -> str:
        return (
            f"GainLUT(polarization={self.polarization!r}, "
            f"first_index={self.first_index}, step={self.step}, "
            f"count={self.count}, offset={self.offset})"
        )


def _parse_values(raw: Union[str, Sequence[float], np.ndarray]) -> np.ndarray:
    """Parse gains from a whitespace-separated string or a sequence."""
    if isinstance(raw, str):
        try:
            return np.array([float(x) for x in raw.split()], dtype=np.float64)
        except ValueError as exc:
            raise ValidationError(f"Malformed gain values: {exc}") from exc
    return np.asarray(raw, dtype=np.float64)


def build_lut(
    params: Mapping[str, Any],
    polarization: Optional[str] = None,
) -> GainLUT:
    """Build a ``GainLUT`` from auxiliary calibration parameters.

    Parameters
    ----------
    params : Mapping[str, Any]
        Either ``first_index, step, count, offset, values`` or the RCM
        spelling ``pixelFirstLutValue, stepSize, numberOfValues, offset,
        gains``. Integer fields may be numeric strings; gains may be a
        whitespace-separated string.
    polarization : str, optional
        Polarization code recorded on the table.

    Returns
    -------
    GainLUT

    Raises
    ------
    ValidationError
        If a required field is missing or malformed.
    """
    resolved: Dict[str, Any] = {}
    for canonical, aliases in _FIELD_ALIASES:
        for alias in aliases:
            if alias in params and params[alias] is not None:
                resolved[canonical] = params[alias]
                break
        else:
            raise ValidationError(
                f"Gain table is missing required field '{canonical}' "
                f"(accepted keys: {', '.join(aliases)})"
            )

    try:
        first_index = int(resolved['first_index'])
        step = int(resolved['step'])
        count = int(resolved['count'])
        offset = float(resolved['offset'])
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed gain table field: {exc}") from exc

    return GainLUT(
        first_index=first_index,
        step=step,
        count=count,
        offset=offset,
        values=_parse_values(resolved['values']),
        polarization=polarization,
    )


def build_lut_map(
    tables: Mapping[str, Union[GainLUT, Mapping[str, Any]]],
) -> Mapping[str, GainLUT]:
    """Build the read-only polarization -> ``GainLUT`` mapping for a run.

    Parameters
    ----------
    tables : Mapping[str, GainLUT or Mapping]
        Per-polarization tables, either already built or as parameter
        mappings accepted by ``build_lut``.

    Returns
    -------
    Mapping[str, GainLUT]
        ``MappingProxyType`` keyed by upper-cased polarization code.

    Raises
    ------
    ValidationError
        If two keys collide after upper-casing, or a table is malformed.
    """
    luts: Dict[str, GainLUT] = {}
    for pol, table in tables.items():
        key = pol.strip().upper()
        if key in luts:
            raise ValidationError(f"Duplicate gain table for polarization {key}")
        if isinstance(table, GainLUT):
            luts[key] = table
        else:
            luts[key] = build_lut(table, polarization=key)
    logger.debug("Built gain tables for polarizations %s", sorted(luts))
    return MappingProxyType(luts)


class GainCache:
    """Thread-safe memo of gain sequences per tile column range.

    Gains depend only on ``(polarization, x0, width)``, so tiles in the
    same column band share one computed sequence. Reads and writes are
    guarded by a lock; cached arrays are read-only. The oldest entry is
    evicted once ``maxsize`` is reached.

    Parameters
    ----------
    luts : Mapping[str, GainLUT]
        Read-only polarization -> table mapping.
    maxsize : int
        Maximum number of cached sequences. Default ``256``.
    """

    def __init__(self, luts: Mapping[str, GainLUT], maxsize: int = 256) -> None:
        if maxsize <= 0:
            raise ValidationError(f"maxsize must be positive, got {maxsize}")
        self._luts = luts
        self._maxsize = maxsize
        self._entries: 'OrderedDict[Tuple[str, int, int], np.ndarray]' = (
            OrderedDict()
        )
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, polarization: str, x0: int, width: int) -> Optional[np.ndarray]:
        """Gains for ``[x0, x0 + width)``, or ``None`` without a table.

        Raises
        ------
        OutOfDomainError
            Propagated from ``GainLUT.gains``; failures are not cached.
        """
        key = (polarization.upper(), int(x0), int(width))
        lut = self._luts.get(key[0])
        if lut is None:
            return None

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached

        gains = lut.gains(key[1], key[2])
        gains.flags.writeable = False
        with self._lock:
            self._entries[key] = gains
            self._entries.move_to_end(key)
            while len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)
        return gains

    def clear(self) -> None:
        """Drop every cached sequence."""
        with self._lock:
            self._entries.clear()
