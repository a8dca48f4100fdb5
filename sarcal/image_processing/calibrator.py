# -*- coding: utf-8 -*-
"""
Radiometric Calibrator - Sigma-naught calibration of SAR bands.

``RadiometricCalibrator`` binds the per-run state of a calibration (the
read-only polarization -> gain table mapping, the ``CalibrationMode``
and an optional incidence-angle surface) and exposes the operations
collaborators call:

- ``calibrate_tile`` / ``passthrough_tile`` for bulk tile processing,
- ``calibrate_point`` for a single off-grid sample,
- ``reverse_incidence_correction`` for retro-calibration,
- ``calibrate_image`` to calibrate a whole band, tiles running on a
  thread pool with cooperative cancellation between tiles.

Tiles are independent: each writes a disjoint target region, the gain
tables are never mutated, and gain sequences are shared between tiles
through a locked ``GainCache``.

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
2026-03-05

Modified
--------
2026-03-09
"""

# Standard library
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import (
    Any, Callable, Mapping, Optional, Sequence, Tuple, Union, TYPE_CHECKING,
)

# Third-party
import numpy as np

# sarcal internal
from sarcal.calibration.incidence import (
    IncidenceAngleGrid,
    apply_forward,
    apply_reverse,
)
from sarcal.calibration.lut import GainCache, GainLUT, build_lut_map
from sarcal.calibration.mode import CalibrationMode
from sarcal.calibration.tile import calibrate_tile, passthrough_tile
from sarcal.calibration.transform import calibrate
from sarcal.calibration.units import normalize
from sarcal.data_prep.base import TileWindow
from sarcal.data_prep.tiler import Tiler
from sarcal.exceptions import ProcessorError, SarcalError, ValidationError
from sarcal.image_processing.base import CalibrationProcessor
from sarcal.image_processing.versioning import processor_tags, processor_version
from sarcal.vocabulary import ImageModality, ProcessorCategory, SampleUnit

if TYPE_CHECKING:
    from sarcal.IO.models.rcm import RCMCalibrationMetadata

logger = logging.getLogger(__name__)

Window = Union[TileWindow, Tuple[int, int, int, int]]


@processor_version('1.0.0')
@processor_tags(
    modalities=[ImageModality.SAR],
    category=ProcessorCategory.CALIBRATION,
    description='Sigma-naught calibration with range-dependent gain tables',
)
class RadiometricCalibrator(CalibrationProcessor):
    """Calibrate SAR samples to sigma-naught.

    Parameters
    ----------
    luts : Mapping[str, GainLUT or Mapping]
        Gain tables keyed by polarization. Parameter mappings are
        built with :func:`~sarcal.calibration.lut.build_lut_map`.
    mode : CalibrationMode, optional
        Run configuration. Defaults to detected input, linear output.
    incidence_grid : IncidenceAngleGrid, optional
        Per-pixel incidence-angle surface for retro-calibration.
    cache_size : int
        Maximum number of cached gain sequences. Default ``256``.

    Examples
    --------
    >>> import numpy as np
    >>> from sarcal.calibration import CalibrationMode
    >>> from sarcal.vocabulary import SampleUnit
    >>> cal = RadiometricCalibrator(
    ...     {'HH': {'first_index': 0, 'step': 4, 'count': 3, 'offset': 0.0,
    ...             'values': [1.0, 2.0, 3.0]}},
    ...     CalibrationMode(),
    ... )
    >>> dn = np.full((2, 8), 4.0)
    >>> sigma = np.zeros_like(dn)
    >>> cal.calibrate_tile(dn, sigma, (0, 0, 8, 2), SampleUnit.INTENSITY,
    ...                    SampleUnit.INTENSITY, 'HH')
    >>> sigma[0]
    array([4., 4., 4., 4., 2., 2., 2., 2.])
    """

    def __init__(
        self,
        luts: Mapping[str, Union[GainLUT, Mapping[str, Any]]],
        mode: Optional[CalibrationMode] = None,
        incidence_grid: Optional[IncidenceAngleGrid] = None,
        cache_size: int = 256,
    ) -> None:
        self._luts = build_lut_map(luts)
        self._mode = mode if mode is not None else CalibrationMode()
        if not isinstance(self._mode, CalibrationMode):
            raise ValidationError(
                f"mode must be a CalibrationMode, got "
                f"{type(self._mode).__name__}"
            )
        self._incidence_grid = incidence_grid
        self._gain_cache = GainCache(self._luts, maxsize=cache_size)
        self._missing_pols: set = set()
        self._missing_lock = threading.Lock()

    @classmethod
    def from_rcm(
        cls,
        metadata: 'RCMCalibrationMetadata',
        mode: Optional[CalibrationMode] = None,
        **flags: Any,
    ) -> 'RadiometricCalibrator':
        """Build a calibrator from parsed RCM calibration metadata.

        Parameters
        ----------
        metadata : RCMCalibrationMetadata
            Output of :func:`sarcal.IO.rcm.load_rcm_calibration`.
        mode : CalibrationMode, optional
            Explicit mode. When omitted it is derived from the product
            type with ``metadata.build_mode(**flags)``.
        **flags
            ``CalibrationMode`` fields other than ``is_complex_source``.

        Returns
        -------
        RadiometricCalibrator
        """
        if mode is None:
            mode = metadata.build_mode(**flags)
        return cls(
            metadata.lut_map(),
            mode,
            incidence_grid=metadata.incidence_grid(),
        )

    # -----------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------
    @property
    def luts(self) -> Mapping[str, GainLUT]:
        """Read-only polarization -> gain table mapping."""
        return self._luts

    @property
    def mode(self) -> CalibrationMode:
        """Run configuration."""
        return self._mode

    @property
    def incidence_grid(self) -> Optional[IncidenceAngleGrid]:
        """Incidence-angle surface used by retro-calibration, if any."""
        return self._incidence_grid

    @property
    def gain_cache(self) -> GainCache:
        """Shared gain sequence cache."""
        return self._gain_cache

    def set_external_aux_file(self, path: Optional[str]) -> None:
        """Reject external auxiliary calibration files.

        Gain tables are read from the product itself, so the only
        accepted value is ``None``.

        Raises
        ------
        ValidationError
            If *path* is not ``None``.
        """
        if path is not None:
            raise ValidationError(
                f"No external auxiliary file should be selected for this "
                f"product, got {path!r}"
            )

    def _check_polarization(self, polarization: str) -> None:
        """Warn once per polarization that has no gain table."""
        key = polarization.upper()
        if key in self._luts:
            return
        with self._missing_lock:
            if key in self._missing_pols:
                return
            self._missing_pols.add(key)
        logger.warning(
            "No gain table for polarization %s; calibrating without "
            "gain correction", key,
        )

    # -----------------------------------------------------------------
    # Tile operations
    # -----------------------------------------------------------------
    def calibrate_tile(
        self,
        sources: Union[np.ndarray, Sequence[np.ndarray]],
        target: np.ndarray,
        window: Window,
        source_unit: SampleUnit,
        target_unit: SampleUnit,
        polarization: str,
        *,
        source_origin: Tuple[int, int] = (0, 0),
        target_origin: Tuple[int, int] = (0, 0),
    ) -> None:
        """Calibrate one window of *sources* into *target* in place.

        See :func:`sarcal.calibration.tile.calibrate_tile` for the
        parameters and errors.
        """
        self._check_polarization(polarization)
        calibrate_tile(
            sources, target, window, source_unit, target_unit,
            polarization, self._luts, self._mode,
            source_origin=source_origin,
            target_origin=target_origin,
            gain_cache=self._gain_cache,
        )

    def passthrough_tile(
        self,
        source: np.ndarray,
        target: np.ndarray,
        window: Window,
        *,
        source_origin: Tuple[int, int] = (0, 0),
        target_origin: Tuple[int, int] = (0, 0),
    ) -> None:
        """Copy one window of an already-calibrated band unmodified."""
        passthrough_tile(
            source, target, window,
            source_origin=source_origin,
            target_origin=target_origin,
        )

    # -----------------------------------------------------------------
    # Point operations
    # -----------------------------------------------------------------
    def calibrate_point(
        self,
        sample: float,
        range_index: float,
        azimuth_index: float,
        unit: SampleUnit,
        polarization: str,
        local_incidence_angle: float,
        quadrature: Optional[float] = None,
    ) -> float:
        """Calibrate a single sample at an arbitrary image position.

        The gain is taken at the nearest column to *range_index*; gains
        do not depend on *azimuth_index*. The result is a linear
        magnitude (no dB, no phase), scaled by ``sin(local incidence
        angle)`` when the mode uses DEM incidence angles.

        Parameters
        ----------
        sample : float
            Sample value. For ``REAL`` / ``IMAGINARY`` units without
            *quadrature*, the sample is taken to be an intensity already.
        range_index : float
            Absolute column coordinate of the gain tables.
        azimuth_index : float
            Row coordinate. Accepted for interface symmetry.
        unit : SampleUnit
            Encoding of *sample*.
        polarization : str
            Polarization code.
        local_incidence_angle : float
            Local incidence angle in degrees.
        quadrature : float, optional
            Quadrature component when *sample* is the in-phase part.

        Returns
        -------
        float

        Raises
        ------
        UnsupportedUnitError
            If *unit* cannot be normalized.
        OutOfDomainError
            If *range_index* is outside the gain table coverage.
        """
        if isinstance(unit, SampleUnit) and unit.is_complex and quadrature is None:
            intensity = float(sample)
        else:
            intensity, _ = normalize(sample, unit, quadrature)

        self._check_polarization(polarization)
        lut = self._luts.get(polarization.upper())
        gain = None
        offset = 0.0
        if lut is not None:
            column = int(np.floor(range_index + 0.5))
            gain = lut.gains(column, 1)[0]
            offset = lut.offset

        point_mode = replace(self._mode, output_complex=False, output_in_db=False)
        sigma = calibrate(intensity, 0.0, gain, offset, point_mode)
        return float(apply_forward(sigma, local_incidence_angle, self._mode))

    def reverse_incidence_correction(
        self,
        value: float,
        pixel_incidence_angle: Optional[float] = None,
        *,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> float:
        """Retro-calibrate *value* by removing the sine incidence factor.

        Parameters
        ----------
        value : float
            Value previously scaled by ``sin(incidence angle)``.
        pixel_incidence_angle : float, optional
            Incidence angle of the pixel in degrees. When omitted it is
            read from the incidence-angle surface at column *x*, row *y*.
        x, y : float, optional
            Pixel position used with the incidence-angle surface.

        Returns
        -------
        float
            *value* unchanged when the mode uses ellipsoid angles.

        Raises
        ------
        ValidationError
            If neither an angle nor a surface position is available, or
            the angle has zero sine.
        """
        if not self._mode.uses_dem_incidence:
            return float(value)
        if pixel_incidence_angle is None:
            if self._incidence_grid is None or x is None or y is None:
                raise ValidationError(
                    "Retro-calibration needs pixel_incidence_angle, or an "
                    "incidence-angle surface and the pixel position (x, y)"
                )
            pixel_incidence_angle = self._incidence_grid.angle_at(x, y)
        return float(apply_reverse(value, pixel_incidence_angle, self._mode))

    # -----------------------------------------------------------------
    # Whole-image runs
    # -----------------------------------------------------------------
    def calibrate_image(
        self,
        sources: Union[np.ndarray, Sequence[np.ndarray]],
        source_unit: SampleUnit,
        target_unit: SampleUnit,
        polarization: str,
        *,
        tile_size: Union[int, Tuple[int, int]] = 512,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        progress_callback: Optional[Callable[[float], Any]] = None,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Calibrate a whole band tile by tile.

        Parameters
        ----------
        sources : np.ndarray or Sequence[np.ndarray]
            Full-image source buffer(s), as for ``calibrate_tile``.
        source_unit, target_unit : SampleUnit
            Source encoding and produced band unit.
        polarization : str
            Polarization code.
        tile_size : int or Tuple[int, int]
            Tile dimensions. Default ``512``.
        max_workers : int, optional
            Thread pool size; ``1`` runs tiles serially in row-major
            order. ``None`` lets the executor choose.
        cancel_event : threading.Event, optional
            Checked before each tile starts.
        progress_callback : Callable[[float], Any], optional
            Called with the completed fraction after each tile.
        out : np.ndarray, optional
            Pre-allocated target of the image shape. Must have a floating
            dtype.

        Returns
        -------
        np.ndarray
            Calibrated band, float64 unless *out* is given.

        Raises
        ------
        ProcessorError
            If the run is cancelled, or a tile fails with an error that
            is not a ``SarcalError``. Tiles already written stay valid.
        ValidationError
            If *out* has the wrong shape or a non-floating dtype.
        ValidationError, OutOfDomainError
            Propagated unchanged from the failing tile.
        """
        buffers = (sources,) if isinstance(sources, np.ndarray) else tuple(sources)
        if not buffers or buffers[0].ndim != 2:
            raise ValidationError("sources must be one or two 2D arrays")
        shape = buffers[0].shape
        if out is None:
            target = np.empty(shape, dtype=np.float64)
        elif out.shape != shape:
            raise ValidationError(
                f"out shape {out.shape} does not match source shape {shape}"
            )
        elif not np.issubdtype(out.dtype, np.floating):
            raise ValidationError(
                f"out must have a floating dtype, got {out.dtype}"
            )
        else:
            target = out

        windows = Tiler(shape[0], shape[1], tile_size).windows()
        total = len(windows)
        logger.info(
            "Calibrating %s %s band %s in %d tiles",
            polarization, getattr(target_unit, "value", target_unit), shape, total,
        )

        def run_tile(window: TileWindow) -> bool:
            if cancel_event is not None and cancel_event.is_set():
                return False
            self.calibrate_tile(
                buffers, target, window, source_unit, target_unit, polarization,
            )
            return True

        completed = 0
        if max_workers == 1:
            for window in windows:
                if not run_tile(window):
                    break
                completed += 1
                self._report_progress(progress_callback, completed / total)
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {executor.submit(run_tile, w): w for w in windows}
                try:
                    for future in as_completed(futures):
                        try:
                            done = future.result()
                        except SarcalError:
                            raise
                        except Exception as exc:
                            raise ProcessorError(
                                f"Calibration of {futures[future]} failed: {exc}"
                            ) from exc
                        if done:
                            completed += 1
                            self._report_progress(
                                progress_callback, completed / total
                            )
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        if completed < total:
            raise ProcessorError(
                f"Calibration of {polarization} cancelled after "
                f"{completed} of {total} tiles"
            )
        logger.debug("Calibrated %d tiles for %s", total, polarization)
        return target

    def __repr__(self) -> str:
        return (
            f"RadiometricCalibrator(polarizations={sorted(self._luts)}, "
            f"mode={self._mode})"
        )
