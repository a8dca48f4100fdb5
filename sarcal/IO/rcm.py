# -*- coding: utf-8 -*-
"""
RCM Calibration Adapter - Calibration metadata from RADARSAT Constellation
Mission product folders.

Parses ``product.xml`` and the lookup tables in the product's
``calibration/`` directory into ``RCMCalibrationMetadata``. Only the
metadata calibration needs is read: mission, product type, image
dimensions, the gain table per polarization for one calibration type
and the optional range incidence-angle profile. Image data is never
opened.

Product directory structure::

    RCM1_OK..._SLC/
        metadata/
            product.xml
            calibration/
                lutSigma_HH.xml
                lutSigma_HV.xml
                incidenceAngles.xml
        imagery/
            ...

Dependencies
------------
numpy

Author
------
Jason Fritz
jpfritz@zai.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-03-06

Modified
--------
2026-03-09
"""

# Standard library
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, TypeVar, Union

# Third-party
import numpy as np

# sarcal internal
from sarcal.exceptions import ValidationError
from sarcal.IO.models.rcm import (
    RCMCalibrationMetadata,
    RCMGainTable,
    RCMIncidenceProfile,
    RCMProductInfo,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

#: Mission prefix every RCM satellite identifier starts with.
RCM_MISSION = 'RCM'

#: Calibration types an RCM product ships lookup tables for.
CALIBRATION_TYPES = ('Sigma Nought', 'Beta Nought', 'Gamma')

#: Incidence-angle file shipped in ``calibration/`` when product.xml does
#: not name one.
DEFAULT_INCIDENCE_FILE = 'incidenceAngles.xml'

#: Linear and compact polarization codes found in band names.
POLARIZATION_CODES = frozenset(
    ('HH', 'HV', 'VH', 'VV', 'RH', 'RV', 'CH', 'CV')
)


# ===================================================================
# XML helpers
# ===================================================================

def _xml_text(
    elem: Optional[ET.Element], path: str,
) -> Optional[str]:
    """Extract stripped text from XML path, returning None if absent."""
    if elem is None:
        return None
    val = elem.findtext(path)
    return val.strip() if val is not None else None


def _xml_convert(
    elem: Optional[ET.Element],
    path: str,
    convert: Callable[[str], T],
    source: Optional[Path],
) -> Optional[T]:
    """Convert the text at *path*, naming the element on failure."""
    val = _xml_text(elem, path)
    if not val:
        return None
    try:
        return convert(val)
    except ValueError as e:
        where = f" in {source}" if source is not None else ""
        raise ValidationError(f"Malformed {path}{where}: {e}") from e


def _xml_int(
    elem: Optional[ET.Element], path: str, source: Optional[Path] = None,
) -> Optional[int]:
    """Extract int from XML path, returning None if absent."""
    return _xml_convert(elem, path, int, source)


def _xml_float(
    elem: Optional[ET.Element], path: str, source: Optional[Path] = None,
) -> Optional[float]:
    """Extract float from XML path, returning None if absent."""
    return _xml_convert(elem, path, float, source)


def _xml_array(
    elem: Optional[ET.Element], path: str, source: Optional[Path] = None,
) -> Optional[np.ndarray]:
    """Extract a whitespace-separated float list as an array."""
    return _xml_convert(
        elem, path, lambda val: np.array(val.split(), dtype=np.float64),
        source,
    )


def _strip_namespace(root: ET.Element) -> ET.Element:
    """Strip XML namespace URIs from all tag names in the tree.

    RCM XMLs declare a default namespace
    (``http://www.rcm.csa.gc.ca/schema/rcm``). Stripping it allows
    ``findtext()`` to work with plain tag names.

    Parameters
    ----------
    root : ET.Element
        Root element of the parsed XML tree.

    Returns
    -------
    ET.Element
        Same root element with namespace prefixes removed.
    """
    for elem in root.iter():
        if '}' in elem.tag:
            elem.tag = elem.tag.split('}', 1)[1]
    return root


def _parse_xml(path: Path) -> ET.Element:
    """Parse *path* and return its namespace-stripped root.

    Raises
    ------
    ValidationError
        If the file is missing or is not well-formed XML.
    """
    if not path.is_file():
        raise ValidationError(f"RCM metadata file not found: {path}")
    try:
        tree = ET.parse(str(path))
    except ET.ParseError as e:
        raise ValidationError(f"Failed to parse {path}: {e}") from e
    return _strip_namespace(tree.getroot())


def _require(value, what: str, path: Path):
    """Return *value*, or raise if the element was absent."""
    if value is None:
        raise ValidationError(f"{what} not found in {path}")
    return value


# ===================================================================
# Directory resolution
# ===================================================================

def _resolve_product_xml(product_path: Path) -> Tuple[Path, Path]:
    """Resolve the ``product.xml`` and the directory holding it.

    Accepts the product root, its ``metadata/`` directory or the
    ``product.xml`` file itself.

    Returns
    -------
    metadata_dir : Path
        Directory containing ``product.xml`` and ``calibration/``.
    product_xml : Path
        Path to ``product.xml``.
    """
    product_path = Path(product_path)
    if product_path.is_dir():
        for candidate in (
            product_path / 'product.xml',
            product_path / 'metadata' / 'product.xml',
        ):
            if candidate.is_file():
                return candidate.parent, candidate
        raise ValidationError(
            f"No RCM product.xml found in: {product_path}"
        )
    if not product_path.is_file():
        raise ValidationError(f"RCM product not found: {product_path}")
    return product_path.parent, product_path


# ===================================================================
# Section extractors
# ===================================================================

def _extract_product_info(root: ET.Element, path: Path) -> RCMProductInfo:
    """Product identification and dimensions from ``product.xml``."""
    satellite = _require(
        _xml_text(root, 'sourceAttributes/satellite'), 'satellite', path
    )
    if not satellite.upper().startswith(RCM_MISSION):
        raise ValidationError(
            f"{satellite} is not a valid mission for RCM Calibration"
        )

    product_type = _require(
        _xml_text(
            root,
            'imageGenerationParameters/generalProcessingInformation/'
            'productType',
        ),
        'productType', path,
    )

    pols_text = _xml_text(
        root, 'sourceAttributes/radarParameters/polarizations'
    )
    polarizations = pols_text.upper().split() if pols_text else []

    rows = (_xml_int(root, 'sceneAttributes/imageAttributes/numLines', path)
            or _xml_int(root, './/numLines', path) or 0)
    cols = (_xml_int(root, 'sceneAttributes/imageAttributes/samplesPerLine',
                     path)
            or _xml_int(root, './/samplesPerLine', path) or 0)

    return RCMProductInfo(
        satellite=satellite,
        product_type=product_type,
        product_id=_xml_text(root, 'productId'),
        beam_mode=_xml_text(root, 'sourceAttributes/beamModeMnemonic'),
        polarizations=polarizations,
        rows=rows,
        cols=cols,
    )


def _extract_gain_table(
    lut_path: Path, polarization: str, calibration_type: str,
) -> RCMGainTable:
    """Parse one ``lut*.xml`` file."""
    root = _parse_xml(lut_path)
    gains = _require(
        _xml_array(root, 'gains', lut_path), 'gains', lut_path
    )
    first = _require(
        _xml_int(root, 'pixelFirstLutValue', lut_path),
        'pixelFirstLutValue', lut_path,
    )
    step = _require(
        _xml_int(root, 'stepSize', lut_path), 'stepSize', lut_path
    )
    number_of_values = _xml_int(root, 'numberOfValues', lut_path)
    return RCMGainTable(
        polarization=polarization,
        calibration_type=calibration_type,
        pixel_first_lut_value=first,
        step_size=step,
        number_of_values=(
            number_of_values if number_of_values is not None else gains.size
        ),
        offset=_xml_float(root, 'offset', lut_path) or 0.0,
        gains=gains,
    )


def _extract_gain_tables(
    root: ET.Element, metadata_dir: Path, calibration_type: str,
) -> Dict[str, RCMGainTable]:
    """Gain tables of *calibration_type*, keyed by polarization."""
    tables: Dict[str, RCMGainTable] = {}
    for entry in root.iter('lookupTableFileName'):
        if entry.get('sarCalibrationType') != calibration_type:
            continue
        pol = (entry.get('pole') or '').upper()
        if not entry.text or not entry.text.strip():
            continue
        lut_path = metadata_dir / 'calibration' / entry.text.strip()
        tables[pol] = _extract_gain_table(lut_path, pol, calibration_type)
        logger.debug(
            "Loaded %s LUT for %s from %s (%d values)",
            calibration_type, pol, lut_path.name,
            tables[pol].number_of_values,
        )
    return tables


def _extract_incidence_profile(
    root: ET.Element, metadata_dir: Path,
) -> Optional[RCMIncidenceProfile]:
    """Range incidence-angle profile, if the product ships one."""
    fname = _xml_text(root, './/incidenceAngleFileName')
    if fname:
        inc_path = metadata_dir / 'calibration' / fname
    else:
        inc_path = metadata_dir / 'calibration' / DEFAULT_INCIDENCE_FILE
        if not inc_path.is_file():
            return None
    inc_root = _parse_xml(inc_path)
    angles = _require(
        _xml_array(inc_root, 'angles', inc_path), 'angles', inc_path
    )
    number_of_values = _xml_int(inc_root, 'numberOfValues', inc_path)
    return RCMIncidenceProfile(
        pixel_first_angle_value=_require(
            _xml_int(inc_root, 'pixelFirstAnglesValue', inc_path),
            'pixelFirstAnglesValue', inc_path,
        ),
        step_size=_require(
            _xml_int(inc_root, 'stepSize', inc_path), 'stepSize', inc_path
        ),
        number_of_values=(
            number_of_values if number_of_values is not None
            else angles.size
        ),
        angles=angles,
    )


# ===================================================================
# Public API
# ===================================================================

def load_rcm_calibration(
    product_path: Union[str, Path],
    calibration_type: str = 'Sigma Nought',
) -> RCMCalibrationMetadata:
    """Load the calibration metadata of an RCM product.

    Parameters
    ----------
    product_path : str or Path
        Product directory, its ``metadata/`` directory or
        ``product.xml``.
    calibration_type : str
        Lookup table to load: ``'Sigma Nought'`` (default),
        ``'Beta Nought'`` or ``'Gamma'``.

    Returns
    -------
    RCMCalibrationMetadata

    Raises
    ------
    ValidationError
        If the product or a referenced file is missing, the satellite is
        not an RCM satellite, required elements are absent, or
        *calibration_type* is unknown.
    """
    if calibration_type not in CALIBRATION_TYPES:
        raise ValidationError(
            f"calibration_type must be one of {CALIBRATION_TYPES}, "
            f"got {calibration_type!r}"
        )

    metadata_dir, product_xml = _resolve_product_xml(Path(product_path))
    root = _parse_xml(product_xml)

    product_info = _extract_product_info(root, product_xml)
    gain_tables = _extract_gain_tables(root, metadata_dir, calibration_type)
    incidence_profile = _extract_incidence_profile(root, metadata_dir)

    logger.info(
        "RCM product %s: %s %s, %dx%d, %s LUTs for %s%s",
        product_info.product_id or product_xml.parent.name,
        product_info.satellite, product_info.product_type,
        product_info.rows, product_info.cols,
        calibration_type, ', '.join(sorted(gain_tables)) or 'none',
        ', incidence profile' if incidence_profile is not None else '',
    )

    return RCMCalibrationMetadata(
        product_info=product_info,
        gain_tables=gain_tables,
        incidence_profile=incidence_profile,
    )


def polarization_from_band_name(band_name: str) -> str:
    """Polarization encoded in a band name.

    The polarization is the last ``_``-separated token that is a
    polarization code (``HH``, ``HV``, ``VH``, ``VV`` or a compact-pol
    ``RH``, ``RV``, ``CH``, ``CV``), upper-cased, so unit suffixes such
    as ``_db`` are skipped. Without such a token the last token is
    returned.

    Examples
    --------
    >>> polarization_from_band_name('Intensity_HH')
    'HH'
    >>> polarization_from_band_name('i_vv')
    'VV'
    >>> polarization_from_band_name('Sigma0_VV_db')
    'VV'
    """
    if not band_name:
        raise ValidationError("band_name must be a non-empty string")
    tokens = band_name.upper().split('_')
    for token in reversed(tokens):
        if token in POLARIZATION_CODES:
            return token
    return tokens[-1]
