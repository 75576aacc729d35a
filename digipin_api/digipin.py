from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Tuple

# Labeling grid used at every level (1-10). Row 0 is the northernmost band,
# column 0 the westernmost.
DIGIPIN_GRID = (
    ('F', 'C', '9', '8'),
    ('J', '3', '2', '7'),
    ('K', '4', '5', '6'),
    ('L', 'M', 'P', 'T'),
)

GRID_DIVISIONS = 4
MAX_LEVELS = 10
SEPARATOR = '-'
GRID_SIZE = '~3.8m x 3.8m'

# Approximate edge length of a cell at the levels worth naming.
LEVEL_SIZES = {
    1: '1000km x 1000km',
    2: '250km x 250km',
    3: '62.5km x 62.5km',
    MAX_LEVELS: '3.8m x 3.8m',
}


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


class Region(NamedTuple):
    """A lat/lon rectangle in degrees (EPSG:4326)."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def centroid(self) -> Coordinate:
        return Coordinate(
            (self.min_lat + self.max_lat) / 2,
            (self.min_lon + self.max_lon) / 2,
        )


# Bounding box for India including the maritime EEZ.
BOUNDS = Region(min_lat=2.5, max_lat=38.5, min_lon=63.5, max_lon=99.5)

# Both directions of the grid lookup are built once, so encoding and decoding
# never scan the grid.
CHAR_TO_INDEX: Dict[str, Tuple[int, int]] = {
    char: (r, c)
    for r, row_list in enumerate(DIGIPIN_GRID)
    for c, char in enumerate(row_list)
}
INDEX_TO_CHAR: Dict[Tuple[int, int], str] = {
    index: char for char, index in CHAR_TO_INDEX.items()
}


class DigipinError(ValueError):
    """Base class for every failure raised by the DIGIPIN core."""


class OutOfBoundsCoordinate(DigipinError):
    def __init__(self, axis: str, value: float, lower: float, upper: float):
        self.axis = axis
        self.value = value
        self.bound = (lower, upper)
        hemisphere = 'N' if axis == 'latitude' else 'E'
        super().__init__(
            f"{axis.capitalize()} {value} out of range. "
            f"Must be between {lower}° and {upper}°{hemisphere}"
        )


class InvalidLength(DigipinError):
    def __init__(self, actual: int, expected: int = MAX_LEVELS):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid DIGIPIN length: expected {expected} characters, got {actual}"
        )


class InvalidSymbol(DigipinError):
    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid character '{character}' at position {position}"
        )


class EncodingAssertionFailure(DigipinError):
    """Raised if a grid position does not map to an alphabet symbol."""


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class DigipinInfo:
    canonical_code: str
    coordinate: Coordinate
    level1: str
    level2: str
    level3: str
    grid_size: str = GRID_SIZE

    @property
    def hierarchy(self) -> Dict[str, str]:
        return {
            'level1': f"{self.level1} ({LEVEL_SIZES[1]} region)",
            'level2': f"{self.level2} ({LEVEL_SIZES[2]} region)",
            'level3': f"{self.level3} ({LEVEL_SIZES[3]} region)",
            'level10': f"{self.canonical_code} ({self.grid_size} cell)",
        }


def _lat_edges(region: Region) -> List[float]:
    # North to south; the outer edges are taken from the region itself.
    step = (region.max_lat - region.min_lat) / GRID_DIVISIONS
    return [region.max_lat - step * i for i in range(GRID_DIVISIONS)] + [region.min_lat]


def _lon_edges(region: Region) -> List[float]:
    # West to east.
    step = (region.max_lon - region.min_lon) / GRID_DIVISIONS
    return [region.min_lon + step * i for i in range(GRID_DIVISIONS)] + [region.max_lon]


def _find_row(lat: float, edges: List[float]) -> int:
    # Bands are closed on their southern side, so an interior divider
    # belongs to the band north of it.
    for row in range(GRID_DIVISIONS):
        if edges[row + 1] <= lat < edges[row]:
            return row
    # Only the north outer edge is left: it folds back to the southernmost band.
    return GRID_DIVISIONS - 1


def _find_col(lon: float, edges: List[float]) -> int:
    # Bands are closed on their western side, so an interior divider
    # belongs to the band east of it.
    for col in range(GRID_DIVISIONS):
        if edges[col] <= lon < edges[col + 1]:
            return col
    # Only the east outer edge is left: it folds back to the westernmost band.
    return 0


def child_region(region: Region, row: int, col: int) -> Region:
    """Returns the sub-cell of ``region`` at grid position (row, col)."""
    lat_edges = _lat_edges(region)
    lon_edges = _lon_edges(region)
    return Region(
        min_lat=lat_edges[row + 1],
        max_lat=lat_edges[row],
        min_lon=lon_edges[col],
        max_lon=lon_edges[col + 1],
    )


def subdivide(region: Region, lat: float, lon: float) -> Tuple[int, int, Region]:
    """
    Locates a point in the 4x4 grid laid over ``region``.

    Args:
        region: The current cell.
        lat: The latitude of the point.
        lon: The longitude of the point.

    Returns:
        A ``(row, col, child)`` tuple where ``child`` is the sub-cell the
        point was assigned to.
    """
    row = _find_row(lat, _lat_edges(region))
    col = _find_col(lon, _lon_edges(region))
    return row, col, child_region(region, row, col)


def normalize_digipin(digipin: str) -> str:
    """Strips the separators from a DIGIPIN."""
    return digipin.replace(SEPARATOR, '')


def format_digipin(digipin: str) -> str:
    """Renders a DIGIPIN in its canonical ``XXX-XXX-XXXX`` form."""
    pin = normalize_digipin(digipin)
    return SEPARATOR.join((pin[:3], pin[3:6], pin[6:]))


def _check_coordinates(lat: float, lon: float) -> None:
    if not (BOUNDS.min_lat <= lat <= BOUNDS.max_lat):
        raise OutOfBoundsCoordinate('latitude', lat, BOUNDS.min_lat, BOUNDS.max_lat)
    if not (BOUNDS.min_lon <= lon <= BOUNDS.max_lon):
        raise OutOfBoundsCoordinate('longitude', lon, BOUNDS.min_lon, BOUNDS.max_lon)


def _parse_digipin(digipin: str) -> List[Tuple[int, int]]:
    pin = normalize_digipin(digipin)
    if len(pin) != MAX_LEVELS:
        raise InvalidLength(len(pin))

    indices = []
    for position, char in enumerate(pin, start=1):
        if char not in CHAR_TO_INDEX:
            raise InvalidSymbol(char, position)
        indices.append(CHAR_TO_INDEX[char])
    return indices


def encode_digipin(lat: float, lon: float) -> str:
    """
    Encodes a latitude and longitude into a 10-digit alphanumeric DIGIPIN.

    Args:
        lat: The latitude coordinate.
        lon: The longitude coordinate.

    Returns:
        The formatted DIGIPIN string (e.g., "39J-49L-L8T4").

    Raises:
        OutOfBoundsCoordinate: If the latitude or longitude is outside BOUNDS.
    """
    _check_coordinates(lat, lon)

    region = BOUNDS
    digipin_chars = []
    for level in range(1, MAX_LEVELS + 1):
        row, col, region = subdivide(region, lat, lon)
        symbol = INDEX_TO_CHAR.get((row, col))
        if symbol is None:
            raise EncodingAssertionFailure(
                f"Grid position ({row}, {col}) at level {level} has no symbol"
            )
        digipin_chars.append(symbol)

    return format_digipin(''.join(digipin_chars))


def region_for_code(digipin: str, level: int = MAX_LEVELS) -> Region:
    """
    Rebuilds the cell a DIGIPIN denotes at a given level of the hierarchy.

    The whole code is validated, but only its first ``level`` symbols are
    used, so codes sharing a prefix of that length give the same region.

    Raises:
        InvalidLength, InvalidSymbol: If the DIGIPIN is malformed.
        ValueError: If ``level`` is not between 1 and 10.
    """
    if not 1 <= level <= MAX_LEVELS:
        raise ValueError(f"Level must be between 1 and {MAX_LEVELS}, got {level}")

    region = BOUNDS
    for row, col in _parse_digipin(digipin)[:level]:
        region = child_region(region, row, col)
    return region


def decode_digipin(digipin: str) -> Coordinate:
    """
    Decodes a DIGIPIN back into the center of its grid cell.

    Args:
        digipin: The 10-character DIGIPIN string (hyphens are optional).

    Returns:
        The cell center, rounded to 6 decimal places.

    Raises:
        InvalidLength: If the DIGIPIN does not have 10 symbols.
        InvalidSymbol: If a character is not part of the grid.
    """
    center = region_for_code(digipin).centroid
    return Coordinate(round(center.latitude, 6), round(center.longitude, 6))


def validate_digipin(digipin: str) -> ValidationResult:
    """Checks length and alphabet of a DIGIPIN, in that order."""
    try:
        _parse_digipin(digipin)
    except DigipinError as e:
        return ValidationResult(valid=False, error=str(e))
    return ValidationResult(valid=True)


def validate_coordinates(lat: float, lon: float) -> ValidationResult:
    """Checks that a point lies inside BOUNDS; latitude is reported first."""
    try:
        _check_coordinates(lat, lon)
    except OutOfBoundsCoordinate as e:
        return ValidationResult(valid=False, error=str(e))
    return ValidationResult(valid=True)


def get_digipin_info(digipin: str) -> DigipinInfo:
    """
    Describes a DIGIPIN: its cell center and the codes of its ancestors.

    The level codes are plain prefixes of the DIGIPIN; every code sharing a
    prefix lies in the same ancestor cell.
    """
    coordinate = decode_digipin(digipin)
    pin = normalize_digipin(digipin)
    return DigipinInfo(
        canonical_code=format_digipin(pin),
        coordinate=coordinate,
        level1=pin[:1],
        level2=pin[:2],
        level3=pin[:3],
    )
