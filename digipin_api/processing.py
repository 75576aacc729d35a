# digipin_api/processing.py
import json
import logging

import geopandas as gpd
import pandas as pd
import yaml
from shapely.geometry import box
from tqdm import tqdm

from digipin_api import config
from digipin_api.digipin import (MAX_LEVELS, DigipinError, decode_digipin,
                                 encode_digipin, normalize_digipin,
                                 region_for_code)

tqdm.pandas()

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_ALIASES = {
    'latitude': ['Latitude', 'lat'],
    'longitude': ['Longitude', 'lon', 'lng'],
    'digipin': ['digipin', 'DIGIPIN'],
}

# It will be loaded lazily on the first request.
column_aliases_cache = None


def load_column_aliases():
    """
    Loads the accepted column names for each field from the aliases YAML file.
    Falls back to the built-in aliases if the file does not exist.
    """
    path = config.COLUMN_ALIASES_PATH
    logger.info("Loading column aliases from %s", path)
    try:
        with open(path, 'r') as f:
            aliases = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Column aliases file not found at %s. Using built-in aliases.", path)
        return DEFAULT_COLUMN_ALIASES
    except yaml.YAMLError as e:
        raise RuntimeError(f"Could not parse column aliases file {path}: {e}") from e

    if not aliases:
        return DEFAULT_COLUMN_ALIASES
    if not isinstance(aliases, dict):
        raise RuntimeError(f"Column aliases file {path} must contain a mapping")

    merged = {field: list(names) for field, names in DEFAULT_COLUMN_ALIASES.items()}
    for field, names in aliases.items():
        merged[field] = [str(name) for name in (names or [])] + merged.get(field, [])
    return merged


def get_column_aliases():
    global column_aliases_cache

    if column_aliases_cache is None:
        column_aliases_cache = load_column_aliases()
    return column_aliases_cache


def find_column(df, preferred, field):
    """
    Returns the name of the column holding ``field``: the preferred name if
    present, otherwise the first alias matching case-insensitively.
    """
    if preferred in df.columns:
        return preferred

    by_lower = {str(col).strip().lower(): col for col in df.columns}
    for candidate in [preferred] + get_column_aliases().get(field, []):
        match = by_lower.get(candidate.strip().lower())
        if match is not None:
            return match

    raise ValueError(f"Could not find a {field} column (expected '{preferred}' or one of its aliases)")


def safe_digipin(lat, lon):
    if pd.isna(lat) or pd.isna(lon):
        return None
    try:
        return encode_digipin(float(lat), float(lon))
    except DigipinError:
        return None


def safe_decode(code):
    if pd.isna(code):
        return None
    try:
        return decode_digipin(str(code).strip())
    except DigipinError:
        return None


def run_encoding_pipeline(csv_file):
    """
    Reads a CSV of points and appends a ``digipin`` column.
    Rows with missing or out-of-range coordinates get an empty DIGIPIN.
    """
    df = pd.read_csv(csv_file)
    logger.info("Encoding record count: %d", len(df))

    lat_col = find_column(df, config.LATITUDE_COLUMN, 'latitude')
    lon_col = find_column(df, config.LONGITUDE_COLUMN, 'longitude')
    # The uploaded columns are returned untouched; only these copies are coerced.
    coords = pd.DataFrame({
        'lat': pd.to_numeric(df[lat_col], errors='coerce'),
        'lon': pd.to_numeric(df[lon_col], errors='coerce'),
    })

    if df.empty:
        df[config.CODE_COLUMN] = pd.Series(dtype=object)
        return df

    df[config.CODE_COLUMN] = coords.progress_apply(
        lambda row: safe_digipin(row['lat'], row['lon']), axis=1
    )

    skipped = int(df[config.CODE_COLUMN].isna().sum())
    if skipped > 0:
        logger.warning("Could not encode %d rows with missing or out-of-range coordinates.", skipped)
    return df


def run_decoding_pipeline(csv_file):
    """
    Reads a CSV of DIGIPINs and appends ``latitude``/``longitude`` columns
    holding the cell centers. Invalid codes leave both columns empty.
    """
    df = pd.read_csv(csv_file, dtype=str)
    logger.info("Decoding record count: %d", len(df))

    code_col = find_column(df, config.CODE_COLUMN, 'digipin')
    decoded = df[code_col].progress_apply(safe_decode) if not df.empty else pd.Series(dtype=object)

    df['latitude'] = decoded.map(lambda c: c.latitude if c is not None else None)
    df['longitude'] = decoded.map(lambda c: c.longitude if c is not None else None)

    skipped = int(df['latitude'].isna().sum())
    if skipped > 0:
        logger.warning("Could not decode %d rows with invalid DIGIPINs.", skipped)
    return df


def build_cells_frame(codes, level=MAX_LEVELS):
    """
    Builds a GeoDataFrame with one polygon per DIGIPIN, cut at ``level``.

    Raises:
        DigipinError: If any code is malformed.
        ValueError: If the level is out of range or too many codes are given.
    """
    if len(codes) > config.MAX_CELLS:
        raise ValueError(f"Too many codes: at most {config.MAX_CELLS} per request, got {len(codes)}")

    records = []
    geometries = []
    for code in codes:
        region = region_for_code(code, level)
        center = region.centroid
        records.append({
            'digipin': normalize_digipin(code)[:level],
            'level': level,
            'latitude': round(center.latitude, 6),
            'longitude': round(center.longitude, 6),
        })
        geometries.append(box(region.min_lon, region.min_lat, region.max_lon, region.max_lat))

    return gpd.GeoDataFrame(
        pd.DataFrame(records, columns=['digipin', 'level', 'latitude', 'longitude']),
        geometry=geometries,
        crs="EPSG:4326",
    )


def cells_to_geojson(codes, level=MAX_LEVELS):
    """Returns the cells of ``codes`` as a GeoJSON FeatureCollection dict."""
    return json.loads(build_cells_frame(codes, level).to_json())
