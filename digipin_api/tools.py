# digipin_api/tools.py
"""
Tool definitions and dispatch for the five DIGIPIN operations.

Raw arguments arrive untyped; they are checked here before the core is
called, and every result is wrapped in the ``{"success": ...}`` envelope.
"""
import math
from numbers import Real

from .digipin import (BOUNDS, GRID_SIZE, decode_digipin, encode_digipin,
                      format_digipin, get_digipin_info, validate_coordinates,
                      validate_digipin)

VALID_CHARACTERS = '2,3,4,5,6,7,8,9,C,F,J,K,L,M,P,T'
DIGIPIN_PATTERN = '^[2-9CFJKLMPT]{3}-?[2-9CFJKLMPT]{3}-?[2-9CFJKLMPT]{4}$'

TOOLS = [
    {
        'name': 'encode_digipin',
        'description': (
            "Convert latitude and longitude coordinates to a DIGIPIN code. "
            "DIGIPIN is India's national addressing grid system that assigns a unique 10-character "
            "alphanumeric code to every ~4m x 4m area within India. "
            "Valid range: Latitude 2.5°-38.5°N, Longitude 63.5°-99.5°E (covers all of India including EEZ)."
        ),
        'inputSchema': {
            'type': 'object',
            'properties': {
                'latitude': {
                    'type': 'number',
                    'description': 'Latitude in decimal degrees (2.5 to 38.5). Example: 28.622788 for New Delhi',
                    'minimum': BOUNDS.min_lat,
                    'maximum': BOUNDS.max_lat,
                },
                'longitude': {
                    'type': 'number',
                    'description': 'Longitude in decimal degrees (63.5 to 99.5). Example: 77.213033 for New Delhi',
                    'minimum': BOUNDS.min_lon,
                    'maximum': BOUNDS.max_lon,
                },
            },
            'required': ['latitude', 'longitude'],
        },
    },
    {
        'name': 'decode_digipin',
        'description': (
            "Convert a DIGIPIN code back to latitude and longitude coordinates. "
            "Returns the center point of the ~4m x 4m grid cell represented by the DIGIPIN code. "
            'The code can be provided with or without hyphens (e.g., "39J-49L-L8T4" or "39J49LL8T4").'
        ),
        'inputSchema': {
            'type': 'object',
            'properties': {
                'digipin': {
                    'type': 'string',
                    'description': (
                        'A 10-character DIGIPIN code (with or without hyphens). '
                        'Example: "39J-49L-L8T4" for Dak Bhawan, New Delhi. '
                        f'Valid characters: {VALID_CHARACTERS}'
                    ),
                    'pattern': DIGIPIN_PATTERN,
                },
            },
            'required': ['digipin'],
        },
    },
    {
        'name': 'validate_digipin',
        'description': (
            "Validate whether a DIGIPIN code is properly formatted. "
            "Checks if the code has the correct length (10 characters) and uses only valid symbols. "
            "Does not verify if the location actually exists, only that the code format is valid."
        ),
        'inputSchema': {
            'type': 'object',
            'properties': {
                'digipin': {
                    'type': 'string',
                    'description': 'DIGIPIN code to validate (with or without hyphens)',
                },
            },
            'required': ['digipin'],
        },
    },
    {
        'name': 'get_digipin_info',
        'description': (
            "Get detailed information about a DIGIPIN code including its coordinates, "
            "hierarchical region codes, and grid cell size."
        ),
        'inputSchema': {
            'type': 'object',
            'properties': {
                'digipin': {
                    'type': 'string',
                    'description': 'DIGIPIN code to get information about (with or without hyphens)',
                },
            },
            'required': ['digipin'],
        },
    },
    {
        'name': 'validate_coordinates',
        'description': (
            "Check if latitude and longitude coordinates are within the DIGIPIN bounding box "
            "covering India. Useful for pre-validating coordinates before encoding to DIGIPIN."
        ),
        'inputSchema': {
            'type': 'object',
            'properties': {
                'latitude': {'type': 'number', 'description': 'Latitude in decimal degrees'},
                'longitude': {'type': 'number', 'description': 'Longitude in decimal degrees'},
            },
            'required': ['latitude', 'longitude'],
        },
    },
]

BOUNDS_DESCRIPTION = {
    'latitude': f"{BOUNDS.min_lat}°N - {BOUNDS.max_lat}°N",
    'longitude': f"{BOUNDS.min_lon}°E - {BOUNDS.max_lon}°E",
    'coverage': 'India including maritime EEZ',
}


class UnknownToolError(LookupError):
    pass


class ToolArgumentError(ValueError):
    pass


def _numbers(arguments, *names):
    values = [arguments.get(name) for name in names]
    # bool is a Real too, but true/false is never a coordinate.
    if any(isinstance(v, bool) or not isinstance(v, Real) for v in values):
        raise ToolArgumentError('Latitude and longitude must be numbers')
    try:
        numbers = [float(v) for v in values]
    except OverflowError:
        raise ToolArgumentError('Latitude and longitude must be finite numbers')
    if not all(math.isfinite(n) for n in numbers):
        raise ToolArgumentError('Latitude and longitude must be finite numbers')
    return numbers


def _string(arguments, name):
    value = arguments.get(name)
    if not isinstance(value, str):
        raise ToolArgumentError('DIGIPIN must be a string')
    return value


def encode_payload(latitude: float, longitude: float) -> dict:
    digipin = encode_digipin(latitude, longitude)
    return {
        'digipin': digipin,
        'coordinates': {'latitude': latitude, 'longitude': longitude},
        'info': f"Location encoded to DIGIPIN: {digipin}",
        'gridSize': GRID_SIZE,
    }


def decode_payload(digipin: str) -> dict:
    coordinate = decode_digipin(digipin)
    return {
        'digipin': format_digipin(digipin),
        'coordinates': {'latitude': coordinate.latitude, 'longitude': coordinate.longitude},
        'info': f"DIGIPIN decoded to coordinates (center of {GRID_SIZE} grid cell)",
    }


def validate_payload(digipin: str) -> dict:
    result = validate_digipin(digipin)
    payload = {'valid': result.valid, 'digipin': digipin}
    if result.error:
        payload['error'] = result.error
    return payload


def info_payload(digipin: str) -> dict:
    info = get_digipin_info(digipin)
    return {
        'code': info.canonical_code,
        'coordinates': {'latitude': info.coordinate.latitude, 'longitude': info.coordinate.longitude},
        'level1Region': info.level1,
        'level2Region': info.level2,
        'level3Region': info.level3,
        'gridSize': info.grid_size,
        'hierarchy': info.hierarchy,
    }


def coordinates_payload(latitude: float, longitude: float) -> dict:
    result = validate_coordinates(latitude, longitude)
    payload = {
        'valid': result.valid,
        'coordinates': {'latitude': latitude, 'longitude': longitude},
    }
    if result.error:
        payload['error'] = result.error
    payload['bounds'] = BOUNDS_DESCRIPTION
    return payload


HANDLERS = {
    'encode_digipin': lambda args: encode_payload(*_numbers(args, 'latitude', 'longitude')),
    'decode_digipin': lambda args: decode_payload(_string(args, 'digipin')),
    'validate_digipin': lambda args: validate_payload(_string(args, 'digipin')),
    'get_digipin_info': lambda args: info_payload(_string(args, 'digipin')),
    'validate_coordinates': lambda args: coordinates_payload(*_numbers(args, 'latitude', 'longitude')),
}


def call_tool(name: str, arguments: dict) -> dict:
    """
    Runs a tool by name.

    Raises:
        UnknownToolError: If no tool has that name.
        ValueError: If the arguments have the wrong type or the core rejects them.
    """
    handler = HANDLERS.get(name)
    if handler is None:
        raise UnknownToolError(f"Unknown tool: {name}")
    return {'success': True, **handler(arguments or {})}
