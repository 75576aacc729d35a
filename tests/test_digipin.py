"""Tests for the DIGIPIN core: grid, subdivision, encode, decode and validation."""

import math

import pytest

from digipin_api.digipin import (BOUNDS, CHAR_TO_INDEX, DIGIPIN_GRID,
                                 INDEX_TO_CHAR, MAX_LEVELS, Coordinate,
                                 DigipinError, EncodingAssertionFailure,
                                 InvalidLength, InvalidSymbol,
                                 OutOfBoundsCoordinate, Region, child_region,
                                 decode_digipin, encode_digipin,
                                 format_digipin, get_digipin_info,
                                 normalize_digipin, region_for_code,
                                 subdivide, validate_coordinates,
                                 validate_digipin)
from tests.conftest import DELHI, DELHI_DIGIPIN, LANDMARKS, ROUND_TRIP_TOLERANCE

ALPHABET = set("23456789CFJKLMPT")


class TestGrid:

    def test_sixteen_unique_symbols(self):
        symbols = [char for row in DIGIPIN_GRID for char in row]
        assert len(symbols) == 16
        assert set(symbols) == ALPHABET

    def test_lookups_are_inverse(self):
        for char, index in CHAR_TO_INDEX.items():
            assert INDEX_TO_CHAR[index] == char
            assert DIGIPIN_GRID[index[0]][index[1]] == char

    def test_corner_symbols(self):
        assert INDEX_TO_CHAR[(0, 0)] == 'F'
        assert INDEX_TO_CHAR[(0, 3)] == '8'
        assert INDEX_TO_CHAR[(3, 0)] == 'L'
        assert INDEX_TO_CHAR[(3, 3)] == 'T'


class TestSubdivision:

    def test_child_region_northwest(self):
        assert child_region(BOUNDS, 0, 0) == Region(29.5, 38.5, 63.5, 72.5)

    def test_child_region_southeast(self):
        assert child_region(BOUNDS, 3, 3) == Region(2.5, 11.5, 90.5, 99.5)

    def test_subdivide_delhi(self):
        row, col, child = subdivide(BOUNDS, *DELHI)
        assert (row, col) == (1, 1)
        assert child == Region(20.5, 29.5, 72.5, 81.5)

    def test_interior_latitude_divider_goes_north(self):
        row, _, _ = subdivide(BOUNDS, 29.5, 77.0)
        assert row == 0

    def test_interior_longitude_divider_goes_east(self):
        _, col, _ = subdivide(BOUNDS, 25.0, 72.5)
        assert col == 1

    def test_divider_intersection_is_top_right(self):
        row, col, _ = subdivide(BOUNDS, 20.5, 81.5)
        assert (row, col) == (1, 2)

    def test_north_edge_folds_to_southernmost_band(self):
        row, _, child = subdivide(BOUNDS, 38.5, 77.0)
        assert row == 3
        assert child.min_lat == BOUNDS.min_lat

    def test_east_edge_folds_to_westernmost_band(self):
        _, col, child = subdivide(BOUNDS, 20.0, 99.5)
        assert col == 0
        assert child.min_lon == BOUNDS.min_lon

    def test_south_and_west_edges_stay_in_outer_bands(self):
        assert subdivide(BOUNDS, 2.5, 63.5)[:2] == (3, 0)

    def test_child_spans_a_quarter(self):
        _, _, child = subdivide(BOUNDS, *DELHI)
        assert child.max_lat - child.min_lat == pytest.approx(9.0)
        assert child.max_lon - child.min_lon == pytest.approx(9.0)


class TestEncode:

    def test_dak_bhawan(self):
        assert encode_digipin(*DELHI) == DELHI_DIGIPIN

    @pytest.mark.parametrize("lat,lon", LANDMARKS + [DELHI, (2.5, 63.5), (38.5, 99.5), (20.0, 80.0)])
    def test_output_shape(self, lat, lon):
        digipin = encode_digipin(lat, lon)
        assert len(digipin) == 12
        assert digipin[3] == '-' and digipin[7] == '-'
        pin = normalize_digipin(digipin)
        assert len(pin) == MAX_LEVELS
        assert set(pin) <= ALPHABET

    def test_deterministic(self):
        assert encode_digipin(*LANDMARKS[0]) == encode_digipin(*LANDMARKS[0])

    def test_southwest_corner(self):
        assert encode_digipin(2.5, 63.5) == "LLL-LLL-LLLL"

    def test_interior_divider_intersection(self):
        # North-east precedence at level 1, then the point sits on the
        # south-west corner of every later cell.
        assert encode_digipin(29.5, 72.5) == "CLL-LLL-LLLL"

    def test_outer_edges(self):
        assert encode_digipin(38.5, 77.0)[0] == 'M'
        assert encode_digipin(20.0, 99.5)[0] == 'K'
        assert encode_digipin(38.5, 99.5)[0] == 'L'

    @pytest.mark.parametrize("lat,lon,axis", [
        (51.5074, -0.1278, 'latitude'),
        (2.4999, 77.0, 'latitude'),
        (38.5001, 77.0, 'latitude'),
        (20.0, 63.4999, 'longitude'),
        (20.0, 100.0, 'longitude'),
    ])
    def test_out_of_bounds(self, lat, lon, axis):
        with pytest.raises(OutOfBoundsCoordinate) as excinfo:
            encode_digipin(lat, lon)
        assert excinfo.value.axis == axis
        expected = lat if axis == 'latitude' else lon
        assert excinfo.value.value == expected

    def test_nan_is_out_of_bounds(self):
        with pytest.raises(OutOfBoundsCoordinate):
            encode_digipin(math.nan, 77.0)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            encode_digipin(0.0, 0.0)

    def test_missing_symbol_raises_instead_of_corrupting(self, monkeypatch):
        monkeypatch.delitem(INDEX_TO_CHAR, (1, 1))
        with pytest.raises(EncodingAssertionFailure) as excinfo:
            encode_digipin(*DELHI)
        assert isinstance(excinfo.value, DigipinError)
        assert "(1, 1)" in str(excinfo.value)


class TestDecode:

    def test_dak_bhawan(self):
        lat, lon = decode_digipin(DELHI_DIGIPIN)
        assert lat == pytest.approx(DELHI[0], abs=1e-6)
        assert lon == pytest.approx(DELHI[1], abs=1e-6)

    def test_hyphens_optional(self):
        assert decode_digipin("39J49LL8T4") == decode_digipin(DELHI_DIGIPIN)

    def test_returns_coordinate(self):
        result = decode_digipin(DELHI_DIGIPIN)
        assert isinstance(result, Coordinate)
        assert result.latitude == round(result.latitude, 6)

    def test_southwest_cell_center(self):
        lat, lon = decode_digipin("LLL-LLL-LLLL")
        assert lat == pytest.approx(2.500017, abs=1e-6)
        assert lon == pytest.approx(63.500017, abs=1e-6)

    def test_invalid_length(self):
        with pytest.raises(InvalidLength) as excinfo:
            decode_digipin("39J-49L")
        assert excinfo.value.expected == 10
        assert excinfo.value.actual == 7

    def test_invalid_symbol(self):
        with pytest.raises(InvalidSymbol) as excinfo:
            decode_digipin("39J-49L-L8T1")
        assert excinfo.value.character == '1'
        assert excinfo.value.position == 10
        assert "position 10" in str(excinfo.value)

    def test_lowercase_is_invalid(self):
        with pytest.raises(InvalidSymbol):
            decode_digipin("39j-49L-L8T4")

    # Points exactly on the north (38.5) or east (99.5) outer edge are left out:
    # they fold back to the southern/western band, so their cell is far away.
    @pytest.mark.parametrize("lat,lon", LANDMARKS + [DELHI, (2.5, 63.5), (38.49, 99.49)])
    def test_round_trip_within_half_cell(self, lat, lon):
        decoded = decode_digipin(encode_digipin(lat, lon))
        assert abs(decoded.latitude - lat) <= ROUND_TRIP_TOLERANCE
        assert abs(decoded.longitude - lon) <= ROUND_TRIP_TOLERANCE

    @pytest.mark.parametrize("digipin", [DELHI_DIGIPIN, "FC9-8J3-27K4", "LMP-T65-4KC9", "TTT-TTT-TTTT"])
    def test_cell_center_encodes_to_same_code(self, digipin):
        assert encode_digipin(*decode_digipin(digipin)) == digipin


class TestRegionForCode:

    def test_level_one(self):
        assert region_for_code(DELHI_DIGIPIN, 1) == Region(20.5, 29.5, 72.5, 81.5)

    def test_full_level_contains_decoded_point(self):
        region = region_for_code(DELHI_DIGIPIN)
        lat, lon = decode_digipin(DELHI_DIGIPIN)
        assert region.min_lat <= lat <= region.max_lat
        assert region.min_lon <= lon <= region.max_lon

    @pytest.mark.parametrize("k", range(1, MAX_LEVELS + 1))
    def test_shared_prefix_shares_ancestor(self, k):
        a = normalize_digipin(DELHI_DIGIPIN)
        b = a[:k] + "F" * (MAX_LEVELS - k)
        assert region_for_code(a, k) == region_for_code(b, k)

    def test_shared_prefix_of_nearby_points(self):
        a = encode_digipin(28.622788, 77.213033)
        b = encode_digipin(28.622900, 77.213100)
        shared = 0
        while shared < MAX_LEVELS and normalize_digipin(a)[shared] == normalize_digipin(b)[shared]:
            shared += 1
        assert shared >= 1
        for k in range(1, shared + 1):
            assert region_for_code(a, k) == region_for_code(b, k)

    @pytest.mark.parametrize("level", [0, 11])
    def test_level_out_of_range(self, level):
        with pytest.raises(ValueError):
            region_for_code(DELHI_DIGIPIN, level)

    def test_malformed_code(self):
        with pytest.raises(DigipinError):
            region_for_code("39J-49L", 3)


class TestValidateDigipin:

    def test_valid(self):
        result = validate_digipin(DELHI_DIGIPIN)
        assert result.valid
        assert result.error is None

    def test_hyphen_placement_ignored(self):
        assert validate_digipin("39J-49L-L8T4") == validate_digipin("39J49LL8T4")
        assert validate_digipin("3-9J49-LL8T4").valid
        assert validate_digipin("39J-49L-L8T1") == validate_digipin("39J49LL8T1")

    def test_invalid_character(self):
        result = validate_digipin("39J-49L-L8T1")
        assert not result.valid
        assert "'1'" in result.error
        assert "position 10" in result.error

    def test_invalid_length(self):
        result = validate_digipin("39J-49L")
        assert not result.valid
        assert "expected 10" in result.error
        assert "got 7" in result.error

    def test_length_checked_before_characters(self):
        result = validate_digipin("111")
        assert "got 3" in result.error

    def test_first_invalid_character_reported(self):
        result = validate_digipin("A9J-49L-L8T1")
        assert "'A' at position 1" in result.error


class TestValidateCoordinates:

    def test_valid(self):
        assert validate_coordinates(*DELHI).valid

    @pytest.mark.parametrize("lat,lon", [(2.5, 63.5), (38.5, 99.5), (2.5, 77.0)])
    def test_bounds_inclusive(self, lat, lon):
        assert validate_coordinates(lat, lon).valid

    def test_london(self):
        result = validate_coordinates(51.5074, -0.1278)
        assert not result.valid
        assert result.error.startswith("Latitude 51.5074")

    def test_longitude_reported(self):
        result = validate_coordinates(20.0, 120.0)
        assert not result.valid
        assert "Longitude 120.0" in result.error
        assert "99.5" in result.error


class TestInfo:

    def test_levels(self):
        info = get_digipin_info(DELHI_DIGIPIN)
        assert info.level1 == "3"
        assert info.level2 == "39"
        assert info.level3 == "39J"

    def test_canonical_code(self):
        assert get_digipin_info("39J49LL8T4").canonical_code == DELHI_DIGIPIN

    def test_coordinate_matches_decode(self):
        assert get_digipin_info(DELHI_DIGIPIN).coordinate == decode_digipin(DELHI_DIGIPIN)

    def test_hierarchy(self):
        hierarchy = get_digipin_info(DELHI_DIGIPIN).hierarchy
        assert hierarchy["level1"].startswith("3 (")
        assert hierarchy["level10"] == "39J-49L-L8T4 (~3.8m x 3.8m cell)"

    def test_invalid_code(self):
        with pytest.raises(InvalidSymbol):
            get_digipin_info("39J-49L-L8T1")


def test_format_digipin():
    assert format_digipin("39J49LL8T4") == DELHI_DIGIPIN
    assert format_digipin(DELHI_DIGIPIN) == DELHI_DIGIPIN
