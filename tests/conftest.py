"""Shared test fixtures."""

from pathlib import Path

import pytest

from digipin_api import config, processing

ALIASES_PATH = Path(__file__).resolve().parent.parent / "data" / "column_aliases.yml"

# Dak Bhawan, New Delhi
DELHI = (28.622788, 77.213033)
DELHI_DIGIPIN = "39J-49L-L8T4"

LANDMARKS = [
    (18.922064, 72.834646),  # Gateway of India, Mumbai
    (13.049920, 80.282745),  # Marina Beach, Chennai
    (22.585399, 88.346947),  # Howrah Bridge, Kolkata
    (17.361564, 78.474701),  # Charminar, Hyderabad
]

# Half of the final cell's span on each axis plus the 6-decimal rounding.
HALF_CELL = 36 / 4 ** 10 / 2
ROUND_TRIP_TOLERANCE = HALF_CELL + 5e-7


@pytest.fixture(autouse=True)
def column_aliases(monkeypatch):
    monkeypatch.setattr(config, "COLUMN_ALIASES_PATH", str(ALIASES_PATH))
    monkeypatch.setattr(processing, "column_aliases_cache", None)
