"""Shared fixtures and sample inputs."""

import pytest

from windload.schemas import WindLoadRequest

# Ordinary 10 m building in region B1 (no overrides)
SAMPLE_REQUEST = {
    "region": "B1",
    "design_life": "50-years",
    "importance": 2,
    "height_m": 10.0,
}

# 50 m concrete frame in cyclonic region C, suburban terrain
TALL_REQUEST = {
    "region": "C",
    "design_life": "50-years",
    "importance": 2,
    "height_m": 50.0,
    "terrain": "TC3",
    "core_material": "concrete_mrf",
}


@pytest.fixture
def make_request():
    """Build a WindLoadRequest from a sample with field updates.

    ``make_request(height_m=20)`` starts from the 10 m building,
    ``make_request(tall=True, ...)`` from the 50 m concrete frame.
    """

    def _make(tall=False, **updates):
        base = TALL_REQUEST if tall else SAMPLE_REQUEST
        return WindLoadRequest(**{**base, **updates})

    return _make


@pytest.fixture
def sample_request_data():
    return dict(SAMPLE_REQUEST)
