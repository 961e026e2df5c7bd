import pytest

from src.geocoding.distance import haversine_km

COLOMBO = (6.9271, 79.8612)
KANDY = (7.2906, 80.6337)


def test_distance_to_self_is_zero():
    assert haversine_km(*COLOMBO, *COLOMBO) == 0


def test_distance_is_symmetric():
    assert haversine_km(*COLOMBO, *KANDY) == pytest.approx(haversine_km(*KANDY, *COLOMBO))


def test_colombo_to_kandy_reference_distance():
    assert 90 <= haversine_km(*COLOMBO, *KANDY) <= 96


def test_one_degree_of_latitude():
    assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)
