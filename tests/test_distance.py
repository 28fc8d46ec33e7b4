import pytest

from app.services.google_maps import Coordinates, PlaceCandidate
from app.services.search import distance_km, rank_by_distance


def test_distance_to_self_is_zero():
    assert distance_km(39.78, -89.65, 39.78, -89.65) == 0.0


def test_distance_is_symmetric():
    forward = distance_km(40.7128, -74.0060, 34.0522, -118.2437)
    backward = distance_km(34.0522, -118.2437, 40.7128, -74.0060)
    assert forward == backward


def test_one_degree_of_latitude():
    assert distance_km(0, 0, 1, 0) == pytest.approx(111.2)


def test_distance_is_rounded_to_one_decimal():
    d = distance_km(39.78, -89.65, 39.80, -89.61)
    assert d == round(d, 1)


def _candidate(name, lat, lng=0.0):
    return PlaceCandidate(name=name, location=Coordinates(lat=lat, lng=lng))


def test_rank_by_distance_sorts_nearest_first():
    center = Coordinates(lat=0.0, lng=0.0)
    # Roughly 3.2, 0.5 and 1.8 km north of the center
    candidates = [
        _candidate("C", 0.0288),
        _candidate("A", 0.0045),
        _candidate("B", 0.0162),
    ]

    ranked = rank_by_distance(center, candidates)

    assert [b.name for b in ranked] == ["A", "B", "C"]
    assert [b.distance_km for b in ranked] == [0.5, 1.8, 3.2]


def test_rank_by_distance_keeps_input_order_on_ties():
    center = Coordinates(lat=0.0, lng=0.0)
    candidates = [_candidate("first", 0.01), _candidate("second", 0.01)]

    ranked = rank_by_distance(center, candidates)

    assert [b.name for b in ranked] == ["first", "second"]


def test_rank_by_distance_carries_place_details():
    center = Coordinates(lat=0.0, lng=0.0)
    candidate = PlaceCandidate(
        name="Cafe",
        location=Coordinates(lat=0.01, lng=0.0),
        place_id="abc",
        address="1 Main St",
        rating=4.5,
        total_reviews=10,
        operational_status="OPERATIONAL",
    )

    (business,) = rank_by_distance(center, [candidate])

    assert business.to_dict()["place_id"] == "abc"
    assert business.address == "1 Main St"
    assert business.total_reviews == 10
    assert business.lat == 0.01
