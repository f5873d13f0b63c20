import pytest

from ev_route_planner.algorithms.selection import (
    NearestStrategy,
    ProgressStrategy,
    StationSelector
)
from ev_route_planner.data.models import ChargingStation, GeoPoint, Leg

RANGE_KM = 200.0


@pytest.fixture
def selector():
    return StationSelector()


def test_direct_leg_when_in_range(selector):
    start, end = GeoPoint(0, 0), GeoPoint(0, 1)
    result = selector.select(start, end, RANGE_KM, [ChargingStation.at(0, 0.5)])

    assert result.stops == []
    assert result.legs == [Leg(start, end)]
    assert result.feasible
    assert result.iterations == 0


def test_two_stop_chain(selector, equator_start, equator_end, two_hop_stations):
    result = selector.select(equator_start, equator_end, RANGE_KM, two_hop_stations)

    assert [s.location for s in result.stops] == [GeoPoint(0, 1.5), GeoPoint(0, 3.25)]
    assert result.legs == [
        Leg(equator_start, GeoPoint(0, 1.5)),
        Leg(GeoPoint(0, 1.5), GeoPoint(0, 3.25)),
        Leg(GeoPoint(0, 3.25), equator_end),
    ]
    assert result.feasible
    assert result.remaining_distance_km <= RANGE_KM
    assert result.waypoints == [equator_start, GeoPoint(0, 1.5), GeoPoint(0, 3.25), equator_end]


def test_last_stop_just_beyond_range_is_infeasible(selector, equator_start, equator_end):
    # (0, 3.2) is 200.15 km from (0, 5): two stops are chosen but the final hop is still too long
    pool = [ChargingStation.at(0, 1.5), ChargingStation.at(0, 3.2)]
    result = selector.select(equator_start, equator_end, RANGE_KM, pool)

    assert [s.location for s in result.stops] == [GeoPoint(0, 1.5), GeoPoint(0, 3.2)]
    assert len(result.legs) == 3
    assert result.legs[-1] == Leg(GeoPoint(0, 3.2), equator_end)
    assert not result.feasible
    assert result.remaining_distance_km == pytest.approx(200.15, abs=0.01)


def test_empty_pool_gives_forced_single_leg(selector, equator_start, equator_end):
    result = selector.select(equator_start, equator_end, RANGE_KM, frozenset())

    assert result.stops == []
    assert result.legs == [Leg(equator_start, equator_end)]
    assert not result.feasible
    assert result.iterations == 1


def test_stop_cap(equator_start):
    end = GeoPoint(0, 10)
    pool = [ChargingStation.at(0, x) for x in (1.5, 3.0, 4.5, 6.0, 7.5, 9.0)]
    result = StationSelector(max_stops=3).select(equator_start, end, RANGE_KM, pool)

    assert len(result.stops) == 3
    assert len(result.legs) == 4
    assert result.legs[-1].destination == end
    assert result.iterations == 3
    assert not result.feasible


def test_zero_stop_cap_goes_straight_to_forced_leg(equator_start, equator_end, two_hop_stations):
    result = StationSelector(max_stops=0).select(equator_start, equator_end, RANGE_KM, two_hop_stations)
    assert result.stops == []
    assert result.legs == [Leg(equator_start, equator_end)]
    assert not result.feasible


def test_selection_is_idempotent(selector, equator_start, equator_end, two_hop_stations):
    first = selector.select(equator_start, equator_end, RANGE_KM, two_hop_stations)
    second = selector.select(equator_start, equator_end, RANGE_KM, two_hop_stations)
    assert first.stops == second.stops
    assert first.legs == second.legs


def test_pool_is_not_modified(selector, equator_start, equator_end):
    pool = [ChargingStation.at(0, 1.5), ChargingStation.at(0, 3.25)]
    snapshot = list(pool)
    selector.select(equator_start, equator_end, RANGE_KM, pool)
    assert pool == snapshot


def test_progress_prefers_station_closest_to_destination(selector, equator_start, equator_end):
    pool = [ChargingStation.at(0, 0.5), ChargingStation.at(0, 1.5), ChargingStation.at(0, 3.25)]
    result = selector.select(equator_start, equator_end, RANGE_KM, pool)
    assert result.stops[0].location == GeoPoint(0, 1.5)


def test_ties_broken_by_coordinates(selector):
    start, end = GeoPoint(0, 0), GeoPoint(0, 3)
    # Mirror images across the equator are equally far from the destination
    pool = [ChargingStation.at(0.1, 1.5), ChargingStation.at(-0.1, 1.5)]
    result = selector.select(start, end, RANGE_KM, pool)
    assert result.stops[0].location == GeoPoint(-0.1, 1.5)


def test_nearest_strategy_takes_short_forward_hops(equator_start, equator_end):
    pool = [ChargingStation.at(0, -0.5), ChargingStation.at(0, 0.5), ChargingStation.at(0, 1.5)]
    result = StationSelector(strategy=NearestStrategy()).select(equator_start, equator_end, RANGE_KM, pool)

    assert [s.location for s in result.stops] == [GeoPoint(0, 0.5), GeoPoint(0, 1.5)]
    assert not result.feasible


def test_chosen_stations_are_not_candidates_again():
    current = GeoPoint(0, 1.5)
    here = ChargingStation.at(0, 1.5, name="Here")
    other = ChargingStation.at(0, 2.0)
    candidates = StationSelector._reachable_candidates(current, RANGE_KM, [here, other], [here])
    assert candidates == [other]


def test_station_identity_is_location_only():
    a = ChargingStation.at(1.0, 2.0, name="Alpha")
    b = ChargingStation.at(1.0, 2.0, name="Beta")
    assert a == b
    assert len({a, b}) == 1
    assert ChargingStation.at(1.0, 2.0).name == "Station (1.0000, 2.0000)"


def test_strategy_choose_with_no_candidates():
    assert ProgressStrategy().choose([], GeoPoint(0, 0), GeoPoint(0, 1)) is None
    assert NearestStrategy().choose([], GeoPoint(0, 0), GeoPoint(0, 1)) is None
