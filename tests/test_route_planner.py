import math
import warnings

import pytest

from ev_route_planner import InfeasibleRouteWarning, InvalidInputError, RoutePlanner, RoutingError
from ev_route_planner.algorithms.selection import NearestStrategy
from ev_route_planner.config.planner_config import PlannerConfig
from ev_route_planner.data.models import (
    WARNING_DIRECTORY_UNAVAILABLE,
    WARNING_INSUFFICIENT_RANGE,
    ChargingStation,
    GeoPoint,
    PlanningRequest,
    PlanStatus
)

from conftest import FakeRoutingProvider


def test_single_leg_plan(fake_provider):
    request = PlanningRequest(GeoPoint(0, 0), GeoPoint(0, 1), 200.0)
    plan = RoutePlanner(fake_provider).plan(request)

    assert plan.status == PlanStatus.COMPLETE
    assert plan.is_feasible
    assert plan.selected_stops == []
    assert len(plan.legs) == 1
    assert plan.path[0] == GeoPoint(0, 0)
    assert plan.path[-1] == GeoPoint(0, 1)
    assert plan.warnings == []
    assert plan.charging_time_minutes == 0
    assert len(fake_provider.calls) == 1


def test_plan_with_stops(fake_provider, equator_start, equator_end, two_hop_stations):
    request = PlanningRequest(equator_start, equator_end, 200.0, two_hop_stations)
    plan = RoutePlanner(fake_provider).plan(request)

    assert plan.stop_count == 2
    assert len(plan.legs) == 3
    assert plan.path[-1] == equator_end
    assert plan.charging_time_minutes == 2 * 30
    assert plan.total_distance_km == pytest.approx(5 * 111.195, abs=0.5)

    summary = plan.get_summary()
    assert summary['status'] == 'complete'
    assert summary['stop_count'] == 2
    assert summary['leg_count'] == 3
    assert summary['path_points'] == len(plan.path)


@pytest.mark.parametrize("usable_range", [0, -5.0, None, float('nan'), math.inf, "far"])
def test_invalid_range_makes_no_network_calls(fake_provider, usable_range):
    request = PlanningRequest(GeoPoint(0, 0), GeoPoint(0, 5), usable_range)
    with pytest.raises(InvalidInputError):
        RoutePlanner(fake_provider).plan(request)
    assert fake_provider.calls == []


def test_missing_locations_are_invalid(fake_provider):
    planner = RoutePlanner(fake_provider)
    with pytest.raises(InvalidInputError):
        planner.plan(PlanningRequest(None, GeoPoint(0, 1), 100.0))
    with pytest.raises(InvalidInputError):
        planner.plan(PlanningRequest(GeoPoint(0, 0), None, 100.0))
    assert fake_provider.calls == []


def test_invalid_input_is_a_value_error():
    assert issubclass(InvalidInputError, ValueError)


def test_infeasible_plan_is_returned_with_warning(fake_provider, equator_start, equator_end):
    request = PlanningRequest(equator_start, equator_end, 200.0, frozenset())

    with pytest.warns(InfeasibleRouteWarning, match="Insufficient range"):
        plan = RoutePlanner(fake_provider).plan(request)

    assert plan.status == PlanStatus.INFEASIBLE
    assert not plan.is_feasible
    assert plan.warnings == [WARNING_INSUFFICIENT_RANGE]
    assert len(plan.legs) == 1
    assert plan.path[-1] == equator_end


def test_unavailable_directory_is_flagged(fake_provider, equator_start, equator_end):
    request = PlanningRequest(equator_start, equator_end, 200.0, frozenset(), pool_unavailable=True)

    with pytest.warns(InfeasibleRouteWarning, match="station directory unavailable"):
        plan = RoutePlanner(fake_provider).plan(request)

    assert plan.warnings == [WARNING_INSUFFICIENT_RANGE, WARNING_DIRECTORY_UNAVAILABLE]


def test_routing_failure_propagates(equator_start, equator_end, two_hop_stations):
    provider = FakeRoutingProvider(fail_when=lambda origin, destination: destination == equator_end)
    request = PlanningRequest(equator_start, equator_end, 200.0, two_hop_stations)

    with pytest.raises(RoutingError) as exc_info:
        RoutePlanner(provider).plan(request)
    assert exc_info.value.leg_index == 2


def test_select_stops_does_no_io(fake_provider, equator_start, equator_end, two_hop_stations):
    request = PlanningRequest(equator_start, equator_end, 200.0, two_hop_stations)
    selection = RoutePlanner(fake_provider).select_stops(request)
    assert len(selection.stops) == 2
    assert fake_provider.calls == []


def test_strategy_follows_config(fake_provider):
    planner = RoutePlanner(fake_provider, PlannerConfig.create_conservative_config())
    assert isinstance(planner.strategy, NearestStrategy)
    assert planner.selector.max_stops == 3


def test_plans_are_repeatable(equator_start, equator_end, two_hop_stations):
    request = PlanningRequest(equator_start, equator_end, 200.0, two_hop_stations)
    planner = RoutePlanner(FakeRoutingProvider())
    first = planner.plan(request)
    second = planner.plan(request)
    assert first.selected_stops == second.selected_stops
    assert first.path == second.path
    assert first.bounds == second.bounds


def test_stations_along_route(fake_provider):
    near = ChargingStation.at(0.05, 0.5, name="Roadside")
    far = ChargingStation.at(2.0, 0.5, name="Elsewhere")
    plan = RoutePlanner(fake_provider).plan(PlanningRequest(GeoPoint(0, 0), GeoPoint(0, 1), 200.0))

    planner = RoutePlanner(fake_provider)
    assert planner.stations_along_route(plan, [near, far]) == [near]
    assert planner.stations_along_route(plan, [near, far], threshold_km=500) == [near, far]


def test_pool_is_coerced_to_frozenset():
    request = PlanningRequest(GeoPoint(0, 0), GeoPoint(0, 1), 10.0, [ChargingStation.at(0, 0.5)])
    assert isinstance(request.station_pool, frozenset)


def test_feasible_plan_emits_no_warning(fake_provider, equator_start, equator_end, two_hop_stations):
    request = PlanningRequest(equator_start, equator_end, 200.0, two_hop_stations)
    with warnings.catch_warnings():
        warnings.simplefilter("error", InfeasibleRouteWarning)
        RoutePlanner(fake_provider).plan(request)


def test_charging_cost_from_station_prices(fake_provider, equator_start, equator_end):
    pool = [ChargingStation.at(0.0, 1.5, name="Station A", price_per_kwh=0.4),
            ChargingStation.at(0.0, 3.25, name="Station B", price_per_kwh=0.5)]
    request = PlanningRequest(equator_start, equator_end, 200.0, pool, battery_capacity_kwh=60.0)

    plan = RoutePlanner(fake_provider).plan(request)

    # 80% of 60 kWh bought at each stop
    assert plan.total_cost == pytest.approx(48 * 0.4 + 48 * 0.5)
    assert plan.get_summary()['total_cost'] == plan.total_cost


def test_charging_cost_needs_capacity(fake_provider, equator_start, equator_end):
    pool = [ChargingStation.at(0.0, 1.5, price_per_kwh=0.4), ChargingStation.at(0.0, 3.25, price_per_kwh=0.5)]
    plan = RoutePlanner(fake_provider).plan(PlanningRequest(equator_start, equator_end, 200.0, pool))
    assert plan.stop_count == 2
    assert plan.total_cost is None


def test_invalid_battery_capacity_makes_no_network_calls(fake_provider):
    request = PlanningRequest(GeoPoint(0, 0), GeoPoint(0, 1), 100.0, battery_capacity_kwh=-1.0)
    with pytest.raises(InvalidInputError, match="Battery capacity"):
        RoutePlanner(fake_provider).plan(request)
    assert fake_provider.calls == []


def offline_pool():
    return [
        ChargingStation.at(0.0, 1.6, name="Open"),
        ChargingStation.at(0.0, 1.7, name="Closed", operational_status="offline"),
        ChargingStation.at(0.0, 3.25, name="Station B", operational_status="operational"),
    ]


def test_offline_stations_are_skipped(fake_provider, equator_start, equator_end):
    request = PlanningRequest(equator_start, equator_end, 200.0, offline_pool())
    plan = RoutePlanner(fake_provider).plan(request)
    assert [stop.name for stop in plan.selected_stops] == ["Open", "Station B"]


def test_offline_stations_used_when_not_skipping(fake_provider, equator_start, equator_end):
    request = PlanningRequest(equator_start, equator_end, 200.0, offline_pool())
    plan = RoutePlanner(fake_provider, PlannerConfig(skip_non_operational=False)).plan(request)
    assert [stop.name for stop in plan.selected_stops] == ["Closed", "Station B"]


def test_station_operational_status():
    assert ChargingStation.at(0, 0).is_operational
    assert ChargingStation.at(0, 0, operational_status="operational").is_operational
    assert not ChargingStation.at(0, 0, operational_status="Maintenance").is_operational
    assert not ChargingStation.at(0, 0, operational_status="offline").is_operational
    assert ChargingStation.at(0, 0).operational_status == "unknown"
    assert ChargingStation.at(0, 0, price_per_kwh="0.42").price_per_kwh == pytest.approx(0.42)
    assert ChargingStation.at(0, 0, price_per_kwh="free").price_per_kwh is None
