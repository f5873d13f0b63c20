"""
Shared fixtures: a scripted routing provider, an in-memory station directory
and the equator stations used by the selection scenarios.
"""

import threading
from typing import Callable, FrozenSet, Iterable, List, Optional

import pytest

from ev_route_planner.data.distance_utils import distance_km
from ev_route_planner.data.models import BoundingBox, ChargingStation, GeoPoint, LegRoute
from ev_route_planner.exceptions import DirectoryError, RoutingError
from ev_route_planner.providers.base import DirectoryProvider, RoutingProvider


class FakeRoutingProvider(RoutingProvider):
    """
    Straight-line router.

    Each leg comes back as origin, midpoint, destination with two
    instructions. Calls are recorded in order. A leg can be made to fail, or
    to block until ``gate`` is set.
    """

    def __init__(self, with_totals: bool = True,
                 fail_when: Optional[Callable[[GeoPoint, GeoPoint], bool]] = None,
                 block_when: Optional[Callable[[GeoPoint, GeoPoint], bool]] = None,
                 empty_path: bool = False):
        self.with_totals = with_totals
        self.fail_when = fail_when
        self.block_when = block_when
        self.empty_path = empty_path
        self.gate = threading.Event()
        self.blocked = threading.Event()
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def route_leg(self, origin: GeoPoint, destination: GeoPoint) -> LegRoute:
        with self._lock:
            self.calls.append((origin, destination))

        if self.block_when is not None and self.block_when(origin, destination):
            self.blocked.set()
            self.gate.wait(timeout=10)

        if self.fail_when is not None and self.fail_when(origin, destination):
            raise RoutingError("simulated routing failure")

        if self.empty_path:
            return LegRoute(path=[])

        midpoint = GeoPoint((origin.lat + destination.lat) / 2, (origin.lng + destination.lng) / 2)
        length = distance_km(origin, destination)
        return LegRoute(
            path=[origin, midpoint, destination],
            instructions=[f"Head to {destination.lat:.2f},{destination.lng:.2f}", "Arrive at waypoint"],
            distance_km=length if self.with_totals else None,
            duration_minutes=int(round(length / 100.0 * 60)) if self.with_totals else None
        )


class FakeDirectory(DirectoryProvider):
    """In-memory station directory that counts fetches."""

    def __init__(self, stations: Iterable[ChargingStation] = (), fail: bool = False):
        self.stations = frozenset(stations)
        self.fail = fail
        self.fetches = 0

    def fetch_stations(self, region: BoundingBox) -> FrozenSet[ChargingStation]:
        self.fetches += 1
        if self.fail:
            raise DirectoryError("directory offline")
        return frozenset(s for s in self.stations if region.contains(s.location))


@pytest.fixture
def fake_provider():
    return FakeRoutingProvider()


@pytest.fixture
def equator_start():
    return GeoPoint(0.0, 0.0)


@pytest.fixture
def equator_end():
    return GeoPoint(0.0, 5.0)


@pytest.fixture
def two_hop_stations():
    """Stations that let a 200 km vehicle cross from (0,0) to (0,5) in two stops."""
    return frozenset([
        ChargingStation.at(0.0, 1.5, name="Station A"),
        ChargingStation.at(0.0, 3.25, name="Station B"),
    ])
