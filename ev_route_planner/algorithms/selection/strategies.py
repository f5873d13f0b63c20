"""
Charging-stop selection strategies.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from ...data.distance_utils import distance_km
from ...data.models import ChargingStation, GeoPoint


class SelectionStrategy(ABC):
    """
    Abstract base class for choosing the next charging stop.

    The selector hands a strategy the stations that are reachable from the
    current position; the strategy decides which one to drive to next.
    """

    name = "base"

    @abstractmethod
    def score(self, candidate: ChargingStation, current: GeoPoint, destination: GeoPoint) -> float:
        """
        Score a reachable candidate (lower is better).

        Args:
            candidate: Reachable charging station
            current: Current vehicle position
            destination: Final destination

        Returns:
            Candidate score
        """
        pass

    def choose(self, candidates: Sequence[ChargingStation], current: GeoPoint,
               destination: GeoPoint) -> Optional[ChargingStation]:
        """
        Pick the best-scoring candidate.

        Ties are broken by latitude then longitude so the same inputs always
        yield the same stop.

        Returns:
            Chosen station, or None if there are no candidates
        """
        if not candidates:
            return None
        return min(candidates, key=lambda c: self._ranking_key(c, current, destination))

    def _ranking_key(self, candidate: ChargingStation, current: GeoPoint,
                     destination: GeoPoint) -> Tuple[float, float, float]:
        return (self.score(candidate, current, destination), candidate.lat, candidate.lng)


class ProgressStrategy(SelectionStrategy):
    """Prefer the reachable station closest to the destination."""

    name = "progress"

    def score(self, candidate: ChargingStation, current: GeoPoint, destination: GeoPoint) -> float:
        return distance_km(candidate.location, destination)


class NearestStrategy(SelectionStrategy):
    """
    Prefer the reachable station closest to the current position.

    Only stations that are closer to the destination than the current
    position are considered, otherwise the nearest station could lie behind
    the vehicle.
    """

    name = "nearest"

    def score(self, candidate: ChargingStation, current: GeoPoint, destination: GeoPoint) -> float:
        return distance_km(current, candidate.location)

    def choose(self, candidates: Sequence[ChargingStation], current: GeoPoint,
               destination: GeoPoint) -> Optional[ChargingStation]:
        remaining = distance_km(current, destination)
        forward = [c for c in candidates if distance_km(c.location, destination) < remaining]
        return super().choose(forward, current, destination)


# Strategy classes by the name used in PlannerConfig.selection_method
STRATEGY_CLASSES = {
    ProgressStrategy.name: ProgressStrategy,
    NearestStrategy.name: NearestStrategy
}
