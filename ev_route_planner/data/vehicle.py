"""
Helpers that turn battery and rated-range figures into planning inputs.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ..exceptions import InvalidInputError
from .models import ChargingStation


@dataclass
class BatteryStatus:
    """Whether a trip of a given length fits in the current charge."""
    trip_possible: bool
    remaining_percentage: Optional[float] = None
    extra_charge_needed_percentage: Optional[float] = None

    @property
    def message(self) -> str:
        if self.trip_possible:
            return f"Trip possible! Estimated battery left: {self.remaining_percentage:.2f}%"
        return f"Not enough battery! Need extra {self.extra_charge_needed_percentage:.2f}% charge."


def _check_vehicle_figures(battery_percentage: float, rated_range_km: float) -> None:
    if battery_percentage is None or rated_range_km is None:
        raise InvalidInputError("Battery percentage and rated range are required")
    if not 0 < battery_percentage <= 100:
        raise InvalidInputError("Battery percentage must be in (0, 100]")
    if rated_range_km <= 0:
        raise InvalidInputError("Rated range must be positive")


def usable_range_km(battery_percentage: float, rated_range_km: float,
                    safety_margin: float = 1.0) -> float:
    """
    Compute the distance the vehicle can cover on its current charge.

    Args:
        battery_percentage: Current charge, 0-100
        rated_range_km: Range on a full battery
        safety_margin: Fraction of the nominal range to rely on (weather, traffic)

    Returns:
        Usable range in kilometers
    """
    _check_vehicle_figures(battery_percentage, rated_range_km)
    if not 0 < safety_margin <= 1:
        raise InvalidInputError("Safety margin must be in (0, 1]")
    return rated_range_km * (battery_percentage / 100.0) * safety_margin


def battery_status(distance_km: float, battery_percentage: float,
                   rated_range_km: float) -> BatteryStatus:
    """
    Estimate the battery left after a trip, or the extra charge it needs.

    Args:
        distance_km: Trip length
        battery_percentage: Current charge, 0-100
        rated_range_km: Range on a full battery

    Returns:
        BatteryStatus for the trip
    """
    _check_vehicle_figures(battery_percentage, rated_range_km)
    needed_percentage = (distance_km / rated_range_km) * 100.0
    if needed_percentage <= battery_percentage:
        return BatteryStatus(
            trip_possible=True,
            remaining_percentage=battery_percentage - needed_percentage
        )
    return BatteryStatus(
        trip_possible=False,
        extra_charge_needed_percentage=needed_percentage - battery_percentage
    )


def estimate_charging_cost(stops: Iterable[ChargingStation], battery_capacity_kwh: Optional[float],
                           charge_fraction: float = 0.8) -> Optional[float]:
    """
    Estimate what the charging stops cost, buying ``charge_fraction`` of the battery at each.

    Stops without a known per-kWh price are left out of the sum. Returns None
    when the capacity is unknown, or when there are stops but none is priced.
    """
    if battery_capacity_kwh is None:
        return None
    if battery_capacity_kwh <= 0:
        raise InvalidInputError("Battery capacity must be positive")

    stops = list(stops)
    prices = [stop.price_per_kwh for stop in stops if stop.price_per_kwh is not None]
    if stops and not prices:
        return None

    energy_per_stop_kwh = battery_capacity_kwh * charge_fraction
    return round(sum(energy_per_stop_kwh * price for price in prices), 2)
