#!/usr/bin/env python3
"""
EV Route Planner - Command Line Interface

Plans a trip between two coordinates and prints the charging stops, totals
and turn-by-turn instructions.

Usage:
    python -m ev_route_planner.main --start 52.52,13.405 --end 48.1351,11.582 --range 250
"""

import argparse
import logging
import sys
import warnings
from typing import Optional, Sequence

from . import InfeasibleRouteWarning, PlannerError, PlannerConfig, ProviderSettings, RoutePlanner
from .config.strategy_factory import create_strategy_from_string
from .data import BoundingBox, GeoPoint, PlanningRequest, usable_range_km
from .providers import (
    GeoJSONStationDirectory,
    GraphHopperRoutingProvider,
    OpenChargeMapDirectory,
    StationPoolCache
)
from .visualization import RouteVisualizer


def parse_point(value: str) -> GeoPoint:
    """Parse 'lat,lng' into a GeoPoint."""
    try:
        lat_str, lng_str = value.split(',', 1)
        return GeoPoint(float(lat_str), float(lng_str))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected 'lat,lng', got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="EV Route Planner")
    parser.add_argument("--start", type=parse_point, required=True, help="Start as 'lat,lng'")
    parser.add_argument("--end", type=parse_point, required=True, help="Destination as 'lat,lng'")
    parser.add_argument("--range", dest="usable_range", type=float, help="Usable range in km")
    parser.add_argument("--battery", type=float, help="Battery percentage (with --rated-range)")
    parser.add_argument("--rated-range", type=float, help="Range on a full battery in km")
    parser.add_argument("--capacity", type=float, help="Battery capacity in kWh, for the charging cost estimate")
    parser.add_argument("--stations", help="GeoJSON file of charging stations (overrides the online directory)")
    parser.add_argument("--strategy", choices=["progress", "nearest"], default="progress",
                        help="Charging stop selection rule")
    parser.add_argument("--map", dest="map_path", help="Write an interactive HTML map to this path")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Plan a route from the command line."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = PlannerConfig(selection_method=args.strategy)
    settings = ProviderSettings.from_env()

    try:
        if args.usable_range is not None:
            usable_range = args.usable_range
        elif args.battery is not None and args.rated_range is not None:
            usable_range = usable_range_km(args.battery, args.rated_range, config.safety_margin)
        else:
            print("❌ Provide --range, or --battery together with --rated-range")
            return 2
    except PlannerError as e:
        print(f"❌ {e}")
        return 2

    print("🔋 EV Route Planner")
    print("=" * 50)
    print(f"   Start: {args.start.as_tuple()}")
    print(f"   End:   {args.end.as_tuple()}")
    print(f"   Usable range: {usable_range:.1f} km")

    station_path = args.stations or settings.station_data_path
    if station_path:
        directory = GeoJSONStationDirectory(station_path)
    else:
        directory = OpenChargeMapDirectory(settings.directory_base_url, settings.directory_api_key,
                                           timeout=settings.timeout_seconds)
    region = BoundingBox.from_points([args.start, args.end]).padded_km(config.station_search_margin_km)
    pool = StationPoolCache(directory, grid_deg=config.station_cache_grid_deg).get_pool(region)
    print(f"\n📍 {len(pool)} charging stations in the search region")
    if pool.unavailable:
        print("⚠️  Station directory unavailable - planning without charging stations")

    provider = GraphHopperRoutingProvider(settings.routing_base_url, settings.routing_api_key,
                                          profile=settings.routing_profile,
                                          timeout=settings.timeout_seconds)
    planner = RoutePlanner(provider, config, create_strategy_from_string(args.strategy))
    request = PlanningRequest(args.start, args.end, usable_range, pool.stations, pool.unavailable,
                              battery_capacity_kwh=args.capacity)

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", InfeasibleRouteWarning)
            plan = planner.plan(request)
    except PlannerError as e:
        print(f"❌ Planning failed: {e}")
        return 1

    summary = plan.get_summary()
    print("\n✅ Route planned")
    print(f"   Distance: {summary['total_distance_km']:.1f} km")
    print(f"   Driving time: {summary['total_duration_minutes']} min")
    print(f"   Charging stops: {summary['stop_count']} ({summary['charging_time_minutes']} min charging)")
    for index, stop in enumerate(plan.selected_stops, 1):
        print(f"   {index}. {stop.name} ({stop.lat:.4f}, {stop.lng:.4f})")
    if summary['total_cost'] is not None:
        print(f"   Estimated charging cost: {summary['total_cost']:.2f}")
    if not plan.is_feasible:
        print("⚠️  Insufficient range: the vehicle cannot complete this trip on the planned stops")

    print("\n🧭 Instructions:")
    for instruction in plan.instructions:
        print(f"   - {instruction}")

    if args.map_path:
        visualizer = RouteVisualizer(config)
        nearby = planner.stations_along_route(plan, pool.stations)
        visualizer.save_interactive_html(visualizer.create_plan_map(plan, nearby), args.map_path)
        print(f"\n🗺️ Map saved to {args.map_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
