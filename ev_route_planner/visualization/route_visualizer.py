"""
Route visualization tools for creating interactive HTML maps of EV route plans.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import folium

from ..config.planner_config import PlannerConfig
from ..data.models import ChargingStation, GeoPoint, PlanStatus, RoutePlan

logger = logging.getLogger(__name__)


class RouteVisualizer:
    """
    Create interactive HTML maps for planned routes and charging stops.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """
        Initialize route visualizer.

        Args:
            config: Planner configuration for styling options
        """
        self.config = config or PlannerConfig()

    def create_plan_map(self, plan: RoutePlan,
                        nearby_stations: Optional[Iterable[ChargingStation]] = None,
                        zoom_start: int = 6) -> folium.Map:
        """
        Create an interactive map of a route plan.

        Args:
            plan: Assembled route plan
            nearby_stations: Optional stations along the route to show as small markers
            zoom_start: Initial zoom before fitting to the plan bounds

        Returns:
            Folium map object
        """
        if not plan.path:
            raise ValueError("Plan has no path to visualize")

        center = plan.bounds.center() if plan.bounds is not None else plan.path[0]
        m = folium.Map(
            location=list(center.as_tuple()),
            zoom_start=zoom_start,
            tiles=self.config.map_style
        )

        if nearby_stations:
            self._add_nearby_stations(m, nearby_stations, plan.selected_stops)

        self._add_route_layer(m, plan)
        self._add_stop_markers(m, plan.selected_stops)
        self._add_start_end_markers(m, plan.path[0], plan.path[-1])
        self._add_legend(m, plan)

        if plan.bounds is not None:
            m.fit_bounds([[plan.bounds.south, plan.bounds.west], [plan.bounds.north, plan.bounds.east]])

        return m

    def _add_route_layer(self, m: folium.Map, plan: RoutePlan) -> None:
        """Add the merged route as a polyline."""
        # Infeasible plans are drawn dashed so the last leg is not mistaken for a drivable one
        dash_array = '10 8' if plan.status == PlanStatus.INFEASIBLE else None
        folium.PolyLine(
            locations=[list(p.as_tuple()) for p in plan.path],
            color=self.config.route_color,
            weight=5,
            opacity=0.8,
            dash_array=dash_array,
            popup=self._create_route_popup(plan)
        ).add_to(m)
        logger.debug(f"Added route with {len(plan.path)} points")

    def _create_route_popup(self, plan: RoutePlan) -> str:
        summary = plan.get_summary()
        return f"""
        <div style="width: 200px;">
            <h4>Planned Route</h4>
            <p><strong>Distance:</strong> {summary['total_distance_km']:.1f} km</p>
            <p><strong>Driving time:</strong> {summary['total_duration_minutes']} min</p>
            <p><strong>Charging stops:</strong> {summary['stop_count']}</p>
            <p><strong>Status:</strong> {summary['status']}</p>
        </div>
        """

    def _add_stop_markers(self, m: folium.Map, stops: List[ChargingStation]) -> None:
        for index, stop in enumerate(stops, 1):
            folium.Marker(
                location=[stop.lat, stop.lng],
                popup=f"Stop {index}: {stop.name}",
                tooltip=f"Charging stop {index}",
                icon=folium.Icon(color=self.config.stop_color, icon='flash')
            ).add_to(m)

    def _add_nearby_stations(self, m: folium.Map, stations: Iterable[ChargingStation],
                             selected: List[ChargingStation]) -> None:
        count = 0
        for station in stations:
            if station in selected:
                continue
            folium.CircleMarker(
                location=[station.lat, station.lng],
                radius=4,
                popup=station.name,
                color=self.config.nearby_station_color,
                fill=True,
                fill_opacity=0.6
            ).add_to(m)
            count += 1
        logger.debug(f"Added {count} nearby station markers")

    def _add_start_end_markers(self, m: folium.Map, start: GeoPoint, end: GeoPoint) -> None:
        folium.Marker(
            location=list(start.as_tuple()),
            popup='Start',
            icon=folium.Icon(color='blue', icon='play')
        ).add_to(m)

        folium.Marker(
            location=list(end.as_tuple()),
            popup='Destination',
            icon=folium.Icon(color='red', icon='stop')
        ).add_to(m)

    def _add_legend(self, m: folium.Map, plan: RoutePlan) -> None:
        summary = plan.get_summary()
        warning_html = ''
        if plan.status == PlanStatus.INFEASIBLE:
            warning_html = '<p style="color: #c0392b;"><strong>Insufficient range</strong></p>'
        cost_html = ''
        if summary['total_cost'] is not None:
            cost_html = f"<p>Estimated charging cost: {summary['total_cost']:.2f}</p>"

        legend_html = f"""
        <div style="position: fixed;
                   bottom: 50px; left: 50px; width: 220px; height: auto;
                   background-color: white; border:2px solid grey; z-index:9999;
                   font-size:14px; padding: 10px;">
            <h4 style="margin-top: 0;">Trip Summary</h4>
            <p>{summary['total_distance_km']:.1f} km &bull; {summary['total_duration_minutes']} min driving</p>
            <p>{summary['stop_count']} charging stop(s) &bull; {summary['charging_time_minutes']} min charging</p>
            {cost_html}
            {warning_html}
        </div>
        """
        m.get_root().html.add_child(folium.Element(legend_html))

    def save_interactive_html(self, map_obj: folium.Map, filepath: str) -> None:
        """
        Save interactive map to HTML file.

        Args:
            map_obj: Folium map object
            filepath: Output file path
        """
        try:
            Path(filepath).parent.mkdir(parents=True, exist_ok=True)
            map_obj.save(filepath)
            logger.info(f"Interactive map saved to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save map to {filepath}: {e}")
            raise
