"""
Process-local cache of station-pool snapshots, one per fetched region.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from ..data.models import BoundingBox, ChargingStation, GeoPoint
from ..exceptions import DirectoryError
from .base import DirectoryProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StationPool:
    """A read-only station snapshot and whether the directory was reachable."""
    stations: FrozenSet[ChargingStation]
    unavailable: bool = False

    def __len__(self) -> int:
        return len(self.stations)


class StationPoolCache:
    """
    Fetch the station pool once per region and hand out read-only snapshots.

    Requested regions are snapped outward to a coarse degree grid so that
    nearby trips share one snapshot. A request for a region already covered
    by a cached region is served from that snapshot. At most ``max_regions``
    snapshots are kept; the least recently used one is evicted first.
    Snapshots are frozensets, so any number of planning attempts may read
    them concurrently; a refresh replaces a snapshot wholesale rather than
    mutating it.
    """

    def __init__(self, directory: DirectoryProvider, grid_deg: float = 0.5, max_regions: int = 32):
        if max_regions < 1:
            raise ValueError("max_regions must be at least 1")
        self.directory = directory
        self.grid_deg = grid_deg
        self.max_regions = max_regions
        self._snapshots: 'OrderedDict[BoundingBox, FrozenSet[ChargingStation]]' = OrderedDict()
        self._lock = threading.Lock()

    def get_pool(self, region: BoundingBox) -> StationPool:
        """
        Get the station pool for a region, fetching it on first use.

        A DirectoryError is not raised; it yields an empty pool flagged as
        unavailable so planning can still proceed.
        """
        region = region.snapped(self.grid_deg)
        cached = self._find_covering(region)
        if cached is not None:
            logger.debug(f"Station pool cache hit ({len(cached)} stations)")
            return StationPool(cached)

        try:
            return StationPool(self.refresh(region))
        except DirectoryError as e:
            logger.warning(f"Station directory unavailable, planning with an empty pool: {e}")
            return StationPool(frozenset(), unavailable=True)

    def refresh(self, region: BoundingBox) -> FrozenSet[ChargingStation]:
        """
        Fetch a fresh snapshot for a region, replacing any cached one.

        Raises:
            DirectoryError: If the directory cannot be reached
        """
        stations = frozenset(self.directory.fetch_stations(region))
        with self._lock:
            self._snapshots[region] = stations
            self._snapshots.move_to_end(region)
            while len(self._snapshots) > self.max_regions:
                evicted, _ = self._snapshots.popitem(last=False)
                logger.debug(f"Evicted station pool for region {evicted.as_dict()}")
        logger.info(f"Cached {len(stations)} stations for region {region.as_dict()}")
        return stations

    def clear(self) -> None:
        with self._lock:
            self._snapshots = OrderedDict()

    def get_cache_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'regions': len(self._snapshots),
                'stations': sum(len(s) for s in self._snapshots.values())
            }

    def _find_covering(self, region: BoundingBox) -> Optional[FrozenSet[ChargingStation]]:
        corners = (GeoPoint(region.south, region.west), GeoPoint(region.north, region.east))
        with self._lock:
            for cached_region, stations in self._snapshots.items():
                if all(cached_region.contains(corner) for corner in corners):
                    self._snapshots.move_to_end(cached_region)
                    return stations
        return None
