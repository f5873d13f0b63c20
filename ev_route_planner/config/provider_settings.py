"""
Provider endpoints and credentials, read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Example .env:
# ROUTING_API_KEY=...
# DIRECTORY_API_KEY=...
# STATION_DATA_PATH=data/stations.geojson
load_dotenv()

DEFAULT_ROUTING_BASE_URL = "https://graphhopper.com/api/1"
DEFAULT_DIRECTORY_BASE_URL = "https://api.openchargemap.io/v3"


@dataclass
class ProviderSettings:
    """Connection settings for the routing and station-directory services."""
    routing_base_url: str = DEFAULT_ROUTING_BASE_URL
    routing_api_key: str = ""
    routing_profile: str = "car"
    directory_base_url: str = DEFAULT_DIRECTORY_BASE_URL
    directory_api_key: str = ""
    timeout_seconds: float = 15.0
    station_data_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'ProviderSettings':
        """Build settings from environment variables."""
        return cls(
            routing_base_url=os.getenv("ROUTING_BASE_URL", DEFAULT_ROUTING_BASE_URL),
            routing_api_key=os.getenv("ROUTING_API_KEY", ""),
            routing_profile=os.getenv("ROUTING_PROFILE", "car"),
            directory_base_url=os.getenv("DIRECTORY_BASE_URL", DEFAULT_DIRECTORY_BASE_URL),
            directory_api_key=os.getenv("DIRECTORY_API_KEY", ""),
            timeout_seconds=float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "15")),
            station_data_path=os.getenv("STATION_DATA_PATH") or None
        )
