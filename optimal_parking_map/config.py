"""Configuration constants for the optimal parking map pipeline."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

# Map export produced by the location model (folium/Leaflet HTML page)
DEFAULT_ARTIFACT_SOURCE: str = "public/predicted_parking_locations_by_sub.html"

# Existing public parking facilities, a JSON list of {id, lat, lng, address}
DEFAULT_PUBLIC_PARKING_SOURCE: str = "public/parking-data.json"

# Directory for derived datasets (artifact JSON, parquet tables)
DERIVED_DATA_DIR: Path = Path("data/derived")

# Timeout (seconds) for HTTP requests; None waits indefinitely
HTTP_TIMEOUT: Optional[float] = None

MAP_CENTER: tuple[float, float] = (35.5383, 129.3111)

DISTRICTS: tuple[str, ...] = ("중구", "남구", "동구", "북구", "울주군")

# Label used when a record carries no district
UNKNOWN_DISTRICT: str = "미상"

# Popup phrase that marks a "nearest existing parking" marker
NEAREST_PARKING_PHRASE: str = "가장 가까운 기존 주차장"

# Cosmetic substitution applied to optimal location addresses
PLACEHOLDER_WORD: str = "클러스터"
REPLACEMENT_WORD: str = "예측입지"

# Circle marker radii are drawn in pixels; the map expects metres
CIRCLE_RADIUS_SCALE: float = 50.0

# Planar distance in degrees (~200 m at Ulsan's latitude)
MERGE_DISTANCE_THRESHOLD: float = 0.002

CLUSTER_MODES: tuple[str, ...] = ("greedy", "connected")

CIRCLE_STYLE = {
    "fillOpacity": 0.25,
    "strokeOpacity": 0.8,
    "strokeWeight": 1,
    "color": "#FF0000",
}

LINE_STYLE = {
    "color": "#6B46C1",
    "weight": 3.5,
    "opacity": 1,
    "dashArray": "10, 5",
}

# Nearest public parking within this distance is worth expanding
ADVISORY_DISTANCE_METERS: float = 600.0

# 0.0 keeps exact float equality between line endpoints and markers
COORDINATE_EPSILON: float = 0.0

# Tolerance the district filter uses to tie lines to optimal locations
LINE_FILTER_EPSILON: float = 0.0001
