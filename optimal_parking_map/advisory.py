"""Advice shown with each optimal location.

An optimal location is tied to its nearest public parking through the line
that starts on it. Lines and markers are separate statements in the export,
so the only link between them is their coordinates. With the default epsilon
of 0.0 the comparison is exact float equality.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from . import config
from .models import LatLng, LineSegment, NearestPublicParking, OptimalLocation, ParkingArtifact

logger = logging.getLogger(__name__)

DEVELOP_NEW = "develop_new"
EXPAND_EXISTING = "expand_existing"

DEVELOP_NEW_MESSAGE = "해당 입지 근처에 새로운 공영주차장 개발 방안이 필요합니다!"
EXPAND_EXISTING_TEMPLATE = "{address} 공영주차장의 확장 및 홍보 방안이 필요합니다!"


@dataclass(frozen=True)
class Advisory:
    optimal_id: str
    kind: str
    message: str
    nearest_id: Optional[str] = None
    distance: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "optimalId": self.optimal_id,
            "kind": self.kind,
            "message": self.message,
            "nearestId": self.nearest_id,
            "distance": self.distance,
        }


def coordinates_match(lat_a: float, lng_a: float, lat_b: float, lng_b: float, epsilon: float = config.COORDINATE_EPSILON) -> bool:
    if epsilon <= 0:
        return lat_a == lat_b and lng_a == lng_b
    return abs(lat_a - lat_b) < epsilon and abs(lng_a - lng_b) < epsilon


def _point_match(a: LatLng, b: LatLng, epsilon: float) -> bool:
    return coordinates_match(a.lat, a.lng, b.lat, b.lng, epsilon)


def find_connected_line(
    optimal: OptimalLocation, lines: Iterable[LineSegment], epsilon: float = config.COORDINATE_EPSILON
) -> Optional[LineSegment]:
    return next((line for line in lines if _point_match(line.start, optimal.location, epsilon)), None)


def find_nearest_parking(
    line: LineSegment,
    nearest_public_parkings: Iterable[NearestPublicParking],
    epsilon: float = config.COORDINATE_EPSILON,
) -> Optional[NearestPublicParking]:
    return next(
        (parking for parking in nearest_public_parkings if _point_match(parking.location, line.end, epsilon)),
        None,
    )


def find_public_parking(
    nearest: NearestPublicParking,
    public_parkings: Iterable[Mapping[str, Any]],
    epsilon: float = config.COORDINATE_EPSILON,
) -> Optional[Mapping[str, Any]]:
    for record in public_parkings:
        try:
            lat, lng = float(record["lat"]), float(record["lng"])
        except (KeyError, TypeError, ValueError):
            continue
        if coordinates_match(lat, lng, nearest.location.lat, nearest.location.lng, epsilon):
            return record
    return None


def lines_for_optimal_locations(
    lines: Iterable[LineSegment],
    optimal_locations: Iterable[OptimalLocation],
    epsilon: float = config.LINE_FILTER_EPSILON,
) -> List[LineSegment]:
    """Keep the lines that start on one of ``optimal_locations``."""
    optimal_locations = list(optimal_locations)
    return [
        line
        for line in lines
        if any(_point_match(line.start, optimal.location, epsilon) for optimal in optimal_locations)
    ]


def advise(
    optimal: OptimalLocation,
    artifact: ParkingArtifact,
    public_parkings: Iterable[Mapping[str, Any]] = (),
    *,
    epsilon: float = config.COORDINATE_EPSILON,
    max_distance: float = config.ADVISORY_DISTANCE_METERS,
) -> Advisory:
    line = find_connected_line(optimal, artifact.lines, epsilon)
    if line is None:
        return Advisory(optimal.id, DEVELOP_NEW, DEVELOP_NEW_MESSAGE)

    nearest = find_nearest_parking(line, artifact.nearest_public_parkings, epsilon)
    if nearest is None:
        return Advisory(optimal.id, DEVELOP_NEW, DEVELOP_NEW_MESSAGE)

    if nearest.distance is None or nearest.distance > max_distance:
        return Advisory(optimal.id, DEVELOP_NEW, DEVELOP_NEW_MESSAGE, nearest.id, nearest.distance)

    public = find_public_parking(nearest, public_parkings, epsilon)
    address = str(public.get("address") or "") if public else ""
    return Advisory(
        optimal.id,
        EXPAND_EXISTING,
        EXPAND_EXISTING_TEMPLATE.format(address=address).strip(),
        nearest.id,
        nearest.distance,
    )


def build_advisories(
    artifact: ParkingArtifact,
    public_parkings: Iterable[Mapping[str, Any]] = (),
    *,
    epsilon: float = config.COORDINATE_EPSILON,
) -> Dict[str, Advisory]:
    public_parkings = list(public_parkings)
    advisories = {
        optimal.id: advise(optimal, artifact, public_parkings, epsilon=epsilon)
        for optimal in artifact.optimal_locations
    }
    expand = sum(1 for item in advisories.values() if item.kind == EXPAND_EXISTING)
    logger.debug("Built %s advisories (%s expand existing)", len(advisories), expand)
    return advisories


__all__ = [
    "Advisory",
    "DEVELOP_NEW",
    "EXPAND_EXISTING",
    "advise",
    "build_advisories",
    "coordinates_match",
    "find_connected_line",
    "find_nearest_parking",
    "find_public_parking",
    "lines_for_optimal_locations",
]
