"""Record types produced by the map export pipeline."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from . import config


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class LineStyle:
    color: str = config.LINE_STYLE["color"]
    weight: float = config.LINE_STYLE["weight"]
    opacity: float = config.LINE_STYLE["opacity"]
    dash_array: str = config.LINE_STYLE["dashArray"]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "weight": self.weight,
            "opacity": self.opacity,
            "dashArray": self.dash_array,
        }


@dataclass(frozen=True)
class LineSegment:
    """Connector from an optimal location to its nearest public parking."""

    id: str
    start: LatLng
    end: LatLng
    style: LineStyle = field(default_factory=LineStyle)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start.as_dict(),
            "end": self.end.as_dict(),
            "style": self.style.as_dict(),
        }


@dataclass(frozen=True)
class MarkerRecord:
    lat: float
    lng: float
    popup_text: str


@dataclass(frozen=True)
class OptimalLocation:
    id: str
    district: str
    location: LatLng
    address: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "district": self.district,
            "location": self.location.as_dict(),
            "address": self.address,
        }


@dataclass(frozen=True)
class NearestPublicParking:
    id: str
    district: str
    location: LatLng
    address: str
    distance: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "district": self.district,
            "location": self.location.as_dict(),
            "address": self.address,
            "distance": self.distance,
        }


@dataclass(frozen=True)
class RawCircle:
    lat: float
    lng: float
    radius: float


@dataclass(frozen=True)
class CircleCluster:
    """Merged enforcement hotspot; ``radius`` is the sum of its members."""

    id: str
    lat: float
    lng: float
    radius: float
    fill_opacity: float = config.CIRCLE_STYLE["fillOpacity"]
    stroke_opacity: float = config.CIRCLE_STYLE["strokeOpacity"]
    stroke_weight: float = config.CIRCLE_STYLE["strokeWeight"]
    color: str = config.CIRCLE_STYLE["color"]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "radius": self.radius,
            "fillOpacity": self.fill_opacity,
            "strokeOpacity": self.stroke_opacity,
            "strokeWeight": self.stroke_weight,
            "color": self.color,
        }


@dataclass(frozen=True)
class ParkingArtifact:
    """Everything the map layer draws from one export document."""

    optimal_locations: Tuple[OptimalLocation, ...] = ()
    nearest_public_parkings: Tuple[NearestPublicParking, ...] = ()
    circles: Tuple[CircleCluster, ...] = ()
    lines: Tuple[LineSegment, ...] = ()

    @classmethod
    def empty(cls) -> "ParkingArtifact":
        return cls()

    def is_empty(self) -> bool:
        return not (self.optimal_locations or self.nearest_public_parkings or self.circles or self.lines)

    def counts(self) -> Dict[str, int]:
        return {
            "optimalLocations": len(self.optimal_locations),
            "nearestPublicParkings": len(self.nearest_public_parkings),
            "circles": len(self.circles),
            "lines": len(self.lines),
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "optimalLocations": [item.as_dict() for item in self.optimal_locations],
            "nearestPublicParkings": [item.as_dict() for item in self.nearest_public_parkings],
            "circles": [item.as_dict() for item in self.circles],
            "lines": [item.as_dict() for item in self.lines],
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParkingArtifact":
        """Rebuild an artifact written by :meth:`to_json`."""

        def point(value: Mapping[str, Any]) -> LatLng:
            return LatLng(float(value["lat"]), float(value["lng"]))

        return cls(
            optimal_locations=tuple(
                OptimalLocation(
                    id=item["id"],
                    district=item.get("district") or "",
                    location=point(item["location"]),
                    address=item.get("address") or "",
                )
                for item in payload.get("optimalLocations", [])
            ),
            nearest_public_parkings=tuple(
                NearestPublicParking(
                    id=item["id"],
                    district=item.get("district") or "",
                    location=point(item["location"]),
                    address=item.get("address") or "",
                    distance=item.get("distance"),
                )
                for item in payload.get("nearestPublicParkings", [])
            ),
            circles=tuple(
                CircleCluster(
                    id=item["id"],
                    lat=float(item["lat"]),
                    lng=float(item["lng"]),
                    radius=float(item["radius"]),
                    fill_opacity=item.get("fillOpacity", config.CIRCLE_STYLE["fillOpacity"]),
                    stroke_opacity=item.get("strokeOpacity", config.CIRCLE_STYLE["strokeOpacity"]),
                    stroke_weight=item.get("strokeWeight", config.CIRCLE_STYLE["strokeWeight"]),
                    color=item.get("color", config.CIRCLE_STYLE["color"]),
                )
                for item in payload.get("circles", [])
            ),
            lines=tuple(
                LineSegment(id=item["id"], start=point(item["start"]), end=point(item["end"]))
                for item in payload.get("lines", [])
            ),
        )


@dataclass(frozen=True)
class SourceBundle:
    """Artifact plus the auxiliary public parking records, after both fetches."""

    artifact: ParkingArtifact
    public_parkings: Tuple[Mapping[str, Any], ...] = ()
    failed_sources: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        payload = self.artifact.as_dict()
        payload["publicParkings"] = [dict(record) for record in self.public_parkings]
        return payload


__all__ = [
    "LatLng",
    "LineStyle",
    "LineSegment",
    "MarkerRecord",
    "OptimalLocation",
    "NearestPublicParking",
    "RawCircle",
    "CircleCluster",
    "ParkingArtifact",
    "SourceBundle",
]
