"""Assemble the parking artifact from a map export document."""
from __future__ import annotations

import logging
from typing import Iterable

from . import config
from .classify import classify_markers
from .cluster import cluster_circles
from .extract import extract_circles, extract_lines, extract_markers
from .models import CircleCluster, LineSegment, NearestPublicParking, OptimalLocation, ParkingArtifact

logger = logging.getLogger(__name__)


def assemble_artifact(
    lines: Iterable[LineSegment],
    optimal_locations: Iterable[OptimalLocation],
    nearest_public_parkings: Iterable[NearestPublicParking],
    circles: Iterable[CircleCluster],
) -> ParkingArtifact:
    # Lines are not checked against marker coordinates here; unmatched
    # endpoints are left for the map layer to ignore.
    return ParkingArtifact(
        optimal_locations=tuple(optimal_locations),
        nearest_public_parkings=tuple(nearest_public_parkings),
        circles=tuple(circles),
        lines=tuple(lines),
    )


def build_artifact(
    text: str,
    *,
    cluster_mode: str = "greedy",
    threshold: float = config.MERGE_DISTANCE_THRESHOLD,
) -> ParkingArtifact:
    """Run extraction, classification and clustering over one export document.

    Any string, including an empty one, yields a well-formed artifact.
    """
    text = text or ""
    lines = extract_lines(text)
    optimal, nearest = classify_markers(extract_markers(text))
    circles = cluster_circles(extract_circles(text), threshold=threshold, mode=cluster_mode)

    artifact = assemble_artifact(lines, optimal, nearest, circles)
    logger.info("Built parking artifact: %s", artifact.counts())
    return artifact


__all__ = ["assemble_artifact", "build_artifact"]
