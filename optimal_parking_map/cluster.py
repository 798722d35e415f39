"""Merge nearby enforcement hotspot circles."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from . import config
from .models import CircleCluster, RawCircle

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    lat: float
    lng: float
    radius: float

    def absorb(self, circle: RawCircle) -> None:
        total = self.radius + circle.radius
        if total == 0:
            # Two zero-radius circles: plain midpoint.
            self.lat = (self.lat + circle.lat) / 2
            self.lng = (self.lng + circle.lng) / 2
            return
        self.lat = (self.lat * self.radius + circle.lat * circle.radius) / total
        self.lng = (self.lng * self.radius + circle.lng * circle.radius) / total
        self.radius = total


def planar_distance(lat_a: float, lng_a: float, lat_b: float, lng_b: float) -> float:
    """Euclidean distance in degrees; fine at city scale."""
    return math.sqrt((lat_a - lat_b) ** 2 + (lng_a - lng_b) ** 2)


def _greedy(circles: Iterable[RawCircle], threshold: float) -> List[_Accumulator]:
    # First cluster within range wins and the merge is never revisited, so the
    # result depends on arrival order once three or more circles are close.
    clusters: List[_Accumulator] = []
    for circle in circles:
        for existing in clusters:
            if planar_distance(circle.lat, circle.lng, existing.lat, existing.lng) < threshold:
                existing.absorb(circle)
                break
        else:
            clusters.append(_Accumulator(circle.lat, circle.lng, circle.radius))
    return clusters


class _DisjointSet:
    def __init__(self, size: int) -> None:
        self.parent = list(range(size))

    def find(self, index: int) -> int:
        while self.parent[index] != index:
            self.parent[index] = self.parent[self.parent[index]]
            index = self.parent[index]
        return index

    def union(self, left: int, right: int) -> None:
        root_left, root_right = self.find(left), self.find(right)
        if root_left == root_right:
            return
        # Smaller index stays root so components are keyed by first arrival.
        if root_right < root_left:
            root_left, root_right = root_right, root_left
        self.parent[root_right] = root_left


def _connected(circles: Sequence[RawCircle], threshold: float) -> List[_Accumulator]:
    """Union every pair of raw circles closer than ``threshold``."""
    sets = _DisjointSet(len(circles))
    for i, left in enumerate(circles):
        for j in range(i + 1, len(circles)):
            right = circles[j]
            if planar_distance(left.lat, left.lng, right.lat, right.lng) < threshold:
                sets.union(i, j)

    members: Dict[int, List[RawCircle]] = {}
    for index, circle in enumerate(circles):
        members.setdefault(sets.find(index), []).append(circle)

    clusters: List[_Accumulator] = []
    for root in sorted(members):
        # Sum in coordinate order so the centroid is independent of input order.
        group = sorted(members[root], key=lambda c: (c.lat, c.lng, c.radius))
        total = math.fsum(c.radius for c in group)
        if total == 0:
            clusters.append(_Accumulator(group[0].lat, group[0].lng, 0.0))
            continue
        clusters.append(
            _Accumulator(
                lat=math.fsum(c.lat * c.radius for c in group) / total,
                lng=math.fsum(c.lng * c.radius for c in group) / total,
                radius=total,
            )
        )
    return clusters


def cluster_circles(
    circles: Iterable[RawCircle],
    *,
    threshold: float = config.MERGE_DISTANCE_THRESHOLD,
    mode: str = "greedy",
) -> List[CircleCluster]:
    """Reduce raw circles to merged clusters with ids ``circle_1``, ``circle_2``, ...

    ``greedy`` merges each circle into the first existing cluster whose running
    centroid lies within ``threshold`` (radius-weighted centroid, summed radius).
    ``connected`` merges whole connected components of the within-threshold
    graph over the raw circles, which does not depend on input order.
    """
    if mode == "greedy":
        merged = _greedy(circles, threshold)
    elif mode == "connected":
        merged = _connected(list(circles), threshold)
    else:
        raise ValueError(f"Unsupported cluster mode: {mode}")

    logger.debug("Merged circles into %s clusters (%s mode)", len(merged), mode)
    return [
        CircleCluster(id=f"circle_{index}", lat=item.lat, lng=item.lng, radius=item.radius)
        for index, item in enumerate(merged, start=1)
    ]


__all__ = ["cluster_circles", "planar_distance"]
