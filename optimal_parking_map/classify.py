"""Split map markers into optimal locations and nearest public parkings."""
from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from . import config
from .models import LatLng, MarkerRecord, NearestPublicParking, OptimalLocation

logger = logging.getLogger(__name__)

# Reads the leading number of the figure, so "123.m" is 123 and "1.2.3m" is 1.2.
DISTANCE_PATTERN = re.compile(r"거리:\s*(\d+\.?\d*|\.\d+)[\d.]*m")
DISTRICT_PATTERN = re.compile(r"[가-힣]+(?:구|군)")


@dataclass
class _PendingOptimal:
    location: OptimalLocation
    # Index of the nearest-parking record classified just before this one.
    paired_nearest: Optional[int]


def is_nearest_parking(popup_text: str) -> bool:
    return config.NEAREST_PARKING_PHRASE in popup_text


def parse_distance(popup_text: str) -> Optional[float]:
    """Return the ``거리: 123.4m`` figure in metres, or None."""
    match = DISTANCE_PATTERN.search(popup_text)
    if not match:
        return None
    return float(match.group(1))


def parse_district(popup_text: str) -> str:
    match = DISTRICT_PATTERN.search(popup_text)
    return match.group(0) if match else ""


def rewrite_address(popup_text: str) -> str:
    return popup_text.replace(config.PLACEHOLDER_WORD, config.REPLACEMENT_WORD)


def classify_markers(
    markers: Iterable[MarkerRecord],
) -> Tuple[List[OptimalLocation], List[NearestPublicParking]]:
    """Classify markers in source order.

    A nearest-parking marker always precedes the optimal location it serves,
    so every optimal location is paired with the most recent nearest-parking
    record seen before it. Once all markers are classified, each pairing hands
    its district to the nearest-parking record if that record has none yet.
    Markers without the nearest-parking phrase are optimal locations.
    """
    pending: List[_PendingOptimal] = []
    nearest: List[NearestPublicParking] = []

    for marker in markers:
        point = LatLng(marker.lat, marker.lng)
        if is_nearest_parking(marker.popup_text):
            nearest.append(
                NearestPublicParking(
                    id=f"private_{len(nearest) + 1}",
                    district="",
                    location=point,
                    address=marker.popup_text.strip(),
                    distance=parse_distance(marker.popup_text),
                )
            )
            continue

        pending.append(
            _PendingOptimal(
                location=OptimalLocation(
                    id=f"optimal_{len(pending) + 1}",
                    district=parse_district(marker.popup_text),
                    location=point,
                    address=rewrite_address(marker.popup_text),
                ),
                paired_nearest=len(nearest) - 1 if nearest else None,
            )
        )

    for item in pending:
        index = item.paired_nearest
        if index is None or nearest[index].district:
            continue
        nearest[index] = dataclasses.replace(nearest[index], district=item.location.district)

    optimal = [item.location for item in pending]
    logger.debug("Classified %s optimal locations and %s nearest public parkings", len(optimal), len(nearest))
    return optimal, nearest


__all__ = [
    "classify_markers",
    "is_nearest_parking",
    "parse_distance",
    "parse_district",
    "rewrite_address",
]
