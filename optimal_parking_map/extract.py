"""Statement grammars for the folium/Leaflet map export.

The export is an HTML page whose script block declares every overlay as a
``var <kind>_<hash> = L.<factory>(...)`` statement. Three statement shapes are
recognised, each by its own grammar:

* ``L.polyline([[lat, lng], [lat, lng]], {...})`` -> :class:`LineSegment`
* ``L.marker([lat, lng], ...)`` followed by a popup ``<div>`` -> :class:`MarkerRecord`
* ``L.circleMarker([lat, lng], {... "radius": r ...})`` -> :class:`RawCircle`

Anything else in the page is ignored. A statement that does not fit its grammar
produces no record at all; extraction never raises.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from bs4 import BeautifulSoup

from . import config
from .models import LatLng, LineSegment, LineStyle, MarkerRecord, RawCircle

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

_NUMBER = r"-?\d+(?:\.\d+)?"


def _point(prefix: str = "") -> str:
    return rf"\[\s*(?P<{prefix}lat>{_NUMBER})\s*,\s*(?P<{prefix}lng>{_NUMBER})\s*\]"


LINE_PATTERN = re.compile(
    r"var\s+poly_line_[^=]+=\s*L\.polyline\(\s*"
    rf"\[\s*{_point('start_')}\s*,\s*{_point('end_')}\s*\]\s*,\s*"
    r"(?P<style>\{[^}]+\})"
)

# The payload is the first <div> after the point, as long as no other marker
# statement starts in between.
MARKER_PATTERN = re.compile(
    rf"var\s+marker_[^=]+=\s*L\.marker\(\s*{_point()}"
    r"(?:(?!var\s+marker_)[^>])*>(?P<payload>.*?)</div>",
    re.DOTALL,
)

CIRCLE_PATTERN = re.compile(
    rf"var\s+circle_marker_[^=]+=\s*L\.circleMarker\(\s*{_point()}"
    r"[^}]*\"radius\"\s*:\s*(?P<radius>\d+(?:\.\d*)?)[^}]*\}"
)


@dataclass(frozen=True)
class StatementGrammar(Generic[RecordT]):
    """One statement shape: a pattern plus the builder for its record."""

    name: str
    pattern: "re.Pattern[str]"
    build: Callable[["re.Match[str]", int], Optional[RecordT]]

    def scan(self, text: str) -> Iterator[RecordT]:
        """Yield records in source order; ``build`` gets the 1-based record number."""
        produced = 0
        for match in self.pattern.finditer(text or ""):
            record = self.build(match, produced + 1)
            if record is None:
                continue
            produced += 1
            yield record

    def extract(self, text: str) -> List[RecordT]:
        records = list(self.scan(text))
        logger.debug("Extracted %s %s statements", len(records), self.name)
        return records


def strip_markup(payload: str) -> str:
    """Return the visible text of an HTML fragment."""
    if not payload:
        return ""
    return BeautifulSoup(payload, "html.parser").get_text(" ", strip=True)


def _build_line(match: "re.Match[str]", number: int) -> LineSegment:
    # Source styling is dropped; every connector gets the canonical style.
    return LineSegment(
        id=f"line_{number}",
        start=LatLng(float(match.group("start_lat")), float(match.group("start_lng"))),
        end=LatLng(float(match.group("end_lat")), float(match.group("end_lng"))),
        style=LineStyle(),
    )


def _build_marker(match: "re.Match[str]", number: int) -> MarkerRecord:
    return MarkerRecord(
        lat=float(match.group("lat")),
        lng=float(match.group("lng")),
        popup_text=strip_markup(match.group("payload")),
    )


def _build_circle(match: "re.Match[str]", number: int) -> RawCircle:
    return RawCircle(
        lat=float(match.group("lat")),
        lng=float(match.group("lng")),
        radius=float(match.group("radius")) * config.CIRCLE_RADIUS_SCALE,
    )


LINE_GRAMMAR: StatementGrammar[LineSegment] = StatementGrammar("line", LINE_PATTERN, _build_line)
MARKER_GRAMMAR: StatementGrammar[MarkerRecord] = StatementGrammar("marker", MARKER_PATTERN, _build_marker)
CIRCLE_GRAMMAR: StatementGrammar[RawCircle] = StatementGrammar("circle marker", CIRCLE_PATTERN, _build_circle)


def extract_lines(text: str) -> List[LineSegment]:
    return LINE_GRAMMAR.extract(text)


def extract_markers(text: str) -> List[MarkerRecord]:
    return MARKER_GRAMMAR.extract(text)


def extract_circles(text: str) -> List[RawCircle]:
    return CIRCLE_GRAMMAR.extract(text)


__all__ = [
    "StatementGrammar",
    "LINE_GRAMMAR",
    "MARKER_GRAMMAR",
    "CIRCLE_GRAMMAR",
    "extract_lines",
    "extract_markers",
    "extract_circles",
    "strip_markup",
]
