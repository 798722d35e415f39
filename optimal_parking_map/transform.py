"""Tabular views and writers for the parking artifact."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List

import pandas as pd

from . import config
from .advisory import coordinates_match
from .models import LineSegment, OptimalLocation, ParkingArtifact

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    records_output: int
    output_path: Path


OPTIMAL_COLUMNS = ["id", "district", "address", "lat", "lng"]
NEAREST_COLUMNS = ["id", "district", "address", "distance", "lat", "lng"]
CIRCLE_COLUMNS = ["id", "lat", "lng", "radius", "fillOpacity", "strokeOpacity", "strokeWeight", "color"]
LINE_COLUMNS = ["id", "start_lat", "start_lng", "end_lat", "end_lng", "color", "weight", "opacity", "dashArray"]

SUMMARY_COLUMNS = ["district", "optimal_locations", "nearest_public_parkings", "lines", "mean_distance"]


def artifact_frames(artifact: ParkingArtifact) -> Dict[str, pd.DataFrame]:
    """Flatten each artifact list into a DataFrame with fixed columns."""
    optimal = pd.DataFrame(
        [
            [item.id, item.district, item.address, item.location.lat, item.location.lng]
            for item in artifact.optimal_locations
        ],
        columns=OPTIMAL_COLUMNS,
    )
    nearest = pd.DataFrame(
        [
            [item.id, item.district, item.address, item.distance, item.location.lat, item.location.lng]
            for item in artifact.nearest_public_parkings
        ],
        columns=NEAREST_COLUMNS,
    )
    nearest["distance"] = pd.to_numeric(nearest["distance"], errors="coerce").astype("float64")
    circles = pd.DataFrame(
        [
            [
                item.id,
                item.lat,
                item.lng,
                item.radius,
                item.fill_opacity,
                item.stroke_opacity,
                item.stroke_weight,
                item.color,
            ]
            for item in artifact.circles
        ],
        columns=CIRCLE_COLUMNS,
    )
    lines = pd.DataFrame(
        [
            [
                item.id,
                item.start.lat,
                item.start.lng,
                item.end.lat,
                item.end.lng,
                item.style.color,
                item.style.weight,
                item.style.opacity,
                item.style.dash_array,
            ]
            for item in artifact.lines
        ],
        columns=LINE_COLUMNS,
    )
    return {"optimal": optimal, "nearest": nearest, "circles": circles, "lines": lines}


def _district_label(district: str) -> str:
    return district or config.UNKNOWN_DISTRICT


def _line_district(line: LineSegment, optimal_locations: Iterable[OptimalLocation]) -> str:
    for optimal in optimal_locations:
        if coordinates_match(
            line.start.lat,
            line.start.lng,
            optimal.location.lat,
            optimal.location.lng,
            config.LINE_FILTER_EPSILON,
        ):
            return _district_label(optimal.district)
    return config.UNKNOWN_DISTRICT


def summarize_by_district(artifact: ParkingArtifact) -> pd.DataFrame:
    """Count records per district; lines count toward the district of their start."""
    frames = artifact_frames(artifact)
    optimal_labels = frames["optimal"]["district"].map(_district_label)
    nearest = frames["nearest"].assign(district=frames["nearest"]["district"].map(_district_label))
    line_labels = pd.Series(
        [_line_district(line, artifact.optimal_locations) for line in artifact.lines], dtype="object"
    )

    districts: List[str] = sorted(set(optimal_labels) | set(nearest["district"]) | set(line_labels))
    if not districts:
        logger.warning("Artifact is empty. Returning an empty district summary.")
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    summary = pd.DataFrame({"district": districts})
    summary["optimal_locations"] = summary["district"].map(optimal_labels.value_counts()).fillna(0).astype(int)
    summary["nearest_public_parkings"] = (
        summary["district"].map(nearest["district"].value_counts()).fillna(0).astype(int)
    )
    summary["lines"] = summary["district"].map(line_labels.value_counts()).fillna(0).astype(int)
    summary["mean_distance"] = summary["district"].map(nearest.groupby("district")["distance"].mean())
    return summary[SUMMARY_COLUMNS]


def write_artifact(artifact: ParkingArtifact, output_path: Path | str | None = None) -> ExportResult:
    output_path = Path(output_path) if output_path else config.DERIVED_DATA_DIR / "parking_artifact.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(artifact.to_json(), encoding="utf-8")

    records = sum(artifact.counts().values())
    logger.info("Wrote parking artifact to %s (%s records)", output_path, records)
    return ExportResult(records_output=records, output_path=output_path)


def read_artifact(path: Path | str) -> ParkingArtifact:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return ParkingArtifact.from_dict(payload)


def write_tables(artifact: ParkingArtifact, output_dir: Path | str | None = None) -> List[ExportResult]:
    output_dir = Path(output_dir) if output_dir else config.DERIVED_DATA_DIR
    output_dir.mkdir(parents=True, exist_ok=True)

    results: List[ExportResult] = []
    for name, frame in artifact_frames(artifact).items():
        path = output_dir / f"{name}.parquet"
        frame.to_parquet(path, index=False)
        logger.info("Wrote %s table to %s (%s rows)", name, path, len(frame))
        results.append(ExportResult(records_output=len(frame), output_path=path))
    return results


def write_summary(artifact: ParkingArtifact, output_path: Path | str | None = None) -> ExportResult:
    summary_path = Path(output_path) if output_path else config.DERIVED_DATA_DIR / "district_summary.parquet"
    summary_path.parent.mkdir(parents=True, exist_ok=True)

    summary = summarize_by_district(artifact)
    summary.to_parquet(summary_path, index=False)
    logger.info("Wrote district summary to %s (%s rows)", summary_path, len(summary))
    return ExportResult(records_output=len(summary), output_path=summary_path)


__all__ = [
    "ExportResult",
    "artifact_frames",
    "summarize_by_district",
    "write_artifact",
    "read_artifact",
    "write_tables",
    "write_summary",
]
