"""Optimal public parking location map data pipeline."""

from .assemble import assemble_artifact, build_artifact
from .classify import classify_markers
from .cli import main as cli_main
from .cluster import cluster_circles
from .extract import extract_circles, extract_lines, extract_markers
from .fetch import FetchFailure, SourceLoader, load_sources
from .models import ParkingArtifact, SourceBundle

__all__ = [
    "cli_main",
    "assemble_artifact",
    "build_artifact",
    "classify_markers",
    "cluster_circles",
    "extract_circles",
    "extract_lines",
    "extract_markers",
    "FetchFailure",
    "SourceLoader",
    "load_sources",
    "ParkingArtifact",
    "SourceBundle",
]
