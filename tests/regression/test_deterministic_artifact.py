from __future__ import annotations

from pathlib import Path

import pytest

from optimal_parking_map.assemble import build_artifact
from optimal_parking_map.cli import main


def _extract(export_path: Path, public_path: Path, output: Path) -> bytes:
    assert main(["extract", "--artifact", str(export_path), "--public", str(public_path), "--output", str(output)]) == 0
    return output.read_bytes()


@pytest.mark.regression
def test_artifact_json_is_byte_stable_for_same_inputs(export_path: Path, public_path: Path, tmp_path: Path):
    first = _extract(export_path, public_path, tmp_path / "first.json")
    second = _extract(export_path, public_path, tmp_path / "second.json")

    assert first == second


@pytest.mark.regression
def test_sample_artifact_snapshot(export_text):
    payload = build_artifact(export_text).as_dict()

    assert payload["optimalLocations"][2] == {
        "id": "optimal_3",
        "district": "울주군",
        "location": {"lat": 35.5212, "lng": 129.2401},
        "address": "울주군 예측입지 3",
    }
    assert payload["nearestPublicParkings"][1] == {
        "id": "private_2",
        "district": "중구",
        "location": {"lat": 35.5702, "lng": 129.3601},
        "address": "가장 가까운 기존 주차장: 중앙공영주차장 (거리: 850.0m)",
        "distance": 850.0,
    }
    assert payload["lines"][1] == {
        "id": "line_2",
        "start": {"lat": 35.5688, "lng": 129.3555},
        "end": {"lat": 35.5702, "lng": 129.3601},
        "style": {"color": "#6B46C1", "weight": 3.5, "opacity": 1, "dashArray": "10, 5"},
    }
    assert payload["circles"][1] == {
        "id": "circle_2",
        "lat": 35.6,
        "lng": 129.4,
        "radius": 150.0,
        "fillOpacity": 0.25,
        "strokeOpacity": 0.8,
        "strokeWeight": 1,
        "color": "#FF0000",
    }
