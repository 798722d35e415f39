from __future__ import annotations

import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def export_path() -> Path:
    return FIXTURES / "predicted_parking_locations_by_sub.html"


@pytest.fixture
def public_path() -> Path:
    return FIXTURES / "parking-data.json"


@pytest.fixture
def export_text(export_path: Path) -> str:
    return export_path.read_text(encoding="utf-8")


@pytest.fixture
def public_parkings(public_path: Path) -> list:
    return json.loads(public_path.read_text(encoding="utf-8"))
