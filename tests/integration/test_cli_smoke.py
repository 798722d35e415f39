from __future__ import annotations

import json
from pathlib import Path

import pytest

from optimal_parking_map.cli import main, parse_args


@pytest.mark.integration
def test_cli_extract_writes_artifact_and_advisories(export_path: Path, public_path: Path, tmp_path: Path):
    output = tmp_path / "derived" / "parking_artifact.json"
    advisories = tmp_path / "advisories.json"

    exit_code = main(
        [
            "extract",
            "--artifact",
            str(export_path),
            "--public",
            str(public_path),
            "--output",
            str(output),
            "--advisories",
            str(advisories),
            "--tables",
            str(tmp_path / "tables"),
        ]
    )

    assert exit_code == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert len(payload["optimalLocations"]) == 3
    assert payload["nearestPublicParkings"][0]["district"] == "남구"
    assert [item["kind"] for item in json.loads(advisories.read_text(encoding="utf-8"))] == [
        "expand_existing",
        "develop_new",
        "develop_new",
    ]
    assert (tmp_path / "tables" / "circles.parquet").exists()


@pytest.mark.integration
def test_cli_extract_with_missing_sources_still_writes_empty_artifact(tmp_path: Path):
    output = tmp_path / "artifact.json"

    exit_code = main(
        ["extract", "--artifact", str(tmp_path / "nope.html"), "--public", str(tmp_path / "nope.json"), "--output", str(output)]
    )

    assert exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8")) == {
        "optimalLocations": [],
        "nearestPublicParkings": [],
        "circles": [],
        "lines": [],
    }


@pytest.mark.integration
def test_cli_summary_prints_district_counts(export_path: Path, public_path: Path, tmp_path: Path, capsys):
    output = tmp_path / "artifact.json"
    main(["extract", "--artifact", str(export_path), "--public", str(public_path), "--output", str(output)])
    capsys.readouterr()

    exit_code = main(["summary", "--input", str(output)])

    assert exit_code == 0
    printed = capsys.readouterr().out
    assert "울주군" in printed
    assert "optimal_locations" in printed


def test_parse_args_defaults():
    args = parse_args(["extract"])

    assert args.cluster_mode == "greedy"
    assert args.output_path is None
    assert args.verbose is False


def test_parse_args_rejects_unknown_cluster_mode():
    with pytest.raises(SystemExit):
        parse_args(["extract", "--cluster-mode", "kmeans"])
