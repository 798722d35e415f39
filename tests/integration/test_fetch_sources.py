from __future__ import annotations

from pathlib import Path

import pytest
import requests

from optimal_parking_map.fetch import FetchFailure, SourceLoader, load_sources
from optimal_parking_map.models import ParkingArtifact

ARTIFACT_URL = "https://example.com/predicted_parking_locations_by_sub.html"
PUBLIC_URL = "https://example.com/parking-data.json"


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", payload=None):
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP status: {self.status_code}")

    def json(self):
        if self._payload is None:
            raise ValueError("bad json")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.integration
def test_both_sources_load_over_http(export_text, public_parkings):
    session = FakeSession(
        {
            ARTIFACT_URL: FakeResponse(text=export_text),
            PUBLIC_URL: FakeResponse(payload=public_parkings),
        }
    )

    bundle = load_sources(ARTIFACT_URL, PUBLIC_URL, session=session)

    assert bundle.failed_sources == ()
    assert bundle.artifact.counts()["optimalLocations"] == 3
    assert len(bundle.public_parkings) == 3
    assert sorted(url for url, _ in session.calls) == sorted([ARTIFACT_URL, PUBLIC_URL])
    assert all(timeout is None for _, timeout in session.calls)


@pytest.mark.integration
def test_public_dataset_failure_leaves_artifact_intact(export_text):
    session = FakeSession(
        {
            ARTIFACT_URL: FakeResponse(text=export_text),
            PUBLIC_URL: FakeResponse(status_code=404),
        }
    )

    bundle = load_sources(ARTIFACT_URL, PUBLIC_URL, session=session)

    assert bundle.failed_sources == ("public_parkings",)
    assert bundle.public_parkings == ()
    assert bundle.artifact.counts() == {
        "optimalLocations": 3,
        "nearestPublicParkings": 2,
        "circles": 2,
        "lines": 2,
    }


@pytest.mark.integration
def test_artifact_failure_leaves_public_dataset_intact(public_parkings):
    session = FakeSession(
        {
            ARTIFACT_URL: requests.ConnectionError("connection refused"),
            PUBLIC_URL: FakeResponse(payload=public_parkings),
        }
    )

    bundle = load_sources(ARTIFACT_URL, PUBLIC_URL, session=session)

    assert bundle.failed_sources == ("artifact",)
    assert bundle.artifact == ParkingArtifact.empty()
    assert [record["id"] for record in bundle.public_parkings] == ["public_1", "public_2", "public_3"]


@pytest.mark.integration
def test_both_sources_failing_yields_empty_bundle(tmp_path: Path):
    bundle = load_sources(str(tmp_path / "missing.html"), str(tmp_path / "missing.json"))

    assert bundle.failed_sources == ("artifact", "public_parkings")
    assert bundle.artifact.is_empty()
    assert bundle.public_parkings == ()


@pytest.mark.integration
def test_local_paths_are_read_from_disk(export_path: Path, public_path: Path):
    bundle = load_sources(str(export_path), str(public_path), cluster_mode="connected")

    assert bundle.failed_sources == ()
    assert len(bundle.artifact.circles) == 2
    assert bundle.as_dict()["publicParkings"][0]["address"] == "삼산공영주차장"


def test_non_list_public_payload_is_rejected():
    loader = SourceLoader(session=FakeSession({PUBLIC_URL: FakeResponse(payload={"rows": []})}))

    with pytest.raises(FetchFailure):
        loader.fetch_public_parkings(PUBLIC_URL)


def test_invalid_json_is_a_fetch_failure(tmp_path: Path):
    broken = tmp_path / "parking-data.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(FetchFailure) as excinfo:
        SourceLoader().fetch_public_parkings(str(broken))

    assert excinfo.value.source == str(broken)


def test_http_error_is_a_fetch_failure():
    loader = SourceLoader(session=FakeSession({ARTIFACT_URL: FakeResponse(status_code=500)}))

    with pytest.raises(FetchFailure):
        loader.fetch_text(ARTIFACT_URL)


def _html_response(body: bytes) -> requests.Response:
    # Static hosts often serve text/html with no charset parameter.
    response = requests.Response()
    response.status_code = 200
    response._content = body
    response.headers["Content-Type"] = "text/html"
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    return response


@pytest.mark.integration
def test_http_export_without_charset_is_decoded_as_utf8(export_path: Path, public_parkings):
    session = FakeSession(
        {
            ARTIFACT_URL: _html_response(export_path.read_bytes()),
            PUBLIC_URL: FakeResponse(payload=public_parkings),
        }
    )

    bundle = load_sources(ARTIFACT_URL, PUBLIC_URL, session=session)

    assert bundle.failed_sources == ()
    assert bundle.artifact.counts() == {
        "optimalLocations": 3,
        "nearestPublicParkings": 2,
        "circles": 2,
        "lines": 2,
    }
    assert [record.district for record in bundle.artifact.nearest_public_parkings] == ["남구", "중구"]


@pytest.mark.integration
def test_unreadable_local_path_only_fails_the_artifact(public_path: Path):
    bundle = load_sources("bad\x00path.html", str(public_path))

    assert bundle.failed_sources == ("artifact",)
    assert bundle.artifact == ParkingArtifact.empty()
    assert len(bundle.public_parkings) == 3
