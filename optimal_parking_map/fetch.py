"""Load the map export and the public parking dataset."""
from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Mapping, Optional

import requests

from . import config
from .assemble import build_artifact
from .models import ParkingArtifact, SourceBundle

logger = logging.getLogger(__name__)


class FetchFailure(RuntimeError):
    """A source could not be read or returned an unusable payload."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class SourceLoader:
    """Reads sources from HTTP(S) URLs or local paths."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = config.HTTP_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, url: str) -> requests.Response:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response

    def fetch_text(self, source: str) -> str:
        try:
            if _is_url(source):
                # Decode explicitly: requests assumes ISO-8859-1 for text/* without a charset.
                return self._get(source).content.decode("utf-8")
            return Path(source).read_text(encoding="utf-8")
        except (requests.RequestException, OSError, ValueError) as exc:
            raise FetchFailure(source, str(exc)) from exc

    def fetch_public_parkings(self, source: str) -> List[Mapping[str, Any]]:
        try:
            if _is_url(source):
                data = self._get(source).json()
            else:
                data = json.loads(Path(source).read_text(encoding="utf-8"))
        except (requests.RequestException, OSError, ValueError) as exc:
            raise FetchFailure(source, str(exc)) from exc

        if not isinstance(data, list):
            raise FetchFailure(source, "Unexpected payload for public parking data")
        return data

    def load(
        self,
        artifact_source: str,
        public_source: str,
        *,
        cluster_mode: str = "greedy",
    ) -> SourceBundle:
        """Fetch both sources concurrently and build the artifact.

        Both fetches always run to completion. A failed source only empties
        its own part of the bundle.
        """
        failed: List[str] = []

        with ThreadPoolExecutor(max_workers=2) as pool:
            text_future = pool.submit(self.fetch_text, artifact_source)
            public_future = pool.submit(self.fetch_public_parkings, public_source)
            text_error = text_future.exception()
            public_error = public_future.exception()

        if text_error is None:
            artifact = build_artifact(text_future.result(), cluster_mode=cluster_mode)
        elif isinstance(text_error, FetchFailure):
            logger.warning("Error loading map export, using an empty artifact: %s", text_error)
            artifact = ParkingArtifact.empty()
            failed.append("artifact")
        else:
            raise text_error

        if public_error is None:
            public_parkings = public_future.result()
        elif isinstance(public_error, FetchFailure):
            logger.warning("Error loading public parking data, using an empty list: %s", public_error)
            public_parkings = []
            failed.append("public_parkings")
        else:
            raise public_error

        logger.info(
            "Loaded %s public parkings; artifact counts %s", len(public_parkings), artifact.counts()
        )
        return SourceBundle(
            artifact=artifact,
            public_parkings=tuple(public_parkings),
            failed_sources=tuple(failed),
        )


def load_sources(
    artifact_source: Optional[str] = None,
    public_source: Optional[str] = None,
    *,
    cluster_mode: str = "greedy",
    session: Optional[requests.Session] = None,
) -> SourceBundle:
    loader = SourceLoader(session=session)
    return loader.load(
        artifact_source or config.DEFAULT_ARTIFACT_SOURCE,
        public_source or config.DEFAULT_PUBLIC_PARKING_SOURCE,
        cluster_mode=cluster_mode,
    )


__all__ = ["FetchFailure", "SourceLoader", "load_sources"]
