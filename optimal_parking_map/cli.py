"""Command line interface for the optimal parking map pipeline."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from . import config
from .advisory import build_advisories
from .fetch import load_sources
from .transform import read_artifact, summarize_by_district, write_artifact, write_summary, write_tables

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Optimal public parking location map pipeline")
    parser.add_argument("command", choices=["extract", "summary"], help="Pipeline stage to execute")
    parser.add_argument("--artifact", dest="artifact_source", default=config.DEFAULT_ARTIFACT_SOURCE, help="Map export HTML (URL or path)")
    parser.add_argument("--public", dest="public_source", default=config.DEFAULT_PUBLIC_PARKING_SOURCE, help="Public parking JSON (URL or path)")
    parser.add_argument("--cluster-mode", dest="cluster_mode", choices=config.CLUSTER_MODES, default="greedy", help="How hotspot circles are merged")
    parser.add_argument("--output", dest="output_path", default=None, help="Output path for the generated dataset")
    parser.add_argument("--input", dest="input_path", default=None, help="Artifact JSON to read when running the summary stage")
    parser.add_argument("--tables", dest="tables_dir", default=None, help="Optional directory for parquet tables")
    parser.add_argument("--advisories", dest="advisories_path", default=None, help="Optional path to write optimal location advisories (JSON)")
    parser.add_argument("--verbose", dest="verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "extract":
        bundle = load_sources(args.artifact_source, args.public_source, cluster_mode=args.cluster_mode)
        write_artifact(bundle.artifact, args.output_path)
        if args.tables_dir:
            write_tables(bundle.artifact, args.tables_dir)
        if args.advisories_path:
            advisories = build_advisories(bundle.artifact, bundle.public_parkings)
            with open(args.advisories_path, "w", encoding="utf-8") as handle:
                json.dump([item.as_dict() for item in advisories.values()], handle, ensure_ascii=False, indent=2)
        if bundle.failed_sources:
            logger.warning("Degraded sources: %s", ", ".join(bundle.failed_sources))
        return 0

    if args.command == "summary":
        artifact = read_artifact(args.input_path or config.DERIVED_DATA_DIR / "parking_artifact.json")
        if args.output_path:
            write_summary(artifact, args.output_path)
        else:
            print(summarize_by_district(artifact).to_string(index=False))
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
