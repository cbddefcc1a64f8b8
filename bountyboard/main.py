from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config.settings import settings
from .details.enricher import run_enrich
from .errors import PipelineError
from .posters.dedupe import run_dedupe
from .posters.downloader import run_download
from .utils.logger import get_logger, setup_logging

log = get_logger("main")


# ---------------------------------------------------------------------
# STAGES
# ---------------------------------------------------------------------


def run_stage1_download() -> None:
    log.info("Discovering and downloading posters")
    stats = run_download()
    log.info(f"✅ Download complete | failed={stats.failed}")


def run_stage2_dedupe() -> None:
    log.info(f"Deduplicating {settings.manifest_file}")
    stats = run_dedupe()
    log.info(f"✅ Dedupe complete | removed={stats.duplicates}")


def run_stage3_enrich() -> None:
    log.info(f"Enriching posters from {settings.api_url}")
    stats = run_enrich()
    log.info(f"✅ Enrich complete | with_fields={stats.with_fields}")


# ---------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bountyboard")

    parser.add_argument(
        "--download",
        action="store_true",
        help="Stage 1: discover the poster category and download missing images",
    )

    parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Stage 2: drop byte-identical posters from the manifest",
    )

    parser.add_argument(
        "--enrich",
        action="store_true",
        help="Stage 3: extract character details from wiki infoboxes",
    )

    parser.add_argument(
        "--all",
        action="store_true",
        help="Run all stages in order",
    )

    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default from LOG_LEVEL)",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    stages = []
    if args.download or args.all:
        stages.append(run_stage1_download)
    if args.dedupe or args.all:
        stages.append(run_stage2_dedupe)
    if args.enrich or args.all:
        stages.append(run_stage3_enrich)

    if not stages:
        parser.print_help()
        return 0

    try:
        for stage in stages:
            stage()
    except PipelineError as e:
        log.error(f"❌ {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
