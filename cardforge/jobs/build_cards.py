"""
Build the compressed card archive from CardDefs.xml.

Parses the catalog for one locale, saves the archive, then loads it back to
verify the round trip.

Usage:
    python -m cardforge.jobs.build_cards --source hsdata/CardDefs.xml --locale enUS
"""

import argparse
import logging
import time
from dataclasses import dataclass
from pathlib import Path

from cardforge.config import settings
from cardforge.models.failure import CardForgeError, FailureKind
from cardforge.parsers.carddefs_xml import parse_carddefs_xml
from cardforge.services.archive import load_cards, save_cards

logger = logging.getLogger(__name__)


class VerificationError(CardForgeError):
    """Raised when the reloaded archive differs from the parsed catalog."""

    def __init__(self, output: Path, parsed: int, loaded: int):
        super().__init__(
            kind=FailureKind.VERIFICATION,
            message=f"Archive {output} does not match the parsed catalog",
            detail=f"parsed {parsed} cards, loaded {loaded}",
        )


@dataclass(frozen=True)
class BuildReport:
    """Counts and timings (seconds) of one build run."""

    parsed: int
    loaded: int | None
    parse_seconds: float
    save_seconds: float
    load_seconds: float | None


def run_build(
    source: Path,
    locale: str,
    output: Path,
    *,
    compression_level: int = 4,
    verify: bool = True,
) -> BuildReport:
    """
    Parse, save and (optionally) reload the card archive.

    Raises:
        CardForgeError: If any stage fails, or verification finds a mismatch
    """
    start = time.perf_counter()
    cards = parse_carddefs_xml(source, locale)
    parse_seconds = time.perf_counter() - start
    logger.info("Finished parsing %d cards from %s in %.2fs", len(cards), source, parse_seconds)

    start = time.perf_counter()
    save_cards(cards, output, compression_level=compression_level)
    save_seconds = time.perf_counter() - start
    logger.info("Saved compressed cards in %.2fs", save_seconds)

    if not verify:
        return BuildReport(
            parsed=len(cards),
            loaded=None,
            parse_seconds=parse_seconds,
            save_seconds=save_seconds,
            load_seconds=None,
        )

    start = time.perf_counter()
    loaded = load_cards(output)
    load_seconds = time.perf_counter() - start
    logger.info("Read %d cards in %.2fs", len(loaded), load_seconds)

    if loaded != cards:
        raise VerificationError(output, len(cards), len(loaded))

    return BuildReport(
        parsed=len(cards),
        loaded=len(loaded),
        parse_seconds=parse_seconds,
        save_seconds=save_seconds,
        load_seconds=load_seconds,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build the compressed card archive")
    parser.add_argument("--source", type=Path, default=settings.source_path)
    parser.add_argument("--locale", default=settings.locale)
    parser.add_argument("--output", type=Path, default=settings.output_path)
    parser.add_argument(
        "--level",
        type=int,
        default=settings.compression_level,
        help="LZ4 compression level (0-16)",
    )
    parser.add_argument(
        "--skip-verify",
        action="store_true",
        help="Do not reload the archive after saving",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_arg_parser().parse_args(argv)

    try:
        report = run_build(
            args.source,
            args.locale,
            args.output,
            compression_level=args.level,
            verify=not args.skip_verify,
        )
    except (CardForgeError, ValueError) as e:
        logger.error("Card archive build failed: %s", e)
        return 1

    logger.info("Parsing took: %.2fs", report.parse_seconds)
    logger.info("Saving took: %.2fs", report.save_seconds)
    if report.load_seconds is not None:
        logger.info("Loading took: %.2fs", report.load_seconds)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
