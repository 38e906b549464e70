"""Command-line entry point: parse a markdown analysis file and print PhaseData JSON."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from analysis_parser.classifier import classify_and_enhance
from analysis_parser.tiers import AnalysisTier, parse_analysis, part_count

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _read_citations(path: str | None) -> list[str]:
    """Citations file: a JSON list of URLs, or one URL per line."""
    if not path:
        return []
    text = Path(path).read_text(encoding="utf-8").strip()
    if text.startswith("["):
        return [str(url) for url in json.loads(text)]
    return [line.strip() for line in text.splitlines() if line.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Classify an LLM-authored markdown analysis into typed sections")
    parser.add_argument("tier", choices=[tier.value for tier in AnalysisTier], help="Analysis tier (1, 2, or 6 parts)")
    parser.add_argument("file", help="Markdown file to parse, or '-' for stdin")
    parser.add_argument("--part", type=int, default=0, help="0-based part index within the tier (default: 0)")
    parser.add_argument("--citations", help="File with citation URLs (JSON list or one per line)")
    parser.add_argument("--classify", action="store_true", help="Refine section types with the secondary classifier")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse one document and print the resulting PhaseData as camelCase JSON."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    markdown = _read_text(args.file)
    if not 0 <= args.part < part_count(args.tier):
        logger.warning("Part %d is out of range for %s; clamping", args.part, args.tier)

    phase = parse_analysis(args.tier, markdown, args.part, _read_citations(args.citations))
    logger.info("Parsed %d section(s): %s", len(phase.sections), ", ".join(s.type.value for s in phase.sections))

    if args.classify:
        phase = asyncio.run(classify_and_enhance(phase, markdown))

    print(json.dumps(phase.model_dump(mode="json", by_alias=True, exclude_none=True), indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
