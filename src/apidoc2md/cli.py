"""Command-line entry point: ``apidoc2md``."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from apidoc2md.config import (
    APIDOC2MD_DRAFT,
    APIDOC2MD_LOG_LEVEL,
    APIDOC2MD_NEWLINE,
    APIDOC2MD_OUTPUT_PATH,
    APIDOC2MD_PROFILE,
)
from apidoc2md.documenter import MarkdownDocumenter
from apidoc2md.exceptions import Apidoc2mdError
from apidoc2md.loader import load_api_model
from apidoc2md.output import NewlineKind
from apidoc2md.profiles import PROFILES, get_profile

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "input"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidoc2md",
        description="Generate Markdown reference pages from api-extractor *.api.json files.",
    )
    parser.add_argument(
        "-i",
        "--input",
        action="append",
        help=f"A *.api.json file, a folder of them, or an http(s) URL; repeat to combine (default: {DEFAULT_INPUT})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=str(APIDOC2MD_OUTPUT_PATH),
        help="Output folder; its contents are deleted first (default: %(default)s)",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        default=APIDOC2MD_PROFILE,
        help="Output conventions (default: %(default)s)",
    )
    parser.add_argument(
        "--draft",
        action="store_true",
        default=APIDOC2MD_DRAFT,
        help="Mark generated pages as drafts in the front matter",
    )
    parser.add_argument(
        "--newline",
        choices=[kind.value for kind in NewlineKind],
        default=APIDOC2MD_NEWLINE,
        help="Line endings of the written files (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else APIDOC2MD_LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        api_model = load_api_model(args.input or [DEFAULT_INPUT])
        documenter = MarkdownDocumenter(
            api_model,
            output_dir=args.output,
            profile=get_profile(args.profile),
            draft=args.draft,
            newline=args.newline,
        )
        documenter.generate_files()
    except Apidoc2mdError as exc:
        logger.error("%s", exc)
        return 1
    return 0
