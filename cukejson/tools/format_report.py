#!/usr/bin/env python3
"""Format a Cucumber Messages file as a legacy Cucumber JSON report.

Usage:
    cukejson messages.ndjson reports/cucumber.json
    cukejson messages.json reports/cucumber.json --check-output --indent 2
    cukejson messages.json reports/cucumber.json --schema custom.schema.json

Exit Codes:
    0   Report written
    1   Schema validation failed (nothing written)
    2   Fatal error: missing/duplicate gherkinDocument, unreadable input,
        unwritable output, bad schema (nothing written)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cukejson.config.runtime_config import get_log_level
from cukejson.runtime.errors import FormatterError, SchemaViolationError
from cukejson.runtime.formatter import convert_file

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_FATAL_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cukejson",
        description="Convert Cucumber Messages into a legacy Cucumber JSON report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", type=Path, help="Messages file (JSON array or NDJSON)")
    parser.add_argument("output", type=Path, help="Destination for the JSON report")
    parser.add_argument(
        "--check-output",
        action="store_true",
        default=None,
        help="Also validate the assembled report against the report schema",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print the report with this indent (default: compact)",
    )
    parser.add_argument(
        "--schema",
        default=None,
        help="Alternate schema for the input batch (bundled name or path)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else getattr(logging, get_log_level()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = convert_file(
            args.source,
            args.output,
            input_schema=args.schema,
            check_output=args.check_output,
            indent=args.indent,
        )
    except SchemaViolationError as e:
        logger.error("%s", e)
        return EXIT_VALIDATION_FAILED
    except (FormatterError, OSError) as e:
        logger.error("Formatting failed: %s", e)
        return EXIT_FATAL_ERROR

    if result.decode_failures:
        logger.warning(
            "Report written with %d undecodable records skipped", len(result.decode_failures)
        )
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
