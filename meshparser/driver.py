"""
Command line driver: parse an MSH file and print a summary.

    meshparser mesh.msh [--report out.txt] [--gmsh-numbering] [--verbose]
              [--log-file debug.log]

This is the only place that opens files given by path, configures logging
and writes to the console; `meshparser.io` itself only returns results or
raises.
"""
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from .config import ParserSettings
from .elements import GMSH_ELEMENT_SCHEMA
from .errors import ParseError
from .io import ParseResult, read_msh, validate_result
from .logging_config import setup_logging
from .post import format_summary, write_summary_txt

logger = logging.getLogger(__name__)


def run(filepath: str, report_path: Optional[str] = None,
        gmsh_numbering: bool = False) -> Tuple[ParseResult, List[str]]:
    """
    Parse `filepath`, optionally write the summary report, and run the
    consistency checks.

    Returns:
        (result, validation_errors)
    """
    settings = None
    if gmsh_numbering:
        settings = ParserSettings(element_schema=dict(GMSH_ELEMENT_SCHEMA))

    result = read_msh(filepath, settings)
    is_valid, errors = validate_result(result)
    if not is_valid:
        logger.debug(f"{len(errors)} validation errors in {filepath}")

    if report_path is not None:
        write_summary_txt(report_path, result, title=filepath)
        logger.info(f"Summary written to {report_path}")
    return result, errors


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Read an ASCII MSH 2.x mesh file and print a summary")
    parser.add_argument("path", help="Path to .msh file")
    parser.add_argument("--report", help="Also write the summary to this text file")
    parser.add_argument("--gmsh-numbering", action="store_true",
                        help="Use Gmsh element codes (5=hexahedron, 7=pyramid)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Write a debug log to this file")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        result, errors = run(args.path, args.report, args.gmsh_numbering)
    except (ParseError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_summary(result, title=args.path))
    if errors:
        print("Validation errors:")
        for err in errors:
            print(f"  - {err}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
