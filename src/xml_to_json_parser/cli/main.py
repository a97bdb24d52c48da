"""Main CLI entry point for the xml-to-json command-line tool.

Reads a document from disk, converts it, and prints the JSON value. The
conversion core never prints or exits; presenting errors is done here.
"""

import argparse
import sys
import textwrap
from pathlib import Path
from typing import List, Optional

from xml_to_json_parser import __version__
from xml_to_json_parser.api import XMLToJSONParser
from xml_to_json_parser.shared import (
    ConfigError,
    ParserConfig,
    XMLToJSONError,
    configure_logging,
    get_logger,
)

INSTRUCTION_TEXT = textwrap.dedent("""\
    Welcome to xml-to-json!

    To use this parser you need a file with XML content in .txt or .xml format.
    Make sure the content is valid: every element needs a matching close tag,
    tag and attribute names start with a letter, and attribute values are
    enclosed in double quotes.

    Run:  xml-to-json parse your_file.xml
    The converted JSON is printed to standard output. Use --output to write it
    to a file instead, and --indent or --compact to control formatting.
""")

CREDITS_TEXT = textwrap.dedent(f"""\
    xml-to-json {__version__}
    Author: XML to JSON Parser Team
""")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-to-json",
        description="Convert simplified XML documents into JSON"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Convert an XML file to JSON")
    parse_parser.add_argument(
        "file",
        type=Path,
        help="XML file to convert"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    formatting = parse_parser.add_mutually_exclusive_group()
    formatting.add_argument(
        "--indent",
        type=int,
        help="JSON indentation (default: 2)"
    )
    formatting.add_argument(
        "--compact",
        action="store_true",
        help="Print JSON on a single line"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parse_parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum element nesting depth"
    )
    parse_parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Report dropped text and overwritten keys on stderr"
    )

    subparsers.add_parser("instruction", help="Show usage instructions")
    subparsers.add_parser("credits", help="Show credits")

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from a config file and CLI overrides."""
    config = ParserConfig.from_file(args.config) if args.config else ParserConfig()

    overrides = {}
    if args.max_depth is not None:
        overrides["grammar__max_nesting_depth"] = args.max_depth
    if args.compact:
        overrides["output__indent"] = None
    elif args.indent is not None:
        overrides["output__indent"] = args.indent

    return config.override(**overrides) if overrides else config


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    logger = get_logger(__name__, None, "cli")

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not (args.verbose or args.quiet):
        configure_logging(config.global_.logging_level)

    parser = XMLToJSONParser(config)

    try:
        content = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading file {args.file}: {e}", file=sys.stderr)
        return 1

    try:
        result = parser.parse(content)
    except XMLToJSONError as e:
        logger.debug("Conversion failed", extra={"file_path": str(args.file)})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.diagnostics:
        for diagnostic in result.diagnostics:
            print(
                f"{diagnostic.severity.name}: {diagnostic.message}",
                file=sys.stderr
            )

    formatted_output = parser.to_json(result.value)

    if args.output:
        try:
            args.output.write_text(formatted_output + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    return 0


def cmd_instruction(args: argparse.Namespace) -> int:
    """Handle instruction command."""
    print(INSTRUCTION_TEXT)
    return 0


def cmd_credits(args: argparse.Namespace) -> int:
    """Handle credits command."""
    print(CREDITS_TEXT)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    handlers = {
        "parse": cmd_parse,
        "instruction": cmd_instruction,
        "credits": cmd_credits,
    }

    try:
        return handlers[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
