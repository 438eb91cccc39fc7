"""
DESCENT CLI Entrypoint.

Command-line front end for the DESCENT syntax analyser: reads a source file
(or an inline string), lexes and parses it, and reports whether it is
grammatical.

Features:
    - Read source from a file or an inline string.
    - Optionally print the derivation as an indented outline.
    - On a syntax error, print the full error trail from the statement part
      down to the offending token.

Example usage:
    descent program.txt
    descent -s "begin x := 1 end" --trace
    descent program.txt --verbose

Exit status:
    0 if the input is accepted, 1 on a syntax error, 2 on usage errors.

Functions:
    run_descent(source: str, is_string: bool = False, trace: bool = False) -> bool:
        Executes the pipeline (read → lex → parse → report).

    main() -> None:
        Parses CLI arguments and exits with the status of `run_descent`.
"""

import argparse
import logging
import sys

from descent.descent_errors import LexError, ParseError
from descent.descent_events import DerivationPrinter, EventSink
from descent.descent_lexer import CharacterStream, Lexer
from descent.descent_parser import DEFAULT_MAX_DEPTH, Parser

logger = logging.getLogger(__name__)


def run_descent(source: str, is_string: bool = False, trace: bool = False) -> bool:
    """
    Run the DESCENT toolchain: read, lex, parse, and report the outcome.

    Args:
        source (str): Path to a source file, or the raw code when `is_string` is set.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        trace (bool): If True, prints the derivation while parsing.

    Returns:
        bool: True if the input is accepted.

    Raises:
        OSError: If the source file cannot be read.

    Side Effects:
        Prints the trace and result to stdout, and any error trail to stderr.
    """
    # 1. Read source
    if is_string:
        label = "<string>"
    else:
        label = source
        with open(source, encoding="utf-8") as f:
            source = f.read()
    logger.info("parsing %s (%d characters)", label, len(source))

    # 2. Lex and parse
    sink = DerivationPrinter(filename=label) if trace else EventSink(filename=label)
    # at most four nested handler calls per source character, e.g. "(("
    max_depth = max(DEFAULT_MAX_DEPTH, 4 * len(source))
    try:
        Parser(Lexer(CharacterStream(source)), sink, max_depth=max_depth).parse()
    except ParseError as err:
        print(f"Syntax error in {label}:", file=sys.stderr)
        for depth, message in enumerate(err.trail()):
            print("  " * (depth + 1) + message, file=sys.stderr)
        return False
    except LexError as err:
        print(f"Lexical error in {label}: {err}", file=sys.stderr)
        return False
    except RecursionError:
        print(f"Nesting too deep in {label}: recursion limit exceeded", file=sys.stderr)
        return False

    # 3. Report
    print(f"{label} parsed successfully")
    return True


def main() -> None:
    """
    Entry point for the DESCENT CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-t`, `--trace`: Print the derivation while parsing.
        - `-v`, `--verbose`: Log lexer/parser activity at DEBUG level.
    """
    parser = argparse.ArgumentParser(
        prog="descent", description="LL(1) syntax checker for DESCENT programs"
    )
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-t", "--trace", action="store_true", help="Print the derivation outline"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    accepted = run_descent(source=args.source, is_string=args.string, trace=args.trace)
    sys.exit(0 if accepted else 1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
