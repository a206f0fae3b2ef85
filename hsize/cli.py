"""
Command line interface: convert between byte counts and human-readable sizes.

Usage:
    hsize 1073741824                # 1 GiB
    hsize "1.5 GB" --to-bytes       # 1610612736
    hsize 1000000000 -s si          # 1 GB
    hsize compare "1 GB" "500 MB"   # 1 GiB > 500 MiB
    echo "File: 1.5GB" | hsize -e   # 1.5 GiB

Exit codes: 0 on success, 1 on any failure with the error written to stderr.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import argparse
import math
import re
import sys
from typing import Sequence, TextIO

# Local ----------------------------------------------------------------------------------------------------------------
from .display import FormatSpec, format_size
from .extract import extract_sizes
from .parsing import parse_size
from .units import UnitSystem

VERSION = "1.0.0"

_INTEGER = re.compile(r"^[+-]?\d+$")


class CliError(Exception):
    """Reported on stderr with exit code 1."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


# Methods --------------------------------------------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="hsize",
        description="Convert between bytes and human-readable sizes",
        epilog='Use "hsize compare <a> <b>" to compare two sizes.',
    )
    parser.add_argument("values", nargs="*", help="Byte count or size string; 'compare A B' compares two sizes")
    parser.add_argument("-b", "--to-bytes", action="store_true", help="Output raw bytes instead of human-readable")
    parser.add_argument(
        "-s", "--system", default=UnitSystem.IEC.value, choices=[s.value for s in UnitSystem],
        help="Unit system (default: iec)"
    )
    parser.add_argument("-d", "--decimals", type=_non_negative_int, default=2,
                        help="Number of decimal places (default: 2)")
    parser.add_argument("-e", "--extract", action="store_true", help="Extract byte values from stdin")
    parser.add_argument("--bits", action="store_true", help="Format output as bits instead of bytes")
    parser.add_argument("-v", "--version", action="version", version=f"hsize v{VERSION}")
    return parser


def main(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None) -> int:
    """
    Run the CLI and return the process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    spec = FormatSpec(system=args.system, decimals=args.decimals, bits=args.bits)

    try:
        if args.extract:
            lines = _extract(stdin or sys.stdin, spec)
        elif args.values and args.values[0] == "compare":
            lines = [_compare(args.values[1:], spec)]
        elif not args.values:
            raise CliError("No value provided. Use --help for usage.")
        elif args.to_bytes:
            lines = [_to_bytes(" ".join(args.values))]
        else:
            lines = [_format(" ".join(args.values), spec)]
    except CliError as e:
        print(e, file=sys.stderr)
        return 1
    except (TypeError, ValueError, OverflowError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


# Private Methods ------------------------------------------------------------------------------------------------------

def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise argparse.ArgumentTypeError("decimals must be a non-negative integer")
    return value


def _format(text: str, spec: FormatSpec) -> str:
    text = text.strip()
    if _INTEGER.match(text):
        return format_size(int(text), spec)
    try:
        number = float(text)
    except ValueError:
        number = math.nan
    if math.isfinite(number):
        return format_size(number, spec)

    size = parse_size(text)
    if math.isnan(size):
        raise CliError(f"Invalid input: {text}")
    return format_size(size, spec)


def _to_bytes(text: str) -> str:
    size = parse_size(text)
    if math.isnan(size):
        raise CliError(f"Invalid byte string: {text}")
    return str(int(size)) if size.is_integer() else repr(size)


def _compare(values: list[str], spec: FormatSpec) -> str:
    if len(values) < 2:
        raise CliError("Compare requires two values: hsize compare <a> <b>")
    a, b = parse_size(values[0]), parse_size(values[1])
    if math.isnan(a) or math.isnan(b):
        raise CliError("Invalid byte values provided.")
    symbol = ">" if a > b else "<" if a < b else "="
    return f"{format_size(a, spec)} {symbol} {format_size(b, spec)}"


def _extract(stream: TextIO, spec: FormatSpec) -> list[str]:
    matches = extract_sizes(stream.read())
    if not matches:
        raise CliError("No byte values found in input.")
    return [format_size(m.bytes, spec) for m in matches]

