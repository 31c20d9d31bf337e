"""
CLI for the demangler.
"""

import argparse
import logging
import sys
from typing import Iterable, List, Optional

from arm_demangler.demangler import demangle, try_demangle
from arm_demangler.errors import DemangleError

parser = argparse.ArgumentParser("arm-demangler", description="Demangler for ARM C++ symbols.")
parser.add_argument(
    "symbols",
    help="Symbols to demangle. If none are given, symbols are read from stdin, one per line.",
    nargs="*",
    type=str,
)
parser.add_argument(
    "--error-on-failure", "-e", help="Exit with an error if demangling fails", action="store_true"
)
parser.add_argument("--verbose", "-v", help="Log why symbols fail to demangle", action="store_true")


def _read_symbols(lines: Iterable[str]) -> Iterable[str]:
    for line in lines:
        line = line.strip()
        if line:
            yield line


def main(args: Optional[List[str]] = None):
    parsed_args = parser.parse_args(args)  # noqa
    logging.basicConfig(level=logging.DEBUG if parsed_args.verbose else logging.WARNING)

    symbols = parsed_args.symbols or _read_symbols(sys.stdin)
    for symbol in symbols:
        if parsed_args.error_on_failure:
            try:
                print(demangle(symbol))
            except DemangleError as e:
                parser.exit(1, f"{parser.prog}: cannot demangle {symbol!r}: {e}\n")
        else:
            result = try_demangle(symbol)
            print(symbol if result is None else result)


if __name__ == "__main__":
    main()
