#!/usr/bin/env python3
"""Helpers shared by the two command-line converters."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_ISSUES = 3

MainFunc = Callable[[Optional[List[str]]], int]


@dataclass
class ConversionOptions:
	"""Everything a conversion run needs from the command line."""
	input: Path
	output: Path
	no_output: bool = False
	csv: bool = False
	delimiter: str = ","

	@property
	def csv_path(self) -> Path:
		# appended, not substituted: book.json -> book.json.csv
		return Path(f"{self.output}.csv")


def default_output_path(input_path, suffix: str) -> Path:
	"""Input path with its extension replaced by ``suffix`` (e.g. ``.json``)."""
	return Path(input_path).with_suffix(suffix)


def setup_logging(verbosity: int) -> None:
	"""
	- 0  -> WARNING
	- 1  -> INFO
	- 2+ -> DEBUG
	"""
	level = logging.WARNING
	if verbosity == 1:
		level = logging.INFO
	elif verbosity >= 2:
		level = logging.DEBUG
	logging.basicConfig(level=level, format="%(levelname)s  %(name)s:%(message)s")


def _delimiter(value: str) -> str:
	if not value:
		raise argparse.ArgumentTypeError("delimiter must not be empty")
	return value


def build_parser(prog: str, description: str, input_help: str) -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog=prog, description=description)
	parser.add_argument("input", nargs="?", help=input_help)
	parser.add_argument("--output", "-o", help="Output file name to be used (default: input name with the new extension)")
	parser.add_argument("--no_output", "-n", action="store_true", help="No output file should be created")
	parser.add_argument("--csv", "-c", action="store_true", help="CSV file should be created (<output>.csv)")
	parser.add_argument("--delimiter", "-d", type=_delimiter, default=",", help="CSV delimiter (default: ',')")
	parser.add_argument("--verbose", "-v", action="count", default=0, help="More log output (repeatable)")
	parser.add_argument("--debug", action="store_true", help="Show tracebacks on unexpected errors")
	return parser


def options_from_args(args: argparse.Namespace, suffix: str) -> ConversionOptions:
	input_path = Path(args.input)
	output = Path(args.output) if args.output else default_output_path(input_path, suffix)
	return ConversionOptions(
		input=input_path,
		output=output,
		no_output=bool(args.no_output),
		csv=bool(args.csv),
		delimiter=args.delimiter,
	)


def run_cli(main_func: MainFunc) -> None:
	"""
	Call ``main_func(argv)`` and exit with its return code.

	Unexpected exceptions exit with EXIT_FATAL after a one-line ``Error: ...``
	on stderr, or a full traceback with ``--debug`` or ``-vv``.
	"""
	argv = sys.argv[1:]
	debug = "--debug" in argv
	verbosity = sum(1 for a in argv if a in ("-v", "--verbose")) + (2 if "-vv" in argv else 0)

	try:
		code = main_func(argv)
	except SystemExit:
		raise
	except Exception as e:
		if debug or verbosity >= 2:
			traceback.print_exc()
		else:
			print(f"Error: {e}", file=sys.stderr)
		raise SystemExit(EXIT_FATAL)
	else:
		raise SystemExit(code)


def report(errors) -> int:
	"""Print recorded issues and pick the exit code for a run that wrote its outputs."""
	if not errors:
		print("Conversion OK")
		return EXIT_OK
	for error in errors:
		print(f"Warning: {error}")
	print(f"Conversion finished with {len(errors)} issue(s)")
	return EXIT_ISSUES
