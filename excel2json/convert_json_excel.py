#!/usr/bin/env python3
"""
Command-line interface: JSON document -> Excel workbook.
Usage:
  json2excel [options] <input.json>
"""

from __future__ import annotations

from typing import List, Optional

from ._convert_impl import convert
from .tools import EXIT_USAGE, build_parser, options_from_args, run_cli, setup_logging


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser(
		"json2excel",
		"Rebuild an Excel workbook from a JSON document written by excel2json",
		"Path to the .json file",
	)
	args = parser.parse_args(argv)
	setup_logging(args.verbose)

	print("Start converter")
	if not args.input:
		parser.print_usage()
		return EXIT_USAGE
	return convert(options_from_args(args, ".xlsx"))


def run() -> None:
	run_cli(main)


if __name__ == "__main__":
	run()
