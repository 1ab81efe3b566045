#!/usr/bin/env python3
"""
Command-line interface: Excel workbook -> JSON document.
Usage:
  excel2json [options] <input.xlsx>
"""

from __future__ import annotations

from typing import List, Optional
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException

from .flatten import workbook_to_csv
from .model import dump_workbook_json
from .openpyxl_extractor import OpenpyxlWorkbookExtractor
from .tools import EXIT_FATAL, EXIT_USAGE, build_parser, options_from_args, report, run_cli, setup_logging


def main(argv: Optional[List[str]] = None) -> int:
	parser = build_parser(
		"excel2json",
		"Convert an Excel workbook into a JSON document (values, formulas, styles, conditional formats)",
		"Path to the .xlsx file",
	)
	args = parser.parse_args(argv)
	setup_logging(args.verbose)

	print("Start converter")
	if not args.input:
		parser.print_usage()
		return EXIT_USAGE
	options = options_from_args(args, ".json")

	try:
		with OpenpyxlWorkbookExtractor(str(options.input)) as extractor:
			result = extractor.extract_workbook()
	except (OSError, InvalidFileException, BadZipFile) as e:
		print(f"Error: {e}")
		return EXIT_FATAL

	try:
		if not options.no_output:
			dump_workbook_json(result.workbook, options.output)
			print(f"Output file: {options.output}")
		if options.csv:
			workbook_to_csv(result.workbook, options.csv_path, options.delimiter)
			print(f"CSV file: {options.csv_path}")
	except OSError as e:
		print(f"Error: {e}")
		return EXIT_FATAL

	return report(result.errors)


def run() -> None:
	run_cli(main)


if __name__ == "__main__":
	run()
