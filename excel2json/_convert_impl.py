#!/usr/bin/env python3
from __future__ import annotations

import logging

from pydantic import ValidationError

from .builder import OpenpyxlWorkbookBuilder
from .errors import ConditionalStyleIndexError
from .flatten import workbook_to_csv
from .model import WorkBook, load_workbook_json
from .tools import EXIT_FATAL, ConversionOptions, report

log = logging.getLogger(__name__)


def load_input(options: ConversionOptions) -> WorkBook:
	workbook = load_workbook_json(options.input)
	log.info("Loaded %s: %d sheets, %d styles, %d conditional styles",
		options.input, len(workbook.sheets), len(workbook.styles), len(workbook.cond_styles))
	return workbook


def convert(options: ConversionOptions) -> int:
	"""Build the workbook described by ``options.input`` and write the requested outputs."""
	try:
		workbook = load_input(options)
	except (OSError, ValidationError) as e:
		print(f"Error: {e}")
		return EXIT_FATAL

	try:
		with OpenpyxlWorkbookBuilder() as builder:
			result = builder.store(workbook)
			if not options.no_output:
				builder.save(options.output)
				print(f"Output file: {options.output}")
	except (ConditionalStyleIndexError, OSError) as e:
		print(f"Error: {e}")
		return EXIT_FATAL

	if options.csv:
		try:
			workbook_to_csv(workbook, options.csv_path, options.delimiter)
		except OSError as e:
			print(f"Error: {e}")
			return EXIT_FATAL
		print(f"CSV file: {options.csv_path}")

	return report(result.errors)
