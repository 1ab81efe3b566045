"""
Error types raised and collected during conversion.

Recoverable errors are appended to a result's ``errors`` list and the run
continues; ``ConditionalStyleIndexError`` aborts the build.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

log = logging.getLogger(__name__)


class ConversionError(Exception):
	"""Base class for conversion failures."""

	def __init__(self, message: str, sheet: Optional[str] = None):
		super().__init__(message)
		self.sheet = sheet

	def __str__(self) -> str:
		message = super().__str__()
		if self.sheet:
			return f"[{self.sheet}] {message}"
		return message


class DimensionError(ConversionError):
	"""Sheet dimension string could not be resolved to a cell range."""


class SheetError(ConversionError):
	"""A whole sheet could not be extracted or written."""


class CellError(ConversionError):
	"""A single cell or column could not be written."""


class StyleError(ConversionError):
	"""A cell style could not be resolved or recreated."""


class FormatError(ConversionError):
	"""A conditional format range could not be applied."""


class ConditionalStyleIndexError(ConversionError):
	"""A recreated conditional style did not keep its original id."""

	def __init__(self, expected: int, actual: int):
		super().__init__(f"Wrong index for created conditional style: expected {expected}, got {actual}")
		self.expected = expected
		self.actual = actual


@dataclass
class ConversionResult:
	"""Outcome of a run that keeps going past recoverable errors."""
	errors: List[ConversionError] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not self.errors

	@property
	def last_error(self) -> Optional[ConversionError]:
		return self.errors[-1] if self.errors else None

	def record(self, error: ConversionError) -> None:
		# the CLI reports collected errors itself
		log.info("Recorded: %s", error)
		self.errors.append(error)
