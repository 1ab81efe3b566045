#!/usr/bin/env python3
"""
Flatten a workbook tree into a delimiter separated text dump.

Each sheet is introduced by a ``--- Sheet:  <name>  ---`` line and followed
by a blank line. Values are written as stored, without quoting or escaping;
values that would make the dump ambiguous are only reported.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO, Union

from .model import Sheet, WorkBook

log = logging.getLogger(__name__)


def sheet_header(name: str) -> str:
	return f"--- Sheet:  {name}  ---"


def sheet_to_csv(stream: TextIO, sheet: Sheet, delimiter: str = ",") -> None:
	stream.write(sheet_header(sheet.name) + "\n")
	for row in sheet.rows:
		values = []
		for cell in row.cells:
			if (delimiter and delimiter in cell.value) or "\n" in cell.value or "\r" in cell.value:
				log.warning("Value of %s!%s contains the delimiter or a line break; output is ambiguous", sheet.name, cell.name)
			values.append(cell.value)
		stream.write(delimiter.join(values) + "\n")
	stream.write("\n")


def write_csv(workbook: WorkBook, stream: TextIO, delimiter: str = ",") -> None:
	"""Write every sheet in list order."""
	for sheet in workbook.sheets:
		sheet_to_csv(stream, sheet, delimiter)


def workbook_to_csv(workbook: WorkBook, path: Union[str, Path], delimiter: str = ",") -> None:
	"""Write the dump to ``path``, replacing any existing file."""
	with Path(path).open("w", newline="", encoding="utf-8") as f:
		write_csv(workbook, f, delimiter)
