#!/usr/bin/env python3
"""
Rebuild an .xlsx workbook from the workbook tree using openpyxl.

Order matters: cell styles are created first (producing the old id -> new id
remap the cells are written with), then conditional styles, whose ids must
come out unchanged, then the sheets with their cells, column widths and
conditional formats.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import range_boundaries
from openpyxl.worksheet.worksheet import Worksheet

from . import styles
from .errors import (
	CellError,
	ConditionalStyleIndexError,
	ConversionError,
	ConversionResult,
	FormatError,
	SheetError,
	StyleError,
)
from .model import Cell, CellType, Sheet, WorkBook

log = logging.getLogger(__name__)


def parse_number(text: str) -> Union[int, float]:
	"""Parse a stored numeric string, keeping integers integral. Raises ValueError."""
	text = text.strip()
	try:
		return int(text)
	except ValueError:
		return float(text)


def _default_value(text: str) -> Union[int, float, str]:
	try:
		return parse_number(text)
	except ValueError:
		return text


@dataclass
class BuildResult(ConversionResult):
	style_map: Dict[int, int] = field(default_factory=lambda: {0: 0})


class OpenpyxlWorkbookBuilder:
	"""Write a workbook tree into a fresh openpyxl workbook."""

	def __init__(self):
		self.workbook: Optional[Workbook] = None

	def __enter__(self):
		self.open_workbook()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close_workbook()

	def open_workbook(self) -> None:
		self.workbook = Workbook()

	def close_workbook(self) -> None:
		try:
			if self.workbook is not None:
				self.workbook.close()
		except Exception as e:
			log.warning("Error closing workbook: %s", e)
		self.workbook = None

	def store_styles(self, workbook: WorkBook, result: BuildResult) -> Dict[int, int]:
		"""Recreate cell styles in ascending id order, filling ``result.style_map``."""
		style_map = result.style_map
		for old_id in sorted(workbook.styles):
			if old_id == 0:
				continue
			try:
				style_map[old_id] = styles.create_cell_style(self.workbook, workbook.styles[old_id])
			except Exception as e:
				result.record(StyleError(f"Could not create style {old_id}: {e}"))
		return style_map

	def store_conditional_styles(self, workbook: WorkBook, result: BuildResult) -> None:
		"""
		Recreate conditional styles in ascending id order.

		Conditional rules reference these styles by position, so each one must
		land on its original id.

		Raises:
			ConditionalStyleIndexError: a style was created under a different id
		"""
		for old_id in sorted(workbook.cond_styles):
			try:
				new_id = styles.create_cond_style(self.workbook, workbook.cond_styles[old_id])
			except Exception as e:
				result.record(StyleError(f"Could not create conditional style {old_id}: {e}"))
				continue
			if new_id != old_id:
				raise ConditionalStyleIndexError(old_id, new_id)

	def _create_sheet(self, position: int, name: str) -> Worksheet:
		if position == 0:
			ws = self.workbook.worksheets[0]
		elif name in self.workbook.sheetnames:
			raise SheetError("Duplicate sheet name", sheet=name)
		else:
			ws = self.workbook.create_sheet()
		try:
			ws.title = name
		except ValueError as e:
			raise SheetError(f"Invalid sheet name: {e}", sheet=name) from e
		return ws

	def _set_dimension(self, ws: Worksheet, sheet: Sheet) -> None:
		if not sheet.dimension:
			return
		try:
			min_col, min_row, max_col, max_row = range_boundaries(sheet.dimension)
		except (TypeError, ValueError) as e:
			raise SheetError(f"Invalid dimension {sheet.dimension!r}: {e}", sheet=sheet.name) from e
		if None in (min_col, min_row, max_col, max_row):
			raise SheetError(f"Dimension {sheet.dimension!r} is not bounded", sheet=sheet.name)
		# openpyxl derives the dimension from the cells present, so anchor both corners
		ws.cell(row=min_row, column=min_col)
		ws.cell(row=max_row, column=max_col)

	def _store_cell(self, ws: Worksheet, row_index: int, cell: Cell, style_map: Dict[int, int]) -> None:
		style_id = style_map.get(cell.style_id, 0)
		if cell.is_blank and style_id == 0:
			return
		target = ws.cell(row=row_index, column=cell.col)
		if cell.formula:
			target.value = cell.formula if cell.formula.startswith("=") else f"={cell.formula}"
		elif cell.value == "":
			pass
		elif cell.type == CellType.NUMBER:
			try:
				target.value = parse_number(cell.value)
			except ValueError as e:
				raise CellError(f"Non-numeric value {cell.value!r} in {target.coordinate}", sheet=ws.title) from e
		elif cell.type == CellType.UNSET:
			target.value = _default_value(cell.value)
		else:
			target.value = cell.value
			# a leading '=' must not turn a stored string into a formula
			target.data_type = "s"
		styles.apply_cell_style(target, style_id)

	def store_sheet(self, position: int, sheet: Sheet, style_map: Dict[int, int], result: BuildResult) -> Worksheet:
		"""
		Write one sheet at the given position.

		Raises:
			SheetError: the sheet could not be created or its dimension is invalid
		"""
		ws = self._create_sheet(position, sheet.name)
		self._set_dimension(ws, sheet)

		for row in sheet.rows:
			for cell in row.cells:
				try:
					self._store_cell(ws, row.index, cell, style_map)
				except ConversionError as e:
					result.record(e)
				except Exception as e:
					name = cell.name or f"{get_column_letter(cell.col)}{row.index}"
					result.record(CellError(f"Could not write cell {name}: {e}", sheet=sheet.name))

		default_width = styles.default_column_width(ws)
		for col in sheet.cols:
			if col.width == default_width:
				continue
			try:
				ws.column_dimensions[col.name or get_column_letter(col.index)].width = col.width
			except Exception as e:
				result.record(CellError(f"Could not set width of column {col.name or col.index}: {e}", sheet=sheet.name))

		for cell_range, rules in sheet.formats.items():
			try:
				loaded = [styles.load_rule(blob) for blob in rules]
				for rule in loaded:
					ws.conditional_formatting.add(cell_range, rule)
			except Exception as e:
				result.record(FormatError(f"Could not apply conditional format {cell_range}: {e}", sheet=sheet.name))

		# no cached results are written; have the reader recalculate formulas on open
		self.workbook.calculation.fullCalcOnLoad = True
		return ws

	def store_sheets(self, workbook: WorkBook, result: BuildResult) -> None:
		for position, sheet in enumerate(workbook.sheets):
			try:
				self.store_sheet(position, sheet, result.style_map, result)
			except ConversionError as e:
				result.record(e)
			except Exception as e:
				result.record(SheetError(f"Build failed: {e}", sheet=sheet.name))
			else:
				log.info("Stored sheet %r", sheet.name)

	def store(self, workbook: WorkBook) -> BuildResult:
		"""
		Populate the open workbook from a tree.

		Returns:
			BuildResult with the style remap and the recoverable errors

		Raises:
			ConditionalStyleIndexError: conditional styles could not keep their ids
		"""
		result = BuildResult()
		self.store_styles(workbook, result)
		self.store_conditional_styles(workbook, result)
		self.store_sheets(workbook, result)
		return result

	def save(self, output_file: Union[str, Path]) -> None:
		self.workbook.save(str(output_file))


def workbook_to_xlsx(workbook: WorkBook, output_file: Union[str, Path]) -> BuildResult:
	"""Build and save in one call."""
	with OpenpyxlWorkbookBuilder() as builder:
		result = builder.store(workbook)
		builder.save(output_file)
	return result
