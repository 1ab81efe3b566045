#!/usr/bin/env python3
"""
OpenPyXL-based extractor producing the workbook tree.
Walks every worksheet over its full dimension, row by row and cell by cell,
and collects the cell and conditional styles the sheets reference.
Limitations:
- No calculation engine; formula cells carry the result cached in the file, if any
- Per-cell read failures are logged and the cell keeps the fields read so far
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, List, Optional, Set, Tuple

from openpyxl import load_workbook
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.cell import range_boundaries
from openpyxl.worksheet.worksheet import Worksheet

from . import styles
from .errors import ConversionError, ConversionResult, DimensionError, FormatError, SheetError, StyleError
from .model import Cell, CellType, Column, Row, Sheet, WorkBook, classify_row

log = logging.getLogger(__name__)

# openpyxl data_type -> CellType
_CELL_TYPES = {
	"b": CellType.BOOL,
	"d": CellType.DATE,
	"e": CellType.ERROR,
	"f": CellType.FORMULA,
	"inlineStr": CellType.INLINE_STRING,
	"n": CellType.NUMBER,
	"s": CellType.SHARED_STRING,
}


def render_value(value: Any) -> str:
	"""Render a cell value as the raw string stored in the tree."""
	if value is None:
		return ""
	if isinstance(value, bool):
		return "TRUE" if value else "FALSE"
	if isinstance(value, (datetime, date, time)):
		return value.isoformat()
	return str(value)


def formula_text(value: Any) -> str:
	# ArrayFormula keeps its text in .text
	text = getattr(value, "text", value)
	if not isinstance(text, str):
		return ""
	return text[1:] if text.startswith("=") else text


def column_width(ws: Worksheet, index: int) -> float:
	"""Width of a 1-based column, honouring grouped <col min max> ranges."""
	for dim in ws.column_dimensions.values():
		own = column_index_from_string(dim.index)
		low = dim.min or own
		high = dim.max or own
		if low <= index <= high and dim.width is not None:
			return float(dim.width)
	return styles.default_column_width(ws)


@dataclass
class SheetExtract:
	"""A sheet plus the style ids it references."""
	sheet: Sheet
	style_ids: Set[int] = field(default_factory=set)
	cond_style_ids: Set[int] = field(default_factory=set)
	errors: List[ConversionError] = field(default_factory=list)


@dataclass
class ExtractionResult(ConversionResult):
	workbook: WorkBook = field(default_factory=WorkBook)


class OpenpyxlWorkbookExtractor:
	"""Extract a workbook tree from an .xlsx file using openpyxl."""

	def __init__(self, excel_file_path: str):
		self.excel_file_path = Path(excel_file_path)
		self.workbook = None
		self.values_workbook = None
		self._failed_styles: Set[int] = set()
		self._failed_cond_styles: Set[int] = set()
		if not self.excel_file_path.exists():
			raise FileNotFoundError(f"Excel file not found: {excel_file_path}")

	def __enter__(self):
		self.open_workbook()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close_workbook()

	def open_workbook(self) -> None:
		# data_only=False keeps formulas in cell.value; the second load supplies cached results
		self.workbook = load_workbook(filename=str(self.excel_file_path), data_only=False)
		self.values_workbook = load_workbook(filename=str(self.excel_file_path), data_only=True)
		log.info("Opened %s (%d sheets)", self.excel_file_path.name, len(self.workbook.worksheets))

	def close_workbook(self) -> None:
		for wb in (self.workbook, self.values_workbook):
			if wb is None:
				continue
			try:
				wb.close()
			except Exception as e:
				log.warning("Error closing workbook: %s", e)
		self.workbook = None
		self.values_workbook = None

	def sheet_bounds(self, ws: Worksheet) -> Tuple[str, int, int]:
		"""
		Resolve the sheet dimension to its bottom-right bound.

		Returns:
			(dimension, last_row, last_col)

		Raises:
			DimensionError: the dimension is not a cell or cell range
		"""
		dimension = ws.calculate_dimension()
		try:
			_min_col, _min_row, max_col, max_row = range_boundaries(dimension)
		except (TypeError, ValueError) as e:
			raise DimensionError(f"Invalid sheet dimension {dimension!r}: {e}", sheet=ws.title) from e
		if max_row is None or max_col is None:
			raise DimensionError(f"Sheet dimension {dimension!r} is not bounded", sheet=ws.title)
		return dimension, max_row, max_col

	def _read_cell(self, source, cached: Optional[Worksheet]) -> Cell:
		row, col = source.row, source.column
		cell = Cell(row=row, col=col, name=f"{get_column_letter(col)}{row}")
		try:
			value = source.value
			cell.type = CellType.UNSET if value is None else _CELL_TYPES.get(source.data_type, CellType.UNSET)
			if cell.type == CellType.FORMULA:
				cell.formula = formula_text(value)
				if cached is not None:
					cell.value = render_value(cached.cell(row=row, column=col).value)
			else:
				cell.value = render_value(value)
			cell.style_id = source.style_id
		except Exception as e:
			log.warning("Could not fully read cell %s!%s: %s", source.parent.title, cell.name, e)
		return cell

	def extract_sheet(self, sheet_name: str) -> SheetExtract:
		"""
		Extract one worksheet over its full dimension.

		Args:
			sheet_name (str): worksheet title

		Returns:
			SheetExtract with the sheet and the style ids it references
		"""
		ws = self.workbook[sheet_name]
		dimension, last_row, last_col = self.sheet_bounds(ws)
		extract = SheetExtract(Sheet(id=self.workbook.index(ws), name=ws.title, dimension=dimension))
		sheet = extract.sheet

		cached = None
		if self.values_workbook is not None and ws.title in self.values_workbook.sheetnames:
			cached = self.values_workbook[ws.title]

		for source_row in ws.iter_rows(min_row=1, max_row=last_row, min_col=1, max_col=last_col):
			cells = [self._read_cell(source, cached) for source in source_row]
			index = source_row[0].row
			for cell in cells:
				extract.style_ids.add(cell.style_id)
			sheet.rows.append(Row(index=index, type=classify_row(index, cells), cells=cells))

		for c in range(1, last_col + 1):
			name = get_column_letter(c)
			try:
				width = column_width(ws, c)
			except Exception as e:
				log.warning("Could not read width of column %s!%s: %s", ws.title, name, e)
				width = styles.default_column_width(ws)
			sheet.cols.append(Column(index=c, name=name, width=width))

		try:
			for cf in ws.conditional_formatting:
				rules = sheet.formats.setdefault(str(cf.sqref), [])
				for rule in cf.rules:
					rules.append(styles.rule_blob(rule))
					if rule.dxfId is not None:
						extract.cond_style_ids.add(rule.dxfId)
		except Exception as e:
			extract.errors.append(FormatError(f"Could not read conditional formats: {e}", sheet=ws.title))
		return extract

	def _merge_styles(self, workbook: WorkBook, extract: SheetExtract, result: ExtractionResult) -> None:
		for style_id in sorted(extract.style_ids):
			if style_id == 0 or style_id in workbook.styles or style_id in self._failed_styles:
				continue
			try:
				workbook.styles[style_id] = styles.cell_style_blob(self.workbook, style_id)
			except Exception as e:
				self._failed_styles.add(style_id)
				result.record(StyleError(f"Could not resolve style {style_id}: {e}"))
		for style_id in sorted(extract.cond_style_ids):
			if style_id in workbook.cond_styles or style_id in self._failed_cond_styles:
				continue
			try:
				workbook.cond_styles[style_id] = styles.cond_style_blob(self.workbook, style_id)
			except Exception as e:
				self._failed_cond_styles.add(style_id)
				result.record(StyleError(f"Could not resolve conditional style {style_id}: {e}"))

	def extract_workbook(self) -> ExtractionResult:
		"""Extract every worksheet in workbook order; a failing sheet does not stop the rest."""
		result = ExtractionResult()
		for ws in self.workbook.worksheets:
			try:
				extract = self.extract_sheet(ws.title)
			except ConversionError as e:
				result.record(e)
				continue
			except Exception as e:
				result.record(SheetError(f"Extraction failed: {e}", sheet=ws.title))
				continue
			result.workbook.sheets.append(extract.sheet)
			for error in extract.errors:
				result.record(error)
			self._merge_styles(result.workbook, extract, result)
			log.info("Extracted sheet %r: %d rows, %d columns", ws.title, len(extract.sheet.rows), len(extract.sheet.cols))
		return result


def xlsx_to_workbook(excel_file_path: str) -> ExtractionResult:
	"""Open, extract and close in one call."""
	with OpenpyxlWorkbookExtractor(excel_file_path) as extractor:
		return extractor.extract_workbook()
