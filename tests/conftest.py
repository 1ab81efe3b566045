from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.formatting.rule import CellIsRule
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from excel2json.model import Cell, CellType, Column, Row, RowType, Sheet, WorkBook


@pytest.fixture
def sample_xlsx(tmp_path) -> Path:
	"""Two sheets: a small table with header, comment, empty row, formula, bold header and one conditional format."""
	wb = Workbook()
	ws = wb.active
	ws.title = "Data"
	ws.append(["Name", "Qty", "Total"])
	ws.append(["apple", 3, "=B2*2"])
	ws.append(["# note"])
	ws.append([])
	ws.append(["pear", 2.5, True])
	bold = Font(bold=True)
	for cell in ws[1]:
		cell.font = bold
	ws.column_dimensions["A"].width = 20
	red = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
	ws.conditional_formatting.add("B2:B5", CellIsRule(operator="greaterThan", formula=["2"], fill=red))

	second = wb.create_sheet("Second")
	second["A1"] = "x"

	path = tmp_path / "sample.xlsx"
	wb.save(path)
	return path


@pytest.fixture
def shared_style_xlsx(tmp_path) -> Path:
	"""Five cells carrying the same style."""
	wb = Workbook()
	ws = wb.active
	ws.title = "Styled"
	fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
	for col in range(1, 6):
		cell = ws.cell(row=1, column=col, value=f"v{col}")
		cell.font = Font(italic=True)
		cell.fill = fill
	path = tmp_path / "styled.xlsx"
	wb.save(path)
	return path


@pytest.fixture
def empty_xlsx(tmp_path) -> Path:
	wb = Workbook()
	wb.active.title = "Empty"
	path = tmp_path / "empty.xlsx"
	wb.save(path)
	return path


def make_cell(row: int, col: int, value: str = "", cell_type: CellType = CellType.SHARED_STRING, **kwargs) -> Cell:
	return Cell(row=row, col=col, name=f"{get_column_letter(col)}{row}", value=value, type=cell_type, **kwargs)


@pytest.fixture
def small_tree() -> WorkBook:
	"""A hand-built tree: one sheet, two rows, two columns, no styles."""
	rows = [
		Row(index=1, type=RowType.HEADER, cells=[make_cell(1, 1, "a"), make_cell(1, 2, "b")]),
		Row(index=2, type=RowType.DATA, cells=[make_cell(2, 1, "1", CellType.NUMBER), make_cell(2, 2, "=x")]),
	]
	cols = [Column(index=1, name="A", width=10.0), Column(index=2, name="B", width=15.5)]
	sheet = Sheet(id=0, name="Tree", dimension="A1:B2", rows=rows, cols=cols)
	return WorkBook(sheets=[sheet])
