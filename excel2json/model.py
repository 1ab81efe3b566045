"""Pydantic models for the workbook tree shared by extraction and building.

The JSON field names (``Sheets``, ``Rows``, ``StyleId``...) are part of the
file format and are declared as aliases; Python code uses the snake_case
attribute names. Style and conditional rule payloads are opaque to this
module: they are stored and compared, never interpreted.
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RowType(IntEnum):
	"""Row classification."""
	HEADER = 1
	EMPTY = 2
	DATA = 3
	COMMENT = 4


class CellType(IntEnum):
	"""Cell value type tag, numbered as in documents written by earlier releases."""
	UNSET = 0
	BOOL = 1
	DATE = 2
	ERROR = 3
	FORMULA = 4
	INLINE_STRING = 5
	NUMBER = 6
	SHARED_STRING = 7


class _Node(BaseModel):
	model_config = ConfigDict(populate_by_name=True)


class Cell(_Node):
	"""A single cell; every cell of the sheet rectangle is present, populated or not."""
	row: int = Field(alias="Row")
	col: int = Field(alias="Col")
	name: str = Field("", alias="Name")  # e.g. "B3"
	value: str = Field("", alias="Value")
	formula: str = Field("", alias="Formula")  # without the leading '='
	type: CellType = Field(CellType.UNSET, alias="Type")
	style_id: int = Field(0, alias="StyleId")

	@property
	def is_blank(self) -> bool:
		return self.value == "" and self.formula == ""


class Row(_Node):
	index: int = Field(alias="Index")
	type: RowType = Field(RowType.EMPTY, alias="Type")
	cells: List[Cell] = Field(default_factory=list, alias="Cells")

	@field_validator("cells", mode="before")
	@classmethod
	def _null_cells(cls, value: Any) -> Any:
		return [] if value is None else value


class Column(_Node):
	index: int = Field(alias="Index")
	name: str = Field("", alias="Name")
	width: float = Field(0.0, alias="Width")


class Sheet(_Node):
	"""A worksheet: rows over the full dimension, column widths and conditional formats."""
	id: int = Field(alias="Id")
	name: str = Field(alias="Name")
	dimension: str = Field("", alias="Dimension")  # e.g. "A1:F20"
	rows: List[Row] = Field(default_factory=list, alias="Rows")
	cols: List[Column] = Field(default_factory=list, alias="Cols")
	# range string -> ordered conditional rules (opaque)
	formats: Dict[str, List[Any]] = Field(default_factory=dict, alias="Formats")

	@field_validator("rows", "cols", mode="before")
	@classmethod
	def _null_lists(cls, value: Any) -> Any:
		return [] if value is None else value

	@field_validator("formats", mode="before")
	@classmethod
	def _null_formats(cls, value: Any) -> Any:
		return {} if value is None else value


class WorkBook(_Node):
	"""Top-level tree: sheets plus the deduplicated style tables they reference."""
	sheets: List[Sheet] = Field(default_factory=list, alias="Sheets")
	styles: Dict[int, Any] = Field(default_factory=dict, alias="Styles")
	cond_styles: Dict[int, Any] = Field(default_factory=dict, alias="CondStyles")

	@field_validator("sheets", mode="before")
	@classmethod
	def _null_sheets(cls, value: Any) -> Any:
		return [] if value is None else value

	@field_validator("styles", "cond_styles", mode="before")
	@classmethod
	def _null_styles(cls, value: Any) -> Any:
		return {} if value is None else value

	def get_sheet(self, name: str) -> Optional[Sheet]:
		for sheet in self.sheets:
			if sheet.name == name:
				return sheet
		return None

	def to_json(self, indent: Optional[int] = 2) -> str:
		return self.model_dump_json(by_alias=True, indent=indent)

	@classmethod
	def from_json(cls, data: Union[str, bytes]) -> "WorkBook":
		return cls.model_validate_json(data)


def classify_row(index: int, cells: Iterable[Cell]) -> RowType:
	"""
	Classify a row from its 1-based index and its cells.

	The first row is always a header. Otherwise a row whose first cell starts
	with '#' is a comment, a row with any value or formula is data, and
	anything else is empty.
	"""
	cells = list(cells)
	if index == 1:
		return RowType.HEADER
	if cells and cells[0].value.startswith("#"):
		return RowType.COMMENT
	if any(not cell.is_blank for cell in cells):
		return RowType.DATA
	return RowType.EMPTY


def load_workbook_json(path: Union[str, Path]) -> WorkBook:
	"""Read a JSON document into a WorkBook. Raises pydantic's ValidationError on bad shape."""
	return WorkBook.from_json(Path(path).read_bytes())


def dump_workbook_json(workbook: WorkBook, path: Union[str, Path]) -> None:
	with open(path, "w", encoding="utf-8") as f:
		f.write(workbook.to_json())
