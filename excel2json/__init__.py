from .builder import BuildResult, OpenpyxlWorkbookBuilder, workbook_to_xlsx
from .errors import (
	CellError,
	ConditionalStyleIndexError,
	ConversionError,
	ConversionResult,
	DimensionError,
	FormatError,
	SheetError,
	StyleError,
)
from .flatten import sheet_to_csv, workbook_to_csv, write_csv
from .model import (
	Cell,
	CellType,
	Column,
	Row,
	RowType,
	Sheet,
	WorkBook,
	classify_row,
	dump_workbook_json,
	load_workbook_json,
)
from .openpyxl_extractor import ExtractionResult, OpenpyxlWorkbookExtractor, xlsx_to_workbook

__all__ = [
	"BuildResult",
	"Cell",
	"CellError",
	"CellType",
	"Column",
	"ConditionalStyleIndexError",
	"ConversionError",
	"ConversionResult",
	"DimensionError",
	"ExtractionResult",
	"FormatError",
	"OpenpyxlWorkbookBuilder",
	"OpenpyxlWorkbookExtractor",
	"Row",
	"RowType",
	"Sheet",
	"SheetError",
	"StyleError",
	"WorkBook",
	"classify_row",
	"dump_workbook_json",
	"load_workbook_json",
	"sheet_to_csv",
	"workbook_to_csv",
	"workbook_to_xlsx",
	"write_csv",
	"xlsx_to_workbook",
]

__version__ = "0.1.0"
