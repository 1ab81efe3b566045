import io

from excel2json.flatten import sheet_to_csv, workbook_to_csv, write_csv
from excel2json.model import Cell, Row, RowType, Sheet, WorkBook


def _tree():
	rows = [
		Row(index=1, type=RowType.HEADER, cells=[Cell(row=1, col=1, value="a"), Cell(row=1, col=2, value="b")]),
		Row(index=2, type=RowType.EMPTY, cells=[Cell(row=2, col=1), Cell(row=2, col=2)]),
	]
	first = Sheet(id=0, name="One", dimension="A1:B2", rows=rows)
	second = Sheet(id=1, name="Two", dimension="A1", rows=[Row(index=1, cells=[Cell(row=1, col=1, value="x")])])
	return WorkBook(sheets=[first, second])


def test_sheet_lines():
	stream = io.StringIO()
	sheet_to_csv(stream, _tree().sheets[0])
	assert stream.getvalue() == "--- Sheet:  One  ---\na,b\n,\n\n"


def test_delimiter():
	stream = io.StringIO()
	sheet_to_csv(stream, _tree().sheets[0], delimiter=";")
	assert stream.getvalue().splitlines()[1] == "a;b"


def test_sheets_in_list_order():
	stream = io.StringIO()
	write_csv(_tree(), stream)
	assert stream.getvalue() == "--- Sheet:  One  ---\na,b\n,\n\n--- Sheet:  Two  ---\nx\n\n"


def test_values_are_not_escaped(caplog):
	sheet = Sheet(id=0, name="S", rows=[Row(index=1, cells=[Cell(row=1, col=1, name="A1", value="1,5"), Cell(row=1, col=2, value="y")])])
	stream = io.StringIO()
	sheet_to_csv(stream, sheet)
	assert stream.getvalue().splitlines()[1] == "1,5,y"
	assert "A1" in caplog.text


def test_workbook_to_csv_replaces_file(tmp_path):
	path = tmp_path / "out.json.csv"
	path.write_text("stale content that is longer than the new one " * 10, encoding="utf-8")
	workbook_to_csv(_tree(), path)
	assert path.read_text(encoding="utf-8").startswith("--- Sheet:  One  ---\n")
	assert "stale" not in path.read_text(encoding="utf-8")


def test_empty_delimiter_does_not_warn(caplog):
	stream = io.StringIO()
	sheet_to_csv(stream, _tree().sheets[0], delimiter="")
	assert stream.getvalue().splitlines()[1] == "ab"
	assert caplog.records == []
