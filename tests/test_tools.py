import sys
from pathlib import Path

import pytest

from excel2json.tools import (
	EXIT_FATAL,
	EXIT_ISSUES,
	EXIT_OK,
	ConversionOptions,
	build_parser,
	default_output_path,
	options_from_args,
	report,
	run_cli,
)
from excel2json.errors import SheetError


def main_ok(argv=None) -> int:
	return EXIT_OK


def main_issues(argv=None) -> int:
	return EXIT_ISSUES


def main_exception(argv=None) -> int:
	raise ValueError("broken")


def test_default_output_path():
	assert default_output_path("data/book.xlsx", ".json") == Path("data/book.json")
	assert default_output_path("book.json", ".xlsx") == Path("book.xlsx")
	assert default_output_path("noext", ".json") == Path("noext.json")


def test_csv_path_is_appended():
	options = ConversionOptions(input=Path("a.xlsx"), output=Path("out/a.json"))
	assert options.csv_path == Path("out/a.json.csv")


def test_options_from_args():
	parser = build_parser("prog", "desc", "input")
	args = parser.parse_args(["in.xlsx", "-n", "-c", "-d", "|", "-vv"])
	options = options_from_args(args, ".json")
	assert options == ConversionOptions(input=Path("in.xlsx"), output=Path("in.json"), no_output=True, csv=True, delimiter="|")
	assert args.verbose == 2


def test_bad_flag_is_usage_error():
	parser = build_parser("prog", "desc", "input")
	with pytest.raises(SystemExit) as exc:
		parser.parse_args(["--bogus"])
	assert exc.value.code == 2


def test_report(capsys):
	assert report([]) == EXIT_OK
	assert "Conversion OK" in capsys.readouterr().out
	assert report([SheetError("boom", sheet="S")]) == EXIT_ISSUES
	out = capsys.readouterr().out
	assert "Warning: [S] boom" in out
	assert "1 issue(s)" in out


def test_run_cli_ok(monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["prog"])
	with pytest.raises(SystemExit) as e:
		run_cli(main_ok)
	assert e.value.code == 0
	out, err = capsys.readouterr()
	assert err == ""


def test_run_cli_passes_code_through(monkeypatch):
	monkeypatch.setattr(sys, "argv", ["prog"])
	with pytest.raises(SystemExit) as e:
		run_cli(main_issues)
	assert e.value.code == EXIT_ISSUES


def test_run_cli_exception_short(monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["prog"])
	with pytest.raises(SystemExit) as e:
		run_cli(main_exception)
	assert e.value.code == EXIT_FATAL
	out, err = capsys.readouterr()
	assert "Error: broken" in err
	assert "Traceback" not in err


def test_run_cli_exception_debug(monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["prog", "--debug"])
	with pytest.raises(SystemExit) as e:
		run_cli(main_exception)
	assert e.value.code == EXIT_FATAL
	out, err = capsys.readouterr()
	assert "Traceback" in err
	assert "ValueError: broken" in err


def test_run_cli_exception_verbose(monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["prog", "-v", "-v"])
	with pytest.raises(SystemExit):
		run_cli(main_exception)
	out, err = capsys.readouterr()
	assert "Traceback" in err
