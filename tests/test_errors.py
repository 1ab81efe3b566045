import logging

from excel2json.errors import CellError, ConditionalStyleIndexError, ConversionResult, StyleError


def test_sheet_prefix():
	assert str(CellError("Could not write cell A1", sheet="S")) == "[S] Could not write cell A1"
	assert str(StyleError("Could not resolve style 3")) == "Could not resolve style 3"


def test_index_error_message():
	error = ConditionalStyleIndexError(2, 1)
	assert str(error) == "Wrong index for created conditional style: expected 2, got 1"


def test_result_collects_in_order():
	result = ConversionResult()
	assert result.ok
	assert result.last_error is None
	first, second = StyleError("one"), CellError("two", sheet="S")
	result.record(first)
	result.record(second)
	assert not result.ok
	assert result.errors == [first, second]
	assert result.last_error is second


def test_record_leaves_warnings_to_the_caller(caplog):
	caplog.set_level(logging.INFO, logger="excel2json.errors")
	result = ConversionResult()
	result.record(CellError("two", sheet="S"))
	assert [r.levelno for r in caplog.records] == [logging.INFO]
