"""
Style plumbing over openpyxl's workbook stylesheet.

openpyxl keeps the stylesheet as indexed lists on the workbook
(``_cell_styles``, ``_fonts``, ``_fills``, ``_differential_styles``...).
A cell style id is an index into ``_cell_styles`` and a conditional style id
is an index into ``_differential_styles``; these are the ids stored in the
workbook tree. Style components and conditional rules are serialised with
the engine's own ``to_tree``/``from_tree`` so the payloads stay opaque to the
rest of the package.
"""

from __future__ import annotations

from copy import copy
from typing import Any, Dict, Optional

from openpyxl.formatting.rule import Rule
from openpyxl.styles import Alignment, Border, Font, Protection
from openpyxl.styles.cell_style import StyleArray
from openpyxl.styles.differential import DifferentialStyle
from openpyxl.styles.fills import Fill
from openpyxl.styles.numbers import (
	BUILTIN_FORMATS,
	BUILTIN_FORMATS_MAX_SIZE,
	BUILTIN_FORMATS_REVERSE,
	NumberFormat,
)
from openpyxl.utils.units import BASE_COL_WIDTH
from openpyxl.workbook import Workbook
from openpyxl.xml.functions import fromstring, tostring

StyleBlob = Dict[str, Any]

# blob key, workbook collection, StyleArray field, component class
_CELL_PARTS = (
	("Font", "_fonts", "fontId", Font),
	("Fill", "_fills", "fillId", Fill),
	("Border", "_borders", "borderId", Border),
	("Alignment", "_alignments", "alignmentId", Alignment),
	("Protection", "_protections", "protectionId", Protection),
)

# blob key, DifferentialStyle attribute, component class
_DIFFERENTIAL_PARTS = (
	("Font", "font", Font),
	("Fill", "fill", Fill),
	("Border", "border", Border),
	("Alignment", "alignment", Alignment),
	("Protection", "protection", Protection),
	("NumFmt", "numFmt", NumberFormat),
)


def _dump(obj) -> Optional[str]:
	if obj is None:
		return None
	return tostring(obj.to_tree()).decode("utf-8")


def _load(cls, xml: Optional[str]):
	if not xml:
		return None
	if not isinstance(xml, str):
		raise TypeError(f"Expected serialised {cls.__name__}, got {type(xml).__name__}")
	return cls.from_tree(fromstring(xml))


def _require_blob(blob: Any) -> StyleBlob:
	if not isinstance(blob, dict):
		raise TypeError(f"Style must be an object, got {type(blob).__name__}")
	return blob


def _number_format(wb: Workbook, fmt_id: int) -> str:
	if fmt_id < BUILTIN_FORMATS_MAX_SIZE:
		return BUILTIN_FORMATS.get(fmt_id, "General")
	return wb._number_formats[fmt_id - BUILTIN_FORMATS_MAX_SIZE]


def _number_format_id(wb: Workbook, fmt: str) -> int:
	if fmt in BUILTIN_FORMATS_REVERSE:
		return BUILTIN_FORMATS_REVERSE[fmt]
	return wb._number_formats.add(fmt) + BUILTIN_FORMATS_MAX_SIZE


# ------------------------------
# Cell styles
# ------------------------------

def cell_style_blob(wb: Workbook, style_id: int) -> StyleBlob:
	"""Serialise the cell style with the given id. Raises IndexError for unknown ids."""
	array = wb._cell_styles[style_id]
	blob: StyleBlob = {}
	for key, collection, field, _cls in _CELL_PARTS:
		blob[key] = _dump(getattr(wb, collection)[getattr(array, field)])
	blob["NumberFormat"] = _number_format(wb, array.numFmtId)
	blob["QuotePrefix"] = bool(array.quotePrefix)
	return blob


def create_cell_style(wb: Workbook, blob: StyleBlob) -> int:
	"""Register a serialised cell style in ``wb`` and return its id there."""
	blob = _require_blob(blob)
	array = StyleArray()
	for key, collection, field, cls in _CELL_PARTS:
		part = _load(cls, blob.get(key))
		if part is not None:
			setattr(array, field, getattr(wb, collection).add(part))
	array.numFmtId = _number_format_id(wb, blob.get("NumberFormat") or "General")
	array.quotePrefix = int(bool(blob.get("QuotePrefix")))
	return wb._cell_styles.add(array)


def apply_cell_style(cell, style_id: int) -> None:
	wb = cell.parent.parent
	cell._style = copy(wb._cell_styles[style_id])


# ------------------------------
# Conditional (differential) styles
# ------------------------------

def cond_style_blob(wb: Workbook, style_id: int) -> StyleBlob:
	"""Serialise the differential style with the given id."""
	dxf = wb._differential_styles[style_id]
	blob: StyleBlob = {}
	for key, attr, _cls in _DIFFERENTIAL_PARTS:
		part = getattr(dxf, attr)
		if part is not None:
			blob[key] = _dump(part)
	return blob


def create_cond_style(wb: Workbook, blob: StyleBlob) -> int:
	"""Append a differential style to ``wb``; the returned id is its list position."""
	blob = _require_blob(blob)
	parts = {attr: _load(cls, blob.get(key)) for key, attr, cls in _DIFFERENTIAL_PARTS}
	# DifferentialStyleList.add() folds equal styles together, which would shift ids
	dxfs = wb._differential_styles
	dxfs.dxf.append(DifferentialStyle(**parts))
	return len(dxfs.dxf) - 1


# ------------------------------
# Conditional format rules
# ------------------------------

def rule_blob(rule: Rule) -> str:
	return _dump(rule)


def load_rule(blob: Any) -> Rule:
	"""
	Rebuild a conditional rule from its serialised form.

	The rule keeps its ``dxfId`` and no ``dxf`` object, so saving does not
	append a second copy of the differential style.
	"""
	rule = _load(Rule, blob)
	if rule is None:
		raise ValueError("Empty conditional format rule")
	rule.dxf = None
	return rule


# ------------------------------
# Column widths
# ------------------------------

def default_column_width(ws) -> float:
	"""Width of a column the sheet never sized, from its sheet format properties."""
	fmt = ws.sheet_format
	if fmt.defaultColWidth is not None:
		return float(fmt.defaultColWidth)
	return float(fmt.baseColWidth if fmt.baseColWidth is not None else BASE_COL_WIDTH)
