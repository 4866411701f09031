"""
app/parsing/csv_tokenizer.py

Line-oriented CSV tokenizer for report exports.
"""

from __future__ import annotations

import csv
import re

_LINE_BREAK = re.compile(r"\r?\n")
_BOM = "\ufeff"
_CARRIAGE_RETURN = "\r"
# Free-text columns (RCA summaries, descriptions) can exceed the csv default of 128 KiB.
_MAX_FIELD_SIZE = 2**31 - 1

csv.field_size_limit(max(csv.field_size_limit(), _MAX_FIELD_SIZE))


def split_csv_lines(csv_text: str) -> list[str]:
    """
    Split CSV text into stripped, non-blank lines.

    Only ``\\n`` and ``\\r\\n`` end a line; a bare ``\\r`` stays part of the line.
    """

    if csv_text.startswith(_BOM):
        csv_text = csv_text[len(_BOM):]
    lines = (line.strip() for line in _LINE_BREAK.split(csv_text))
    return [line for line in lines if line]


def _placeholder_for(line: str) -> str:
    """
    Pick a private-use character that does not occur in ``line``.
    """

    for code_point in range(0xE000, 0xF900):
        candidate = chr(code_point)
        if candidate not in line:
            return candidate
    raise ValueError("No free placeholder character for carriage return.")


def parse_csv_line(line: str) -> list[str]:
    """
    Tokenize one CSV line into its field values.

    Quoted fields may contain commas and doubled quotes. An unterminated
    quote consumes the rest of the line instead of raising. A bare carriage
    return is kept as a literal character of its field.
    """

    placeholder = None
    if _CARRIAGE_RETURN in line:
        placeholder = _placeholder_for(line)
        line = line.replace(_CARRIAGE_RETURN, placeholder)

    reader = csv.reader([line], strict=False)
    values = next(reader, [""])
    if placeholder is None:
        return values
    return [value.replace(placeholder, _CARRIAGE_RETURN) for value in values]


def parse_csv_rows(csv_text: str) -> list[list[str]]:
    """
    Tokenize CSV text into ordered rows of raw string values.

    Row 0 is returned like any other row; callers treat it as the header.
    """

    return [parse_csv_line(line) for line in split_csv_lines(csv_text)]
