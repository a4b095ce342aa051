"""Formatting and parsing of dataref values as text."""

from __future__ import annotations

import re
from typing import Callable, Iterable

_WHITESPACE = " \t\n\v\f\r"

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*(?P<num>[+-]?(?:"
    r"(?P<hex>0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?"
    r"|inf(?:inity)?"
    r"|nan"
    r"))",
    re.IGNORECASE,
)

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_FLOAT32_MAX = 3.4028234663852886e38


def _parse_int(text: str) -> int:
    """Parse the leading integer of ``text``, ignoring anything after it."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer at start of {text!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    """Parse the leading floating point number of ``text``, ignoring anything after it."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number at start of {text!r}")
    num = match.group("num")
    value = float.fromhex(num) if match.group("hex") else float(num)
    lowered = num.lower()
    if "inf" not in lowered and "nan" not in lowered and abs(value) > _FLOAT32_MAX:
        raise ValueError(f"number out of range: {text!r}")
    return value


_PARSERS: dict[type, Callable[[str], object]] = {int: _parse_int, float: _parse_float}


def parse_array(txt: str, length: int, element_type: type) -> list:
    """Parse a comma separated array of ``element_type`` values of exactly ``length`` items.

    Raises ValueError when the count is wrong or a field cannot be parsed.
    """
    try:
        parse = _PARSERS[element_type]
    except KeyError:
        raise TypeError(f"unsupported element type: {element_type!r}") from None

    trimmed = txt
    if trimmed.startswith("["):
        trimmed = trimmed[1:]
    if trimmed.endswith("["):
        trimmed = trimmed[:-1]

    fields = trimmed.split(",")
    if len(fields) != length:
        raise ValueError(
            "Save cancelled, as supplied data array doesn't match DR array length"
        )

    try:
        return [parse(field) for field in fields]
    except ValueError as exc:
        raise ValueError("Save cancelled, failed to parse field") from exc


def compact_fp_string(value: float) -> str:
    """Six-decimal fixed notation with trailing zeros removed (``2.0`` gives ``"2."``)."""
    return f"{value:f}".rstrip("0")


def printable_from_byte_array(data: Iterable[int]) -> str:
    """The printable ASCII prefix of ``data``, stopping at a NUL or any other byte."""
    chars = []
    for byte in data:
        if not 0x20 <= byte <= 0x7E:
            break
        chars.append(chr(byte))
    return "".join(chars)