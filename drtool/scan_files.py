"""Finding possible dataref names inside single files."""

from __future__ import annotations

import logging
import os
import re
import string
from pathlib import Path
from typing import Iterable, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, "os.PathLike[str]"]

MIN_DATAREF_LENGTH = 8

# '+' appears in some third-party aircraft datarefs.
_VALID_CHARS = frozenset(string.ascii_letters + string.digits + "_/-.+")
_DATAREF_RUN = re.compile(rb"[A-Za-z0-9_/\-.+]+")
_LEADING_WHITESPACE = " \t\n\v\f\r"
_FIELD_END = re.compile(r"[\t ]")


def deduplicate(items: Iterable[T]) -> list[T]:
    """Sorted list of the distinct items."""
    return sorted(set(items))


def is_valid_dataref_char(c: Union[str, int]) -> bool:
    """True if the character (or byte value) may appear in a dataref name."""
    if isinstance(c, int):
        if not 0 <= c < 128:
            return False
        c = chr(c)
    return c in _VALID_CHARS


def load_list_file(filename: PathLike) -> list[str]:
    """Read a file that lists one dataref at the start of each line.

    Anything after the first space or tab on a line is ignored, as are lines
    without a slash. A file that cannot be read gives an empty list.
    """
    path = Path(filename)
    logger.info("Loading datarefs from path %s", path)
    try:
        text = path.read_bytes().decode("latin-1")
    except OSError:
        logger.info("File could not be loaded: %s", path)
        return []

    potential_datarefs = []
    for line in text.split("\n"):
        line = line.lstrip(_LEADING_WHITESPACE)
        line = _FIELD_END.split(line, maxsplit=1)[0]
        if "/" in line:
            potential_datarefs.append(line)

    logger.info(
        "Finished loading %d potential datarefs from %s", len(potential_datarefs), path
    )
    return potential_datarefs


def scan_file_for_dataref_strings(filename: PathLike) -> list[str]:
    """Find dataref-like strings in a file, in the manner of ``strings``.

    A candidate is a run of more than eight valid characters that contains a
    slash, does not start with one, and is followed by a non-valid byte.
    The result is sorted and without duplicates; unreadable files give [].
    """
    path = Path(filename)
    try:
        data = path.read_bytes()
    except OSError:
        return []

    refs = []
    for match in _DATAREF_RUN.finditer(data):
        if match.end() == len(data):
            continue
        candidate = match.group()
        if (
            len(candidate) > MIN_DATAREF_LENGTH
            and not candidate.startswith(b"/")
            and b"/" in candidate
        ):
            refs.append(candidate.decode("ascii"))

    result = deduplicate(refs)
    logger.info("Found %d unique possible datarefs in file %s", len(result), path)
    return result