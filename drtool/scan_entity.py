"""Scanning whole aircraft and plugin folders for dataref names."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Union

from .scan_files import deduplicate, load_list_file, scan_file_for_dataref_strings

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_CDATAREF_SEPARATORS = re.compile(r"[\n\t\r, ]")
_CDATAREF_MIN_LENGTH = 8
_AIRCRAFT_TOP_LEVEL_EXTENSIONS = frozenset({".obj", ".acf"})
_AIRCRAFT_EXTENSIONS = frozenset({".obj", ".acf", ".lua", ".snd"})


def _read_cdataref(path: Path) -> list[str]:
    contents = path.read_bytes().decode("latin-1")
    entries = [entry.strip() for entry in _CDATAREF_SEPARATORS.split(contents)]
    entries = [entry for entry in entries if len(entry) >= _CDATAREF_MIN_LENGTH]
    logger.info("Found %d unique possible datarefs in %s", len(entries), path)
    return entries


def scan_aircraft(acf_path: PathLike) -> list[str]:
    """Collect possible datarefs from the folder holding an aircraft's .acf file.

    Looks at dataref.txt, cdataref.txt, the aircraft's plugins, its .obj and
    .acf files, and .obj/.acf/.lua/.snd files under the usual sub-folders.
    """
    acf_path = Path(acf_path)
    aircraft_dir = acf_path.parent
    all_refs: list[str] = []

    list_file_path = aircraft_dir / "dataref.txt"
    if list_file_path.exists():
        all_refs.extend(load_list_file(list_file_path))

    cdataref_path = aircraft_dir / "cdataref.txt"
    if cdataref_path.is_file():
        all_refs.extend(_read_cdataref(cdataref_path))

    plugin_dir_path = aircraft_dir / "plugins"
    if plugin_dir_path.exists():
        all_refs.extend(scan_plugin_folder(plugin_dir_path))

    pending = [
        entry
        for entry in aircraft_dir.iterdir()
        if entry.is_file() and entry.suffix.lower() in _AIRCRAFT_TOP_LEVEL_EXTENSIONS
    ]
    # SASL and Lua code often lives in "Custom Avionics".
    pending.append(aircraft_dir / "Custom Avionics")
    pending.append(aircraft_dir / "objects")
    pending.append(aircraft_dir / "fmod")
    xlua_scripts_dir = aircraft_dir / "plugins" / "xlua" / "scripts"
    if xlua_scripts_dir.exists():
        pending.append(xlua_scripts_dir)

    while pending:
        path = pending.pop()
        if path.is_dir():
            pending.extend(path.iterdir())
        if path.is_file() and path.suffix.lower() in _AIRCRAFT_EXTENSIONS:
            all_refs.extend(scan_file_for_dataref_strings(path))

    result = deduplicate(all_refs)
    logger.info(
        "Found %d unique possible datarefs for aircraft %s", len(result), acf_path
    )
    return result


def scan_lua_folder(lua_dir_path: PathLike) -> list[str]:
    """Scan the .lua files directly inside a folder; a missing folder gives []."""
    lua_dir = Path(lua_dir_path)
    refs: list[str] = []
    if lua_dir.is_dir():
        for entry in sorted(lua_dir.iterdir()):
            if entry.suffix.lower() == ".lua":
                refs.extend(scan_file_for_dataref_strings(entry))
    return refs


def scan_plugin_folder(plugin_dir_path: PathLike) -> list[str]:
    """Scan every .xpl file anywhere under a plugin folder.

    Raises OSError when the folder cannot be walked.
    """
    errors: list[OSError] = []
    refs: list[str] = []
    for root, _dirs, files in os.walk(plugin_dir_path, onerror=errors.append):
        for name in files:
            path = Path(root) / name
            if path.suffix == ".xpl" and path.is_file():
                refs.extend(scan_file_for_dataref_strings(path))
    if errors:
        raise errors[0]
    return deduplicate(refs)


def scan_plugin_xpl(plugin_xpl_path: PathLike) -> list[str]:
    """Scan a single plugin binary."""
    return deduplicate(scan_file_for_dataref_strings(plugin_xpl_path))


def scan_xplane_binary(xplane_binary_path: PathLike) -> list[str]:
    """Scan the simulator executable itself."""
    return deduplicate(scan_file_for_dataref_strings(xplane_binary_path))