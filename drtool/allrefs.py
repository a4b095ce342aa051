"""The store of every known dataref and commandref, and the live searches over them."""

from __future__ import annotations

import logging
import os
import weakref
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

from .commandref import CommandAccess, CommandRefRecord
from .dataref import DataAccess, DataRefRecord, DataRefUpdater
from .ref import RefRecord, RefSource
from .search import SearchParams, SearchResults, name_sort_key

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class DatarefLookup(DataAccess):
    """A dataref interface that can also look datarefs up by name."""

    def find_dataref(self, name: str) -> Optional[Any]: ...


class CommandLookup(CommandAccess):
    """A command interface that can also look commands up by name."""

    def find_command(self, name: str) -> Optional[Any]: ...


class RefRecords:
    """Every dataref and commandref found so far, plus per-frame change tracking."""

    def __init__(self, data_access: DatarefLookup, command_access: CommandLookup) -> None:
        self._data_access = data_access
        self._command_access = command_access
        self._datarefs: List[DataRefRecord] = []
        self._commandrefs: List[CommandRefRecord] = []
        self._names_loaded: set[str] = set()
        self._new_refs_this_frame: List[RefRecord] = []
        self._changed_cr_this_frame: List[RefRecord] = []
        self._new_names_from_messages: List[str] = []
        self._result_records: List[weakref.ref] = []

    @property
    def all_datarefs(self) -> Sequence[RefRecord]:
        return self._datarefs

    @property
    def all_commandrefs(self) -> Sequence[RefRecord]:
        return self._commandrefs

    def add(self, names: Iterable[str], source: RefSource) -> List[RefRecord]:
        """Look up each name and record the datarefs and commands that exist.

        Names already known are skipped. Returns the records created.
        """
        new_records: List[RefRecord] = []
        for untrimmed in names:
            name = untrimmed.strip()
            if name in self._names_loaded:
                continue

            dr = self._data_access.find_dataref(name)
            cr = self._command_access.find_command(name)
            if dr is not None:
                record = DataRefRecord(name, dr, source, self._data_access)
                self._datarefs.append(record)
                new_records.append(record)
                self._names_loaded.add(name)
            if cr is not None:
                command = CommandRefRecord(name, cr, source, self, self._command_access)
                self._commandrefs.append(command)
                new_records.append(command)
                self._names_loaded.add(name)
        return new_records

    def update_values(self) -> List[RefRecord]:
        """Read every non-ignored dataref; return those whose value changed."""
        updater = DataRefUpdater(datetime.now(timezone.utc))
        return [
            dr
            for dr in self._datarefs
            if not dr.is_blacklisted() and dr.update(updater)
        ]

    def add_updated_command_this_frame(self, record: RefRecord) -> None:
        self._changed_cr_this_frame.append(record)

    def add_new_refs_this_frame(self, records: Iterable[RefRecord]) -> None:
        self._new_refs_this_frame.extend(records)

    def add_new_ref_from_message(self, name: str) -> None:
        """Queue a name sent by another plugin; it is looked up on the next update."""
        self._new_names_from_messages.append(name)

    def update(self) -> None:
        """Run one frame: read values, add queued names and refresh live searches."""
        changed_drs = self.update_values()

        if self._new_names_from_messages:
            from_messages = self.add(self._new_names_from_messages, RefSource.USER_MSG)
            logger.info(
                "Loaded : %d commands/datarefs from messages; %d are ok",
                len(self._new_names_from_messages),
                len(from_messages),
            )
            self._new_names_from_messages.clear()

        if len(self._changed_cr_this_frame) > 1:
            unique = {}
            for record in sorted(self._changed_cr_this_frame, key=lambda r: r.name):
                unique.setdefault(record.name, record)
            self._changed_cr_this_frame = list(unique.values())

        live = []
        for ref in self._result_records:
            results = ref()
            if results is not None:
                live.append((ref, results))
        self._result_records = [ref for ref, _ in live]

        for _, results in live:
            results.update(
                self._new_refs_this_frame, self._changed_cr_this_frame, changed_drs
            )

        self._changed_cr_this_frame.clear()
        self._new_refs_this_frame.clear()

    def save_to_file(self, dataref_filename: PathLike, commandref_filename: PathLike) -> None:
        """Write the dataref and commandref names, one per line, sorted case-insensitively."""
        self._write_names([dr.name for dr in self._datarefs], Path(dataref_filename))
        self._write_names([cr.name for cr in self._commandrefs], Path(commandref_filename))

    @staticmethod
    def _write_names(names: List[str], path: Path) -> None:
        names.sort(key=name_sort_key)
        try:
            with path.open("w", encoding="utf-8", newline="\n") as f:
                for name in names:
                    f.write(name + "\n")
        except OSError:
            logger.error("Error writing file %s", path)

    def do_search(self, params: SearchParams) -> SearchResults:
        """Start a search with fixed parameters; it is kept up to date while referenced."""
        results = SearchResults(params, self._commandrefs, self._datarefs)
        self._result_records.append(weakref.ref(results))
        return results