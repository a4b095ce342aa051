"""Filtering and ordering of datarefs and commandrefs for a search window."""

from __future__ import annotations

import copy
import heapq
import re
import string
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Sequence

from .ref import EPOCH, RefRecord

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

CHANGE_WINDOW_SECONDS = 10


def name_sort_key(name: str) -> str:
    """Key that orders names case-insensitively, shorter prefixes first."""
    return name.translate(_ASCII_LOWER)


def _record_key(record: RefRecord) -> str:
    return name_sort_key(record.name)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SearchParams:
    """The terms and switches of one search, and the filtering they imply."""

    def __init__(self) -> None:
        self._search_terms: List[str] = []
        self._search_regexes: List[re.Pattern] = []
        self._search_field = ""
        self._use_regex = False
        self._case_sensitive = False
        self._change_detection = False
        self._only_large_changes = False
        self._include_drs = False
        self._include_crs = False
        self._regex_fail = False

    @property
    def search_field(self) -> str:
        return self._search_field

    @property
    def use_regex(self) -> bool:
        return self._use_regex

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def change_detection(self) -> bool:
        return self._change_detection

    @property
    def only_large_changes(self) -> bool:
        return self._only_large_changes

    @property
    def include_datarefs(self) -> bool:
        return self._include_drs

    @property
    def include_commandrefs(self) -> bool:
        return self._include_crs

    @property
    def invalid_regex(self) -> bool:
        """True if the last attempt to compile the terms as regexes failed."""
        return self._regex_fail

    def set_search_terms(self, terms: str) -> None:
        """Split ``terms`` on spaces, dropping empty terms."""
        self._search_field = terms
        self._search_terms = [term for term in terms.split(" ") if term]
        self._regex_fail = False
        if self._use_regex:
            self._build_regex()
        else:
            self._search_regexes = []

    def set_change_detection(self, detection_on: bool, only_big: bool) -> None:
        self._change_detection = detection_on
        self._only_large_changes = only_big

    def set_include_refs(self, include_crs: bool, include_drs: bool) -> None:
        self._include_crs = include_crs
        self._include_drs = include_drs

    def set_case_sensitive(self, sensitive: bool) -> None:
        self._case_sensitive = sensitive
        if self._use_regex:
            self._build_regex()

    def set_use_regex(self, use_regex: bool) -> None:
        self._regex_fail = False
        self._use_regex = use_regex
        if use_regex:
            self._build_regex()

    def _build_regex(self) -> None:
        self._regex_fail = False
        self._search_regexes = []
        flags = 0 if self._case_sensitive else re.IGNORECASE
        for term in self._search_terms:
            try:
                self._search_regexes.append(re.compile(term, flags))
            except re.error:
                self._search_regexes = []
                self._regex_fail = True

    def _filter_by_type(self, record: RefRecord) -> bool:
        return (self._include_drs and record.is_dataref()) or (
            self._include_crs and record.is_command()
        )

    def _term_matches(self, haystack: str, needle: str) -> bool:
        if not self._case_sensitive:
            haystack = haystack.translate(_ASCII_UPPER)
            needle = needle.translate(_ASCII_UPPER)
        if needle.startswith("-"):
            return needle[1:] not in haystack
        return needle in haystack

    def _filter_by_name(self, record: RefRecord) -> bool:
        if not self._search_terms:
            return True
        haystack = record.name
        if self._use_regex:
            return all(regex.search(haystack) for regex in self._search_regexes)
        return all(self._term_matches(haystack, term) for term in self._search_terms)

    def _filter_by_time(self, record: RefRecord, now: datetime) -> bool:
        if not self._change_detection:
            return True
        last = record.last_updated_big if self._only_large_changes else record.last_updated
        elapsed = int((now - last).total_seconds())
        return elapsed <= CHANGE_WINDOW_SECONDS

    def filter(self, record: RefRecord, now: datetime) -> bool:
        """True if the record passes the time, name and type filters."""
        return (
            self._filter_by_time(record, now)
            and self._filter_by_name(record)
            and self._filter_by_type(record)
        )

    def sort(self, records: List[RefRecord]) -> None:
        """Sort records in place by case-insensitive name."""
        records.sort(key=_record_key)

    def inplace_union(self, results: List[RefRecord], additions: Sequence[RefRecord]) -> None:
        """Merge sorted ``additions`` into sorted ``results``, skipping names already there."""
        remaining = Counter(_record_key(record) for record in results)
        fresh = []
        for record in additions:
            key = _record_key(record)
            if remaining[key] > 0:
                remaining[key] -= 1
            else:
                fresh.append(record)
        results[:] = list(heapq.merge(results, fresh, key=_record_key))

    def fresh_search(
        self, commandrefs: Iterable[RefRecord], datarefs: Iterable[RefRecord]
    ) -> List[RefRecord]:
        """Search all refs from scratch and return the sorted matches."""
        now = _now()
        results: List[RefRecord] = []
        if self._include_drs:
            results.extend(r for r in datarefs if self.filter(r, now))
        if self._include_crs:
            results.extend(r for r in commandrefs if self.filter(r, now))
        self.sort(results)
        return results

    def _merge_filtered(self, results: List[RefRecord], candidates: List[RefRecord]) -> None:
        self.sort(candidates)
        self.inplace_union(results, candidates)

    def update_search(
        self,
        results: List[RefRecord],
        new_refs: Sequence[RefRecord],
        changed_cr: Sequence[RefRecord],
        changed_dr: Sequence[RefRecord],
    ) -> datetime:
        """Add new and changed refs to ``results`` in place; return the time used."""
        now = _now()
        if self._change_detection:
            def keep_changed(record: RefRecord) -> bool:
                if self._only_large_changes:
                    return self.filter(record, now)
                return self._filter_by_name(record)

            working: List[RefRecord] = []
            if self._include_drs:
                working.extend(r for r in changed_dr if keep_changed(r))
            if self._include_crs:
                working.extend(r for r in changed_cr if keep_changed(r))
            self._merge_filtered(results, working)

        if new_refs:
            self._merge_filtered(results, [r for r in new_refs if self.filter(r, now)])

        return now


class SearchResults:
    """The live result list of one search with fixed parameters."""

    def __init__(
        self,
        params: SearchParams,
        commandrefs: Iterable[RefRecord],
        datarefs: Iterable[RefRecord],
    ) -> None:
        self.params = copy.deepcopy(params)
        self._refs = self.params.fresh_search(commandrefs, datarefs)
        self.last_update_timestamp = EPOCH

    def update(
        self,
        new_refs: Sequence[RefRecord],
        changed_cr: Sequence[RefRecord],
        changed_dr: Sequence[RefRecord],
    ) -> None:
        self.last_update_timestamp = self.params.update_search(
            self._refs, new_refs, changed_cr, changed_dr
        )

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> Iterator[RefRecord]:
        return iter(self._refs)

    def __getitem__(self, index: int) -> RefRecord:
        return self._refs[index]