from datetime import datetime, timedelta, timezone

from drtool.ref import EPOCH, RefRecord, RefSource
from drtool.search import SearchParams, SearchResults, name_sort_key


class FakeRef(RefRecord):
    def __init__(self, name, command=False):
        super().__init__(name, RefSource.FILE)
        self._command = command

    def display_string(self, display_length):
        return self.name

    def is_command(self):
        return self._command

    def is_dataref(self):
        return not self._command


def names(records):
    return [r.name for r in records]


def make_params(terms="", crs=True, drs=True):
    params = SearchParams()
    params.set_include_refs(crs, drs)
    params.set_search_terms(terms)
    return params


def now():
    return datetime.now(timezone.utc)


def test_name_sort_key_is_case_insensitive_and_prefix_first():
    items = ["sim/c", "sim/B", "sim/a", "sim"]
    assert sorted(items, key=name_sort_key) == ["sim", "sim/a", "sim/B", "sim/c"]
    assert name_sort_key("SIM/X") == name_sort_key("sim/x")


def test_sort_in_place():
    params = SearchParams()
    records = [FakeRef("sim/c"), FakeRef("sim/B"), FakeRef("sim/a")]
    params.sort(records)
    assert names(records) == ["sim/a", "sim/B", "sim/c"]


def test_search_terms_split_and_all_must_match():
    params = make_params("  sim   cock ")
    assert params.search_field == "  sim   cock "
    assert params.filter(FakeRef("sim/cockpit/alt"), now())
    assert not params.filter(FakeRef("sim/flightmodel/alt"), now())


def test_negated_term_excludes():
    params = make_params("sim -cock")
    assert not params.filter(FakeRef("sim/cockpit/alt"), now())
    assert params.filter(FakeRef("sim/flightmodel/alt"), now())


def test_case_sensitivity():
    params = make_params("COCKPIT")
    assert params.filter(FakeRef("sim/cockpit/alt"), now())
    params.set_case_sensitive(True)
    assert not params.filter(FakeRef("sim/cockpit/alt"), now())
    assert params.filter(FakeRef("sim/COCKPIT/alt"), now())


def test_regex_search():
    params = make_params("^sim/.*alt$")
    params.set_use_regex(True)
    assert params.use_regex
    assert params.filter(FakeRef("sim/cockpit/alt"), now())
    assert not params.filter(FakeRef("sim/cockpit/alt2"), now())
    assert not params.invalid_regex


def test_regex_case_insensitive_by_default():
    params = make_params("^SIM/")
    params.set_use_regex(True)
    assert params.filter(FakeRef("sim/x/y"), now())
    params.set_case_sensitive(True)
    assert not params.filter(FakeRef("sim/x/y"), now())


def test_invalid_regex_flagged():
    params = make_params("(")
    params.set_use_regex(True)
    assert params.invalid_regex
    params.set_use_regex(False)
    assert not params.invalid_regex


def test_type_filter():
    params = make_params(crs=False, drs=True)
    assert params.filter(FakeRef("sim/data/ref"), now())
    assert not params.filter(FakeRef("sim/cmd/ref", command=True), now())


def test_fresh_search_respects_includes_and_sorts():
    drs = [FakeRef("sim/z/data"), FakeRef("sim/A/data")]
    crs = [FakeRef("sim/m/cmd", command=True)]
    assert names(make_params().fresh_search(crs, drs)) == [
        "sim/A/data",
        "sim/m/cmd",
        "sim/z/data",
    ]
    assert names(make_params(crs=False).fresh_search(crs, drs)) == [
        "sim/A/data",
        "sim/z/data",
    ]
    assert make_params(crs=False, drs=False).fresh_search(crs, drs) == []


def test_change_detection_filters_old_records():
    recent = FakeRef("sim/recent/ref")
    recent.last_updated = now()
    old = FakeRef("sim/old/ref")
    params = make_params()
    params.set_change_detection(True, False)
    assert params.change_detection
    assert names(params.fresh_search([], [recent, old])) == ["sim/recent/ref"]


def test_change_detection_window_boundary():
    record = FakeRef("sim/edge/ref")
    params = make_params()
    params.set_change_detection(True, False)
    moment = now()
    record.last_updated = moment - timedelta(seconds=10)
    assert params.filter(record, moment)
    record.last_updated = moment - timedelta(seconds=11)
    assert not params.filter(record, moment)


def test_only_large_changes_uses_big_timestamp():
    record = FakeRef("sim/small/change")
    record.last_updated = now()
    params = make_params()
    params.set_change_detection(True, True)
    assert params.only_large_changes
    assert not params.filter(record, now())
    record.last_updated_big = now()
    assert params.filter(record, now())


def test_inplace_union_merges_without_duplicates():
    params = SearchParams()
    a, c = FakeRef("sim/a"), FakeRef("sim/c")
    results = [a, c]
    dup = FakeRef("SIM/A")
    b = FakeRef("sim/b")
    params.inplace_union(results, [dup, b])
    assert names(results) == ["sim/a", "sim/b", "sim/c"]
    assert results[0] is a


def test_update_search_adds_matching_new_refs():
    params = make_params("alt")
    results = []
    stamp = params.update_search(
        results, [FakeRef("sim/x/alt"), FakeRef("sim/x/speed")], [], []
    )
    assert names(results) == ["sim/x/alt"]
    assert stamp > EPOCH


def test_update_search_change_detection_adds_changed():
    params = make_params()
    params.set_change_detection(True, False)
    results = []
    changed_dr = FakeRef("sim/changed/data")
    changed_cr = FakeRef("sim/changed/cmd", command=True)
    params.update_search(results, [], [changed_cr], [changed_dr])
    assert names(results) == ["sim/changed/cmd", "sim/changed/data"]


def test_search_results_container_and_update():
    params = make_params("sim")
    drs = [FakeRef("sim/b/x"), FakeRef("sim/a/x")]
    results = SearchResults(params, [], drs)
    assert len(results) == 2
    assert names(results) == ["sim/a/x", "sim/b/x"]
    assert results[1].name == "sim/b/x"
    assert results.last_update_timestamp == EPOCH

    params.set_search_terms("nothing-matches-this")
    results.update([FakeRef("sim/c/x")], [], [])
    assert names(results) == ["sim/a/x", "sim/b/x", "sim/c/x"]
    assert results.last_update_timestamp > EPOCH