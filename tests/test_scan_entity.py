import pytest

from drtool.scan_entity import (
    scan_aircraft,
    scan_lua_folder,
    scan_plugin_folder,
    scan_plugin_xpl,
    scan_xplane_binary,
)


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


@pytest.fixture
def aircraft(tmp_path):
    ac = tmp_path / "MyPlane"
    _write(ac / "plane.acf", b"\x00sim/aircraft/acf_ref\x00")
    _write(ac / "dataref.txt", b"custom/list/ref_one 1 float\n")
    _write(ac / "cdataref.txt", b"custom/cdr/ref_two,short\n")
    _write(ac / "plugins" / "helper" / "64" / "helper.xpl", b"\x00plugin/xpl/ref_three\x00")
    _write(ac / "plugins" / "xlua" / "scripts" / "main.lua", b'"lua/script/ref_four"\n')
    _write(ac / "objects" / "deep" / "part.obj", b"obj/deep/ref_five\n")
    _write(ac / "notes.txt", b"\x00txt/file/ref_six\x00")
    _write(ac / "Custom Avionics" / "logic.LUA", b"sasl/upper/ref_seven ")
    _write(ac / "fmod" / "sounds.snd", b"snd/fmod/ref_eight\n")
    _write(ac / "objects" / "readme.md", b"md/objects/ref_nine\n")
    return ac / "plane.acf"


def test_scan_aircraft_collects_all_sources(aircraft):
    result = scan_aircraft(aircraft)
    for expected in (
        "sim/aircraft/acf_ref",
        "custom/list/ref_one",
        "custom/cdr/ref_two",
        "plugin/xpl/ref_three",
        "lua/script/ref_four",
        "obj/deep/ref_five",
        "sasl/upper/ref_seven",
        "snd/fmod/ref_eight",
    ):
        assert expected in result


def test_scan_aircraft_skips_other_files(aircraft):
    result = scan_aircraft(aircraft)
    assert "txt/file/ref_six" not in result
    assert "md/objects/ref_nine" not in result
    assert "short" not in result


def test_scan_aircraft_sorted_unique(aircraft):
    result = scan_aircraft(aircraft)
    assert result == sorted(set(result))


def test_scan_aircraft_empty_folder(tmp_path):
    assert scan_aircraft(tmp_path / "plane.acf") == []


def test_scan_aircraft_missing_folder(tmp_path):
    with pytest.raises(FileNotFoundError):
        scan_aircraft(tmp_path / "nowhere" / "plane.acf")


def test_scan_plugin_folder_only_xpl(tmp_path):
    _write(tmp_path / "a" / "lin_x64" / "a.xpl", b"\x00xpl/first/dataref\x00")
    _write(tmp_path / "b" / "b.xpl", b"\x00xpl/second/dataref\x00xpl/first/dataref\x00")
    _write(tmp_path / "b" / "b.txt", b"\x00txt/other/dataref\x00")
    _write(tmp_path / "c" / "c.XPL", b"\x00upper/case/dataref\x00")
    result = scan_plugin_folder(tmp_path)
    assert result == ["xpl/first/dataref", "xpl/second/dataref"]


def test_scan_plugin_folder_missing(tmp_path):
    with pytest.raises(OSError):
        scan_plugin_folder(tmp_path / "missing")


def test_scan_lua_folder_top_level_only(tmp_path):
    _write(tmp_path / "one.lua", b'"lua/first/dataref"\n')
    _write(tmp_path / "two.LUA", b'"lua/second/dataref"\n')
    _write(tmp_path / "three.txt", b'"txt/third/dataref"\n')
    _write(tmp_path / "sub" / "four.lua", b'"lua/fourth/dataref"\n')
    result = scan_lua_folder(tmp_path)
    assert sorted(result) == ["lua/first/dataref", "lua/second/dataref"]


def test_scan_lua_folder_keeps_duplicates(tmp_path):
    _write(tmp_path / "one.lua", b'"lua/shared/dataref"\n')
    _write(tmp_path / "two.lua", b'"lua/shared/dataref"\n')
    assert scan_lua_folder(tmp_path) == ["lua/shared/dataref", "lua/shared/dataref"]


def test_scan_lua_folder_missing(tmp_path):
    assert scan_lua_folder(tmp_path / "missing") == []


def test_scan_plugin_xpl(tmp_path):
    path = _write(tmp_path / "p.xpl", b"zz/plugin/two\x00aa/plugin/one\x00zz/plugin/two\x00")
    assert scan_plugin_xpl(path) == ["aa/plugin/one", "zz/plugin/two"]


def test_scan_xplane_binary(tmp_path):
    path = _write(tmp_path / "X-Plane", b"\x00sim/operation/quit\x00")
    assert scan_xplane_binary(path) == ["sim/operation/quit"]
    assert scan_xplane_binary(tmp_path / "absent") == []