# drtool

A library for finding, tracking and searching the datarefs and commands that
a flight simulator, its aircraft and its plugins expose.

## Scanning files

`drtool.scan_files` and `drtool.scan_entity` pull possible dataref and
command names out of files. They work the way `strings` does. A candidate is
a run of more than eight characters from letters, digits and `_/-.+`. It must
contain a slash and must not start with one.

- `scan_file_for_dataref_strings(path)` scans one file. It returns a sorted
  list with no duplicates, or `[]` if the file cannot be read.
- `load_list_file(path)` reads a `dataref.txt`-style list. It keeps the first
  word of each line that contains a slash.
- `scan_aircraft(acf_path)` scans the folder that holds an aircraft's `.acf`
  file. It reads the following:
  - `dataref.txt` and `cdataref.txt`;
  - the `.xpl` files under `plugins`;
  - the `.obj` and `.acf` files at the top level;
  - the `.obj`, `.acf`, `.lua` and `.snd` files under `Custom Avionics`,
    `objects`, `fmod` and `plugins/xlua/scripts`.
- `scan_plugin_folder(path)` scans every `.xpl` file under a folder.
- `scan_plugin_xpl(path)` and `scan_xplane_binary(path)` scan single binaries.
- `scan_lua_folder(path)` scans the `.lua` files directly inside a folder.
- `deduplicate(items)` returns a sorted list of the distinct items.

```python
from drtool.scan_entity import scan_aircraft

for name in scan_aircraft("Aircraft/MyPlane/MyPlane.acf"):
    print(name)
```

Progress messages go to the standard `logging` module.

## Records

`drtool.ref.RefRecord` is the base class of the two record types. Every record
has these attributes:

- `name`;
- `source`, a `RefSource` that prints as `aircraft`, `ignore`, `plugin` and
  so on;
- `last_updated`;
- `last_updated_big`.

Records whose source is `RefSource.IGNORE_FILE` are never read.

`drtool.dataref.DataRefRecord` works with any object that follows the
`DataAccess` protocol. Through it the record does the following:

- reads the dataref's type (`DataType` flags);
- keeps the current value and the one before it;
- formats the value with `display_string`, `edit_string`,
  `array_element_edit_string` and `label_string`;
- writes values with `set_int`, `set_float`, `set_double`, `set_int_array`,
  `set_float_array`, their `_element` forms, and `set_data`.

The setters raise `TypeError` when the dataref is not of that type.

A `DataRefUpdater(now)` reads new values and stamps changes with one frame
time. For float and double values, a change of more than 1% also sets
`last_updated_big`.

`drtool.commandref.CommandRefRecord` registers handlers through a
`CommandAccess` object. Calls to `handle_phase` record whether the command is
active and when it last ran. `command_once`, `command_begin` and
`command_end` pass through to the access object. `unregister` removes the
handlers.

## Searching

`drtool.search.SearchParams` holds the settings of a search:

- `set_search_terms` sets space-separated terms. A term starting with `-`
  excludes names that contain it.
- `set_use_regex` treats the terms as regular expressions. `invalid_regex`
  reports terms that failed to compile.
- `set_case_sensitive` turns case sensitivity on or off.
- `set_include_refs` chooses whether commands and datarefs are included.
- `set_change_detection` keeps only records that changed in the last 10
  seconds. A flag narrows this to large changes.

`SearchResults(params, commandrefs, datarefs)` takes a copy of the
parameters. It keeps a result list sorted by case-insensitive name and
supports `len`, iteration and indexing. `update(new_refs, changed_cr,
changed_dr)` merges new and changed records into the list.

## The record store

`drtool.allrefs.RefRecords(data_access, command_access)` owns every known
record. The data access object must also provide `find_dataref(name)`. The
command access object must also provide `find_command(name)`.

- `add(names, source)` looks each name up, creates records for the ones that
  exist and skips names it already knows.
- `add_new_ref_from_message(name)` queues a name for the next update.
- `update()` runs one frame. It reads all values, adds the queued names and
  updates every search made with `do_search` that is still referenced.
- `save_to_file(dataref_path, commandref_path)` writes the names, sorted
  case-insensitively, one per line.

`drtool.string_util` has the formatting and parsing helpers:

- `compact_fp_string`;
- `printable_from_byte_array`;
- `parse_array`, which raises `ValueError` on a wrong count or a bad field.

`drtool.geometry` provides `Point`, `Size` and `Rect`.

## What it does not do

The package does not connect to a running simulator. Values are read and
written only through the access objects you supply. It has no command-line
program, no search window or other user interface, and no preferences
storage.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```