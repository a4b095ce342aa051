"""Records of simulator datarefs: reading, change tracking, display and writing."""

from __future__ import annotations

import math
from datetime import datetime
from enum import IntFlag
from typing import Any, Callable, Optional, Protocol, Sequence, Union

from .ref import RefRecord, RefSource
from .string_util import compact_fp_string, printable_from_byte_array

Value = Union[float, int, list, bytes, None]

ELLIPSIS = ".."
BIG_CHANGE_RATIO = 0.01


class DataType(IntFlag):
    """Type flags a dataref may report; several may be set at once."""

    UNKNOWN = 0
    INT = 1
    FLOAT = 2
    DOUBLE = 4
    FLOAT_ARRAY = 8
    INT_ARRAY = 16
    DATA = 32


# Order in which a dataref's value representation is chosen.
_KIND_PRIORITY = (
    DataType.DOUBLE,
    DataType.FLOAT,
    DataType.INT,
    DataType.FLOAT_ARRAY,
    DataType.INT_ARRAY,
    DataType.DATA,
)

_WRITABLE_TYPES = (
    DataType.INT
    | DataType.DOUBLE
    | DataType.FLOAT
    | DataType.FLOAT_ARRAY
    | DataType.INT_ARRAY
    | DataType.DATA
)


class DataAccess(Protocol):
    """The simulator's dataref interface."""

    def data_types(self, ref: Any) -> int: ...

    def can_write(self, ref: Any) -> bool: ...

    def get_float(self, ref: Any) -> float: ...

    def get_double(self, ref: Any) -> float: ...

    def get_int(self, ref: Any) -> int: ...

    def float_array_size(self, ref: Any) -> int: ...

    def get_float_array(self, ref: Any, count: int) -> Sequence[float]: ...

    def int_array_size(self, ref: Any) -> int: ...

    def get_int_array(self, ref: Any, count: int) -> Sequence[int]: ...

    def data_size(self, ref: Any) -> int: ...

    def get_data(self, ref: Any, count: int) -> bytes: ...

    def set_float(self, ref: Any, value: float) -> None: ...

    def set_double(self, ref: Any, value: float) -> None: ...

    def set_int(self, ref: Any, value: int) -> None: ...

    def set_float_array(self, ref: Any, values: Sequence[float], offset: int) -> None: ...

    def set_int_array(self, ref: Any, values: Sequence[int], offset: int) -> None: ...

    def set_data(self, ref: Any, data: bytes, offset: int) -> None: ...

    def measure_string(self, text: str) -> float: ...


def make_array_string(
    stringify: Callable[[Any], str],
    values: Sequence[Any],
    max_pixels: Optional[float],
    measure: Callable[[str], float],
) -> str:
    """Render ``values`` as ``[a,b,...]``, ending with ``..`` once ``max_pixels`` is reached.

    ``max_pixels`` of None means no limit.
    """
    limit = math.inf if max_pixels is None else max_pixels
    ellipsis_length = measure(ELLIPSIS)
    comma_length = measure(",")
    current_length = measure("[]")

    parts = ["["]
    last_index = len(values) - 1
    for index, element in enumerate(values):
        text = stringify(element)
        value_length = measure(text)
        length_if_added = current_length + comma_length + value_length
        if index != last_index:
            length_if_added += ellipsis_length

        if length_if_added < limit:
            if index:
                parts.append(",")
            parts.append(text)
            current_length += comma_length + value_length
        else:
            parts.append(ELLIPSIS)
            break
    parts.append("]")
    return "".join(parts)


def _is_big_change(new: float, old: float) -> bool:
    diff = abs(new - old)
    if math.isnan(diff):
        return False
    if old == 0:
        return diff > 0
    return BIG_CHANGE_RATIO < diff / old


class DataRefUpdater:
    """Reads fresh values into records, stamping changes with one frame time."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def update(self, record: "DataRefRecord") -> bool:
        """Read the record's current value; True if it changed."""
        kind = record.kind
        if kind is DataType.FLOAT:
            return self._update_scalar(record, record.access.get_float(record.ref), True)
        if kind is DataType.DOUBLE:
            return self._update_scalar(record, record.access.get_double(record.ref), True)
        if kind is DataType.INT:
            return self._update_scalar(record, record.access.get_int(record.ref), False)
        if kind is DataType.FLOAT_ARRAY:
            count = record.access.float_array_size(record.ref)
            return self._update_array(
                record, list(record.access.get_float_array(record.ref, count)), count
            )
        if kind is DataType.INT_ARRAY:
            count = record.access.int_array_size(record.ref)
            return self._update_array(
                record, list(record.access.get_int_array(record.ref, count)), count
            )
        if kind is DataType.DATA:
            count = record.access.data_size(record.ref)
            return self._update_array(
                record, bytes(record.access.get_data(record.ref, count)), count
            )
        record.last_updated = self.now
        return False

    def _update_scalar(self, record: "DataRefRecord", new: float, track_big: bool) -> bool:
        old = record.value
        if new == old:
            return False
        if track_big and _is_big_change(new, old):
            record.last_updated_big = self.now
        record.last_updated = self.now
        record.previous_value = old
        record.value = new
        return True

    def _update_array(self, record: "DataRefRecord", new: Any, count: int) -> bool:
        if len(new) != count:
            # The dataref reported an inconsistent size.
            return False
        if new == record.value:
            return False
        record.last_updated = self.now
        record.value = new
        return True


class DataRefRecord(RefRecord):
    """A dataref found in the simulator, with its last read value."""

    def __init__(self, name: str, ref: Any, source: RefSource, access: DataAccess) -> None:
        super().__init__(name, source)
        self.ref = ref
        self.access = access
        self.data_type = DataType(access.data_types(ref))
        self.kind: Optional[DataType] = next(
            (kind for kind in _KIND_PRIORITY if self.data_type & kind), None
        )
        self.value: Value = self._initial_value()
        self.previous_value: Value = None

    def _initial_value(self) -> Value:
        if self.kind in (DataType.DOUBLE, DataType.FLOAT):
            return 0.0
        if self.kind is DataType.INT:
            return 0
        if self.kind in (DataType.FLOAT_ARRAY, DataType.INT_ARRAY):
            return []
        if self.kind is DataType.DATA:
            return b""
        return None

    def is_command(self) -> bool:
        return False

    def is_dataref(self) -> bool:
        return True

    def is_array(self) -> bool:
        return bool(self.data_type & (DataType.FLOAT_ARRAY | DataType.INT_ARRAY))

    def array_length(self) -> int:
        """Number of elements (or bytes) in an array or data dataref."""
        if not (self.is_array() or self.data_type & DataType.DATA):
            raise TypeError(f"{self.name} is not an array dataref")
        if isinstance(self.value, (list, bytes)):
            return len(self.value)
        return -1

    def label_string(self) -> str:
        """The name, with ``[length]`` appended for arrays."""
        if self.is_array():
            return f"{self.name}[{self.array_length()}]"
        return self.name

    def _stringify(self, max_pixels: Optional[float], quote_data: bool) -> str:
        value = self.value
        if self.kind is DataType.FLOAT_ARRAY:
            return make_array_string(
                compact_fp_string, value, max_pixels, self.access.measure_string
            )
        if self.kind is DataType.INT_ARRAY:
            return make_array_string(str, value, max_pixels, self.access.measure_string)
        if self.kind is DataType.DATA:
            text = printable_from_byte_array(value)
            return f'"{text}"' if quote_data else text
        if self.kind is DataType.INT:
            return str(value)
        if self.kind in (DataType.FLOAT, DataType.DOUBLE):
            return compact_fp_string(value)
        return "(null)"

    def display_string(self, display_length: int) -> str:
        if self.is_blacklisted():
            return "ignored"
        return self._stringify(display_length, quote_data=True)

    def edit_string(self) -> str:
        """The full value as text for editing."""
        return self._stringify(None, quote_data=False)

    def array_element_edit_string(self, index: int) -> str:
        """One array element as text; other kinds give their whole edit string."""
        if self.kind is DataType.FLOAT_ARRAY:
            return compact_fp_string(self.value[index])
        if self.kind is DataType.INT_ARRAY:
            return str(self.value[index])
        return self.edit_string()

    def update(self, updater: DataRefUpdater) -> bool:
        """Read the current value; True if it changed."""
        return updater.update(self)

    def writable(self) -> bool:
        if self.data_type & _WRITABLE_TYPES:
            return bool(self.access.can_write(self.ref))
        return False

    def _require(self, flag: DataType) -> None:
        if not self.data_type & flag:
            raise TypeError(f"{self.name} is not of type {flag.name}")

    def set_double(self, value: float) -> None:
        self._require(DataType.DOUBLE)
        self.access.set_double(self.ref, value)

    def set_float(self, value: float) -> None:
        self._require(DataType.FLOAT)
        self.access.set_float(self.ref, value)

    def set_int(self, value: int) -> None:
        self._require(DataType.INT)
        self.access.set_int(self.ref, value)

    def set_int_array(self, values: Sequence[int]) -> None:
        self._require(DataType.INT_ARRAY)
        self.access.set_int_array(self.ref, list(values), 0)

    def set_int_array_element(self, value: int, index: int) -> None:
        self._require(DataType.INT_ARRAY)
        self.access.set_int_array(self.ref, [value], index)

    def set_float_array(self, values: Sequence[float]) -> None:
        self._require(DataType.FLOAT_ARRAY)
        self.access.set_float_array(self.ref, list(values), 0)

    def set_float_array_element(self, value: float, index: int) -> None:
        self._require(DataType.FLOAT_ARRAY)
        self.access.set_float_array(self.ref, [value], index)

    def set_data(self, data_str: str) -> None:
        """Write a string, followed by its terminating NUL byte."""
        self._require(DataType.DATA)
        self.access.set_data(self.ref, data_str.encode() + b"\0", 0)