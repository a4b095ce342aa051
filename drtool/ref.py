"""The common base of dataref and commandref records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class RefSource(Enum):
    """Where the name of a dataref or commandref was found."""

    AIRCRAFT = "aircraft"
    IGNORE_FILE = "ignore"
    FILE = "file"
    PLUGIN = "plugin"
    USER_MSG = "message"
    X_PLANE = "X-Plane"
    LUA = "Lua"
    DRT_INTERNAL_LIST = "DRT internal list"

    def __str__(self) -> str:
        return self.value


class RefRecord(ABC):
    """A named dataref or commandref with the times it last changed."""

    def __init__(self, name: str, source: RefSource) -> None:
        self.name = name
        self.source = source
        self.last_updated = EPOCH
        self.last_updated_big = EPOCH

    @abstractmethod
    def display_string(self, display_length: int) -> str:
        """Text shown for the current value, fitted to the given width."""

    def is_blacklisted(self) -> bool:
        """True for refs that came from the ignore file and must not be read."""
        return self.source is RefSource.IGNORE_FILE

    @abstractmethod
    def is_command(self) -> bool:
        """True for commandrefs."""

    @abstractmethod
    def is_dataref(self) -> bool:
        """True for datarefs."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.source!s})"