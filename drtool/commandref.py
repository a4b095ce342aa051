"""Records of simulator commands and their activation state."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Protocol

from .ref import RefRecord, RefSource

CommandHandler = Callable[["CommandPhase"], bool]


class CommandPhase(IntEnum):
    """The phase a command is in when its handler is called."""

    BEGIN = 0
    CONTINUE = 1
    END = 2


class CommandAccess(Protocol):
    """The simulator's command interface."""

    def register_handler(self, ref: Any, handler: CommandHandler, before: bool) -> None: ...

    def unregister_handler(self, ref: Any, handler: CommandHandler, before: bool) -> None: ...

    def command_once(self, ref: Any) -> None: ...

    def command_begin(self, ref: Any) -> None: ...

    def command_end(self, ref: Any) -> None: ...


class _CommandObserver(Protocol):
    def add_updated_command_this_frame(self, record: "CommandRefRecord") -> None: ...


class CommandRefRecord(RefRecord):
    """A command found in the simulator, watched before and after it runs."""

    def __init__(
        self,
        name: str,
        ref: Any,
        source: RefSource,
        all_records: _CommandObserver,
        access: CommandAccess,
    ) -> None:
        super().__init__(name, source)
        self.ref = ref
        self.activated = False
        self._all_records = all_records
        self._access = access
        self._registered = True
        access.register_handler(ref, self.handle_phase, False)
        access.register_handler(ref, self.handle_phase, True)

    def handle_phase(self, phase: CommandPhase) -> bool:
        """Note that the command ran; always lets the command go on."""
        now = datetime.now(timezone.utc)
        self.last_updated = now
        self.last_updated_big = now
        if phase in (CommandPhase.BEGIN, CommandPhase.CONTINUE):
            self.activated = True
        elif phase == CommandPhase.END:
            self.activated = False
        self._all_records.add_updated_command_this_frame(self)
        return True

    def unregister(self) -> None:
        """Remove both handlers; calling it again does nothing."""
        if not self._registered:
            return
        self._registered = False
        self._access.unregister_handler(self.ref, self.handle_phase, False)
        self._access.unregister_handler(self.ref, self.handle_phase, True)

    def is_command(self) -> bool:
        return True

    def is_dataref(self) -> bool:
        return False

    def display_string(self, display_length: int) -> str:
        return self.name

    def command_once(self) -> None:
        self._access.command_once(self.ref)

    def command_begin(self) -> None:
        self._access.command_begin(self.ref)

    def command_end(self) -> None:
        self._access.command_end(self.ref)

    def touch(self) -> None:
        """Mark the command as just changed."""
        now = datetime.now(timezone.utc)
        self.last_updated = now
        self.last_updated_big = now