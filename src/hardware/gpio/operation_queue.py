"""
Operation Queue

FIFO of deferred pin commands. Nothing executes on enqueue; flush() runs
the commands in order on the caller's thread. A command is dropped from the
queue only after it succeeded, so a failing flush leaves the failing command
and everything behind it queued for the next attempt (no rollback).
"""

from collections import deque
from typing import Callable, Deque, List

from models.commands import PinCommand


class OperationQueue:

    def __init__(self):
        self._pending: Deque[PinCommand] = deque()

    def enqueue(self, command: PinCommand) -> None:
        self._pending.append(command)

    def flush(self, execute: Callable[[PinCommand], None]) -> int:
        """
        Execute every queued command in FIFO order.

        Args:
            execute: Called once per command; any exception aborts the flush

        Returns:
            Number of commands executed
        """
        executed = 0
        while self._pending:
            command = self._pending[0]
            execute(command)
            self._pending.popleft()
            executed += 1
        return executed

    def pending(self) -> List[PinCommand]:
        """Snapshot of queued commands, head first."""
        return list(self._pending)

    def contains(self, command_type: type) -> bool:
        return any(isinstance(command, command_type) for command in self._pending)

    def discard(self, *command_types: type) -> int:
        """Drop queued commands of the given types, keeping the others in order."""
        kept = deque(command for command in self._pending if not isinstance(command, command_types))
        dropped = len(self._pending) - len(kept)
        self._pending = kept
        return dropped

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)
