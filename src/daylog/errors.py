"""Exceptions raised by the diary core and its persistence adapter."""

from pathlib import Path


class DaylogError(Exception):
    """Base class for recoverable diary errors."""


class InvalidTransitionError(DaylogError):
    """Raised when a session request does not apply to the current state."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(f"Cannot {action} while {state}")
        self.action = action
        self.state = state


class EntryStoreLoadError(DaylogError):
    """Raised when a diary file exists but cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not load diary from {path}: {reason}")
        self.path = path


class EntryStoreWriteError(DaylogError):
    """Raised when the diary file cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write diary to {path}: {reason}")
        self.path = path
