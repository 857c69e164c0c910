"""Which keys of a MIDI keyboard are playable and which are key switches."""

from __future__ import annotations

from typing import Iterable

LOWEST_NOTE = 0
HIGHEST_NOTE = 127


class KeyboardMap:
    """The playable range and key-switch notes of a keyboard."""

    def __init__(self, low: int = LOWEST_NOTE, high: int = HIGHEST_NOTE) -> None:
        self._low = low
        self._high = high
        self._key_switches: frozenset[int] = frozenset()

    @property
    def playable_range(self) -> tuple[int, int]:
        """The lowest and highest playable notes, inclusive."""
        return self._low, self._high

    @property
    def key_switches(self) -> frozenset[int]:
        """The notes used as key switches."""
        return self._key_switches

    def set_playable_range(self, low: int, high: int) -> bool:
        """Set the playable range; return whether it changed."""
        if (low, high) == (self._low, self._high):
            return False
        self._low, self._high = low, high
        return True

    def set_key_switches(self, notes: Iterable[int]) -> None:
        """Replace the set of key-switch notes."""
        self._key_switches = frozenset(notes)

    def is_playable(self, note: int) -> bool:
        """Return whether ``note`` lies within the playable range."""
        return self._low <= note <= self._high

    def is_key_switch(self, note: int) -> bool:
        """Return whether ``note`` is a key switch."""
        return note in self._key_switches