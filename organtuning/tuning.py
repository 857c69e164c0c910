"""Twelve-tone equal temperament helpers for MIDI note numbers."""

from __future__ import annotations

import math
from functools import lru_cache

NOTE_COUNT = 128
REFERENCE_NOTE = 69
REFERENCE_FREQUENCY = 440.0
RATIO_TO_SEMITONES = 12.0 / math.log(2.0)


def note_to_frequency(note: float, detune: float = 0.0) -> float:
    """Return the equal-tempered frequency of ``note`` shifted by ``detune`` semitones."""
    return REFERENCE_FREQUENCY * 2.0 ** ((note + detune - REFERENCE_NOTE) / 12.0)


@lru_cache(maxsize=None)
def equal_temperament_table() -> tuple[float, ...]:
    """Return the frequencies of all 128 MIDI notes in equal temperament."""
    return tuple(note_to_frequency(note) for note in range(NOTE_COUNT))


def _truncated_half(value: int) -> int:
    """Halve an integer, rounding toward zero."""
    return int(value / 2)


def _geometric_midpoint(lower: float, upper: float) -> float:
    return lower * 2.0 ** (0.5 * (math.log(upper / lower) / math.log(2.0)))


def frequency_to_note_et(freq: float) -> int:
    """Return the equal-tempered MIDI note whose pitch is nearest to ``freq``.

    Frequencies below the lowest note map to 0 and above the highest to 127.
    The boundary between two neighbouring notes is their geometric midpoint.
    """
    table = equal_temperament_table()
    top = NOTE_COUNT - 1

    if freq <= table[0]:
        return 0
    if freq >= table[top]:
        return top

    first, last = 0, top
    while True:
        mid = first + _truncated_half(last - first)
        if mid <= top and freq == table[mid]:
            nearest = mid
            break
        if first > last:
            if mid == 0:
                nearest = 0
            else:
                mid = min(mid, top)
                nearest = mid - int((freq - table[mid - 1]) < (table[mid] - freq))
            break
        if freq < table[mid]:
            last = mid - 1
        else:
            first = mid + 1

    if nearest == 0:
        neighbour = 1
    elif nearest == top:
        neighbour = top - 1
    elif abs(table[nearest - 1] - freq) < abs(table[nearest + 1] - freq):
        neighbour = nearest - 1
    else:
        neighbour = nearest + 1

    lower, upper = sorted((nearest, neighbour))
    midpoint = _geometric_midpoint(table[lower], table[upper])
    return lower if freq < midpoint else upper