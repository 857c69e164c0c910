"""Parsing of MIDI Tuning Standard (MTS) system-exclusive messages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Iterable

from organtuning.tuning import NOTE_COUNT, note_to_frequency

SYSEX_START = 0xF0
SYSEX_END = 0xF7
NON_REALTIME = 0x7E
REALTIME = 0x7F
MTS_SUB_ID = 0x08
TUNING_NAME_LENGTH = 16
DEFAULT_TUNING_NAME = "12-TET"
_NO_CHANGE = 16383
_OCTAVE = 12


class MTSFormat(IntEnum):
    """Kinds of MTS message, as far as the tuning data layout goes."""

    REQUEST = 0
    BULK = 1
    SINGLE = 2
    SCALE_OCT_ONE_BYTE = 3
    SCALE_OCT_TWO_BYTE = 4
    SCALE_OCT_ONE_BYTE_EXT = 5
    SCALE_OCT_TWO_BYTE_EXT = 6


class _State(Enum):
    IGNORING = auto()
    MATCHING_SYSEX = auto()
    SYSEX_VALID = auto()
    MATCHING_MTS = auto()
    MATCHING_BANK = auto()
    MATCHING_PROG = auto()
    MATCHING_CHANNEL = auto()
    TUNING_NAME = auto()
    NUM_TUNINGS = auto()
    TUNING_DATA = auto()
    CHECKSUM = auto()


# Sub-ID#2 byte -> (data format, state that follows it)
_MTS_KINDS: dict[int, tuple[MTSFormat, _State]] = {
    0: (MTSFormat.REQUEST, _State.MATCHING_PROG),
    1: (MTSFormat.BULK, _State.MATCHING_PROG),
    2: (MTSFormat.SINGLE, _State.MATCHING_PROG),
    3: (MTSFormat.REQUEST, _State.MATCHING_BANK),
    4: (MTSFormat.BULK, _State.MATCHING_BANK),
    5: (MTSFormat.SCALE_OCT_ONE_BYTE, _State.MATCHING_BANK),
    6: (MTSFormat.SCALE_OCT_TWO_BYTE, _State.MATCHING_BANK),
    7: (MTSFormat.SINGLE, _State.MATCHING_BANK),
    8: (MTSFormat.SCALE_OCT_ONE_BYTE_EXT, _State.MATCHING_CHANNEL),
    9: (MTSFormat.SCALE_OCT_TWO_BYTE_EXT, _State.MATCHING_CHANNEL),
}


@dataclass(frozen=True)
class TuningUpdate:
    """A request to sound ``note`` at the pitch of ``retune_note`` plus ``detune`` semitones."""

    note: int
    retune_note: int
    detune: float

    def frequency(self) -> float:
        """Return the frequency in hertz the note is retuned to."""
        return note_to_frequency(self.retune_note, self.detune)


def _shift_in(value: int, byte: int) -> int:
    """Append a 7-bit byte to an accumulator that behaves as a signed 32-bit int."""
    v = ((value << 7) | byte) & 0xFFFFFFFF
    return v - (1 << 32) if v & 0x80000000 else v


@dataclass
class _Run:
    """Working state of a single :meth:`SysexParser.feed` call."""

    state: _State = _State.IGNORING
    fmt: MTSFormat = MTSFormat.BULK
    counter: int = 0
    value: int = 0
    note: int = 0
    num_tunings: int = 0


class SysexParser:
    """Extracts tuning changes from a stream of MIDI bytes.

    All MTS formats are accepted; anything that is not an MTS message is
    ignored. The name carried by bulk and scale/octave messages is kept in
    :attr:`tuning_name`.
    """

    def __init__(self) -> None:
        self._name = bytearray(TUNING_NAME_LENGTH + 1)
        initial = DEFAULT_TUNING_NAME.encode("ascii")
        self._name[: len(initial)] = initial

    @property
    def tuning_name(self) -> str:
        """The current tuning name."""
        raw = bytes(self._name)
        return raw.split(b"\0", 1)[0].decode("latin-1")

    def feed(self, data: Iterable[int]) -> list[TuningUpdate]:
        """Parse a buffer of MIDI bytes and return the tuning updates it holds.

        Signed byte values are taken as their unsigned counterparts.
        """
        run = _Run()
        updates: list[TuningUpdate] = []
        for raw in data:
            b = raw & 0xFF
            if b == SYSEX_END:
                run.state = _State.IGNORING
                continue
            if b > 0x7F and b != SYSEX_START:
                continue
            self._step(run, b, updates)
        return updates

    def _step(self, run: _Run, b: int, updates: list[TuningUpdate]) -> None:
        state = run.state
        if state is _State.IGNORING:
            if b == SYSEX_START:
                run.state = _State.MATCHING_SYSEX
        elif state is _State.MATCHING_SYSEX:
            run.counter = 0
            run.state = _State.SYSEX_VALID if b in (NON_REALTIME, REALTIME) else _State.IGNORING
        elif state is _State.SYSEX_VALID:
            position = run.counter
            run.counter += 1
            if position == 1:
                if b == MTS_SUB_ID:
                    run.state = _State.MATCHING_MTS
            elif position > 1:
                run.state = _State.IGNORING
        elif state is _State.MATCHING_MTS:
            run.counter = 0
            kind = _MTS_KINDS.get(b)
            if kind is None:
                run.state = _State.IGNORING
            else:
                run.fmt, run.state = kind
        elif state is _State.MATCHING_BANK:
            run.state = _State.MATCHING_PROG
        elif state is _State.MATCHING_PROG:
            if run.fmt is MTSFormat.SINGLE:
                run.state = _State.NUM_TUNINGS
            else:
                run.state = _State.TUNING_NAME
                self._name[0] = 0
        elif state is _State.TUNING_NAME:
            self._name[run.counter] = b
            run.counter += 1
            if run.counter >= TUNING_NAME_LENGTH:
                self._name[TUNING_NAME_LENGTH] = 0
                run.counter = 0
                run.state = _State.TUNING_DATA
        elif state is _State.NUM_TUNINGS:
            run.num_tunings = b
            run.counter = 0
            run.state = _State.TUNING_DATA
        elif state is _State.MATCHING_CHANNEL:
            position = run.counter
            run.counter += 1
            if position == 2:
                run.counter = 0
                run.state = _State.TUNING_DATA
        elif state is _State.TUNING_DATA:
            self._tuning_data(run, b, updates)
        elif state is _State.CHECKSUM:
            run.state = _State.IGNORING

    @staticmethod
    def _tuning_data(run: _Run, b: int, updates: list[TuningUpdate]) -> None:
        fmt = run.fmt
        if fmt is MTSFormat.BULK:
            run.value = _shift_in(run.value, b)
            run.counter += 1
            if run.counter & 3 == 3:
                if not (run.note == 0x7F and run.value == _NO_CHANGE):
                    updates.append(
                        TuningUpdate(
                            run.note,
                            (run.value >> 14) & 127,
                            (run.value & 16383) / 16383.0,
                        )
                    )
                run.value = 0
                run.counter += 1
                run.note += 1
                if run.note >= NOTE_COUNT:
                    run.state = _State.CHECKSUM
        elif fmt is MTSFormat.SINGLE:
            run.value = _shift_in(run.value, b)
            run.counter += 1
            if not run.counter & 3:
                if not (run.note == 0x7F and run.value == _NO_CHANGE):
                    updates.append(
                        TuningUpdate(
                            (run.value >> 21) & 127,
                            (run.value >> 14) & 127,
                            (run.value & 16383) / 16383.0,
                        )
                    )
                run.value = 0
                run.note += 1
                if run.note >= run.num_tunings:
                    run.state = _State.IGNORING
        elif fmt in (MTSFormat.SCALE_OCT_ONE_BYTE, MTSFormat.SCALE_OCT_ONE_BYTE_EXT):
            detune = (float(b) - 64.0) * 0.01
            updates.extend(
                TuningUpdate(j, j, detune) for j in range(run.counter, NOTE_COUNT, _OCTAVE)
            )
            run.counter += 1
            if run.counter >= _OCTAVE:
                run.state = (
                    _State.CHECKSUM if fmt is MTSFormat.SCALE_OCT_ONE_BYTE else _State.IGNORING
                )
        elif fmt in (MTSFormat.SCALE_OCT_TWO_BYTE, MTSFormat.SCALE_OCT_TWO_BYTE_EXT):
            run.value = _shift_in(run.value, b)
            run.counter += 1
            if not run.counter & 1:
                divisor = 8191.0 if run.value > 8192 else 8192.0
                detune = (float(run.value & 16383) - 8192.0) / divisor
                updates.extend(
                    TuningUpdate(j, j, detune) for j in range(run.note, NOTE_COUNT, _OCTAVE)
                )
                run.note += 1
                if run.note >= _OCTAVE:
                    run.state = (
                        _State.CHECKSUM if fmt is MTSFormat.SCALE_OCT_TWO_BYTE else _State.IGNORING
                    )
        else:
            run.state = _State.IGNORING