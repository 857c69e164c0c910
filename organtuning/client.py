"""Per-instance tuning client backed by an optional global tuning master."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Iterator, Sequence, TypeVar

from organtuning.sysex import SysexParser
from organtuning.tuning import (
    NOTE_COUNT,
    RATIO_TO_SEMITONES,
    equal_temperament_table,
)

CHANNEL_COUNT = 16
UNKNOWN_CHANNEL = -1

_LN2 = math.log(2.0)
_INVERSE_ET = tuple(1.0 / f for f in equal_temperament_table())

_K = TypeVar("_K", bound=Hashable)


def _is_valid_channel(channel: int) -> bool:
    return not (channel & ~15)


def _geometric_midpoint(lower: float, upper: float) -> float:
    return lower * 2.0 ** (0.5 * (math.log(upper / lower) / _LN2))


def _closest(freq: float, candidates: Iterable[tuple[_K, float]], default: _K) -> _K:
    """Return the key of the candidate frequency nearest to ``freq`` on a log scale."""
    lower_key = upper_key = default
    lower_f = upper_f = 0.0
    d_lower = d_upper = 0.0
    for key, f in candidates:
        d = f - freq
        if d == 0.0:
            return key
        if d < 0.0:
            if d_lower == 0.0 or d > d_lower:
                d_lower, lower_key, lower_f = d, key, f
        elif d_upper == 0.0 or d < d_upper:
            d_upper, upper_key, upper_f = d, key, f

    if d_lower == 0.0:
        return upper_key
    if d_upper == 0.0 or lower_key == upper_key:
        return lower_key
    return lower_key if freq < _geometric_midpoint(lower_f, upper_f) else upper_key


@dataclass
class MTSMaster:
    """The shared tuning source that clients follow while it is connected.

    ``tuning`` is the global table of 128 note frequencies. Channels listed in
    ``multi_channel`` use their own table from ``channel_tunings``. Notes in
    ``filtered_notes`` are unmapped; ``filtered_channel_notes`` holds
    ``(channel, note)`` pairs unmapped in multi-channel tables.
    """

    tuning: list[float] | None = field(default_factory=lambda: list(equal_temperament_table()))
    channel_tunings: dict[int, list[float]] = field(default_factory=dict)
    multi_channel: set[int] = field(default_factory=set)
    filtered_notes: set[int] = field(default_factory=set)
    filtered_channel_notes: set[tuple[int, int]] = field(default_factory=set)
    name: str | None = None
    connected: bool = True
    clients: int = field(default=0, init=False)

    def register_client(self) -> None:
        self.clients += 1

    def deregister_client(self) -> None:
        self.clients -= 1

    def has_master(self) -> bool:
        return self.connected

    def tuning_table(self) -> Sequence[float] | None:
        return self.tuning

    def channel_tuning_table(self, channel: int) -> Sequence[float] | None:
        return self.channel_tunings.get(channel)

    def use_multi_channel_tuning(self, channel: int) -> bool:
        return channel in self.multi_channel

    def should_filter_note(self, note: int, channel: int) -> bool:
        return note in self.filtered_notes

    def should_filter_note_multi_channel(self, note: int, channel: int) -> bool:
        return (channel, note) in self.filtered_channel_notes

    def scale_name(self) -> str | None:
        return self.name


class MTSClient:
    """Answers tuning queries for one instrument instance.

    While the master is online its tables are used; otherwise the local
    table, which MTS system-exclusive messages can retune, is used. A channel
    of -1 means the channel is unknown.
    """

    def __init__(self, master: MTSMaster | None = None) -> None:
        self._master = master
        self._parser = SysexParser()
        self._local_freqs = list(equal_temperament_table())
        self._supports_note_filtering = False
        self._supports_multi_channel_note_filtering = False
        self._supports_multi_channel_tuning = False
        self._freq_request_received = False
        self._supports_mts_sysex = False
        self._closed = False
        if master is not None:
            master.register_client()

    def __enter__(self) -> MTSClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Deregister from the master; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if self._master is not None:
            self._master.deregister_client()

    def _online_table(self) -> Sequence[float] | None:
        master = self._master
        if master is None:
            return None
        table = master.tuning_table()
        if table is None or not master.has_master():
            return None
        return table

    def has_master(self) -> bool:
        """Return whether a connected master supplies the tuning."""
        return self._online_table() is not None

    def _note_request(self, channel: int) -> None:
        self._freq_request_received = True
        self._supports_multi_channel_tuning = _is_valid_channel(channel)

    def _channel_table(self, channel: int) -> Sequence[float] | None:
        """Return the multi-channel table to use for a query, if any."""
        assert self._master is not None
        if not (
            (not self._supports_note_filtering or self._supports_multi_channel_note_filtering)
            and self._supports_multi_channel_tuning
            and self._master.use_multi_channel_tuning(channel)
        ):
            return None
        return self._master.channel_tuning_table(channel & 15)

    def _retuned_frequency(self, note: int, channel: int) -> float | None:
        n = note & 127
        self._note_request(channel)
        table = self._online_table()
        if table is None:
            return None
        channel_table = self._channel_table(channel)
        if channel_table is not None:
            return channel_table[n]
        return table[n]

    def frequency(self, note: int, channel: int = UNKNOWN_CHANNEL) -> float:
        """Return the frequency in hertz of ``note``."""
        freq = self._retuned_frequency(note, channel)
        return self._local_freqs[note & 127] if freq is None else freq

    def ratio(self, note: int, channel: int = UNKNOWN_CHANNEL) -> float:
        """Return the retuning of ``note`` as a ratio to its equal-tempered pitch."""
        n = note & 127
        freq = self._retuned_frequency(note, channel)
        if freq is None:
            if not self._supports_mts_sysex:
                return 1.0
            freq = self._local_freqs[n]
        return freq * _INVERSE_ET[n]

    def semitones(self, note: int, channel: int = UNKNOWN_CHANNEL) -> float:
        """Return the retuning of ``note`` in semitones from its equal-tempered pitch."""
        n = note & 127
        freq = self._retuned_frequency(note, channel)
        if freq is None:
            if not self._supports_mts_sysex:
                return 0.0
            freq = self._local_freqs[n]
        return RATIO_TO_SEMITONES * math.log(freq * _INVERSE_ET[n])

    def should_filter_note(self, note: int, channel: int = UNKNOWN_CHANNEL) -> bool:
        """Return True if ``note`` is unmapped and should not be played."""
        self._supports_note_filtering = True
        self._supports_multi_channel_note_filtering = _is_valid_channel(channel)
        if not self._freq_request_received:
            self._supports_multi_channel_tuning = self._supports_multi_channel_note_filtering

        if not self.has_master():
            return False
        assert self._master is not None
        n = note & 127
        if (
            self._supports_multi_channel_note_filtering
            and self._supports_multi_channel_tuning
            and self._master.use_multi_channel_tuning(channel)
        ):
            return self._master.should_filter_note_multi_channel(n, channel)
        return self._master.should_filter_note(n, channel)

    def frequency_to_note(self, freq: float, channel: int = UNKNOWN_CHANNEL) -> int:
        """Return the mapped note whose pitch is nearest to ``freq``."""
        table = self._online_table()
        online = table is not None
        freqs: Sequence[float] = table if table is not None else self._local_freqs
        multi_channel = False
        master = self._master

        if online and _is_valid_channel(channel):
            assert master is not None
            if master.use_multi_channel_tuning(channel):
                channel_table = master.channel_tuning_table(channel & 15)
                if channel_table is not None:
                    freqs = channel_table
                    multi_channel = True

        def candidates() -> Iterator[tuple[int, float]]:
            for note in range(NOTE_COUNT):
                if online:
                    assert master is not None
                    if multi_channel:
                        if master.should_filter_note_multi_channel(note, channel):
                            continue
                    elif master.should_filter_note(note, channel):
                        continue
                yield note, freqs[note]

        return _closest(freq, candidates(), 0)

    def frequency_to_note_and_channel(self, freq: float) -> tuple[int, int]:
        """Return ``(note, channel)`` of the mapped pitch nearest to ``freq``.

        Multi-channel tables are searched when the master uses them;
        otherwise channel 0 is prescribed.
        """
        master = self._master
        if self.has_master():
            assert master is not None
            in_use = [
                ch
                for ch in range(CHANNEL_COUNT)
                if master.use_multi_channel_tuning(ch)
                and master.channel_tuning_table(ch) is not None
            ]
            if in_use:

                def candidates() -> Iterator[tuple[tuple[int, int], float]]:
                    for ch in in_use:
                        table = master.channel_tuning_table(ch)
                        assert table is not None
                        for note in range(NOTE_COUNT):
                            if master.should_filter_note_multi_channel(note, ch):
                                continue
                            yield (note, ch), table[note]

                return _closest(freq, candidates(), (0, in_use[0]))

        return self.frequency_to_note(freq, 0), 0

    def parse_midi_data(self, data: Iterable[int]) -> None:
        """Apply the MTS messages found in a buffer of MIDI bytes to the local table."""
        self._supports_mts_sysex = True
        for update in self._parser.feed(data):
            if 0 <= update.note < NOTE_COUNT and 0 <= update.retune_note < NOTE_COUNT:
                self._local_freqs[update.note] = update.frequency()

    def scale_name(self) -> str:
        """Return the name of the current scale."""
        if self.has_master():
            assert self._master is not None
            name = self._master.scale_name()
            if name is not None:
                return name
        return self._parser.tuning_name