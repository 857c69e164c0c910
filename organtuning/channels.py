"""MIDI channel masks: readable summaries and an editable selection."""

from __future__ import annotations

from itertools import groupby
from typing import Callable, Iterator

CHANNEL_COUNT = 16
ALL_CHANNELS_MASK = (1 << CHANNEL_COUNT) - 1


def _selected_channels(mask: int) -> Iterator[int]:
    return (channel for channel in range(CHANNEL_COUNT) if mask & (1 << channel))


def _runs(mask: int) -> Iterator[list[int]]:
    """Yield runs of consecutive selected channels, lowest first."""
    for _, group in groupby(
        enumerate(_selected_channels(mask)), key=lambda pair: pair[1] - pair[0]
    ):
        yield [channel for _, channel in group]


def _format_run(run: list[int]) -> str:
    first, last = run[0] + 1, run[-1] + 1
    if len(run) == 1:
        return str(first)
    if len(run) == 2:
        return f"{first},{last}"
    return f"{first}-{last}"


def channels_mask_text(mask: int) -> str:
    """Describe a 16-channel mask with one-based channel numbers.

    An empty mask reads "None" and a full one "Any". Otherwise runs of three
    or more consecutive channels are written as ranges ("1-4") and shorter
    runs as comma-separated numbers.
    """
    if mask == 0:
        return "None"
    if mask == ALL_CHANNELS_MASK:
        return "Any"
    return ",".join(_format_run(run) for run in _runs(mask))


def _check_index(index: int) -> None:
    if not 0 <= index < CHANNEL_COUNT:
        raise ValueError(f"channel index {index} is outside 0..{CHANNEL_COUNT - 1}")


class ChannelSelection:
    """A set of selected MIDI channels held as a bit mask.

    ``on_change`` is called with the new mask whenever the selection is
    modified through :meth:`select_all`, :meth:`clear` or
    :meth:`toggle_channel`.
    """

    def __init__(
        self, mask: int = 0, on_change: Callable[[int], None] | None = None
    ) -> None:
        self._mask = mask
        self.on_change = on_change

    @property
    def mask(self) -> int:
        """The current channel mask."""
        return self._mask

    @property
    def text(self) -> str:
        """A readable summary of the selection."""
        return channels_mask_text(self._mask)

    def select_all(self) -> None:
        """Select all sixteen channels."""
        self._mask = ALL_CHANNELS_MASK
        self._notify()

    def clear(self) -> None:
        """Deselect every channel."""
        self._mask = 0
        self._notify()

    def toggle_channel(self, index: int, selected: bool) -> None:
        """Select or deselect the channel at zero-based ``index``.

        Nothing is reported when the channel already has the requested state.
        """
        _check_index(index)
        bit = 1 << index
        if selected:
            if self._mask & bit:
                return
            self._mask |= bit
        else:
            if not self._mask & bit:
                return
            self._mask &= ~bit
        self._notify()

    def is_selected(self, index: int) -> bool:
        """Return whether the channel at zero-based ``index`` is selected."""
        _check_index(index)
        return bool(self._mask & (1 << index))

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._mask)