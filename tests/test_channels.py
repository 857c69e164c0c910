import pytest

from organtuning.channels import ChannelSelection, channels_mask_text


def _parse(text):
    channels = set()
    for part in text.split(","):
        if "-" in part:
            first, last = part.split("-")
            channels.update(range(int(first) - 1, int(last)))
        else:
            channels.add(int(part) - 1)
    return channels


def _mask_of(channels):
    mask = 0
    for channel in channels:
        mask |= 1 << channel
    return mask


def test_empty_mask_reads_none():
    assert channels_mask_text(0) == "None"


def test_full_mask_reads_any():
    assert channels_mask_text(0xFFFF) == "Any"


def test_two_adjacent_channels_are_listed():
    assert channels_mask_text(0b11) == "1,2"


def test_three_adjacent_channels_form_a_range():
    assert channels_mask_text(0b111) == "1-3"


def test_range_followed_by_single():
    assert channels_mask_text(0b10111) == "1-3,5"


@pytest.mark.parametrize(
    "mask", [1, 0b101, 0b1011, 0x8000, 0x7FFF, 0xFFFE, 0x5555, 0xAAAA, 0b1110011100]
)
def test_text_round_trips_to_mask(mask):
    assert _mask_of(_parse(channels_mask_text(mask))) == mask


@pytest.mark.parametrize("mask", [0b111, 0xF0F0, 0x7FFF])
def test_long_runs_never_use_commas_inside(mask):
    text = channels_mask_text(mask)
    assert all(part.count("-") <= 1 for part in text.split(","))
    assert "-" in text


def test_select_all_notifies_full_mask():
    seen = []
    selection = ChannelSelection(0, seen.append)
    selection.select_all()
    assert seen == [0xFFFF]
    assert selection.mask == 0xFFFF
    assert selection.text == "Any"


def test_clear_notifies_empty_mask():
    seen = []
    selection = ChannelSelection(0b1010, seen.append)
    selection.clear()
    assert seen == [0]
    assert selection.text == "None"


def test_toggle_sets_and_clears_bits():
    seen = []
    selection = ChannelSelection(0, seen.append)
    selection.toggle_channel(3, True)
    selection.toggle_channel(0, True)
    selection.toggle_channel(3, False)
    assert seen == [1 << 3, (1 << 3) | 1, 1]
    assert selection.is_selected(0)
    assert not selection.is_selected(3)


def test_toggle_without_change_does_not_notify():
    seen = []
    selection = ChannelSelection(1 << 5, seen.append)
    selection.toggle_channel(5, True)
    selection.toggle_channel(6, False)
    assert seen == []
    assert selection.mask == 1 << 5


def test_works_without_callback():
    selection = ChannelSelection()
    selection.toggle_channel(15, True)
    assert selection.mask == 1 << 15


@pytest.mark.parametrize("index", [-1, 16])
def test_out_of_range_index_is_rejected(index):
    selection = ChannelSelection()
    with pytest.raises(ValueError):
        selection.toggle_channel(index, True)
    with pytest.raises(ValueError):
        selection.is_selected(index)