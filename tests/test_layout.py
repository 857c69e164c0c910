import pytest

from organtuning.layout import (
    BUTTON_PADDING,
    BUTTON_WIDTH,
    CONTROL_PANEL_WIDTH,
    PADDING_BOTTOM,
    PADDING_TOP,
    STOP_BUTTON_SIZE,
    division_estimated_height,
    level_extent,
    sequencer_optimal_width,
)


def test_sequencer_width_for_eight_steps():
    assert sequencer_optimal_width(8) == 384


@pytest.mark.parametrize("steps", [1, 4, 10, 20])
def test_sequencer_width_grows_per_step(steps):
    grown = sequencer_optimal_width(steps + 1) - sequencer_optimal_width(steps)
    assert grown == BUTTON_WIDTH + BUTTON_PADDING


def test_sequencer_negative_steps_rejected():
    with pytest.raises(ValueError):
        sequencer_optimal_width(-1)


def test_division_height_two_rows():
    width = CONTROL_PANEL_WIDTH + 4 * STOP_BUTTON_SIZE
    assert division_estimated_height(width, 8) == 207


def test_division_height_no_stops_is_padding_only():
    width = CONTROL_PANEL_WIDTH + 3 * STOP_BUTTON_SIZE
    assert division_estimated_height(width, 0) == PADDING_TOP + PADDING_BOTTOM


def test_division_partial_row_counts_as_full_row():
    width = CONTROL_PANEL_WIDTH + 3 * STOP_BUTTON_SIZE
    full = division_estimated_height(width, 3)
    assert division_estimated_height(width, 4) == full + STOP_BUTTON_SIZE
    assert division_estimated_height(width, 6) == full + STOP_BUTTON_SIZE


def test_division_extra_width_below_button_size_changes_nothing():
    width = CONTROL_PANEL_WIDTH + 2 * STOP_BUTTON_SIZE
    assert division_estimated_height(width, 7) == division_estimated_height(
        width + STOP_BUTTON_SIZE - 1, 7
    )


def test_division_wider_never_taller():
    heights = [
        division_estimated_height(CONTROL_PANEL_WIDTH + k * STOP_BUTTON_SIZE, 12)
        for k in range(1, 8)
    ]
    assert heights == sorted(heights, reverse=True)


@pytest.mark.parametrize("width", [0, CONTROL_PANEL_WIDTH, CONTROL_PANEL_WIDTH + STOP_BUTTON_SIZE - 1])
def test_division_too_narrow_rejected(width):
    with pytest.raises(ValueError):
        division_estimated_height(width, 5)


def test_division_negative_stops_rejected():
    with pytest.raises(ValueError):
        division_estimated_height(CONTROL_PANEL_WIDTH + STOP_BUTTON_SIZE, -1)


def test_level_linear_half():
    assert level_extent(0.5, 100.0) == pytest.approx(50.0)


def test_level_clamped_above_and_below():
    assert level_extent(2.5, 80.0, 0.5) == pytest.approx(80.0)
    assert level_extent(-0.3, 80.0, 0.5) == 0.0


def test_level_skew_square_root():
    assert level_extent(0.25, 40.0, 0.5) == pytest.approx(level_extent(0.5, 40.0))


def test_level_skew_below_one_lights_more():
    assert level_extent(0.3, 100.0, 0.5) > level_extent(0.3, 100.0, 1.0)


def test_level_full_scale_is_length():
    assert level_extent(1.0, 123.0, 0.5) == pytest.approx(123.0)