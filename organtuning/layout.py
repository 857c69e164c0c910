"""Geometry of the organ console widgets: sequencer bar, stop grids and meters."""

from __future__ import annotations

BUTTON_WIDTH = 25
BUTTON_PADDING = 3
NAVIGATION_BUTTON_WIDTH = 3 * BUTTON_WIDTH // 2
NAVIGATION_BUTTON_COUNT = 4

CONTROL_PANEL_WIDTH = 130
STOP_BUTTON_SIZE = 86
PADDING_TOP = 30
PADDING_BOTTOM = 5


def sequencer_optimal_width(step_count: int) -> int:
    """Return the width in pixels the sequencer bar needs for ``step_count`` steps.

    The bar holds one button per step, the set button and the two
    navigation buttons, with padding between them.
    """
    if step_count < 0:
        raise ValueError(f"step count must not be negative, got {step_count}")
    width = BUTTON_WIDTH * step_count + BUTTON_PADDING * (step_count - 1)
    width += NAVIGATION_BUTTON_COUNT * (NAVIGATION_BUTTON_WIDTH + BUTTON_PADDING)
    return width + BUTTON_PADDING


def division_estimated_height(width: int, stop_count: int) -> int:
    """Return the height a division view needs to show ``stop_count`` stops at ``width``.

    Stop buttons are laid out in rows beside the control panel; the width
    must leave room for at least one button per row.
    """
    if stop_count < 0:
        raise ValueError(f"stop count must not be negative, got {stop_count}")
    per_row = int((width - CONTROL_PANEL_WIDTH) / STOP_BUTTON_SIZE)
    if per_row <= 0:
        raise ValueError(f"width {width} leaves no room for a stop button")
    rows, remainder = divmod(stop_count, per_row)
    if remainder:
        rows += 1
    return rows * STOP_BUTTON_SIZE + PADDING_TOP + PADDING_BOTTOM


def level_extent(level: float, length: float, skew: float = 1.0) -> float:
    """Return how much of a meter of ``length`` pixels is lit for ``level``.

    The level is clamped to 0..1 and then raised to ``skew``.
    """
    clamped = min(max(level, 0.0), 1.0)
    return length * clamped**skew