"""MIDI tuning (equal temperament, MTS SysEx, tuning client), channel masks, keyboard maps and console layout helpers for a virtual pipe organ."""

__version__ = "0.3.0"

__all__ = ["tuning", "sysex", "client", "channels", "keyboard", "layout"]