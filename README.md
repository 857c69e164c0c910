# organtuning

Pure-Python helpers for the tuning and MIDI side of a virtual pipe organ.
The package has no runtime dependencies.

## Modules

- **`organtuning.tuning`**: twelve-tone equal temperament.
  `note_to_frequency(note, detune=0.0)` gives the pitch of a MIDI note
  (A4 = note 69 = 440 Hz), `equal_temperament_table()` the 128 note
  frequencies, and `frequency_to_note_et(freq)` the nearest note, using the
  geometric midpoint between neighbours and clamping to 0..127.
- **`organtuning.sysex`**: `SysexParser` reads MIDI Tuning Standard SysEx
  messages from a stream of bytes. `feed(data)` returns a list of
  `TuningUpdate(note, retune_note, detune)` values, and
  `TuningUpdate.frequency()` gives the resulting pitch. Bulk dumps,
  single-note changes and one- and two-byte scale/octave messages (with
  and without a channel mask) are understood. Other messages are skipped.
  The name carried by bulk and scale/octave messages is kept in
  `tuning_name`, which starts as `"12-TET"`. `MTSFormat` lists the
  message layouts.
- **`organtuning.client`**: `MTSClient` answers `frequency`, `ratio` and
  `semitones` queries per note and channel (channel `-1` means unknown),
  plus `should_filter_note`, `frequency_to_note`,
  `frequency_to_note_and_channel`, `parse_midi_data` and `scale_name`.
  It follows an `MTSMaster` while that master is connected. The master
  holds a global table, per-channel tables, filtered (unmapped) notes and
  a scale name. Otherwise the client uses its local table, which
  `parse_midi_data` retunes. It is a context manager: leaving the block
  (or calling `close()`) deregisters it from the master.
- **`organtuning.channels`**: 16-channel MIDI masks. `channels_mask_text`
  gives a label such as `"1-4,9"`, `"None"` or `"Any"`. `ChannelSelection`
  is an editable selection (`select_all`, `clear`, `toggle_channel`,
  `is_selected`, `mask`, `text`). It calls an optional `on_change`
  callback with the new mask.
- **`organtuning.keyboard`**: `KeyboardMap` tracks an inclusive playable
  note range and a set of key-switch notes.
- **`organtuning.layout`**: layout arithmetic for an organ console:
  `sequencer_optimal_width`, `division_estimated_height` and
  `level_extent`.

## Installation

```
pip install organtuning
```

## Examples

Local tuning from SysEx:

```python
from organtuning.client import MTSClient

with MTSClient(None) as client:
    print(client.frequency(69, 0))      # 440.0
    # Retune every C up by 50 cents with a one-byte scale/octave message
    client.parse_midi_data(bytes([0xF0, 0x7E, 0x7F, 0x08, 0x08, 0x03, 0x7F, 0x7F,
                                  114, 64, 64, 64, 64, 64, 64, 64, 64, 64, 64, 64, 0xF7]))
    print(client.semitones(60, 0))      # about 0.5
    print(client.scale_name())          # 12-TET
```

Following a master:

```python
from organtuning.client import MTSClient, MTSMaster
from organtuning.tuning import equal_temperament_table

table = list(equal_temperament_table())
table[69] = 442.0
master = MTSMaster(tuning=table, name="A = 442")

with MTSClient(master) as client:
    print(client.has_master())           # True
    print(client.frequency(69, 0))       # 442.0
    print(client.frequency_to_note(442.0))  # 69
    print(client.scale_name())           # A = 442
```

Channels, keyboard and layout:

```python
from organtuning.channels import ChannelSelection, channels_mask_text
from organtuning.keyboard import KeyboardMap
from organtuning.layout import sequencer_optimal_width, level_extent

print(channels_mask_text(0b1_0000_1111))   # 1-4,9

selection = ChannelSelection(0, on_change=print)
selection.toggle_channel(2, True)           # prints 4
print(selection.text)                       # 3

keys = KeyboardMap(36, 96)
keys.set_key_switches({24, 25})
print(keys.is_playable(30), keys.is_key_switch(24))  # False True

print(sequencer_optimal_width(8))           # 384
print(level_extent(0.25, 100, 0.5))         # 50.0
```

## What it does not do

The package produces no sound and draws nothing. It has no synthesis
engine, no graphical console and no command-line program. `MTSMaster` is
an ordinary in-process object: the package does not discover or connect
to a tuning service installed on the system, and it does not save or load
tunings or settings.

## Running the tests

```
pip install organtuning[test]
pytest
```