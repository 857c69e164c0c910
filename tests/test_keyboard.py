from organtuning.keyboard import KeyboardMap


def test_default_range_covers_all_midi_notes():
    keyboard = KeyboardMap()
    assert keyboard.playable_range == (0, 127)
    assert keyboard.is_playable(0)
    assert keyboard.is_playable(127)
    assert not keyboard.is_playable(128)


def test_range_is_inclusive():
    keyboard = KeyboardMap(36, 96)
    assert keyboard.is_playable(36)
    assert keyboard.is_playable(96)
    assert not keyboard.is_playable(35)
    assert not keyboard.is_playable(97)


def test_set_playable_range_reports_change():
    keyboard = KeyboardMap(36, 96)
    assert keyboard.set_playable_range(48, 84) is True
    assert keyboard.playable_range == (48, 84)
    assert not keyboard.is_playable(40)


def test_set_same_range_reports_no_change():
    keyboard = KeyboardMap(36, 96)
    assert keyboard.set_playable_range(36, 96) is False
    assert keyboard.playable_range == (36, 96)


def test_key_switches_start_empty():
    keyboard = KeyboardMap()
    assert not keyboard.is_key_switch(24)
    assert keyboard.key_switches == frozenset()


def test_key_switches_are_replaced():
    keyboard = KeyboardMap()
    keyboard.set_key_switches([24, 25, 26])
    assert keyboard.is_key_switch(25)
    keyboard.set_key_switches({30})
    assert not keyboard.is_key_switch(25)
    assert keyboard.key_switches == frozenset({30})


def test_key_switch_independent_of_range():
    keyboard = KeyboardMap(36, 96)
    keyboard.set_key_switches([24])
    assert keyboard.is_key_switch(24)
    assert not keyboard.is_playable(24)