import pytest

from videopac.keyboard import KEY_TABLE, KeyMap, RomType, describe_state_error, key_name

CODES = {name: code for code, name in KEY_TABLE}


@pytest.mark.parametrize("rom, expected", [
    (RomType.O2, "Wrong BIOS for Savefile: O2ROM needed."),
    (RomType.G7400, "Wrong BIOS for Savefile: G7400 ROM needed."),
    (RomType.C52, "Wrong BIOS for Savefile: C52 ROM needed."),
    (RomType.JOPAC, "Wrong BIOS for Savefile: JOPAC ROM needed."),
])
def test_rom_types(rom, expected):
    assert describe_state_error(200 + rom) == expected


def test_state_error_messages():
    assert describe_state_error(0) == "Savefile loaded."
    assert describe_state_error(199) == "Wrong ROM-File for Savefile."
    assert describe_state_error(200 + RomType.G7400) == "Wrong BIOS for Savefile: G7400 ROM needed."
    assert describe_state_error(200 + RomType.O2) == "Wrong BIOS for Savefile: O2ROM needed."
    assert describe_state_error(200 + RomType.UNKNOWN) == "Wrong BIOS for Savefile: UNKNOWN ROM needed."
    assert describe_state_error(5) is None


def test_key_table_round_trip():
    for code, name in KEY_TABLE:
        assert key_name(code) == name
    assert len(CODES) == len(KEY_TABLE)


def test_unknown_key():
    with pytest.raises(KeyError):
        key_name(-1)


def test_default_system_keys():
    keys = KeyMap().syskeys
    assert keys["quit"] == CODES["F12"]
    assert keys["pause"] == CODES["F1"]
    assert keys["inject"] == CODES["F6"]


def test_set_systemkeys():
    km = KeyMap()
    km.set_systemkeys(1, 2, 3, 4, 5, 6, 7, 8)
    assert km.syskeys["debug"] == 3
    assert km.syskeys["load"] == 7


def test_set_joykeys_drops_invalid_codes():
    km = KeyMap()
    km.set_joykeys(0, CODES["W"], CODES["S"], CODES["A"], CODES["D"], CODES["F1"])
    assert km.joykeys[0] == [CODES["W"], CODES["S"], CODES["A"], CODES["D"], 0]
    assert km.is_joystick_key(CODES["W"])
    assert not km.is_joystick_key(CODES["Q"])


def test_set_joykeys_bad_joystick_ignored():
    km = KeyMap()
    km.set_joykeys(2, 10, 11, 12, 13, 14)
    assert km.joykeys == [[0] * 5, [0] * 5]


def test_joystick_state():
    km = KeyMap()
    km.set_joykeys(1, CODES["I"], CODES["K"], CODES["J"], CODES["L"], CODES["SPACE"])
    assert km.joystick_state(1, set()) == 0xFF
    assert km.joystick_state(1, {CODES["I"]}) == 0xFE
    assert km.joystick_state(1, {CODES["K"]}) == 0xFB
    assert km.joystick_state(1, {CODES["SPACE"]}) == 0xEF
    assert km.joystick_state(0, {CODES["I"]}) == 0xFF
    assert km.joystick_state(5, {CODES["I"]}) == 0xFF


def test_both_joysticks_in_table():
    km = KeyMap()
    km.set_joykeys(0, CODES["W"], CODES["S"], CODES["A"], CODES["D"], CODES["E"])
    km.set_joykeys(1, CODES["I"], CODES["K"], CODES["J"], CODES["L"], CODES["O"])
    assert km.is_joystick_key(CODES["W"])
    assert km.is_joystick_key(CODES["O"])