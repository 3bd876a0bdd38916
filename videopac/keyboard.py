"""Key tables, joystick mapping and system key assignments."""

from __future__ import annotations

import enum
from typing import Container, Optional

O2EM_VERSION = "1.18"
RELEASE_DATE = "(Jan/2007)"


class RomType(enum.IntEnum):
    """BIOS families a save state can require."""

    O2 = 1
    G7400 = 2
    C52 = 3
    JOPAC = 4
    UNKNOWN = 99


WRONG_ROM_ERROR = 199
WRONG_BIOS_BASE = 200

_BIOS_MESSAGES = {
    WRONG_BIOS_BASE + RomType.O2: "Wrong BIOS for Savefile: O2ROM needed.",
    WRONG_BIOS_BASE + RomType.G7400: "Wrong BIOS for Savefile: G7400 ROM needed.",
    WRONG_BIOS_BASE + RomType.C52: "Wrong BIOS for Savefile: C52 ROM needed.",
    WRONG_BIOS_BASE + RomType.JOPAC: "Wrong BIOS for Savefile: JOPAC ROM needed.",
}


def describe_state_error(error: int) -> Optional[str]:
    """Message shown after loading a save state with result code ``error``.

    Codes between 1 and 198 show no message and give None.
    """
    if error == 0:
        return "Savefile loaded."
    if error < WRONG_ROM_ERROR:
        return None
    if error == WRONG_ROM_ERROR:
        return "Wrong ROM-File for Savefile."
    return _BIOS_MESSAGES.get(error, "Wrong BIOS for Savefile: UNKNOWN ROM needed.")


KEY_TABLE: tuple[tuple[int, str], ...] = (
    *((97 + i, chr(ord("A") + i)) for i in range(26)),
    *((48 + i, str(i)) for i in range(10)),
    *((256 + i, f"{i}_PAD") for i in range(10)),
    (178, "TILDE"), (45, "MINUS"), (61, "EQUALS"), (8, "BACKSPACE"), (9, "TAB"),
    (91, "OPENBRACE"), (93, "CLOSEBRACE"), (13, "ENTER"), (58, "COLON"),
    (39, "QUOTE"), (92, "BACKSLASH"), (44, "COMMA"), (47, "SLASH"), (32, "SPACE"),
    (277, "INSERT"), (127, "DEL"), (278, "HOME"), (279, "END"), (280, "PGUP"),
    (281, "PGDN"), (276, "LEFT"), (275, "RIGHT"), (273, "UP"), (274, "DOWN"),
    (267, "SLASH_PAD"), (268, "ASTERISK"), (269, "MINUS_PAD"), (270, "PLUS_PAD"),
    (266, "DEL_PAD"), (271, "ENTER_PAD"), (316, "PRTSCR"), (19, "PAUSE"),
    (64, "AT"), (94, "CIRCUMFLEX"), (304, "LSHIFT"), (303, "RSHIFT"),
    (306, "LCONTROL"), (305, "RCONTROL"), (308, "ALT"), (307, "ALTGR"),
    (310, "LWIN"), (309, "RWIN"), (319, "MENU"), (302, "SCRLOCK"), (300, "NUMLOCK"),
    *((282 + i, f"F{i + 1}") for i in range(12)),
    (27, "ESC"),
)

_NAMES = dict(KEY_TABLE)
_CODES = {name: code for code, name in KEY_TABLE}


def key_name(code: int) -> str:
    """Name of the key with the given code."""
    try:
        return _NAMES[code]
    except KeyError:
        raise KeyError(f"unknown key code {code}") from None


SYSTEM_KEY_NAMES = ("quit", "pause", "debug", "reset", "screencap", "save", "load", "inject")
_DEFAULT_SYSTEM_KEYS = ("F12", "F1", "F4", "F5", "F8", "F2", "F3", "F6")

# Bits of the joystick byte cleared for up, down, left, right and fire.
_JOY_MASKS = (0xFE, 0xFB, 0xF7, 0xFD, 0xEF)
_MAX_JOY_KEY = 127


class KeyMap:
    """Assignment of keys to the two joysticks and to emulator functions."""

    def __init__(self) -> None:
        self.joykeys = [[0] * 5, [0] * 5]
        self._joykeystab = [False] * (_MAX_JOY_KEY + 1)
        self.syskeys: dict[str, int] = {}
        self.set_systemkeys(*(_CODES[name] for name in _DEFAULT_SYSTEM_KEYS))

    def set_joykeys(self, joystick: int, up: int, down: int, left: int,
                    right: int, fire: int) -> None:
        """Assign keys to a joystick; codes outside 1..127 become unassigned (0)."""
        if joystick not in (0, 1):
            return
        self.joykeys[joystick] = [up, down, left, right, fire]
        self._joykeystab = [False] * (_MAX_JOY_KEY + 1)
        for keys in self.joykeys:
            for i, code in enumerate(keys):
                if 1 <= code <= _MAX_JOY_KEY:
                    self._joykeystab[code] = True
                else:
                    keys[i] = 0

    def set_systemkeys(self, quit: int, pause: int, debug: int, reset: int,
                       screencap: int, save: int, load: int, inject: int) -> None:
        """Assign the keys for the emulator's own functions."""
        self.syskeys = dict(zip(SYSTEM_KEY_NAMES,
                                (quit, pause, debug, reset, screencap, save, load, inject)))

    def joystick_state(self, joystick: int, pressed: Container[int]) -> int:
        """Active-low joystick byte for the keys in ``pressed``."""
        state = 0xFF
        if joystick not in (0, 1):
            return state
        for code, mask in zip(self.joykeys[joystick], _JOY_MASKS):
            if code and code in pressed:
                state &= mask
        return state

    def is_joystick_key(self, code: int) -> bool:
        """Whether ``code`` is assigned to either joystick."""
        return 0 <= code <= _MAX_JOY_KEY and self._joykeystab[code]