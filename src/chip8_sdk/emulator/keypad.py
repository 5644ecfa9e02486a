"""
Keypad Controller for CHIP-8 Emulator
=====================================

The COSMAC VIP hex keypad has 16 keys, 0-F:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Each key is a plain boolean that the host sets and clears. The program
side is level-triggered but self-clearing: the skip-if-key and
wait-for-key instructions consume a press once they have observed it,
so one physical press cannot satisfy several checks in a row.

Hosts usually map the keypad onto the left-hand block of a QWERTY
keyboard, which keeps the physical 4x4 shape:

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from enum import Enum
from typing import Dict, List, Optional

KEY_COUNT = 16


class KeypadLayout(Enum):
    """How key names passed to key_down()/key_up() are interpreted."""
    HEX = "hex"         # "0".."F" name the keypad key directly
    QWERTY = "qwerty"   # Host keyboard letters/digits, 4x4 block


# =============================================================================
# KEY NAME TABLES
# =============================================================================

KEY_MAP_HEX: Dict[str, int] = {f"{i:X}": i for i in range(KEY_COUNT)}

KEY_MAP_QWERTY: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

_LAYOUT_MAPS = {
    KeypadLayout.HEX: KEY_MAP_HEX,
    KeypadLayout.QWERTY: KEY_MAP_QWERTY,
}


class Keypad:
    """
    Sixteen-key CHIP-8 keypad state.

    Example:
        >>> pad = Keypad()
        >>> pad.key_down("W")       # QWERTY W is keypad 5
        >>> pad.is_pressed(5)
        True
        >>> pad.consume(5)
        True
        >>> pad.is_pressed(5)
        False
    """

    def __init__(self, layout: KeypadLayout = KeypadLayout.QWERTY):
        self.layout = layout
        self._keys = [False] * KEY_COUNT

    def reset(self) -> None:
        """Release every key."""
        self._keys = [False] * KEY_COUNT

    # =========================================================================
    # Host Input API
    # =========================================================================

    def set_key(self, index: int, pressed: bool) -> None:
        """
        Set a key's state by keypad index.

        Args:
            index: Key 0-15
            pressed: True for key down, False for key up

        Raises:
            ValueError: If index is not 0-15
        """
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"Key index must be 0-15, got {index}")
        self._keys[index] = bool(pressed)

    def key_index(self, key: str) -> int:
        """
        Translate a key name into a keypad index using the active layout.

        Raises:
            ValueError: If the name is not part of the layout
        """
        index = _LAYOUT_MAPS[self.layout].get(key.upper())
        if index is None:
            raise ValueError(f"Unknown key '{key}' for {self.layout.value} layout")
        return index

    def key_down(self, key: str) -> None:
        """Press a key by name."""
        self.set_key(self.key_index(key), True)

    def key_up(self, key: str) -> None:
        """Release a key by name."""
        self.set_key(self.key_index(key), False)

    # =========================================================================
    # Program-side Queries
    # =========================================================================

    def is_pressed(self, index: int) -> bool:
        """Check a key without consuming it (low nibble of index used)."""
        return self._keys[index & 0x0F]

    def consume(self, index: int) -> bool:
        """
        Check a key and clear it if it was pressed.

        Returns:
            True if the key was pressed
        """
        index &= 0x0F
        pressed = self._keys[index]
        self._keys[index] = False
        return pressed

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered pressed key, or None."""
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def pressed_keys(self) -> List[int]:
        """Indices of all pressed keys."""
        return [i for i, pressed in enumerate(self._keys) if pressed]
