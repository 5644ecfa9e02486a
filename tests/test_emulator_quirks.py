"""
Quirk Profile Unit Tests
========================

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import pytest

from chip8_sdk.emulator import (
    Quirks,
    QUIRKS_CHIP48,
    QUIRKS_COSMAC,
    QUIRKS_DEFAULT,
    get_quirks,
    list_quirk_profiles,
)


class TestProfiles:
    """Test profile lookup."""

    @pytest.mark.parametrize("name,expected", [
        ("default", QUIRKS_DEFAULT),
        ("DEFAULT", QUIRKS_DEFAULT),
        ("", QUIRKS_DEFAULT),
        ("cosmac", QUIRKS_COSMAC),
        ("vip", QUIRKS_COSMAC),
        ("chip48", QUIRKS_CHIP48),
        ("chip-48", QUIRKS_CHIP48),
    ])
    def test_lookup(self, name, expected):
        assert get_quirks(name) is expected

    def test_instance_passthrough(self):
        custom = Quirks(shift_uses_vy=False)
        assert get_quirks(custom) is custom

    def test_unknown(self):
        with pytest.raises(ValueError, match="Available"):
            get_quirks("superchip")

    def test_list(self):
        names = [p.name for p in list_quirk_profiles()]
        assert names == ["default", "cosmac", "chip48"]

    def test_frozen(self):
        with pytest.raises(AttributeError):
            QUIRKS_DEFAULT.clip_sprites = True


class TestDefaults:
    """The default profile's conventions."""

    def test_default_conventions(self):
        assert QUIRKS_DEFAULT.shift_uses_vy is True
        assert QUIRKS_DEFAULT.call_pushes_return_address is False
        assert QUIRKS_DEFAULT.clip_sprites is False

    def test_chip48_shifts_in_place(self):
        assert QUIRKS_CHIP48.shift_uses_vy is False
