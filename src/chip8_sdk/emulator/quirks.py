"""
CHIP-8 Quirk Profiles
=====================

Historical CHIP-8 interpreters disagree on a handful of instruction
details. Programs written for one interpreter can misbehave on another,
so the behaviour is selectable per machine.

Quirks covered:
- shift source: 8XY6/8XYE shift VY into VX (COSMAC VIP), or shift VX
  in place ignoring VY (CHIP-48 and most modern interpreters).
- return convention: CALL pushes its own address and RET resumes two
  bytes past it, or CALL pushes the next instruction's address and RET
  resumes exactly there. Both are observably identical; they differ only
  in the values visible on the stack.
- sprite edges: pixels past the screen edge wrap around, or are clipped.

Profiles:
- default: shift VY into VX, push call-site address, wrap sprites
- cosmac: shift VY into VX, push return address, clip sprites
- chip48: shift VX in place, push return address, clip sprites

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Quirks:
    """
    Interpreter behaviour switches.

    Attributes:
        name: Profile name for display
        shift_uses_vy: 8XY6/8XYE read the value to shift from VY
        call_pushes_return_address: CALL pushes PC+2 and RET resumes at
            the popped address; otherwise CALL pushes PC and RET resumes
            at the popped address + 2
        clip_sprites: Clip sprite pixels at the screen edge instead of
            wrapping them
    """
    name: str = "custom"
    shift_uses_vy: bool = True
    call_pushes_return_address: bool = False
    clip_sprites: bool = False


# =============================================================================
# Predefined Profiles
# =============================================================================

QUIRKS_DEFAULT = Quirks(
    name="default",
    shift_uses_vy=True,
    call_pushes_return_address=False,
    clip_sprites=False,
)

QUIRKS_COSMAC = Quirks(
    name="cosmac",
    shift_uses_vy=True,
    call_pushes_return_address=True,
    clip_sprites=True,
)

QUIRKS_CHIP48 = Quirks(
    name="chip48",
    shift_uses_vy=False,
    call_pushes_return_address=True,
    clip_sprites=True,
)

_PROFILE_MAP = {
    "DEFAULT": QUIRKS_DEFAULT,
    "COSMAC": QUIRKS_COSMAC,
    "VIP": QUIRKS_COSMAC,
    "CHIP48": QUIRKS_CHIP48,
    "CHIP-48": QUIRKS_CHIP48,
}


def get_quirks(profile: Union[str, Quirks]) -> Quirks:
    """
    Resolve a quirk profile by name.

    Args:
        profile: Profile name (case-insensitive) or a Quirks instance,
                 which is returned unchanged

    Returns:
        Quirks configuration

    Raises:
        ValueError: If the profile name is not recognized
    """
    if isinstance(profile, Quirks):
        return profile

    code = profile.upper().strip()
    if code == "":
        return QUIRKS_DEFAULT
    if code in _PROFILE_MAP:
        return _PROFILE_MAP[code]

    available = ", ".join(p.name for p in list_quirk_profiles())
    raise ValueError(f"Unknown quirk profile '{profile}'. Available: {available}")


def list_quirk_profiles() -> list[Quirks]:
    """Return all predefined profiles."""
    return [QUIRKS_DEFAULT, QUIRKS_COSMAC, QUIRKS_CHIP48]
