#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the CHIP-8 SDK emulator to:
1. Create an emulator with a quirk profile
2. Load a ROM
3. Single-step with a trace buffer
4. Run to a breakpoint
5. Answer a key wait
6. Take screenshots

Usage:
    source .venv/bin/activate
    python examples/emulator_demo.py [rom.ch8]

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import struct
import sys
from pathlib import Path

from chip8_sdk.emulator import Emulator, EmulatorConfig, RunState, TraceBuffer


# Draws the digit of whatever key is pressed, then loops back for the next.
#   0x200: CLS
#   0x202: LD V0, K
#   0x204: LD F, V0
#   0x206: LD V1, 0x1C
#   0x208: LD V2, 0x0D
#   0x20A: DRW V1, V2, 5
#   0x20C: LD V3, 0x08
#   0x20E: LD ST, V3
#   0x210: JP 0x202
KEY_ECHO = [
    0x00E0, 0xF00A, 0xF029, 0x611C, 0x620D, 0xD125, 0x6308, 0xF318, 0x1202,
]


def main():
    # Output directory for screenshots
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # Available quirk profiles: "default", "cosmac", "chip48"
    # - default: shifts read VY, RET resumes after the CALL, sprites wrap
    # - cosmac:  shifts read VY, CALL pushes the next address, sprites clip
    # - chip48:  shifts work in place, CALL pushes the next address, sprites clip

    print("Creating CHIP-8 emulator...")
    trace = TraceBuffer(maxlen=64)
    emu = Emulator(EmulatorConfig(quirks="default", seed=42), trace=trace)
    emu.add_beep_listener(lambda: print("  *beep*"))

    print(f"  Quirks: {emu.quirks.name}")
    print(f"  Display: {emu.display.width}x{emu.display.height}")

    # ==========================================================================
    # 2. Load a ROM
    # ==========================================================================
    if len(sys.argv) > 1:
        rom_path = Path(sys.argv[1])
        print(f"\nLoading {rom_path.name}...")
        emu.load_rom_file(rom_path)
    else:
        print("\nLoading built-in key echo program...")
        emu.load_rom(struct.pack(f">{len(KEY_ECHO)}H", *KEY_ECHO))

    # ==========================================================================
    # 3. Single-step
    # ==========================================================================
    print("\nStepping...")
    for _ in range(3):
        result = emu.step()
        print(f"  {result}")
        if result.state is RunState.WAITING_FOR_KEY:
            break

    # ==========================================================================
    # 4. Run until something interesting happens
    # ==========================================================================
    # run() stops at breakpoints, key waits or the step limit
    emu.breakpoints.add_breakpoint(0x210)
    event = emu.run(max_steps=10_000)
    print(f"\nStopped: {event} after {event.steps} steps")

    # ==========================================================================
    # 5. Answer a key wait
    # ==========================================================================
    # Keys can be given by keypad index or by name on the QWERTY layout
    #   1 2 3 4      1 2 3 C
    #   Q W E R  ->  4 5 6 D
    #   A S D F      7 8 9 E
    #   Z X C V      A 0 B F
    if emu.state is RunState.WAITING_FOR_KEY:
        print("\nPressing 'E' (keypad 6)...")
        emu.press_key("E")
        event = emu.run(max_steps=10_000)
        emu.release_key("E")
        print(f"  Stopped: {event}")

    print("\nScreen:")
    for line in emu.display_lines():
        print(f"  {line}")

    # ==========================================================================
    # 6. Take screenshots
    # ==========================================================================
    print("\nTaking screenshots...")
    for scale in (4, 10):
        path = output_dir / f"demo_x{scale}.png"
        path.write_bytes(emu.render_display(scale=scale))
        print(f"  Saved {path.name}")

    # ==========================================================================
    # 7. Summary
    # ==========================================================================
    print("\nLast instructions:")
    for line in trace.lines()[-5:]:
        print(f"  {line}")

    print(f"\nRegisters: {emu.registers}")
    print(f"Total steps executed: {emu.total_steps:,}")
    print(f"Screenshots saved to: {output_dir.absolute()}")


if __name__ == "__main__":
    main()
