# videopac

Building blocks for emulating the Magnavox Odyssey² / Philips Videopac,
written in plain Python with no third-party dependencies.

## What is included

- `videopac.cpu`: an Intel 8048 core. `Cpu8048` holds the registers,
  internal RAM, stack (`push`, `pull`), program status word (`make_psw`),
  interrupts (`ext_irq`, `tim_irq`) and the timer/counter. `step()` runs one
  instruction and returns its cycle count. The core reaches the rest of the
  machine through a `Bus`. The default bus provides port 1, a 256-byte
  external RAM and the four expander nibbles. Subclass it to wire up more.
- `videopac.opcodes`: `execute(cpu, opcode)` carries out a single
  already-fetched instruction and returns its cycle count.
- `videopac.audio`: the sound generator. `AudioChannel.process()` turns the
  audio registers and the per-line sound control values into one frame of
  1056 unsigned 8-bit samples. Noise and interrupts are supported. The optional
  low-pass filter is also available on its own as `apply_filter()`.
  `stream_volume()` converts a volume percentage to a 0–255 level.
- `videopac.voice`: the voice unit. `VoiceUnit` loads speech samples from
  `voice/<bank><address>.wav` files and tracks which one is playing. Its
  `status()` is what the CPU's T0 input reads. `SamplePlayer` models one
  playback voice by time. It does not output sound itself.
- `videopac.keyboard` provides:
  - the key names (`key_name`);
  - joystick and system key assignments (`KeyMap`);
  - BIOS families (`RomType`);
  - the save-state result messages (`describe_state_error`).
- `videopac.bitmap`: `Bitmap`, an 8-bit indexed-colour image. It supports
  `clear`, `rect`, `rectfill`, `hline`, `vline` and `line`.
- `videopac.crc32`: `crc32_bytes` and `crc32_file`, used to identify
  cartridge and BIOS images.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Identify a cartridge image:

```python
from videopac.crc32 import crc32_file

print(f"{crc32_file('game.bin'):08X}")
```

Run a few instructions:

```python
from videopac.cpu import Cpu8048

cpu = Cpu8048(rom=bytes([0x23, 0x42, 0x17]))  # MOV A,#42h ; INC A
cpu.step()
cpu.step()
print(hex(cpu.acc))  # 0x43
```

Generate a frame of sound:

```python
from videopac.audio import AudioChannel

registers = bytearray(256)
registers[0xA7:0xAA] = b"\xAA\xAA\xAA"          # shift register pattern
samples = AudioChannel().process(registers, [0x8F], tweaked=False, irq=None)
print(len(samples))  # 1056
```

Map keys to a joystick:

```python
from videopac.keyboard import KeyMap

keys = KeyMap()
keys.set_joykeys(0, ord("w"), ord("s"), ord("a"), ord("d"), ord(" "))
print(hex(keys.joystick_state(0, {ord("w")})))  # 0xfe
```

Joystick keys must have codes from 1 to 127. Any other code is stored as
unassigned.

## What this package does not do

This is a set of components, not a complete emulator. It has no video chip
emulation, no built-in character font and no Videopac+ display. It cannot
load ROM images or save states, and it has no built-in debugger. It does not
produce sound output or a window, and it provides no command to run.
`Cpu8048` and `AudioChannel` expect the caller to supply the video registers,
the scan-line timing and the bus devices.