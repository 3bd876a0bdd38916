"""Sound generator of the Odyssey2 VDC: a 24-bit shift register clocked into 8-bit samples."""

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence

SAMPLE_RATE = 44100
SOUND_BUFFER_LEN = 1056
PERIOD_FAST = 11
PERIOD_SLOW = 44

AUD_CTRL = 0xAA
AUD_D0 = 0xA7
AUD_D1 = 0xA8
AUD_D2 = 0xA9
VDC_CONTROL = 0xA0

_CTRL_NOISE = 0x10
_CTRL_ENABLE = 0x80
_VEC_VOLUME = 0x0F
_VEC_FAST = 0x20
_VEC_RECIRCULATE = 0x40
_VEC_ENABLE = 0x80
_IRQ_ENABLE = 0x04


def stream_volume(volume: int, filtered: bool) -> int:
    """Stream volume (0..255 scale) for a volume percentage.

    Without the filter the raw square wave is louder, so it plays at half level.
    """
    divisor = 100 if filtered else 200
    numerator = 255 * volume
    magnitude = abs(numerator) // divisor
    return magnitude if numerator >= 0 else -magnitude


class AudioChannel:
    """Produces one frame of 8-bit unsigned samples from the audio registers."""

    def __init__(self, filtered: bool = False, rng: Optional[random.Random] = None) -> None:
        self.filtered = filtered
        self.rng = rng if rng is not None else random.Random()
        self.reset()

    def reset(self) -> None:
        """Clear the filter history and the pending sound interrupt flag."""
        self.sound_irq = False
        self._flt_a = 0.0
        self._flt_b = 0.0
        self._flt_prev = 0

    def _noise_bit(self, enabled: int, noise: int) -> int:
        return self.rng.getrandbits(1) if enabled and noise else 0

    def process(self, vdc_registers: Sequence[int], audio_vector: Sequence[int],
                tweaked: bool, irq: Optional[Callable[[], None]]) -> bytes:
        """Generate one frame of samples.

        ``audio_vector`` holds the sound control register as latched on each
        scan line; unless ``tweaked`` is set only its last entry is used.
        ``irq`` is called when the shift register empties with interrupts on.
        """
        if not audio_vector:
            raise ValueError("audio vector is empty")
        last = len(audio_vector) - 1
        aud_data = (vdc_registers[AUD_D2]
                    | (vdc_registers[AUD_D1] << 8)
                    | (vdc_registers[AUD_D0] << 16))
        intena = vdc_registers[VDC_CONTROL] & _IRQ_ENABLE
        control = vdc_registers[AUD_CTRL]
        noise = control & _CTRL_NOISE
        rndbit = self._noise_bit(control & _CTRL_ENABLE, noise)

        buffer = bytearray(SOUND_BUFFER_LEN)
        count = 0
        for pnt in range(SOUND_BUFFER_LEN):
            pos = pnt // 3 if tweaked else last
            setting = audio_vector[pos]
            volume = setting & _VEC_VOLUME
            enabled = setting & _VEC_ENABLE
            period = PERIOD_FAST if setting & _VEC_FAST else PERIOD_SLOW
            recirculate = setting & _VEC_RECIRCULATE

            if enabled:
                buffer[pnt] = ((aud_data & 1) ^ rndbit) * (0x10 * volume)
            count += 1

            if count >= period:
                count = 0
                if recirculate:
                    aud_data = (aud_data >> 1) | ((aud_data & 1) << 23)
                else:
                    aud_data >>= 1
                rndbit = self._noise_bit(enabled, noise)
                if enabled and intena and not self.sound_irq:
                    self.sound_irq = True
                    if irq is not None:
                        irq()

        if self.filtered:
            return self.apply_filter(buffer)
        return bytes(buffer)

    def apply_filter(self, samples: Sequence[int]) -> bytes:
        """Run samples through the low-pass filter that imitates the TV speaker.

        Blocks longer than one frame are returned unchanged.
        """
        data = bytes(samples)
        if len(data) > SOUND_BUFFER_LEN or not data:
            return data
        out = bytearray(len(data))
        previous = self._flt_prev
        for i, value in enumerate(data):
            delta = value - previous
            previous = value
            if delta:
                self._flt_b = float(delta)
            self._flt_a += self._flt_b / 4.0 - self._flt_a / 80.0
            self._flt_b -= self._flt_b / 4.0
            if self._flt_a > 255.0 or self._flt_a < -255.0:
                self._flt_a = 0.0
            out[i] = int((self._flt_a + 255.0) / 2.0) & 0xFF
        self._flt_prev = data[-1]
        return bytes(out)