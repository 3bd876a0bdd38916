"""The Odyssey2 voice module, played back from pre-recorded speech samples."""

from __future__ import annotations

import enum
import logging
import os
import time
import wave
from dataclasses import dataclass
from typing import Callable, Optional

log = logging.getLogger(__name__)

BANKS = 9
SAMPLES_PER_BANK = 128
FIRST_ADDRESS = 0x80
LAST_ADDRESS = 0xFF
MAX_PLAY_CYCLES = 20


@dataclass(frozen=True)
class _Sample:
    frames: bytes
    rate: int
    count: int


def _load_wav(filename: str) -> Optional[_Sample]:
    try:
        with wave.open(filename, "rb") as stream:
            count = stream.getnframes()
            return _Sample(stream.readframes(count), stream.getframerate(), count)
    except (OSError, EOFError, wave.Error):
        return None


class SamplePlayer:
    """One playback voice; tracks the position of the sample being played."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.sample: Optional[_Sample] = None
        self.volume = 255
        self._started: Optional[float] = None

    def allocate(self, sample: _Sample) -> bool:
        """Attach a sample to this voice; returns whether it could be allocated."""
        self.stop()
        self.sample = sample
        return True

    def set_volume(self, volume: int) -> None:
        self.volume = max(0, min(255, volume))

    def start(self) -> None:
        if self.sample is not None:
            self._started = self._clock()

    def stop(self) -> None:
        self._started = None

    def position(self) -> int:
        """Frame now playing, or -1 when the voice is silent."""
        if self._started is None or self.sample is None or self.sample.rate <= 0:
            return -1
        frame = int((self._clock() - self._started) * self.sample.rate)
        if frame >= self.sample.count:
            self._started = None
            return -1
        return frame


class _State(enum.Enum):
    IDLE = 0
    PLAYING = 1
    PENDING = 2


class VoiceUnit:
    """Speech samples addressed by bank and address, played one at a time."""

    def __init__(self, player: Optional[SamplePlayer] = None, volume: int = 100) -> None:
        self.player = player if player is not None else SamplePlayer()
        self.volume = volume
        self.samples: list[list[Optional[_Sample]]] = [
            [None] * SAMPLES_PER_BANK for _ in range(BANKS)]
        self.bank = 0
        self.address = 0
        self.ok = False
        self._state = _State.IDLE
        self._start_clock = 0

    def load_samples(self, path: str) -> int:
        """Load voice/<bank><addr>.wav files below ``path``; return how many were found."""
        loaded = 0
        first: Optional[_Sample] = None
        for index in range(BANKS):
            bank = 0xE8 + index - 1 if index else 0xE4
            for number in range(SAMPLES_PER_BANK):
                code = number + FIRST_ADDRESS
                sample = _load_wav(os.path.join(path, "voice", f"{bank:02x}{code:02x}.wav"))
                if sample is None:
                    sample = _load_wav(os.path.join(path, "voice", f"{bank:02X}{code:02X}.WAV"))
                self.samples[index][number] = sample
                if sample is not None:
                    loaded += 1
                    if first is None:
                        first = sample
        log.info("%d voice samples loaded", loaded)
        if first is not None:
            self.ok = self.player.allocate(first)
            if not self.ok:
                log.error("could not allocate sound card voice")
        return loaded

    def _valid(self, address: int) -> bool:
        return 0 <= self.bank < BANKS and FIRST_ADDRESS <= address <= LAST_ADDRESS

    def update(self, clock: int) -> None:
        """Advance the voice state at machine cycle count ``clock``."""
        if not self.ok:
            return
        if self._state is _State.PENDING:
            if self.player.position() < 0 and self._valid(self.address):
                sample = self.samples[self.bank][self.address - FIRST_ADDRESS]
                if sample is not None:
                    self.player.allocate(sample)
                    self.player.set_volume((255 * self.volume) // 100)
                    self.player.start()
                    self._start_clock = clock
                    self._state = _State.PLAYING
                else:
                    self._state = _State.IDLE
        elif self._state is _State.PLAYING:
            if self.player.position() < 0 or clock - self._start_clock > MAX_PLAY_CYCLES:
                self._state = _State.IDLE

    def trigger(self, address: int, clock: int) -> None:
        """Request the sample at ``address`` of the current bank."""
        if not self.ok:
            return
        if self._state is not _State.IDLE:
            self.update(clock)
        if self._state is _State.IDLE and self._valid(address):
            self.address = address
            self._state = _State.PENDING
            self.update(clock)

    def set_bank(self, bank: int) -> None:
        if self.ok and 0 <= bank <= 8:
            self.bank = bank

    def status(self, clock: int) -> bool:
        """Whether the voice is busy; this is what the T0 input reads."""
        if self.ok:
            self.update(clock)
            return self._state is not _State.IDLE
        return False

    def reset(self) -> None:
        if self.ok:
            self.player.stop()
            self.bank = 0
            self.address = 0
            self._state = _State.IDLE

    def mute(self) -> None:
        if self.ok:
            self.player.stop()

    def close(self) -> None:
        self.reset()
        self.ok = False