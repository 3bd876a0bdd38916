"""Odyssey2 / Videopac emulation components: 8048 CPU, sound, voice, key mapping, bitmap and CRC-32."""

__version__ = "1.18.0"