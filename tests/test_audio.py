import random

import pytest

from videopac.audio import (
    AUD_CTRL, AUD_D0, AUD_D1, AUD_D2, PERIOD_FAST, PERIOD_SLOW, SOUND_BUFFER_LEN,
    VDC_CONTROL, AudioChannel, stream_volume,
)


def registers(d0=0, d1=0, d2=0, ctrl=0x80, control=0):
    regs = bytearray(256)
    regs[AUD_D0] = d0
    regs[AUD_D1] = d1
    regs[AUD_D2] = d2
    regs[AUD_CTRL] = ctrl
    regs[VDC_CONTROL] = control
    return regs


def test_stream_volume():
    assert stream_volume(100, True) == 255
    assert stream_volume(200, False) == 255
    assert stream_volume(0, False) == 0


def test_disabled_is_silent():
    samples = AudioChannel().process(registers(0xFF, 0xFF, 0xFF), [0x0F], False, None)
    assert len(samples) == SOUND_BUFFER_LEN
    assert set(samples) == {0}


def test_full_register_recirculating_constant():
    samples = AudioChannel().process(registers(0xFF, 0xFF, 0xFF), [0xCF], False, None)
    assert set(samples) == {0x10 * 15}


def test_single_bit_slow_period():
    samples = AudioChannel().process(registers(d2=1), [0x85], False, None)
    assert sum(1 for s in samples if s) == PERIOD_SLOW
    assert all(s == 0x10 * 5 for s in samples[:PERIOD_SLOW])


def test_single_bit_fast_period():
    samples = AudioChannel().process(registers(d2=1), [0xA5], False, None)
    assert sum(1 for s in samples if s) == PERIOD_FAST


def test_recirculation_brings_bit_back():
    samples = AudioChannel().process(registers(d2=1), [0xE5], False, None)
    assert samples[24 * PERIOD_FAST] != 0
    assert samples[PERIOD_FAST] == 0


def test_irq_raised_once():
    calls = []
    channel = AudioChannel()
    channel.process(registers(control=0x04), [0x80], False, lambda: calls.append(1))
    assert calls == [1]
    assert channel.sound_irq is True
    channel.process(registers(control=0x04), [0x80], False, lambda: calls.append(1))
    assert calls == [1]


def test_no_irq_when_interrupts_off():
    calls = []
    channel = AudioChannel()
    channel.process(registers(), [0x80], False, lambda: calls.append(1))
    assert calls == []
    assert channel.sound_irq is False


def test_reset_clears_irq_flag():
    channel = AudioChannel()
    channel.process(registers(control=0x04), [0x80], False, None)
    channel.reset()
    assert channel.sound_irq is False


def test_tweaked_uses_per_line_vector():
    vector = [0xCF] * 100 + [0x00] * 300
    samples = AudioChannel().process(registers(0xFF, 0xFF, 0xFF), vector, True, None)
    assert samples[0] != 0
    assert samples[300] == 0


def test_noise_reproducible_and_bounded():
    regs = registers(0xFF, 0xFF, 0xFF, ctrl=0x90)
    a = AudioChannel(rng=random.Random(5)).process(regs, [0xCF], False, None)
    b = AudioChannel(rng=random.Random(5)).process(regs, [0xCF], False, None)
    assert a == b
    assert set(a) <= {0, 0x10 * 15}


def test_filter_flat_input_is_flat():
    out = AudioChannel().apply_filter(bytes(100))
    assert len(set(out)) == 1


def test_filter_too_long_unchanged():
    data = bytes(range(256)) * 5
    assert AudioChannel().apply_filter(data) == data


def test_filter_step_rises_above_rest_level():
    channel = AudioChannel()
    rest = channel.apply_filter(bytes(10))[0]
    stepped = channel.apply_filter(bytes([200] * 10))
    assert stepped[0] > rest


def test_filtered_process_length():
    channel = AudioChannel(filtered=True)
    samples = channel.process(registers(0xFF, 0xFF, 0xFF), [0xCF], False, None)
    assert len(samples) == SOUND_BUFFER_LEN


def test_empty_vector_rejected():
    with pytest.raises(ValueError):
        AudioChannel().process(registers(), [], False, None)