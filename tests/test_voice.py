import wave

from videopac.voice import SamplePlayer, VoiceUnit


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def write_wav(path, frames=800, rate=8000):
    with wave.open(str(path), "wb") as stream:
        stream.setnchannels(1)
        stream.setsampwidth(1)
        stream.setframerate(rate)
        stream.writeframes(bytes(frames))


def make_unit(tmp_path, names=("e480.wav",)):
    folder = tmp_path / "voice"
    folder.mkdir()
    for name in names:
        write_wav(folder / name)
    clock = FakeClock()
    unit = VoiceUnit(SamplePlayer(clock))
    return unit, clock


def test_load_counts_samples(tmp_path):
    unit, _ = make_unit(tmp_path, ("e480.wav", "e881.wav"))
    assert unit.load_samples(str(tmp_path)) == 2
    assert unit.ok
    assert unit.samples[0][0] is not None
    assert unit.samples[1][1] is not None


def test_no_samples_leaves_unit_disabled(tmp_path):
    unit, _ = make_unit(tmp_path, ())
    assert unit.load_samples(str(tmp_path)) == 0
    assert not unit.ok
    unit.trigger(0x80, 0)
    assert unit.status(0) is False


def test_trigger_plays_then_times_out(tmp_path):
    unit, _ = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.trigger(0x80, 0)
    assert unit.status(5) is True
    assert unit.status(100) is False


def test_sample_end_stops_voice(tmp_path):
    unit, clock = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.trigger(0x80, 0)
    clock.now = 10.0
    assert unit.status(1) is False


def test_missing_sample_is_ignored(tmp_path):
    unit, _ = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.trigger(0x90, 0)
    assert unit.status(0) is False


def test_address_out_of_range_is_ignored(tmp_path):
    unit, _ = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.trigger(0x7F, 0)
    assert unit.status(0) is False


def test_set_bank_limits(tmp_path):
    unit, _ = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.set_bank(3)
    assert unit.bank == 3
    unit.set_bank(9)
    assert unit.bank == 3


def test_reset_and_close(tmp_path):
    unit, _ = make_unit(tmp_path)
    unit.load_samples(str(tmp_path))
    unit.set_bank(2)
    unit.reset()
    assert unit.bank == 0
    unit.close()
    assert not unit.ok


def test_player_position_advances_and_ends(tmp_path):
    write_wav(tmp_path / "s.wav")
    unit, clock = make_unit(tmp_path)
    player = unit.player
    assert player.position() == -1
    unit.load_samples(str(tmp_path))
    player.start()
    assert player.position() == 0
    clock.now = 1.0
    assert player.position() == -1


def test_player_volume_clamped():
    player = SamplePlayer(FakeClock())
    player.set_volume(1000)
    assert player.volume == 255
    player.set_volume(-3)
    assert player.volume == 0