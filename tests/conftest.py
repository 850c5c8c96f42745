import pytest

MINIMAL_SONG = "ATM1 ENTRY 0,0,0,0 TRACK STOP ENDTRACK END"

TITLE_SONG = """\
ATM1
NAME Title Theme   # shown in the player
ENTRY 0, 1, 2, 3

# track 0: melody
TRACK
  SET_TEMPO 25
  SET_VOLUME 48
  NOTE 25  DELAY 8
  NOTE 29  DELAY 8
  NOTE 32  DELAY 16
  RETURN
ENDTRACK

# track 1: bass with vibrato and a long rest
TRACK
  SET_VIBRATO 4, 0x21
  NOTE 13  DELAY 96
  RETURN
ENDTRACK

TRACK
  REPEAT 0, 3
  STOP
ENDTRACK

TRACK
  STOP
ENDTRACK
END
"""

TITLE_STREAM = bytes([
    0x9D, 25, 0x40, 48, 25, 0xA7, 29, 0xA7, 32, 0xAF, 0xFE,
    0x4E, 4, 0x21, 13, 0xE0, 31, 0xFE,
    0xFD, 0, 3, 0x9F,
    0x9F,
])
TITLE_OFFSETS = (0, 11, 18, 22)


class FakeEngine:
    def __init__(self, samples=None):
        self.calls = []
        self.samples = list(samples) if samples is not None else [0, 0, 0, 0]
        self.gain = 1.0

    def play(self, image):
        self.calls.append(("play", bytes(image)))

    def play_pause(self):
        self.calls.append(("play_pause",))

    def stop(self):
        self.calls.append(("stop",))

    def set_gain(self, gain):
        self.gain = gain
        self.calls.append(("set_gain", gain))

    def channel_samples(self):
        return list(self.samples)


@pytest.fixture
def fake_engine():
    return FakeEngine([63, 32, 0, 255])


@pytest.fixture
def title_path(tmp_path):
    path = tmp_path / "title.atm"
    path.write_text(TITLE_SONG, encoding="utf-8")
    return path


@pytest.fixture
def broken_path(tmp_path):
    path = tmp_path / "broken.ATM"
    path.write_text("ATM1 ENTRY 0,0,0,0 TRACK NOTE 64 ENDTRACK END", encoding="utf-8")
    return path
