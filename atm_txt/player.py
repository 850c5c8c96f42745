"""Playback session: the current song image, engine control and level meters.

The bytecode engine itself is external; anything implementing `Engine` can
be plugged in. Meter state is advanced from one timeline (the tick source)
and read by the UI through `snapshot()`, both under the same lock.
"""

import os
import threading
from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np

from atm_txt.assembler import Song, compile_file
from atm_txt.config import GAIN_MAX, normalize_config
from atm_txt.errors import AtmError
from atm_txt.meter import DitheredFollower


class Engine(Protocol):
    def play(self, image: bytes) -> None: ...

    def play_pause(self) -> None: ...

    def stop(self) -> None: ...

    def set_gain(self, gain: float) -> None: ...

    def channel_samples(self) -> Sequence[int]: ...


@dataclass
class PlayerStatus:
    file_name: str
    state_line: str
    loaded: bool
    song_name: str | None = None
    widths: list[int] = field(default_factory=list)


def display_name(path: str) -> str:
    name = os.path.basename(path)
    if len(name) > 4 and name[-4:].lower() == ".atm":
        name = name[:-4]
    return name


class Player:
    def __init__(self, engine: Engine, config: dict | None = None) -> None:
        self.engine = engine
        self.config = config if config is not None else normalize_config(None)
        self.meter = DitheredFollower(self.config["channels"], self.config["meter_width"])
        self.song: Song | None = None
        self.path = ""
        self.playing = False
        self.paused = False
        self.last_error: AtmError | None = None
        self._state = "Choose file"
        self._lock = threading.Lock()
        self.engine.set_gain(self.config["gain"])

    def _playback_state(self) -> str:
        if not self.playing:
            return "Stopped"
        return "Paused" if self.paused else "Playing"

    def load(self, path: str) -> bool:
        with self._lock:
            self.path = path
        try:
            song = compile_file(path, self.config["max_text_size"])
        except AtmError as exc:
            self.last_error = exc
            self.engine.stop()
            with self._lock:
                self.playing = False
                self.paused = False
                self.meter.reset()
                self._state = "Load error"
            return False

        self.last_error = None
        with self._lock:
            self.song = song
        self.engine.play(song.image)
        with self._lock:
            self.playing = True
            self.paused = False
            self._state = "Playing"
        return True

    def toggle(self) -> None:
        if self.song is None:
            return
        if not self.playing:
            self.engine.play(self.song.image)
            with self._lock:
                self.playing = True
                self.paused = False
        else:
            self.engine.play_pause()
            with self._lock:
                self.paused = not self.paused
        with self._lock:
            self._state = self._playback_state()

    def stop(self) -> None:
        self.engine.stop()
        with self._lock:
            self.playing = False
            self.paused = False
            # a stopped song must not leave a decaying trail behind
            self.meter.reset()
            self._state = "Stopped"

    def set_gain(self, gain: float) -> float:
        gain = max(0.0, min(GAIN_MAX, float(gain)))
        self.config["gain"] = gain
        self.engine.set_gain(gain)
        return gain

    def tick(self) -> np.ndarray:
        with self._lock:
            active = self.playing and not self.paused
        samples = self.engine.channel_samples() if active else [0] * self.meter.channels
        with self._lock:
            return self.meter.tick(samples)

    def snapshot(self) -> PlayerStatus:
        with self._lock:
            return PlayerStatus(
                file_name=display_name(self.path) if self.path else "-",
                state_line=self._state,
                loaded=self.song is not None and self._state != "Load error",
                song_name=self.song.name if self.song is not None else None,
                widths=[int(w) for w in self.meter.widths],
            )
