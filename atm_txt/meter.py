"""Per-channel level meters for the player UI.

Both followers keep an 8.8 fixed-point accumulator per channel (0..65535,
integer level in the high byte) fed with one unsigned 8-bit sample per
channel per tick. Attack is instantaneous; they differ in their release.
"""

import numpy as np

LEVEL_MAX = 63
DEFAULT_CHANNELS = 4
DEFAULT_WIDTH = 120


def _targets(samples, channels: int) -> np.ndarray:
    s = np.asarray(samples, dtype=np.int64).reshape(-1)
    if s.shape[0] != channels:
        raise ValueError(f"expected {channels} samples, got {s.shape[0]}")
    return ((s & 0xFF) << 8).astype(np.int32)


class SimpleFollower:
    """Instant attack, release of (acc >> 4) + 1 per tick."""

    def __init__(self, channels: int = DEFAULT_CHANNELS) -> None:
        self.channels = channels
        self.acc = np.zeros(channels, dtype=np.int32)
        self.levels = np.zeros(channels, dtype=np.int32)

    def reset(self) -> None:
        self.acc[:] = 0
        self.levels[:] = 0

    def tick(self, samples) -> np.ndarray:
        target = _targets(samples, self.channels)
        decayed = np.maximum(self.acc - ((self.acc >> 4) + 1), 0)
        self.acc = np.where(target >= self.acc, target, decayed).astype(np.int32)
        self.levels = np.minimum(self.acc >> 8, LEVEL_MAX).astype(np.int32)
        return self.levels.copy()


class DitheredFollower:
    """Instant attack, gap-proportional release, temporally dithered width.

    The 6-bit level is scaled to `width` pixels in 8.8 fixed point. An 8-bit
    phase counter sweeping 0..255 decides on each tick whether the fractional
    part shows as one extra pixel, so over 256 ticks the extra pixel is lit
    on `remainder` of them.
    """

    def __init__(self, channels: int = DEFAULT_CHANNELS, width: int = DEFAULT_WIDTH) -> None:
        self.channels = channels
        self.width = width
        self.acc = np.zeros(channels, dtype=np.int32)
        self.phase = 0
        self.levels = np.zeros(channels, dtype=np.int32)
        self.widths = np.zeros(channels, dtype=np.int32)

    def reset(self) -> None:
        self.acc[:] = 0
        self.phase = 0
        self.levels[:] = 0
        self.widths[:] = 0

    def tick(self, samples) -> np.ndarray:
        target = _targets(samples, self.channels)
        delta = self.acc - target
        decayed = np.maximum(self.acc - ((delta >> 3) + 1), 0)
        self.acc = np.where(target >= self.acc, target, decayed).astype(np.int32)
        self.levels = np.minimum(self.acc >> 8, LEVEL_MAX).astype(np.int32)

        scaled = (self.levels * (self.width << 8)) // LEVEL_MAX
        pixels = scaled >> 8
        remainder = scaled & 0xFF
        self.widths = (pixels + (remainder > self.phase)).astype(np.int32)
        self.phase = (self.phase + 1) & 0xFF
        return self.widths.copy()
