"""JSON settings for the CLI and the player session."""

import json
import re

from atm_txt.assembler import MAX_TEXT_SIZE
from atm_txt.meter import DEFAULT_CHANNELS, DEFAULT_WIDTH

OUTPUT_FORMATS = ("bin", "asm", "c")
DEFAULT_LABEL = "ATM_SONG"
GAIN_MAX = 4.0

_LABEL_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

DEFAULTS = {
    "max_text_size": MAX_TEXT_SIZE,
    "channels": DEFAULT_CHANNELS,
    "meter_width": DEFAULT_WIDTH,
    "gain": 1.0,
    "format": None,
    "label": DEFAULT_LABEL,
}


def _clamp_int(value, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


def _clamp_float(value, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


def normalize_config(raw: dict | None) -> dict:
    cfg = dict(DEFAULTS)
    if not raw:
        return cfg
    if "max_text_size" in raw:
        cfg["max_text_size"] = _clamp_int(raw["max_text_size"], 1, 1024 * 1024)
    if "channels" in raw:
        cfg["channels"] = _clamp_int(raw["channels"], 1, 16)
    if "meter_width" in raw:
        cfg["meter_width"] = _clamp_int(raw["meter_width"], 1, 1024)
    if "gain" in raw:
        cfg["gain"] = _clamp_float(raw["gain"], 0.0, GAIN_MAX)
    fmt = raw.get("format")
    if isinstance(fmt, str) and fmt.lower() in OUTPUT_FORMATS:
        cfg["format"] = fmt.lower()
    label = raw.get("label")
    if isinstance(label, str) and _LABEL_RE.match(label):
        cfg["label"] = label
    return cfg


def load_config(path: str | None) -> dict:
    if not path:
        return normalize_config(None)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return normalize_config(data)
