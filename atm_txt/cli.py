#!/usr/bin/env python
"""ATM text song compiler.

Writes the compiled song image as raw binary, an ASM `.db` listing or a C
array.
"""

import argparse
import os
import sys

from atm_txt.assembler import Song, compile_file
from atm_txt.config import OUTPUT_FORMATS, load_config
from atm_txt.errors import AtmError


def _format_summary(song: Song, comment: str) -> str:
    lines = [
        f"{comment} ATM summary: tracks={song.track_count}, "
        f"stream={len(song.stream)} bytes, image={len(song.image)} bytes",
    ]
    if song.name is not None:
        lines.append(f"{comment} Name: {song.name}")
    lines.append(f"{comment} Entry: " + " ".join(f"{b:d}" for b in song.entry))
    offsets = " ".join(f"{off:d}" for off in song.track_offsets)
    lines.append(f"{comment} Track offsets: {offsets}")
    return "\n".join(lines) + "\n"


def _format_stream(label: str, stream: bytes) -> str:
    lines = [f"{label}:"]
    line = "  .db "
    for b in stream:
        entry = f"${b:02X}"
        if line.strip() == ".db":
            line += entry
        else:
            line += f", {entry}"
        if len(line) > 70:
            lines.append(line)
            line = "  .db "
    if line.strip() != ".db":
        lines.append(line)
    return "\n".join(lines) + "\n"


def _format_c_array(label: str, stream: bytes) -> str:
    lines = [f"const unsigned char {label}[] = {{"]
    line = "  "
    for i, b in enumerate(stream):
        entry = f"0x{b:02X}"
        if i == 0:
            line += entry
        else:
            line += f", {entry}"
        if len(line) > 70:
            lines.append(line)
            line = "  "
    if line.strip():
        lines.append(line)
    lines.append("};")
    lines.append(f"const unsigned short {label}_SIZE = {len(stream)};")
    return "\n".join(lines) + "\n"


def _format_for_path(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".asm", ".s", ".inc"):
        return "asm"
    if ext in (".c", ".h"):
        return "c"
    return "bin"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile ATM text songs to ATM song images")
    parser.add_argument("input_atm")
    parser.add_argument("output")
    parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: from config, else from the output extension)",
    )
    parser.add_argument("--label", type=str, default=None, help="Symbol name for asm/c output")
    parser.add_argument("--config", type=str, default="", help="JSON settings file")
    parser.add_argument("--max-size", type=int, default=None, help="Largest accepted input in bytes")
    parser.add_argument("--summary", action="store_true", default=False, help="Print a song summary")
    return parser.parse_args(argv[1:])


def main(argv: list[str]) -> int:
    args = _parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, TypeError) as exc:
        print(f"Error: cannot load config ({exc}).")
        return 2

    max_size = args.max_size if args.max_size is not None else cfg["max_text_size"]
    if max_size <= 0:
        print("Error: --max-size must be > 0.")
        return 2
    label = args.label or cfg["label"]
    if not label.isidentifier():
        print("Error: --label must be a valid identifier.")
        return 2
    fmt = args.format or cfg["format"] or _format_for_path(args.output)

    try:
        song = compile_file(args.input_atm, max_size)
    except AtmError as exc:
        print(f"Error: {exc}")
        return 2

    if song.name == "":
        print("Warning: NAME directive with an empty song name")

    if fmt == "asm":
        output = _format_summary(song, ";") + "\n" + _format_stream(label, song.image)
    elif fmt == "c":
        output = _format_summary(song, "//") + "\n" + _format_c_array(label, song.image)
    else:
        output = None

    try:
        if output is None:
            with open(args.output, "wb") as f:
                f.write(song.image)
        else:
            with open(args.output, "w", encoding="ascii", errors="replace") as f:
                f.write(output)
    except OSError as exc:
        print(f"Error: cannot write {args.output} ({exc.strerror or exc}).")
        return 2

    if args.summary:
        print(_format_summary(song, "#"), end="")

    return 0


def run() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
