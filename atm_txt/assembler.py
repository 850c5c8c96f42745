"""ATM text song -> binary song image.

Text grammar::

    ATM1
    [NAME free text]
    ENTRY e0, e1, e2, e3
    TRACK <instructions> ENDTRACK
    ...
    END

Image layout::

    [track count u8][track offsets u16 LE ...][entry 4 bytes][instruction stream]
"""

from dataclasses import dataclass

from atm_txt.buffers import ByteBuffer, OffsetBuffer
from atm_txt.encoder import emit_instruction, parse_int
from atm_txt.errors import AtmLoadError, AtmRangeError, AtmSyntaxError
from atm_txt.tokenizer import ARG_TOKEN_SIZE, Tokenizer, token_equals

ATM_TXT_MAGIC = "ATM1"
ATM_TXT_CMD_NAME = "NAME"
ATM_TXT_CMD_ENTRY = "ENTRY"
ATM_TXT_CMD_TRACK = "TRACK"
ATM_TXT_CMD_ENDTRACK = "ENDTRACK"
ATM_TXT_CMD_END = "END"

ENTRY_SIZE = 4
MAX_TRACKS = 255
SONG_NAME_SIZE = 48
MAX_TEXT_SIZE = 32 * 1024


@dataclass(frozen=True)
class Song:
    image: bytes
    name: str | None
    entry: bytes
    track_offsets: tuple[int, ...]
    stream: bytes

    @property
    def track_count(self) -> int:
        return len(self.track_offsets)


def _expect(tz: Tokenizer, keyword: str, after: str) -> None:
    token = tz.next_token()
    if not token_equals(token, keyword):
        found = "end of input" if token is None else repr(token)
        raise AtmSyntaxError(f"expected {keyword} after {after}, found {found}")


def _parse_entry(tz: Tokenizer) -> bytes:
    entry = bytearray()
    for i in range(ENTRY_SIZE):
        token = tz.next_token(ARG_TOKEN_SIZE)
        value = None if token is None else parse_int(token)
        if value is None:
            raise AtmSyntaxError(f"ENTRY needs {ENTRY_SIZE} integers, bad value #{i + 1}")
        entry.append(value & 0xFF)
    return bytes(entry)


def _parse_track(tz: Tokenizer, data: ByteBuffer) -> None:
    while True:
        token = tz.next_token()
        if token is None:
            raise AtmSyntaxError(f"missing {ATM_TXT_CMD_ENDTRACK} before end of input")
        if token_equals(token, ATM_TXT_CMD_ENDTRACK):
            return
        emit_instruction(tz, token, data)


def _layout(offsets: OffsetBuffer, entry: bytes, stream: bytes) -> bytes:
    count = len(offsets)
    if count == 0 or count > MAX_TRACKS:
        raise AtmRangeError(f"track count {count} out of range 1..{MAX_TRACKS}")
    image = bytearray()
    image.append(count)
    image += offsets.to_le_bytes()
    image += entry
    image += stream
    return bytes(image)


def compile_song(text: str) -> Song:
    """Compile ATM text into a song image.

    Raises an AtmError subclass on any failure; nothing partial is returned.
    """
    tz = Tokenizer(text)

    token = tz.next_token()
    if not token_equals(token, ATM_TXT_MAGIC):
        raise AtmSyntaxError(f"missing {ATM_TXT_MAGIC} header")

    name = None
    token = tz.next_token()
    if token_equals(token, ATM_TXT_CMD_NAME):
        name = tz.rest_of_line(stop_word=ATM_TXT_CMD_ENTRY, limit=SONG_NAME_SIZE)
        _expect(tz, ATM_TXT_CMD_ENTRY, ATM_TXT_CMD_NAME)
    elif not token_equals(token, ATM_TXT_CMD_ENTRY):
        raise AtmSyntaxError(f"expected {ATM_TXT_CMD_ENTRY} or {ATM_TXT_CMD_NAME} after header")

    entry = _parse_entry(tz)

    data = ByteBuffer()
    offsets = OffsetBuffer()
    while True:
        token = tz.next_token()
        if token is None:
            raise AtmSyntaxError(f"missing {ATM_TXT_CMD_END} before end of input")
        if token_equals(token, ATM_TXT_CMD_END):
            break
        if not token_equals(token, ATM_TXT_CMD_TRACK):
            raise AtmSyntaxError(f"expected {ATM_TXT_CMD_TRACK} or {ATM_TXT_CMD_END}, found {token!r}")
        offsets.push(len(data))
        _parse_track(tz, data)

    stream = data.getvalue()
    image = _layout(offsets, entry, stream)
    return Song(
        image=image,
        name=name,
        entry=entry,
        track_offsets=tuple(offsets),
        stream=stream,
    )


def compile_file(path: str, max_size: int = MAX_TEXT_SIZE) -> Song:
    try:
        with open(path, "rb") as f:
            raw = f.read(max_size + 1)
    except OSError as exc:
        raise AtmLoadError(f"cannot read {path}: {exc.strerror or exc}") from exc
    if not raw:
        raise AtmLoadError(f"{path} is empty")
    if len(raw) > max_size:
        raise AtmLoadError(f"{path} is larger than {max_size} bytes")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AtmLoadError(f"{path} is not UTF-8 text") from exc
    return compile_song(text)
