"""Mnemonic -> bytecode encoding for ATM tracks."""

import re

from atm_txt.buffers import ByteBuffer
from atm_txt.errors import AtmLiteralError, AtmRangeError, AtmSyntaxError
from atm_txt.tokenizer import ARG_TOKEN_SIZE, Tokenizer, ascii_upper

ATM_OP_SET_VOLUME = 0x40
ATM_OP_VOLUME_SLIDE_ON = 0x41
ATM_OP_VOLUME_SLIDE_OFF = 0x43
ATM_OP_SET_TRANSPOSITION = 0x4C
ATM_OP_TRANSPOSITION_OFF = 0x4D
ATM_OP_SET_VIBRATO = 0x4E
ATM_OP_SET_NOTE_CUT = 0x54
ATM_OP_NOTE_CUT_OFF = 0x55
ATM_OP_ADD_TEMPO = 0x9C
ATM_OP_SET_TEMPO = 0x9D
ATM_OP_GOTO_ADVANCED = 0x9E
ATM_OP_STOP = 0x9F
ATM_OP_DELAY_BASE = 159  # DELAY 1..64 -> 0xA0..0xDF
ATM_OP_LONG_DELAY = 224
ATM_OP_GOTO = 0xFC
ATM_OP_REPEAT = 0xFD
ATM_OP_RETURN = 0xFE

NOTE_MAX = 63
SHORT_DELAY_MAX = 64
LONG_DELAY_BIAS = 65

# name -> (opcode, operand count); DB, NOTE and DELAY are encoded specially
MNEMONICS: dict[str, tuple[int | None, int]] = {
    "DB": (None, 1),
    "NOTE": (None, 1),
    "DELAY": (None, 1),
    "STOP": (ATM_OP_STOP, 0),
    "RETURN": (ATM_OP_RETURN, 0),
    "GOTO": (ATM_OP_GOTO, 1),
    "REPEAT": (ATM_OP_REPEAT, 2),
    "SET_TEMPO": (ATM_OP_SET_TEMPO, 1),
    "ADD_TEMPO": (ATM_OP_ADD_TEMPO, 1),
    "SET_VOLUME": (ATM_OP_SET_VOLUME, 1),
    "VOLUME_SLIDE_ON": (ATM_OP_VOLUME_SLIDE_ON, 1),
    "VOLUME_SLIDE_OFF": (ATM_OP_VOLUME_SLIDE_OFF, 0),
    "SET_NOTE_CUT": (ATM_OP_SET_NOTE_CUT, 1),
    "NOTE_CUT_OFF": (ATM_OP_NOTE_CUT_OFF, 0),
    "SET_TRANSPOSITION": (ATM_OP_SET_TRANSPOSITION, 1),
    "TRANSPOSITION_OFF": (ATM_OP_TRANSPOSITION_OFF, 0),
    "GOTO_ADVANCED": (ATM_OP_GOTO_ADVANCED, 4),
    "SET_VIBRATO": (ATM_OP_SET_VIBRATO, 2),
}

_INT_RE = re.compile(r"([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)\Z")
_LONG_MIN = -(1 << 31)
_LONG_MAX = (1 << 31) - 1


def parse_int(token: str) -> int | None:
    """Parse a C-style integer literal (decimal, 0x hex, 0 octal).

    The whole token must be consumed. Out-of-range values saturate to the
    signed 32-bit limits, as `strtol` does with a 32-bit `long`.
    """
    m = _INT_RE.match(token)
    if not m:
        return None
    sign, digits = m.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif len(digits) > 1:
        value = int(digits, 8 if digits[0] == "0" else 10)
    else:
        value = int(digits)
    if sign == "-":
        value = -value
    return max(_LONG_MIN, min(_LONG_MAX, value))


def _parse_arg(tz: Tokenizer, op: str) -> int:
    token = tz.next_token(ARG_TOKEN_SIZE)
    if token is None:
        raise AtmSyntaxError(f"{op}: missing operand at end of input")
    value = parse_int(token)
    if value is None:
        raise AtmSyntaxError(f"{op}: operand {token!r} is not an integer")
    return value


def _emit_delay(value: int, out: ByteBuffer) -> None:
    if value < 1:
        raise AtmRangeError(f"DELAY {value}: must be >= 1")
    if value <= SHORT_DELAY_MAX:
        out.push(ATM_OP_DELAY_BASE + value)
    else:
        out.push(ATM_OP_LONG_DELAY)
        out.push_vle(value - LONG_DELAY_BIAS)


def emit_instruction(tz: Tokenizer, op: str, out: ByteBuffer) -> None:
    """Consume the operands of `op` from `tz` and append its encoding to `out`.

    Unknown mnemonics that parse as an integer literal are emitted as one raw
    byte. Operands are truncated to their low 8 bits.
    """
    name = ascii_upper(op)

    if name == "DB":
        out.push(_parse_arg(tz, name))
        return

    if name == "NOTE":
        value = _parse_arg(tz, name)
        if value < 0 or value > NOTE_MAX:
            raise AtmRangeError(f"NOTE {value}: must be in 0..{NOTE_MAX}")
        out.push(value)
        return

    if name == "DELAY":
        _emit_delay(_parse_arg(tz, name), out)
        return

    entry = MNEMONICS.get(name)
    if entry is not None:
        opcode, argc = entry
        args = [_parse_arg(tz, name) for _ in range(argc)]
        out.push(opcode)
        out.extend(args)
        return

    value = parse_int(op)
    if value is None:
        raise AtmLiteralError(f"unknown instruction {op!r}")
    out.push(value)
