"""Errors raised while loading and compiling ATM text songs."""


class AtmError(Exception):
    """Base class for every compile/load failure.

    The assembler never returns a partial song; callers that only need a
    single "load error" status can catch this class.
    """

    reason = "error"


class AtmSyntaxError(AtmError):
    reason = "syntax"


class AtmRangeError(AtmError):
    reason = "range"


class AtmLiteralError(AtmError):
    reason = "literal"


class AtmLoadError(AtmError):
    reason = "load"
