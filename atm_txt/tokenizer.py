"""Whitespace/comma tokenizer for ATM text songs.

Tokens are maximal runs of characters that are not whitespace, the field
separator or the comment character. A comment runs from `#` to the end of
the line. Tokens are copied into fixed-size buffers, so overlong tokens are
truncated; keyword comparison is exact, which turns truncation into a
rejection rather than a false match.
"""

import re

COMMENT = "#"
SEPARATOR = ","
WHITESPACE = " \t\n\r\v\f"
TOKEN_SIZE = 64
ARG_TOKEN_SIZE = 32

_STOP_CHARS = frozenset(WHITESPACE + SEPARATOR + COMMENT)
_WORD_RE = re.compile(r"[^ \t\n\r\v\f,#]+")
_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


def ascii_upper(s: str) -> str:
    # only a-z fold; unicode case mapping could turn a non-keyword into one
    return s.translate(_UPPER)


def token_equals(token: str | None, keyword: str) -> bool:
    if token is None:
        return False
    return ascii_upper(token) == ascii_upper(keyword)


class Tokenizer:
    def __init__(self, text: str) -> None:
        # text ends at the first NUL, as it would for a C string
        nul = text.find("\0")
        self.text = text if nul < 0 else text[:nul]
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def next_token(self, limit: int = TOKEN_SIZE) -> str | None:
        text = self.text
        n = len(text)
        p = self.pos

        while p < n:
            c = text[p]
            if c == COMMENT:
                while p < n and text[p] != "\n":
                    p += 1
                continue
            if c in WHITESPACE or c == SEPARATOR:
                p += 1
                continue
            break

        if p >= n:
            self.pos = p
            return None

        start = p
        while p < n and text[p] not in _STOP_CHARS:
            p += 1
        self.pos = p
        return text[start:min(p, start + limit - 1)]

    def rest_of_line(self, stop_word: str | None = None, limit: int = TOKEN_SIZE) -> str:
        """Capture the rest of the current line as free text.

        The capture ends at a newline, a comment, or just before a word equal
        to `stop_word`; in the last case the tokenizer is left on that word.
        """
        text = self.text
        start = self.pos
        end = start
        while end < len(text) and text[end] not in ("\n", COMMENT):
            end += 1

        if stop_word is not None:
            for m in _WORD_RE.finditer(text, start, end):
                if token_equals(m.group(0), stop_word):
                    end = m.start()
                    break

        self.pos = end
        trim = WHITESPACE + SEPARATOR
        return text[start:end].strip(trim)[:limit - 1].rstrip(trim)
