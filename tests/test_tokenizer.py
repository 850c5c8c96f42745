import pytest

from atm_txt.tokenizer import ARG_TOKEN_SIZE, TOKEN_SIZE, Tokenizer, token_equals


def _all_tokens(text, limit=TOKEN_SIZE):
    tz = Tokenizer(text)
    out = []
    while True:
        token = tz.next_token(limit)
        if token is None:
            return out
        out.append(token)


def test_whitespace_and_separators():
    text = "ATM1\tENTRY 1,2 ,3,,4\r\n\v\fEND"
    assert _all_tokens(text) == ["ATM1", "ENTRY", "1", "2", "3", "4", "END"]


def test_comments_run_to_end_of_line():
    text = "TRACK # NOTE 5, DELAY 3\nSTOP # trailing\n"
    assert _all_tokens(text) == ["TRACK", "STOP"]


def test_comment_character_ends_token():
    assert _all_tokens("STOP#comment\nRETURN") == ["STOP", "RETURN"]


def test_end_of_input():
    tz = Tokenizer("  ,, # only a comment")
    assert tz.next_token() is None
    assert tz.next_token() is None
    assert tz.at_end()


def test_tokens_never_empty():
    assert all(_all_tokens(", , ,A,,B,\n,C#,\n"))


def test_token_stops_at_delimiter():
    tz = Tokenizer("A B")
    assert tz.next_token() == "A"
    assert tz.pos == 1
    assert tz.next_token() == "B"
    assert tz.next_token() is None


def test_truncation_to_buffer_size():
    long = "X" * 100
    assert _all_tokens(long) == ["X" * (TOKEN_SIZE - 1)]
    assert _all_tokens(long, ARG_TOKEN_SIZE) == ["X" * (ARG_TOKEN_SIZE - 1)]


def test_truncated_token_does_not_match_keyword():
    token = Tokenizer("ENDTRACK" + "K" * 80).next_token()
    assert not token_equals(token, "ENDTRACK")


def test_text_stops_at_nul():
    assert _all_tokens("STOP\0RETURN") == ["STOP"]


@pytest.mark.parametrize("token,keyword,expected", [
    ("track", "TRACK", True),
    ("TrAcK", "TRACK", True),
    ("TRACKS", "TRACK", False),
    ("TRAC", "TRACK", False),
    ("ſtop", "STOP", False),
    (None, "END", False),
])
def test_token_equals(token, keyword, expected):
    assert token_equals(token, keyword) is expected


def test_rest_of_line_stops_at_newline_and_comment():
    tz = Tokenizer("NAME  My Song  # comment\nENTRY")
    assert tz.next_token() == "NAME"
    assert tz.rest_of_line() == "My Song"
    assert tz.next_token() == "ENTRY"


def test_rest_of_line_stops_before_stop_word():
    tz = Tokenizer("NAME My Song entry 1,2,3,4")
    tz.next_token()
    assert tz.rest_of_line(stop_word="ENTRY") == "My Song"
    assert tz.next_token() == "entry"
    assert tz.next_token() == "1"


def test_rest_of_line_trims_separators_and_truncates():
    tz = Tokenizer("NAME ,, " + "n" * 60 + " ,\n")
    tz.next_token()
    assert tz.rest_of_line(limit=16) == "n" * 15
