import pytest

from toongraph.values import decode_text, decode_value, encode_value, quote_text, unquote


@pytest.mark.parametrize(
    "value, token",
    [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (2.0, "2"),
        (1.5, "1.5"),
        ("plain", "plain"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
    ],
)
def test_encode_value(value, token):
    assert encode_value(value) == token


@pytest.mark.parametrize(
    "token, value",
    [
        ("true", True),
        ("false", False),
        ("", None),
        ("42", 42),
        ("-1.5", -1.5),
        ("+7", 7),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("1.0.0", "1.0.0"),
        ("0x1F", "0x1F"),
        ("True", "True"),
        ('"a,b"', "a,b"),
        ('"say ""hi"""', 'say "hi"'),
    ],
)
def test_decode_value(token, value):
    decoded = decode_value(token)
    assert decoded == value
    assert type(decoded) is type(value)


def test_strings_survive_round_trip():
    for text in ["hello", "Login Process", "a,b", 'q"uote', "x, y, z"]:
        assert decode_value(encode_value(text)) == text


def test_numeric_looking_strings_are_coerced():
    # Known ambiguity: a zero-padded code written bare reads back as a number.
    assert decode_value(encode_value("007")) == 7
    assert decode_text(encode_value("007")) == "007"


def test_unquote_only_strips_balanced_quotes():
    assert unquote('"abc"') == "abc"
    assert unquote('"abc') == '"abc'
    assert unquote('""') == ""


def test_quote_text_always_quotes():
    assert quote_text("[draft]") == '"[draft]"'
    assert quote_text('say "hi"') == '"say ""hi"""'
    assert decode_value(quote_text("[draft]")) == "[draft]"
