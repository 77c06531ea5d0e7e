import pytest

from toyc import lexer
from toyc.errors import LexError


def _kinds(text):
    return [(tok.kind, tok.value) for tok in lexer.tokenize(text)]


def test_tokenize_var_declaration():
    assert _kinds("var x = 2 + 3;") == [
        ("keyword", "var"),
        ("ident", "x"),
        ("operator", "="),
        ("int", 2),
        ("operator", "+"),
        ("int", 3),
        ("delim", ";"),
        ("eof", None),
    ]


def test_boolean_words_and_strings():
    tokens = _kinds('truth falsy true false "a\\"b\\n"')
    assert tokens[:5] == [
        ("bool", True),
        ("bool", False),
        ("bool", True),
        ("bool", False),
        ("string", 'a"b\n'),
    ]


def test_comments_and_whitespace_are_skipped():
    text = "// header\nreturn x; // trailing\n"
    assert _kinds(text) == [("keyword", "return"), ("ident", "x"), ("delim", ";"), ("eof", None)]


def test_tokens_carry_positions():
    tokens = lexer.tokenize("var a = 1;\n  return a;")
    ret = tokens[5]
    assert ret.matches(lexer.KEYWORD, "return")
    assert (ret.line, ret.column) == (2, 3)


def test_unterminated_string_raises():
    with pytest.raises(LexError) as excinfo:
        lexer.tokenize('var s = "open;')
    assert excinfo.value.line == 1
    assert "unterminated" in str(excinfo.value)


def test_unexpected_character_reports_location():
    with pytest.raises(LexError) as excinfo:
        lexer.tokenize("var a = 1;\nvar b = $;")
    assert excinfo.value.line == 2
    assert excinfo.value.column == 9


def test_malformed_number_raises():
    with pytest.raises(LexError):
        lexer.tokenize("var a = 12ab;")


def test_eof_token_always_last():
    tokens = lexer.tokenize("")
    assert len(tokens) == 1
    assert tokens[0].kind == lexer.EOF


@pytest.mark.parametrize("text", ["var x = ²;", "var x = ٣;", "var x = 1²;"])
def test_non_ascii_digits_raise_lex_error(text):
    with pytest.raises(LexError):
        lexer.tokenize(text)


def test_identifiers_are_ascii():
    with pytest.raises(LexError) as excinfo:
        lexer.tokenize("var été = 1;")
    assert excinfo.value.column == 5
    assert _kinds("var _a1 = 1;")[1] == ("ident", "_a1")
