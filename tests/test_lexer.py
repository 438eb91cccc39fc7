import pytest
from hypothesis import given
from hypothesis import strategies as st

from descent.descent_constants import SYMBOLS, keyword_tokens
from descent.descent_errors import LexError
from descent.descent_lexer import CharacterStream, Lexer, Token, TokenStream, tokenize


def types_of(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_operator_and_punctuation_tokens() -> None:
    code = ":= ; , ( ) + - * / = <> < >"
    assert types_of(code) == [
        "BECOMES",
        "SEMICOLON",
        "COMMA",
        "LPAREN",
        "RPAREN",
        "PLUS",
        "SUB",
        "MULT",
        "DIV",
        "EQ",
        "NE",
        "LT",
        "GT",
        "EOF",
    ]


def test_longest_match_without_spaces() -> None:
    assert types_of("x:=y<>z<w") == [
        "IDENT",
        "BECOMES",
        "IDENT",
        "NE",
        "IDENT",
        "LT",
        "IDENT",
        "EOF",
    ]


def test_less_then_greater_with_space() -> None:
    assert types_of("< >") == ["LT", "GT", "EOF"]


@pytest.mark.parametrize("keyword", sorted(keyword_tokens))
def test_keywords(keyword: str) -> None:
    tok = Lexer(CharacterStream(keyword)).next_token()
    assert tok.type == keyword_tokens[keyword]
    assert tok.value == keyword


def test_keywords_are_case_sensitive() -> None:
    tok = Lexer(CharacterStream("BEGIN")).next_token()
    assert tok.type == "IDENT"


def test_identifier_with_keyword_prefix() -> None:
    tok = Lexer(CharacterStream("loop_count")).next_token()
    assert tok == Token("IDENT", "loop_count", 1, 1)


def test_number_tokens() -> None:
    assert [t.value for t in tokenize("12 3.25")[:2]] == ["12", "3.25"]
    assert types_of("12 3.25") == ["NUMBER", "NUMBER", "EOF"]


@pytest.mark.parametrize("source", ["1.2.3", "7."])
def test_malformed_number(source: str) -> None:
    with pytest.raises(LexError):
        tokenize(source)


def test_string_token() -> None:
    tok = Lexer(CharacterStream('"hello world"')).next_token()
    assert tok.type == "STRING"
    assert tok.value == "hello world"


def test_string_with_escape() -> None:
    tok = Lexer(CharacterStream(r'"say \"hi\""')).next_token()
    assert tok.value == r"say \"hi\""


@pytest.mark.parametrize("source", ['"open', '"broken\nline"'])
def test_unterminated_string(source: str) -> None:
    with pytest.raises(LexError) as excinfo:
        tokenize(source)
    assert excinfo.value.line == 1


def test_line_and_column_tracking() -> None:
    tokens = tokenize("begin\n  x := 1\nend")
    assert [(t.value, t.line, t.col) for t in tokens] == [
        ("begin", 1, 1),
        ("x", 2, 3),
        (":=", 2, 5),
        ("1", 2, 8),
        ("end", 3, 1),
        ("EOF", 3, 4),
    ]


def test_unknown_character_becomes_error_token() -> None:
    assert [t.type for t in tokenize("x ? :")] == ["IDENT", "ERROR", "ERROR", "EOF"]


def test_eof_repeats() -> None:
    lexer = Lexer(CharacterStream("  \n"))
    first, second = lexer.next_token(), lexer.next_token()
    assert first.type == second.type == "EOF"
    assert first.line == 2


def test_tokens_are_immutable() -> None:
    tok = Token("IDENT", "x", 1, 1)
    with pytest.raises(AttributeError):
        tok.value = "y"  # type: ignore[misc]


def test_token_stream_replays_then_repeats_eof() -> None:
    tokens = tokenize("x")
    stream = TokenStream(tokens)
    assert [stream.next_token() for _ in range(4)] == tokens + [tokens[-1]] * 2


def test_token_stream_synthesizes_eof() -> None:
    stream = TokenStream([Token("IDENT", "x", 4, 1)])
    stream.next_token()
    tok = stream.next_token()
    assert tok.type == "EOF"
    assert tok.line == 4


def test_character_stream_past_end() -> None:
    stream = CharacterStream("a")
    stream.next()
    with pytest.raises(EOFError):
        stream.next()


@given(st.text(alphabet="abcxyz019 \n:=;,()+-*/<>?", max_size=40))  # type: ignore[misc]
def test_every_token_kind_is_known(source: str) -> None:
    try:
        tokens = tokenize(source)
    except LexError:
        return
    assert tokens[-1].type == "EOF"
    assert all(tok.type in SYMBOLS for tok in tokens)
