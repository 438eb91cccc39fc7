"""
Lexical analyzer for the DESCENT statement language.

This module turns raw source text into classified tokens for the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable token with symbol kind, lexeme, and source location.
    Lexer: Token source that converts a CharacterStream into tokens on demand.
    TokenStream: Token source that replays a prebuilt list of tokens.

Features:
    - Skips whitespace
    - Longest-match recognition of operators (`:=`, `<>`, `<`, ...)
    - Recognizes:
        * Identifiers and lowercase keywords (`begin`, `while`, `loop`, ...)
        * Number constants (integer and decimal)
        * String constants (double or single quoted, with escape sequences)
    - Ends every stream with an `EOF` token, repeated on further requests

Raises:
    LexError: If malformed numbers or unterminated strings are encountered.

Example:
    >>> lexer = Lexer(CharacterStream("begin x := 1 end"))
    >>> lexer.next_token()
    Token(BEGIN, begin)
"""

from collections.abc import Iterable
from dataclasses import dataclass

from descent.descent_constants import EOF, ERROR, IDENT, NUMBER, STRING, token_hashmap
from descent.descent_errors import LexError


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (str): The symbol kind (e.g. 'IDENT', 'LOOP', 'EOF').
        value (str): The literal text matched.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    type: str
    value: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class Lexer:
    """Lexical analyzer for the DESCENT language.

    Produces one token per `next_token()` call; once the source is exhausted
    every further call returns an `EOF` token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in " \t\r\n\f":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator at the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(2):  # longest operator is two characters
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in max_token:
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: On a malformed number or an unterminated string.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, EOF, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha():
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token(IDENT, ident, line, col)

        # 2. Number constant
        if ch.isdigit():
            num = ""
            has_dot = False
            while not self.stream.end_of_file() and (
                self.peek().isdigit() or self.peek() == "."
            ):
                if self.peek() == ".":
                    if has_dot or not self.stream.peek(1).isdigit():
                        raise LexError(
                            f"Invalid number format at line {line}, col {col}",
                            line,
                            col,
                        )
                    has_dot = True
                num += self.advance()
            return Token(NUMBER, num, line, col)

        # 3. String constant
        if ch in ('"', "'"):
            quote = self.advance()
            val = ""
            while not self.stream.end_of_file():
                if self.peek() == "\\":
                    val += self.advance()
                    if not self.stream.end_of_file():
                        val += self.advance()
                elif self.peek() == quote or self.peek() == "\n":
                    break
                else:
                    val += self.advance()
            if self.peek() == quote:
                self.advance()
                return Token(STRING, val, line, col)
            raise LexError(f"Unterminated string at line {line}, col {col}", line, col)

        # 4. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character; rejected by the parser
        return Token(ERROR, self.advance(), line, col)


class TokenStream:
    """Token source over an already classified sequence of tokens.

    Once the sequence is used up it keeps returning its final `EOF` token,
    or a synthesized one if the sequence did not end with `EOF`.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        self.position: int = 0

    def next_token(self) -> Token:
        if self.position < len(self.tokens):
            tok = self.tokens[self.position]
            self.position += 1
            return tok
        if self.tokens and self.tokens[-1].type == EOF:
            return self.tokens[-1]
        last_line = self.tokens[-1].line if self.tokens else 1
        return Token(EOF, EOF, last_line)


def tokenize(source: str) -> list[Token]:
    """Lexes a whole source string, returning every token up to and including `EOF`."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "TokenStream", "tokenize"]
