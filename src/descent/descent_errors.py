"""
Exceptions raised by the DESCENT front end.

Classes:
    LexError: Malformed lexeme in the source text (e.g. an unterminated string).
    ParseError: The token stream violates the grammar.

`ParseError` instances are chained with `raise ... from ...`: the innermost
error names the offending token and what was expected there, and each
enclosing nonterminal adds one `"<name> at line N"` layer on top of it.

Example:
    >>> try:
    ...     parser.parse()
    ... except ParseError as err:
    ...     print("\\n".join(err.trail()))
    <statement part> at line 3
    <statement list> at line 3
    ...
    Token: "end" at line 3. In file demo.txt. <loop> is expected
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from descent.descent_lexer import Token


class LexError(SyntaxError):
    """Raised by the lexer when a lexeme cannot be completed.

    Attributes:
        line (int): Line where the bad lexeme starts.
        col (int): Column where the bad lexeme starts.
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.col = col


class ParseError(SyntaxError):
    """Grammar violation raised while parsing.

    Attributes:
        token (Token | None): The lookahead token that could not be accepted.
            Only set on the innermost error of a chain.
        expected (str | None): Description of the acceptable symbols at the
            failure point. Only set on the innermost error of a chain.
    """

    def __init__(
        self,
        message: str,
        token: Token | None = None,
        expected: str | None = None,
    ) -> None:
        super().__init__(message)
        self.token = token
        self.expected = expected

    def __str__(self) -> str:
        return str(self.msg)

    def chain(self) -> list[ParseError]:
        """Returns this error followed by its `ParseError` causes, outermost first."""
        errors: list[ParseError] = []
        err: BaseException | None = self
        while isinstance(err, ParseError):
            errors.append(err)
            err = err.__cause__
        return errors

    def trail(self) -> list[str]:
        """Returns the message of every layer in the chain, outermost first."""
        return [str(err) for err in self.chain()]

    def root(self) -> ParseError:
        """Returns the innermost error, the one naming the offending token."""
        return self.chain()[-1]

    def nonterminals(self) -> list[str]:
        """Returns the derivation path from the start symbol down to the failure."""
        return [str(err).split(" at line ")[0] for err in self.chain()[:-1]]
