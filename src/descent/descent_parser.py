"""
DESCENT Language Parser

Predictive (LL(1)) recursive-descent syntax analyser for the DESCENT statement
language. The parser checks that a token stream is grammatical; it does not
build a tree. The derivation is reported to a parse-event sink as it is walked
(enter nonterminal, accept terminal, leave nonterminal).

Grammar
-------
    statement-part        ::= "begin" statement-list "end"
    statement-list        ::= statement { ";" statement-list }
    statement             ::= assignment | while | if | procedure | until | for
    assignment-statement  ::= identifier ":=" ( stringConstant | expression )
    expression            ::= term [ ( "+" | "-" ) expression ]
    term                  ::= factor [ ( "*" | "/" ) term ]
    factor                ::= identifier | numberConstant | "(" expression ")"
    while-statement       ::= "while" condition "loop" statement-list "end" "loop"
    for-statement         ::= "for" "(" assignment-statement ";" condition ";"
                              assignment-statement ")" "do" statement-list "end" "loop"
    if-statement          ::= "if" condition "then" statement-list
                              [ "else" statement-list ] "end" "if"
    procedure-statement   ::= "call" identifier "(" [ argument-list ] ")"
    argument-list         ::= identifier { "," argument-list }
    until-statement       ::= "do" statement-list "until" condition
    condition             ::= identifier conditional-operator
                              ( identifier | numberConstant )
    conditional-operator  ::= "=" | "<>" | "<" | ">"

Repetition is right-recursive: each further `;`-separated statement, `,`-separated
argument, `+`/`-` term and `*`/`/` factor opens a nested nonterminal, so the
event trace nests accordingly. A `;` directly before `end`, `else` or `until`
is accepted and closes the list.

Parser Behavior
---------------
- Single-token lookahead, no backtracking, no error recovery.
- Every nonterminal wraps a failure below it in a new `ParseError` reading
  `"<name> at line N"` (N = line of the lookahead at that moment), chained to
  the inner error with `raise ... from`. The innermost error names the offending
  token and what was expected.
- A `Parser` is single-use: it owns the lookahead cursor for one input.

Entry Points
------------
- `parse()`: statement part, then end of input, then `report_success()`.
- `parse_statement_part()`: statement part only.

Raises
------
ParseError
    Raised when the token stream violates the grammar.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Protocol

from descent.descent_constants import (
    ADDING_OPERATORS,
    ARGUMENT_LIST,
    ASSIGNMENT_STATEMENT,
    BECOMES,
    BEGIN,
    CALL,
    COMMA,
    COMPARANDS,
    CONDITION,
    CONDITIONAL_OPERATOR,
    CONDITIONAL_OPERATORS,
    DO,
    ELSE,
    END,
    EOF,
    EXPRESSION,
    FACTOR,
    FOR,
    FOR_STATEMENT,
    IDENT,
    IF,
    IF_STATEMENT,
    LOOP,
    LPAREN,
    MULTIPLYING_OPERATORS,
    NUMBER,
    PROCEDURE_STATEMENT,
    RPAREN,
    SEMICOLON,
    STATEMENT,
    STATEMENT_LIST,
    STATEMENT_LIST_CLOSERS,
    STATEMENT_PART,
    STRING,
    TERM,
    THEN,
    UNTIL,
    UNTIL_STATEMENT,
    WHILE,
    WHILE_STATEMENT,
    symbol_name,
)
from descent.descent_errors import ParseError
from descent.descent_events import EventSink, ParseEventSink
from descent.descent_lexer import Token

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10_000
"""Extra call-stack frames granted to one parse on top of the interpreter limit."""


@contextmanager
def recursion_headroom(extra: int) -> Iterator[None]:
    """Temporarily raise the interpreter recursion limit by `extra` frames."""
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(previous + extra)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class TokenSource(Protocol):  # pragma: no cover
    """Anything that hands out tokens one at a time, ending with `EOF`."""

    def next_token(self) -> Token: ...


class Parser:
    """
    DESCENT parsing session.

    Holds the lookahead cursor for one input and implements one handler per
    nonterminal. The first token is fetched on construction.

    Attributes
    ----------
    source : TokenSource
        Where tokens are pulled from.
    sink : ParseEventSink
        Receiver of derivation events and error reports.
    lookahead : Token
        The first token not yet accepted.
    max_depth : int
        Recursion headroom for one parse. Every further `;`, `,`, `+`/`-`,
        `*`/`/` or `(` nests one more handler call.
    """

    def __init__(
        self,
        source: TokenSource,
        sink: ParseEventSink | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.source = source
        self.sink: ParseEventSink = sink if sink is not None else EventSink()
        self.lookahead: Token = source.next_token()
        self.used: bool = False
        self.max_depth = max_depth

        self.statement_handlers: dict[str, Callable[[], None]] = {
            IDENT: self.parse_assignment_statement,
            WHILE: self.parse_while_statement,
            IF: self.parse_if_statement,
            CALL: self.parse_procedure_statement,
            DO: self.parse_until_statement,
            UNTIL: self.parse_until_statement,
            FOR: self.parse_for_statement,
        }

    def _claim(self) -> None:
        if self.used:
            raise RuntimeError("Parser instances are single-use; create a new Parser")
        self.used = True

    def parse(self) -> None:
        """Parse a whole program: the statement part followed by end of input."""
        self._claim()
        with recursion_headroom(self.max_depth):
            self._parse_statement_part()
        self.accept(EOF)
        self.sink.report_success()

    def parse_statement_part(self) -> None:
        """Parse the statement part only, leaving any trailing tokens unread."""
        self._claim()
        with recursion_headroom(self.max_depth):
            self._parse_statement_part()

    def accept(self, expected: str) -> Token:
        """Accept the lookahead if it is of kind `expected` and advance.

        Raises:
            ParseError: Through the sink, if the lookahead is of another kind.
        """
        tok = self.lookahead
        if tok.type == expected:
            self.sink.accepted_terminal(tok)
            logger.debug("accepted %s %r at line %d", tok.type, tok.value, tok.line)
            self.lookahead = self.source.next_token()
            return tok
        self.sink.report_error(tok, f"<{symbol_name(expected)}>")

    @contextmanager
    def derive(self, name: str) -> Iterator[None]:
        """Bracket a nonterminal: enter/exit events, plus error-trail wrapping."""
        self.sink.enter(name)
        logger.debug("entering %s at line %d", name, self.lookahead.line)
        try:
            yield
        except ParseError as err:
            raise ParseError(f"{name} at line {self.lookahead.line}") from err
        self.sink.exit(name)
        logger.debug("leaving %s", name)

    def _parse_statement_part(self) -> None:
        """Parse the statement part: `begin` statement-list `end`."""
        with self.derive(STATEMENT_PART):
            self.accept(BEGIN)
            self.parse_statement_list()
            self.accept(END)

    def parse_statement_list(self) -> None:
        """Parse one statement, then a nested statement list after each `;`."""
        with self.derive(STATEMENT_LIST):
            self.parse_statement()
            while self.lookahead.type == SEMICOLON:
                self.accept(SEMICOLON)
                if self.lookahead.type in STATEMENT_LIST_CLOSERS:
                    break
                self.parse_statement_list()

    def parse_statement(self) -> None:
        """Parse a single statement, chosen by its first token."""
        with self.derive(STATEMENT):
            handler = self.statement_handlers.get(self.lookahead.type)
            if handler is None:
                self.sink.report_error(
                    self.lookahead,
                    "<identifier>, <while>, <if>, <call>, <do>, <until> or <for>",
                )
            handler()

    def parse_assignment_statement(self) -> None:
        """Parse `identifier := (string | expression)`."""
        with self.derive(ASSIGNMENT_STATEMENT):
            self.accept(IDENT)
            self.accept(BECOMES)
            # A string literal cannot take part in arithmetic
            if self.lookahead.type == STRING:
                self.accept(STRING)
            else:
                self.parse_expression()

    def parse_expression(self) -> None:
        """Parse a term, then a nested expression after `+` or `-`."""
        with self.derive(EXPRESSION):
            self.parse_term()
            if self.lookahead.type in ADDING_OPERATORS:
                self.accept(self.lookahead.type)
                self.parse_expression()

    def parse_term(self) -> None:
        """Parse a factor, then a nested term after `*` or `/`."""
        with self.derive(TERM):
            self.parse_factor()
            if self.lookahead.type in MULTIPLYING_OPERATORS:
                self.accept(self.lookahead.type)
                self.parse_term()

    def parse_factor(self) -> None:
        """Parse an identifier, a number, or a parenthesised expression."""
        with self.derive(FACTOR):
            kind = self.lookahead.type
            if kind in (IDENT, NUMBER):
                self.accept(kind)
            elif kind == LPAREN:
                self.accept(LPAREN)
                self.parse_expression()
                self.accept(RPAREN)
            else:
                self.sink.report_error(
                    self.lookahead, "<identifier>, <numberConstant> or <(>"
                )

    def parse_while_statement(self) -> None:
        """Parse `while` condition `loop` statement-list `end loop`."""
        with self.derive(WHILE_STATEMENT):
            self.accept(WHILE)
            self.parse_condition()
            self.accept(LOOP)
            self.parse_statement_list()
            self.accept(END)
            self.accept(LOOP)

    def parse_for_statement(self) -> None:
        """Parse a FOR loop with init assignment, condition, step and body."""
        with self.derive(FOR_STATEMENT):
            self.accept(FOR)
            self.accept(LPAREN)
            self.parse_assignment_statement()
            self.accept(SEMICOLON)
            self.parse_condition()
            self.accept(SEMICOLON)
            self.parse_assignment_statement()
            self.accept(RPAREN)
            self.accept(DO)
            self.parse_statement_list()
            self.accept(END)
            self.accept(LOOP)

    def parse_if_statement(self) -> None:
        """Parse an IF statement with optional ELSE branch, closed by `end if`."""
        with self.derive(IF_STATEMENT):
            self.accept(IF)
            self.parse_condition()
            self.accept(THEN)
            self.parse_statement_list()
            if self.lookahead.type == ELSE:
                self.accept(ELSE)
                self.parse_statement_list()
            self.accept(END)
            self.accept(IF)

    def parse_procedure_statement(self) -> None:
        """Parse `call name(...)` with an optional argument list."""
        with self.derive(PROCEDURE_STATEMENT):
            self.accept(CALL)
            self.accept(IDENT)
            self.accept(LPAREN)
            if self.lookahead.type != RPAREN:
                self.parse_argument_list()
            self.accept(RPAREN)

    def parse_argument_list(self) -> None:
        """Parse an identifier, then a nested argument list after each `,`."""
        with self.derive(ARGUMENT_LIST):
            self.accept(IDENT)
            while self.lookahead.type == COMMA:
                self.accept(COMMA)
                self.parse_argument_list()

    def parse_until_statement(self) -> None:
        """Parse `do` statement-list `until` condition."""
        with self.derive(UNTIL_STATEMENT):
            self.accept(DO)
            self.parse_statement_list()
            self.accept(UNTIL)
            self.parse_condition()

    def parse_condition(self) -> None:
        """Parse `identifier <op> (identifier | number)`."""
        with self.derive(CONDITION):
            self.accept(IDENT)
            self.parse_conditional_operator()
            if self.lookahead.type in COMPARANDS:
                self.accept(self.lookahead.type)
            else:
                self.sink.report_error(self.lookahead, "<condition>")

    def parse_conditional_operator(self) -> None:
        """Parse one of `=`, `<>`, `<`, `>`."""
        with self.derive(CONDITIONAL_OPERATOR):
            if self.lookahead.type in CONDITIONAL_OPERATORS:
                self.accept(self.lookahead.type)
            else:
                self.sink.report_error(self.lookahead, "<=>, <<>>, <<> or <>>")
