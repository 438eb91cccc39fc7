"""
Parse-event sinks for the DESCENT parser.

The parser does not build a tree. Instead it reports the derivation as it walks
it: entering a nonterminal, leaving it, and accepting a terminal token. Sinks
receive those notifications and also own error reporting, so that the message
format (including the source file label) lives outside the grammar code.

Classes:
    ParseEventSink (Protocol): Interface the parser depends on.
    ParseEvent: One recorded notification.
    EventSink: Base sink; formats and raises syntax errors, ignores the rest.
    NullSink: Alias of EventSink, for callers that only want accept/reject.
    TraceSink: Records every notification for later inspection.
    DerivationPrinter: Prints an indented derivation as it happens.

Example:
    >>> sink = TraceSink(filename="demo.txt")
    >>> Parser(Lexer(CharacterStream("begin x := 1 end")), sink).parse()
    >>> sink.entered()[:3]
    ['<statement part>', '<statement list>', '<statement>']
"""

import logging
import sys
from typing import NamedTuple, NoReturn, Protocol, TextIO

from descent.descent_constants import symbol_name
from descent.descent_errors import ParseError
from descent.descent_lexer import Token

logger = logging.getLogger(__name__)

ENTER = "enter"
EXIT = "exit"
TERMINAL = "terminal"


class ParseEventSink(Protocol):  # pragma: no cover
    """Protocol for receivers of parser notifications.

    `report_error` must never return normally: it raises `ParseError`.
    """

    def enter(self, name: str) -> None: ...

    def exit(self, name: str) -> None: ...

    def accepted_terminal(self, token: Token) -> None: ...

    def report_error(self, token: Token, expected: str) -> NoReturn: ...

    def report_success(self) -> None: ...


class ParseEvent(NamedTuple):
    """A single parser notification.

    Attributes:
        kind (str): One of "enter", "exit", "terminal".
        name (str): Nonterminal name, or the symbol kind of an accepted token.
        token (Token | None): The accepted token for "terminal" events.
    """

    kind: str
    name: str
    token: Token | None = None


class EventSink:
    """Base parse-event sink.

    Ignores derivation notifications and turns error reports into
    `ParseError` exceptions.

    Attributes:
        filename (str): Opaque label of the source, quoted in error messages.
    """

    def __init__(self, filename: str = "<string>") -> None:
        self.filename = filename

    def enter(self, name: str) -> None:
        pass

    def exit(self, name: str) -> None:
        pass

    def accepted_terminal(self, token: Token) -> None:
        pass

    def report_error(self, token: Token, expected: str) -> NoReturn:
        """Raises the innermost `ParseError` for a rejected token.

        Args:
            token: The lookahead token that could not be accepted.
            expected: Description of what the grammar allows here.

        Raises:
            ParseError: Always.
        """
        message = (
            f'Token: "{token.value}" at line {token.line}. '
            f"In file {self.filename}. {expected} is expected"
        )
        logger.debug("syntax error: %s", message)
        raise ParseError(message, token=token, expected=expected)

    def report_success(self) -> None:
        logger.debug("%s parsed successfully", self.filename)


NullSink = EventSink


class TraceSink(EventSink):
    """Sink that records every notification in `events`, in order."""

    def __init__(self, filename: str = "<string>") -> None:
        super().__init__(filename)
        self.events: list[ParseEvent] = []
        self.succeeded: bool = False

    def enter(self, name: str) -> None:
        self.events.append(ParseEvent(ENTER, name))

    def exit(self, name: str) -> None:
        self.events.append(ParseEvent(EXIT, name))

    def accepted_terminal(self, token: Token) -> None:
        self.events.append(ParseEvent(TERMINAL, token.type, token))

    def report_success(self) -> None:
        super().report_success()
        self.succeeded = True

    def entered(self) -> list[str]:
        """Names of the nonterminals entered, in order."""
        return [e.name for e in self.events if e.kind == ENTER]

    def terminals(self) -> list[Token]:
        """Tokens accepted, in order."""
        return [e.token for e in self.events if e.kind == TERMINAL and e.token]

    def outline(self) -> list[str]:
        """Compact rendering: `+name` on enter, `-name` on exit, the lexeme for terminals."""
        rendered = []
        for event in self.events:
            if event.kind == ENTER:
                rendered.append(f"+{event.name}")
            elif event.kind == EXIT:
                rendered.append(f"-{event.name}")
            else:
                assert event.token is not None  # for mypy
                rendered.append(event.token.value)
        return rendered


class DerivationPrinter(EventSink):
    """Sink that prints the derivation as an indented outline.

    Args:
        filename (str): Source label for error messages.
        indent (int): Spaces per nesting level.
        out (TextIO | None): Destination stream, stdout by default.
    """

    def __init__(
        self, filename: str = "<string>", indent: int = 2, out: TextIO | None = None
    ) -> None:
        super().__init__(filename)
        self.indent = indent
        self.out = out if out is not None else sys.stdout
        self.depth = 0

    def _write(self, text: str) -> None:
        print(" " * (self.indent * self.depth) + text, file=self.out)

    def enter(self, name: str) -> None:
        self._write(f"-> {name}")
        self.depth += 1

    def exit(self, name: str) -> None:
        self.depth -= 1
        self._write(f"<- {name}")

    def accepted_terminal(self, token: Token) -> None:
        self._write(f"{symbol_name(token.type)} {token.value!r} (line {token.line})")


__all__ = [
    "DerivationPrinter",
    "EventSink",
    "NullSink",
    "ParseEvent",
    "ParseEventSink",
    "TraceSink",
]
