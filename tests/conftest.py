from collections.abc import Callable

import pytest

from descent.descent_events import TraceSink
from descent.descent_lexer import TokenStream, tokenize
from descent.descent_parser import Parser


def trace_parse(source: str) -> TraceSink:
    sink = TraceSink()
    Parser(TokenStream(tokenize(source)), sink).parse()
    return sink


@pytest.fixture  # type: ignore[misc]
def traced() -> Callable[[str], TraceSink]:
    """Parses a whole program and returns the sink holding its event trace."""
    return trace_parse
