"""
Symbol tables shared by the DESCENT lexer, parser and event sinks.

The token vocabulary of the language is closed: every token produced by the
lexer carries one of the symbol kinds listed in `SYMBOLS`. Keywords and
operators are recognised through `token_hashmap`, which maps the literal
lexeme to its symbol kind. `symbol_name()` gives the human-readable name used
when the parser reports what it expected.

Exports:
    - SYMBOLS: Frozen set of every symbol kind.
    - token_hashmap: Lexeme → symbol kind, for keywords and operators.
    - SYMBOL_NAMES / symbol_name(): Symbol kind → readable name.
    - Nonterminal names emitted to parse-event sinks.
"""

IDENT = "IDENT"
NUMBER = "NUMBER"
STRING = "STRING"

BEGIN = "BEGIN"
END = "END"
WHILE = "WHILE"
IF = "IF"
FOR = "FOR"
CALL = "CALL"
UNTIL = "UNTIL"
DO = "DO"
THEN = "THEN"
ELSE = "ELSE"
LOOP = "LOOP"

BECOMES = "BECOMES"
SEMICOLON = "SEMICOLON"
COMMA = "COMMA"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
PLUS = "PLUS"
SUB = "SUB"
MULT = "MULT"
DIV = "DIV"
EQ = "EQ"
NE = "NE"
LT = "LT"
GT = "GT"

EOF = "EOF"
ERROR = "ERROR"

keyword_tokens: dict[str, str] = {
    "begin": BEGIN,
    "end": END,
    "while": WHILE,
    "if": IF,
    "for": FOR,
    "call": CALL,
    "until": UNTIL,
    "do": DO,
    "then": THEN,
    "else": ELSE,
    "loop": LOOP,
}

operator_tokens: dict[str, str] = {
    ":=": BECOMES,
    ";": SEMICOLON,
    ",": COMMA,
    "(": LPAREN,
    ")": RPAREN,
    "+": PLUS,
    "-": SUB,
    "*": MULT,
    "/": DIV,
    "=": EQ,
    "<>": NE,
    "<": LT,
    ">": GT,
}

token_hashmap: dict[str, str] = {**keyword_tokens, **operator_tokens}

SYMBOLS: frozenset[str] = frozenset(
    {IDENT, NUMBER, STRING, EOF, ERROR} | set(token_hashmap.values())
)

SYMBOL_NAMES: dict[str, str] = {
    IDENT: "identifier",
    NUMBER: "numberConstant",
    STRING: "stringConstant",
    EOF: "end of file",
    ERROR: "unknown",
    **{kind: lexeme for lexeme, kind in token_hashmap.items()},
}

# Grammar-level groupings used for lookahead dispatch
ADDING_OPERATORS: frozenset[str] = frozenset({PLUS, SUB})
MULTIPLYING_OPERATORS: frozenset[str] = frozenset({MULT, DIV})
CONDITIONAL_OPERATORS: frozenset[str] = frozenset({EQ, NE, LT, GT})
COMPARANDS: frozenset[str] = frozenset({IDENT, NUMBER})
STATEMENT_LIST_CLOSERS: frozenset[str] = frozenset({END, ELSE, UNTIL})

# Nonterminal names as reported to parse-event sinks and error trails
STATEMENT_PART = "<statement part>"
STATEMENT_LIST = "<statement list>"
STATEMENT = "<statement>"
ASSIGNMENT_STATEMENT = "<assignment statement>"
EXPRESSION = "<expression>"
TERM = "<term>"
FACTOR = "<factor>"
WHILE_STATEMENT = "<while statement>"
FOR_STATEMENT = "<for statement>"
IF_STATEMENT = "<if statement>"
PROCEDURE_STATEMENT = "<procedure statement>"
ARGUMENT_LIST = "<argument list>"
UNTIL_STATEMENT = "<until statement>"
CONDITION = "<condition>"
CONDITIONAL_OPERATOR = "<conditional operator>"

NONTERMINALS: tuple[str, ...] = (
    STATEMENT_PART,
    STATEMENT_LIST,
    STATEMENT,
    ASSIGNMENT_STATEMENT,
    EXPRESSION,
    TERM,
    FACTOR,
    WHILE_STATEMENT,
    FOR_STATEMENT,
    IF_STATEMENT,
    PROCEDURE_STATEMENT,
    ARGUMENT_LIST,
    UNTIL_STATEMENT,
    CONDITION,
    CONDITIONAL_OPERATOR,
)


def symbol_name(kind: str) -> str:
    """Returns the readable name of a symbol kind (e.g. `LOOP` → `loop`).

    Raises:
        KeyError: If `kind` is not one of `SYMBOLS`.
    """
    return SYMBOL_NAMES[kind]
