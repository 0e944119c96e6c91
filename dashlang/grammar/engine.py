"""Grammar engine: recognizes Dash source text against the declarative grammar in dash.lark and produces a concrete
parse tree. lark's exceptions never leave this module; they are converted to ParseErrors that carry a readable
expectation message and the 1-based line/column of the failure.
"""

from functools import lru_cache
from pathlib import Path

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from dashlang.lang.error import ParseError


_GRAMMAR_PATH = Path(__file__).with_name("dash.lark")


class GrammarEngine:
    """Thin wrapper around a lark LALR parser for the Dash grammar."""
    DESCRIPTIONS = {
        "NAME": "identifier",
        "NUMBER": "number",
        "STRING": "string",
        "$END": "end of input",
    }

    def __init__(self, grammar=None):
        if grammar is None:
            grammar = _GRAMMAR_PATH.read_text(encoding="utf-8")

        self.lark = Lark(grammar, start="program", parser="lalr", propagate_positions=True, maybe_placeholders=True)

    def parse(self, source):
        """Returns the concrete parse tree of source. Raises ParseError on malformed input; no partial tree is ever
        returned.
        """
        try:
            return self.lark.parse(source)
        except UnexpectedInput as error:
            raise self.convert(error, source) from None

    def describe(self, terminal):
        """Returns human-readable description of the terminal named terminal."""
        if terminal in GrammarEngine.DESCRIPTIONS:
            return GrammarEngine.DESCRIPTIONS[terminal]

        try:
            pattern = self.lark.get_terminal(terminal).pattern
        except KeyError:
            return terminal.lower()
        return f"'{pattern.value}'"

    def expectation(self, expected):
        """Formats a set of terminal names as 'expected ...'."""
        described = sorted({self.describe(terminal) for terminal in expected})
        if not described:
            return ""
        elif len(described) == 1:
            return f", expected {described[0]}"
        return f", expected one of: {', '.join(described)}"

    def convert(self, error, source):
        """Returns ParseError equivalent to lark's error."""
        if isinstance(error, UnexpectedCharacters):
            char = source[error.pos_in_stream] if error.pos_in_stream < len(source) else ""
            message = f"unexpected character {char!r}" + self.expectation(error.allowed or ())
            return ParseError(message, error.line, error.column)

        if isinstance(error, UnexpectedToken) and error.token.type != "$END":
            token = error.token
            if token.type in ("NAME", "NUMBER", "STRING"):
                found = f"{self.describe(token.type)} {token.value!r}"
            else:
                found = f"'{token.value}'"
            return ParseError(f"unexpected {found}" + self.expectation(error.expected), token.line, token.column)

        if isinstance(error, (UnexpectedToken, UnexpectedEOF)):
            line, column = end_of(source)
            return ParseError("unexpected end of input" + self.expectation(error.expected), line, column)

        return ParseError(f"invalid syntax: {error}", getattr(error, "line", None), getattr(error, "column", None))


def end_of(source):
    """Returns (line, column) just past the last character of source."""
    lines = source.split("\n")
    return len(lines), len(lines[-1]) + 1


@lru_cache(maxsize=None)
def default_engine():
    """Returns the GrammarEngine shared by every parse."""
    return GrammarEngine()


def parse_tree(source):
    return default_engine().parse(source)
