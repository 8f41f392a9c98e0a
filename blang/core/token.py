"""Token definitions for blang. A token is the smallest classified unit of source text: an identifier, a literal,
a keyword, an operator or a delimiter. Two special kinds exist:

- ILLEGAL: any character (or unterminated string) the lexer could not classify. The lexer never fails; the parser
  reports these.
- EOF: the sentinel that terminates every token stream.
"""

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    """Kinds of tokens. The value of each member is the category it belongs to and its printable form."""
    ILLEGAL = ("illegal", "ILLEGAL")
    EOF = ("eof", "EOF")

    IDENT = ("identifier", "IDENT")
    INT = ("integer", "INT")
    STRING = ("string", "STRING")

    ASSIGN = ("operator", "=")
    PLUS = ("operator", "+")
    MINUS = ("operator", "-")
    BANG = ("operator", "!")
    ASTERISK = ("operator", "*")
    SLASH = ("operator", "/")
    LT = ("operator", "<")
    GT = ("operator", ">")
    EQ = ("operator", "==")
    NOT_EQ = ("operator", "!=")

    COMMA = ("delimiter", ",")
    SEMICOLON = ("delimiter", ";")
    LPAREN = ("delimiter", "(")
    RPAREN = ("delimiter", ")")
    LBRACE = ("delimiter", "{")
    RBRACE = ("delimiter", "}")

    FUNCTION = ("keyword", "fn")
    LET = ("keyword", "let")
    TRUE = ("keyword", "true")
    FALSE = ("keyword", "false")
    IF = ("keyword", "if")
    ELSE = ("keyword", "else")
    RETURN = ("keyword", "return")

    @property
    def category(self):
        return self.value[0]

    def __str__(self):
        return self.value[1]


KEYWORDS = {kind.value[1]: kind for kind in TokenKind if kind.category == "keyword"}

# longest spellings first so that "==" wins over "="
OPERATORS = {kind.value[1]: kind for kind in TokenKind if kind.category in ("operator", "delimiter")}
OPERATORS = dict(sorted(OPERATORS.items(), key=lambda item: -len(item[0])))


@dataclass(frozen=True)
class Token:
    """Immutable token. Position (1-based line and column of the first character) is informational only and does
    not take part in equality.
    """
    kind: TokenKind
    literal: str
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)

    def __str__(self):
        return self.literal if self.kind is not TokenKind.EOF else "EOF"
