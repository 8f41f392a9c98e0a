"""Lexical analysis for blang: converts raw source text into a finite sequence of tokens ending in EOF.

Lexical grammar:

```
<ident>    ::= (<letter> | "_") (<letter> | <digit> | "_")*   ; keywords: fn let true false if else return
<int>      ::= <digit>+
<string>   ::= '"' <char>* '"'                               ; no escapes; may span lines
<operator> ::= "==" | "!=" | "=" | "+" | "-" | "!" | "*" | "/" | "<" | ">"
<delim>    ::= "," | ";" | "(" | ")" | "{" | "}"
```

Both identifiers and multi-character operators use maximal munch. Malformed input never stops the lexer: anything
it cannot classify becomes an ILLEGAL token and is left for the parser to diagnose.
"""

import string

from blang.core.token import KEYWORDS, OPERATORS, Token, TokenKind


WHITESPACE = " \t\r\n"
IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = IDENT_START + string.digits


class Lexer:
    """Single-pass lexer over one source text. Each Lexer holds its own cursor, so lexers never share state."""

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.done = False

    def _peek(self, offset=0):
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def _advance(self, count=1):
        for __ in range(count):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _read_while(self, chars):
        start = self.pos
        while self._peek() and self._peek() in chars:
            self._advance()
        return self.text[start:self.pos]

    def next_token(self):
        """Returns the next token. Once EOF has been returned, every further call returns EOF again."""
        self._read_while(WHITESPACE)
        line, column = self.line, self.column

        char = self._peek()
        if not char:
            self.done = True
            return Token(TokenKind.EOF, "", line, column)

        if char in IDENT_START:
            word = self._read_while(IDENT_CHARS)
            return Token(KEYWORDS.get(word, TokenKind.IDENT), word, line, column)

        if char in string.digits:
            return Token(TokenKind.INT, self._read_while(string.digits), line, column)

        if char == "\"":
            return self._read_string(line, column)

        for spelling, kind in OPERATORS.items():
            if self.text.startswith(spelling, self.pos):
                self._advance(len(spelling))
                return Token(kind, spelling, line, column)

        self._advance()
        return Token(TokenKind.ILLEGAL, char, line, column)

    def _read_string(self, line, column):
        """Reads a string literal; the cursor is on the opening quote."""
        start = self.pos
        self._advance()
        while self._peek() and self._peek() != "\"":
            self._advance()

        if not self._peek():
            # unterminated: the whole remainder (including the opening quote) is illegal
            return Token(TokenKind.ILLEGAL, self.text[start:], line, column)

        self._advance()
        return Token(TokenKind.STRING, self.text[start + 1:self.pos - 1], line, column)

    def __iter__(self):
        while not self.done:
            yield self.next_token()


def tokenize(text):
    """Lazily yields the tokens of text, ending with exactly one EOF token. Restartable: every call lexes afresh."""
    yield from Lexer(text)
