"""Operator-precedence (Pratt) parser for blang. Turns the token stream produced by lexical.py into a Program.

Every token kind that can begin an expression has a prefix rule; every token kind that can continue one has an infix
rule and a precedence. parse_expression keeps folding infix rules into the left operand while the next token binds
tighter than the current minimum, which gives left-associative trees for equal-precedence chains:
`1 - 2 - 3` parses as `((1 - 2) - 3)`.

Errors never abort a parse. Each problem is recorded as a Diagnostic, the parser skips to the next statement boundary
and carries on, so one pass reports as many problems as possible.
"""

from dataclasses import dataclass
from enum import IntEnum

from blang.core import ast
from blang.core.lexical import Lexer
from blang.core.stack import recursion_limit
from blang.core.token import Token, TokenKind


INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # !x -x
    CALL = 7         # f(x)


PRECEDENCES = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}


@dataclass(frozen=True)
class Diagnostic:
    """A parse problem and the token it was found at."""
    message: str
    token: Token

    def __str__(self):
        return f"line {self.token.line}, column {self.token.column}: {self.message}"


class Parser:
    """Parses one source text. Use parse_program once per Parser."""

    def __init__(self, lexer):
        if isinstance(lexer, str):
            lexer = Lexer(lexer)
        self.lexer = lexer
        self.diagnostics = []

        self.cur_token = self.lexer.next_token()
        self.peek_token = self.lexer.next_token()

        self.prefix_parse_fns = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.STRING: self.parse_string_literal,
            TokenKind.TRUE: self.parse_boolean,
            TokenKind.FALSE: self.parse_boolean,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
        }
        self.infix_parse_fns = {kind: self.parse_infix_expression for kind in PRECEDENCES}
        self.infix_parse_fns[TokenKind.LPAREN] = self.parse_call_expression

    @property
    def errors(self):
        """Diagnostics as strings, in the order they were found."""
        return [str(diagnostic) for diagnostic in self.diagnostics]

    # token helpers

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind):
        return self.cur_token.kind is kind

    def peek_token_is(self, kind):
        return self.peek_token.kind is kind

    def expect_peek(self, kind):
        """Advances if the next token is of kind, else records a diagnostic. Returns whether it advanced."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self):
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    # diagnostics

    def error(self, message, token=None):
        self.diagnostics.append(Diagnostic(message, token if token is not None else self.cur_token))

    def peek_error(self, kind):
        if self.peek_token.kind is TokenKind.ILLEGAL:
            self.illegal_error(self.peek_token)
            return
        self.error(f"expected next token to be {kind}, got {self.peek_token.kind} instead", self.peek_token)

    def illegal_error(self, token):
        if token.literal.startswith("\""):
            self.error("unterminated string literal", token)
        else:
            self.error(f"illegal character '{token.literal}'", token)

    def no_prefix_parse_fn_error(self, token):
        if token.kind is TokenKind.ILLEGAL:
            self.illegal_error(token)
        else:
            self.error(f"no prefix parse function for {token.kind} found", token)

    def synchronize(self, in_block=False):
        """Skips tokens up to the next statement boundary at the current brace depth: a ';', the '}' closing the
        enclosing block (if in_block), or EOF. The boundary token becomes cur_token.
        """
        depth = 0
        while not self.cur_token_is(TokenKind.EOF):
            if depth == 0 and self.cur_token_is(TokenKind.SEMICOLON):
                return
            if self.cur_token_is(TokenKind.LBRACE):
                depth += 1
            elif self.cur_token_is(TokenKind.RBRACE):
                if depth == 0 and in_block:
                    return
                depth = max(depth - 1, 0)
            self.next_token()

    # statements

    def parse_program(self):
        """Parses until EOF. Returns the (possibly incomplete) Program; see self.diagnostics for problems."""
        program = ast.Program()

        with recursion_limit():
            while not self.cur_token_is(TokenKind.EOF):
                try:
                    stmt = self.parse_statement()
                except RecursionError:
                    # no safe place to resume mid-expression, so the rest of the input is dropped
                    self.error("expression nested too deeply")
                    break

                if stmt is None:
                    self.synchronize()
                else:
                    program.statements.append(stmt)
                self.next_token()

        return program

    def parse_statement(self):
        if self.cur_token_is(TokenKind.LET):
            return self.parse_let_statement()
        elif self.cur_token_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = ast.Identifier(self.cur_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.LetStatement(name, value)

    def parse_return_statement(self):
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.ReturnStatement(value)

    def parse_expression_statement(self):
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ast.ExpressionStatement(expr)

    def parse_block_statement(self):
        """Parses statements up to the matching '}'. cur_token is '{' on entry and '}' on success."""
        opening = self.cur_token
        block = ast.BlockStatement()
        self.next_token()

        while not self.cur_token_is(TokenKind.RBRACE) and not self.cur_token_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is None:
                self.synchronize(in_block=True)
                if self.cur_token_is(TokenKind.RBRACE):
                    break
            else:
                block.statements.append(stmt)
            self.next_token()

        if not self.cur_token_is(TokenKind.RBRACE):
            self.error("expected '}' to close block", opening)
            return None
        return block

    # expressions

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None

        left = prefix()
        while left is not None and not self.peek_token_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self):
        return ast.Identifier(self.cur_token.literal)

    def parse_integer_literal(self):
        value = int(self.cur_token.literal)
        if value > INT64_MAX:
            self.error(f"could not parse {self.cur_token.literal} as integer")
            return None
        return ast.IntegerLiteral(value)

    def parse_string_literal(self):
        return ast.StringLiteral(self.cur_token.literal)

    def parse_boolean(self):
        return ast.BooleanLiteral(self.cur_token_is(TokenKind.TRUE))

    def parse_prefix_expression(self):
        operator = self.cur_token.literal
        self.next_token()

        operand = self.parse_expression(Precedence.PREFIX)
        if operand is None:
            return None
        return ast.PrefixExpression(operator, operand)

    def parse_infix_expression(self, left):
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        self.next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return ast.InfixExpression(operator, left, right)

    def parse_grouped_expression(self):
        self.next_token()

        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None or not self.expect_peek(TokenKind.RPAREN):
            return None
        return expr

    def parse_if_expression(self):
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None or not self.expect_peek(TokenKind.RPAREN) or not self.expect_peek(TokenKind.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()

            if self.peek_token_is(TokenKind.IF):
                # else if: the nested if becomes the only statement of the alternative
                self.next_token()
                nested = self.parse_if_expression()
                if nested is None:
                    return None
                alternative = ast.BlockStatement([ast.ExpressionStatement(nested)])
            else:
                if not self.expect_peek(TokenKind.LBRACE):
                    return None
                alternative = self.parse_block_statement()
                if alternative is None:
                    return None

        return ast.IfExpression(condition, consequence, alternative)

    def parse_function_literal(self):
        if not self.expect_peek(TokenKind.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None or not self.expect_peek(TokenKind.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None
        return ast.FunctionLiteral(parameters, body)

    def parse_function_parameters(self):
        """Parses `(a, b, c)`. cur_token is '(' on entry and ')' on success."""
        parameters = []
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return parameters

        while True:
            if not self.expect_peek(TokenKind.IDENT):
                return None

            param = ast.Identifier(self.cur_token.literal)
            if param in parameters:
                self.error(f"duplicate parameter {param.name}")
                return None
            parameters.append(param)

            if not self.peek_token_is(TokenKind.COMMA):
                break
            self.next_token()

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function):
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return ast.CallExpression(function, arguments)

    def parse_call_arguments(self):
        """Parses `(x, y + 1)`. cur_token is '(' on entry and ')' on success."""
        arguments = []
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        while True:
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            arguments.append(arg)

            if not self.peek_token_is(TokenKind.COMMA):
                break
            self.next_token()
            self.next_token()

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return arguments


def parse(text):
    """Parses text. Returns (Program, [Diagnostic])."""
    parser = Parser(Lexer(text))
    program = parser.parse_program()
    return program, parser.diagnostics
