"""Session control for blang. A Session owns one Environment for its whole lifetime, so bindings made by one input
survive into the next, either in command-line mode (one chunk per prompt) or file interpretation mode (the whole file
is one program).
"""

from blang.core import ast
from blang.core.environment import Environment
from blang.core.evaluator import evaluate
from blang.core.lexical import tokenize
from blang.core.objects import Error
from blang.core.parser import Parser
from blang.core.token import TokenKind
from blang.lang.error import GenericException


class Session:
    """Governs a blang session, with control over the top-level environment."""
    SH_FILE = "<in>"       # command-line interpreter filename
    STR_FILE = "<string>"  # filename used for source passed on the command line

    def __init__(self, error_handler, path, cmd_line, source=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()  # top-level bindings, shared by everything this session runs
        self.to_exec = []         # list of (line num, source, Program) still to evaluate
        self.results = []         # values of evaluated programs, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if source is not None:
            self.add(source, 1)

        elif path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)
            self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line onto prev (the unfinished input so far, if any). Returns the joined input and whether it still
        needs a continuation line: more '(' or '{' opened than closed, or a string literal left open.
        """
        line = f"{prev}\n{line}" if prev else line.rstrip()

        balance = 0
        for token in tokenize(line):
            if token.kind in (TokenKind.LPAREN, TokenKind.LBRACE):
                balance += 1
            elif token.kind in (TokenKind.RPAREN, TokenKind.RBRACE):
                balance -= 1
            elif token.kind is TokenKind.ILLEGAL and token.literal.startswith("\""):
                return line, True

        return line, balance > 0

    @staticmethod
    def first_line(source):
        """First non-blank line of source, used in tracebacks."""
        return next((line.strip() for line in source.splitlines() if line.strip()), "")

    def add(self, source, line_num):
        """Parses source and queues it for run. Every parse diagnostic is reported; the last one is raised, so a
        source that does not parse cleanly is never queued.
        """
        self.error_handler.register_line(self.path, Session.first_line(source), line_num)  # in case error is raised

        parser = Parser(source)
        program = parser.parse_program()

        if parser.diagnostics:
            *reported, last = parser.diagnostics
            for diagnostic in reported:
                self.error_handler.report(GenericException.from_diagnostic(diagnostic, source))
            raise GenericException.from_diagnostic(last, source)

        self.to_exec.append((line_num, source, program))
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates queued programs in order against this session's environment. A program that ends in a `let`
        produces no result. An Error result is raised as a GenericException; bindings made before it stay valid.
        """
        while self.to_exec:
            line_num, source, program = self.to_exec.pop(0)
            self.error_handler.register_line(self.path, Session.first_line(source), line_num)

            result = evaluate(program, self.env)
            if isinstance(result, Error):
                raise GenericException(GenericException.escape(result.message), diagnosis=False)

            if not program.statements or not isinstance(program.statements[-1], ast.LetStatement):
                self.results.append(result)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
