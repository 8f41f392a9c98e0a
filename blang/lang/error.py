"""Error reporting for the blang command line. Language-level failures are values (see core/objects.py) and parse
problems are Diagnostics; this module turns both into printed messages. Only GenericExceptions should be raised
while running: any other exception that makes it to ErrorHandler is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be reported by ErrorHandler. exprs fill the '{}' slots of msg (in
    bold); exprs[0] should be the offending source text, and start/end the span of it to underline.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        super().__init__(self.msg)

    @classmethod
    def from_diagnostic(cls, diagnostic, source):
        """Builds an exception for a parse Diagnostic found in source, underlining the offending token."""
        token = diagnostic.token
        lines = source.splitlines() or [""]
        line = lines[min(token.line, len(lines)) - 1]

        start = min(token.column - 1, len(line))
        end = start + max(len(token.literal.splitlines()[0]) if token.literal else 1, 1)
        msg = cls.escape(f"line {token.line}, column {token.column}: {diagnostic.message}")
        return cls(msg, line, start=start, end=end)

    @staticmethod
    def escape(text):
        """Escapes braces so that text can be used as a msg template."""
        return text.replace("{", "{{").replace("}", "}}")


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report blang errors."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and underlined."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Prints error (a GenericException) without ending anything. Used for every error but the last of a batch."""
        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error. Exits if self.fatal.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        if error_msg:
            print(error_msg, end="")

        self.report(error)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (try --recursion-limit)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            msg = GenericException.escape(f"unknown error: '{exc_type.__name__}: {exc_val}'")
            self.report(GenericException(msg, internal=True))
            do_exit = True

        return not do_exit
