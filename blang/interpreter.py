"""blang interpreter.

Basic program flow:
    1. Lexer (core/lexical.py): source text -> tokens, ending in EOF. Never fails; unknown characters become ILLEGAL
       tokens.
    2. Parser (core/parser.py): tokens -> Program plus Diagnostics. Recovers at statement boundaries so that a single
       pass reports every problem it can.
    3. Evaluator (core/evaluator.py): walks the Program in an Environment and produces an object. Evaluation errors
       are Error objects, not exceptions.

run() is the whole pipeline for one source text. Callers that evaluate many texts against the same bindings (the
shell) keep one Environment and pass it to every call.
"""

from blang.core.environment import Environment
from blang.core.evaluator import evaluate
from blang.core.parser import parse


def run(source, env=None):
    """Lexes, parses and evaluates source in env (a fresh Environment if None). Returns (value, diagnostics):
    diagnostics is a list of strings, and if it is non-empty nothing was evaluated and value is None.
    """
    if env is None:
        env = Environment()

    program, diagnostics = parse(source)
    if diagnostics:
        return None, [str(diagnostic) for diagnostic in diagnostics]

    return evaluate(program, env), []
