"""Python stack allowance for the parser and evaluator, both of which recurse on the Python stack: one level of
parenthesis nesting costs the parser two frames, and one blang call costs the evaluator about ten.
"""

import sys
from contextlib import contextmanager


RECURSION_LIMIT = 10000  # Python frames


@contextmanager
def recursion_limit(limit=RECURSION_LIMIT):
    """Raises Python's recursion limit to at least limit while the block runs. Never lowers it."""
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
