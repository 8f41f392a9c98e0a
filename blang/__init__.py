"""blang: a tree-walking interpreter for a small dynamically-typed language with first-class functions and
closures.
"""

from blang.core.environment import Environment
from blang.interpreter import run

__all__ = ["Environment", "run"]
