"""Runtime values of blang. The set of value kinds is closed:

- Integer: signed 64-bit integer
- Boolean: TRUE and FALSE are the only instances the evaluator produces
- String: immutable text
- Null: NULL is the only instance
- Function: parameters, body and the Environment captured at definition time
- ReturnValue: wraps the value of a `return`; an evaluation signal that never reaches user code
- Error: an evaluation-level failure; propagated as an ordinary value, never raised

ReturnValue and Error are transient: they are never stored in an Environment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    NULL = "NULL"
    RETURN_VALUE = "RETURN_VALUE"
    FUNCTION = "FUNCTION"
    ERROR = "ERROR"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Integer:
    value: int
    type = ObjectType.INTEGER

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool
    type = ObjectType.BOOLEAN

    def inspect(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
    value: str
    type = ObjectType.STRING

    def inspect(self):
        return self.value


@dataclass(frozen=True)
class Null:
    type = ObjectType.NULL

    def inspect(self):
        return "null"


@dataclass(frozen=True)
class ReturnValue:
    value: object
    type = ObjectType.RETURN_VALUE

    def inspect(self):
        return self.value.inspect()


@dataclass(eq=False)
class Function:
    """A closure. env is shared by reference with every other closure created in the same frame; it may contain
    this very function (recursion), so it is kept out of repr.
    """
    parameters: List[str]
    body: object
    env: "Environment" = field(repr=False)
    type = ObjectType.FUNCTION

    def inspect(self):
        return f"fn({', '.join(self.parameters)})"


@dataclass(frozen=True)
class Error:
    message: str
    type = ObjectType.ERROR

    def inspect(self):
        return f"ERROR: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value):
    return TRUE if value else FALSE


def is_signal(obj):
    """Whether obj must stop the evaluation of the enclosing construct (a `return` or an error)."""
    return isinstance(obj, (ReturnValue, Error))


def is_truthy(obj):
    """Everything except false and null is truthy, including 0 and ""."""
    return not (obj == FALSE or isinstance(obj, Null))
