"""Tree-walking evaluator for blang.

evaluate(node, env) dispatches on the node class and recurses over its children. Failures are not raised: they are
Error objects that every composite construct hands back as soon as a sub-evaluation produces one, exactly as a
ReturnValue unwinds a function body. The only state is the Environment chain, extended by `let` and by calls.

Integer arithmetic is checked signed 64-bit: results outside that range and division by zero are Errors.
"""

from blang.core import ast
from blang.core.environment import Environment
from blang.core.objects import (INT64_MAX, INT64_MIN, NULL, Boolean, Error, Function, Integer, Null, ReturnValue,
                                String, is_signal, is_truthy, native_bool)
from blang.core.stack import recursion_limit


def evaluate(node, env):
    """Evaluates node in env and returns the resulting object (possibly an Error or, inside function bodies, a
    ReturnValue).
    """
    # statements
    if isinstance(node, ast.Program):
        return eval_program(node, env)

    elif isinstance(node, ast.BlockStatement):
        return eval_block_statement(node, env)

    elif isinstance(node, ast.ExpressionStatement):
        return evaluate(node.expr, env)

    elif isinstance(node, ast.LetStatement):
        value = evaluate(node.value, env)
        if is_signal(value):
            return value
        env.define(node.name.name, value)
        return NULL

    elif isinstance(node, ast.ReturnStatement):
        value = evaluate(node.value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    # expressions
    elif isinstance(node, ast.IntegerLiteral):
        return Integer(node.value)

    elif isinstance(node, ast.StringLiteral):
        return String(node.value)

    elif isinstance(node, ast.BooleanLiteral):
        return native_bool(node.value)

    elif isinstance(node, ast.Identifier):
        value = env.resolve(node.name)
        if value is None:
            return Error(f"identifier not found: {node.name}")
        return value

    elif isinstance(node, ast.PrefixExpression):
        operand = evaluate(node.operand, env)
        if is_signal(operand):
            return operand
        return eval_prefix_expression(node.operator, operand)

    elif isinstance(node, ast.InfixExpression):
        left = evaluate(node.left, env)
        if is_signal(left):
            return left
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return eval_infix_expression(node.operator, left, right)

    elif isinstance(node, ast.IfExpression):
        return eval_if_expression(node, env)

    elif isinstance(node, ast.FunctionLiteral):
        return Function([param.name for param in node.parameters], node.body, env)

    elif isinstance(node, ast.CallExpression):
        function = evaluate(node.function, env)
        if is_signal(function):
            return function

        args = []
        for arg in node.arguments:
            value = evaluate(arg, env)
            if is_signal(value):
                return value
            args.append(value)

        return apply_function(function, args)

    raise TypeError(f"cannot evaluate node '{type(node).__name__}'")


def eval_program(program, env):
    """Evaluates top-level statements in order. A `return` ends the program with its (unwrapped) value. Recursion too
    deep for the Python stack ends it with an Error; bindings made before that stay.
    """
    result = NULL
    with recursion_limit():
        for stmt in program.statements:
            try:
                result = evaluate(stmt, env)
            except RecursionError:
                return Error("maximum recursion depth exceeded")

            if isinstance(result, ReturnValue):
                return result.value
            elif isinstance(result, Error):
                return result

    return result


def eval_block_statement(block, env):
    """Like eval_program, but a ReturnValue is passed up still wrapped so that it unwinds enclosing blocks too."""
    result = NULL
    for stmt in block.statements:
        result = evaluate(stmt, env)
        if is_signal(result):
            return result
    return result


def eval_if_expression(node, env):
    condition = evaluate(node.condition, env)
    if is_signal(condition):
        return condition

    if is_truthy(condition):
        return evaluate(node.consequence, env)
    elif node.alternative is not None:
        return evaluate(node.alternative, env)
    return NULL


def eval_prefix_expression(operator, operand):
    if operator == "!":
        return native_bool(not is_truthy(operand))

    elif operator == "-":
        if not isinstance(operand, Integer):
            return Error(f"unknown operator: -{operand.type}")
        return checked_integer(-operand.value, f"-{operand.value}")

    return Error(f"unknown operator: {operator}{operand.type}")


def eval_infix_expression(operator, left, right):
    if type(left) is not type(right):
        return Error(f"type mismatch: {left.type} {operator} {right.type}")

    if isinstance(left, Integer):
        return eval_integer_infix_expression(operator, left, right)

    if isinstance(left, String) and operator == "+":
        return String(left.value + right.value)

    if operator == "==":
        return native_bool(objects_equal(left, right))
    elif operator == "!=":
        return native_bool(not objects_equal(left, right))

    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_integer_infix_expression(operator, left, right):
    a, b = left.value, right.value
    expr = f"{a} {operator} {b}"

    if operator == "+":
        return checked_integer(a + b, expr)
    elif operator == "-":
        return checked_integer(a - b, expr)
    elif operator == "*":
        return checked_integer(a * b, expr)
    elif operator == "/":
        if b == 0:
            return Error(f"division by zero: {expr}")
        quotient = abs(a) // abs(b)  # truncates toward zero
        return checked_integer(quotient if (a < 0) == (b < 0) else -quotient, expr)
    elif operator == "<":
        return native_bool(a < b)
    elif operator == ">":
        return native_bool(a > b)
    elif operator == "==":
        return native_bool(a == b)
    elif operator == "!=":
        return native_bool(a != b)

    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def checked_integer(value, expr):
    if not INT64_MIN <= value <= INT64_MAX:
        return Error(f"integer overflow: {expr}")
    return Integer(value)


def objects_equal(left, right):
    """Equality for two objects of the same kind: by value for literals, by identity for functions."""
    if isinstance(left, (Integer, Boolean, String)):
        return left.value == right.value
    elif isinstance(left, Null):
        return True
    return left is right


def apply_function(function, args):
    """Calls function with already-evaluated args. The body runs in a fresh frame enclosed by the function's
    captured environment, not the caller's.
    """
    if not isinstance(function, Function):
        return Error(f"not a function: {function.type}")

    if len(args) != len(function.parameters):
        return Error(f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}")

    env = Environment.new_enclosed(function.env)
    for param, arg in zip(function.parameters, args):
        env.define(param, arg)

    result = evaluate(function.body, env)
    if isinstance(result, ReturnValue):
        return result.value
    return result
