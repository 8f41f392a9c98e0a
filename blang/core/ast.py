"""Abstract syntax tree for blang.

Syntactic grammar (precedence climbing is handled by the parser, see parser.py):

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expr> [";"]
               | "return" <expr> [";"]
               | <expr> [";"]
<block>      ::= "{" <statement>* "}"
<expr>       ::= <ident> | <int> | <string> | "true" | "false"
               | ("!" | "-") <expr>
               | <expr> <infix-op> <expr>
               | "(" <expr> ")"
               | "if" "(" <expr> ")" <block> ["else" (<block> | <if-expr>)]
               | "fn" "(" [<ident> ("," <ident>)*] ")" <block>
               | <expr> "(" [<expr> ("," <expr>)*] ")"
```

The node set is closed: the evaluator dispatches on exactly the classes below. Nodes own their children (the tree
never shares subtrees) and compare structurally, so parsed trees can be checked against hand-built ones.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional, Union


class Node:
    """Mixin for every node: readable tree display."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=[
                <Node>(...),
            ],
            <field>=<value>,
        )
        """
        pad = "    " * indents
        result = f"{type(self).__name__}("
        for node_field in fields(self):
            value = getattr(self, node_field.name)
            if isinstance(value, Node):
                value = value.display(indents + 1).lstrip()
            elif isinstance(value, list) and value and isinstance(value[0], Node):
                items = "".join(f"{item.display(indents + 2)},\n" for item in value)
                value = f"[\n{items}{pad}    ]"
            else:
                value = repr(value)
            result += f"\n{pad}    {node_field.name}={value},"
        return f"{pad}{result}\n{pad})"


# expressions

@dataclass
class Identifier(Node):
    name: str

    def __str__(self):
        return self.name


@dataclass
class IntegerLiteral(Node):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass
class StringLiteral(Node):
    value: str

    def __str__(self):
        return f"\"{self.value}\""


@dataclass
class BooleanLiteral(Node):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass
class PrefixExpression(Node):
    operator: str
    operand: "Expression"

    def __str__(self):
        return f"({self.operator}{self.operand})"


@dataclass
class InfixExpression(Node):
    operator: str
    left: "Expression"
    right: "Expression"

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Node):
    condition: "Expression"
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self):
        result = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


@dataclass
class FunctionLiteral(Node):
    parameters: List[Identifier]
    body: "BlockStatement"

    def __str__(self):
        return f"fn({', '.join(str(param) for param in self.parameters)}) {self.body}"


@dataclass
class CallExpression(Node):
    function: "Expression"
    arguments: List["Expression"] = field(default_factory=list)

    def __str__(self):
        return f"{self.function}({', '.join(str(arg) for arg in self.arguments)})"


# statements

@dataclass
class LetStatement(Node):
    name: Identifier
    value: "Expression"

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Node):
    value: "Expression"

    def __str__(self):
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Node):
    expr: "Expression"

    def __str__(self):
        return str(self.expr)


@dataclass
class BlockStatement(Node):
    statements: List["Statement"] = field(default_factory=list)

    def __str__(self):
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(str(stmt) for stmt in self.statements) + " }"


@dataclass
class Program(Node):
    statements: List["Statement"] = field(default_factory=list)

    def __str__(self):
        return " ".join(str(stmt) for stmt in self.statements)


Expression = Union[Identifier, IntegerLiteral, StringLiteral, BooleanLiteral, PrefixExpression, InfixExpression,
                   IfExpression, FunctionLiteral, CallExpression]
Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]
