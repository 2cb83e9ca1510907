"""Abstract syntax tree for the lox language. Expressions produce values, statements produce effects.

Nodes are immutable once parsed: ordered child lists are tuples and every node is a frozen dataclass. The interpreter
dispatches on node type directly, so nodes carry no evaluation logic.
"""

from collections import deque
from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union

from loxpy.syntax.token import Token


class Node:
    """Superclass of all syntax tree nodes."""

    def label(self):
        """Short description of this node (without its children) used in display."""
        return ""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        children = []
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Node):
                children.append(value)
            elif isinstance(value, tuple):
                children.extend(item for item in value if isinstance(item, Node))
        return children

    def token(self):
        """Returns the Token nearest to the root of this tree (breadth first), or None if the tree holds no Token.
        Iterative, so it works on trees too deep to walk recursively.
        """
        queue = deque([self])
        while queue:
            node = queue.popleft()
            for field in fields(node):
                value = getattr(node, field.name)
                if isinstance(value, Token):
                    return value
            queue.extend(node.nodes)
        return None

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<label>, nodes=[
            <Node>(<label>, nodes=[
                ...
                <Node>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        label = self.label()
        result = f"{'    ' * indents}{type(self).__name__}({label}"
        if self.nodes:
            result += ", nodes=[" if label else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


class Expr(Node):
    """Superclass of expression nodes."""


class Stmt(Node):
    """Superclass of statement nodes."""


# --- expressions ---

@dataclass(frozen=True)
class Literal(Expr):
    value: Union[float, str, bool, None]

    def label(self):
        return repr(self.value)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def label(self):
        return f"'{self.name.lexeme}'"


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    def label(self):
        return f"'{self.name.lexeme}'"


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def label(self):
        return f"'{self.operator.lexeme}'"


@dataclass(frozen=True)
class Logical(Expr):
    """'and'/'or': short-circuiting, unlike Binary."""
    left: Expr
    operator: Token
    right: Expr

    def label(self):
        return f"'{self.operator.lexeme}'"


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    def label(self):
        return f"'{self.operator.lexeme}'"


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate call errors
    arguments: Tuple[Expr, ...]

    def label(self):
        return f"argc={len(self.arguments)}"


# --- statements ---

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]

    def label(self):
        return f"'{self.name.lexeme}'"


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def label(self):
        return "" if self.else_branch is None else "else"


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

    def label(self):
        params = ", ".join(param.lexeme for param in self.params)
        return f"'{self.name.lexeme}', params=[{params}]"


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
