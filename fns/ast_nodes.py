"""
fns - AST Node Definitions
Typed syntax tree produced by the parser and walked by the evaluator.

Positions are kept for error reporting but excluded from equality, so two
trees compare equal when they have the same shape and values.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    line: int = field(default=0, compare=False, repr=False)
    column: int = field(default=0, compare=False, repr=False)


@dataclass
class ProgramNode(ASTNode):
    """Root node of the program."""
    statements: List[ASTNode] = field(default_factory=list)


# ------------------------------------------------------------------ statements

@dataclass
class LetNode(ASTNode):
    """let name = expression"""
    name: str = ""
    value: ASTNode = None


@dataclass
class ConstNode(ASTNode):
    """const name = expression"""
    name: str = ""
    value: ASTNode = None


@dataclass
class ExpressionStatementNode(ASTNode):
    """A bare expression used as a statement."""
    expr: ASTNode = None


# ------------------------------------------------------------------ expressions

@dataclass
class NumberNode(ASTNode):
    value: float = 0.0


@dataclass
class StringNode(ASTNode):
    value: str = ""


@dataclass
class BooleanNode(ASTNode):
    value: bool = False


@dataclass
class NoneNode(ASTNode):
    pass


@dataclass
class IdentifierNode(ASTNode):
    """A variable reference."""
    name: str = ""


@dataclass
class UnaryOpNode(ASTNode):
    """Prefix + - !"""
    op: str = ""
    operand: ASTNode = None


@dataclass
class BinaryOpNode(ASTNode):
    left: ASTNode = None
    op: str = ""
    right: ASTNode = None


@dataclass
class AssignmentNode(ASTNode):
    """name = expression (name must already be bound)"""
    name: str = ""
    value: ASTNode = None


@dataclass
class ObjectEntry(ASTNode):
    key: str = ""
    value: ASTNode = None


@dataclass
class ObjectNode(ASTNode):
    """{ key: expression, ... }"""
    entries: List[ObjectEntry] = field(default_factory=list)


@dataclass
class MemberAccessNode(ASTNode):
    """object.property"""
    object: ASTNode = None
    property: str = ""
