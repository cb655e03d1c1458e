"""
fns - Tree-walking Evaluator
Executes a ProgramNode statement by statement against one Environment.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from .ast_nodes import (
    ProgramNode, LetNode, ConstNode, ExpressionStatementNode,
    NumberNode, StringNode, BooleanNode, NoneNode, IdentifierNode,
    UnaryOpNode, BinaryOpNode, AssignmentNode, ObjectNode,
    MemberAccessNode, ASTNode
)
from .environment import Environment
from .errors import FnsError
from .values import ObjectValue, is_number, is_truthy, type_name, values_equal, to_value


class ErrorKind(Enum):
    UNDEFINED_NAME   = "UndefinedName"
    REASSIGN_CONST   = "ReassignConst"
    TYPE_MISMATCH    = "TypeMismatch"
    DIVISION_BY_ZERO = "DivisionByZero"
    UNDEFINED_KEY    = "UndefinedKey"
    NESTING_TOO_DEEP = "NestingTooDeep"


class EvaluationError(FnsError):
    def __init__(self, kind: ErrorKind, message: str, line: int = 0, column: int = 0):
        super().__init__(f"{kind.value}: {message}", line, column)
        self.kind = kind


_ARITHMETIC = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': lambda a, b: a / b,
}

_COMPARISON = {
    '<':  lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>':  lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
}


class Evaluator:
    def __init__(self, environment: Optional[Environment] = None):
        self.environment = environment if environment is not None else Environment()

    def run(self, program: ProgramNode) -> Any:
        """Evaluate every statement in order; the last statement's value is the result."""
        result = None
        for stmt in program.statements:
            try:
                result = self._visit(stmt)
            except RecursionError:
                raise EvaluationError(
                    ErrorKind.NESTING_TOO_DEEP,
                    "Expression is nested too deeply to evaluate",
                    stmt.line,
                    stmt.column,
                ) from None
        return result

    # ------------------------------------------------------------------ visitor

    def _visit(self, node: ASTNode) -> Any:
        method = f"_visit_{type(node).__name__}"
        visitor = getattr(self, method, self._visit_generic)
        return visitor(node)

    def _visit_generic(self, node: ASTNode) -> Any:
        raise TypeError(f"No evaluation rule for {type(node).__name__}")

    def _error(self, kind: ErrorKind, message: str, node: ASTNode) -> EvaluationError:
        return EvaluationError(kind, message, node.line, node.column)

    # ------------------------------------------------------------------ statements

    def _visit_ProgramNode(self, node: ProgramNode) -> Any:
        return self.run(node)

    def _visit_LetNode(self, node: LetNode) -> Any:
        value = self._visit(node.value)
        self.environment.define(node.name, value, constant=False)
        return value

    def _visit_ConstNode(self, node: ConstNode) -> Any:
        value = self._visit(node.value)
        self.environment.define(node.name, value, constant=True)
        return value

    def _visit_ExpressionStatementNode(self, node: ExpressionStatementNode) -> Any:
        return self._visit(node.expr)

    # ------------------------------------------------------------------ literals

    def _visit_NumberNode(self, node: NumberNode) -> float:
        return node.value

    def _visit_StringNode(self, node: StringNode) -> str:
        return node.value

    def _visit_BooleanNode(self, node: BooleanNode) -> bool:
        return node.value

    def _visit_NoneNode(self, node: NoneNode) -> None:
        return None

    def _visit_ObjectNode(self, node: ObjectNode) -> ObjectValue:
        entries = {}
        for entry in node.entries:
            entries[entry.key] = self._visit(entry.value)
        return ObjectValue(entries)

    # ------------------------------------------------------------------ names

    def _visit_IdentifierNode(self, node: IdentifierNode) -> Any:
        binding = self.environment.resolve(node.name)
        if binding is None:
            raise self._error(
                ErrorKind.UNDEFINED_NAME,
                f"Can't access '{node.name}' as it's not defined",
                node,
            )
        return binding.value

    def _visit_AssignmentNode(self, node: AssignmentNode) -> Any:
        binding = self.environment.resolve(node.name)
        if binding is None:
            raise self._error(
                ErrorKind.UNDEFINED_NAME,
                f"Can't assign to '{node.name}' as it's not defined",
                node,
            )
        if binding.constant:
            raise self._error(
                ErrorKind.REASSIGN_CONST,
                f"Can't assign to '{node.name}' as it's a constant",
                node,
            )
        value = self._visit(node.value)
        binding.value = value
        return value

    def _visit_MemberAccessNode(self, node: MemberAccessNode) -> Any:
        chain = [node]
        while isinstance(chain[-1].object, MemberAccessNode):
            chain.append(chain[-1].object)

        value = self._visit(chain[-1].object)
        for current in reversed(chain):
            value = self._read_property(current, value)
        return value

    def _read_property(self, node: MemberAccessNode, obj: Any) -> Any:
        if not isinstance(obj, ObjectValue):
            raise self._error(
                ErrorKind.TYPE_MISMATCH,
                f"Can't access property '{node.property}' of a {type_name(obj)}",
                node,
            )
        if node.property not in obj:
            raise self._error(
                ErrorKind.UNDEFINED_KEY,
                f"Object has no property '{node.property}'",
                node,
            )
        return obj[node.property]

    # ------------------------------------------------------------------ operators

    def _visit_UnaryOpNode(self, node: UnaryOpNode) -> Any:
        operand = self._visit(node.operand)
        if node.op == '!':
            return not is_truthy(operand)
        if not is_number(operand):
            raise self._error(
                ErrorKind.TYPE_MISMATCH,
                f"Can't use unary '{node.op}' with a {type_name(operand)}",
                node,
            )
        return -operand if node.op == '-' else operand

    def _visit_BinaryOpNode(self, node: BinaryOpNode) -> Any:
        # Left-associative chains nest down the left side; walk that spine
        # with a loop so `1 + 1 + ... + 1` costs no stack per term.
        spine = [node]
        while isinstance(spine[-1].left, BinaryOpNode):
            spine.append(spine[-1].left)

        result = self._visit(spine[-1].left)
        for current in reversed(spine):
            result = self._apply_binary(current, result)
        return result

    def _apply_binary(self, node: BinaryOpNode, left: Any) -> Any:
        op = node.op

        # Short-circuit: the right side is evaluated only when it decides the result
        if op == '&&':
            return is_truthy(left) and is_truthy(self._visit(node.right))
        if op == '||':
            return is_truthy(left) or is_truthy(self._visit(node.right))

        right = self._visit(node.right)

        if op == '==':
            return values_equal(left, right)
        if op == '!=':
            return not values_equal(left, right)

        if op == '+' and isinstance(left, str) and isinstance(right, str):
            return left + right

        if not (is_number(left) and is_number(right)):
            raise self._error(
                ErrorKind.TYPE_MISMATCH,
                f"Can't use '{op}' with a {type_name(left)} and a {type_name(right)}",
                node,
            )

        if op in _COMPARISON:
            return _COMPARISON[op](left, right)
        if op == '/' and right == 0:
            raise self._error(ErrorKind.DIVISION_BY_ZERO, "Can't divide by 0", node)
        if op in _ARITHMETIC:
            return float(_ARITHMETIC[op](left, right))

        raise self._error(ErrorKind.TYPE_MISMATCH, f"Unknown operator '{op}'", node)


def evaluate(program: ProgramNode, initial_bindings: Optional[Mapping[str, Any]] = None) -> Any:
    """
    Evaluate a program against a fresh global environment.

    initial_bindings are host-provided values defined as mutable bindings
    before the first statement runs.
    """
    env = Environment()
    for name, value in (initial_bindings or {}).items():
        env.define(name, to_value(value))
    return Evaluator(env).run(program)
