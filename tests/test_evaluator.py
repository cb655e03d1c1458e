"""
fns - Evaluator, Environment and value tests
"""

import sys
import os
import unittest

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fns import parse, evaluate, EvaluationError, ErrorKind, ParseError
from fns.environment import Environment
from fns.errors import FnsError
from fns.ast_nodes import ProgramNode, ExpressionStatementNode, NumberNode, UnaryOpNode
from fns.evaluator import Evaluator
from fns.values import ObjectValue, is_truthy, values_equal, to_value


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════

def eval_(source: str, **bindings):
    return evaluate(parse(source), bindings or None)


class EvalTestCase(unittest.TestCase):

    def assertEvalError(self, source: str, kind: ErrorKind, **bindings) -> EvaluationError:
        with self.assertRaises(EvaluationError) as ctx:
            eval_(source, **bindings)
        self.assertEqual(ctx.exception.kind, kind)
        return ctx.exception


# ═══════════════════════════════════════════════════════════════════════════════
# Arithmetic & precedence
# ═══════════════════════════════════════════════════════════════════════════════

class TestArithmetic(EvalTestCase):

    def test_precedence(self):
        self.assertEqual(eval_("1 + 2 * 3"), 7)

    def test_grouping_regression(self):
        self.assertAlmostEqual(eval_("1 + 2 - 3 * 4 / 5 + (6 - 7)"), -0.4)

    def test_nested_grouping(self):
        self.assertEqual(eval_("((1 + 2) * (3 - (4 / 2)))"), 3)

    def test_mixed_arithmetic(self):
        self.assertEqual(eval_("5 + 5 * 2 / 5 - 2"), 5)

    def test_numbers_are_floats(self):
        result = eval_("7 / 2")
        self.assertIsInstance(result, float)
        self.assertEqual(result, 3.5)

    def test_division_by_zero(self):
        self.assertEvalError("1 / 0", ErrorKind.DIVISION_BY_ZERO)

    def test_zero_by_zero(self):
        self.assertEvalError("0 / 0", ErrorKind.DIVISION_BY_ZERO)

    def test_division_by_computed_zero(self):
        self.assertEvalError("let z = 2 - 2  10 / z", ErrorKind.DIVISION_BY_ZERO)

    def test_string_concatenation(self):
        self.assertEqual(eval_('"hello, " + "world!"'), "hello, world!")

    def test_string_plus_number(self):
        self.assertEvalError('"a" + 1', ErrorKind.TYPE_MISMATCH)

    def test_string_minus_string(self):
        self.assertEvalError('"a" - "b"', ErrorKind.TYPE_MISMATCH)

    def test_boolean_arithmetic(self):
        self.assertEvalError("true + 1", ErrorKind.TYPE_MISMATCH)


# ═══════════════════════════════════════════════════════════════════════════════
# Unary
# ═══════════════════════════════════════════════════════════════════════════════

class TestUnary(EvalTestCase):

    def test_chained_signs(self):
        self.assertEqual(eval_("--+-5"), -5)

    def test_negate_string(self):
        self.assertEvalError('-"a"', ErrorKind.TYPE_MISMATCH)

    def test_plus_boolean(self):
        self.assertEvalError("+true", ErrorKind.TYPE_MISMATCH)

    def test_not_uses_truthiness(self):
        self.assertIs(eval_("!true"), False)
        self.assertIs(eval_("!0"), True)
        self.assertIs(eval_('!""'), True)
        self.assertIs(eval_("!none"), True)
        self.assertIs(eval_("!{}"), False)
        self.assertIs(eval_('!"a"'), False)
        self.assertIs(eval_("!1"), False)


# ═══════════════════════════════════════════════════════════════════════════════
# Comparison & equality
# ═══════════════════════════════════════════════════════════════════════════════

class TestComparison(EvalTestCase):

    def test_ordering(self):
        self.assertIs(eval_("5 > 5"), False)
        self.assertIs(eval_("5 >= 5"), True)
        self.assertIs(eval_("2 < 3"), True)
        self.assertIs(eval_("3 <= 2"), False)

    def test_ordering_strings(self):
        self.assertEvalError('"a" < "b"', ErrorKind.TYPE_MISMATCH)

    def test_equality_by_value(self):
        self.assertIs(eval_("1 + 1 == 2"), True)
        self.assertIs(eval_('"a" == "a"'), True)
        self.assertIs(eval_("true != false"), True)

    def test_different_kinds_are_unequal(self):
        self.assertIs(eval_("1 == true"), False)
        self.assertIs(eval_("1 != true"), True)
        self.assertIs(eval_('"1" == 1'), False)
        self.assertIs(eval_("none == 0"), False)
        self.assertIs(eval_("5 == 5 != 5"), True)

    def test_none_equals_none(self):
        self.assertIs(eval_("none == none"), True)

    def test_nan_equals_itself(self):
        huge = "1" + "0" * 400                        # overflows to inf
        source = f"let n = {huge} - {huge}\n"
        self.assertIs(eval_(source + "n == n"), True)
        self.assertIs(eval_(source + "n != n"), False)
        self.assertIs(eval_(source + "n == 0"), False)
        self.assertIs(eval_(source + "{v: n} == {v: n}"), True)

    def test_object_equality_ignores_order(self):
        self.assertIs(eval_("{a: 1, b: 2} == {b: 2, a: 1}"), True)
        self.assertIs(eval_("{a: 1} == {a: 1, b: 2}"), False)
        self.assertIs(eval_("{a: {b: 1}} == {a: {b: 1}}"), True)
        self.assertIs(eval_("{a: 1} == {a: true}"), False)


# ═══════════════════════════════════════════════════════════════════════════════
# Logical operators
# ═══════════════════════════════════════════════════════════════════════════════

class TestLogical(EvalTestCase):

    def test_and_short_circuits(self):
        self.assertIs(eval_("false && (1/0)"), False)

    def test_or_short_circuits(self):
        self.assertIs(eval_("true || (1/0)"), True)

    def test_right_side_evaluated_when_needed(self):
        self.assertEvalError("true && (1/0)", ErrorKind.DIVISION_BY_ZERO)
        self.assertEvalError("false || (1/0)", ErrorKind.DIVISION_BY_ZERO)

    def test_short_circuit_skips_side_effects(self):
        self.assertEqual(eval_("let a = 1  0 && (a = 2)  a"), 1)
        self.assertEqual(eval_("let a = 1  1 && (a = 2)  a"), 2)

    def test_results_are_booleans(self):
        self.assertIs(eval_("1 && 2"), True)
        self.assertIs(eval_("0 || none"), False)
        self.assertIs(eval_('"" || {}'), True)

    def test_combined(self):
        self.assertIs(eval_("true && false || !true"), False)


# ═══════════════════════════════════════════════════════════════════════════════
# Bindings
# ═══════════════════════════════════════════════════════════════════════════════

class TestBindings(EvalTestCase):

    def test_let_then_assign(self):
        self.assertEqual(eval_("let y = 1  y = 2  y"), 2)

    def test_const_reassign(self):
        self.assertEvalError("const x = 1  x = 2", ErrorKind.REASSIGN_CONST)

    def test_const_checked_before_value(self):
        self.assertEvalError("const c = 1  c = (1/0)", ErrorKind.REASSIGN_CONST)

    def test_declarations_yield_value(self):
        self.assertEqual(eval_("let a = 4"), 4)
        self.assertEqual(eval_("const b = 2 * 3"), 6)

    def test_assignment_is_expression(self):
        self.assertEqual(eval_("let a = 1  (a = 5) + 1"), 6)

    def test_chained_assignment(self):
        self.assertEqual(eval_("let a = 0  let b = 0  a = b = 3  a + b"), 6)

    def test_undefined_name(self):
        err = self.assertEvalError("x", ErrorKind.UNDEFINED_NAME)
        self.assertIn("'x'", err.message)

    def test_assign_undefined(self):
        self.assertEvalError("x = 1", ErrorKind.UNDEFINED_NAME)

    def test_redeclare_replaces(self):
        self.assertEqual(eval_('let a = 1  let a = "s"  a'), "s")

    def test_redeclare_const_as_let(self):
        self.assertEqual(eval_("const k = 1  let k = 2  k = 3  k"), 3)

    def test_redeclare_let_as_const(self):
        self.assertEvalError("let k = 1  const k = 2  k = 3", ErrorKind.REASSIGN_CONST)

    def test_empty_program(self):
        self.assertIsNone(eval_(""))


# ═══════════════════════════════════════════════════════════════════════════════
# Objects
# ═══════════════════════════════════════════════════════════════════════════════

class TestObjects(EvalTestCase):

    def test_member_access(self):
        self.assertEqual(eval_("{ a: 1, b: 2 }.a"), 1)

    def test_missing_key(self):
        self.assertEvalError("{ a: 1 }.b", ErrorKind.UNDEFINED_KEY)

    def test_member_of_number(self):
        self.assertEvalError("let n = 1  n.x", ErrorKind.TYPE_MISMATCH)

    def test_member_of_none(self):
        self.assertEvalError("none.x", ErrorKind.TYPE_MISMATCH)

    def test_nested_member(self):
        self.assertEqual(eval_("let o = { inner: { v: 3 } }  o.inner.v"), 3)

    def test_object_value(self):
        result = eval_('{name: "fns", paradigm: "functional", wip: true}')
        self.assertIsInstance(result, ObjectValue)
        self.assertEqual(dict(result), {"name": "fns", "paradigm": "functional", "wip": True})
        self.assertEqual(list(result), ["name", "paradigm", "wip"])

    def test_entries_evaluated_in_order(self):
        src = "let i = 0  let o = { a: i = i + 1, b: i = i + 1 }"
        self.assertEqual(eval_(src + "  o.a"), 1)
        self.assertEqual(eval_(src + "  o.b"), 2)

    def test_object_is_read_only(self):
        result = eval_("{a: 1}")
        with self.assertRaises(TypeError):
            result["a"] = 2


# ═══════════════════════════════════════════════════════════════════════════════
# Host bindings & runs
# ═══════════════════════════════════════════════════════════════════════════════

class TestRuns(EvalTestCase):

    def test_initial_bindings(self):
        self.assertEqual(eval_("x * 2", x=21), 42)

    def test_initial_bindings_are_mutable(self):
        self.assertEqual(eval_("x = 3  x", x=1), 3)

    def test_initial_bindings_converted(self):
        self.assertIs(eval_("cfg.debug", cfg={"debug": True}), True)
        self.assertIsInstance(eval_("n", n=2), float)

    def test_unsupported_host_value(self):
        with self.assertRaises(TypeError):
            evaluate(parse("1"), {"f": object()})

    def test_each_run_gets_fresh_environment(self):
        evaluate(parse("let a = 1"))
        with self.assertRaises(EvaluationError) as ctx:
            evaluate(parse("a"))
        self.assertEqual(ctx.exception.kind, ErrorKind.UNDEFINED_NAME)

    def test_halts_at_first_error(self):
        env = Environment()
        with self.assertRaises(EvaluationError):
            Evaluator(env).run(parse("let a = 1  b  let c = 2"))
        self.assertIsNotNone(env.resolve("a"))
        self.assertIsNone(env.resolve("c"))

    def test_error_position(self):
        err = self.assertEvalError("let a = 1\n  a + true", ErrorKind.TYPE_MISMATCH)
        self.assertEqual((err.line, err.column), (2, 5))

    def test_error_taxonomies_are_disjoint(self):
        err = self.assertEvalError("1 / 0", ErrorKind.DIVISION_BY_ZERO)
        self.assertIsInstance(err, FnsError)
        self.assertNotIsInstance(err, ParseError)
        self.assertTrue(str(err).startswith("[EvaluationError] Line 1, column 3: DivisionByZero"))


# ═══════════════════════════════════════════════════════════════════════════════
# Deep expressions
# ═══════════════════════════════════════════════════════════════════════════════

class TestDeepExpressions(EvalTestCase):

    def test_long_sum(self):
        self.assertEqual(eval_(" + ".join(["1"] * 1000)), 1000)

    def test_long_mixed_chain(self):
        self.assertEqual(eval_("1" + " - 1 + 1" * 1000), 1)
        self.assertEqual(eval_(" * ".join(["1"] * 2000) + " / 2"), 0.5)

    def test_long_logical_chain(self):
        self.assertIs(eval_(" && ".join(["true"] * 1000)), True)
        self.assertIs(eval_(" || ".join(["false"] * 1000)), False)

    def test_long_chain_still_short_circuits(self):
        self.assertIs(eval_(" && ".join(["false"] + ["1 / 0"] * 999)), False)
        self.assertIs(eval_(" || ".join(["true"] + ["1 / 0"] * 999)), True)

    def test_long_chain_error_position(self):
        err = self.assertEvalError(" + ".join(["1"] * 500) + ' + "x"', ErrorKind.TYPE_MISMATCH)
        self.assertEqual(err.column, len(" + ".join(["1"] * 500)) + 2)

    def test_deep_grouping(self):
        self.assertEqual(eval_("(" * 90 + "2 * 3" + ")" * 90), 6)

    def test_grouping_too_deep_is_parse_error(self):
        for depth in (300, 1000):
            with self.assertRaises(ParseError):
                eval_("(" * depth + "1" + ")" * depth)

    def test_long_prefix_chain(self):
        self.assertEqual(eval_("-" * 99 + "1"), -1)
        with self.assertRaises(ParseError):
            eval_("-" * 600 + "1")

    def test_long_member_chain(self):
        source = "let o = {}\n" + "o = {a: o}\n" * 300 + "o" + ".a" * 300
        self.assertEqual(eval_(source), ObjectValue())
        err = self.assertEvalError("let o = {a: 1}  o" + ".b" * 2000, ErrorKind.UNDEFINED_KEY)
        self.assertEqual(err.column, 19)

    def test_tree_too_deep_to_evaluate(self):
        # Only reachable by building the tree directly; the parser caps nesting
        expr = NumberNode(value=1.0)
        for _ in range(5000):
            expr = UnaryOpNode(op="-", operand=expr)
        stmt = ExpressionStatementNode(expr=expr)
        stmt.line, stmt.column = 1, 1
        with self.assertRaises(EvaluationError) as ctx:
            evaluate(ProgramNode(statements=[stmt]))
        self.assertEqual(ctx.exception.kind, ErrorKind.NESTING_TOO_DEEP)
        self.assertEqual((ctx.exception.line, ctx.exception.column), (1, 1))


# ═══════════════════════════════════════════════════════════════════════════════
# Environment
# ═══════════════════════════════════════════════════════════════════════════════

class TestEnvironment(unittest.TestCase):

    def test_define_and_resolve(self):
        env = Environment()
        env.define("a", 1.0)
        self.assertEqual(env.resolve("a").value, 1.0)
        self.assertFalse(env.resolve("a").constant)
        self.assertIsNone(env.resolve("b"))

    def test_child_reads_parent(self):
        env = Environment()
        env.define("a", 1.0, constant=True)
        child = env.child()
        self.assertIs(child.parent, env)
        self.assertEqual(Evaluator(child).run(parse("a + 1")), 2)

    def test_assignment_updates_owner(self):
        env = Environment()
        env.define("a", 1.0)
        child = env.child()
        Evaluator(child).run(parse("a = 2"))
        self.assertEqual(env.resolve("a").value, 2)
        self.assertNotIn("a", child.bindings)

    def test_let_in_child_shadows(self):
        env = Environment()
        env.define("a", 1.0, constant=True)
        child = env.child()
        Evaluator(child).run(parse("let a = 5"))
        self.assertEqual(child.resolve("a").value, 5)
        self.assertEqual(env.resolve("a").value, 1.0)

    def test_find_owner_prefers_nearest(self):
        env = Environment()
        env.define("a", 1.0)
        child = env.child()
        child.define("b", 2.0)
        child.define("a", 3.0)
        self.assertIs(child.find_owner("a"), child)
        self.assertIs(child.find_owner("b"), child)
        self.assertIsNone(env.find_owner("b"))
        self.assertIsNone(child.find_owner("c"))


# ═══════════════════════════════════════════════════════════════════════════════
# Values
# ═══════════════════════════════════════════════════════════════════════════════

class TestValues(unittest.TestCase):

    def test_truthiness(self):
        for value in (None, False, 0.0, -0.0, ""):
            self.assertFalse(is_truthy(value), value)
        for value in (True, 1.0, -2.5, "0", ObjectValue()):
            self.assertTrue(is_truthy(value), value)

    def test_bool_is_not_number(self):
        self.assertFalse(values_equal(True, 1.0))
        self.assertFalse(values_equal(0.0, False))
        self.assertTrue(values_equal(1, 1.0))

    def test_to_value(self):
        obj = to_value({"n": 1, "nested": {"s": "x"}, "nothing": None})
        self.assertIsInstance(obj, ObjectValue)
        self.assertIsInstance(obj["n"], float)
        self.assertIsInstance(obj["nested"], ObjectValue)
        self.assertIsNone(obj["nothing"])

    def test_to_value_rejects_lists(self):
        with self.assertRaises(TypeError):
            to_value([1, 2])

    def test_object_value_equality(self):
        self.assertEqual(ObjectValue({"a": 1.0, "b": 2.0}), ObjectValue({"b": 2.0, "a": 1.0}))
        self.assertNotEqual(ObjectValue({"a": 1.0}), ObjectValue({"a": True}))


if __name__ == "__main__":
    unittest.main(verbosity=2)
