import unittest

from loxpy.lang.error import ParseError
from loxpy.syntax import tree
from loxpy.syntax.parser import parse
from loxpy.syntax.scanner import scan
from loxpy.syntax.token import TokenKind


def parse_source(source):
    tokens, errors = scan(source)
    assert not errors, errors
    return parse(tokens)


def parse_expr(source):
    statement, = parse_source(source + ";")
    return statement.expression


def shape(expr):
    """Fully parenthesized rendering of expr, for checking precedence and associativity."""
    if isinstance(expr, tree.Literal):
        return repr(expr.value)
    if isinstance(expr, tree.Variable):
        return expr.name.lexeme
    if isinstance(expr, tree.Grouping):
        return f"(group {shape(expr.expression)})"
    if isinstance(expr, tree.Unary):
        return f"({expr.operator.lexeme} {shape(expr.right)})"
    if isinstance(expr, (tree.Binary, tree.Logical)):
        return f"({expr.operator.lexeme} {shape(expr.left)} {shape(expr.right)})"
    if isinstance(expr, tree.Assign):
        return f"(= {expr.name.lexeme} {shape(expr.value)})"
    if isinstance(expr, tree.Call):
        return f"(call {' '.join([shape(expr.callee)] + [shape(arg) for arg in expr.arguments])})"
    raise AssertionError(expr)


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3": "(+ 1.0 (* 2.0 3.0))",
            "(1 + 2) * 3": "(* (group (+ 1.0 2.0)) 3.0)",
            "1 - 2 - 3": "(- (- 1.0 2.0) 3.0)",
            "8 / 4 / 2": "(/ (/ 8.0 4.0) 2.0)",
            "-1 * -2": "(* (- 1.0) (- 2.0))",
            "!!true": "(! (! True))",
            "1 < 2 == 3 >= 4": "(== (< 1.0 2.0) (>= 3.0 4.0))",
            "a or b and c": "(or a (and b c))",
            "a and b or c and d": "(or (and a b) (and c d))",
            "a == b or c != d": "(or (== a b) (!= c d))",
            "a = b = c": "(= a (= b c))",
            "a = 1 + 2": "(= a (+ 1.0 2.0))",
            "f(1)(2)": "(call (call f 1.0) 2.0)",
            "f()": "(call f)",
            "-f(x, y + 1)": "(- (call f x (+ y 1.0)))",
            '"a" + nil': "(+ 'a' None)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, shape(parse_expr(case)), case)

    def test_literals(self):
        cases = {"12.5": 12.5, "7": 7.0, '"str"': "str", "true": True, "false": False, "nil": None}
        for case, expected in cases.items():
            expr = parse_expr(case)
            self.assertIsInstance(expr, tree.Literal, case)
            self.assertEqual(expected, expr.value, case)
            self.assertIs(type(expected), type(expr.value), case)

    def test_call_paren(self):
        expr = parse_expr("f(\n1,\n2\n)")
        self.assertIs(TokenKind.RIGHT_PAREN, expr.paren.kind)
        self.assertEqual(4, expr.paren.line)
        self.assertIsInstance(expr.arguments, tuple)

    def test_invalid_assignment_target(self):
        should_raise = ["1 = 2", "a + b = c", "(a) = 1", "f() = 1", "-a = 1"]
        for case in should_raise:
            with self.assertRaises(ParseError, msg=case) as context:
                parse_expr(case)
            self.assertEqual("Invalid assignment target.", context.exception.msg, case)
            self.assertIs(TokenKind.EQUAL, context.exception.token.kind, case)

        with self.assertRaises(ParseError) as context:
            parse_source("var a;\n\n1 + a = 3;")
        self.assertEqual(3, context.exception.line)


class StatementTestCase(unittest.TestCase):

    def test_declarations(self):
        var, bare, fun = parse_source("var a = 1; var b; fun add(x, y) { return x + y; }")

        self.assertIsInstance(var, tree.Var)
        self.assertEqual("a", var.name.lexeme)
        self.assertEqual(tree.Literal(1.0), var.initializer)

        self.assertIsNone(bare.initializer)

        self.assertIsInstance(fun, tree.Function)
        self.assertEqual(["x", "y"], [param.lexeme for param in fun.params])
        ret, = fun.body
        self.assertIsInstance(ret, tree.Return)
        self.assertEqual("(+ x y)", shape(ret.value))

    def test_statements(self):
        cases = {
            "print 1;": tree.Print,
            "1;": tree.Expression,
            "{ }": tree.Block,
            "if (a) print 1;": tree.If,
            "while (a) a = a - 1;": tree.While,
            "fun f() {}": tree.Function,
        }
        for case, expected in cases.items():
            statement, = parse_source(case)
            self.assertIsInstance(statement, expected, case)

    def test_if_else(self):
        statement, = parse_source("if (a) if (b) print 1; else print 2;")
        self.assertIsNone(statement.else_branch)  # else binds to the nearest if
        self.assertIsInstance(statement.then_branch.else_branch, tree.Print)

    def test_return(self):
        fun, = parse_source("fun f() { return; }")
        ret, = fun.body
        self.assertIsNone(ret.value)
        self.assertEqual("return", ret.keyword.lexeme)

        fun, = parse_source("fun f() { fun g() { return 1; } return g; }")
        self.assertEqual(2, len(fun.body))

    def test_return_outside_function(self):
        should_fail = ["return;", "return 1;", "{ return; }", "if (true) return;", "while (true) { return; }",
                       "fun f() {} return;"]
        for case in should_fail:
            with self.assertRaises(ParseError, msg=case) as context:
                parse_source(case)
            self.assertEqual("Can't return from top-level code.", context.exception.msg, case)

        should_pass = ["fun f() { return; }", "fun f() { { if (true) return 1; } }", "fun f() { while (true) return; }"]
        for case in should_pass:
            self.assertEqual(1, len(parse_source(case)), case)

    def test_token(self):
        cases = {
            "print 1;": None,
            "var a = 1;": "a",
            "print 1 + 2 * 3;": "+",
            "print -(1);": "-",
            "{ print 1; f(); }": ")",
            "fun f() {}": "f",
        }
        for case, expected in cases.items():
            statement, = parse_source(case)
            token = statement.token()
            self.assertEqual(expected, token and token.lexeme, case)

    def test_for_desugaring(self):
        block, = parse_source("for (var i = 0; i < 3; i = i + 1) print i;")

        self.assertIsInstance(block, tree.Block)
        initializer, loop = block.statements
        self.assertIsInstance(initializer, tree.Var)
        self.assertIsInstance(loop, tree.While)
        self.assertEqual("(< i 3.0)", shape(loop.condition))

        body, increment = loop.body.statements
        self.assertIsInstance(body, tree.Print)
        self.assertEqual("(= i (+ i 1.0))", shape(increment.expression))

    def test_for_desugaring_without_clauses(self):
        loop, = parse_source("for (;;) print 1;")
        self.assertIsInstance(loop, tree.While)  # no initializer: no wrapping block
        self.assertEqual(tree.Literal(True), loop.condition)
        self.assertIsInstance(loop.body, tree.Print)

        block, = parse_source("for (i = 0; i < 1;) print i;")
        initializer, loop = block.statements
        self.assertIsInstance(initializer, tree.Expression)
        self.assertIsInstance(loop.body, tree.Print)

    def test_display(self):
        statement, = parse_source("print -(1 + a);")
        expected = ("Print(nodes=[\n"
                    "    Unary('-', nodes=[\n"
                    "        Grouping(nodes=[\n"
                    "            Binary('+', nodes=[\n"
                    "                Literal(1.0),\n"
                    "                Variable('a')\n"
                    "            ])\n"
                    "        ])\n"
                    "    ])\n"
                    "])")
        self.assertEqual(expected, statement.display())

    def test_errors(self):
        cases = {
            "print 1": "[line 1] syntax error at end: Expect ';' after value.",
            "var 1 = 2;": "[line 1] syntax error at '1': Expect variable name.",
            "var a = 1": "[line 1] syntax error at end: Expect ';' after variable declaration.",
            "1 +;": "[line 1] syntax error at ';': Expect expression.",
            "(1 + 2;": "[line 1] syntax error at ';': Expect ')' after expression.",
            "{ print 1;": "[line 1] syntax error at end: Expect '}' after block.",
            "if 1) print 1;": "[line 1] syntax error at '1': Expect '(' after 'if'.",
            "while (a print a;": "[line 1] syntax error at 'print': Expect ')' after condition.",
            "fun f(a, 1) {}": "[line 1] syntax error at '1': Expect parameter name.",
            "fun f() print 1;": "[line 1] syntax error at 'print': Expect '{' before function body.",
            "f(1, 2;": "[line 1] syntax error at ';': Expect ')' after arguments.",
            "return 1;": "[line 1] syntax error at 'return': Can't return from top-level code.",
            "class A {}": "[line 1] syntax error at 'class': Expect expression.",
            "print 1;\nprint 2\n": "[line 3] syntax error at end: Expect ';' after value.",
        }
        for case, expected in cases.items():
            with self.assertRaises(ParseError, msg=case) as context:
                parse_source(case)
            self.assertEqual(expected, str(context.exception), case)

    def test_no_partial_program(self):
        tokens, __ = scan("print 1; print 2; print;")
        self.assertRaises(ParseError, parse, tokens)


if __name__ == '__main__':
    unittest.main()
