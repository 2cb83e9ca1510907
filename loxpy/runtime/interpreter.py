"""Tree-walking evaluator for the lox language. Statements are executed in order against a chain of Environments;
expressions are evaluated to runtime values:

    number   -> float
    string   -> str
    boolean  -> bool
    nil      -> None
    callable -> LoxCallable

Executing a statement returns an outcome instead of raising for control flow: None when the statement completed
normally, or a Returned holding the value of a `return` met on the way. Blocks, ifs and loops pass a Returned up
unchanged; function calls absorb it. The only exception raised during evaluation is LoxRuntimeError, which stops the
run.
"""

import math
import sys
from typing import NamedTuple

from loxpy.lang.error import LoxRuntimeError
from loxpy.runtime.callable import NATIVES, LoxCallable, LoxFunction
from loxpy.runtime.environment import Environment
from loxpy.syntax import tree
from loxpy.syntax.token import TokenKind


class Returned(NamedTuple):
    """Outcome of a statement that executed a `return`."""
    value: object


class Interpreter:
    """Executes parsed statements. The global Environment lives as long as the Interpreter, so consecutive interpret
    calls share globals.
    """

    def __init__(self, out=None):
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        for native in NATIVES:
            self.globals.define(native.name, native)

        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. Raises LoxRuntimeError at the first runtime error; effects of the statements
        executed before it are kept.
        """
        for statement in statements:
            try:
                self.execute(statement)
            except RecursionError:
                # calls convert their own overflow, so this is an expression nested past the host stack
                raise LoxRuntimeError(statement.token(), "Too deeply nested.")

    # --- statements ---

    def execute(self, stmt):
        """Executes stmt. Returns None, or a Returned if a `return` was executed."""
        if isinstance(stmt, tree.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, tree.Print):
            value = self.evaluate(stmt.expression)
            self.out.write(Interpreter.stringify(value) + "\n")

        elif isinstance(stmt, tree.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, tree.Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, tree.If):
            if Interpreter.is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)

        elif isinstance(stmt, tree.While):
            while Interpreter.is_truthy(self.evaluate(stmt.condition)):
                outcome = self.execute(stmt.body)
                if outcome is not None:
                    return outcome

        elif isinstance(stmt, tree.Function):
            self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

        elif isinstance(stmt, tree.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return Returned(value)

        else:
            raise TypeError(f"cannot execute {type(stmt).__name__}")

        return None

    def execute_block(self, statements, environment):
        """Executes statements in environment. The previous Environment is restored however the block is left."""
        previous = self.environment
        self.environment = environment
        try:
            for statement in statements:
                outcome = self.execute(statement)
                if outcome is not None:
                    return outcome
        finally:
            self.environment = previous
        return None

    # --- expressions ---

    def evaluate(self, expr):
        """Returns the value of expr."""
        if isinstance(expr, tree.Literal):
            return expr.value

        if isinstance(expr, tree.Grouping):
            return self.evaluate(expr.expression)

        if isinstance(expr, tree.Variable):
            return self.environment.get(expr.name)

        if isinstance(expr, tree.Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value

        if isinstance(expr, tree.Logical):
            left = Interpreter.is_truthy(self.evaluate(expr.left))
            if expr.operator.kind is TokenKind.OR:
                return True if left else Interpreter.is_truthy(self.evaluate(expr.right))
            return Interpreter.is_truthy(self.evaluate(expr.right)) if left else False

        if isinstance(expr, tree.Unary):
            return self._unary(expr)

        if isinstance(expr, tree.Binary):
            return self._binary(expr)

        if isinstance(expr, tree.Call):
            return self._call(expr)

        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    def _unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.kind is TokenKind.BANG:
            return not Interpreter.is_truthy(right)

        # unary minus
        if not Interpreter.is_number(right):
            msg = "Operand must be a number for {}: got {}."
            raise LoxRuntimeError(expr.operator, msg, (f"'{expr.operator.lexeme}'", Interpreter.type_name(right)))
        return -right

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        kind = expr.operator.kind

        if kind is TokenKind.EQUAL_EQUAL:
            return Interpreter.is_equal(left, right)
        if kind is TokenKind.BANG_EQUAL:
            return not Interpreter.is_equal(left, right)

        if kind is TokenKind.PLUS:
            if Interpreter.is_number(left) and Interpreter.is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            msg = "Operands must be two numbers or two strings for {}: "
            raise Interpreter._operand_error(expr.operator, left, right, msg)

        if not (Interpreter.is_number(left) and Interpreter.is_number(right)):
            raise Interpreter._operand_error(expr.operator, left, right, "Operands must be numbers for {}: ")

        if kind is TokenKind.MINUS:
            return left - right
        if kind is TokenKind.STAR:
            return left * right
        if kind is TokenKind.SLASH:
            return Interpreter.divide(left, right)
        if kind is TokenKind.GREATER:
            return left > right
        if kind is TokenKind.GREATER_EQUAL:
            return left >= right
        if kind is TokenKind.LESS:
            return left < right
        if kind is TokenKind.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(expr.operator, "Unknown binary operator {}.", f"'{expr.operator.lexeme}'")

    @staticmethod
    def _operand_error(operator, left, right, msg):
        """Returns the error for bad operand types of a binary operator."""
        exprs = (f"'{operator.lexeme}'", Interpreter.type_name(left), Interpreter.type_name(right))
        return LoxRuntimeError(operator, msg + "got {} and {}.", exprs)

    def _call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions, got {}.", Interpreter.type_name(callee))

        if len(arguments) != callee.arity():
            msg = "Expected {} arguments but got {}."
            raise LoxRuntimeError(expr.paren, msg, (callee.arity(), len(arguments)))

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.")

    # --- values ---

    @staticmethod
    def is_number(value):
        # bool is a subclass of int, so it has to be excluded explicitly
        return isinstance(value, float) and not isinstance(value, bool)

    @staticmethod
    def is_truthy(value):
        """Only nil and false are falsy."""
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(left, right):
        """Values are equal if they have the same type and content. Callables are only equal to themselves."""
        if left is None or right is None:
            return left is None and right is None
        if type(left) is not type(right):
            return False
        if isinstance(left, LoxCallable):
            return left is right
        return left == right

    @staticmethod
    def divide(left, right):
        """IEEE 754 division: dividing by zero gives an infinity (or nan for 0 / 0) instead of an error."""
        try:
            return left / right
        except ZeroDivisionError:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)

    @staticmethod
    def type_name(value):
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, float):
            return "number"
        if isinstance(value, str):
            return "string"
        if isinstance(value, LoxCallable):
            return "function"
        return type(value).__name__

    @staticmethod
    def stringify(value):
        """Textual representation of value, as printed by `print`."""
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return repr(value)
        return str(value)
