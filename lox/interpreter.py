import math
import sys
import time

from lox.errors import LoxRuntimeError
from lox.runtime import (Environment, LoxCallable, LoxClass, LoxFunction,
                         LoxInstance, NativeFunction, Return)
from lox.syntax import Expr, Stmt, first_token
from lox.tokens import Token, TokenType


def stringify(value):
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def divide(left, right):
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    # Division by zero follows IEEE 754, the sign of a zero divisor counts.
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


class Interpreter(Expr.Visitor, Stmt.Visitor):
    def __init__(self, reporter, out=None):
        self.reporter = reporter
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}

        self.globals.define("clock", NativeFunction("clock", 0, time.time))

    def interpret(self, statements):
        try:
            for statement in statements:
                self.execute_top_level(statement)
        except LoxRuntimeError as error:
            self.reporter.runtime_error(error)

    def execute_top_level(self, statement):
        try:
            self.execute(statement)
        except RecursionError:
            # Overflow outside any Lox call, from deeply nested blocks or expressions.
            token = first_token(statement) or Token(TokenType.EOF, "", None, 1)
            raise LoxRuntimeError(token, "Stack overflow.") from None

    def resolve(self, expr, depth):
        self.locals[expr] = depth

    def evaluate(self, expr):
        return expr.accept(self)

    def execute(self, stmt):
        stmt.accept(self)

    def execute_block(self, statements, environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self.execute(statement)
        finally:
            self.environment = previous

    def visit_block_stmt(self, stmt):
        self.execute_block(stmt.statements, Environment(self.environment))

    def visit_class_stmt(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(
                    stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {
            method.name.lexeme: LoxFunction(
                method, self.environment, method.name.lexeme == "init")
            for method in stmt.methods}

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    def visit_expression_stmt(self, stmt):
        self.evaluate(stmt.expression)

    def visit_function_stmt(self, stmt):
        function = LoxFunction(stmt, self.environment)
        self.environment.define(stmt.name.lexeme, function)

    def visit_if_stmt(self, stmt):
        if self.is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self.execute(stmt.else_branch)

    def visit_print_stmt(self, stmt):
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out or sys.stdout)

    def visit_return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        raise Return(value)

    def visit_var_stmt(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def visit_while_stmt(self, stmt):
        while self.is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.body)

    def visit_assign_expr(self, expr):
        value = self.evaluate(expr.value)
        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name.lexeme, value)
        else:
            self.globals.assign(expr.name, value)
        return value

    def visit_binary_expr(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        match operator.type:
            case TokenType.BANG_EQUAL:
                return not self.is_equal(left, right)
            case TokenType.EQUAL_EQUAL:
                return self.is_equal(left, right)
            case TokenType.GREATER:
                self.check_number_operands(operator, left, right)
                return left > right
            case TokenType.GREATER_EQUAL:
                self.check_number_operands(operator, left, right)
                return left >= right
            case TokenType.LESS:
                self.check_number_operands(operator, left, right)
                return left < right
            case TokenType.LESS_EQUAL:
                self.check_number_operands(operator, left, right)
                return left <= right
            case TokenType.MINUS:
                self.check_number_operands(operator, left, right)
                return left - right
            case TokenType.PLUS:
                if isinstance(left, float) and isinstance(right, float):
                    return left + right
                if isinstance(left, str) and isinstance(right, str):
                    return left + right
                raise LoxRuntimeError(
                    operator, "Operands must be two numbers or two strings.")
            case TokenType.SLASH:
                self.check_number_operands(operator, left, right)
                return divide(left, right)
            case TokenType.STAR:
                self.check_number_operands(operator, left, right)
                return left * right

        # Unreachable
        return None

    def visit_call_expr(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(
                expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    def visit_get_expr(self, expr):
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def visit_grouping_expr(self, expr):
        return self.evaluate(expr.expression)

    def visit_literal_expr(self, expr):
        return expr.value

    def visit_logical_expr(self, expr):
        left = self.evaluate(expr.left)
        if expr.operator.type == TokenType.OR:
            if self.is_truthy(left):
                return left
        elif not self.is_truthy(left):
            return left
        return self.evaluate(expr.right)

    def visit_set_expr(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")
        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def visit_super_expr(self, expr):
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        # "this" is always bound one environment inside "super".
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(
                expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return method.bind(instance)

    def visit_this_expr(self, expr):
        return self.lookup_variable(expr.keyword, expr)

    def visit_unary_expr(self, expr):
        right = self.evaluate(expr.right)
        match expr.operator.type:
            case TokenType.BANG:
                return not self.is_truthy(right)
            case TokenType.MINUS:
                self.check_number_operand(expr.operator, right)
                return -right
        # Unreachable
        return None

    def visit_variable_expr(self, expr):
        return self.lookup_variable(expr.name, expr)

    def lookup_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    @staticmethod
    def is_truthy(value):
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(left, right):
        # No coercion between kinds, Python would otherwise treat true == 1.
        if type(left) is not type(right):
            return False
        return left == right

    @staticmethod
    def check_number_operand(operator, operand):
        if not isinstance(operand, float):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator, left, right):
        if not isinstance(left, float) or not isinstance(right, float):
            raise LoxRuntimeError(operator, "Operands must be numbers.")
