import enum

from lox.syntax import Expr, Stmt, first_token


def report_too_deep(reporter, statement):
    if (token := first_token(statement)) is not None:
        reporter.error_at(token, "Too much nesting.")
    else:
        reporter.error(1, "Too much nesting.")


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()
    METHOD = enum.auto()
    INITIALIZER = enum.auto()


class ClassType(enum.Enum):
    NONE = enum.auto()
    CLASS = enum.auto()
    SUBCLASS = enum.auto()


class Resolver(Expr.Visitor, Stmt.Visitor):
    """Binds each local variable use to the scope that declares it.

    Every resolved expression is handed to ``interpreter.resolve`` together
    with the number of scopes between the use and the declaration. Globals
    are not tracked: an expression with no entry is looked up in the global
    environment at runtime.
    """

    def __init__(self, interpreter, reporter):
        self.interpreter = interpreter
        self.reporter = reporter
        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements):
        for statement in statements:
            try:
                self.resolve_node(statement)
            except RecursionError:
                report_too_deep(self.reporter, statement)
                self.scopes = []
                self.current_function = FunctionType.NONE
                self.current_class = ClassType.NONE

    def resolve_statements(self, statements):
        for statement in statements:
            self.resolve_node(statement)

    def resolve_node(self, expr_or_stmt):
        expr_or_stmt.accept(self)

    def visit_block_stmt(self, stmt):
        self.begin_scope()
        self.resolve_statements(stmt.statements)
        self.end_scope()

    def visit_class_stmt(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self.reporter.error_at(
                    stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_node(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self.resolve_function(method, kind)

        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def visit_expression_stmt(self, stmt):
        self.resolve_node(stmt.expression)

    def visit_function_stmt(self, stmt):
        # Defined before the body so the function can refer to itself.
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    def visit_if_stmt(self, stmt):
        self.resolve_node(stmt.condition)
        self.resolve_node(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve_node(stmt.else_branch)

    def visit_print_stmt(self, stmt):
        self.resolve_node(stmt.expression)

    def visit_return_stmt(self, stmt):
        if self.current_function == FunctionType.NONE:
            self.reporter.error_at(
                stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function == FunctionType.INITIALIZER:
                self.reporter.error_at(
                    stmt.keyword, "Can't return a value from an initializer.")
            self.resolve_node(stmt.value)

    def visit_var_stmt(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_node(stmt.initializer)
        self.define(stmt.name)

    def visit_while_stmt(self, stmt):
        self.resolve_node(stmt.condition)
        self.resolve_node(stmt.body)

    def visit_assign_expr(self, expr):
        self.resolve_node(expr.value)
        self.resolve_local(expr, expr.name)

    def visit_binary_expr(self, expr):
        self.resolve_node(expr.left)
        self.resolve_node(expr.right)

    def visit_call_expr(self, expr):
        self.resolve_node(expr.callee)
        for argument in expr.arguments:
            self.resolve_node(argument)

    def visit_get_expr(self, expr):
        self.resolve_node(expr.object)

    def visit_grouping_expr(self, expr):
        self.resolve_node(expr.expression)

    def visit_literal_expr(self, expr):
        pass

    def visit_logical_expr(self, expr):
        self.resolve_node(expr.left)
        self.resolve_node(expr.right)

    def visit_set_expr(self, expr):
        self.resolve_node(expr.value)
        self.resolve_node(expr.object)

    def visit_super_expr(self, expr):
        if self.current_class == ClassType.NONE:
            self.reporter.error_at(
                expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class != ClassType.SUBCLASS:
            self.reporter.error_at(
                expr.keyword, "Can't use 'super' in a class with no superclass.")
        self.resolve_local(expr, expr.keyword)

    def visit_this_expr(self, expr):
        if self.current_class == ClassType.NONE:
            self.reporter.error_at(
                expr.keyword, "Can't use 'this' outside of a class.")
            return
        self.resolve_local(expr, expr.keyword)

    def visit_unary_expr(self, expr):
        self.resolve_node(expr.right)

    def visit_variable_expr(self, expr):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.reporter.error_at(
                expr.name, "Can't read local variable in its own initializer.")
        self.resolve_local(expr, expr.name)

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.reporter.error_at(
                name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def resolve_function(self, function, kind):
        enclosing_function = self.current_function
        self.current_function = kind

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve_statements(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    def resolve_local(self, expr, name):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
