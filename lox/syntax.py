"""Syntax tree node families.

Nodes are generated rather than written out: each call to
``make_syntax_tree_node`` creates a subclass of ``Expr`` or ``Stmt`` with the
given fields, attaches it to the base class (``Expr.Binary``, ``Stmt.If``, ...)
and adds a ``visit_<node>_<family>`` hook to the family's ``Visitor``.

Nodes compare and hash by identity, the resolver keys its side table on them.
"""

from lox.tokens import Token


def make_syntax_tree_node(base_class, name, *attrs):
    def __init__(self, *values):
        if len(values) != len(attrs):
            message = f"{name}.__init__() takes {len(attrs)} positional arguments but {len(values)} were given"
            raise TypeError(message)

        for attr, value in zip(attrs, values):
            setattr(self, attr, value)

    def __repr__(self):
        fields = ", ".join(f"{attr}={getattr(self, attr)!r}" for attr in attrs)
        return f"{base_class.__name__}.{name}({fields})"

    visit_fn_name = f"visit_{name.lower()}_{base_class.__name__.lower()}"

    def accept(self, visitor):
        return getattr(visitor, visit_fn_name)(self)

    subclass = type(
        name, (base_class,),
        {"__init__": __init__, "__repr__": __repr__, "accept": accept,
         "fields": attrs})
    subclass.__qualname__ = f"{base_class.__name__}.{name}"

    setattr(base_class, name, subclass)

    def visit(self, node):
        raise NotImplementedError(
            f"{type(self).__name__} does not handle {base_class.__name__}.{name}")

    setattr(base_class.Visitor, visit_fn_name, visit)
    return subclass


class Expr:
    def accept(self, visitor):
        raise NotImplementedError()

    class Visitor:
        pass


class Stmt:
    def accept(self, visitor):
        raise NotImplementedError()

    class Visitor:
        pass


# Expr subclasses
make_syntax_tree_node(Expr, "Assign", "name", "value")
make_syntax_tree_node(Expr, "Binary", "left", "operator", "right")
make_syntax_tree_node(Expr, "Call", "callee", "paren", "arguments")
make_syntax_tree_node(Expr, "Get", "object", "name")
make_syntax_tree_node(Expr, "Grouping", "expression")
make_syntax_tree_node(Expr, "Literal", "value")
make_syntax_tree_node(Expr, "Logical", "left", "operator", "right")
make_syntax_tree_node(Expr, "Set", "object", "name", "value")
make_syntax_tree_node(Expr, "Super", "keyword", "method")
make_syntax_tree_node(Expr, "This", "keyword")
make_syntax_tree_node(Expr, "Unary", "operator", "right")
make_syntax_tree_node(Expr, "Variable", "name")

# Stmt subclasses
make_syntax_tree_node(Stmt, "Block", "statements")
make_syntax_tree_node(Stmt, "Class", "name", "superclass", "methods")
make_syntax_tree_node(Stmt, "Expression", "expression")
make_syntax_tree_node(Stmt, "Function", "name", "params", "body")
make_syntax_tree_node(Stmt, "If", "condition", "then_branch", "else_branch")
make_syntax_tree_node(Stmt, "Print", "expression")
make_syntax_tree_node(Stmt, "Return", "keyword", "value")
make_syntax_tree_node(Stmt, "Var", "name", "initializer")
make_syntax_tree_node(Stmt, "While", "condition", "body")


def first_token(node):
    """Returns the first token found in ``node``'s subtree, or None.

    Walks with an explicit stack so it stays usable after the tree proved too
    deep for the recursive visitors.
    """
    pending = [node]
    while pending:
        value = pending.pop()
        if isinstance(value, Token):
            return value
        if isinstance(value, (Expr, Stmt)):
            pending.extend(reversed([getattr(value, attr) for attr in value.fields]))
        elif isinstance(value, list):
            pending.extend(reversed(value))
    return None
