import io
import math

import pytest

from lox.__main__ import Lox
from lox.errors import ErrorReporter
from lox.interpreter import Interpreter, divide, stringify
from lox.runtime import LoxFunction, LoxInstance
from lox.syntax import Expr, Stmt
from lox.tokens import Token, TokenType


def test_arithmetic_and_print(run):
    result = run("print 1 + 2 * 3;")
    assert result.lines == ["7"]
    assert result.exit_code == 0


def test_number_formatting(run):
    result = run("print 2.5; print 10 / 4; print -0.5 * 2; print 3;")
    assert result.lines == ["2.5", "2.5", "-1", "3"]


def test_string_concatenation(run):
    assert run('print "a" + "b";').lines == ["ab"]


def test_mixed_plus_is_runtime_error(run):
    result = run('print "a" + 1;')
    assert result.lines == []
    assert result.errors == [
        "Operands must be two numbers or two strings.", "[line 1]"]
    assert result.exit_code == 70


@pytest.mark.parametrize("source, message", [
    ('print 1 - "x";', "Operands must be numbers."),
    ("print nil < 1;", "Operands must be numbers."),
    ('print -"x";', "Operand must be a number."),
    ('"text"();', "Can only call functions and classes."),
    ("fun f(a) {} f();", "Expected 1 arguments but got 0."),
    ("print missing;", "Undefined variable 'missing'."),
    ("missing = 1;", "Undefined variable 'missing'."),
    ("print 1.x;", "Only instances have properties."),
    ("var n = 1; n.x = 2;", "Only instances have fields."),
    ("class A {} print A().nope;", "Undefined property 'nope'."),
    ("var NotAClass = 1; class B < NotAClass {}", "Superclass must be a class."),
    ("class A {} class B < A { m() { return super.nope; } } B().m();",
     "Undefined property 'nope'."),
    ("class A { init(a, b) {} } A(1);", "Expected 2 arguments but got 1."),
    ("class A {} A(1);", "Expected 0 arguments but got 1."),
])
def test_runtime_errors(run, source, message):
    result = run(source)
    assert result.errors == [message, "[line 1]"]
    assert result.exit_code == 70


def test_runtime_error_aborts_remaining_statements(run):
    result = run("print 1;\nprint -nil;\nprint 3;")
    assert result.lines == ["1"]
    assert result.errors == ["Operand must be a number.", "[line 2]"]


def test_truthiness(run):
    result = run(
        'if (0) print "zero"; if ("") print "empty";'
        'if (nil) print "nil"; else print "not nil";'
        'if (false) print "false"; else print "not false";'
        "print !nil; print !0;")
    assert result.lines == ["zero", "empty", "not nil", "not false", "true", "false"]


def test_equality_never_coerces(run):
    result = run(
        'print 1 == "1"; print nil == 0; print nil == nil; print true == 1;'
        'print "a" == "a"; print 1 != 2; print false == nil;')
    assert result.lines == ["false", "false", "true", "false", "true", "true", "false"]


def test_division_by_zero_is_ieee(run):
    result = run("print 1 / 0; print -1 / 0; print 0 / 0; print 1 / -0;")
    assert result.lines == ["Infinity", "-Infinity", "NaN", "-Infinity"]
    assert result.exit_code == 0


def test_logical_operators_short_circuit(run):
    result = run(
        'fun boom() { print "evaluated"; return true; }'
        "print false and boom();"
        "print true or boom();"
        'print nil or "fallback";'
        'print 1 and "second";'
        'print "first" or boom();')
    assert result.lines == ["false", "true", "fallback", "second", "first"]


def test_evaluation_order_is_left_to_right(run):
    result = run(
        "fun show(x) { print x; return x; }"
        "show(1) + show(2) * show(3);"
        "fun three(a, b, c) {} three(show(4), show(5), show(6));")
    assert result.lines == ["1", "2", "3", "4", "5", "6"]


def test_closure_counter(run):
    result = run(
        "fun makeCounter(){var i=0; fun c(){i=i+1; return i;} return c;}\n"
        "var c = makeCounter(); print c(); print c(); print c();")
    assert result.lines == ["1", "2", "3"]


def test_closures_share_captured_frame(run):
    result = run(
        "var get; var set;"
        "{ var x = 1; fun g() { return x; } fun s(v) { x = v; } get = g; set = s; }"
        "set(5); print get();")
    assert result.lines == ["5"]


def test_lexical_scoping_is_static(run):
    result = run(
        'var a="global";\n'
        '{ fun show(){print a;} show(); var a="local"; show(); }')
    assert result.lines == ["global", "global"]


def test_block_shadowing(run):
    result = run(
        'var a = "outer"; { var a = "inner"; print a; } print a;')
    assert result.lines == ["inner", "outer"]


def test_loops(run):
    result = run(
        "var i = 0; while (i < 3) { print i; i = i + 1; }"
        "for (var j = 0; j < 2; j = j + 1) print j;")
    assert result.lines == ["0", "1", "2", "0", "1"]


def test_recursion(run):
    result = run(
        "fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); }"
        "print fib(15);")
    assert result.lines == ["610"]


def test_return_without_value_is_nil(run):
    assert run("fun f() { return; } print f();").lines == ["nil"]
    assert run("fun f() {} print f();").lines == ["nil"]


def test_return_unwinds_nested_blocks_and_loops(run):
    result = run(
        "fun find() { var i = 0; while (true) { { if (i == 3) return i; } i = i + 1; } }"
        "print find();")
    assert result.lines == ["3"]


def test_function_values_print(run):
    result = run("fun f() {} print f; print clock; class K {} print K; print K();")
    assert result.lines == ["<fn f>", "<native fn>", "K", "K instance"]


def test_clock_returns_seconds(run):
    result = run("var t = clock(); print t > 0; print clock() >= t;")
    assert result.lines == ["true", "true"]


def test_classes_and_inheritance(run):
    result = run(
        'class A { greet(){print "A";} }\n'
        'class B < A { greet(){super.greet(); print "B";} }\n'
        "B().greet();")
    assert result.lines == ["A", "B"]


def test_fields_and_methods(run):
    result = run(
        "class Point {"
        "  init(x, y) { this.x = x; this.y = y; }"
        "  sum() { return this.x + this.y; }"
        "}"
        "var p = Point(1, 2); print p.sum(); p.x = 10; print p.sum();"
        "p.extra = \"new\"; print p.extra;")
    assert result.lines == ["3", "12", "new"]


def test_fields_shadow_methods(run):
    result = run(
        'class A { m() { return "method"; } }'
        'var a = A(); a.m = "field"; print a.m;')
    assert result.lines == ["field"]


def test_bound_method_keeps_receiver(run):
    result = run(
        'class Person { init(name) { this.name = name; } say() { print this.name; } }'
        'var jane = Person("Jane"); var say = jane.say; say();'
        'var bob = Person("Bob"); bob.say = jane.say; bob.say();')
    assert result.lines == ["Jane", "Jane"]


def test_initializer_returns_instance(run):
    result = run(
        "class A { init() { this.v = 1; return; } }"
        "var a = A(); print a.init(); print a.init().v;")
    assert result.lines == ["A instance", "1"]


def test_inherited_initializer(run):
    result = run(
        "class A { init(v) { this.v = v; } }"
        "class B < A {}"
        "print B(7).v;")
    assert result.lines == ["7"]


def test_super_resolves_from_defining_class(run):
    result = run(
        'class A { method() { print "A method"; } }'
        'class B < A { method() { print "B method"; } test() { super.method(); } }'
        "class C < B {}"
        "C().test();")
    assert result.lines == ["A method"]


def test_super_call_in_initializer_chain(run):
    result = run(
        "class A { init(x) { this.x = x; } }"
        "class B < A { init(x, y) { super.init(x); this.y = y; } }"
        "var b = B(1, 2); print b.x + b.y;")
    assert result.lines == ["3"]


def test_methods_close_over_defining_scope(run):
    result = run(
        "fun make() { var secret = 42; class Box { open() { return secret; } } return Box; }"
        "print make()().open();")
    assert result.lines == ["42"]


def test_deep_recursion_reports_stack_overflow(run):
    result = run("fun f() { f(); }\nf();")
    assert result.errors == ["Stack overflow.", "[line 1]"]
    assert result.exit_code == 70


def test_resolver_error_prevents_execution(run):
    result = run("print 1;\nreturn 1;")
    assert result.lines == []
    assert result.errors == [
        "[line 2] Error at 'return': Can't return from top-level code."]
    assert result.exit_code == 65


def test_parse_error_prevents_execution(run):
    result = run("print 1; print;")
    assert result.lines == []
    assert result.errors == ["[line 1] Error at ';': Expect expression."]
    assert result.exit_code == 65


def test_lex_error_prevents_execution(run):
    result = run("print 1; @")
    assert result.lines == []
    assert result.errors == ["[line 1] Error: Unexpected character."]
    assert result.exit_code == 65


def test_lex_error_stops_before_parsing(run):
    result = run("print @;")
    assert result.errors == ["[line 1] Error: Unexpected character."]
    assert result.exit_code == 65


def test_interpreter_state_persists_between_runs():
    out = io.StringIO()
    lox = Lox(out, io.StringIO())
    lox.run("var a = 1; fun f() { return a; }")
    lox.run("a = 2; print f();")
    assert out.getvalue().splitlines() == ["2"]
    assert isinstance(lox.interpreter.globals.values["f"], LoxFunction)


def test_fresh_interpreter_only_defines_clock():
    interpreter = Interpreter(ErrorReporter(io.StringIO()))
    assert list(interpreter.globals.values) == ["clock"]
    assert interpreter.locals == {}


@pytest.mark.parametrize("value, text", [
    (None, "nil"),
    (True, "true"),
    (False, "false"),
    (1.0, "1"),
    (-0.0, "-0"),
    (0.1, "0.1"),
    (123456.789, "123456.789"),
    (1e7, "10000000"),
    (0.001, "0.001"),
    (1e16, "1e+16"),
    (1e22, "1e+22"),
    (1.5e-7, "1.5e-07"),
    (math.inf, "Infinity"),
    (math.nan, "NaN"),
    ("text", "text"),
])
def test_stringify(value, text):
    assert stringify(value) == text


def test_divide():
    assert divide(6.0, 3.0) == 2.0
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))
    assert math.isnan(divide(math.nan, 0.0))


def test_instances_are_compared_by_identity(run):
    result = run("class A {} var a = A(); var b = A(); print a == a; print a == b;")
    assert result.lines == ["true", "false"]
    assert LoxInstance.__eq__ is object.__eq__


def nested_blocks(innermost, depth):
    statement = innermost
    for _ in range(depth):
        statement = Stmt.Block([statement])
    return statement


def test_deeply_nested_blocks_overflow_as_runtime_error():
    err = io.StringIO()
    reporter = ErrorReporter(err)
    interpreter = Interpreter(reporter, io.StringIO())
    name = Token(TokenType.IDENTIFIER, "x", None, 3)
    program = [nested_blocks(Stmt.Print(Expr.Variable(name)), 5000)]

    interpreter.interpret(program)

    assert reporter.had_runtime_error
    assert err.getvalue() == "Stack overflow.\n[line 3]\n"
    assert interpreter.environment is interpreter.globals


def test_huge_expression_chain_is_reported_by_resolver(run):
    result = run("var a = 1;\nprint a" + " + a" * 5000 + ";")
    assert result.lines == []
    assert result.errors == ["[line 2] Error at 'a': Too much nesting."]
    assert result.exit_code == 65
