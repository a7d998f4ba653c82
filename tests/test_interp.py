from __future__ import annotations

import io

import pytest

from sigil.config import DEFAULT_CONFIG, ExecutionConfig
from sigil.errors import SigilRuntimeError
from sigil.interp import Completion, CompletionKind, Interpreter, is_equal, is_truthy
from sigil.parser import parse_program


def _run(source: str, config: ExecutionConfig = DEFAULT_CONFIG):
    interp = Interpreter(config=config)
    return interp, interp.interpret(parse_program(source))


def _value(source: str) -> object:
    return _run(source)[1]


def _output(source: str) -> list:
    interp, _ = _run(source)
    return interp.output


def _fault(source: str, config: ExecutionConfig = DEFAULT_CONFIG) -> SigilRuntimeError:
    interp = Interpreter(config=config)
    with pytest.raises(SigilRuntimeError) as excinfo:
        interp.interpret(parse_program(source))
    return excinfo.value


def test_arithmetic_respects_precedence() -> None:
    assert _value("1 + 2 * 3;") == 7
    assert _value("(1 + 2) * 3;") == 9
    assert _value("10 - 4 - 3;") == 3


def test_assignment_and_print() -> None:
    interp, _ = _run("let x = 1; x = 2; print x;")
    assert interp.output == ["2"]
    assert interp.globals.get_by_name("x") == 2


def test_division_yields_float_and_prints_integral_without_fraction() -> None:
    assert _value("7 / 2;") == 3.5
    assert _output("print 6 / 2; print 7 / 2;") == ["3", "3.5"]


def test_remainder_is_truncated() -> None:
    assert _value("7 % 3;") == 1
    assert _value("-7 % 3;") == -1
    assert _value("7 % -3;") == 1
    assert _value("7.5 % 2;") == 1.5


def test_division_and_remainder_by_zero_are_errors() -> None:
    err = _fault("1 / 0;")
    assert err.message == "Division by zero."
    assert (err.line, err.column) == (1, 3)
    assert _fault("5 % 0;").message == "Division by zero."


def test_comparisons() -> None:
    assert _value("1 < 2;") is True
    assert _value("2 <= 2;") is True
    assert _value("1 > 2;") is False
    assert _value("3 >= 4;") is False


def test_comparison_requires_numbers() -> None:
    assert _fault('"a" < "b";').message == "Operands must be numbers."
    assert _fault("true - 1;").message == "Operands must be numbers."


def test_unary_operators() -> None:
    assert _value("-(2 + 3);") == -5
    assert _value("!null;") is True
    assert _value("!0;") is False
    assert _fault('-"x";').message == "Operand must be a number."


def test_string_concatenation_stringifies_other_operand() -> None:
    assert _value('"a" + "b";') == "ab"
    assert _value('"a" + 1;') == "a1"
    assert _value('1 + "a";') == "1a"
    assert _value('"n: " + null;') == "n: null"
    assert _value('"v" + 2.0;') == "v2"
    assert _value('"ok " + true;') == "ok true"


def test_plus_rejects_non_string_non_number_mix() -> None:
    err = _fault("true + 1;")
    assert err.message == "Operands must be two numbers or two strings."


def test_truthiness_only_null_and_false_are_falsy() -> None:
    assert _output('if (0) print "yes"; else print "no";') == ["yes"]
    assert _output('if ("") print "yes"; else print "no";') == ["yes"]
    assert _output('if (null) print "yes"; else print "no";') == ["no"]
    assert _output('if (false) print "yes"; else print "no";') == ["no"]


def test_is_truthy_helper() -> None:
    assert is_truthy(0) and is_truthy("") and is_truthy(0.0)
    assert not is_truthy(None)
    assert not is_truthy(False)


def test_equality_is_strict_across_types() -> None:
    assert _value("1 == 1.0;") is True
    assert _value("true == 1;") is False
    assert _value('"1" == 1;') is False
    assert _value("null == null;") is True
    assert _value("null == false;") is False
    assert _value('"a" != "b";') is True


def test_is_equal_never_treats_bools_as_numbers() -> None:
    assert not is_equal(True, 1)
    assert not is_equal(0, False)
    assert is_equal(False, False)


def test_logical_operators_short_circuit_and_return_operands() -> None:
    source = (
        "let hit = false;\n"
        "function mark() { hit = true; return true; }\n"
        "false and mark();\n"
        "true or mark();\n"
        "hit;"
    )
    assert _value(source) is False
    assert _value('null or "x";') == "x"
    assert _value("1 and 2;") == 2
    assert _value("false and 1;") is False


def test_function_call_and_return() -> None:
    assert _value("function add(a, b) { return a + b; } add(2, 3);") == 5


def test_function_without_return_yields_null() -> None:
    assert _output("function f() { 1; } print f();") == ["null"]
    assert _output("function g() { return; } print g();") == ["null"]


def test_recursion() -> None:
    source = "function fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); }\nfib(10);"
    assert _value(source) == 55


def test_return_unwinds_through_blocks_and_loops() -> None:
    source = (
        "function f() {\n"
        "  let i = 0;\n"
        "  while (true) { i = i + 1; { if (i == 3) return i; } }\n"
        "}\n"
        "f();"
    )
    assert _value(source) == 3


def test_arity_mismatch() -> None:
    err = _fault("function add(a, b) { return a + b; }\nadd(1);")
    assert err.message == "Expected 2 arguments but got 1."
    assert err.line == 2


def test_calling_non_function() -> None:
    assert _fault("let a = 1; a();").message == "Can only call functions."
    assert _fault('"text"(1);').message == "Can only call functions."


def test_undefined_variable_reports_position() -> None:
    err = _fault("let a = 1;\nprint b;")
    assert err.message == "Undefined variable 'b'."
    assert (err.line, err.column) == (2, 7)
    assert str(err) == "[Runtime Error] Line 2:7 - Undefined variable 'b'."


def test_assignment_to_undeclared_name_fails() -> None:
    assert _fault("y = 1;").message == "Undefined variable 'y'."


def test_uninitialized_let_is_null() -> None:
    assert _output("let a; print a;") == ["null"]


def test_const_cannot_be_reassigned() -> None:
    err = _fault("const k = 1;\nk = 2;")
    assert err.message == "Cannot assign to constant 'k'."
    assert err.line == 2


def test_block_scoping() -> None:
    assert _value("let a = 1; { let a = 2; } a;") == 1
    assert _value("let a = 1; { a = 2; } a;") == 2
    assert _fault("{ let inner = 1; } inner;").message == "Undefined variable 'inner'."


def test_redefining_builtin_at_top_level_is_rejected() -> None:
    err = _fault("let len = 5;")
    assert err.message == "Cannot redefine builtin 'len'."
    assert (err.line, err.column) == (1, 5)
    assert _fault("function str(x) { return x; }").message == "Cannot redefine builtin 'str'."
    assert _fault("Math_PI = 3;").message == "Cannot redefine builtin 'Math_PI'."


def test_builtin_names_may_be_shadowed_in_nested_scopes() -> None:
    assert _value("function f() { let len = 3; return len; } f();") == 3
    assert _value("let r; { let str = 1; r = str; } r;") == 1


def test_global_scope_pollution_can_be_enabled() -> None:
    config = ExecutionConfig(allow_global_scope_pollution=True)
    _, value = _run("let len = 5; len;", config)
    assert value == 5
    _, value = _run("Math_PI = 3; Math_PI;", config)
    assert value == 3


def test_builtins_are_isolated_per_interpreter() -> None:
    config = ExecutionConfig(allow_global_scope_pollution=True)
    _run("Math_PI = 3;", config)
    assert _value("Math_PI;") != 3


def test_runaway_recursion_is_a_runtime_error() -> None:
    err = _fault("function f(n) { return f(n + 1); }\nf(0);")
    assert err.message == "Maximum call depth exceeded."


def test_interpret_returns_last_statement_value() -> None:
    assert _value("1; 2; 3;") == 3
    assert _value("let a = 1;") is None


def test_functions_print_by_name() -> None:
    assert _output("function f() {} print f; print len;") == ["<fn f>", "<native fn len>"]


def test_output_goes_to_stream_and_callback() -> None:
    stream = io.StringIO()
    heard = []
    interp = Interpreter(stdout=stream, on_output=heard.append)
    interp.interpret(parse_program('print "a"; print 1.5;'))
    assert stream.getvalue() == "a\n1.5\n"
    assert heard == ["a", "1.5"]
    assert interp.output == ["a", "1.5"]


def test_evaluate_defaults_to_global_frame() -> None:
    interp, _ = _run("let a = 4;")
    expr = parse_program("a * 2;").statements[0].expression
    assert interp.evaluate(expr) == 8


def test_completion_kinds() -> None:
    assert not Completion().is_return
    assert Completion(CompletionKind.RETURN, 1).is_return


# Builds 2**1100, an integer no double can hold.
HUGE_INT = "let x = 1; for (let i = 0; i < 1100; i = i + 1) x = x * 2;\n"
# Squares past the double range into Infinity.
INFINITE = "let x = 2.5; for (let i = 0; i < 20; i = i + 1) x = x * x;\n"


def test_integer_too_large_for_a_float_is_a_runtime_error() -> None:
    err = _fault(HUGE_INT + "x / 3;")
    assert err.message == "Numeric overflow."
    assert (err.line, err.column) == (2, 3)
    assert _fault(HUGE_INT + "x + 0.5;").message == "Numeric overflow."


def test_huge_integers_still_compare_exactly() -> None:
    assert _value(HUGE_INT + "x > 0.5;") is True
    assert _value(HUGE_INT + "x - x;") == 0


def test_concatenating_an_integer_too_long_to_render() -> None:
    value = _value('let x = 1; for (let i = 0; i < 5000; i = i + 1) x = x * 10;\n"v" + x;')
    assert value in ("vInfinity", "v1" + "0" * 5000)


def test_non_finite_floats_print_like_doubles() -> None:
    assert _output(INFINITE + "print x; print -x; print x - x;") == ["Infinity", "-Infinity", "NaN"]
