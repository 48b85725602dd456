from __future__ import annotations

import sys
from textwrap import dedent

import pytest

from salty.runtime import call_function
from tests.support.harness import (
    Context,
    ParseError,
    SaltyArityError,
    SaltyControlFlowError,
    SaltyDuplicateNameError,
    SaltyNameError,
    SaltyRuntimeError,
    SaltyTypeError,
    SltFn,
    SltNil,
    SltNumber,
    run_output,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("fn add(a, b) { return a + b; } print add(2, 3);", ["5"], None, id="decl-and-call"),
    pytest.param(
        dedent(
            """\
            fn make(n) { return fn(x) { return x + n; }; }
            let addFive = make(5);
            print addFive(1);
        """
        ),
        ["6"],
        None,
        id="closure-captures-param",
    ),
    pytest.param(
        dedent(
            """\
            let make = fn(n) {
                let f = fn(x) { return x + n; };
                n = 10;
                return f;
            };
            let g = make(5);
            print g(1);
        """
        ),
        ["11"],
        None,
        id="closure-sees-later-mutation",
    ),
    pytest.param(
        dedent(
            """\
            fn counter() {
                let count = 0;
                return fn() { count = count + 1; return count; };
            }
            let c = counter();
            c();
            c();
            print c();
            let d = counter();
            print d();
        """
        ),
        ["3", "1"],
        None,
        id="closure-state-per-call",
    ),
    pytest.param(
        dedent(
            """\
            fn fact(n) {
                if n <= 1 { return 1; }
                return n * fact(n - 1);
            }
            print fact(10);
        """
        ),
        ["3628800"],
        None,
        id="recursion",
    ),
    pytest.param(
        dedent(
            """\
            fn isEven(n) { if n == 0 { return true; } return isOdd(n - 1); }
            fn isOdd(n) { if n == 0 { return false; } return isEven(n - 1); }
            print isEven(10);
        """
        ),
        ["true"],
        None,
        id="mutual-recursion-late-binding",
    ),
    pytest.param("print make(5)(1); fn make(n) { }", None, SaltyNameError, id="call-before-declare"),
    pytest.param(
        "fn make(n) { return fn(x) { return x * n; }; } print make(3)(4);",
        ["12"],
        None,
        id="chained-call",
    ),
    pytest.param(
        "fn apply(f, x) { return f(x); } print apply(fn(v) { return v - 1; }, 3);",
        ["2"],
        None,
        id="function-as-argument",
    ),
    pytest.param("fn f() { } print f();", ["nil"], None, id="fall-off-returns-nil"),
    pytest.param("fn f() { print 1; } f();", ["1"], None, id="call-statement"),
    pytest.param(
        "fn f() { return 1; print 2; } print f();",
        ["1"],
        None,
        id="return-stops-body",
    ),
    pytest.param(
        dedent(
            """\
            fn find(xs, target) {
                let i = 0;
                while i < 3 {
                    if xs[i] == target { return i; }
                    i = i + 1;
                }
                return -1;
            }
            print find([4, 5, 6], 5);
            print find([4, 5, 6], 9);
        """
        ),
        ["1", "-1"],
        None,
        id="return-from-loop",
    ),
    pytest.param(
        "fn f() { { { return 7; } } } print f();",
        ["7"],
        None,
        id="return-from-nested-blocks",
    ),
    pytest.param("print f;", None, SaltyNameError, id="undefined-function"),
    pytest.param("fn f() { } print f;", ["<fn f>"], None, id="print-named-fn"),
    pytest.param("print fn(x) { return x; };", ["<fn>"], None, id="print-anonymous-fn"),
    pytest.param("let f = fn(x) { }; print f;", ["<fn>"], None, id="fn-expr-stays-anonymous"),
    pytest.param("fn add(a, b) { } add(1);", None, SaltyArityError, id="too-few-args"),
    pytest.param("fn f() { } f(1);", None, SaltyArityError, id="too-many-args"),
    pytest.param("fn add(a, b) { } add(1);", None, SaltyTypeError, id="arity-is-type-error"),
    pytest.param("let x = 1; x();", None, SaltyTypeError, id="call-number"),
    pytest.param("print [1](0);", None, ParseError, id="call-on-array-literal-not-parsed"),
    pytest.param("let a = [fn() { return 2; }]; print a[0]();", ["2"], None, id="call-from-array"),
    pytest.param("fn f(a) { let a = 2; } f(1);", None, SaltyDuplicateNameError, id="let-shadows-param"),
    pytest.param("fn f(a) { { let a = 2; print a; } } f(1);", ["2"], None, id="block-shadows-param"),
    pytest.param("fn f(a, a) { } f(1, 2);", None, SaltyDuplicateNameError, id="duplicate-params"),
    pytest.param(
        "fn f() { break; } while true { f(); }",
        None,
        SaltyControlFlowError,
        id="break-escapes-function",
    ),
    pytest.param(
        "fn f() { continue; } f();",
        None,
        SaltyControlFlowError,
        id="continue-escapes-function",
    ),
    pytest.param(
        dedent(
            """\
            let log = [0, 0];
            fn arg(i, v) { log[i] = v; return v; }
            fn pair(a, b) { return a - b; }
            print pair(arg(0, 5), arg(1, 3));
            print log;
        """
        ),
        ["2", "[5, 3]"],
        None,
        id="args-left-to-right",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_arity_message_names_counts() -> None:
    with pytest.raises(SaltyArityError) as exc_info:
        run_output("fn add(a, b) { return a + b; } add(1);")

    assert "add expects 2 args; got 1" in str(exc_info.value)


def test_call_function_directly() -> None:
    context = Context()
    run_output("fn twice(x) { return x * 2; }", context)
    fn = context.globals.lookup("twice")

    assert isinstance(fn, SltFn)
    assert fn.frame is context.globals
    assert call_function(fn, [SltNumber(4.0)]) == SltNumber(8.0)


def test_call_without_return_is_nil() -> None:
    context = Context()
    run_output("fn noop() { }", context)

    result = call_function(context.globals.lookup("noop"), [])
    assert isinstance(result, SltNil)


def test_deep_recursion_becomes_runtime_error() -> None:
    with pytest.raises(SaltyRuntimeError) as exc_info:
        run_output("fn down(n) { return down(n + 1); } down(0);")

    assert "maximum recursion depth exceeded" in str(exc_info.value)


DEEP_RECURSION = [
    pytest.param(
        "fn sum(n) { if n == 0 { return 0; } return n + sum(n - 1); } print sum(500);",
        ["125250"],
        id="sum-500-deep",
    ),
    pytest.param(
        dedent(
            """\
            fn count(n) {
                if n == 0 { return 0; }
                let total = 0;
                while true {
                    total = count(n - 1) + 1;
                    break;
                }
                return total;
            }
            print count(200);
            """
        ),
        ["200"],
        id="recursion-through-loop-body",
    ),
    pytest.param(
        dedent(
            """\
            fn isEven(n) { if n == 0 { return true; } return isOdd(n - 1); }
            fn isOdd(n) { if n == 0 { return false; } return isEven(n - 1); }
            print isEven(600);
            """
        ),
        ["true"],
        id="mutual-recursion-600-deep",
    ),
]


@pytest.mark.parametrize("source, expectation", DEEP_RECURSION)
def test_deep_valid_recursion(source: str, expectation) -> None:
    assert run_output(source) == expectation


def test_recursion_limit_restored_after_evaluate() -> None:
    before = sys.getrecursionlimit()
    run_output("fn sum(n) { if n == 0 { return 0; } return n + sum(n - 1); } sum(50);")

    assert sys.getrecursionlimit() == before


def test_recursion_limit_restored_after_runaway() -> None:
    before = sys.getrecursionlimit()

    with pytest.raises(SaltyRuntimeError):
        run_output("fn down(n) { return down(n + 1); } down(0);")

    assert sys.getrecursionlimit() == before
