from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    LoxStackOverflow,
    LoxTypeMismatch,
    capture_output,
    parse_source,
    run_runtime_case,
)
from lox_ref.evaluator import execute
from lox_ref.runner import run

MAKE_COUNTER = dedent(
    """\
    fn make() {
      var n = 0;
      fn inc() {
        n = n + 1;
        return n;
      }
      return inc;
    }
"""
)

SCENARIOS = [
    pytest.param(
        MAKE_COUNTER + "var c = make(); c(); c()",
        ("number", 2),
        None,
        id="closure-captures-by-reference",
    ),
    pytest.param(
        MAKE_COUNTER + "var a = make(); var b = make(); a(); a(); b()",
        ("number", 1),
        None,
        id="closures-are-independent",
    ),
    pytest.param(
        dedent(
            """\
            fn fib(n) {
              if (n < 2) return n;
              return fib(n - 1) + fib(n - 2);
            }
            fib(10)
        """
        ),
        ("number", 55),
        None,
        id="direct-recursion",
    ),
    pytest.param(
        dedent(
            """\
            fn isEven(n) {
              if (n == 0) return true;
              return isOdd(n - 1);
            }
            fn isOdd(n) {
              if (n == 0) return false;
              return isEven(n - 1);
            }
            isEven(6)
        """
        ),
        ("bool", True),
        None,
        id="adjacent-declarations-share-scope",
    ),
    pytest.param(
        "var down = fn(n) { if (n == 0) return 0; return down(n - 1); }; down(5)",
        ("number", 0),
        None,
        id="lambda-recursion-through-var",
    ),
    pytest.param(
        "fn down(n) { if (n == 0) return 0; return down(n - 1); } down(1000)",
        ("number", 0),
        None,
        id="deep-recursion",
    ),
    pytest.param(
        "fn forever(n) { return forever(n + 1); } forever(0)",
        None,
        LoxStackOverflow,
        id="unbounded-recursion",
    ),
    pytest.param(
        "fn f(a, b) { return b; } f(1)",
        ("nil", None),
        None,
        id="missing-argument-is-nil",
    ),
    pytest.param(
        "fn f(a) { return a; } f(1, 2, 3)",
        ("number", 1),
        None,
        id="extra-arguments-ignored",
    ),
    pytest.param(
        dedent(
            """\
            var hits = 0;
            fn bump() { hits = hits + 1; return hits; }
            fn f(a) { return a; }
            f(bump(), bump());
            hits
        """
        ),
        ("number", 2),
        None,
        id="extra-arguments-still-evaluated",
    ),
    pytest.param(
        dedent(
            """\
            var trail = "";
            fn a() { trail = trail + "a"; return 1; }
            fn b() { trail = trail + "b"; return 2; }
            fn add(x, y) { return x + y; }
            add(a(), b());
            trail
        """
        ),
        ("string", "ab"),
        None,
        id="arguments-left-to-right",
    ),
    pytest.param(
        "fn f() { 1; } f()",
        ("nil", None),
        None,
        id="falling-off-the-end-is-nil",
    ),
    pytest.param(
        "fn f() { return; } f()",
        ("nil", None),
        None,
        id="bare-return-is-nil",
    ),
    pytest.param(
        dedent(
            """\
            fn first() {
              var i = 0;
              while (true) {
                i = i + 1;
                { if (i == 3) return i; }
              }
            }
            first()
        """
        ),
        ("number", 3),
        None,
        id="return-unwinds-nested-statements",
    ),
    pytest.param(
        "var sq = fn(x) { return x * x; }; sq(7)",
        ("number", 49),
        None,
        id="lambda-call",
    ),
    pytest.param(
        "fn adder(n) { return fn(x) { return x + n; }; } adder(2)(3)",
        ("number", 5),
        None,
        id="lambda-captures-parameter",
    ),
    pytest.param(
        "fn greet() {} greet",
        ("fn", "<fn greet>"),
        None,
        id="named-function-value",
    ),
    pytest.param(
        "var f = fn() {}; f",
        ("fn", "<fn>"),
        None,
        id="lambda-value",
    ),
    pytest.param(
        "clock",
        ("fn", "<native fn clock>"),
        None,
        id="native-function-value",
    ),
    pytest.param(
        '"abc"()',
        None,
        LoxTypeMismatch,
        id="call-string",
    ),
    pytest.param(
        "var x; x()",
        None,
        LoxTypeMismatch,
        id="call-nil",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(
    source: str,
    expectation: tuple[str, object] | None,
    expected_exc: type | None,
) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_call_non_callable_message() -> None:
    with pytest.raises(LoxTypeMismatch, match="Can't call this value"):
        run_runtime_case("1(2)", None, None)


def test_top_level_return_stops_program(capsys: pytest.CaptureFixture[str]) -> None:
    lines = capture_output(capsys, "print(1); return; print(2);")

    assert lines == ["1"]


def test_top_level_return_through_execute(capsys: pytest.CaptureFixture[str]) -> None:
    program = parse_source('print("a"); { return 5; } print("b");')
    execute(None, program.children)

    assert capsys.readouterr().out.splitlines() == ["a"]


def test_closure_outlives_defining_call() -> None:
    env = run(MAKE_COUNTER + "var c = make();")
    counter = env.get("c")

    assert counter.invoke([]).value == 1
    assert counter.invoke([]).value == 2
    assert counter.closure.get("n").value == 2


def test_stack_overflow_is_a_runtime_error() -> None:
    with pytest.raises(LoxStackOverflow) as exc_info:
        run("fn forever() { return forever(); } forever();")

    assert str(exc_info.value).startswith("Stack overflow")


def test_interpreter_usable_after_stack_overflow() -> None:
    with pytest.raises(LoxStackOverflow):
        run("fn forever() { return forever(); } forever();")

    env = run("fn down(n) { if (n == 0) return 0; return down(n - 1); } var r = down(200);")
    assert env.get("r").value == 0
