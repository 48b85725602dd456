from __future__ import annotations

from textwrap import dedent

import pytest

from salty.eval.chains import index_value, set_index_value
from tests.support.harness import (
    ParseError,
    SaltyIndexError,
    SaltyTypeError,
    SltArray,
    SltBool,
    SltNumber,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("print [];", ["[]"], None, id="empty-array"),
    pytest.param("print [1, 2.5, true, [3]];", ["[1, 2.5, true, [3]]"], None, id="print-mixed"),
    pytest.param("let a = [1, 2]; print a[0] + a[1];", ["3"], None, id="index-read"),
    pytest.param("let a = [1, 2]; print a[1.0];", ["2"], None, id="index-integral-float"),
    pytest.param("let a = [10, 20, 30]; let i = 1; print a[i + 1];", ["30"], None, id="index-expression"),
    pytest.param("let a = [1, 2]; a[0] = 9; print a;", ["[9, 2]"], None, id="slot-assign"),
    pytest.param(
        "let m = [[1, 2], [3, 4]]; m[1][0] = 5; print m; print m[1][0];",
        ["[[1, 2], [5, 4]]", "5"],
        None,
        id="nested-slot-assign",
    ),
    pytest.param(
        "let a = [1]; let b = a; b[0] = 2; print a;",
        ["[2]"],
        None,
        id="arrays-shared-by-reference",
    ),
    pytest.param(
        dedent(
            """\
            fn fill(xs, v) { xs[0] = v; }
            let a = [0, 0];
            fill(a, 7);
            print a;
        """
        ),
        ["[7, 0]"],
        None,
        id="array-mutated-through-param",
    ),
    pytest.param(
        "let a = [1, 2]; a[1] = [3]; print a[1][0];",
        ["3"],
        None,
        id="slot-holds-array",
    ),
    pytest.param(
        "let i = 0; let a = [i, i + 1]; i = 5; print a;",
        ["[0, 1]"],
        None,
        id="elements-evaluated-once",
    ),
    pytest.param(
        "let fs = [fn() { return 1; }]; print fs;",
        ["[<fn>]"],
        None,
        id="print-array-of-fns",
    ),
    pytest.param("let a = [1, 2]; print a[5];", None, SaltyIndexError, id="index-out-of-range"),
    pytest.param("let a = [1, 2]; print a[2];", None, SaltyIndexError, id="index-at-length"),
    pytest.param("let a = [1, 2]; print a[-1];", None, SaltyIndexError, id="index-negative"),
    pytest.param("let a = [1, 2]; print a[0.5];", None, SaltyIndexError, id="index-fraction"),
    pytest.param("let a = [1, 2]; print a[true];", None, SaltyIndexError, id="index-bool"),
    pytest.param("let a = [1, 2]; print a[[0]];", None, SaltyIndexError, id="index-array"),
    pytest.param("print [][0];", None, ParseError, id="index-on-array-literal-not-parsed"),
    pytest.param("let a = []; print a[0];", None, SaltyIndexError, id="index-empty"),
    pytest.param("let a = [1]; a[1] = 2;", None, SaltyIndexError, id="slot-assign-out-of-range"),
    pytest.param("let x = 5; print x[0];", None, SaltyTypeError, id="index-number"),
    pytest.param("let x = 5; x[0] = 1;", None, SaltyTypeError, id="slot-assign-number"),
    pytest.param("let a = [1]; a[0][0] = 1;", None, SaltyTypeError, id="nested-assign-into-number"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_collections(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_index_value_helpers() -> None:
    arr = SltArray([SltNumber(1.0), SltBool(False)])

    assert index_value(arr, SltNumber(1.0)) == SltBool(False)

    set_index_value(arr, SltNumber(0.0), SltNumber(3.0))
    assert arr.items[0] == SltNumber(3.0)
    assert len(arr.items) == 2


def test_index_error_message() -> None:
    arr = SltArray([SltNumber(1.0)])

    with pytest.raises(SaltyIndexError) as exc_info:
        index_value(arr, SltNumber(4.0))

    assert "out of bounds" in str(exc_info.value)
    assert exc_info.value.kind == "IndexError"
