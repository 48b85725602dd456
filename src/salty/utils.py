from __future__ import annotations

import os as _os
from typing import Optional

from .types import (
    SltValue,
    SltNil,
    SltNumber,
    SltBool,
    SltArray,
    SltFn,
)


_TRUTHY_ENV = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """True when SALTY_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    raw = _os.environ.get("SALTY_DEBUG_PY_TRACE", "")
    return raw.strip().lower() in _TRUTHY_ENV


def same_kind(lhs: SltValue, rhs: SltValue) -> bool:
    return type(lhs) is type(rhs)


def slt_equals(lhs: SltValue, rhs: SltValue) -> bool:
    match (lhs, rhs):
        case (SltNil(), SltNil()):
            return True
        case (SltNumber(value=a), SltNumber(value=b)):
            return a == b
        case (SltBool(value=a), SltBool(value=b)):
            return a == b
        case (SltArray(items=items_a), SltArray(items=items_b)):
            return len(items_a) == len(items_b) and all(
                same_kind(a, b) and slt_equals(a, b) for a, b in zip(items_a, items_b)
            )
        case (SltFn(), SltFn()):
            return lhs is rhs
        case _:
            return False


def stringify(value: Optional[SltValue]) -> str:
    if value is None:
        return "nil"

    return repr(value)


def format_error(exc: Exception) -> str:
    """User-facing `<Kind>: <message>` line for a Salty error."""
    kind = getattr(exc, "kind", type(exc).__name__)
    return f"{kind}: {exc}"
