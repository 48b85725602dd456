from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from typing_extensions import TypeAlias
from .tree import Node

# ---------- Value Model ----------

@dataclass
class SltNil:
    """The "no value" result of a function that ends without `return`."""
    def __repr__(self) -> str:
        return "nil"

@dataclass
class SltNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class SltBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class SltArray:
    items: List['SltValue']
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass(eq=False)
class SltFn:
    params: List[str]
    body: Node                    # block node
    frame: 'Frame'                # defining frame, shared not copied
    name: Optional[str] = None
    def __repr__(self) -> str:
        return f"<fn {self.name}>" if self.name else "<fn>"

SltValue: TypeAlias = (
    SltNil
    | SltNumber
    | SltBool
    | SltArray
    | SltFn
)

def type_name(value: SltValue) -> str:
    match value:
        case SltNumber():
            return "number"
        case SltBool():
            return "boolean"
        case SltArray():
            return "array"
        case SltFn():
            return "function"
        case SltNil():
            return "nil"
        case _:
            raise SaltyTypeError(f"Unexpected value type {type(value).__name__}")

# ---------- Statement outcomes ----------

@dataclass(frozen=True)
class Normal:
    value: SltValue = field(default_factory=SltNil)

@dataclass(frozen=True)
class Break:
    pass

@dataclass(frozen=True)
class Continue:
    pass

@dataclass(frozen=True)
class Return:
    value: SltValue

Outcome: TypeAlias = Normal | Break | Continue | Return

NORMAL = Normal()
BREAK = Break()
CONTINUE = Continue()

# ---------- Environments ----------

class Frame:
    """One lexical scope. Frames link to their parent to form the environment chain."""

    def __init__(self, parent: Optional['Frame']=None, context: Optional['Context']=None):
        self.parent = parent
        self.vars: Dict[str, SltValue] = {}

        if context is not None:
            self.context = context
        elif parent is not None:
            self.context = parent.context
        else:
            self.context = None

    def declare(self, name: str, val: SltValue) -> None:
        if name in self.vars:
            raise SaltyDuplicateNameError(name)

        self.vars[name] = val

    def lookup(self, name: str) -> SltValue:
        if name in self.vars:
            return self.vars[name]

        if self.parent is not None:
            return self.parent.lookup(name)

        raise SaltyNameError(f"Name '{name}' is not defined", name)

    def assign(self, name: str, val: SltValue) -> None:
        if name in self.vars:
            self.vars[name] = val
            return

        if self.parent is not None:
            self.parent.assign(name, val)
            return

        raise SaltyNameError(f"Cannot assign to undeclared name '{name}'", name)

def _stdout_write(text: str) -> None:
    print(text, file=sys.stdout)

class Context:
    """
    Caller-owned runtime state: the program-level frame plus the sink that
    `print` writes to. Pass the same Context to successive evaluations to keep
    bindings alive (the REPL does this).
    """

    def __init__(self, write: Optional[Callable[[str], None]]=None):
        self.write: Callable[[str], None] = write if write is not None else _stdout_write
        self.globals = Frame(context=self)

    def reset(self) -> None:
        self.globals = Frame(context=self)

# ---------- Exceptions ----------

class SaltyRuntimeError(Exception):
    kind = "RuntimeError"
    slt_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.slt_meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "slt_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class SaltyNameError(SaltyRuntimeError):
    kind = "NameError"

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name

class SaltyDuplicateNameError(SaltyRuntimeError):
    kind = "DuplicateNameError"

    def __init__(self, name: str):
        super().__init__(f"Name '{name}' is already declared in this scope")
        self.name = name

class SaltyTypeError(SaltyRuntimeError):
    kind = "TypeError"

class SaltyArityError(SaltyTypeError):
    pass

class SaltyIndexError(SaltyRuntimeError):
    kind = "IndexError"

    def __init__(self, message: str = "Index out of bounds"):
        super().__init__(message)

class SaltyZeroDivisionError(SaltyRuntimeError):
    kind = "ZeroDivisionError"

    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)

class SaltyControlFlowError(SaltyRuntimeError):
    kind = "ControlFlowError"
