from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from typing_extensions import Protocol, TypeAlias, TypeGuard

from .tree import Node

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        if v == 0 and math.copysign(1.0, v) < 0:
            return "-0"
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class LoxFn:
    params: Tuple[str, ...]
    body: Tuple[Node, ...]        # statement nodes
    closure: 'Environment'        # defining environment
    name: Optional[str] = None    # None for lambdas

    def invoke(self, args: List['LoxValue']) -> 'LoxValue':
        from . import runtime  # local import to avoid cycle
        return runtime.call_loxfn(self, args)

    def __repr__(self) -> str:
        return f"<fn {self.name}>" if self.name else "<fn>"

NativeFn = Callable[[List['LoxValue']], 'LoxValue']

@dataclass(eq=False, frozen=True)
class NativeFunction:
    name: str
    fn: NativeFn

    def invoke(self, args: List['LoxValue']) -> 'LoxValue':
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<native fn {self.name}>"

class LoxCallable(Protocol):
    def invoke(self, args: List['LoxValue']) -> 'LoxValue': ...

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxFn
    | NativeFunction
)

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    LoxFn,
    NativeFunction,
)

_CALLABLE_TYPES: Tuple[type, ...] = (LoxFn, NativeFunction)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

def is_callable(value: object) -> TypeGuard[LoxCallable]:
    return isinstance(value, _CALLABLE_TYPES)

def kind_name(value: LoxValue) -> str:
    """Human name of a value's kind, as used in type-mismatch messages."""
    match value:
        case LoxNil():
            return "nil"
        case LoxBool():
            return "boolean"
        case LoxNumber():
            return "number"
        case LoxString():
            return "string"
        case LoxFn() | NativeFunction():
            return "function"
        case _:
            return type(value).__name__

# ---------- Environments ----------

class Environment:
    """One layer of the lexical scope chain.

    Layers only point at their parent. Several children may share a parent,
    and a closure keeps its defining layer alive for as long as the function
    value is reachable.
    """

    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}

        if parent is None and Builtins.native_functions:
            for name, native in Builtins.native_functions.items():
                self.vars[name] = native

    @classmethod
    def wrap(cls, parent: 'Environment') -> 'Environment':
        return cls(parent=parent)

    def define(self, name: str, val: LoxValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> LoxValue:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.parent

        raise LoxUndefinedVariable(name)

    def set(self, name: str, val: LoxValue) -> LoxValue:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                env.vars[name] = val
                return val
            env = env.parent

        raise LoxUndefinedVariable(name)

    def depth(self) -> int:
        count = 0
        env = self.parent

        while env is not None:
            count += 1
            env = env.parent

        return count

    def visible_names(self) -> Dict[str, LoxValue]:
        """Flatten the chain, innermost binding winning."""
        chain: List[Environment] = []
        env: Optional[Environment] = self

        while env is not None:
            chain.append(env)
            env = env.parent

        merged: Dict[str, LoxValue] = {}
        for layer in reversed(chain):
            merged.update(layer.vars)

        return merged

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    lox_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.lox_meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "lox_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class LoxUndefinedVariable(LoxRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable '{name}'")
        self.name = name

class LoxTypeMismatch(LoxRuntimeError):
    pass

class LoxStackOverflow(LoxRuntimeError):
    def __init__(self):
        super().__init__("Stack overflow")

class LoxReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: LoxValue):
        super().__init__()
        self.value = value

class Builtins:
    native_functions: Dict[str, NativeFunction] = {}
