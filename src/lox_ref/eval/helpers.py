from __future__ import annotations

from ..types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxNil():
            return False
        case LoxBool(value=b):
            return b
        case _:
            return True

def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case _:
            # callables by identity, everything else of mismatched kind is unequal
            return lhs is rhs

def stringify(value: LoxValue) -> str:
    """Canonical text form used by `print` and the REPL."""
    if isinstance(value, LoxString):
        return value.value

    return repr(value)
