"""Built-in native functions (clock, print) registered via lox_ref.runtime."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_native, LoxNil, LoxNumber, LoxValue
from .eval.helpers import stringify

@register_native("clock")
def std_clock(_args: List[LoxValue]) -> LoxNumber:
    return LoxNumber(time.time())

@register_native("print")
def std_print(args: List[LoxValue]) -> LoxNil:
    rendered = [stringify(arg) for arg in args]
    print(" ".join(rendered), flush=True)
    return LoxNil()
