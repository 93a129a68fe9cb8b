from __future__ import annotations

import os
import sys
import traceback
from typing import Optional

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}

def debug_py_trace_enabled() -> bool:
    """True when LOX_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    raw = os.environ.get(DEBUG_PY_TRACE_ENV)
    if raw is None:
        return False

    return raw.strip().lower() in _TRUTHY_FLAGS

def set_debug_py_trace(enabled: Optional[bool]) -> bool:
    """Switch the traceback flag on/off; None toggles. Returns the new state."""
    if enabled is None:
        enabled = not debug_py_trace_enabled()

    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)

    return enabled

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
