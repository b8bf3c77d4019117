from __future__ import annotations

import sys

_DEBUG_LOG = False


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[epwing debug] {message}", file=sys.stderr)


__all__ = ["set_debug_logging", "debug_log"]
