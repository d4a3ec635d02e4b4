#!/usr/bin/env python3
"""A CLI for the ism7_tx library - remote debugging (via debugpy)."""

from __future__ import annotations

import os
from typing import Final

SZ_DBG_MODE: Final = "debug_mode"

DEBUG_ADDR: Final = os.getenv("ISM7_DEBUG_ADDR", "127.0.0.1")
DEBUG_PORT: Final = int(os.getenv("ISM7_DEBUG_PORT", "5678"))


def start_debugging(wait_for_client: bool, port: int = DEBUG_PORT) -> None:
    """Listen for a debugger (-z: and wait for it to attach, -zz: don't wait)."""
    import debugpy  # type: ignore[import-untyped]

    debugpy.listen(address=(DEBUG_ADDR, port))
    print(f" - debugger listening on {DEBUG_ADDR}:{port}")

    if wait_for_client:
        print("   - waiting for the debugger to attach...")
        debugpy.wait_for_client()
