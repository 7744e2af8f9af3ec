# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


class _Runner:
    def __init__(self, coro: Coroutine[Any, Any, Any]):
        self.coro = coro
        self.out: Any = None
        self.err: BaseException | None = None

    def run(self) -> None:
        try:
            self.out = asyncio.run(self.coro)
        except BaseException as e:  # noqa: BLE001
            self.err = e


def run_async(coro: Coroutine[Any, Any, T]) -> T:  # noqa: UP047
    """Run a use-case coroutine from synchronous (WSGI) code.

    Falls back to a helper thread when the caller already sits inside a
    running event loop, where ``asyncio.run`` is not allowed.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    runner = _Runner(coro)
    thread = threading.Thread(target=runner.run, daemon=True)
    thread.start()
    thread.join()
    if runner.err:
        raise runner.err
    return runner.out
