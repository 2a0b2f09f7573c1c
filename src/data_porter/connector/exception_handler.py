from __future__ import annotations

import asyncio
import time
from abc import abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from data_porter.types import Duplicable


class FetchExceptionHandler(Duplicable):
    """
    Called by the import connector after a recoverable fetch failure, before the
    next attempt. Raising from `__call__` aborts the remaining attempts.
    """

    def initialize(self) -> None:
        """Reset per-fetch state. Called once before the first attempt."""

    @abstractmethod
    def __call__(self, exc: Exception) -> None: ...

    async def handle_async(self, exc: Exception) -> None:
        self(exc)


class StatelessFetchExceptionHandler(FetchExceptionHandler):
    def __init__(self, handler: Callable[[Exception], Any]) -> None:
        self._handler = handler

    def __call__(self, exc: Exception) -> None:
        self._handler(exc)


@dataclass
class SleepFetchExceptionHandler(FetchExceptionHandler):
    """Waits a fixed delay between attempts."""

    delay_s: float = 1.0
    attempts_handled: int = 0

    _sleep: Any = field(default=time.sleep, repr=False)

    def initialize(self) -> None:
        self.attempts_handled = 0

    def __call__(self, exc: Exception) -> None:
        self.attempts_handled += 1
        if self.delay_s > 0:
            self._sleep(self.delay_s)

    async def handle_async(self, exc: Exception) -> None:
        self.attempts_handled += 1
        if self.delay_s > 0:
            await asyncio.sleep(self.delay_s)
