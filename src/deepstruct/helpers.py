"""
Small function and collection helpers.
"""

from __future__ import annotations

import asyncio
import functools
import json
import time
from typing import Any, Callable, List, Optional


def flatten(items: List[Any], target: Optional[List[Any]] = None) -> List[Any]:
    """
    Flatten nested lists into one list.

    Args:
        items: Possibly nested list
        target: Optional list to append to (returned)

    Example:
        flatten([1, [2, [3]], 4])  ->  [1, 2, 3, 4]
    """
    result = target if target is not None else []
    for item in items:
        if isinstance(item, list):
            flatten(item, result)
        else:
            result.append(item)
    return result


def once(method: Callable) -> Callable:
    """Wrap method so that only the first call runs it. Wrapping twice is a no-op."""
    if getattr(method, "_deepstruct_once", False):
        return method

    called = False

    @functools.wraps(method)
    def wrapped(*args: Any, **kwargs: Any) -> None:
        nonlocal called
        if not called:
            called = True
            method(*args, **kwargs)

    wrapped._deepstruct_once = True
    return wrapped


def ignore(*args: Any, **kwargs: Any) -> None:
    pass


def stringify(value: Any, **kwargs: Any) -> str:
    """json.dumps() that returns a placeholder message instead of raising."""
    try:
        return json.dumps(value, **kwargs)
    except (TypeError, ValueError) as e:
        return f"[Cannot display object: {e}]"


async def wait(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def block() -> None:
    """Never completes (until cancelled)."""
    await asyncio.get_running_loop().create_future()


class Bench:
    """
    Millisecond stopwatch.

    Example:
        bench = Bench()
        ...
        print(f"took {bench.elapsed():.1f}ms")
    """

    def __init__(self):
        self.ts = 0.0
        self.reset()

    def reset(self) -> None:
        self.ts = Bench.now()

    def elapsed(self) -> float:
        return Bench.now() - self.ts

    @staticmethod
    def now() -> float:
        return time.perf_counter() * 1e3
