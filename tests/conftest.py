"""Shared fixtures and test doubles."""

from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Callable

import pytest

from fontcode.glyph.bitmap import Bitmap


class ManualExecutor(Executor):
    """Executor that runs submitted work only when the test says so.

    Lets a test finish requests in any order on the test thread.
    """

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable[..., Any], tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run(self, index: int = 0) -> None:
        future, fn, args, kwargs = self.pending.pop(index)
        future.set_running_or_notify_cancel()
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        else:
            future.set_result(result)

    def run_all(self) -> None:
        while self.pending:
            self.run(0)


class InlineExecutor(Executor):
    """Executor that runs each call immediately on the submitting thread.

    Stands in for the scheduler's delivery thread so deliveries happen
    as soon as the test finishes a request.
    """

    def __init__(self) -> None:
        self.calls = 0

    def submit(self, fn, /, *args, **kwargs) -> Future:
        self.calls += 1
        future: Future = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future


@pytest.fixture()
def executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture()
def delivery() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture()
def checker() -> Bitmap:
    """8x2 checkerboard: rows 1010_1010 and 0101_0101."""
    return Bitmap.from_rows([
        [1, 0, 1, 0, 1, 0, 1, 0],
        [0, 1, 0, 1, 0, 1, 0, 1],
    ])


@pytest.fixture()
def letter_t() -> Bitmap:
    """5x4 'T' glyph (width not a multiple of 8)."""
    return Bitmap.from_rows([
        [1, 1, 1, 1, 1],
        [0, 0, 1, 0, 0],
        [0, 0, 1, 0, 0],
        [0, 0, 1, 0, 0],
    ])
