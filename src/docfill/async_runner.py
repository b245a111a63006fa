"""Run extraction and fill coroutines from synchronous callers."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

from docfill.exceptions import AsyncExecutionError, PackageError

if TYPE_CHECKING:
    from collections.abc import Coroutine

T = TypeVar("T")


def _run_on_worker_loop(coro: Coroutine[Any, Any, T]) -> T:
    """Drive `coro` to completion on a worker thread with its own event loop.

    Package errors keep their type so callers can tell a validation failure
    from a processing fault.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception foreign to the package.

    Returns:
        The result of the coroutine.
    """
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="docfill-async") as executor:
        future = executor.submit(asyncio.run, coro)
        try:
            return future.result()
        except PackageError:
            raise
        except Exception as exc:
            raise AsyncExecutionError(result=exc) from exc


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from sync code.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    return _run_on_worker_loop(coro)
