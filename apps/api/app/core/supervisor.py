"""Process-level handling of errors that escape every request handler.

An exception surfacing in the event loop outside a request leaves the process
in an unknown state, so it is logged and the process exits; the orchestrator
restarts it.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Callable

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 1

LoopExceptionHandler = Callable[[asyncio.AbstractEventLoop, dict[str, Any]], None]


def make_fatal_handler(exit_fn: Callable[[int], Any] = os._exit) -> LoopExceptionHandler:
    def _handle(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        message = context.get("message", "Unhandled exception in event loop")
        if exc is not None:
            logger.critical("%s; terminating", message, exc_info=(type(exc), exc, exc.__traceback__))
        else:
            logger.critical("%s; terminating", message)
        for handler in logging.getLogger().handlers:
            handler.flush()
        exit_fn(FATAL_EXIT_CODE)

    return _handle


def install_fatal_handler(
    loop: asyncio.AbstractEventLoop | None = None,
    exit_fn: Callable[[int], Any] = os._exit,
) -> None:
    """Install the terminate-on-unhandled-error policy on ``loop`` (default: running loop)."""

    loop = loop or asyncio.get_running_loop()
    loop.set_exception_handler(make_fatal_handler(exit_fn))
