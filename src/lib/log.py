"""
Verbosity-gated logging for the streaming pipeline

LOG() writes through loguru only when a ProgramState has been connected to
the current context and its verbosity reaches the message level. The parser,
renderer and engine call LOG freely; used as a library (no state connected)
they are silent.

Levels used across mdcstream:
    1  pipeline stages and the final report
    2  reveal transitions, failed renders, fallback components
    3  per-tick progress, token counts, passthrough nodes

Usage:
    from mdcstream.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)            # once, in main()
    LOG("Streaming document...", level=1)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

# State whose verbosity gates LOG() in the current context
_connected_state: ContextVar[Optional[Any]] = ContextVar("mdcstream_state", default=None)

_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> │ "
    "<cyan>{module: <9}</cyan> "
    "<cyan>{function: <18}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=_FORMAT, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state.verbosity`` the threshold for LOG() in this context

    Args:
        state: ProgramState (anything with a ``verbosity`` attribute)
    """
    _connected_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log ``message`` when the connected state's verbosity is at least ``level``

    Args:
        message: Text to log
        level: 1 (default output), 2 (-v), 3 (-vv and up)
        **kwargs: Extra loguru formatting arguments

    Example:
        LOG(f"Tick: {revealed}/{total}", level=3)
    """
    state = _connected_state.get()
    if state is None or getattr(state, "verbosity", 0) < level:
        return
    # Attribute the record to the caller
    logger.opt(depth=1).debug(message, **kwargs)
