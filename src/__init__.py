"""
mdcstream - Streaming renderer for MDC (markdown + components) documents

Reveals a document a few characters at a time, the way a chat model types,
and renders every revealed prefix into a keyed tree of render instructions.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    parse,
    DocumentRenderer,
    RevealEngine,
    AsyncioScheduler,
    VirtualScheduler,
    ComponentRegistry,
    HtmlEmitter,
    LOG,
    state_connectToLogger,
)
from .models import RevealState, RenderTree, RenderResult, ParseError

__all__ = [
    "Parser",
    "parse",
    "DocumentRenderer",
    "RevealEngine",
    "AsyncioScheduler",
    "VirtualScheduler",
    "ComponentRegistry",
    "HtmlEmitter",
    "RevealState",
    "RenderTree",
    "RenderResult",
    "ParseError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
