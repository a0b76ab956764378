"""
mdcstream - Streaming renderer for MDC (markdown + components) documents

Reveals a document a few characters at a time and renders every revealed
prefix into a keyed tree of render instructions.
"""

__version__ = "1.0.0"

from .parser import Parser, parse, components_extract
from .renderer import DocumentRenderer
from .engine import RevealEngine
from .scheduler import AsyncioScheduler, VirtualScheduler
from .components import ComponentRegistry
from .emitter import HtmlEmitter
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "parse",
    "components_extract",
    "DocumentRenderer",
    "RevealEngine",
    "AsyncioScheduler",
    "VirtualScheduler",
    "ComponentRegistry",
    "HtmlEmitter",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
