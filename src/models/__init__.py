"""
Models package for mdcstream

Contains data structures and type definitions for parsing, rendering and
revealing documents.
"""

from .state import ProgramState, pipeline
from .document import NodeKind, DocumentNode, DocumentRoot, ParseError, COMPONENT_KINDS
from .render import RenderNode, RenderTree, RenderResult
from .reveal import RevealState, RevealSnapshot
from .components import ComponentSpec, ComponentCategory, ComponentHandler

__all__ = [
    "ProgramState",
    "pipeline",
    "NodeKind",
    "DocumentNode",
    "DocumentRoot",
    "ParseError",
    "COMPONENT_KINDS",
    "RenderNode",
    "RenderTree",
    "RenderResult",
    "RevealState",
    "RevealSnapshot",
    "ComponentSpec",
    "ComponentCategory",
    "ComponentHandler",
]
