"""
Component specification and metadata models

Defines the structure and categories of MDC components for registry
management and documentation.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .render import RenderNode


# (attributes, rendered children) -> render instruction
ComponentHandler = Callable[[Dict[str, Any], List["RenderNode"]], "RenderNode"]


class ComponentCategory(Enum):
    """
    Categories of MDC components

    Used for organization and documentation.
    """
    CALLOUT = "callout"      # ::alert{}, ::callout{}
    LAYOUT = "layout"        # ::card{}
    INLINE = "inline"        # :badge[]{}
    CODE = "code"            # ::code-group
    CUSTOM = "custom"        # registered by the host


@dataclass
class ComponentSpec:
    """
    Specification for an MDC component

    Defines metadata and the render handler for a component.
    Used by ComponentRegistry to manage available components.

    Attributes:
        name: Component name (without leading colons), matched case-insensitively
        category: Category for organization
        description: Human-readable description
        handler: Render function (attributes, children) -> RenderNode
        inline: Whether the component is meant for inline use (:name[])
        examples: Example usage strings
        aliases: Alternative names for the component
    """
    name: str
    category: ComponentCategory
    description: str
    handler: ComponentHandler
    inline: bool = False
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

