"""
Component registry and built-in MDC components

Each component handler turns a component's attributes and rendered children
into a render instruction. Uses ComponentSpec for metadata.

The registry is a read-only Mapping from lower-cased name to handler, which
is all the DocumentRenderer needs; hosts may pass any other mapping instead.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from ..models.components import ComponentSpec, ComponentCategory, ComponentHandler
from ..models.render import RenderNode


ALERT_TYPES = ("info", "warning", "error", "success")
BADGE_COLORS = ("blue", "green", "red", "yellow", "purple")


class ComponentRegistry(Mapping):
    """
    Registry of component specifications and handlers

    Maps lower-cased component names (and aliases) to ComponentSpec objects.
    Iterating or indexing yields handlers, so a registry can be handed
    straight to DocumentRenderer.render().
    """

    def __init__(self, builtins: bool = True) -> None:
        """
        Initialize the registry

        Args:
            builtins: Register the built-in catalog (alert, callout, card,
                      badge, code-group)
        """
        self.specs: Dict[str, ComponentSpec] = {}
        if builtins:
            self.calloutComponents_register()
            self.layoutComponents_register()
            self.inlineComponents_register()
            self.codeComponents_register()

    def register(self, spec: ComponentSpec) -> None:
        """Register a component specification under its name and aliases"""
        self.specs[spec.name.lower()] = spec
        for alias in spec.aliases:
            self.specs[alias.lower()] = spec

    def handler_register(
        self,
        name: str,
        handler: ComponentHandler,
        description: str = "",
        inline: bool = False,
    ) -> None:
        """Register a host-supplied handler without building a spec by hand"""
        self.register(ComponentSpec(
            name=name,
            category=ComponentCategory.CUSTOM,
            description=description,
            handler=handler,
            inline=inline,
        ))

    def spec_get(self, name: str) -> Optional[ComponentSpec]:
        """Get full component specification by name (any case)"""
        return self.specs.get(name.lower())

    def components_listByCategory(self, category: ComponentCategory) -> List[ComponentSpec]:
        """Get all components in a category (aliases listed once)"""
        seen: List[ComponentSpec] = []
        for spec in self.specs.values():
            if spec.category == category and spec not in seen:
                seen.append(spec)
        return seen

    # Mapping protocol: name -> handler

    def __getitem__(self, name: str) -> ComponentHandler:
        return self.specs[name.lower()].handler

    def __iter__(self) -> Iterator[str]:
        return iter(self.specs)

    def __len__(self) -> int:
        return len(self.specs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.specs

    # Built-in catalog

    def calloutComponents_register(self) -> None:
        """Register alert and callout"""

        def alert_handler(attributes: Dict[str, Any], children: List[RenderNode]) -> RenderNode:
            """Handle ::alert{type} - unknown types fall back to info"""
            alert_type = str(attributes.get("type", "info"))
            if alert_type not in ALERT_TYPES:
                alert_type = "info"
            return RenderNode(tag="alert", props={"type": alert_type}, children=children)

        def callout_handler(attributes: Dict[str, Any], children: List[RenderNode]) -> RenderNode:
            """Handle ::callout{icon title}"""
            props: Dict[str, Any] = {"icon": str(attributes.get("icon", "📌"))}
            if attributes.get("title"):
                props["title"] = str(attributes["title"])
            return RenderNode(tag="callout", props=props, children=children)

        self.register(ComponentSpec(
            name="alert",
            category=ComponentCategory.CALLOUT,
            description="Colored alert box (info, warning, error, success)",
            handler=alert_handler,
            examples=['::alert{type="warning"}\nCareful.\n::'],
        ))

        self.register(ComponentSpec(
            name="callout",
            category=ComponentCategory.CALLOUT,
            description="Highlighted note with an icon and optional title",
            handler=callout_handler,
            examples=['::callout{icon="💡" title="Pro Tip"}\nUse props.\n::'],
        ))

    def layoutComponents_register(self) -> None:
        """Register card"""

        def card_handler(attributes: Dict[str, Any], children: List[RenderNode]) -> RenderNode:
            """Handle ::card{title}"""
            props: Dict[str, Any] = {}
            if attributes.get("title"):
                props["title"] = str(attributes["title"])
            return RenderNode(tag="card", props=props, children=children)

        self.register(ComponentSpec(
            name="card",
            category=ComponentCategory.LAYOUT,
            description="Boxed content with an optional title",
            handler=card_handler,
            examples=['::card{title="Feature Card"}\nDetails.\n::'],
        ))

    def inlineComponents_register(self) -> None:
        """Register badge"""

        def badge_handler(attributes: Dict[str, Any], children: List[RenderNode]) -> RenderNode:
            """Handle :badge[text]{color} - unknown colors fall back to blue"""
            color = str(attributes.get("color", "blue"))
            if color not in BADGE_COLORS:
                color = "blue"
            return RenderNode(tag="badge", props={"color": color, "inline": True}, children=children)

        self.register(ComponentSpec(
            name="badge",
            category=ComponentCategory.INLINE,
            description="Small colored label",
            handler=badge_handler,
            inline=True,
            examples=[':badge[New]{color="green"}'],
        ))

    def codeComponents_register(self) -> None:
        """Register code-group"""

        def code_group_handler(attributes: Dict[str, Any], children: List[RenderNode]) -> RenderNode:
            """Handle ::code-group - frame around one or more code blocks"""
            return RenderNode(tag="code-group", props={"label": "Code"}, children=children)

        self.register(ComponentSpec(
            name="code-group",
            category=ComponentCategory.CODE,
            description="Groups code blocks under one frame",
            handler=code_group_handler,
            aliases=["codegroup"],
            examples=["::code-group\n```py\nprint(1)\n```\n::"],
        ))
