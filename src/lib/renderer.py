"""
Renderer for MDC document trees

Transforms a parsed DocumentRoot into a RenderTree of keyed render
instructions.

Every revealed prefix is parsed from scratch and walked again. Keys are
structural paths ("root", "root-0", "root-0-1", ...), so a node keeps its
key across ticks as long as the shape of the document before it does not
change; new trailing content only adds keys.
"""

import inspect
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from ..config import appsettings
from ..models.document import DocumentNode, DocumentRoot, NodeKind, ParseError
from ..models.render import RenderNode, RenderTree, RenderResult
from .components import ComponentRegistry
from .parser import Parser
from .log import LOG


ParseFunction = Callable[[str], Union[DocumentRoot, Awaitable[DocumentRoot]]]

# Heading depth -> size tier
HEADING_SIZES: Dict[int, str] = {
    1: "xx-large",
    2: "x-large",
    3: "large",
    4: "medium",
    5: "small",
    6: "x-small",
}

LINK_PROPS: Dict[str, str] = {"target": "_blank", "rel": "noopener noreferrer"}


class DocumentRenderer:
    """
    Renders document trees to keyed render instructions

    Responsibilities:
    - Parse a prefix with the configured parser, reporting failures as values
    - Dispatch on node kind (total over the NodeKind vocabulary)
    - Dispatch components by lower-cased name through a registry
    - Fall back to a labeled placeholder for unregistered components
    - Pass unknown node kinds through as plain fragments
    """

    def __init__(
        self,
        parser: Optional[ParseFunction] = None,
        registry: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Initialize renderer

        Args:
            parser: parse(text) -> DocumentRoot; defaults to Parser().parse
            registry: Component registry used when render() is given none;
                      defaults to the built-in ComponentRegistry
        """
        self.parser: ParseFunction = parser or Parser().parse
        self.registry: Mapping[str, Any] = registry if registry is not None else ComponentRegistry()

        self.dispatch: Dict[NodeKind, Callable[[DocumentNode, str, Mapping[str, Any]], RenderNode]] = {
            NodeKind.ROOT: self.passthrough_render,
            NodeKind.TEXT: self.text_render,
            NodeKind.PARAGRAPH: self.wrapper_make("p"),
            NodeKind.HEADING: self.heading_render,
            NodeKind.CODE: self.code_render,
            NodeKind.INLINE_CODE: self.inlineCode_render,
            NodeKind.STRONG: self.wrapper_make("strong"),
            NodeKind.EMPHASIS: self.wrapper_make("em"),
            NodeKind.LINK: self.link_render,
            NodeKind.LIST: self.list_render,
            NodeKind.LIST_ITEM: self.wrapper_make("li"),
            NodeKind.BLOCKQUOTE: self.wrapper_make("blockquote"),
            NodeKind.THEMATIC_BREAK: self.thematicBreak_render,
            NodeKind.CONTAINER_COMPONENT: self.component_render,
            NodeKind.LEAF_COMPONENT: self.component_render,
            NodeKind.TEXT_COMPONENT: self.component_render,
        }

    def render(self, prefix: str, registry: Optional[Mapping[str, Any]] = None) -> RenderResult:
        """
        Parse ``prefix`` and render it

        Never raises for parser failures: they come back as
        ``RenderResult(error=ParseError(...))`` with no tree.

        Args:
            prefix: Revealed document text (any truncation of a document)
            registry: Component registry for this call (defaults to self.registry)

        Returns:
            RenderResult holding either the tree or the parse error
        """
        try:
            document = self.parser(prefix)
            if inspect.isawaitable(document):
                if inspect.iscoroutine(document):
                    document.close()
                raise TypeError("Parser returned an awaitable; use render_async()")
        except ParseError as e:
            LOG(f"Parse failed at length {len(prefix)}: {e.message}", level=2)
            return RenderResult(error=e)
        except Exception as e:
            LOG(f"Parser raised {type(e).__name__} at length {len(prefix)}: {e}", level=2)
            return RenderResult(error=ParseError(str(e)))

        return RenderResult(tree=self.document_render(document, prefix, registry))

    async def render_async(self, prefix: str, registry: Optional[Mapping[str, Any]] = None) -> RenderResult:
        """Same as render(), for parsers that are coroutines"""
        try:
            document = self.parser(prefix)
            if inspect.isawaitable(document):
                document = await document
        except ParseError as e:
            LOG(f"Parse failed at length {len(prefix)}: {e.message}", level=2)
            return RenderResult(error=e)
        except Exception as e:
            LOG(f"Parser raised {type(e).__name__} at length {len(prefix)}: {e}", level=2)
            return RenderResult(error=ParseError(str(e)))

        return RenderResult(tree=self.document_render(document, prefix, registry))

    def document_render(
        self,
        document: DocumentRoot,
        prefix: str = "",
        registry: Optional[Mapping[str, Any]] = None,
    ) -> RenderTree:
        """Walk an already parsed document into a RenderTree"""
        active = registry if registry is not None else self.registry
        root = self.node_render(document.body, appsettings.key_root, active)
        LOG(f"Rendered {len(root.children)} top-level blocks from {len(prefix)} characters", level=3)
        return RenderTree(root=root, frontmatter=dict(document.frontmatter), source_length=len(prefix))

    def node_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        """
        Render a single node (and its subtree) under ``key``

        Node kinds outside the vocabulary are rendered by passthrough_render.
        """
        kind = node.kind
        if kind is None:
            LOG(f"Unknown node kind '{node.type}' at {key}, passing children through", level=3)
            return self.passthrough_render(node, key, registry)
        return self.dispatch[kind](node, key, registry)

    def children_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> List[RenderNode]:
        return [
            self.node_render(child, appsettings.key_make(key, index), registry)
            for index, child in enumerate(node.children)
        ]

    def wrapper_make(self, tag: str) -> Callable[[DocumentNode, str, Mapping[str, Any]], RenderNode]:
        """Factory for plain containers that wrap their children in ``tag``"""
        def wrapper(node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
            return RenderNode(tag=tag, key=key, children=self.children_render(node, key, registry))
        return wrapper

    def passthrough_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        """Children in sequence, no wrapping semantics"""
        return RenderNode(tag="fragment", key=key, children=self.children_render(node, key, registry))

    def text_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        # Literal value, escaping belongs to whoever displays it
        return RenderNode(tag="text", key=key, text=node.value or "")

    def heading_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        depth = min(max(node.depth or 1, 1), 6)
        return RenderNode(
            tag=f"h{depth}",
            key=key,
            props={"size": HEADING_SIZES[depth]},
            children=self.children_render(node, key, registry),
        )

    def code_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        return RenderNode(tag="codeblock", key=key, props={"lang": node.lang}, text=node.value or "")

    def inlineCode_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        return RenderNode(tag="code", key=key, text=node.value or "")

    def link_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        return RenderNode(
            tag="a",
            key=key,
            props={"href": node.url or "", **LINK_PROPS},
            children=self.children_render(node, key, registry),
        )

    def list_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        return RenderNode(
            tag="ol" if node.ordered else "ul",
            key=key,
            children=self.children_render(node, key, registry),
        )

    def thematicBreak_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        return RenderNode(tag="hr", key=key)

    def component_render(self, node: DocumentNode, key: str, registry: Mapping[str, Any]) -> RenderNode:
        """
        Render a component through the registry, or as a fallback placeholder

        The handler gets the attributes exactly as parsed and the rendered
        children; whatever it returns is stamped with ``key``.
        """
        name = node.name or ""
        children = self.children_render(node, key, registry)
        handler = registry.get(name.lower())

        if handler is None:
            LOG(f"No handler for component '{name}' at {key}, rendering fallback", level=2)
            return RenderNode(
                tag="fallback",
                key=key,
                props={"name": name, "label": f"{appsettings.fallback_label}: {name}"},
                children=children,
            )

        result = handler(dict(node.attributes), children)
        if isinstance(result, RenderNode):
            return replace(result, key=key)
        # Opaque handler output, carried as-is
        return RenderNode(tag="component", key=key, props={"name": name, "output": result})
