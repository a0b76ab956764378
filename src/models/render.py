"""
Render tree models

Structures produced by the DocumentRenderer: keyed render instructions,
the tree that holds them and the Result-style wrapper returned by render().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .document import ParseError


@dataclass(frozen=True)
class RenderNode:
    """
    One render instruction

    The renderer emits exactly one RenderNode per document node. Component
    handlers return RenderNodes too; the renderer stamps the structural key
    on whatever a handler returns.

    Attributes:
        tag: Instruction kind ("p", "h1", "text", "fallback", "alert", ...)
        key: Structural key ("root", "root-0", "root-0-1", ...)
        props: Instruction properties (href, lang, size, component attributes)
        children: Child instructions in document order
        text: Literal string for leaf instructions (text, code)
    """
    tag: str
    key: str = ""
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["RenderNode"] = field(default_factory=list)
    text: Optional[str] = None

    def walk(self) -> Iterator["RenderNode"]:
        """Yield this node and every descendant, depth-first in document order"""
        yield self
        for child in self.children:
            yield from child.walk()

    def text_content(self) -> str:
        """Concatenate the literal text carried by this node and its descendants"""
        if self.text is not None:
            return self.text
        return "".join(child.text_content() for child in self.children)


@dataclass(frozen=True)
class RenderTree:
    """
    Output of one render pass

    Attributes:
        root: Root instruction (key "root")
        frontmatter: Front matter of the rendered prefix
        source_length: Length of the prefix the tree was rendered from
    """
    root: RenderNode
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    source_length: int = 0

    @property
    def blocks(self) -> List[RenderNode]:
        """Top-level instructions"""
        return self.root.children

    def keys(self) -> List[str]:
        return [node.key for node in self.root.walk()]

    def find(self, tag: str) -> List[RenderNode]:
        """Every instruction with the given tag, in document order"""
        return [node for node in self.root.walk() if node.tag == tag]

    def get(self, key: str) -> Optional[RenderNode]:
        for node in self.root.walk():
            if node.key == key:
                return node
        return None


@dataclass(frozen=True)
class RenderResult:
    """
    Result of DocumentRenderer.render(): exactly one of tree / error is set
    """
    tree: Optional[RenderTree] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.tree is not None
