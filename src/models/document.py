"""
Document AST models

Type-safe structures for the parsed MDC document: the closed vocabulary of
node kinds, the node dataclass itself, the parse result wrapper and the
only error kind the core reports.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class NodeKind(str, Enum):
    """
    Closed vocabulary of document node kinds

    Values follow the mdast naming used by the MDC ecosystem, so a node's
    ``type`` string can be resolved with ``NodeKind.kind_resolve()``.
    """
    ROOT = "root"
    TEXT = "text"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE = "code"
    INLINE_CODE = "inlineCode"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    LINK = "link"
    LIST = "list"
    LIST_ITEM = "listItem"
    BLOCKQUOTE = "blockquote"
    THEMATIC_BREAK = "thematicBreak"
    CONTAINER_COMPONENT = "containerComponent"   # ::name{} ... ::
    LEAF_COMPONENT = "leafComponent"             # ::name[label]{}
    TEXT_COMPONENT = "textComponent"             # :name[label]{}

    @classmethod
    def kind_resolve(cls, node_type: str) -> Optional["NodeKind"]:
        """Map a node type string to its kind, None for kinds outside the vocabulary"""
        try:
            return cls(node_type)
        except ValueError:
            return None


COMPONENT_KINDS = frozenset({
    NodeKind.CONTAINER_COMPONENT,
    NodeKind.LEAF_COMPONENT,
    NodeKind.TEXT_COMPONENT,
})


@dataclass
class DocumentNode:
    """
    Represents a node in the document AST

    One dataclass covers every kind; only the fields relevant to ``type``
    are populated. Nodes are built fresh by the parser for every revealed
    prefix and are never mutated afterwards.

    Attributes:
        type: Node kind string (a NodeKind value, or any other string the
              parser emits for constructs outside the vocabulary)
        children: Ordered child nodes, in source order
        value: Literal text (text, code, inlineCode)
        depth: Heading level (heading)
        lang: Info-string language (code)
        url: Link target (link)
        ordered: Whether a list is numbered (list)
        name: Component name as written in the source (components)
        attributes: Component attributes, values left untyped (components)
        line_number: 1-based source line where the node starts, when known

    Example:
        For source "# Hi":
        DocumentNode(
            type="heading",
            depth=1,
            children=[DocumentNode(type="text", value="Hi")],
            line_number=1
        )
    """
    type: str
    children: List["DocumentNode"] = field(default_factory=list)
    value: Optional[str] = None
    depth: Optional[int] = None
    lang: Optional[str] = None
    url: Optional[str] = None
    ordered: bool = False
    name: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    line_number: Optional[int] = None

    @property
    def kind(self) -> Optional[NodeKind]:
        return NodeKind.kind_resolve(self.type)

    @property
    def is_component(self) -> bool:
        return self.kind in COMPONENT_KINDS

    def text_content(self) -> str:
        """Concatenate the literal text of this node and all descendants"""
        if self.value is not None and not self.children:
            return self.value
        return "".join(child.text_content() for child in self.children)


@dataclass
class DocumentRoot:
    """
    Result of parsing one revealed prefix

    Attributes:
        body: Root node (type "root"), children are the top-level blocks
        frontmatter: Parsed YAML front matter, empty when absent or unterminated
        source: The exact text that was parsed
    """
    body: DocumentNode
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    source: str = ""


class ParseError(Exception):
    """Raised by a parser that cannot recover from malformed input"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
