"""
Parser for MDC (markdown + components) documents

Transforms MDC source text into a DocumentRoot of DocumentNodes.

The parser operates in two phases:
1. Tokenizing: markdown-it-py (CommonMark preset) plus the MDC component
   plugin and the front matter plugin produce a token stream, which is
   folded into a SyntaxTreeNode tree
2. Converting: the syntax tree is walked into DocumentNodes using the mdast
   vocabulary (paragraph, heading, listItem, containerComponent, ...)

Key features:
- Never raises on truncated input: unclosed fences, emphasis and
  components all produce a best-effort tree
- Adjacent text runs are merged into single text nodes
- YAML front matter is exposed separately from the body
- Line number tracking from token maps

Example:
    >>> root = Parser().parse("# Hi\\n\\nHello **world**")
    >>> [child.type for child in root.body.children]
    ['heading', 'paragraph']
"""

import re
from typing import Any, Dict, List, Optional

import yaml
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.front_matter import front_matter_plugin

from ..config import appsettings
from ..models.document import DocumentNode, DocumentRoot, NodeKind, ParseError
from .mdc import mdc_plugin
from .log import LOG


# Front matter counts as closed once a second "---" line follows the opening one
_FRONTMATTER_CLOSED_RE = re.compile(r"\A---[ \t]*\n(?:.*\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)

# Syntax tree node types that map one-to-one onto container kinds
_CONTAINER_TYPES: Dict[str, NodeKind] = {
    "paragraph": NodeKind.PARAGRAPH,
    "strong": NodeKind.STRONG,
    "em": NodeKind.EMPHASIS,
    "list_item": NodeKind.LIST_ITEM,
    "blockquote": NodeKind.BLOCKQUOTE,
}

_COMPONENT_TYPES: Dict[str, NodeKind] = {
    "mdc_block": NodeKind.CONTAINER_COMPONENT,
    "mdc_leaf": NodeKind.LEAF_COMPONENT,
    "mdc_inline": NodeKind.TEXT_COMPONENT,
}


class Parser:
    """
    Parser for MDC documents

    Handles:
    - CommonMark blocks and inlines
    - Block, leaf and inline components with attributes
    - YAML front matter
    - Truncated input (every prefix of a document parses)

    A Parser is stateless between calls, so one instance can parse every
    revealed prefix of a stream.
    """

    def __init__(self, preset: Optional[str] = None):
        """
        Initialize parser and build the markdown-it pipeline

        Args:
            preset: markdown-it-py preset name (defaults to settings.markdown_preset)
        """
        self.preset = preset or appsettings.markdown_preset
        self.md = (
            MarkdownIt(self.preset)
            .use(front_matter_plugin)
            .use(mdc_plugin)
        )

    def parse(self, text: str) -> DocumentRoot:
        """
        Parse source text into a DocumentRoot

        Main entry point for parsing. Returns a root node whose children are
        the top-level blocks of the document.

        Returns:
            DocumentRoot with body (type "root") and front matter.
            An empty or whitespace-only source gives a root without children.

        Raises:
            ParseError: If a closed front matter block is not a valid YAML mapping

        Example:
            >>> root = Parser().parse("::alert{type=\\"info\\"}\\nHi\\n::")
            >>> root.body.children[0].name
            'alert'
        """
        tokens = self.md.parse(text)
        tree = SyntaxTreeNode(tokens)
        LOG(f"Tokenized {len(text)} characters into {len(tokens)} tokens", level=3)

        frontmatter: Dict[str, Any] = {}
        blocks: List[SyntaxTreeNode] = []
        for child in tree.children:
            if child.type == "front_matter":
                frontmatter = self.frontmatter_load(child.content, text)
            else:
                blocks.append(child)

        body = DocumentNode(
            type=NodeKind.ROOT.value,
            children=self.children_convert(blocks),
            line_number=1,
        )
        return DocumentRoot(body=body, frontmatter=frontmatter, source=text)

    def frontmatter_load(self, content: str, text: str) -> Dict[str, Any]:
        """
        Load YAML front matter

        An unterminated block (still streaming in) yields an empty mapping
        whatever it holds so far; a closed block must be a valid YAML mapping.

        Args:
            content: Raw YAML between the markers
            text: Whole source, used to tell closed blocks from open ones

        Returns:
            Front matter mapping

        Raises:
            ParseError: If a closed block is not valid YAML or not a mapping
        """
        closed = _FRONTMATTER_CLOSED_RE.match(text) is not None
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            if not closed:
                LOG(f"Front matter still incomplete: {e}", level=3)
                return {}
            raise ParseError(f"Invalid front matter: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            if not closed:
                return {}
            raise ParseError(f"Front matter must be a mapping, got {type(data).__name__}")
        return data

    def children_convert(self, nodes: List[SyntaxTreeNode]) -> List[DocumentNode]:
        """
        Convert a sequence of syntax tree nodes, merging adjacent text runs

        Empty text runs are dropped. ``inline`` containers are flattened into their parent so paragraphs
        and headings hold their inline content directly.
        """
        converted: List[DocumentNode] = []
        for node in nodes:
            if node.type == "inline":
                produced = self.children_convert(node.children)
            else:
                produced = [self.node_convert(node)]

            for child in produced:
                # Emphasis delimiters can leave empty text runs behind
                if child.type == NodeKind.TEXT.value and not child.value:
                    continue
                previous = converted[-1] if converted else None
                if (
                    child.type == NodeKind.TEXT.value
                    and previous is not None
                    and previous.type == NodeKind.TEXT.value
                ):
                    converted[-1] = DocumentNode(
                        type=NodeKind.TEXT.value,
                        value=(previous.value or "") + (child.value or ""),
                        line_number=previous.line_number,
                    )
                else:
                    converted.append(child)
        return converted

    def node_convert(self, node: SyntaxTreeNode) -> DocumentNode:
        """
        Convert a single syntax tree node to a DocumentNode

        Node types outside the vocabulary keep their markdown-it type name
        (e.g. "image", "html_block") and are left to passthrough rendering.
        """
        line_number = node.map[0] + 1 if node.map else None
        node_type = node.type

        if node_type == "text":
            return DocumentNode(type=NodeKind.TEXT.value, value=node.content, line_number=line_number)

        if node_type in ("softbreak", "hardbreak"):
            return DocumentNode(type=NodeKind.TEXT.value, value="\n", line_number=line_number)

        if node_type in _CONTAINER_TYPES:
            return DocumentNode(
                type=_CONTAINER_TYPES[node_type].value,
                children=self.children_convert(node.children),
                line_number=line_number,
            )

        if node_type == "heading":
            return DocumentNode(
                type=NodeKind.HEADING.value,
                depth=int(node.tag[1:]),
                children=self.children_convert(node.children),
                line_number=line_number,
            )

        if node_type in ("fence", "code_block"):
            value = node.content
            if value.endswith("\n"):
                value = value[:-1]
            info = node.info.strip() if node.info else ""
            return DocumentNode(
                type=NodeKind.CODE.value,
                value=value,
                lang=info.split()[0] if info else None,
                line_number=line_number,
            )

        if node_type == "code_inline":
            return DocumentNode(type=NodeKind.INLINE_CODE.value, value=node.content, line_number=line_number)

        if node_type == "link":
            return DocumentNode(
                type=NodeKind.LINK.value,
                url=str(node.attrs.get("href", "")),
                children=self.children_convert(node.children),
                line_number=line_number,
            )

        if node_type in ("bullet_list", "ordered_list"):
            return DocumentNode(
                type=NodeKind.LIST.value,
                ordered=node_type == "ordered_list",
                children=self.children_convert(node.children),
                line_number=line_number,
            )

        if node_type == "hr":
            return DocumentNode(type=NodeKind.THEMATIC_BREAK.value, line_number=line_number)

        if node_type in _COMPONENT_TYPES:
            meta = node.meta or {}
            return DocumentNode(
                type=_COMPONENT_TYPES[node_type].value,
                name=meta.get("name", node.info),
                attributes=dict(meta.get("attributes", {})),
                children=self.children_convert(node.children),
                line_number=line_number,
            )

        LOG(f"Passing through unmapped node type '{node_type}'", level=3)
        return DocumentNode(
            type=node_type,
            value=node.content or None,
            children=self.children_convert(node.children),
            line_number=line_number,
        )


def components_extract(node: DocumentNode) -> List[DocumentNode]:
    """
    Collect every component node under (and including) ``node``

    Args:
        node: Node to search, usually DocumentRoot.body

    Returns:
        Component nodes in document order (parents before their children)
    """
    found: List[DocumentNode] = []

    def traverse(current: DocumentNode) -> None:
        if current.is_component:
            found.append(current)
        for child in current.children:
            traverse(child)

    traverse(node)
    return found


_default_parser: Optional[Parser] = None


def parse(text: str) -> DocumentRoot:
    """Parse ``text`` with a shared default Parser"""
    global _default_parser
    if _default_parser is None:
        _default_parser = Parser()
    return _default_parser.parse(text)
