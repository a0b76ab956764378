"""
Emitter for render trees to HTML

Transforms a RenderTree into an HTML fragment or a standalone document.
This is the display layer: text is escaped here, never in the renderer.
"""

import html
from typing import Any, Dict, List, Optional

from pygments import highlight
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from ..config import appsettings
from ..models.render import RenderNode, RenderTree, RenderResult
from .lexer import MDCLexer
from .log import LOG


# Tags emitted as the same HTML element, children inside
_ELEMENT_TAGS = frozenset({
    "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "strong", "em", "ul", "ol", "li", "blockquote",
})

# Component props shown as a header line rather than as data-* attributes
_HEADER_PROPS = ("icon", "title", "label")

# Component props that pick the variant class (mdc-alert-warning, mdc-badge-green)
_VARIANT_PROPS = ("type", "color")


class HtmlEmitter:
    """
    Emits HTML from render trees

    Responsibilities:
    - Map render instructions to HTML elements
    - Escape text and attribute values
    - Highlight code blocks with Pygments
    - Emit loading / error placeholders for hosts
    """

    def __init__(self, pygments_style: Optional[str] = None, class_prefix: str = "mdc") -> None:
        """
        Initialize emitter

        Args:
            pygments_style: Pygments style for code blocks (defaults to settings)
            class_prefix: Prefix of the CSS classes put on component elements
        """
        self.pygments_style = pygments_style or appsettings.pygments_style
        self.class_prefix = class_prefix

    def emit(self, tree: RenderTree) -> str:
        """Emit the HTML fragment for a whole tree"""
        LOG(f"Emitting HTML for {len(tree.blocks)} blocks", level=3)
        return f'<div class="{self.class_prefix}-content">{self.node_emit(tree.root)}</div>'

    def result_emit(self, result: Optional[RenderResult]) -> str:
        """
        Emit what a host shows for a render result

        No result (or one without a tree) gives the loading indicator; a
        failed render gives the parse error message in place of the content.
        """
        if result is not None and result.error is not None:
            message = html.escape(result.error.message)
            return f'<div class="{self.class_prefix}-error">Error parsing MDC: {message}</div>'
        if result is None or result.tree is None:
            return f'<div class="{self.class_prefix}-loading">Loading...</div>'
        return self.emit(result.tree)

    def children_emit(self, node: RenderNode) -> str:
        return "".join(self.node_emit(child) for child in node.children)

    def node_emit(self, node: RenderNode) -> str:
        """Emit a single instruction and its subtree"""
        tag = node.tag

        if tag == "text":
            return html.escape(node.text or "", quote=False)

        if tag == "fragment":
            return self.children_emit(node)

        if tag in _ELEMENT_TAGS:
            return f"<{tag}>{self.children_emit(node)}</{tag}>"

        if tag == "a":
            attrs = self.attributes_format({
                "href": node.props.get("href", ""),
                "target": node.props.get("target"),
                "rel": node.props.get("rel"),
            })
            return f"<a{attrs}>{self.children_emit(node)}</a>"

        if tag == "hr":
            return "<hr />"

        if tag == "code":
            return f"<code>{html.escape(node.text or '', quote=False)}</code>"

        if tag == "codeblock":
            return self.codeblock_highlight(node.text or "", node.props.get("lang"))

        if tag == "fallback":
            label = html.escape(str(node.props.get("label", "")), quote=False)
            return (
                f'<div class="{self.class_prefix}-fallback">'
                f'<span class="{self.class_prefix}-fallback-label">{label}</span>'
                f"<div>{self.children_emit(node)}</div>"
                f"</div>"
            )

        return self.component_emit(node)

    def component_emit(self, node: RenderNode) -> str:
        """
        Emit a component instruction generically

        ``<div class="mdc-alert mdc-alert-warning">`` for blocks,
        ``<span ...>`` when the handler marked the output inline.
        """
        element = "span" if node.props.get("inline") else "div"
        classes = [f"{self.class_prefix}-{node.tag}"]
        for prop in _VARIANT_PROPS:
            if prop in node.props:
                classes.append(f"{self.class_prefix}-{node.tag}-{node.props[prop]}")

        data: Dict[str, Any] = {"class": " ".join(classes)}
        for prop, value in node.props.items():
            if prop in _HEADER_PROPS or prop in _VARIANT_PROPS or prop == "inline":
                continue
            if isinstance(value, (str, int, float, bool)):
                data[f"data-{prop}"] = value

        header = "".join(
            f'<span class="{self.class_prefix}-{prop}">{html.escape(str(node.props[prop]), quote=False)}</span>'
            for prop in _HEADER_PROPS
            if node.props.get(prop)
        )
        return f"<{element}{self.attributes_format(data)}>{header}{self.children_emit(node)}</{element}>"

    def attributes_format(self, attributes: Dict[str, Any]) -> str:
        parts: List[str] = []
        for name, value in attributes.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
        return "".join(parts)

    def codeblock_highlight(self, code: str, language: Optional[str]) -> str:
        """
        Highlight a code block with Pygments

        Unknown or missing languages fall back to plain text; "mdc" sources
        use the bundled MDC lexer.
        """
        lexer: Lexer
        name = (language or "text").lower()
        try:
            if name in ("mdc", "md-components"):
                lexer = MDCLexer()
            else:
                lexer = get_lexer_by_name(name)
        except ClassNotFound:
            LOG(f"No Pygments lexer for '{name}', using plain text", level=3)
            lexer = TextLexer()

        formatter = HtmlFormatter(style=self.pygments_style, noclasses=True)
        return highlight(code, lexer, formatter)

    def document_build(self, tree: RenderTree, title: Optional[str] = None) -> str:
        """
        Build a complete HTML document around a tree

        Args:
            tree: Rendered tree
            title: Page title, defaults to the front matter "title" if any

        Returns:
            Complete HTML document
        """
        page_title = title or str(tree.frontmatter.get("title", "mdcstream"))
        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html.escape(page_title)}</title>
</head>
<body>
    {self.emit(tree)}
</body>
</html>
"""
