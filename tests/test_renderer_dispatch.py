"""
Renderer dispatch tests

Tests the mapping from document node kinds to render instructions, the
passthrough for unknown kinds, and how parser failures are reported.
"""

import asyncio

import pytest

from mdcstream.lib.renderer import DocumentRenderer
from mdcstream.models import DocumentNode, DocumentRoot, NodeKind, ParseError, RenderNode


@pytest.fixture
def renderer():
    return DocumentRenderer()


def tree_of(renderer, source):
    result = renderer.render(source)
    assert result.ok
    return result.tree


class TestMarkdownDispatch:
    """Test every markdown kind in the vocabulary"""

    def test_heading_and_paragraph(self, renderer):
        tree = tree_of(renderer, "# Hi\n\nHello **world**")
        heading, paragraph = tree.blocks

        assert heading.tag == "h1"
        assert heading.props == {"size": "xx-large"}
        assert heading.children[0].tag == "text"
        assert heading.children[0].text == "Hi"

        assert paragraph.tag == "p"
        assert [child.tag for child in paragraph.children] == ["text", "strong"]
        assert paragraph.children[1].text_content() == "world"

    @pytest.mark.parametrize("level,size", [
        (1, "xx-large"),
        (2, "x-large"),
        (3, "large"),
        (4, "medium"),
        (5, "small"),
        (6, "x-small"),
    ])
    def test_heading_sizes(self, renderer, level, size):
        heading = tree_of(renderer, "#" * level + " T").blocks[0]
        assert heading.tag == f"h{level}"
        assert heading.props["size"] == size

    def test_heading_depth_clamped(self, renderer):
        """Out-of-range depths render at the nearest valid level"""
        document = DocumentRoot(body=DocumentNode(type="root", children=[
            DocumentNode(type="heading", depth=9, children=[DocumentNode(type="text", value="Deep")]),
        ]))
        tree = renderer.document_render(document)
        assert tree.blocks[0].tag == "h6"

    def test_code_block(self, renderer):
        code = tree_of(renderer, "```python\nprint(1)\n```").blocks[0]
        assert code.tag == "codeblock"
        assert code.props == {"lang": "python"}
        assert code.text == "print(1)"

    def test_inline_code(self, renderer):
        code = tree_of(renderer, "`x`").blocks[0].children[0]
        assert code.tag == "code"
        assert code.text == "x"

    def test_emphasis(self, renderer):
        em = tree_of(renderer, "*soft*").blocks[0].children[0]
        assert em.tag == "em"

    def test_link_opens_in_new_context(self, renderer):
        link = tree_of(renderer, "[site](https://example.com)").blocks[0].children[0]
        assert link.tag == "a"
        assert link.props == {
            "href": "https://example.com",
            "target": "_blank",
            "rel": "noopener noreferrer",
        }
        assert link.text_content() == "site"

    def test_lists(self, renderer):
        tree = tree_of(renderer, "- a\n- b\n\n1. one")
        bullets, numbers = tree.blocks
        assert bullets.tag == "ul"
        assert [item.tag for item in bullets.children] == ["li", "li"]
        assert numbers.tag == "ol"

    def test_blockquote_and_break(self, renderer):
        tree = tree_of(renderer, "> q\n\n***")
        assert [block.tag for block in tree.blocks] == ["blockquote", "hr"]
        assert tree.blocks[1].children == []

    def test_text_is_not_escaped(self, renderer):
        """Escaping belongs to the display layer"""
        text = tree_of(renderer, "a < b & c").blocks[0].children[0]
        assert text.text == "a < b & c"

    def test_root(self, renderer):
        tree = tree_of(renderer, "x")
        assert tree.root.tag == "fragment"
        assert tree.root.key == "root"

    def test_empty_document(self, renderer):
        tree = tree_of(renderer, "")
        assert tree.blocks == []
        assert tree.source_length == 0

    def test_dispatch_is_total(self, renderer):
        """Every kind in the vocabulary has a handler"""
        assert set(renderer.dispatch) == set(NodeKind)


class TestUnknownKinds:
    """Test passthrough of kinds outside the vocabulary"""

    def test_unknown_kind_renders_children(self, renderer):
        document = DocumentRoot(body=DocumentNode(type="root", children=[
            DocumentNode(type="mystery", children=[DocumentNode(type="text", value="kept")]),
        ]))
        tree = renderer.document_render(document)
        block = tree.blocks[0]

        assert block.tag == "fragment"
        assert block.key == "root-0"
        assert block.children[0].text == "kept"

    def test_image_passthrough(self, renderer):
        image = tree_of(renderer, "![alt text](pic.png)").blocks[0].children[0]
        assert image.tag == "fragment"
        assert image.text_content() == "alt text"


class TestParserFailures:
    """Test that parser failures come back as values"""

    def test_parse_error_reported(self):
        def failing(text):
            raise ParseError("broken input")

        result = DocumentRenderer(parser=failing).render("anything")
        assert not result.ok
        assert result.tree is None
        assert result.error.message == "broken input"

    def test_unexpected_exception_wrapped(self):
        def crashing(text):
            raise RuntimeError("boom")

        result = DocumentRenderer(parser=crashing).render("anything")
        assert isinstance(result.error, ParseError)
        assert "boom" in result.error.message

    def test_failure_then_success(self):
        """A failure does not poison later renders"""
        def picky(text):
            if "!" in text:
                raise ParseError("no shouting")
            return DocumentRoot(body=DocumentNode(type="root"), source=text)

        renderer = DocumentRenderer(parser=picky)
        assert not renderer.render("hey!").ok
        assert renderer.render("hey").ok

    def test_async_parser_in_sync_render(self):
        async def parser(text):
            return DocumentRoot(body=DocumentNode(type="root"))

        result = DocumentRenderer(parser=parser).render("x")
        assert not result.ok
        assert "render_async" in result.error.message

    def test_render_async(self):
        async def parser(text):
            return DocumentRoot(body=DocumentNode(type="root", children=[
                DocumentNode(type="paragraph", children=[DocumentNode(type="text", value=text)]),
            ]))

        result = asyncio.run(DocumentRenderer(parser=parser).render_async("hello"))
        assert result.ok
        assert result.tree.blocks[0].text_content() == "hello"

    def test_render_async_with_sync_parser(self):
        result = asyncio.run(DocumentRenderer().render_async("# Hi"))
        assert result.tree.blocks[0].tag == "h1"


class TestRenderNodeHelpers:
    """Test tree navigation helpers"""

    def test_find_and_get(self, renderer):
        tree = tree_of(renderer, "# A\n\nB **C**")
        assert [node.key for node in tree.find("strong")] == ["root-1-1"]
        assert tree.get("root-0").tag == "h1"
        assert tree.get("root-9") is None

    def test_walk_order(self):
        node = RenderNode(tag="p", key="k", children=[
            RenderNode(tag="text", key="k-0", text="a"),
            RenderNode(tag="text", key="k-1", text="b"),
        ])
        assert [n.key for n in node.walk()] == ["k", "k-0", "k-1"]
        assert node.text_content() == "ab"
