"""
Render key tests

Keys are structural paths, so a host can reconcile the trees of successive
prefixes: content that is already on screen keeps its key while the
document grows behind it.
"""

import pytest

from mdcstream.lib.renderer import DocumentRenderer


@pytest.fixture
def renderer():
    return DocumentRenderer()


def keys_of(renderer, source):
    return renderer.render(source).tree.keys()


class TestKeyShape:
    """Test how keys are built"""

    def test_keys_are_paths(self, renderer):
        keys = keys_of(renderer, "# Hi\n\nHello **world**")
        assert keys == [
            "root",
            "root-0", "root-0-0",
            "root-1", "root-1-0", "root-1-1", "root-1-1-0",
        ]

    def test_keys_unique_among_siblings(self, renderer, demo_source):
        tree = renderer.render(demo_source).tree
        keys = tree.keys()
        assert len(keys) == len(set(keys))

    def test_component_keys(self, renderer):
        keys = keys_of(renderer, ':::card\n::alert\nA :badge[B]\n::\n:::')
        assert "root-0-0-0-1" in keys

    def test_custom_separator(self, renderer, monkeypatch):
        from mdcstream.config import appsettings
        monkeypatch.setattr(appsettings, "key_separator", ".")
        assert keys_of(renderer, "Hi") == ["root", "root.0", "root.0.0"]


class TestKeyStability:
    """Test that growing a prefix keeps earlier keys"""

    @pytest.mark.parametrize("shorter,longer", [
        ("# Hi\n\nHello **wor", "# Hi\n\nHello **world**"),
        ("# Hi", "# Hi\n\nMore"),
        ('::alert{type="warning"}\nTe', '::alert{type="warning"}\nText\n::'),
        ("- one\n- tw", "- one\n- two\n- three"),
        ("Text :badge[New]", 'Text :badge[New]{color="green"} and more'),
        ("```py\nprint(", "```py\nprint(1)\n```\n\nAfter"),
    ])
    def test_prefix_keys_survive(self, renderer, shorter, longer):
        before = keys_of(renderer, shorter)
        after = set(keys_of(renderer, longer))
        assert set(before) <= after

    @pytest.mark.parametrize("source", [
        'Text :badge[New]{color="green"} more',
        'Try :badge[New]{color="green"} or :badge[Beta]{color="yellow"}.',
        "Hello **world** and *more*",
    ])
    def test_keys_kept_on_every_tick(self, renderer, source):
        """Each prefix keeps all keys of the one before it"""
        previous = set(keys_of(renderer, ""))
        for end in range(1, len(source) + 1):
            keys = set(keys_of(renderer, source[:end]))
            assert previous <= keys, f"keys lost at {source[:end]!r}: {sorted(previous - keys)}"
            previous = keys

    def test_same_key_same_block(self, renderer):
        """Blocks keep their tag as well as their key"""
        short = renderer.render("# Hi\n\nHello").tree
        long = renderer.render("# Hi\n\nHello world\n\n- item").tree
        for key in ("root-0", "root-1"):
            assert short.get(key).tag == long.get(key).tag

    def test_growing_paragraph(self, renderer):
        """Appending text to the last paragraph adds no keys before it"""
        text = "A sentence that keeps on growing"
        previous = None
        for end in range(1, len(text) + 1):
            keys = keys_of(renderer, text[:end])
            if previous is not None:
                assert previous == keys
            previous = keys

    def test_rerender_is_deterministic(self, renderer, demo_source):
        first = renderer.render(demo_source).tree
        second = renderer.render(demo_source).tree
        assert first == second
