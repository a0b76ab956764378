"""
markdown-it-py plugin for MDC component syntax

Adds the component constructs of the MDC dialect on top of CommonMark:

    ::alert{type="warning"}         container component, closed by a line
    Careful now.                    holding the same number of colons
    ::

    :::card{title="Outer"}          longer fences nest shorter ones
    ::alert
    Inside
    ::
    :::

    ::divider[Section two]{.thin}   single-line leaf component with a label

    Text with :badge[New]{color="green"} inline.

Token stream additions (SyntaxTreeNode types in brackets):
    mdc_block_open / mdc_block_close     [mdc_block]
    mdc_leaf_open / mdc_leaf_close       [mdc_leaf]
    mdc_inline_open / mdc_inline_close   [mdc_inline]

Each opening token carries ``meta = {"name": ..., "attributes": ...}``.

Streaming tolerance: an unclosed container runs to the end of its parent,
unterminated attribute lists and quoted values yield what is there so far.
None of the rules raise on partial input.
"""

import re
import json
from typing import Any, Dict

from markdown_it import MarkdownIt
from markdown_it.helpers import parseLinkLabel
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline


_BLOCK_OPEN_RE = re.compile(
    r"^(?P<fence>:{2,})(?P<name>[A-Za-z][\w-]*)"
    r"(?:\[(?P<label>[^\]]*)\]?)?"
    r"(?:\{(?P<attrs>[^}]*)\}?)?[ \t]*$"
)
_BLOCK_CLOSE_RE = re.compile(r"^(?P<fence>:{2,})[ \t]*$")
_INLINE_NAME_RE = re.compile(r":(?P<name>[A-Za-z][\w-]*)")

_ATTRIBUTE_RE = re.compile(
    r"""
      (?P<klass>\.[\w-]+)
    | (?P<ident>\#[\w-]+)
    | (?P<key>:?[A-Za-z_][\w-]*)
      (?:\s*=\s*(?:
          "(?P<dq>[^"]*)"?
        | '(?P<sq>[^']*)'?
        | (?P<bare>[^\s"'}]+)
      ))?
    """,
    re.VERBOSE,
)


def attributes_parse(raw: str) -> Dict[str, Any]:
    """
    Parse the inside of an MDC attribute list into a dict

    Supported forms:
        key="value"  key='value'  key=value   string values
        flag                                  True
        .name                                 appended to "class"
        #name                                 "id"
        :key="[1, 2]"                         JSON-decoded value

    Values are not validated; that is each component handler's business.
    Unterminated quotes yield the partial value.

    Args:
        raw: Attribute text without the surrounding braces

    Returns:
        Dict of attribute names to values

    Example:
        >>> attributes_parse('type="warning" .wide #main :count="3" open')
        {'type': 'warning', 'class': 'wide', 'id': 'main', 'count': 3, 'open': True}
    """
    attributes: Dict[str, Any] = {}
    pos = 0

    while pos < len(raw):
        if raw[pos].isspace():
            pos += 1
            continue

        match = _ATTRIBUTE_RE.match(raw, pos)
        if not match or match.end() == pos:
            # Stray character (e.g. a lone quote), skip it
            pos += 1
            continue
        pos = match.end()

        if match.group("klass"):
            classes = f"{attributes.get('class', '')} {match.group('klass')[1:]}"
            attributes["class"] = classes.strip()
            continue
        if match.group("ident"):
            attributes["id"] = match.group("ident")[1:]
            continue

        key = match.group("key")
        value: Any = True
        for group in ("dq", "sq", "bare"):
            if match.group(group) is not None:
                value = match.group(group)
                break

        if key.startswith(":"):
            key = key[1:]
            if isinstance(value, str):
                try:
                    value = json.loads(value)
                except ValueError:
                    pass  # not JSON, keep the string

        attributes[key] = value

    return attributes


def componentBlock_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """
    Block rule for ``::name{attrs}`` containers and ``::name[label]{attrs}`` leaves

    A container's body is tokenized recursively up to the first line holding
    exactly the same number of colons; without one the container is closed by
    the end of its parent (or of the document).
    """
    # Indented code, not a component
    if state.sCount[startLine] - state.blkIndent >= 4:
        return False

    start = state.bMarks[startLine] + state.tShift[startLine]
    maximum = state.eMarks[startLine]
    match = _BLOCK_OPEN_RE.match(state.src[start:maximum])
    if not match:
        return False

    if silent:
        return True

    fence = match.group("fence")
    name = match.group("name")
    meta = {"name": name, "attributes": attributes_parse(match.group("attrs") or "")}

    label = match.group("label")
    if label is not None:
        token = state.push("mdc_leaf_open", "div", 1)
        token.markup = fence
        token.block = True
        token.info = name
        token.meta = meta
        token.map = [startLine, startLine + 1]

        token = state.push("inline", "", 0)
        token.content = label.strip()
        token.map = [startLine, startLine + 1]
        token.children = []

        token = state.push("mdc_leaf_close", "div", -1)
        token.markup = fence
        token.block = True

        state.line = startLine + 1
        return True

    # Search for the closing fence
    nextLine = startLine
    closed = False
    while True:
        nextLine += 1
        if nextLine >= endLine:
            # Unclosed container runs to the end of the parent
            break

        start = state.bMarks[nextLine] + state.tShift[nextLine]
        maximum = state.eMarks[nextLine]

        if start < maximum and state.sCount[nextLine] < state.blkIndent:
            # Non-empty line with negative indent ends the parent (e.g. a list item)
            break
        if state.sCount[nextLine] - state.blkIndent >= 4:
            continue

        closing = _BLOCK_CLOSE_RE.match(state.src[start:maximum])
        if closing and len(closing.group("fence")) == len(fence):
            closed = True
            break

    old_parent = state.parentType
    old_line_max = state.lineMax
    state.parentType = "mdc_component"
    # Keep lazy continuation lines from running past the closing fence
    state.lineMax = nextLine

    token = state.push("mdc_block_open", "div", 1)
    token.markup = fence
    token.block = True
    token.info = name
    token.meta = meta
    token.map = [startLine, nextLine]

    state.md.block.tokenize(state, startLine + 1, nextLine)

    token = state.push("mdc_block_close", "div", -1)
    token.markup = fence if closed else ""
    token.block = True

    state.parentType = old_parent
    state.lineMax = old_line_max
    state.line = nextLine + (1 if closed else 0)
    return True


def componentInline_rule(state: StateInline, silent: bool) -> bool:
    """
    Inline rule for ``:name[label]{attrs}`` and ``:name{attrs}``

    Needs a label or a closed attribute list. Once the label is complete an
    unclosed attribute list takes the rest of the inline content, so a
    component does not drop back to text while its attributes stream in.
    A label still being streamed stays plain text.
    """
    pos = state.pos
    if state.src[pos] != ":":
        return False

    # "word:name[...]" and "::name" are not inline components
    if pos > 0 and (state.src[pos - 1].isalnum() or state.src[pos - 1] == ":"):
        return False

    match = _INLINE_NAME_RE.match(state.src, pos, state.posMax)
    if not match:
        return False
    name = match.group("name")
    end = match.end()

    label_start = label_end = -1
    if end < state.posMax and state.src[end] == "[":
        label_end = parseLinkLabel(state, end)
        if label_end < 0:
            return False
        label_start = end + 1
        end = label_end + 1

    attributes: Dict[str, Any] = {}
    if end < state.posMax and state.src[end] == "{":
        close = state.src.find("}", end, state.posMax)
        if close >= 0:
            attributes = attributes_parse(state.src[end + 1:close])
            end = close + 1
        elif label_start >= 0:
            # Attribute list still streaming in, runs to the end of the inline
            attributes = attributes_parse(state.src[end + 1:state.posMax])
            end = state.posMax
        else:
            return False
    elif label_start < 0:
        return False

    if not silent:
        token = state.push("mdc_inline_open", "span", 1)
        token.markup = ":"
        token.info = name
        token.meta = {"name": name, "attributes": attributes}

        if label_start >= 0:
            old_max = state.posMax
            state.pos = label_start
            state.posMax = label_end
            state.md.inline.tokenize(state)
            state.posMax = old_max

        state.push("mdc_inline_close", "span", -1)

    state.pos = end
    return True


def mdc_plugin(md: MarkdownIt) -> None:
    """Register the MDC component rules on a MarkdownIt instance"""
    md.block.ruler.before(
        "fence",
        "mdc_component",
        componentBlock_rule,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
    md.inline.ruler.before("emphasis", "mdc_inline", componentInline_rule)
