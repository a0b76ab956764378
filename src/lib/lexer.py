"""
Custom Pygments lexer for MDC syntax highlighting

Provides syntax highlighting for MDC sources (markdown plus ::components)
when a document shows MDC code in a ```mdc fenced block.

Token types:
- Name.Tag: Component names (e.g., ::alert, :badge)
- Punctuation: Colon fences, braces and brackets
- Name.Attribute / Literal.String: Component attributes (type="warning")
- Generic.Heading: Markdown headings
- Generic.Strong / Generic.Emph: Bold and italic spans
- String.Backtick: Inline code
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Generic,
)


class MDCLexer(RegexLexer):
    """
    Lexer for MDC markup

    Example:
        ::alert{type="warning"}
        Mind the **gap**
        ::

    Tokens:
        ::alert → Punctuation, Name.Tag
        { → Punctuation, enters 'attributes'
        type → Name.Attribute
        "warning" → Literal.String
    """

    name = 'MDC'
    aliases = ['mdc', 'md-components']
    filenames = ['*.mdc']

    tokens = {
        'root': [
            # HTML comments
            (r'<!--.*?-->', Comment),

            # Front matter / thematic break
            (r'^---[ \t]*$', Keyword.Declaration),

            # Headings
            (r'^#{1,6}[ \t].*$', Generic.Heading),

            # Block component closing fence
            (r'^(:{2,})([ \t]*)$', bygroups(Punctuation, Text)),

            # Block component opening fence
            (r'^(:{2,})([A-Za-z][\w-]*)', bygroups(Punctuation, Name.Tag)),

            # Inline component
            (r'(?<![\w:])(:)([A-Za-z][\w-]*)(?=[\[{])', bygroups(Punctuation, Name.Tag)),

            # Attribute list
            (r'\{', Punctuation, 'attributes'),

            # Component label
            (r'\[', Punctuation, 'label'),

            # Inline code
            (r'`[^`\n]*`', String.Backtick),

            # Bold / italic
            (r'\*\*[^*\n]+\*\*', Generic.Strong),
            (r'\*[^*\n]+\*', Generic.Emph),

            # List markers
            (r'^[ \t]*(?:[-*+]|\d+\.)(?=[ \t])', Keyword),

            # Everything else is text
            (r'[^:{\[`*#<\n-]+', Text),
            (r'\n', Text),
            (r'.', Text),
        ],

        'attributes': [
            (r'\}', Punctuation, '#pop'),
            (r'[.#][\w-]+', Name.Attribute),
            (r'(:?[A-Za-z_][\w-]*)([ \t]*=[ \t]*)("[^"]*"|\'[^\']*\'|[^\s}]+)',
             bygroups(Name.Attribute, Punctuation, Literal.String)),
            (r':?[A-Za-z_][\w-]*', Name.Attribute),
            (r'\s+', Text),
            (r'.', Text),
        ],

        'label': [
            (r'\]', Punctuation, '#pop'),
            (r'[^\]]+', String),
        ],
    }

