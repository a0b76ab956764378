"""
Shared fixtures: a demo document exercising every construct the renderer knows
"""

import pytest


DEMO_SOURCE = '''# Welcome to Streaming MDC

This demo shows **markdown** with *custom* components.

## Custom Components

::alert{type="info"}
This is an info alert using the MDC block component syntax.
::

::alert{type="warning"}
Warning! This demonstrates the warning style alert.
::

::callout{icon="*" title="Pro Tip"}
You can use props to customize component behavior. The `icon` and `title` props are passed along.
::

::card{title="Feature Card"}
Cards are great for highlighting important information or features.

- Supports **markdown** inside
- Renders children properly
- Fully customizable
::

## Inline Components

You can also use inline components like :badge[New]{color="green"} or :badge[Beta]{color="yellow"}.

## Code Example

```python
from mdcstream import DocumentRenderer

tree = DocumentRenderer().render(text).tree
```

## Regular Markdown

1. First item
2. Second item
3. Third item

> Blockquotes are also supported.

***

Learn more about [MDC](https://example.com/mdc) and ::widget that nobody registered.

::widget{size=3}
Still visible.
::
'''


@pytest.fixture
def demo_source() -> str:
    return DEMO_SOURCE
