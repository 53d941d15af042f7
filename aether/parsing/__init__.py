"""Text parsing utilities for message display.

Transforms model output into a structured block tree the UI can paint.

Responsibilities:
    - Fenced code block extraction
    - Paragraph and list item segmentation
    - Inline styling (bold, italic, code, links)

Output is plain data with no markup, so every renderer escapes text itself.
"""

from aether.parsing.markdown import (
    Block,
    CodeBlock,
    ListItem,
    Paragraph,
    Span,
    parse_inline,
    parse_markdown,
)

__all__ = [
    "Block",
    "CodeBlock",
    "ListItem",
    "Paragraph",
    "Span",
    "parse_inline",
    "parse_markdown",
]
