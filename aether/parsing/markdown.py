"""Markdown parsing into a typed block tree.

Parsing is pure: text goes in, a list of blocks comes out. Nothing here
produces markup; painting is left to the UI layer.

Supported:
    - Fenced code blocks (an unclosed fence runs to the end, which keeps
      partially streamed code readable)
    - Paragraphs separated by blank lines
    - Unordered (``-``/``*``) and ordered (``1.``) list items
    - Inline bold, italic, code spans and links
"""

import re
from typing import Literal

from pydantic import BaseModel, Field

FENCE_PATTERN = re.compile(r"```([\w+-]*)[ \t]*\n?([\s\S]*?)(?:```|\Z)")
UNORDERED_ITEM = re.compile(r"^\s*[-*]\s+(.*)$")
ORDERED_ITEM = re.compile(r"^\s*(\d+)\.\s+(.*)$")
INLINE_PATTERN = re.compile(
    r"`(?P<code>[^`]+)`"
    r"|\*\*(?P<bold>.+?)\*\*"
    r"|__(?P<bold_alt>.+?)__"
    r"|\[(?P<label>[^\]]+)\]\((?P<href>[^)\s]+)\)"
    r"|\*(?P<italic>[^*\s][^*]*)\*"
    r"|(?<!\w)_(?P<italic_alt>[^_]+)_(?!\w)"
)


class Span(BaseModel):
    """An inline run of text with one style."""

    kind: Literal["text", "bold", "italic", "code", "link"] = "text"
    text: str
    href: str | None = None


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    spans: list[Span] = Field(default_factory=list)


class CodeBlock(BaseModel):
    kind: Literal["code"] = "code"
    language: str = ""
    code: str


class ListItem(BaseModel):
    """One list entry; ``number`` is set for ordered lists."""

    kind: Literal["list_item"] = "list_item"
    spans: list[Span] = Field(default_factory=list)
    ordered: bool = False
    number: int | None = None


Block = Paragraph | CodeBlock | ListItem


def parse_inline(text: str) -> list[Span]:
    """Split a line of text into styled spans."""
    spans: list[Span] = []
    position = 0
    for match in INLINE_PATTERN.finditer(text):
        if match.start() > position:
            spans.append(Span(text=text[position : match.start()]))
        groups = match.groupdict()
        if groups["code"] is not None:
            spans.append(Span(kind="code", text=groups["code"]))
        elif groups["bold"] is not None or groups["bold_alt"] is not None:
            spans.append(Span(kind="bold", text=groups["bold"] or groups["bold_alt"]))
        elif groups["label"] is not None:
            spans.append(Span(kind="link", text=groups["label"], href=groups["href"]))
        else:
            spans.append(Span(kind="italic", text=groups["italic"] or groups["italic_alt"]))
        position = match.end()
    if position < len(text):
        spans.append(Span(text=text[position:]))
    return spans


def _parse_text(text: str) -> list[Block]:
    blocks: list[Block] = []
    paragraph: list[str] = []

    def close_paragraph() -> None:
        if paragraph:
            blocks.append(Paragraph(spans=parse_inline("\n".join(paragraph))))
            paragraph.clear()

    for line in text.split("\n"):
        if not line.strip():
            close_paragraph()
        elif item := UNORDERED_ITEM.match(line):
            close_paragraph()
            blocks.append(ListItem(spans=parse_inline(item.group(1))))
        elif item := ORDERED_ITEM.match(line):
            close_paragraph()
            blocks.append(
                ListItem(
                    spans=parse_inline(item.group(2)),
                    ordered=True,
                    number=int(item.group(1)),
                )
            )
        else:
            paragraph.append(line.strip())
    close_paragraph()
    return blocks


def parse_markdown(text: str) -> list[Block]:
    """Parse markdown source into blocks.

    Args:
        text: Markdown source, possibly still streaming.

    Returns:
        Blocks in document order.
    """
    blocks: list[Block] = []
    position = 0
    for match in FENCE_PATTERN.finditer(text):
        blocks.extend(_parse_text(text[position : match.start()]))
        blocks.append(CodeBlock(language=match.group(1), code=match.group(2).strip("\n")))
        position = match.end()
    blocks.extend(_parse_text(text[position:]))
    return blocks
