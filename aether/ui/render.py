"""Paints parsed markdown blocks as HTML for chat display.

Every piece of text is escaped as it is written out; the block tree never
carries markup of its own.
"""

from html import escape

from aether.parsing.markdown import Block, CodeBlock, ListItem, Span, parse_markdown

SAFE_LINK_SCHEMES = ("http://", "https://", "mailto:")

CODE_BLOCK_CLASSES = "bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"
INLINE_CODE_CLASSES = "bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs"


def _paint_span(span: Span) -> str:
    text = escape(span.text).replace("\n", "<br>")
    match span.kind:
        case "bold":
            return f"<strong>{text}</strong>"
        case "italic":
            return f"<em>{text}</em>"
        case "code":
            return f'<code class="{INLINE_CODE_CLASSES}">{text}</code>'
        case "link" if span.href and span.href.lower().startswith(SAFE_LINK_SCHEMES):
            href = escape(span.href, quote=True)
            return (
                f'<a href="{href}" class="text-blue-600 underline" '
                f'target="_blank" rel="noopener noreferrer">{text}</a>'
            )
        case _:
            return text


def _paint_spans(spans: list[Span]) -> str:
    return "".join(_paint_span(span) for span in spans)


def paint_blocks(blocks: list[Block]) -> str:
    """Render blocks to HTML, grouping consecutive list items into lists."""
    html: list[str] = []
    open_list: str | None = None

    for block in blocks:
        list_tag = ("ol" if block.ordered else "ul") if isinstance(block, ListItem) else None
        if open_list and list_tag != open_list:
            html.append(f"</{open_list}>")
            open_list = None
        if list_tag and open_list is None:
            style = "list-decimal" if list_tag == "ol" else "list-disc"
            html.append(f'<{list_tag} class="{style} list-inside my-2 space-y-1">')
            open_list = list_tag

        if isinstance(block, CodeBlock):
            html.append(f'<pre class="{CODE_BLOCK_CLASSES}"><code>{escape(block.code)}</code></pre>')
        elif isinstance(block, ListItem):
            html.append(f"<li>{_paint_spans(block.spans)}</li>")
        else:
            html.append(f'<p class="my-1">{_paint_spans(block.spans)}</p>')

    if open_list:
        html.append(f"</{open_list}>")
    return "".join(html)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display."""
    return paint_blocks(parse_markdown(text))


def plain_text_to_html(text: str) -> str:
    """Escape user text, keeping line breaks."""
    return escape(text).replace("\n", "<br>")
