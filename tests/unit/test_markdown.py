"""Unit tests for markdown parsing and HTML painting."""

import pytest_check as check

from aether.parsing.markdown import CodeBlock, ListItem, Paragraph, Span, parse_inline, parse_markdown
from aether.ui.render import markdown_to_html, plain_text_to_html


class TestParseMarkdown:
    """Tests for block segmentation."""

    def test_paragraphs_split_on_blank_lines(self) -> None:
        blocks = parse_markdown("first line\nsame paragraph\n\nsecond")

        check.equal(len(blocks), 2)
        check.equal(blocks[0], Paragraph(spans=[Span(text="first line\nsame paragraph")]))
        check.equal(blocks[1], Paragraph(spans=[Span(text="second")]))

    def test_fenced_code_block(self) -> None:
        blocks = parse_markdown("intro\n```python\nprint('<hi>')\n```\nafter")

        check.is_instance(blocks[1], CodeBlock)
        check.equal(blocks[1].language, "python")
        check.equal(blocks[1].code, "print('<hi>')")
        check.equal(blocks[2], Paragraph(spans=[Span(text="after")]))

    def test_unclosed_fence_runs_to_end(self) -> None:
        blocks = parse_markdown("```\npartial code")

        assert blocks == [CodeBlock(code="partial code")]

    def test_list_items(self) -> None:
        blocks = parse_markdown("- one\n* two\n3. three")

        check.equal(blocks[0], ListItem(spans=[Span(text="one")]))
        check.equal(blocks[1], ListItem(spans=[Span(text="two")]))
        check.equal(blocks[2], ListItem(spans=[Span(text="three")], ordered=True, number=3))

    def test_empty_text(self) -> None:
        assert parse_markdown("") == []


class TestParseInline:
    """Tests for inline spans."""

    def test_styles(self) -> None:
        spans = parse_inline("a **b** *c* `d` [e](https://e.example)")

        check.equal([s.kind for s in spans if s.text.strip()], ["text", "bold", "italic", "code", "link"])
        check.equal(spans[-1].href, "https://e.example")

    def test_snake_case_is_not_italic(self) -> None:
        assert parse_inline("my_var_name") == [Span(text="my_var_name")]


class TestRender:
    """Tests for HTML painting."""

    def test_text_is_escaped(self) -> None:
        html = markdown_to_html("<script>alert(1)</script> **<b>**")

        check.is_not_in("<script>", html)
        check.is_in("&lt;script&gt;", html)
        check.is_in("<strong>&lt;b&gt;</strong>", html)

    def test_code_is_escaped(self) -> None:
        assert "&lt;hi&gt;" in markdown_to_html("```\n<hi>\n```")

    def test_consecutive_items_share_one_list(self) -> None:
        html = markdown_to_html("- a\n- b\n\n1. c")

        check.equal(html.count("<ul"), 1)
        check.equal(html.count("<ol"), 1)
        check.equal(html.count("<li>"), 3)

    def test_unsafe_link_scheme_renders_as_text(self) -> None:
        html = markdown_to_html("[click](javascript:alert(1))")

        assert "href" not in html

    def test_plain_text_keeps_line_breaks(self) -> None:
        assert plain_text_to_html("a<b\nc") == "a&lt;b<br>c"
