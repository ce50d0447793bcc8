"""Emit document node trees as Markdown.

Each node kind has a standard rule; a renderer can override any kind (and must
override the custom ones) by passing ``overrides``. An override receives the
node, the writer and a ``write_default`` callback, so it can mix its own
output with standard nodes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping

from apidoc2md.exceptions import UnsupportedNodeError
from apidoc2md.links import LinkResolver, Unresolved
from apidoc2md.schemas import (
    ApiItem,
    DocCodeSpan,
    DocEmphasisSpan,
    DocFencedCode,
    DocHeading,
    DocLinkTag,
    DocNode,
    DocNoteBox,
    DocParagraph,
    DocPlainText,
    DocSection,
    DocTable,
    DocTableCell,
)
from apidoc2md.writer import IndentedWriter

logger = logging.getLogger(__name__)

NodeOverride = Callable[[Any, IndentedWriter, Callable[[DocNode], None]], None]

_ALWAYS_ESCAPE_RE = re.compile(r"([\\*_\[\]`])")
_LINE_START_RE = re.compile(r"^(\s*)([#+\-])")
_BACKTICK_RUN_RE = re.compile(r"`+")
_WHITESPACE_RE = re.compile(r"\s+")
_TABLE_LINE_BREAK = "<br/>"


def get_escaped_text(text: str, *, at_line_start: bool = True) -> str:
    """Escape Markdown-significant characters in prose.

    ``#``, ``-`` and ``+`` are only significant when they lead a line; the first
    line of ``text`` counts as such only when ``at_line_start`` is true.
    """
    escaped = _ALWAYS_ESCAPE_RE.sub(r"\\\1", text)
    escaped = escaped.replace("<", "&lt;").replace(">", "&gt;")
    lines = escaped.split("\n")
    for index, line in enumerate(lines):
        if index > 0 or at_line_start:
            lines[index] = _LINE_START_RE.sub(r"\1\\\2", line, count=1)
    return "\n".join(lines)


def get_code_span(code: str) -> str:
    """Wrap ``code`` in a back-tick fence longer than any run it contains."""
    code = code.replace("\r\n", " ").replace("\n", " ")
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code)), default=0)
    fence = "`" * (longest + 1)
    if code.startswith("`") or code.endswith("`"):
        code = f" {code} "
    return f"{fence}{code}{fence}"


def _neutralize_table_cell(text: str) -> str:
    lines = [line.strip() for line in text.strip().splitlines()]
    return _TABLE_LINE_BREAK.join(line for line in lines if line).replace("|", "\\|")


def _no_link(item: ApiItem) -> str | None:
    return None


@dataclass
class MarkdownEmitterContext:
    """Per-page emission state.

    Attributes:
        context_item: Item whose page is being rendered; relative links start here.
        get_link_for_item: Returns the link from the current page to an item.
        writer: Output sink.
        inside_table: Set while rendering a table cell.
        bold_active: Set inside a bold emphasis span.
        italic_active: Set inside an italic emphasis span.
    """

    context_item: ApiItem | None = None
    get_link_for_item: Callable[[ApiItem], str | None] = _no_link
    writer: IndentedWriter = field(default_factory=IndentedWriter)
    inside_table: bool = False
    bold_active: bool = False
    italic_active: bool = False


class MarkdownEmitter:
    """Render doc nodes to Markdown text."""

    def __init__(
        self,
        resolver: LinkResolver | None = None,
        *,
        overrides: Mapping[str, NodeOverride] | None = None,
        link_template: str = "{href}",
        heading_anchor_style: str = "html",
    ) -> None:
        self._resolver = resolver
        self._overrides = dict(overrides or {})
        self._link_template = link_template
        self._heading_anchor_style = heading_anchor_style
        self._rules: dict[str, Callable[[Any, MarkdownEmitterContext], None]] = {
            "section": self._write_section,
            "paragraph": self._write_paragraph,
            "plain_text": self._write_plain_text,
            "code_span": self._write_code_span,
            "fenced_code": self._write_fenced_code,
            "heading": self._write_heading,
            "table": self._write_table,
            "emphasis_span": self._write_emphasis_span,
            "link_tag": self._write_link_tag,
            "note_box": self._write_note_box,
        }

    def emit(self, node: DocNode, context: MarkdownEmitterContext | None = None) -> str:
        context = context or MarkdownEmitterContext()
        self.write_node(node, context)
        return context.writer.get_text()

    def write_node(self, node: DocNode, context: MarkdownEmitterContext) -> None:
        override = self._overrides.get(node.kind)
        if override is None:
            self._write_standard(node, context)
            return

        def write_default(child: DocNode) -> None:
            if child is node:
                self._write_standard(child, context)
            else:
                self.write_node(child, context)

        override(node, context.writer, write_default)

    def write_nodes(self, nodes: Iterable[DocNode], context: MarkdownEmitterContext) -> None:
        for node in nodes:
            self.write_node(node, context)

    def _write_standard(self, node: DocNode, context: MarkdownEmitterContext) -> None:
        rule = self._rules.get(node.kind)
        if rule is None:
            raise UnsupportedNodeError(f"Unsupported doc node kind: {node.kind}")
        rule(node, context)

    def _write_section(self, node: DocSection, context: MarkdownEmitterContext) -> None:
        self.write_nodes(node.nodes, context)

    def _write_paragraph(self, node: DocParagraph, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        if context.inside_table:
            writer.ensure_new_line()
        else:
            writer.ensure_skipped_line()
        self.write_nodes(node.nodes, context)
        writer.ensure_new_line()

    def _write_plain_text(self, node: DocPlainText, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        writer.write(get_escaped_text(node.text, at_line_start=writer.at_start_of_line))

    def _write_code_span(self, node: DocCodeSpan, context: MarkdownEmitterContext) -> None:
        context.writer.write(get_code_span(node.code))

    def _write_fenced_code(self, node: DocFencedCode, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(node.code)), default=0)
        fence = "`" * max(3, longest + 1)

        writer.ensure_skipped_line()
        writer.write_line(fence + node.language)
        writer.write(node.code.rstrip("\n"))
        writer.ensure_new_line()
        writer.write_line(fence)

    def _write_heading(self, node: DocHeading, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        writer.ensure_skipped_line()

        title = get_escaped_text(node.title, at_line_start=False)
        if node.anchor:
            if self._heading_anchor_style == "attribute":
                title += f" {{#{node.anchor}}}"
            else:
                writer.write_line(f'<a id="{node.anchor}"></a>')

        writer.write_line(f"{'#' * node.level} {title}")
        writer.write_line()

    def _write_table(self, node: DocTable, context: MarkdownEmitterContext) -> None:
        if not node.rows:
            return

        writer = context.writer
        writer.ensure_skipped_line()

        headers = [_neutralize_table_cell(get_escaped_text(title, at_line_start=False)) for title in node.header_titles]
        writer.write_line("| " + " | ".join(headers) + " |")
        writer.write_line("| " + " | ".join("---" for _ in headers) + " |")
        for row in node.rows:
            cells = [self._render_table_cell(cell, context) for cell in row.cells]
            writer.write_line("| " + " | ".join(cells) + " |")

    def _render_table_cell(self, cell: DocTableCell, context: MarkdownEmitterContext) -> str:
        cell_context = replace(context, writer=IndentedWriter(), inside_table=True)
        self.write_nodes(cell.nodes, cell_context)
        return _neutralize_table_cell(cell_context.writer.get_text())

    def _write_emphasis_span(self, node: DocEmphasisSpan, context: MarkdownEmitterContext) -> None:
        if not node.nodes:
            return

        bold = node.bold and not context.bold_active
        italic = node.italic and not context.italic_active
        opening = ("**" if bold else "") + ("*" if italic else "")

        inner_context = replace(
            context,
            bold_active=context.bold_active or node.bold,
            italic_active=context.italic_active or node.italic,
        )
        context.writer.write(opening)
        self.write_nodes(node.nodes, inner_context)
        context.writer.write(opening[::-1])

    def _write_link_tag(self, node: DocLinkTag, context: MarkdownEmitterContext) -> None:
        if node.code_destination is not None:
            self._write_link_tag_with_code_destination(node, context)
        else:
            self._write_link_tag_with_url_destination(node, context)

    def _write_link_tag_with_url_destination(self, node: DocLinkTag, context: MarkdownEmitterContext) -> None:
        text = _WHITESPACE_RE.sub(" ", node.link_text or node.url_destination or "").strip()
        context.writer.write(f"[{get_escaped_text(text, at_line_start=False)}]({node.url_destination})")

    def _write_link_tag_with_code_destination(self, node: DocLinkTag, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        reference = node.code_destination or ""

        if self._resolver is None:
            result = Unresolved(reference=reference, reason="No API model is available")
        else:
            result = self._resolver.resolve_link(
                reference, context.context_item, context.get_link_for_item, node.link_text
            )

        if isinstance(result, Unresolved):
            logger.warning('Unable to resolve reference "%s": %s', result.reference, result.reason)
            writer.write(get_escaped_text(reference, at_line_start=writer.at_start_of_line))
            return

        if not result.text:
            logger.warning('Unable to determine link text for reference "%s"', reference)
            writer.write(get_escaped_text(reference, at_line_start=writer.at_start_of_line))
            return

        href = self._link_template.format(href=result.href)
        writer.write(f"[{get_escaped_text(result.text, at_line_start=False)}]({href})")

    def _write_note_box(self, node: DocNoteBox, context: MarkdownEmitterContext) -> None:
        writer = context.writer
        writer.ensure_skipped_line()
        with writer.indented("> "):
            self.write_nodes(node.nodes, context)
            writer.ensure_new_line()
