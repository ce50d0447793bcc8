"""Document node tree models.

Nodes are frozen once constructed. Every node carries a ``kind`` tag which the
emitter dispatches on; ``DocNode`` is the discriminated union over all kinds so
trees (and doc comments embedded in the API model) load straight from JSON.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from apidoc2md.exceptions import DocStructureError


class _DocNodeBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class DocPlainText(_DocNodeBase):
    """Literal prose; escaped on emission."""

    kind: Literal["plain_text"] = "plain_text"
    text: str


class DocCodeSpan(_DocNodeBase):
    """Inline code; never escaped."""

    kind: Literal["code_span"] = "code_span"
    code: str


class DocFencedCode(_DocNodeBase):
    """Fenced code block tagged with a language hint."""

    kind: Literal["fenced_code"] = "fenced_code"
    code: str
    language: str = ""


class DocLinkTag(_DocNodeBase):
    """A hyperlink to either a declaration reference or a literal URL.

    ``code_destination`` is resolved at emission time, because the relative
    path depends on which page is being rendered.
    """

    kind: Literal["link_tag"] = "link_tag"
    link_text: str | None = None
    code_destination: str | None = None
    url_destination: str | None = None

    @model_validator(mode="after")
    def _check_destination(self) -> DocLinkTag:
        if (self.code_destination is None) == (self.url_destination is None):
            raise ValueError("A link tag needs exactly one of code_destination or url_destination")
        return self


class DocHeading(_DocNodeBase):
    kind: Literal["heading"] = "heading"
    title: str
    level: int = Field(1, ge=1, le=6)
    anchor: str | None = None


class DocParagraph(_DocNodeBase):
    kind: Literal["paragraph"] = "paragraph"
    nodes: tuple[DocNode, ...] = ()

    @classmethod
    def of(cls, *nodes: DocNode) -> DocParagraph:
        return cls(nodes=nodes)


class DocSection(_DocNodeBase):
    """Root container for one logical region of output."""

    kind: Literal["section"] = "section"
    nodes: tuple[DocNode, ...] = ()

    @classmethod
    def of(cls, *nodes: DocNode) -> DocSection:
        return cls(nodes=nodes)


class DocEmphasisSpan(_DocNodeBase):
    kind: Literal["emphasis_span"] = "emphasis_span"
    bold: bool = False
    italic: bool = False
    nodes: tuple[DocNode, ...] = ()


class DocNoteBox(_DocNodeBase):
    """Callout rendered as a blockquote."""

    kind: Literal["note_box"] = "note_box"
    nodes: tuple[DocNode, ...] = ()


class DocTableCell(_DocNodeBase):
    kind: Literal["table_cell"] = "table_cell"
    nodes: tuple[DocNode, ...] = ()


class DocTableRow(_DocNodeBase):
    kind: Literal["table_row"] = "table_row"
    cells: tuple[DocTableCell, ...] = ()


class DocTable(_DocNodeBase):
    """A table whose rows all have exactly one cell per header title."""

    kind: Literal["table"] = "table"
    header_titles: tuple[str, ...] = ()
    rows: tuple[DocTableRow, ...] = ()

    @model_validator(mode="after")
    def _check_row_arity(self) -> DocTable:
        expected = len(self.header_titles)
        for index, row in enumerate(self.rows):
            if len(row.cells) != expected:
                raise DocStructureError(
                    f"Table row {index} has {len(row.cells)} cells but the table has {expected} columns"
                )
        return self


class DocFrontMatter(_DocNodeBase):
    """Page metadata block; only profiles with front matter render it."""

    kind: Literal["front_matter"] = "front_matter"
    title: str
    keywords: tuple[str, ...] = ()
    page_type: str = "docs"
    draft: bool = False


class DocWarning(_DocNodeBase):
    """Stability or deprecation notice, rendered by a profile override."""

    kind: Literal["warning"] = "warning"
    text: str
    nodes: tuple[DocNode, ...] = ()


DocNode = Annotated[
    Union[
        DocPlainText,
        DocCodeSpan,
        DocFencedCode,
        DocLinkTag,
        DocHeading,
        DocParagraph,
        DocSection,
        DocEmphasisSpan,
        DocNoteBox,
        DocTableCell,
        DocTableRow,
        DocTable,
        DocFrontMatter,
        DocWarning,
    ],
    Field(discriminator="kind"),
]

for _model in (
    DocParagraph,
    DocSection,
    DocEmphasisSpan,
    DocNoteBox,
    DocTableCell,
    DocTableRow,
    DocTable,
    DocWarning,
):
    _model.model_rebuild()

del _model
