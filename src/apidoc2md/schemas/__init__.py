"""Shared schemas for apidoc2md."""

from apidoc2md.schemas.api_model import (
    ApiItem,
    ApiItemKind,
    ApiParameter,
    DocBlock,
    DocComment,
    ReleaseTag,
    build_api_model,
)
from apidoc2md.schemas.nodes import (
    DocCodeSpan,
    DocEmphasisSpan,
    DocFencedCode,
    DocFrontMatter,
    DocHeading,
    DocLinkTag,
    DocNode,
    DocNoteBox,
    DocParagraph,
    DocPlainText,
    DocSection,
    DocTable,
    DocTableCell,
    DocTableRow,
    DocWarning,
)

__all__ = [
    "ApiItem",
    "ApiItemKind",
    "ApiParameter",
    "DocBlock",
    "DocCodeSpan",
    "DocComment",
    "DocEmphasisSpan",
    "DocFencedCode",
    "DocFrontMatter",
    "DocHeading",
    "DocLinkTag",
    "DocNode",
    "DocNoteBox",
    "DocParagraph",
    "DocPlainText",
    "DocSection",
    "DocTable",
    "DocTableCell",
    "DocTableRow",
    "DocWarning",
    "ReleaseTag",
    "build_api_model",
]
