"""Rendering profiles: plain Markdown files or a Hugo content tree.

A profile is an immutable value handed to the documenter. It owns the layout,
the boilerplate texts and the overrides for the custom node kinds
(``front_matter`` and ``warning``), which have no standard Markdown rule.
"""

from __future__ import annotations

from functools import partial
from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict

from apidoc2md.config import APIDOC2MD_KEYWORDS
from apidoc2md.markdown import NodeOverride
from apidoc2md.naming import Layout, PathNamer
from apidoc2md.schemas import DocFrontMatter, DocNode, DocNoteBox, DocParagraph, DocPlainText, DocWarning
from apidoc2md.writer import IndentedWriter

UNSTABLE_WARNING = (
    "This API is provided as a preview for developers and may change"
    " based on feedback that we receive.  Do not use this API in a production environment."
)
DEPRECATED_WARNING = "Warning: This API is now obsolete."


class RenderProfile(BaseModel):
    """Output conventions for one documentation target."""

    model_config = ConfigDict(frozen=True)

    name: str
    layout: Layout = Layout.FLAT
    index_filename: str = "index.md"
    front_matter: bool = False
    front_matter_tag: str = "+++"
    page_type: str = "docs"
    keywords: tuple[str, ...] = APIDOC2MD_KEYWORDS
    model_title: str = "API Reference"
    code_language: str = "typescript"
    link_template: str = "{href}"
    heading_anchor_style: Literal["html", "attribute"] = "html"
    unstable_warning: str = UNSTABLE_WARNING
    deprecated_warning: str = DEPRECATED_WARNING

    def create_namer(self) -> PathNamer:
        return PathNamer(self.layout, index_filename=self.index_filename)

    def node_overrides(self) -> dict[str, NodeOverride]:
        overrides: dict[str, NodeOverride] = {"warning": write_warning}
        if self.front_matter:
            overrides["front_matter"] = partial(write_front_matter, tag=self.front_matter_tag)
        return overrides


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_front_matter(
    node: DocFrontMatter,
    writer: IndentedWriter,
    write_default: Callable[[DocNode], None],
    *,
    tag: str = "+++",
) -> None:
    keywords = ",".join(_toml_string(keyword) for keyword in node.keywords)

    writer.write_line(tag)
    writer.write_line(f"title = {_toml_string(node.title)}")
    writer.write_line(f"keywords = [{keywords}]")
    writer.write_line(f"type = {_toml_string(node.page_type)}")
    if node.draft:
        writer.write_line("draft = true")
    writer.write_line(tag)


def write_warning(
    node: DocWarning,
    writer: IndentedWriter,
    write_default: Callable[[DocNode], None],
) -> None:
    if not node.text and not node.nodes:
        return
    write_default(
        DocNoteBox(nodes=(DocParagraph.of(DocPlainText(text=node.text)), *node.nodes))
    )


MARKDOWN_PROFILE = RenderProfile(name="markdown")

HUGO_PROFILE = RenderProfile(
    name="hugo",
    layout=Layout.NESTED,
    index_filename="_index.md",
    front_matter=True,
    link_template='{{{{< relref "{href}" >}}}}',
    heading_anchor_style="attribute",
)

PROFILES: dict[str, RenderProfile] = {
    profile.name: profile for profile in (MARKDOWN_PROFILE, HUGO_PROFILE)
}


def get_profile(name: str) -> RenderProfile:
    """Look up a built-in profile by name.

    Raises:
        ValueError: If no profile has that name.
    """
    try:
        return PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown profile {name!r} (expected one of: {known})") from None
