"""Compose one documentation page per API item and write the pages to disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from apidoc2md.config import APIDOC2MD_DRAFT, APIDOC2MD_NEWLINE, APIDOC2MD_OUTPUT_PATH
from apidoc2md.exceptions import UnsupportedItemKindError
from apidoc2md.links import LinkResolver
from apidoc2md.markdown import MarkdownEmitter, MarkdownEmitterContext
from apidoc2md.naming import PathNamer, get_concise_signature, get_import_name
from apidoc2md.output import NewlineKind, reset_output_dir, write_page
from apidoc2md.profiles import MARKDOWN_PROFILE, RenderProfile
from apidoc2md.schemas import (
    ApiItem,
    ApiItemKind,
    DocCodeSpan,
    DocEmphasisSpan,
    DocFencedCode,
    DocFrontMatter,
    DocHeading,
    DocLinkTag,
    DocNode,
    DocParagraph,
    DocPlainText,
    DocSection,
    DocTable,
    DocTableCell,
    DocTableRow,
    DocWarning,
    ReleaseTag,
)

logger = logging.getLogger(__name__)

PAGE_KINDS = frozenset(
    {
        ApiItemKind.CLASS,
        ApiItemKind.ENUM,
        ApiItemKind.INTERFACE,
        ApiItemKind.NAMESPACE,
        ApiItemKind.FUNCTION,
        ApiItemKind.TYPE_ALIAS,
        ApiItemKind.VARIABLE,
    }
)

# (member kind, table column, section heading) in output order.
_CONTAINER_CATEGORIES = (
    (ApiItemKind.CLASS, "Class", "Classes"),
    (ApiItemKind.ENUM, "Enumeration", "Enumerations"),
    (ApiItemKind.FUNCTION, "Function", "Functions"),
    (ApiItemKind.INTERFACE, "Interface", "Interfaces"),
    (ApiItemKind.NAMESPACE, "Namespace", "Namespaces"),
    (ApiItemKind.VARIABLE, "Variable", "Variables"),
    (ApiItemKind.TYPE_ALIAS, "Type Alias", "Type Aliases"),
)

_PAGE_TITLE_SUFFIXES = {
    ApiItemKind.CLASS: "class",
    ApiItemKind.ENUM: "enum",
    ApiItemKind.INTERFACE: "interface",
    ApiItemKind.FUNCTION: "function",
    ApiItemKind.NAMESPACE: "namespace",
    ApiItemKind.TYPE_ALIAS: "type",
    ApiItemKind.VARIABLE: "variable",
}

_REMARKS_FIRST_KINDS = frozenset(
    {ApiItemKind.CLASS, ApiItemKind.INTERFACE, ApiItemKind.NAMESPACE, ApiItemKind.PACKAGE}
)

_PLAIN_KINDS = frozenset(
    {ApiItemKind.PROPERTY, ApiItemKind.PROPERTY_SIGNATURE, ApiItemKind.TYPE_ALIAS, ApiItemKind.VARIABLE}
)

_UNSTABLE_TAGS = frozenset({ReleaseTag.ALPHA, ReleaseTag.BETA, ReleaseTag.NONE})


def _copied(nodes: Iterable[DocNode]) -> list[DocNode]:
    # Doc comment content can land on several pages; never share node instances.
    return [node.model_copy(deep=True) for node in nodes]


def _bold(text: str) -> DocParagraph:
    return DocParagraph.of(DocEmphasisSpan(bold=True, nodes=(DocPlainText(text=text),)))


def _text_cell(text: str) -> DocTableCell:
    return DocTableCell(nodes=(DocParagraph.of(DocPlainText(text=text)),))


def _code_cell(code: str | None) -> DocTableCell:
    if not code:
        return DocTableCell()
    return DocTableCell(nodes=(DocParagraph.of(DocCodeSpan(code=code)),))


def _modifiers_cell(item: ApiItem) -> DocTableCell:
    return _code_cell("static" if item.is_static else None)


def _labelled_table(label: str, header_titles: Sequence[str], rows: Sequence[DocTableRow]) -> list[DocNode]:
    if not rows:
        return []
    return [_bold(label), DocTable(header_titles=tuple(header_titles), rows=tuple(rows))]


def _headed_table(
    title: str, level: int, header_titles: Sequence[str], rows: Sequence[DocTableRow]
) -> list[DocNode]:
    if not rows:
        return []
    return [DocHeading(title=title, level=level), DocTable(header_titles=tuple(header_titles), rows=tuple(rows))]


def _member_heading(item: ApiItem) -> str:
    if item.kind in (ApiItemKind.CONSTRUCTOR, ApiItemKind.CONSTRUCT_SIGNATURE):
        return get_concise_signature(item)
    if item.kind in (ApiItemKind.METHOD, ApiItemKind.METHOD_SIGNATURE):
        return f"{item.display_name} method"
    return f"{item.display_name} property"


class MarkdownDocumenter:
    """Render an API model into a tree of Markdown pages.

    Every page is first composed as a document tree (:meth:`compose_page`),
    then emitted with the profile's overrides (:meth:`render_page`). Both are
    free of I/O; :meth:`generate_files` resets the output folder and writes
    every page, parents before children.
    """

    def __init__(
        self,
        api_model: ApiItem,
        *,
        output_dir: Path | str = APIDOC2MD_OUTPUT_PATH,
        profile: RenderProfile = MARKDOWN_PROFILE,
        draft: bool = APIDOC2MD_DRAFT,
        newline: NewlineKind | str = APIDOC2MD_NEWLINE,
    ) -> None:
        self.api_model = api_model
        self.output_dir = Path(output_dir)
        self.profile = profile
        self.draft = draft
        self.newline = NewlineKind(newline)
        self._namer = profile.create_namer()
        self._emitter = MarkdownEmitter(
            LinkResolver(api_model),
            overrides=profile.node_overrides(),
            link_template=profile.link_template,
            heading_anchor_style=profile.heading_anchor_style,
        )

    @property
    def namer(self) -> PathNamer:
        return self._namer

    def generate_files(self) -> list[Path]:
        """Write every page under the output folder and return the written paths.

        Raises:
            OutputError: If the folder cannot be reset or a page cannot be written.
            RenderError: If a page cannot be composed or emitted.
        """
        reset_output_dir(self.output_dir)

        written: dict[str, ApiItem] = {}
        paths: list[Path] = []
        for item in self.iter_page_items():
            file_path = self._namer.address_for(item).file_path
            previous = written.get(file_path)
            if previous is not None:
                logger.warning(
                    'Output path "%s" is shared by "%s" and "%s"; the later page wins',
                    file_path,
                    previous.canonical_reference,
                    item.canonical_reference,
                )
            written[file_path] = item
            paths.append(write_page(self.output_dir / file_path, self.render_page(item), newline=self.newline))

        logger.info("Successfully generated %d markdown files in %s", len(paths), self.output_dir)
        return paths

    def iter_page_items(self, item: ApiItem | None = None) -> Iterator[ApiItem]:
        """Yield every item that gets a page of its own, depth-first."""
        if item is None:
            item = self.api_model
        yield item
        for child in self._page_children(item):
            yield from self.iter_page_items(child)

    def render_page(self, item: ApiItem) -> str:
        context = MarkdownEmitterContext(
            context_item=item,
            get_link_for_item=lambda target: self._namer.relative_link(target, item),
        )
        return self._emitter.emit(self.compose_page(item), context)

    def compose_page(self, item: ApiItem) -> DocSection:
        """Build the document tree for the page of ``item``.

        Raises:
            UnsupportedItemKindError: If ``item`` is not documented on a page of its own.
        """
        if item.kind not in PAGE_KINDS and item.kind not in (ApiItemKind.MODEL, ApiItemKind.PACKAGE):
            raise UnsupportedItemKindError(f"{item.kind.value} items do not have a page of their own")

        nodes: list[DocNode] = []
        if self.profile.front_matter:
            nodes.append(self._front_matter(item))
        nodes.append(DocHeading(title=self._page_title(item), level=1))
        self._append_item_content(nodes, item, heading_level=2, import_snippet=True)
        return DocSection(nodes=tuple(nodes))

    def _page_children(self, item: ApiItem) -> list[ApiItem]:
        if item.kind is ApiItemKind.MODEL:
            return [member for member in item.members if member.kind is ApiItemKind.PACKAGE]
        if item.kind in (ApiItemKind.PACKAGE, ApiItemKind.NAMESPACE):
            return [member for member in item.package_members if member.kind in PAGE_KINDS]
        return []

    def _front_matter(self, item: ApiItem) -> DocFrontMatter:
        keywords = self.profile.keywords
        package = item.associated_package
        if package is not None:
            keywords = (*keywords, package.display_name)
        title = self.profile.model_title if item.kind is ApiItemKind.MODEL else item.display_name
        return DocFrontMatter(title=title, keywords=keywords, page_type=self.profile.page_type, draft=self.draft)

    def _page_title(self, item: ApiItem) -> str:
        if item.kind is ApiItemKind.MODEL:
            return self.profile.model_title
        if item.kind is ApiItemKind.PACKAGE:
            return f"{item.display_name} package"
        return f"{item.scoped_name_within_package} {_PAGE_TITLE_SUFFIXES[item.kind]}"

    def _append_item_content(
        self, nodes: list[DocNode], item: ApiItem, *, heading_level: int, import_snippet: bool = False
    ) -> None:
        nodes.extend(self._warning(item))
        nodes.extend(self._summary(item))
        nodes.extend(self._signature(item))
        if import_snippet:
            nodes.extend(self._import_snippet(item))

        remarks_first = item.kind in _REMARKS_FIRST_KINDS
        if remarks_first:
            nodes.extend(self._remarks(item, heading_level))

        kind = item.kind
        if kind is ApiItemKind.CLASS:
            self._append_class_tables(nodes, item)
        elif kind is ApiItemKind.INTERFACE:
            self._append_interface_tables(nodes, item)
        elif kind is ApiItemKind.ENUM:
            nodes.extend(self._enum_table(item, heading_level))
        elif item.has_parameters:
            nodes.extend(self._parameter_tables(item))
            nodes.extend(self._throws(item, heading_level))
        elif kind in (ApiItemKind.PACKAGE, ApiItemKind.NAMESPACE):
            nodes.extend(self._container_tables(item, heading_level))
        elif kind is ApiItemKind.MODEL:
            nodes.extend(self._packages_table(item, heading_level))
        elif kind not in _PLAIN_KINDS:
            raise UnsupportedItemKindError(f"Unsupported API item kind: {kind.value}")

        if not remarks_first:
            nodes.extend(self._remarks(item, heading_level))

    def _member_section(self, member: ApiItem) -> list[DocNode]:
        nodes: list[DocNode] = [
            DocHeading(title=_member_heading(member), level=2, anchor=self._namer.address_for(member).anchor)
        ]
        self._append_item_content(nodes, member, heading_level=3)
        return nodes

    def _warning(self, item: ApiItem) -> list[DocNode]:
        # A deprecation notice replaces the preview notice.
        comment = item.doc_comment
        if comment is not None and comment.deprecated is not None:
            return [DocWarning(text=self.profile.deprecated_warning, nodes=tuple(_copied(comment.deprecated)))]
        if item.has_release_tag and item.release_tag in _UNSTABLE_TAGS:
            return [DocWarning(text=self.profile.unstable_warning)]
        return []

    def _summary(self, item: ApiItem) -> list[DocNode]:
        if item.doc_comment is None:
            return []
        return _copied(item.doc_comment.summary)

    def _signature(self, item: ApiItem) -> list[DocNode]:
        if not item.is_declared or not item.excerpt.strip():
            return []
        return [
            _bold("Signature"),
            DocFencedCode(code=item.excerpt_with_modifiers, language=self.profile.code_language),
        ]

    def _import_snippet(self, item: ApiItem) -> list[DocNode]:
        """``import { Outer } from 'pkg';`` plus one destructuring line per nested scope."""
        package = item.associated_package
        if not item.is_declared or package is None:
            return []

        scopes = item.scoped_name_within_package.split(".")
        lines = [f"import {{ {get_import_name(scopes[0])} }} from '{package.display_name}';"]
        lines.extend(
            f"const {{ {get_import_name(name)} }} = {get_import_name(outer)};"
            for outer, name in zip(scopes, scopes[1:])
        )
        return [_bold("Import"), DocFencedCode(code="\n".join(lines), language=self.profile.code_language)]

    def _remarks(self, item: ApiItem, level: int) -> list[DocNode]:
        comment = item.doc_comment
        if comment is None:
            return []

        nodes: list[DocNode] = []
        if comment.remarks is not None:
            nodes.append(DocHeading(title="Remarks", level=level))
            nodes.extend(_copied(comment.remarks))

        examples = comment.blocks_with_tag("example")
        for number, block in enumerate(examples, start=1):
            title = f"Example {number}" if len(examples) > 1 else "Example"
            nodes.append(DocHeading(title=title, level=level))
            nodes.extend(_copied(block.content))
        return nodes

    def _throws(self, item: ApiItem, level: int) -> list[DocNode]:
        if item.doc_comment is None:
            return []
        blocks = item.doc_comment.blocks_with_tag("throws")
        if not blocks:
            return []

        nodes: list[DocNode] = [DocHeading(title="Exceptions", level=level)]
        for block in blocks:
            nodes.extend(_copied(block.content))
        return nodes

    def _title_cell(self, item: ApiItem) -> DocTableCell:
        link = DocLinkTag(code_destination=item.canonical_reference, link_text=get_concise_signature(item))
        return DocTableCell(nodes=(DocParagraph.of(link),))

    def _description_cell(self, item: ApiItem) -> DocTableCell:
        """Summary of ``item``, led by a bold-italic ``(BETA)`` for beta items."""
        prefix: list[DocNode] = []
        if item.has_release_tag and item.release_tag is ReleaseTag.BETA:
            prefix = [
                DocEmphasisSpan(bold=True, italic=True, nodes=(DocPlainText(text="(BETA)"),)),
                DocPlainText(text=" "),
            ]

        nodes = _copied(item.doc_comment.summary) if item.doc_comment is not None else []
        if nodes and isinstance(nodes[0], DocParagraph):
            nodes[0] = DocParagraph(nodes=(*prefix, *nodes[0].nodes))
        elif prefix:
            nodes.insert(0, DocParagraph(nodes=tuple(prefix)))
        return DocTableCell(nodes=tuple(nodes))

    def _append_class_tables(self, nodes: list[DocNode], item: ApiItem) -> None:
        events: list[DocTableRow] = []
        constructors: list[DocTableRow] = []
        properties: list[DocTableRow] = []
        methods: list[DocTableRow] = []
        constructor_sections: list[DocNode] = []
        property_sections: list[DocNode] = []
        method_sections: list[DocNode] = []

        for member in item.members:
            if member.kind is ApiItemKind.CONSTRUCTOR:
                constructors.append(
                    DocTableRow(
                        cells=(self._title_cell(member), _modifiers_cell(member), self._description_cell(member))
                    )
                )
                constructor_sections.extend(self._member_section(member))
            elif member.kind is ApiItemKind.METHOD:
                methods.append(
                    DocTableRow(
                        cells=(self._title_cell(member), _modifiers_cell(member), self._description_cell(member))
                    )
                )
                method_sections.extend(self._member_section(member))
            elif member.kind is ApiItemKind.PROPERTY:
                row = DocTableRow(
                    cells=(
                        self._title_cell(member),
                        _modifiers_cell(member),
                        _code_cell(member.property_type_excerpt),
                        self._description_cell(member),
                    )
                )
                (events if member.is_event_property else properties).append(row)
                property_sections.extend(self._member_section(member))

        nodes.extend(_labelled_table("Events", ("Property", "Modifiers", "Type", "Description"), events))
        nodes.extend(_labelled_table("Constructors", ("Constructor", "Modifiers", "Description"), constructors))
        nodes.extend(_labelled_table("Properties", ("Property", "Modifiers", "Type", "Description"), properties))
        nodes.extend(_labelled_table("Methods", ("Method", "Modifiers", "Description"), methods))
        nodes.extend(constructor_sections)
        nodes.extend(property_sections)
        nodes.extend(method_sections)

    def _append_interface_tables(self, nodes: list[DocNode], item: ApiItem) -> None:
        events: list[DocTableRow] = []
        properties: list[DocTableRow] = []
        methods: list[DocTableRow] = []
        property_sections: list[DocNode] = []
        method_sections: list[DocNode] = []

        for member in item.members:
            if member.kind in (ApiItemKind.CONSTRUCT_SIGNATURE, ApiItemKind.METHOD_SIGNATURE):
                methods.append(DocTableRow(cells=(self._title_cell(member), self._description_cell(member))))
                method_sections.extend(self._member_section(member))
            elif member.kind is ApiItemKind.PROPERTY_SIGNATURE:
                row = DocTableRow(
                    cells=(
                        self._title_cell(member),
                        _code_cell(member.property_type_excerpt),
                        self._description_cell(member),
                    )
                )
                (events if member.is_event_property else properties).append(row)
                property_sections.extend(self._member_section(member))

        nodes.extend(_labelled_table("Events", ("Property", "Type", "Description"), events))
        nodes.extend(_labelled_table("Properties", ("Property", "Type", "Description"), properties))
        nodes.extend(_labelled_table("Methods", ("Method", "Description"), methods))
        nodes.extend(property_sections)
        nodes.extend(method_sections)

    def _enum_table(self, item: ApiItem, level: int) -> list[DocNode]:
        rows = [
            DocTableRow(
                cells=(
                    _text_cell(get_concise_signature(member)),
                    _code_cell(member.initializer_excerpt),
                    self._description_cell(member),
                )
            )
            for member in item.members
            if member.kind is ApiItemKind.ENUM_MEMBER
        ]
        return _headed_table("Enumeration Members", level, ("Member", "Value", "Description"), rows)

    def _parameter_tables(self, item: ApiItem) -> list[DocNode]:
        rows = [
            DocTableRow(
                cells=(
                    _text_cell(parameter.name),
                    _code_cell(parameter.type_excerpt),
                    DocTableCell(nodes=tuple(_copied(parameter.description))),
                )
            )
            for parameter in item.parameters
        ]
        nodes = _labelled_table("Parameters", ("Parameter", "Type", "Description"), rows)

        if item.has_return_type:
            return_type = (item.return_type_excerpt or "").strip() or "(not declared)"
            nodes.append(_bold("Returns:"))
            nodes.append(DocParagraph.of(DocCodeSpan(code=return_type)))
            if item.doc_comment is not None and item.doc_comment.returns is not None:
                nodes.extend(_copied(item.doc_comment.returns))
        return nodes

    def _container_tables(self, item: ApiItem, level: int) -> list[DocNode]:
        rows_by_kind: dict[ApiItemKind, list[DocTableRow]] = {kind: [] for kind, _, _ in _CONTAINER_CATEGORIES}
        for member in item.package_members:
            rows = rows_by_kind.get(member.kind)
            if rows is not None:
                rows.append(DocTableRow(cells=(self._title_cell(member), self._description_cell(member))))

        nodes: list[DocNode] = []
        for kind, column, title in _CONTAINER_CATEGORIES:
            nodes.extend(_headed_table(title, level, (column, "Description"), rows_by_kind[kind]))
        return nodes

    def _packages_table(self, item: ApiItem, level: int) -> list[DocNode]:
        rows = [
            DocTableRow(cells=(self._title_cell(member), self._description_cell(member)))
            for member in item.members
            if member.kind is ApiItemKind.PACKAGE
        ]
        return _headed_table("Packages", level, ("Package", "Description"), rows)
