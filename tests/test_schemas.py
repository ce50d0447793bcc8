"""Tests for the document node tree and API model schemas."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from apidoc2md.exceptions import DocStructureError
from apidoc2md.schemas import (
    ApiItem,
    ApiItemKind,
    DocComment,
    DocLinkTag,
    DocNode,
    DocParagraph,
    DocPlainText,
    DocTable,
    DocTableCell,
    DocTableRow,
    ReleaseTag,
)


class TestDocNodes:
    """Tests for document node construction."""

    def test_nodes_are_frozen(self) -> None:
        """Nodes cannot be modified after construction."""
        node = DocPlainText(text="hello")

        with pytest.raises(ValidationError):
            node.text = "changed"

    def test_table_rejects_row_arity_mismatch(self) -> None:
        """A row with the wrong number of cells fails fast."""
        with pytest.raises(DocStructureError, match="2 columns"):
            DocTable(header_titles=("A", "B"), rows=(DocTableRow(cells=(DocTableCell(),)),))

    def test_table_accepts_matching_rows(self) -> None:
        """Rows with one cell per header are kept as given."""
        table = DocTable(header_titles=("A",), rows=(DocTableRow(cells=(DocTableCell(),)),))

        assert len(table.rows) == 1

    def test_link_needs_exactly_one_destination(self) -> None:
        """A link has either a code or a URL destination."""
        with pytest.raises(ValidationError):
            DocLinkTag(link_text="both", code_destination="Widget", url_destination="https://example.com")
        with pytest.raises(ValidationError):
            DocLinkTag(link_text="neither")

    def test_union_validates_by_kind(self) -> None:
        """The kind tag selects the node class when loading from data."""
        node = TypeAdapter(DocNode).validate_python(
            {"kind": "paragraph", "nodes": [{"kind": "plain_text", "text": "hi"}]}
        )

        assert node == DocParagraph.of(DocPlainText(text="hi"))


class TestApiItem:
    """Tests for the API model."""

    def test_members_link_to_parent(self, widgets_model: ApiItem, widget_class: ApiItem) -> None:
        """Every member knows its container."""
        for member in widget_class.members:
            assert member.parent is widget_class
        assert widgets_model.parent is None

    def test_hierarchy_runs_from_root(self, widgets_model: ApiItem, render_overloads: tuple[ApiItem, ApiItem]) -> None:
        """The ancestor chain starts at the model and ends at the item."""
        kinds = [item.kind for item in render_overloads[0].get_hierarchy()]

        assert kinds == [
            ApiItemKind.MODEL,
            ApiItemKind.PACKAGE,
            ApiItemKind.ENTRY_POINT,
            ApiItemKind.CLASS,
            ApiItemKind.METHOD,
        ]

    def test_scoped_and_canonical_names(
        self, widgets_package: ApiItem, render_overloads: tuple[ApiItem, ApiItem]
    ) -> None:
        """Scoped names skip undeclared levels; canonical references add the overload."""
        second = render_overloads[1]

        assert second.scoped_name_within_package == "Widget.render"
        assert second.canonical_reference == "@scope/widgets!Widget.render:2"
        assert second.associated_package is widgets_package

    def test_package_members_flatten_entry_points(self, widgets_package: ApiItem, widget_class: ApiItem) -> None:
        """Package scope sees through the entry point."""
        assert widgets_package.package_members == [widget_class]

    def test_static_modifier_in_excerpt(self) -> None:
        """Static members show the modifier in their signature."""
        item = ApiItem(kind=ApiItemKind.PROPERTY, display_name="count", excerpt="count: number;", is_static=True)

        assert item.excerpt_with_modifiers == "static count: number;"

    def test_loads_camel_case_json(self) -> None:
        """api-extractor style field names validate directly."""
        item = ApiItem.model_validate(
            {
                "kind": "Method",
                "displayName": "render",
                "overloadIndex": 2,
                "releaseTag": "Beta",
                "returnTypeExcerpt": "string",
                "parameters": [{"name": "size", "typeExcerpt": "number"}],
                "docComment": {
                    "summary": [{"kind": "paragraph", "nodes": [{"kind": "plain_text", "text": "Renders."}]}],
                    "deprecated": [],
                    "customBlocks": [{"tagName": "@example", "content": []}],
                },
            }
        )

        assert item.overload_index == 2
        assert item.release_tag is ReleaseTag.BETA
        assert item.parameters[0].type_excerpt == "number"
        assert item.is_deprecated
        assert len(item.doc_comment.blocks_with_tag("example")) == 1

    def test_rejects_zero_overload_index(self) -> None:
        """Overload indexes are 1-based."""
        with pytest.raises(ValidationError):
            ApiItem(kind=ApiItemKind.METHOD, display_name="x", overload_index=0)


class TestDocComment:
    """Tests for doc comment helpers."""

    def test_blocks_with_tag_ignores_case_and_at_sign(self) -> None:
        """'@Throws' and 'throws' name the same block."""
        comment = DocComment.model_validate(
            {"customBlocks": [{"tagName": "@Throws"}, {"tagName": "@example"}]}
        )

        assert [block.tag_name for block in comment.blocks_with_tag("throws")] == ["@Throws"]
