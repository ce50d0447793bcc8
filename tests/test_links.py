"""Tests for declaration reference resolution."""

from __future__ import annotations

import pytest

from apidoc2md.links import DeclarationReference, LinkResolver, ResolvedLink, Unresolved
from apidoc2md.schemas import ApiItem, ApiItemKind, build_api_model


def _package(name: str, *members: ApiItem) -> ApiItem:
    return ApiItem(
        kind=ApiItemKind.PACKAGE,
        display_name=name,
        members=[ApiItem(kind=ApiItemKind.ENTRY_POINT, members=list(members))],
    )


class TestDeclarationReference:
    """Tests for DeclarationReference.parse."""

    def test_parses_package_members_and_overload(self) -> None:
        """All parts of a full reference are recognised."""
        reference = DeclarationReference.parse("@scope/widgets!Widget#render:2")

        assert reference == DeclarationReference(
            package_name="@scope/widgets", member_names=("Widget", "render"), overload_index=2
        )

    def test_parses_bare_member_path(self) -> None:
        """Package and overload are optional."""
        reference = DeclarationReference.parse("Widget.render()")

        assert reference.package_name is None
        assert reference.member_names == ("Widget", "render")
        assert reference.overload_index is None

    def test_rejects_empty_reference(self) -> None:
        """An empty reference is malformed."""
        with pytest.raises(ValueError):
            DeclarationReference.parse("  ")


class TestResolveItem:
    """Tests for LinkResolver.resolve_item."""

    def test_without_overload_picks_first(
        self, widgets_model: ApiItem, render_overloads: tuple[ApiItem, ApiItem]
    ) -> None:
        """An ambiguous reference resolves to the lowest overload index."""
        assert LinkResolver(widgets_model).resolve_item("Widget.render") is render_overloads[0]

    def test_explicit_overload(self, widgets_model: ApiItem, render_overloads: tuple[ApiItem, ApiItem]) -> None:
        """':2' selects the second overload."""
        resolver = LinkResolver(widgets_model)

        assert resolver.resolve_item("@scope/widgets!Widget.render:2") is render_overloads[1]
        assert resolver.resolve_item("widgets!Widget#render:2") is render_overloads[1]

    def test_canonical_reference_round_trips(self, widgets_model: ApiItem) -> None:
        """Every item's canonical reference resolves back to that item."""
        resolver = LinkResolver(widgets_model)
        package = widgets_model.members[0]
        items = [item for item in package.iter_items() if item.kind is not ApiItemKind.ENTRY_POINT]

        for item in items:
            assert resolver.resolve_item(item.canonical_reference) is item

    def test_unknown_member(self, widgets_model: ApiItem) -> None:
        """A missing member yields Unresolved with a reason."""
        result = LinkResolver(widgets_model).resolve_item("Widget.explode")

        assert isinstance(result, Unresolved)
        assert "not found" in result.reason

    def test_unknown_package(self, widgets_model: ApiItem) -> None:
        """A missing package yields Unresolved with a reason."""
        result = LinkResolver(widgets_model).resolve_item("gadgets!Widget")

        assert isinstance(result, Unresolved)
        assert "could not be located" in result.reason

    def test_malformed_reference_does_not_raise(self, widgets_model: ApiItem) -> None:
        """Parse errors are reported, not raised."""
        assert isinstance(LinkResolver(widgets_model).resolve_item(""), Unresolved)

    def test_context_package_searched_first(self) -> None:
        """The package of the context item wins over earlier packages."""
        first_widget = ApiItem(kind=ApiItemKind.CLASS, display_name="Widget")
        second_widget = ApiItem(kind=ApiItemKind.CLASS, display_name="Widget")
        helper = ApiItem(kind=ApiItemKind.FUNCTION, display_name="helper")
        model = build_api_model([_package("alpha", first_widget), _package("beta", second_widget, helper)])
        resolver = LinkResolver(model)

        assert resolver.resolve_item("Widget", helper) is second_widget
        assert resolver.resolve_item("Widget") is first_widget


    def test_merged_declarations_follow_the_path(self) -> None:
        """A class and a namespace sharing a name: the member path picks the namespace."""
        origin = ApiItem(kind=ApiItemKind.FUNCTION, display_name="origin")
        point_class = ApiItem(kind=ApiItemKind.CLASS, display_name="Point")
        point_namespace = ApiItem(kind=ApiItemKind.NAMESPACE, display_name="Point", members=[origin])
        model = build_api_model([_package("points", point_class, point_namespace)])
        resolver = LinkResolver(model)

        assert resolver.resolve_item("Point.origin") is origin
        assert resolver.resolve_item("Point") is point_class


class TestResolveLink:
    """Tests for LinkResolver.resolve_link."""

    def test_synthesizes_text_from_scoped_name(
        self, widgets_model: ApiItem, render_overloads: tuple[ApiItem, ApiItem]
    ) -> None:
        """Without link text the scoped name is used."""
        result = LinkResolver(widgets_model).resolve_link("Widget.render:2", None, lambda item: "#anchor")

        assert result == ResolvedLink(item=render_overloads[1], href="#anchor", text="Widget.render")

    def test_collapses_whitespace_in_text(self, widgets_model: ApiItem) -> None:
        """Runs of whitespace in explicit text become single spaces."""
        result = LinkResolver(widgets_model).resolve_link(
            "Widget", None, lambda item: "./widget.md", link_text="the\n   widget "
        )

        assert isinstance(result, ResolvedLink)
        assert result.text == "the widget"

    def test_target_without_address(self, widgets_model: ApiItem) -> None:
        """A target the caller cannot link to is unresolved."""
        result = LinkResolver(widgets_model).resolve_link("Widget", None, lambda item: None)

        assert isinstance(result, Unresolved)
