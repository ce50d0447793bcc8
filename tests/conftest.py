"""Test setup for apidoc2md."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from apidoc2md.schemas import (  # noqa: E402
    ApiItem,
    ApiItemKind,
    ApiParameter,
    DocComment,
    DocParagraph,
    DocPlainText,
    build_api_model,
)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest."""
    config.addinivalue_line(
        "markers",
        "end_to_end: renders a whole model through the documenter",
    )


def paragraph(text: str) -> DocParagraph:
    return DocParagraph.of(DocPlainText(text=text))


@pytest.fixture
def widgets_model() -> ApiItem:
    """``@scope/widgets`` with one class ``Widget`` and two ``render`` overloads."""
    constructor = ApiItem(
        kind=ApiItemKind.CONSTRUCTOR,
        display_name="constructor",
        excerpt="constructor(x: number);",
        parameters=[ApiParameter(name="x", type_excerpt="number")],
    )
    size = ApiItem(
        kind=ApiItemKind.PROPERTY,
        display_name="size",
        excerpt="size: number;",
        property_type_excerpt="number",
        doc_comment=DocComment(summary=(paragraph("Current size."),)),
    )
    render = ApiItem(
        kind=ApiItemKind.METHOD,
        display_name="render",
        overload_index=1,
        excerpt="render(size: number): string;",
        parameters=[ApiParameter(name="size", type_excerpt="number", description=(paragraph("Target size."),))],
        return_type_excerpt="string",
        doc_comment=DocComment(summary=(paragraph("Renders the widget."),)),
    )
    render_with_quality = ApiItem(
        kind=ApiItemKind.METHOD,
        display_name="render",
        overload_index=2,
        excerpt="render(size: number, quality: Quality): string;",
        parameters=[
            ApiParameter(name="size", type_excerpt="number"),
            ApiParameter(name="quality", type_excerpt="Quality"),
        ],
        return_type_excerpt="string",
        doc_comment=DocComment(summary=(paragraph("Renders the widget at a given quality."),)),
    )
    widget = ApiItem(
        kind=ApiItemKind.CLASS,
        display_name="Widget",
        excerpt="export declare class Widget",
        members=[constructor, size, render, render_with_quality],
        doc_comment=DocComment(summary=(paragraph("A widget."),)),
    )
    entry_point = ApiItem(kind=ApiItemKind.ENTRY_POINT, members=[widget])
    package = ApiItem(
        kind=ApiItemKind.PACKAGE,
        display_name="@scope/widgets",
        members=[entry_point],
        doc_comment=DocComment(summary=(paragraph("Widgets package."),)),
    )
    return build_api_model([package])


@pytest.fixture
def widgets_package(widgets_model: ApiItem) -> ApiItem:
    return widgets_model.members[0]


@pytest.fixture
def widget_class(widgets_package: ApiItem) -> ApiItem:
    return widgets_package.package_members[0]


@pytest.fixture
def render_overloads(widget_class: ApiItem) -> tuple[ApiItem, ApiItem]:
    first, second = (member for member in widget_class.members if member.display_name == "render")
    return first, second
