"""Output paths and in-page anchors for API items.

Addresses are a pure function of an item's ancestor chain, kind and overload
index, so resolving the same item twice always gives the same result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from apidoc2md.schemas import ApiItem, ApiItemKind

_BAD_FILENAME_CHARS_RE = re.compile(r"[^a-z0-9_\-.]", re.IGNORECASE)

_ANCHOR_ROLES: dict[ApiItemKind, str] = {
    ApiItemKind.METHOD: "method",
    ApiItemKind.METHOD_SIGNATURE: "method",
    ApiItemKind.PROPERTY: "property",
    ApiItemKind.PROPERTY_SIGNATURE: "property",
    ApiItemKind.ENUM_MEMBER: "member",
}

_CONSTRUCTOR_KINDS = frozenset({ApiItemKind.CONSTRUCTOR, ApiItemKind.CONSTRUCT_SIGNATURE})

# Items documented inside their parent's page rather than on a page of their own.
ANCHORED_KINDS = frozenset(_ANCHOR_ROLES) | _CONSTRUCTOR_KINDS


class Layout(str, Enum):
    FLAT = "flat"
    NESTED = "nested"


@dataclass(frozen=True)
class OutputAddress:
    """Where an item's documentation lives: a page path plus an optional anchor."""

    path: tuple[str, ...]
    anchor: str | None = None

    @property
    def file_path(self) -> str:
        return "/".join(self.path)

    @property
    def directories(self) -> tuple[str, ...]:
        return self.path[:-1]

    def __str__(self) -> str:
        if self.anchor:
            return f"{self.file_path}#{self.anchor}"
        return self.file_path


def get_safe_filename_for_name(name: str) -> str:
    """Replace characters that are unsafe in file names with ``_`` and lowercase.

    This can map two distinct names onto the same file name; such collisions
    are not detected here.
    """
    return _BAD_FILENAME_CHARS_RE.sub("_", name).lower()


def get_unscoped_name(package_name: str) -> str:
    """``@scope/name`` -> ``name``; unscoped names pass through."""
    if package_name.startswith("@") and "/" in package_name:
        return package_name.split("/", 1)[1]
    return package_name


def get_import_name(name: str) -> str:
    return _BAD_FILENAME_CHARS_RE.sub("", name)


def get_header_link_for_name(name: str) -> str:
    return _BAD_FILENAME_CHARS_RE.sub("", name.replace("(", "-", 1)).lower()


def get_concise_signature(item: ApiItem) -> str:
    """Generate a concise signature for a function, e.g. ``getArea(width, height)``."""
    display_name = item.display_name
    if item.kind in _CONSTRUCTOR_KINDS:
        display_name = _BAD_FILENAME_CHARS_RE.sub("", display_name)
    if item.has_parameters:
        return display_name + "(" + ", ".join(parameter.name for parameter in item.parameters) + ")"
    return display_name


def _overload_suffix(item: ApiItem) -> str:
    if item.has_parameters and item.overload_index > 1:
        # Subtract one for compatibility with earlier naming: the second
        # overload is "_1", not "_2".
        return f"_{item.overload_index - 1}"
    return ""


def _qualified_segment(item: ApiItem) -> str:
    return get_safe_filename_for_name(item.display_name) + _overload_suffix(item)


def _anchor_for(item: ApiItem) -> str:
    if item.kind in _CONSTRUCTOR_KINDS:
        return get_header_link_for_name(get_concise_signature(item)) + _overload_suffix(item)
    return f"{_qualified_segment(item)}-{_ANCHOR_ROLES[item.kind]}"


class PathNamer:
    """Compute output addresses for one physical layout.

    ``flat`` keeps every page of a package in the package directory, with
    dot-joined names (``widgets/ns.widget.md``). ``nested`` gives every
    container its own directory holding an index file
    (``widgets/ns/widget/_index.md``).
    """

    def __init__(self, layout: Layout = Layout.FLAT, *, index_filename: str = "index.md") -> None:
        self.layout = Layout(layout)
        self.index_filename = index_filename

    def address_for(self, item: ApiItem) -> OutputAddress:
        segments: list[str] = []
        anchor: str | None = None

        for level in item.get_hierarchy():
            if level.kind in (ApiItemKind.MODEL, ApiItemKind.ENTRY_POINT):
                continue
            if level.kind is ApiItemKind.PACKAGE:
                segments = [get_safe_filename_for_name(get_unscoped_name(level.display_name))]
            elif level.kind in ANCHORED_KINDS:
                anchor = _anchor_for(level)
            else:
                segments.append(_qualified_segment(level))

        return OutputAddress(path=self._page_path(segments), anchor=anchor)

    def container_depth(self, item: ApiItem) -> int:
        """Number of directories between the output root and the item's page."""
        return len(self.address_for(item).directories)

    def relative_link(self, target: ApiItem, context: ApiItem) -> str:
        """Link from the page of ``context`` to wherever ``target`` is documented."""
        target_address = self.address_for(target)
        context_address = self.address_for(context)

        if target_address.path == context_address.path and target_address.anchor:
            return f"#{target_address.anchor}"

        context_dirs = context_address.directories
        target_path = target_address.path
        common = 0
        for context_dir, target_dir in zip(context_dirs, target_path[:-1]):
            if context_dir != target_dir:
                break
            common += 1

        climbs = len(context_dirs) - common
        remainder = "/".join(target_path[common:])
        link = "../" * climbs + remainder if climbs else f"./{remainder}"
        if target_address.anchor:
            link += f"#{target_address.anchor}"
        return link

    def _page_path(self, segments: list[str]) -> tuple[str, ...]:
        if not segments:
            return (self.index_filename,)
        package, containers = segments[0], segments[1:]
        if not containers:
            return (package, self.index_filename)
        if self.layout is Layout.NESTED:
            return (package, *containers, self.index_filename)
        return (package, ".".join(containers) + ".md")
