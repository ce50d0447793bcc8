"""Resolve symbolic declaration references to API items and hyperlinks.

Reference syntax::

    [<package>!]Name(.Name|#Name)*[:<overloadIndex>]

e.g. ``@scope/widgets!Widget#render:2`` or simply ``Widget.render``. Without an
explicit package the context item's package is searched first, then every
other package in model order. Without an overload index the first overload
wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from apidoc2md.naming import get_unscoped_name
from apidoc2md.schemas import ApiItem, ApiItemKind

_REFERENCE_RE = re.compile(
    r"^(?:(?P<package>[^!]+)!)?(?P<path>[^:!]*?)(?:\(\))?(?::(?P<overload>\d+))?$"
)
_MEMBER_SEPARATOR_RE = re.compile(r"[.#]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class DeclarationReference:
    package_name: str | None
    member_names: tuple[str, ...]
    overload_index: int | None = None

    @classmethod
    def parse(cls, text: str) -> DeclarationReference:
        """Parse a reference string.

        Raises:
            ValueError: If the text is not a well-formed reference.
        """
        match = _REFERENCE_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Malformed declaration reference {text!r}")

        path = match.group("path")
        member_names = tuple(name for name in _MEMBER_SEPARATOR_RE.split(path) if name) if path else ()
        package_name = match.group("package")
        if not member_names and not package_name:
            raise ValueError(f"Empty declaration reference {text!r}")

        overload = match.group("overload")
        return cls(
            package_name=package_name,
            member_names=member_names,
            overload_index=int(overload) if overload else None,
        )


@dataclass(frozen=True)
class ResolvedLink:
    item: ApiItem
    href: str
    text: str


@dataclass(frozen=True)
class Unresolved:
    reference: str
    reason: str


class LinkResolver:
    """Look up declaration references against the full API model."""

    def __init__(self, api_model: ApiItem) -> None:
        self._api_model = api_model
        self._packages = [item for item in api_model.members if item.kind is ApiItemKind.PACKAGE]

    def resolve_item(self, reference: str, context_item: ApiItem | None = None) -> ApiItem | Unresolved:
        try:
            parsed = DeclarationReference.parse(reference)
        except ValueError as exc:
            return Unresolved(reference=reference, reason=str(exc))

        packages = self._candidate_packages(parsed.package_name, context_item)
        if not packages:
            return Unresolved(
                reference=reference,
                reason=f"The package {parsed.package_name!r} could not be located",
            )

        for package in packages:
            item = self._find_in_package(package, parsed)
            if item is not None:
                return item

        return Unresolved(
            reference=reference,
            reason=f"The member reference {'.'.join(parsed.member_names)!r} was not found",
        )

    def resolve_link(
        self,
        reference: str,
        context_item: ApiItem | None,
        get_link_for_item: Callable[[ApiItem], str | None],
        link_text: str | None = None,
    ) -> ResolvedLink | Unresolved:
        """Resolve ``reference`` to link text plus an href relative to the context page.

        Missing link text is synthesized from the target's scoped name, e.g.
        ``Namespace1.Widget.render``.
        """
        result = self.resolve_item(reference, context_item)
        if isinstance(result, Unresolved):
            return result

        href = get_link_for_item(result)
        if not href:
            return Unresolved(reference=reference, reason="The target has no output address")

        text = link_text or result.scoped_name_within_package or result.display_name
        return ResolvedLink(item=result, href=href, text=_WHITESPACE_RE.sub(" ", text).strip())

    def _candidate_packages(self, package_name: str | None, context_item: ApiItem | None) -> list[ApiItem]:
        if package_name:
            return [
                package
                for package in self._packages
                if package_name in (package.display_name, get_unscoped_name(package.display_name))
            ]

        context_package = context_item.associated_package if context_item is not None else None
        if context_package is None:
            return list(self._packages)
        return [context_package] + [package for package in self._packages if package is not context_package]

    def _find_in_package(self, package: ApiItem, reference: DeclarationReference) -> ApiItem | None:
        current = package
        scope = package.package_members
        last_index = len(reference.member_names) - 1

        for index, name in enumerate(reference.member_names):
            candidates = [member for member in scope if member.display_name == name]
            if index == last_index and reference.overload_index is not None:
                candidates = [member for member in candidates if member.overload_index == reference.overload_index]
            elif index < last_index:
                # Merged declarations share a name; step into the one holding the next name.
                next_name = reference.member_names[index + 1]
                containers = [
                    member
                    for member in candidates
                    if any(child.display_name == next_name for child in member.members)
                ]
                candidates = containers or candidates
            if not candidates:
                return None
            current = min(candidates, key=lambda member: member.overload_index)
            scope = current.members

        return current
