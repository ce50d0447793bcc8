"""API entity model consumed by the documenter.

This is the already-resolved declaration graph: packages, their entry points,
and the classes/members below them, each with an optional structured doc
comment. Field aliases are camelCase so api-extractor style JSON validates
directly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from apidoc2md.schemas.nodes import DocNode


class ApiItemKind(str, Enum):
    """Kinds of declarations in the API model."""

    MODEL = "Model"
    PACKAGE = "Package"
    ENTRY_POINT = "EntryPoint"
    NAMESPACE = "Namespace"
    CLASS = "Class"
    INTERFACE = "Interface"
    ENUM = "Enum"
    ENUM_MEMBER = "EnumMember"
    CONSTRUCTOR = "Constructor"
    CONSTRUCT_SIGNATURE = "ConstructSignature"
    METHOD = "Method"
    METHOD_SIGNATURE = "MethodSignature"
    FUNCTION = "Function"
    PROPERTY = "Property"
    PROPERTY_SIGNATURE = "PropertySignature"
    TYPE_ALIAS = "TypeAlias"
    VARIABLE = "Variable"


class ReleaseTag(str, Enum):
    NONE = "None"
    INTERNAL = "Internal"
    ALPHA = "Alpha"
    BETA = "Beta"
    PUBLIC = "Public"


_UNDECLARED_KINDS = frozenset({ApiItemKind.MODEL, ApiItemKind.PACKAGE, ApiItemKind.ENTRY_POINT})

PARAMETERIZED_KINDS = frozenset(
    {
        ApiItemKind.CONSTRUCTOR,
        ApiItemKind.CONSTRUCT_SIGNATURE,
        ApiItemKind.METHOD,
        ApiItemKind.METHOD_SIGNATURE,
        ApiItemKind.FUNCTION,
    }
)

RETURN_TYPE_KINDS = frozenset({ApiItemKind.METHOD, ApiItemKind.METHOD_SIGNATURE, ApiItemKind.FUNCTION})

PROPERTY_KINDS = frozenset({ApiItemKind.PROPERTY, ApiItemKind.PROPERTY_SIGNATURE})


class _ApiSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocBlock(_ApiSchema):
    """A tagged block of a doc comment, e.g. ``@example`` or ``@throws``."""

    tag_name: str
    content: tuple[DocNode, ...] = ()


class DocComment(_ApiSchema):
    """Structured documentation comment attached to an API item."""

    summary: tuple[DocNode, ...] = ()
    remarks: tuple[DocNode, ...] | None = None
    returns: tuple[DocNode, ...] | None = None
    deprecated: tuple[DocNode, ...] | None = None
    custom_blocks: tuple[DocBlock, ...] = ()

    def blocks_with_tag(self, tag_name: str) -> list[DocBlock]:
        """Return custom blocks matching ``tag_name``, ignoring case and a leading ``@``."""
        wanted = tag_name.lstrip("@").upper()
        return [block for block in self.custom_blocks if block.tag_name.lstrip("@").upper() == wanted]


class ApiParameter(_ApiSchema):
    name: str
    type_excerpt: str = ""
    description: tuple[DocNode, ...] = ()


class ApiItem(_ApiSchema):
    """A declared entity in the API model.

    Attributes:
        kind: Declaration kind.
        display_name: Name as written in the source (packages keep their scope).
        members: Child items in declaration order.
        overload_index: 1-based position among same-named sibling signatures.
        excerpt: Declaration signature text.
        release_tag: Release maturity.
        is_static: Whether the member is static.
        is_event_property: Whether a property is an event.
        property_type_excerpt: Declared type of a property.
        initializer_excerpt: Initializer of an enum member.
        parameters: Parameters of a function-like item.
        return_type_excerpt: Declared return type of a function-like item.
        doc_comment: Structured documentation, if any.
    """

    kind: ApiItemKind
    display_name: str = ""
    members: list[ApiItem] = Field(default_factory=list)
    overload_index: int = Field(1, ge=1)
    excerpt: str = ""
    release_tag: ReleaseTag = ReleaseTag.PUBLIC
    is_static: bool = False
    is_event_property: bool = False
    property_type_excerpt: str | None = None
    initializer_excerpt: str | None = None
    parameters: list[ApiParameter] = Field(default_factory=list)
    return_type_excerpt: str | None = None
    doc_comment: DocComment | None = None

    _parent: ApiItem | None = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for member in self.members:
            member._parent = self

    # Items form a linked graph; compare and hash by identity.
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def parent(self) -> ApiItem | None:
        return self._parent

    def get_hierarchy(self) -> list[ApiItem]:
        """Return the ancestor chain from the model root down to this item."""
        chain: list[ApiItem] = []
        item: ApiItem | None = self
        while item is not None:
            chain.append(item)
            item = item.parent
        chain.reverse()
        return chain

    @property
    def associated_package(self) -> ApiItem | None:
        for item in reversed(self.get_hierarchy()):
            if item.kind is ApiItemKind.PACKAGE:
                return item
        return None

    @property
    def scoped_name_within_package(self) -> str:
        """Dotted name below the package, e.g. ``Namespace1.Widget.render``."""
        return ".".join(
            item.display_name for item in self.get_hierarchy() if item.kind not in _UNDECLARED_KINDS
        )

    @property
    def is_declared(self) -> bool:
        return self.kind not in _UNDECLARED_KINDS

    @property
    def has_parameters(self) -> bool:
        return self.kind in PARAMETERIZED_KINDS

    @property
    def has_return_type(self) -> bool:
        return self.kind in RETURN_TYPE_KINDS

    @property
    def has_release_tag(self) -> bool:
        return self.is_declared

    @property
    def is_deprecated(self) -> bool:
        return self.doc_comment is not None and self.doc_comment.deprecated is not None

    @property
    def excerpt_with_modifiers(self) -> str:
        if self.is_static and not self.excerpt.startswith("static "):
            return f"static {self.excerpt}"
        return self.excerpt

    @property
    def canonical_reference(self) -> str:
        """Reference string that resolves back to exactly this item."""
        package = self.associated_package
        scoped = self.scoped_name_within_package
        reference = f"{package.display_name}!{scoped}" if package is not None else scoped
        if self.has_parameters:
            reference += f":{self.overload_index}"
        return reference

    @property
    def package_members(self) -> list[ApiItem]:
        """Members visible at package scope (flattened across entry points)."""
        if self.kind is not ApiItemKind.PACKAGE:
            return list(self.members)
        members: list[ApiItem] = []
        for entry_point in self.members:
            if entry_point.kind is ApiItemKind.ENTRY_POINT:
                members.extend(entry_point.members)
        return members

    def iter_items(self) -> Iterator[ApiItem]:
        """Walk this item and its descendants depth-first."""
        yield self
        for member in self.members:
            yield from member.iter_items()


def build_api_model(packages: list[ApiItem]) -> ApiItem:
    """Wrap packages in a Model root item."""
    return ApiItem(kind=ApiItemKind.MODEL, display_name="", members=packages)
