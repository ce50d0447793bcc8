"""apidoc2md: render API models into Markdown reference pages."""

from apidoc2md.documenter import MarkdownDocumenter
from apidoc2md.exceptions import (
    Apidoc2mdError,
    DocStructureError,
    FetchError,
    ModelError,
    ModelNotFoundError,
    OutputError,
    RenderError,
    UnsupportedItemKindError,
    UnsupportedNodeError,
)
from apidoc2md.loader import load_api_model
from apidoc2md.output import NewlineKind
from apidoc2md.profiles import HUGO_PROFILE, MARKDOWN_PROFILE, RenderProfile, get_profile

__all__ = [
    "Apidoc2mdError",
    "DocStructureError",
    "FetchError",
    "HUGO_PROFILE",
    "MARKDOWN_PROFILE",
    "MarkdownDocumenter",
    "ModelError",
    "ModelNotFoundError",
    "NewlineKind",
    "OutputError",
    "RenderError",
    "RenderProfile",
    "UnsupportedItemKindError",
    "UnsupportedNodeError",
    "get_profile",
    "load_api_model",
]
