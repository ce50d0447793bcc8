"""Custom exceptions for apidoc2md."""


class Apidoc2mdError(Exception):
    """Base exception for apidoc2md operations."""


class ModelError(Apidoc2mdError):
    """The API model input is invalid or could not be read."""


class FetchError(ModelError):
    """Error while fetching a remote API model."""


class ModelNotFoundError(FetchError):
    """The remote API model does not exist."""


class RenderError(Apidoc2mdError):
    """Error while composing or emitting a page."""


class DocStructureError(RenderError):
    """A document tree is malformed (e.g. table row/header arity mismatch)."""


class UnsupportedNodeError(RenderError):
    """A doc node kind has neither a standard rule nor an override."""


class UnsupportedItemKindError(RenderError):
    """An API item kind cannot be laid out on a page."""


class OutputError(Apidoc2mdError):
    """The output destination could not be written."""
