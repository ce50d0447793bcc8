"""Load the API model from api-extractor style JSON documents.

A source is a single ``*.api.json`` file, a folder of them, or an http(s) URL,
and several sources may be combined. Each document holds either one Package
item or a whole Model item; all packages end up under a single Model root, in
the order the sources were given.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Union

from pydantic import ValidationError

from apidoc2md.exceptions import DocStructureError, ModelError, ModelNotFoundError
from apidoc2md.http_utils import fetch_all
from apidoc2md.schemas import ApiItem, ApiItemKind, build_api_model

logger = logging.getLogger(__name__)

API_JSON_GLOB = "*.api.json"

Source = Union[str, Path]


def is_url(source: Source) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def parse_api_document(text: str, origin: str) -> ApiItem:
    """Validate one JSON document into an API item.

    Raises:
        ModelError: If the document is not a valid Package or Model item.
    """
    try:
        item = ApiItem.model_validate_json(text)
    except (ValidationError, DocStructureError) as exc:
        raise ModelError(f"Invalid API model in {origin}: {exc}") from exc

    if item.kind not in (ApiItemKind.MODEL, ApiItemKind.PACKAGE):
        raise ModelError(f"{origin} must contain a Package or Model item, not {item.kind.value}")
    return item


def _source_files(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(path.glob(API_JSON_GLOB))
        if not files:
            raise ModelError(f"No {API_JSON_GLOB} files found in {path}")
        return files
    if path.is_file():
        return [path]
    raise ModelError(f"API model input not found: {path}")


def _read_documents(path: Path) -> list[ApiItem]:
    documents = []
    for file in _source_files(path.expanduser()):
        logger.debug("Reading API model from %s", file)
        try:
            text = file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ModelError(f"Unable to read {file}: {exc}") from exc
        documents.append(parse_api_document(text, str(file)))
    return documents


def _fetch_documents(urls: list[str]) -> dict[str, str]:
    if not urls:
        return {}
    logger.info("Fetching %d remote API model(s)", len(urls))
    bodies = asyncio.run(fetch_all(urls, not_found=ModelNotFoundError))
    return dict(zip(urls, bodies))


def load_api_model(sources: Source | Iterable[Source]) -> ApiItem:
    """Load every document behind ``sources`` into one Model item.

    All URLs are downloaded in one batch before any document is parsed.

    Raises:
        ModelError: If an input is missing, unreadable or invalid.
        ModelNotFoundError: If a URL answers 404.
    """
    if isinstance(sources, (str, Path)):
        sources = [sources]
    sources = list(sources)
    if not sources:
        raise ModelError("No API model input given")

    remote = _fetch_documents(list(dict.fromkeys(str(source) for source in sources if is_url(source))))

    documents: list[ApiItem] = []
    for source in sources:
        if is_url(source):
            documents.append(parse_api_document(remote[str(source)], str(source)))
        else:
            documents.extend(_read_documents(Path(source)))

    packages: list[ApiItem] = []
    for document in documents:
        if document.kind is ApiItemKind.MODEL:
            packages.extend(member for member in document.members if member.kind is ApiItemKind.PACKAGE)
        else:
            packages.append(document)

    logger.info("Loaded %d package(s)", len(packages))
    return build_api_model(packages)
