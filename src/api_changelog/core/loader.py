"""Reading OpenAPI documents from disk."""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from api_changelog.errors import DocumentLoadError

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "Unknown"


def load_document(path: Path) -> Dict[str, Any]:
    """Read and parse an OpenAPI document (YAML or JSON).

    Args:
        path: Location of the document

    Returns:
        The parsed document as a mapping

    Raises:
        DocumentLoadError: If the file cannot be read or is not an OpenAPI
            document
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"failed to read file {path}: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"failed to parse OpenAPI document {path}: {e}") from e

    if not isinstance(document, dict):
        raise DocumentLoadError(
            f"failed to parse OpenAPI document {path}: expected a mapping at the root"
        )
    if "openapi" not in document and "swagger" not in document:
        raise DocumentLoadError(
            f"failed to parse OpenAPI document {path}: no 'openapi' or 'swagger' field"
        )

    logger.info("Loaded %s", path)
    return document


def extract_api_version(document: Dict[str, Any]) -> str:
    """Return ``info.version`` of a parsed document, or ``"Unknown"``."""
    info = document.get("info") if isinstance(document, dict) else None
    if not isinstance(info, dict):
        return UNKNOWN_VERSION
    version = info.get("version")
    if version is None or isinstance(version, (dict, list)):
        return UNKNOWN_VERSION
    return str(version)
