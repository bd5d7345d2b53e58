"""
Reading and writing résumé documents.

JSON files are read with json, YAML files with OmegaConf. Both are returned as
plain containers and only then normalized, so malformed content degrades the
same way whatever the file format.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from omegaconf import OmegaConf

from tailor.contexts.document.exceptions import DocumentFormatError
from tailor.contexts.document.logger import _log_debug, _log_info, _log_warning
from tailor.contexts.document.normalizer import RawDocument, normalize
from tailor.contexts.document.resume_data_structure import ResumeDocument

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


def _check_suffix(path: Path) -> None:
    if path.suffix.lower() not in JSON_SUFFIXES | YAML_SUFFIXES:
        raise DocumentFormatError(
            f"Unsupported document format '{path.suffix}'. Use .json, .yaml or .yml", path
        )


def load_document_data(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a raw résumé mapping from a JSON or YAML file.

    Args:
        path: File path (.json, .yaml, .yml)

    Returns:
        Plain dict as stored in the file (not normalized)

    Raises:
        FileNotFoundError: If path does not exist
        DocumentFormatError: If the suffix is unsupported, the content does not
            parse, or the top level is not a mapping
    """
    path = Path(path)
    _check_suffix(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    try:
        if path.suffix.lower() in JSON_SUFFIXES:
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    except Exception as e:
        raise DocumentFormatError(f"Failed to parse document: {e}", path) from e

    if not isinstance(data, dict):
        raise DocumentFormatError("Document top level must be a mapping", path)

    _log_debug(f"Loaded {path.name} ({len(data)} top-level keys)")
    return data


def load_document(path: Union[str, Path], fallback: RawDocument = None) -> ResumeDocument:
    """Load and normalize a document, optionally backfilling from `fallback`."""
    return normalize(load_document_data(path), fallback=fallback)


def save_document(document: ResumeDocument, path: Union[str, Path]) -> Path:
    """
    Write a document in wire format; JSON or YAML chosen by suffix.

    Returns:
        The written path
    """
    path = Path(path)
    _check_suffix(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = document.to_dict()
    if path.suffix.lower() in JSON_SUFFIXES:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    else:
        OmegaConf.save(OmegaConf.create(data), path)

    _log_info(f"Saved document to {path}")
    return path


def save_json_snapshot(data: Any, path: Union[str, Path]) -> Optional[Path]:
    """
    Best-effort dump of arbitrary JSON data (debugging artifact).

    Returns:
        The written path, or None when writing failed (failure is logged, not raised)
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    except OSError as e:
        _log_warning(f"Failed to save snapshot {path}: {e}")
        return None
    return path
