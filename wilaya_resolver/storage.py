"""Persist and load the built index artifact."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from .index import CommuneIndex, IndexFormatError

logger = logging.getLogger(__name__)


def dumps_document(document: Dict[str, Any]) -> str:
    """Serialize with a fixed layout so identical inputs give identical bytes."""

    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


def save_document(document: Dict[str, Any], path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps_document(document)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def load_document(path: str | Path) -> Dict[str, Any]:
    source = Path(path)
    with source.open("r", encoding="utf-8-sig") as fh:
        try:
            document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise IndexFormatError(f"{source} is not valid JSON") from exc
    if not isinstance(document, dict):
        raise IndexFormatError(f"{source} must contain a JSON object")
    return document


def save_index(index: CommuneIndex, path: str | Path) -> Path:
    target = save_document(index.to_document(), path)
    logger.info("Wrote %s communes to %s", len(index), target)
    return target


def load_index(path: str | Path) -> CommuneIndex:
    index = CommuneIndex.from_document(load_document(path))
    logger.info("Loaded %s communes from %s", len(index), path)
    return index
