"""Loading and adapting the raw commune lists the index is built from.

Three JSON documents feed the builder:

* the primary French list (``[{"codeC": "16001", "fr": "Alger Centre", "wilaya_id": "16"}, ...]``),
* an optional secondary French list with other field names
  (``[{"code_postal": "16001", "nom": "Alger Centre", "wilaya_id": "16"}, ...]``),
* the Arabic list (``{"communes": [{"codeC": "1601", "codeW": "16", "baladiya": "...", "wilaya": "..."}]}``).

Each French list goes through its own adapter so the builder only ever sees
:class:`FrenchCommune`. Missing mandatory files abort the build with
:class:`SourceDataError`; a broken optional file is logged and skipped.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .regions import coerce_wilaya

logger = logging.getLogger(__name__)

CODE_WIDTH = 5
_LFS_POINTER_PREFIX = "version https://git-lfs.github.com/spec/v1"


class SourceDataError(RuntimeError):
    """A mandatory source document is missing or cannot be used."""


def _fixed_width_code(value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if not text.isdigit():
        raise ValueError(f"commune code must be numeric, got {value!r}")
    return text.zfill(CODE_WIDTH)


def _required_wilaya(value: Any) -> int:
    code = coerce_wilaya(value)
    if code is None:
        raise ValueError(f"invalid wilaya id {value!r}")
    return code


def _required_name(value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError("empty commune name")
    return text


class FrenchCommune(BaseModel):
    """Canonical shape of a French commune record, whatever list it came from."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    wilaya_id: int


class PrimaryFrenchRecord(BaseModel):
    codeC: str
    fr: str
    wilaya: int = Field(validation_alias=AliasChoices("wilaya_id", "codeW"))

    @field_validator("codeC", mode="before")
    @classmethod
    def _parse_code(cls, value: Any) -> str:
        return _fixed_width_code(value)

    @field_validator("fr", mode="before")
    @classmethod
    def _parse_name(cls, value: Any) -> str:
        return _required_name(value)

    @field_validator("wilaya", mode="before")
    @classmethod
    def _parse_wilaya(cls, value: Any) -> int:
        return _required_wilaya(value)


class SecondaryFrenchRecord(BaseModel):
    code_postal: str
    nom: str
    wilaya: int = Field(validation_alias=AliasChoices("wilaya_id", "codeW"))

    @field_validator("code_postal", mode="before")
    @classmethod
    def _parse_code(cls, value: Any) -> str:
        return _fixed_width_code(value)

    @field_validator("nom", mode="before")
    @classmethod
    def _parse_name(cls, value: Any) -> str:
        return _required_name(value)

    @field_validator("wilaya", mode="before")
    @classmethod
    def _parse_wilaya(cls, value: Any) -> int:
        return _required_wilaya(value)


class ArabicCommune(BaseModel):
    """One record of the Arabic list. ``code`` follows the Arabic numbering."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: int = Field(validation_alias=AliasChoices("codeC", "code"))
    wilaya_code: Optional[int] = Field(default=None, validation_alias=AliasChoices("codeW", "wilaya_code"))
    name: str = Field(default="", validation_alias=AliasChoices("baladiya", "name"))
    wilaya_name: str = Field(default="", validation_alias=AliasChoices("wilaya", "wilaya_name"))

    @field_validator("code", mode="before")
    @classmethod
    def _parse_code(cls, value: Any) -> int:
        text = str(value).strip() if value is not None else ""
        if not text or not text.isdigit() or int(text) == 0:
            raise ValueError(f"missing Arabic commune code {value!r}")
        return int(text)

    @field_validator("wilaya_code", mode="before")
    @classmethod
    def _parse_wilaya(cls, value: Any) -> Optional[int]:
        return coerce_wilaya(value)

    @field_validator("name", "wilaya_name", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""


def from_primary(raw: Any) -> Optional[FrenchCommune]:
    """Adapt a record of the primary French list (``codeC`` / ``fr``)."""

    try:
        record = PrimaryFrenchRecord.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Skipping primary French record %r: %s", raw, exc.errors()[0]["msg"])
        return None
    return FrenchCommune(code=record.codeC, name=record.fr, wilaya_id=record.wilaya)


def from_secondary(raw: Any) -> Optional[FrenchCommune]:
    """Adapt a record of the secondary French list (``code_postal`` / ``nom``)."""

    try:
        record = SecondaryFrenchRecord.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Skipping secondary French record %r: %s", raw, exc.errors()[0]["msg"])
        return None
    return FrenchCommune(code=record.code_postal, name=record.nom, wilaya_id=record.wilaya)


def adapt_records(records: Iterable[Any], adapter: Callable[[Any], Optional[FrenchCommune]]) -> List[FrenchCommune]:
    adapted = [adapter(raw) for raw in records]
    kept = [commune for commune in adapted if commune is not None]
    skipped = len(adapted) - len(kept)
    if skipped:
        logger.info("Skipped %s French records without a name or a valid wilaya", skipped)
    return kept


def parse_arabic(document: Any) -> List[ArabicCommune]:
    if isinstance(document, dict):
        raw_communes = document.get("communes") or []
    else:
        raise SourceDataError(f"Arabic source must be an object with a 'communes' array, got {type(document).__name__}")
    if not isinstance(raw_communes, list):
        raise SourceDataError("Arabic source 'communes' must be an array")
    communes: List[ArabicCommune] = []
    for raw in raw_communes:
        try:
            communes.append(ArabicCommune.model_validate(raw))
        except ValidationError:
            logger.debug("Skipping Arabic record without a code: %r", raw)
    return communes


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8-sig") as fh:
        first_line = fh.readline()
        # Git LFS placeholder instead of the real data.
        if first_line.startswith(_LFS_POINTER_PREFIX):
            raise ValueError(f"{path} is a Git LFS pointer; real data not downloaded")
        fh.seek(0)
        return json.load(fh)


def load_required(path: str | Path) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise SourceDataError(f"Required source file missing: {file_path}")
    try:
        return _read_json(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise SourceDataError(f"Required source file unreadable: {file_path}") from exc


def load_optional(path: str | Path | None) -> Any:
    if not path:
        return None
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Optional source file %s is missing; skipping", file_path)
        return None
    try:
        return _read_json(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("Failed to parse optional source %s, skipping: %s", file_path, exc)
        return None


@dataclass(frozen=True)
class SourceSnapshot:
    """French lists in processing order plus the Arabic list."""

    french: tuple[tuple[FrenchCommune, ...], ...]
    arabic: tuple[ArabicCommune, ...]


def load_sources(
    primary_fr_path: str | Path,
    arabic_path: str | Path,
    secondary_fr_path: str | Path | None = None,
) -> SourceSnapshot:
    primary = load_required(primary_fr_path)
    if not isinstance(primary, list):
        raise SourceDataError(f"Primary French source {primary_fr_path} must be a JSON array")
    arabic = parse_arabic(load_required(arabic_path))

    french = [tuple(adapt_records(primary, from_primary))]
    secondary = load_optional(secondary_fr_path)
    if secondary is not None:
        if isinstance(secondary, list):
            french.append(tuple(adapt_records(secondary, from_secondary)))
        else:
            logger.warning("Optional source %s is not a JSON array; skipping", secondary_fr_path)

    logger.info(
        "Loaded %s French lists (%s records) and %s Arabic records",
        len(french),
        sum(len(items) for items in french),
        len(arabic),
    )
    return SourceSnapshot(french=tuple(french), arabic=tuple(arabic))
