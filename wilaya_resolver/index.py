"""Immutable commune index and its serialized document form.

The persisted artifact is a single JSON object::

    {
      "byCode": {"16001": {"codeC": "16001", "fr": "...", "ar": "...",
                           "wilayaCode": "16", "wilayaAr": "...", "wilayaFr": "..."}},
      "arToFr": {normalized arabic name: french name},
      "frToFr": {normalized french name: french name},
      "byArWithWilaya": {"<name>||<wilaya>": french name},
      "byFrWithWilaya": {"<name>||<wilaya>": french name},
      "aliases": {normalized alias: french name}
    }

``aliases`` is an addition; older artifacts without it still load.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping

from .regions import coerce_wilaya, wilaya_name_fr


class IndexFormatError(ValueError):
    """Raised when a persisted index document cannot be turned into an index."""


@dataclass(frozen=True)
class CommuneEntry:
    code: str
    name_fr: str
    name_ar: str
    wilaya_code: int
    wilaya_name_fr: str
    wilaya_name_ar: str

    @property
    def wilaya_id(self) -> int:
        """Wilaya from the first two digits of the code, else the stored one."""

        if len(self.code) >= 2:
            prefix = coerce_wilaya(self.code[:2]) if self.code[:2].isdigit() else None
            if prefix is not None:
                return prefix
        return self.wilaya_code

    def to_document(self) -> Dict[str, str]:
        return {
            "codeC": self.code,
            "fr": self.name_fr,
            "ar": self.name_ar,
            "wilayaCode": str(self.wilaya_code),
            "wilayaAr": self.wilaya_name_ar,
            "wilayaFr": self.wilaya_name_fr,
        }

    @classmethod
    def from_document(cls, key: str, raw: Any) -> "CommuneEntry":
        if not isinstance(raw, dict):
            raise IndexFormatError(f"byCode[{key!r}] must be an object")
        wilaya_code = coerce_wilaya(raw.get("wilayaCode"))
        code = str(raw.get("codeC") or key)
        if wilaya_code is None and code[:2].isdigit():
            wilaya_code = coerce_wilaya(code[:2])
        if wilaya_code is None:
            raise IndexFormatError(f"byCode[{key!r}] has no usable wilayaCode")
        return cls(
            code=code,
            name_fr=str(raw.get("fr") or ""),
            name_ar=str(raw.get("ar") or ""),
            wilaya_code=wilaya_code,
            wilaya_name_fr=str(raw.get("wilayaFr") or wilaya_name_fr(wilaya_code)),
            wilaya_name_ar=str(raw.get("wilayaAr") or ""),
        )


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CommuneIndex:
    """Read-only lookup tables built once from the commune sources.

    ``by_code`` is the source of truth, in build order. The reverse maps all
    point at canonical French display names and are keyed by normalized text.
    """

    by_code: Mapping[str, CommuneEntry]
    ar_to_fr: Mapping[str, str] = field(default_factory=dict)
    fr_to_fr: Mapping[str, str] = field(default_factory=dict)
    by_ar_with_wilaya: Mapping[str, str] = field(default_factory=dict)
    by_fr_with_wilaya: Mapping[str, str] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("by_code", "ar_to_fr", "fr_to_fr", "by_ar_with_wilaya", "by_fr_with_wilaya", "aliases"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def __len__(self) -> int:
        return len(self.by_code)

    def __iter__(self) -> Iterator[CommuneEntry]:
        return iter(self.by_code.values())

    @property
    def by_normalized_name(self) -> Mapping[str, str]:
        """French and Arabic reverse maps merged; Arabic keys win on collision."""

        merged: Dict[str, str] = dict(self.fr_to_fr)
        merged.update(self.ar_to_fr)
        return MappingProxyType(merged)

    @property
    def by_normalized_name_and_wilaya(self) -> Mapping[str, str]:
        merged: Dict[str, str] = dict(self.by_fr_with_wilaya)
        merged.update(self.by_ar_with_wilaya)
        return MappingProxyType(merged)

    def to_document(self) -> Dict[str, Any]:
        return {
            "byCode": {code: entry.to_document() for code, entry in self.by_code.items()},
            "arToFr": dict(self.ar_to_fr),
            "frToFr": dict(self.fr_to_fr),
            "byArWithWilaya": dict(self.by_ar_with_wilaya),
            "byFrWithWilaya": dict(self.by_fr_with_wilaya),
            "aliases": dict(self.aliases),
        }

    @classmethod
    def from_document(cls, document: Any) -> "CommuneIndex":
        if not isinstance(document, dict) or not isinstance(document.get("byCode"), dict):
            raise IndexFormatError("index document must be an object with a 'byCode' object")

        def _map(key: str) -> Dict[str, str]:
            value = document.get(key) or {}
            if not isinstance(value, dict):
                raise IndexFormatError(f"'{key}' must be an object")
            return {str(k): str(v) for k, v in value.items()}

        return cls(
            by_code={str(key): CommuneEntry.from_document(str(key), raw) for key, raw in document["byCode"].items()},
            ar_to_fr=_map("arToFr"),
            fr_to_fr=_map("frToFr"),
            by_ar_with_wilaya=_map("byArWithWilaya"),
            by_fr_with_wilaya=_map("byFrWithWilaya"),
            aliases=_map("aliases"),
        )
