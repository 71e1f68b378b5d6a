"""One-shot fixes applied to a persisted index document.

Every function takes the decoded JSON document and returns a new one; the
input is left untouched. Reading and writing files is up to the caller
(see ``cli_resolve.py``).
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .normalizer import composite_key, normalize
from .regions import wilaya_name_ar, wilaya_name_fr
from .resolver import WilayaResolver
from .sources import CODE_WIDTH

logger = logging.getLogger(__name__)

_REVERSE_MAPS = ("arToFr", "frToFr", "byArWithWilaya", "byFrWithWilaya")


def _padded(value: Any) -> str:
    text = str(value).strip()
    if not text.isdigit():
        raise ValueError(f"commune code must be numeric, got {value!r}")
    return text.zfill(CODE_WIDTH)


class NewCommune(BaseModel):
    """A commune added by hand, e.g. for wilayas created after the sources."""

    code: str
    fr: str
    ar: str = ""
    wilaya_code: int = Field(ge=1, le=58)
    wilaya_fr: str = ""
    wilaya_ar: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _pad(cls, value: Any) -> str:
        return _padded(value)

    def to_entry(self) -> Dict[str, str]:
        return {
            "codeC": self.code,
            "fr": self.fr,
            "ar": self.ar,
            "wilayaCode": str(self.wilaya_code),
            "wilayaAr": self.wilaya_ar or wilaya_name_ar(self.wilaya_code),
            "wilayaFr": self.wilaya_fr or wilaya_name_fr(self.wilaya_code),
        }


def _copy(document: Mapping[str, Any]) -> Dict[str, Any]:
    patched = copy.deepcopy(dict(document))
    patched.setdefault("byCode", {})
    for key in _REVERSE_MAPS:
        patched.setdefault(key, {})
    return patched


def patch_arabic_names(document: Mapping[str, Any], translations: Mapping[str, str]) -> Tuple[Dict[str, Any], List[str]]:
    """Fill in Arabic names by code. Returns the new document and unknown codes."""

    patched = _copy(document)
    missing: List[str] = []
    for code, name_ar in translations.items():
        entry = patched["byCode"].get(code)
        if entry is None:
            logger.error("Code %s not found", code)
            missing.append(code)
            continue
        entry["ar"] = name_ar
        logger.info("Patched %s: %s -> %s", code, entry.get("fr"), name_ar)
    return patched, missing


def fix_commune(
    document: Mapping[str, Any],
    code: str,
    fr: str,
    ar: str,
    *,
    wilaya_code: Optional[int] = None,
) -> Dict[str, Any]:
    """Rename the entry at ``code``, creating it when it does not exist."""

    code = _padded(code)
    patched = _copy(document)
    entry = patched["byCode"].get(code)
    if entry is not None:
        logger.info("Renamed %s: %s -> %s", code, entry.get("fr"), fr)
        entry["fr"] = fr
        entry["ar"] = ar
        return patched

    wilaya = wilaya_code if wilaya_code is not None else int(code[:2])
    patched["byCode"][code] = NewCommune(code=code, fr=fr, ar=ar, wilaya_code=wilaya).to_entry()
    logger.info("Created missing entry %s (%s)", code, fr)
    return patched


@dataclass
class AddReport:
    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    keys_added: int = 0


def _set_missing(mapping: Dict[str, str], key: str, value: str, report: AddReport) -> None:
    if key and key not in mapping:
        mapping[key] = value
        report.keys_added += 1


def add_communes(document: Mapping[str, Any], communes: Iterable[NewCommune]) -> Tuple[Dict[str, Any], AddReport]:
    """Add communes whose code is not indexed yet, plus their reverse-map keys.

    Existing entries and existing reverse-map keys are never overwritten.
    """

    patched = _copy(document)
    report = AddReport()
    for commune in communes:
        if commune.code in patched["byCode"]:
            report.skipped.append(commune.code)
            continue
        entry = commune.to_entry()
        patched["byCode"][commune.code] = entry
        report.added.append(commune.code)

        _set_missing(patched["frToFr"], normalize(commune.fr), commune.fr, report)
        _set_missing(patched["byFrWithWilaya"], composite_key(commune.fr, entry["wilayaFr"]), commune.fr, report)
        if commune.ar:
            _set_missing(patched["arToFr"], normalize(commune.ar), commune.fr, report)
            _set_missing(patched["byArWithWilaya"], composite_key(commune.ar, entry["wilayaAr"]), commune.fr, report)
    logger.info(
        "Added %s communes (%s already present), %s reverse keys",
        len(report.added),
        len(report.skipped),
        report.keys_added,
    )
    return patched, report


def missing_arabic_names(document: Mapping[str, Any]) -> List[Dict[str, str]]:
    """Entries still lacking an Arabic name."""

    missing = []
    for code, entry in (document.get("byCode") or {}).items():
        if not str(entry.get("ar") or "").strip():
            missing.append(
                {
                    "code": code,
                    "fr": entry.get("fr", ""),
                    "wilayaCode": str(entry.get("wilayaCode", "")),
                    "wilayaFr": entry.get("wilayaFr", ""),
                }
            )
    return missing


@dataclass
class AuditFailure:
    language: str
    code: str
    name: str
    expected: int
    got: int
    with_hint: bool


@dataclass
class AuditReport:
    total: int = 0
    passed_fr: int = 0
    passed_ar: int = 0
    passed_fr_hinted: int = 0
    passed_ar_hinted: int = 0
    failures: List[AuditFailure] = field(default_factory=list)


def audit(resolver: WilayaResolver) -> AuditReport:
    """Resolve every indexed name back to its own wilaya, with and without a hint.

    Unhinted failures are expected for names shared by several wilayas;
    hinted failures point at broken entries. Empty names are not checked,
    :func:`missing_arabic_names` lists them.
    """

    report = AuditReport()
    for entry in resolver.index:
        report.total += 1
        expected = entry.wilaya_code
        for language, name in (("fr", entry.name_fr), ("ar", entry.name_ar)):
            if not name:
                continue
            for with_hint in (False, True):
                got = resolver.resolve_wilaya(name, expected if with_hint else None)
                if got == expected:
                    attr = f"passed_{language}_hinted" if with_hint else f"passed_{language}"
                    setattr(report, attr, getattr(report, attr) + 1)
                else:
                    report.failures.append(AuditFailure(language, entry.code, name, expected, got, with_hint))
    logger.info(
        "Audit over %s communes: fr %s/%s ar %s/%s (hinted fr %s ar %s)",
        report.total,
        report.passed_fr,
        report.total,
        report.passed_ar,
        report.total,
        report.passed_fr_hinted,
        report.passed_ar_hinted,
    )
    return report
