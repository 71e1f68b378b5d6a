"""Resolve free-text commune names to wilaya ids.

Resolution never fails: ambiguous names are settled by the caller's hint or
by build order, unknown names fall back to the default wilaya (Alger).
"""
from __future__ import annotations

import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .index import CommuneEntry, CommuneIndex
from .normalizer import composite_key, normalize
from .regions import CAPITAL_ALTERNATES, CAPITAL_WILAYA, DEFAULT_WILAYA, WILAYAS, coerce_wilaya
from .storage import load_index

logger = logging.getLogger(__name__)

OFFICE_DELIVERY_LABEL = "bureau dhd"
_OFFICE_TOKEN_RE = re.compile(r"\bdhd\b", re.IGNORECASE)


def _is_office_delivery(raw: str) -> bool:
    """Order sheets write "delivery to the office" instead of a commune."""

    return ("توصيل" in raw and "مكتب" in raw) or bool(_OFFICE_TOKEN_RE.search(raw))


class WilayaResolver:
    """Read-only queries over one :class:`CommuneIndex`.

    The per-name candidate lists are computed once here, in ``by_code`` order,
    so every query is a couple of dict lookups. Instances hold no mutable
    state after construction and can be shared between threads.
    """

    def __init__(self, index: CommuneIndex, default_wilaya: int = DEFAULT_WILAYA) -> None:
        if coerce_wilaya(default_wilaya) != default_wilaya:
            raise ValueError(f"default wilaya must be in 1..58, got {default_wilaya!r}")
        self.index = index
        self.default_wilaya = default_wilaya

        candidates: Dict[str, List[int]] = defaultdict(list)
        scoped: Set[Tuple[str, str]] = set()
        for entry in index:
            wilaya_id = entry.wilaya_id
            for key in {normalize(entry.name_fr), normalize(entry.name_ar)}:
                if not key:
                    continue
                if wilaya_id not in candidates[key]:
                    candidates[key].append(wilaya_id)
                scoped.add((entry.code[:2], key))
        self._candidates: Mapping[str, List[int]] = dict(candidates)
        self._scoped = frozenset(scoped)

        regions: Dict[str, int] = {}
        for code, wilaya in WILAYAS.items():
            regions.setdefault(normalize(wilaya.name_fr), code)
            regions.setdefault(normalize(wilaya.name_ar), code)
        for spelling in CAPITAL_ALTERNATES:
            regions.setdefault(normalize(spelling), CAPITAL_WILAYA)
        for entry in index:
            for name in (entry.wilaya_name_fr, entry.wilaya_name_ar):
                key = normalize(name)
                if key:
                    regions.setdefault(key, entry.wilaya_code)
        self._regions = regions

    @classmethod
    def from_path(cls, path: str | Path, default_wilaya: int = DEFAULT_WILAYA) -> "WilayaResolver":
        return cls(load_index(path), default_wilaya=default_wilaya)

    def candidates(self, name: object) -> List[int]:
        """Wilaya ids of every commune whose name normalizes like ``name``, in build order."""

        return list(self._candidates.get(normalize(name), []))

    def _lookup_keys(self, key: str) -> List[str]:
        alias = self.index.aliases.get(key)
        alias_key = normalize(alias) if alias else ""
        return [k for k in (alias_key, key) if k]

    def _hint_code(self, hint: object) -> Optional[int]:
        code = coerce_wilaya(hint)
        if code is not None:
            return code
        return self._regions.get(normalize(hint))

    def resolve_wilaya(self, name: object, hint: object = None) -> int:
        """Return the wilaya id (1..58) for the commune ``name``.

        1. Empty name: default wilaya.
        2. A valid ``hint`` (wilaya id, or wilaya name in either script) that
           has a commune of that name: the hint.
        3. Otherwise collect the wilayas of every commune with that name
           (manual aliases are looked up first). One candidate wins outright;
           several are settled by the hint when it is among them, else the
           first in build order.
        4. No commune of that name: default wilaya.
        """

        key = normalize(name)
        if not key:
            return self.default_wilaya

        hint_code = self._hint_code(hint)
        keys = self._lookup_keys(key)
        if hint_code is not None:
            prefix = f"{hint_code:02d}"
            if any((prefix, k) in self._scoped for k in keys):
                logger.debug("resolve %r: trusted hint %s", name, hint_code)
                return hint_code

        candidates: List[int] = []
        for k in keys:
            candidates = self._candidates.get(k, [])
            if candidates:
                break

        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            if hint_code in candidates:
                return hint_code
            logger.debug("resolve %r: ambiguous %s without usable hint, taking %s", name, candidates, candidates[0])
            return candidates[0]

        logger.debug("resolve %r: no match, default %s", name, self.default_wilaya)
        return self.default_wilaya

    __call__ = resolve_wilaya

    def _scan_arabic(self, key: str, wilaya_code: object) -> Optional[CommuneEntry]:
        code = coerce_wilaya(wilaya_code)
        if code is None:
            return None
        prefix = f"{code:02d}"
        for entry in self.index:
            if entry.code.startswith(prefix) and normalize(entry.name_ar) == key:
                return entry
        return None

    def _wilaya_fr_for_name(self, wilaya_name: object) -> Optional[str]:
        code = self._regions.get(normalize(wilaya_name))
        return WILAYAS[code].name_fr if code is not None else None

    def _office_label(self, raw: str, wilaya_name: object, wilaya_code: object) -> str:
        key = normalize(raw)
        if key:
            hit = self.index.ar_to_fr.get(key)
            if hit:
                return hit
            if wilaya_name:
                hit = self.index.by_ar_with_wilaya.get(composite_key(raw, wilaya_name))
                if hit:
                    return hit
            entry = self._scan_arabic(key, wilaya_code)
            if entry is not None and entry.name_fr:
                return entry.name_fr
        if wilaya_name and str(wilaya_name).strip():
            return self._wilaya_fr_for_name(wilaya_name) or str(wilaya_name).strip()
        return OFFICE_DELIVERY_LABEL

    def resolve_commune_name(
        self,
        name: object,
        wilaya_name: object = None,
        wilaya_code: object = None,
    ) -> Optional[str]:
        """Canonical French name of a commune written in either script, or ``None``."""

        if not name:
            return None
        raw = str(name)
        if _is_office_delivery(raw):
            return self._office_label(raw, wilaya_name, wilaya_code)

        key = normalize(raw)
        if not key:
            return None
        hit = self.index.fr_to_fr.get(key) or self.index.ar_to_fr.get(key)
        if hit:
            return hit
        if wilaya_name:
            composite = composite_key(raw, wilaya_name)
            hit = self.index.by_ar_with_wilaya.get(composite) or self.index.by_fr_with_wilaya.get(composite)
            if hit:
                return hit
        entry = self._scan_arabic(key, wilaya_code)
        return entry.name_fr if entry is not None and entry.name_fr else None

    def display_name(self, name: str, wilaya_name: object = None, wilaya_code: object = None) -> str:
        return self.resolve_commune_name(name, wilaya_name, wilaya_code) or name

    def french_wilaya_name(self, wilaya_name: object = None, wilaya_code: object = None) -> str:
        """French display name of a wilaya given by name (either script) or code."""

        if not wilaya_name and not wilaya_code:
            return ""
        key = normalize(wilaya_name)
        if key:
            hit = self.index.ar_to_fr.get(key) or self.index.fr_to_fr.get(key)
            if hit:
                return hit
        code = coerce_wilaya(wilaya_code)
        if code is not None:
            return WILAYAS[code].name_fr
        if key:
            found = self._wilaya_fr_for_name(key)
            if found:
                return found
        return str(wilaya_name or "")

    def communes_by_wilaya(self, wilaya_code: object) -> List[Dict[str, str]]:
        """All communes of a wilaya as ``{"fr", "ar"}`` pairs sorted by French name."""

        code = coerce_wilaya(wilaya_code)
        if code is None:
            return []
        prefix = f"{code:02d}"
        communes = [
            {"fr": entry.name_fr, "ar": entry.name_ar}
            for entry in self.index
            if entry.code.startswith(prefix)
        ]
        return sorted(communes, key=lambda item: (normalize(item["fr"]), item["fr"]))
