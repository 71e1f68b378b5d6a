"""Build the commune index from the French and Arabic source lists."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .aliases import FR_TO_AR_OVERRIDES, MANUAL_ALIASES
from .index import CommuneEntry, CommuneIndex
from .normalizer import composite_key, normalize
from .regions import CAPITAL_ALTERNATES, CAPITAL_WILAYA, WILAYAS, Wilaya
from .sources import ArabicCommune, FrenchCommune, SourceSnapshot

logger = logging.getLogger(__name__)


def arabic_source_key(code: str) -> int:
    """Map a French postal code onto the Arabic list numbering.

    The Arabic list drops the hundreds digit of the postal code:
    ``16047`` -> ``1647``, ``09012`` -> ``912``.
    """

    value = int(code)
    return (value // 1000) * 100 + value % 1000


class _ArabicLookup:
    def __init__(self, communes: Iterable[ArabicCommune]) -> None:
        self.by_key: Dict[int, ArabicCommune] = {}
        self.by_name: Dict[str, List[ArabicCommune]] = defaultdict(list)
        for commune in communes:
            self.by_key[commune.code] = commune
            if commune.name:
                self.by_name[normalize(commune.name)].append(commune)

    def wilaya_name_for(self, name_ar: str, wilaya_id: int) -> str:
        """Arabic wilaya name of a record carrying ``name_ar``, same wilaya first."""

        matches = self.by_name.get(normalize(name_ar), [])
        for commune in matches:
            if commune.wilaya_code == wilaya_id:
                return commune.wilaya_name
        return matches[0].wilaya_name if matches else ""


def _arabic_names(
    commune: FrenchCommune,
    lookup: _ArabicLookup,
    overrides: Mapping[str, str],
) -> Tuple[str, str]:
    override = overrides.get(normalize(commune.name))
    if override:
        return override, lookup.wilaya_name_for(override, commune.wilaya_id)

    record = lookup.by_key.get(arabic_source_key(commune.code))
    if record is None:
        return "", ""
    wilaya_ar = record.wilaya_name if record.wilaya_code == commune.wilaya_id else ""
    return record.name, wilaya_ar


class IndexBuilder:
    """Accumulates entries and reverse maps; :meth:`build` freezes them."""

    def __init__(
        self,
        arabic: Iterable[ArabicCommune],
        *,
        overrides: Mapping[str, str] = FR_TO_AR_OVERRIDES,
        wilayas: Mapping[int, Wilaya] = WILAYAS,
    ) -> None:
        self._lookup = _ArabicLookup(arabic)
        self._overrides = {normalize(name): name_ar for name, name_ar in overrides.items()}
        self._wilayas = wilayas
        self.by_code: Dict[str, CommuneEntry] = {}
        self.ar_to_fr: Dict[str, str] = {}
        self.fr_to_fr: Dict[str, str] = {}
        self.by_ar_with_wilaya: Dict[str, str] = {}
        self.by_fr_with_wilaya: Dict[str, str] = {}
        self.aliases: Dict[str, str] = {}

    def add_french(self, communes: Iterable[FrenchCommune]) -> int:
        """Ingest one French list. Later lists overwrite earlier codes."""

        count = 0
        for commune in communes:
            self._add(commune)
            count += 1
        return count

    def _add(self, commune: FrenchCommune) -> None:
        wilaya = self._wilayas.get(commune.wilaya_id)
        name_ar, wilaya_ar = _arabic_names(commune, self._lookup, self._overrides)
        entry = CommuneEntry(
            code=commune.code,
            name_fr=commune.name,
            name_ar=name_ar,
            wilaya_code=commune.wilaya_id,
            wilaya_name_fr=wilaya.name_fr if wilaya else str(commune.wilaya_id),
            wilaya_name_ar=wilaya_ar,
        )
        if commune.code in self.by_code:
            logger.debug("Code %s replaced: %r -> %r", commune.code, self.by_code[commune.code].name_fr, commune.name)
        self.by_code[commune.code] = entry

        self.fr_to_fr[normalize(entry.name_fr)] = entry.name_fr
        if wilaya:
            self.by_fr_with_wilaya[composite_key(entry.name_fr, wilaya.name_fr)] = entry.name_fr

        if not name_ar:
            return
        self.ar_to_fr[normalize(name_ar)] = entry.name_fr
        wilaya_names = [wilaya.name_ar] if wilaya else []
        if wilaya_ar and (not wilaya or normalize(wilaya_ar) != normalize(wilaya.name_ar)):
            wilaya_names.append(wilaya_ar)
        for wilaya_name in wilaya_names:
            self.by_ar_with_wilaya[composite_key(name_ar, wilaya_name)] = entry.name_fr

    def add_aliases(self, aliases: Mapping[str, str]) -> None:
        """Apply manual corrections; they overwrite anything derived."""

        for alias, target in aliases.items():
            key = normalize(alias)
            if not key:
                continue
            self.ar_to_fr[key] = target
            self.aliases[key] = target

    def add_wilaya_names(self) -> None:
        """Make every wilaya reachable by its Arabic name, keeping existing keys."""

        for code in sorted(self._wilayas):
            wilaya = self._wilayas[code]
            self.ar_to_fr.setdefault(normalize(wilaya.name_ar), wilaya.name_fr)
            if code == CAPITAL_WILAYA:
                for spelling in CAPITAL_ALTERNATES:
                    self.ar_to_fr.setdefault(normalize(spelling), wilaya.name_fr)

    def build(self) -> CommuneIndex:
        return CommuneIndex(
            by_code=self.by_code,
            ar_to_fr=self.ar_to_fr,
            fr_to_fr=self.fr_to_fr,
            by_ar_with_wilaya=self.by_ar_with_wilaya,
            by_fr_with_wilaya=self.by_fr_with_wilaya,
            aliases=self.aliases,
        )


def build_index(
    french_sources: Sequence[Iterable[FrenchCommune]],
    arabic: Iterable[ArabicCommune],
    *,
    aliases: Mapping[str, str] = MANUAL_ALIASES,
    overrides: Mapping[str, str] = FR_TO_AR_OVERRIDES,
    wilayas: Mapping[int, Wilaya] = WILAYAS,
) -> CommuneIndex:
    """Build a :class:`CommuneIndex`.

    ``french_sources`` are processed in order, so on a shared code the later
    list wins. Manual ``aliases`` are applied after every list and override
    derived reverse-map keys; wilaya names are added last, only where no key
    exists yet.
    """

    builder = IndexBuilder(arabic, overrides=overrides, wilayas=wilayas)
    for position, communes in enumerate(french_sources, start=1):
        added = builder.add_french(communes)
        logger.info("French source %s: %s communes ingested", position, added)
    builder.add_aliases(aliases)
    builder.add_wilaya_names()
    index = builder.build()
    empty_ar = sum(1 for entry in index if not entry.name_ar)
    logger.info(
        "Index built: %s communes (%s without Arabic name), %s Arabic keys, %s French keys",
        len(index),
        empty_ar,
        len(index.ar_to_fr),
        len(index.fr_to_fr),
    )
    return index


def build_from_snapshot(snapshot: SourceSnapshot, **kwargs) -> CommuneIndex:
    return build_index(snapshot.french, snapshot.arabic, **kwargs)
