"""Tests for index construction: cross-referencing, precedence and determinism."""

import dataclasses

import pytest

from wilaya_resolver.builder import arabic_source_key, build_from_snapshot, build_index
from wilaya_resolver.normalizer import composite_key, normalize
from wilaya_resolver.regions import WILAYAS
from wilaya_resolver.sources import ArabicCommune, FrenchCommune
from wilaya_resolver.storage import dumps_document


def test_arabic_source_key_drops_hundreds_digit():
    assert arabic_source_key("16047") == 1647
    assert arabic_source_key("09012") == 912
    assert arabic_source_key("23001") == 2301


def test_invalid_records_are_not_indexed(index):
    assert set(index.by_code) == {
        "23001", "31001", "19001", "16001", "10030", "31010", "30020",
        "55005", "42015", "15010", "09099", "16005", "06001",
    }


def test_later_source_wins_on_code_collision(index):
    """The secondary list replaces the entry but keeps its position."""

    assert index.by_code["19001"].name_fr == "Sétif"
    assert list(index.by_code).index("19001") == 2


def test_arabic_name_comes_from_derived_key(index):
    entry = index.by_code["23001"]
    assert entry.name_ar == "عنابة"
    assert entry.wilaya_name_ar == "عنابة"
    assert entry.wilaya_code == 23
    assert entry.wilaya_name_fr == "Annaba"


def test_override_takes_precedence_over_derived_key(index):
    entry = index.by_code["42015"]
    assert entry.name_ar == "الناظور"
    assert entry.wilaya_name_ar == "تيبازة"


def test_arabic_wilaya_left_empty_when_region_code_disagrees(index):
    """Azazga points at a Tiaret record in the Arabic list."""

    entry = index.by_code["15010"]
    assert entry.name_ar == "عزازقة"
    assert entry.wilaya_name_ar == ""


def test_entry_without_arabic_match_keeps_empty_names(index):
    entry = index.by_code["09099"]
    assert entry.name_fr == "Chiffa"
    assert entry.name_ar == ""
    assert entry.wilaya_name_ar == ""


def test_reverse_maps_point_to_french_names(index):
    assert index.fr_to_fr["setif"] == "Sétif"
    assert index.ar_to_fr[normalize("عنابة")] == "Annaba"
    assert index.by_fr_with_wilaya[composite_key("Annaba", "Annaba")] == "Annaba"
    assert index.by_ar_with_wilaya[composite_key("عين الترك", "وهران")] == "Ain Turk"
    assert index.by_ar_with_wilaya[composite_key("عين الترك", "البويرة")] == "Ain Turk"
    assert index.by_normalized_name["oran"] == "Oran"
    assert index.by_normalized_name_and_wilaya[composite_key("Oran", "Oran")] == "Oran"


def test_manual_aliases_always_win(snapshot):
    index = build_from_snapshot(snapshot, aliases={"عنابة": "Bone"})
    assert index.ar_to_fr[normalize("عنابة")] == "Bone"
    assert index.aliases == {normalize("عنابة"): "Bone"}


def test_alias_beats_wilaya_table(index):
    assert index.ar_to_fr[normalize("الجزائر")] == "Alger"
    assert index.ar_to_fr[normalize("النزلة")] == "Nezla"


def test_every_wilaya_is_reachable_by_arabic_name(index):
    for wilaya in WILAYAS.values():
        assert normalize(wilaya.name_ar) in index.ar_to_fr
    assert index.ar_to_fr[normalize("الجزائر العاصمة")] == "Alger"
    assert index.ar_to_fr["alger"] == "Alger"


def test_wilaya_table_does_not_replace_commune_keys():
    french = [[FrenchCommune(code="32001", name="El Bayadh Ville", wilaya_id=32)]]
    arabic = [ArabicCommune(code=3201, wilaya_code=32, name="البيض", wilaya_name="البيض")]
    index = build_index(french, arabic, aliases={})
    assert index.ar_to_fr[normalize("البيض")] == "El Bayadh Ville"


def test_build_is_deterministic(snapshot):
    first = dumps_document(build_from_snapshot(snapshot).to_document())
    second = dumps_document(build_from_snapshot(snapshot).to_document())
    assert first == second


def test_index_is_read_only(index):
    with pytest.raises(TypeError):
        index.fr_to_fr["new"] = "New"
    with pytest.raises(dataclasses.FrozenInstanceError):
        index.by_code = {}
    with pytest.raises(dataclasses.FrozenInstanceError):
        index.by_code["23001"].name_fr = "Bone"


@pytest.mark.parametrize("spelling", ["Staoueli", "STAOUELI", "Staouéli"])
def test_override_matches_any_spelling_of_the_french_name(spelling):
    french = [[FrenchCommune(code="16041", name=spelling, wilaya_id=16)]]
    arabic = [ArabicCommune(code=1641, wilaya_code=16, name="خطأ", wilaya_name="الجزائر")]
    index = build_index(french, arabic, aliases={})
    assert index.by_code["16041"].name_ar == "سطاوالي"
    assert index.ar_to_fr[normalize("سطاوالي")] == spelling
