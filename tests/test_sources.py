"""Tests for source loading, the French adapters and the failure policy."""

import json
import logging

import pytest

from wilaya_resolver.sources import (
    SourceDataError,
    from_primary,
    from_secondary,
    load_sources,
    parse_arabic,
)


def test_primary_adapter_pads_code_and_reads_wilaya():
    commune = from_primary({"codeC": 1001, "fr": "Adrar", "wilaya_id": 1})
    assert commune.code == "01001"
    assert commune.name == "Adrar"
    assert commune.wilaya_id == 1


def test_primary_adapter_accepts_code_w_field():
    commune = from_primary({"codeC": "55005", "fr": "Nezla", "codeW": "55"})
    assert commune.wilaya_id == 55


def test_secondary_adapter_maps_its_field_names():
    commune = from_secondary({"code_postal": "6001", "nom": "Béjaïa", "wilaya_id": "06"})
    assert (commune.code, commune.name, commune.wilaya_id) == ("06001", "Béjaïa", 6)


@pytest.mark.parametrize(
    "raw",
    [
        {"codeC": "16002", "fr": "", "wilaya_id": "16"},
        {"codeC": "16002", "wilaya_id": "16"},
        {"codeC": "16003", "fr": "Nulle Part", "wilaya_id": "abc"},
        {"codeC": "16004", "fr": "Hors Limite", "wilaya_id": "72"},
        {"codeC": "X1", "fr": "Code", "wilaya_id": "16"},
        "not a record",
    ],
)
def test_invalid_primary_records_are_skipped(raw):
    assert from_primary(raw) is None


def test_secondary_record_without_name_is_skipped():
    assert from_secondary({"code_postal": "16006", "wilaya_id": "16"}) is None


def test_parse_arabic_skips_records_without_code():
    communes = parse_arabic({"communes": [{"codeC": "2301", "codeW": "23", "baladiya": " عنابة "}, {"baladiya": "x"}]})
    assert len(communes) == 1
    assert communes[0].code == 2301
    assert communes[0].wilaya_code == 23
    assert communes[0].name == "عنابة"


def test_parse_arabic_rejects_wrong_shape():
    with pytest.raises(SourceDataError):
        parse_arabic([{"codeC": "2301"}])


def test_load_sources_with_both_french_lists(snapshot):
    assert len(snapshot.french) == 2
    assert [c.code for c in snapshot.french[1]] == ["19001", "16005", "06001"]
    assert len(snapshot.arabic) == 13


def test_missing_primary_is_fatal(tmp_path, source_paths):
    with pytest.raises(SourceDataError):
        load_sources(tmp_path / "missing.json", source_paths["arabic"])


def test_missing_arabic_is_fatal(tmp_path, source_paths):
    with pytest.raises(SourceDataError):
        load_sources(source_paths["primary"], tmp_path / "missing.json")


def test_unparseable_primary_is_fatal(tmp_path, source_paths):
    broken = tmp_path / "fr.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(SourceDataError):
        load_sources(broken, source_paths["arabic"])


def test_lfs_pointer_is_fatal_for_primary(tmp_path, source_paths):
    pointer = tmp_path / "fr.json"
    pointer.write_text("version https://git-lfs.github.com/spec/v1\noid sha256:abc\n", encoding="utf-8")
    with pytest.raises(SourceDataError):
        load_sources(pointer, source_paths["arabic"])


def test_missing_secondary_is_skipped(tmp_path, source_paths, caplog):
    with caplog.at_level(logging.WARNING):
        snapshot = load_sources(source_paths["primary"], source_paths["arabic"], tmp_path / "absent.json")
    assert len(snapshot.french) == 1
    assert "missing" in caplog.text


def test_broken_secondary_is_skipped(tmp_path, source_paths, caplog):
    broken = tmp_path / "extra.json"
    broken.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        snapshot = load_sources(source_paths["primary"], source_paths["arabic"], broken)
    assert len(snapshot.french) == 1
    assert "Failed to parse optional source" in caplog.text


def test_utf8_bom_is_accepted(tmp_path, source_paths):
    primary = tmp_path / "fr.json"
    primary.write_bytes(b"\xef\xbb\xbf" + json.dumps([{"codeC": "23001", "fr": "Annaba", "wilaya_id": "23"}]).encode("utf-8"))
    snapshot = load_sources(primary, source_paths["arabic"])
    assert snapshot.french[0][0].name == "Annaba"
