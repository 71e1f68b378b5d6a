import json

import pytest

from wilaya_resolver.index import CommuneIndex, IndexFormatError
from wilaya_resolver.resolver import WilayaResolver
from wilaya_resolver.storage import dumps_document, load_document, load_index, save_index


def test_saved_index_loads_back_identical(index, tmp_path):
    path = save_index(index, tmp_path / "out" / "communes.generated.json")
    loaded = load_index(path)
    assert loaded.to_document() == index.to_document()
    assert list(loaded.by_code) == list(index.by_code)
    assert loaded.by_code["42015"] == index.by_code["42015"]


def test_artifact_layout(index, tmp_path):
    path = save_index(index, tmp_path / "communes.generated.json")
    text = path.read_text(encoding="utf-8")
    assert text == dumps_document(index.to_document())
    assert text.endswith("}\n")
    assert "عنابة" in text
    document = json.loads(text)
    assert set(document) == {"byCode", "arToFr", "frToFr", "byArWithWilaya", "byFrWithWilaya", "aliases"}
    assert document["byCode"]["23001"] == {
        "codeC": "23001",
        "fr": "Annaba",
        "ar": "عنابة",
        "wilayaCode": "23",
        "wilayaAr": "عنابة",
        "wilayaFr": "Annaba",
    }
    assert not list(tmp_path.glob(".communes.generated.json.*"))


def test_rebuild_gives_same_bytes(index, tmp_path):
    first = save_index(index, tmp_path / "a.json").read_bytes()
    second = save_index(index, tmp_path / "b.json").read_bytes()
    assert first == second


def test_loaded_index_resolves_like_the_built_one(index, tmp_path):
    loaded = WilayaResolver(load_index(save_index(index, tmp_path / "index.json")))
    built = WilayaResolver(index)
    for name in ("Annaba", "عين الترك", "النزلة", "Tlemcen", "nowhere"):
        assert loaded.resolve_wilaya(name) == built.resolve_wilaya(name)
    assert loaded.resolve_wilaya("Ain Turk", 31) == 31


def test_artifact_without_aliases_still_loads(tmp_path):
    """Artifacts written before the aliases map existed."""

    path = tmp_path / "legacy.json"
    path.write_text(
        json.dumps(
            {
                "byCode": {"31001": {"codeC": "31001", "fr": "Oran", "ar": "وهران", "wilayaCode": 31}},
                "arToFr": {"وهران": "Oran"},
                "frToFr": {"oran": "Oran"},
                "byArWithWilaya": {},
                "byFrWithWilaya": {},
            }
        ),
        encoding="utf-8",
    )
    index = load_index(path)
    assert index.aliases == {}
    assert index.by_code["31001"].wilaya_code == 31
    assert index.by_code["31001"].wilaya_name_fr == "Oran"
    assert WilayaResolver(index).resolve_wilaya("وهران") == 31


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        '{"arToFr": {}}',
        '{"byCode": {"31001": "Oran"}}',
        '{"byCode": {"x": {"fr": "Nowhere"}}}',
        '{"byCode": {}, "arToFr": ["a"]}',
    ],
)
def test_malformed_artifacts_are_rejected(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(IndexFormatError):
        load_index(path)


def test_missing_artifact_raises_oserror(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "absent.json")


def test_empty_index_document():
    index = CommuneIndex.from_document({"byCode": {}})
    assert len(index) == 0
    assert WilayaResolver(index).resolve_wilaya("Annaba") == 16
