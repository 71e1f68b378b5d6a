import json

import pytest

import cli_resolve


@pytest.fixture
def artifact(source_paths, tmp_path):
    out = tmp_path / "communes.generated.json"
    code = cli_resolve.main(
        [
            "build",
            "--fr", str(source_paths["primary"]),
            "--fr-extra", str(source_paths["secondary"]),
            "--ar", str(source_paths["arabic"]),
            "--out", str(out),
        ]
    )
    assert code == 0
    return out


def test_build_writes_artifact(artifact, capsys):
    assert json.loads(artifact.read_text(encoding="utf-8"))["byCode"]["19001"]["fr"] == "Sétif"


def test_build_fails_on_missing_source(source_paths, tmp_path):
    code = cli_resolve.main(
        ["build", "--fr", str(tmp_path / "absent.json"), "--ar", str(source_paths["arabic"]), "--out", str(tmp_path / "x.json")]
    )
    assert code == 1
    assert not (tmp_path / "x.json").exists()


def test_resolve_single_name(artifact, capsys):
    assert cli_resolve.main(["resolve", "عنابة", "--index", str(artifact)]) == 0
    assert "23 Annaba" in capsys.readouterr().out


def test_resolve_batch(artifact, tmp_path, capsys):
    names = tmp_path / "names.txt"
    names.write_text("Oran\n\nAin Turk\n", encoding="utf-8")
    assert cli_resolve.main(["resolve", "--batch", str(names), "--hint", "31", "--index", str(artifact)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert all("31 Oran" in line for line in lines)


def test_resolve_with_missing_index(tmp_path):
    assert cli_resolve.main(["resolve", "Oran", "--index", str(tmp_path / "absent.json")]) == 1


def test_audit(artifact, capsys):
    assert cli_resolve.main(["audit", "--index", str(artifact)]) == 0
    out = capsys.readouterr().out
    assert "Total communes: 13" in out
    assert "31010" in out


def test_patch_and_missing_ar(artifact, tmp_path, capsys):
    patch = tmp_path / "patch.json"
    patch.write_text(json.dumps({"09099": "الشفة"}, ensure_ascii=False), encoding="utf-8")
    assert cli_resolve.main(["patch-ar", str(patch), "--index", str(artifact)]) == 0
    assert cli_resolve.main(["missing-ar", "--index", str(artifact)]) == 0
    assert "Total: 0" in capsys.readouterr().out


def test_add_communes(artifact, tmp_path, capsys):
    extra = tmp_path / "new.json"
    extra.write_text(
        json.dumps([{"code": "55010", "fr": "Tebesbest", "wilaya_code": 55}, {"code": "x", "fr": "Bad", "wilaya_code": 1}]),
        encoding="utf-8",
    )
    assert cli_resolve.main(["add-communes", str(extra), "--index", str(artifact)]) == 1
    extra.write_text(json.dumps([{"code": "55010", "fr": "Tebesbest", "wilaya_code": 55}]), encoding="utf-8")
    assert cli_resolve.main(["add-communes", str(extra), "--index", str(artifact)]) == 0
    assert "Added to byCode: 1" in capsys.readouterr().out
    assert "55010" in json.loads(artifact.read_text(encoding="utf-8"))["byCode"]


def test_fix(artifact, capsys):
    assert cli_resolve.main(["fix", "6050", "Tichy", "تيشي", "--index", str(artifact)]) == 0
    entry = json.loads(artifact.read_text(encoding="utf-8"))["byCode"]["06050"]
    assert entry["fr"] == "Tichy"
    assert entry["wilayaCode"] == "6"
    assert cli_resolve.main(["fix", "x1", "Bad", "", "--index", str(artifact)]) == 1


def test_serve_runs_the_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(cli_resolve.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    assert cli_resolve.main(["--log-level", "INFO", "serve", "--host", "0.0.0.0", "--port", "9001"]) == 0
    assert calls == [("wilaya_resolver.main:app", {"host": "0.0.0.0", "port": 9001, "log_level": "info"})]
