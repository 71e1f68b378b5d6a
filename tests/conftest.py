"""Shared fixtures: a small bilingual source snapshot and the index built from it."""
from __future__ import annotations

from pathlib import Path

import pytest

from wilaya_resolver.builder import build_from_snapshot
from wilaya_resolver.resolver import WilayaResolver
from wilaya_resolver.sources import load_sources

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def source_paths() -> dict:
    return {
        "primary": FIXTURES / "communes_fr.json",
        "secondary": FIXTURES / "communes_fr_extra.json",
        "arabic": FIXTURES / "communes_ar.json",
    }


@pytest.fixture
def snapshot(source_paths):
    return load_sources(source_paths["primary"], source_paths["arabic"], source_paths["secondary"])


@pytest.fixture
def index(snapshot):
    return build_from_snapshot(snapshot)


@pytest.fixture
def resolver(index):
    return WilayaResolver(index)
