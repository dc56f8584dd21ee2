from __future__ import annotations

import pytest

import config
from models import SearchCriteria


def test_load_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PUBMED_PAGE_SIZE",
        "PUBMED_MAX_ATTEMPTS",
        "PUBMED_TIMEOUT_SECONDS",
        "PUBMED_REQUEST_INTERVAL_SECONDS",
        "PUBMED_OUTPUT_PATH",
        "NCBI_API_KEY",
        "NCBI_EMAIL",
        "NCBI_TOOL",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = config.load_config()

    assert cfg.page_size == 100
    assert cfg.max_attempts == 3
    assert cfg.timeout_seconds == 30.0
    assert cfg.request_interval_seconds == pytest.approx(0.334)
    assert cfg.output_path == "ore.json"
    assert cfg.identification_params() == {}


def test_load_config_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUBMED_PAGE_SIZE", "50")
    monkeypatch.setenv("PUBMED_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("PUBMED_OUTPUT_PATH", "out/results.json")
    monkeypatch.setenv("NCBI_API_KEY", "abc123")
    monkeypatch.setenv("NCBI_TOOL", "affiliation-harvester")
    monkeypatch.delenv("NCBI_EMAIL", raising=False)

    cfg = config.load_config()

    assert cfg.page_size == 50
    assert cfg.max_attempts == 5
    assert cfg.output_path == "out/results.json"
    assert cfg.identification_params() == {"api_key": "abc123", "tool": "affiliation-harvester"}


def test_load_config_rejects_invalid_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUBMED_PAGE_SIZE", "0")
    with pytest.raises(ValueError, match="page_size"):
        config.load_config()


def test_load_criteria_static_values() -> None:
    criteria = config.load_criteria()
    assert criteria.terms == ("Transcriptome", "Gene Expression")
    assert "Yale University" in criteria.institutions
    assert (criteria.start_year, criteria.end_year) == (2020, 2024)


def test_search_criteria_rejects_inverted_year_range() -> None:
    with pytest.raises(ValueError, match="year range"):
        SearchCriteria(terms=("x",), institutions=("y",), start_year=2024, end_year=2020)
