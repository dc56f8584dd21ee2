"""Shared typed models for the PubMed affiliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

NO_ABSTRACT = "No abstract available"
NO_AUTHORS = "No authors listed"


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Static search configuration supplied once at startup."""

    terms: tuple[str, ...]
    institutions: tuple[str, ...]
    start_year: int
    end_year: int

    def __post_init__(self) -> None:
        if self.start_year > self.end_year:
            raise ValueError(
                f"Invalid year range: start={self.start_year} > end={self.end_year}"
            )


@dataclass(frozen=True, slots=True)
class SearchSession:
    """Server-held query context returned by an esearch call with history enabled."""

    query_key: str
    web_env: str
    total_count: int

    @classmethod
    def empty(cls) -> SearchSession:
        return cls(query_key="", web_env="", total_count=0)

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0


@dataclass(frozen=True, slots=True)
class ExtractedRecord:
    """Normalized article record written to the output document."""

    pmid: str
    title: str
    abstract: str
    authors: tuple[str, ...]
    journal: str
    year: int
    affiliation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pmid": self.pmid,
            "title": self.title,
            "abstract": self.abstract,
            "authors": list(self.authors),
            "journal": self.journal,
            "publicationDate": self.year,
            "affiliation": self.affiliation,
        }
