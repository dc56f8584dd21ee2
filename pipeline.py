"""Drive session search and paged fetches across all terms, then deduplicate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from eutils_client import EutilsClient
from models import ExtractedRecord, SearchCriteria
from pubmed_fetch import fetch_batch
from pubmed_search import open_session
from rate_limit import RequestThrottle

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class TermResult:
    """Outcome of one term: its records, or the error that emptied it."""

    term: str
    records: tuple[ExtractedRecord, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def dedupe_records(records: Iterable[ExtractedRecord]) -> list[ExtractedRecord]:
    """Keep the first record seen for each PMID, preserving first-seen order."""
    unique: dict[str, ExtractedRecord] = {}
    for record in records:
        unique.setdefault(record.pmid, record)
    return list(unique.values())


def process_term(
    client: EutilsClient,
    term: str,
    criteria: SearchCriteria,
    throttle: RequestThrottle,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TermResult:
    """Open a session for ``term`` and page through ``[0, count)``.

    Never raises: any failure becomes a TermResult with no records.
    """
    try:
        session = open_session(client, term, criteria)
        if session.is_empty:
            return TermResult(term=term)

        collected: list[ExtractedRecord] = []
        for offset in range(0, session.total_count, page_size):
            LOGGER.info("Fetching batch starting at %s for term: %s", offset, term)
            batch = fetch_batch(
                client, session.query_key, session.web_env, offset, page_size, criteria
            )
            collected.extend(batch)
            LOGGER.info("Processed %s results in this batch", len(batch))
            throttle.wait()

        return TermResult(term=term, records=tuple(collected))
    except Exception as exc:
        LOGGER.exception("Error processing term %r: %s", term, exc)
        return TermResult(term=term, error=str(exc))


def run(
    terms: Sequence[str],
    criteria: SearchCriteria,
    client: EutilsClient,
    throttle: RequestThrottle,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[ExtractedRecord]:
    """Process every term sequentially and return the deduplicated records."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    accumulated: list[ExtractedRecord] = []
    failed_terms = 0

    for term in terms:
        result = process_term(client, term, criteria, throttle, page_size=page_size)
        if result.failed:
            failed_terms += 1
        accumulated.extend(result.records)
        LOGGER.info("Processed %s total results for term: %s", len(result.records), term)
        throttle.wait()

    unique = dedupe_records(accumulated)
    LOGGER.info(
        "Run complete. terms=%s failed_terms=%s accumulated=%s unique=%s",
        len(terms),
        failed_terms,
        len(accumulated),
        len(unique),
    )
    return unique
