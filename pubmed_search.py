"""Open an esearch history session for one search term."""

from __future__ import annotations

import logging

from eutils_client import EutilsClient, ResponseParseError, parse_xml
from models import SearchCriteria, SearchSession

LOGGER = logging.getLogger(__name__)

ESEARCH_ENDPOINT = "esearch.fcgi"
DATABASE = "pubmed"


def build_query(term: str, criteria: SearchCriteria) -> str:
    """Combine term, institutions and publication-date range into one boolean query."""
    institutions = " OR ".join(criteria.institutions)
    date_range = f"{criteria.start_year}:{criteria.end_year}[dp]"
    return f"({term}) AND ({institutions}) AND {date_range}"


def parse_search_response(body: str) -> SearchSession:
    """Read Count, QueryKey and WebEnv from an eSearchResult document.

    Raises ResponseParseError on malformed XML or a non-numeric count.
    """
    root = parse_xml(body)

    error = root.findtext("ERROR")
    if error:
        LOGGER.warning("esearch returned an error: %s", error.strip())
        return SearchSession.empty()

    # Only the top-level Count; TranslationStack carries per-term counts too.
    count_text = (root.findtext("Count") or "0").strip()
    try:
        count = int(count_text)
    except ValueError as exc:
        raise ResponseParseError(f"Non-numeric esearch Count: {count_text!r}") from exc

    if count == 0:
        return SearchSession.empty()

    return SearchSession(
        query_key=(root.findtext("QueryKey") or "").strip(),
        web_env=(root.findtext("WebEnv") or "").strip(),
        total_count=count,
    )


def open_session(client: EutilsClient, term: str, criteria: SearchCriteria) -> SearchSession:
    """Run esearch with history enabled; never raises.

    Any request or parse failure is logged and degrades to an empty session
    so one bad term cannot abort the run.
    """
    query = build_query(term, criteria)
    LOGGER.info("Searching for term: %s", term)
    try:
        body = client.request(
            ESEARCH_ENDPOINT,
            {"db": DATABASE, "term": query, "usehistory": "y"},
        )
        session = parse_search_response(body)
    except Exception as exc:
        LOGGER.error("Search failed for term %r: %s", term, exc)
        return SearchSession.empty()

    if session.is_empty:
        LOGGER.info("No results found for query: %s", query)
    else:
        LOGGER.info("Found %s results for query: %s", session.total_count, query)
    return session
