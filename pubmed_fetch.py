"""Fetch one efetch page from a history session and extract matching records."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from eutils_client import EutilsClient, ResponseParseError, parse_xml
from models import NO_ABSTRACT, NO_AUTHORS, ExtractedRecord, SearchCriteria

LOGGER = logging.getLogger(__name__)

EFETCH_ENDPOINT = "efetch.fcgi"
DATABASE = "pubmed"


@dataclass(frozen=True, slots=True)
class ArticleFields:
    """Fields read from one PubmedArticle node, before the inclusion test."""

    pmid: str
    title: str
    abstract: str
    authors: tuple[str, ...]
    journal: str
    year: int | None
    affiliation: str


def extract_fields(article: ET.Element) -> ArticleFields | None:
    """Read a PubmedArticle node, substituting defaults for absent optional parts.

    Returns None only when the node has no MedlineCitation/Article or no PMID,
    since such a record cannot be keyed.
    """
    citation = article.find("MedlineCitation")
    if citation is None:
        return None
    art = citation.find("Article")
    if art is None:
        return None

    pmid = (citation.findtext("PMID") or "").strip()
    if not pmid:
        return None

    return ArticleFields(
        pmid=pmid,
        title=_text_of(art.find("ArticleTitle")),
        abstract=_abstract_of(art),
        authors=_authors_of(art),
        journal=(art.findtext("Journal/Title") or "").strip(),
        year=_year_of(art),
        affiliation=_first_affiliation(art),
    )


def matches_criteria(fields: ArticleFields, criteria: SearchCriteria) -> bool:
    """Hard inclusion filter: institution substring in affiliation and year in range."""
    if fields.year is None:
        return False
    if not criteria.start_year <= fields.year <= criteria.end_year:
        return False
    return any(inst in fields.affiliation for inst in criteria.institutions)


def extract_record(article: ET.Element, criteria: SearchCriteria) -> ExtractedRecord | None:
    """Return an ExtractedRecord for the node, or None when it fails the filter."""
    fields = extract_fields(article)
    if fields is None or fields.year is None or not matches_criteria(fields, criteria):
        return None
    return ExtractedRecord(
        pmid=fields.pmid,
        title=fields.title,
        abstract=fields.abstract,
        authors=fields.authors,
        journal=fields.journal,
        year=fields.year,
        affiliation=fields.affiliation,
    )


def parse_fetch_response(body: str, criteria: SearchCriteria) -> list[ExtractedRecord]:
    """Extract matching records from a PubmedArticleSet document, in response order."""
    return _records_from(_articles_of(parse_xml(body)), criteria)


def fetch_batch(
    client: EutilsClient,
    query_key: str,
    web_env: str,
    offset: int,
    page_size: int,
    criteria: SearchCriteria,
) -> list[ExtractedRecord]:
    """Fetch the ``[offset, offset + page_size)`` window of a session.

    An empty or malformed article set is logged and yields an empty list.
    RequestFailure propagates to the caller.
    """
    body = client.request(
        EFETCH_ENDPOINT,
        {
            "db": DATABASE,
            "query_key": query_key,
            "WebEnv": web_env,
            "retmode": "xml",
            "rettype": "abstract",
            "retstart": offset,
            "retmax": page_size,
        },
    )

    try:
        articles = _articles_of(parse_xml(body))
    except ResponseParseError as exc:
        LOGGER.warning("Unparseable efetch response for batch starting at %s: %s", offset, exc)
        return []

    if not articles:
        LOGGER.info("No articles found in fetch result for batch starting at %s", offset)
        return []

    records = _records_from(articles, criteria)
    LOGGER.debug(
        "Batch at offset=%s: articles=%s matched=%s", offset, len(articles), len(records)
    )
    return records


def _articles_of(root: ET.Element) -> list[ET.Element]:
    if root.tag != "PubmedArticleSet":
        return []
    return root.findall("PubmedArticle")


def _records_from(articles: list[ET.Element], criteria: SearchCriteria) -> list[ExtractedRecord]:
    records: list[ExtractedRecord] = []
    for article in articles:
        record = extract_record(article, criteria)
        if record is not None:
            records.append(record)
    return records


def _text_of(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _abstract_of(art: ET.Element) -> str:
    abstract_el = art.find("Abstract")
    if abstract_el is None:
        return NO_ABSTRACT
    text_el = abstract_el.find("AbstractText")
    if text_el is None:
        return NO_ABSTRACT
    return _text_of(text_el) or NO_ABSTRACT


def _authors_of(art: ET.Element) -> tuple[str, ...]:
    author_list = art.find("AuthorList")
    authors = author_list.findall("Author") if author_list is not None else []
    if not authors:
        return (NO_AUTHORS,)
    return tuple(
        f"{author.findtext('LastName') or ''} {author.findtext('ForeName') or ''}"
        for author in authors
    )


def _year_of(art: ET.Element) -> int | None:
    year_text = art.findtext("Journal/JournalIssue/PubDate/Year")
    if year_text is None:
        return None
    try:
        return int(year_text.strip())
    except ValueError:
        return None


def _first_affiliation(art: ET.Element) -> str:
    # Only the first author's first affiliation is considered.
    first_author = art.find("AuthorList/Author")
    if first_author is None:
        return ""
    return _text_of(first_author.find("AffiliationInfo/Affiliation"))
