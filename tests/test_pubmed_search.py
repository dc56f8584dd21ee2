from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from eutils_client import RequestFailure, ResponseParseError
from models import SearchCriteria, SearchSession
from pubmed_search import build_query, open_session, parse_search_response

CRITERIA = SearchCriteria(
    terms=("Gene Expression",),
    institutions=("Brown University", "Yale University"),
    start_year=2020,
    end_year=2024,
)

SEARCH_XML = """<?xml version="1.0" encoding="UTF-8" ?>
<eSearchResult>
  <Count>250</Count>
  <RetMax>20</RetMax>
  <RetStart>0</RetStart>
  <QueryKey>1</QueryKey>
  <WebEnv>MCID_65f0c0ffee</WebEnv>
  <IdList><Id>38000001</Id></IdList>
  <TranslationStack>
    <TermSet><Term>Gene Expression[All Fields]</Term><Count>999999</Count></TermSet>
  </TranslationStack>
</eSearchResult>
"""

ZERO_XML = "<eSearchResult><Count>0</Count><RetMax>0</RetMax><IdList/></eSearchResult>"


def test_build_query_ands_term_institutions_and_date_range() -> None:
    query = build_query("Gene Expression", CRITERIA)
    assert query == "(Gene Expression) AND (Brown University OR Yale University) AND 2020:2024[dp]"


def test_parse_search_response_reads_session_handle() -> None:
    session = parse_search_response(SEARCH_XML)
    assert session == SearchSession(query_key="1", web_env="MCID_65f0c0ffee", total_count=250)


def test_parse_search_response_zero_count_is_empty() -> None:
    assert parse_search_response(ZERO_XML).is_empty


def test_parse_search_response_error_element_is_empty() -> None:
    body = "<eSearchResult><ERROR>Invalid query</ERROR></eSearchResult>"
    assert parse_search_response(body) == SearchSession.empty()


def test_parse_search_response_rejects_non_numeric_count() -> None:
    with pytest.raises(ResponseParseError):
        parse_search_response("<eSearchResult><Count>many</Count></eSearchResult>")


def test_open_session_requests_history_mode() -> None:
    client = MagicMock()
    client.request.return_value = SEARCH_XML

    session = open_session(client, "Gene Expression", CRITERIA)

    assert session.total_count == 250
    endpoint, params = client.request.call_args.args
    assert endpoint == "esearch.fcgi"
    assert params["db"] == "pubmed"
    assert params["usehistory"] == "y"
    assert params["term"] == build_query("Gene Expression", CRITERIA)


def test_open_session_degrades_to_empty_on_request_failure() -> None:
    client = MagicMock()
    client.request.side_effect = RequestFailure("esearch.fcgi", 3, RuntimeError("down"))

    session = open_session(client, "Gene Expression", CRITERIA)

    assert session.is_empty


def test_open_session_degrades_to_empty_on_malformed_xml() -> None:
    client = MagicMock()
    client.request.return_value = "<eSearchResult><Count>"

    assert open_session(client, "Gene Expression", CRITERIA).is_empty
