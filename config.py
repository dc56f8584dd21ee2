"""Static search criteria and runtime settings for the pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass

from models import SearchCriteria

EUTILS_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/"

SEARCH_TERMS = ("Transcriptome", "Gene Expression")
INSTITUTIONS = ("Brown University", "Yale University", "Harvard University")
START_YEAR = 2020
END_YEAR = 2024

_DEFAULT_PAGE_SIZE = 100
_DEFAULT_MAX_ATTEMPTS = 3
_DEFAULT_TIMEOUT_SECONDS = 30.0
# NCBI allows 3 requests/second without an API key.
_DEFAULT_REQUEST_INTERVAL_SECONDS = 0.334
_DEFAULT_OUTPUT_PATH = "ore.json"


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Runtime knobs for the retrieval run."""

    page_size: int = _DEFAULT_PAGE_SIZE
    max_attempts: int = _DEFAULT_MAX_ATTEMPTS
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    request_interval_seconds: float = _DEFAULT_REQUEST_INTERVAL_SECONDS
    output_path: str = _DEFAULT_OUTPUT_PATH
    base_url: str = EUTILS_BASE_URL
    api_key: str | None = None
    email: str | None = None
    tool: str | None = None

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.request_interval_seconds < 0:
            raise ValueError(
                f"request_interval_seconds must be >= 0, got {self.request_interval_seconds}"
            )

    def identification_params(self) -> dict[str, str]:
        """E-utilities identification parameters sent with every request."""
        params: dict[str, str] = {}
        if self.api_key:
            params["api_key"] = self.api_key
        if self.email:
            params["email"] = self.email
        if self.tool:
            params["tool"] = self.tool
        return params


def load_criteria() -> SearchCriteria:
    return SearchCriteria(
        terms=SEARCH_TERMS,
        institutions=INSTITUTIONS,
        start_year=START_YEAR,
        end_year=END_YEAR,
    )


def load_config() -> PipelineConfig:
    """Build the runtime config from environment variables (call after load_dotenv)."""
    return PipelineConfig(
        page_size=int(os.getenv("PUBMED_PAGE_SIZE", str(_DEFAULT_PAGE_SIZE))),
        max_attempts=int(os.getenv("PUBMED_MAX_ATTEMPTS", str(_DEFAULT_MAX_ATTEMPTS))),
        timeout_seconds=float(os.getenv("PUBMED_TIMEOUT_SECONDS", str(_DEFAULT_TIMEOUT_SECONDS))),
        request_interval_seconds=float(
            os.getenv("PUBMED_REQUEST_INTERVAL_SECONDS", str(_DEFAULT_REQUEST_INTERVAL_SECONDS))
        ),
        output_path=os.getenv("PUBMED_OUTPUT_PATH", _DEFAULT_OUTPUT_PATH),
        api_key=os.getenv("NCBI_API_KEY") or None,
        email=os.getenv("NCBI_EMAIL") or None,
        tool=os.getenv("NCBI_TOOL") or None,
    )
