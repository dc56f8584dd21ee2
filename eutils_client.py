"""HTTP client for NCBI E-utilities with linear-backoff retries."""

from __future__ import annotations

import logging
import time
import xml.etree.ElementTree as ET
from typing import Any, Callable, Mapping

import requests

from config import PipelineConfig
from rate_limit import RequestThrottle

LOGGER = logging.getLogger(__name__)

BACKOFF_STEP_SECONDS = 1.0


class RequestFailure(RuntimeError):
    """Raised when every attempt against an endpoint has failed."""

    def __init__(self, endpoint: str, attempts: int, error: Exception) -> None:
        super().__init__(f"Request to {endpoint} failed after {attempts} attempt(s): {error}")
        self.endpoint = endpoint
        self.attempts = attempts


class ResponseParseError(ValueError):
    """Raised when an E-utilities response body is not well-formed XML."""


def parse_xml(body: str) -> ET.Element:
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise ResponseParseError(f"Malformed E-utilities XML: {exc}") from exc


class EutilsClient:
    """Issue single logical GET requests against E-utilities endpoints.

    Each attempt has its own timeout. Failed attempts (connection errors,
    timeouts, non-2xx status) are retried after ``1s * attempt`` until
    ``max_attempts`` is reached, then ``RequestFailure`` is raised.
    """

    def __init__(
        self,
        base_url: str,
        max_attempts: int = 3,
        timeout_seconds: float = 30.0,
        throttle: RequestThrottle | None = None,
        default_params: Mapping[str, Any] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self.throttle = throttle
        self.default_params = dict(default_params or {})
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: PipelineConfig, throttle: RequestThrottle | None = None) -> EutilsClient:
        return cls(
            base_url=config.base_url,
            max_attempts=config.max_attempts,
            timeout_seconds=config.timeout_seconds,
            throttle=throttle,
            default_params=config.identification_params(),
        )

    def request(self, endpoint: str, params: Mapping[str, Any]) -> str:
        """GET ``endpoint`` with query ``params`` and return the response body."""
        url = f"{self.base_url}{endpoint}"
        query = {**self.default_params, **params}
        last_error: requests.RequestException | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._get(url, query)
            except requests.RequestException as exc:
                last_error = exc
                LOGGER.warning(
                    "Attempt %s/%s failed for %s: %s", attempt, self.max_attempts, endpoint, exc
                )
                if attempt == self.max_attempts:
                    raise RequestFailure(endpoint, attempt, exc) from exc
                self._sleep(BACKOFF_STEP_SECONDS * attempt)

        raise RuntimeError(f"Request to {endpoint} made no attempts: {last_error}")

    def _get(self, url: str, query: Mapping[str, Any]) -> str:
        if self.throttle is not None:
            self.throttle.wait()
        try:
            response = requests.get(url, params=query, timeout=self.timeout_seconds)
        finally:
            if self.throttle is not None:
                self.throttle.mark()
        response.raise_for_status()
        return response.text
