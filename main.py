"""Entrypoint for the PubMed affiliation retrieval run."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from config import load_config, load_criteria
from eutils_client import EutilsClient
from json_sink import write_records
from pipeline import run
from rate_limit import RequestThrottle


def main() -> None:
    """Initialize config, fetch all terms, and write the deduplicated result."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    criteria = load_criteria()
    config = load_config()
    throttle = RequestThrottle(config.request_interval_seconds)
    client = EutilsClient.from_config(config, throttle=throttle)

    try:
        records = run(
            criteria.terms,
            criteria,
            client,
            throttle,
            page_size=config.page_size,
        )
    except Exception as exc:
        logging.exception("An error occurred in the main run: %s", exc)
        sys.exit(1)

    logging.info("Total unique results: %s", len(records))
    write_records(records, config.output_path)


if __name__ == "__main__":
    main()
