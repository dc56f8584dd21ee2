"""JSON file sink for extracted PubMed records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from models import ExtractedRecord

LOGGER = logging.getLogger(__name__)


def write_records(records: Sequence[ExtractedRecord], output_path: str | Path) -> bool:
    """Write records as a pretty-printed JSON array (2-space indent).

    Returns False and logs on failure; the in-memory records are untouched.
    """
    path = Path(output_path)
    payload = [record.to_dict() for record in records]

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
    except (OSError, TypeError) as exc:
        LOGGER.error("Error writing %s records to %s: %s", len(payload), path, exc)
        return False

    LOGGER.info("Results have been written to %s (%s records)", path, len(payload))
    return True
