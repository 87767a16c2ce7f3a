"""
Offline replay of captured traffic.

Handles NDJSON traffic logs (one JSON object per line) such as the
traffic_sample entries written by a mitmdump capture addon. Only response
records are scanned; request records and other stages are counted as skipped.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator

from .dispatcher import ScanDispatcher, classify
from .exceptions import ValidationError
from .http_message import HttpResponse

logger = logging.getLogger(__name__)


def _is_response_record(entry: Dict[str, Any]) -> bool:
    record_type = entry.get("type")
    if record_type is None:
        return "headers" in entry and "url" in entry
    return record_type == "response"


def iter_traffic(traffic_file) -> Iterator[Dict[str, Any]]:
    """
    Yield every JSON object in a traffic log.

    Args:
        traffic_file (Path): NDJSON file

    Yields:
        dict: One parsed record per non-blank, valid line

    Raises:
        ValidationError: If the file does not exist
    """
    path = Path(traffic_file)
    if not path.exists():
        raise ValidationError(f"Traffic file not found: {path}")

    with path.open("r", encoding="utf-8") as tf:
        for line_num, line in enumerate(tf, 1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Skipping invalid JSON on line %d of %s", line_num, path)
                continue
            if isinstance(entry, dict):
                yield entry


def replay_traffic(traffic_file, dispatcher: ScanDispatcher) -> Dict[str, int]:
    """
    Scan every captured response in a traffic log.

    Args:
        traffic_file (Path): NDJSON traffic log
        dispatcher (ScanDispatcher): Dispatcher whose store receives findings

    Returns:
        dict: responses, scanned, skipped and new_findings counts
    """
    summary = {"responses": 0, "scanned": 0, "skipped": 0, "new_findings": 0}

    for entry in iter_traffic(traffic_file):
        if not _is_response_record(entry) or not entry.get("url"):
            summary["skipped"] += 1
            continue

        summary["responses"] += 1
        response = HttpResponse.from_dict(entry)
        if classify(response.content_type).empty:
            continue

        summary["scanned"] += 1
        added = dispatcher.scan_now(str(entry["url"]), response)
        summary["new_findings"] += len(added)

    logger.info(
        "Replayed %d responses (%d scanned, %d records skipped)",
        summary["responses"], summary["scanned"], summary["skipped"],
    )
    return summary
