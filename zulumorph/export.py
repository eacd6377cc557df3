"""
Export of result records as CSV, JSON or a plain-text report.
"""

import csv
import io
import json
from typing import NamedTuple

from .errors import ExportFormatError, InputValidationError

CSV_HEADERS = [
    "Filename", "Size", "Type", "Status", "Word_Count", "Line_Count",
    "Extracted_Text_Preview", "Morphological_Analysis_Preview", "Processing_Time",
]

PREVIEW_LENGTH = 100


class ExportedDocument(NamedTuple):
    content: str
    content_type: str
    filename: str


def _preview(value) -> str:
    return f"{str(value or '')[:PREVIEW_LENGTH]}..."


def _records(data):
    """List items as dicts; anything else renders with placeholder values."""
    if not isinstance(data, list):
        return []
    return [item if isinstance(item, dict) else {} for item in data]


def to_csv(data) -> str:
    """One row per record; text columns hold a 100-character preview."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    for item in _records(data):
        writer.writerow([
            item.get("filename") or "N/A",
            item.get("size") or 0,
            item.get("type") or "N/A",
            item.get("status") or "N/A",
            item.get("word_count") or 0,
            item.get("line_count") or 0,
            _preview(item.get("extracted_text")),
            _preview(item.get("morphological_analysis")),
            item.get("processing_timestamp") or "N/A",
        ])

    return buffer.getvalue().rstrip("\n")


def to_json(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def to_text(data) -> str:
    """Human-readable report, one block per record."""
    parts = ["ZULU MORPHOLOGICAL ANALYSIS RESULTS\n", "=" * 50 + "\n\n"]

    for index, item in enumerate(_records(data), 1):
        parts.append(f"FILE {index}: {item.get('filename') or 'Unknown'}\n")
        parts.append("-" * 30 + "\n")
        parts.append(f"Size: {item.get('size') or 0} bytes\n")
        parts.append(f"Type: {item.get('type') or 'Unknown'}\n")
        parts.append(f"Status: {item.get('status') or 'Unknown'}\n")
        parts.append(f"Words: {item.get('word_count') or 0}\n")
        parts.append(f"Lines: {item.get('line_count') or 0}\n\n")

        if item.get("morphological_analysis"):
            parts.append("MORPHOLOGICAL ANALYSIS:\n")
            parts.append(f"{item['morphological_analysis']}\n\n")

        parts.append("\n" + "=" * 50 + "\n\n")

    return "".join(parts)


EXPORT_FORMATS = {
    "csv": (to_csv, "text/csv", "zulu_analysis_results.csv"),
    "json": (to_json, "application/json", "zulu_analysis_results.json"),
    "txt": (to_text, "text/plain", "zulu_analysis_results.txt"),
}


def export_results(data, fmt: str) -> ExportedDocument:
    """
    Render result records in the requested format.

    An empty list is valid and yields a header-only CSV or a title-only report.

    Raises:
        InputValidationError: data is missing, or null, false, 0 or "" in the request.
        ExportFormatError: fmt is not one of csv, json, txt.
    """
    if not data and not isinstance(data, (list, dict)):
        raise InputValidationError("No data provided for export")

    if not isinstance(fmt, str) or fmt not in EXPORT_FORMATS:
        raise ExportFormatError("Unsupported export format")

    render, content_type, filename = EXPORT_FORMATS[fmt]
    return ExportedDocument(render(data), content_type, filename)
