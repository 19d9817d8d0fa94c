"""Helpers to log validation summaries for trend tracking."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path

from zengin.session import ParseSession, kind_counts


def session_to_row(session: ParseSession, source: str, tag: str | None = None) -> dict:
    """Flatten a ParseSession into a CSV/JSONL-friendly row."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "source": source,
        "tag": tag or "",
        "records": session.total_records,
        "data_records": len(session.data),
        "invalid_records": session.error_count,
        "structural_errors": len(session.structural_errors),
        "is_valid": session.is_valid,
        "kind_counts": json.dumps(kind_counts(session), ensure_ascii=False),
    }


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new."""
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow(row)


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(payload, ensure_ascii=False) + "\n")
