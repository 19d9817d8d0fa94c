"""Structured outputs for parsed records (JSON payloads, JSONL, Arrow IPC)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

import pyarrow as pa

from zengin.encoding import EncodingVerdict
from zengin.parser import ParsedRecord
from zengin.session import ParseSession


def verdict_to_dict(verdict: EncodingVerdict) -> dict[str, Any]:
    payload = {
        "is_target": verdict.is_target,
        "encoding": verdict.encoding,
        "confidence": round(verdict.confidence, 4),
        "rejection_reason": verdict.rejection_reason,
        "lenient": verdict.lenient,
        "counts": asdict(verdict.counts),
        "notes": list(verdict.notes),
        "line_endings": None,
    }
    if verdict.line_endings is not None:
        profile = asdict(verdict.line_endings)
        profile["kind"] = verdict.line_endings.kind.value
        payload["line_endings"] = profile
    return payload


def session_payload(
    source: str, verdict: EncodingVerdict, session: ParseSession | None
) -> dict[str, Any]:
    """Assemble the JSON-friendly report for one input file."""
    return {
        "source": source,
        "encoding": verdict_to_dict(verdict),
        "summary": session.summary() if session else None,
        "errors": session.all_errors if session else [verdict.rejection_reason],
        "records": [r.to_dict() for r in session.records] if session else [],
    }


def records_to_jsonl(
    records: Sequence[ParsedRecord], path: Path, gzip_output: bool = False
) -> None:
    """Write one JSON object per record."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if gzip_output:
        import gzip as gzip_lib

        handle = gzip_lib.open(path, "wt", encoding="utf-8")
    else:
        handle = path.open("w", encoding="utf-8")

    with handle as f:
        for r in records:
            row = r.to_dict()
            row.pop("raw_line")
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def records_to_arrow(records: Sequence[ParsedRecord], path: Path) -> None:
    """Write records to Arrow IPC for analytics-friendly consumption."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.table(
        {
            "line_number": pa.array([r.line_number for r in records], type=pa.int64()),
            "kind": pa.array([r.kind.value for r in records], type=pa.string()),
            "is_valid": pa.array([r.validation.is_valid for r in records], type=pa.bool_()),
            "errors": pa.array(
                [list(r.validation.errors) for r in records], type=pa.list_(pa.string())
            ),
            # field sets differ per record kind; keep them as JSON
            "fields": pa.array(
                [json.dumps(dict(r.fields), ensure_ascii=False) for r in records],
                type=pa.string(),
            ),
            "raw_line": pa.array([r.raw_line for r in records], type=pa.string()),
        }
    )
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)
