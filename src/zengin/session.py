"""Whole-file aggregation over parsed records.

A session is a value: building, editing, or replacing a record returns a new
ParseSession with every derived aggregate recomputed from the ordered records.
Structural problems (missing or duplicate header/trailer/end, no data records,
trailer count mismatch) are kept apart from the per-record errors.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from zengin.layout.registry import code_for_kind, label_for_kind, schema_for
from zengin.layout.schema import RecordKind
from zengin.parser import ParsedRecord, parse_line
from zengin.reconstruct import reconstruct

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")
COUNT_FIELD = "total_count"


@dataclass(frozen=True)
class ParseSession:
    records: tuple[ParsedRecord, ...]
    header: ParsedRecord | None
    data: tuple[ParsedRecord, ...]
    trailer: ParsedRecord | None
    end: ParsedRecord | None
    structural_errors: tuple[str, ...]
    warnings: tuple[str, ...] = ()

    @property
    def total_records(self) -> int:
        return len(self.records)

    @property
    def error_count(self) -> int:
        """Number of records failing validation."""
        return sum(1 for r in self.records if not r.validation.is_valid)

    @property
    def all_errors(self) -> list[str]:
        errors = [e for r in self.records for e in r.validation.errors]
        errors.extend(self.structural_errors)
        return errors

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0 and not self.structural_errors

    def summary(self) -> dict[str, object]:
        return {
            "total_records": self.total_records,
            "data_records": len(self.data),
            "invalid_records": self.error_count,
            "structural_errors": list(self.structural_errors),
            "warnings": list(self.warnings),
            "is_valid": self.is_valid,
        }


def split_lines(text: str) -> list[str]:
    """Split on any terminator and drop lines that are blank after trimming."""
    return [line for line in LINE_SPLIT_RE.split(text) if line.strip()]


def parse_lines(lines: Iterable[str]) -> list[ParsedRecord]:
    return [parse_line(line, idx) for idx, line in enumerate(lines, start=1)]


def build_session(records: Sequence[ParsedRecord]) -> ParseSession:
    """Classify records in order and run the cross-record checks."""
    header: ParsedRecord | None = None
    trailer: ParsedRecord | None = None
    end: ParsedRecord | None = None
    data: list[ParsedRecord] = []
    errors: list[str] = []
    warnings: list[str] = []

    for record in records:
        if record.kind is RecordKind.DATA:
            data.append(record)
            continue
        if record.kind is RecordKind.UNKNOWN:
            continue
        # header, trailer, end: the first occurrence wins
        if record.kind is RecordKind.HEADER:
            if header is None:
                header = record
                continue
        elif record.kind is RecordKind.TRAILER:
            if trailer is None:
                trailer = record
                continue
        elif record.kind is RecordKind.END:
            if end is None:
                end = record
                continue
        errors.append(f"line {record.line_number}: duplicate {record.kind.value} record")

    if header is None:
        errors.append("header record not found")
    if trailer is None:
        errors.append("trailer record not found")
    if not data:
        errors.append("no data records found")
    if end is None:
        warnings.append("end record not found")

    if trailer is not None:
        declared = trailer.fields.get(COUNT_FIELD, "").strip()
        if declared.isascii() and declared.isdigit():
            expected = int(declared)
            if expected != len(data):
                errors.append(
                    f"record count mismatch: expected {expected}, actual {len(data)}"
                )

    session = ParseSession(
        records=tuple(records),
        header=header,
        data=tuple(data),
        trailer=trailer,
        end=end,
        structural_errors=tuple(errors),
        warnings=tuple(warnings),
    )
    logger.info(
        "Built session: %d records, %d data, %d invalid, %d structural errors",
        session.total_records,
        len(session.data),
        session.error_count,
        len(session.structural_errors),
    )
    for warning in warnings:
        logger.warning(warning)
    return session


def parse_text(text: str) -> ParseSession:
    return build_session(parse_lines(split_lines(text)))


def replace_record(session: ParseSession, index: int, record: ParsedRecord) -> ParseSession:
    """Return a new session with ``records[index]`` swapped for ``record``."""
    records = list(session.records)
    records[index] = record
    return build_session(records)


def edit_field(record: ParsedRecord, name: str, value: str) -> ParsedRecord:
    """Return a new record with one field changed, re-rendered and re-validated.

    Raises KeyError for unknown records or field names outside the layout.
    """
    code = code_for_kind(record.kind)
    schema = schema_for(code) if code else None
    if schema is None:
        raise KeyError(f"line {record.line_number}: record has no layout to edit")
    schema.field(name)

    fields = dict(record.fields)
    fields[name] = value
    draft = ParsedRecord(
        kind=record.kind,
        raw_line=record.raw_line,
        line_number=record.line_number,
        fields=fields,
        validation=record.validation,
    )
    return parse_line(reconstruct(draft), record.line_number)


def edit_session(session: ParseSession, index: int, name: str, value: str) -> ParseSession:
    """Edit one field of ``records[index]`` and recompute the session."""
    updated = edit_field(session.records[index], name, value)
    return replace_record(session, index, updated)


def kind_counts(session: ParseSession) -> dict[str, int]:
    counts = {label_for_kind(kind): 0 for kind in RecordKind}
    for record in session.records:
        counts[label_for_kind(record.kind)] += 1
    return counts
