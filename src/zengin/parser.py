"""Per-line parsing and validation against the Zengin layouts.

Parsing is best effort: a wrong line length or a bad field is recorded as an
error string and slicing continues, so every problem in a line is reported in
one pass. Nothing here raises on malformed input.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from zengin.layout.registry import RECORD_LENGTHS, schema_for
from zengin.layout.schema import FieldSpec, FieldType, RecordKind
from zengin.layout.validators import check, is_blank, is_digits, is_valid_kana, is_valid_mmdd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedRecord:
    kind: RecordKind
    raw_line: str
    line_number: int
    fields: Mapping[str, str] = field(default_factory=dict)
    validation: ValidationResult = ValidationResult(is_valid=True)

    def __post_init__(self) -> None:
        # freeze the mapping so edits have to go through edit_field
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    def to_dict(self) -> dict[str, object]:
        return {
            "line_number": self.line_number,
            "kind": self.kind.value,
            "is_valid": self.validation.is_valid,
            "errors": list(self.validation.errors),
            "fields": dict(self.fields),
            "raw_line": self.raw_line,
        }


def validate_field(spec: FieldSpec, value: str) -> bool:
    """Apply required, length, type, then the attached validator."""
    if spec.required and is_blank(value):
        return False
    if len(value) > spec.length:
        return False

    match spec.type:
        case FieldType.NUMERIC:
            if spec.blank_ok:
                if is_blank(value):
                    return True
                if not is_digits(value.strip(), 4):
                    return False
            elif not is_digits(value):
                return False
        case FieldType.KANA:
            if not is_valid_kana(value):
                return False
        case FieldType.DATE:
            if not is_valid_mmdd(value):
                return False
        case FieldType.ALPHANUMERIC:
            pass

    if spec.validator is not None and not check(spec.validator, value):
        return False
    return True


def parse_line(line: str, line_number: int) -> ParsedRecord:
    """Slice ``line`` into the fields of the schema named by its first character."""
    code = line[:1]
    schema = schema_for(code)
    if schema is None:
        logger.debug("line %d: unknown discriminator %r", line_number, code)
        return ParsedRecord(
            kind=RecordKind.UNKNOWN,
            raw_line=line,
            line_number=line_number,
            validation=ValidationResult(
                is_valid=False,
                errors=(f"line {line_number}: unknown record type {code!r}",),
            ),
        )

    errors: list[str] = []
    expected_length = RECORD_LENGTHS[code]
    if len(line) != expected_length:
        errors.append(
            f"line {line_number}: invalid line length "
            f"(expected {expected_length}, actual {len(line)})"
        )

    fields: dict[str, str] = {}
    for spec in schema.fields:
        value = spec.slice(line)
        fields[spec.name] = value
        if not validate_field(spec, value):
            errors.append(
                f'line {line_number}: invalid {spec.name} ({spec.description}): "{value}"'
            )

    if errors:
        logger.debug("line %d: %d validation error(s)", line_number, len(errors))
    return ParsedRecord(
        kind=schema.kind,
        raw_line=line,
        line_number=line_number,
        fields=fields,
        validation=ValidationResult(is_valid=not errors, errors=tuple(errors)),
    )
