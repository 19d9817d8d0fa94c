"""Fixed-width layout types for Zengin records.

Layouts are plain data:
- FieldSpec offsets are 1-based, matching the bank format documentation.
- Validators are tagged values (kind + optional argument), never callables,
  so a schema can be dumped to JSON as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecordKind(str, Enum):
    HEADER = "header"
    DATA = "data"
    TRAILER = "trailer"
    END = "end"
    UNKNOWN = "unknown"


class FieldType(str, Enum):
    NUMERIC = "numeric"
    ALPHANUMERIC = "alphanumeric"
    KANA = "kana"
    DATE = "date"


class ValidatorKind(str, Enum):
    BANK_CODE = "bank_code"
    BRANCH_CODE = "branch_code"
    ACCOUNT_NUMBER = "account_number"
    MMDD_DATE = "mmdd_date"
    DEPOSIT_TYPE = "deposit_type"
    CLEARING_HOUSE_NUMBER = "clearing_house_number"
    FIXED_DIGITS = "fixed_digits"
    CONSTANT_EQUALS = "constant_equals"


@dataclass(frozen=True)
class Validator:
    kind: ValidatorKind
    arg: str | int | None = None


@dataclass(frozen=True)
class FieldSpec:
    name: str
    start: int
    length: int
    type: FieldType
    required: bool
    description: str
    validator: Validator | None = None
    blank_ok: bool = False  # numeric field that may be left as spaces

    @property
    def end(self) -> int:
        """1-based inclusive end offset."""
        return self.start + self.length - 1

    def slice(self, line: str) -> str:
        return line[self.start - 1 : self.start - 1 + self.length]


@dataclass(frozen=True)
class RecordSchema:
    code: str
    kind: RecordKind
    description: str
    fields: tuple[FieldSpec, ...]

    @property
    def record_length(self) -> int:
        return sum(f.length for f in self.fields)

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.kind.value} record has no field '{name}'")

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "kind": self.kind.value,
            "description": self.description,
            "record_length": self.record_length,
            "fields": [
                {
                    "name": f.name,
                    "start": f.start,
                    "length": f.length,
                    "type": f.type.value,
                    "required": f.required,
                    "description": f.description,
                    "validator": (
                        {"kind": f.validator.kind.value, "arg": f.validator.arg}
                        if f.validator
                        else None
                    ),
                    "blank_ok": f.blank_ok,
                }
                for f in self.fields
            ],
        }
