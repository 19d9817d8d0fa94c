"""The four Zengin (総合振込) record layouts and discriminator lookups.

One table keyed by the discriminator character drives schema lookup, record
kind classification, and display labels so the three never drift apart.
"""

from __future__ import annotations

from zengin.layout.schema import (
    FieldSpec,
    FieldType,
    RecordKind,
    RecordSchema,
    Validator,
    ValidatorKind,
)

NUMERIC = FieldType.NUMERIC
ALNUM = FieldType.ALPHANUMERIC

BANK_CODE = Validator(ValidatorKind.BANK_CODE)
BRANCH_CODE = Validator(ValidatorKind.BRANCH_CODE)
ACCOUNT_NUMBER = Validator(ValidatorKind.ACCOUNT_NUMBER)
DEPOSIT_TYPE = Validator(ValidatorKind.DEPOSIT_TYPE)
MMDD = Validator(ValidatorKind.MMDD_DATE)


def _digits(width: int) -> Validator:
    return Validator(ValidatorKind.FIXED_DIGITS, width)


def _equals(literal: str) -> Validator:
    return Validator(ValidatorKind.CONSTANT_EQUALS, literal)


HEADER_SCHEMA = RecordSchema(
    code="1",
    kind=RecordKind.HEADER,
    description="ヘッダレコード",
    fields=(
        FieldSpec("data_type", 1, 1, NUMERIC, True, "データ区分", _digits(1)),
        FieldSpec("type_code", 2, 2, NUMERIC, True, "種別コード", _digits(2)),
        FieldSpec("code_division", 4, 1, NUMERIC, True, "コード区分", _digits(1)),
        FieldSpec("client_code", 5, 10, NUMERIC, True, "委託者コード", _digits(10)),
        FieldSpec("client_name", 15, 40, ALNUM, True, "委託者名"),
        FieldSpec("transfer_date", 55, 4, NUMERIC, True, "取組日 (MMDD)", MMDD),
        FieldSpec("bank_code", 59, 4, NUMERIC, True, "仕向銀行番号", BANK_CODE),
        FieldSpec("bank_name", 63, 15, ALNUM, True, "仕向銀行名"),
        FieldSpec("branch_code", 78, 3, NUMERIC, True, "仕向支店番号", BRANCH_CODE),
        FieldSpec("branch_name", 81, 15, ALNUM, True, "仕向支店名"),
        FieldSpec("deposit_type", 96, 1, NUMERIC, True, "預金種目", DEPOSIT_TYPE),
        FieldSpec("account_number", 97, 7, NUMERIC, True, "口座番号", ACCOUNT_NUMBER),
        FieldSpec("reserved", 104, 17, ALNUM, False, "ダミー/予備"),
    ),
)

DATA_SCHEMA = RecordSchema(
    code="2",
    kind=RecordKind.DATA,
    description="データレコード",
    fields=(
        FieldSpec("data_type", 1, 1, NUMERIC, True, "データ区分", _equals("2")),
        FieldSpec("payee_bank_code", 2, 4, NUMERIC, True, "被仕向金融機関番号", BANK_CODE),
        FieldSpec("payee_bank_name", 6, 15, ALNUM, True, "被仕向銀行名"),
        FieldSpec("payee_branch_code", 21, 3, NUMERIC, True, "被仕向支店番号", BRANCH_CODE),
        FieldSpec("payee_branch_name", 24, 15, ALNUM, True, "被仕向支店名"),
        FieldSpec(
            "clearing_house_number",
            39,
            4,
            NUMERIC,
            False,
            "手形交換所番号",
            Validator(ValidatorKind.CLEARING_HOUSE_NUMBER),
            blank_ok=True,
        ),
        FieldSpec("deposit_type", 43, 1, NUMERIC, True, "預金種目", DEPOSIT_TYPE),
        FieldSpec("account_number", 44, 7, NUMERIC, True, "口座番号", ACCOUNT_NUMBER),
        FieldSpec("payee_name", 51, 30, ALNUM, True, "受取人名"),
        FieldSpec("amount", 81, 10, NUMERIC, True, "振込金額", _digits(10)),
        FieldSpec("new_code", 91, 1, NUMERIC, True, "新規コード", _digits(1)),
        FieldSpec("customer_code_1", 92, 10, ALNUM, False, "顧客コード1"),
        FieldSpec("customer_code_2", 102, 10, ALNUM, False, "顧客コード2"),
        FieldSpec("edi_info", 112, 9, ALNUM, False, "EDI情報"),
    ),
)

TRAILER_SCHEMA = RecordSchema(
    code="8",
    kind=RecordKind.TRAILER,
    description="トレーラレコード",
    fields=(
        FieldSpec("data_type", 1, 1, NUMERIC, True, "データ区分", _equals("8")),
        FieldSpec("total_count", 2, 6, NUMERIC, True, "合計件数"),
        FieldSpec("total_amount", 8, 12, NUMERIC, True, "合計金額"),
        FieldSpec("reserved", 20, 101, ALNUM, False, "ダミー/予備"),
    ),
)

END_SCHEMA = RecordSchema(
    code="9",
    kind=RecordKind.END,
    description="エンドレコード",
    fields=(
        FieldSpec("data_type", 1, 1, NUMERIC, True, "データ区分", _equals("9")),
        FieldSpec("reserved", 2, 118, ALNUM, False, "ダミー/予備"),
    ),
)

# discriminator -> (kind, schema, display label)
DISCRIMINATORS: dict[str, tuple[RecordKind, RecordSchema, str]] = {
    "1": (RecordKind.HEADER, HEADER_SCHEMA, "ヘッダー"),
    "2": (RecordKind.DATA, DATA_SCHEMA, "データ"),
    "8": (RecordKind.TRAILER, TRAILER_SCHEMA, "トレーラー"),
    "9": (RecordKind.END, END_SCHEMA, "エンド"),
}
UNKNOWN_LABEL = "不明"

# The end record closes the file without a terminator, hence one byte shorter.
RECORD_LENGTHS: dict[str, int] = {"1": 120, "2": 120, "8": 120, "9": 119}


def schema_for(code: str) -> RecordSchema | None:
    entry = DISCRIMINATORS.get(code)
    return entry[1] if entry else None


def kind_for_code(code: str) -> RecordKind:
    entry = DISCRIMINATORS.get(code)
    return entry[0] if entry else RecordKind.UNKNOWN


def code_for_kind(kind: RecordKind) -> str | None:
    for code, (entry_kind, _schema, _label) in DISCRIMINATORS.items():
        if entry_kind is kind:
            return code
    return None


def label_for_kind(kind: RecordKind) -> str:
    code = code_for_kind(kind)
    return DISCRIMINATORS[code][2] if code else UNKNOWN_LABEL


def all_schemas() -> list[RecordSchema]:
    return [schema for _kind, schema, _label in DISCRIMINATORS.values()]


def validate_schema_integrity(schemas: list[RecordSchema] | None = None) -> list[str]:
    """Check offsets are gapless from 1 and totals match the record lengths."""
    errors: list[str] = []
    for schema in schemas if schemas is not None else all_schemas():
        expected_next = 1
        names: set[str] = set()
        for spec in schema.fields:
            if spec.name in names:
                errors.append(f"{schema.description}: duplicate field name '{spec.name}'")
            names.add(spec.name)
            if spec.length < 1:
                errors.append(
                    f"{schema.description}: field '{spec.name}' has non-positive length "
                    f"({spec.length})"
                )
            if spec.start != expected_next:
                errors.append(
                    f"{schema.description}: field '{spec.name}' starts at {spec.start} "
                    f"(expected {expected_next})"
                )
            expected_next = spec.start + spec.length

        expected_length = RECORD_LENGTHS.get(schema.code)
        if expected_length is None:
            errors.append(f"{schema.description}: no record length for code '{schema.code}'")
            continue
        if schema.record_length != expected_length:
            errors.append(
                f"{schema.description}: total length is {schema.record_length} "
                f"(expected {expected_length})"
            )
        if expected_next - 1 != expected_length:
            errors.append(
                f"{schema.description}: last field ends at {expected_next - 1} "
                f"(expected {expected_length})"
            )
    return errors
