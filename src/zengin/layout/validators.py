"""Character-class and domain rules used by field validation."""

from __future__ import annotations

import re

from zengin.layout.schema import Validator, ValidatorKind

# JIS X 0201 half-width katakana block as it appears in Zengin name fields.
KANA_SYMBOLS = "｡｢｣､･"
KANA_WO_AND_SMALL = "ｦｧｨｩｪｫｬｭｮｯ"
KANA_LONG_VOWEL = "ｰ"
KANA_BASIC = "ｱｲｳｴｵｶｷｸｹｺｻｼｽｾｿﾀﾁﾂﾃﾄﾅﾆﾇﾈﾉﾊﾋﾌﾍﾎﾏﾐﾑﾒﾓﾔﾕﾖﾗﾘﾙﾚﾛﾜﾝ"
KANA_DIACRITICS = "ﾞﾟ"
HALF_WIDTH_KANA = frozenset(
    KANA_SYMBOLS + KANA_WO_AND_SMALL + KANA_LONG_VOWEL + KANA_BASIC + KANA_DIACRITICS
)

# February is fixed at 29 days; there is no leap-year computation.
DAYS_IN_MONTH = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
DEPOSIT_TYPES = frozenset({"1", "2"})  # 1: ordinary, 2: current

_DIGITS_RE = re.compile(r"[0-9]*")


def is_digits(value: str, width: int | None = None) -> bool:
    """ASCII digits only; ``width`` pins the exact length."""
    if _DIGITS_RE.fullmatch(value) is None:
        return False
    return width is None or len(value) == width


def is_valid_kana(value: str) -> bool:
    return all(ch == " " or ch in HALF_WIDTH_KANA for ch in value)


def is_valid_mmdd(value: str) -> bool:
    if not is_digits(value, 4):
        return False
    month = int(value[:2])
    day = int(value[2:])
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= DAYS_IN_MONTH[month - 1]


def is_blank(value: str) -> bool:
    return not value.strip()


def check(validator: Validator, value: str) -> bool:
    """Evaluate a tagged validator against a raw field value."""
    match validator.kind:
        case ValidatorKind.BANK_CODE:
            return is_digits(value, 4) and value != "0000"
        case ValidatorKind.BRANCH_CODE:
            return is_digits(value, 3) and value != "000"
        case ValidatorKind.ACCOUNT_NUMBER:
            return is_digits(value) and 1 <= len(value) <= 7
        case ValidatorKind.MMDD_DATE:
            return is_valid_mmdd(value)
        case ValidatorKind.DEPOSIT_TYPE:
            return value in DEPOSIT_TYPES
        case ValidatorKind.CLEARING_HOUSE_NUMBER:
            return is_blank(value) or is_digits(value.strip(), 4)
        case ValidatorKind.FIXED_DIGITS:
            return is_digits(value, int(validator.arg or 0))
        case ValidatorKind.CONSTANT_EQUALS:
            return value == validator.arg
    raise ValueError(f"Unhandled validator kind: {validator.kind}")
