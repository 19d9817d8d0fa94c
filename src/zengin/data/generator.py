"""Synthetic Zengin transfer file generator.

Builds a complete, valid file (header, N data records, trailer, end) with:
- half-width kana bank, branch, and payee names
- random amounts whose sum lands in the trailer
- cp932 bytes and CRLF terminators, with no terminator after the end record

Used for fixtures, demos, and regression tests before real files arrive.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from zengin.reconstruct import LINE_ENDINGS, encode_lines

PAYEE_NAMES: Sequence[str] = (
    "ﾔﾏﾀﾞ ﾀﾛｳ",
    "ｽｽﾞｷ ﾊﾅｺ",
    "ｻﾄｳ ｼｮｳｼﾞ(ｶ",
    "ﾀﾅｶ ｲﾁﾛｳ",
    "ｶ)ﾐﾄﾞﾘｼｮｳｶｲ",
    "ﾜﾀﾅﾍﾞ ｹﾝ",
)
BANKS: Sequence[tuple[str, str]] = (
    ("0001", "ﾐｽﾞﾎ"),
    ("0005", "ﾐﾂﾋﾞｼﾕ-ｴﾌｼﾞｪｲ"),
    ("0009", "ﾐﾂｲｽﾐﾄﾓ"),
    ("0010", "ﾘｿﾅ"),
)
BRANCHES: Sequence[tuple[str, str]] = (
    ("001", "ﾎﾝﾃﾝ"),
    ("101", "ｼﾌﾞﾔ"),
    ("230", "ｳﾒﾀﾞ"),
)


@dataclass
class SynthConfig:
    count: int = 3
    seed: int = 1234
    client_code: str = "1234567890"
    client_name: str = "ｶ)ｾﾞﾝｷﾞﾝｼｮｳｼﾞ"
    transfer_date: str = "0425"
    include_end: bool = True
    line_ending: Literal["crlf", "lf"] = "crlf"


def _pad(value: str, width: int) -> str:
    return value.ljust(width)[:width]


def header_line(cfg: SynthConfig, bank: tuple[str, str], branch: tuple[str, str]) -> str:
    return (
        "1"
        + "21"
        + "0"
        + cfg.client_code
        + _pad(cfg.client_name, 40)
        + cfg.transfer_date
        + bank[0]
        + _pad(bank[1], 15)
        + branch[0]
        + _pad(branch[1], 15)
        + "1"
        + "0123456"
        + " " * 17
    )


def data_line(
    bank: tuple[str, str],
    branch: tuple[str, str],
    account: int,
    payee: str,
    amount: int,
    customer_code: str = "",
) -> str:
    return (
        "2"
        + bank[0]
        + _pad(bank[1], 15)
        + branch[0]
        + _pad(branch[1], 15)
        + " " * 4
        + "1"
        + f"{account:07d}"
        + _pad(payee, 30)
        + f"{amount:010d}"
        + "0"
        + _pad(customer_code, 10)
        + " " * 10
        + " " * 9
    )


def trailer_line(count: int, total_amount: int) -> str:
    return "8" + f"{count:06d}" + f"{total_amount:012d}" + " " * 101


def end_line() -> str:
    return "9" + " " * 118


def generate_synthetic_lines(config: SynthConfig | None = None) -> tuple[list[str], list[dict]]:
    """Return the fixed-width lines plus per-data-record metadata."""
    cfg = config or SynthConfig()
    rng = random.Random(cfg.seed)
    lines = [header_line(cfg, BANKS[0], BRANCHES[0])]
    metadata: list[dict] = []
    total = 0

    for i in range(cfg.count):
        bank = rng.choice(BANKS)
        branch = rng.choice(BRANCHES)
        amount = rng.randint(1_000, 2_000_000)
        account = rng.randint(1, 9_999_999)
        payee = rng.choice(PAYEE_NAMES)
        customer_code = f"C{i:09d}"
        lines.append(data_line(bank, branch, account, payee, amount, customer_code))
        total += amount
        metadata.append(
            {
                "bank_code": bank[0],
                "branch_code": branch[0],
                "account_number": f"{account:07d}",
                "payee_name": payee,
                "amount": amount,
                "customer_code": customer_code,
            }
        )

    lines.append(trailer_line(cfg.count, total))
    if cfg.include_end:
        lines.append(end_line())
    return lines, metadata


def generate_synthetic_file(config: SynthConfig | None = None) -> tuple[bytes, list[dict]]:
    """Generate cp932 bytes for a whole file plus metadata."""
    cfg = config or SynthConfig()
    lines, metadata = generate_synthetic_lines(cfg)
    text = LINE_ENDINGS[cfg.line_ending].join(lines)
    return encode_lines(text, "shift_jis"), metadata
