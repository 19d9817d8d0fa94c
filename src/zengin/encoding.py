"""Shift_JIS plausibility scoring and decoding.

Zengin transfer files are exchanged as Windows-31J (cp932). Rather than a
general charset detector, a single weighted pass over the bytes decides
"cp932 or not":
- ASCII (including control characters) is weak evidence.
- Half-width kana (0xA1-0xDF) is stronger evidence.
- A well-formed lead/trail double-byte pair is the strongest evidence.
- Anything else counts as invalid and scores nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

TARGET_ENCODING = "cp932"
ACCEPT_THRESHOLD = 0.3
ALL_ASCII_SCORE = 0.8
INVALID_PENALTY_RATIO = 0.2
INVALID_PENALTY_FACTOR = 0.1

ASCII_WEIGHT = 0.5
KANA_WEIGHT = 1.0
DOUBLE_BYTE_WEIGHT = 1.5

_TERMINATOR_RE = re.compile(r"\r\n|\r|\n")


class LineEndingKind(str, Enum):
    CRLF = "CRLF"
    LF = "LF"
    CR = "CR"
    MIXED = "Mixed"
    NONE = "None"


LINE_ENDING_LABELS = {
    LineEndingKind.CRLF: "CRLF (Windows)",
    LineEndingKind.LF: "LF (Unix/Linux/Mac)",
    LineEndingKind.CR: "CR (Classic Mac)",
    LineEndingKind.MIXED: "Mixed",
    LineEndingKind.NONE: "None",
}


@dataclass(frozen=True)
class LineEndingProfile:
    kind: LineEndingKind
    count: int
    crlf: int
    lf: int
    cr: int
    length_with_terminators: int
    length_without_terminators: int


@dataclass(frozen=True)
class DiagnosticCounts:
    ascii_bytes: int = 0
    half_width_kana_bytes: int = 0
    double_byte_chars: int = 0
    invalid_bytes: int = 0
    total_bytes: int = 0


@dataclass
class EncodingVerdict:
    is_target: bool
    confidence: float
    decoded_text: str
    counts: DiagnosticCounts
    rejection_reason: str | None = None
    encoding: str = "unknown"
    lenient: bool = False
    line_endings: LineEndingProfile | None = None
    notes: list[str] = field(default_factory=list)


def _is_lead(byte: int) -> bool:
    return 0x81 <= byte <= 0x9F or 0xE0 <= byte <= 0xFC


def _is_trail(byte: int) -> bool:
    return 0x40 <= byte <= 0x7E or 0x80 <= byte <= 0xFC


def score_bytes(data: bytes) -> tuple[float, DiagnosticCounts, list[str]]:
    """Weighted plausibility score of ``data`` as cp932, with byte counts."""
    total = len(data)
    ascii_count = kana_count = double_count = invalid = 0
    weight = 0.0

    idx = 0
    while idx < total:
        byte = data[idx]
        if byte <= 0x7F:
            ascii_count += 1
            weight += ASCII_WEIGHT
        elif 0xA1 <= byte <= 0xDF:
            kana_count += 1
            weight += KANA_WEIGHT
        elif _is_lead(byte) and idx + 1 < total and _is_trail(data[idx + 1]):
            double_count += 1
            weight += DOUBLE_BYTE_WEIGHT
            idx += 1
        else:
            # a lead byte with a bad trail only consumes itself
            invalid += 1
        idx += 1

    counts = DiagnosticCounts(
        ascii_bytes=ascii_count,
        half_width_kana_bytes=kana_count,
        double_byte_chars=double_count,
        invalid_bytes=invalid,
        total_bytes=total,
    )
    if total == 0:
        return 0.0, counts, ["empty"]

    notes: list[str] = []
    score = min(weight / total, 1.0)
    if invalid > total * INVALID_PENALTY_RATIO:
        score *= INVALID_PENALTY_FACTOR
        notes.append("invalid-bytes-penalty")
    if ascii_count == total:
        score = ALL_ASCII_SCORE
        notes.append("all-ascii")
    return score, counts, notes


def classify(data: bytes) -> EncodingVerdict:
    """Decide whether ``data`` is cp932 and decode it when it is.

    Never raises: every failure becomes a rejected verdict with a reason.
    """
    score, counts, notes = score_bytes(data)
    if counts.total_bytes == 0:
        logger.warning("Rejected empty input")
        return EncodingVerdict(
            is_target=False,
            confidence=0.0,
            decoded_text="",
            counts=counts,
            rejection_reason="empty input",
            notes=notes,
        )

    if score <= ACCEPT_THRESHOLD:
        reason = (
            f"not {TARGET_ENCODING}-encoded: score {score:.3f} "
            f"(threshold {ACCEPT_THRESHOLD})"
        )
        logger.warning("Rejected input: %s", reason)
        return EncodingVerdict(
            is_target=False,
            confidence=score,
            decoded_text="",
            counts=counts,
            rejection_reason=reason,
            notes=notes,
        )

    lenient = False
    try:
        text = data.decode(TARGET_ENCODING)
    except UnicodeDecodeError as strict_error:
        logger.info("Strict decode failed (%s); retrying with replacement", strict_error)
        lenient = True
        try:
            text = data.decode(TARGET_ENCODING, errors="replace")
        except (UnicodeDecodeError, LookupError) as lenient_error:
            return _decode_failure(score, counts, notes, lenient_error)
    except LookupError as missing_codec:
        return _decode_failure(score, counts, notes, missing_codec)

    if not text:
        return _decode_failure(score, counts, notes, ValueError("decoded text is empty"))

    logger.info(
        "Accepted %d bytes as %s (score %.3f%s)",
        counts.total_bytes,
        TARGET_ENCODING,
        score,
        ", lenient" if lenient else "",
    )
    return EncodingVerdict(
        is_target=True,
        confidence=score,
        decoded_text=text,
        counts=counts,
        encoding=TARGET_ENCODING,
        lenient=lenient,
        line_endings=detect_line_endings(text),
        notes=notes + (["lenient-decode"] if lenient else []),
    )


def _decode_failure(
    score: float, counts: DiagnosticCounts, notes: list[str], error: Exception
) -> EncodingVerdict:
    reason = f"{TARGET_ENCODING} decode failed: {error}"
    logger.warning("Rejected input: %s", reason)
    return EncodingVerdict(
        is_target=False,
        confidence=score,
        decoded_text="",
        counts=counts,
        rejection_reason=reason,
        notes=notes,
    )


def detect_line_endings(text: str) -> LineEndingProfile:
    """Count CRLF pairs first, then bare LF and CR in what remains."""
    crlf = text.count("\r\n")
    residual = text.replace("\r\n", "")
    lf = residual.count("\n")
    cr = residual.count("\r")

    per_kind = {LineEndingKind.CRLF: crlf, LineEndingKind.LF: lf, LineEndingKind.CR: cr}
    present = [kind for kind, n in per_kind.items() if n]
    if not present:
        kind = LineEndingKind.NONE
    elif len(present) == 1:
        kind = present[0]
    else:
        kind = LineEndingKind.MIXED

    return LineEndingProfile(
        kind=kind,
        count=crlf + lf + cr,
        crlf=crlf,
        lf=lf,
        cr=cr,
        length_with_terminators=len(text),
        length_without_terminators=len(_TERMINATOR_RE.sub("", text)),
    )


def describe_verdict(verdict: EncodingVerdict) -> str:
    if verdict.is_target:
        percent = round(verdict.confidence * 100)
        return f"encoding: Shift_JIS ({verdict.encoding}), confidence {percent}%"
    return verdict.rejection_reason or "unsupported encoding"


def describe_line_endings(profile: LineEndingProfile) -> str:
    if profile.count == 0:
        return "no line endings"
    parts = [
        f"{label}: {n}"
        for label, n in (("CRLF", profile.crlf), ("LF", profile.lf), ("CR", profile.cr))
        if n
    ]
    return f"{LINE_ENDING_LABELS[profile.kind]} ({', '.join(parts)})"
