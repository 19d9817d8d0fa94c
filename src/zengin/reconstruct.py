"""Render parsed records back into fixed-width lines and bytes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from zengin.encoding import TARGET_ENCODING
from zengin.layout.registry import code_for_kind, schema_for
from zengin.parser import ParsedRecord

LINE_ENDINGS = {"crlf": "\r\n", "lf": "\n"}
WRITE_ENCODINGS = {"shift_jis", "utf-8"}


def reconstruct(record: ParsedRecord) -> str:
    """Place every field value at its offset in a space-filled line.

    Records without a layout (unknown kind) come back as their raw line.
    """
    code = code_for_kind(record.kind)
    schema = schema_for(code) if code else None
    if schema is None:
        return record.raw_line

    chars = [" "] * schema.record_length
    for spec in schema.fields:
        value = record.fields.get(spec.name, "")
        padded = value.ljust(spec.length)[: spec.length]
        offset = spec.start - 1
        chars[offset : offset + spec.length] = padded
    return "".join(chars)


def render_lines(
    records: Iterable[ParsedRecord], line_ending: Literal["crlf", "lf"] = "crlf"
) -> str:
    """Join reconstructed records; the last line carries no terminator."""
    if line_ending not in LINE_ENDINGS:
        raise ValueError(
            f"Unsupported line ending '{line_ending}'. Choose from {set(LINE_ENDINGS)}."
        )
    return LINE_ENDINGS[line_ending].join(reconstruct(r) for r in records)


def encode_lines(text: str, encoding: str = "shift_jis") -> bytes:
    """Encode rendered text for writing.

    ``shift_jis`` is approximate: characters cp932 cannot represent are
    written as their UTF-8 bytes instead of failing the whole file.
    """
    if encoding == "utf-8":
        return text.encode("utf-8")
    if encoding != "shift_jis":
        raise ValueError(f"Unsupported encoding '{encoding}'. Choose from {WRITE_ENCODINGS}.")

    out = bytearray()
    for ch in text:
        try:
            out += ch.encode(TARGET_ENCODING)
        except UnicodeEncodeError:
            out += ch.encode("utf-8")
    return bytes(out)
