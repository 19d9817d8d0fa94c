import pytest

from zengin.data.generator import (
    BANKS,
    BRANCHES,
    SynthConfig,
    data_line,
    end_line,
    generate_synthetic_lines,
    header_line,
    trailer_line,
)
from zengin.layout.schema import RecordKind
from zengin.session import (
    build_session,
    edit_field,
    edit_session,
    kind_counts,
    parse_lines,
    parse_text,
    replace_record,
    split_lines,
)


def _header() -> str:
    return header_line(SynthConfig(), BANKS[0], BRANCHES[0])


def _data(amount: int = 1000) -> str:
    return data_line(BANKS[1], BRANCHES[1], 1234567, "ﾔﾏﾀﾞ ﾀﾛｳ", amount)


def test_split_lines_drops_blank_lines_and_handles_all_terminators():
    text = "a\r\nb\n\n  \rc\r"
    assert split_lines(text) == ["a", "b", "c"]


def test_generated_file_is_a_valid_session():
    lines, _ = generate_synthetic_lines(SynthConfig(count=3))
    session = parse_text("\r\n".join(lines))
    assert session.is_valid is True
    assert session.structural_errors == ()
    assert session.warnings == ()
    assert session.header is not None and session.header.line_number == 1
    assert len(session.data) == 3
    assert session.trailer is not None
    assert session.end is not None
    assert session.total_records == 6
    assert session.all_errors == []


def test_duplicate_trailer_and_count_mismatch():
    lines = [
        _header(),
        _data(),
        _data(),
        trailer_line(1, 1000),
        trailer_line(2, 2000),
        end_line(),
    ]
    session = build_session(parse_lines(lines))
    assert len(session.structural_errors) == 2
    assert session.structural_errors[0] == "line 5: duplicate trailer record"
    assert session.structural_errors[1] == "record count mismatch: expected 1, actual 2"
    # the first trailer stays canonical
    assert session.trailer is not None and session.trailer.line_number == 4
    assert all(r.validation.is_valid for r in session.records)
    assert session.all_errors == list(session.structural_errors)


def test_missing_records_are_reported():
    session = build_session(parse_lines([end_line()]))
    assert session.structural_errors == (
        "header record not found",
        "trailer record not found",
        "no data records found",
    )


def test_missing_end_record_is_only_a_warning():
    session = build_session(parse_lines([_header(), _data(), trailer_line(1, 1000)]))
    assert session.structural_errors == ()
    assert session.warnings == ("end record not found",)
    assert session.is_valid is True


def test_duplicate_header_and_end():
    lines = [_header(), _header(), _data(), trailer_line(1, 1000), end_line(), end_line()]
    session = build_session(parse_lines(lines))
    assert session.structural_errors == (
        "line 2: duplicate header record",
        "line 6: duplicate end record",
    )
    assert session.header is not None and session.header.line_number == 1
    assert session.end is not None and session.end.line_number == 5


def test_non_numeric_trailer_count_skips_reconciliation():
    trailer = "8" + "ABCDEF" + "0" * 12 + " " * 101
    session = build_session(parse_lines([_header(), _data(), trailer, end_line()]))
    assert not any("mismatch" in e for e in session.structural_errors)
    assert session.trailer is not None
    assert session.trailer.validation.is_valid is False


def test_unknown_lines_are_kept_but_not_classified():
    lines = [_header(), "X unknown", _data(), trailer_line(1, 1000), end_line()]
    session = build_session(parse_lines(lines))
    assert session.total_records == 5
    assert session.records[1].kind is RecordKind.UNKNOWN
    assert session.structural_errors == ()
    assert session.error_count == 1
    assert session.all_errors == ["line 2: unknown record type 'X'"]


def test_replace_record_returns_new_session():
    lines = [_header(), _data(), trailer_line(1, 1000), end_line()]
    session = build_session(parse_lines(lines))
    extra = parse_lines([_data()])[0]
    updated = replace_record(session, 3, extra)
    assert updated is not session
    assert session.end is not None
    assert updated.end is None
    assert len(updated.data) == 2
    assert "record count mismatch: expected 1, actual 2" in updated.structural_errors


def test_edit_field_produces_revalidated_copy():
    record = parse_lines([_data()])[0]
    edited = edit_field(record, "payee_bank_code", "0000")
    assert record.fields["payee_bank_code"] == BANKS[1][0]
    assert record.validation.is_valid is True
    assert edited.fields["payee_bank_code"] == "0000"
    assert edited.validation.is_valid is False
    assert edited.line_number == record.line_number
    assert len(edited.raw_line) == 120


def test_edit_field_truncates_to_field_width():
    record = parse_lines([_data()])[0]
    edited = edit_field(record, "payee_name", "ﾀﾅｶ" * 20)
    assert edited.fields["payee_name"] == ("ﾀﾅｶ" * 20)[:30]
    assert edited.fields["amount"] == record.fields["amount"]


def test_edit_field_rejects_unknown_names_and_records():
    record = parse_lines([_data()])[0]
    with pytest.raises(KeyError):
        edit_field(record, "no_such_field", "x")
    unknown = parse_lines(["Zzz"])[0]
    with pytest.raises(KeyError):
        edit_field(unknown, "data_type", "2")


def test_edit_session_fixes_count_mismatch():
    lines = [_header(), _data(), _data(), trailer_line(1, 2000), end_line()]
    session = build_session(parse_lines(lines))
    assert session.is_valid is False
    fixed = edit_session(session, 3, "total_count", "000002")
    assert fixed.is_valid is True
    assert session.is_valid is False
    assert fixed.trailer is not None and fixed.trailer.fields["total_count"] == "000002"


def test_kind_counts_uses_display_labels():
    lines, _ = generate_synthetic_lines(SynthConfig(count=2))
    counts = kind_counts(parse_text("\n".join(lines)))
    assert counts["データ"] == 2
    assert counts["ヘッダー"] == 1
    assert counts["不明"] == 0
