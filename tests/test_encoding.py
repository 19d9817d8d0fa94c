from zengin.encoding import (
    ALL_ASCII_SCORE,
    ASCII_WEIGHT,
    KANA_WEIGHT,
    LineEndingKind,
    classify,
    describe_line_endings,
    detect_line_endings,
    score_bytes,
)


def test_pure_ascii_is_accepted_with_fixed_score():
    data = b"1210123456789ZENGIN TEST\r\n9"
    verdict = classify(data)
    assert verdict.is_target is True
    assert verdict.confidence == ALL_ASCII_SCORE
    assert verdict.decoded_text == data.decode("ascii")
    assert verdict.rejection_reason is None
    assert "all-ascii" in verdict.notes


def test_half_width_kana_scores_higher_than_ascii_mix():
    low = b"A" * 8 + "ｱｲ".encode("cp932")
    high = b"A" * 5 + "ｱｲｳｴｵ".encode("cp932")
    low_score, _, _ = score_bytes(low)
    high_score, counts, _ = score_bytes(high)
    assert low_score == (8 * ASCII_WEIGHT + 2 * KANA_WEIGHT) / 10
    assert high_score > low_score
    assert counts.half_width_kana_bytes == 5


def test_double_byte_pairs_are_counted_as_characters():
    data = "日本".encode("cp932")
    verdict = classify(data)
    assert verdict.is_target is True
    assert verdict.counts.double_byte_chars == 2
    assert verdict.counts.total_bytes == 4
    assert verdict.decoded_text == "日本"
    assert verdict.lenient is False


def test_invalid_bytes_are_penalized():
    data = b"\xff" * 5 + b"A" * 5
    score, counts, notes = score_bytes(data)
    unpenalized = (5 * ASCII_WEIGHT) / 10
    assert counts.invalid_bytes == 5
    assert score <= 0.1 * unpenalized
    assert "invalid-bytes-penalty" in notes

    verdict = classify(data)
    assert verdict.is_target is False
    assert verdict.decoded_text == ""
    assert "threshold" in (verdict.rejection_reason or "")


def test_lead_byte_without_trail_is_invalid():
    _, counts, _ = score_bytes(b"AB\x82")
    assert counts.invalid_bytes == 1
    assert counts.ascii_bytes == 2


def test_empty_input_is_rejected():
    verdict = classify(b"")
    assert verdict.is_target is False
    assert verdict.confidence == 0.0
    assert verdict.rejection_reason == "empty input"


def test_unmapped_pair_falls_back_to_lenient_decode():
    # 0x85 rows are unassigned in cp932 but still look like a valid pair
    data = b"ABCD\x85\x40"
    verdict = classify(data)
    assert verdict.is_target is True
    assert verdict.lenient is True
    assert verdict.decoded_text.startswith("ABCD")
    assert "\ufffd" in verdict.decoded_text


def test_accepted_verdict_carries_line_endings():
    verdict = classify(b"1AAA\r\n2BBB\r\n9")
    assert verdict.line_endings is not None
    assert verdict.line_endings.kind is LineEndingKind.CRLF


def test_detect_line_endings_crlf_only():
    profile = detect_line_endings("abc\r\ndef\r\n")
    assert profile.kind is LineEndingKind.CRLF
    assert profile.count == 2
    assert (profile.crlf, profile.lf, profile.cr) == (2, 0, 0)
    assert profile.length_with_terminators == 10
    assert profile.length_without_terminators == 6


def test_detect_line_endings_kinds():
    assert detect_line_endings("abc").kind is LineEndingKind.NONE
    assert detect_line_endings("a\nb\n").kind is LineEndingKind.LF
    assert detect_line_endings("a\rb").kind is LineEndingKind.CR
    mixed = detect_line_endings("a\r\nb\nc\r")
    assert mixed.kind is LineEndingKind.MIXED
    assert (mixed.crlf, mixed.lf, mixed.cr) == (1, 1, 1)
    assert mixed.count == 3


def test_describe_line_endings():
    assert describe_line_endings(detect_line_endings("x")) == "no line endings"
    assert describe_line_endings(detect_line_endings("a\r\nb\r\n")) == "CRLF (Windows) (CRLF: 2)"
