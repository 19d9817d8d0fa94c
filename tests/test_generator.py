from zengin.data.generator import SynthConfig, generate_synthetic_file, generate_synthetic_lines
from zengin.encoding import classify


def test_generated_lines_have_fixed_widths():
    lines, meta = generate_synthetic_lines(SynthConfig(count=3, seed=1))
    assert [len(line) for line in lines] == [120, 120, 120, 120, 120, 119]
    assert [line[0] for line in lines] == ["1", "2", "2", "2", "8", "9"]
    assert len(meta) == 3
    total = sum(m["amount"] for m in meta)
    assert lines[4][1:7] == "000003"
    assert int(lines[4][7:19]) == total


def test_generation_is_reproducible():
    assert generate_synthetic_file(SynthConfig(seed=5)) == generate_synthetic_file(
        SynthConfig(seed=5)
    )


def test_generated_file_is_cp932_without_trailing_terminator():
    data, _ = generate_synthetic_file(SynthConfig(count=2))
    assert data.endswith(b"9" + b" " * 118)
    assert data.count(b"\r\n") == 4
    verdict = classify(data)
    assert verdict.is_target is True
    assert "all-ascii" not in verdict.notes
    assert verdict.counts.half_width_kana_bytes > 0


def test_generator_can_omit_end_record_and_use_lf():
    data, _ = generate_synthetic_file(SynthConfig(count=1, include_end=False, line_ending="lf"))
    assert b"\r" not in data
    assert data.split(b"\n")[-1][:1] == b"8"
