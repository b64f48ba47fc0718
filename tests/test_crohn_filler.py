import random
from collections import Counter

import pytest

from snpbarcode.crohn_filler import (
    SnpCounts,
    create_fillers,
    fill_lines,
    load_counts,
    main,
    validate_counts,
)

LINES = [
    "ID, s1, s2",
    "CD1, 0, NA",
    "CD2, 1, 2",
    "C1, NA, 0",
    "C2, 2, 0",
]


def test_load_counts_names_and_totals():
    case_data, control_data = load_counts(LINES)
    assert [s.name for s in case_data] == ["s1", "s2"]
    assert [s.name for s in control_data] == ["s1", "s2"]
    assert all(s.total == 2 for s in case_data + control_data)
    assert case_data[1].number_of_na == 1
    assert control_data[0].number_of_na == 1
    assert case_data[0].number_of_na == 0


def test_load_counts_stops_when_controls_outnumber_cases():
    case_data, control_data = load_counts(["ID, s1", "C1, 0", "CD1, 1"])
    assert case_data[0].total == 0
    assert control_data[0].total == 0


def test_load_counts_stops_at_empty_line():
    case_data, _ = load_counts(["ID, s1", "CD1, 0", "", "CD2, 1"])
    assert case_data[0].total == 1


def test_load_counts_rejects_bad_genotype():
    with pytest.raises(ValueError):
        load_counts(["ID, s1", "CD1, 5"])


def test_validate_counts_accepts_consistent_data():
    case_data, control_data = load_counts(LINES)
    validate_counts(case_data, 2)
    validate_counts(control_data, 2)
    assert all(s.total == 2 for s in case_data)


def test_validate_counts_raises_on_mismatch():
    data = [SnpCounts("a", [1, 0, 0]), SnpCounts("b", [1, 1, 0])]
    with pytest.raises(ValueError, match="SNP: 1"):
        validate_counts(data, 1)


def test_create_fillers_proportional():
    snp = SnpCounts("x", [3, 2, 1], number_of_na=4)
    create_fillers([snp], 10)
    assert sorted(snp.filler) == [0, 0, 1, 2]
    assert len(snp.filler) == snp.number_of_na


def test_create_fillers_skips_complete_snps():
    snp = SnpCounts("x", [1, 1, 0])
    create_fillers([snp], 2)
    assert snp.filler == []


def test_create_fillers_without_known_values_raises():
    with pytest.raises(ValueError):
        create_fillers([SnpCounts("x", [0, 0, 0], number_of_na=2)], 2)


def test_fill_lines_replaces_every_gap():
    case_data, control_data = load_counts(LINES)
    create_fillers(case_data, 2)
    create_fillers(control_data, 2)
    out = fill_lines(LINES, case_data, control_data, 2, random.Random(1))
    assert out[0] == LINES[0]
    assert len(out) == len(LINES)
    assert all("NA" not in row for row in out)
    assert out[2] == "CD2,1,2"
    assert all(not s.filler for s in case_data + control_data)


def test_fill_lines_uses_filler_multiset():
    lines = ["ID, s"] + [f"CD{i}, NA" for i in range(4)] + [
        "CD4, 0", "CD5, 0", "CD6, 1", "CD7, 1", "CD8, 2", "CD9, 2",
    ] + [f"C{i}, 0" for i in range(10)]
    case_data, control_data = load_counts(lines)
    create_fillers(case_data, 10)
    pool = Counter(case_data[0].filler)
    out = fill_lines(lines, case_data, control_data, 10, random.Random(7))
    filled = Counter(int(row.split(",")[1]) for row in out[1:5])
    assert filled == pool


def test_fill_lines_short_input_raises():
    case_data, control_data = load_counts(LINES)
    create_fillers(case_data, 2)
    create_fillers(control_data, 2)
    with pytest.raises(ValueError):
        fill_lines(LINES[:3], case_data, control_data, 2, random.Random(0))


def test_fill_lines_without_filler_raises():
    case_data, control_data = load_counts(LINES)
    with pytest.raises(ValueError):
        fill_lines(LINES, case_data, control_data, 2, random.Random(0))


def test_main_writes_filled_file(tmp_path, capsys):
    source = tmp_path / "data.csv"
    source.write_text("\n".join(LINES) + "\n")
    assert main([str(source)]) == 0
    written = (tmp_path / "Filled_data.csv").read_text().splitlines()
    assert written[0] == LINES[0]
    assert len(written) == len(LINES)
    assert all("NA" not in row for row in written)
    assert "successfully" in capsys.readouterr().out


def test_main_requires_input():
    with pytest.raises(SystemExit):
        main([])


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "absent.csv")]) == 1