import random

import pytest

from snpbarcode.ceu_select import main, select_barcode, select_snps


def _make_chromosome(directory, number, rows=2600, eligible_at=1500):
    lines = ["name " + " ".join(f"c{i}" for i in range(1, 15))]
    for index in range(rows):
        maf = "0.3" if index == eligible_at else "0.01"
        lines.append(" ".join([f"rs{number}_{index}"] + ["x"] * 13 + [maf]))
    path = directory / f"chr{number:02d}.txt"
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def three_files(tmp_path):
    return [_make_chromosome(tmp_path, n) for n in (1, 2, 3)]


def test_select_barcode_picks_the_eligible_snp(three_files):
    selection = select_barcode(three_files, 2, 0.2, 0.4, random.Random(1))
    assert len(selection) == 2
    chromosomes = [chromosome for chromosome, _, _ in selection]
    assert chromosomes == sorted(set(chromosomes))
    for chromosome, name, maf in selection:
        assert 1 <= chromosome <= 3
        assert name == f"rs{chromosome}_1500"
        assert maf == pytest.approx(0.3)


def test_select_barcode_ignores_snps_near_the_ends(tmp_path):
    files = [_make_chromosome(tmp_path, 1, eligible_at=500)]
    with pytest.raises(ValueError):
        select_barcode(files, 1, 0.2, 0.4, random.Random(0))


def test_select_barcode_needs_enough_chromosomes(three_files):
    with pytest.raises(ValueError):
        select_barcode(three_files, 4, 0.2, 0.4, random.Random(0))


def test_select_snps_keeps_clear_of_barcode(tmp_path):
    files = [_make_chromosome(tmp_path, n, rows=3000) for n in (1, 2)]
    result = select_snps(files, ["rs1_1500"], [1], 10, 1, 2, random.Random(7))
    assert len(result) == 10
    assert len(set(result)) == 10
    assert result[0] == "rs1_1500"
    for name in result[1:5]:
        assert name.startswith("rs1_")
        position = int(name.split("_")[1])
        assert not 1000 < position <= 2000
    assert all(name.startswith("rs2_") for name in result[5:])


def test_select_snps_is_reproducible(tmp_path):
    files = [_make_chromosome(tmp_path, n, rows=3000) for n in (1, 2)]
    first = select_snps(files, [], [], 8, 1, 2, random.Random(3))
    second = select_snps(files, [], [], 8, 1, 2, random.Random(3))
    assert first == second


def test_select_snps_missing_barcode(tmp_path):
    files = [_make_chromosome(tmp_path, 1, rows=100)]
    with pytest.raises(ValueError):
        select_snps(files, ["rs9_1"], [1], 5, 1, 1, random.Random(0))


def test_select_snps_not_enough_candidates(tmp_path):
    files = [_make_chromosome(tmp_path, 1, rows=3)]
    with pytest.raises(ValueError):
        select_snps(files, [], [], 10, 1, 1, random.Random(0))


def test_main_without_barcode(tmp_path):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    for n in (1, 2):
        _make_chromosome(input_dir, n)
    code = main(
        ["--input", str(input_dir), "--output-dir", str(tmp_path),
         "--number-of-snps", "6", "--start-chr", "1", "--end-chr", "2"]
    )
    assert code == 0
    names = (tmp_path / "SNP_6.txt").read_text().splitlines()
    assert len(names) == 6
    assert len(set(names)) == 6


def test_main_with_random_barcode(tmp_path):
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    for n in (1, 2):
        _make_chromosome(input_dir, n)
    code = main(
        ["--input", str(input_dir), "--output-dir", str(tmp_path),
         "--number-of-snps", "6", "--start-chr", "1", "--end-chr", "2",
         "--barcode-length", "1", "--min-maf", "0.2", "--max-maf", "0.4"]
    )
    assert code == 0
    selection = (tmp_path / "SelectedSNP.txt").read_text().splitlines()
    assert selection[0].startswith("Chr=")
    assert selection[1].startswith("Barcode=rs")
    barcode_name = selection[1][len("Barcode="):].rstrip(",")
    names = (tmp_path / "SNP_6.txt").read_text().splitlines()
    assert barcode_name in names
    assert len(names) == 6