"""Pick a random SNP panel from per-chromosome tables, optionally around a barcode."""

from __future__ import annotations

import argparse
import random
from pathlib import Path
from typing import Sequence

MIN_LENGTH_FROM_SELECTED_SNP = 500
"""Number of SNPs kept clear on each side of a barcode SNP."""

AUTOSOMES = 22
MAF_COLUMN = 14
SELECTION_FILE = "SelectedSNP.txt"


def _data_lines(path: str | Path) -> list[str]:
    return Path(path).read_text().splitlines()[1:]


def _read_maf_table(path: str | Path) -> list[tuple[str, float]]:
    rows = []
    for line in _data_lines(path):
        tokens = [token for token in line.split(" ") if token]
        if not tokens:
            break
        if len(tokens) <= MAF_COLUMN:
            raise ValueError(f"{path}: row {tokens[0]!r} has no allele frequency column")
        rows.append((tokens[0], float(tokens[MAF_COLUMN])))
    return rows


def _read_names(path: str | Path) -> list[str]:
    return [line.split(" ", 1)[0] for line in _data_lines(path) if line]


def select_barcode(
    chromosome_files: Sequence[str | Path],
    barcode_length: int,
    min_maf: float,
    max_maf: float,
    rng: random.Random,
) -> list[tuple[int, str, float]]:
    """Choose one SNP on each of ``barcode_length`` distinct random chromosomes.

    A chosen SNP lies more than 1000 positions from both ends of its table and
    has an allele frequency strictly between ``min_maf`` and ``max_maf``.
    Returns ``(chromosome, name, maf)`` tuples ordered by chromosome (from 1).
    """
    available = min(AUTOSOMES, len(chromosome_files))
    if barcode_length > available:
        raise ValueError(
            f"cannot place {barcode_length} barcode SNPs on {available} chromosomes"
        )
    margin = 2 * MIN_LENGTH_FROM_SELECTED_SNP
    selection = []
    for chromosome in sorted(rng.sample(range(available), barcode_length)):
        rows = _read_maf_table(chromosome_files[chromosome])
        candidates = [
            (name, maf) for name, maf in rows[margin + 1 : len(rows) - margin] if min_maf < maf < max_maf
        ]
        if not candidates:
            raise ValueError(f"no suitable SNP in chromosome {chromosome + 1}")
        name, maf = rng.choice(candidates)
        selection.append((chromosome + 1, name, maf))
    return selection


def select_snps(
    chromosome_files: Sequence[str | Path],
    barcode: Sequence[str],
    barcode_chromosomes: Sequence[int],
    number_of_snps: int,
    start_chr: int,
    end_chr: int,
    rng: random.Random,
) -> list[str]:
    """Return an equal share of distinct SNP names from each chromosome in range.

    Barcode SNPs on a chromosome come first and count towards its share; the
    rest are random, kept clear of the chromosome's last barcode SNP.
    """
    if start_chr < 1 or end_chr < start_chr or end_chr > len(chromosome_files):
        raise ValueError(f"invalid chromosome range {start_chr}-{end_chr}")
    per_chromosome = number_of_snps // (end_chr - start_chr + 1)
    output: list[str] = []
    for chromosome in range(start_chr, end_chr + 1):
        names = _read_names(chromosome_files[chromosome - 1])
        selected: list[str] = []
        guard: str | None = None
        for name, source in zip(barcode, barcode_chromosomes):
            if source != chromosome:
                continue
            if name not in names:
                raise ValueError(f"SNP {name} was not found in chromosome {chromosome}")
            guard = name
            selected.append(name)

        guard_positions = [k for k, name in enumerate(names) if name == guard] if guard else []

        def clear(position: int) -> bool:
            return all(
                not (p - MIN_LENGTH_FROM_SELECTED_SNP < position <= p + MIN_LENGTH_FROM_SELECTED_SNP)
                for p in guard_positions
            )

        taken = set(selected)
        eligible = list(
            dict.fromkeys(
                name for k, name in enumerate(names) if name not in taken and clear(k)
            )
        )
        remaining = max(0, per_chromosome - len(selected))
        if len(eligible) < remaining:
            raise ValueError(
                f"chromosome {chromosome} has only {len(eligible)} eligible SNPs, "
                f"{remaining} needed"
            )
        selected.extend(rng.sample(eligible, remaining))
        output.extend(selected)
    return output


def _write_selection(path: Path, selection: Sequence[tuple[int, str, float]]) -> None:
    text = "Chr=" + "".join(f"{chromosome}," for chromosome, _, _ in selection)
    text += "\nBarcode=" + "".join(f"{name}," for _, name, _ in selection)
    text += "\nMAF=" + "".join(f"{maf:g}," for _, _, maf in selection)
    path.write_text(text)


def _split_list(text: str) -> list[str]:
    return [item for item in (part.strip() for part in text.split(",")) if item]


def main(argv: Sequence[str] | None = None) -> int:
    """Select a SNP panel from the tables of an input directory."""
    parser = argparse.ArgumentParser(
        prog="ceu-select", description="Select random SNPs from per-chromosome tables."
    )
    parser.add_argument("--input", type=Path, default=Path("input"))
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    parser.add_argument("--number-of-snps", type=int, required=True)
    parser.add_argument("--start-chr", type=int, default=1)
    parser.add_argument("--end-chr", type=int, default=AUTOSOMES)
    parser.add_argument("--barcode-length", type=int, default=0)
    parser.add_argument("--min-maf", type=float, default=0.0)
    parser.add_argument("--max-maf", type=float, default=0.5)
    parser.add_argument("--barcode", default="", help="comma separated SNP names")
    parser.add_argument("--barcode-chromosomes", default="", help="comma separated numbers")
    args = parser.parse_args(argv)

    rng = random.Random()
    try:
        files = sorted(entry for entry in args.input.iterdir() if entry.is_file())
        if args.barcode_length:
            print(
                f"Finding {args.barcode_length} SNPs by chance. "
                f"Results in file {SELECTION_FILE}"
            )
            selection = select_barcode(
                files, args.barcode_length, args.min_maf, args.max_maf, rng
            )
            _write_selection(args.output_dir / SELECTION_FILE, selection)
            barcode = [name for _, name, _ in selection]
            chromosomes = [chromosome for chromosome, _, _ in selection]
        else:
            barcode = _split_list(args.barcode)
            chromosomes = [int(item) for item in _split_list(args.barcode_chromosomes)]
        snps = select_snps(
            files, barcode, chromosomes, args.number_of_snps, args.start_chr, args.end_chr, rng
        )
        output = args.output_dir / f"SNP_{args.number_of_snps}.txt"
        output.write_text("".join(f"{name}\n" for name in snps))
    except (ValueError, OSError) as exc:
        print(exc)
        return 1
    print(f"Selected {len(snps)} SNPs into {output}")
    return 0