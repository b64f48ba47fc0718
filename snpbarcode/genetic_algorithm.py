"""Helpers of a genetic-algorithm run: barcode lookup, stagnation test and data-set checks."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Iterator, Sequence

from snpbarcode.chromosome import Chromosome
from snpbarcode.genotype_data import NUMBER_OF_GENOTYPES, GenotypeData

ANALYSIS_HEADER = "Requested,Created,Diff,Diff%"
SUMMARY_HEADER = "NUM,SUM,MAX,MIN"


def find_selected_barcode(data: GenotypeData, names: Sequence[str]) -> list[int]:
    """Return the sorted positions in ``data`` of the SNPs named in ``names``.

    Raises ValueError if any of the names is not in the data set.
    """
    if not names:
        return []
    positions: list[int] = []
    for name in names:
        position = next(
            (index for index, snp in enumerate(data.total_case) if snp.name == name), None
        )
        if position is not None:
            positions.append(position)
    if len(positions) != len(names):
        found = ",".join(data.total_case[position].name for position in positions)
        raise ValueError(
            f"Mismatch between input data chromosome size {len(positions)} and defined "
            f"chromosome in config file {len(names)} (found: {found})"
        )
    return sorted(positions)


def equal_elitism(
    last_generation: Sequence[Chromosome], current_generation: Sequence[Chromosome]
) -> int:
    """Count the leading elite chromosomes whose fitness has not improved.

    Counting stops at the first position where the current generation is fitter
    than the last one.
    """
    count = 0
    for last, current in zip(last_generation, current_generation):
        if last.fitness < current.fitness:
            break
        count += 1
    return count


def count_matching(
    data_set: Sequence[Sequence[int]], snps: Sequence[int], genotypes: Sequence[int]
) -> int:
    """Number of individuals carrying ``genotypes[j]`` at SNP ``snps[j]`` for every ``j``."""
    pattern = list(zip(snps, genotypes))
    return sum(
        all(individual[snp] == genotype for snp, genotype in pattern) for individual in data_set
    )


def write_snp_names(data: GenotypeData, path: str | Path) -> Path:
    """Write each SNP's name and its case and control genotype counts as CSV."""
    path = Path(path)
    lines = []
    for case, control in zip(data.total_case, data.total_control):
        cells = [case.name]
        for genotype in range(NUMBER_OF_GENOTYPES):
            cells.append(str(case.events[genotype]))
            cells.append(str(control.events[genotype]))
        lines.append(",".join(cells) + ",\n")
    path.write_text("".join(lines))
    return path


def _combinations(length: int) -> Iterator[tuple[int, ...]]:
    """Genotype combinations in model order: the first SNP varies fastest."""
    for digits in itertools.product(range(NUMBER_OF_GENOTYPES), repeat=length):
        yield digits[::-1]


def _read_model(model_path: Path, length: int) -> list[float]:
    tokens = model_path.read_text().split()
    if not tokens:
        raise ValueError(f"model file {model_path} is empty")
    if int(tokens[0]) != length:
        raise ValueError("Mismatch between input data and defined chromosome in config file")
    values = tokens[1 + length :]
    needed = NUMBER_OF_GENOTYPES**length
    if len(values) < needed:
        raise ValueError(f"model file {model_path} holds fewer than {needed} probabilities")
    return [float(value) for value in values[:needed]]


def _ratio(diff: int, requested: int) -> int:
    if requested == 0:
        return 0
    return int((diff / requested) * 100.0 + 0.5)


def analyse_data_set(
    data_set: Sequence[Sequence[int]],
    snps: Sequence[int],
    model_path: str | Path,
    output_path: str | Path,
) -> tuple[list[int], list[int]]:
    """Compare the individuals of ``data_set`` with the probabilities of a disease model.

    For every genotype combination of ``snps`` the requested count (probability
    times population) is set against the count found, and written as CSV with a
    closing summary. Returns the differences and the differences in percent
    (0 where nothing was requested).
    """
    probabilities = _read_model(Path(model_path), len(snps))

    rows = ["".join(f"{snp}," for snp in snps) + ANALYSIS_HEADER + "\n"]
    diffs: list[int] = []
    ratios: list[int] = []
    for genotypes, probability in zip(_combinations(len(snps)), probabilities):
        requested = int(probability * len(data_set) + 0.5)
        created = count_matching(data_set, snps, genotypes)
        diff = requested - created
        ratio = _ratio(diff, requested)
        diffs.append(diff)
        ratios.append(ratio)
        cells = "".join(f"{genotype}," for genotype in genotypes)
        rows.append(f"{cells}{requested},{created},{diff},{ratio}\n")

    total = sum(diffs)
    rows.append(f"\n{SUMMARY_HEADER}\n")
    rows.append(
        f"{sum(1 for d in diffs if d)},{total},{max(diffs)},{min(diffs)}\n"
    )
    rows.append(
        f"{sum(1 for r in ratios if r)},{total},{max(ratios)},{min(ratios)}\n"
    )
    Path(output_path).write_text("".join(rows))
    return diffs, ratios