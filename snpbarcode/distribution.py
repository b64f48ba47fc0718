"""Disease model of genotype-combination probabilities for a set of selected SNPs."""

from __future__ import annotations

import argparse
import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

from snpbarcode.genotype_data import NUMBER_OF_GENOTYPES

FLT_EPSILON = 2.0**-23
SIGNIFICANCE_LINE = "0.001"
ALLELES_LINE = "AG"


@dataclass
class ModelParams:
    """Parameters of a disease model over ``length`` SNPs.

    ``maf`` holds the minor allele frequency of each SNP. Combinations carrying
    genotype 2 are enriched by ``rational_factor`` per such SNP, and never drop
    below a nominal floor derived from ``nominal_min``, ``nominal_max`` and
    ``population_size``.
    """

    length: int
    maf: list[float]
    selected_snps: list[str] = field(default_factory=list)
    nominal_min: int = 0
    nominal_max: int = 0
    population_size: int = 1
    rational_factor: float = 1.0
    directory_name: str = ""

    def __post_init__(self) -> None:
        self.maf = [float(value) for value in self.maf]
        self.selected_snps = list(self.selected_snps)
        if self.length < 1:
            raise ValueError("the model needs at least one SNP")
        if len(self.maf) != self.length:
            raise ValueError(
                f"expected {self.length} minor allele frequencies, got {len(self.maf)}"
            )
        if self.population_size <= 0:
            raise ValueError("population size must be positive")
        if self.nominal_max < self.nominal_min:
            raise ValueError("nominal maximum is below nominal minimum")


def _combinations(length: int) -> Iterator[tuple[int, ...]]:
    """Genotype combinations in model order: the first SNP varies fastest."""
    for digits in itertools.product(range(NUMBER_OF_GENOTYPES), repeat=length):
        yield digits[::-1]


def _genotype_probability(genotype: int, maf: float) -> float:
    if genotype == 0:
        return (1 - maf) ** 2
    if genotype == 1:
        return 2 * (1 - maf) * maf
    return maf**2


def generate_probabilities(params: ModelParams) -> list[float]:
    """Return the (unnormalised) probability of every genotype combination."""
    base = (params.nominal_max - params.nominal_min) ** (1.0 / params.length)
    results = []
    for genotypes in _combinations(params.length):
        result = 1.0
        for genotype, maf in zip(genotypes, params.maf):
            result *= _genotype_probability(genotype, maf)
        twos = genotypes.count(2)
        if twos:
            result *= params.rational_factor**twos
            gradient = (params.nominal_min + base**twos) / params.population_size
            result = max(result, gradient)
        results.append(result)
    return results


def normalize(results: Sequence[float], length: int) -> list[float]:
    """Rescale the combinations without genotype 2 until all probabilities sum to 1.

    Raises ValueError if the enriched combinations alone exceed 1.
    """
    twos = [genotypes.count(2) for genotypes in _combinations(length)]
    if len(results) != len(twos):
        raise ValueError(f"expected {len(twos)} probabilities, got {len(results)}")
    values = list(results)
    while True:
        total = sum(values)
        if abs(total - 1) < FLT_EPSILON:
            return values
        if total <= 0:
            raise ValueError("probabilities sum to zero")
        correction = 1.0 / total
        values = [value * correction if count == 0 else value for value, count in zip(values, twos)]
        enriched = sum(value for value, count in zip(values, twos) if count)
        if enriched > 1:
            raise ValueError(
                f"Total probabilities of enriched combinations is bigger than 1 : {enriched}"
            )


def write_model(params: ModelParams, directory: str | Path | None = None) -> Path:
    """Write ``Model_<length>.txt`` into the directory and return its path."""
    directory = Path(params.directory_name if directory is None else directory)
    if not directory.exists():
        directory.mkdir()
    path = directory / f"Model_{params.length}.txt"
    path.unlink(missing_ok=True)

    results = normalize(generate_probabilities(params), params.length)

    lines = [str(params.length), *params.selected_snps, SIGNIFICANCE_LINE, ALLELES_LINE]
    lines.extend(f"{value:.15g}" for value in results)
    path.write_text("\n".join(lines) + "\n")
    return path


def _split_list(text: str) -> list[str]:
    return [item for item in (part.strip() for part in text.split(",")) if item]


def main(argv: Sequence[str] | None = None) -> int:
    """Build a disease model from command-line parameters and write it to disk."""
    parser = argparse.ArgumentParser(
        prog="distribution-generator",
        description="Generate genotype-combination probabilities of a disease model.",
    )
    parser.add_argument("--maf", required=True, help="comma separated minor allele frequencies")
    parser.add_argument("--selected", default="", help="comma separated SNP names")
    parser.add_argument("--nominal-min", type=int, default=0)
    parser.add_argument("--nominal-max", type=int, default=0)
    parser.add_argument("--population-size", type=int, default=1)
    parser.add_argument("--rational-factor", type=float, default=1.0)
    parser.add_argument("--directory", default="")
    args = parser.parse_args(argv)

    try:
        maf = [float(value) for value in _split_list(args.maf)]
        params = ModelParams(
            length=len(maf),
            maf=maf,
            selected_snps=_split_list(args.selected),
            nominal_min=args.nominal_min,
            nominal_max=args.nominal_max,
            population_size=args.population_size,
            rational_factor=args.rational_factor,
            directory_name=args.directory,
        )
        path = write_model(params)
    except (ValueError, OSError) as exc:
        print(exc)
        return 1
    print(f"created file: {path}")
    return 0