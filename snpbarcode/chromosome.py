"""Candidate SNP combinations evolved by the genetic algorithm."""

from __future__ import annotations

import random
import struct
import sys
from typing import ClassVar, Iterable, Sequence

from snpbarcode.genotype_data import NUMBER_OF_GENOTYPES, GenotypeData

DEFAULT_GENOTYPE = 2
"""Genotype assigned to a SNP when none is given."""

FLT_EPSILON = 2.0**-23
_UNSET_FITNESS = sys.float_info.max


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


class Chromosome:
    """One solution: a combination of SNPs, a genotype for each, and its fitness.

    ``fitness_calculations`` counts every fitness evaluation made by any chromosome.
    """

    fitness_calculations: ClassVar[int] = 0

    def __init__(
        self,
        snps: Iterable[int] = (),
        genotypes: Iterable[int] | None = None,
        fitness: float | None = None,
        additional_fitness_data: Iterable[str] = (),
    ) -> None:
        self.snps = list(snps)
        self.genotypes = (
            [DEFAULT_GENOTYPE] * len(self.snps) if genotypes is None else list(genotypes)
        )
        if len(self.genotypes) != len(self.snps):
            raise ValueError("a chromosome needs exactly one genotype per SNP")
        self.additional_fitness_data = list(additional_fitness_data)
        self._fitness: float | None = None
        self._evaluated_on: tuple[tuple[int, ...], tuple[int, ...]] | None = None
        if fitness is not None:
            self.fitness = fitness

    def _content(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        return tuple(self.snps), tuple(self.genotypes)

    def _invalidate(self) -> None:
        self._evaluated_on = None

    @property
    def fitness_valid(self) -> bool:
        """True while the fitness matches the current SNPs and genotypes."""
        return self._fitness is not None and self._evaluated_on == self._content()

    @property
    def fitness(self) -> float:
        """Fitness of the current contents; raises RuntimeError if it is stale."""
        if not self.fitness_valid:
            raise RuntimeError("fitness has not been calculated for this chromosome")
        assert self._fitness is not None
        return self._fitness

    @fitness.setter
    def fitness(self, value: float) -> None:
        self._fitness = float(value)
        self._evaluated_on = self._content()

    def _raw_fitness(self) -> float:
        return _UNSET_FITNESS if self._fitness is None else self._fitness

    def __len__(self) -> int:
        return len(self.snps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.snps == other.snps and self.genotypes == other.genotypes

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Chromosome) -> bool:
        return self._raw_fitness() < other._raw_fitness()

    def __gt__(self, other: Chromosome) -> bool:
        return self._raw_fitness() > other._raw_fitness()

    def __repr__(self) -> str:
        fitness = self._fitness if self.fitness_valid else None
        return (
            f"{type(self).__name__}(snps={self.snps!r}, genotypes={self.genotypes!r}, "
            f"fitness={fitness!r})"
        )

    def copy(self) -> Chromosome:
        """Return an independent chromosome of the same type and state."""
        clone = type(self)(self.snps, self.genotypes, None, self.additional_fitness_data)
        clone._fitness = self._fitness
        clone._evaluated_on = self._evaluated_on
        return clone

    def sort(self) -> None:
        """Order the SNPs ascending, each keeping its genotype."""
        valid = self.fitness_valid
        pairs = sorted(zip(self.snps, self.genotypes), key=lambda pair: pair[0])
        self.snps = [snp for snp, _ in pairs]
        self.genotypes = [genotype for _, genotype in pairs]
        if valid:
            self._evaluated_on = self._content()

    def matches_snps(self, snps: Sequence[int]) -> bool:
        """True if the SNPs equal ``snps`` and every genotype is the default one."""
        return list(snps[: len(self.snps)]) == self.snps and all(
            genotype == DEFAULT_GENOTYPE for genotype in self.genotypes
        )


class _EvolvingChromosome(Chromosome):
    """Genetic operators shared by the concrete chromosome kinds."""

    _evolves_genotypes: ClassVar[bool] = True

    def _build(self, rng: random.Random, number_of_snps: int) -> None:
        self.snps = [rng.randrange(number_of_snps) for _ in self.snps]
        self._fix(rng, number_of_snps)
        if self._evolves_genotypes:
            self.genotypes = [rng.randrange(NUMBER_OF_GENOTYPES) for _ in self.genotypes]
        self._invalidate()

    def _fix(self, rng: random.Random, number_of_snps: int) -> None:
        if number_of_snps < len(self.snps):
            raise ValueError(
                f"cannot pick {len(self.snps)} distinct SNPs out of {number_of_snps}"
            )
        for position in range(len(self.snps)):
            while self.snps[position] in self.snps[:position]:
                self.snps[position] = rng.randrange(number_of_snps)
                self._invalidate()
        self.sort()

    def _crossover(self, mate: Chromosome, rng: random.Random) -> None:
        length = len(self.snps)
        start, span = rng.randrange(length), rng.randrange(length)
        if self._evolves_genotypes:
            genotype_start, genotype_span = rng.randrange(length), rng.randrange(length)
        for position in range(start, min(start + span, length)):
            self.snps[position], mate.snps[position] = mate.snps[position], self.snps[position]
        if self._evolves_genotypes:
            for position in range(genotype_start, min(genotype_start + genotype_span, length)):
                self.genotypes[position], mate.genotypes[position] = (
                    mate.genotypes[position],
                    self.genotypes[position],
                )
        self._invalidate()
        mate._invalidate()

    def _mutate(self, mutation_rate: float, rng: random.Random, number_of_snps: int) -> None:
        for position in range(len(self.snps)):
            if rng.random() < mutation_rate:
                self.snps[position] = rng.randrange(number_of_snps)
                self._invalidate()
        if self._evolves_genotypes:
            for position in range(len(self.genotypes)):
                if rng.random() < mutation_rate:
                    self.genotypes[position] = rng.randrange(NUMBER_OF_GENOTYPES)
                    self._invalidate()

    def _evaluate(
        self, case_data: Sequence[Sequence[int]], control_data: Sequence[Sequence[int]]
    ) -> float:
        if self.fitness_valid:
            return self.fitness
        Chromosome.fitness_calculations += 1
        return self.calculate_fitness(case_data, control_data)  # type: ignore[attr-defined]


class YangChromosome(_EvolvingChromosome):
    """Chromosome scored by how much more often its genotype pattern occurs in cases."""

    _evolves_genotypes = True

    def build(self, rng: random.Random, number_of_snps: int) -> None:
        """Fill the chromosome with distinct random SNPs and random genotypes."""
        self._build(rng, number_of_snps)

    def fix(self, rng: random.Random, number_of_snps: int) -> None:
        """Replace repeated SNPs by random ones until all differ, then sort."""
        self._fix(rng, number_of_snps)

    def crossover(self, mate: Chromosome, rng: random.Random) -> None:
        """Swap a random run of SNPs and a random run of genotypes with ``mate``."""
        self._crossover(mate, rng)

    def mutate(self, mutation_rate: float, rng: random.Random, number_of_snps: int) -> None:
        """Replace each SNP and each genotype with probability ``mutation_rate``."""
        self._mutate(mutation_rate, rng, number_of_snps)

    def evaluate(
        self, case_data: Sequence[Sequence[int]], control_data: Sequence[Sequence[int]]
    ) -> float:
        """Return the fitness, calculating it only if the current one is stale."""
        return self._evaluate(case_data, control_data)

    def _count_matches(self, data_set: Sequence[Sequence[int]]) -> int:
        pattern = list(zip(self.snps, self.genotypes))
        return sum(
            all(individual[snp] == genotype for snp, genotype in pattern)
            for individual in data_set
        )

    def calculate_fitness(
        self, case_data: Sequence[Sequence[int]], control_data: Sequence[Sequence[int]]
    ) -> float:
        """Ratio of matching cases to matching controls, negated-inverted below 1."""
        total_case = self._count_matches(case_data)
        total_control = self._count_matches(control_data)
        fitness = _to_float32((total_case + 1.0) / (total_control + 1.0))
        if FLT_EPSILON < fitness < 1:
            fitness = -(_to_float32(1.0) / fitness)
        self.additional_fitness_data = [str(total_case), str(total_control)]
        self.fitness = fitness
        return fitness


class MooneyChromosome(_EvolvingChromosome):
    """Chromosome scored by a chi-square statistic over its genotype table."""

    _evolves_genotypes = False

    def build(self, rng: random.Random, number_of_snps: int) -> None:
        """Fill the chromosome with distinct random SNPs."""
        self._build(rng, number_of_snps)

    def fix(self, rng: random.Random, number_of_snps: int) -> None:
        """Replace repeated SNPs by random ones until all differ, then sort."""
        self._fix(rng, number_of_snps)

    def crossover(self, mate: Chromosome, rng: random.Random) -> None:
        """Swap a random run of SNPs with ``mate``."""
        self._crossover(mate, rng)

    def mutate(self, mutation_rate: float, rng: random.Random, number_of_snps: int) -> None:
        """Replace each SNP with probability ``mutation_rate``."""
        self._mutate(mutation_rate, rng, number_of_snps)

    def evaluate(
        self, case_data: Sequence[Sequence[int]], control_data: Sequence[Sequence[int]]
    ) -> float:
        """Return the fitness, calculating it only if the current one is stale."""
        return self._evaluate(case_data, control_data)

    def _entry(self, individual: Sequence[int]) -> int:
        entry = 0
        for snp in self.snps:
            entry = entry * NUMBER_OF_GENOTYPES + individual[snp]
        return entry

    def calculate_fitness(
        self, case_data: Sequence[Sequence[int]], control_data: Sequence[Sequence[int]]
    ) -> float:
        """Chi-square of case counts against control counts over all genotype cells."""
        if len(case_data) != len(control_data):
            raise ValueError("case and control data sets differ in size")
        table_size = NUMBER_OF_GENOTYPES ** len(self.snps)
        observed = [1] * table_size
        expected = [1] * table_size
        for case, control in zip(case_data, control_data):
            observed[self._entry(case)] += 1
            expected[self._entry(control)] += 1
        chi2 = sum((e - o) ** 2 / e for e, o in zip(expected, observed))
        self.fitness = chi2
        return chi2


def format_chromosome(chromosome: Chromosome, data: GenotypeData) -> str:
    """Render as ``[index-genotype]...;fitness;extra;...`` using input SNP indices."""
    cells = "".join(
        f"[{data.total_case[snp].index}-{genotype}]"
        for snp, genotype in zip(chromosome.snps, chromosome.genotypes)
    )
    extra = "".join(f"{item};" for item in chromosome.additional_fitness_data)
    return f"{cells};{chromosome.fitness:g};{extra}"