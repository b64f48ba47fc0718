"""Post-processing that ranks SNPs by how often they appear among elite chromosomes."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Sequence

from snpbarcode.chromosome import (
    DEFAULT_GENOTYPE,
    Chromosome,
    MooneyChromosome,
    YangChromosome,
    format_chromosome,
)
from snpbarcode.config import Algorithm, PostProcessingAlgorithm
from snpbarcode.genotype_data import NUMBER_OF_GENOTYPES, GenotypeData

_log = logging.getLogger(__name__)


def _chromosome_class(ga_algorithm: Algorithm) -> type[YangChromosome] | type[MooneyChromosome]:
    return MooneyChromosome if ga_algorithm == Algorithm.MOONEY else YangChromosome


class ClusteringAlg:
    """Builds a per-order histogram of the SNPs found in the elite groups.

    Each histogram entry is a one-SNP chromosome whose fitness holds its score:
    the summed fitness, a position bonus, or a plain count, by ``algorithm``.
    """

    def __init__(
        self,
        algorithm: PostProcessingAlgorithm,
        ga_algorithm: Algorithm = Algorithm.YANG,
        halt_criteria: int = 0,
    ) -> None:
        self.algorithm = algorithm
        self.ga_algorithm = ga_algorithm
        self.halt_criteria = halt_criteria
        self.number_of_fitness_calculations = 0
        self.best_snps_per_run: list[list[Chromosome]] = []
        self.best_chromosome: Chromosome | None = None
        self.best_chromosome_per_run: list[tuple[str, float]] = []
        self.best_barcode_per_run: list[tuple[str, float]] = []
        self.algorithm_results: list[list[tuple[Chromosome, int]]] = []
        self.current_order: int | None = None

    def update(self, elitism: Sequence[Chromosome]) -> None:
        """Add the SNPs of an elite group to the histogram of its order."""
        if not elitism:
            return
        leader = elitism[0]
        if self.current_order is None or len(leader) != self.current_order:
            self.best_snps_per_run.append([])
            self.best_chromosome = leader.copy()
            self.current_order = len(leader)
        assert self.best_chromosome is not None
        if leader.fitness > self.best_chromosome.fitness:
            self.best_chromosome = leader.copy()

        histogram = self.best_snps_per_run[-1]
        for chromosome in elitism:
            for position, (snp, genotype) in enumerate(
                zip(chromosome.snps, chromosome.genotypes)
            ):
                entry = next((item for item in histogram if item.snps[0] == snp), None)
                if entry is None:
                    entry = Chromosome([snp], [genotype], 0.0)
                    histogram.append(entry)
                if self.algorithm == PostProcessingAlgorithm.CLUSTERING_FITNESS:
                    entry.fitness = entry.fitness + chromosome.fitness
                elif self.algorithm == PostProcessingAlgorithm.CLUSTERING_POSITION:
                    entry.fitness = entry.fitness + (len(elitism) - position)
                else:
                    entry.fitness = entry.fitness + 1

        histogram.sort(key=lambda item: item.fitness)
        histogram.reverse()

    def _best_barcode(self, base: Chromosome, data: GenotypeData) -> Chromosome:
        best: Chromosome | None = None
        for genotypes in itertools.product(range(NUMBER_OF_GENOTYPES), repeat=len(base)):
            candidate = base.copy()
            candidate.genotypes = list(genotypes)
            fitness = candidate.evaluate(data.case_data, data.control_data)
            if best is None or fitness > best.fitness:
                best = candidate
        assert best is not None
        return best

    def execute(self, data: GenotypeData, order: int) -> bool:
        """Score the top SNPs of the latest histogram; False when the search should stop."""
        self.algorithm_results.append([])
        current = self.algorithm_results[-1]
        if not self.best_snps_per_run:
            return False
        bests = self.best_snps_per_run[-1]

        if len(self.algorithm_results) == 1:
            chosen = list(bests)
            if not chosen:
                return False
        else:
            if len(bests) < order:
                return False
            chosen = bests[:order]
        for entry in chosen:
            current.append((entry, data.total_case[entry.snps[0]].index))
        if len(chosen) < order or self.best_chromosome is None:
            return False

        self.best_chromosome_per_run.append(
            (format_chromosome(self.best_chromosome, data), self.best_chromosome.fitness)
        )

        kind = _chromosome_class(self.ga_algorithm)
        best_snps = kind([entry.snps[0] for entry in chosen[:order]], [DEFAULT_GENOTYPE] * order)
        best_fitness = best_snps.evaluate(data.case_data, data.control_data)
        text = f"Best SNPs: {format_chromosome(best_snps, data)}\n"
        barcode = self._best_barcode(best_snps, data)
        text += f"Best Barcode of of Best SNPs: {format_chromosome(barcode, data)}\n"
        self.best_barcode_per_run.append((text, best_fitness))

        barcodes = self.best_barcode_per_run
        runs = self.best_chromosome_per_run
        if len(barcodes) > self.halt_criteria and len(barcodes) >= 3 and len(runs) >= 3:
            if (
                barcodes[-1][1] < barcodes[-2][1] < barcodes[-3][1]
                and runs[-1][1] < runs[-2][1] < runs[-3][1]
            ):
                _log.info(
                    "Execution is stopped: best barcodes %s, %s, %s; best chromosomes %s, %s, %s",
                    barcodes[-1][1], barcodes[-2][1], barcodes[-3][1],
                    runs[-1][1], runs[-2][1], runs[-3][1],
                )
                return False
        return True

    def write_summary(self, data: GenotypeData, base_file_name: str | Path, order: int) -> Path:
        """Write ``<base>_<order>_Summary.txt`` and append to ``<base>__All.txt``."""
        base = str(base_file_name)
        summary_path = Path(f"{base}_{order}_Summary.txt")
        bests = self.best_snps_per_run[-1] if self.best_snps_per_run else []

        lines = [
            f"\nNumber of Fitness calculations: {Chromosome.fitness_calculations}\n",
            f"Total Number of Fitness calculations: {self.number_of_fitness_calculations}\n\n",
            f"(Total SNPs - {len(data.total_case)})\n\n",
        ]
        if not bests:
            lines.append(f"No best results for order {order}\n")
        else:
            lines.append(f"Number of Bests of order {order}: {len(bests)}\n")
            lines.append("".join(f"{format_chromosome(best, data)}," for best in bests) + "\n")

        length = 2 if len(self.algorithm_results) > 1 else order
        for run, result in enumerate(self.algorithm_results):
            lines.append(f"\n=========\nBest Length: {length}\n")
            lines.extend(f"{index}-{entry.fitness:g}\n" for entry, index in result)
            if run < len(self.best_chromosome_per_run):
                best_text = self.best_chromosome_per_run[run][0]
                lines.append(f"Best Chromosome of this Run:{best_text}\n")
                _log.info("Best Chromosome of this Run:%s", best_text)
            if run < len(self.best_barcode_per_run):
                barcode_text = self.best_barcode_per_run[run][0]
                lines.append(f"{barcode_text}\n")
                _log.info("%s", barcode_text)
            length += 1
        summary_path.write_text("".join(lines))

        ordered = dict(
            sorted((data.total_case[best.snps[0]].index, best.fitness) for best in bests)
        )
        with open(f"{base}__All.txt", "a") as all_file:
            all_file.write(f"\n==========\nOrder:{order}\t{len(ordered)}\n")
            all_file.writelines(f"{index}\t{fitness:g}\n" for index, fitness in ordered.items())
        return summary_path

    def update_genotype_data(self, data: GenotypeData) -> list[int]:
        """Drop every SNP absent from the latest histogram; return the removed positions."""
        bests = self.best_snps_per_run[-1] if self.best_snps_per_run else []
        kept = {best.snps[0] for best in bests}
        to_remove = [
            position for position in reversed(range(len(data.total_case))) if position not in kept
        ]
        _log.info(
            "Removed SNPs: %s", ",".join(str(data.total_case[p].index) for p in to_remove)
        )
        data.remove_snps(to_remove)
        return to_remove