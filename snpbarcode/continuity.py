"""Post-processing that looks for elite chromosomes carried over into higher orders."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from snpbarcode.chromosome import Chromosome, format_chromosome
from snpbarcode.genotype_data import GenotypeData

_BESTS_SHOWN = 30


class ContinuityAlg:
    """Keeps the distinct elite chromosomes of each order and links them across orders."""

    def __init__(self) -> None:
        self.number_of_fitness_calculations = 0
        self.best_chromosomes_per_run: list[list[Chromosome]] = []
        self.algorithm_results: list[list[tuple[Chromosome, Chromosome]]] = []

    def update(self, elitism: Sequence[Chromosome]) -> None:
        """Merge an elite group into the bests of its order, best first."""
        if not elitism:
            return
        runs = self.best_chromosomes_per_run
        if not runs or (runs[-1] and len(elitism[0]) > len(runs[-1][0])):
            runs.append([])
        bests = runs[-1]
        for chromosome in elitism:
            if chromosome not in bests:
                bests.append(chromosome.copy())
        bests.sort(key=lambda item: item.fitness)
        bests.reverse()

    def execute(self, data: GenotypeData, order: int) -> bool:
        """Find bests of the previous order whose every SNP and genotype is in the latest best.

        Returns True when there is only one order so far, or when any were found.
        """
        runs = self.best_chromosomes_per_run
        if len(runs) == 1:
            return True
        if not runs:
            return False
        self.algorithm_results.append([])
        current = self.algorithm_results[-1]
        if not runs[-1]:
            return False
        best = runs[-1][0]
        best_pairs = set(zip(best.snps, best.genotypes))
        for chromosome in runs[-2]:
            if all(pair in best_pairs for pair in zip(chromosome.snps, chromosome.genotypes)):
                current.append((chromosome, best))
        return bool(current)

    def _all_bests(self, data: GenotypeData) -> list[str]:
        lines = []
        for bests in self.best_chromosomes_per_run:
            if not bests:
                lines.append("No Bests for this order \n")
                continue
            lines.append(f"Number of Bests of order {len(bests[0])}: {len(bests)}\n")
            lines.append(
                "".join(format_chromosome(best, data) for best in bests[:_BESTS_SHOWN]) + "\n"
            )
        return lines

    def write_summary(self, data: GenotypeData, base_file_name: str | Path, order: int) -> Path:
        """Write ``<base>_<order>_Summary.txt`` with all bests and the links found."""
        summary_path = Path(f"{base_file_name}_{order}_Summary.txt")
        lines = [
            f"\nNumber of Fitness calculations: {Chromosome.fitness_calculations}\n",
            f"\nTotal Number of Fitness calculations: {self.number_of_fitness_calculations}\n",
        ]
        lines.extend(self._all_bests(data))

        current_order = order
        if not self.algorithm_results:
            lines.append(f"\n=========\nNo Best Results for order: {current_order}\n")
        for result in self.algorithm_results:
            if not result:
                current_order += 1
                lines.append(f"\n=========\nNo Best Results for order: {current_order}\n")
                continue
            current_order = len(result[0][1])
            lines.append(f"\n=========\nOrder: {current_order}\n")
            lines.extend(
                f"{format_chromosome(lower, data)} in {format_chromosome(higher, data)}\n"
                for lower, higher in result
            )
            lines.append("\n")
        summary_path.write_text("".join(lines))
        return summary_path