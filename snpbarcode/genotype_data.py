"""Case and control genotype data sets and the HapSample file loader."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

NUMBER_OF_GENOTYPES = 3
"""Number of possible genotypes: AA, Aa or aa."""

CASE_FILE_PREFIX = "case_genotypes"
CONTROL_FILE_PREFIX = "anticase_genotypes"

_DATA_FILE = re.compile(r".(dat|sln)$")


def _empty_events() -> list[int]:
    return [0] * NUMBER_OF_GENOTYPES


@dataclass(eq=False)
class SnpData:
    """Summary of one SNP: its name, position in the input and genotype counts."""

    name: str = ""
    index: int = 0
    events: list[int] = field(default_factory=_empty_events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnpData):
            return NotImplemented
        return self.name == other.name and self.events == other.events


def parse_snp_line(
    line: str, black_list: Iterable[str] = ()
) -> tuple[SnpData, list[int]] | None:
    """Parse one HapSample line into its SNP summary and per-individual genotypes.

    Returns None for an empty line. A black-listed SNP yields no genotypes.
    """
    tokens = line.split()
    if not tokens:
        return None
    snp = SnpData(name=tokens[1] if len(tokens) > 1 else "")
    if snp.name in set(black_list):
        return snp, []
    genotypes = []
    for token in tokens[4:]:
        genotype = int(token)
        if not 0 <= genotype < NUMBER_OF_GENOTYPES:
            raise ValueError(f"invalid genotype {token!r} for SNP {snp.name!r}")
        snp.events[genotype] += 1
        genotypes.append(genotype)
    return snp, genotypes


@dataclass
class GenotypeData:
    """Genotypes of every case and control individual, and per-SNP totals.

    ``case_data[i][j]`` is the genotype of case individual ``i`` at SNP ``j``.
    """

    case_data: list[list[int]] = field(default_factory=list)
    control_data: list[list[int]] = field(default_factory=list)
    total_case: list[SnpData] = field(default_factory=list)
    total_control: list[SnpData] = field(default_factory=list)

    def number_of_snps(self) -> int:
        """Number of SNPs held for each individual."""
        return len(self.case_data[0]) if self.case_data else 0

    def remove_snps(self, snps_to_remove: Sequence[int]) -> None:
        """Remove the given SNP positions, one after another in the given order."""
        for position in snps_to_remove:
            del self.total_case[position]
            del self.total_control[position]
        for individual in (*self.case_data, *self.control_data):
            for position in snps_to_remove:
                del individual[position]


def _append_column(data_set: list[list[int]], genotypes: Sequence[int]) -> None:
    for individual, genotype in enumerate(genotypes):
        if len(data_set) <= individual:
            data_set.append([])
        data_set[individual].append(genotype)


def _share(count: int, total: int) -> float:
    return count / total if total else 0.0


class HapSampleData(GenotypeData):
    """Data set read from a directory holding HapSample case and control files."""

    def __init__(
        self,
        directory: str | Path,
        homogeneous_ratio: float,
        ignore_genotype2: bool = False,
        black_list: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.directory = Path(directory)
        self.homogeneous_ratio = homogeneous_ratio
        self.ignore_genotype2 = ignore_genotype2
        self.black_list = frozenset(black_list)

    def _find_files(self) -> tuple[Path | None, Path | None]:
        case_file = control_file = None
        for entry in sorted(self.directory.iterdir()):
            if not entry.is_file() or not _DATA_FILE.search(entry.name):
                continue
            if entry.name.startswith(CASE_FILE_PREFIX):
                case_file = entry
            elif entry.name.startswith(CONTROL_FILE_PREFIX):
                control_file = entry
        return case_file, control_file

    def _should_remove(self, case: SnpData, control: SnpData) -> bool:
        if self.ignore_genotype2 and control.events[2] > case.events[2]:
            return True
        return any(
            _share(case.events[g], len(self.case_data)) > self.homogeneous_ratio
            and _share(control.events[g], len(self.control_data)) > self.homogeneous_ratio
            for g in range(NUMBER_OF_GENOTYPES)
        )

    def load(self) -> None:
        """Read the case and control files of the directory.

        SNPs that are too homogeneous in both groups, or (optionally) carry
        genotype 2 more often in controls than in cases, are dropped.
        """
        if not self.directory.exists():
            raise FileNotFoundError(f"Can't open directory: {self.directory}")
        case_file, control_file = self._find_files()
        if case_file is None or control_file is None:
            return

        with case_file.open() as cases, control_file.open() as controls:
            for snp_index, case_line in enumerate(cases, start=1):
                case_entry = parse_snp_line(case_line, self.black_list)
                if case_entry is None:
                    break
                control_entry = parse_snp_line(controls.readline(), self.black_list)
                if control_entry is None:
                    raise ValueError(
                        f"control file {control_file} has fewer SNPs than case file"
                    )
                case, case_genotypes = case_entry
                control, control_genotypes = control_entry
                if case.name in self.black_list:
                    continue
                case.index = control.index = snp_index
                _append_column(self.case_data, case_genotypes)
                _append_column(self.control_data, control_genotypes)

                if self._should_remove(case, control):
                    for individual in (*self.case_data, *self.control_data):
                        individual.pop()
                else:
                    self.total_case.append(case)
                    self.total_control.append(control)