"""Fill missing ("NA") genotypes of a case/control table in proportion to the known ones."""

from __future__ import annotations

import argparse
import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

NUMBER_OF_GENOTYPES = 3
MISSING = "NA"
CASE_PREFIX = "CD"

_SEPARATORS = re.compile(r"[, ]")


@dataclass
class SnpCounts:
    """Genotype counts of one SNP column, and the values left to fill its gaps."""

    name: str
    events: list[int] = field(default_factory=lambda: [0] * NUMBER_OF_GENOTYPES)
    number_of_na: int = 0
    filler: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.number_of_na + sum(self.events)


def _tokens(line: str) -> list[str]:
    return [token for token in _SEPARATORS.split(line) if token]


def _is_case(tokens: Sequence[str]) -> bool:
    return tokens[0][:2] == CASE_PREFIX


def _genotype(token: str) -> int:
    value = int(token)
    if not 0 <= value < NUMBER_OF_GENOTYPES:
        raise ValueError(f"invalid genotype {token!r}")
    return value


def _check_width(tokens: Sequence[str], columns: Sequence[SnpCounts]) -> None:
    if len(tokens) - 1 > len(columns):
        raise ValueError(f"row {tokens[0]!r} has more values than the header")


def load_counts(lines: Iterable[str]) -> tuple[list[SnpCounts], list[SnpCounts]]:
    """Count genotypes and gaps per SNP, separately for cases and controls.

    Reading stops at the first empty line, or once controls outnumber cases.
    """
    case_data: list[SnpCounts] = []
    control_data: list[SnpCounts] = []
    header_seen = False
    cases = controls = 0
    for line in lines:
        tokens = _tokens(line)
        if not tokens:
            break
        if not header_seen:
            case_data = [SnpCounts(name) for name in tokens[1:]]
            control_data = [SnpCounts(name) for name in tokens[1:]]
            header_seen = True
            continue
        if _is_case(tokens):
            target = case_data
            cases += 1
        else:
            target = control_data
            controls += 1
        if controls > cases:
            break
        _check_width(tokens, target)
        for snp, value in zip(target, tokens[1:]):
            if value == MISSING:
                snp.number_of_na += 1
            else:
                snp.events[_genotype(value)] += 1
    return case_data, control_data


def validate_counts(data: Iterable[SnpCounts], number_of_elements: int) -> None:
    """Raise ValueError unless every SNP accounts for exactly ``number_of_elements`` rows."""
    for position, snp in enumerate(data):
        if snp.total != number_of_elements:
            raise ValueError(f"Illegal number of events for SNP: {position}")


def create_fillers(data: Iterable[SnpCounts], number_of_elements: int) -> None:
    """Give each SNP with gaps a pool of genotypes matching its known distribution."""
    for snp in data:
        if snp.number_of_na <= 0:
            continue
        known = number_of_elements - snp.number_of_na
        if known <= 0:
            raise ValueError(f"SNP {snp.name!r} has no known genotypes")
        zeros = int(snp.number_of_na * float(snp.events[0]) / known + 0.5)
        ones = int(snp.number_of_na * float(snp.events[1]) / known + 0.5)
        twos = max(0, snp.number_of_na - (zeros + ones))
        snp.filler.extend([0] * zeros + [1] * ones + [2] * twos)


def fill_lines(
    lines: Iterable[str],
    case_data: Sequence[SnpCounts],
    control_data: Sequence[SnpCounts],
    number_of_elements: int,
    rng: random.Random,
) -> list[str]:
    """Return the header and ``2 * number_of_elements`` rows with every gap filled.

    Each gap takes a value drawn at random, without replacement, from its SNP's pool.
    """
    rows = iter(lines)
    header = next(rows, None)
    if header is None:
        raise ValueError("input is empty")
    output = [header]
    for _ in range(2 * number_of_elements):
        line = next(rows, None)
        if line is None:
            raise ValueError("input ended before all rows were filled")
        tokens = _tokens(line)
        if not tokens:
            raise ValueError("empty data row")
        target = case_data if _is_case(tokens) else control_data
        _check_width(tokens, target)
        filled = [tokens[0]]
        for snp, value in zip(target, tokens[1:]):
            if value == MISSING:
                if not snp.filler:
                    raise ValueError(f"no filler left for SNP {snp.name!r}")
                value = str(snp.filler.pop(rng.randrange(len(snp.filler))))
            filled.append(value)
        output.append(",".join(filled))
    return output


def main(argv: Sequence[str] | None = None) -> int:
    """Fill the gaps of a table and write it next to the input as ``Filled_<name>``."""
    parser = argparse.ArgumentParser(
        prog="crohn-filler",
        description="Fill missing genotypes of a case/control table.",
    )
    parser.add_argument("input", type=Path, help="comma separated genotype table")
    args = parser.parse_args(argv)

    try:
        lines = args.input.read_text().splitlines()
    except OSError as exc:
        print(f"Failed to read input file: {exc}")
        return 1

    case_data, control_data = load_counts(lines)
    if not case_data:
        print("Input holds no SNP columns")
        return 1
    number_of_cases = case_data[0].total

    try:
        validate_counts(case_data, number_of_cases)
        validate_counts(control_data, number_of_cases)
    except ValueError as exc:
        print(exc)
    else:
        try:
            create_fillers(case_data, number_of_cases)
            create_fillers(control_data, number_of_cases)
        except ValueError as exc:
            print(exc)

    try:
        filled = fill_lines(lines, case_data, control_data, number_of_cases, random.Random())
    except ValueError as exc:
        print(f"Error while trying to save data: {exc}")
        return 1

    output = args.input.with_name("Filled_" + args.input.name)
    try:
        output.write_text("\n".join(filled) + "\n")
    except OSError as exc:
        print(f"Error while trying to save data: {exc}")
        return 1
    print("Data was successfully filled")
    return 0