# snpbarcode

Building blocks for finding combinations of SNPs (a "barcode") whose
genotypes separate a case population from a control population with a
genetic algorithm, plus three small command-line utilities for preparing
and generating input data.

Only the Python standard library is needed (Python 3.10 or later).

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `snpbarcode.genotype_data`: genotype data sets. `GenotypeData` holds
  `case_data` and `control_data` (one list of genotypes 0, 1 or 2 per
  individual) and the per-SNP summaries `total_case` and `total_control`.
  Each `SnpData` records a SNP's name, its 1-based position in the input and
  the count of each genotype. `GenotypeData.remove_snps` drops SNP positions
  from every individual at once. `HapSampleData(directory, homogeneous_ratio,
  ignore_genotype2=False, black_list=())` reads the `case_genotypes*` and
  `anticase_genotypes*` files (`.dat` or `.sln`) of a directory with `load()`,
  leaving out SNPs that are too homogeneous in both groups and, if asked,
  SNPs carrying genotype 2 more often in controls than in cases.
  `parse_snp_line` parses a single line of such a file.
- `snpbarcode.chromosome`: candidate solutions. `Chromosome` holds SNP
  positions, one genotype per SNP (2 by default) and a cached fitness.
  `YangChromosome` scores a combination of SNPs and genotypes by the ratio of
  matching cases to matching controls (negated and inverted when below 1);
  `MooneyChromosome` scores a combination of SNPs by a chi-square statistic
  over its full genotype table. Both offer `build`, `fix`, `crossover`,
  `mutate`, `evaluate` (which recalculates only when stale) and
  `calculate_fitness`. `Chromosome.fitness_calculations` counts evaluations.
  `format_chromosome` renders a chromosome as `[index-genotype]...;fitness;`
  followed by any extra fitness data.
- `snpbarcode.config`: `GAConfig`, a dataclass of run settings, and the
  enumerations `GenotypeDataProvider`, `SelectionAlgorithm`,
  `PostProcessingAlgorithm` and `Algorithm`. Enumerated settings accept
  members, integer values or names; `selected_barcode` accepts a list or a
  comma separated string.
- `snpbarcode.clustering`: `ClusteringAlg` builds, per order, a histogram of
  the SNPs seen in elite groups (`update`), scores the top SNPs and their
  best genotype barcode (`execute`), writes `<base>_<order>_Summary.txt` and
  appends to `<base>__All.txt` (`write_summary`), and removes SNPs absent from
  the histogram from a data set (`update_genotype_data`).
- `snpbarcode.continuity`: `ContinuityAlg` keeps the distinct elite
  chromosomes of each order and finds those of the previous order contained
  in the latest best (`update`, `execute`, `write_summary`).
- `snpbarcode.genetic_algorithm`: helpers for a search run:
  `find_selected_barcode` (positions of named SNPs), `equal_elitism`
  (stagnation count), `count_matching`, `write_snp_names` (per-SNP genotype
  counts as CSV) and `analyse_data_set`, which compares a data set with the
  probabilities of a disease model file and writes the comparison as CSV.

## Commands

### `snpbarcode-fill-crohn`

Fills missing (`NA`) genotypes in a comma separated case/control table. The
first line is the header of SNP names; rows whose name starts with `CD` are
cases, the rest controls. Each gap is filled by a draw, without replacement,
from a pool matching the known genotype proportions of its SNP. The result is
written next to the input as `Filled_<input name>`.

```
snpbarcode-fill-crohn genotypes.csv
```

### `snpbarcode-model`

Generates a disease model: the probability of every genotype combination of
the given SNPs, with combinations carrying genotype 2 enriched by
`--rational-factor` and held above a floor set by `--nominal-min`,
`--nominal-max` and `--population-size`, then normalised to sum to one. The
file `Model_<length>.txt` is written into `--directory` (the current
directory by default) and holds the length, the SNP names, `0.001`, `AG`
and the probabilities.

```
snpbarcode-model --maf 0.2,0.3 --selected rs1,rs2 --nominal-min 1 --nominal-max 10 --population-size 1000 --rational-factor 2
```

### `snpbarcode-select-ceu`

Picks a random panel of SNP names from per-chromosome tables in `--input`
(default `input`; the sorted files are chromosomes 1, 2, ...). The barcode
SNPs given by `--barcode` and `--barcode-chromosomes` are always included,
and other picks are kept at least 500 positions from them. With
`--barcode-length N` the barcode is instead chosen at random (one SNP on each
of N chromosomes, with allele frequency between `--min-maf` and `--max-maf`)
and recorded in `SelectedSNP.txt`. The panel, an equal share from each
chromosome between `--start-chr` and `--end-chr`, is written to
`SNP_<count>.txt` in `--output-dir`.

```
snpbarcode-select-ceu --number-of-snps 1000 --barcode-length 3
```

## Using the library

```python
import random

from snpbarcode.chromosome import YangChromosome

case_data = [[2, 0, 1], [2, 1, 1], [0, 0, 2]]
control_data = [[0, 0, 1], [1, 1, 1], [0, 2, 2]]

rng = random.Random(1)
chromosome = YangChromosome([0, 0])
chromosome.build(rng, number_of_snps=3)
print(chromosome.evaluate(case_data, control_data))
```

## What is not included

The package provides the chromosomes, data loading, post-processing and
helper functions, but not the population, selection and generation loop
that drives a full search, nor a command that runs one. `GAConfig` lists
synthetic and Yang/Crohn data providers, but only the HapSample directory
format has a loader here.