import random

import pytest

from snpbarcode.chromosome import (
    Chromosome,
    MooneyChromosome,
    YangChromosome,
    format_chromosome,
)
from snpbarcode.genotype_data import GenotypeData, SnpData

CASE = [[2, 0, 1], [2, 1, 1], [0, 0, 2]]
CONTROL = [[2, 0, 0], [1, 1, 1], [0, 0, 2]]


def test_default_genotypes_are_two():
    chromosome = Chromosome([4, 7])
    assert chromosome.genotypes == [2, 2]
    assert len(chromosome) == 2


def test_genotype_count_must_match():
    with pytest.raises(ValueError):
        Chromosome([1, 2], [0])


def test_fitness_unset_raises():
    chromosome = Chromosome([1])
    assert not chromosome.fitness_valid
    with pytest.raises(RuntimeError):
        _ = chromosome.fitness


def test_fitness_setter_and_invalidation_on_change():
    chromosome = Chromosome([1, 2], fitness=3.0)
    assert chromosome.fitness == 3.0
    chromosome.genotypes[0] = 0
    with pytest.raises(RuntimeError):
        _ = chromosome.fitness


def test_equality_compares_snps_and_genotypes():
    assert Chromosome([1, 2], [0, 1]) == Chromosome([1, 2], [0, 1])
    assert not Chromosome([1, 2], [0, 1]) == Chromosome([1, 2], [0, 2])


def test_matches_snps_requires_default_genotypes():
    assert Chromosome([3, 5]).matches_snps([3, 5])
    assert not Chromosome([3, 5], [2, 1]).matches_snps([3, 5])
    assert not Chromosome([3, 5]).matches_snps([3, 6])


def test_ordering_by_fitness():
    items = [Chromosome([0], fitness=f) for f in (3.0, -1.0, 2.0)]
    assert [c.fitness for c in sorted(items)] == [-1.0, 2.0, 3.0]
    assert items[0] > items[2]


def test_copy_is_independent():
    original = YangChromosome([1, 2], [0, 1], fitness=5.0, additional_fitness_data=["a"])
    clone = original.copy()
    assert isinstance(clone, YangChromosome)
    assert clone == original and clone.fitness == 5.0
    clone.snps[0] = 9
    assert original.snps == [1, 2]
    assert original.fitness_valid


def test_sort_keeps_pairs_and_validity():
    chromosome = Chromosome([9, 1, 5], [0, 1, 2], fitness=1.0)
    chromosome.sort()
    assert chromosome.snps == [1, 5, 9]
    assert chromosome.genotypes == [1, 2, 0]
    assert chromosome.fitness == 1.0


def test_yang_fitness_more_cases():
    chromosome = YangChromosome([0], [2])
    assert chromosome.calculate_fitness(CASE, CONTROL) == 1.5
    assert chromosome.additional_fitness_data == ["2", "1"]


def test_yang_fitness_fewer_cases_is_negative():
    chromosome = YangChromosome([2], [0])
    assert chromosome.calculate_fitness(CASE, CONTROL) == -2.0


def test_evaluate_caches_result():
    chromosome = YangChromosome([0], [2])
    before = Chromosome.fitness_calculations
    first = chromosome.evaluate(CASE, CONTROL)
    second = chromosome.evaluate(CASE, CONTROL)
    assert first == second
    assert Chromosome.fitness_calculations == before + 1


def test_mooney_identical_sets_give_zero():
    chromosome = MooneyChromosome([0, 2])
    assert chromosome.calculate_fitness(CASE, CASE) == 0.0


def test_mooney_order_invariant():
    a = MooneyChromosome([0, 2]).calculate_fitness(CASE, CONTROL)
    b = MooneyChromosome([2, 0]).calculate_fitness(CASE, CONTROL)
    assert a == pytest.approx(b)
    assert a > 0


def test_mooney_size_mismatch():
    with pytest.raises(ValueError):
        MooneyChromosome([0]).calculate_fitness(CASE, CONTROL[:2])


def test_format_chromosome():
    data = GenotypeData(total_case=[SnpData("a", 3), SnpData("b", 8)])
    chromosome = Chromosome([1, 0], [2, 1], fitness=1.5, additional_fitness_data=["2", "1"])
    assert format_chromosome(chromosome, data) == "[8-2][3-1];1.5;2;1;"


@pytest.mark.parametrize("cls", [YangChromosome, MooneyChromosome])
def test_build_gives_distinct_sorted_snps(cls):
    rng = random.Random(7)
    chromosome = cls([0] * 4)
    chromosome.build(rng, 6)
    assert chromosome.snps == sorted(set(chromosome.snps))
    assert len(chromosome.snps) == 4
    assert all(0 <= s < 6 for s in chromosome.snps)
    assert all(0 <= g < 3 for g in chromosome.genotypes)


def test_mooney_build_keeps_genotypes():
    chromosome = MooneyChromosome([0] * 3)
    chromosome.build(random.Random(1), 10)
    assert chromosome.genotypes == [2, 2, 2]


def test_fix_removes_duplicates():
    chromosome = YangChromosome([3, 3, 3])
    chromosome.fix(random.Random(2), 5)
    assert len(set(chromosome.snps)) == 3
    assert chromosome.snps == sorted(chromosome.snps)


def test_fix_with_too_few_snps_raises():
    with pytest.raises(ValueError):
        YangChromosome([0, 0, 0]).fix(random.Random(0), 2)


@pytest.mark.parametrize("seed", range(5))
def test_crossover_swaps_positionwise(seed):
    a = YangChromosome([0, 1, 2, 3], [0, 0, 0, 0], fitness=1.0)
    b = YangChromosome([10, 11, 12, 13], [1, 1, 1, 1], fitness=1.0)
    a.crossover(b, random.Random(seed))
    for i in range(4):
        assert {a.snps[i], b.snps[i]} == {i, i + 10}
        assert {a.genotypes[i], b.genotypes[i]} == {0, 1}
    assert not a.fitness_valid and not b.fitness_valid


def test_mooney_crossover_leaves_genotypes():
    a = MooneyChromosome([0, 1, 2], [0, 0, 0])
    b = MooneyChromosome([5, 6, 7], [1, 1, 1])
    a.crossover(b, random.Random(3))
    assert a.genotypes == [0, 0, 0] and b.genotypes == [1, 1, 1]


def test_mutate_rate_zero_changes_nothing():
    chromosome = YangChromosome([1, 4], [0, 1], fitness=2.0)
    chromosome.mutate(0.0, random.Random(0), 10)
    assert chromosome.snps == [1, 4] and chromosome.genotypes == [0, 1]
    assert chromosome.fitness == 2.0


def test_mutate_rate_one_replaces_everything():
    chromosome = MooneyChromosome([1, 4], [0, 1], fitness=2.0)
    chromosome.mutate(1.0, random.Random(0), 1)
    assert chromosome.snps == [0, 0]
    assert chromosome.genotypes == [0, 1]
    assert not chromosome.fitness_valid