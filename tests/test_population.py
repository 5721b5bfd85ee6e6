import pytest

from snpsim.population import GAConfig, elitism_group_size, population_parameters


def test_elitism_minimum_two():
    assert elitism_group_size(0.0, 100) == 2
    assert elitism_group_size(0.001, 50) == 2


@pytest.mark.parametrize("rate", [0.0, 0.03, 0.05, 0.1, 0.27, 0.5, 1.0])
@pytest.mark.parametrize("size", [10, 37, 100, 1001])
def test_elitism_even_and_bounded(rate, size):
    count = elitism_group_size(rate, size)
    assert count % 2 == 0
    assert count >= 2
    assert count <= max(2, int(rate * size + 0.5))


def test_elitism_rounds_half_up_then_to_even():
    assert elitism_group_size(0.1, 100) == 10
    assert elitism_group_size(0.05, 100) == 4


def test_size_capped_by_configuration():
    config = GAConfig(population_size=200)
    params = population_parameters(config, 10000, 2, 3)
    assert params.size == 200


def test_size_floor_from_snp_count():
    config = GAConfig(population_size=10)
    params = population_parameters(config, 60, 2, 3)
    assert params.size == 60 // 2


def test_size_floor_at_most_hundred():
    config = GAConfig(population_size=10)
    params = population_parameters(config, 5000, 1000, 1)
    assert params.size == 100


def test_zero_rates_give_zero_counts():
    config = GAConfig(population_size=500)
    params = population_parameters(config, 1000, 2, 3)
    assert params.crossover_count == 0
    assert params.mutation_count == 0
    assert params.max_trapped_iterations == 0
    assert params.vibrated_elements == 0
    assert params.elitism_size == 2


def test_tiny_rates_give_at_least_one():
    config = GAConfig(population_size=500, crossover_rate=1e-9, mutation_rate=1e-12,
                      trap_ratio=1e-9, num_of_iterations=10, vibration_rate=1e-9)
    params = population_parameters(config, 1000, 2, 3)
    assert params.crossover_count == 1
    assert params.mutation_count == 1
    assert params.max_trapped_iterations == 1
    assert params.vibrated_elements == 1


def test_ranges_follow_size():
    config = GAConfig(population_size=300, crossover_rate=0.5, mutation_rate=0.01)
    params = population_parameters(config, 1000, 2, 3)
    assert params.crossover_range == params.size
    assert params.mutation_range == params.size * 2 * 2
    assert params.crossover_count <= params.size
    assert params.mutation_count <= params.mutation_range


@pytest.mark.parametrize("snps,length", [(0, 2), (100, 0)])
def test_invalid_inputs(snps, length):
    with pytest.raises(ValueError):
        population_parameters(GAConfig(population_size=100), snps, length, 3)