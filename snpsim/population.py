"""Sizing and rate parameters of a genetic-algorithm population."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GAConfig:
    """Configurable parameters of the genetic algorithm."""

    population_size: int
    crossover_rate: float = 0.0
    mutation_rate: float = 0.0
    trap_ratio: float = 0.0
    num_of_iterations: int = 0
    vibration_rate: float = 0.0
    elitism_rate: float = 0.0


@dataclass(frozen=True)
class PopulationParameters:
    """Population size and the per-generation counts derived from the rates."""

    size: int
    crossover_count: int
    crossover_range: int
    mutation_count: int
    mutation_range: int
    max_trapped_iterations: int
    vibrated_elements: int
    elitism_size: int


def _count(rate: float, scale: float) -> int:
    """Round ``rate * scale``, with at least one unless the rate is zero."""
    if rate == 0:
        return 0
    return max(int(rate * scale + 0.5), 1)


def elitism_group_size(elitism_rate: float, size: int) -> int:
    """Number of best chromosomes carried over: even and at least two."""
    count = int(elitism_rate * size + 0.5)
    count = count // 2 * 2
    return max(count, 2)


def population_parameters(config: GAConfig, number_of_snps: int,
                          chromosome_length: int,
                          number_of_genotypes: int) -> PopulationParameters:
    """Derive the population size and operator counts for a data set."""
    if number_of_snps < 1:
        raise ValueError("At least one SNP is needed")
    if chromosome_length < 1:
        raise ValueError("The chromosome length must be positive")

    size = number_of_snps // chromosome_length
    size *= number_of_genotypes
    size = size // 2 * 2
    size = min(size, config.population_size)
    size = max(size, min(100, number_of_snps // 2))
    if size < 1:
        raise ValueError("The population would be empty")

    genes = size * chromosome_length * 2
    return PopulationParameters(
        size=size,
        crossover_count=_count(config.crossover_rate, size),
        crossover_range=size,
        mutation_count=_count(config.mutation_rate, genes),
        mutation_range=genes,
        max_trapped_iterations=_count(config.trap_ratio, config.num_of_iterations),
        vibrated_elements=_count(config.vibration_rate, size),
        elitism_size=elitism_group_size(config.elitism_rate, size),
    )