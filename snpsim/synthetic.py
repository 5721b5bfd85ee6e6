"""Synthetic case/control data with a planted multi-SNP genotype pattern."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from itertools import product
from pathlib import Path
from typing import Sequence

from snpsim.genotype_data import (
    CASE_FILE_PREFIX,
    CONTROL_FILE_PREFIX,
    NUMBER_OF_GENOTYPES,
    GenotypeDataset,
    SnpData,
    generate_genotype,
)

CASE_FILE_NAME = f"{CASE_FILE_PREFIX}.dat"
CONTROL_FILE_NAME = f"{CONTROL_FILE_PREFIX}.dat"
_LINE_PREFIX = "1\t{name}\t2222\t0.00000\t"


@dataclass(frozen=True)
class GeneratorConfig:
    """Parameters of the synthetic data generator.

    ``default_distribution`` gives genotype fractions for ordinary SNPs and
    ``case_distribution`` those used to plant the selected SNPs in cases.
    """

    population_size: int
    number_of_snps: int
    default_distribution: tuple[float, ...]
    case_distribution: tuple[float, ...]
    selected_snps: tuple[int, ...] = field(default_factory=tuple)
    directory_name: str = ""
    chromosome_length: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_distribution", tuple(self.default_distribution))
        object.__setattr__(self, "case_distribution", tuple(self.case_distribution))
        object.__setattr__(self, "selected_snps", tuple(int(s) for s in self.selected_snps))
        if self.population_size < 1:
            raise ValueError("The population size must be positive")
        if self.number_of_snps < 1:
            raise ValueError("At least one SNP is needed")
        if len(self.default_distribution) < 2:
            raise ValueError("The default distribution needs at least two fractions")
        if self.selected_snps and len(self.case_distribution) < NUMBER_OF_GENOTYPES:
            raise ValueError(
                f"The case distribution needs {NUMBER_OF_GENOTYPES} fractions")
        if any(not 0 <= snp < self.number_of_snps for snp in self.selected_snps):
            raise ValueError(f"Selected SNPs must be in 0..{self.number_of_snps - 1}")


def _events(distribution: Sequence[float], size: int) -> list[int]:
    first = int(distribution[0] * size + 0.5)
    second = int(distribution[1] * size + 0.5)
    third = size - first - second
    if third < 0 or first < 0 or second < 0:
        raise ValueError("The genotype distribution exceeds the population size")
    return [first, second, third]


def fill_selected(config: GeneratorConfig, case_data: list[bytearray]) -> int:
    """Write the joint genotypes of the selected SNPs into the case rows.

    Every combination of genotypes (highest first) is given to a share of the
    cases proportional to the product of its case fractions, filling rows from
    the first until the population is used up. Returns the rows filled.
    """
    selected = config.selected_snps
    if not selected:
        return 0
    size = config.population_size
    dist = config.case_distribution
    genotypes = range(NUMBER_OF_GENOTYPES - 1, -1, -1)
    head, last = selected[:-1], selected[-1]
    filled = 0
    for combination in product(genotypes, repeat=len(head)):
        weight = 1.0
        for g in combination:
            weight *= dist[g]
        for g in genotypes:
            count = int(size * weight * dist[g] + 0.5)
            for _ in range(count):
                if filled >= size:
                    break
                row = case_data[filled]
                for snp, value in zip(head, combination):
                    row[snp] = value
                row[last] = g
                filled += 1
    return filled


def generate(config: GeneratorConfig, rng: random.Random) -> GenotypeDataset:
    """Generate case and control genotypes for every SNP of ``config``.

    Ordinary SNPs follow the default distribution in both groups; the
    selected SNPs are then planted in the cases by :func:`fill_selected`.
    """
    size = config.population_size
    n_snps = config.number_of_snps
    dataset = GenotypeDataset(
        case_data=[bytearray(n_snps) for _ in range(size)],
        control_data=[bytearray(n_snps) for _ in range(size)],
        total_case=[SnpData(name=f"rs{i}") for i in range(n_snps)],
        total_control=[SnpData(name=f"rs{i}") for i in range(n_snps)],
    )
    events = _events(config.default_distribution, size)
    selected = set(config.selected_snps)
    for snp in range(n_snps):
        if snp in selected:
            continue
        case_allocated = bytearray(size)
        control_allocated = bytearray(size)
        for genotype in range(NUMBER_OF_GENOTYPES):
            barcode = [(snp, genotype)]
            generate_genotype(events[genotype], barcode, case_allocated,
                              dataset.case_data, dataset.total_case, rng)
            generate_genotype(events[genotype], barcode, control_allocated,
                              dataset.control_data, dataset.total_control, rng)
    fill_selected(config, dataset.case_data)
    return dataset


def _render(dataset: GenotypeDataset, rows: Sequence[bytearray]) -> str:
    lines = []
    for snp, info in enumerate(dataset.total_case):
        values = "\t".join(str(row[snp]) for row in rows)
        lines.append(_LINE_PREFIX.format(name=info.name) + values)
    return "\n".join(lines)


def write_genotype_files(dataset: GenotypeDataset, directory) -> tuple[Path, Path]:
    """Write the case and control files, one SNP per line; return their paths."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    case_path = directory / CASE_FILE_NAME
    control_path = directory / CONTROL_FILE_NAME
    case_path.write_text(_render(dataset, dataset.case_data))
    control_path.write_text(_render(dataset, dataset.control_data))
    return case_path, control_path