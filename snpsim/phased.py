"""Reading phased haplotype data and computing allele frequencies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from snpsim.config import X_CHROMOSOME, ControlConfig

MAX_SNPS = 100000

_SEPARATORS = re.compile(r"[ \t]+")
_INT = re.compile(r"[+-]?\d+")


class DataError(Exception):
    """Phased input data is missing or inconsistent with the configuration."""


@dataclass
class ChromosomeData:
    """Phased haplotypes of one chromosome and the frequency of allele 0 per SNP."""

    chromosome: int
    haplotypes: list[bytearray]
    frequencies: list[float]

    @property
    def n_markers(self) -> int:
        return len(self.frequencies)

    @property
    def n_haplotypes(self) -> int:
        return len(self.haplotypes)

    @property
    def is_x(self) -> bool:
        return self.chromosome == X_CHROMOSOME


def _allele(token: str) -> int:
    match = _INT.match(token)
    return 1 if match and int(match.group()) != 0 else 0


def read_phased_file(path, n_hap: int) -> list[bytearray]:
    """Read ``n_hap`` phased chromosomes, one per line, alleles 0 or 1."""
    try:
        handle = open(path)
    except OSError as exc:
        raise DataError(f"Chr file: {path} cannot be opened!") from exc
    haplotypes: list[bytearray] = []
    with handle:
        for line_no in range(1, n_hap + 1):
            line = handle.readline().rstrip("\r\n")
            alleles = bytearray(_allele(t) for t in _SEPARATORS.split(line) if t)
            if haplotypes and len(alleles) < len(haplotypes[0]):
                raise DataError(
                    f"{path}: line {line_no} has {len(alleles)} alleles, "
                    f"expected {len(haplotypes[0])}")
            haplotypes.append(alleles)
    return haplotypes


def allele_frequencies(haplotypes: Sequence[Sequence[int]]) -> list[float]:
    """Frequency of allele 0 at each SNP of the first haplotype's length."""
    if not haplotypes:
        return []
    width = len(haplotypes[0])
    reciprocal = 1 / len(haplotypes)
    columns = zip(*(list(h[:width]) for h in haplotypes))
    return [column.count(0) * reciprocal for column in columns]


def load_phased_data(config: ControlConfig,
                     order: Sequence[int]) -> list[Optional[ChromosomeData]]:
    """Load every chromosome needed, aligned with ``order``; skipped ones are None."""
    half = config.half_window
    result: list[Optional[ChromosomeData]] = []
    for index, chromosome in enumerate(order):
        if config.regional and index >= config.n_loci:
            result.append(None)
            continue
        n_hap = config.n_chrom if chromosome < X_CHROMOSOME else config.n_chrom_x
        path = f"{config.data_prefix}{chromosome}{config.data_suffix}"
        haplotypes = read_phased_file(path, n_hap)
        n_markers = len(haplotypes[0]) if haplotypes else 0

        if index < config.n_loci:
            locus = config.loci[index]
            if locus.position > n_markers - half:
                raise DataError(
                    f"Chromosome {chromosome} has {n_markers} SNPs.  Its disease locus "
                    f"must be <= {n_markers}-(WINDOW_SIZE-1)/2")
            if config.regional and locus.end > n_markers:
                raise DataError(
                    f"Chromosome {chromosome} end position {locus.end} is > its total "
                    f"number of {n_markers} SNPs")
        if n_markers > MAX_SNPS:
            raise DataError(
                f"Chromosome {chromosome} has {n_markers} SNPs, exceeding the maximum {MAX_SNPS}.")

        result.append(ChromosomeData(chromosome, haplotypes, allele_frequencies(haplotypes)))
    return result