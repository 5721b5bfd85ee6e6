"""Allelic association chi-squared statistics for simulated data."""

from __future__ import annotations

from typing import Optional, Sequence

from snpsim.config import X_CHROMOSOME


def allelic_chisq(chromosome: int, haplotypes: Sequence[Sequence[int]],
                  n_case_f: int, n_case_m: int,
                  n_cont_f: int, n_cont_m: int) -> list[float]:
    """Chi-squared (1 df) allelic test statistic for each SNP of one chromosome.

    Haplotypes are ordered per subject (two each): case females, case males,
    control females, control males. On the X chromosome a male's second
    haplotype is not counted.
    """
    is_x = chromosome == X_CHROMOSOME
    case_end = n_case_f + n_case_m
    female_cont_end = case_end + n_cont_f
    total = female_cont_end + n_cont_m
    case_alleles = 2 * n_case_f + n_case_m if is_x else 2 * case_end
    cont_alleles = 2 * n_cont_f + n_cont_m if is_x else 2 * (n_cont_f + n_cont_m)
    if len(haplotypes) < 2 * total:
        raise ValueError(f"Expected {2 * total} haplotypes, got {len(haplotypes)}")
    n_markers = len(haplotypes[0]) if haplotypes else 0

    def counted(person: int, female_end: int) -> list[Sequence[int]]:
        first, second = haplotypes[2 * person], haplotypes[2 * person + 1]
        if not is_x or person < female_end:
            return [first, second]
        return [first]

    case_haps = [h for person in range(case_end) for h in counted(person, n_case_f)]
    cont_haps = [h for person in range(case_end, total)
                 for h in counted(person, female_cont_end)]

    result: list[float] = []
    for j in range(n_markers):
        n1 = sum(1 for h in case_haps if h[j] == 1)
        m1 = sum(1 for h in cont_haps if h[j] == 1)
        n0 = case_alleles - n1
        m0 = cont_alleles - m1
        diff = n0 * m1 - n1 * m0
        numerator = 1.0 * (case_alleles + cont_alleles) * diff * diff
        denominator = 1.0 * case_alleles * cont_alleles * (n0 + m0) * (n1 + m1)
        result.append(0.0 if abs(denominator) < 1e-8 else numerator / denominator)
    return result


def genome_chisq(order: Sequence[int],
                 simulated: Sequence[Optional[Sequence[Sequence[int]]]],
                 n_case_f: int, n_case_m: int,
                 n_cont_f: int, n_cont_m: int) -> list[float]:
    """Statistics for all simulated chromosomes, concatenated in ``order``."""
    result: list[float] = []
    for chromosome, haplotypes in zip(order, simulated):
        if haplotypes is None:
            continue
        result.extend(allelic_chisq(chromosome, haplotypes,
                                    n_case_f, n_case_m, n_cont_f, n_cont_m))
    return result