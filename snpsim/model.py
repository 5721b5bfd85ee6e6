"""Logit-penetrance disease model fitted to a prevalence and genotype risk ratios."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import accumulate
from typing import Optional, Sequence

from snpsim.config import X_CHROMOSOME, ControlConfig, DiseaseLocus, Interaction
from snpsim.phased import ChromosomeData

log = logging.getLogger(__name__)

_MAX_BISECTIONS = 5000


def _logistic(x: float) -> float:
    """1 / (1 + exp(-x)), without overflowing for large |x|."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _log(x: float) -> float:
    return math.log(x) if x > 0 else -math.inf


def index_to_genotypes(index: int, n_loci: int) -> list[int]:
    """Split a multi-locus genotype index into per-locus genotypes 0, 1 or 2."""
    if not 0 <= index < 3 ** n_loci:
        raise ValueError(f"Genotype index {index} out of range for {n_loci} loci")
    genotypes = []
    for _ in range(n_loci):
        index, digit = divmod(index, 3)
        genotypes.append(digit)
    return genotypes


def genotype_frequency(g: int, p: float) -> float:
    """Hardy-Weinberg genotype frequency on an autosome."""
    if g == 0:
        return (1 - p) * (1 - p)
    if g == 1:
        return 2 * p * (1 - p)
    return p * p


def genotype_frequency_x(g: int, p: float) -> float:
    """Genotype frequency on the X chromosome, averaged over both sexes."""
    if g == 0:
        return 0.5 * (1 - p) * (2 - p)
    if g == 1:
        return p * (1 - p)
    return 0.5 * p * (1 + p)


def genotype_frequency_x_male(g: int, p: float) -> float:
    """Genotype frequency on the X chromosome in males (hemizygous)."""
    if g == 0:
        return 1 - p
    if g == 1:
        return 0.0
    return p


def prevalence(beta0: float, prob: Sequence[float], summ: Sequence[float]) -> float:
    """Disease prevalence implied by an intercept, genotype frequencies and effects."""
    return sum(q * _logistic(beta0 + s) for q, s in zip(prob, summ))


@dataclass(frozen=True)
class DiseaseModel:
    """A fitted disease model and the genotype distributions it implies."""

    beta0: float
    beta1: tuple[float, ...]
    beta2: tuple[float, ...]
    loci: tuple[DiseaseLocus, ...]
    chromosomes: tuple[int, ...]
    n_markers: tuple[int, ...]
    locus_frequencies: tuple[float, ...]
    interactions: tuple[Interaction, ...]
    population_prob: tuple[float, ...]
    summ: tuple[float, ...]
    cum_case_f: tuple[float, ...]
    cum_case_m: tuple[float, ...]
    cum_cont_f: tuple[float, ...]
    cum_cont_m: tuple[float, ...]

    @property
    def n_loci(self) -> int:
        return len(self.loci)

    def report(self) -> str:
        """Human-readable summary of the model coefficients."""
        lines = [
            "Disease model:",
            f"beta0 = {self.beta0:9.4f}",
            "Locus  chr   #SNPs  DLpos  DV  DVFreq   GRR     GRR2    beta1    beta2",
        ]
        rows = zip(self.loci, self.chromosomes, self.n_markers,
                   self.locus_frequencies, self.beta1, self.beta2)
        for number, (locus, chrom, n_markers, freq, b1, b2) in enumerate(rows, 1):
            dv_freq = freq if locus.variant else 1 - freq
            lines.append(
                f"   {number:2d}   {chrom:2d}  {n_markers:6d} {locus.position:6d}   "
                f"{locus.variant:1d}  {dv_freq:6.4f}  {locus.grr:6.3f}  {locus.grr2:6.3f}   "
                f"{b1:6.4f}  {b2:6.4f}")
        if self.interactions:
            lines.append("Interaction terms gamma_ij:")
            lines.append("Pair  DL1  DL2  gamma11  gamma12  gamma21  gamma22")
            for number, pair in enumerate(self.interactions, 1):
                e11, e12, e21, e22 = (_log(e) for e in pair.effects)
                lines.append(
                    f"{number:3d}    {pair.first:2d}   {pair.second:2d} {e11:6.3f}   "
                    f"{e12:6.3f}   {e21:6.3f}   {e22:6.3f}")
        return "\n".join(lines) + "\n"


def _risk_coefficient(expai: float, ratio: float, number: int) -> float:
    try:
        return -math.log(((expai + 1) / ratio - 1) / expai)
    except (ValueError, ZeroDivisionError) as exc:
        raise ValueError(
            f"Cannot fit a logit coefficient for disease locus {number}") from exc


def _risk_homozygote(locus: DiseaseLocus) -> int:
    return 2 if locus.variant == 1 else 0


def _effect_sum(genotypes: Sequence[int], loci: Sequence[DiseaseLocus],
                beta1: Sequence[float], beta2: Sequence[float],
                interactions: Sequence[Interaction]) -> float:
    total = 0.0
    for g, locus, b1, b2 in zip(genotypes, loci, beta1, beta2):
        if g == 1:
            total += b1
        if g == _risk_homozygote(locus):
            total += b2
    for pair in interactions:
        a, b = pair.first - 1, pair.second - 1
        ga, gb = genotypes[a], genotypes[b]
        hom_a, hom_b = _risk_homozygote(loci[a]), _risk_homozygote(loci[b])
        e11, e12, e21, e22 = (_log(e) for e in pair.effects)
        if ga == 1 and gb == 1:
            total += e11
        if ga == 1 and gb == hom_b:
            total += e12
        if ga == hom_a and gb == 1:
            total += e21
        if ga == hom_a and gb == hom_b:
            total += e22
    return total


def _fit_intercept(target: float, prob: Sequence[float], summ: Sequence[float]) -> float:
    high = 100.0
    while prevalence(high, prob, summ) < target:
        high *= 2
        if not math.isfinite(high):
            raise ValueError("The prevalence cannot be reached by this model.")
    low = -10000.0
    while prevalence(low, prob, summ) > target:
        low *= 2
        if not math.isfinite(low):
            raise ValueError("The prevalence cannot be reached by this model.")
    for _ in range(_MAX_BISECTIONS):
        mid = (high + low) * 0.5
        current = prevalence(mid, prob, summ)
        if current > target:
            high = mid
        else:
            low = mid
        if abs(current / target - 1) <= 0.001:
            return mid
    raise ValueError("The intercept search did not converge.")


def _conditional(prob: Sequence[float], summ: Sequence[float],
                 beta0: float) -> tuple[tuple[float, ...], tuple[float, ...]]:
    prev = prevalence(beta0, prob, summ)
    case = accumulate(q * _logistic(beta0 + s) / prev for q, s in zip(prob, summ))
    control = accumulate(q * _logistic(-(beta0 + s)) / (1 - prev) for q, s in zip(prob, summ))
    return tuple(case), tuple(control)


def build_model(config: ControlConfig,
                chromosomes: Sequence[Optional[ChromosomeData]],
                order: Sequence[int]) -> DiseaseModel:
    """Fit the logit penetrance model to the configured prevalence and risk ratios."""
    if config.n_loci == 0:
        raise ValueError("A disease model needs at least one disease locus.")
    log.info("Constructing disease models ...")

    freqs: list[float] = []
    n_markers: list[int] = []
    beta1: list[float] = []
    beta2: list[float] = []
    for index, locus in enumerate(config.loci):
        data = chromosomes[index]
        if data is None:
            raise ValueError(f"No data for disease chromosome {order[index]}")
        freq = data.frequencies[locus.position - 1]
        freqs.append(freq)
        n_markers.append(data.n_markers)
        pi = freq if locus.variant == 1 else 1 - freq
        if order[index] < X_CHROMOSOME:
            expai = ((1 - pi) * (1 - pi) + locus.grr * 2 * pi * (1 - pi)
                     + locus.grr2 * pi * pi) / config.prevalence - 1
        else:
            expai = (0.5 * (1 - pi) * (2 - pi) + locus.grr * pi * (1 - pi)
                     + 0.5 * locus.grr2 * pi * (1 + pi)) / config.prevalence - 1
        beta1.append(_risk_coefficient(expai, locus.grr, index + 1))
        beta2.append(_risk_coefficient(expai, locus.grr2, index + 1))

    n_loci = config.n_loci
    is_x = [order[j] >= X_CHROMOSOME for j in range(n_loci)]
    all_genotypes = [index_to_genotypes(i, n_loci) for i in range(3 ** n_loci)]

    population = tuple(
        math.prod(genotype_frequency_x(g, p) if x else genotype_frequency(g, p)
                  for g, p, x in zip(gs, freqs, is_x))
        for gs in all_genotypes)
    summ = tuple(_effect_sum(gs, config.loci, beta1, beta2, config.interactions)
                 for gs in all_genotypes)

    beta0 = _fit_intercept(config.prevalence, population, summ)

    female = [math.prod(genotype_frequency(g, p) for g, p in zip(gs, freqs))
              for gs in all_genotypes]
    male = [math.prod(genotype_frequency_x_male(g, p) if x else genotype_frequency(g, p)
                      for g, p, x in zip(gs, freqs, is_x))
            for gs in all_genotypes]
    case_f, cont_f = _conditional(female, summ, beta0)
    case_m, cont_m = _conditional(male, summ, beta0)

    return DiseaseModel(
        beta0=beta0,
        beta1=tuple(beta1),
        beta2=tuple(beta2),
        loci=tuple(config.loci),
        chromosomes=tuple(order[:n_loci]),
        n_markers=tuple(n_markers),
        locus_frequencies=tuple(freqs),
        interactions=tuple(config.interactions),
        population_prob=population,
        summ=summ,
        cum_case_f=case_f,
        cum_case_m=case_m,
        cum_cont_f=cont_f,
        cum_cont_m=cont_m,
    )