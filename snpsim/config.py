"""Reading and validating the simulation control file."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)

MAX_PHASED = 1000
MAX_SUBJECTS = 20000
MAX_INTERACTIONS = 256
MAX_DISEASE_LOCI = 23
N_CHROMOSOMES = 23
X_CHROMOSOME = 23
DEFAULT_WINDOW_SIZE = 5
OUTPUT_FORMATS = ("linkage", "genotype", "phased")

_INT = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(
    r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class ConfigError(ValueError):
    """The control file is missing, malformed or inconsistent."""


def _atoi(token: str) -> int:
    match = _INT.match(token.strip())
    return int(match.group()) if match else 0


def _atof(token: str) -> float:
    match = _FLOAT.match(token.strip())
    return float(match.group()) if match else 0.0


def _scan_ints(line: str, count: int) -> list[int]:
    """Read up to ``count`` leading integers, stopping at the first non-integer."""
    values = []
    for token in line.split()[:count]:
        match = _INT.match(token)
        if not match:
            break
        values.append(int(match.group()))
    return values


@dataclass(frozen=True)
class DiseaseLocus:
    """A disease variant: chromosome, 1-based SNP position and risk model."""

    chromosome: int
    position: int
    variant: int
    grr: float
    grr2: float
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Interaction:
    """Two-way interaction between disease loci (1-based, first < second)."""

    first: int
    second: int
    effects: tuple[float, float, float, float]


@dataclass(frozen=True)
class ControlConfig:
    """All parameters read from a control file."""

    data_prefix: str
    data_suffix: str
    n_chrom: int
    n_chrom_x: int
    need_output: bool
    out_format: str
    window_size: int
    n_case_f: int
    n_case_m: int
    n_cont_f: int
    n_cont_m: int
    regional: bool = False
    prevalence: float = 0.0
    loci: tuple[DiseaseLocus, ...] = field(default_factory=tuple)
    interactions: tuple[Interaction, ...] = field(default_factory=tuple)

    @property
    def n_loci(self) -> int:
        return len(self.loci)

    @property
    def n_people(self) -> int:
        return self.n_case_f + self.n_case_m + self.n_cont_f + self.n_cont_m

    @property
    def half_window(self) -> int:
        return (self.window_size - 1) // 2


def chromosome_order(disease_chromosomes: Iterable[int]) -> list[int]:
    """Disease chromosomes first, then the remaining chromosomes 1..23 ascending."""
    disease = list(disease_chromosomes)
    rest = [c for c in range(1, N_CHROMOSOMES + 1) if c not in disease]
    return disease + rest


def _parse_locus(line: str, window_size: int, regional: bool,
                 earlier: list[DiseaseLocus]) -> DiseaseLocus:
    tokens = line.split()
    head = _scan_ints(line, 3)
    if len(head) < 3 or len(tokens) < 5:
        raise ConfigError(f"Incomplete disease locus line: {line!r}")
    chromosome, position, variant = head
    grr = _atof(tokens[3])
    kind = tokens[4]
    if kind in ("M", "m"):
        grr2 = grr * grr
    elif kind in ("D", "d"):
        grr2 = grr
    else:
        grr2 = _atof(kind)
    bounds = _scan_ints(" ".join(tokens[5:7]), 2)
    start = bounds[0] if len(bounds) > 0 else 0
    end = bounds[1] if len(bounds) > 1 else 0

    half = (window_size - 1) // 2
    errors = []
    if chromosome < 1 or chromosome > N_CHROMOSOMES:
        errors.append("Invalid chromosome number.")
    if any(locus.chromosome == chromosome for locus in earlier):
        errors.append("The program doesn't allow >1 disease variant on the same chromosome.")
    if position <= half:
        errors.append("Disease locus position must be > (WINDOW_SIZE-1)/2.")
    if variant not in (0, 1):
        errors.append("Disease variant must be either 0 or 1.")
    if grr < 1 or grr2 < 1:
        errors.append("Genotypic risk ratio needs to be >= 1.")
    if regional:
        if start <= 0 or end <= 0:
            errors.append("Start and end positions need to be positive integers.")
        else:
            if start > position - half:
                errors.append(
                    f"Start position should be before disease locus (<= {position} - (WINDOW_SIZE-1)/2)")
            if end < position + half:
                errors.append(
                    f"End position should be after disease locus (>= {position} + (WINDOW_SIZE-1)/2)")
    if errors:
        raise ConfigError("\n".join(errors))
    return DiseaseLocus(chromosome, position, variant, grr, grr2, start, end)


def _parse_interaction(tokens: list[str], n_loci: int) -> Interaction:
    if len(tokens) < 7:
        raise ConfigError("An Inter2 line needs two loci and four effects.")
    first, second = _atoi(tokens[1]), _atoi(tokens[2])
    effects = tuple(_atof(t) for t in tokens[3:7])
    errors = []
    if not (1 <= first <= n_loci and 1 <= second <= n_loci):
        errors.append(f"Disease loci DL1 and DL2 should be between 1 and {n_loci}")
    if first == second:
        errors.append("Disease loci DL1 and DL2 should be different.")
    if any(e < 0 for e in effects):
        errors.append("Interactive effects should be non-negative.")
    if errors:
        raise ConfigError("\n".join(errors))
    if first > second:
        first, second = second, first
        effects = (effects[0], effects[2], effects[1], effects[3])
    return Interaction(first, second, effects)


def parse_control(lines: Iterable[str]) -> ControlConfig:
    """Parse the lines of a control file into a validated configuration."""
    stream = iter(lines)

    def next_line() -> str:
        return next(stream, "").rstrip("\r\n")

    names = next_line().split()
    if len(names) < 2:
        raise ConfigError("The first line must give the data file prefix and suffix.")
    prefix, suffix = names[0], names[1]

    counts = _scan_ints(next_line(), 2)
    if len(counts) < 2:
        raise ConfigError("The second line must give the numbers of phased chromosomes.")
    n_chrom, n_chrom_x = counts
    if n_chrom > MAX_PHASED or n_chrom_x > MAX_PHASED:
        raise ConfigError(f"The maximum number of phased chromosomes is {MAX_PHASED}.")

    output_line = next_line()
    flag = _scan_ints(output_line, 1)
    if not flag:
        raise ConfigError("The third line must give the output indicator.")
    need_output = flag[0] != 0
    output_tokens = output_line.split()
    out_format = output_tokens[1].lower() if len(output_tokens) > 1 else ""
    if need_output and out_format not in OUTPUT_FORMATS:
        raise ConfigError("Output format should be linkage or genotype or phased")

    window = _scan_ints(next_line(), 1)
    window_size = window[0] if window else DEFAULT_WINDOW_SIZE
    if window_size <= 1:
        raise ConfigError("The simulation window size needs to be >=2")
    if n_chrom > 0:
        limit = math.log(n_chrom) / math.log(2.0) - 1
    else:
        limit = -math.inf if n_chrom == 0 else math.nan
    if window_size >= limit:
        log.warning("Window size %d may be too large for %d input chromosomes",
                    window_size, n_chrom)

    subjects = _scan_ints(next_line(), 4)
    if len(subjects) < 4:
        raise ConfigError("The fifth line must give four numbers of subjects.")
    n_case_f, n_case_m, n_cont_f, n_cont_m = subjects

    sampling = _scan_ints(next_line(), 2)
    if not sampling:
        raise ConfigError("The sixth line must give the number of disease loci.")
    n_loci = sampling[0]
    regional_flag = sampling[1] if len(sampling) > 1 else 0
    if n_loci < 0:
        raise ConfigError(
            "The number of disease variants is either positive (for case-control data) "
            "or zero (for population data)")
    if n_loci > MAX_DISEASE_LOCI:
        raise ConfigError(f"The number of disease variants cannot exceed {MAX_DISEASE_LOCI}")
    if n_loci > 0 and regional_flag not in (0, 1):
        raise ConfigError("REGIONAL indicator should be either 0 (genome) or 1 (regions).")
    if n_loci == 0:
        n_case_f = n_case_m = 0

    if min(n_case_f, n_case_m, n_cont_f, n_cont_m) < 0:
        raise ConfigError("Numbers of subjects must be non-negative numbers")
    if n_case_f + n_case_m + n_cont_f + n_cont_m > MAX_SUBJECTS:
        raise ConfigError(f"The number of subjects exceeds {MAX_SUBJECTS}, the maximum allowed.")

    regional = n_loci > 0 and regional_flag == 1
    prevalence = 0.0
    loci: list[DiseaseLocus] = []
    interactions: list[Interaction] = []
    if n_loci > 0:
        prev_tokens = next_line().split()
        prevalence = _atof(prev_tokens[0]) if prev_tokens else 0.0
        if prevalence <= 0 or prevalence >= 1:
            raise ConfigError("The prevalence needs to be between 0 and 1.")
        for _ in range(n_loci):
            loci.append(_parse_locus(next_line(), window_size, regional, loci))
        while True:
            tokens = next_line().split()
            if not tokens:
                break
            if tokens[0].lower() != "inter2":
                continue
            interactions.append(_parse_interaction(tokens, n_loci))
            if len(interactions) > MAX_INTERACTIONS:
                raise ConfigError(
                    f"A maximum of {MAX_INTERACTIONS} SNP pairs are allowed to have "
                    "2-way interaction effects.")

    return ControlConfig(
        data_prefix=prefix,
        data_suffix=suffix,
        n_chrom=n_chrom,
        n_chrom_x=n_chrom_x,
        need_output=need_output,
        out_format=out_format,
        window_size=window_size,
        n_case_f=n_case_f,
        n_case_m=n_case_m,
        n_cont_f=n_cont_f,
        n_cont_m=n_cont_m,
        regional=regional,
        prevalence=prevalence,
        loci=tuple(loci),
        interactions=tuple(interactions),
    )


def read_control_file(path) -> ControlConfig:
    """Read and parse a control file from disk."""
    try:
        with Path(path).open() as handle:
            return parse_control(handle)
    except OSError as exc:
        raise ConfigError(f"Cannot open the control file {path}") from exc