"""Writing simulated haplotypes to compressed per-chromosome files."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Optional, Sequence

from snpsim.config import X_CHROMOSOME, ControlConfig
from snpsim.phased import ChromosomeData

log = logging.getLogger(__name__)


def _is_female(config: ControlConfig, person: int) -> bool:
    case_end = config.n_case_f + config.n_case_m
    return person < config.n_case_f or case_end <= person < case_end + config.n_cont_f


def format_chromosome(config: ControlConfig, chromosome: int,
                      haplotypes: Sequence[Sequence[int]], start: int, end: int) -> str:
    """Render positions ``start``..``end`` of one chromosome in the configured format."""
    columns = range(start, end + 1)
    lines: list[str] = []
    fmt = config.out_format
    if fmt == "linkage":
        for person in range(config.n_people):
            sex = 2 if _is_female(config, person) else 1
            if config.n_loci > 0:
                status = 2 if person < config.n_case_f + config.n_case_m else 1
            else:
                status = 0
            first, second = haplotypes[2 * person], haplotypes[2 * person + 1]
            alleles = "".join(f"{first[k] + 1} {second[k] + 1} " for k in columns)
            lines.append(f"{person + 1} 1 0 0 {sex} {status} {alleles}")
    elif fmt == "genotype":
        for person in range(config.n_people):
            first, second = haplotypes[2 * person], haplotypes[2 * person + 1]
            if chromosome < X_CHROMOSOME or _is_female(config, person):
                lines.append("".join(f"{first[k] + second[k]} " for k in columns))
            else:
                lines.append("".join(f"{2 * first[k]} " for k in columns))
    elif fmt == "phased":
        for hap in haplotypes[:2 * config.n_people]:
            lines.append("".join(f"{hap[k]} " for k in columns))
    else:
        raise ValueError(f"Unknown output format {fmt!r}")
    return "".join(line + "\n" for line in lines)


def remove_old_outputs(directory, order: Sequence[int]) -> list[Path]:
    """Delete chr#.dat and chr#.dat.gz files for the given chromosomes."""
    directory = Path(directory)
    removed: list[Path] = []
    for chromosome in order:
        for name in (f"chr{chromosome}.dat", f"chr{chromosome}.dat.gz"):
            path = directory / name
            if not path.exists():
                continue
            if not removed:
                log.info("Removing old data files chr#.dat or chr#.dat.gz")
            try:
                path.unlink()
            except OSError:
                log.warning("Remove operation failed for %s", path)
                continue
            removed.append(path)
    return removed


def write_outputs(config: ControlConfig, order: Sequence[int],
                  chromosomes: Sequence[Optional[ChromosomeData]],
                  simulated: Sequence[Optional[Sequence[Sequence[int]]]],
                  directory) -> list[Path]:
    """Write every simulated chromosome as chr#.dat.gz; return the files written."""
    directory = Path(directory)
    remove_old_outputs(directory, order)
    log.info("Writing to files ...")
    written: list[Path] = []
    for index, chromosome in enumerate(order):
        if config.regional and index >= config.n_loci:
            continue
        haplotypes = simulated[index]
        data = chromosomes[index]
        if haplotypes is None or data is None:
            raise ValueError(f"Chromosome {chromosome} has not been simulated.")
        if config.regional:
            locus = config.loci[index]
            start, end = locus.start - 1, locus.end - 1
        else:
            start, end = 0, data.n_markers - 1
        text = format_chromosome(config, chromosome, haplotypes, start, end)
        target = directory / f"chr{chromosome}.dat.gz"
        try:
            with gzip.open(target, "wt") as handle:
                handle.write(text)
        except OSError as exc:
            raise OSError(f"Output file: {target} cannot be opened!") from exc
        written.append(target)
    return written