"""Case/control genotype data sets: loading from files and synthetic generation."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

NUMBER_OF_GENOTYPES = 3

CASE_FILE_PREFIX = "case_genotypes"
CONTROL_FILE_PREFIX = "anticase_genotypes"
_DATA_FILE = re.compile(r".(dat|sln)$")

SYNTHETIC_SIZE = 5000
SYNTHETIC_SNPS = 500
SNP_FIRST = 0
SNP_SECOND = 150

# (first genotype, second genotype, case events, control events)
_SELECTED_PAIRS = (
    (0, 0, 100, 410),
    (1, 0, 75, 200),
    (2, 0, 80, 20),
    (0, 1, 75, 200),
    (1, 1, 150, 100),
    (2, 1, 120, 20),
    (0, 2, 80, 20),
    (1, 2, 120, 20),
    (2, 2, 200, 10),
)
_EXPECTED_CASE = [255, 345, 400]
_EXPECTED_CONTROL = [630, 320, 50]


@dataclass
class SnpData:
    """Name, 1-based index and genotype counts of one SNP."""

    name: str = ""
    index: int = 0
    events: list[int] = field(default_factory=lambda: [0] * NUMBER_OF_GENOTYPES)


@dataclass
class GenotypeDataset:
    """Genotypes of every case and control individual, with per-SNP totals."""

    case_data: list[bytearray] = field(default_factory=list)
    control_data: list[bytearray] = field(default_factory=list)
    total_case: list[SnpData] = field(default_factory=list)
    total_control: list[SnpData] = field(default_factory=list)

    @property
    def n_snps(self) -> int:
        return len(self.total_case)


def parse_genotype_line(line: str, snps: list[SnpData], rows: list[bytearray],
                        yang_range: bool) -> bool:
    """Add one individual's genotypes to ``rows`` and count them in ``snps``.

    Returns False for an empty line, which marks the end of the data.
    With ``yang_range`` the genotypes are coded 1-3 instead of 0-2.
    """
    line = line.rstrip("\r\n")
    if not line:
        return False
    offset = 1 if yang_range else 0
    row = bytearray()
    for index, token in enumerate(line.split()):
        genotype = int(token) - offset
        if not 0 <= genotype < NUMBER_OF_GENOTYPES:
            raise ValueError(f"Genotype {token!r} out of range at SNP {index + 1}")
        if len(snps) <= index:
            snps.append(SnpData(name=f"SNP{index + 1}", index=index + 1))
        snps[index].events[genotype] += 1
        row.append(genotype)
    rows.append(row)
    return True


def _find_files(directory: Path) -> tuple[Optional[Path], Optional[Path]]:
    case_file: Optional[Path] = None
    control_file: Optional[Path] = None
    for path in sorted(directory.iterdir()):
        if not path.is_file() or not _DATA_FILE.search(path.name):
            continue
        if path.name.startswith(CASE_FILE_PREFIX):
            case_file = path
        elif path.name.startswith(CONTROL_FILE_PREFIX):
            control_file = path
    return case_file, control_file


def load_yang_data(directory, yang_range: bool) -> GenotypeDataset:
    """Load case_genotypes* and anticase_genotypes* (.dat or .sln) from ``directory``.

    Each line holds one individual's genotypes. Reading stops at the first
    empty case line; the control file must have a line for every case line.
    If either file is missing the data set is empty.
    """
    dataset = GenotypeDataset()
    case_file, control_file = _find_files(Path(directory))
    if case_file is None or control_file is None:
        return dataset
    with case_file.open() as cases, control_file.open() as controls:
        while True:
            if not parse_genotype_line(cases.readline(), dataset.total_case,
                                       dataset.case_data, yang_range):
                break
            if not parse_genotype_line(controls.readline(), dataset.total_control,
                                       dataset.control_data, yang_range):
                raise ValueError(f"{control_file} has fewer lines than {case_file}")
    return dataset


def generate_genotype(events: int, barcode: Sequence[tuple[int, int]],
                      allocated: bytearray, data: list[bytearray],
                      totals: list[SnpData], rng: random.Random) -> None:
    """Give ``events`` free individuals the genotypes in ``barcode``.

    ``barcode`` holds (snp, genotype) pairs. Each individual is picked at
    random; if taken, the next free one (wrapping round) is used. ``allocated``
    marks taken individuals with non-zero bytes and is updated.
    """
    size = len(allocated)
    if events > allocated.count(0):
        raise ValueError(f"Cannot allocate {events} individuals: too few are free")
    pairs = list(barcode)
    for _ in range(events):
        index = allocated.find(0, rng.randrange(size))
        if index < 0:
            index = allocated.find(0)
        allocated[index] = 1
        row = data[index]
        for snp, genotype in pairs:
            row[snp] = genotype
    for snp, genotype in pairs:
        totals[snp].events[genotype] += events


def _random_distribution(rng: random.Random) -> tuple[list[int], list[int]]:
    case0 = rng.randint(int(SYNTHETIC_SIZE * 0.4 + 0.5), int(SYNTHETIC_SIZE * 0.6 + 0.5))
    rest = SYNTHETIC_SIZE - case0
    case1 = rng.randint(int(rest * 0.4 + 0.5), int(rest * 0.6 + 0.5))
    case = [case0, case1, SYNTHETIC_SIZE - case0 - case1]
    spread = int(0.02 * SYNTHETIC_SIZE)
    cont0 = rng.randint(case0 - spread, case0 + spread)
    cont1 = rng.randint(case1 - spread, case1 + spread)
    control = [cont0, cont1, SYNTHETIC_SIZE - cont0 - cont1]
    if case[2] < 0 or control[2] < 0:
        raise ValueError("Generated genotype distribution is invalid")
    return case, control


def generate_synthetic_data(rng: random.Random) -> GenotypeDataset:
    """Generate a synthetic data set with an interacting pair of SNPs.

    Every SNP but SNP_FIRST and SNP_SECOND gets a random genotype distribution
    with similar case and control counts; the two selected SNPs get a fixed
    joint distribution that differs between cases and controls.
    """
    dataset = GenotypeDataset(
        case_data=[bytearray(SYNTHETIC_SNPS) for _ in range(SYNTHETIC_SIZE)],
        control_data=[bytearray(SYNTHETIC_SNPS) for _ in range(SYNTHETIC_SIZE)],
        total_case=[SnpData(name=f"rs{i}") for i in range(SYNTHETIC_SNPS)],
        total_control=[SnpData(name=f"rs{i}") for i in range(SYNTHETIC_SNPS)],
    )
    for snp in range(SYNTHETIC_SNPS):
        if snp in (SNP_FIRST, SNP_SECOND):
            continue
        case, control = _random_distribution(rng)
        case_allocated = bytearray(SYNTHETIC_SIZE)
        control_allocated = bytearray(SYNTHETIC_SIZE)
        for genotype in range(NUMBER_OF_GENOTYPES):
            barcode = [(snp, genotype)]
            generate_genotype(case[genotype], barcode, case_allocated,
                              dataset.case_data, dataset.total_case, rng)
            generate_genotype(control[genotype], barcode, control_allocated,
                              dataset.control_data, dataset.total_control, rng)

    case_allocated = bytearray(SYNTHETIC_SIZE)
    control_allocated = bytearray(SYNTHETIC_SIZE)
    for first, second, case_events, control_events in _SELECTED_PAIRS:
        barcode = [(SNP_FIRST, first), (SNP_SECOND, second)]
        generate_genotype(case_events, barcode, case_allocated,
                          dataset.case_data, dataset.total_case, rng)
        generate_genotype(control_events, barcode, control_allocated,
                          dataset.control_data, dataset.total_control, rng)

    for snp in (SNP_FIRST, SNP_SECOND):
        if (dataset.total_case[snp].events != _EXPECTED_CASE
                or dataset.total_control[snp].events != _EXPECTED_CONTROL):
            raise ValueError("Selected SNP distributions were not generated as expected")
    return dataset