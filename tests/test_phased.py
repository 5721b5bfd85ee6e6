import pytest

from snpsim.config import chromosome_order, parse_control
from snpsim.phased import (
    ChromosomeData,
    DataError,
    allele_frequencies,
    load_phased_data,
    read_phased_file,
)

N_MARKERS = 12


def _write_chromosomes(directory, n_hap, n_hap_x, markers=N_MARKERS):
    for chromosome in range(1, 24):
        count = n_hap_x if chromosome == 23 else n_hap
        rows = [
            " ".join(str((chromosome + row + col) % 2) for col in range(markers))
            for row in range(count)
        ]
        (directory / f"chr{chromosome}.txt").write_text("\n".join(rows) + "\n")


def _population_config():
    return parse_control([
        "chr .txt",
        "6 4",
        "0",
        "3",
        "0 0 5 5",
        "0 0",
    ])


def _disease_config(position, regional, start=0, end=0):
    locus = f"2 {position} 1 1.5 M"
    if regional:
        locus += f" {start} {end}"
    return parse_control([
        "chr .txt",
        "6 4",
        "0",
        "5",
        "5 5 5 5",
        f"1 {1 if regional else 0}",
        "0.1",
        locus,
        "",
    ])


def test_read_phased_file(tmp_path):
    path = tmp_path / "chr1.txt"
    path.write_text("0 1 1\n1 1 0\n")
    assert read_phased_file(path, 2) == [bytearray([0, 1, 1]), bytearray([1, 1, 0])]


def test_read_treats_nonzero_as_one_and_accepts_tabs(tmp_path):
    path = tmp_path / "chr1.txt"
    path.write_text("0\t2 1\n5  0\t0\n")
    assert read_phased_file(path, 2) == [bytearray([0, 1, 1]), bytearray([1, 0, 0])]


def test_read_only_requested_lines(tmp_path):
    path = tmp_path / "chr1.txt"
    path.write_text("0 1\n1 1\n0 0\n")
    assert len(read_phased_file(path, 2)) == 2


def test_short_line_is_an_error(tmp_path):
    path = tmp_path / "chr1.txt"
    path.write_text("0 1 1\n1 1\n")
    with pytest.raises(DataError):
        read_phased_file(path, 2)


def test_missing_file_is_an_error(tmp_path):
    with pytest.raises(DataError):
        read_phased_file(tmp_path / "absent.txt", 2)


def test_allele_frequencies_count_zero_alleles():
    haplotypes = [bytearray([0, 1, 1]), bytearray([1, 1, 0]),
                  bytearray([0, 0, 0]), bytearray([0, 1, 0])]
    assert allele_frequencies(haplotypes) == [0.75, 0.25, 0.75]


def test_allele_frequencies_bounds():
    haplotypes = [bytearray([0, 1, 0, 1]), bytearray([1, 1, 0, 0]), bytearray([0, 1, 1, 0])]
    assert all(0.0 <= f <= 1.0 for f in allele_frequencies(haplotypes))
    assert allele_frequencies([]) == []


def test_load_whole_genome(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_chromosomes(tmp_path, 6, 4)
    config = _population_config()
    order = chromosome_order([])
    data = load_phased_data(config, order)
    assert [c.chromosome for c in data] == order
    assert all(isinstance(c, ChromosomeData) for c in data)
    assert data[0].n_haplotypes == 6
    assert data[22].n_haplotypes == 4
    assert data[22].is_x
    assert all(c.n_markers == N_MARKERS for c in data)


def test_load_regional_skips_other_chromosomes(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_chromosomes(tmp_path, 6, 4)
    config = _disease_config(6, True, 2, 10)
    order = chromosome_order([2])
    data = load_phased_data(config, order)
    assert data[0].chromosome == 2
    assert all(c is None for c in data[1:])


def test_disease_locus_too_close_to_end(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_chromosomes(tmp_path, 6, 4)
    config = _disease_config(11, False)
    with pytest.raises(DataError):
        load_phased_data(config, chromosome_order([2]))


def test_regional_end_beyond_markers(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_chromosomes(tmp_path, 6, 4)
    config = _disease_config(6, True, 2, 13)
    with pytest.raises(DataError):
        load_phased_data(config, chromosome_order([2]))


def test_missing_chromosome_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_chromosomes(tmp_path, 6, 4)
    (tmp_path / "chr7.txt").unlink()
    with pytest.raises(DataError):
        load_phased_data(_population_config(), chromosome_order([]))