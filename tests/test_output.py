import gzip

import pytest

from snpsim.config import ControlConfig, DiseaseLocus
from snpsim.output import format_chromosome, remove_old_outputs, write_outputs
from snpsim.phased import ChromosomeData, allele_frequencies

HAPS = [bytearray([0, 1]), bytearray([1, 1]), bytearray([0, 0]), bytearray([1, 0])]


def _config(out_format, **overrides):
    base = dict(data_prefix="chr", data_suffix=".txt", n_chrom=4, n_chrom_x=4,
                need_output=True, out_format=out_format, window_size=3,
                n_case_f=1, n_case_m=0, n_cont_f=0, n_cont_m=1,
                prevalence=0.1, loci=(DiseaseLocus(1, 2, 1, 1.0, 1.0),))
    base.update(overrides)
    return ControlConfig(**base)


def test_linkage_format():
    text = format_chromosome(_config("linkage"), 1, HAPS, 0, 1)
    assert text.splitlines() == ["1 1 0 0 2 2 1 2 2 2 ", "2 1 0 0 1 1 1 2 1 1 "]


def test_linkage_population_status_is_unknown():
    config = _config("linkage", n_case_f=0, n_cont_f=1, loci=())
    lines = format_chromosome(config, 1, HAPS, 0, 1).splitlines()
    assert [line.split()[5] for line in lines] == ["0", "0"]


def test_genotype_format_autosome_and_x():
    config = _config("genotype")
    assert format_chromosome(config, 1, HAPS, 0, 1) == "1 2 \n1 0 \n"
    x_lines = format_chromosome(config, 23, HAPS, 0, 1).splitlines()
    assert x_lines[0] == "1 2 "
    assert x_lines[1] == "0 0 "


def test_phased_format_and_range():
    config = _config("phased")
    full = format_chromosome(config, 5, HAPS, 0, 1)
    assert full.splitlines() == [" ".join(str(a) for a in h) + " " for h in HAPS]
    column = format_chromosome(config, 5, HAPS, 1, 1)
    assert column.splitlines() == [f"{h[1]} " for h in HAPS]


def test_unknown_format_raises():
    with pytest.raises(ValueError):
        format_chromosome(_config("hapmap", need_output=False), 1, HAPS, 0, 1)


def test_remove_old_outputs(tmp_path):
    (tmp_path / "chr2.dat").write_text("x")
    (tmp_path / "chr2.dat.gz").write_text("x")
    (tmp_path / "chr9.dat").write_text("x")
    removed = remove_old_outputs(tmp_path, [2, 3])
    assert sorted(p.name for p in removed) == ["chr2.dat", "chr2.dat.gz"]
    assert not (tmp_path / "chr2.dat").exists()
    assert (tmp_path / "chr9.dat").exists()


def _chrom(number, haps):
    return ChromosomeData(number, haps, allele_frequencies(haps))


def test_write_outputs_round_trip(tmp_path):
    config = _config("phased", loci=(), n_case_f=0, n_cont_f=1)
    (tmp_path / "chr1.dat").write_text("old")
    order = [1, 23]
    chromosomes = [_chrom(1, HAPS), _chrom(23, HAPS)]
    simulated = [HAPS, HAPS]
    written = write_outputs(config, order, chromosomes, simulated, tmp_path)
    assert [p.name for p in written] == ["chr1.dat.gz", "chr23.dat.gz"]
    assert not (tmp_path / "chr1.dat").exists()
    for path, number in zip(written, order):
        with gzip.open(path, "rt") as handle:
            assert handle.read() == format_chromosome(config, number, HAPS, 0, 1)


def test_write_outputs_regional(tmp_path):
    haps = [bytearray([0, 1, 1, 0]), bytearray([1, 1, 0, 0]),
            bytearray([0, 0, 1, 1]), bytearray([1, 0, 0, 1])]
    locus = DiseaseLocus(1, 2, 1, 1.0, 1.0, start=1, end=3)
    config = _config("phased", loci=(locus,), regional=True)
    order = [1, 2]
    written = write_outputs(config, order, [_chrom(1, haps), None], [haps, None], tmp_path)
    assert [p.name for p in written] == ["chr1.dat.gz"]
    with gzip.open(written[0], "rt") as handle:
        lines = handle.read().splitlines()
    assert lines == [" ".join(str(a) for a in h[:3]) + " " for h in haps]