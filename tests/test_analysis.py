import pytest

from snpsim.analysis import allelic_chisq, genome_chisq


def _haps(rows):
    return [bytearray(r) for r in rows]


def test_perfect_association_equals_allele_count():
    # 2 case females carry allele 1, 2 control females carry allele 0
    haps = _haps([[1]] * 4 + [[0]] * 4)
    assert allelic_chisq(1, haps, 2, 0, 2, 0) == [pytest.approx(8.0)]


def test_no_association_is_zero():
    haps = _haps([[1], [0]] * 4)
    assert allelic_chisq(1, haps, 2, 0, 2, 0) == [pytest.approx(0.0)]


def test_monomorphic_marker_is_zero():
    haps = _haps([[0, 1]] * 8)
    assert allelic_chisq(1, haps, 1, 1, 1, 1) == [0.0, 0.0]


def test_x_chromosome_ignores_male_second_haplotype():
    # case female, case male, control female, control male
    base = [[1], [1], [1], [0], [0], [0], [0], [0]]
    changed = [list(r) for r in base]
    changed[3] = [1]  # case male second haplotype
    changed[7] = [1]  # control male second haplotype
    a = allelic_chisq(23, _haps(base), 1, 1, 1, 1)
    b = allelic_chisq(23, _haps(changed), 1, 1, 1, 1)
    assert a == b
    assert a[0] == pytest.approx(6.0)


def test_autosome_counts_male_second_haplotype():
    base = [[1], [1], [1], [0], [0], [0], [0], [0]]
    changed = [list(r) for r in base]
    changed[3] = [1]
    a = allelic_chisq(1, _haps(base), 1, 1, 1, 1)
    b = allelic_chisq(1, _haps(changed), 1, 1, 1, 1)
    assert b[0] > a[0]


def test_too_few_haplotypes():
    with pytest.raises(ValueError):
        allelic_chisq(1, _haps([[0]] * 3), 1, 1, 0, 0)


def test_genome_concatenates_and_skips_missing():
    first = _haps([[1, 0]] * 4 + [[0, 0]] * 4)
    second = _haps([[0, 0, 0]] * 8)
    result = genome_chisq([1, 2, 3], [first, None, second], 2, 0, 2, 0)
    assert len(result) == 5
    assert result[:2] == allelic_chisq(1, first, 2, 0, 2, 0)
    assert result[2:] == [0.0, 0.0, 0.0]