import itertools

import pytest

from tnzfx.rng import Mt19937_64


def test_ten_thousandth_output_of_default_seed():
    rng = Mt19937_64()
    value = None
    for _ in range(10000):
        value = rng.next()
    assert value == 9981545732273789042


def test_same_seed_same_sequence():
    a = Mt19937_64(42)
    b = Mt19937_64(42)
    assert [a.next() for _ in range(700)] == [b.next() for _ in range(700)]


def test_different_seeds_differ():
    a = Mt19937_64(1)
    b = Mt19937_64(2)
    assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]


def test_seed_is_reduced_to_64_bits():
    a = Mt19937_64(7)
    b = Mt19937_64(7 + (1 << 64))
    assert a.next() == b.next()


def test_outputs_fit_in_64_bits():
    rng = Mt19937_64(123)
    assert all(0 <= rng.next() < (1 << 64) for _ in range(1000))


def test_iteration_matches_next():
    a = Mt19937_64(99)
    b = Mt19937_64(99)
    assert list(itertools.islice(a, 20)) == [b.next() for _ in range(20)]


def test_canonical_range():
    rng = Mt19937_64(5)
    values = [rng.canonical() for _ in range(2000)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert 0.4 < sum(values) / len(values) < 0.6


@pytest.mark.parametrize("p,expected", [(0.0, False), (1.0, True)])
def test_bernoulli_extremes(p, expected):
    rng = Mt19937_64(11)
    assert all(rng.bernoulli(p) is expected for _ in range(500))


def test_bernoulli_frequency():
    rng = Mt19937_64(2024)
    hits = sum(rng.bernoulli(0.5) for _ in range(4000))
    assert 1800 < hits < 2200