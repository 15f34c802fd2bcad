"""
Tests for the key partitioning function.
"""

import pytest

from mrshuffle.utils.codec import KeyValue
from mrshuffle.utils.partitioner import Partitioner, ihash


def test_ihash_known_vectors():
    """ihash is FNV-1a 32 over UTF-8 bytes with the sign bit cleared."""
    assert ihash("") == 0x811C9DC5 & 0x7FFFFFFF
    assert ihash("a") == 0xE40C292C & 0x7FFFFFFF
    assert ihash("b") == 0xE70C2DE5 & 0x7FFFFFFF
    assert ihash("foobar") == 0xBF9CF968 & 0x7FFFFFFF


def test_ihash_is_non_negative_31_bit():
    for key in ["", "a", "hello world", "ключ", "键", "\x00\xff"]:
        value = ihash(key)
        assert 0 <= value <= 0x7FFFFFFF, f"{key!r} hashed out of range: {value}"


def test_partition_is_deterministic_and_in_range():
    """Repeated calls with the same key and bucket count agree."""
    keys = ["alpha", "beta", "gamma", "δέλτα", "", "a b"]
    for num_partitions in (1, 2, 3, 7, 64):
        first = Partitioner(num_partitions)
        second = Partitioner(num_partitions)
        for key in keys:
            p = first.get_partition(key)
            assert 0 <= p < num_partitions
            assert p == first.get_partition(key) == second.get_partition(key)


def test_single_partition_routes_everything_to_zero():
    partitioner = Partitioner(1)
    assert {partitioner.get_partition(k) for k in ["x", "y", "z"]} == {0}


def test_partition_records_preserves_emission_order():
    partitioner = Partitioner(2)
    records = [KeyValue("a", "1"), KeyValue("b", "1"), KeyValue("a", "2")]
    partitions = partitioner.partition_records(records)

    assert partitions[0] == [KeyValue("a", "1"), KeyValue("a", "2")]
    assert partitions[1] == [KeyValue("b", "1")]


def test_invalid_partition_count():
    for bad in (0, -1, 2.5, "3", True, False):
        with pytest.raises(ValueError):
            Partitioner(bad)


def test_non_text_key_rejected():
    with pytest.raises(TypeError):
        ihash(42)


def test_custom_hash_function():
    partitioner = Partitioner(4, hash_function=len)
    assert partitioner.get_partition("abcdef") == 2
