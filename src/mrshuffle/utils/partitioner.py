FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193


def ihash(key):
    """32-bit FNV-1a over the key's UTF-8 bytes, masked to 31 bits.

    Pure function of the key's content: no per-process seed, so every
    map and reduce process agrees on it.
    """
    if not isinstance(key, str):
        raise TypeError(f"Partition key must be str, got {type(key).__name__}")
    h = FNV32_OFFSET_BASIS
    for byte in key.encode('utf-8'):
        h ^= byte
        h = (h * FNV32_PRIME) & 0xFFFFFFFF
    return h & 0x7FFFFFFF


class Partitioner:
    """Hash-based partitioning for intermediate keys"""

    def __init__(self, num_partitions, hash_function=ihash):
        if isinstance(num_partitions, bool) or not isinstance(num_partitions, int) or num_partitions <= 0:
            raise ValueError(f"num_partitions must be a positive integer, got {num_partitions!r}")
        self.num_partitions = num_partitions
        self.hash_function = hash_function

    def get_partition(self, key):
        """Get partition ID for a key (hash(key) mod R)"""
        return self.hash_function(key) % self.num_partitions

    def partition_records(self, records):
        """Route records into per-partition lists

        Args:
            records: Iterable of KeyValue records

        Returns:
            List of lists, one per partition, each in emission order
        """
        partitions = [[] for _ in range(self.num_partitions)]

        for record in records:
            partitions[self.get_partition(record.Key)].append(record)

        return partitions
