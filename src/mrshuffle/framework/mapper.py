from ..utils.codec import KeyValue


class MapPhase:
    """Handles the map phase of MapReduce"""

    def __init__(self, map_function, partitioner):
        """
        Args:
            map_function: User-defined map function(filename, contents) -> [(k', v'), ...]
            partitioner: Partitioner instance for intermediate keys
        """
        self.map_function = map_function
        self.partitioner = partitioner

    def execute(self, input_key, input_value):
        """Execute map function and partition results

        The map function is called exactly once. Its items may be KeyValue
        records or plain (key, value) pairs.

        Args:
            input_key: Input key (the input file name)
            input_value: Input value (the file contents)

        Returns:
            (records, partitions): every emitted record in emission order, and
            one list per partition holding that partition's records in order
        """
        records = self.apply(input_key, input_value)
        return records, self.partition(records)

    def apply(self, input_key, input_value):
        """Call the user's map function once and normalize its output"""
        return [KeyValue(*pair) for pair in self.map_function(input_key, input_value)]

    def partition(self, records):
        """Partition the intermediate records"""
        return self.partitioner.partition_records(records)


# Example map function for word count
def word_count_map(filename, contents):
    """Map function for word count

    Args:
        filename: Name of the file
        contents: Contents of the file

    Yields:
        (word, "1") pairs
    """
    for word in contents.split():
        yield KeyValue(word, '1')
