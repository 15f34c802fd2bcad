from ..utils.codec import KeyValue


class ReducePhase:
    """Handles the reduce phase of MapReduce"""

    def __init__(self, reduce_function):
        """
        Args:
            reduce_function: User-defined reduce function(key, values) -> str
        """
        self.reduce_function = reduce_function

    def iter_results(self, sorted_data):
        """Lazily apply the reduce function, once per key, in the given order

        Args:
            sorted_data: List of (key, [values]) tuples

        Yields:
            KeyValue(key, reduced_value)
        """
        for key, values in sorted_data:
            yield KeyValue(key, self.reduce_function(key, values))

    def execute(self, sorted_data):
        """Execute reduce function on sorted data

        Returns:
            List of KeyValue records in input order
        """
        return list(self.iter_results(sorted_data))


# Example reduce function for word count
def word_count_reduce(word, counts):
    """Reduce function for word count

    Args:
        word: The word
        counts: List of counts (all "1"s)

    Returns:
        Total count, as text
    """
    return str(sum(int(c) for c in counts))
