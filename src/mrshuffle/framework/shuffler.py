from collections import defaultdict


def byte_order(key):
    """Sort key giving byte-wise (UTF-8) ordering of strings."""
    return key.encode('utf-8', 'surrogatepass')


class ShufflePhase:
    """Handles the shuffle phase - grouping intermediate data and sorting keys"""

    def __init__(self):
        self.grouped_data = defaultdict(list)

    def add_records(self, records):
        """Append each record's value onto its key's group, in encounter order"""
        for record in records:
            self.grouped_data[record.Key].append(record.Value)

    def group(self, record_batches):
        """Group values by key across batches

        Args:
            record_batches: Iterable of record lists, one per intermediate file,
                            in ascending map-task order

        Returns:
            Dict of {key: [value1, value2, ...]}
        """
        for records in record_batches:
            self.add_records(records)
        return dict(self.grouped_data)

    def sort_by_key(self, grouped_data=None):
        """Sort grouped data by key

        Args:
            grouped_data: Dict of {key: [values]} (defaults to what was grouped so far)

        Returns:
            List of (key, [values]) tuples sorted byte-wise by key
        """
        if grouped_data is None:
            grouped_data = self.grouped_data
        return sorted(grouped_data.items(), key=lambda item: byte_order(item[0]))
