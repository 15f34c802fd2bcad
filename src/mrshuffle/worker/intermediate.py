import os

from ..utils.codec import decode_records, write_records


class IntermediateFileManager:
    """Names, writes and reads intermediate and output files.

    Writes either append (creating the file if absent) or atomically replace
    the file via a temporary sibling. Reads are always whole-file.
    """

    def __init__(self, base_dir='./intermediate', namer=None):
        """
        Args:
            base_dir: Directory for default-named files
            namer: Optional function(job_name, map_task, reduce_task) -> path
                   replacing the default intermediate file naming
        """
        self.base_dir = base_dir
        self.namer = namer
        if namer is None:
            os.makedirs(base_dir, exist_ok=True)

    def reduce_name(self, job_name, map_task, reduce_task):
        """Intermediate file written by map_task for reduce_task"""
        if self.namer is not None:
            return self.namer(job_name, map_task, reduce_task)
        return os.path.join(self.base_dir, f"mrtmp.{job_name}-{map_task}-{reduce_task}")

    def merge_name(self, job_name, reduce_task):
        """Output file of a reduce task"""
        return os.path.join(self.base_dir, f"mrtmp.{job_name}-res-{reduce_task}")

    def result_name(self, job_name):
        """Final merged output of a job"""
        return os.path.join(self.base_dir, f"mrtmp.{job_name}")

    def read_input(self, filepath):
        """Read a whole input file as text, line endings untouched"""
        with open(filepath, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def read_intermediate_file(self, filepath):
        """Read and decode every record of an intermediate file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            return decode_records(f.read())

    def append_records(self, filepath, records):
        """Append records to a file, creating it if absent

        Returns:
            Number of records written
        """
        with open(filepath, 'a', encoding='utf-8') as f:
            return write_records(f, records)

    def replace_records(self, filepath, records):
        """Write records to a temporary file, then atomically rename it over filepath

        On failure the temporary file is removed and filepath is untouched.
        """
        temp_path = f"{filepath}.tmp-{os.getpid()}"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                count = write_records(f, records)
            os.replace(temp_path, filepath)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        return count

    def write_records(self, filepath, records, overwrite=False):
        if overwrite:
            return self.replace_records(filepath, records)
        return self.append_records(filepath, records)

    def cleanup_task_files(self, job_name, map_task, num_reduce_tasks):
        """Remove the intermediate files a map task wrote

        Returns:
            List of removed file paths
        """
        removed = []
        for reduce_task in range(num_reduce_tasks):
            filepath = self.reduce_name(job_name, map_task, reduce_task)
            if os.path.exists(filepath):
                os.remove(filepath)
                removed.append(filepath)
        return removed
