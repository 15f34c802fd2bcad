from datetime import datetime

from ..utils.codec import RecordDecodeError
from ..worker.errors import IntermediateDecodeError, OutputOpenError
from .shuffler import byte_order


def merge_outputs(job_name, num_reduce_tasks, manager, output_file=None, input_files=None):
    """Combine every reduce task's output into one sorted text file

    Each line of the result is "<key>: <value>".

    Args:
        job_name: Name of the job
        num_reduce_tasks: Number of reduce tasks (R) that ran
        manager: IntermediateFileManager that names the reduce outputs
        output_file: Destination (default: manager.result_name(job_name))
        input_files: Reduce output paths, one per reduce task. Defaults to
                     manager.merge_name(job_name, r) under the manager's base_dir,
                     which an injected namer does not affect.

    Returns:
        Path of the merged file
    """
    output_file = output_file or manager.result_name(job_name)
    merged = {}

    if input_files is None:
        input_files = [manager.merge_name(job_name, r) for r in range(num_reduce_tasks)]
    elif len(input_files) != num_reduce_tasks:
        raise ValueError(f"Expected {num_reduce_tasks} reduce outputs, got {len(input_files)}")

    for file_path in input_files:
        try:
            records = manager.read_intermediate_file(file_path)
        except OSError as e:
            raise OutputOpenError(
                f"Cannot open reduce output {file_path}: {e}", path=file_path, cause=e) from e
        except (RecordDecodeError, UnicodeDecodeError) as e:
            raise IntermediateDecodeError(
                f"Cannot decode reduce output {file_path}: {e}", path=file_path, cause=e) from e

        for record in records:
            merged[record.Key] = record.Value

    with open(output_file, 'w', encoding='utf-8') as f:
        for key in sorted(merged, key=byte_order):
            f.write(f"{key}: {merged[key]}\n")

    print(f"[{datetime.now()}] Merged {num_reduce_tasks} reduce outputs of {job_name} into {output_file}")
    return output_file
