from datetime import datetime

from ..framework.mapper import MapPhase
from ..framework.reducer import ReducePhase
from ..framework.shuffler import ShufflePhase
from ..utils.codec import RecordDecodeError, RecordEncodeError
from ..utils.config import ExecutorConfig
from ..utils.partitioner import Partitioner, ihash
from .errors import (
    InputReadError,
    IntermediateDecodeError,
    IntermediateEncodeError,
    IntermediateMissingError,
    IntermediateOpenError,
    OutputEncodeError,
    OutputOpenError,
    TaskResult,
    TaskState,
)
from .intermediate import IntermediateFileManager


class TaskExecutor:
    """Executes single map and reduce tasks.

    Based on Google MapReduce paper:
    - Map tasks: Apply map function, partition output into R intermediate files
    - Reduce tasks: Read one intermediate file per map task, group and sort
      by key, apply reduce function, write one sorted output file

    Map task m only writes files (job, m, *); reduce task r only reads
    files (job, *, r) and writes its own output file, so concurrent tasks
    of one job never touch the same file.
    """

    def __init__(self, config=None, namer=None, hash_function=ihash):
        """Initialize executor.

        Args:
            config: ExecutorConfig (default: ExecutorConfig())
            namer: Optional function(job_name, map_task, reduce_task) -> path
            hash_function: Key hash shared by every map task of a job
        """
        self.config = config or ExecutorConfig()
        self.hash_function = hash_function
        self.intermediate_manager = IntermediateFileManager(
            base_dir=self.config.intermediate_dir,
            namer=namer
        )

    def _abort(self, result, error):
        result.failed_in = result.state
        result.state = TaskState.ABORTED
        result.error = error
        reason = error if error is not None else "user callback raised"
        print(f"[{datetime.now()}] {result.label} aborted while {result.failed_in.value}: {reason}")
        return result

    def _complete(self, result):
        result.state = TaskState.COMPLETED
        print(f"[{datetime.now()}] {result.label} completed "
              f"({result.records_written} records, {len(result.output_files)} files)")
        return result

    def execute_map(self, job_name, map_task, input_file, num_reduce_tasks, map_function):
        """Execute a map task.

        1. Read the whole input file
        2. Apply user's map function to (input_file, contents), exactly once
        3. Partition output into R buckets using ihash(key) mod R
        4. Append each non-empty bucket to its intermediate file

        Returns:
            TaskResult; output_files lists the intermediate files written
        """
        partitioner = Partitioner(num_reduce_tasks, self.hash_function)
        map_phase = MapPhase(map_function, partitioner)
        manager = self.intermediate_manager
        overwrite = self.config.overwrite

        result = TaskResult('map', job_name, map_task)
        print(f"[{datetime.now()}] Executing {result.label} on {input_file} (R={num_reduce_tasks})")

        result.state = TaskState.READING
        try:
            contents = manager.read_input(input_file)
        except (OSError, UnicodeDecodeError) as e:
            return self._abort(result, InputReadError(
                f"Cannot read input file {input_file}: {e}", path=input_file, cause=e))

        result.state = TaskState.PROCESSING
        try:
            records = map_phase.apply(input_file, contents)
        except Exception:
            self._abort(result, None)
            raise

        if not records:
            result.empty_output = True
            print(f"[{datetime.now()}] {result.label}: map function produced no records")
            if not overwrite:
                return self._complete(result)

        try:
            partitions = map_phase.partition(records)
        except (TypeError, UnicodeEncodeError) as e:
            return self._abort(result, IntermediateEncodeError(
                f"Cannot partition map output: {e}", cause=e))

        result.state = TaskState.WRITING
        for reduce_task, bucket in enumerate(partitions):
            # In overwrite mode empty buckets are still written so a rerun
            # never leaves stale records behind.
            if not bucket and not overwrite:
                continue

            file_path = manager.reduce_name(job_name, map_task, reduce_task)
            try:
                written = manager.write_records(file_path, bucket, overwrite=overwrite)
            except RecordEncodeError as e:
                return self._abort(result, IntermediateEncodeError(
                    f"Cannot encode record into {file_path}: {e}", path=file_path, cause=e))
            except OSError as e:
                return self._abort(result, IntermediateOpenError(
                    f"Cannot open intermediate file {file_path}: {e}", path=file_path, cause=e))

            result.output_files.append(file_path)
            result.records_written += written
            print(f"[{datetime.now()}] {result.label}: wrote {written} records to {file_path}")

        return self._complete(result)

    def execute_reduce(self, job_name, reduce_task, output_file, num_map_tasks, reduce_function):
        """Execute a reduce task.

        1. Read intermediate file (job, m, reduce_task) for every map task m
        2. Group values by key, in map-task then file order (shuffle)
        3. Sort keys byte-wise
        4. Apply reduce function once per key, writing each result to output_file

        Returns:
            TaskResult; output_files holds output_file on success
        """
        if isinstance(num_map_tasks, bool) or not isinstance(num_map_tasks, int) or num_map_tasks < 0:
            raise ValueError(f"num_map_tasks must be a non-negative integer, got {num_map_tasks!r}")

        manager = self.intermediate_manager
        shuffle_phase = ShufflePhase()
        reduce_phase = ReducePhase(reduce_function)

        result = TaskResult('reduce', job_name, reduce_task)
        print(f"[{datetime.now()}] Executing {result.label} over {num_map_tasks} map outputs")

        result.state = TaskState.READING
        for map_task in range(num_map_tasks):
            file_path = manager.reduce_name(job_name, map_task, reduce_task)
            try:
                records = manager.read_intermediate_file(file_path)
            except FileNotFoundError as e:
                if self.config.skip_missing:
                    print(f"[{datetime.now()}] {result.label}: skipping missing {file_path}")
                    continue
                return self._abort(result, IntermediateMissingError(
                    f"Intermediate file not found: {file_path}", path=file_path, cause=e))
            except OSError as e:
                return self._abort(result, IntermediateOpenError(
                    f"Cannot open intermediate file {file_path}: {e}", path=file_path, cause=e))
            except (RecordDecodeError, UnicodeDecodeError) as e:
                return self._abort(result, IntermediateDecodeError(
                    f"Cannot decode {file_path}: {e}", path=file_path, cause=e))

            shuffle_phase.add_records(records)

        result.state = TaskState.PROCESSING
        sorted_data = shuffle_phase.sort_by_key()

        result.state = TaskState.WRITING
        try:
            written = manager.write_records(
                output_file,
                reduce_phase.iter_results(sorted_data),
                overwrite=self.config.overwrite
            )
        except RecordEncodeError as e:
            return self._abort(result, OutputEncodeError(
                f"Cannot encode output record into {output_file}: {e}", path=output_file, cause=e))
        except OSError as e:
            return self._abort(result, OutputOpenError(
                f"Cannot open output file {output_file}: {e}", path=output_file, cause=e))
        except Exception:
            self._abort(result, None)
            raise

        result.output_files.append(output_file)
        result.records_written = written
        return self._complete(result)

    def cleanup(self, job_name, map_task, num_reduce_tasks):
        """Remove a map task's intermediate files before re-running it."""
        return self.intermediate_manager.cleanup_task_files(job_name, map_task, num_reduce_tasks)


def do_map(job_name, map_task, input_file, num_reduce_tasks, map_function, config=None, namer=None):
    """Run one map task with a fresh executor."""
    executor = TaskExecutor(config=config, namer=namer)
    return executor.execute_map(job_name, map_task, input_file, num_reduce_tasks, map_function)


def do_reduce(job_name, reduce_task, output_file, num_map_tasks, reduce_function, config=None, namer=None):
    """Run one reduce task with a fresh executor."""
    executor = TaskExecutor(config=config, namer=namer)
    return executor.execute_reduce(job_name, reduce_task, output_file, num_map_tasks, reduce_function)
