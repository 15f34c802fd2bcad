import pytest

from mrshuffle.utils.codec import KeyValue, write_records
from mrshuffle.utils.config import ExecutorConfig
from mrshuffle.worker.executor import TaskExecutor


@pytest.fixture
def config(tmp_path):
    return ExecutorConfig(intermediate_dir=str(tmp_path / "intermediate"))


@pytest.fixture
def executor(config):
    return TaskExecutor(config=config)


@pytest.fixture
def write_input(tmp_path):
    """Write an input shard and return its path."""
    def _write(name, contents):
        path = tmp_path / name
        path.write_text(contents, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def write_intermediate(executor):
    """Write records as map task `map_task` would have for `reduce_task`."""
    def _write(job_name, map_task, reduce_task, pairs):
        path = executor.intermediate_manager.reduce_name(job_name, map_task, reduce_task)
        with open(path, "a", encoding="utf-8") as f:
            write_records(f, [KeyValue(k, v) for k, v in pairs])
        return path
    return _write
