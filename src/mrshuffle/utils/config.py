import os
from dataclasses import dataclass


_TRUTHY = ('1', 'true', 'yes', 'on')


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class ExecutorConfig:
    """Settings for the map/reduce task executors.

    Attributes:
        intermediate_dir: Directory for default-named intermediate/output files
        overwrite: Replace target files atomically instead of appending,
                   which makes re-running a task safe
        skip_missing: Reduce treats a missing intermediate file as empty
    """
    intermediate_dir: str = './intermediate'
    overwrite: bool = False
    skip_missing: bool = False

    @classmethod
    def from_env(cls, **overrides):
        """Build config from MR_* environment variables, then explicit overrides."""
        config = cls(
            intermediate_dir=os.environ.get('MR_INTERMEDIATE_DIR', cls.intermediate_dir),
            overwrite=_env_flag('MR_OVERWRITE', cls.overwrite),
            skip_missing=_env_flag('MR_SKIP_MISSING', cls.skip_missing),
        )
        for name, value in overrides.items():
            if not hasattr(config, name):
                raise TypeError(f"Unknown config option: {name}")
            setattr(config, name, value)
        return config
