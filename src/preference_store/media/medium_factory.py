"""Create key-value media from configuration"""

import functools
from typing import Callable

from ..common.config_validation import validate_config_block
from ..common.exceptions import InitializationError
from ..common.log import log
from . import medium_file, medium_memory, medium_s3, medium_sql
from .medium import KeyValueMedium

MEDIUM_MODULES = {
    "memory": medium_memory,
    "file": medium_file,
    "sql": medium_sql,
    "aws_s3": medium_s3,
}


def get_medium_class(medium_type: str) -> type:
    """Return the medium class registered for medium_type."""
    module = MEDIUM_MODULES.get(medium_type)
    if module is None:
        raise InitializationError(
            f"Unsupported medium type: {medium_type}. "
            f"Supported types are: {', '.join(sorted(MEDIUM_MODULES))}"
        )
    return getattr(module, module.info["class_name"])


def validate_storage_config(config: dict) -> dict:
    """Check a ``storage:`` block and return its medium config with defaults applied."""
    if not isinstance(config, dict) or "medium_type" not in config:
        raise InitializationError("Storage configuration requires a 'medium_type'")
    medium_type = config["medium_type"]
    get_medium_class(medium_type)
    return validate_config_block(
        config.get("medium_config", {}),
        MEDIUM_MODULES[medium_type].info["config_parameters"],
        f"[medium:{medium_type}]",
    )


def medium_factory(config: dict) -> Callable[[], KeyValueMedium]:
    """Validate the storage config now and return a callable that opens the medium.

    Configuration errors surface here; failures to open the medium surface
    when the returned callable is invoked.
    """
    medium_config = validate_storage_config(config)
    medium_class = get_medium_class(config["medium_type"])
    log.debug("Configured %s medium", config["medium_type"])
    return functools.partial(medium_class, medium_config)


def create_medium(config: dict) -> KeyValueMedium:
    """Factory method to create and open a medium of the configured type."""
    return medium_factory(config)()
