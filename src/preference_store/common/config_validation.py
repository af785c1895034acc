"""Validate configuration blocks against a medium's parameter schema."""

from typing import Any, Dict, List
from .exceptions import InitializationError
from .log import log


def validate_config_block(
    config_dict: Dict[str, Any], schema_params: List[Dict[str, Any]], log_identifier: str
) -> Dict[str, Any]:
    """
    Validates a configuration dictionary against a schema definition.

    Checks for required parameters and applies default values based on the
    schema. The input dictionary is left untouched.

    Args:
        config_dict: The configuration dictionary to validate.
        schema_params: Parameter schemas (a medium's ``info["config_parameters"]``).
                       Expected keys in each schema dict: 'name', 'required'
                       (optional, bool), 'default' (optional, any).
        log_identifier: A string identifier (e.g. the medium type) for messages.

    Returns:
        A new dictionary with defaults applied.

    Raises:
        InitializationError: If the block is not a mapping or a required
            parameter is missing.
    """
    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise InitializationError(
            f"{log_identifier}: configuration must be a mapping, got {type(config_dict).__name__}."
        )

    validated = dict(config_dict)
    for param_schema in schema_params:
        name = param_schema["name"]
        if name in validated:
            continue
        if param_schema.get("required", False):
            raise InitializationError(
                f"{log_identifier}: Required configuration parameter '{name}' is missing."
            )
        default = param_schema.get("default")
        if default is not None:
            log.debug(
                "%s Applying default value for parameter '%s': %s",
                log_identifier,
                name,
                default,
            )
            validated[name] = default
    return validated
