"""Configure logging from an external file named by LOGGING_CONFIG_PATH.

INI files go through ``logging.config.fileConfig``; anything else is parsed as
JSON, then YAML, and handed to ``logging.config.dictConfig``. Both forms allow
``${VAR}`` and ``${VAR, default}`` references to environment variables.
"""

import configparser
import json
import logging
import logging.config
import os
import re

import yaml

from .exceptions import InitializationError

LOGGING_CONFIG_ENV = "LOGGING_CONFIG_PATH"

logging_initialized = False

pattern = re.compile(r"\$\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*(?:,\s*([^}]+?)\s*)?\}")


def _replace(match: re.Match) -> str:
    name = match.group(1)
    default = match.group(2)

    val = os.getenv(name)
    if val is None:
        if default is None:
            raise ValueError(
                f"Environment variable '{name}' is not set and no default value provided in logging config."
            )
        return default
    return val


def _is_ini_format(content: str) -> bool:
    return bool(re.search(r"^\s*\[.+\]\s*$", content, re.MULTILINE))


def _parse_ini(config_path: str) -> configparser.ConfigParser:
    cp = configparser.ConfigParser(interpolation=None)
    cp.read(config_path)
    for section in cp.sections():
        for opt in cp.options(section):
            raw_val = cp.get(section, opt, raw=True)
            if raw_val is not None:
                cp.set(section, opt, pattern.sub(_replace, raw_val))
    return cp


def _parse_dict_config(config_path: str, content: str) -> dict:
    content = pattern.sub(_replace, content)
    try:
        return json.loads(content)
    except ValueError:
        pass
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise InitializationError(
            f"Logging configuration file '{LOGGING_CONFIG_ENV}={config_path}' could not be parsed. "
            "The configuration must be valid JSON or YAML."
        ) from e


def configure_from_file() -> bool:
    """Apply the logging configuration named by LOGGING_CONFIG_PATH.

    Returns:
        True if logging is configured from a file, False if the variable is unset.

    Raises:
        FileNotFoundError: The variable points at a missing file.
        InitializationError: The file exists but cannot be applied.
    """
    global logging_initialized
    if logging_initialized:
        return True

    config_path = os.getenv(LOGGING_CONFIG_ENV)
    if not config_path:
        return False

    if not os.path.exists(config_path):
        raise FileNotFoundError(
            f"{LOGGING_CONFIG_ENV} is set to '{config_path}', but the file was not found."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()

        if _is_ini_format(content):
            # disable_existing_loggers can't be set from an INI file
            logging.config.fileConfig(
                _parse_ini(config_path), disable_existing_loggers=False
            )
        else:
            logging.config.dictConfig(_parse_dict_config(config_path, content))
    except InitializationError:
        raise
    except Exception as e:
        raise InitializationError(
            f"Exception occurred while configuring logging from '{LOGGING_CONFIG_ENV}={config_path}'. "
            "Validate the logging configuration."
        ) from e

    logging.getLogger(__name__).info(
        "Root logger successfully configured based on %s=%s",
        LOGGING_CONFIG_ENV,
        config_path,
    )
    logging_initialized = True
    return True
