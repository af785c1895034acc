"""Load YAML configuration files for the preference store."""

import os
import re

import yaml

from .common.exceptions import InitializationError


def load_config(file):
    """Load configuration from a YAML file."""
    file_dir = os.path.dirname(os.path.abspath(file))
    try:
        yaml_str = process_includes(file, file_dir)
        yaml_str = expandvars_with_defaults(yaml_str)
        config = yaml.safe_load(yaml_str)
    except (OSError, yaml.YAMLError) as e:
        raise InitializationError(f"Error loading configuration file '{file}'") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise InitializationError(
            f"Configuration file '{file}' must contain a mapping at the top level"
        )
    return config


def process_includes(file_path, base_dir):
    """Process !include directives in the given file."""
    with open(file_path, "r", encoding="utf8") as f:
        content = f.read()

    def include_repl(match):
        indent = match.group(1).replace("\n", "")
        include_path = match.group(2).strip("'\"")
        full_path = os.path.join(base_dir, include_path)
        if not os.path.exists(full_path):
            raise FileNotFoundError(f"Included file not found: {include_path}")
        included_content = process_includes(full_path, os.path.dirname(full_path))
        return "\n".join(indent + line for line in included_content.splitlines())

    include_pattern = re.compile(
        r'^([ \t]*)!include\s+(["\']?[^"\s\']+)["\']?', re.MULTILINE
    )
    return include_pattern.sub(include_repl, content)


def expandvars_with_defaults(text):
    """Expand environment variables with support for default values.
    Supported syntax: ${VAR_NAME} or ${VAR_NAME, default_value}"""
    pattern = re.compile(r"\$\{([^}:\s]+)(?:\s*,\s*([^}]*))?\}")

    def replacer(match):
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return pattern.sub(replacer, text)


def merge_config(dict1, dict2):
    """Merge a new configuration into an existing configuration.

    Lists are concatenated, nested mappings are merged, anything else is
    taken from the second configuration.
    """
    merged = {}
    for key in set(dict1.keys()).union(dict2.keys()):
        if key in dict1 and key in dict2:
            if isinstance(dict1[key], list) and isinstance(dict2[key], list):
                merged[key] = dict1[key] + dict2[key]
            elif isinstance(dict1[key], dict) and isinstance(dict2[key], dict):
                merged[key] = merge_config(dict1[key], dict2[key])
            else:
                merged[key] = dict2[key]
        elif key in dict1:
            merged[key] = dict1[key]
        else:
            merged[key] = dict2[key]
    return merged


def load_configs(files):
    """Load and merge several configuration files, later files winning."""
    full_config = {}
    for file in files:
        if not os.path.exists(file):
            raise InitializationError(f"Configuration file '{file}' not found.")
        full_config = merge_config(full_config, load_config(file))
    return full_config
