import logging
import logging.handlers
import json
import sys
from datetime import datetime
from ..common.exceptions import InitializationError

log = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "preference_store.log"


class JsonlFormatter(logging.Formatter):
    """
    Custom formatter to output logs in JSON Lines (JSONL) format.
    """

    def format(self, record):
        log_record = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        return json.dumps(log_record)


def validate_log_level(handler, level):
    """
    Validate and convert log level to numerical value.

    Args:
        handler (str): Name of the handler (for error messages)
        level (int or str): Log level as string (e.g., "INFO") or int (e.g., 20)

    Returns:
        int: Numerical log level value

    Raises:
        InitializationError: If level is invalid
    """
    # isinstance(True, int) is True, so reject booleans first
    if isinstance(level, bool):
        raise InitializationError(
            f"Invalid log level type '{type(level).__name__}' for '{handler}'. Must be int or str"
        )

    if isinstance(level, int):
        valid_numeric_levels = {10, 20, 30, 40, 50}
        if level in valid_numeric_levels:
            return level
        raise InitializationError(
            f"Invalid numeric log level '{level}' specified for '{handler}'. "
            "Valid levels are: 10 (DEBUG), 20 (INFO), 30 (WARNING), 40 (ERROR), 50 (CRITICAL)"
        )

    if isinstance(level, str):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level_upper = level.upper()
        if level_upper not in valid_levels:
            raise InitializationError(
                f"Invalid log level '{level}' specified for '{handler}'. "
                f"Valid levels are: {', '.join(sorted(valid_levels))}"
            )
        return logging.getLevelName(level_upper)

    raise InitializationError(
        f"Invalid log level type '{type(level).__name__}' for '{handler}'. Must be int or str"
    )


def convert_to_bytes(size_str):
    size_str = str(size_str).upper()
    size_units = {"KB": 1024, "MB": 1024**2, "GB": 1024**3, "TB": 1024**4, "B": 1}
    for unit in size_units:
        if size_str.endswith(unit):
            return int(size_str[: -len(unit)]) * size_units[unit]
    return int(size_str)


def _create_file_handler(logFilePath, logBack):
    rollingpolicy = (logBack or {}).get("rollingpolicy", {})
    if not rollingpolicy:
        return logging.FileHandler(filename=logFilePath, mode="a")

    if "file-name-pattern" not in rollingpolicy:
        log.warning(
            "file-name-pattern is required in rollingpolicy. Continuing with default value '{LOG_FILE}.%d{yyyy-MM-dd}.%i'."
        )
    file_name_pattern = rollingpolicy.get(
        "file-name-pattern", "{LOG_FILE}.%d{yyyy-MM-dd}.%i"
    )

    if "max-file-size" not in rollingpolicy:
        log.warning(
            "max-file-size is required in rollingpolicy. Continuing with default value '1GB'."
        )
    max_file_size = convert_to_bytes(rollingpolicy.get("max-file-size", "1GB"))

    if "max-history" not in rollingpolicy:
        log.warning(
            "max-history is required in rollingpolicy. Continuing with default value '7'."
        )
    max_history = rollingpolicy.get("max-history", 7)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=logFilePath,
        backupCount=max_history,
        maxBytes=max_file_size,
    )
    file_handler.namer = (
        lambda name: file_name_pattern.replace("{LOG_FILE}", logFilePath)
        .replace("%d{yyyy-MM-dd}", datetime.now().strftime("%Y-%m-%d"))
        .replace("%i", str(name.split(".")[-1]))
    )
    return file_handler


def setup_log(
    logFilePath,
    stdOutLogLevel,
    fileLogLevel,
    logFormat,
    logBack,
):
    """
    Set up the configuration for the root logger if logging was not yet configured.

    Parameters:
        logFilePath (str): Path to the log file.
        stdOutLogLevel (str or int): Logging level for standard output (e.g., "INFO" or 20).
        fileLogLevel (str or int): Logging level for the log file (e.g., "DEBUG" or 10).
        logFormat (str): Format of the log output ('jsonl' or 'pipe-delimited').
        logBack (dict): Rolling log file configuration.
    """
    stdout_numeric_level = validate_log_level("stdout_log_level", stdOutLogLevel)
    file_numeric_level = validate_log_level("log_file_level", fileLogLevel)

    root_logger = logging.getLogger()

    if root_logger.handlers:
        log.debug(
            "Logging configuration already applied, skipping setup_log(logFilePath=%s)",
            logFilePath,
        )
        return

    root_logger.setLevel(min(stdout_numeric_level, file_numeric_level))

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(stdout_numeric_level)
    stream_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    root_logger.addHandler(stream_handler)

    file_handler = _create_file_handler(logFilePath, logBack)
    if logFormat == "jsonl":
        file_formatter = JsonlFormatter()
    else:
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(file_numeric_level)
    root_logger.addHandler(file_handler)


def setup_log_from_config(log_config):
    """Configure logging from the ``log:`` block of a loaded configuration."""
    log_config = log_config or {}
    setup_log(
        log_config.get("log_file", DEFAULT_LOG_FILE),
        log_config.get("stdout_log_level", "INFO"),
        log_config.get("log_file_level", "INFO"),
        log_config.get("log_format", "pipe-delimited"),
        log_config.get("logback", {}),
    )
