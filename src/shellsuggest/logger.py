"""Logging configuration for shellsuggest using loguru.

Two file sinks live in the state directory:

- ``shellsuggest.log``: everything at the configured level
- ``protocol.log``: optional DEBUG trace of the shell traffic (OSC scanning,
  message decoding, trigger sequences, request resolution), enabled with
  ``trace=True`` or ``SHELLSUGGEST_TRACE``

Every module logs through ``get_logger("<area>.<module>")`` and the bound
name is what the sinks print and filter on.
"""

import os
import sys
from loguru import logger
from typing import Optional

from shellsuggest.utils import env_flag, get_state_dir

LOG_FILE_NAME = "shellsuggest.log"
TRACE_FILE_NAME = "protocol.log"

# Loggers whose output makes up the protocol trace
PROTOCOL_LOGGERS = ("terminal.osc", "suggest.wire", "suggest.correlator", "suggest.single_flight", "suggest.provider")

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_log_file_path: Optional[str] = None

logger.configure(extra={"name": "shellsuggest"})


def _resolve(path: str) -> str:
    if os.path.isabs(path):
        return path
    return str(get_state_dir() / path)


def is_protocol_record(record) -> bool:
    """True for records emitted by one of the ``PROTOCOL_LOGGERS``."""
    return record["extra"].get("name", "") in PROTOCOL_LOGGERS


def setup_logger(
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    console_output: bool = False,
    trace: Optional[bool] = None,
    trace_file: str = TRACE_FILE_NAME,
) -> None:
    """
    Configure the loguru sinks.

    Args:
        log_file: Log file path, relative paths land in the state directory
            (if None, uses the previously configured path or the default)
        log_level: Level of the main sinks, defaults to ``SHELLSUGGEST_LOG_LEVEL`` or INFO
        rotation: Log rotation size
        retention: How long to keep old logs
        compression: Compression format for old logs
        console_output: Whether to also log to stderr
        trace: Write the protocol trace, defaults to ``SHELLSUGGEST_TRACE``
        trace_file: Protocol trace path, relative paths land in the state directory
    """
    global _log_file_path

    if log_file is None:
        if _log_file_path is None:
            _log_file_path = _resolve(LOG_FILE_NAME)
        log_file = _log_file_path
    else:
        log_file = _resolve(log_file)
        _log_file_path = log_file

    level = (log_level or os.getenv("SHELLSUGGEST_LOG_LEVEL", "INFO")).upper()
    if trace is None:
        trace = env_flag("SHELLSUGGEST_TRACE", False)

    logger.remove()

    if console_output:
        logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    logger.add(
        log_file,
        level=level,
        format=_FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        compression=compression,
        encoding="utf-8",
    )

    if trace:
        logger.add(
            _resolve(trace_file),
            level="DEBUG",
            format="{time:HH:mm:ss.SSS} | {extra[name]: <22} | {message}",
            filter=is_protocol_record,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )


def get_logger(name: Optional[str] = None):
    """
    Get a logger bound to a component name.

    Args:
        name: Component name such as ``"suggest.wire"``

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


setup_logger()
