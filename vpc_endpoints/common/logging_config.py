"""
Logging for synthesis runs of the endpoint constructs and stacks.

Every module under ``vpc_endpoints`` obtains its logger through
``get_logger(__name__)``. The level of a module logger is decided in this
order:

1. ``LOG_LEVEL`` set in the environment applies to every module.
2. ``LOG_LEVEL_<MODULE>`` (the dotted module name upper-cased, dots
   replaced by underscores) applies to that module only.
3. The module's entry in ``MODULE_LOG_LEVELS``.
4. ``DEFAULT_LOG_LEVEL``.

Passing ``-c debug=true`` to ``cdk synth`` calls ``configure_debug_logging``.
"""

import logging
import os
import sys
from typing import Optional

PACKAGE_LOGGER = "vpc_endpoints"

DEFAULT_LOG_LEVEL = "INFO"
DEBUG_LOG_LEVEL = "DEBUG"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Subnet resolution and policy checks are chatty at DEBUG, so they start at INFO.
# Validators only log rejections, which are warnings.
MODULE_LOG_LEVELS = {
    "vpc_endpoints.common.validators": "WARNING",
    "vpc_endpoints.endpoints.subnets": "INFO",
    "vpc_endpoints.endpoints.policy": "INFO",
    "vpc_endpoints.endpoints.gateway": "INFO",
    "vpc_endpoints.endpoints.interface": "INFO",
    "vpc_endpoints.endpoints.references": "INFO",
    "vpc_endpoints.endpoints.network": "INFO",
    "vpc_endpoints.vpc.stack": "INFO",
    "vpc_endpoints.consumer.stack": "INFO",
}


def module_env_var(module_name: str) -> str:
    """Name of the environment variable overriding the level of one module."""
    return f"{LOG_LEVEL_ENV_VAR}_{module_name.replace('.', '_').upper()}"


def get_log_level(module_name: Optional[str] = None) -> str:
    """
    Resolve the level name for a module.

    Args:
        module_name: Dotted module name, or None for the default level

    Returns:
        Upper-case level name such as INFO or DEBUG
    """
    level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if not level and module_name:
        level = os.environ.get(module_env_var(module_name), MODULE_LOG_LEVELS.get(module_name))
    return (level or DEFAULT_LOG_LEVEL).upper()


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO


def get_logger(module_name: str) -> logging.Logger:
    """
    Return the logger of a module with its resolved level applied.

    Args:
        module_name: Dotted module name, normally ``__name__``
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(_level_number(get_log_level(module_name)))
    return logger


def setup_logging(level: Optional[str] = None,
                  module_name: Optional[str] = None,
                  format_string: Optional[str] = None) -> logging.Logger:
    """
    Attach a stderr handler to the root logger once and return a logger.

    Called by ``app.py`` before any stack is built. Later calls reuse the
    existing handler and only adjust the returned logger's level.

    Args:
        level: Explicit level for the returned logger
        module_name: Name of the returned logger
        format_string: Record format for the stderr handler

    Returns:
        The logger named ``module_name``
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
        root.addHandler(handler)
        root.setLevel(_level_number(level or get_log_level()))

    logger = get_logger(module_name or PACKAGE_LOGGER)
    if level:
        logger.setLevel(_level_number(level))
    return logger


def configure_debug_logging() -> None:
    """Switch the package's loggers, and any created later, to DEBUG."""
    os.environ[LOG_LEVEL_ENV_VAR] = DEBUG_LOG_LEVEL
    logging.getLogger().setLevel(logging.DEBUG)
    for name in list(logging.Logger.manager.loggerDict):
        if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}.") or name == "app":
            logging.getLogger(name).setLevel(logging.DEBUG)
