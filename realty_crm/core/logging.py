"""
Logging configuration for the application.

Sets up one consistent line format so logs are easy to search/filter.
"""

import logging
import sys
from typing import Any


_HANDLER_NAME = "realty_crm.stdout"


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the entire application.

    Parameters:
    - debug: If True, show ALL messages (DEBUG and above)
             If False, only show INFO level and above

    Calling this more than once only updates the level; the stdout
    handler is installed a single time.
    """

    # Choose how detailed our logs should be
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        return

    # %(name)s = which part of app logged this (e.g., "realty_crm.api.contacts")
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {logging.getLevelName(log_level)} level")


def with_context(logger: logging.Logger, **context: Any) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that injects correlation context like contact_id or collection.

    Usage:
        log = with_context(logging.getLogger(__name__), contact_id="ab12", collection="contacts")
        log.info("Removing contact")
    """
    class ContextAdapter(logging.LoggerAdapter):
        def process(self, msg, kwargs):
            extra = kwargs.get("extra", {})
            merged = {**context, **extra}
            kwargs["extra"] = merged
            # Prefix message with keys for easy grep
            tags = " ".join(f"{k}={v}" for k, v in merged.items() if v is not None)
            return (f"[{tags}] {msg}" if tags else msg, kwargs)

    return ContextAdapter(logger, {})
