from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from textstore_lib.config import load_settings


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for applications embedding the store.

    Reads `log_level` from the store settings file and reconfigures the
    root logger with it. A missing or unparsable file leaves the level at
    WARNING. Returns a module logger for the caller.
    """
    DEFAULT_LOG_LEVEL = logging.WARNING
    try:
        _lvl = load_settings(config_path).log_level
        _numeric = getattr(logging, _lvl.upper(), None)
        if isinstance(_numeric, int):
            DEFAULT_LOG_LEVEL = _numeric
    except Exception:
        # If config parse fails, fall back to default level
        logging.getLogger(__name__).exception('Failed to load store settings for logging setup')

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('azure').setLevel(logging.WARNING)
    logging.getLogger('azure.core.pipeline.policies.http_logging_policy').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logger.info("Log level set to %s", logging.getLevelName(DEFAULT_LOG_LEVEL))

    return logger
