"""Store configuration.

Settings are read from a YAML file (default `data/config/textstore.yml`).
Azure credentials left empty in the file are filled from the usual
`AZURE_STORAGE_*` environment variables.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path('data/config/textstore.yml')

_ENV_FALLBACKS = {
    'connection_string': 'AZURE_STORAGE_CONNECTION_STRING',
    'account_url': 'AZURE_STORAGE_ACCOUNT_URL',
    'account_key': 'AZURE_STORAGE_ACCOUNT_KEY',
}


class StoreSettings(BaseModel):
    backend: Literal['memory', 'file', 'azure'] = 'memory'
    namespace: str = 'versioned-text'
    data_dir: str = './data'
    connection_string: Optional[str] = None
    account_url: Optional[str] = None
    account_key: Optional[str] = None
    log_level: str = 'WARNING'


def load_settings(config_path: Optional[Path] = None) -> StoreSettings:
    """Load settings from YAML, falling back to defaults when the file is absent.

    Raises `ValueError` when the file does not hold a mapping and
    `pydantic.ValidationError` when a value is invalid.
    """
    cfg_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    raw: dict = {}
    if cfg_path.exists():
        with cfg_path.open('r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{cfg_path}: expected a mapping, got {type(loaded).__name__}")
        raw = loaded
        logger.debug("Loaded store settings from %s", cfg_path)
    else:
        logger.debug("No settings file at %s; using defaults", cfg_path)

    for field, env_name in _ENV_FALLBACKS.items():
        if not raw.get(field):
            value = os.environ.get(env_name, '').strip()
            if value:
                raw[field] = value
    return StoreSettings.model_validate(raw)
