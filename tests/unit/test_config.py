import logging

import pytest
from pydantic import ValidationError

from textstore_lib.config import StoreSettings, load_settings
from textstore_lib.logging_config import configure_logging

AZURE_ENV = ('AZURE_STORAGE_CONNECTION_STRING', 'AZURE_STORAGE_ACCOUNT_URL', 'AZURE_STORAGE_ACCOUNT_KEY')


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in AZURE_ENV:
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path):
    s = load_settings(tmp_path / 'nope.yml')
    assert s == StoreSettings()
    assert s.backend == 'memory'
    assert s.namespace == 'versioned-text'


def test_yaml_file_is_loaded(tmp_path):
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('backend: file\nnamespace: dash\ndata_dir: /tmp/x\nlog_level: debug\n', encoding='utf-8')
    s = load_settings(cfg)
    assert s.backend == 'file'
    assert s.namespace == 'dash'
    assert s.data_dir == '/tmp/x'
    assert s.log_level == 'debug'


def test_environment_fills_azure_credentials(tmp_path, monkeypatch):
    monkeypatch.setenv('AZURE_STORAGE_CONNECTION_STRING', 'UseDevelopmentStorage=true')
    monkeypatch.setenv('AZURE_STORAGE_ACCOUNT_URL', 'https://acct.blob.core.windows.net')
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('backend: azure\naccount_url: https://other.blob.core.windows.net\n', encoding='utf-8')
    s = load_settings(cfg)
    assert s.connection_string == 'UseDevelopmentStorage=true'
    # the file wins over the environment
    assert s.account_url == 'https://other.blob.core.windows.net'


def test_invalid_backend_is_rejected(tmp_path):
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('backend: s3\n', encoding='utf-8')
    with pytest.raises(ValidationError):
        load_settings(cfg)


def test_non_mapping_file_is_rejected(tmp_path):
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('- a\n- b\n', encoding='utf-8')
    with pytest.raises(ValueError):
        load_settings(cfg)


def test_configure_logging_uses_configured_level(tmp_path):
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('log_level: DEBUG\n', encoding='utf-8')
    configure_logging(cfg)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger('azure').level == logging.WARNING


def test_configure_logging_falls_back_to_warning(tmp_path):
    cfg = tmp_path / 'textstore.yml'
    cfg.write_text('backend: [unterminated\n', encoding='utf-8')
    configure_logging(cfg)
    assert logging.getLogger().level == logging.WARNING
