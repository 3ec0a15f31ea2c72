import json

import pytest

from account_console.shared.config import ConsoleConfig, resolve_storage_dir


@pytest.mark.unit
def test_storage_dir_from_environment(isolated_storage):
    assert resolve_storage_dir() == isolated_storage


@pytest.mark.unit
def test_explicit_storage_dir_wins(tmp_path):
    assert resolve_storage_dir(tmp_path / "other") == tmp_path / "other"


@pytest.mark.unit
def test_defaults(isolated_storage):
    config = ConsoleConfig.load()
    assert config.storage_dir == isolated_storage
    assert config.export_dir == isolated_storage / "exports"
    assert config.net_version == "42"
    assert config.certification_url is None
    assert config.state_file == isolated_storage / "state.json"


@pytest.mark.unit
def test_save_and_load(tmp_path):
    config = ConsoleConfig.load(tmp_path)
    config.net_version = "1"
    config.certification_url = "http://certs.example.com"
    config.save()

    reloaded = ConsoleConfig.load(tmp_path)
    assert reloaded.net_version == "1"
    assert reloaded.certification_url == "http://certs.example.com"


@pytest.mark.unit
def test_environment_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"net_version": "1"}))
    monkeypatch.setenv("ACCOUNT_CONSOLE_NET_VERSION", "42")
    monkeypatch.setenv("ACCOUNT_CONSOLE_CERTIFICATION_URL", "http://localhost:8080")

    config = ConsoleConfig.load(tmp_path)

    assert config.net_version == "42"
    assert config.certification_url == "http://localhost:8080"


@pytest.mark.unit
def test_unreadable_config_uses_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{not json")
    assert ConsoleConfig.load(tmp_path).net_version == "42"


@pytest.mark.unit
def test_environment_network_is_recorded_as_override(tmp_path, monkeypatch):
    assert ConsoleConfig.load(tmp_path).net_version_override is None
    monkeypatch.setenv("ACCOUNT_CONSOLE_NET_VERSION", "1")
    assert ConsoleConfig.load(tmp_path).net_version_override == "1"
