import pytest

from tarsplit.config import AppConfig, get_config, get_settings, load_config
from tarsplit.libs.tar_archive import ConfigurationError


def test_defaults():
    config = get_config()
    assert config.limits.min_archive_size == 1024
    assert config.limits.min_num_chunks == 2
    assert config.archive.format == "pax"
    assert config.archive.default_prefix == "split"


def test_repository_default_config_loads():
    config = load_config("default")
    assert config == AppConfig()


def test_load_config_from_directory(tmp_path):
    (tmp_path / "prod.yaml").write_text(
        "limits:\n  min_archive_size: 4096\narchive:\n  format: gnu\n", encoding="utf-8"
    )

    config = load_config("prod", config_dir=tmp_path)

    assert config.limits.min_archive_size == 4096
    assert config.archive.format == "gnu"
    assert get_config() is config


@pytest.mark.parametrize("content", [
    "limits:\n  min_archive_size: 0\n",
    "archive:\n  format: zip\n",
    "limits: [unclosed\n",
])
def test_invalid_config_is_rejected(tmp_path, content):
    (tmp_path / "bad.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config("bad", config_dir=tmp_path)


def test_missing_config(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config("absent", config_dir=tmp_path)


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TARSPLIT_ENVIRONMENT", "staging")
    monkeypatch.setenv("TARSPLIT_CONFIG_DIR", str(tmp_path))

    settings = get_settings()

    assert settings.environment == "staging"
    assert settings.config_dir == tmp_path
