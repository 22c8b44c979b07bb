import pytest
from pydantic import ValidationError

from objmarshal import DepthExceededError, InvalidConfigurationError, MarshalEncoder
from objmarshal.conf import MarshalSettings, get_global_settings
from objmarshal.conf.get_settings import CONFIG_YAML_ENV_VAR, get_settings_source, reset_settings
from objmarshal.consts import UNLIMITED_DEPTH


def _write_yaml(tmp_path, name, content):
    filepath = tmp_path / name
    filepath.write_text(content)
    return str(filepath)


def test_defaults():
    settings = get_global_settings()
    assert settings.DEPTH_LIMIT == UNLIMITED_DEPTH
    assert settings.MAX_OUTPUT_BYTES is None
    assert get_settings_source() is None


def test_settings_are_cached():
    assert get_global_settings() is get_global_settings()


def test_settings_are_frozen():
    settings = MarshalSettings()
    with pytest.raises(ValidationError):
        settings.DEPTH_LIMIT = 3


def test_unknown_field_is_rejected():
    with pytest.raises(ValidationError):
        MarshalSettings(UNKNOWN=1)


@pytest.mark.parametrize('kwargs', [
    dict(DEPTH_LIMIT=0),
    dict(DEPTH_LIMIT='3'),
    dict(MAX_OUTPUT_BYTES=1),
    dict(MAX_OUTPUT_BYTES=2.5),
])
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        MarshalSettings(**kwargs)


def test_from_yaml(tmp_path):
    filepath = _write_yaml(tmp_path, 'settings.yml', 'DEPTH_LIMIT: 5\nMAX_OUTPUT_BYTES: 1024\n')
    settings = MarshalSettings.from_yaml(filepath=filepath)
    assert settings.DEPTH_LIMIT == 5
    assert settings.MAX_OUTPUT_BYTES == 1024


def test_load_from_env_var(tmp_path, monkeypatch):
    filepath = _write_yaml(tmp_path, 'settings.yml', 'DEPTH_LIMIT: 1\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, filepath)
    assert get_global_settings().DEPTH_LIMIT == 1
    assert get_settings_source() == filepath

    # encoders without explicit settings pick up the loaded ones
    with pytest.raises(DepthExceededError):
        MarshalEncoder().dumps([[]])


def test_loading_a_different_file_raises(tmp_path, monkeypatch):
    first = _write_yaml(tmp_path, 'first.yml', 'DEPTH_LIMIT: 1\n')
    second = _write_yaml(tmp_path, 'second.yml', 'DEPTH_LIMIT: 2\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, first)
    get_global_settings()
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, second)
    with pytest.raises(InvalidConfigurationError, match='different file'):
        get_global_settings()

    reset_settings()
    assert get_global_settings().DEPTH_LIMIT == 2


def test_invalid_yaml_content(tmp_path, monkeypatch):
    filepath = _write_yaml(tmp_path, 'settings.yml', 'DEPTH_LIMIT: 0\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, filepath)
    with pytest.raises(InvalidConfigurationError, match='invalid settings'):
        get_global_settings()


def test_yaml_must_be_a_mapping(tmp_path, monkeypatch):
    filepath = _write_yaml(tmp_path, 'settings.yml', '- 1\n- 2\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, filepath)
    with pytest.raises(InvalidConfigurationError):
        get_global_settings()
