import pytest

from objmarshal.conf.get_settings import CONFIG_YAML_ENV_VAR, reset_settings


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    # every test starts from the defaults, tests that need a config file set the env var themselves
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR, raising=False)
    reset_settings()
    yield
    reset_settings()
