"""Tests for config module."""

import json

import pytest

from devmind.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DevMindConfig,
    get_api_key,
    load_config,
    save_config,
)
from devmind.exceptions import ConfigError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DevMind/OpenAI environment overrides."""
    for name in (
        "DEVMIND_DATA_FILE",
        "DEVMIND_BASE_URL",
        "DEVMIND_MODEL",
        "DEVMIND_API_KEY",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDevMindConfig:
    """Tests for DevMindConfig dataclass."""

    def test_defaults(self):
        """Test default values."""
        config = DevMindConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.model == DEFAULT_MODEL
        assert config.require_non_empty_code is True
        assert config.search_code is True
        assert config.data_file.endswith("devmind_data.json")

    def test_data_file_expansion(self):
        """Test that ~ is expanded in data_file."""
        config = DevMindConfig(data_file="~/snips/data.json")
        assert not config.data_file.startswith("~")
        assert config.data_path.name == "data.json"

    def test_to_dict_omits_api_key(self):
        """The API key is never written to the config file."""
        config = DevMindConfig(api_key="sk-secret")
        data = config.to_dict()
        assert "api_key" not in data
        assert "sk-secret" not in json.dumps(data)

    def test_from_dict(self):
        """Test deserialization from dict."""
        config = DevMindConfig.from_dict({"model": "local-model", "require_non_empty_code": False})
        assert config.model == "local-model"
        assert config.require_non_empty_code is False
        assert config.base_url == DEFAULT_BASE_URL


class TestLoadConfig:
    """Tests for load_config/save_config."""

    def test_missing_file_gives_defaults(self, tmp_path, clean_env):
        """No config file means defaults."""
        config = load_config(tmp_path / "config.json")
        assert config.model == DEFAULT_MODEL
        assert config.api_key == ""

    def test_round_trip(self, tmp_path, clean_env):
        """Saved config loads back."""
        path = tmp_path / "nested" / "config.json"
        save_config(DevMindConfig(model="m1", search_code=False), path)

        config = load_config(path)
        assert config.model == "m1"
        assert config.search_code is False

    def test_invalid_json(self, tmp_path, clean_env):
        """Broken JSON raises ConfigError."""
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config(path)

    @pytest.mark.parametrize("value", ['"false"', "0", "null"])
    def test_non_boolean_flag(self, tmp_path, clean_env, value):
        """Flags must be JSON booleans, not truthy strings or numbers."""
        path = tmp_path / "config.json"
        path.write_text('{"search_code": %s}' % value)

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "search_code" in exc_info.value.message

    def test_non_object_json(self, tmp_path, clean_env):
        """A JSON list is not a config."""
        path = tmp_path / "config.json"
        path.write_text("[]")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_env_overrides(self, tmp_path, clean_env):
        """Environment variables win over the file."""
        path = tmp_path / "config.json"
        save_config(DevMindConfig(model="from-file"), path)
        clean_env.setenv("DEVMIND_MODEL", "from-env")
        clean_env.setenv("DEVMIND_DATA_FILE", str(tmp_path / "snips.json"))
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")

        config = load_config(path)
        assert config.model == "from-env"
        assert config.data_file == str(tmp_path / "snips.json")
        assert config.api_key == "sk-openai"

    def test_devmind_key_preferred(self, tmp_path, clean_env):
        """DEVMIND_API_KEY wins over OPENAI_API_KEY."""
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")
        clean_env.setenv("DEVMIND_API_KEY", "sk-devmind")
        assert load_config(tmp_path / "none.json").api_key == "sk-devmind"


class TestGetApiKey:
    """Tests for get_api_key."""

    def test_missing_key(self, clean_env):
        """No key anywhere raises ConfigError with a hint."""
        with pytest.raises(ConfigError) as exc_info:
            get_api_key(DevMindConfig())
        assert "hint" in exc_info.value.details

    def test_key_from_config(self, clean_env):
        """A key on the config is used."""
        assert get_api_key(DevMindConfig(api_key="sk-1")) == "sk-1"
