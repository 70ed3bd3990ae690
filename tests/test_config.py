"""Tests for configuration file support."""

import sys
import warnings

import pytest

from ergogen_router.config import (
    Config,
    ConfigError,
    RouterConfig,
    _find_project_config,
    _load_toml_file,
    generate_template,
    get_config_paths,
)
from ergogen_router.primitives import RecordFormat


class TestConfigDataclasses:
    """Test configuration dataclass defaults."""

    def test_router_config_defaults(self):
        """RouterConfig has the router footprint defaults."""
        config = RouterConfig()
        assert config.width == 0.25
        assert config.via_size == 0.6
        assert config.via_drill == 0.3
        assert config.locked is False
        assert config.precision is None
        assert config.format == "kicad8"
        assert config.record_format is RecordFormat.KICAD8

    def test_config_defaults(self):
        """Config has correct nested defaults."""
        assert isinstance(Config().router, RouterConfig)


class TestConfigDiscovery:
    """Test config file discovery."""

    def test_find_project_config_in_current_dir(self, tmp_path):
        """Find config in current directory."""
        config_file = tmp_path / ".ergogen-router.toml"
        config_file.write_text("[router]\nwidth = 0.2\n")

        assert _find_project_config(tmp_path) == config_file

    def test_find_project_config_alternate_name(self, tmp_path):
        """Find config with alternate filename."""
        config_file = tmp_path / "ergogen-router.toml"
        config_file.write_text("[router]\n")

        assert _find_project_config(tmp_path) == config_file

    def test_find_project_config_prefers_hidden(self, tmp_path):
        """Hidden .ergogen-router.toml is preferred over ergogen-router.toml."""
        (tmp_path / "ergogen-router.toml").write_text("[router]\n")
        hidden = tmp_path / ".ergogen-router.toml"
        hidden.write_text("[router]\n")

        assert _find_project_config(tmp_path) == hidden

    def test_find_project_config_walks_up(self, tmp_path):
        """Find config by walking up directory tree."""
        parent_config = tmp_path / ".ergogen-router.toml"
        parent_config.write_text("[router]\n")

        subdir = tmp_path / "config" / "deep"
        subdir.mkdir(parents=True)

        assert _find_project_config(subdir) == parent_config

    def test_find_project_config_stops_at_git(self, tmp_path):
        """Stop searching at .git directory (don't go above it)."""
        parent = tmp_path / "parent"
        project = parent / "project"
        (project / ".git").mkdir(parents=True)
        (parent / ".ergogen-router.toml").write_text("[router]\n")

        assert _find_project_config(project) is None


class TestLoadToml:
    """Test TOML file loading."""

    def test_load_valid_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[router]\nwidth = 0.3\nformat = "legacy"\n')

        result = _load_toml_file(config_file)
        assert result["router"]["width"] == 0.3
        assert result["router"]["format"] == "legacy"

    def test_load_invalid_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("invalid [ toml syntax")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _load_toml_file(config_file)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            _load_toml_file(tmp_path / "nonexistent.toml")


class TestConfigLoad:
    """Test Config.load() method."""

    def test_load_defaults_only(self, isolated_config):
        """Load returns defaults when no config files exist."""
        config = Config.load(isolated_config)
        assert config.router == RouterConfig()

    def test_load_project_config(self, isolated_config):
        (isolated_config / ".ergogen-router.toml").write_text(
            '[router]\nwidth = 0.2\nvia_size = 0.8\nvia_drill = 0.4\nlocked = true\n'
            'precision = 4\nformat = "Legacy"\n'
        )

        config = Config.load(isolated_config)
        assert config.router.width == 0.2
        assert config.router.via_size == 0.8
        assert config.router.via_drill == 0.4
        assert config.router.locked is True
        assert config.router.precision == 4
        assert config.router.format == "legacy"
        assert config.router.record_format is RecordFormat.LEGACY

    def test_integer_sizes_become_floats(self, isolated_config):
        (isolated_config / ".ergogen-router.toml").write_text("[router]\nvia_size = 1\n")
        config = Config.load(isolated_config)
        assert config.router.via_size == 1.0
        assert isinstance(config.router.via_size, float)

    def test_project_overrides_user(self, isolated_config, monkeypatch):
        user_config = isolated_config / "user-config.toml"
        user_config.write_text("[router]\nwidth = 0.3\nlocked = true\n")
        (isolated_config / ".ergogen-router.toml").write_text("[router]\nwidth = 0.2\n")
        monkeypatch.setattr("ergogen_router.config.USER_CONFIG_PATH", user_config)

        config = Config.load(isolated_config)
        assert config.router.width == 0.2
        assert config.router.locked is True

    def test_get_source_tracking(self, isolated_config, monkeypatch):
        user_config = isolated_config / "user-config.toml"
        user_config.write_text("[router]\nlocked = true\n")
        (isolated_config / ".ergogen-router.toml").write_text("[router]\nwidth = 0.2\n")
        monkeypatch.setattr("ergogen_router.config.USER_CONFIG_PATH", user_config)

        config = Config.load(isolated_config)
        assert "user-config.toml" in config.get_source("router.locked")
        assert ".ergogen-router.toml" in config.get_source("router.width")
        assert config.get_source("router.via_drill") == "default"

    @pytest.mark.parametrize(
        "body",
        [
            "router = 3\n",
            "[router]\nwidth = -0.1\n",
            "[router]\nwidth = inf\n",
            "[router]\nvia_drill = nan\n",
            "[router]\nwidth = 'thin'\n",
            "[router]\nvia_size = true\n",
            "[router]\nlocked = 'yes'\n",
            "[router]\nprecision = 2.5\n",
            "[router]\nprecision = -1\n",
            "[router]\nformat = 'kicad5'\n",
            "[router]\nformat = 8\n",
        ],
    )
    def test_invalid_values(self, isolated_config, body):
        (isolated_config / ".ergogen-router.toml").write_text(body)
        with pytest.raises(ConfigError):
            Config.load(isolated_config)


class TestConfigWarnings:
    """Test warnings for unknown config keys."""

    def test_warn_unknown_section(self, isolated_config):
        (isolated_config / ".ergogen-router.toml").write_text('[unknown_section]\nkey = "value"\n')

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            Config.load(isolated_config)

            assert len(w) == 1
            assert "unknown_section" in str(w[0].message)

    def test_warn_unknown_key_in_section(self, isolated_config):
        (isolated_config / ".ergogen-router.toml").write_text("[router]\ntrace_width = 0.2\n")

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            config = Config.load(isolated_config)

            assert len(w) == 1
            assert "router.trace_width" in str(w[0].message)
        assert config.router.width == 0.25


class TestGenerateTemplate:
    """Test template generation."""

    def test_generate_template_valid_toml(self):
        """Generated template is valid TOML."""
        if sys.version_info >= (3, 11):
            import tomllib
        else:
            import tomli as tomllib

        assert isinstance(tomllib.loads(generate_template()), dict)

    def test_generate_template_documents_options(self):
        template = generate_template()
        assert "[router]" in template
        for key in ("width", "via_size", "via_drill", "locked", "precision", "format"):
            assert f"# {key} = " in template


class TestGetConfigPaths:
    """Test get_config_paths function."""

    def test_returns_none_for_missing_files(self, isolated_config):
        paths = get_config_paths()
        assert paths["user"] is None
        assert paths["project"] is None

    def test_returns_paths_for_existing_files(self, isolated_config, monkeypatch):
        project_config = isolated_config / ".ergogen-router.toml"
        project_config.write_text("[router]\n")
        user_config = isolated_config / "user.toml"
        user_config.write_text("[router]\n")
        monkeypatch.setattr("ergogen_router.config.USER_CONFIG_PATH", user_config)

        paths = get_config_paths()
        assert paths["user"] == user_config
        assert paths["project"] == project_config
