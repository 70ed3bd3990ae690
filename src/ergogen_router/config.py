"""
Configuration file support for ergogen-router.

Provides hierarchical configuration loading from:
1. Project config: .ergogen-router.toml or ergogen-router.toml in project root
2. User config: ~/.config/ergogen-router/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import math
import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .primitives import DEFAULT_TRACE_WIDTH, DEFAULT_VIA_DRILL, DEFAULT_VIA_SIZE, RecordFormat

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".ergogen-router.toml", "ergogen-router.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "ergogen-router" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "router": {"width", "via_size", "via_drill", "locked", "precision", "format"},
}


@dataclass
class RouterConfig:
    """Router footprint defaults.

    Values here apply to every footprint that does not set them itself.
    ``precision`` of None means the record format's own default.
    """

    width: float = DEFAULT_TRACE_WIDTH
    via_size: float = DEFAULT_VIA_SIZE
    via_drill: float = DEFAULT_VIA_DRILL
    locked: bool = False
    precision: int | None = None
    format: str = RecordFormat.KICAD8.value

    @property
    def record_format(self) -> RecordFormat:
        return RecordFormat.from_string(self.format)


@dataclass
class Config:
    """Merged configuration from all sources."""

    router: RouterConfig = field(default_factory=RouterConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


class ConfigError(Exception):
    """Configuration-related errors."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data or None when no TOML parser is available

    Raises:
        ConfigError: If TOML is invalid
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _check_type(value: Any, expected: tuple, key: str, source: str) -> None:
    # bool is an int subclass; never accept it for numeric settings
    if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
        raise ConfigError(f"Invalid value for '{key}' in {source}: {value!r}")


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info

    Raises:
        ConfigError: If a known key has a value of the wrong type
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "router" in data:
        router_data = data["router"]
        if not isinstance(router_data, dict):
            raise ConfigError(f"'router' must be a table in {source}")
        _warn_unknown_keys(router_data, KNOWN_KEYS["router"], "router", source)

        for key in ("width", "via_size", "via_drill"):
            if key in router_data:
                _check_type(router_data[key], (int, float), f"router.{key}", source)
                if not math.isfinite(router_data[key]) or router_data[key] <= 0:
                    raise ConfigError(f"'router.{key}' must be a positive number in {source}")
                setattr(config.router, key, float(router_data[key]))
                sources[f"router.{key}"] = source
        if "locked" in router_data:
            _check_type(router_data["locked"], (bool,), "router.locked", source)
            config.router.locked = router_data["locked"]
            sources["router.locked"] = source
        if "precision" in router_data:
            _check_type(router_data["precision"], (int,), "router.precision", source)
            if router_data["precision"] < 0:
                raise ConfigError(f"'router.precision' must not be negative in {source}")
            config.router.precision = router_data["precision"]
            sources["router.precision"] = source
        if "format" in router_data:
            _check_type(router_data["format"], (str,), "router.format", source)
            try:
                RecordFormat.from_string(router_data["format"])
            except ValueError as e:
                raise ConfigError(f"{e} in {source}") from e
            config.router.format = router_data["format"].lower().strip()
            sources["router.format"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# ergogen-router configuration file
# Place as .ergogen-router.toml in project root or ~/.config/ergogen-router/config.toml for user defaults

[router]
# Default trace width in mm (JLCPCB minimum is 0.127mm)
# width = 0.25

# Via pad diameter in mm (0.56 to 0.8 avoids DRC errors)
# via_size = 0.6

# Via drill diameter in mm (0.3 to 0.4 avoids DRC errors)
# via_drill = 0.3

# Mark emitted traces and vias as locked in KiCad
# locked = false

# Decimal digits in emitted coordinates (default: 3, or 5 for legacy format)
# precision = 3

# Record syntax: kicad8 or legacy
# format = "kicad8"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
