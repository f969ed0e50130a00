"""api-test core - config loading and option-string parsing."""

import os
from pathlib import Path

import yaml

HISTORY_FILENAME = ".api_test_history.json"
CONFIG_FILENAME = ".api_test.yaml"


class OptionParseError(ValueError):
    """Raised when a key=value option string is malformed."""


class ConfigError(Exception):
    """Raised when the config file cannot be parsed."""


def home_dir(env: dict[str, str] | None = None) -> Path:
    """Return the user's home directory, HOME first, then USERPROFILE."""
    if env is None:
        env = dict(os.environ)
    home = env.get("HOME") or env.get("USERPROFILE")
    if home:
        return Path(home)
    return Path.home()


def default_history_path(env: dict[str, str] | None = None) -> Path:
    return home_dir(env) / HISTORY_FILENAME


def default_config_path(env: dict[str, str] | None = None) -> Path:
    return home_dir(env) / CONFIG_FILENAME


def load_config(config_path: str | Path | None) -> dict:
    """Load YAML config file. Returns empty defaults if not found.

    Only the `defaults` section is read:
      headers       - mapping merged under -H headers
      history_file  - path of the history file (~ is expanded)
    """
    if config_path is None:
        return {"defaults": {}}
    path = Path(config_path)
    if not path.exists():
        return {"defaults": {}}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: expected a mapping")
    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(f"Invalid config file {path}: 'defaults' must be a mapping")
    if not isinstance(defaults.get("headers") or {}, dict):
        raise ConfigError(f"Invalid config file {path}: 'headers' must be a mapping")
    return {"defaults": defaults}


def resolve_history_path(
    cli_history_file: str | None,
    config: dict,
    env: dict[str, str] | None = None,
) -> Path:
    """Find the history file to use.

    Resolution order:
      1. --history-file flag
      2. history_file from config defaults
      3. $HOME/.api_test_history.json
    """
    if cli_history_file:
        return Path(cli_history_file)
    configured = config.get("defaults", {}).get("history_file")
    if configured:
        return Path(str(configured)).expanduser()
    return default_history_path(env)


def parse_options(text: str | None) -> dict[str, str]:
    """Parse a 'k1=v1,k2=v2' string into a dict.

    Keys and values are trimmed; the last duplicate key wins. Empty input
    gives an empty dict. There is no escaping: a value ends at the next
    ',' or '=' ("a=b=c" yields {"a": "b"}).
    """
    if not text or not text.strip():
        return {}

    options: dict[str, str] = {}
    for item in text.split(","):
        if "=" not in item:
            raise OptionParseError(f"Expected key=value, got {item.strip()!r}")
        parts = item.split("=")
        key = parts[0].strip()
        if not key:
            raise OptionParseError(f"Missing key in {item.strip()!r}")
        options[key] = parts[1].strip()
    return options
