"""Configuration loading from YAML + environment variables."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

APP_NAME = "ask"
CONFIG_FILE = "config.yaml"

MODES = ("claude", "api")


@dataclass
class Config:
    mode: str = "claude"  # claude | api
    provider: str = "anthropic"
    default_model: str = ""  # alias or concrete id; "" = backend default
    base_url: str = ""
    raw_output: bool = False
    theme: str = "auto"
    claude_path: str = "claude"
    log_level: str = "WARNING"


def _xdg_dir(var: str, *fallback: str) -> Path:
    base = os.environ.get(var, "")
    if base:
        return Path(base) / APP_NAME
    return Path.home().joinpath(*fallback, APP_NAME)


def config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


def data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", ".local", "share")


def config_path() -> Path:
    return config_dir() / CONFIG_FILE


def _resolve_env_vars(value: str) -> str:
    """Replace ${VAR} with environment variable values."""
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return re.sub(r"\$\{(\w+)\}", replacer, value)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def load_env(path: Path | None = None) -> None:
    """Load a .env beside the config file, else one in the working directory."""
    env_beside_config = (path or config_path()).parent / ".env"
    if env_beside_config.exists():
        load_dotenv(env_beside_config)
    else:
        load_dotenv()


def load_config(path: str | Path | None = None) -> Config:
    """Load config from YAML. Never fails: problems yield the defaults."""
    config = _load_file(Path(path) if path else config_path())
    env_level = os.environ.get("ASK_LOG_LEVEL")
    if env_level:
        config.log_level = env_level
    return config


def _load_file(path: Path) -> Config:
    config = Config()

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        return config
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return config

    if raw is None:
        return config
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a mapping", path)
        return config

    known = {f.name for f in fields(Config)}
    for key, value in raw.items():
        if key not in known:
            logger.debug("Unknown config key: %s", key)
            continue
        if value is None:
            continue
        if key == "raw_output":
            setattr(config, key, _as_bool(value))
        else:
            setattr(config, key, _resolve_env_vars(str(value)))

    if config.mode not in MODES:
        logger.warning("Unknown mode %r in %s, using 'claude'", config.mode, path)
        config.mode = "claude"

    return config


def default_config_yaml() -> str:
    """Commented default config written by ``ask config init``."""
    return (
        "# ask configuration\n"
        "\n"
        "# claude: run the local claude CLI; api: call a provider directly\n"
        "mode: claude\n"
        "\n"
        "# Provider used in api mode: anthropic, gemini, openai, xai, ollama\n"
        "provider: anthropic\n"
        "\n"
        "# Model alias or full model id (empty = backend default)\n"
        "default_model: \"\"\n"
        "\n"
        "# Override the provider endpoint, e.g. http://localhost:11434/v1\n"
        "base_url: \"\"\n"
        "\n"
        "# Print output as it streams instead of rendering markdown\n"
        "raw_output: false\n"
        "\n"
        "# Markdown theme: auto, dark, light, dracula, pink, ascii, notty\n"
        "theme: auto\n"
        "\n"
        "# Name or path of the claude CLI\n"
        "claude_path: claude\n"
        "\n"
        "log_level: WARNING\n"
    )


def write_default_config(path: Path | None = None, force: bool = False) -> Path:
    """Write the default config. Raises FileExistsError unless ``force``."""
    path = path or config_path()
    if path.exists() and not force:
        raise FileExistsError(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_config_yaml(), encoding="utf-8")
    return path
