"""Resolve game settings from the environment (and a .env file, via python-dotenv)."""

import os
from dataclasses import replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .game import Configuration

ENV_NUM_COLORS = "MASTERMIND_NUM_COLORS"
ENV_NUM_HOLES = "MASTERMIND_NUM_HOLES"
ENV_NUM_GUESSES = "MASTERMIND_NUM_GUESSES"
ENV_DUPS_ALLOWED = "MASTERMIND_DUPS_ALLOWED"
ENV_BLANKS_ALLOWED = "MASTERMIND_BLANKS_ALLOWED"
ENV_DIAG = "MASTERMIND_DIAG"

DEFAULT_CONFIG = Configuration()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_env_file(env_file: Optional[str] = None) -> bool:
    """
    Load a .env file into os.environ without overriding variables already set.

    Returns:
        True if a file was found and loaded.
    """
    if env_file is not None:
        return load_dotenv(dotenv_path=Path(env_file))
    return load_dotenv()


def _read_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")


def _read_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{key} must be true or false, got {raw!r}")


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides) -> Configuration:
    """
    Build a Configuration from MASTERMIND_* variables, falling back to defaults.

    Args:
        environ: Mapping to read from (default: os.environ)
        **overrides: Configuration fields that take precedence over the
            environment; None values are ignored

    Raises:
        ConfigurationError: If a variable cannot be parsed or the resulting
            configuration is inconsistent.
    """
    if environ is None:
        environ = os.environ

    config = Configuration(
        color_count=_read_int(environ, ENV_NUM_COLORS, DEFAULT_CONFIG.color_count),
        hole_count=_read_int(environ, ENV_NUM_HOLES, DEFAULT_CONFIG.hole_count),
        guess_limit=_read_int(environ, ENV_NUM_GUESSES, DEFAULT_CONFIG.guess_limit),
        duplicates_allowed=_read_bool(environ, ENV_DUPS_ALLOWED, DEFAULT_CONFIG.duplicates_allowed),
        blanks_allowed=_read_bool(environ, ENV_BLANKS_ALLOWED, DEFAULT_CONFIG.blanks_allowed),
    )
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = replace(config, **overrides)
    config.validate()
    return config


def diag_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the diagnostic (show the secret) mode is switched on."""
    if environ is None:
        environ = os.environ
    return _read_bool(environ, ENV_DIAG, False)
