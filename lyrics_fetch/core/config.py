"""
Configuration management for lyrics-fetch.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml. Every setting has a
default, so the file is optional: when no path is given and no config.yaml
exists in the current working directory, the defaults are used.

A few values can be overridden from the environment (or a .env file):
    LYRICS_FETCH_ENDPOINT    -> lookup.endpoint
    LYRICS_FETCH_USER_AGENT  -> lookup.user_agent
    LYRICS_FETCH_LOG_DIR     -> logging.directory

Example config.yaml:
    lookup:
      endpoint: "https://lrclib.net/api/get"
      timeout: 30
      max_attempts: 3
      retry_delay: 1.0

    library:
      extensions: [".mp3", ".flac", ".aac", ".ogg", ".dsd", ".dsf", ".mp4"]
      sidecar_extension: ".lrc"

    logging:
      directory: null   # Optional: write run logs to this directory
      debug: false
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from lyrics_fetch import __version__
from lyrics_fetch.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_ENDPOINT = "https://lrclib.net/api/get"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_USER_AGENT = f"lyrics-fetch/{__version__}"
DEFAULT_EXTENSIONS = (".mp3", ".flac", ".aac", ".ogg", ".dsd", ".dsf", ".mp4")
DEFAULT_SIDECAR_EXTENSION = ".lrc"

ENV_ENDPOINT = "LYRICS_FETCH_ENDPOINT"
ENV_USER_AGENT = "LYRICS_FETCH_USER_AGENT"
ENV_LOG_DIR = "LYRICS_FETCH_LOG_DIR"


@dataclass(frozen=True)
class LookupConfig:
    """
    Lyrics lookup endpoint and retry policy.

    Attributes:
        endpoint: Full URL of the LRCLIB "get" endpoint.
        timeout: Seconds allowed for a whole request (connect + body).
        max_attempts: Total attempts per file, including the first one.
        retry_delay: Fixed seconds to wait between two attempts.
        user_agent: User-Agent header sent with every request.
    """
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class LibraryConfig:
    """
    Music library traversal settings.

    Attributes:
        extensions: Lowercase file extensions (with dot) considered audio.
        sidecar_extension: Extension of the lyrics file written next to
                           each audio file.
    """
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    sidecar_extension: str = DEFAULT_SIDECAR_EXTENSION


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging output settings.

    Attributes:
        directory: Directory for run log files, or None for console only.
        debug: Enable DEBUG level on the console.
    """
    directory: Path | None = None
    debug: bool = False


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Querying {config.lookup.endpoint}")
        print(f"Writing *{config.library.sidecar_extension} files")
    """
    lookup: LookupConfig = LookupConfig()
    library: LibraryConfig = LibraryConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file. If given, the
                     file must exist. If None, CWD/config.yaml is used when
                     present and defaults otherwise.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit file is missing, the YAML is invalid,
                     or a field has an invalid value.
    """
    load_dotenv()

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        raw_config = _read_config_file(config_path)
    else:
        default_path = Path.cwd() / CONFIG_FILENAME
        if default_path.exists():
            raw_config = _read_config_file(default_path)

    _validate_config(raw_config)

    lookup_section = dict(raw_config.get("lookup") or {})
    logging_section = dict(raw_config.get("logging") or {})

    # Environment overrides
    if endpoint := os.getenv(ENV_ENDPOINT):
        lookup_section["endpoint"] = endpoint
    if user_agent := os.getenv(ENV_USER_AGENT):
        lookup_section["user_agent"] = user_agent
    if log_dir := os.getenv(ENV_LOG_DIR):
        logging_section["directory"] = log_dir

    return Config(
        lookup=_parse_lookup_config(lookup_section),
        library=_parse_library_config(raw_config.get("library")),
        logging=_parse_logging_config(logging_section),
    )


def _read_config_file(config_path: Path) -> dict[str, Any]:
    """Read and parse a YAML config file into a dictionary."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "use all defaults" config
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )
    return raw_config


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Validate that every known section, if present, is a dictionary.

    Raises:
        ConfigError: If a section has the wrong type.
    """
    for section in ("lookup", "library", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _parse_lookup_config(section: dict[str, Any]) -> LookupConfig:
    """
    Parse and validate the lookup configuration section.

    Raises:
        ConfigError: If the endpoint is not an http(s) URL, or a numeric
                     field is out of range.
    """
    endpoint = section.get("endpoint", DEFAULT_ENDPOINT)
    if not isinstance(endpoint, str) or not endpoint.strip().startswith(("http://", "https://")):
        raise ConfigError(
            "'lookup.endpoint' must be an http(s) URL",
            details={"field": "lookup.endpoint", "value": endpoint}
        )

    timeout = _positive_number(section, "timeout", DEFAULT_TIMEOUT, "lookup.timeout")

    max_attempts = section.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ConfigError(
            "'lookup.max_attempts' must be a positive integer",
            details={"field": "lookup.max_attempts", "value": max_attempts}
        )

    retry_delay = section.get("retry_delay", DEFAULT_RETRY_DELAY)
    if isinstance(retry_delay, bool) or not isinstance(retry_delay, (int, float)) or retry_delay < 0:
        raise ConfigError(
            "'lookup.retry_delay' must be a non-negative number",
            details={"field": "lookup.retry_delay", "value": retry_delay}
        )

    user_agent = section.get("user_agent", DEFAULT_USER_AGENT)
    if not isinstance(user_agent, str) or not user_agent.strip():
        raise ConfigError(
            "'lookup.user_agent' must be a non-empty string",
            details={"field": "lookup.user_agent"}
        )

    return LookupConfig(
        endpoint=endpoint.strip(),
        timeout=timeout,
        max_attempts=max_attempts,
        retry_delay=float(retry_delay),
        user_agent=user_agent.strip(),
    )


def _parse_library_config(section: dict[str, Any] | None) -> LibraryConfig:
    """
    Parse and validate the library configuration section.

    Extensions are normalized to lowercase with a leading dot.

    Raises:
        ConfigError: If extensions is not a non-empty list of strings.
    """
    if not section:
        return LibraryConfig()

    raw_extensions = section.get("extensions")
    extensions = DEFAULT_EXTENSIONS
    if raw_extensions is not None:
        if (
            not isinstance(raw_extensions, list)
            or not raw_extensions
            or not all(isinstance(ext, str) and ext.strip() for ext in raw_extensions)
        ):
            raise ConfigError(
                "'library.extensions' must be a non-empty list of strings",
                details={"field": "library.extensions"}
            )
        extensions = tuple(_normalize_extension(ext) for ext in raw_extensions)

    sidecar_extension = section.get("sidecar_extension", DEFAULT_SIDECAR_EXTENSION)
    if not isinstance(sidecar_extension, str) or not sidecar_extension.strip():
        raise ConfigError(
            "'library.sidecar_extension' must be a non-empty string",
            details={"field": "library.sidecar_extension"}
        )
    sidecar_extension = _normalize_extension(sidecar_extension)

    if sidecar_extension in extensions:
        raise ConfigError(
            "'library.sidecar_extension' must differ from the audio extensions",
            details={"field": "library.sidecar_extension", "value": sidecar_extension}
        )

    return LibraryConfig(extensions=extensions, sidecar_extension=sidecar_extension)


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    """
    Parse and validate the logging configuration section.

    Expands ~ in the log directory. Does NOT create it (that happens when
    logging is set up).
    """
    directory = section.get("directory")
    log_dir = None
    if directory is not None:
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory"}
            )
        log_dir = Path(directory.strip()).expanduser().resolve()

    debug = section.get("debug", False)
    if not isinstance(debug, bool):
        raise ConfigError(
            "'logging.debug' must be true or false",
            details={"field": "logging.debug", "value": debug}
        )

    return LoggingConfig(directory=log_dir, debug=debug)


def _positive_number(section: dict[str, Any], key: str, default: float, field: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(
            f"'{field}' must be a positive number",
            details={"field": field, "value": value}
        )
    return float(value)


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"
