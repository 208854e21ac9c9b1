"""
Configuration for catalog bootstrap.

One YAML file (``config.yml``) holds every setting the bootstrap reads:

.. code-block:: yaml

    catalog:
      url: https://catalogs.example.org/${DEPLOYMENT:-prod}.bom
      load_mode: load-catalog-url      # deprecated, see initialization.load_mode
    runtime:
      base_dir: ~/.catalog_bootstrap   # where catalog.bom / catalog.xml are looked for
    resources:
      http_timeout: 30
    logging:
      logging_colors:
        resources: green

``${VAR}``, ``${VAR:-default}`` and ``$VAR`` placeholders are filled from the
environment, after a ``.env`` file in the working directory has been loaded.
The runtime context wraps one :class:`ConfigBuilder` and only ever reads it.
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from catalog_bootstrap.base.errors import ConfigurationError

# stdlib logger: get_logger() reads colours from here, so it cannot be used
logger = logging.getLogger("CONFIG")

CONFIG_FILENAME = "config.yml"
CONFIG_FILE_ENV = "CONFIG_FILE"

_PLACEHOLDER = re.compile(r"\$\{([^}:]+)(?::-(.*?))?\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _load_dotenv_from_cwd() -> None:
    dotenv_path = Path.cwd() / ".env"
    if dotenv_path.exists():
        # Real environment variables win over .env entries
        load_dotenv(dotenv_path, override=False)
        logger.debug(f"Loaded .env file from {dotenv_path}")


def _substitute(match: re.Match) -> str:
    braced, default, bare = match.groups()
    name = braced or bare
    value = os.environ.get(name)
    if value is not None:
        return value
    if braced and default is not None:
        return default
    logger.info(f"Environment variable '{name}' not found, keeping original value")
    return match.group(0)


def expand_env_vars(data: Any) -> Any:
    """Return a copy of ``data`` with environment placeholders filled in.

    Unknown variables without a default are left as written.
    """
    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_env_vars(value) for value in data]
    if isinstance(data, str):
        return _PLACEHOLDER.sub(_substitute, data)
    return data


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        message = f"Error parsing YAML configuration: {e}"
        logger.error(message)
        raise ConfigurationError(message) from e

    if data is None:
        logger.warning(f"Configuration file is empty: {path}")
        return {}
    if not isinstance(data, dict):
        message = f"Configuration file must contain a dictionary/mapping: {path}"
        logger.error(message)
        raise ConfigurationError(message)
    return data


class ConfigBuilder:
    """Read-only view over one catalog bootstrap configuration.

    Attributes:
        config_path: File the configuration came from, None when built with :meth:`from_dict`
        raw_config: Settings with environment placeholders expanded
    """

    def __init__(self, config_path: str | Path | None = None):
        """
        Args:
            config_path: Path to the YAML file; ``./config.yml`` when omitted

        Raises:
            FileNotFoundError: If no path is given and the working directory has no config.yml
            ConfigurationError: If the file is not a YAML mapping
        """
        _load_dotenv_from_cwd()

        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME
            if not config_path.exists():
                raise FileNotFoundError(
                    f"No {CONFIG_FILENAME} found in current directory: {Path.cwd()}\n\n"
                    f"Run from a directory containing {CONFIG_FILENAME}, pass --config,\n"
                    f"or set {CONFIG_FILE_ENV} environment variable to point to your config file."
                )

        self.config_path: Path | None = Path(config_path)
        self._unexpanded_config = _read_yaml_mapping(self.config_path)
        self.raw_config = expand_env_vars(self._unexpanded_config)
        logger.info(f"Loaded configuration from {self.config_path}")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None = None) -> "ConfigBuilder":
        """Build a configuration from an in-memory mapping (placeholders are expanded)."""
        builder = cls.__new__(cls)
        builder.config_path = None
        builder._unexpanded_config = copy.deepcopy(data or {})
        builder.raw_config = expand_env_vars(builder._unexpanded_config)
        return builder

    def get_unexpanded_config(self) -> dict[str, Any]:
        """Settings exactly as written, placeholders included."""
        return copy.deepcopy(self._unexpanded_config)

    def get(self, path: str, default: Any = None) -> Any:
        """Look up a dot-separated ``path`` such as ``catalog.url``."""
        node = self.raw_config
        for key in path.split("."):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def get_raw(self, path: str, required: bool = False) -> Any:
        """Look up ``path`` with no default applied.

        Used for settings whose mere presence changes behaviour, such as the
        legacy ``catalog.load_mode``.

        Raises:
            ConfigurationError: If ``required`` and the value is missing or null
        """
        value = self.get(path)
        if value is None and required:
            raise ConfigurationError(
                f"Missing required configuration: '{path}' must be explicitly set in {CONFIG_FILENAME}."
            )
        return value


# =============================================================================
# SHARED INSTANCES
# =============================================================================

_default_config: ConfigBuilder | None = None

# Explicitly requested files, keyed by resolved path
_config_cache: dict[str, ConfigBuilder] = {}


def _get_config(config_path: str | None = None, set_as_default: bool = False) -> ConfigBuilder:
    global _default_config

    if config_path is None:
        if _default_config is None:
            _default_config = ConfigBuilder(os.environ.get(CONFIG_FILE_ENV) or None)
            logger.info("Initialized default configuration system")
        return _default_config

    resolved_path = str(Path(config_path).resolve())
    builder = _config_cache.get(resolved_path)
    if builder is None:
        logger.info(f"Loading configuration from explicit path: {resolved_path}")
        builder = _config_cache[resolved_path] = ConfigBuilder(resolved_path)

    if set_as_default:
        _default_config = builder
        logger.debug(f"Set explicit config as default: {resolved_path}")
    return builder


def get_config_builder(config_path: str | None = None, set_as_default: bool = False) -> ConfigBuilder:
    """Return the shared configuration, or the one for ``config_path``.

    Without a path the default comes from ``$CONFIG_FILE`` or ``./config.yml``.

    Args:
        config_path: Explicit configuration file
        set_as_default: Also make that file the default for later path-less calls

    Examples:
        >>> config = get_config_builder("/etc/catalog/config.yml", set_as_default=True)
        >>> config.get("runtime.base_dir", "~/.catalog_bootstrap")
    """
    return _get_config(config_path, set_as_default)


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """Expanded settings of the shared (or given) configuration as a dict."""
    return _get_config(config_path).raw_config


def get_config_value(path: str, default: Any = None, config_path: str | None = None) -> Any:
    """Dot-path lookup on the shared (or given) configuration.

    Raises:
        ValueError: If ``path`` is empty
    """
    if not path:
        raise ValueError("Configuration path cannot be empty or None")
    return _get_config(config_path).get(path, default)


def reset_config() -> None:
    """Forget the default configuration and the per-path cache (tests)."""
    global _default_config
    _default_config = None
    _config_cache.clear()
